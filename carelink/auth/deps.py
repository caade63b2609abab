from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from carelink.auth.jwt import verify_access_token
from carelink.db import get_db
from carelink.models import User
from carelink.models.user import UserRole

DBSession = Annotated[Session, Depends(get_db)]


def _unauthorized(detail: str = "unauthorized") -> HTTPException:
    return HTTPException(
        status_code=401,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_token_claims(request: Request) -> dict:
    auth = request.headers.get("Authorization", "")
    if not auth:
        raise _unauthorized("Authorization header missing")
    if not auth.startswith("Bearer "):
        raise _unauthorized("missing bearer token")

    token = auth.removeprefix("Bearer ").strip()
    try:
        return verify_access_token(token)
    except ValueError:
        raise _unauthorized("Invalid or expired token") from None


TokenClaims = Annotated[dict, Depends(get_token_claims)]


def get_current_user(claims: TokenClaims, db: DBSession) -> User:
    try:
        user_id = int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid or expired token") from None

    user = db.get(User, user_id)
    if not user:
        raise _unauthorized("User not found")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


def require_role(*roles: UserRole):
    allowed = {r.value for r in roles}

    def _dependency(claims: TokenClaims, user: CurrentUser) -> User:
        # The stored role wins over a stale claim
        if claims.get("role") not in allowed or user.role.value not in allowed:
            raise HTTPException(status_code=403, detail="insufficient role")
        return user

    return _dependency


StaffUser = Annotated[User, Depends(require_role(UserRole.STAFF))]
