"""One-time codes for the participant phone login.

Codes are bound to a phone number, expire after ``settings.otp_ttl_seconds``
and are consumed by the first successful verification. The in-memory store
only works for a single process; set ``OTP_BACKEND=redis`` when running more
than one instance.
"""

from __future__ import annotations

import json
import secrets
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

import structlog
from redis.exceptions import WatchError

from carelink.core.config import settings
from carelink.services.error_codes import ErrorCode
from carelink.services.exceptions import UnauthorizedError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OtpEntry:
    code: str
    user_id: int
    expires_at: float

    def expired(self, now: float | None = None) -> bool:
        return (now if now is not None else time.time()) > self.expires_at


class OtpCheck(str, Enum):
    ACCEPTED = "accepted"
    MISSING = "missing"
    EXPIRED = "expired"
    MISMATCH = "mismatch"


def _check_entry(entry: OtpEntry | None, code: str) -> OtpCheck:
    if entry is None:
        return OtpCheck.MISSING
    if entry.expired():
        return OtpCheck.EXPIRED
    if not secrets.compare_digest(entry.code.encode(), code.encode()):
        return OtpCheck.MISMATCH
    return OtpCheck.ACCEPTED


class OtpStore(ABC):
    @abstractmethod
    def put(self, phone: str, entry: OtpEntry) -> None:
        """Store entry for phone, replacing any previous code."""

    @abstractmethod
    def get(self, phone: str) -> OtpEntry | None:
        """Return the stored entry for phone, if any."""

    @abstractmethod
    def delete(self, phone: str) -> None:
        """Drop the entry for phone if it exists."""

    @abstractmethod
    def check_and_consume(self, phone: str, code: str) -> tuple[OtpCheck, OtpEntry | None]:
        """Compare code against the stored entry as one atomic step.

        Accepted and expired entries are removed; a mismatch leaves the entry
        in place. At most one caller can be accepted per issued code.
        """


class MemoryOtpStore(OtpStore):
    def __init__(self) -> None:
        self._entries: dict[str, OtpEntry] = {}
        self._lock = threading.Lock()

    def put(self, phone: str, entry: OtpEntry) -> None:
        with self._lock:
            self._entries[phone] = entry

    def get(self, phone: str) -> OtpEntry | None:
        with self._lock:
            return self._entries.get(phone)

    def delete(self, phone: str) -> None:
        with self._lock:
            self._entries.pop(phone, None)

    def check_and_consume(self, phone: str, code: str) -> tuple[OtpCheck, OtpEntry | None]:
        with self._lock:
            entry = self._entries.get(phone)
            result = _check_entry(entry, code)
            if result in (OtpCheck.ACCEPTED, OtpCheck.EXPIRED):
                del self._entries[phone]
            return result, entry

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


class RedisOtpStore(OtpStore):
    def __init__(self, redis=None) -> None:
        if redis is None:
            from carelink.redis_client import get_redis

            redis = get_redis()
        self._r = redis

    @staticmethod
    def _key(phone: str) -> str:
        return f"otp:{phone}"

    @staticmethod
    def _decode(raw) -> OtpEntry | None:
        if not raw:
            return None
        data = json.loads(raw)
        return OtpEntry(code=data["code"], user_id=int(data["user_id"]), expires_at=float(data["expires_at"]))

    def put(self, phone: str, entry: OtpEntry) -> None:
        ttl = max(1, int(entry.expires_at - time.time()))
        payload = {"code": entry.code, "user_id": entry.user_id, "expires_at": entry.expires_at}
        self._r.setex(self._key(phone), ttl, json.dumps(payload))

    def get(self, phone: str) -> OtpEntry | None:
        return self._decode(self._r.get(self._key(phone)))

    def delete(self, phone: str) -> None:
        self._r.delete(self._key(phone))

    def check_and_consume(self, phone: str, code: str) -> tuple[OtpCheck, OtpEntry | None]:
        key = self._key(phone)
        with self._r.pipeline() as pipe:
            while True:
                try:
                    # WATCH aborts the DEL below if another request touched the key
                    pipe.watch(key)
                    entry = self._decode(pipe.get(key))
                    result = _check_entry(entry, code)
                    if result not in (OtpCheck.ACCEPTED, OtpCheck.EXPIRED):
                        pipe.unwatch()
                        return result, entry
                    pipe.multi()
                    pipe.delete(key)
                    pipe.execute()
                    return result, entry
                except WatchError:
                    continue


def create_otp_store(backend: str | None = None) -> OtpStore:
    selected_backend = (backend or settings.otp_backend).strip().lower()
    if selected_backend == "memory":
        return MemoryOtpStore()
    if selected_backend == "redis":
        return RedisOtpStore()
    raise ValueError(f"unsupported otp backend: {selected_backend}")


@lru_cache(maxsize=1)
def get_otp_store() -> OtpStore:
    return create_otp_store()


def generate_code() -> str:
    if settings.otp_fixed_code:
        return settings.otp_fixed_code
    return f"{secrets.randbelow(1_000_000):06d}"


def issue_otp(store: OtpStore, phone: str, user_id: int) -> str:
    code = generate_code()
    store.put(
        phone,
        OtpEntry(code=code, user_id=user_id, expires_at=time.time() + settings.otp_ttl_seconds),
    )
    # No SMS gateway; the code only goes to the log.
    logger.info("otp_issued", phone=phone, user_id=user_id, otp=code)
    return code


def consume_otp(store: OtpStore, phone: str, code: str) -> int:
    """Verify code for phone and return the bound user id.

    A wrong code leaves the entry in place; an expired one is dropped.
    """
    result, entry = store.check_and_consume(phone, code)
    if result is OtpCheck.MISSING:
        raise UnauthorizedError(ErrorCode.OTP_NOT_FOUND.value, "OTP not found or expired")
    if result is OtpCheck.EXPIRED:
        raise UnauthorizedError(ErrorCode.OTP_EXPIRED.value, "OTP expired")
    if result is OtpCheck.MISMATCH:
        logger.info("otp_rejected", phone=phone)
        raise UnauthorizedError(ErrorCode.OTP_INVALID.value, "Invalid OTP")
    return entry.user_id
