from fastapi import APIRouter

from carelink.api.accounts import router as accounts_router
from carelink.api.auth import router as auth_router
from carelink.api.events import router as events_router
from carelink.api.registrations import router as registrations_router
from carelink.api.users import router as users_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(users_router)
router.include_router(accounts_router)
router.include_router(events_router)
router.include_router(registrations_router)
