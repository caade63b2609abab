from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator

from carelink.api.errors import install_error_handlers
from carelink.api.router import router as api_router
from carelink.core.config import settings
from carelink.core.logging import configure_logging
from carelink.db import init_db
from carelink.middleware.rate_limit import RateLimitMiddleware
from carelink.middleware.request_id import RequestIdMiddleware
from carelink.middleware.security_headers import SecurityHeadersMiddleware

configure_logging()


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if settings.db_create_all:
        init_db()
    yield


app = FastAPI(title="CareLink API", lifespan=lifespan)

# Starlette runs the LAST added middleware FIRST (outermost).
app.add_middleware(RateLimitMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIdMiddleware)

install_error_handlers(app)

Instrumentator().instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)


@app.get("/")
def root():
    return {"success": True, "data": {"name": "CareLink API", "status": "ok"}}


@app.get("/health")
def health():
    return {"success": True, "data": {"status": "ok"}}


app.include_router(api_router)
