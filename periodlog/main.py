"""School Period Log - FastAPI entrypoint."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from periodlog.config import settings
from periodlog.db import db_shutdown, db_startup
from periodlog.exceptions import (
    IdentityError,
    InvalidInputError,
    InvalidTransitionError,
    LogNotFoundError,
    PermissionDeniedError,
    StoreError,
    UserNotFoundError,
)
from periodlog.api import auth, dashboard, logs, users

logger = logging.getLogger(__name__)

IDENTITY_STATUS = {
    "INVALID_LOGIN_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "INVALID_PASSWORD": status.HTTP_401_UNAUTHORIZED,
    "EMAIL_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "INVALID_ID_TOKEN": status.HTTP_401_UNAUTHORIZED,
    "USER_DISABLED": status.HTTP_403_FORBIDDEN,
    "EMAIL_NOT_VERIFIED": status.HTTP_403_FORBIDDEN,
    "EMAIL_EXISTS": status.HTTP_409_CONFLICT,
    "TOO_MANY_ATTEMPTS_TRY_LATER": status.HTTP_429_TOO_MANY_REQUESTS,
    "CONFIGURATION_NOT_FOUND": status.HTTP_503_SERVICE_UNAVAILABLE,
    "NETWORK_REQUEST_FAILED": status.HTTP_503_SERVICE_UNAVAILABLE,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        await db_startup()
    except StoreError as e:
        logger.error("MongoDB is not reachable. Check MONGODB_URL or start it with: docker compose up -d")
        raise RuntimeError("MongoDB connection failed. Start MongoDB (e.g. docker compose up -d).") from e
    yield
    await db_shutdown()


app = FastAPI(
    title=settings.app_name,
    description="Per-period activity logs for teachers, review and analytics for principals",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": jsonable_encoder(errors)},
    )


@app.exception_handler(InvalidInputError)
async def invalid_input_handler(request: Request, exc: InvalidInputError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(PermissionDeniedError)
async def permission_denied_handler(request: Request, exc: PermissionDeniedError):
    return JSONResponse(status_code=status.HTTP_403_FORBIDDEN, content={"detail": str(exc)})


@app.exception_handler(LogNotFoundError)
async def log_not_found_handler(request: Request, exc: LogNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(UserNotFoundError)
async def user_not_found_handler(request: Request, exc: UserNotFoundError):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(InvalidTransitionError)
async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    # Already logged by the store with the driver's message
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"detail": "Log store unavailable, please retry"},
    )


@app.exception_handler(IdentityError)
async def identity_error_handler(request: Request, exc: IdentityError):
    return JSONResponse(
        status_code=IDENTITY_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST),
        content={"detail": exc.user_message, "code": exc.code},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.cors_origins.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routes
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(logs.router, prefix="/api/logs", tags=["Logs"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])


@app.get("/health")
def health():
    return {"status": "ok", "app": settings.app_name}
