"""FastAPI application exposing the registration, login and profile endpoints."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .config import Settings
from .database import Database
from .errors import AuthError, StoreUnavailable
from .models import Identity, User
from .passwords import PasswordHasher
from .security import AccessGuard
from .service import AuthService
from .store import CredentialStore
from .tokens import TokenIssuer

logger = logging.getLogger("authboard.api")


class RegisterRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PublicUser(BaseModel):
    id: int
    name: str
    email: str


class UserResponse(PublicUser):
    created_at: datetime


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    token: str
    user: PublicUser


class ProfileResponse(BaseModel):
    success: bool = True
    user: UserResponse


class UserListResponse(BaseModel):
    success: bool = True
    count: int
    users: List[UserResponse]


class StatusResponse(BaseModel):
    success: bool = True
    message: str
    timestamp: datetime


def _user_response(user: User) -> UserResponse:
    return UserResponse(id=user.id, name=user.name, email=user.email, created_at=user.created_at)


def _public_user(user: User) -> PublicUser:
    return PublicUser(id=user.id, name=user.name, email=user.email)


def create_app(
    *,
    settings: Settings,
    store: Optional[CredentialStore] = None,
    initialize_database: bool = True,
) -> FastAPI:
    """Build the API application from explicit settings.

    When ``store`` is omitted a SQLite :class:`Database` at
    ``settings.database_path`` is used.
    """
    if store is None:
        database = Database(settings.database_path)
        if initialize_database:
            database.initialize()
        store = database

    tokens = TokenIssuer(settings.require_secret(), ttl=settings.token_ttl, algorithm=settings.algorithm)
    service = AuthService(store, PasswordHasher(rounds=settings.bcrypt_rounds), tokens)
    guard = AccessGuard(tokens)

    app = FastAPI(
        title="Authboard",
        description="Username/password authentication with bearer tokens",
        version="1.0.0",
    )
    app.state.settings = settings
    app.state.store = store
    app.state.service = service

    def get_service() -> AuthService:
        return service

    async def get_identity(request: Request) -> Identity:
        return await guard(request)

    router = APIRouter(prefix="/api")

    @router.get("/test", response_model=StatusResponse)
    async def api_test() -> StatusResponse:
        return StatusResponse(message="Backend is running!", timestamp=datetime.now(timezone.utc))

    @router.get("/users", response_model=UserListResponse)
    async def list_users(svc: AuthService = Depends(get_service)) -> UserListResponse:
        try:
            users = await svc.list_users()
        except StoreUnavailable as exc:
            logger.error("Error fetching users: %s", exc)
            raise StoreUnavailable("Failed to fetch users") from exc
        return UserListResponse(count=len(users), users=[_user_response(user) for user in users])

    @router.post("/register", response_model=AuthResponse)
    async def register(payload: RegisterRequest, svc: AuthService = Depends(get_service)) -> AuthResponse:
        try:
            result = await svc.register(payload.name, payload.email, payload.password)
        except StoreUnavailable as exc:
            logger.error("Registration error: %s", exc)
            raise StoreUnavailable("Registration failed") from exc
        return AuthResponse(
            message="Registration successful!",
            token=result.token,
            user=_public_user(result.user),
        )

    @router.post("/login", response_model=AuthResponse)
    async def login(payload: LoginRequest, svc: AuthService = Depends(get_service)) -> AuthResponse:
        try:
            result = await svc.login(payload.email, payload.password)
        except StoreUnavailable as exc:
            logger.error("Login error: %s", exc)
            raise StoreUnavailable("Login failed") from exc
        return AuthResponse(
            message="Login successful!",
            token=result.token,
            user=_public_user(result.user),
        )

    @router.get("/profile", response_model=ProfileResponse)
    async def profile(
        identity: Identity = Depends(get_identity),
        svc: AuthService = Depends(get_service),
    ) -> ProfileResponse:
        try:
            user = await svc.profile(identity.user_id)
        except StoreUnavailable as exc:
            logger.error("Profile lookup failed for user %s: %s", identity.user_id, exc)
            raise StoreUnavailable("Failed to fetch profile") from exc
        return ProfileResponse(user=_user_response(user))

    app.include_router(router)

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    @app.exception_handler(AuthError)
    async def handle_auth_error(_: Request, exc: AuthError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(_: Request, exc: RequestValidationError):
        fields = [".".join(str(part) for part in error.get("loc", ())) for error in exc.errors()]
        logger.info("Rejected malformed request body: %s", ", ".join(fields))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body"},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception("Unhandled error while serving %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )

    return app


__all__ = ["create_app"]
