"""Authentication router for signup, login and preferences.

The session token travels only in an http-only cookie; response bodies carry
the public user fields.
"""

import logging
from collections.abc import Callable, Coroutine
from typing import Any

from fastapi import APIRouter, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from pydantic import BaseModel

from voxstory.api.deps import AppSettings, Credentials, CurrentUserId
from voxstory.api.exceptions import BadRequestError, UnauthorizedError
from voxstory.core.config import Settings
from voxstory.core.security import create_session_token
from voxstory.services.credentials import AuthFailureError, DuplicateIdentityError

logger = logging.getLogger(__name__)


class AuthRoute(APIRoute):
    """Route that reports malformed auth bodies as 400 `{error}`."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        handler = super().get_route_handler()

        async def route_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except RequestValidationError as e:
                raise BadRequestError(
                    "Invalid request body",
                    details={"errors": jsonable_encoder(e.errors())},
                ) from e

        return route_handler


router = APIRouter(route_class=AuthRoute)


# =============================================================================
# Schemas
# =============================================================================


class CredentialsRequest(BaseModel):
    """Signup or login request."""

    email: str
    password: str


class UserResponse(BaseModel):
    """Public user fields."""

    id: str
    email: str
    favorite_genre: str
    favorite_voice: str

    class Config:
        from_attributes = True


class UserEnvelope(BaseModel):
    """Response wrapping a user."""

    user: UserResponse


class PreferencesRequest(BaseModel):
    """Preference update; any strings are accepted."""

    favorite_genre: str
    favorite_voice: str


class SuccessResponse(BaseModel):
    """Simple success response."""

    success: bool = True


# =============================================================================
# Cookie Helpers
# =============================================================================


def set_session_cookie(response: Response, user_id: str, settings: Settings) -> None:
    """Issue a session token and attach it as an http-only cookie."""
    token = create_session_token(user_id, settings)
    max_age = (
        settings.session_expire_minutes * 60
        if settings.session_expire_minutes is not None
        else None
    )
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=max_age,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite=settings.session_cookie_samesite,
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post("/signup", response_model=UserEnvelope)
async def signup(
    request: CredentialsRequest,
    response: Response,
    credentials: Credentials,
    settings: AppSettings,
) -> UserEnvelope:
    """Register a new user and start a session.

    Raises:
        BadRequestError: If the email is already registered
    """
    try:
        user = await credentials.create(request.email, request.password)
    except DuplicateIdentityError:
        raise BadRequestError("User already exists")

    set_session_cookie(response, user.id, settings)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("/login", response_model=UserEnvelope)
async def login(
    request: CredentialsRequest,
    response: Response,
    credentials: Credentials,
    settings: AppSettings,
) -> UserEnvelope:
    """Login with email and password.

    Unknown emails and wrong passwords produce the same response.

    Raises:
        UnauthorizedError: If credentials are invalid
    """
    try:
        user = await credentials.verify(request.email, request.password)
    except AuthFailureError:
        logger.info("Failed login attempt")
        raise UnauthorizedError("Invalid credentials")

    set_session_cookie(response, user.id, settings)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("/logout", response_model=SuccessResponse)
async def logout(response: Response, settings: AppSettings) -> SuccessResponse:
    """Clear the session cookie.

    Tokens are stateless, so a copied token stays valid until it expires.
    """
    clear_session_cookie(response, settings)
    return SuccessResponse()


@router.get("/me", response_model=UserEnvelope)
async def me(user_id: CurrentUserId, credentials: Credentials) -> UserEnvelope:
    """Get the current user's public fields."""
    user = await credentials.get(user_id)
    if user is None:
        raise UnauthorizedError()
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("/preferences", response_model=SuccessResponse)
async def update_preferences(
    request: PreferencesRequest,
    user_id: CurrentUserId,
    credentials: Credentials,
) -> SuccessResponse:
    """Overwrite the current user's favourite genre and voice."""
    await credentials.update_preferences(
        user_id,
        genre=request.favorite_genre,
        voice=request.favorite_voice,
    )
    return SuccessResponse()
