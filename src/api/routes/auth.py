"""
Identity routes under ``/api/auth``.

- POST /register         - create an ordinary user, returns tokens + user
- POST /login            - email + password, returns tokens + user
- POST /refresh          - refresh token -> new token pair
- GET/PUT /profile       - read or edit the caller
- PUT /change-password   - verify the current password, set a new one

Register, login, refresh and change-password carry their own rate limits on
top of the global default.
"""

from fastapi import APIRouter, Request, status

from src.api.dependencies import AuthServiceDep, CurrentUser
from src.core.config import settings
from src.core.rate_limit import limiter
from src.schemas.auth import AuthResponse, LoginRequest, RefreshTokenRequest, TokenResponse
from src.schemas.common import MessageResponse
from src.schemas.user import ProfileUpdate, UserPasswordChange, UserRegister, UserResponse

router = APIRouter(prefix="/auth", tags=["Authentication"])

PASSWORD_POLICY = (
    "Passwords need at least 8 characters with an upper-case letter, a "
    "lower-case letter, a digit and a special character."
)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description=f"Create an ordinary, active user and log them in. {PASSWORD_POLICY} "
    "An email already registered (any letter case) answers 409.",
)
@limiter.limit(settings.rate_limit_register)
async def register(
    request: Request,
    user_data: UserRegister,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    user, tokens = await auth_service.register(user_data)
    return AuthResponse(**tokens.model_dump(), user=UserResponse.model_validate(user))


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Log in",
    description="Wrong credentials answer 401 `INVALID_CREDENTIALS`; "
    "a blocked user answers 403 `ACCOUNT_BLOCKED`.",
)
@limiter.limit(settings.rate_limit_login)
async def login(
    request: Request,
    credentials: LoginRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    user, tokens = await auth_service.login(credentials.email, credentials.password)
    return AuthResponse(**tokens.model_dump(), user=UserResponse.model_validate(user))


@router.post(
    "/refresh",
    response_model=TokenResponse,
    summary="Refresh tokens",
    description="Exchange a refresh token (not an access token) for a new pair.",
)
@limiter.limit(settings.rate_limit_token_refresh)
async def refresh_token(
    request: Request,
    token_request: RefreshTokenRequest,
    auth_service: AuthServiceDep,
) -> TokenResponse:
    return await auth_service.refresh_access_token(token_request.refresh_token)


@router.get("/profile", response_model=UserResponse, summary="Current user")
async def get_profile(current_user: CurrentUser) -> UserResponse:
    return UserResponse.model_validate(current_user)


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="Update current user",
    description="Partial update of name and email; an email in use answers 409.",
)
async def update_profile(
    profile_data: ProfileUpdate,
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
) -> UserResponse:
    user = await auth_service.update_profile(current_user, profile_data)
    return UserResponse.model_validate(user)


@router.put(
    "/change-password",
    response_model=MessageResponse,
    summary="Change password",
    description=f"The current password must be given. {PASSWORD_POLICY} "
    "Tokens issued earlier stay valid until they expire.",
)
@limiter.limit(settings.rate_limit_password_change)
async def change_password(
    request: Request,
    password_data: UserPasswordChange,
    current_user: CurrentUser,
    auth_service: AuthServiceDep,
) -> MessageResponse:
    await auth_service.change_password(
        current_user, password_data.current_password, password_data.new_password
    )
    return MessageResponse(message="Password changed successfully")
