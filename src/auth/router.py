"""Authentication API endpoints.

Provides routes for:
- User registration and login (both return a bearer token)
- Current user profile
"""

from fastapi import APIRouter, HTTPException, status

from src.auth.dependencies import AuthServiceDep, CurrentUser
from src.auth.schemas import LoginRequest, RegisterRequest, TokenResponse, UserResponse
from src.auth.service import AuthError


router = APIRouter(prefix="/api/auth", tags=["auth"])


def handle_auth_error(error: AuthError) -> HTTPException:
    """Convert AuthError to HTTPException."""
    status_map = {
        "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
        "user_exists": status.HTTP_409_CONFLICT,
        "user_not_found": status.HTTP_404_NOT_FOUND,
    }
    return HTTPException(
        status_code=status_map.get(error.code, status.HTTP_400_BAD_REQUEST),
        detail=error.message,
    )


@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register user",
    responses={409: {"description": "Email already registered"}},
)
async def register(
    data: RegisterRequest,
    auth_service: AuthServiceDep,
) -> TokenResponse:
    """Create an account and return a bearer token for it."""
    try:
        user = await auth_service.register_user(data)
    except AuthError as e:
        raise handle_auth_error(e) from e
    return TokenResponse(token=auth_service.issue_token(user))


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="User login",
    responses={401: {"description": "Invalid credentials"}},
)
async def login(
    data: LoginRequest,
    auth_service: AuthServiceDep,
) -> TokenResponse:
    """Exchange email and password for a bearer token."""
    try:
        user = await auth_service.authenticate(data.email, data.password)
    except AuthError as e:
        raise handle_auth_error(e) from e
    return TokenResponse(token=auth_service.issue_token(user))


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Get current user",
)
async def get_me(
    user: CurrentUser,
    auth_service: AuthServiceDep,
) -> UserResponse:
    """Profile of the authenticated user, read from the database."""
    db_user = await auth_service.get_user_by_id(user.id)
    if not db_user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return UserResponse.model_validate(db_user)
