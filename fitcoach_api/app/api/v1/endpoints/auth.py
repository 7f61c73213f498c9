"""
Authentication endpoints.

Login and registration return a signed bearer token together with the
public view of the account.  Tokens are stateless: logout is only an
acknowledgement and refresh issues a new token from the same claims.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status

from ....core.security import Principal, get_current_user, issue_token
from ....schemas.user import LoginRequest, ProfileUpdate, RegisterRequest, TokenResponse, UserAccount, UserRead
from ....services.user_service import UserService
from ...deps import get_user_service

router = APIRouter()


def _token_for(request: Request, user: UserAccount) -> str:
    claims = Principal(user_id=user.id, email=user.email, role=user.role.value, name=user.name).claims()
    return issue_token(claims, request.app.state.settings)


def _public(user: UserAccount) -> UserRead:
    return UserRead.model_validate(user.model_dump())


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    users: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Exchange email and password for a bearer token."""
    user = await users.authenticate(credentials.email, credentials.password)
    return TokenResponse(
        message="Login successful",
        token=_token_for(request, user),
        expires_in=request.app.state.settings.token_lifetime_seconds,
        user=_public(user),
    )


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    request: Request,
    users: UserService = Depends(get_user_service),
) -> TokenResponse:
    """Create an account and sign the caller in.

    Returns 409 if the email is already registered.
    """
    user = await users.register(data)
    return TokenResponse(
        message="Registration successful",
        token=_token_for(request, user),
        expires_in=request.app.state.settings.token_lifetime_seconds,
        user=_public(user),
    )


@router.get("/verify")
async def verify(
    current_user: Principal = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = users.get_user(current_user.user_id)
    return {"success": True, "valid": True, "user": _public(user)}


@router.post("/logout")
async def logout(current_user: Principal = Depends(get_current_user)) -> Dict[str, Any]:
    # Tokens are not tracked server side; the client discards its copy.
    return {"success": True, "message": "Logout successful"}


@router.post("/refresh")
async def refresh(
    request: Request,
    current_user: Principal = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = users.get_user(current_user.user_id)
    return {
        "success": True,
        "token": _token_for(request, user),
        "expiresIn": request.app.state.settings.token_lifetime_seconds,
    }


@router.get("/profile")
async def get_profile(
    current_user: Principal = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    user = users.get_user(current_user.user_id)
    return {"success": True, "user": _public(user)}


@router.put("/profile")
async def update_profile(
    updates: ProfileUpdate,
    current_user: Principal = Depends(get_current_user),
    users: UserService = Depends(get_user_service),
) -> Dict[str, Any]:
    """Rename the account and/or merge keys into its profile."""
    user = await users.update_profile(current_user.user_id, name=updates.name, profile=updates.profile)
    return {"success": True, "message": "Profile updated successfully", "user": _public(user)}
