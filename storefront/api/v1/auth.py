# ==============================================================================
# AUTH ENDPOINTS - Authentication Routes
# ==============================================================================
# Register, login and token refresh endpoints
# ==============================================================================

from __future__ import annotations

from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from storefront.api.dependencies import CurrentUserID, UserServiceDep
from storefront.core.constants import SuccessMessages
from storefront.schemas.base import APIResponse, MessageResponse
from storefront.schemas.user import (
    PasswordChange,
    RefreshRequest,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/register",
    response_model=APIResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register new customer",
    description="Create a customer account with email and password.",
)
async def register(
    schema: UserCreate,
    service: UserServiceDep,
) -> APIResponse[UserResponse]:
    user = await service.register(schema)
    return APIResponse.ok(data=user, message=SuccessMessages.USER_REGISTERED)


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="User login",
    description="OAuth2 password flow; ``username`` carries the email.",
)
async def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    service: UserServiceDep,
) -> TokenResponse:
    """Bare token response so OAuth2 clients (and the docs UI) can use it."""
    result = await service.authenticate(
        email=form_data.username,
        password=form_data.password,
    )
    return result["tokens"]


@router.post(
    "/login/json",
    response_model=APIResponse[Dict[str, Any]],
    summary="User login (JSON)",
    description="Authenticate with a JSON payload instead of form data.",
)
async def login_json(
    credentials: UserLogin,
    service: UserServiceDep,
) -> APIResponse[Dict[str, Any]]:
    result = await service.authenticate(
        email=credentials.email,
        password=credentials.password,
    )
    return APIResponse.ok(
        data={
            "user": result["user"].model_dump(mode="json"),
            "tokens": result["tokens"].model_dump(),
        },
        message=SuccessMessages.LOGIN_SUCCESS,
    )


@router.post(
    "/refresh",
    response_model=APIResponse[TokenResponse],
    summary="Refresh tokens",
)
async def refresh(
    schema: RefreshRequest,
    service: UserServiceDep,
) -> APIResponse[TokenResponse]:
    tokens = await service.refresh(schema.refresh_token)
    return APIResponse.ok(data=tokens)


@router.put(
    "/password",
    response_model=APIResponse[MessageResponse],
    summary="Change password",
    description="Requires the current password; existing tokens stay valid until they expire.",
)
async def change_password(
    schema: PasswordChange,
    user_id: CurrentUserID,
    service: UserServiceDep,
) -> APIResponse[MessageResponse]:
    await service.change_password(user_id, schema)
    return APIResponse.ok(data=MessageResponse(message=SuccessMessages.PASSWORD_CHANGED))
