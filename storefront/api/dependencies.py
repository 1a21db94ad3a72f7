# ==============================================================================
# API DEPENDENCIES - Dependency Injection
# ==============================================================================
# FastAPI dependencies for authentication, cart ownership and services
# ==============================================================================

from __future__ import annotations

from dataclasses import dataclass
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from storefront.core.constants import ErrorMessages
from storefront.core.exceptions import AuthorizationError, InvalidTokenError, TokenExpiredError
from storefront.core.security import Role, verify_access_token
from storefront.core.settings import settings
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.database.factory import DatabaseFactory
from storefront.services.address_service import AddressService
from storefront.services.cart_service import CartOwner, CartService
from storefront.services.category_service import CategoryService
from storefront.services.checkout_service import CheckoutService
from storefront.services.order_service import OrderService
from storefront.services.product_service import ProductService
from storefront.services.settings_service import SettingsManager, settings_manager
from storefront.services.shipping_service import ShippingService
from storefront.services.user_service import UserService

# OAuth2 scheme for JWT tokens
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_PREFIX}/auth/login",
    auto_error=False,
)


# ==============================================================================
# DATABASE DEPENDENCIES
# ==============================================================================

async def get_adapter() -> SQLAlchemyAdapter:
    """
    Get database adapter dependency.

    Returns initialized adapter from factory.
    """
    return DatabaseFactory.get_adapter()


DatabaseDep = Annotated[SQLAlchemyAdapter, Depends(get_adapter)]


# ==============================================================================
# AUTHENTICATION DEPENDENCIES
# ==============================================================================

@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified access token."""

    user_id: str
    role: str = Role.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
) -> TokenClaims:
    """
    Verify the bearer token and return its claims.

    Raises:
        HTTPException: 401 if the token is missing, expired or invalid
    """
    if not token:
        raise _unauthorized(ErrorMessages.UNAUTHORIZED)

    try:
        payload = verify_access_token(token)
    except TokenExpiredError:
        raise _unauthorized("Token has expired")
    except InvalidTokenError as e:
        raise _unauthorized(e.message)

    return TokenClaims(user_id=payload["sub"], role=payload.get("role", Role.CUSTOMER))


async def get_current_user_id(
    claims: Annotated[TokenClaims, Depends(get_current_user)],
) -> str:
    return claims.user_id


async def get_optional_user(
    token: Annotated[Optional[str], Depends(oauth2_scheme)],
) -> Optional[TokenClaims]:
    """
    Claims if a valid token was sent, otherwise None.

    Used by endpoints that serve both anonymous and signed-in callers.
    """
    if not token:
        return None

    try:
        return await get_current_user(token)
    except HTTPException:
        return None


async def get_optional_user_id(
    claims: Annotated[Optional[TokenClaims], Depends(get_optional_user)],
) -> Optional[str]:
    return claims.user_id if claims else None


async def require_admin(
    claims: Annotated[TokenClaims, Depends(get_current_user)],
) -> TokenClaims:
    """
    Raises:
        AuthorizationError: 403 unless the token carries the admin role
    """
    if not claims.is_admin:
        raise AuthorizationError(message=ErrorMessages.ADMIN_REQUIRED, required_role=Role.ADMIN)
    return claims


CurrentUser = Annotated[TokenClaims, Depends(get_current_user)]
CurrentUserID = Annotated[str, Depends(get_current_user_id)]
OptionalUser = Annotated[Optional[TokenClaims], Depends(get_optional_user)]
OptionalUserID = Annotated[Optional[str], Depends(get_optional_user_id)]
AdminUser = Annotated[TokenClaims, Depends(require_admin)]


# ==============================================================================
# CART OWNERSHIP
# ==============================================================================

async def get_cart_owner(
    user_id: OptionalUserID,
    x_session_id: Annotated[Optional[str], Header(alias="X-Session-ID")] = None,
) -> CartOwner:
    """
    Resolve the cart owner: the signed-in user, else the ``X-Session-ID`` header.

    Raises:
        ValidationError: Neither is present
    """
    if user_id:
        return CartOwner(user_id=user_id)
    return CartOwner(session_id=x_session_id)


CartOwnerDep = Annotated[CartOwner, Depends(get_cart_owner)]


# ==============================================================================
# SERVICE DEPENDENCIES
# ==============================================================================

async def get_user_service(adapter: DatabaseDep) -> UserService:
    return UserService(adapter)


async def get_address_service(adapter: DatabaseDep) -> AddressService:
    return AddressService(adapter)


async def get_category_service(adapter: DatabaseDep) -> CategoryService:
    return CategoryService(adapter)


async def get_product_service(adapter: DatabaseDep) -> ProductService:
    return ProductService(adapter)


async def get_cart_service(adapter: DatabaseDep) -> CartService:
    return CartService(adapter)


async def get_checkout_service(adapter: DatabaseDep) -> CheckoutService:
    return CheckoutService(adapter, settings_manager)


async def get_order_service(adapter: DatabaseDep) -> OrderService:
    return OrderService(adapter)


async def get_shipping_service(adapter: DatabaseDep) -> ShippingService:
    return ShippingService(adapter)


async def get_settings_manager() -> SettingsManager:
    return settings_manager


UserServiceDep = Annotated[UserService, Depends(get_user_service)]
AddressServiceDep = Annotated[AddressService, Depends(get_address_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
ProductServiceDep = Annotated[ProductService, Depends(get_product_service)]
CartServiceDep = Annotated[CartService, Depends(get_cart_service)]
CheckoutServiceDep = Annotated[CheckoutService, Depends(get_checkout_service)]
OrderServiceDep = Annotated[OrderService, Depends(get_order_service)]
ShippingServiceDep = Annotated[ShippingService, Depends(get_shipping_service)]
SettingsManagerDep = Annotated[SettingsManager, Depends(get_settings_manager)]
