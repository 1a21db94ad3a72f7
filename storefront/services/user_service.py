# ==============================================================================
# USER SERVICE - Authentication & User Management
# ==============================================================================
# Business logic for user operations and authentication
# ==============================================================================

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from storefront.core.constants import DatabaseConstants as DC, ErrorMessages
from storefront.core.exceptions import (
    AuthenticationError,
    ConflictError,
    ValidationError,
)
from storefront.core.security import (
    create_token_pair,
    hash_password,
    verify_password,
    verify_refresh_token,
)
from storefront.core.settings import settings
from storefront.database.adapters.sql_adapter import SQLAlchemyAdapter
from storefront.domain_models.user import UserRole
from storefront.schemas.user import (
    PasswordChange,
    TokenResponse,
    UserCreate,
    UserResponse,
    UserUpdate,
)
from storefront.services.base_service import BaseService
from storefront.utils.helpers import utc_now

logger = logging.getLogger(__name__)


class UserService(
    BaseService[Any, UserCreate, UserUpdate, UserResponse]
):
    """
    User service for authentication and profile management.

    Registration always creates customers; admins are created by
    ``ensure_admin`` from configuration at startup.
    """

    _not_found_message = ErrorMessages.USER_NOT_FOUND

    def __init__(self, adapter: SQLAlchemyAdapter) -> None:
        super().__init__(adapter, DC.USERS_COLLECTION)

    def _to_response(self, entity: Any) -> UserResponse:
        return UserResponse.model_validate(entity, from_attributes=True)

    def _tokens_for(self, user: Any) -> TokenResponse:
        role = user.role.value if isinstance(user.role, UserRole) else str(user.role)
        tokens = create_token_pair(subject=user.id, role=role)
        return TokenResponse(
            access_token=tokens["access_token"],
            refresh_token=tokens["refresh_token"],
            token_type=tokens["token_type"],
            expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        )

    # ==========================================================================
    # AUTHENTICATION
    # ==========================================================================

    async def register(self, schema: UserCreate) -> UserResponse:
        """
        Register a new customer.

        Raises:
            ConflictError: If email already registered
        """
        email = schema.email.lower()
        if await self._adapter.exists(self._collection_name, {"email": email}):
            raise ConflictError(message="Email already registered", field="email")

        data = schema.model_dump(exclude={"password"})
        data["email"] = email
        data["hashed_password"] = hash_password(schema.password)
        data["role"] = UserRole.CUSTOMER
        data["is_active"] = True

        result = await self._adapter.create(self._collection_name, data)
        logger.info(f"Registered user {result.id}")
        return self._to_response(result)

    async def authenticate(
        self,
        email: str,
        password: str,
    ) -> Dict[str, Any]:
        """
        Authenticate user and return tokens.

        Returns:
            Dict with ``user`` and ``tokens``

        Raises:
            AuthenticationError: If credentials invalid or account disabled
        """
        user = await self._adapter.find_one(
            self._collection_name,
            {"email": email.lower()},
        )

        if not user or not verify_password(password, user.hashed_password):
            logger.info(f"Failed login for {email}")
            raise AuthenticationError(message=ErrorMessages.INVALID_CREDENTIALS)

        if not user.is_active:
            raise AuthenticationError(message=ErrorMessages.ACCOUNT_DISABLED)

        user = await self._adapter.update(
            self._collection_name,
            user.id,
            {"last_login": utc_now()},
        )

        return {
            "user": self._to_response(user),
            "tokens": self._tokens_for(user),
        }

    async def refresh(self, refresh_token: str) -> TokenResponse:
        """
        Exchange a refresh token for a new token pair.

        The role is re-read from the user record so a demoted admin
        loses access on the next refresh.
        """
        payload = verify_refresh_token(refresh_token)
        user = await self._adapter.get_by_id(self._collection_name, payload.get("sub"))

        if not user or not user.is_active:
            raise AuthenticationError(message=ErrorMessages.UNAUTHORIZED)

        return self._tokens_for(user)

    async def change_password(self, user_id: str, schema: PasswordChange) -> None:
        """
        Replace a user's password after checking the current one.

        Raises:
            NotFoundError: Unknown user
            ValidationError: ``current_password`` does not match
        """
        user = await self._adapter.get_by_id(self._collection_name, user_id)
        if user is None:
            raise self._not_found(user_id)
        if not verify_password(schema.current_password, user.hashed_password):
            raise ValidationError(
                message=ErrorMessages.WRONG_CURRENT_PASSWORD,
                errors=[{"field": "current_password", "message": ErrorMessages.WRONG_CURRENT_PASSWORD}],
            )

        await self._adapter.update(
            self._collection_name,
            user_id,
            {"hashed_password": hash_password(schema.new_password)},
        )
        logger.info(f"Password changed for user {user_id}")

    # ==========================================================================
    # ADMINISTRATION
    # ==========================================================================

    async def deactivate_customers(self, ids: List[str]) -> int:
        """Soft-delete customer accounts; admin accounts in ``ids`` are left alone."""
        deactivated = await self._adapter.bulk_update(
            self._collection_name,
            {"id": ids, "role": UserRole.CUSTOMER},
            {"is_active": False},
        )
        logger.info(f"Deactivated {deactivated} customer account(s)")
        return deactivated

    # ==========================================================================
    # ADMIN BOOTSTRAP
    # ==========================================================================

    async def ensure_admin(self, email: str, password: str) -> Optional[str]:
        """
        Create the configured admin account if no user has that email.

        Returns:
            The new admin's ID, or None if the account already existed
        """
        email = email.lower()
        if await self._adapter.exists(self._collection_name, {"email": email}):
            return None

        admin = await self._adapter.create(
            self._collection_name,
            {
                "email": email,
                "hashed_password": hash_password(password),
                "full_name": "Administrator",
                "role": UserRole.ADMIN,
                "is_active": True,
            },
        )
        logger.info(f"Bootstrapped admin account {email}")
        return admin.id

