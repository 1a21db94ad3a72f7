# ==============================================================================
# CUSTOM EXCEPTIONS - Application Error Hierarchy
# ==============================================================================
# Structured exception classes for consistent error handling
# Each exception maps to an HTTP status code and the uniform envelope
# ==============================================================================

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

Details = Union[Dict[str, Any], List[Any], None]


class AppException(Exception):
    """
    Base exception for all application errors.

    Provides a consistent interface for error handling with:
    - Error code for programmatic identification
    - HTTP status code mapping
    - Human-readable message and optional details

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error identifier
        status_code: HTTP status code to return
        details: Additional context (dict or list of field errors)

    Example:
        >>> raise AppException(
        ...     message="Something went wrong",
        ...     error_code="INTERNAL_ERROR",
        ...     status_code=500
        ... )
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        error_code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        details: Details = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert exception to the JSON error envelope.

        Returns:
            ``{"success": False, "error": ..., "code": ..., "details"?: ...}``
        """
        body: Dict[str, Any] = {
            "success": False,
            "error": self.message,
            "code": self.error_code,
        }
        if self.details:
            body["details"] = self.details
        return body

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"status_code={self.status_code})"
        )


# ==============================================================================
# DATABASE EXCEPTIONS
# ==============================================================================

class DatabaseError(AppException):
    """
    Base exception for database-related errors.

    Raised when the engine cannot connect or a query fails outside
    of the expected constraint violations.
    """

    def __init__(
        self,
        message: str = "Database operation failed",
        details: Details = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="DATABASE_ERROR",
            status_code=503,
            details=details,
        )


class TransactionError(DatabaseError):
    """
    Raised when a database transaction fails.

    The transaction has been rolled back before this is raised.
    """

    def __init__(
        self,
        message: str = "Transaction failed",
        details: Details = None,
    ) -> None:
        super().__init__(message=message, details=details)
        self.error_code = "TRANSACTION_ERROR"
        self.status_code = 500


# ==============================================================================
# RESOURCE EXCEPTIONS
# ==============================================================================

class NotFoundError(AppException):
    """
    Raised when a requested resource does not exist.

    Maps to HTTP 404 Not Found.

    Attributes:
        resource_type: Type of resource that was not found
        resource_id: Identifier of the missing resource
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[Any] = None,
    ) -> None:
        details = {}
        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = str(resource_id)

        super().__init__(
            message=message,
            error_code="NOT_FOUND",
            status_code=404,
            details=details,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(AppException):
    """
    Raised on unique-constraint violations (duplicate SKU, slug, key, email).

    Maps to HTTP 400 Bad Request.
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        field: Optional[str] = None,
        details: Details = None,
    ) -> None:
        _details = details
        if field:
            _details = [{"field": field, "message": message}]

        super().__init__(
            message=message,
            error_code="CONFLICT",
            status_code=400,
            details=_details,
        )
        self.field = field


# ==============================================================================
# VALIDATION EXCEPTIONS
# ==============================================================================

class ValidationError(AppException):
    """
    Raised when input validation fails.

    Maps to HTTP 400 Bad Request. ``details`` carries a list of
    ``{"field": ..., "message": ...}`` entries.
    """

    def __init__(
        self,
        message: str = "Validation Error",
        errors: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=400,
            details=errors or None,
        )
        self.errors = errors or []


# ==============================================================================
# AUTHENTICATION & AUTHORIZATION EXCEPTIONS
# ==============================================================================

class AuthenticationError(AppException):
    """
    Raised when authentication fails.

    Maps to HTTP 401 Unauthorized.

    Common causes:
    - Invalid or expired token
    - Missing authentication header
    - Invalid credentials
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Details = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code="AUTHENTICATION_ERROR",
            status_code=401,
            details=details,
        )


class AuthorizationError(AppException):
    """
    Raised when a user lacks permission for an action.

    Maps to HTTP 403 Forbidden.
    """

    def __init__(
        self,
        message: str = "Permission denied",
        required_role: Optional[str] = None,
    ) -> None:
        details = {"required_role": required_role} if required_role else None

        super().__init__(
            message=message,
            error_code="AUTHORIZATION_ERROR",
            status_code=403,
            details=details,
        )


class TokenExpiredError(AuthenticationError):
    """Raised when a JWT token has expired."""

    def __init__(
        self,
        message: str = "Token has expired",
    ) -> None:
        super().__init__(message=message)
        self.error_code = "TOKEN_EXPIRED"


class InvalidTokenError(AuthenticationError):
    """Raised when a JWT token is invalid or malformed."""

    def __init__(
        self,
        message: str = "Invalid token",
    ) -> None:
        super().__init__(message=message)
        self.error_code = "INVALID_TOKEN"


# ==============================================================================
# RATE LIMITING EXCEPTIONS
# ==============================================================================

class RateLimitError(AppException):
    """
    Raised when the rate limit is exceeded.

    Maps to HTTP 429 Too Many Requests.
    """

    def __init__(
        self,
        message: str = "Too many requests",
        retry_after: int = 60,
    ) -> None:
        super().__init__(
            message=message,
            error_code="RATE_LIMIT_EXCEEDED",
            status_code=429,
            details={"retry_after_seconds": retry_after},
        )
        self.retry_after = retry_after


# ==============================================================================
# BUSINESS LOGIC EXCEPTIONS
# ==============================================================================

class InactiveProductError(AppException):
    """
    Raised when a cart or checkout line references an inactive product.

    Maps to HTTP 400 Bad Request.
    """

    def __init__(
        self,
        product_name: str,
        product_id: Optional[str] = None,
    ) -> None:
        super().__init__(
            message=f"Product {product_name} is not available",
            error_code="PRODUCT_INACTIVE",
            status_code=400,
            details={"product_id": product_id} if product_id else None,
        )


class InsufficientStockError(AppException):
    """
    Raised when requested quantity exceeds available inventory.

    Maps to HTTP 400 Bad Request. The message names the product.

    Attributes:
        product_name: Display name of the product (and variant)
        requested: Requested quantity
        available: Quantity on hand, when known
    """

    def __init__(
        self,
        product_name: str,
        requested: Optional[int] = None,
        available: Optional[int] = None,
    ) -> None:
        details: Dict[str, Any] = {"product": product_name}
        if requested is not None:
            details["requested"] = requested
        if available is not None:
            details["available"] = available

        message = f"Insufficient stock for {product_name}"
        if available is not None:
            message = f"{message}. Available: {available}"

        super().__init__(
            message=message,
            error_code="INSUFFICIENT_STOCK",
            status_code=400,
            details=details,
        )
        self.product_name = product_name
        self.requested = requested
        self.available = available


# Alias used by the error taxonomy
StockError = InsufficientStockError


class BusinessRuleError(AppException):
    """
    Raised when a business rule is violated.

    Maps to HTTP 400 Bad Request.
    """

    def __init__(
        self,
        message: str = "Business rule violation",
        rule: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        _details = dict(details or {})
        if rule:
            _details["violated_rule"] = rule

        super().__init__(
            message=message,
            error_code="BUSINESS_RULE_ERROR",
            status_code=400,
            details=_details or None,
        )
