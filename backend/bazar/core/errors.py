"""
Error taxonomy for the Bazar backend

Services raise these exceptions; bazar.main renders them as JSON with a
single exception handler. Each error carries a stable `kind`, a
human-readable message and the HTTP status it maps to.
"""
from typing import Any, Dict, Optional


class ShopError(Exception):
    """Base class for every error the API reports to clients"""

    status_code: int = 500
    kind: str = "ShopError"
    default_message: str = "Unexpected error"

    def __init__(self, message: Optional[str] = None, **details: Any):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Payload for the `error` key of the response body"""
        return {"kind": self.kind, "message": self.message, **self.details}


# =============================================================================
# Categories
# =============================================================================

class ValidationError(ShopError):
    status_code = 400
    kind = "ValidationError"
    default_message = "Invalid request"


class AuthError(ShopError):
    status_code = 401
    kind = "AuthError"
    default_message = "Authentication required"


class NotFoundError(ShopError):
    status_code = 404
    kind = "NotFoundError"
    default_message = "Resource not found"


class ConflictError(ShopError):
    status_code = 409
    kind = "ConflictError"
    default_message = "Request conflicts with current state"


class PersistenceError(ShopError):
    status_code = 500
    kind = "PersistenceError"
    default_message = "The operation could not be stored. Please retry."


# =============================================================================
# Validation
# =============================================================================

class EmptyCart(ValidationError):
    kind = "EmptyCart"
    default_message = "An order needs at least one line"


class InvalidQuantity(ValidationError):
    kind = "InvalidQuantity"
    default_message = "Quantities must be positive integers"


# =============================================================================
# Authentication
# =============================================================================

class MissingCredential(AuthError):
    kind = "MissingCredential"
    default_message = "Missing Authorization header"


class InvalidScheme(AuthError):
    kind = "InvalidScheme"
    default_message = "Authorization header must be 'Bearer <token>'"


class ExpiredToken(AuthError):
    kind = "ExpiredToken"
    default_message = "Token has expired"


class MalformedToken(AuthError):
    kind = "MalformedToken"
    default_message = "Token is malformed or has an invalid signature"


class NotYetValid(AuthError):
    kind = "NotYetValid"
    default_message = "Token is not valid yet"


class InvalidCredentials(AuthError):
    kind = "InvalidCredentials"
    default_message = "Invalid email or password"


# =============================================================================
# Lookups and conflicts
# =============================================================================

class ProductNotFound(NotFoundError):
    kind = "ProductNotFound"

    def __init__(self, product_id: int):
        super().__init__(f"Product {product_id} does not exist", product_id=product_id)
        self.product_id = product_id


class UserNotFound(NotFoundError):
    kind = "UserNotFound"
    default_message = "User not found"


class InsufficientStock(ConflictError):
    kind = "InsufficientStock"

    def __init__(self, product_id: int, available: int, requested: int):
        super().__init__(
            f"Only {available} units of product {product_id} available ({requested} requested)",
            product_id=product_id,
            available=available,
            requested=requested,
        )
        self.product_id = product_id
        self.available = available
        self.requested = requested


class DuplicateEmail(ConflictError):
    status_code = 400
    kind = "DuplicateEmail"
    default_message = "Email already registered"


class PersistenceFailure(PersistenceError):
    kind = "PersistenceFailure"
