"""
Domain error taxonomy.

Every failure surfaced by the storefront core is one of these.
The `code` is stable and is what API clients see; the message is
for humans.
"""
from typing import Optional


class StorefrontError(Exception):
    """Base class for all storefront domain errors."""

    code: str = "Internal"

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ValidationError(StorefrontError):
    """Malformed or out-of-range input (empty cart, bad quantity, ...)."""

    code = "ValidationError"


class NotEligible(StorefrontError):
    """Operation not allowed in the current order/line/request state."""

    code = "NotEligible"


class InsufficientStock(StorefrontError):
    code = "InsufficientStock"


class InsufficientFunds(StorefrontError):
    code = "InsufficientFunds"


class InvalidCoupon(StorefrontError):
    """Coupon unknown, inactive or not applicable."""

    code = "InvalidCoupon"


class CouponExpired(InvalidCoupon):
    pass


class CouponMinimumNotMet(InvalidCoupon):
    pass


class CouponUsageLimitReached(InvalidCoupon):
    pass


class PaymentVerificationFailed(StorefrontError):
    code = "PaymentVerificationFailed"


class NotFound(StorefrontError):
    code = "NotFound"


class Unauthorized(StorefrontError):
    """No caller identity on a customer route."""

    code = "Unauthorized"


class Forbidden(StorefrontError):
    code = "Forbidden"


class InternalError(StorefrontError):
    """Unexpected failure; the transaction was rolled back."""

    code = "Internal"
