"""Error kinds raised by the cart ledger.

Every failure is a caller-side contract violation detected before any state
changes, so all of them derive from ``CartError`` (itself a ``ValueError``).
Lookup failures additionally derive from ``LookupError``.
"""

from __future__ import annotations


class CartError(ValueError):
    """Base class for every cart contract violation."""

    default_message = "Invalid cart operation"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class InvalidReference(CartError):
    default_message = "Reference must be a non-empty string"


class InvalidPrice(CartError):
    default_message = "Price must be a positive number"


class InvalidQuantity(CartError):
    default_message = "Quantity must be a positive integer"


class ReferenceNotFound(CartError, LookupError):
    default_message = "Reference not found in cart"


class PriceNotFound(CartError, LookupError):
    default_message = "Price not found for reference"


class InsufficientQuantity(CartError):
    default_message = "Insufficient quantity to remove"


class InvalidPromotionCode(CartError):
    default_message = "Promotion code must be a non-empty string"


class InvalidPercent(CartError):
    default_message = "Percent must be an integer between 1 and 99"


class InvalidThreshold(CartError):
    default_message = "Threshold must be an integer greater than or equal to 2"


class PromotionReferenceConflict(CartError):
    default_message = "Promotion reference already present in cart"


class PromotionCodeConflict(CartError):
    default_message = "Promotion code already registered"
