"""cartledger: an in-memory shopping-cart ledger with promotions."""

from .cart import Cart
from .errors import (
    CartError,
    InsufficientQuantity,
    InvalidPercent,
    InvalidPrice,
    InvalidPromotionCode,
    InvalidQuantity,
    InvalidReference,
    InvalidThreshold,
    PriceNotFound,
    PromotionCodeConflict,
    PromotionReferenceConflict,
    ReferenceNotFound,
)
from .promotions import (
    BuyNGetOnePromotion,
    PercentPromotion,
    Promotion,
    PromotionKind,
)
from .config import Settings
from .report import ReceiptLine, format_receipt, receipt_json, receipt_lines
from .result import Ok, Err, Result

__all__ = [
    # Aggregate
    "Cart",
    # Errors
    "CartError", "InsufficientQuantity", "InvalidPercent", "InvalidPrice",
    "InvalidPromotionCode", "InvalidQuantity", "InvalidReference",
    "InvalidThreshold", "PriceNotFound", "PromotionCodeConflict",
    "PromotionReferenceConflict", "ReferenceNotFound",
    # Promotions
    "BuyNGetOnePromotion", "PercentPromotion", "Promotion", "PromotionKind",
    # Config
    "Settings",
    # Reports
    "ReceiptLine", "format_receipt", "receipt_json", "receipt_lines",
    # Result
    "Ok", "Err", "Result",
]
