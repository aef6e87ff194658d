"""The Cart aggregate: priced stock per reference plus a promotion registry.

Storage is a two-level mapping ``reference -> {unit price -> quantity}``.
Invariants kept by every mutation:

- a reference is present only while its price bucket is non-empty
- a bucket never holds two entries for the same price (prices are keys)
- every operation validates its inputs before touching state, so a failed
  call leaves the cart unchanged
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping

from .errors import (
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
    activated,
)

logger = logging.getLogger(__name__)

type PriceBucket = dict[float, int]


# ---------------------------------------------------------------------------
# Input validation
# ---------------------------------------------------------------------------


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def normalize_reference(reference: str) -> str:
    value = reference.strip() if isinstance(reference, str) else ""
    if not value:
        raise InvalidReference()
    return value


def normalize_code(code: str) -> str:
    value = code.strip() if isinstance(code, str) else ""
    if not value:
        raise InvalidPromotionCode()
    return value


def assert_price(price: float) -> None:
    """Prices must be finite and strictly positive. NaN is rejected.

    Ints too large for a float are rejected as well, since amounts are floats.
    """
    if isinstance(price, bool) or not isinstance(price, (int, float)):
        raise InvalidPrice()
    try:
        finite = math.isfinite(price)
    except OverflowError:
        raise InvalidPrice() from None
    if not finite or price <= 0:
        raise InvalidPrice()


def assert_quantity(quantity: int) -> None:
    if not _is_int(quantity) or quantity <= 0:
        raise InvalidQuantity()


# ---------------------------------------------------------------------------
# Cart
# ---------------------------------------------------------------------------


class Cart:
    """In-memory shopping cart ledger.

    Example:
        cart = Cart()
        cart.register_promotion("PROMO10", "A", 10)
        cart.add("A", 50, 2)
        cart.activate_promotion("PROMO10")   # True
        cart.get_total_amount()              # 90.0
    """

    def __init__(self) -> None:
        self._items: dict[str, PriceBucket] = {}
        self._promotions: dict[str, Promotion] = {}

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"Cart(references={self.get_references()!r}, promotions={sorted(self._promotions)!r})"

    @property
    def is_empty(self) -> bool:
        return not self._items

    # -- mutations ----------------------------------------------------------

    def add(self, reference: str, price: float, quantity: int) -> None:
        ref_key = normalize_reference(reference)
        assert_price(price)
        assert_quantity(quantity)

        bucket = self._bucket(ref_key, create=True)
        bucket[price] = bucket.get(price, 0) + quantity
        logger.debug("Added %d x %r at %s (now %d)", quantity, ref_key, price, bucket[price])

    def remove(self, reference: str, quantity: int) -> None:
        """Remove units of a reference, draining the most expensive prices first.

        The cheapest stock is what stays in the cart.
        """
        ref_key = normalize_reference(reference)
        bucket = self._bucket(ref_key)
        assert_quantity(quantity)

        total_quantity = sum(bucket.values())
        if quantity > total_quantity:
            raise InsufficientQuantity(
                f"Insufficient quantity to remove: requested {quantity}, "
                f"{total_quantity} available for {ref_key!r}"
            )

        remaining = quantity
        for price in sorted(bucket, reverse=True):
            if remaining == 0:
                break
            available = bucket[price]
            if available <= remaining:
                remaining -= available
                del bucket[price]
            else:
                bucket[price] = available - remaining
                remaining = 0

        if not bucket:
            del self._items[ref_key]
            logger.debug("Removed last units of %r; reference dropped", ref_key)
        else:
            logger.debug("Removed %d x %r", quantity, ref_key)

    # -- queries ------------------------------------------------------------

    def get_total_amount(self) -> float:
        total: float = 0
        for ref_key, bucket in self._items.items():
            free = self._free_units(ref_key, bucket)
            for price, quantity in bucket.items():
                total += self._payable(ref_key, price, quantity, free.get(price, 0))
        return total

    def get_subtotal(self) -> float:
        """Total before any promotion is applied."""
        return sum(
            price * quantity
            for bucket in self._items.values()
            for price, quantity in bucket.items()
        )

    def get_references(self) -> list[str]:
        return sorted(self._items)

    def get_unit_prices(self, reference: str) -> list[float]:
        return sorted(self._bucket(normalize_reference(reference)))

    def get_quantity(self, reference: str, price: float | None = None) -> int:
        bucket = self._bucket(normalize_reference(reference))
        if price is None:
            return sum(bucket.values())
        return self._quantity_at(bucket, price)

    def get_amount(self, reference: str, price: float) -> float:
        """Amount payable for one (reference, price) entry after promotions."""
        ref_key = normalize_reference(reference)
        bucket = self._bucket(ref_key)
        quantity = self._quantity_at(bucket, price)
        free = self._free_units(ref_key, bucket)
        return self._payable(ref_key, price, quantity, free.get(price, 0))

    def get_effective_price(self, reference: str, price: float) -> float:
        """Unit price of an existing entry once percent promotions apply."""
        ref_key = normalize_reference(reference)
        self._quantity_at(self._bucket(ref_key), price)
        return self._unit_price(ref_key, price)

    def get_free_units(self, reference: str) -> dict[float, int]:
        """Free units per price under the reference's active buy-N-get-one rule."""
        ref_key = normalize_reference(reference)
        return self._free_units(ref_key, self._bucket(ref_key))

    # -- promotions ---------------------------------------------------------

    def register_promotion(
        self,
        code: str,
        reference: str,
        percent: int,
        min_price: float | None = None,
    ) -> None:
        code_key = normalize_code(code)
        ref_key = normalize_reference(reference)
        if not _is_int(percent) or not 0 < percent < 100:
            raise InvalidPercent()
        if min_price is not None:
            assert_price(min_price)
        self._check_registration(code_key, ref_key)

        self._promotions[code_key] = PercentPromotion(
            code=code_key, reference=ref_key, percent=percent, min_price=min_price
        )
        logger.debug("Registered %d%% promotion %r for %r", percent, code_key, ref_key)

    def register_buy_n_get_one_promotion(
        self, code: str, reference: str, threshold: int
    ) -> None:
        code_key = normalize_code(code)
        ref_key = normalize_reference(reference)
        if not _is_int(threshold) or threshold < 2:
            raise InvalidThreshold()
        self._check_registration(code_key, ref_key)

        self._promotions[code_key] = BuyNGetOnePromotion(
            code=code_key, reference=ref_key, threshold=threshold
        )
        logger.debug(
            "Registered buy-%d-get-one promotion %r for %r", threshold, code_key, ref_key
        )

    def activate_promotion(self, code: str) -> bool:
        """Turn a registered promotion on. Never raises.

        Returns False for unknown codes and when another active promotion of
        the same kind already targets the reference.
        """
        code_key = code.strip() if isinstance(code, str) else ""
        promotion = self._promotions.get(code_key)
        if promotion is None:
            logger.info("Cannot activate unknown promotion %r", code_key)
            return False
        if promotion.active:
            return True

        if self._active_promotion(promotion.reference, promotion.kind) is not None:
            logger.info(
                "Promotion %r not activated: another %s promotion is active for %r",
                code_key,
                promotion.kind.value,
                promotion.reference,
            )
            return False

        self._promotions[code_key] = activated(promotion)
        logger.debug("Activated promotion %r", code_key)
        return True

    def get_promotion(self, code: str) -> Promotion | None:
        code_key = code.strip() if isinstance(code, str) else ""
        return self._promotions.get(code_key)

    def get_promotions(self) -> list[Promotion]:
        return [self._promotions[code] for code in sorted(self._promotions)]

    # -- internals ----------------------------------------------------------

    def _bucket(self, ref_key: str, create: bool = False) -> PriceBucket:
        """Single access point to price buckets.

        With ``create`` an empty bucket is inserted on first use; otherwise a
        missing reference raises ReferenceNotFound.
        """
        bucket = self._items.get(ref_key)
        if bucket is None:
            if not create:
                raise ReferenceNotFound()
            bucket = self._items[ref_key] = {}
        return bucket

    @staticmethod
    def _quantity_at(bucket: Mapping[float, int], price: float) -> int:
        assert_price(price)
        quantity = bucket.get(price)
        if quantity is None:
            raise PriceNotFound()
        return quantity

    def _check_registration(self, code_key: str, ref_key: str) -> None:
        if ref_key in self._items:
            raise PromotionReferenceConflict()
        if code_key in self._promotions:
            raise PromotionCodeConflict()

    def _active_promotion(self, ref_key: str, kind: PromotionKind) -> Promotion | None:
        for promotion in self._promotions.values():
            if promotion.active and promotion.kind is kind and promotion.reference == ref_key:
                return promotion
        return None

    def _free_units(self, ref_key: str, bucket: Mapping[float, int]) -> dict[float, int]:
        promotion = self._active_promotion(ref_key, PromotionKind.BUY_N_GET_ONE)
        if not isinstance(promotion, BuyNGetOnePromotion):
            return {}
        return promotion.allocate(bucket)

    def _unit_price(self, ref_key: str, price: float) -> float:
        promotion = self._active_promotion(ref_key, PromotionKind.PERCENT)
        if not isinstance(promotion, PercentPromotion):
            return price
        return promotion.unit_price(price)

    def _payable(self, ref_key: str, price: float, quantity: int, free: int) -> float:
        return max(0, quantity - free) * self._unit_price(ref_key, price)
