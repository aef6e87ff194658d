"""Promotion rules for the cart ledger.

A promotion rule is registered under a code and targets one reference.
Rules come in two kinds:

- Percent: reduces the unit price by a fixed percentage, optionally only for
  unit prices at or above a minimum (e.g., 10% off every unit of "A")
- Buy-N-get-one: for every block of ``threshold + 1`` units bought, one unit
  is free (e.g., threshold 2 means "buy 2, get the 3rd free")

Rules are immutable values; activation swaps the registry entry for a copy
with ``active=True``.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum


class PromotionKind(Enum):
    PERCENT = "percent"
    BUY_N_GET_ONE = "buy_n_get_one"


@dataclass(frozen=True)
class PercentPromotion:
    """Percent-off rule.

    Example: PROMO20 on "A" with min_price 40 discounts a unit at 50 to 40
    and leaves a unit at 30 untouched.
    """

    code: str
    reference: str
    percent: int
    min_price: float | None = None
    active: bool = False

    @property
    def kind(self) -> PromotionKind:
        return PromotionKind.PERCENT

    def applies_to(self, price: float) -> bool:
        return self.min_price is None or self.min_price <= price

    def unit_price(self, price: float) -> float:
        """Effective unit price once the discount applies."""
        if not self.applies_to(price):
            return price
        return price * (1 - self.percent / 100)


@dataclass(frozen=True)
class BuyNGetOnePromotion:
    """Free-unit rule: one unit free per completed block of threshold + 1."""

    code: str
    reference: str
    threshold: int
    active: bool = False

    @property
    def kind(self) -> PromotionKind:
        return PromotionKind.BUY_N_GET_ONE

    @property
    def block_size(self) -> int:
        return self.threshold + 1

    def free_units(self, total_quantity: int) -> int:
        return total_quantity // self.block_size

    def allocate(self, bucket: Mapping[float, int]) -> dict[float, int]:
        """Spread the free units over a price bucket, cheapest prices first.

        Returns only the prices that receive at least one free unit.
        """
        remaining = self.free_units(sum(bucket.values()))
        allocation: dict[float, int] = {}
        for price in sorted(bucket):
            if remaining == 0:
                break
            granted = min(bucket[price], remaining)
            allocation[price] = granted
            remaining -= granted
        return allocation


# Union type for any promotion rule
Promotion = PercentPromotion | BuyNGetOnePromotion


def activated(promotion: Promotion) -> Promotion:
    return dataclasses.replace(promotion, active=True)
