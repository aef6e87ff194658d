"""Receipts for a Cart: per-entry lines, a text rendering and a JSON-ready dict."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .cart import Cart
from .config import Settings
from .render import render


@dataclass(frozen=True)
class ReceiptLine:
    """One (reference, price) entry of a cart, with promotions applied."""

    reference: str
    price: float
    quantity: int
    free_units: int
    unit_price: float
    amount: float


def receipt_lines(cart: Cart) -> list[ReceiptLine]:
    lines = []
    for reference in cart.get_references():
        free = cart.get_free_units(reference)
        for price in cart.get_unit_prices(reference):
            quantity = cart.get_quantity(reference, price)
            lines.append(
                ReceiptLine(
                    reference=reference,
                    price=price,
                    quantity=quantity,
                    free_units=free.get(price, 0),
                    unit_price=cart.get_effective_price(reference, price),
                    amount=cart.get_amount(reference, price),
                )
            )
    return lines


def _active_codes(cart: Cart) -> list[str]:
    return [p.code for p in cart.get_promotions() if p.active]


def format_receipt(cart: Cart, settings: Settings | None = None) -> str:
    """Human-readable receipt for terminal output."""
    settings = settings or Settings()
    subtotal = cart.get_subtotal()
    total = cart.get_total_amount()
    return render(
        "receipt.txt.j2",
        lines=receipt_lines(cart),
        promotions=_active_codes(cart),
        subtotal=subtotal,
        discount=subtotal - total,
        total=total,
        money=settings.money,
    )


def receipt_json(cart: Cart) -> dict[str, Any]:
    """Machine-readable receipt for pipeline integration."""
    subtotal = cart.get_subtotal()
    total = cart.get_total_amount()
    return {
        "lines": [
            {
                "reference": line.reference,
                "price": line.price,
                "quantity": line.quantity,
                "free_units": line.free_units,
                "unit_price": line.unit_price,
                "amount": line.amount,
            }
            for line in receipt_lines(cart)
        ],
        "subtotal": subtotal,
        "discount": subtotal - total,
        "total": total,
        "promotions": _active_codes(cart),
    }
