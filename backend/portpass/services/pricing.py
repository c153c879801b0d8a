# Overview: Static pass price table.

from __future__ import annotations

from decimal import Decimal

from ..errors import ValidationError


PASS_TYPES = ("daily", "vehicle", "crane")

# MVR, two decimal places
PASS_PRICES = {
    "daily": Decimal("6.11"),
    "vehicle": Decimal("11.21"),
    "crane": Decimal("81.51"),
}

# Pass types identified by a vehicle plate rather than a personal ID
PLATE_PASS_TYPES = ("vehicle", "crane")


def price_of(pass_type: str) -> Decimal:
    try:
        return PASS_PRICES[pass_type]
    except KeyError:
        raise ValidationError(f"Unknown pass type: {pass_type}") from None


def price_table() -> dict[str, str]:
    """Prices as strings, the form clients display."""
    return {pass_type: f"{PASS_PRICES[pass_type]:.2f}" for pass_type in PASS_TYPES}
