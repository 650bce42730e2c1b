"""Money rounding helpers.

Centralized so converter, calculator, and CLI share identical rounding.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round2(value: float) -> float:
    """Round to cents, half-up (avoids float artefacts like 359.88000000000005)."""
    return float(Decimal(str(value)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


def round_units(value: float) -> int:
    """Round to whole currency units, half-up."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))
