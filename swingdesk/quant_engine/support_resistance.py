"""Support and resistance bands.

Percentage offsets around the current price, not pivots detected from price
history. Support levels descend away from price, resistance levels ascend.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from swingdesk.quant_engine.signals import round_price


SUPPORT_OFFSETS = (0.95, 0.92)
RESISTANCE_OFFSETS = (1.05, 1.08)


@dataclass
class SupportResistance:
    """Two support and two resistance levels around a price."""

    support: list[float] = field(default_factory=list)
    resistance: list[float] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"support": list(self.support), "resistance": list(self.resistance)}


def estimate_levels(current_price: float) -> SupportResistance:
    """Return percentage-offset support/resistance bands rounded to 2 decimals."""
    return SupportResistance(
        support=[round_price(current_price * f) for f in SUPPORT_OFFSETS],
        resistance=[round_price(current_price * f) for f in RESISTANCE_OFFSETS],
    )
