"""
Item Validator
==============
Single acceptance gate for every extraction strategy. A candidate
(name, unit_price, quantity, total_price) survives only if:

  1. trimmed name length is 1..100
  2. unit_price > 0, integer quantity >= 1, total_price > 0
  3. unit_price <= max_unit_price and total_price <= max_total_price
     (catches OCR digit insertion: "5.00" read as "500.00")
  4. |total_price - unit_price * quantity| <= tolerance
     tolerance = max(min_tolerance, relative_tolerance * unit_price * quantity)
  5. name contains no aggregate keyword (subtotal, total, change, ...)
"""

from typing import Dict, Optional

from loguru import logger


AGGREGATE_KEYWORDS = (
    '小计', '合计', '总计', '找零', '收款', '应收', '实收', '折扣', '优惠',
    'subtotal', 'total', 'change', 'due', 'discount',
)

_DEFAULTS = {
    "max_unit_price":     10000.0,
    "max_total_price":    100000.0,
    "min_tolerance":      0.01,
    "relative_tolerance": 0.05,
}


class ItemValidator:
    """Pure predicate; holds only its thresholds."""

    def __init__(
        self,
        max_unit_price: float = _DEFAULTS["max_unit_price"],
        max_total_price: float = _DEFAULTS["max_total_price"],
        min_tolerance: float = _DEFAULTS["min_tolerance"],
        relative_tolerance: float = _DEFAULTS["relative_tolerance"],
    ):
        self.max_unit_price = max_unit_price
        self.max_total_price = max_total_price
        self.min_tolerance = min_tolerance
        self.relative_tolerance = relative_tolerance

    @classmethod
    def from_config(cls, config: Optional[Dict]) -> "ItemValidator":
        """Build from the `validation` section of the YAML config."""
        section = {**_DEFAULTS, **((config or {}).get("validation") or {})}
        return cls(
            max_unit_price=float(section["max_unit_price"]),
            max_total_price=float(section["max_total_price"]),
            min_tolerance=float(section["min_tolerance"]),
            relative_tolerance=float(section["relative_tolerance"]),
        )

    def tolerance(self, unit_price: float, quantity: int) -> float:
        return max(self.min_tolerance, self.relative_tolerance * unit_price * quantity)

    def is_valid_item(self, name: str, unit_price: float, quantity: int, total_price: float) -> bool:
        clean = (name or "").strip()
        if not 1 <= len(clean) <= 100:
            return False

        # bool is an int subclass; a float quantity like 2.5 is an OCR artefact
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            return False
        if unit_price <= 0 or quantity < 1 or total_price <= 0:
            return False

        if unit_price > self.max_unit_price or total_price > self.max_total_price:
            logger.debug(f"[ItemValidator] {clean!r} over sanity ceiling "
                         f"(unit={unit_price}, total={total_price})")
            return False

        expected = unit_price * quantity
        if abs(total_price - expected) > self.tolerance(unit_price, quantity):
            logger.debug(f"[ItemValidator] {clean!r} inconsistent: "
                         f"{unit_price} x {quantity} != {total_price}")
            return False

        lowered = clean.lower()
        if any(kw in lowered for kw in AGGREGATE_KEYWORDS):
            return False

        return True


_default_validator = ItemValidator()


def is_valid_item(name: str, unit_price: float, quantity: int, total_price: float) -> bool:
    """Module-level shortcut using the default thresholds."""
    return _default_validator.is_valid_item(name, unit_price, quantity, total_price)
