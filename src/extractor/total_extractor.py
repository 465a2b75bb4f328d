"""
Total Extractor
===============
Reconciles the receipt total from two independent sources:

  1. a declared total line ("合计: ¥25.50", "TOTAL 25.50", "¥25.50 合计")
  2. the sum of accepted item totals

The first declared total in document order whose amount lies in
(0, max_declared_total) wins and scanning stops. Only when no line yields
an admissible declared total is the item sum used. The two are never mixed.

Noise lines are scanned too: the declared total line is itself noise.
"""

import re
from typing import Dict, Iterable, List, Optional

from loguru import logger

from recognition import LineItem


# ─── Patterns ─────────────────────────────────────────────────────────────────

_TOTAL_PATTERNS = [
    re.compile(r'(?:合计|总计|total|应收|实收|总额|金额)\s*[:：]?\s*[¥￥]?\s*(\d+(?:\.\d+)?)', re.IGNORECASE),
    re.compile(r'[¥￥](\d+(?:\.\d+)?)\s*(?:合计|总计|total)', re.IGNORECASE),
]

DEFAULT_MAX_DECLARED_TOTAL = 100000.0


class TotalExtractor:

    def __init__(self, max_declared_total: float = DEFAULT_MAX_DECLARED_TOTAL):
        self.max_declared_total = max_declared_total

    @classmethod
    def from_config(cls, config: Optional[Dict]) -> "TotalExtractor":
        section = (config or {}).get("totals") or {}
        return cls(float(section.get("max_declared_total", DEFAULT_MAX_DECLARED_TOTAL)))

    def declared_total(self, lines: Iterable[str]) -> Optional[float]:
        """First admissible labelled amount, or None."""
        for line in lines:
            for pat in _TOTAL_PATTERNS:
                m = pat.search(line)
                if not m:
                    continue
                amount = float(m.group(1))
                if 0 < amount < self.max_declared_total:
                    return amount
                logger.debug(f"[TotalExtractor] ignoring implausible total {amount} in {line.strip()!r}")
        return None

    def extract(self, lines: List[str], items: Iterable[LineItem]) -> float:
        declared = self.declared_total(lines)
        if declared is not None:
            logger.debug(f"[TotalExtractor] declared total {declared}")
            return declared

        summed = sum((item.total_price for item in items), 0.0)
        logger.debug(f"[TotalExtractor] no declared total, summed items → {summed}")
        return summed


def extract_total(lines: List[str], items: Iterable[LineItem]) -> float:
    return TotalExtractor().extract(lines, items)
