"""
Line Item Extractor
===================
Walks the transcript lines in print order and, for every line that is not
noise, tries the extraction strategies below in priority order. The first
candidate accepted by the ItemValidator wins; a line contributes at most
one item, and a line where every strategy fails contributes nothing.

Strategies
----------
  A  : single line, full record     "苹果 5.00 2 10.00"
  B  : single line, name + price    "可乐 ¥3.5"   (quantity from a neighbour
                                                  line such as "数量 x2";
                                                  first price after the name)
  C  : two lines, name then price   "Whole Milk" → "¥12.00"
"""

import re
from typing import Callable, Iterable, List, Optional

from loguru import logger

from extractor.item_validator import ItemValidator
from extractor.line_classifier import candidate_indices
from recognition import LineItem


# ─── Patterns ─────────────────────────────────────────────────────────────────

_NUM = r'(\d+(?:\.\d+)?)'

_FULL_RECORD  = re.compile(rf'^(.+?)\s+{_NUM}\s+(\d+)\s+{_NUM}$')
# first price after the name; any further tokens on the line must be numeric
_NAME_PRICE   = re.compile(rf'^(.+?)\s+[¥￥]?{_NUM}(?:\s+[¥￥]?-?\d+(?:\.\d+)?)*$')
_NAME_ENDS_IN_NUMBER = re.compile(r'\s[-+]?[¥￥]?\d+(?:\.\d+)?$')
_BARE_AMOUNT  = re.compile(rf'^[¥￥$]?\s*{_NUM}\s*元?$')
_QTY_MARKER   = re.compile(r'(?:quantity|qty|数量|(?<![a-z])[x×])\s*[:：]?\s*(\d+)', re.IGNORECASE)
_HAS_LETTER   = re.compile(r'[^\W\d_]')      # any letter, CJK ideographs included
_NUMERIC_ONLY = re.compile(r'^[\d\s.,¥￥$]+$')


Strategy = Callable[[List[str], int, ItemValidator], Optional[LineItem]]


# ─── Helpers ──────────────────────────────────────────────────────────────────

def quantity_marker(line: str) -> Optional[int]:
    """Integer following quantity/qty/数量/x/× on the line, if any."""
    m = _QTY_MARKER.search(line)
    return int(m.group(1)) if m else None


def neighbour_quantity(lines: List[str], i: int) -> int:
    """Previous line's marker wins over the next line's; default 1."""
    if i > 0:
        qty = quantity_marker(lines[i - 1])
        if qty is not None:
            return qty
    if i + 1 < len(lines):
        qty = quantity_marker(lines[i + 1])
        if qty is not None:
            return qty
    return 1


def looks_like_name(line: str) -> bool:
    s = line.strip()
    if not 2 <= len(s) <= 50:
        return False
    if _NUMERIC_ONLY.match(s) or quantity_marker(s) is not None:
        return False
    return bool(_HAS_LETTER.search(s))


def bare_amount(line: str) -> Optional[float]:
    m = _BARE_AMOUNT.match(line.strip())
    return float(m.group(1)) if m else None


# ─── Strategies ───────────────────────────────────────────────────────────────

def full_record(lines: List[str], i: int, validator: ItemValidator) -> Optional[LineItem]:
    """A: name, unit price, integer quantity and line total on one line."""
    m = _FULL_RECORD.match(lines[i])
    if not m:
        return None
    name = m.group(1).strip()
    unit_price = float(m.group(2))
    quantity = int(m.group(3))
    total_price = float(m.group(4))
    if not validator.is_valid_item(name, unit_price, quantity, total_price):
        return None
    return LineItem(name, unit_price, quantity, total_price)


def name_price(lines: List[str], i: int, validator: ItemValidator) -> Optional[LineItem]:
    """B: name + price on one line, quantity looked up on the neighbours."""
    m = _NAME_PRICE.match(lines[i])
    if not m:
        return None
    name = m.group(1).strip()
    if _NAME_ENDS_IN_NUMBER.search(name):
        return None
    unit_price = float(m.group(2))
    quantity = neighbour_quantity(lines, i)
    total_price = round(unit_price * quantity, 2)
    if not validator.is_valid_item(name, unit_price, quantity, total_price):
        return None
    return LineItem(name, unit_price, quantity, total_price)


def two_line_pair(lines: List[str], i: int, validator: ItemValidator) -> Optional[LineItem]:
    """C: plausible product name followed by a line holding only an amount."""
    if i + 1 >= len(lines) or not looks_like_name(lines[i]):
        return None
    price = bare_amount(lines[i + 1])
    if price is None:
        return None
    name = lines[i].strip()
    if not validator.is_valid_item(name, price, 1, price):
        return None
    return LineItem(name, price, 1, price)


STRATEGIES: List[Strategy] = [full_record, name_price, two_line_pair]


# ─── Extractor ────────────────────────────────────────────────────────────────

class LineItemExtractor:
    """Runs STRATEGIES top-down over each candidate line."""

    def __init__(self, validator: Optional[ItemValidator] = None,
                 strategies: Optional[List[Strategy]] = None):
        self.validator = validator or ItemValidator()
        self.strategies = list(strategies) if strategies is not None else list(STRATEGIES)

    def extract(self, lines: List[str], candidates: Optional[Iterable[int]] = None) -> List[LineItem]:
        lines = [line.strip() for line in lines]
        allowed = set(candidates) if candidates is not None else candidate_indices(lines)

        items: List[LineItem] = []
        for i in range(len(lines)):
            if i not in allowed:
                continue
            item = self._extract_line(lines, i)
            if item is not None:
                items.append(item)

        logger.debug(f"[LineItemExtractor] {len(items)} items from {len(allowed)} candidate lines")
        return items

    def _extract_line(self, lines: List[str], i: int) -> Optional[LineItem]:
        for strategy in self.strategies:
            item = strategy(lines, i, self.validator)
            if item is not None:
                logger.debug(f"[LineItemExtractor] line {i} via {strategy.__name__}: {item}")
                return item
        return None


def extract_items(lines: List[str], candidates: Optional[Iterable[int]] = None) -> List[LineItem]:
    return LineItemExtractor().extract(lines, candidates)
