"""
Receipt Text Parser
===================
Composes the extraction stages over one transcript:

  split lines → LineClassifier → LineItemExtractor → TotalExtractor

Pure and total over any input string: nothing here raises for bad text,
an empty or all-noise transcript simply yields no items and a zero total.
"""

from typing import Dict, List, Optional, Tuple

from loguru import logger

from extractor.item_validator import ItemValidator
from extractor.line_classifier import candidate_indices
from extractor.line_item_extractor import LineItemExtractor
from extractor.total_extractor import TotalExtractor
from recognition import LineItem, ParseResult


def split_lines(text: str) -> List[str]:
    """Trimmed, non-blank transcript lines in print order."""
    return [line.strip() for line in (text or "").splitlines() if line.strip()]


class ReceiptTextParser:

    def __init__(
        self,
        validator: Optional[ItemValidator] = None,
        total_extractor: Optional[TotalExtractor] = None,
    ):
        self.item_extractor = LineItemExtractor(validator or ItemValidator())
        self.total_extractor = total_extractor or TotalExtractor()

    @classmethod
    def from_config(cls, config: Optional[Dict]) -> "ReceiptTextParser":
        return cls(ItemValidator.from_config(config), TotalExtractor.from_config(config))

    def parse(self, lines: List[str]) -> Tuple[List[LineItem], float]:
        if not lines:
            return [], 0.0
        candidates = candidate_indices(lines)
        items = self.item_extractor.extract(lines, candidates)
        total = self.total_extractor.extract(lines, items)
        return items, total

    def parse_text(self, text: str, confidence: float) -> ParseResult:
        lines = split_lines(text)
        items, total = self.parse(lines)

        logger.info(
            f"[ReceiptTextParser] lines={len(lines)} items={len(items)} "
            f"total={total!r} confidence={confidence}"
        )
        return ParseResult(
            items=tuple(items),
            total_amount=total,
            raw_text=text,
            confidence=confidence,
        )
