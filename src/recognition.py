"""
Recognition data model
======================
Plain value objects passed between the OCR engine, the text parser and
the API layer:

  RawRecognitionResult   text + confidence (0-100) from one OCR call
  LineItem               one accepted receipt row
  ParseResult            ordered items + reconciled total for one receipt

RecognitionError is the only error the parsing pipeline surfaces. It is
raised by the OCR engine and never caught by the orchestrator.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


class RecognitionError(Exception):
    """OCR engine failed or the image could not be read."""

    def __init__(self, message: str, image_path: Optional[str] = None):
        super().__init__(message)
        self.image_path = image_path


@dataclass(frozen=True)
class RawRecognitionResult:
    text: str
    confidence: float


@dataclass(frozen=True)
class LineItem:
    name: str
    unit_price: float
    quantity: int
    total_price: float

    def to_dict(self) -> Dict:
        return {
            "name":        self.name,
            "unit_price":  self.unit_price,
            "quantity":    self.quantity,
            "total_price": self.total_price,
        }


@dataclass(frozen=True)
class ParseResult:
    """Final output of one parse request. `items` keeps receipt print order."""
    items: Tuple[LineItem, ...] = field(default_factory=tuple)
    total_amount: float = 0.0
    raw_text: str = ""
    confidence: float = 0.0

    @property
    def item_count(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict:
        return {
            "raw_text":     self.raw_text,
            "items":        [item.to_dict() for item in self.items],
            "total_amount": self.total_amount,
            "confidence":   self.confidence,
            "item_count":   self.item_count,
        }
