"""
Extractor package — receipt transcript parsing.

  line_classifier      noise-line detection
  item_validator       acceptance gate for candidate items
  line_item_extractor  ordered A/B/C extraction strategies
  total_extractor      declared total vs. item summation

Usage
-----
from extractor import ReceiptTextParser
parser = ReceiptTextParser()
items, total = parser.parse(lines)
"""

from extractor.item_validator import ItemValidator, is_valid_item
from extractor.line_classifier import is_noise_line
from extractor.line_item_extractor import LineItemExtractor, extract_items
from extractor.parser import ReceiptTextParser
from extractor.total_extractor import TotalExtractor, extract_total

__all__ = [
    "ReceiptTextParser",
    "ItemValidator",
    "LineItemExtractor",
    "TotalExtractor",
    "is_noise_line",
    "is_valid_item",
    "extract_items",
    "extract_total",
]
