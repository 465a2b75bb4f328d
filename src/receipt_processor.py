"""
Receipt Processing Pipeline
Runs OCR on a receipt image and parses the transcript into line items

Workflow:
1. Recognize text (first pass)
2. If confidence is below the retry threshold, recognize once more
3. Parse the first pass transcript into items + reconciled total
"""

import sys
from typing import Dict, List, Optional

from loguru import logger

from extractor import ReceiptTextParser
from recognition import ParseResult, RawRecognitionResult
from utils import load_config, setup_logging


class ReceiptProcessor:
    """
    End-to-end receipt parsing

    `engine` is anything with recognize(image_path, language_hint) returning
    a RawRecognitionResult; defaults to the PaddleOCR-backed OCREngine.
    Holds no per-request state, so one instance can serve concurrent requests.
    """

    def __init__(self, engine=None, config_path: Optional[str] = None, config: Optional[Dict] = None):
        logger.info("Initializing Receipt Processor")
        self.config = config if config is not None else load_config(config_path)

        if engine is None:
            from ocr_engine import OCREngine
            engine = OCREngine(config=self.config)
        self.engine = engine

        recognition = self.config.get('recognition', {})
        self.language_hint = recognition.get('language_hint', 'ch')
        self.retry_threshold = float(recognition.get('retry_confidence_threshold', 60))

        self.parser = ReceiptTextParser.from_config(self.config)

    def recognize(self, image_path: str) -> RawRecognitionResult:
        """
        At most two engine calls. Below the threshold the engine is asked
        again and a strictly higher confidence is adopted, but the transcript
        always stays the first pass's text.

        RecognitionError from either call propagates unchanged.
        """
        first = self.engine.recognize(image_path, self.language_hint)
        if first.confidence >= self.retry_threshold:
            return first

        logger.warning(
            f"Low confidence ({first.confidence:.1f} < {self.retry_threshold:.0f}), "
            f"retrying recognition once"
        )
        retry = self.engine.recognize(image_path, self.language_hint)

        if retry.confidence > first.confidence:
            logger.info(f"Retry confidence better: {retry.confidence:.1f} vs {first.confidence:.1f}")
            # TODO: confirm whether the retry transcript should replace the first one as well
            return RawRecognitionResult(text=first.text, confidence=retry.confidence)

        logger.info(f"First pass confidence kept: {first.confidence:.1f} vs retry {retry.confidence:.1f}")
        return first

    def parse_text(self, text: str, confidence: float) -> ParseResult:
        """Parse an already recognized transcript (no OCR)."""
        return self.parser.parse_text(text, confidence)

    def parse_receipt(self, image_path: str) -> ParseResult:
        """
        Recognize and parse one receipt image

        Args:
            image_path: Path to receipt image

        Returns:
            ParseResult with items, total_amount, raw_text, confidence

        Raises:
            RecognitionError: image unreadable or OCR engine failure
        """
        logger.info(f"Parsing receipt: {image_path}")
        raw = self.recognize(image_path)
        return self.parse_text(raw.text, raw.confidence)


def main(argv: Optional[List[str]] = None):
    """Parse the receipt images given on the command line"""
    setup_logging(level="INFO")
    image_paths = sys.argv[1:] if argv is None else argv

    if not image_paths:
        print("Usage: python receipt_processor.py <receipt image> [...]")
        return

    processor = ReceiptProcessor()

    for image_path in image_paths:
        print("\n" + "=" * 60)
        print(image_path)
        print("=" * 60)

        result = processor.parse_receipt(image_path)

        print(f"Confidence: {result.confidence:.1f}")
        print(f"Items: {result.item_count}")
        for i, item in enumerate(result.items, 1):
            print(f"{i:2d}. {item.name:<30} {item.unit_price:>8.2f} x {item.quantity:<3d} {item.total_price:>9.2f}")
        print("-" * 60)
        print(f"Total: {result.total_amount:.2f}")


if __name__ == "__main__":
    main()
