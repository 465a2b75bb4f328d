"""
OCR Engine for Receipt Text Recognition
Uses PaddleOCR for text detection and recognition

Implements the recognition contract consumed by ReceiptProcessor:

    recognize(image_path, language_hint) -> RawRecognitionResult

The transcript is the recognized lines joined with newlines, and the
confidence is the mean line score scaled to 0-100.
"""

import os
import time
from typing import Dict, List, Optional

import numpy as np
from loguru import logger

# Fix for Windows OneDNN compatibility issue
os.environ['FLAGS_use_mkldnn'] = 'False'
os.environ['FLAGS_enable_new_ir'] = 'False'

from recognition import RawRecognitionResult, RecognitionError
from utils import load_config, validate_image_file


def _import_paddleocr():
    """Import PaddleOCR on first use; the parser and API run without the ocr extra"""
    try:
        from paddleocr import PaddleOCR
    except ImportError as e:
        logger.error(f"Missing dependency: {e}")
        logger.info("Install with: pip install 'receipt-line-parser[ocr]'")
        raise RecognitionError(f"PaddleOCR is not installed: {e}") from e
    return PaddleOCR


class OCREngine:
    """
    Receipt OCR Engine powered by PaddleOCR

    One PaddleOCR model is built lazily per language hint and reused.
    """

    def __init__(self, config_path: Optional[str] = None, config: Optional[Dict] = None):
        self.config = config if config is not None else load_config(config_path)
        self._models: Dict[str, object] = {}

    def _get_model(self, language_hint: str):
        """Initialize PaddleOCR for a language on first use"""
        if language_hint in self._models:
            return self._models[language_hint]

        ocr_config = self.config.get('ocr', {})
        init_params = {
            'use_angle_cls': ocr_config.get('use_angle_cls', True),
            'lang': language_hint,
            'use_gpu': ocr_config.get('use_gpu', False),
            'det_db_thresh': ocr_config.get('det_db_thresh', 0.15),
            'rec_batch_num': ocr_config.get('rec_batch_num', 6),
            'drop_score': ocr_config.get('drop_score', 0.25),
            'use_space_char': ocr_config.get('use_space_char', True),
            'show_log': False
        }
        for key in ('det_db_unclip_ratio', 'det_limit_side_len', 'det_db_box_thresh',
                    'use_dilation', 'det_db_score_mode', 'det_limit_type'):
            if key in ocr_config:
                init_params[key] = ocr_config[key]

        paddle_ocr_cls = _import_paddleocr()

        logger.info(f"Initializing PaddleOCR (lang={language_hint}, "
                    f"det_thresh={init_params['det_db_thresh']}, "
                    f"drop_score={init_params['drop_score']})")
        try:
            model = paddle_ocr_cls(**init_params)
        except Exception as e:
            logger.error(f"Failed to initialize PaddleOCR: {e}")
            raise RecognitionError(f"OCR engine initialization failed: {e}") from e

        self._models[language_hint] = model
        logger.success(f"PaddleOCR model loaded for lang={language_hint}")
        return model

    def recognize(self, image_path: str, language_hint: str) -> RawRecognitionResult:
        """
        Recognize the text of one receipt image

        Args:
            image_path: Path to image file
            language_hint: PaddleOCR language code (e.g. 'ch', 'en')

        Returns:
            RawRecognitionResult with newline-joined text and 0-100 confidence

        Raises:
            RecognitionError: image unreadable or OCR engine failure
        """
        allowed = self.config.get('upload', {}).get('allowed_extensions')
        is_valid, msg = validate_image_file(image_path, allowed)
        if not is_valid:
            raise RecognitionError(f"Invalid image: {msg}", image_path)

        model = self._get_model(language_hint)
        logger.info(f"Processing image: {image_path}")
        start_time = time.time()

        try:
            result = model.ocr(image_path, cls=True)
        except Exception as e:
            logger.error(f"OCR extraction failed: {e}")
            raise RecognitionError(f"OCR extraction failed: {e}", image_path) from e

        if not result or not result[0]:
            logger.warning(f"No text detected in {image_path}")
            return RawRecognitionResult(text="", confidence=0.0)

        lines = self._parse_ocr_result(result[0])
        text = "\n".join(line['text'] for line in lines)
        confidence = round(float(np.mean([line['confidence'] for line in lines])) * 100, 2)

        processing_time = int((time.time() - start_time) * 1000)
        logger.info(f"Extracted {len(lines)} lines in {processing_time}ms  conf={confidence:.2f}")

        return RawRecognitionResult(text=text, confidence=confidence)

    def _parse_ocr_result(self, result: List) -> List[Dict]:
        """Parse PaddleOCR result: [[bbox, (text, score)], ...]"""
        return [
            {'text': line[1][0], 'confidence': float(line[1][1])}
            for line in result
        ]
