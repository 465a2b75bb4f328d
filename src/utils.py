"""
Utility functions for receipt parsing: configuration, logging, image checks
"""

import os
import copy
from typing import Dict, List, Tuple, Optional
from pathlib import Path

import yaml
from loguru import logger
from PIL import Image, UnidentifiedImageError


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "ocr_config.yaml"

DEFAULT_CONFIG: Dict = {
    'ocr': {
        'use_gpu': False,
        'use_angle_cls': True,
        'det_db_thresh': 0.15,
        'det_db_unclip_ratio': 1.2,
        'drop_score': 0.25,
        'det_limit_side_len': 2560,
        'rec_batch_num': 6,
        'use_space_char': True,
    },
    'recognition': {
        'language_hint': 'ch',              # PaddleOCR Chinese model also reads English
        'retry_confidence_threshold': 60,
    },
    'validation': {
        'max_unit_price': 10000,
        'max_total_price': 100000,
        'min_tolerance': 0.01,
        'relative_tolerance': 0.05,
    },
    'totals': {
        'max_declared_total': 100000,
    },
    'upload': {
        'upload_dir': 'data/uploads',
        'allowed_extensions': ['.jpg', '.jpeg', '.png', '.webp', '.bmp', '.tiff'],
    },
}


def load_config(config_path: Optional[str] = None) -> Dict:
    """
    Load configuration from YAML file, merged section by section over the defaults

    Args:
        config_path: Path to YAML file (default: config/ocr_config.yaml)

    Returns:
        Configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not os.path.exists(config_path):
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return config

    with open(config_path, 'r', encoding='utf-8') as f:
        loaded = yaml.safe_load(f) or {}

    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values

    return config


def validate_image_file(file_path: str, allowed_extensions: Optional[List[str]] = None) -> Tuple[bool, str]:
    """
    Validate if file is a readable image

    Args:
        file_path: Path to file
        allowed_extensions: List of allowed extensions (default: common image formats)

    Returns:
        (is_valid, message)
    """
    if allowed_extensions is None:
        allowed_extensions = DEFAULT_CONFIG['upload']['allowed_extensions']

    if not os.path.exists(file_path):
        return False, "File not found"

    ext = os.path.splitext(file_path)[1].lower()
    if ext not in allowed_extensions:
        return False, f"Invalid extension: {ext}. Allowed: {allowed_extensions}"

    # Don't trust the extension alone
    try:
        with Image.open(file_path) as img:
            img.verify()
    except (UnidentifiedImageError, OSError) as e:
        return False, f"Not a readable image: {e}"

    return True, "Valid image file"


def ensure_directory(dir_path: str) -> str:
    """
    Ensure directory exists, create if it doesn't

    Returns:
        Absolute path to directory
    """
    path = Path(dir_path)
    path.mkdir(parents=True, exist_ok=True)
    return str(path.absolute())


def setup_logging(log_file: str = "logs/receipt_parser.log", level: str = "INFO"):
    """
    Setup logging configuration

    Args:
        log_file: Path to log file
        level: Log level (DEBUG, INFO, WARNING, ERROR)
    """
    import sys

    # Remove default handler
    logger.remove()

    logger.add(
        sys.stdout,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>",
        level=level
    )

    ensure_directory(os.path.dirname(log_file) or ".")
    logger.add(
        log_file,
        rotation="10 MB",
        retention="30 days",
        level=level,
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    )

    logger.info("Logging initialized")
