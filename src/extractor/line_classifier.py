"""
Line Classifier
===============
Decides whether a transcript line is noise (header, store identity, date,
cashier, aggregate row, courtesy closing, separator, loyalty) and must be
kept out of item extraction.

Runs before extraction so that "合计 32.50" can never be read as an item
even though it matches the name + price pattern.
"""

import re
from typing import List, Set

from loguru import logger


# English keywords must end on a word boundary ("Totally Tea" is an item);
# CJK keywords are plain prefixes because Python treats ideographs as \w.
def _prefix(cjk: str, latin: str) -> re.Pattern:
    return re.compile(rf'^(?:(?:{cjk})|(?:{latin})\b)', re.IGNORECASE)


# ─── Noise categories (any match → noise) ─────────────────────────────────────

NOISE_CATEGORIES: List[tuple] = [
    ("document_header", _prefix(r'收据|发票|小票', r'receipt|invoice|ticket')),
    ("store_identity",  _prefix(r'店名|商店|超市|店铺|门店|地址|电话',
                                r'store|shop|address|tel|phone')),
    ("timestamp",       _prefix(r'日期|时间', r'date|time')),
    ("timestamp",       re.compile(r'^\d{4}[-/.]\d{1,2}[-/.]\d{1,2}')),   # 2024-01-15
    ("timestamp",       re.compile(r'^\d{1,2}:\d{2}(?::\d{2})?\b')),      # 14:32 / 14:32:05
    ("cashier",         _prefix(r'收银员|收银|操作员', r'cashier|operator')),
    ("aggregate",       _prefix(r'合计|总计|小计|总额|应收|实收|找零',
                                r'sub\s*total|total|change|amount\s+due|balance')),
    ("courtesy",        _prefix(r'谢谢|欢迎', r'thank|welcome')),
    ("separator",       re.compile(r'^[-=*_]{3,}')),
    ("loyalty",         _prefix(r'会员|积分', r'member|points|loyalty')),
]


def noise_category(line: str) -> str:
    """Name of the first matching noise category, or '' for a candidate line."""
    s = line.strip()
    for name, pattern in NOISE_CATEGORIES:
        if pattern.search(s):
            return name
    return ""


def is_noise_line(line: str) -> bool:
    return bool(noise_category(line))


def candidate_indices(lines: List[str]) -> Set[int]:
    """Indices of lines that are NOT noise, i.e. eligible for item extraction."""
    keep = {i for i, line in enumerate(lines) if not is_noise_line(line)}
    logger.debug(f"[LineClassifier] {len(lines) - len(keep)}/{len(lines)} lines flagged as noise")
    return keep
