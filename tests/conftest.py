"""
Shared fixtures for receipt parser tests
"""

import sys
from pathlib import Path

import pytest

# Add src (modules) and repo root (main.py) to path
ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from recognition import RawRecognitionResult, RecognitionError  # noqa: E402
from utils import DEFAULT_CONFIG  # noqa: E402


class FakeEngine:
    """Scripted recognition engine: returns (or raises) queued results in order."""

    def __init__(self, *results):
        self.results = list(results)
        self.calls = []

    def recognize(self, image_path, language_hint):
        self.calls.append((image_path, language_hint))
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def fake_engine_factory():
    return FakeEngine


@pytest.fixture
def config():
    import copy
    return copy.deepcopy(DEFAULT_CONFIG)


@pytest.fixture
def supermarket_text():
    return """
        超市购物小票
        商品名称    单价   数量   总价
        苹果       5.00    2    10.00
        香蕉       3.50    3    10.50
        牛奶      12.00    1    12.00
        合计                   32.50
    """


@pytest.fixture
def convenience_text():
    return """
        便利店收据
        可乐 ¥3.5
        数量 x2
        面包 ¥8.0
        总计 ¥15.0
    """


@pytest.fixture
def noise_only_text():
    return """
        收据
        店名：好又多超市
        地址：人民路88号
        电话：021-5555-1234
        日期：2024-01-15
        14:32:05
        收银员：王芳
        ----------------
        合计: 0
        会员积分 120
        谢谢惠顾
    """


@pytest.fixture
def recognition_error():
    return RecognitionError("OCR extraction failed: engine crashed", "/fake/receipt.jpg")


@pytest.fixture
def raw():
    return RawRecognitionResult
