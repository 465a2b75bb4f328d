"""
Tests for OCR Engine (PaddleOCR replaced by a scripted fake)
"""

import sys

import pytest
from PIL import Image

import ocr_engine
from ocr_engine import OCREngine
from recognition import RawRecognitionResult, RecognitionError


class FakePaddleOCR:
    """Stands in for paddleocr.PaddleOCR; records init params and returns a canned result."""
    instances = []
    result = None
    error = None

    def __init__(self, **params):
        self.params = params
        self.calls = []
        FakePaddleOCR.instances.append(self)

    def ocr(self, image_path, cls=True):
        self.calls.append((image_path, cls))
        if FakePaddleOCR.error is not None:
            raise FakePaddleOCR.error
        return FakePaddleOCR.result


@pytest.fixture
def fake_paddle(monkeypatch):
    FakePaddleOCR.instances = []
    FakePaddleOCR.result = None
    FakePaddleOCR.error = None
    monkeypatch.setattr(ocr_engine, "_import_paddleocr", lambda: FakePaddleOCR)
    return FakePaddleOCR


@pytest.fixture
def engine(fake_paddle, config):
    return OCREngine(config=config)


@pytest.fixture
def sample_image(tmp_path):
    """Create a small white test image"""
    img_path = tmp_path / "test_receipt.png"
    Image.new("RGB", (400, 200), "white").save(img_path)
    return str(img_path)


def _box():
    return [[0, 0], [100, 0], [100, 20], [0, 20]]


def test_recognize_joins_lines_and_scales_confidence(engine, fake_paddle, sample_image):
    fake_paddle.result = [[
        [_box(), ("苹果 5.00 2 10.00", 0.9)],
        [_box(), ("合计 10.00", 0.8)],
    ]]

    result = engine.recognize(sample_image, "ch")

    assert isinstance(result, RawRecognitionResult)
    assert result.text == "苹果 5.00 2 10.00\n合计 10.00"
    assert result.confidence == pytest.approx(85.0)


def test_no_text_found(engine, fake_paddle, sample_image):
    fake_paddle.result = [None]
    result = engine.recognize(sample_image, "ch")
    assert result == RawRecognitionResult("", 0.0)


def test_model_is_built_once_per_language(engine, fake_paddle, sample_image):
    fake_paddle.result = [[[_box(), ("Tea 2.00", 0.99)]]]

    engine.recognize(sample_image, "ch")
    engine.recognize(sample_image, "ch")
    engine.recognize(sample_image, "en")

    assert [inst.params["lang"] for inst in fake_paddle.instances] == ["ch", "en"]
    assert len(fake_paddle.instances[0].calls) == 2
    assert fake_paddle.instances[0].params["show_log"] is False


def test_config_passed_to_paddle(fake_paddle, config, sample_image):
    config["ocr"]["drop_score"] = 0.4
    config["ocr"]["det_db_box_thresh"] = 0.5
    fake_paddle.result = [[[_box(), ("Tea 2.00", 0.99)]]]

    OCREngine(config=config).recognize(sample_image, "ch")

    params = fake_paddle.instances[0].params
    assert params["drop_score"] == 0.4
    assert params["det_db_box_thresh"] == 0.5


def test_missing_image_raises(engine, fake_paddle):
    with pytest.raises(RecognitionError) as exc_info:
        engine.recognize("this_does_not_exist.jpg", "ch")
    assert exc_info.value.image_path == "this_does_not_exist.jpg"
    assert fake_paddle.instances == []


def test_unreadable_image_raises(engine, tmp_path):
    bogus = tmp_path / "receipt.jpg"
    bogus.write_text("not an image")
    with pytest.raises(RecognitionError):
        engine.recognize(str(bogus), "ch")


def test_engine_failure_is_wrapped(engine, fake_paddle, sample_image):
    fake_paddle.error = RuntimeError("inference crashed")
    with pytest.raises(RecognitionError, match="inference crashed"):
        engine.recognize(sample_image, "ch")


def test_missing_paddleocr_raises(monkeypatch, config, sample_image):
    # a None entry in sys.modules makes the import fail
    monkeypatch.setitem(sys.modules, "paddleocr", None)
    with pytest.raises(RecognitionError, match="not installed"):
        OCREngine(config=config).recognize(sample_image, "ch")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
