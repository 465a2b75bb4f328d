"""
Tests for configuration loading and image validation
"""

from PIL import Image

from utils import DEFAULT_CONFIG, ensure_directory, load_config, validate_image_file


def test_load_config_missing_file_uses_defaults(tmp_path):
    config = load_config(str(tmp_path / "nope.yaml"))
    assert config == DEFAULT_CONFIG
    assert config is not DEFAULT_CONFIG


def test_load_config_merges_sections(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "recognition:\n"
        "  retry_confidence_threshold: 75\n"
        "validation:\n"
        "  max_unit_price: 500\n",
        encoding="utf-8",
    )
    config = load_config(str(path))

    assert config["recognition"]["retry_confidence_threshold"] == 75
    assert config["recognition"]["language_hint"] == "ch"
    assert config["validation"]["max_unit_price"] == 500
    assert config["validation"]["relative_tolerance"] == 0.05
    # defaults untouched
    assert DEFAULT_CONFIG["validation"]["max_unit_price"] == 10000


def test_load_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(str(path)) == DEFAULT_CONFIG


def test_repository_config_loads():
    config = load_config()
    assert config["recognition"]["retry_confidence_threshold"] == 60
    assert config["totals"]["max_declared_total"] == 100000


def test_validate_image_file(tmp_path):
    img_path = tmp_path / "receipt.png"
    Image.new("RGB", (50, 50), "white").save(img_path)
    assert validate_image_file(str(img_path)) == (True, "Valid image file")


def test_validate_image_file_missing(tmp_path):
    is_valid, msg = validate_image_file(str(tmp_path / "missing.png"))
    assert is_valid is False
    assert "not found" in msg.lower()


def test_validate_image_file_bad_extension(tmp_path):
    path = tmp_path / "receipt.txt"
    path.write_text("hello")
    is_valid, msg = validate_image_file(str(path))
    assert is_valid is False
    assert "extension" in msg.lower()


def test_validate_image_file_not_an_image(tmp_path):
    path = tmp_path / "receipt.jpg"
    path.write_bytes(b"\x00\x01garbage")
    is_valid, _ = validate_image_file(str(path))
    assert is_valid is False


def test_ensure_directory(tmp_path):
    target = tmp_path / "a" / "b"
    result = ensure_directory(str(target))
    assert target.is_dir()
    assert result == str(target.absolute())
