"""Tests for configuration loading and validation."""

import pytest
import yaml

from snaptext.config import SnaptextConfig, load_config
from snaptext.errors import ConfigError
from snaptext.preprocess.model import PreprocessConfig


def test_default_config():
    """Test default configuration values."""
    config = SnaptextConfig()

    assert config.lang == "eng"
    assert config.recognition_timeout == 30.0
    assert config.capture_dir == "captures"
    assert config.camera_index == 0
    assert config.mime_filter == "image/*"
    assert config.ocr_workers == 1
    assert config.preprocess == PreprocessConfig()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"lang": ""},
        {"recognition_timeout": 0},
        {"recognition_timeout": -1.5},
        {"camera_index": -1},
        {"mime_filter": "image"},
        {"ocr_workers": 0},
    ],
)
def test_invalid_values_raise_config_error(kwargs):
    """Test each invalid field is rejected."""
    with pytest.raises(ConfigError):
        SnaptextConfig(**kwargs)


def test_config_error_is_a_value_error():
    """Test callers catching ValueError still see config problems."""
    with pytest.raises(ValueError):
        SnaptextConfig(ocr_workers=0)


def test_from_dict_builds_nested_preprocess():
    """Test the preprocess section becomes a PreprocessConfig."""
    config = SnaptextConfig.from_dict(
        {"lang": "eng+deu", "preprocess": {"contrast": 1.5, "grayscale": True}}
    )

    assert config.lang == "eng+deu"
    assert config.preprocess.contrast == 1.5
    assert config.preprocess.grayscale is True


def test_from_dict_rejects_unknown_keys():
    """Test typos in the config file are reported."""
    with pytest.raises(ConfigError, match="langs"):
        SnaptextConfig.from_dict({"langs": "eng"})


def test_from_dict_wraps_preprocess_errors():
    """Test invalid preprocess values surface as ConfigError."""
    with pytest.raises(ConfigError, match="contrast"):
        SnaptextConfig.from_dict({"preprocess": {"contrast": 0}})

    with pytest.raises(ConfigError):
        SnaptextConfig.from_dict({"preprocess": {"sharpen": True}})


def test_with_overrides_skips_none():
    """Test only provided overrides are applied."""
    config = SnaptextConfig().with_overrides(lang="fra", camera_index=None)

    assert config.lang == "fra"
    assert config.camera_index == 0


def test_with_overrides_validates():
    """Test overrides go through the same validation."""
    with pytest.raises(ConfigError):
        SnaptextConfig().with_overrides(camera_index=-2)


def test_load_config_from_yaml(tmp_path):
    """Test loading config from a YAML file."""
    config_path = tmp_path / "snaptext.yaml"
    config_data = {
        "lang": "eng",
        "recognition_timeout": 12.5,
        "capture_dir": str(tmp_path / "shots"),
        "preprocess": {"upscale_factor": 2.0},
    }
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)

    config = load_config(config_path)

    assert config.recognition_timeout == 12.5
    assert config.capture_dir == str(tmp_path / "shots")
    assert config.preprocess.upscale_factor == 2.0
    assert config.camera_index == 0  # Default


def test_load_config_null_timeout_disables_it(tmp_path):
    """Test an explicit null timeout means wait forever."""
    config_path = tmp_path / "snaptext.yaml"
    config_path.write_text("recognition_timeout: null\n")

    assert load_config(config_path).recognition_timeout is None


def test_load_empty_config_gives_defaults(tmp_path):
    """Test an empty file is the same as no settings."""
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("")

    assert load_config(config_path) == SnaptextConfig()


def test_load_config_missing_file(tmp_path):
    """Test a missing file is a ConfigError."""
    with pytest.raises(ConfigError, match="Config not found"):
        load_config(tmp_path / "nope.yaml")


def test_load_config_rejects_non_mapping(tmp_path):
    """Test a YAML list at the root is rejected."""
    config_path = tmp_path / "list.yaml"
    config_path.write_text("- eng\n- deu\n")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(config_path)


def test_load_config_rejects_broken_yaml(tmp_path):
    """Test a YAML syntax error is a ConfigError."""
    config_path = tmp_path / "broken.yaml"
    config_path.write_text("lang: [eng\n")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(config_path)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"contrast": 0},
        {"upscale_factor": -1.0},
        {"denoise": True, "denoise_strength": 0},
        {"denoise": True, "denoise_template_window_size": 4},
        {"denoise": True, "denoise_template_window_size": 1},
    ],
)
def test_invalid_preprocess_config(kwargs):
    """Test PreprocessConfig validation."""
    with pytest.raises(ValueError):
        PreprocessConfig(**kwargs)


def test_preprocess_window_size_only_checked_when_denoising():
    """Test denoise parameters are ignored while denoise is off."""
    config = PreprocessConfig(denoise=False, denoise_template_window_size=4)

    assert config.to_kwargs()["denoise_template_window_size"] == 4
