import pytest

from airgesture.config import Config, ConfigError, load_config, validate_config


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.yaml")
    assert config == Config()
    assert config.classifier.debounce_frames == 3
    assert config.activation.dwell_ms == 700
    assert config.scroll.speed == 7


def test_partial_file_overrides_and_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "app:\n"
        "  mode: scroll\n"
        "scroll:\n"
        "  speed: 3\n"
        "  wobble: true\n"
        "controls:\n"
        "  color_count: 2\n"
    )
    config = load_config(path)
    assert config.app.mode == "scroll"
    assert config.scroll.speed == 3
    assert config.controls.color_count == 2
    assert config.controls.button_size == 80
    assert config.stroke.brush_width == 5


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == Config()


@pytest.mark.parametrize("yaml_text", [
    "app:\n  mode: paint\n",
    "app:\n  control_mode: voice\n",
    "scroll:\n  speed: 11\n",
    "smoothing:\n  engaged_alpha: 0\n",
    "controls:\n  button_size: -5\n",
    "classifier:\n  debounce_frames: 0\n",
    "stroke:\n  min_move: 300\n",
])
def test_invalid_values_raise(tmp_path, yaml_text):
    path = tmp_path / "config.yaml"
    path.write_text(yaml_text)
    with pytest.raises(ConfigError):
        load_config(path)


def test_config_error_is_value_error():
    config = Config()
    config.scroll.speed = 0
    with pytest.raises(ValueError):
        validate_config(config)
