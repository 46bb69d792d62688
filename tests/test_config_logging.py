from __future__ import annotations

import io

import pytest

from car_scenes.config import (
    DEFAULT_LOG_FORMAT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MARGINS,
    DEFAULT_OUTPUT_FORMAT,
    DEFAULT_SVG_WIDTH,
    RuntimeConfig,
    load_runtime_config,
)
from car_scenes.drawing import Layout
from car_scenes.logging_config import configure_logging, get_logger, log_event, resolve_log_format


def test_load_runtime_config_defaults() -> None:
    config = load_runtime_config({})
    assert isinstance(config, RuntimeConfig)
    assert config.log_level == DEFAULT_LOG_LEVEL
    assert config.log_format == DEFAULT_LOG_FORMAT
    assert config.output_format == DEFAULT_OUTPUT_FORMAT
    assert config.svg_width == DEFAULT_SVG_WIDTH
    assert config.margins == DEFAULT_MARGINS


def test_load_runtime_config_reads_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CAR_SCENES_OUTPUT_FORMAT", "PLOTLY")
    monkeypatch.setenv("CAR_SCENES_SVG_WIDTH", "1000")
    config = load_runtime_config()
    assert config.output_format == "plotly"
    assert config.svg_width == 1000


def test_load_runtime_config_invalid_log_format() -> None:
    with pytest.raises(ValueError, match="CAR_SCENES_LOG_FORMAT"):
        load_runtime_config({"CAR_SCENES_LOG_FORMAT": "invalid-format"})


def test_load_runtime_config_invalid_output_format() -> None:
    with pytest.raises(ValueError, match="CAR_SCENES_OUTPUT_FORMAT"):
        load_runtime_config({"CAR_SCENES_OUTPUT_FORMAT": "png"})


def test_load_runtime_config_invalid_width() -> None:
    with pytest.raises(ValueError, match="CAR_SCENES_SVG_WIDTH"):
        load_runtime_config({"CAR_SCENES_SVG_WIDTH": "0"})


def test_load_runtime_config_margins_parsing() -> None:
    config = load_runtime_config({"CAR_SCENES_MARGINS": "10, 20, 30, 40"})
    assert config.margins == (10, 20, 30, 40)
    layout = Layout.from_config(config)
    assert layout.plot_width == DEFAULT_SVG_WIDTH - 20 - 40
    assert layout.margin_left == 40


def test_load_runtime_config_rejects_malformed_margins() -> None:
    with pytest.raises(ValueError, match="CAR_SCENES_MARGINS"):
        load_runtime_config({"CAR_SCENES_MARGINS": "10,20,30"})
    with pytest.raises(ValueError, match="CAR_SCENES_MARGINS"):
        load_runtime_config({"CAR_SCENES_MARGINS": "10,20,-1,40"})


def test_load_runtime_config_rejects_margins_without_plot_area() -> None:
    with pytest.raises(ValueError, match="no plot area"):
        load_runtime_config({"CAR_SCENES_SVG_WIDTH": "100", "CAR_SCENES_MARGINS": "0,50,0,50"})


def test_load_runtime_config_accepts_numeric_log_level() -> None:
    config = load_runtime_config({"CAR_SCENES_LOG_LEVEL": "20"})
    assert config.log_level == 20


def test_load_runtime_config_rejects_negative_log_level() -> None:
    with pytest.raises(ValueError, match="CAR_SCENES_LOG_LEVEL"):
        load_runtime_config({"CAR_SCENES_LOG_LEVEL": "-5"})


def test_default_layout_matches_default_config() -> None:
    layout = Layout.from_config(load_runtime_config({}))
    assert layout == Layout()
    assert layout.plot_width == 685
    assert layout.plot_height == 380


def test_resolve_log_format_auto_non_tty_is_json() -> None:
    stream = io.StringIO()
    assert resolve_log_format("auto", stream=stream) == "json"


def test_resolve_log_format_auto_tty_is_console() -> None:
    class _TtyBuffer(io.StringIO):
        def isatty(self) -> bool:
            return True

    assert resolve_log_format("auto", stream=_TtyBuffer()) == "console"


def test_resolve_log_format_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="Invalid log format"):
        resolve_log_format("xml")


def test_configure_logging_accepts_json_and_console() -> None:
    assert configure_logging("INFO", "json") == "json"
    assert configure_logging("INFO", "console") == "console"


def test_configure_logging_accepts_numeric_level() -> None:
    assert configure_logging("20", "json") == "json"
    assert configure_logging(20, "json") == "json"


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging("LOUD", "json")


def test_log_event_emits_without_error() -> None:
    configure_logging("INFO", "json")
    logger = get_logger("test-config-logging")
    log_event(logger, "info", "config_logging_test", key="value", count=1)
