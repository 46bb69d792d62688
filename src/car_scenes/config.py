from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping


DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "auto"
DEFAULT_DATA_PATH = "cars2017.csv"
DEFAULT_OUTPUT_FORMAT = "svg"
DEFAULT_SVG_WIDTH = 800
DEFAULT_SVG_HEIGHT = 500
DEFAULT_MARGINS = (50, 50, 70, 65)
DEFAULT_ANNOTATION_HEIGHT = 140
DEFAULT_TOOLTIP_OFFSET = 10

_VALID_LOG_FORMATS = {"auto", "json", "console"}
_VALID_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}
_VALID_OUTPUT_FORMATS = {"svg", "plotly"}


@dataclass(frozen=True)
class RuntimeConfig:
    log_level: str | int = DEFAULT_LOG_LEVEL
    log_format: str = DEFAULT_LOG_FORMAT
    data_path: str = DEFAULT_DATA_PATH
    output_format: str = DEFAULT_OUTPUT_FORMAT
    svg_width: int = DEFAULT_SVG_WIDTH
    svg_height: int = DEFAULT_SVG_HEIGHT
    margins: tuple[int, int, int, int] = DEFAULT_MARGINS
    annotation_height: int = DEFAULT_ANNOTATION_HEIGHT
    tooltip_offset: int = DEFAULT_TOOLTIP_OFFSET


def normalize_log_level(value: str | int) -> str | int:
    level = str(value).strip().upper()
    if level in _VALID_LOG_LEVELS:
        return level

    # Also allow numeric logging levels.
    try:
        numeric = int(level)
    except ValueError as exc:
        raise ValueError(
            f"Invalid CAR_SCENES_LOG_LEVEL '{value}'. "
            f"Expected one of {sorted(_VALID_LOG_LEVELS)} or a numeric level."
        ) from exc

    if numeric < 0:
        raise ValueError(
            f"Invalid CAR_SCENES_LOG_LEVEL '{value}'. Numeric levels must be >= 0."
        )
    return numeric


def normalize_log_format(value: str) -> str:
    fmt = str(value).strip().lower()
    if fmt not in _VALID_LOG_FORMATS:
        raise ValueError(
            f"Invalid CAR_SCENES_LOG_FORMAT '{value}'. "
            f"Expected one of {sorted(_VALID_LOG_FORMATS)}."
        )
    return fmt


def normalize_output_format(value: str) -> str:
    fmt = str(value).strip().lower()
    if fmt not in _VALID_OUTPUT_FORMATS:
        raise ValueError(
            f"Invalid CAR_SCENES_OUTPUT_FORMAT '{value}'. "
            f"Expected one of {sorted(_VALID_OUTPUT_FORMATS)}."
        )
    return fmt


def parse_positive_int(value: str, *, env_var: str) -> int:
    try:
        parsed = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(f"Invalid {env_var} '{value}'. Expected a positive integer.") from exc
    if parsed <= 0:
        raise ValueError(f"Invalid {env_var} '{value}'. Value must be > 0.")
    return parsed


def parse_non_negative_int(value: str, *, env_var: str) -> int:
    try:
        parsed = int(str(value).strip())
    except ValueError as exc:
        raise ValueError(
            f"Invalid {env_var} '{value}'. Expected a non-negative integer."
        ) from exc
    if parsed < 0:
        raise ValueError(f"Invalid {env_var} '{value}'. Value must be >= 0.")
    return parsed


def parse_margins(value: str, *, env_var: str) -> tuple[int, int, int, int]:
    parts = [item.strip() for item in str(value).split(",")]
    if len(parts) != 4:
        raise ValueError(
            f"Invalid {env_var} '{value}'. Expected four comma-separated integers "
            "(top,right,bottom,left)."
        )
    top, right, bottom, left = (parse_non_negative_int(part, env_var=env_var) for part in parts)
    return top, right, bottom, left


def validate_plot_area(
    svg_width: int, svg_height: int, margins: tuple[int, int, int, int]
) -> None:
    top, right, bottom, left = margins
    if svg_width - left - right <= 0 or svg_height - top - bottom <= 0:
        raise ValueError(
            f"Margins {margins} leave no plot area inside a {svg_width}x{svg_height} surface."
        )


def load_runtime_config(env: Mapping[str, str] | None = None) -> RuntimeConfig:
    source = env if env is not None else os.environ

    log_level = normalize_log_level(source.get("CAR_SCENES_LOG_LEVEL", DEFAULT_LOG_LEVEL))
    log_format = normalize_log_format(source.get("CAR_SCENES_LOG_FORMAT", DEFAULT_LOG_FORMAT))
    data_path = source.get("CAR_SCENES_DATA_PATH", DEFAULT_DATA_PATH).strip()
    if not data_path:
        raise ValueError("CAR_SCENES_DATA_PATH must not be empty.")
    output_format = normalize_output_format(
        source.get("CAR_SCENES_OUTPUT_FORMAT", DEFAULT_OUTPUT_FORMAT)
    )
    svg_width = parse_positive_int(
        source.get("CAR_SCENES_SVG_WIDTH", str(DEFAULT_SVG_WIDTH)),
        env_var="CAR_SCENES_SVG_WIDTH",
    )
    svg_height = parse_positive_int(
        source.get("CAR_SCENES_SVG_HEIGHT", str(DEFAULT_SVG_HEIGHT)),
        env_var="CAR_SCENES_SVG_HEIGHT",
    )
    margins = parse_margins(
        source.get("CAR_SCENES_MARGINS", ",".join(str(m) for m in DEFAULT_MARGINS)),
        env_var="CAR_SCENES_MARGINS",
    )
    validate_plot_area(svg_width, svg_height, margins)
    annotation_height = parse_positive_int(
        source.get("CAR_SCENES_ANNOTATION_HEIGHT", str(DEFAULT_ANNOTATION_HEIGHT)),
        env_var="CAR_SCENES_ANNOTATION_HEIGHT",
    )
    tooltip_offset = parse_non_negative_int(
        source.get("CAR_SCENES_TOOLTIP_OFFSET", str(DEFAULT_TOOLTIP_OFFSET)),
        env_var="CAR_SCENES_TOOLTIP_OFFSET",
    )

    return RuntimeConfig(
        log_level=log_level,
        log_format=log_format,
        data_path=data_path,
        output_format=output_format,
        svg_width=svg_width,
        svg_height=svg_height,
        margins=margins,
        annotation_height=annotation_height,
        tooltip_offset=tooltip_offset,
    )
