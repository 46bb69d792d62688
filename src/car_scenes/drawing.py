"""Declarative drawing plans.

Everything here is a pure function of (records, scales, scene, layout) and
returns frozen instruction records. Surfaces in ``surface.py`` apply them.
"""
from __future__ import annotations

import textwrap
from dataclasses import dataclass
from typing import Sequence

from .config import (
    DEFAULT_ANNOTATION_HEIGHT,
    DEFAULT_MARGINS,
    DEFAULT_SVG_HEIGHT,
    DEFAULT_SVG_WIDTH,
    RuntimeConfig,
)
from .ingestion import Record
from .scales import DEFAULT_TICK_COUNT, Scales, format_number
from .scenes import SceneDescriptor


LAYER_AXES = "axes"
LAYER_POINTS = "points"
LAYER_LEGEND = "legend"
LAYER_ANNOTATION = "annotation"
LAYERS = (LAYER_AXES, LAYER_POINTS, LAYER_LEGEND, LAYER_ANNOTATION)

POINT_RADIUS = 5.0

LEGEND_OFFSET_FROM_RIGHT = 180
LEGEND_ROW_HEIGHT = 20
LEGEND_SWATCH_SIZE = 12
LEGEND_SWATCH_RADIUS = 2
LEGEND_LABEL_X = 18
LEGEND_LABEL_Y = 10

ANNOTATION_TOP_OFFSET = 10
ANNOTATION_NOTE_PADDING = 8
ANNOTATION_WRAP_INSET = 100
# Rough average glyph advance for the annotation font, used for wrapping.
ANNOTATION_CHAR_WIDTH = 7.0

X_AXIS_TITLE = "Engine Cylinders (count)"
Y_AXIS_TITLE = "Highway MPG (mpg)"


@dataclass(frozen=True)
class Layout:
    svg_width: int = DEFAULT_SVG_WIDTH
    svg_height: int = DEFAULT_SVG_HEIGHT
    margin_top: int = DEFAULT_MARGINS[0]
    margin_right: int = DEFAULT_MARGINS[1]
    margin_bottom: int = DEFAULT_MARGINS[2]
    margin_left: int = DEFAULT_MARGINS[3]
    annotation_height: int = DEFAULT_ANNOTATION_HEIGHT

    @property
    def plot_width(self) -> int:
        return self.svg_width - self.margin_left - self.margin_right

    @property
    def plot_height(self) -> int:
        return self.svg_height - self.margin_top - self.margin_bottom

    @classmethod
    def from_config(cls, runtime: RuntimeConfig) -> "Layout":
        top, right, bottom, left = runtime.margins
        return cls(
            svg_width=runtime.svg_width,
            svg_height=runtime.svg_height,
            margin_top=top,
            margin_right=right,
            margin_bottom=bottom,
            margin_left=left,
            annotation_height=runtime.annotation_height,
        )


@dataclass(frozen=True)
class PointMark:
    mark_id: str
    record_index: int
    record: Record
    cx: float
    cy: float
    r: float
    fill: str


@dataclass(frozen=True)
class AxisTick:
    value: float
    position: float
    label: str


@dataclass(frozen=True)
class AxisPlan:
    name: str
    orientation: str
    offset_x: float
    offset_y: float
    range: tuple[float, float]
    ticks: tuple[AxisTick, ...]


@dataclass(frozen=True)
class AxisTitle:
    name: str
    text: str
    x: float
    y: float
    rotate: float = 0.0


@dataclass(frozen=True)
class LegendRow:
    index: int
    label: str
    color: str
    x: float
    y: float


@dataclass(frozen=True)
class AnnotationLabel:
    text: str
    lines: tuple[str, ...]
    x: float
    y: float
    wrap_width: float
    padding: float
    show_connector: bool = False
    show_subject: bool = False


def wrap_text(text: str, width_px: float, char_width: float = ANNOTATION_CHAR_WIDTH) -> tuple[str, ...]:
    max_chars = max(1, int(width_px // char_width))
    lines = textwrap.wrap(text, width=max_chars)
    return tuple(lines) if lines else ("",)


def plan_axes(scales: Scales, layout: Layout, tick_count: int = DEFAULT_TICK_COUNT) -> tuple[AxisPlan, AxisPlan]:
    x_ticks = tuple(
        AxisTick(value=v, position=scales.x(v), label=format_number(v, integer=True))
        for v in scales.x.ticks(tick_count)
    )
    y_ticks = tuple(
        AxisTick(value=v, position=scales.y(v), label=format_number(v))
        for v in scales.y.ticks(tick_count)
    )
    x_axis = AxisPlan(
        name="x-axis",
        orientation="bottom",
        offset_x=0.0,
        offset_y=float(layout.plot_height),
        range=scales.x.range,
        ticks=x_ticks,
    )
    y_axis = AxisPlan(
        name="y-axis",
        orientation="left",
        offset_x=0.0,
        offset_y=0.0,
        range=scales.y.range,
        ticks=y_ticks,
    )
    return x_axis, y_axis


def plan_axis_titles(layout: Layout) -> tuple[AxisTitle, AxisTitle]:
    x_title = AxisTitle(
        name="x-title",
        text=X_AXIS_TITLE,
        x=layout.plot_width / 2,
        y=layout.plot_height + (layout.margin_bottom - 10),
    )
    # Rotated -90 degrees, so x runs along the (inverted) vertical axis.
    y_title = AxisTitle(
        name="y-title",
        text=Y_AXIS_TITLE,
        x=-layout.plot_height / 2,
        y=-(layout.margin_left - 15),
        rotate=-90.0,
    )
    return x_title, y_title


def plan_points(
    records: Sequence[Record], scales: Scales, scene: SceneDescriptor
) -> tuple[PointMark, ...]:
    marks = []
    for index, record in enumerate(records):
        cx, cy = scales.position(record)
        marks.append(
            PointMark(
                mark_id=f"point-{index}",
                record_index=index,
                record=record,
                cx=cx,
                cy=cy,
                r=POINT_RADIUS,
                fill=scene.color_of(record),
            )
        )
    return tuple(marks)


def plan_legend(scene: SceneDescriptor, layout: Layout) -> tuple[LegendRow, ...]:
    x = float(layout.plot_width - LEGEND_OFFSET_FROM_RIGHT)
    return tuple(
        LegendRow(index=i, label=entry.label, color=entry.color, x=x, y=float(i * LEGEND_ROW_HEIGHT))
        for i, entry in enumerate(scene.legend_entries)
    )


def plan_annotation(scene: SceneDescriptor, layout: Layout) -> AnnotationLabel:
    wrap_width = float(layout.svg_width - ANNOTATION_WRAP_INSET)
    return AnnotationLabel(
        text=scene.annotation_text,
        lines=wrap_text(scene.annotation_text, wrap_width),
        x=layout.svg_width / 2,
        y=float(ANNOTATION_TOP_OFFSET),
        wrap_width=wrap_width,
        padding=float(ANNOTATION_NOTE_PADDING),
    )
