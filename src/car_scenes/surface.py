"""Surfaces apply drawing instructions to an output target.

``RecordingSurface`` keeps elements in memory and can replay pointer events
against the handlers bound to point marks. ``SvgSurface`` additionally
serializes its current contents to SVG markup.
"""
from __future__ import annotations

import html
from dataclasses import dataclass, field
from typing import Any, Callable, Protocol

from .drawing import (
    LAYER_ANNOTATION,
    LAYER_AXES,
    LAYER_LEGEND,
    LAYER_POINTS,
    LAYERS,
    LEGEND_LABEL_X,
    LEGEND_LABEL_Y,
    LEGEND_SWATCH_RADIUS,
    LEGEND_SWATCH_SIZE,
    AnnotationLabel,
    AxisPlan,
    AxisTitle,
    Layout,
    LegendRow,
    PointMark,
)
from .scales import format_number
from .tooltip import HIDDEN_TOOLTIP, TooltipState, tooltip_html


CONTROL_PREV = "prev"
CONTROL_NEXT = "next"

EVENT_ENTER = "mouseover"
EVENT_MOVE = "mousemove"
EVENT_LEAVE = "mouseout"

TICK_SIZE = 6
TICK_LABEL_GAP = 3
SVG_PLACES = 3


@dataclass(frozen=True)
class PointerHandlers:
    on_enter: Callable[[], None]
    on_move: Callable[[tuple[float, float]], None]
    on_leave: Callable[[], None]


class Surface(Protocol):
    def clear(self, layer: str) -> None:
        ...

    def draw(self, layer: str, instruction: Any) -> None:
        ...

    def bind_pointer(self, mark_id: str, handlers: PointerHandlers) -> None:
        ...

    def set_control_enabled(self, control_id: str, enabled: bool) -> None:
        ...

    def update_tooltip(self, state: TooltipState) -> None:
        ...


@dataclass
class RecordingSurface:
    layers: dict[str, list[Any]] = field(default_factory=lambda: {name: [] for name in LAYERS})
    handlers: dict[str, PointerHandlers] = field(default_factory=dict)
    controls: dict[str, bool] = field(
        default_factory=lambda: {CONTROL_PREV: True, CONTROL_NEXT: True}
    )
    tooltip: TooltipState = HIDDEN_TOOLTIP

    def clear(self, layer: str) -> None:
        removed = self.layers.setdefault(layer, [])
        for instruction in removed:
            if isinstance(instruction, PointMark):
                self.handlers.pop(instruction.mark_id, None)
        removed.clear()

    def draw(self, layer: str, instruction: Any) -> None:
        self.layers.setdefault(layer, []).append(instruction)

    def bind_pointer(self, mark_id: str, handlers: PointerHandlers) -> None:
        self.handlers[mark_id] = handlers

    def set_control_enabled(self, control_id: str, enabled: bool) -> None:
        self.controls[control_id] = bool(enabled)

    def update_tooltip(self, state: TooltipState) -> None:
        self.tooltip = state

    # ── Inspection helpers ────────────────────────────────────────────

    def elements(self, layer: str) -> list[Any]:
        return list(self.layers.get(layer, []))

    def points(self) -> list[PointMark]:
        return [i for i in self.layers.get(LAYER_POINTS, []) if isinstance(i, PointMark)]

    def point(self, mark_id: str) -> PointMark:
        for mark in self.points():
            if mark.mark_id == mark_id:
                return mark
        raise KeyError(f"No point mark '{mark_id}' on surface.")

    def is_disabled(self, control_id: str) -> bool:
        return not self.controls.get(control_id, True)

    def dispatch(self, mark_id: str, event: str, position: tuple[float, float] = (0.0, 0.0)) -> None:
        handlers = self.handlers.get(mark_id)
        if handlers is None:
            raise KeyError(f"No pointer handlers bound for '{mark_id}'.")
        if event == EVENT_ENTER:
            handlers.on_enter()
        elif event == EVENT_MOVE:
            handlers.on_move(position)
        elif event == EVENT_LEAVE:
            handlers.on_leave()
        else:
            raise ValueError(f"Unknown pointer event '{event}'.")


# ── SVG serialization ────────────────────────────────────────────────────────


def _num(value: float) -> str:
    return format_number(value, places=SVG_PLACES)


def _attr(value: Any) -> str:
    return html.escape(str(value), quote=True)


def _axis_svg(axis: AxisPlan) -> str:
    parts = [
        f'<g class="{axis.name}" transform="translate({_num(axis.offset_x)},{_num(axis.offset_y)})" '
        'fill="none" font-size="10" font-family="sans-serif" '
        f'text-anchor="{"middle" if axis.orientation == "bottom" else "end"}">'
    ]
    r0, r1 = axis.range
    if axis.orientation == "bottom":
        parts.append(f'<path class="domain" stroke="currentColor" d="M{_num(r0)},{TICK_SIZE}V0H{_num(r1)}V{TICK_SIZE}"/>')
    else:
        parts.append(f'<path class="domain" stroke="currentColor" d="M-{TICK_SIZE},{_num(r0)}H0V{_num(r1)}H-{TICK_SIZE}"/>')
    for tick in axis.ticks:
        if axis.orientation == "bottom":
            parts.append(
                f'<g class="tick" transform="translate({_num(tick.position)},0)">'
                f'<line stroke="currentColor" y2="{TICK_SIZE}"/>'
                f'<text fill="currentColor" y="{TICK_SIZE + TICK_LABEL_GAP}" dy="0.71em">{_attr(tick.label)}</text>'
                "</g>"
            )
        else:
            parts.append(
                f'<g class="tick" transform="translate(0,{_num(tick.position)})">'
                f'<line stroke="currentColor" x2="-{TICK_SIZE}"/>'
                f'<text fill="currentColor" x="-{TICK_SIZE + TICK_LABEL_GAP}" dy="0.32em">{_attr(tick.label)}</text>'
                "</g>"
            )
    parts.append("</g>")
    return "".join(parts)


def _title_svg(title: AxisTitle) -> str:
    rotate = f' transform="rotate({_num(title.rotate)})"' if title.rotate else ""
    return (
        f'<text class="{title.name}"{rotate} x="{_num(title.x)}" y="{_num(title.y)}" '
        f'text-anchor="middle">{_attr(title.text)}</text>'
    )


def _point_svg(mark: PointMark) -> str:
    record = mark.record
    return (
        f'<circle id="{mark.mark_id}" cx="{_num(mark.cx)}" cy="{_num(mark.cy)}" r="{_num(mark.r)}" '
        f'fill="{_attr(mark.fill)}" data-tooltip="{_attr(tooltip_html(record))}"/>'
    )


def _legend_svg(row: LegendRow) -> str:
    return (
        f'<g class="legend-row" transform="translate(0,{_num(row.y)})">'
        f'<rect width="{LEGEND_SWATCH_SIZE}" height="{LEGEND_SWATCH_SIZE}" '
        f'rx="{LEGEND_SWATCH_RADIUS}" ry="{LEGEND_SWATCH_RADIUS}" fill="{_attr(row.color)}"/>'
        f'<text x="{LEGEND_LABEL_X}" y="{LEGEND_LABEL_Y}" dominant-baseline="middle">{_attr(row.label)}</text>'
        "</g>"
    )


def _annotation_svg(label: AnnotationLabel) -> str:
    connector = "" if label.show_connector else ' display="none"'
    subject = "" if label.show_subject else ' display="none"'
    tspans = "".join(
        f'<tspan x="0" dy="{"0" if i == 0 else "1.2em"}">{_attr(line)}</tspan>'
        for i, line in enumerate(label.lines)
    )
    return (
        f'<g class="annotation label" transform="translate({_num(label.x)},{_num(label.y)})">'
        f'<g class="annotation-connector"{connector}/>'
        f'<g class="annotation-subject"{subject}/>'
        f'<g class="annotation-note" transform="translate(0,{_num(label.padding)})">'
        f'<text class="annotation-note-label" text-anchor="middle" dy="1em">{tspans}</text>'
        "</g></g>"
    )


class SvgSurface(RecordingSurface):
    """Recording surface that can serialize itself to SVG markup."""

    def __init__(self, layout: Layout) -> None:
        super().__init__()
        self.layout = layout

    def plot_svg(self) -> str:
        layout = self.layout
        body: list[str] = []
        for instruction in self.layers[LAYER_AXES]:
            if isinstance(instruction, AxisPlan):
                body.append(_axis_svg(instruction))
            elif isinstance(instruction, AxisTitle):
                body.append(_title_svg(instruction))
        legend_x = next((row.x for row in self.layers[LAYER_LEGEND]), 0.0)
        body.append(f'<g class="legend" transform="translate({_num(legend_x)},0)">')
        body.extend(_legend_svg(row) for row in self.layers[LAYER_LEGEND])
        body.append("</g>")
        body.extend(_point_svg(mark) for mark in self.points())
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{layout.svg_width}" height="{layout.svg_height}">'
            f'<g transform="translate({layout.margin_left},{layout.margin_top})">'
            + "".join(body)
            + "</g></svg>"
        )

    def annotation_svg(self) -> str:
        layout = self.layout
        body = "".join(
            _annotation_svg(label)
            for label in self.layers[LAYER_ANNOTATION]
            if isinstance(label, AnnotationLabel)
        )
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{layout.svg_width}" height="{layout.annotation_height}">'
            f'{body}</svg>'
        )

