from __future__ import annotations

import html
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from .config import DEFAULT_TOOLTIP_OFFSET
from .ingestion import Record
from .scales import format_number

if TYPE_CHECKING:
    from .surface import Surface


@dataclass(frozen=True)
class TooltipState:
    visible: bool = False
    content: str = ""
    left: float | None = None
    top: float | None = None


HIDDEN_TOOLTIP = TooltipState()


def tooltip_lines(record: Record) -> tuple[str, ...]:
    return (
        f"MAKE: <strong>{html.escape(record.make)}</strong>",
        f"Fuel: {html.escape(record.fuel)}",
        f"Cylinders: {record.cylinders}",
        f"Highway MPG: {format_number(record.highway_mpg)}",
        f"City MPG: {format_number(record.city_mpg)}",
    )


def tooltip_html(record: Record) -> str:
    return "<br/>".join(tooltip_lines(record))


class TooltipController:
    """Floating info panel driven by pointer enter/move/leave on a point."""

    def __init__(self, surface: Surface, offset: float = DEFAULT_TOOLTIP_OFFSET) -> None:
        self.surface = surface
        self.offset = float(offset)
        self.state = HIDDEN_TOOLTIP

    def show(self, record: Record) -> None:
        self._apply(replace(self.state, visible=True, content=tooltip_html(record)))

    def move(self, position: tuple[float, float]) -> None:
        page_x, page_y = position
        self._apply(
            replace(self.state, left=float(page_x) + self.offset, top=float(page_y) + self.offset)
        )

    def hide(self) -> None:
        self._apply(replace(self.state, visible=False))

    def reset(self) -> None:
        self._apply(HIDDEN_TOOLTIP)

    def _apply(self, state: TooltipState) -> None:
        self.state = state
        self.surface.update_tooltip(state)
