from __future__ import annotations

from car_scenes.ingestion import Record
from car_scenes.surface import RecordingSurface
from car_scenes.tooltip import HIDDEN_TOOLTIP, TooltipController, tooltip_html, tooltip_lines


def test_tooltip_lines_render_five_fields() -> None:
    lines = tooltip_lines(Record("Kia", "Gasoline", 4, 33.5, 26.0))
    assert lines == (
        "MAKE: <strong>Kia</strong>",
        "Fuel: Gasoline",
        "Cylinders: 4",
        "Highway MPG: 33.5",
        "City MPG: 26",
    )


def test_tooltip_html_escapes_text_fields() -> None:
    content = tooltip_html(Record("<b>Evil</b>", "Gas & Oil", 4, 30.0, 20.0))
    assert "&lt;b&gt;Evil&lt;/b&gt;" in content
    assert "Gas &amp; Oil" in content
    assert content.count("<br/>") == 4


def test_controller_pushes_state_to_surface() -> None:
    surface = RecordingSurface()
    tooltip = TooltipController(surface, offset=4)
    tooltip.show(Record("Kia", "Gasoline", 4, 33.0, 26.0))
    tooltip.move((10, 20))
    assert surface.tooltip.visible is True
    assert (surface.tooltip.left, surface.tooltip.top) == (14.0, 24.0)
    tooltip.hide()
    assert surface.tooltip.visible is False
    assert "Kia" in surface.tooltip.content


def test_reset_clears_content() -> None:
    surface = RecordingSurface()
    tooltip = TooltipController(surface)
    tooltip.show(Record("Kia", "Gasoline", 4, 33.0, 26.0))
    tooltip.reset()
    assert surface.tooltip == HIDDEN_TOOLTIP
    assert tooltip.state == HIDDEN_TOOLTIP


def test_fractional_mpg_uses_shortest_form() -> None:
    lines = tooltip_lines(Record("Kia", "Gasoline", 4, 100 / 3, 26.5))
    assert lines[3] == "Highway MPG: 33.333333333333336"
    assert lines[4] == "City MPG: 26.5"
