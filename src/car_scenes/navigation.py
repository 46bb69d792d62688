from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .config import DEFAULT_TOOLTIP_OFFSET
from .drawing import Layout
from .ingestion import Record
from .logging_config import get_logger, log_event
from .renderer import LegendRenderer, SceneRenderer
from .scales import build_scales
from .scenes import build_scenes
from .surface import CONTROL_NEXT, CONTROL_PREV, Surface
from .tooltip import TooltipController

_logger = get_logger("car_scenes.navigation")


@dataclass
class NavigationState:
    current_scene: int = 0


class NavigationController:
    """Owns the current scene index and keeps the surface in step with it.

    The index moves by exactly one per ``next``/``prev`` call and never leaves
    ``[0, scene_count - 1]``. Every accepted move triggers a full refresh.
    """

    def __init__(
        self,
        surface: Surface,
        scene_renderer: SceneRenderer,
        legend_renderer: LegendRenderer,
        tooltip: TooltipController,
    ) -> None:
        self.surface = surface
        self.scene_renderer = scene_renderer
        self.legend_renderer = legend_renderer
        self.tooltip = tooltip
        self.state = NavigationState()
        self.scene_count = len(scene_renderer.scenes)

    @property
    def current_scene(self) -> int:
        return self.state.current_scene

    @property
    def last_scene(self) -> int:
        return self.scene_count - 1

    def start(self) -> None:
        self.refresh()

    def next(self) -> bool:
        if self.state.current_scene >= self.last_scene:
            log_event(_logger, "debug", "navigation_blocked", direction="next", scene=self.current_scene)
            return False
        self.state.current_scene += 1
        self.refresh()
        return True

    def prev(self) -> bool:
        if self.state.current_scene <= 0:
            log_event(_logger, "debug", "navigation_blocked", direction="prev", scene=self.current_scene)
            return False
        self.state.current_scene -= 1
        self.refresh()
        return True

    def refresh(self) -> None:
        index = self.state.current_scene
        self.surface.set_control_enabled(CONTROL_PREV, index != 0)
        self.surface.set_control_enabled(CONTROL_NEXT, index != self.last_scene)

        self.scene_renderer.clear()
        self.tooltip.reset()
        self.scene_renderer.draw_axes()
        self.legend_renderer.render_legend(index)
        self.scene_renderer.render(index)


def build_controller(
    records: Sequence[Record],
    surface: Surface,
    layout: Layout | None = None,
    tooltip_offset: float = DEFAULT_TOOLTIP_OFFSET,
) -> NavigationController:
    """Wire scales, scenes, renderers and tooltip around one surface.

    Scales are computed here, once, from the full record set.
    """
    layout = layout or Layout()
    scales = build_scales(records, layout.plot_width, layout.plot_height)
    log_event(
        _logger,
        "info",
        "scales_built",
        x_domain=list(scales.x.domain),
        y_domain=list(scales.y.domain),
        plot_width=layout.plot_width,
        plot_height=layout.plot_height,
    )
    scenes = build_scenes(records)
    tooltip = TooltipController(surface, offset=tooltip_offset)
    scene_renderer = SceneRenderer(records, scales, scenes, layout, surface, tooltip)
    legend_renderer = LegendRenderer(scenes, layout, surface)
    return NavigationController(surface, scene_renderer, legend_renderer, tooltip)
