from __future__ import annotations

from typing import Sequence

from .drawing import (
    LAYER_ANNOTATION,
    LAYER_AXES,
    LAYER_LEGEND,
    LAYER_POINTS,
    Layout,
    PointMark,
    plan_annotation,
    plan_axes,
    plan_axis_titles,
    plan_legend,
    plan_points,
)
from .ingestion import Record
from .logging_config import get_logger, log_event
from .scales import Scales
from .scenes import SceneDescriptor
from .surface import PointerHandlers, Surface
from .tooltip import TooltipController

_logger = get_logger("car_scenes.renderer")


def _scene_at(scenes: Sequence[SceneDescriptor], scene_index: int) -> SceneDescriptor:
    if not 0 <= scene_index < len(scenes):
        raise IndexError(f"Scene index {scene_index} out of range [0, {len(scenes) - 1}].")
    return scenes[scene_index]


class SceneRenderer:
    """Draws one scene's points and annotation over the shared axes."""

    def __init__(
        self,
        records: Sequence[Record],
        scales: Scales,
        scenes: Sequence[SceneDescriptor],
        layout: Layout,
        surface: Surface,
        tooltip: TooltipController,
    ) -> None:
        self.records = tuple(records)
        self.scales = scales
        self.scenes = tuple(scenes)
        self.layout = layout
        self.surface = surface
        self.tooltip = tooltip

    def clear(self) -> None:
        self.surface.clear(LAYER_POINTS)
        self.surface.clear(LAYER_ANNOTATION)

    def draw_axes(self) -> None:
        self.surface.clear(LAYER_AXES)
        for axis in plan_axes(self.scales, self.layout):
            self.surface.draw(LAYER_AXES, axis)
        for title in plan_axis_titles(self.layout):
            self.surface.draw(LAYER_AXES, title)

    def render(self, scene_index: int) -> None:
        scene = _scene_at(self.scenes, scene_index)
        self.clear()
        self.draw_axes()

        marks = plan_points(self.records, self.scales, scene)
        for mark in marks:
            self.surface.draw(LAYER_POINTS, mark)
            self.surface.bind_pointer(mark.mark_id, self._handlers_for(mark))

        self.surface.draw(LAYER_ANNOTATION, plan_annotation(scene, self.layout))
        log_event(
            _logger,
            "debug",
            "scene_rendered",
            scene_index=scene_index,
            scene=scene.key,
            points=len(marks),
        )

    def _handlers_for(self, mark: PointMark) -> PointerHandlers:
        record = mark.record
        return PointerHandlers(
            on_enter=lambda: self.tooltip.show(record),
            on_move=self.tooltip.move,
            on_leave=self.tooltip.hide,
        )


class LegendRenderer:
    def __init__(
        self, scenes: Sequence[SceneDescriptor], layout: Layout, surface: Surface
    ) -> None:
        self.scenes = tuple(scenes)
        self.layout = layout
        self.surface = surface

    def render_legend(self, scene_index: int) -> None:
        scene = _scene_at(self.scenes, scene_index)
        self.surface.clear(LAYER_LEGEND)
        for row in plan_legend(scene, self.layout):
            self.surface.draw(LAYER_LEGEND, row)
