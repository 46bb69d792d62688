"""Story page generator.

Drives the navigation controller through every scene and writes a
self-contained ``cars_story.html`` with:
  - the three scenes pre-rendered on the shared axes (inline SVG), or one
    plotly figure per scene when the ``plotly`` output format is selected
  - back/advance buttons whose enabled state follows the scene index
  - a hover tooltip with the record's make, fuel, cylinders and MPG figures
  - a visible load-error / empty-state page when the dataset is unusable
"""
from __future__ import annotations

import json
from collections import Counter
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

try:
    from jinja2 import Template
except ImportError as exc:
    raise ImportError(
        "jinja2 is required for story generation: pip install jinja2"
    ) from exc

try:
    import plotly.graph_objects as go
except ImportError as exc:
    raise ImportError(
        "plotly is required for story generation: pip install plotly"
    ) from exc

from .config import DEFAULT_OUTPUT_FORMAT, DEFAULT_TOOLTIP_OFFSET
from .drawing import (
    LAYER_ANNOTATION,
    LAYER_LEGEND,
    POINT_RADIUS,
    X_AXIS_TITLE,
    Y_AXIS_TITLE,
    Layout,
)
from .ingestion import Record
from .navigation import NavigationController, build_controller
from .surface import CONTROL_NEXT, CONTROL_PREV, RecordingSurface, SvgSurface


COLORS = {
    "bg": "#fafafa",
    "surface": "#ffffff",
    "border": "#d9d9d9",
    "text": "#222222",
    "text_dim": "#666666",
    "grid": "#eeeeee",
    "error": "#b00020",
}

DEFAULT_TITLE = "Cars 2017: Cylinders vs. Highway MPG"
PLOTLY_CDN = "https://cdn.plot.ly/plotly-2.35.2.min.js"
# Fraction of each domain added on both sides of the plotly axes so edge
# points are not clipped.
PLOTLY_AXIS_PAD = 0.05


@dataclass(frozen=True)
class SceneSnapshot:
    index: int
    key: str
    title: str
    annotation_text: str
    legend: tuple[dict[str, str], ...]
    point_colors: dict[str, int]
    prev_disabled: bool
    next_disabled: bool
    plot_svg: str = ""
    annotation_svg: str = ""


def _snapshot(controller: NavigationController, surface: RecordingSurface) -> SceneSnapshot:
    index = controller.current_scene
    scene = controller.scene_renderer.scenes[index]
    plot_svg = annotation_svg = ""
    if isinstance(surface, SvgSurface):
        plot_svg = surface.plot_svg()
        annotation_svg = surface.annotation_svg()
    return SceneSnapshot(
        index=index,
        key=scene.key,
        title=scene.title,
        annotation_text=" ".join(label.text for label in surface.elements(LAYER_ANNOTATION)),
        legend=tuple(
            {"label": row.label, "color": row.color} for row in surface.elements(LAYER_LEGEND)
        ),
        point_colors=dict(Counter(mark.fill for mark in surface.points())),
        prev_disabled=surface.is_disabled(CONTROL_PREV),
        next_disabled=surface.is_disabled(CONTROL_NEXT),
        plot_svg=plot_svg,
        annotation_svg=annotation_svg,
    )


def walk_controller(controller: NavigationController, surface: RecordingSurface) -> list[SceneSnapshot]:
    """Start at scene 0 and advance until the last scene, snapshotting each."""
    controller.start()
    snapshots = [_snapshot(controller, surface)]
    while controller.next():
        snapshots.append(_snapshot(controller, surface))
    return snapshots


def walk_scenes(
    records: Sequence[Record],
    surface: RecordingSurface,
    layout: Layout | None = None,
    tooltip_offset: float = DEFAULT_TOOLTIP_OFFSET,
) -> list[SceneSnapshot]:
    controller = build_controller(records, surface, layout=layout, tooltip_offset=tooltip_offset)
    return walk_controller(controller, surface)


def describe_story(records: Sequence[Record], layout: Layout | None = None) -> dict[str, Any]:
    layout = layout or Layout()
    snapshots = walk_scenes(records, RecordingSurface(), layout=layout)
    return {
        "records": len(records),
        "fuels": sorted({r.fuel for r in records}),
        "cylinders_extent": [min(r.cylinders for r in records), max(r.cylinders for r in records)],
        "highway_mpg_extent": [
            min(r.highway_mpg for r in records),
            max(r.highway_mpg for r in records),
        ],
        "plot_size": [layout.plot_width, layout.plot_height],
        "scenes": [
            {
                key: value
                for key, value in asdict(snap).items()
                if key not in {"plot_svg", "annotation_svg"}
            }
            for snap in snapshots
        ],
    }


# ── Plotly helpers ────────────────────────────────────────────────────────────


def _padded(domain: tuple[float, float]) -> list[float]:
    lo, hi = domain
    pad = (hi - lo) * PLOTLY_AXIS_PAD or 1.0
    return [lo - pad, hi + pad]


def _layout(**kw: Any) -> dict[str, Any]:
    base: dict[str, Any] = {
        "template": "plotly_white",
        "paper_bgcolor": COLORS["surface"],
        "plot_bgcolor": COLORS["surface"],
        "font": dict(family="system-ui,sans-serif", color=COLORS["text"], size=12),
        "hoverlabel": dict(bgcolor=COLORS["surface"], bordercolor=COLORS["border"]),
        "legend": dict(bordercolor=COLORS["border"], borderwidth=1, font=dict(size=11)),
    }
    base.update(kw)
    return base


# ═══════════════════════════════════════════════════════════════════════════════
# StoryBuilder
# ═══════════════════════════════════════════════════════════════════════════════


class StoryBuilder:
    """Generate the navigable three-scene HTML story."""

    def __init__(
        self,
        records: Sequence[Record],
        layout: Layout | None = None,
        output_format: str = DEFAULT_OUTPUT_FORMAT,
        metadata: dict[str, Any] | None = None,
        tooltip_offset: float = DEFAULT_TOOLTIP_OFFSET,
    ) -> None:
        if output_format not in {"svg", "plotly"}:
            raise ValueError(f"Unknown output format '{output_format}'. Expected 'svg' or 'plotly'.")
        self.records = tuple(records)
        self.layout = layout or Layout()
        self.output_format = output_format
        self.metadata = metadata or {}
        self.tooltip_offset = tooltip_offset
        self._surface: RecordingSurface = (
            SvgSurface(self.layout) if output_format == "svg" else RecordingSurface()
        )
        self._controller: NavigationController | None = None
        self._snapshots: list[SceneSnapshot] | None = None

    # ── Public API ────────────────────────────────────────────────────────

    def controller(self) -> NavigationController:
        """The single controller, and so the single set of scales, behind every scene."""
        if self._controller is None:
            self._controller = build_controller(
                self.records,
                self._surface,
                layout=self.layout,
                tooltip_offset=self.tooltip_offset,
            )
        return self._controller

    def snapshots(self) -> list[SceneSnapshot]:
        if self._snapshots is None:
            self._snapshots = walk_controller(self.controller(), self._surface)
        return self._snapshots

    def save_report(self, output_path: str | Path) -> Path:
        out = Path(output_path)
        out.write_text(self._render(), encoding="utf-8")
        return out

    def scene_figure(self, scene_index: int) -> go.Figure:
        """Plotly rendition of one scene on the shared, fixed axes."""
        renderer = self.controller().scene_renderer
        scene = renderer.scenes[scene_index]
        scales = renderer.scales

        fig = go.Figure()
        fig.add_trace(
            go.Scatter(
                x=[r.cylinders for r in self.records],
                y=[r.highway_mpg for r in self.records],
                mode="markers",
                marker=dict(
                    color=[scene.color_of(r) for r in self.records],
                    size=POINT_RADIUS * 2,
                ),
                customdata=[[r.make, r.fuel, r.city_mpg] for r in self.records],
                hovertemplate=(
                    "MAKE: <b>%{customdata[0]}</b><br>"
                    "Fuel: %{customdata[1]}<br>"
                    "Cylinders: %{x}<br>"
                    "Highway MPG: %{y}<br>"
                    "City MPG: %{customdata[2]}<extra></extra>"
                ),
                showlegend=False,
            )
        )
        # Legend-only traces so the key mirrors the scene's legend entries.
        for entry in scene.legend_entries:
            fig.add_trace(
                go.Scatter(
                    x=[None], y=[None], mode="markers", name=entry.label,
                    marker=dict(color=entry.color, size=12, symbol="square"),
                )
            )
        fig.add_annotation(
            text=scene.annotation_text,
            xref="paper", yref="paper", x=0.5, y=1.12,
            showarrow=False, xanchor="center",
            font=dict(size=14, color=COLORS["text"]),
        )
        fig.update_layout(
            **_layout(
                width=self.layout.svg_width,
                height=self.layout.svg_height,
                margin=dict(
                    l=self.layout.margin_left,
                    r=self.layout.margin_right,
                    t=self.layout.margin_top,
                    b=self.layout.margin_bottom,
                ),
                showlegend=True,
            )
        )
        fig.update_xaxes(
            title_text=X_AXIS_TITLE, range=_padded(scales.x.domain),
            tickformat="d", nticks=6, gridcolor=COLORS["grid"],
        )
        fig.update_yaxes(
            title_text=Y_AXIS_TITLE, range=_padded(scales.y.domain),
            nticks=6, gridcolor=COLORS["grid"],
        )
        return fig

    # ── Private rendering ─────────────────────────────────────────────────

    def _render(self) -> str:
        snapshots = self.snapshots()
        figures_json = []
        if self.output_format == "plotly":
            figures_json = [self.scene_figure(snap.index).to_json() for snap in snapshots]
        ctx: dict[str, Any] = {
            "title": self.metadata.get("title", DEFAULT_TITLE),
            "run_id": self.metadata.get("run_id", "story"),
            "generated_at": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC"),
            "output_format": self.output_format,
            "record_count": len(self.records),
            "scenes": snapshots,
            "scenes_json": json.dumps(
                [
                    {
                        "key": snap.key,
                        "prev_disabled": snap.prev_disabled,
                        "next_disabled": snap.next_disabled,
                    }
                    for snap in snapshots
                ]
            ),
            "figures_json": "[" + ",".join(figures_json) + "]",
            "plotly_cdn": PLOTLY_CDN,
            "tooltip_offset": self.tooltip_offset,
            "annotation_height": self.layout.annotation_height,
            "colors": COLORS,
        }
        return Template(_TEMPLATE).render(**ctx)


def render_error_page(message: str, *, title: str = DEFAULT_TITLE, empty: bool = False) -> str:
    heading = "No data to display" if empty else "Could not load the dataset"
    return Template(_ERROR_TEMPLATE).render(
        title=title, heading=heading, message=message, colors=COLORS
    )


def save_error_page(
    output_path: str | Path, message: str, *, title: str = DEFAULT_TITLE, empty: bool = False
) -> Path:
    out = Path(output_path)
    out.write_text(render_error_page(message, title=title, empty=empty), encoding="utf-8")
    return out


_BASE_STYLE = r"""
:root{
  --bg:{{ colors.bg }};--surface:{{ colors.surface }};--border:{{ colors.border }};
  --tx:{{ colors.text }};--tx-dim:{{ colors.text_dim }};--err:{{ colors.error }};
}
body{background:var(--bg);color:var(--tx);font-family:system-ui,sans-serif;margin:0;padding:24px}
h1{font-size:1.3rem;margin:0 0 4px}
.sub{color:var(--tx-dim);font-size:0.8rem;margin-bottom:16px}
.nav{display:flex;gap:8px;margin:12px 0}
.nav button{padding:6px 14px;border:1px solid var(--border);background:var(--surface);border-radius:4px;cursor:pointer}
.nav button:disabled{opacity:0.4;cursor:default}
"""

_TEMPLATE = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title | e }}</title>
<style>
""" + _BASE_STYLE + r"""
#chart,#annotation{background:var(--surface);border:1px solid var(--border);display:inline-block}
#annotation{display:block;width:max-content;margin-bottom:8px;min-height:{{ annotation_height }}px}
.scene{display:none}
.scene.active{display:block}
.legend text{font-size:12px}
#tooltip{position:absolute;pointer-events:none;background:var(--surface);border:1px solid var(--border);
  border-radius:4px;padding:6px 8px;font-size:12px;line-height:1.4;box-shadow:0 2px 6px rgba(0,0,0,0.15)}
#tooltip.hidden{display:none}
</style>
{% if output_format == 'plotly' %}<script src="{{ plotly_cdn }}" charset="utf-8"></script>{% endif %}
</head>
<body>
<h1>{{ title | e }}</h1>
<div class="sub">{{ record_count }} vehicles &middot; {{ run_id | e }} &middot; generated {{ generated_at }}</div>

<div id="annotation">
{% for scene in scenes %}
  <div class="scene{% if loop.first %} active{% endif %}" data-scene="{{ scene.index }}">
  {% if output_format == 'svg' %}{{ scene.annotation_svg | safe }}{% endif %}
  </div>
{% endfor %}
</div>

<div class="nav">
  <button id="prev" type="button"{% if scenes[0].prev_disabled %} disabled{% endif %}>&larr; Back</button>
  <button id="next" type="button"{% if scenes[0].next_disabled %} disabled{% endif %}>Next &rarr;</button>
</div>

<div id="chart">
{% for scene in scenes %}
  <div class="scene{% if loop.first %} active{% endif %}" data-scene="{{ scene.index }}" data-key="{{ scene.key }}">
  {% if output_format == 'svg' %}{{ scene.plot_svg | safe }}{% else %}<div class="plotly-scene" id="figure-{{ scene.index }}"></div>{% endif %}
  </div>
{% endfor %}
</div>

<div id="tooltip" class="hidden"></div>

<script>
(function(){
  var SCENES = {{ scenes_json | safe }};
  var FIGURES = {{ figures_json | safe }};
  var OFFSET = {{ tooltip_offset }};
  var current = 0;
  var prevBtn = document.getElementById('prev');
  var nextBtn = document.getElementById('next');
  var tooltip = document.getElementById('tooltip');

  FIGURES.forEach(function(fig, i){
    Plotly.newPlot(document.getElementById('figure-' + i), fig.data, fig.layout, {displayModeBar:false});
  });

  function showTooltip(el){
    tooltip.innerHTML = el.getAttribute('data-tooltip');
    tooltip.classList.remove('hidden');
  }
  function moveTooltip(ev){
    tooltip.style.left = (ev.pageX + OFFSET) + 'px';
    tooltip.style.top = (ev.pageY + OFFSET) + 'px';
  }
  function hideTooltip(){
    tooltip.classList.add('hidden');
  }

  document.querySelectorAll('#chart circle[data-tooltip]').forEach(function(el){
    el.addEventListener('mouseover', function(){ showTooltip(el); });
    el.addEventListener('mousemove', moveTooltip);
    el.addEventListener('mouseout', hideTooltip);
  });

  function updateScene(){
    prevBtn.disabled = SCENES[current].prev_disabled;
    nextBtn.disabled = SCENES[current].next_disabled;
    hideTooltip();
    document.querySelectorAll('.scene').forEach(function(el){
      el.classList.toggle('active', Number(el.getAttribute('data-scene')) === current);
    });
  }

  nextBtn.addEventListener('click', function(){
    if (current < SCENES.length - 1) { current++; updateScene(); }
  });
  prevBtn.addEventListener('click', function(){
    if (current > 0) { current--; updateScene(); }
  });
  updateScene();
})();
</script>
</body>
</html>
"""

_ERROR_TEMPLATE = r"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title | e }}</title>
<style>
""" + _BASE_STYLE + r"""
.load-error{border:1px solid var(--err);color:var(--err);background:var(--surface);padding:16px;border-radius:4px;max-width:720px}
</style>
</head>
<body>
<h1>{{ title | e }}</h1>
<div class="nav">
  <button id="prev" type="button" disabled>&larr; Back</button>
  <button id="next" type="button" disabled>Next &rarr;</button>
</div>
<div id="chart" class="load-error" role="alert">
  <strong>{{ heading | e }}</strong>
  <p>{{ message | e }}</p>
</div>
<div id="tooltip" class="hidden"></div>
</body>
</html>
"""
