"""Scene catalogue: the three fixed visual states of the cars plot.

Scenes differ only in how a point is colored, which legend rows explain that
coloring, and the annotation text shown above the plot. Positions never
depend on the scene.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Sequence

from .ingestion import Record


NEUTRAL_COLOR = "grey"
EFFICIENT_COLOR = "steelblue"
MUTED_COLOR = "lightgrey"
FUEL_PALETTE: tuple[str, ...] = ("#1f77b4", "#ff7f0e", "#2ca02c")

HIGHWAY_MPG_THRESHOLD = 30.0

SCENE_BASE = 0
SCENE_HIGHLIGHT_EFFICIENCY = 1
SCENE_COLOR_BY_FUEL = 2

ANNOTATION_BASE = "Fewer cylinders generally yield higher highway MPG"
ANNOTATION_HIGHLIGHT_EFFICIENCY = "High-efficiency cars (Highway MPG > 30)"
ANNOTATION_COLOR_BY_FUEL = "Points colored by fuel type (Gasoline, Diesel, Electricity)"


@dataclass(frozen=True)
class LegendEntry:
    label: str
    color: str


@dataclass(frozen=True)
class SceneDescriptor:
    key: str
    title: str
    color_fn: Callable[[Record], str]
    legend_entries: tuple[LegendEntry, ...]
    annotation_text: str

    def color_of(self, record: Record) -> str:
        return self.color_fn(record)


def distinct_fuels(records: Sequence[Record]) -> tuple[str, ...]:
    """Fuel categories in first-seen order."""
    return tuple(dict.fromkeys(r.fuel for r in records))


def assign_palette(
    categories: Sequence[str], palette: Sequence[str] = FUEL_PALETTE
) -> dict[str, str]:
    # Categories beyond the palette length reuse colors (index mod size).
    return {category: palette[i % len(palette)] for i, category in enumerate(categories)}


def _is_efficient(record: Record) -> bool:
    return record.highway_mpg > HIGHWAY_MPG_THRESHOLD


def build_scenes(records: Sequence[Record]) -> tuple[SceneDescriptor, ...]:
    fuels = distinct_fuels(records)
    fuel_colors = assign_palette(fuels)

    base = SceneDescriptor(
        key="base",
        title="Cylinders vs. highway MPG",
        color_fn=lambda record: NEUTRAL_COLOR,
        legend_entries=(LegendEntry("All vehicles", NEUTRAL_COLOR),),
        annotation_text=ANNOTATION_BASE,
    )
    highlight = SceneDescriptor(
        key="highlight_efficiency",
        title="High-efficiency cars",
        color_fn=lambda record: EFFICIENT_COLOR if _is_efficient(record) else MUTED_COLOR,
        legend_entries=(
            LegendEntry("Highway MPG > 30", EFFICIENT_COLOR),
            LegendEntry("≤ 30", MUTED_COLOR),
        ),
        annotation_text=ANNOTATION_HIGHLIGHT_EFFICIENCY,
    )
    by_fuel = SceneDescriptor(
        key="color_by_fuel",
        title="Fuel type",
        color_fn=lambda record: fuel_colors[record.fuel],
        legend_entries=tuple(LegendEntry(fuel, fuel_colors[fuel]) for fuel in fuels),
        annotation_text=ANNOTATION_COLOR_BY_FUEL,
    )
    return (base, highlight, by_fuel)
