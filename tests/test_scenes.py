from __future__ import annotations

from car_scenes.ingestion import Record
from car_scenes.scenes import (
    ANNOTATION_BASE,
    ANNOTATION_COLOR_BY_FUEL,
    ANNOTATION_HIGHLIGHT_EFFICIENCY,
    EFFICIENT_COLOR,
    FUEL_PALETTE,
    MUTED_COLOR,
    NEUTRAL_COLOR,
    SCENE_BASE,
    SCENE_COLOR_BY_FUEL,
    SCENE_HIGHLIGHT_EFFICIENCY,
    assign_palette,
    build_scenes,
    distinct_fuels,
)


def test_exactly_three_scenes_in_fixed_order(records) -> None:
    scenes = build_scenes(records)
    assert [s.key for s in scenes] == ["base", "highlight_efficiency", "color_by_fuel"]
    assert scenes[SCENE_BASE].annotation_text == ANNOTATION_BASE
    assert scenes[SCENE_HIGHLIGHT_EFFICIENCY].annotation_text == ANNOTATION_HIGHLIGHT_EFFICIENCY
    assert scenes[SCENE_COLOR_BY_FUEL].annotation_text == ANNOTATION_COLOR_BY_FUEL


def test_base_scene_is_uniformly_neutral(records) -> None:
    base = build_scenes(records)[SCENE_BASE]
    assert {base.color_of(r) for r in records} == {NEUTRAL_COLOR}
    assert [e.label for e in base.legend_entries] == ["All vehicles"]


def test_highlight_scene_threshold() -> None:
    efficient = Record("Honda", "Gasoline", 4, 35.0, 30.0)
    thirsty = Record("Dodge", "Gasoline", 4, 25.0, 18.0)
    boundary = Record("Mazda", "Gasoline", 4, 30.0, 26.0)
    scene = build_scenes([efficient, thirsty, boundary])[SCENE_HIGHLIGHT_EFFICIENCY]
    assert scene.color_of(efficient) == EFFICIENT_COLOR
    assert scene.color_of(thirsty) == MUTED_COLOR
    assert scene.color_of(boundary) == MUTED_COLOR


def test_legend_entry_counts_per_scene(records) -> None:
    scenes = build_scenes(records)
    assert len(scenes[SCENE_BASE].legend_entries) == 1
    assert len(scenes[SCENE_HIGHLIGHT_EFFICIENCY].legend_entries) == 2
    assert len(scenes[SCENE_COLOR_BY_FUEL].legend_entries) == len(set(r.fuel for r in records))


def test_distinct_fuels_in_first_seen_order(records) -> None:
    assert distinct_fuels(records) == ("Gasoline", "Diesel", "Electricity")


def test_fuel_colors_follow_first_seen_order(records) -> None:
    scene = build_scenes(records)[SCENE_COLOR_BY_FUEL]
    legend = {e.label: e.color for e in scene.legend_entries}
    assert legend == {
        "Gasoline": FUEL_PALETTE[0],
        "Diesel": FUEL_PALETTE[1],
        "Electricity": FUEL_PALETTE[2],
    }
    for record in records:
        assert scene.color_of(record) == legend[record.fuel]


def test_palette_cycles_past_its_length() -> None:
    colors = assign_palette(["a", "b", "c", "d", "e"])
    assert colors["d"] == FUEL_PALETTE[0]
    assert colors["e"] == FUEL_PALETTE[1]


def test_fourth_fuel_reuses_first_color() -> None:
    records = [
        Record("A", "Gasoline", 4, 30.0, 20.0),
        Record("B", "Diesel", 4, 30.0, 20.0),
        Record("C", "Electricity", 0, 100.0, 110.0),
        Record("D", "Hybrid", 4, 50.0, 52.0),
    ]
    scene = build_scenes(records)[SCENE_COLOR_BY_FUEL]
    assert scene.color_of(records[3]) == scene.color_of(records[0])
    assert len(scene.legend_entries) == 4
