from __future__ import annotations

import pytest

from car_scenes.ingestion import EmptyDatasetError
from car_scenes.scales import LinearScale, build_scales, extent, format_number, nice_ticks


def test_extent_returns_min_and_max() -> None:
    assert extent([4, 8, 0, 6]) == (0.0, 8.0)


def test_extent_of_nothing_is_an_empty_dataset() -> None:
    with pytest.raises(EmptyDatasetError):
        extent([])


def test_build_scales_maps_extents_onto_plot(records) -> None:
    scales = build_scales(records, 685, 380)
    assert scales.x.domain == (0.0, 8.0)
    assert scales.y.domain == (22.0, 107.0)
    assert scales.x(0) == pytest.approx(0.0)
    assert scales.x(8) == pytest.approx(685.0)
    assert scales.x(4) == pytest.approx(342.5)


def test_y_scale_is_inverted(records) -> None:
    scales = build_scales(records, 685, 380)
    assert scales.y(107) == pytest.approx(0.0)
    assert scales.y(22) == pytest.approx(380.0)
    assert scales.y(35) < scales.y(25)


def test_position_uses_cylinders_and_highway(records) -> None:
    scales = build_scales(records, 685, 380)
    acura = records[0]
    assert scales.position(acura) == (scales.x(4), scales.y(35.0))


def test_degenerate_domain_maps_to_range_midpoint() -> None:
    scale = LinearScale(domain=(4.0, 4.0), range=(0.0, 100.0))
    assert scale(4) == pytest.approx(50.0)
    assert scale(99) == pytest.approx(50.0)


def test_build_scales_requires_records() -> None:
    with pytest.raises(EmptyDatasetError):
        build_scales((), 685, 380)


class TestNiceTicks:
    def test_unit_steps_for_cylinders(self):
        assert nice_ticks(0, 8, 6) == [0, 1, 2, 3, 4, 5, 6, 7, 8]

    def test_steps_of_twenty_for_mpg(self):
        assert nice_ticks(22, 107, 6) == [40, 60, 80, 100]

    def test_fractional_steps(self):
        assert nice_ticks(0, 1, 5) == pytest.approx([0.0, 0.2, 0.4, 0.6, 0.8, 1.0])

    def test_reversed_interval(self):
        assert nice_ticks(8, 0, 6) == [8, 7, 6, 5, 4, 3, 2, 1, 0]

    def test_single_value(self):
        assert nice_ticks(5, 5, 6) == [5.0]

    def test_non_positive_count(self):
        assert nice_ticks(0, 10, 0) == []

    def test_scale_ticks_cover_domain(self, records):
        scales = build_scales(records, 685, 380)
        ticks = scales.y.ticks()
        assert all(22 <= t <= 107 for t in ticks)


class TestFormatNumber:
    def test_integer_format_rounds(self):
        assert format_number(4.0, integer=True) == "4"
        assert format_number(3.6, integer=True) == "4"

    def test_whole_floats_drop_decimal(self):
        assert format_number(40.0) == "40"

    def test_fractional_values_keep_digits(self):
        assert format_number(37.5) == "37.5"

    def test_fractional_values_use_shortest_form(self):
        assert format_number(100 / 3) == "33.333333333333336"

    def test_places_round_before_formatting(self):
        assert format_number(342.50004, places=3) == "342.5"
        assert format_number(19.9999, places=3) == "20"
