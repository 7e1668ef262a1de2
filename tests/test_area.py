# -*- coding: utf-8 -*-
import logging
import math

import pandas as pd
import pytest

from urbancanopy.analysis.area import (
    circle_area,
    species_canopy_summary,
    total_canopy_area,
    tree_canopy_areas,
)
from urbancanopy.utils.exceptions import InvalidMeasurementError, MissingColumnsError


def test_total_canopy_area_example():
    """Widths 0, 10 and 20 ft give pi * (0 + 25 + 100) sq ft."""
    trees = pd.DataFrame({"canopy_width_ft": [0, 10, 20]})
    assert total_canopy_area(trees) == pytest.approx(392.699081699, rel=1e-9)


def test_total_matches_sum_of_circles(trees):
    expected = sum(math.pi * (w / 2) ** 2 for w in trees["canopy_width_ft"])
    assert total_canopy_area(trees) == pytest.approx(expected)


def test_total_is_non_decreasing_as_trees_are_added():
    widths = [4.0, 0.0, 15.5, 30.0, 2.25]
    totals = [
        total_canopy_area(pd.DataFrame({"canopy_width_ft": widths[:i]}))
        for i in range(len(widths) + 1)
    ]
    assert totals[0] == 0.0
    assert all(b >= a for a, b in zip(totals, totals[1:]))


def test_missing_widths_contribute_zero_with_warning(caplog):
    trees = pd.DataFrame({"canopy_width_ft": [10.0, None, "n/a"]})
    with caplog.at_level(logging.WARNING):
        areas = tree_canopy_areas(trees)
    assert list(areas.round(6)) == [round(math.pi * 25, 6), 0.0, 0.0]
    assert "2 of 3 trees" in caplog.text


def test_negative_width_is_rejected():
    trees = pd.DataFrame({"canopy_width_ft": [10.0, -4.0]})
    with pytest.raises(InvalidMeasurementError) as excinfo:
        total_canopy_area(trees)
    assert excinfo.value.count == 1


def test_missing_width_column_is_rejected():
    trees = pd.DataFrame({"width": [10.0]})
    with pytest.raises(MissingColumnsError) as excinfo:
        total_canopy_area(trees)
    assert excinfo.value.missing == ["canopy_width_ft"]
    assert "canopy_width_ft" in str(excinfo.value)


def test_custom_width_column():
    trees = pd.DataFrame({"crown_diameter": [2.0]})
    assert total_canopy_area(trees, width_column="crown_diameter") == pytest.approx(
        math.pi
    )


def test_tree_canopy_areas_keep_index():
    trees = pd.DataFrame({"canopy_width_ft": [2.0, 4.0]}, index=["a", "b"])
    areas = tree_canopy_areas(trees)
    assert list(areas.index) == ["a", "b"]
    assert areas.name == "canopy_area_sqft"
    assert areas["b"] == pytest.approx(circle_area(4.0))


def test_species_canopy_summary(trees):
    summary = species_canopy_summary(trees)
    assert list(summary["scientific_name"]) == [
        "Platanus racemosa",
        "Quercus agrifolia",
        "Arbutus marina",
    ]
    platanus = summary.iloc[0]
    assert platanus["tree_count"] == 2
    assert platanus["canopy_area_sqft"] == pytest.approx(math.pi * (225 + 36))
    assert platanus["mean_canopy_width_ft"] == pytest.approx(21.0)


def test_circle_area_accepts_lists():
    areas = circle_area([2.0, 4.0])
    assert list(areas) == pytest.approx([math.pi, 4 * math.pi])
    assert circle_area((10,))[0] == pytest.approx(25 * math.pi)


def test_species_summary_reuses_given_areas(caplog):
    trees = pd.DataFrame(
        {"scientific_name": ["a", "a", "b"], "canopy_width_ft": [2.0, None, 4.0]}
    )
    with caplog.at_level(logging.WARNING):
        areas = tree_canopy_areas(trees)
        summary = species_canopy_summary(trees, areas=areas)
    assert caplog.text.count("no usable") == 1
    by_species = summary.set_index("scientific_name")
    assert by_species.loc["a", "canopy_area_sqft"] == pytest.approx(math.pi)
    assert by_species.loc["a", "tree_count"] == 2
