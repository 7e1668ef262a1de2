# -*- coding: utf-8 -*-
"""Canopy area of individual trees from their measured canopy width.

Every canopy is treated as a circle whose diameter is the canopy width, so a
tree with width ``w`` feet contributes ``pi * (w / 2) ** 2`` square feet.
"""
import logging

import numpy as np
import pandas as pd

from urbancanopy.utils.exceptions import InvalidMeasurementError
from urbancanopy.utils.io import require_columns

log = logging.getLogger(__name__)

DEFAULT_SPECIES_COLUMN = "scientific_name"
DEFAULT_WIDTH_COLUMN = "canopy_width_ft"


def circle_area(diameter):
    """Area of a circle from its diameter. Works on scalars, lists, arrays
    and Series alike."""
    if isinstance(diameter, (list, tuple)):
        diameter = np.asarray(diameter, dtype=float)
    return np.pi * (diameter / 2) ** 2


def tree_canopy_areas(
    trees: pd.DataFrame, width_column: str = DEFAULT_WIDTH_COLUMN
) -> pd.Series:
    """Calculate the canopy area of every tree in the inventory.

    Missing (or non-numeric) widths contribute zero area; the number of such
    trees is logged as a warning rather than silently skipped.

    Args:
        trees (pandas.DataFrame): Tree inventory.
        width_column (str, optional): Column holding the canopy diameter in feet. Defaults to "canopy_width_ft".

    Returns:
        pandas.Series: Canopy area in square feet, aligned to the index of `trees`.

    Raises:
        MissingColumnsError: If `width_column` is not in `trees`.
        InvalidMeasurementError: If any width is negative.
    """
    require_columns(trees, [width_column], "tree inventory")

    widths = pd.to_numeric(trees[width_column], errors="coerce").astype(float)

    negative = int((widths < 0).sum())
    if negative:
        raise InvalidMeasurementError(
            width_column, negative, "canopy width cannot be negative"
        )

    missing = int(widths.isna().sum())
    if missing:
        log.warning(
            f"{missing} of {len(widths)} trees have no usable '{width_column}' value; "
            "they contribute zero canopy area."
        )

    areas = circle_area(widths.fillna(0.0))
    areas.name = "canopy_area_sqft"
    return areas


def total_canopy_area(
    trees: pd.DataFrame, width_column: str = DEFAULT_WIDTH_COLUMN
) -> float:
    """Total canopy area of the inventory in square feet.

    Args:
        trees (pandas.DataFrame): Tree inventory.
        width_column (str, optional): Column holding the canopy diameter in feet. Defaults to "canopy_width_ft".

    Returns:
        float: Sum of the circular canopy areas. 0.0 for an empty inventory.
    """
    total = float(tree_canopy_areas(trees, width_column).sum())
    log.info(f"Total canopy area of {len(trees)} trees is {total:.2f} sq ft")
    return total


def species_canopy_summary(
    trees: pd.DataFrame,
    species_column: str = DEFAULT_SPECIES_COLUMN,
    width_column: str = DEFAULT_WIDTH_COLUMN,
    areas: pd.Series = None,
) -> pd.DataFrame:
    """Summarise tree count and canopy area per species.

    Args:
        trees (pandas.DataFrame): Tree inventory.
        species_column (str, optional): Species name column. Defaults to "scientific_name".
        width_column (str, optional): Canopy diameter column. Defaults to "canopy_width_ft".
        areas (pandas.Series, optional): Per tree canopy areas already calculated with `tree_canopy_areas`. Defaults to None.

    Returns:
        pandas.DataFrame: One row per species with columns `species_column`,
        `tree_count`, `canopy_area_sqft` and `mean_canopy_width_ft`, sorted by
        canopy area, largest first.
    """
    require_columns(trees, [species_column, width_column], "tree inventory")
    if areas is None:
        areas = tree_canopy_areas(trees, width_column)

    summary = pd.DataFrame(
        {
            species_column: trees[species_column],
            "canopy_area_sqft": areas,
            "canopy_width_ft": pd.to_numeric(trees[width_column], errors="coerce"),
        }
    )
    summary = (
        summary.groupby(species_column, dropna=False)
        .agg(
            tree_count=("canopy_area_sqft", "size"),
            canopy_area_sqft=("canopy_area_sqft", "sum"),
            mean_canopy_width_ft=("canopy_width_ft", "mean"),
        )
        .reset_index()
        .sort_values("canopy_area_sqft", ascending=False, kind="stable")
        .reset_index(drop=True)
    )
    return summary
