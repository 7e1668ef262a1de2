# -*- coding: utf-8 -*-
"""Water-use rating distribution across the species of a tree inventory.

Trees are joined to a species -> rating lookup by exact species name. The join
is a left join: species missing from the lookup are kept and labelled
``Unknown`` so that they show up in charts instead of disappearing.
"""
import logging
from enum import Enum

import pandas as pd

from urbancanopy.utils.io import require_columns

log = logging.getLogger(__name__)

DEFAULT_SPECIES_COLUMN = "scientific_name"
DEFAULT_RATING_SPECIES_COLUMN = "species"
DEFAULT_RATING_COLUMN = "water_use_rating"


class WaterUseRating(Enum):
    """Typical irrigation need of a species."""

    HIGH = "High"
    MODERATE = "Moderate"
    LOW = "Low"
    VERY_LOW = "Very Low"
    UNKNOWN = "Unknown"


# Presentation order for charts and tables, not a ranking.
RATING_DISPLAY_ORDER = [
    WaterUseRating.UNKNOWN,
    WaterUseRating.HIGH,
    WaterUseRating.LOW,
    WaterUseRating.MODERATE,
    WaterUseRating.VERY_LOW,
]

RATING_LABELS = [rating.value for rating in RATING_DISPLAY_ORDER]

_RATINGS_BY_TEXT = {rating.value.lower(): rating for rating in WaterUseRating}

UNKNOWN_SPECIES = "Unknown species"


def parse_rating(value, warned: set = None) -> WaterUseRating:
    """Map a raw rating string to a `WaterUseRating`.

    Matching ignores case and surrounding whitespace. Missing values map to
    `WaterUseRating.UNKNOWN`; so do unrecognised strings, with a warning.

    Args:
        value: Raw rating, e.g. "very low", or a `WaterUseRating`.
        warned (set, optional): Unrecognised values already reported by the caller; a value in this set is not warned about again. Defaults to None.

    Returns:
        WaterUseRating: The parsed rating.
    """
    if isinstance(value, WaterUseRating):
        return value
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return WaterUseRating.UNKNOWN
    text = " ".join(str(value).split()).lower()
    if not text:
        return WaterUseRating.UNKNOWN
    rating = _RATINGS_BY_TEXT.get(text)
    if rating is None:
        if warned is None or text not in warned:
            if warned is not None:
                warned.add(text)
            log.warning(f"Unrecognised water use rating '{value}', treating as Unknown")
        rating = WaterUseRating.UNKNOWN
    return rating


def rating_categorical(values) -> pd.Categorical:
    """Build an ordered Categorical of rating labels in display order.

    Each unrecognised rating is warned about once per call.
    """
    warned = set()
    labels = [parse_rating(value, warned).value for value in values]
    return pd.Categorical(labels, categories=RATING_LABELS, ordered=True)


def _prepare_lookup(
    ratings: pd.DataFrame, rating_species_column: str, rating_column: str
) -> pd.DataFrame:
    require_columns(ratings, [rating_species_column, rating_column], "rating lookup")
    lookup = ratings[[rating_species_column, rating_column]].dropna(
        subset=[rating_species_column]
    )
    duplicated = lookup[rating_species_column].duplicated(keep="first")
    if duplicated.any():
        names = sorted(lookup.loc[duplicated, rating_species_column].astype(str).unique())
        log.warning(
            f"{len(names)} species appear more than once in the rating lookup, "
            f"keeping the first rating for each: {', '.join(names)}"
        )
        lookup = lookup[~duplicated]
    return lookup


def join_ratings(
    trees: pd.DataFrame,
    ratings: pd.DataFrame,
    species_column: str = DEFAULT_SPECIES_COLUMN,
    rating_species_column: str = DEFAULT_RATING_SPECIES_COLUMN,
    rating_column: str = DEFAULT_RATING_COLUMN,
) -> pd.DataFrame:
    """Left join the tree inventory onto the species rating lookup.

    Args:
        trees (pandas.DataFrame): Tree inventory.
        ratings (pandas.DataFrame): Species rating lookup.
        species_column (str, optional): Species column of `trees`. Defaults to "scientific_name".
        rating_species_column (str, optional): Species column of `ratings`. Defaults to "species".
        rating_column (str, optional): Rating column of `ratings`. Defaults to "water_use_rating".

    Returns:
        pandas.DataFrame: A copy of `trees` (same row count and index) with a
        `water_use_rating` ordered Categorical column. Trees whose species has no
        lookup entry are rated Unknown.
    """
    require_columns(trees, [species_column], "tree inventory")
    lookup = _prepare_lookup(ratings, rating_species_column, rating_column)

    rating_by_species = dict(
        zip(lookup[rating_species_column], lookup[rating_column])
    )
    joined = trees.copy()
    # the lookup replaces any rating already in the inventory
    joined = joined.drop(columns=[DEFAULT_RATING_COLUMN], errors="ignore")
    joined[DEFAULT_RATING_COLUMN] = rating_categorical(
        joined[species_column].map(rating_by_species)
    )

    unmatched = int((~joined[species_column].isin(list(rating_by_species))).sum())
    log.info(
        f"Joined {len(joined)} trees to {len(lookup)} species ratings (left join); "
        f"{unmatched} trees have no rating entry"
    )
    return joined


def unmatched_species(
    trees: pd.DataFrame,
    ratings: pd.DataFrame,
    species_column: str = DEFAULT_SPECIES_COLUMN,
    rating_species_column: str = DEFAULT_RATING_SPECIES_COLUMN,
) -> list:
    """List inventory species with no entry in the rating lookup.

    Synonyms are not resolved: a species listed under another name in the
    lookup is reported here.

    Returns:
        list: Sorted species names.
    """
    require_columns(trees, [species_column], "tree inventory")
    require_columns(ratings, [rating_species_column], "rating lookup")
    known = set(ratings[rating_species_column].dropna())
    species = trees[species_column].dropna().unique()
    return sorted(str(name) for name in species if name not in known)


def rating_distribution(
    trees: pd.DataFrame,
    ratings: pd.DataFrame,
    species_column: str = DEFAULT_SPECIES_COLUMN,
    rating_species_column: str = DEFAULT_RATING_SPECIES_COLUMN,
    rating_column: str = DEFAULT_RATING_COLUMN,
    normalize: str = "total",
    top_n: int = None,
) -> pd.DataFrame:
    """Percentage of trees per species and water-use rating.

    Rows with the same species and rating are grouped together. Trees
    without a species name are kept under "Unknown species" with an Unknown
    rating, so every tree counts towards the total. With
    ``normalize="total"`` the percent is relative to the whole inventory, so
    all rows add up to 100. With ``normalize="species"`` it is relative to the
    species' own tree count, so each species adds up to 100.

    Args:
        trees (pandas.DataFrame): Tree inventory.
        ratings (pandas.DataFrame): Species rating lookup.
        species_column (str, optional): Species column of `trees`. Defaults to "scientific_name".
        rating_species_column (str, optional): Species column of `ratings`. Defaults to "species".
        rating_column (str, optional): Rating column of `ratings`. Defaults to "water_use_rating".
        normalize (str, optional): "total" or "species". Defaults to "total".
        top_n (int, optional): Keep only the `top_n` most common species. Percentages are not rescaled. Defaults to None.

    Returns:
        pandas.DataFrame: Columns `species_column`, `water_use_rating`
        (ordered Categorical), `count` and `percent`, sorted by species and then
        by rating display order.
    """
    if normalize not in ("total", "species"):
        raise ValueError(f"normalize must be 'total' or 'species', got {normalize!r}")

    joined = join_ratings(
        trees, ratings, species_column, rating_species_column, rating_column
    )
    unnamed = joined[species_column].isna()
    if unnamed.any():
        log.warning(
            f"{int(unnamed.sum())} trees have no '{species_column}' value; "
            f"they are counted as '{UNKNOWN_SPECIES}'"
        )
        joined[species_column] = joined[species_column].astype(object).where(
            ~unnamed, UNKNOWN_SPECIES
        )

    counts = (
        joined.groupby([species_column, DEFAULT_RATING_COLUMN], observed=True)
        .size()
        .rename("count")
        .reset_index()
    )

    if normalize == "total":
        denominator = counts["count"].sum()
    else:
        denominator = counts.groupby(species_column)["count"].transform("sum")
    counts["percent"] = counts["count"] / denominator * 100 if len(counts) else 0.0

    if top_n is not None:
        species_totals = counts.groupby(species_column)["count"].sum()
        keep = species_totals.sort_values(ascending=False, kind="stable").index[:top_n]
        counts = counts[counts[species_column].isin(keep)].copy()

    counts[DEFAULT_RATING_COLUMN] = pd.Categorical(
        counts[DEFAULT_RATING_COLUMN].astype(str),
        categories=RATING_LABELS,
        ordered=True,
    )
    counts["percent"] = counts["percent"].astype(float)
    counts = counts.sort_values([species_column, DEFAULT_RATING_COLUMN]).reset_index(
        drop=True
    )
    return counts[[species_column, DEFAULT_RATING_COLUMN, "count", "percent"]]
