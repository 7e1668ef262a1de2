# -*- coding: utf-8 -*-
# urbancanopy.plot.charts.py

import logging

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

from urbancanopy.analysis.ratings import RATING_LABELS

log = logging.getLogger(__name__)

RATING_COLOURS = {
    "Unknown": "#bdbdbd",
    "High": "#08519c",
    "Low": "#74c476",
    "Moderate": "#6baed6",
    "Very Low": "#fd8d3c",
}


def rating_bar_chart(
    distribution: pd.DataFrame,
    species_column: str = "scientific_name",
    rating_column: str = "water_use_rating",
    value_column: str = "percent",
    title: str = "Water use rating by species",
    output=None,
):
    """Plot a stacked horizontal bar per species, segmented by water use
    rating in display order.

    Inputs
    ======
    distribution (pandas.DataFrame): Output of `rating_distribution`.
    species_column (str, optional): Species column name.
    rating_column (str, optional): Rating column name.
    value_column (str, optional): Column holding the segment length.
    title (str, optional): Chart title.
    output (str, optional): filename to output figure to (if None, plot on the screen)
    """
    if distribution.empty:
        log.warning("Rating distribution is empty, nothing to plot")
        return

    table = distribution.assign(
        **{rating_column: distribution[rating_column].astype(str)}
    ).pivot_table(
        index=species_column,
        columns=rating_column,
        values=value_column,
        aggfunc="sum",
        fill_value=0,
    )
    table = table.reindex(columns=RATING_LABELS, fill_value=0)
    # largest species at the top
    table = table.loc[table.sum(axis=1).sort_values().index]

    sns.set_theme(style="whitegrid")
    fig, ax = plt.subplots(figsize=(10, max(3, 0.4 * len(table) + 1)))
    table.plot(
        kind="barh",
        stacked=True,
        ax=ax,
        color=[RATING_COLOURS[label] for label in table.columns],
        width=0.8,
    )
    ax.set_xlabel("Percent of trees")
    ax.set_ylabel("")
    ax.set_title(title)
    ax.legend(title="Water use rating", bbox_to_anchor=(1.02, 1), loc="upper left")
    fig.tight_layout()

    if output:
        plt.savefig(output)
    else:
        plt.show()
    plt.close(fig)


def canopy_width_histogram(
    trees: pd.DataFrame, width_column: str = "canopy_width_ft", bins: int = 20, output=None
):
    """Histogram of canopy widths."""
    fig, ax = plt.subplots()
    sns.histplot(pd.to_numeric(trees[width_column], errors="coerce").dropna(), bins=bins, ax=ax)
    ax.set_xlabel("Canopy width (ft)")
    ax.set_ylabel("Frequency")
    ax.set_title("Distribution of Canopy Widths")
    if output:
        plt.savefig(output)
    else:
        plt.show()
    plt.close(fig)
