# -*- coding: utf-8 -*-
"""Command line canopy report for a municipal tree inventory.

Prints the total canopy area, and, when the matching inputs are given, writes
the water use rating distribution and the canopy cover per census tract
together with their charts and maps.
"""
import argparse
import logging
import os
import sys

from urbancanopy.analysis.area import (
    DEFAULT_SPECIES_COLUMN,
    DEFAULT_WIDTH_COLUMN,
    species_canopy_summary,
    tree_canopy_areas,
)
from urbancanopy.analysis.cover import (
    DEFAULT_LAND_AREA_COLUMN,
    DEFAULT_TRACT_ID_COLUMN,
    JOIN_TYPES,
    canopy_cover_by_tract,
    city_canopy_cover,
)
from urbancanopy.analysis.ratings import (
    DEFAULT_RATING_COLUMN,
    DEFAULT_RATING_SPECIES_COLUMN,
    rating_distribution,
    unmatched_species,
)
from urbancanopy.utils.exceptions import CanopyAnalysisError
from urbancanopy.utils.io import read_layer, read_table, write_layer, write_table
from urbancanopy.utils.units import format_area

log = logging.getLogger(__name__)


def tree_section(args):
    """Total canopy area and per species summary."""
    trees = read_table(args.trees)
    areas = tree_canopy_areas(trees, args.width_column)
    total = float(areas.sum())
    print(f"Total canopy area: {format_area(total)}")

    summary = species_canopy_summary(
        trees, args.species_column, args.width_column, areas=areas
    )
    write_table(summary, os.path.join(args.output_dir, "species_canopy.csv"))

    if not args.no_plots:
        from urbancanopy.plot.charts import canopy_width_histogram

        canopy_width_histogram(
            trees,
            args.width_column,
            output=os.path.join(args.output_dir, "canopy_width_histogram.png"),
        )
    return trees, total


def rating_section(args, trees):
    """Water use rating distribution table and bar chart."""
    ratings = read_table(args.ratings)

    missing = unmatched_species(
        trees, ratings, args.species_column, args.rating_species_column
    )
    if missing:
        log.warning(
            f"{len(missing)} species have no water use rating and are shown as Unknown"
        )
        log.info(f"Species without a rating: {', '.join(missing)}")

    distribution = rating_distribution(
        trees,
        ratings,
        species_column=args.species_column,
        rating_species_column=args.rating_species_column,
        rating_column=args.rating_column,
        normalize=args.normalize,
        top_n=args.top_n,
    )
    write_table(distribution, os.path.join(args.output_dir, "rating_distribution.csv"))

    if not args.no_plots:
        from urbancanopy.plot.charts import rating_bar_chart

        rating_bar_chart(
            distribution,
            species_column=args.species_column,
            output=os.path.join(args.output_dir, "rating_distribution.png"),
        )
    return distribution


def cover_section(args):
    """Canopy cover per tract, city wide cover, and their maps."""
    canopy = read_layer(args.canopy)
    boundary = read_layer(args.boundary) if args.boundary else None

    if boundary is not None:
        city_cover = city_canopy_cover(
            canopy, boundary, dissolve_canopy=args.dissolve_canopy
        )
        print(f"City canopy cover: {city_cover:.1f}%")

    if not args.tracts:
        return None

    tracts = read_layer(args.tracts)
    cover = canopy_cover_by_tract(
        canopy,
        tracts,
        tract_id_column=args.tract_id_column,
        land_area_column=args.land_area_column or None,
        how=args.join,
        dissolve_canopy=args.dissolve_canopy,
    )
    write_layer(cover, os.path.join(args.output_dir, "canopy_cover.geojson"))
    write_table(
        cover.drop(columns="geometry"),
        os.path.join(args.output_dir, "canopy_cover.csv"),
    )

    if not args.no_plots:
        from urbancanopy.plot.maps import cover_choropleth, cover_interactive_map

        cover_choropleth(
            cover,
            boundary=boundary,
            output=os.path.join(args.output_dir, "canopy_cover.png"),
        )
        cover_interactive_map(
            cover,
            tract_id_column=args.tract_id_column,
            output_file=os.path.join(args.output_dir, "canopy_cover.html"),
        )
    return cover


def run_report(args):
    """Run every report section whose inputs are available.

    Returns:
        dict: Results keyed by "total_canopy_area_sqft", "rating_distribution" and "canopy_cover".
    """
    os.makedirs(args.output_dir, exist_ok=True)

    trees, total = tree_section(args)
    results = {"total_canopy_area_sqft": total}

    if args.ratings:
        results["rating_distribution"] = rating_section(args, trees)

    if args.canopy:
        results["canopy_cover"] = cover_section(args)
    elif args.tracts or args.boundary:
        log.warning("--tracts and --boundary need --canopy; skipping canopy cover")

    log.info(f"Report written to {args.output_dir}")
    return results


def create_parser():
    parser = argparse.ArgumentParser(
        description="Summarise canopy area, water use ratings and canopy cover of a tree inventory."
    )
    parser.add_argument(
        "--trees",
        "-t",
        type=str,
        required=True,
        help="Path to the tree inventory table (.csv, .xls or .xlsx).",
    )
    parser.add_argument(
        "--ratings",
        "-r",
        type=str,
        default=None,
        help="Path to the species water use rating table. If None, the rating distribution is skipped.",
    )
    parser.add_argument(
        "--canopy",
        "-c",
        type=str,
        default=None,
        help="Path to the canopy polygon layer.",
    )
    parser.add_argument(
        "--tracts",
        "-g",
        type=str,
        default=None,
        help="Path to the census tract polygon layer. Needs --canopy.",
    )
    parser.add_argument(
        "--boundary",
        "-b",
        type=str,
        default=None,
        help="Path to the city boundary layer. Used for city wide cover and as a map outline.",
    )
    parser.add_argument(
        "--species-column",
        type=str,
        default=DEFAULT_SPECIES_COLUMN,
        help=f"Species column of the tree inventory. Defaults to '{DEFAULT_SPECIES_COLUMN}'.",
    )
    parser.add_argument(
        "--width-column",
        type=str,
        default=DEFAULT_WIDTH_COLUMN,
        help=f"Canopy width (diameter, feet) column of the tree inventory. Defaults to '{DEFAULT_WIDTH_COLUMN}'.",
    )
    parser.add_argument(
        "--rating-species-column",
        type=str,
        default=DEFAULT_RATING_SPECIES_COLUMN,
        help=f"Species column of the rating table. Defaults to '{DEFAULT_RATING_SPECIES_COLUMN}'.",
    )
    parser.add_argument(
        "--rating-column",
        type=str,
        default=DEFAULT_RATING_COLUMN,
        help=f"Rating column of the rating table. Defaults to '{DEFAULT_RATING_COLUMN}'.",
    )
    parser.add_argument(
        "--tract-id-column",
        type=str,
        default=DEFAULT_TRACT_ID_COLUMN,
        help=f"Tract id column of the tract layer. Defaults to '{DEFAULT_TRACT_ID_COLUMN}'.",
    )
    parser.add_argument(
        "--land-area-column",
        type=str,
        default=DEFAULT_LAND_AREA_COLUMN,
        help="Land area (acres) column of the tract layer. Pass an empty string to measure it from the geometry.",
    )
    parser.add_argument(
        "--join",
        type=str,
        choices=JOIN_TYPES,
        default="left",
        help="How tracts are joined to the canopy totals. 'left' keeps tracts without canopy at 0%%, 'inner' drops them. Defaults to 'left'.",
    )
    parser.add_argument(
        "--dissolve-canopy",
        action="store_true",
        help="Merge overlapping canopy polygons before measuring, so shared area is counted once.",
    )
    parser.add_argument(
        "--normalize",
        type=str,
        choices=("total", "species"),
        default="total",
        help="Rating percentages relative to all trees ('total') or to each species ('species'). Defaults to 'total'.",
    )
    parser.add_argument(
        "--top-n",
        type=int,
        default=None,
        help="Only keep the N most common species in the rating distribution.",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        type=str,
        default="canopy_report",
        help="Directory for the output tables, charts and maps. Defaults to 'canopy_report'.",
    )
    parser.add_argument(
        "--no-plots",
        action="store_true",
        help="Skip charts and maps.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log progress messages.",
    )
    return parser


def main(args=None):
    parser = create_parser()
    args = parser.parse_args(args)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        run_report(args)
    except (CanopyAnalysisError, OSError) as e:
        log.error(f"Canopy report failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
