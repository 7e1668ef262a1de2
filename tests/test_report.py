# -*- coding: utf-8 -*-
import logging

import geopandas as gpd
import pandas as pd
import pytest

from urbancanopy.report import create_parser, main


@pytest.fixture
def inputs(tmp_path, trees, ratings, canopy, tracts):
    paths = {
        "trees": tmp_path / "trees.csv",
        "ratings": tmp_path / "ratings.csv",
        "canopy": tmp_path / "canopy.gpkg",
        "tracts": tmp_path / "tracts.gpkg",
    }
    trees.to_csv(paths["trees"], index=False)
    ratings.to_csv(paths["ratings"], index=False)
    canopy.to_file(paths["canopy"], driver="GPKG")
    tracts.to_file(paths["tracts"], driver="GPKG")
    return {name: str(path) for name, path in paths.items()}


def test_parser_defaults():
    args = create_parser().parse_args(["--trees", "trees.csv"])
    assert args.join == "left"
    assert args.normalize == "total"
    assert args.width_column == "canopy_width_ft"
    assert args.tract_id_column == "GEOID"
    assert not args.dissolve_canopy


def test_report_writes_tables(tmp_path, inputs, capsys):
    output_dir = tmp_path / "report"
    status = main(
        [
            "--trees", inputs["trees"],
            "--ratings", inputs["ratings"],
            "--canopy", inputs["canopy"],
            "--tracts", inputs["tracts"],
            "--output-dir", str(output_dir),
            "--no-plots",
        ]
    )
    assert status == 0

    # widths 10, 20, 0, 30, 12, 8 -> pi * 402 sq ft
    assert "Total canopy area: 1,263 sq ft" in capsys.readouterr().out

    distribution = pd.read_csv(output_dir / "rating_distribution.csv")
    assert distribution["percent"].sum() == pytest.approx(100.0)
    assert "Unknown" in set(distribution["water_use_rating"])

    cover = gpd.read_file(output_dir / "canopy_cover.geojson")
    assert len(cover) == 3
    summary = pd.read_csv(output_dir / "canopy_cover.csv", dtype={"GEOID": str})
    assert summary.set_index("GEOID")["canopy_cover_percent"].to_dict() == pytest.approx(
        {"06075000100": 25.0, "06075000200": 0.0, "06075000300": 1.0}
    )
    assert (output_dir / "species_canopy.csv").exists()


def test_report_inner_join(tmp_path, inputs):
    output_dir = tmp_path / "report"
    status = main(
        [
            "-t", inputs["trees"],
            "-c", inputs["canopy"],
            "-g", inputs["tracts"],
            "-o", str(output_dir),
            "--join", "inner",
            "--no-plots",
        ]
    )
    assert status == 0
    summary = pd.read_csv(output_dir / "canopy_cover.csv")
    assert len(summary) == 2


def test_report_with_plots(tmp_path, inputs):
    output_dir = tmp_path / "report"
    status = main(
        [
            "-t", inputs["trees"],
            "-r", inputs["ratings"],
            "-c", inputs["canopy"],
            "-g", inputs["tracts"],
            "-o", str(output_dir),
        ]
    )
    assert status == 0
    for name in (
        "canopy_width_histogram.png",
        "rating_distribution.png",
        "canopy_cover.png",
        "canopy_cover.html",
    ):
        assert (output_dir / name).exists()


def test_report_fails_on_missing_column(tmp_path, caplog):
    trees = tmp_path / "trees.csv"
    pd.DataFrame({"scientific_name": ["Quercus agrifolia"], "dbh": [12]}).to_csv(
        trees, index=False
    )
    status = main(["-t", str(trees), "-o", str(tmp_path / "report"), "--no-plots"])
    assert status == 1
    assert "canopy_width_ft" in caplog.text


def test_report_fails_on_missing_layer(tmp_path, inputs, caplog):
    status = main(
        [
            "-t", inputs["trees"],
            "-c", str(tmp_path / "nope.shp"),
            "-o", str(tmp_path / "report"),
            "--no-plots",
        ]
    )
    assert status == 1
    assert "nope.shp" in caplog.text


def test_report_fails_on_missing_inventory(tmp_path, caplog):
    status = main(["-t", str(tmp_path / "nope.csv"), "-o", str(tmp_path / "report")])
    assert status == 1
    assert "nope.csv" in caplog.text


def test_report_warns_once_about_missing_widths(tmp_path, caplog):
    trees = tmp_path / "trees.csv"
    pd.DataFrame(
        {"scientific_name": ["a", "b"], "canopy_width_ft": [10.0, None]}
    ).to_csv(trees, index=False)
    with caplog.at_level(logging.WARNING):
        status = main(["-t", str(trees), "-o", str(tmp_path / "report"), "--no-plots"])
    assert status == 0
    assert caplog.text.count("no usable") == 1
