# -*- coding: utf-8 -*-
import geopandas as gpd
import matplotlib
import pandas as pd
import pytest
from shapely.geometry import box

from urbancanopy.utils.units import sq_meters_to_acres

matplotlib.use("Agg")

# UTM zone 10N, metres
CRS = "EPSG:32610"


@pytest.fixture
def trees():
    return pd.DataFrame(
        {
            "scientific_name": [
                "Quercus agrifolia",
                "Quercus agrifolia",
                "Quercus agrifolia",
                "Platanus racemosa",
                "Platanus racemosa",
                "Arbutus marina",
            ],
            "canopy_width_ft": [10.0, 20.0, 0.0, 30.0, 12.0, 8.0],
        }
    )


@pytest.fixture
def ratings():
    return pd.DataFrame(
        {
            "species": ["Quercus agrifolia", "Platanus racemosa", "Pinus radiata"],
            "water_use_rating": ["Very Low", "Moderate", "Low"],
        }
    )


@pytest.fixture
def tracts():
    """Three 1 km square tracts side by side."""
    geometries = [
        box(0, 0, 1000, 1000),
        box(1000, 0, 2000, 1000),
        box(2000, 0, 3000, 1000),
    ]
    gdf = gpd.GeoDataFrame(
        {"GEOID": ["06075000100", "06075000200", "06075000300"]},
        geometry=geometries,
        crs=CRS,
    )
    gdf["land_area_acres"] = sq_meters_to_acres(gdf.geometry.area)
    return gdf


@pytest.fixture
def canopy():
    """A quarter of the first tract, nothing in the second, and a 100 m
    square in the third."""
    return gpd.GeoDataFrame(
        {"source": ["lidar", "lidar"]},
        geometry=[box(0, 0, 500, 500), box(2900, 0, 3000, 100)],
        crs=CRS,
    )
