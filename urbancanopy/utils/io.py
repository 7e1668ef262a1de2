# -*- coding: utf-8 -*-
"""Reading and writing of inventory tables and vector layers, plus the
column and CRS checks shared by the analysis functions."""
import logging
import os

import geopandas as gpd
import pandas as pd

from urbancanopy.utils.exceptions import (
    CRSMismatchError,
    InputFileError,
    MissingColumnsError,
)

log = logging.getLogger(__name__)

# pandas, pyogrio and fiona report unreadable files with these
READ_ERRORS = (OSError, ValueError, RuntimeError)

EXCEL_SUFFIXES = (".xls", ".xlsx")
PARQUET_SUFFIXES = (".parquet", ".geoparquet")


def _suffix(path) -> str:
    return os.path.splitext(str(path))[1].lower()


def read_table(path, **kwargs) -> pd.DataFrame:
    """Read a tabular file (CSV or Excel spreadsheet) into a DataFrame.

    Args:
        path (str): Path to a .csv, .xls or .xlsx file.
        **kwargs: Passed on to `pandas.read_csv` or `pandas.read_excel`.

    Returns:
        pandas.DataFrame: The table.

    Raises:
        InputFileError: If the file is missing or cannot be parsed.
    """
    try:
        if _suffix(path) in EXCEL_SUFFIXES:
            df = pd.read_excel(path, **kwargs)
        else:
            df = pd.read_csv(path, **kwargs)
    except READ_ERRORS as e:
        raise InputFileError(path, e) from e
    log.info(f"Read {len(df)} rows from {path}")
    return df


def read_layer(path, **kwargs) -> gpd.GeoDataFrame:
    """Read a vector layer (shapefile, GeoJSON, GeoPackage, GeoParquet...).

    Args:
        path (str): Path to the layer.
        **kwargs: Passed on to `geopandas.read_file` or `geopandas.read_parquet`.

    Returns:
        geopandas.GeoDataFrame: The layer.

    Raises:
        InputFileError: If the layer is missing or cannot be parsed.
    """
    try:
        if _suffix(path) in PARQUET_SUFFIXES:
            gdf = gpd.read_parquet(path, **kwargs)
        else:
            gdf = gpd.read_file(path, **kwargs)
    except READ_ERRORS as e:
        raise InputFileError(path, e) from e
    log.info(f"Read {len(gdf)} features from {path} (crs: {gdf.crs})")
    return gdf


def write_table(df: pd.DataFrame, path) -> None:
    """Write a DataFrame to CSV."""
    df.to_csv(path, index=False)
    log.info(f"Saved {len(df)} rows to {path}")


def write_layer(gdf: gpd.GeoDataFrame, path) -> None:
    """Write a GeoDataFrame as GeoParquet or GeoJSON depending on the
    suffix of `path`."""
    if _suffix(path) in PARQUET_SUFFIXES:
        gdf.to_parquet(path)
    else:
        gdf.to_file(path, driver="GeoJSON")
    log.info(f"Saved {len(gdf)} features to {path}")


def require_columns(df: pd.DataFrame, columns, table: str = "table") -> None:
    """Check that `df` holds every column in `columns`.

    Args:
        df (pandas.DataFrame): Table to check.
        columns (list): Required column names.
        table (str, optional): Name used in the error message. Defaults to "table".

    Raises:
        MissingColumnsError: If any column is absent.
    """
    missing = [column for column in columns if column not in df.columns]
    if missing:
        raise MissingColumnsError(missing, table)


def check_crs(layers: dict):
    """Check that all layers share one projected coordinate reference system
    measured in metres.

    A geographic CRS (degrees) or a projected CRS in feet is rejected as well
    as a missing or differing one.

    Args:
        layers (dict): Mapping of layer name to GeoDataFrame.

    Returns:
        pyproj.CRS: The shared CRS.

    Raises:
        CRSMismatchError: If a layer has no CRS, the CRSs differ, or the CRS is not projected in metres.
    """
    crs = None
    first_name = None
    for name, layer in layers.items():
        if layer.crs is None:
            raise CRSMismatchError(f"{name} layer has no coordinate reference system")
        if crs is None:
            crs, first_name = layer.crs, name
        elif layer.crs != crs:
            raise CRSMismatchError(
                f"{name} layer crs {layer.crs.to_string()} does not match "
                f"{first_name} layer crs {crs.to_string()}"
            )
    if crs is not None and not crs.is_projected:
        raise CRSMismatchError(
            f"Layers use the geographic crs {crs.to_string()}; reproject them to a "
            "projected crs in metres before measuring areas"
        )
    if crs is not None and crs.axis_info and crs.axis_info[0].unit_name != "metre":
        raise CRSMismatchError(
            f"Layers use crs {crs.to_string()} with units "
            f"'{crs.axis_info[0].unit_name}'; areas are converted from square metres"
        )
    log.debug(f"Layers {', '.join(layers)} share crs {crs}")
    return crs
