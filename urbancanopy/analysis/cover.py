# -*- coding: utf-8 -*-
"""Canopy cover percentage per census tract.

Canopy polygons are intersected with tract polygons, the intersected area is
summed per tract, converted from square metres to acres and divided by the
tract land area.
"""
import logging

import geopandas as gpd
import numpy as np

from urbancanopy.utils.io import check_crs, require_columns
from urbancanopy.utils.units import sq_meters_to_acres

log = logging.getLogger(__name__)

DEFAULT_TRACT_ID_COLUMN = "GEOID"
DEFAULT_LAND_AREA_COLUMN = "land_area_acres"

CANOPY_AREA_COLUMN = "canopy_area_acres"
LAND_AREA_COLUMN = "land_area_acres"
COVER_COLUMN = "canopy_cover_percent"

JOIN_TYPES = ("left", "inner")


def _geometry_only(layer: gpd.GeoDataFrame, columns=None) -> gpd.GeoDataFrame:
    """Copy of `layer` keeping `columns` and a geometry column called
    "geometry"."""
    data = {column: layer[column].values for column in (columns or [])}
    return gpd.GeoDataFrame(data, geometry=layer.geometry.values, crs=layer.crs)


def _prepare_canopy(canopy: gpd.GeoDataFrame, dissolve_canopy: bool) -> gpd.GeoDataFrame:
    canopy_layer = _geometry_only(canopy)
    canopy_layer = canopy_layer[
        canopy_layer.geometry.notna() & ~canopy_layer.geometry.is_empty
    ].copy()
    invalid = ~canopy_layer.geometry.is_valid
    if invalid.any():
        log.warning(f"Repairing {int(invalid.sum())} invalid canopy polygons with buffer(0)")
        canopy_layer.loc[invalid, "geometry"] = canopy_layer.loc[invalid, "geometry"].buffer(0)
    if dissolve_canopy and not canopy_layer.empty:
        # merge overlapping polygons so shared area is counted once
        canopy_layer = canopy_layer.dissolve().explode(index_parts=False)
        canopy_layer = canopy_layer.reset_index(drop=True)
        log.info(f"Dissolved canopy layer into {len(canopy_layer)} polygons")
    return canopy_layer


def canopy_area_by_tract(
    canopy: gpd.GeoDataFrame,
    tracts: gpd.GeoDataFrame,
    tract_id_column: str = DEFAULT_TRACT_ID_COLUMN,
    dissolve_canopy: bool = False,
):
    """Sum the canopy area (acres) falling inside each tract.

    Only tracts that intersect at least one canopy polygon appear in the
    result.

    Args:
        canopy (geopandas.GeoDataFrame): Canopy polygons.
        tracts (geopandas.GeoDataFrame): Tract polygons with a `tract_id_column`.
        tract_id_column (str, optional): Tract identifier column. Defaults to "GEOID".
        dissolve_canopy (bool, optional): Union overlapping canopy polygons first. Defaults to False.

    Returns:
        pandas.DataFrame: Columns `tract_id_column` and "canopy_area_acres".
    """
    check_crs({"canopy": canopy, "tract": tracts})
    require_columns(tracts, [tract_id_column], "tract layer")

    canopy_layer = _prepare_canopy(canopy, dissolve_canopy)
    tract_layer = _geometry_only(tracts, [tract_id_column])

    if canopy_layer.empty or tract_layer.empty:
        log.warning("No canopy or tract polygons to intersect")
        pieces = tract_layer.iloc[0:0]
    else:
        pieces = gpd.overlay(
            canopy_layer, tract_layer, how="intersection", keep_geom_type=True
        )
    log.info(
        f"Intersected {len(canopy_layer)} canopy polygons with {len(tract_layer)} "
        f"tracts into {len(pieces)} pieces"
    )

    pieces = pieces.assign(area_m2=pieces.geometry.area)
    area_by_tract = (
        pieces.groupby(tract_id_column, as_index=False)["area_m2"].sum()
    )
    area_by_tract[CANOPY_AREA_COLUMN] = sq_meters_to_acres(
        area_by_tract["area_m2"].astype(float)
    )
    return area_by_tract[[tract_id_column, CANOPY_AREA_COLUMN]]


def canopy_cover_by_tract(
    canopy: gpd.GeoDataFrame,
    tracts: gpd.GeoDataFrame,
    tract_id_column: str = DEFAULT_TRACT_ID_COLUMN,
    land_area_column: str = DEFAULT_LAND_AREA_COLUMN,
    how: str = "left",
    dissolve_canopy: bool = False,
) -> gpd.GeoDataFrame:
    """Calculate the canopy cover percentage of every census tract.

    The join back onto the tract layer is explicit. With ``how="left"`` every
    tract is kept and tracts without canopy get 0 acres and 0 %. With
    ``how="inner"`` tracts without any canopy are dropped, so a map would show
    them as missing rather than as 0 %.

    Percentages above 100 are possible when canopy polygons overlap and are
    reported as-is with a warning; pass ``dissolve_canopy=True`` to count
    overlapping canopy once.

    Args:
        canopy (geopandas.GeoDataFrame): Canopy polygons, projected CRS in metres.
        tracts (geopandas.GeoDataFrame): Tract polygons in the same CRS.
        tract_id_column (str, optional): Tract identifier column. Defaults to "GEOID".
        land_area_column (str, optional): Tract land area column in acres. If None, land area is measured from the tract geometry. Defaults to "land_area_acres".
        how (str, optional): "left" or "inner". Defaults to "left".
        dissolve_canopy (bool, optional): Union overlapping canopy polygons before intersecting. Defaults to False.

    Returns:
        geopandas.GeoDataFrame: Columns `tract_id_column`, "canopy_area_acres",
        "land_area_acres", "canopy_cover_percent" and "geometry".

    Raises:
        CRSMismatchError: If the layers do not share a projected CRS in metres.
        MissingColumnsError: If the tract layer lacks the id or land area column.
        ValueError: If `how` is not "left" or "inner".
    """
    if how not in JOIN_TYPES:
        raise ValueError(f"how must be one of {JOIN_TYPES}, got {how!r}")

    check_crs({"canopy": canopy, "tract": tracts})
    required = [tract_id_column]
    if land_area_column is not None:
        required.append(land_area_column)
    require_columns(tracts, required, "tract layer")

    if tracts[tract_id_column].duplicated().any():
        log.warning(
            f"Tract ids in '{tract_id_column}' are not unique; canopy area is "
            "attributed to every row sharing an id"
        )

    tract_layer = _geometry_only(tracts, required)
    if land_area_column is None:
        tract_layer[LAND_AREA_COLUMN] = sq_meters_to_acres(tract_layer.geometry.area)
    elif land_area_column != LAND_AREA_COLUMN:
        tract_layer = tract_layer.rename(columns={land_area_column: LAND_AREA_COLUMN})

    area_by_tract = canopy_area_by_tract(
        canopy, tracts, tract_id_column, dissolve_canopy=dissolve_canopy
    )

    result = tract_layer.merge(area_by_tract, on=tract_id_column, how=how)
    if how == "left":
        result[CANOPY_AREA_COLUMN] = result[CANOPY_AREA_COLUMN].fillna(0.0)
    else:
        dropped = len(tract_layer) - len(result)
        if dropped:
            log.info(f"Inner join dropped {dropped} tracts without canopy")

    land_area = result[LAND_AREA_COLUMN].astype(float)
    result[LAND_AREA_COLUMN] = land_area
    result[COVER_COLUMN] = (
        100 * result[CANOPY_AREA_COLUMN] / land_area.where(land_area > 0, np.nan)
    )

    invalid_land = int((~(land_area > 0)).sum())
    if invalid_land:
        log.warning(
            f"{invalid_land} tracts have a missing or non-positive land area; "
            "their canopy cover is undefined"
        )
    over_full = int((result[COVER_COLUMN] > 100).sum())
    if over_full:
        log.warning(
            f"{over_full} tracts have canopy cover above 100%, most likely from "
            "overlapping canopy polygons; values are reported as-is"
        )

    log.info(f"Calculated canopy cover for {len(result)} tracts ({how} join)")
    return result[
        [tract_id_column, CANOPY_AREA_COLUMN, LAND_AREA_COLUMN, COVER_COLUMN, "geometry"]
    ]


def city_canopy_cover(
    canopy: gpd.GeoDataFrame,
    boundary: gpd.GeoDataFrame,
    dissolve_canopy: bool = False,
) -> float:
    """Percentage of the city boundary area covered by canopy.

    Args:
        canopy (geopandas.GeoDataFrame): Canopy polygons.
        boundary (geopandas.GeoDataFrame): City boundary polygon(s), same CRS.
        dissolve_canopy (bool, optional): Union overlapping canopy polygons first. Defaults to False.

    Returns:
        float: Canopy cover percentage, NaN if the boundary has no area.
    """
    check_crs({"canopy": canopy, "boundary": boundary})

    canopy_layer = _prepare_canopy(canopy, dissolve_canopy)
    boundary_layer = _geometry_only(boundary).dissolve()
    boundary_area = float(boundary_layer.geometry.area.sum())
    if boundary_area <= 0:
        log.warning("City boundary has no area; canopy cover is undefined")
        return float("nan")

    if canopy_layer.empty:
        canopy_area = 0.0
    else:
        pieces = gpd.overlay(
            canopy_layer, boundary_layer, how="intersection", keep_geom_type=True
        )
        canopy_area = float(pieces.geometry.area.sum())

    cover = 100 * canopy_area / boundary_area
    log.info(f"City canopy cover is {cover:.2f}%")
    return cover
