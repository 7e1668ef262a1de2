# -*- coding: utf-8 -*-
"""Choropleth maps of canopy cover per tract."""
import logging

import folium
import geopandas as gpd
import matplotlib.pyplot as plt

from urbancanopy.analysis.cover import COVER_COLUMN

log = logging.getLogger(__name__)


def cover_choropleth(
    cover: gpd.GeoDataFrame,
    boundary: gpd.GeoDataFrame = None,
    column: str = COVER_COLUMN,
    cmap: str = "YlGn",
    title: str = "Canopy cover by census tract (%)",
    output=None,
):
    """Plot a static choropleth of canopy cover, with the city boundary
    outlined when given.

    Args:
        cover (geopandas.GeoDataFrame): Output of `canopy_cover_by_tract`.
        boundary (geopandas.GeoDataFrame, optional): City boundary to outline. Defaults to None.
        column (str, optional): Column to colour by. Defaults to "canopy_cover_percent".
        cmap (str, optional): Matplotlib colour map. Defaults to "YlGn".
        title (str, optional): Map title.
        output (str, optional): File to save the figure to. If None, the map is shown.
    """
    fig, ax = plt.subplots(figsize=(10, 10))
    cover.plot(
        column=column,
        cmap=cmap,
        legend=True,
        ax=ax,
        edgecolor="white",
        linewidth=0.3,
        missing_kwds={"color": "lightgrey", "label": "No data"},
    )
    if boundary is not None:
        boundary.to_crs(cover.crs).boundary.plot(ax=ax, color="black", linewidth=1)
    ax.set_title(title)
    ax.set_axis_off()
    if output:
        plt.savefig(output)
    else:
        plt.show()
    plt.close(fig)


def cover_interactive_map(
    cover: gpd.GeoDataFrame,
    tract_id_column: str = "GEOID",
    column: str = COVER_COLUMN,
    fill_color: str = "YlGn",
    output_file: str = None,
) -> folium.Map:
    """Build an interactive choropleth with a tooltip showing each tract id
    and its rounded canopy cover.

    Args:
        cover (geopandas.GeoDataFrame): Output of `canopy_cover_by_tract`.
        tract_id_column (str, optional): Tract identifier column. Defaults to "GEOID".
        column (str, optional): Column to colour by. Defaults to "canopy_cover_percent".
        fill_color (str, optional): ColorBrewer palette name. Defaults to "YlGn".
        output_file (str, optional): HTML file to save the map to. Defaults to None.

    Returns:
        folium.Map: The map.
    """
    layer = cover[[tract_id_column, column, "geometry"]].to_crs(epsg=4326)
    layer[tract_id_column] = layer[tract_id_column].astype(str)
    layer["cover_rounded"] = layer[column].round(1)

    min_x, min_y, max_x, max_y = layer.total_bounds
    m = folium.Map(
        location=[(min_y + max_y) / 2, (min_x + max_x) / 2],
        zoom_start=11,
        tiles="CartoDB positron",
    )

    choropleth = folium.Choropleth(
        geo_data=layer.to_json(),
        data=layer[[tract_id_column, column]],
        columns=[tract_id_column, column],
        key_on=f"feature.properties.{tract_id_column}",
        fill_color=fill_color,
        fill_opacity=0.7,
        line_opacity=0.3,
        nan_fill_color="lightgrey",
        legend_name="Canopy cover (%)",
    ).add_to(m)
    choropleth.geojson.add_child(
        folium.GeoJsonTooltip(
            fields=[tract_id_column, "cover_rounded"],
            aliases=["Tract", "Canopy cover (%)"],
        )
    )

    if output_file:
        m.save(output_file)
        log.info(f"Saved interactive map to {output_file}")
    return m
