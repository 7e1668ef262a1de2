# -*- coding: utf-8 -*-
"""Area unit conversions and display formatting."""

import numpy as np

SQ_METERS_PER_ACRE = 4046.86


def sq_meters_to_acres(area):
    """Convert an area in square metres to acres.

    Args:
        area (float | array-like | pandas.Series): Area in square metres.

    Returns:
        Same type as the input, in acres.
    """
    if isinstance(area, (list, tuple)):
        area = np.asarray(area, dtype=float)
    return area / SQ_METERS_PER_ACRE


def acres_to_sq_meters(area):
    """Convert an area in acres to square metres.

    Args:
        area (float | array-like | pandas.Series): Area in acres.

    Returns:
        Same type as the input, in square metres.
    """
    if isinstance(area, (list, tuple)):
        area = np.asarray(area, dtype=float)
    return area * SQ_METERS_PER_ACRE


def format_area(value: float, unit: str = "sq ft", decimals: int = 0) -> str:
    """Format an area for human display with thousands separators.

    Args:
        value (float): The area.
        unit (str, optional): Unit label appended after the number. Defaults to "sq ft".
        decimals (int, optional): Number of decimal places. Defaults to 0.

    Returns:
        str: e.g. "1,234,568 sq ft".
    """
    text = f"{value:,.{decimals}f}"
    if unit:
        text = f"{text} {unit}"
    return text
