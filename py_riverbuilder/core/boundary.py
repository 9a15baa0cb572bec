"""
Boundary assembler: the ordered output point cloud and its index table.

Row order of the point cloud (N stations, M cross-section points):
- M*N cross-section points, lateral index outer and station inner
- N right terrace tops, N left terrace tops
- N right boundary rows, N left boundary rows
- N left toes, N right toes

giving exactly N*(M+6) rows.
"""

from typing import List

import numpy as np
import structlog

from .centerline import Centerline
from .cross_section import CrossSections
from .floodplain import Floodplain
from .parameters import ParameterSet

logger = structlog.get_logger()

# Extra rows per station beyond the cross-section points
FLOODPLAIN_ROWS = 6


def assemble_point_cloud(
    parameters: ParameterSet,
    centerline: Centerline,
    sections: CrossSections,
    floodplain: Floodplain,
) -> np.ndarray:
    """
    Concatenate every point set into one (N*(M+6), 3) array of X, Y, Z.

    Args:
        parameters: Resolved scalar parameters
        centerline: First-pass arrays
        sections: Cross-section grids
        floodplain: Floodplain edges

    Returns:
        Ordered point cloud
    """
    x = centerline.position
    boundary = parameters.boundary_width + floodplain.outer_extent
    ones = np.ones_like(x)

    blocks = [
        np.column_stack([sections.x.T.ravel(), sections.y.T.ravel(), sections.z.T.ravel()]),
        np.column_stack([x, floodplain.right_top, floodplain.top_elevation]),
        np.column_stack([x, floodplain.left_top, floodplain.top_elevation]),
        np.column_stack([x, boundary * ones, floodplain.top_elevation]),
        np.column_stack([x, -boundary * ones, floodplain.top_elevation]),
        np.column_stack([x, floodplain.left_toe, floodplain.toe_elevation]),
        np.column_stack([x, floodplain.right_toe, floodplain.toe_elevation]),
    ]
    points = np.vstack(blocks)

    logger.info("Point cloud assembled", points=len(points))
    return points


def boundary_index_table(station_count: int, point_count: int) -> List[int]:
    """
    Offsets into the point cloud outlining the floodplain boundary polygon.

    Args:
        station_count: Number of stations N
        point_count: Cross-section points M

    Returns:
        The 17 offsets in their fixed order
    """
    n, m = station_count, point_count
    return [
        n * (m + 2),
        n * m,
        n * (m + 5),
        n * (m - 1),
        0,
        n * (m + 4),
        n * (m + 1),
        n * (m + 3),
        n * (m + 4) - 1,
        n * (m + 2) - 1,
        n * (m + 5) - 1,
        n - 1,
        n * m - 1,
        n * (m + 6) - 1,
        n * (m + 1) - 1,
        n * (m + 3) - 1,
        n * (m + 2),
    ]
