"""Hexagon boundary construction."""

import math
from typing import Tuple

from shapely.geometry import Polygon

from .errors import InvalidGeometry
from .hex_topology import HexTopology
from .points import GlobalPoint, is_finite_point

HEX_ANGLES = (0, 60, 120, 180, 240, 300)

HexPolygon = Tuple[GlobalPoint, ...]


def hexagon(center, size: float) -> HexPolygon:
    """
    Closed vertex ring of a flat-top hexagon.

    Vertices sit at 0, 60, ... 300 degrees around the center at distance
    `size` (circumradius, not edge length); the first vertex is repeated
    at the end to close the ring.

    Args:
        center: (x, y) global center
        size: Circumradius

    Returns:
        Tuple of 7 points
    """
    if not is_finite_point(center) or not math.isfinite(size):
        raise InvalidGeometry(f"Non-finite hexagon parameters: center={center}, size={size}")

    cx, cy = center
    vertices = []
    for angle in HEX_ANGLES:
        radian = math.radians(angle)
        vertices.append(GlobalPoint(cx + size * math.cos(radian), cy + size * math.sin(radian)))
    vertices.append(vertices[0])
    return tuple(vertices)


def hexagon_polygon(center, size: float) -> Polygon:
    """Shapely polygon of a flat-top hexagon."""
    return Polygon(hexagon(center, size))


def hex_boundary(topology: HexTopology, hex_id: str) -> HexPolygon:
    """Boundary ring of a registered hex at the topology's hex size."""
    return hexagon(topology.center(hex_id), topology.hex_size)
