"""Point types shared by the geometry modules."""

import math
from typing import NamedTuple


class LocalPoint(NamedTuple):
    """Position in one hex's own reporting space. Not comparable across hexes."""
    x: float
    y: float


class GlobalPoint(NamedTuple):
    """Position in the shared rendering space."""
    x: float
    y: float


def is_finite_point(point) -> bool:
    """Check both coordinates are finite numbers."""
    return math.isfinite(point[0]) and math.isfinite(point[1])
