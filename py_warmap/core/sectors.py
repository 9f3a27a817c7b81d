"""
Sector tessellation: team territory inside a single hex.

Each territorial base inside a hex claims the part of the hex closer to it
than to any other base. The partition is a Voronoi diagram limited to the
hex's bounding box and then clipped to the true hexagon, so territory never
bleeds into neighbouring hexes.

The diagram comes from scipy.spatial.Voronoi. Qhull produces unbounded cells
on the convex hull, so every site is mirrored across the four edges of a
box enclosing all sites: the real sites' cells are then finite and equal to
their bounded Voronoi cells inside that box.
"""

from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np
import structlog
from scipy.spatial import QhullError, Voronoi
from shapely.geometry import GeometryCollection, MultiPoint, MultiPolygon, Polygon, box

from .colors import Color
from .errors import InvalidGeometry
from .points import GlobalPoint, is_finite_point

logger = structlog.get_logger()

BBox = Tuple[float, float, float, float]

# Fraction of the box size added around the sites before mirroring, keeps
# mirror images off the real sites when a site lies on the box edge
BOX_PADDING = 0.05


class SectorPoint(NamedTuple):
    """A territorial base position and the fill color of its sector."""
    position: GlobalPoint
    color: Color


@dataclass(frozen=True)
class SectorPolygon:
    """Clipped territory of one base; always inside its hex."""
    geometry: Union[Polygon, MultiPolygon]
    color: Color
    hex_id: Optional[str] = None

    @property
    def area(self) -> float:
        return self.geometry.area


def bounding_box(points: Sequence) -> BBox:
    """(min_x, min_y, max_x, max_y) of a point sequence."""
    arr = np.asarray(points, dtype=float).reshape(-1, 2)
    min_x, min_y = arr.min(axis=0)
    max_x, max_y = arr.max(axis=0)
    return float(min_x), float(min_y), float(max_x), float(max_y)


def mirror_sites(sites: np.ndarray, bbox: BBox) -> np.ndarray:
    """
    Reflect sites across the four edges of a box.

    Args:
        sites: (n, 2) array of sites strictly inside bbox
        bbox: Box to reflect across

    Returns:
        (4n, 2) array of mirror images: left, right, bottom, top
    """
    min_x, min_y, max_x, max_y = bbox

    left = sites.copy()
    left[:, 0] = 2 * min_x - left[:, 0]
    right = sites.copy()
    right[:, 0] = 2 * max_x - right[:, 0]
    bottom = sites.copy()
    bottom[:, 1] = 2 * min_y - bottom[:, 1]
    top = sites.copy()
    top[:, 1] = 2 * max_y - top[:, 1]

    return np.vstack([left, right, bottom, top])


def _enclosing_box(sites: np.ndarray, bbox: BBox) -> BBox:
    """Grow bbox to contain every site, then pad it."""
    min_x = min(bbox[0], float(sites[:, 0].min()))
    min_y = min(bbox[1], float(sites[:, 1].min()))
    max_x = max(bbox[2], float(sites[:, 0].max()))
    max_y = max(bbox[3], float(sites[:, 1].max()))
    pad = max(max_x - min_x, max_y - min_y, 1.0) * BOX_PADDING
    return min_x - pad, min_y - pad, max_x + pad, max_y + pad


def bounded_voronoi(sites: np.ndarray, bbox: BBox) -> List[Optional[Polygon]]:
    """
    Voronoi cells of distinct sites, limited to a bounding box.

    Args:
        sites: (n, 2) array of distinct sites, n >= 2
        bbox: Box the cells are restricted to

    Returns:
        One polygon per site, in input order. None marks a site whose cell
        misses the box entirely.
    """
    n_sites = len(sites)
    outer = _enclosing_box(sites, bbox)
    all_points = np.vstack([sites, mirror_sites(sites, outer)])

    try:
        vor = Voronoi(all_points)
    except QhullError as exc:
        raise InvalidGeometry(f"Voronoi construction failed: {exc}") from exc

    limit = box(*bbox)
    cells: List[Optional[Polygon]] = []
    for i in range(n_sites):
        region_idx = vor.point_region[i]
        region = vor.regions[region_idx] if region_idx >= 0 else []
        if not region or -1 in region or len(region) < 3:
            # Cannot happen for sites inside the mirrored box
            logger.warning("Unbounded Voronoi region", site=i)
            cells.append(None)
            continue

        # Voronoi cells are convex; the hull fixes vertex order
        cell = MultiPoint(vor.vertices[region]).convex_hull.intersection(limit)
        cells.append(cell if not cell.is_empty else None)

    logger.debug("Bounded Voronoi computed", sites=n_sites,
                 vertices=len(vor.vertices), ridges=len(vor.ridge_points))
    return cells


def polygonal_part(geometry) -> Optional[Union[Polygon, MultiPolygon]]:
    """
    Keep only the area-bearing part of an intersection result.

    Points and lines (touching cells) are dropped; polygons inside a
    geometry collection are merged into a MultiPolygon.
    """
    if geometry is None or geometry.is_empty:
        return None
    if isinstance(geometry, (Polygon, MultiPolygon)):
        return geometry if geometry.area > 0 else None
    if isinstance(geometry, GeometryCollection):
        polygons = []
        for part in geometry.geoms:
            if isinstance(part, Polygon) and part.area > 0:
                polygons.append(part)
            elif isinstance(part, MultiPolygon):
                polygons.extend(p for p in part.geoms if p.area > 0)
        if not polygons:
            return None
        return polygons[0] if len(polygons) == 1 else MultiPolygon(polygons)
    return None


def _check_finite(hex_boundary: Sequence, points: Sequence[SectorPoint]) -> None:
    if len(hex_boundary) < 4:
        raise InvalidGeometry(f"Hex boundary needs a closed ring, got {len(hex_boundary)} points")
    for vertex in hex_boundary:
        if not is_finite_point(vertex):
            raise InvalidGeometry(f"Non-finite hex boundary vertex: {tuple(vertex)}")
    for point in points:
        if not is_finite_point(point.position):
            raise InvalidGeometry(f"Non-finite sector point: {tuple(point.position)}")


def _distinct_sites(points: Sequence[SectorPoint]) -> List[SectorPoint]:
    """Drop exact duplicate positions; the first in input order wins."""
    seen: Dict[Tuple[float, float], SectorPoint] = {}
    for point in points:
        key = (float(point.position[0]), float(point.position[1]))
        if key not in seen:
            seen[key] = point
    return list(seen.values())


def tessellate(hex_boundary: Sequence, points: Sequence[SectorPoint],
               hex_id: Optional[str] = None) -> List[SectorPolygon]:
    """
    Partition one hex among its territorial bases.

    Algorithm:
    1. No points: nothing to shade
    2. One point: the whole hex
    3. Otherwise: Voronoi diagram limited to the hex's bounding box, each
       cell clipped to the hexagon; empty or degenerate (line/point)
       intersections are dropped

    Points on an exact Voronoi boundary belong to the earlier input point;
    the boundary has zero area either way.

    Args:
        hex_boundary: Closed ring of the hex (see hex_geometry.hexagon)
        points: Sector points inside the hex
        hex_id: Hex identifier carried onto the output polygons

    Returns:
        SectorPolygons in input order

    Raises:
        InvalidGeometry: non-finite coordinates or a degenerate diagram
    """
    _check_finite(hex_boundary, points)

    if not points:
        return []

    hex_polygon = Polygon(hex_boundary)
    if not hex_polygon.is_valid or hex_polygon.area <= 0:
        raise InvalidGeometry(f"Hex boundary is not a valid polygon (hex={hex_id})")

    sites = _distinct_sites(points)
    if len(sites) == 1:
        return [SectorPolygon(geometry=hex_polygon, color=sites[0].color, hex_id=hex_id)]

    bbox = bounding_box(hex_boundary)
    site_array = np.array([site.position for site in sites], dtype=float)
    cells = bounded_voronoi(site_array, bbox)

    sectors = []
    for site, cell in zip(sites, cells):
        if cell is None:
            continue
        clipped = polygonal_part(cell.intersection(hex_polygon))
        if clipped is None:
            continue
        sectors.append(SectorPolygon(geometry=clipped, color=site.color, hex_id=hex_id))

    logger.debug("Hex tessellated", hex_id=hex_id, points=len(points),
                 sites=len(sites), sectors=len(sectors))
    return sectors