"""Tests for sector tessellation."""

import itertools
import math

import numpy as np
import pytest
from shapely.geometry import GeometryCollection, LineString, Point, Polygon, box

from py_warmap.core.colors import Color
from py_warmap.core.errors import InvalidGeometry
from py_warmap.core.hex_geometry import hexagon
from py_warmap.core.points import GlobalPoint
from py_warmap.core.sectors import (
    SectorPoint,
    bounded_voronoi,
    bounding_box,
    mirror_sites,
    polygonal_part,
    tessellate,
)

RED = Color(255, 0, 0, 0.3)
GREEN = Color(0, 255, 0, 0.3)
BLUE = Color(0, 0, 255, 0.3)

SIZE = 100.0
HEX_AREA = 3 * math.sqrt(3) / 2 * SIZE ** 2


@pytest.fixture
def boundary():
    return hexagon((0.0, 0.0), SIZE)


def site(x, y, color=RED):
    return SectorPoint(GlobalPoint(x, y), color)


class TestTrivialCases:
    """Test inputs with zero or one distinct site."""

    def test_no_points(self, boundary):
        assert tessellate(boundary, []) == []

    def test_single_point_is_whole_hex(self, boundary):
        sectors = tessellate(boundary, [site(30.0, -10.0, GREEN)], hex_id="DeadLandsHex")
        assert len(sectors) == 1
        assert sectors[0].area == pytest.approx(HEX_AREA)
        assert sectors[0].color == GREEN
        assert sectors[0].hex_id == "DeadLandsHex"

    def test_exact_duplicates_collapse(self, boundary):
        sectors = tessellate(boundary, [site(5.0, 5.0, RED), site(5.0, 5.0, BLUE)])
        assert len(sectors) == 1
        assert sectors[0].color == RED

    def test_duplicates_first_wins_among_many(self, boundary):
        sectors = tessellate(boundary, [
            site(-50.0, 0.0, RED),
            site(50.0, 0.0, GREEN),
            site(-50.0, 0.0, BLUE),
        ])
        assert [s.color for s in sectors] == [RED, GREEN]


class TestPartition:
    """Test the partition properties of multi-site tessellation."""

    @pytest.mark.parametrize("positions", [
        [(-50.0, 0.0), (50.0, 0.0)],
        [(-40.0, -30.0), (40.0, -30.0), (0.0, 50.0)],
        [(-50.0, 0.0), (0.0, 0.0), (50.0, 0.0)],
        [(10.0, 10.0), (12.0, 11.0), (-70.0, 20.0), (60.0, -60.0), (0.0, -80.0)],
        [(-99.0, 0.0), (99.0, 0.0)],
    ])
    def test_sectors_cover_hex_without_overlap(self, boundary, positions):
        points = [site(x, y) for x, y in positions]
        sectors = tessellate(boundary, points)
        hex_polygon = Polygon(boundary)

        assert len(sectors) == len(positions)
        assert sum(s.area for s in sectors) == pytest.approx(HEX_AREA, rel=1e-9)
        for a, b in itertools.combinations(sectors, 2):
            assert a.geometry.intersection(b.geometry).area == pytest.approx(0.0, abs=1e-6)
        for sector in sectors:
            assert hex_polygon.buffer(1e-6).contains(sector.geometry)

    def test_symmetric_split(self, boundary):
        sectors = tessellate(boundary, [site(-50.0, 0.0, RED), site(50.0, 0.0, GREEN)])
        assert [s.color for s in sectors] == [RED, GREEN]
        assert sectors[0].area == pytest.approx(HEX_AREA / 2)
        assert sectors[1].area == pytest.approx(HEX_AREA / 2)
        assert sectors[0].geometry.bounds[2] == pytest.approx(0.0, abs=1e-9)

    def test_each_sector_holds_its_site(self, boundary):
        positions = [(-40.0, -30.0), (40.0, -30.0), (0.0, 50.0), (5.0, 5.0)]
        sectors = tessellate(boundary, [site(x, y) for x, y in positions])
        for sector, position in zip(sectors, positions):
            assert sector.geometry.distance(Point(position)) < 1e-9

    def test_sector_is_nearest_to_its_site(self, boundary):
        positions = [(-40.0, -30.0), (40.0, -30.0), (0.0, 50.0), (70.0, 40.0)]
        sectors = tessellate(boundary, [site(x, y) for x, y in positions])
        for sector, own in zip(sectors, positions):
            centroid = sector.geometry.centroid
            own_distance = math.hypot(centroid.x - own[0], centroid.y - own[1])
            for other in positions:
                assert own_distance <= math.hypot(centroid.x - other[0],
                                                  centroid.y - other[1]) + 1e-9

    def test_site_outside_hex(self, boundary):
        """A far site claims nothing inside the hex and is dropped."""
        sectors = tessellate(boundary, [site(0.0, 0.0, RED), site(500.0, 0.0, GREEN)])
        assert len(sectors) == 1
        assert sectors[0].color == RED
        assert sectors[0].area == pytest.approx(HEX_AREA)

    def test_site_just_outside_hex_still_claims_area(self, boundary):
        sectors = tessellate(boundary, [site(0.0, 0.0, RED), site(110.0, 0.0, GREEN)])
        assert [s.color for s in sectors] == [RED, GREEN]
        assert sum(s.area for s in sectors) == pytest.approx(HEX_AREA)

    def test_hex_id_carried(self, boundary):
        sectors = tessellate(boundary, [site(-50.0, 0.0), site(50.0, 0.0)], hex_id="OriginHex")
        assert all(s.hex_id == "OriginHex" for s in sectors)

    def test_offset_hex(self):
        boundary = hexagon((5000.0, -3000.0), SIZE)
        sectors = tessellate(boundary, [site(4950.0, -3000.0), site(5050.0, -3000.0)])
        assert sum(s.area for s in sectors) == pytest.approx(HEX_AREA)


class TestInvalidInput:
    """Test non-finite and degenerate input."""

    @pytest.mark.parametrize("position", [
        (float("nan"), 0.0),
        (0.0, float("inf")),
        (float("-inf"), float("nan")),
    ])
    def test_non_finite_point(self, boundary, position):
        with pytest.raises(InvalidGeometry):
            tessellate(boundary, [site(0.0, 0.0), site(*position)])

    def test_non_finite_boundary(self, boundary):
        broken = list(boundary)
        broken[2] = GlobalPoint(float("nan"), 0.0)
        with pytest.raises(InvalidGeometry):
            tessellate(broken, [site(0.0, 0.0)])

    def test_too_short_boundary(self):
        with pytest.raises(InvalidGeometry):
            tessellate([(0.0, 0.0), (1.0, 0.0)], [site(0.0, 0.0)])

    def test_invalid_geometry_is_value_error(self, boundary):
        with pytest.raises(ValueError):
            tessellate(boundary, [site(float("nan"), 0.0)])


class TestHelpers:
    """Test the Voronoi building blocks."""

    def test_bounding_box(self):
        assert bounding_box([(1.0, 5.0), (-2.0, 3.0), (4.0, -1.0)]) == (-2.0, -1.0, 4.0, 5.0)

    def test_mirror_sites(self):
        sites = np.array([[1.0, 2.0], [3.0, 4.0]])
        mirrored = mirror_sites(sites, (0.0, 0.0, 10.0, 10.0))
        assert mirrored.shape == (8, 2)
        np.testing.assert_allclose(mirrored[0], [-1.0, 2.0])
        np.testing.assert_allclose(mirrored[2], [19.0, 2.0])
        np.testing.assert_allclose(mirrored[4], [1.0, -2.0])
        np.testing.assert_allclose(mirrored[6], [1.0, 18.0])

    def test_bounded_voronoi_tiles_box(self):
        sites = np.array([[1.0, 1.0], [8.0, 2.0], [5.0, 9.0], [4.0, 4.0]])
        cells = bounded_voronoi(sites, (0.0, 0.0, 10.0, 10.0))
        assert len(cells) == 4
        assert all(cell is not None for cell in cells)
        assert sum(cell.area for cell in cells) == pytest.approx(100.0)
        for cell, point in zip(cells, sites):
            assert cell.distance(Point(point)) < 1e-9

    def test_polygonal_part(self):
        square = box(0.0, 0.0, 1.0, 1.0)
        line = LineString([(0.0, 0.0), (1.0, 0.0)])
        assert polygonal_part(square) is square
        assert polygonal_part(line) is None
        assert polygonal_part(None) is None
        assert polygonal_part(GeometryCollection([line, square])).equals(square)
        assert polygonal_part(GeometryCollection([line])) is None
