"""Tests for hexagon boundary construction."""

import math

import pytest
from shapely.geometry import Polygon

from py_warmap.core.errors import InvalidGeometry, UnknownHex
from py_warmap.core.hex_geometry import hex_boundary, hexagon, hexagon_polygon

from factories import HEX_SIZE


class TestHexagon:
    """Test the flat-top hexagon ring."""

    def test_closed_ring_of_seven_points(self):
        ring = hexagon((0.0, 0.0), 10.0)
        assert len(ring) == 7
        assert ring[0] == ring[-1]

    def test_first_vertex_is_east(self):
        ring = hexagon((5.0, -3.0), 10.0)
        assert ring[0] == pytest.approx((15.0, -3.0))

    def test_vertices_on_circumradius(self):
        center = (120.0, 40.0)
        for vertex in hexagon(center, 25.0)[:-1]:
            assert math.hypot(vertex.x - center[0], vertex.y - center[1]) == pytest.approx(25.0)

    @pytest.mark.parametrize("center,size", [((0.0, 0.0), 1.0), ((-250.5, 3e4), 0.01),
                                             ((7.0, -7.0), 1000.0)])
    def test_vertices_sixty_degrees_apart(self, center, size):
        ring = hexagon(center, size)
        angles = [math.degrees(math.atan2(v.y - center[1], v.x - center[0])) % 360
                  for v in ring[:-1]]
        for i, angle in enumerate(angles):
            assert angle == pytest.approx(60.0 * i, abs=1e-6)

    def test_flat_top(self):
        """Two vertices share the maximum y."""
        ring = hexagon((0.0, 0.0), 10.0)[:-1]
        top = max(v.y for v in ring)
        assert sum(1 for v in ring if v.y == pytest.approx(top)) == 2

    def test_area(self):
        polygon = hexagon_polygon((0.0, 0.0), 10.0)
        assert polygon.is_valid
        assert polygon.area == pytest.approx(3 * math.sqrt(3) / 2 * 100.0)

    @pytest.mark.parametrize("center,size", [
        ((float("nan"), 0.0), 10.0),
        ((0.0, float("inf")), 10.0),
        ((0.0, 0.0), float("nan")),
    ])
    def test_non_finite_input(self, center, size):
        with pytest.raises(InvalidGeometry):
            hexagon(center, size)


class TestHexBoundary:
    """Test boundaries of registered hexes."""

    def test_unknown_hex(self, topology):
        with pytest.raises(UnknownHex):
            hex_boundary(topology, "AtlantisHex")

    def test_uses_topology_size(self, topology):
        ring = hex_boundary(topology, "DeadLandsHex")
        assert ring[0] == pytest.approx((HEX_SIZE, 0.0))

    @pytest.mark.parametrize("neighbour", ["CallahansPassageHex", "UmbralWildwoodHex",
                                           "DrownedValeHex", "LinnMercyHex"])
    def test_neighbours_share_an_edge(self, topology, neighbour):
        a = Polygon(hex_boundary(topology, "DeadLandsHex"))
        b = Polygon(hex_boundary(topology, neighbour))
        assert a.intersection(b).area == pytest.approx(0.0, abs=1e-6)
        assert a.distance(b) == pytest.approx(0.0, abs=1e-6)
        shared = [
            v for v in hex_boundary(topology, "DeadLandsHex")[:-1]
            if any(math.hypot(v.x - w.x, v.y - w.y) < 1e-6
                   for w in hex_boundary(topology, neighbour)[:-1])
        ]
        assert len(shared) == 2
