"""Shared fixtures for map geometry tests."""

import pytest

from py_warmap.core.coordinates import CoordinateNormalizer
from py_warmap.core.hex_topology import HexTopology

from factories import HEX_SIZE


@pytest.fixture
def topology():
    return HexTopology.from_layout(HEX_SIZE)


@pytest.fixture
def normalizer(topology):
    return CoordinateNormalizer(topology)
