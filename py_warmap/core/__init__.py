"""
Core map geometry functionality.
"""

from .errors import WarMapError, UnknownHex, InvalidGeometry, FetchFailure
from .points import GlobalPoint, LocalPoint
from .hex_topology import HexTile, HexTopology
from .coordinates import CoordinateNormalizer, HexCalibration, build_normalizer
from .hex_geometry import hexagon, hex_boundary
from .structures import Structure, ClassifiedStructure, TeamId, MapStructure, classify
from .sectors import SectorPoint, SectorPolygon, tessellate
from .snapshot import MapSnapshot, build_snapshot, filter_structures
from .layer_groups import LayerGroupState, LayerGroupStates
from .compositor import MapLayer, compose_layers
from .refresh import FetchResult, MapRefresher

__all__ = ['WarMapError', 'UnknownHex', 'InvalidGeometry', 'FetchFailure',
           'GlobalPoint', 'LocalPoint', 'HexTile', 'HexTopology',
           'CoordinateNormalizer', 'HexCalibration', 'build_normalizer',
           'hexagon', 'hex_boundary',
           'Structure', 'ClassifiedStructure', 'TeamId', 'MapStructure', 'classify',
           'SectorPoint', 'SectorPolygon', 'tessellate',
           'MapSnapshot', 'build_snapshot', 'filter_structures',
           'LayerGroupState', 'LayerGroupStates', 'MapLayer', 'compose_layers',
           'FetchResult', 'MapRefresher']
