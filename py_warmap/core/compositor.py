"""
Layer composition boundary.

Turns a snapshot into z-ordered map layers of GeoJSON features. The
renderer consumes these as-is; no geometry is computed past this point.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import structlog
from shapely.geometry import Point, Polygon, mapping

from .hex_geometry import hexagon
from .hex_topology import HexTopology
from .labels import LABEL_SCALE, LABEL_ZOOM, LabelSize
from .layer_groups import LayerGroupStates
from .points import is_finite_point
from .snapshot import MapSnapshot, filter_structures
from .structures import ClassifiedStructure

logger = structlog.get_logger()

STRUCTURE_Z = 40
HEX_OUTLINE_Z = 90
REGION_LABEL_Z = 90
HEX_NAME_Z = 91
SECTOR_Z = 92

HEX_NAME_MAX_ZOOM = 6


@dataclass
class MapLayer:
    """One renderable layer."""
    title: str
    z_index: int
    features: List[Dict[str, Any]] = field(default_factory=list)
    visible: bool = True
    opacity: float = 1.0
    min_zoom: Optional[float] = None
    max_zoom: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "zIndex": self.z_index,
            "visible": self.visible,
            "opacity": self.opacity,
            "minZoom": self.min_zoom,
            "maxZoom": self.max_zoom,
            "features": feature_collection(self.features),
        }


def feature(geometry, **properties) -> Dict[str, Any]:
    return {"type": "Feature", "geometry": mapping(geometry), "properties": properties}


def feature_collection(features: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"type": "FeatureCollection", "features": list(features)}


def structure_feature(structure: ClassifiedStructure) -> Dict[str, Any]:
    return feature(
        Point(structure.global_position),
        name=structure.friendly_label,
        structureType=int(structure.type_code),
        teamId=structure.team.value,
        isVictoryPoint=structure.is_victory_point,
        isScorched=structure.is_scorched,
        flags=structure.flags,
        layerGroup=structure.layer_group,
        icon=structure.icon,
        iconColor=structure.icon_color.to_hex(),
        hexId=structure.hex_id,
    )


def structure_layers(snapshot: MapSnapshot, states: LayerGroupStates) -> List[MapLayer]:
    """One layer per layer group; hidden groups get an empty layer."""
    visible = filter_structures(snapshot, states.is_visible)
    layers = []
    for group in snapshot.structures_by_group:
        features = []
        for structure in visible.get(group, ()):
            if structure.global_position is None or not is_finite_point(structure.global_position):
                logger.warning("Skipping structure without a drawable position",
                               hex_id=structure.hex_id, type_code=structure.type_code)
                continue
            features.append(structure_feature(structure))
        layers.append(MapLayer(
            title=group,
            z_index=STRUCTURE_Z,
            features=features,
            visible=group in visible,
            opacity=states.opacity(group),
        ))
    return layers


def hex_outline_layers(topology: HexTopology) -> List[MapLayer]:
    outlines = []
    names = []
    for tile in topology:
        ring = hexagon(tile.global_center, topology.hex_size)
        outlines.append(feature(Polygon(ring), hexId=tile.id, name=tile.display_name))
        names.append(feature(Point(tile.global_center), hexId=tile.id, text=tile.display_name))

    return [
        MapLayer(title="Hexagon", z_index=HEX_OUTLINE_Z, features=outlines),
        MapLayer(title="Hex Names", z_index=HEX_NAME_Z, features=names,
                 max_zoom=HEX_NAME_MAX_ZOOM),
    ]


def label_layers(snapshot: MapSnapshot) -> List[MapLayer]:
    layers = []
    for size in LabelSize:
        labels = [label for label in snapshot.labels if label.size_class == size]
        if not labels:
            continue
        min_zoom, max_zoom = LABEL_ZOOM[size]
        layers.append(MapLayer(
            title=f"{size.value} Regions",
            z_index=REGION_LABEL_Z,
            features=[
                feature(Point(label.global_position), text=label.text,
                        scale=LABEL_SCALE[size], hexId=label.hex_id)
                for label in labels
            ],
            min_zoom=min_zoom,
            max_zoom=max_zoom,
        ))
    return layers


def sector_layer(snapshot: MapSnapshot) -> MapLayer:
    return MapLayer(
        title="Hex Sectors",
        z_index=SECTOR_Z,
        features=[
            feature(sector.geometry, colour=sector.color.to_css(), hexId=sector.hex_id)
            for sector in snapshot.all_sectors()
        ],
    )


def compose_layers(snapshot: MapSnapshot, topology: HexTopology,
                   states: Optional[LayerGroupStates] = None) -> List[MapLayer]:
    """
    All map layers for a snapshot, sorted by z-index.

    Args:
        snapshot: Result of a refresh
        topology: Hex registry for outlines and names
        states: Layer group visibility; defaults to everything visible

    Returns:
        Layers in ascending z order; equal z keeps composition order
    """
    if states is None:
        states = LayerGroupStates.defaults()
    layers = (
        structure_layers(snapshot, states)
        + hex_outline_layers(topology)
        + label_layers(snapshot)
        + [sector_layer(snapshot)]
    )
    layers.sort(key=lambda layer: layer.z_index)
    logger.debug("Layers composed", generation=snapshot.generation, layers=len(layers))
    return layers
