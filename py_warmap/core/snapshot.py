"""
Per-refresh geometry snapshot.

build_snapshot turns one batch of raw hex data into an immutable
MapSnapshot: every structure classified and normalized, every hex
tessellated into sectors. Filtering for visibility is a pure function of a
snapshot and a set of visible layer groups, so nothing is recomputed when
the user toggles a group.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

import structlog

from .coordinates import CoordinateNormalizer
from .errors import InvalidGeometry
from .hex_geometry import hex_boundary
from .hex_topology import HexTopology
from .labels import MapLabel
from .sectors import SectorPoint, SectorPolygon, tessellate
from .structures import (
    GROUP_NAMES,
    ClassifiedStructure,
    VictoryPointSummary,
    classify,
    is_sector_base,
    sector_color,
    summarize_victory_points,
)
from .war_data import WarMapData

logger = structlog.get_logger()

GroupFilter = Union[Iterable[str], Callable[[str], bool]]


@dataclass(frozen=True)
class HexResult:
    """Everything computed for one hex."""
    hex_id: str
    structures: Tuple[ClassifiedStructure, ...]
    sectors: Tuple[SectorPolygon, ...]
    error: Optional[str] = None


@dataclass(frozen=True)
class MapSnapshot:
    """Immutable result of one successful refresh."""
    shard: str
    generation: int
    structures: Tuple[ClassifiedStructure, ...]
    structures_by_group: Mapping[str, Tuple[ClassifiedStructure, ...]]
    sectors: Mapping[str, Tuple[SectorPolygon, ...]]
    labels: Tuple[MapLabel, ...] = ()
    victory_points: Optional[VictoryPointSummary] = None
    failed_hexes: Tuple[str, ...] = field(default=())

    def all_sectors(self) -> Iterator[SectorPolygon]:
        for sectors in self.sectors.values():
            yield from sectors

    @property
    def hex_ids(self) -> List[str]:
        return list(self.sectors)


def process_hex(hex_id: str, data: WarMapData, topology: HexTopology,
                normalizer: CoordinateNormalizer) -> HexResult:
    """
    Classify, normalize and tessellate one hex.

    A tessellation failure only empties this hex's sectors.
    """
    structures = []
    sector_points = []
    for raw in data.structures():
        global_position = normalizer.normalize(hex_id, raw.local_position)
        classified = classify(raw, hex_id=hex_id, global_position=global_position)
        structures.append(classified)
        if is_sector_base(raw.type_code):
            sector_points.append(SectorPoint(global_position, sector_color(classified.team)))

    boundary = hex_boundary(topology, hex_id)
    error = None
    try:
        sectors = tessellate(boundary, sector_points, hex_id=hex_id)
    except InvalidGeometry as exc:
        logger.error("Sector tessellation failed, hex left unshaded",
                     hex_id=hex_id, error=str(exc))
        sectors = []
        error = str(exc)

    return HexResult(
        hex_id=hex_id,
        structures=tuple(structures),
        sectors=tuple(sectors),
        error=error,
    )


def normalize_labels(static_data: Mapping[str, WarMapData], topology: HexTopology,
                     normalizer: CoordinateNormalizer) -> Tuple[MapLabel, ...]:
    """Region labels of every hex in table order."""
    topology.validate(static_data.keys())
    labels = []
    for hex_id in topology.all_hex_ids():
        data = static_data.get(hex_id)
        if data is None:
            continue
        for item in data.map_text_items:
            labels.append(MapLabel(
                hex_id=hex_id,
                global_position=normalizer.normalize(hex_id, (item.x, item.y)),
                text=item.text,
                size_class=item.map_marker_type,
            ))
    return tuple(labels)


def group_structures(structures: Iterable[ClassifiedStructure]) -> Dict[str, Tuple[ClassifiedStructure, ...]]:
    """Bucket structures by layer group, groups in canonical order."""
    buckets: Dict[str, List[ClassifiedStructure]] = {}
    for structure in structures:
        buckets.setdefault(structure.layer_group, []).append(structure)

    order = {name: i for i, name in enumerate(GROUP_NAMES)}
    return {
        name: tuple(buckets[name])
        for name in sorted(buckets, key=lambda n: (order.get(n, len(order)), n))
    }


def build_snapshot(map_data: Mapping[str, WarMapData], topology: HexTopology,
                   normalizer: CoordinateNormalizer, *, shard: str, generation: int = 0,
                   static_data: Optional[Mapping[str, WarMapData]] = None,
                   required_victory_towns: Optional[int] = None,
                   max_workers: int = 1) -> MapSnapshot:
    """
    Compute the complete geometry set for one refresh.

    Args:
        map_data: Dynamic data per hex id
        topology: Hex registry
        normalizer: Local-to-global transform
        shard: Shard the data came from
        generation: Refresh sequence number
        static_data: Optional static data per hex id, source of region labels
        required_victory_towns: When given, a victory point summary is added
        max_workers: Threads used for per-hex work

    Returns:
        MapSnapshot

    Raises:
        UnknownHex: a hex id is missing from the topology; nothing is built
    """
    topology.validate(map_data.keys())

    # Table order keeps output deterministic regardless of fetch order
    hex_ids = [hex_id for hex_id in topology.all_hex_ids() if hex_id in map_data]

    logger.info("Building map snapshot", shard=shard, generation=generation,
                hexes=len(hex_ids), workers=max_workers)

    def run(hex_id: str) -> HexResult:
        return process_hex(hex_id, map_data[hex_id], topology, normalizer)

    if max_workers > 1 and len(hex_ids) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            results = list(executor.map(run, hex_ids))
    else:
        results = [run(hex_id) for hex_id in hex_ids]

    structures = tuple(s for result in results for s in result.structures)
    labels = normalize_labels(static_data, topology, normalizer) if static_data else ()

    victory_points = None
    if required_victory_towns is not None:
        victory_points = summarize_victory_points(structures, required_victory_towns)

    failed = tuple(result.hex_id for result in results if result.error is not None)

    snapshot = MapSnapshot(
        shard=shard,
        generation=generation,
        structures=structures,
        structures_by_group=MappingProxyType(group_structures(structures)),
        sectors=MappingProxyType({result.hex_id: result.sectors for result in results}),
        labels=labels,
        victory_points=victory_points,
        failed_hexes=failed,
    )

    logger.info("Map snapshot built", shard=shard, generation=generation,
                structures=len(structures),
                sectors=sum(len(result.sectors) for result in results),
                labels=len(labels), failed_hexes=len(failed))
    return snapshot


def filter_structures(snapshot: MapSnapshot,
                      visible_groups: GroupFilter) -> Dict[str, Tuple[ClassifiedStructure, ...]]:
    """
    Structures of the visible layer groups only.

    Pure re-filter of already classified output: accepts a collection of
    group names or a predicate over group names.
    """
    if callable(visible_groups):
        is_visible = visible_groups
    else:
        names = frozenset(visible_groups)
        is_visible = names.__contains__

    return {
        group: structures
        for group, structures in snapshot.structures_by_group.items()
        if is_visible(group)
    }
