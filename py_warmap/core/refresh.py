"""
Refresh orchestration.

A refresh fetches every hex as one unit, builds a new snapshot and publishes
it wholesale. Failures keep the previously published snapshot. Refreshes
are numbered; only the most recently requested one may publish, so a slow
older refresh finishing late never overwrites newer geometry.
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Mapping, Optional, Union

import structlog

from .compositor import MapLayer, compose_layers
from .coordinates import CoordinateNormalizer
from .errors import FetchFailure, UnknownHex
from .hex_topology import HexTopology
from .layer_groups import LayerGroupStates
from .snapshot import MapSnapshot, build_snapshot
from .war_data import WarData, WarMapData

logger = structlog.get_logger()


@dataclass(frozen=True)
class FetchResult:
    """One complete batch from the data-fetch collaborator."""
    dynamic: Mapping[str, WarMapData]
    static: Optional[Mapping[str, WarMapData]] = None
    war: Optional[WarData] = None


Fetcher = Callable[[str], Awaitable[Union[FetchResult, Mapping[str, WarMapData]]]]


class MapRefresher:
    """Owns the last published snapshot and the refresh sequence."""

    def __init__(self, fetcher: Fetcher, topology: HexTopology,
                 normalizer: CoordinateNormalizer, default_shard: str = "able",
                 max_workers: int = 1):
        self.fetcher = fetcher
        self.topology = topology
        self.normalizer = normalizer
        self.default_shard = default_shard
        self.max_workers = max_workers
        self._generation = 0
        self._snapshot: Optional[MapSnapshot] = None
        self._view: List[MapLayer] = []

    @property
    def snapshot(self) -> Optional[MapSnapshot]:
        """Last successfully published snapshot."""
        return self._snapshot

    @property
    def view(self) -> List[MapLayer]:
        """Layers from the last recompute_view call."""
        return self._view

    @property
    def latest_generation(self) -> int:
        """Sequence number of the most recently requested refresh."""
        return self._generation

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    async def refresh(self, shard: Optional[str] = None) -> Optional[MapSnapshot]:
        """
        Fetch, build and publish a new snapshot.

        Returns:
            The published snapshot, or None when the refresh failed or was
            superseded by a newer one. The previous snapshot stays in place
            in both cases.
        """
        shard = shard or self.default_shard
        self._generation += 1
        generation = self._generation
        log = logger.bind(shard=shard, generation=generation)
        log.info("Refresh started")

        try:
            batch = await self.fetcher(shard)
        except FetchFailure as exc:
            log.warning("Map data fetch failed, keeping previous geometry",
                        error=str(exc), hex_id=exc.hex_id)
            return None
        except Exception:
            log.exception("Map data fetcher raised, keeping previous geometry")
            return None

        if self._is_stale(generation):
            log.info("Discarding superseded refresh", latest=self._generation)
            return None

        if not isinstance(batch, FetchResult):
            batch = FetchResult(dynamic=batch)

        required = batch.war.required_victory_towns if batch.war is not None else None
        try:
            snapshot = await asyncio.to_thread(
                build_snapshot,
                batch.dynamic,
                self.topology,
                self.normalizer,
                shard=shard,
                generation=generation,
                static_data=batch.static,
                required_victory_towns=required,
                max_workers=self.max_workers,
            )
        except UnknownHex as exc:
            log.error("Map data references unknown hex, keeping previous geometry",
                      hex_id=exc.hex_id)
            return None

        if self._is_stale(generation):
            log.info("Discarding superseded refresh", latest=self._generation)
            return None

        self._snapshot = snapshot
        log.info("Refresh published", structures=len(snapshot.structures),
                 failed_hexes=list(snapshot.failed_hexes))
        return snapshot

    def recompute_view(self, states: Optional[LayerGroupStates] = None) -> List[MapLayer]:
        """
        Compose layers from the latest snapshot and visibility state.

        Call directly after every visibility or opacity change. The result is
        kept as ``view`` until the next call.
        """
        if self._snapshot is None:
            self._view = []
        else:
            self._view = compose_layers(self._snapshot, self.topology, states)
        return self._view
