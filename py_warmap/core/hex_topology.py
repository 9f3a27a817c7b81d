"""
Static registry of hex tiles.

The topology is the authoritative source of where each hex sits in global
space. It is built once from the layout table and is read-only afterwards.
"""

import math
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

import structlog

from ..config.hex_layout import HEX_LAYOUT, HexLayoutEntry
from .errors import UnknownHex
from .points import GlobalPoint

logger = structlog.get_logger()


@dataclass(frozen=True)
class HexTile:
    """One hex region of the world map."""
    id: str
    display_name: str
    global_center: GlobalPoint


def axial_to_global(q: int, r: int, hex_size: float) -> GlobalPoint:
    """
    Convert an axial lattice slot to the center of a flat-top hex.

    Neighbouring slots end up exactly sqrt(3) * hex_size apart, so the
    hexagons share edges without gaps. Global y grows northward, axial r
    grows southward, hence the sign flip.

    Args:
        q: Axial column
        r: Axial row
        hex_size: Hex circumradius

    Returns:
        Global center of the slot
    """
    x = hex_size * 1.5 * q
    y = -hex_size * math.sqrt(3) * (r + q / 2)
    return GlobalPoint(x, y)


class HexTopology:
    """Read-only lookup of hex tiles by identifier."""

    def __init__(self, tiles: Iterable[HexTile], hex_size: float):
        self.hex_size = hex_size
        self._tiles: Dict[str, HexTile] = {}
        for tile in tiles:
            if tile.id in self._tiles:
                raise ValueError(f"Duplicate hex id in topology: {tile.id}")
            self._tiles[tile.id] = tile

    @classmethod
    def from_layout(cls, hex_size: float,
                    layout: Optional[List[HexLayoutEntry]] = None) -> "HexTopology":
        """Build a topology from an axial layout table."""
        layout = HEX_LAYOUT if layout is None else layout
        tiles = [
            HexTile(
                id=entry.hex_id,
                display_name=entry.display_name,
                global_center=axial_to_global(entry.q, entry.r, hex_size),
            )
            for entry in layout
        ]
        logger.debug("Hex topology built", tiles=len(tiles), hex_size=hex_size)
        return cls(tiles, hex_size)

    def tile(self, hex_id: str) -> HexTile:
        try:
            return self._tiles[hex_id]
        except KeyError:
            raise UnknownHex(hex_id) from None

    def center(self, hex_id: str) -> GlobalPoint:
        """Global center of a hex; raises UnknownHex for ids not in the table."""
        return self.tile(hex_id).global_center

    def display_name(self, hex_id: str) -> str:
        return self.tile(hex_id).display_name

    def all_hex_ids(self) -> List[str]:
        """All hex ids in stable table order."""
        return list(self._tiles)

    def validate(self, hex_ids: Iterable[str]) -> None:
        """Raise UnknownHex for the first id missing from the table."""
        for hex_id in hex_ids:
            if hex_id not in self._tiles:
                raise UnknownHex(hex_id)

    def __contains__(self, hex_id: object) -> bool:
        return hex_id in self._tiles

    def __len__(self) -> int:
        return len(self._tiles)

    def __iter__(self) -> Iterator[HexTile]:
        return iter(self._tiles.values())
