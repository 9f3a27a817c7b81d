"""
Local-to-global coordinate normalization.

Every hex reports positions in its own space. The War API uses a normalized
[0, 1] square per hex with y growing downward; other sources may differ, so
the transform is an affine calibration per hex:

    global = center + R(rotation) * S(scale) * (local - origin)

The calibration origin lands exactly on the hex's global center. Exact
per-hex values are world calibration data, supplied through a JSON file and
not derived here.
"""

import json
import math
from pathlib import Path
from typing import Dict, Iterable, Optional, Union

import numpy as np
import structlog
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .errors import InvalidGeometry
from .hex_topology import HexTopology
from .points import GlobalPoint, LocalPoint

logger = structlog.get_logger()


class HexCalibration(BaseModel):
    """Affine calibration of one hex's local space."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    origin_x: float = Field(default=0.0, description="Local x that maps onto the hex center")
    origin_y: float = Field(default=0.0, description="Local y that maps onto the hex center")
    scale_x: float = Field(default=1.0, description="Global units per local x unit (signed)")
    scale_y: float = Field(default=1.0, description="Global units per local y unit (signed)")
    rotation_deg: float = Field(default=0.0, description="Counter-clockwise rotation of local axes")


def default_calibration(hex_size: float) -> HexCalibration:
    """
    Calibration matching the War API's normalized per-hex space.

    The [0, 1] square spans the hexagon's bounding box: vertex to vertex
    horizontally (2 * size) and flat side to flat side vertically
    (sqrt(3) * size). The API's y axis points down, global y points up.
    """
    return HexCalibration(
        origin_x=0.5,
        origin_y=0.5,
        scale_x=2.0 * hex_size,
        scale_y=-math.sqrt(3) * hex_size,
    )


_calibration_table = TypeAdapter(Dict[str, HexCalibration])


def load_calibration_file(path: Union[str, Path],
                          topology: Optional[HexTopology] = None) -> Dict[str, HexCalibration]:
    """
    Load per-hex calibration overrides from a JSON object keyed by hex id.

    Args:
        path: JSON file path
        topology: When given, every key must be a known hex

    Returns:
        Mapping of hex id to calibration
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    table = _calibration_table.validate_python(raw)
    if topology is not None:
        topology.validate(table.keys())
    logger.info("Loaded hex calibration", path=str(path), hexes=len(table))
    return table


class CoordinateNormalizer:
    """Converts per-hex local coordinates into global coordinates."""

    def __init__(self, topology: HexTopology,
                 default: Optional[HexCalibration] = None,
                 overrides: Optional[Dict[str, HexCalibration]] = None):
        self.topology = topology
        self.default = default or default_calibration(topology.hex_size)
        self.overrides = dict(overrides or {})
        topology.validate(self.overrides.keys())

    def calibration(self, hex_id: str) -> HexCalibration:
        return self.overrides.get(hex_id, self.default)

    def normalize(self, hex_id: str, local_point) -> GlobalPoint:
        """
        Map a local point of a hex into global space.

        Total for any finite input: points outside the hex's local range
        simply land outside its visual area.

        Args:
            hex_id: Hex the point was reported in
            local_point: (x, y) in that hex's local space

        Returns:
            Global point
        """
        center = self.topology.center(hex_id)
        cal = self.calibration(hex_id)
        lx, ly = local_point

        dx = (lx - cal.origin_x) * cal.scale_x
        dy = (ly - cal.origin_y) * cal.scale_y
        if cal.rotation_deg:
            theta = math.radians(cal.rotation_deg)
            cos_t, sin_t = math.cos(theta), math.sin(theta)
            dx, dy = dx * cos_t - dy * sin_t, dx * sin_t + dy * cos_t

        return GlobalPoint(center.x + dx, center.y + dy)

    def normalize_many(self, hex_id: str, local_points: Iterable) -> np.ndarray:
        """Vectorized normalize; returns an (n, 2) array."""
        pts = np.asarray(list(local_points), dtype=float).reshape(-1, 2)
        center = self.topology.center(hex_id)
        cal = self.calibration(hex_id)

        delta = (pts - [cal.origin_x, cal.origin_y]) * [cal.scale_x, cal.scale_y]
        if cal.rotation_deg:
            theta = math.radians(cal.rotation_deg)
            rot = np.array([[math.cos(theta), -math.sin(theta)],
                            [math.sin(theta), math.cos(theta)]])
            delta = delta @ rot.T

        return delta + [center.x, center.y]

    def to_local(self, hex_id: str, global_point) -> LocalPoint:
        """Inverse of normalize, used to place markers back into API space."""
        center = self.topology.center(hex_id)
        cal = self.calibration(hex_id)
        if cal.scale_x == 0 or cal.scale_y == 0:
            raise InvalidGeometry(f"Calibration for {hex_id} is not invertible")
        dx = global_point[0] - center.x
        dy = global_point[1] - center.y
        if cal.rotation_deg:
            theta = math.radians(-cal.rotation_deg)
            cos_t, sin_t = math.cos(theta), math.sin(theta)
            dx, dy = dx * cos_t - dy * sin_t, dx * sin_t + dy * cos_t
        return LocalPoint(dx / cal.scale_x + cal.origin_x, dy / cal.scale_y + cal.origin_y)


def build_normalizer(topology: HexTopology,
                     calibration_file: Optional[str] = None) -> CoordinateNormalizer:
    """Normalizer with the default calibration and optional file overrides."""
    overrides = {}
    if calibration_file:
        overrides = load_calibration_file(calibration_file, topology)
    return CoordinateNormalizer(topology, overrides=overrides)
