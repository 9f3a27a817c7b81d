"""Region text labels reported by the static map data."""

from dataclasses import dataclass
from enum import Enum

from .points import GlobalPoint


class LabelSize(str, Enum):
    MAJOR = "Major"
    MINOR = "Minor"


# (min_zoom, max_zoom) per size class
LABEL_ZOOM = {
    LabelSize.MAJOR: (5, 7),
    LabelSize.MINOR: (6, 7),
}

LABEL_SCALE = {
    LabelSize.MAJOR: 1.5,
    LabelSize.MINOR: 1.0,
}


@dataclass(frozen=True)
class MapLabel:
    """A normalized region label."""
    hex_id: str
    global_position: GlobalPoint
    text: str
    size_class: LabelSize

    @property
    def layer_title(self) -> str:
        return f"{self.size_class.value} Regions"
