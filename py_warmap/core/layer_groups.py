"""
Layer group visibility and opacity state.

State is an immutable value. Every operation returns a new LayerGroupStates
so a caller can hand the latest state together with the latest snapshot to
the compositor after each change.
"""

import json
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, Mapping, Optional

import structlog

from .structures import GROUP_NAMES

logger = structlog.get_logger()


@dataclass(frozen=True)
class LayerGroupState:
    group_id: str
    visible: bool = True
    opacity: float = 1.0


def _clamp_opacity(opacity: float) -> float:
    return max(0.0, min(1.0, float(opacity)))


class LayerGroupStates:
    """Visibility/opacity of every known layer group."""

    def __init__(self, states: Mapping[str, LayerGroupState]):
        self._states = MappingProxyType(dict(states))

    @classmethod
    def defaults(cls, group_ids: Iterable[str] = GROUP_NAMES) -> "LayerGroupStates":
        """Every group visible at full opacity."""
        return cls({gid: LayerGroupState(gid) for gid in group_ids})

    def get(self, group_id: str) -> Optional[LayerGroupState]:
        return self._states.get(group_id)

    def is_visible(self, group_id: str) -> bool:
        state = self._states.get(group_id)
        return state.visible if state else False

    def opacity(self, group_id: str) -> float:
        state = self._states.get(group_id)
        return state.opacity if state else 1.0

    def visible_groups(self) -> FrozenSet[str]:
        return frozenset(gid for gid, state in self._states.items() if state.visible)

    def _with(self, group_id: str, **changes) -> "LayerGroupStates":
        current = self._states.get(group_id)
        if current is None:
            logger.warning("Unknown layer group", group_id=group_id)
            return self
        states = dict(self._states)
        states[group_id] = replace(current, **changes)
        return LayerGroupStates(states)

    def toggle(self, group_id: str) -> "LayerGroupStates":
        return self._with(group_id, visible=not self.is_visible(group_id))

    def set_visibility(self, group_id: str, visible: bool) -> "LayerGroupStates":
        return self._with(group_id, visible=bool(visible))

    def set_opacity(self, group_id: str, opacity: float) -> "LayerGroupStates":
        return self._with(group_id, opacity=_clamp_opacity(opacity))

    def show_all(self) -> "LayerGroupStates":
        return LayerGroupStates({gid: replace(s, visible=True) for gid, s in self._states.items()})

    def hide_all(self) -> "LayerGroupStates":
        return LayerGroupStates({gid: replace(s, visible=False) for gid, s in self._states.items()})

    def to_json(self) -> str:
        config = [
            {"groupId": s.group_id, "visible": s.visible, "opacity": s.opacity}
            for s in self._states.values()
        ]
        return json.dumps(config, indent=2)

    @classmethod
    def from_json(cls, config_json: str,
                  group_ids: Iterable[str] = GROUP_NAMES) -> Optional["LayerGroupStates"]:
        """
        Restore states exported by to_json.

        Entries for unknown groups or with a non-boolean visibility are
        ignored; groups missing from the export get their defaults.

        Returns:
            New states, or None when the text is not a JSON list
        """
        try:
            config = json.loads(config_json)
        except json.JSONDecodeError as exc:
            logger.error("Failed to import layer configuration", error=str(exc))
            return None
        if not isinstance(config, list):
            logger.error("Layer configuration must be a list", got=type(config).__name__)
            return None

        states: Dict[str, LayerGroupState] = {gid: LayerGroupState(gid) for gid in group_ids}
        for item in config:
            if not isinstance(item, dict):
                continue
            group_id = item.get("groupId")
            visible = item.get("visible")
            if group_id not in states or not isinstance(visible, bool):
                continue
            opacity = item.get("opacity")
            if isinstance(opacity, bool) or not isinstance(opacity, (int, float)):
                opacity = 1.0
            states[group_id] = LayerGroupState(group_id, visible, _clamp_opacity(opacity))

        return cls(states)

    def __iter__(self) -> Iterator[LayerGroupState]:
        return iter(self._states.values())

    def __len__(self) -> int:
        return len(self._states)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LayerGroupStates):
            return NotImplemented
        return dict(self._states) == dict(other._states)

    def __repr__(self) -> str:
        return f"LayerGroupStates({list(self._states.values())!r})"
