"""
Raw War API payloads.

These models are the fixed contract with the data-fetch collaborator. Field
names follow the API's camelCase through aliases; unknown fields are
ignored so API additions do not break parsing.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .labels import LabelSize
from .points import LocalPoint
from .structures import Structure, TeamId


class _ApiModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class MapItem(_ApiModel):
    """One structure entry of a hex's dynamic data."""

    team_id: str = Field("NONE", alias="teamId")
    icon_type: int = Field(..., ge=0, alias="iconType")
    x: float
    y: float
    flags: int = Field(0, ge=0)

    def to_structure(self) -> Structure:
        return Structure(
            local_position=LocalPoint(self.x, self.y),
            type_code=self.icon_type,
            team=TeamId.parse(self.team_id),
            flags=self.flags,
        )


class MapTextItem(_ApiModel):
    """One region label of a hex's static data."""

    text: str
    x: float
    y: float
    map_marker_type: LabelSize = Field(LabelSize.MINOR, alias="mapMarkerType")


class WarMapData(_ApiModel):
    """Dynamic or static data of one hex."""

    map_name: Optional[str] = Field(None, alias="mapName")
    region_id: Optional[int] = Field(None, alias="regionId")
    scorched_victory_towns: int = Field(0, alias="scorchedVictoryTowns")
    map_items: List[MapItem] = Field(default_factory=list, alias="mapItems")
    map_text_items: List[MapTextItem] = Field(default_factory=list, alias="mapTextItems")
    last_updated: Optional[int] = Field(None, alias="lastUpdated")
    version: Optional[int] = None

    def structures(self) -> List[Structure]:
        return [item.to_structure() for item in self.map_items]


class WarData(_ApiModel):
    """Current war summary."""

    war_id: str = Field(..., alias="warId")
    war_number: int = Field(..., alias="warNumber")
    winner: str = "NONE"
    conquest_start_time: Optional[int] = Field(None, alias="conquestStartTime")
    conquest_end_time: Optional[int] = Field(None, alias="conquestEndTime")
    resistance_start_time: Optional[int] = Field(None, alias="resistanceStartTime")
    required_victory_towns: int = Field(0, alias="requiredVictoryTowns")

