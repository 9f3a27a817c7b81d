"""
Structure classification.

This module implements:
- Type code -> friendly label / icon / layer group lookup
- Victory point and scorched flag decoding
- Team color palettes for icons and sector fills
- Victory point tallies across the whole map

Classification is total: unknown type codes and teams fall back to
documented defaults and only produce a warning.
"""

import re
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Dict, FrozenSet, Iterable, NamedTuple, Optional

import structlog

from .colors import Color
from .points import GlobalPoint, LocalPoint

logger = structlog.get_logger()

VICTORY_POINT_FLAG = 0x01
SCORCHED_FLAG = 0x10

UNKNOWN_LABEL = "Unknown Structure"
VICTORY_POINT_LABEL = "Victory Point"
OTHER_GROUP = "Other"


class TeamId(str, Enum):
    """Owning team of a structure."""

    NONE = "NONE"
    WARDENS = "WARDENS"
    COLONIALS = "COLONIALS"

    @classmethod
    def parse(cls, value) -> "TeamId":
        """Lenient conversion; anything unrecognised is neutral."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            logger.warning("Unknown team id, treating as neutral", team=value)
            return cls.NONE


class MapStructure(IntEnum):
    """Structure type codes reported by the War API."""

    # Static Bases - removed in Update 46
    StaticBase1 = 5
    StaticBase2 = 6
    StaticBase3 = 7

    ForwardBase1 = 8
    ForwardBase2 = 9
    ForwardBase3 = 10

    Hospital = 11
    VehicleFactory = 12
    Armory = 13
    SupplyStation = 14
    Workshop = 15
    ManufacturingPlant = 16
    Refinery = 17
    Shipyard = 18
    TechCenter = 19

    SalvageField = 20
    ComponentField = 21
    FuelField = 22
    SulfurField = 23
    WorldMapTent = 24
    TravelTent = 25
    TrainingArea = 26
    SpecialBaseKeep = 27
    ObservationTower = 28
    Fort = 29
    TroopShip = 30
    SulfurMine = 32
    StorageFacility = 33
    Factory = 34
    GarrisonStation = 35
    AmmoFactory = 36
    RocketSite = 37
    SalvageMine = 38
    ConstructionYard = 39
    ComponentMine = 40
    OilWell = 41

    RelicBase1 = 45
    RelicBase2 = 46
    RelicBase3 = 47

    MassProductionFactory = 51
    Seaport = 52
    CoastalGun = 53
    SoulFactory = 54

    TownBase1 = 56
    TownBase2 = 57
    TownBase3 = 58

    StormCannon = 59
    IntelCenter = 60

    CoalField = 61
    OilField = 62

    RocketTarget = 70
    RocketGroundZero = 71
    RocketSiteWithRocket = 72

    FacilityMineOilRig = 75

    WeatherStation = 83
    MortarHouse = 84


# Territorial bases: the only structures that seed sector tessellation
SECTOR_BASES: FrozenSet[int] = frozenset({
    MapStructure.TownBase1, MapStructure.TownBase2, MapStructure.TownBase3,
    MapStructure.RelicBase1, MapStructure.RelicBase2, MapStructure.RelicBase3,
})

# Layer group buckets for combined show/hide control
LAYER_GROUPS: Dict[int, str] = {
    MapStructure.CoalField: "Fields",
    MapStructure.OilField: "Fields",
    MapStructure.FuelField: "Fields",
    MapStructure.SalvageField: "Fields",
    MapStructure.ComponentField: "Fields",
    MapStructure.SulfurField: "Fields",

    MapStructure.SalvageMine: "Mines",
    MapStructure.SulfurMine: "Mines",
    MapStructure.ComponentMine: "Mines",
    MapStructure.OilWell: "Mines",

    MapStructure.StorageFacility: "Storage",
    MapStructure.Seaport: "Storage",

    MapStructure.Refinery: "Refinery",

    MapStructure.Factory: "Factory",
    MapStructure.MassProductionFactory: "Factory",

    MapStructure.VehicleFactory: "Garage",
    MapStructure.Shipyard: "Garage",

    MapStructure.Hospital: "Hospital",
    MapStructure.TechCenter: "Tech Center",
    MapStructure.StormCannon: "Storm Cannon",
    MapStructure.IntelCenter: "Intelligence Center",
    MapStructure.WeatherStation: "Weather Station",

    MapStructure.RocketGroundZero: "Rocket",
    MapStructure.RocketSite: "Rocket",
    MapStructure.RocketSiteWithRocket: "Rocket",
    MapStructure.RocketTarget: "Rocket",

    MapStructure.RelicBase1: "Relic Base",
    MapStructure.RelicBase2: "Relic Base",
    MapStructure.RelicBase3: "Relic Base",

    MapStructure.SpecialBaseKeep: "Keep",

    MapStructure.TownBase1: "Town Base",
    MapStructure.TownBase2: "Town Base",
    MapStructure.TownBase3: "Town Base",
}

# Every group name in first-seen order, "Other" last
GROUP_NAMES = tuple(dict.fromkeys(LAYER_GROUPS.values())) + (OTHER_GROUP,)

ICON_DIR = "./assets"
UNKNOWN_ICON = f"{ICON_DIR}/unknown.webp"
VICTORY_POINT_ICON = f"{ICON_DIR}/MapIconTownHallNeutral.webp"

MAP_ICONS: Dict[int, str] = {
    MapStructure.CoalField: "MapIconCoalFieldColor.webp",
    MapStructure.CoastalGun: "MapIconCoastalGun.webp",
    MapStructure.ComponentMine: "MapIconComponentMineColor.webp",
    MapStructure.ComponentField: "MapIconComponentsColor.webp",
    MapStructure.ConstructionYard: "MapIconConstructionYard.webp",
    MapStructure.Factory: "MapIconFactory.webp",
    MapStructure.OilField: "MapIconOilFieldColor.webp",
    MapStructure.IntelCenter: "MapIconIntelcenter.webp",
    MapStructure.Refinery: "MapIconManufacturing.webp",
    MapStructure.ObservationTower: "MapIconObservationTower.webp",
    MapStructure.RelicBase1: "MapIconRelicBase.webp",
    MapStructure.RelicBase2: "MapIconRelicBase.webp",
    MapStructure.RelicBase3: "MapIconRelicBase.webp",
    MapStructure.ForwardBase1: "MapIconSafeHouse.webp",
    MapStructure.SalvageField: "MapIconSalvageColor.webp",
    MapStructure.Seaport: "MapIconSeaport.webp",
    MapStructure.StormCannon: "MapIconStormcannon.webp",
    MapStructure.SulfurField: "MapIconSulfurColor.webp",
    MapStructure.TownBase1: "MapIconTownBaseTier1.webp",
    MapStructure.TownBase2: "MapIconTownBaseTier2.webp",
    MapStructure.TownBase3: "MapIconTownBaseTier3.webp",
    MapStructure.WeatherStation: "MapIconWeatherStation.webp",
    MapStructure.SalvageMine: "MapIconSalvageMineColor.webp",
    MapStructure.SulfurMine: "MapIconSulfurMineColor.webp",
    MapStructure.Shipyard: "Shipyard.webp",
    MapStructure.ManufacturingPlant: "MapIconManufacturingPlant.webp",
    MapStructure.TechCenter: "MapIconTechCenter.webp",
    MapStructure.MortarHouse: "MapIconMortarHouse.webp",
    MapStructure.StorageFacility: "MapIconStorageFacility.webp",
    MapStructure.MassProductionFactory: "MapIconMassProductionFactory.webp",
    MapStructure.VehicleFactory: "MapIconVehicle.webp",
    MapStructure.Hospital: "MapIconHospital.webp",
    MapStructure.RocketSite: "MapIconRocketSite.webp",
    MapStructure.RocketGroundZero: "MapIconRocketGroundZero.webp",
    MapStructure.RocketTarget: "MapIconRocketTarget.webp",
    MapStructure.RocketSiteWithRocket: "MapIconRocketSiteWithRocket.webp",
    MapStructure.FacilityMineOilRig: "MapIconFacilityMineOilRig.webp",
    MapStructure.SpecialBaseKeep: "MapIconsKeep.webp",
    MapStructure.GarrisonStation: "MapIconBorderBase.webp",
}

# Icon tints
TEAM_COLORS: Dict[TeamId, Color] = {
    TeamId.NONE: Color.from_hex("#dddddd"),
    TeamId.WARDENS: Color.from_hex("#2878bf"),
    TeamId.COLONIALS: Color.from_hex("#4d7e30"),
}
SCORCHED_COLOR = Color.from_hex("#e74c3c")

# Translucent sector fills
SECTOR_COLORS: Dict[TeamId, Color] = {
    TeamId.NONE: Color(221, 221, 221, 0.2),
    TeamId.WARDENS: Color(36, 86, 130, 0.3),
    TeamId.COLONIALS: Color(81, 108, 75, 0.3),
}


class StructureFlags(NamedTuple):
    """Decoded flag bits."""
    victory_point: bool
    scorched: bool


@dataclass(frozen=True)
class Structure:
    """One structure as reported inside a hex."""
    local_position: LocalPoint
    type_code: int
    team: TeamId = TeamId.NONE
    flags: int = 0


@dataclass(frozen=True)
class ClassifiedStructure:
    """A structure with everything the compositor needs to draw it."""
    local_position: LocalPoint
    type_code: int
    team: TeamId
    flags: int
    global_position: Optional[GlobalPoint]
    friendly_label: str
    team_color: Color
    layer_group: str
    icon: str
    icon_color: Color
    is_victory_point: bool
    is_scorched: bool
    hex_id: Optional[str] = None


class VictoryPointSummary(NamedTuple):
    """Victory point tally of a war."""
    warden: int
    colonial: int
    scorched: int
    required: int


def decode_flags(flags: int) -> StructureFlags:
    """Split a flag bitmask into its two defined bits; other bits are ignored."""
    return StructureFlags(
        victory_point=(flags & VICTORY_POINT_FLAG) == VICTORY_POINT_FLAG,
        scorched=(flags & SCORCHED_FLAG) == SCORCHED_FLAG,
    )


def _lookup_structure(type_code: int) -> Optional[MapStructure]:
    try:
        return MapStructure(type_code)
    except ValueError:
        return None


def friendly_name(type_code: int) -> str:
    """
    Human readable name of a structure type.

    Derived from the enum member name: "TownBase1" -> "Town Base 1",
    "FacilityMineOilRig" -> "Facility Mine Oil Rig".
    """
    structure = _lookup_structure(type_code)
    if structure is None:
        return UNKNOWN_LABEL

    with_spaces = re.sub(r"([A-Z0-9])", r" \1", structure.name).strip()
    fixed_numbers = re.sub(r"(\d) (?=\d)", r"\1", with_spaces)
    return " ".join(word[0].upper() + word[1:].lower() for word in fixed_numbers.split())


def layer_group(type_code: int) -> str:
    return LAYER_GROUPS.get(type_code, OTHER_GROUP)


def map_icon(type_code: int) -> str:
    icon = MAP_ICONS.get(type_code)
    if icon is None:
        logger.warning("Map icon not found", type_code=type_code,
                       structure=friendly_name(type_code))
        return UNKNOWN_ICON
    return f"{ICON_DIR}/{icon}"


def is_sector_base(type_code: int) -> bool:
    """True for the territorial base types that seed sectors."""
    return type_code in SECTOR_BASES


def team_color(team) -> Color:
    return TEAM_COLORS[TeamId.parse(team)]


def sector_color(team) -> Color:
    return SECTOR_COLORS[TeamId.parse(team)]


def structure_label(type_code: int, flags: int) -> str:
    """
    Display label after flag overrides.

    A victory point replaces the type name, scorched prefixes whatever the
    label is at that point, so both compose to "Scorched Victory Point".
    """
    decoded = decode_flags(flags)
    label = friendly_name(type_code)
    if decoded.victory_point:
        label = VICTORY_POINT_LABEL
    if decoded.scorched:
        label = f"Scorched {label}"
    return label


def classify(structure: Structure, hex_id: Optional[str] = None,
             global_position: Optional[GlobalPoint] = None) -> ClassifiedStructure:
    """
    Classify one structure.

    Args:
        structure: Raw structure
        hex_id: Hex it was reported in
        global_position: Normalized position, when already known

    Returns:
        ClassifiedStructure; never raises for any type code or flag value
    """
    team = TeamId.parse(structure.team)
    decoded = decode_flags(structure.flags)
    group = layer_group(structure.type_code)

    if _lookup_structure(structure.type_code) is None:
        logger.warning("Unmapped structure type", type_code=structure.type_code,
                       hex_id=hex_id, layer_group=group)

    icon = VICTORY_POINT_ICON if decoded.victory_point else map_icon(structure.type_code)
    color = team_color(team)

    return ClassifiedStructure(
        local_position=LocalPoint(*structure.local_position),
        type_code=structure.type_code,
        team=team,
        flags=structure.flags,
        global_position=global_position,
        friendly_label=structure_label(structure.type_code, structure.flags),
        team_color=color,
        layer_group=group,
        icon=icon,
        icon_color=SCORCHED_COLOR if decoded.scorched else color,
        is_victory_point=decoded.victory_point,
        is_scorched=decoded.scorched,
        hex_id=hex_id,
    )


def summarize_victory_points(structures: Iterable[ClassifiedStructure],
                             required_victory_towns: int) -> VictoryPointSummary:
    """
    Count victory points per team.

    Scorched victory points count as scorched regardless of owner and
    reduce the number of towns required to win.
    """
    warden = colonial = scorched = 0
    for structure in structures:
        if not structure.is_victory_point:
            continue
        if structure.is_scorched:
            scorched += 1
        elif structure.team == TeamId.WARDENS:
            warden += 1
        elif structure.team == TeamId.COLONIALS:
            colonial += 1

    return VictoryPointSummary(
        warden=warden,
        colonial=colonial,
        scorched=scorched,
        required=required_victory_towns - scorched,
    )
