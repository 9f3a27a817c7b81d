"""
Static world layout: every hex region, its display name and its lattice slot.

Slots are axial (q, r) coordinates on a flat-top hex lattice with the
Deadlands at the origin. q grows eastward, r grows south-eastward. The
topology turns them into global centers for a given hex size, so this table
holds no distances and can be swapped for another world layout.
"""

from typing import List, NamedTuple


class HexLayoutEntry(NamedTuple):
    """One row of the layout table."""
    hex_id: str
    display_name: str
    q: int
    r: int


HEX_LAYOUT: List[HexLayoutEntry] = [
    # Center column
    HexLayoutEntry("BasinSionnachHex", "Basin Sionnach", 0, -3),
    HexLayoutEntry("ReachingTrailHex", "Reaching Trail", 0, -2),
    HexLayoutEntry("CallahansPassageHex", "Callahans Passage", 0, -1),
    HexLayoutEntry("DeadLandsHex", "Deadlands", 0, 0),
    HexLayoutEntry("UmbralWildwoodHex", "Umbral Wildwood", 0, 1),
    HexLayoutEntry("GreatMarchHex", "Great March", 0, 2),
    HexLayoutEntry("KalokaiHex", "Kalokai", 0, 3),

    # West
    HexLayoutEntry("SpeakingWoodsHex", "Speaking Woods", -1, -2),
    HexLayoutEntry("MooringCountyHex", "Mooring County", -1, -1),
    HexLayoutEntry("LinnMercyHex", "Linn of Mercy", -1, 0),
    HexLayoutEntry("LochMorHex", "Loch Mor", -1, 1),
    HexLayoutEntry("HeartlandsHex", "Heartlands", -1, 2),
    HexLayoutEntry("RedRiverHex", "Red River", -1, 3),

    HexLayoutEntry("CallumsCapeHex", "Callums Cape", -2, -1),
    HexLayoutEntry("StonecradleHex", "Stonecradle", -2, 0),
    HexLayoutEntry("KingsCageHex", "Kings Cage", -2, 1),
    HexLayoutEntry("SableportHex", "Sableport", -2, 2),
    HexLayoutEntry("AshFieldsHex", "Ash Fields", -2, 3),

    HexLayoutEntry("NevishLineHex", "Nevish Line", -3, 0),
    HexLayoutEntry("FarranacCoastHex", "Farranac Coast", -3, 1),
    HexLayoutEntry("WestgateHex", "Westgate", -3, 2),
    HexLayoutEntry("OriginHex", "Origin", -3, 3),

    HexLayoutEntry("OarbreakerHex", "Oarbreaker", -4, 1),
    HexLayoutEntry("FishermansRowHex", "Fishermans Row", -4, 2),
    HexLayoutEntry("StemaLandingHex", "Stema Landing", -4, 3),

    # East
    HexLayoutEntry("HowlCountyHex", "Howl County", 1, -3),
    HexLayoutEntry("ViperPitHex", "Viper Pit", 1, -2),
    HexLayoutEntry("MarbanHollow", "Marban Hollow", 1, -1),
    HexLayoutEntry("DrownedValeHex", "Drowned Vale", 1, 0),
    HexLayoutEntry("ShackledChasmHex", "Shackled Chasm", 1, 1),
    HexLayoutEntry("AcrithiaHex", "Acrithia", 1, 2),

    HexLayoutEntry("ClansheadValleyHex", "Clanshead Valley", 2, -3),
    HexLayoutEntry("MorgensCrossingHex", "Morgens Crossing", 2, -2),
    HexLayoutEntry("WeatheredExpanseHex", "Weathered Expanse", 2, -1),
    HexLayoutEntry("AllodsBightHex", "Allods Bight", 2, 0),
    HexLayoutEntry("TerminusHex", "Terminus", 2, 1),

    HexLayoutEntry("GodcroftsHex", "Godcrofts", 3, -3),
    HexLayoutEntry("StlicanShelfHex", "Stlican Shelf", 3, -2),
    HexLayoutEntry("EndlessShoreHex", "Endless Shore", 3, -1),
    HexLayoutEntry("ReaversPassHex", "Reavers Pass", 3, 0),

    HexLayoutEntry("TempestIslandHex", "Tempest Island", 4, -3),
    HexLayoutEntry("TheFingersHex", "The Fingers", 4, -2),
    HexLayoutEntry("ClahstraHex", "Clahstra", 4, -1),
]
