"""Tests for structure classification."""

import pytest

from py_warmap.core.colors import Color
from py_warmap.core.points import GlobalPoint, LocalPoint
from py_warmap.core.structures import (
    GROUP_NAMES,
    LAYER_GROUPS,
    OTHER_GROUP,
    SCORCHED_COLOR,
    SECTOR_COLORS,
    TEAM_COLORS,
    UNKNOWN_ICON,
    UNKNOWN_LABEL,
    VICTORY_POINT_ICON,
    MapStructure,
    Structure,
    TeamId,
    classify,
    decode_flags,
    friendly_name,
    is_sector_base,
    layer_group,
    map_icon,
    sector_color,
    structure_label,
    summarize_victory_points,
)


def structure(type_code, team=TeamId.NONE, flags=0):
    return Structure(LocalPoint(0.5, 0.5), int(type_code), team, flags)


class TestFriendlyName:
    """Test type code to label conversion."""

    @pytest.mark.parametrize("type_code,expected", [
        (MapStructure.TownBase1, "Town Base 1"),
        (MapStructure.FacilityMineOilRig, "Facility Mine Oil Rig"),
        (MapStructure.Hospital, "Hospital"),
        (MapStructure.RocketSiteWithRocket, "Rocket Site With Rocket"),
        (MapStructure.RelicBase3, "Relic Base 3"),
    ])
    def test_known_types(self, type_code, expected):
        assert friendly_name(type_code) == expected

    @pytest.mark.parametrize("type_code", [0, 31, 999, -1])
    def test_unknown_types(self, type_code):
        assert friendly_name(type_code) == UNKNOWN_LABEL


class TestFlags:
    """Test flag decoding and label overrides."""

    @pytest.mark.parametrize("flags,victory_point,scorched", [
        (0x00, False, False),
        (0x01, True, False),
        (0x10, False, True),
        (0x11, True, True),
        (0x02, False, False),
        (0x2F, True, False),
    ])
    def test_decode(self, flags, victory_point, scorched):
        decoded = decode_flags(flags)
        assert decoded.victory_point is victory_point
        assert decoded.scorched is scorched

    @pytest.mark.parametrize("flags,expected", [
        (0x00, "Town Base 1"),
        (0x01, "Victory Point"),
        (0x10, "Scorched Town Base 1"),
        (0x11, "Scorched Victory Point"),
    ])
    def test_label(self, flags, expected):
        assert structure_label(MapStructure.TownBase1, flags) == expected


class TestLookups:
    """Test group, icon and color tables."""

    def test_layer_group(self):
        assert layer_group(MapStructure.CoalField) == "Fields"
        assert layer_group(MapStructure.OilWell) == "Mines"
        assert layer_group(MapStructure.TownBase2) == "Town Base"
        assert layer_group(MapStructure.CoastalGun) == OTHER_GROUP
        assert layer_group(999) == OTHER_GROUP

    def test_group_names(self):
        assert GROUP_NAMES[-1] == OTHER_GROUP
        assert len(GROUP_NAMES) == len(set(GROUP_NAMES))
        assert set(LAYER_GROUPS.values()) | {OTHER_GROUP} == set(GROUP_NAMES)

    def test_map_icon(self):
        assert map_icon(MapStructure.Hospital).endswith("MapIconHospital.webp")
        assert map_icon(999) == UNKNOWN_ICON

    def test_sector_bases(self):
        for code in (MapStructure.TownBase1, MapStructure.TownBase3, MapStructure.RelicBase2):
            assert is_sector_base(code)
        for code in (MapStructure.ForwardBase1, MapStructure.Hospital, 999):
            assert not is_sector_base(code)

    def test_team_parse(self):
        assert TeamId.parse("WARDENS") is TeamId.WARDENS
        assert TeamId.parse("colonials") is TeamId.COLONIALS
        assert TeamId.parse(TeamId.NONE) is TeamId.NONE
        assert TeamId.parse("PIRATES") is TeamId.NONE

    def test_palettes(self):
        assert TEAM_COLORS[TeamId.WARDENS].to_hex() == "#2878bf"
        assert TEAM_COLORS[TeamId.COLONIALS].to_hex() == "#4d7e30"
        assert sector_color("WARDENS") == Color(36, 86, 130, 0.3)
        assert sector_color("nobody") == SECTOR_COLORS[TeamId.NONE]


class TestColor:
    """Test RGBA color helpers."""

    def test_from_hex(self):
        assert Color.from_hex("#e74c3c") == Color(231, 76, 60, 1.0)
        assert Color.from_hex("ddd") == Color(221, 221, 221, 1.0)

    def test_invalid_hex(self):
        with pytest.raises(ValueError):
            Color.from_hex("#12345")

    def test_css(self):
        assert Color(221, 221, 221, 0.2).to_css() == "rgba(221,221,221,0.2)"
        assert Color(1, 2, 3).with_alpha(0.5).to_css() == "rgba(1,2,3,0.5)"


class TestClassify:
    """Test full classification of a structure."""

    def test_plain_structure(self):
        result = classify(structure(MapStructure.Refinery, TeamId.COLONIALS), hex_id="OriginHex",
                          global_position=GlobalPoint(1.0, 2.0))
        assert result.friendly_label == "Refinery"
        assert result.layer_group == "Refinery"
        assert result.team is TeamId.COLONIALS
        assert result.team_color == TEAM_COLORS[TeamId.COLONIALS]
        assert result.icon_color == result.team_color
        assert result.global_position == GlobalPoint(1.0, 2.0)
        assert result.hex_id == "OriginHex"
        assert not result.is_victory_point
        assert not result.is_scorched

    def test_victory_point(self):
        result = classify(structure(MapStructure.TownBase1, TeamId.WARDENS, 0x01))
        assert result.friendly_label == "Victory Point"
        assert result.icon == VICTORY_POINT_ICON
        assert result.is_victory_point
        assert result.layer_group == "Town Base"

    def test_scorched_tint(self):
        result = classify(structure(MapStructure.TownBase2, TeamId.WARDENS, 0x10))
        assert result.friendly_label == "Scorched Town Base 2"
        assert result.icon_color == SCORCHED_COLOR
        assert result.team_color == TEAM_COLORS[TeamId.WARDENS]

    @pytest.mark.parametrize("type_code", [0, 31, 42, 500, 10 ** 6])
    def test_unknown_type_never_raises(self, type_code):
        result = classify(structure(type_code, flags=0xFF))
        assert result.friendly_label == "Scorched Victory Point"
        assert result.layer_group == OTHER_GROUP
        assert result.is_victory_point and result.is_scorched

    def test_unknown_type_defaults(self):
        result = classify(structure(999))
        assert result.friendly_label == UNKNOWN_LABEL
        assert result.icon == UNKNOWN_ICON
        assert result.layer_group == OTHER_GROUP


class TestVictoryPoints:
    """Test victory point tallies."""

    def test_summary(self):
        structures = [
            classify(structure(MapStructure.TownBase1, TeamId.WARDENS, 0x01)),
            classify(structure(MapStructure.TownBase2, TeamId.WARDENS, 0x01)),
            classify(structure(MapStructure.TownBase3, TeamId.COLONIALS, 0x01)),
            classify(structure(MapStructure.RelicBase1, TeamId.WARDENS, 0x11)),
            classify(structure(MapStructure.TownBase1, TeamId.COLONIALS)),
            classify(structure(MapStructure.TownBase1, TeamId.NONE, 0x01)),
        ]
        summary = summarize_victory_points(structures, required_victory_towns=32)
        assert summary.warden == 2
        assert summary.colonial == 1
        assert summary.scorched == 1
        assert summary.required == 31
