#!/usr/bin/env python3
"""
Demonstration of hex sector tessellation.

This script walks one refresh through the pipeline with canned data:
1. Normalizing per-hex positions into global space
2. Classifying structures
3. Splitting a contested hex between its town bases
4. Toggling a layer group and recomposing the view
"""

import asyncio

from py_warmap.core import (
    HexTopology,
    LayerGroupStates,
    MapRefresher,
    MapStructure,
    build_normalizer,
)
from py_warmap.core.war_data import WarMapData


def deadlands_payload():
    return WarMapData.model_validate({
        "mapItems": [
            {"teamId": "WARDENS", "iconType": MapStructure.TownBase3, "x": 0.42, "y": 0.47, "flags": 0x01},
            {"teamId": "COLONIALS", "iconType": MapStructure.TownBase1, "x": 0.71, "y": 0.28, "flags": 0},
            {"teamId": "COLONIALS", "iconType": MapStructure.RelicBase1, "x": 0.25, "y": 0.75, "flags": 0x10},
            {"teamId": "NONE", "iconType": MapStructure.SalvageField, "x": 0.6, "y": 0.6, "flags": 0},
        ],
        "mapTextItems": [],
    })


async def fetch(shard):
    return {"DeadLandsHex": deadlands_payload()}


async def main():
    topology = HexTopology.from_layout(hex_size=1000.0)
    normalizer = build_normalizer(topology)
    refresher = MapRefresher(fetch, topology, normalizer)

    print("=== Hex Sector Tessellation Demo ===\n")

    # 1. Coordinate normalization
    print("1. Normalizing local positions...")
    for local in [(0.5, 0.5), (0.0, 0.5), (0.5, 0.0)]:
        print(f"   - DeadLandsHex {local} -> {tuple(round(v, 1) for v in normalizer.normalize('DeadLandsHex', local))}")

    # 2. Refresh: classification and tessellation
    print("\n2. Running a refresh...")
    snapshot = await refresher.refresh()
    for structure in snapshot.structures:
        print(f"   - {structure.friendly_label:<24} {structure.team.value:<10} group={structure.layer_group}")

    # 3. Sectors
    print("\n3. Sectors of the Deadlands:")
    total = 0.0
    for sector in snapshot.sectors["DeadLandsHex"]:
        total += sector.area
        print(f"   - {sector.color.to_css():<26} area={sector.area:,.0f}")
    print(f"   - Total area: {total:,.0f}")

    # 4. Visibility
    print("\n4. Hiding the Fields group...")
    states = LayerGroupStates.defaults().toggle("Fields")
    for layer in refresher.recompute_view(states):
        print(f"   - z={layer.z_index:<3} {layer.title:<14} visible={layer.visible} features={len(layer.features)}")

    print("\nDemo complete!")


if __name__ == "__main__":
    asyncio.run(main())
