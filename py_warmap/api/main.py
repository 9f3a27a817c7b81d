"""FastAPI main application."""

import logging
from typing import List, Optional

import structlog
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config.config import settings
from ..core.compositor import (
    feature_collection,
    hex_outline_layers,
    label_layers,
    sector_layer,
    structure_feature,
)
from ..core.coordinates import build_normalizer
from ..core.hex_topology import HexTopology
from ..core.layer_groups import LayerGroupStates
from ..core.points import is_finite_point
from ..core.refresh import MapRefresher
from ..core.snapshot import MapSnapshot, filter_structures
from .war_api import WarApiClient

logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

# Configure logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer()
        if settings.log_format == "json"
        else structlog.dev.ConsoleRenderer(),
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="War Map Geometry API",
    description="Normalized structures and territorial sectors of the hex war map",
    version="0.1.0"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

topology = HexTopology.from_layout(settings.hex_size)
normalizer = build_normalizer(topology, settings.calibration_file)
refresher = MapRefresher(
    WarApiClient(),
    topology,
    normalizer,
    default_shard=settings.default_shard,
    max_workers=settings.max_workers,
)
layer_states = LayerGroupStates.defaults()


# Request/Response models
class RefreshResponse(BaseModel):
    """Outcome of a refresh request."""

    published: bool
    shard: str
    generation: int = Field(..., description="Generation of the snapshot now being served")
    structures: int = 0
    sectors: int = 0
    failed_hexes: List[str] = Field(default_factory=list)


class VictoryPointResponse(BaseModel):
    """Victory point tally."""

    warden: int
    colonial: int
    scorched: int
    required: int


class LayerGroupStateModel(BaseModel):
    """Visibility state of one layer group."""

    group_id: str
    visible: bool
    opacity: float = Field(..., ge=0.0, le=1.0)


class OpacityRequest(BaseModel):
    opacity: float


def current_snapshot() -> MapSnapshot:
    snapshot = refresher.snapshot
    if snapshot is None:
        raise HTTPException(status_code=503, detail="No map data loaded yet")
    return snapshot


def states_response() -> List[LayerGroupStateModel]:
    return [
        LayerGroupStateModel(group_id=s.group_id, visible=s.visible, opacity=s.opacity)
        for s in layer_states
    ]


def set_layer_states(states: LayerGroupStates) -> List[LayerGroupStateModel]:
    """Replace the visibility state and rebuild the view from it."""
    global layer_states
    layer_states = states
    layers = refresher.recompute_view(layer_states)
    logger.info("View recomputed", layers=len(layers),
                visible_groups=sorted(layer_states.visible_groups()))
    return states_response()


# Event handlers
@app.on_event("startup")
async def startup_event():
    logger.info("Starting War Map Geometry API", hexes=len(topology),
                hex_size=topology.hex_size, shard=settings.default_shard)


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down War Map Geometry API")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "War Map Geometry API",
        "version": "0.1.0",
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    snapshot = refresher.snapshot
    return {
        "status": "healthy",
        "snapshot_loaded": snapshot is not None,
        "generation": snapshot.generation if snapshot else None,
    }


@app.get("/hexes")
async def get_hexes():
    """Hex outlines of the whole world."""
    outlines = hex_outline_layers(topology)[0]
    return feature_collection(outlines.features)


@app.post("/refresh", response_model=RefreshResponse)
async def refresh(shard: Optional[str] = None):
    """
    Fetch fresh data and rebuild all geometry.

    The previous geometry keeps being served when the refresh fails or is
    superseded by a newer one.
    """
    shard = shard or settings.default_shard
    if shard not in settings.shard_urls:
        raise HTTPException(status_code=404, detail=f"Unknown shard: {shard}")

    published = await refresher.refresh(shard)
    served = refresher.snapshot
    if published is not None:
        refresher.recompute_view(layer_states)

    return RefreshResponse(
        published=published is not None,
        shard=served.shard if served else shard,
        generation=served.generation if served else 0,
        structures=len(served.structures) if served else 0,
        sectors=sum(1 for _ in served.all_sectors()) if served else 0,
        failed_hexes=list(served.failed_hexes) if served else [],
    )


@app.get("/structures")
async def get_structures(groups: Optional[List[str]] = Query(None)):
    """Structures as GeoJSON, limited to the given layer groups or the visible ones."""
    snapshot = current_snapshot()
    visible = groups if groups is not None else layer_states.visible_groups()
    by_group = filter_structures(snapshot, visible)
    features = [
        structure_feature(s)
        for structures in by_group.values()
        for s in structures
        if s.global_position is not None and is_finite_point(s.global_position)
    ]
    return feature_collection(features)


@app.get("/sectors")
async def get_sectors(hex_id: Optional[str] = None):
    """Sector polygons as GeoJSON, optionally for a single hex."""
    snapshot = current_snapshot()
    layer = sector_layer(snapshot)
    if hex_id is None:
        return feature_collection(layer.features)
    if hex_id not in topology:
        raise HTTPException(status_code=404, detail=f"Unknown hex: {hex_id}")
    return feature_collection([f for f in layer.features if f["properties"]["hexId"] == hex_id])


@app.get("/labels")
async def get_labels():
    """Region labels as GeoJSON."""
    snapshot = current_snapshot()
    features = [f for layer in label_layers(snapshot) for f in layer.features]
    return feature_collection(features)


@app.get("/victory-points", response_model=VictoryPointResponse)
async def get_victory_points():
    snapshot = current_snapshot()
    if snapshot.victory_points is None:
        raise HTTPException(status_code=404, detail="War data unavailable")
    return VictoryPointResponse(**snapshot.victory_points._asdict())


@app.get("/layers")
async def get_layers():
    """All layers, z-ordered, with the current visibility state applied."""
    current_snapshot()
    layers = refresher.view or refresher.recompute_view(layer_states)
    return [layer.to_dict() for layer in layers]


@app.get("/layer-groups", response_model=List[LayerGroupStateModel])
async def get_layer_groups():
    return states_response()


@app.post("/layer-groups/{group_id}/toggle", response_model=List[LayerGroupStateModel])
async def toggle_layer_group(group_id: str):
    if layer_states.get(group_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown layer group: {group_id}")
    return set_layer_states(layer_states.toggle(group_id))


@app.put("/layer-groups/{group_id}/opacity", response_model=List[LayerGroupStateModel])
async def set_layer_group_opacity(group_id: str, request: OpacityRequest):
    if layer_states.get(group_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown layer group: {group_id}")
    return set_layer_states(layer_states.set_opacity(group_id, request.opacity))


@app.post("/layer-groups/show-all", response_model=List[LayerGroupStateModel])
async def show_all_layer_groups():
    return set_layer_states(layer_states.show_all())


@app.post("/layer-groups/hide-all", response_model=List[LayerGroupStateModel])
async def hide_all_layer_groups():
    return set_layer_states(layer_states.hide_all())


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
