"""FastAPI main application."""

from fastapi import Depends, FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Tuple
import structlog

from .. import __version__
from ..config import settings
from ..core.projection import country_label, graticule, scale_bar
from ..core.simulation import InputAction, Scene, SimulationContext
from ..errors import DataLoadError, SimulationNotReadyError
from ..logging_config import configure_logging

# Configure logging
configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="IDP Flow Map API",
    description="Animated internal displacement flows between states",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Simulation owned by this process; created on startup
_simulation: Optional[SimulationContext] = None


def get_simulation() -> SimulationContext:
    """Dependency returning the loaded simulation."""
    if _simulation is None:
        raise HTTPException(status_code=409, detail="Simulation data not loaded")
    return _simulation


# Request/Response models
class RebuildRequest(BaseModel):
    """Canvas size to rebuild the scene for."""

    width: float = Field(settings.canvas_width, gt=0, description="Canvas width in pixels")
    height: float = Field(settings.canvas_height, gt=0, description="Canvas height in pixels")


class TickRequest(BaseModel):
    """Elapsed time for one frame."""

    dt: float = Field(1 / 60, ge=0, description="Seconds since the previous frame")


class PauseRequest(BaseModel):
    paused: bool = Field(description="Freeze agent motion")


class InputRequest(BaseModel):
    key: str = Field(min_length=1, max_length=1, description="Pressed key")


class ViewResponse(BaseModel):
    paused: bool
    show_map: bool
    show_trajectories: bool
    fullscreen: bool


class SceneSummary(BaseModel):
    """Scene state after an operation."""

    width: float
    height: float
    scale: float
    offset_x: float
    offset_y: float
    regions: int
    agents: int
    ticks: int
    view: ViewResponse


class InputResponse(BaseModel):
    action: Optional[str]
    view: ViewResponse
    download: Optional[str] = None


class AgentState(BaseModel):
    x: float
    y: float
    rotation: float
    origin: str
    destination: str
    origin_pos: Tuple[float, float]
    target_pos: Tuple[float, float]
    outbound: bool
    pause_frames: int


class RegionShape(BaseModel):
    name: str
    rings: List[List[Tuple[float, float]]]
    centroid: Tuple[float, float]
    label_lines: List[str]


class GridLabelModel(BaseModel):
    text: str
    x: float
    y: float


class GraticuleResponse(BaseModel):
    step: int
    parallels: List[Tuple[Tuple[float, float], Tuple[float, float]]]
    meridians: List[Tuple[Tuple[float, float], Tuple[float, float]]]
    latitude_labels: List[GridLabelModel]
    longitude_labels: List[GridLabelModel]


class ScaleBarResponse(BaseModel):
    length_km: int
    length_px: float
    x: float
    y: float
    block_height: float
    labels: List[GridLabelModel]
    compass_x: float
    compass_y: float
    compass_radius: float


class CountryLabelResponse(BaseModel):
    text: str
    x: float
    y: float
    font_size: float


def _view(simulation: SimulationContext) -> ViewResponse:
    view = simulation.view
    return ViewResponse(
        paused=view.paused,
        show_map=view.show_map,
        show_trajectories=view.show_trajectories,
        fullscreen=view.fullscreen,
    )


def _summary(simulation: SimulationContext, scene: Scene) -> SceneSummary:
    return SceneSummary(
        width=scene.width,
        height=scene.height,
        scale=scene.projection.scale,
        offset_x=scene.projection.offset_x,
        offset_y=scene.projection.offset_y,
        regions=len(scene.regions),
        agents=len(scene.agents),
        ticks=simulation.ticks,
        view=_view(simulation),
    )


def _scene(simulation: SimulationContext) -> Scene:
    try:
        return simulation.require_scene()
    except SimulationNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Load input data and build the initial scene."""
    global _simulation
    logger.info("Starting IDP Flow Map API")
    try:
        _simulation = SimulationContext.from_settings(settings)
        _simulation.rebuild(settings.canvas_width, settings.canvas_height)
    except DataLoadError as e:
        logger.error("Failed to load simulation data", error=str(e))
        return
    logger.info("API startup complete", agents=len(_simulation.agents))


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down IDP Flow Map API")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "IDP Flow Map API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    if _simulation is None:
        return {"status": "degraded", "simulation": "not loaded"}
    return {
        "status": "healthy",
        "simulation": "ready" if _simulation.is_ready else "not built",
    }


@app.post("/simulation/rebuild", response_model=SceneSummary)
async def rebuild(request: RebuildRequest, simulation: SimulationContext = Depends(get_simulation)):
    """Rebuild projection, regions and agents for a canvas size."""
    scene = simulation.rebuild(request.width, request.height)
    return _summary(simulation, scene)


@app.post("/simulation/tick", response_model=SceneSummary)
async def tick(request: TickRequest, simulation: SimulationContext = Depends(get_simulation)):
    """Advance the simulation by one frame."""
    try:
        scene = simulation.tick(request.dt)
    except SimulationNotReadyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _summary(simulation, scene)


@app.post("/simulation/pause", response_model=ViewResponse)
async def pause(request: PauseRequest, simulation: SimulationContext = Depends(get_simulation)):
    """Pause or resume agent motion."""
    simulation.set_paused(request.paused)
    logger.info("Pause state changed", paused=request.paused)
    return _view(simulation)


@app.post("/simulation/input", response_model=InputResponse)
async def handle_input(request: InputRequest, simulation: SimulationContext = Depends(get_simulation)):
    """Apply a keyboard shortcut."""
    action = simulation.on_input(request.key)
    download = "/export/trajectories.svg" if action == InputAction.EXPORT else None
    return InputResponse(
        action=action.value if action is not None else None,
        view=_view(simulation),
        download=download,
    )


@app.get("/simulation/agents", response_model=List[AgentState])
async def get_agents(simulation: SimulationContext = Depends(get_simulation)):
    """Current state of every agent."""
    scene = _scene(simulation)
    return [
        AgentState(
            x=a.x,
            y=a.y,
            rotation=a.rotation,
            origin=a.origin,
            destination=a.destination,
            origin_pos=a.origin_pos,
            target_pos=a.target_pos,
            outbound=a.outbound,
            pause_frames=a.pause_frames,
        )
        for a in scene.agents
    ]


@app.get("/simulation/trajectories")
async def get_trajectories(simulation: SimulationContext = Depends(get_simulation)) -> Dict[str, list]:
    """Origin -> current position segments for the trajectory overlay."""
    _scene(simulation)
    return {"segments": [[list(start), list(end)] for start, end in simulation.trajectory_segments()]}


@app.get("/map/regions", response_model=List[RegionShape])
async def get_regions(simulation: SimulationContext = Depends(get_simulation)):
    """Projected state outlines, centroids and label lines."""
    scene = _scene(simulation)
    return [
        RegionShape(
            name=region.name,
            rings=[[(float(x), float(y)) for x, y in ring] for ring in region.projected_rings],
            centroid=region.centroid,
            label_lines=region.label_lines,
        )
        for region in scene.regions
    ]


@app.get("/map/graticule", response_model=GraticuleResponse)
async def get_graticule(simulation: SimulationContext = Depends(get_simulation)):
    """Coordinate grid lines and labels."""
    grid = graticule(_scene(simulation).projection, settings.graticule_step)
    return GraticuleResponse(
        step=grid.step,
        parallels=grid.parallels,
        meridians=grid.meridians,
        latitude_labels=[GridLabelModel(text=label.text, x=label.x, y=label.y) for label in grid.latitude_labels],
        longitude_labels=[GridLabelModel(text=label.text, x=label.x, y=label.y) for label in grid.longitude_labels],
    )


@app.get("/map/scale-bar", response_model=ScaleBarResponse)
async def get_scale_bar(simulation: SimulationContext = Depends(get_simulation)):
    """Scale bar and compass placement."""
    bar = scale_bar(_scene(simulation).projection)
    return ScaleBarResponse(
        length_km=bar.length_km,
        length_px=bar.length_px,
        x=bar.x,
        y=bar.y,
        block_height=bar.block_height,
        labels=[GridLabelModel(text=label.text, x=label.x, y=label.y) for label in bar.labels],
        compass_x=bar.compass_x,
        compass_y=bar.compass_y,
        compass_radius=bar.compass_radius,
    )


@app.get("/map/country-label", response_model=CountryLabelResponse)
async def get_country_label(simulation: SimulationContext = Depends(get_simulation)):
    """Central country label placement and size."""
    label = country_label(_scene(simulation).projection, settings.country_name)
    return CountryLabelResponse(text=label.text, x=label.x, y=label.y, font_size=label.font_size)


@app.get("/export/trajectories.svg")
async def export_trajectories(simulation: SimulationContext = Depends(get_simulation)):
    """Download agent trajectories as SVG."""
    _scene(simulation)
    document = simulation.export_trajectories()
    if document is None:
        return Response(status_code=204)
    return Response(
        content=document,
        media_type="image/svg+xml",
        headers={"Content-Disposition": f"attachment; filename={settings.export_filename}"},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
