"""
Simulation context owning the projection, region index and agent population.

The context replaces the sketch-style globals with one object a host loop
drives: rebuild() on load and on every canvas resize, tick() once per frame,
and the toggles for keyboard input. Projection, regions and agents are held
together in an immutable Scene that rebuild() swaps in one assignment, so a
renderer that takes ``context.scene`` once per frame never mixes geometry
from two projections.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Mapping, Optional, Tuple, Union

import numpy as np
import structlog

from ..data.loader import load_boundaries, load_displacement
from ..errors import SimulationNotReadyError
from .agents import Agent, PopulationOptions, build_population
from .displacement import DisplacementMatrix
from .export import ExportOptions, export_trajectories_svg
from .geometry import Point, bounding_box
from .motion import MotionOptions, advance_population
from .projection import Projection, ProjectionOptions, compute_projection
from .regions import STATE_NAME_ALIASES, RegionIndex

logger = structlog.get_logger()


@dataclass(frozen=True)
class Scene:
    """Everything derived for one canvas size."""

    projection: Projection
    regions: RegionIndex
    agents: List[Agent]
    width: float
    height: float


@dataclass
class ViewState:
    """Display toggles driven by user input."""

    paused: bool = False
    show_map: bool = True
    show_trajectories: bool = False
    fullscreen: bool = False


class InputAction(str, Enum):
    """Actions bound to keys."""

    TOGGLE_PAUSE = "toggle_pause"
    TOGGLE_FULLSCREEN = "toggle_fullscreen"
    TOGGLE_MAP = "toggle_map"
    TOGGLE_TRAJECTORIES = "toggle_trajectories"
    EXPORT = "export"


KEY_BINDINGS = {
    " ": InputAction.TOGGLE_PAUSE,
    "f": InputAction.TOGGLE_FULLSCREEN,
    "h": InputAction.TOGGLE_MAP,
    "l": InputAction.TOGGLE_TRAJECTORIES,
    "e": InputAction.EXPORT,
}


class SimulationContext:
    """Drives the displacement flow simulation for a host render loop."""

    def __init__(
        self,
        features: List[dict],
        matrix: DisplacementMatrix,
        aliases: Mapping[str, str] = STATE_NAME_ALIASES,
        projection_options: Optional[ProjectionOptions] = None,
        population_options: Optional[PopulationOptions] = None,
        motion_options: Optional[MotionOptions] = None,
        export_options: Optional[ExportOptions] = None,
        seed: Optional[int] = None,
    ):
        """
        Initialize the context with data loaded up front.

        Args:
            features: Boundary features (Polygon/MultiPolygon)
            matrix: Displacement matrix
            aliases: Boundary-name -> statistical-name table
            projection_options: Map placement options
            population_options: Population sizing options
            motion_options: Motion model options
            export_options: Trajectory export style
            seed: Seed for agent placement; None for fresh entropy
        """
        self.features = features
        self.matrix = matrix
        self.aliases = aliases
        self.projection_options = projection_options or ProjectionOptions()
        self.population_options = population_options or PopulationOptions()
        self.motion_options = motion_options or MotionOptions()
        self.export_options = export_options or ExportOptions()
        self.rng = np.random.default_rng(seed)

        self.bounds = bounding_box(features)
        self.view = ViewState()
        self.scene: Optional[Scene] = None
        self.ticks = 0

    @classmethod
    def load(cls, features: List[dict], matrix: DisplacementMatrix, **kwargs) -> "SimulationContext":
        """Build a context from already decoded boundaries and displacement data."""
        logger.info("Simulation data loaded", features=len(features), rows=len(matrix))
        return cls(features, matrix, **kwargs)

    @classmethod
    def from_files(
        cls,
        boundary_path: Union[str, Path],
        displacement_path: Union[str, Path],
        **kwargs,
    ) -> "SimulationContext":
        """Load boundary and displacement files and build a context."""
        return cls.load(load_boundaries(boundary_path), load_displacement(displacement_path), **kwargs)

    @classmethod
    def from_settings(cls, settings) -> "SimulationContext":
        """Build a context from application settings."""
        return cls.from_files(
            settings.boundary_path,
            settings.displacement_path,
            projection_options=settings.projection_options(),
            population_options=settings.population_options(),
            motion_options=settings.motion_options(),
            export_options=settings.export_options(),
            seed=settings.random_seed,
        )

    @property
    def is_ready(self) -> bool:
        return self.scene is not None

    @property
    def agents(self) -> List[Agent]:
        return self.require_scene().agents

    def require_scene(self) -> Scene:
        if self.scene is None:
            raise SimulationNotReadyError("Simulation has not been built; call rebuild() first")
        return self.scene

    def rebuild(self, width: float, height: float) -> Scene:
        """
        Recompute projection, region index and population for a canvas size.

        The previous population is discarded, not merged.
        """
        logger.info("Rebuilding simulation", width=width, height=height)
        projection = compute_projection(self.bounds, width, height, self.projection_options)
        regions = RegionIndex.build(self.features, projection, self.aliases)
        agents = build_population(self.matrix, regions, self.population_options, self.rng)

        self.scene = Scene(
            projection=projection,
            regions=regions,
            agents=agents,
            width=width,
            height=height,
        )
        return self.scene

    on_resize = rebuild

    def tick(self, dt: float) -> Scene:
        """Advance the simulation by dt seconds unless paused."""
        if dt < 0:
            raise ValueError(f"Tick duration must be non-negative, got {dt}")
        scene = self.require_scene()
        if not self.view.paused:
            advance_population(scene.agents, dt, self.motion_options)
            self.ticks += 1
        return scene

    def set_paused(self, paused: bool) -> None:
        self.view.paused = paused

    def toggle_paused(self) -> bool:
        self.view.paused = not self.view.paused
        return self.view.paused

    def toggle_map(self) -> bool:
        self.view.show_map = not self.view.show_map
        return self.view.show_map

    def toggle_trajectories(self) -> bool:
        self.view.show_trajectories = not self.view.show_trajectories
        return self.view.show_trajectories

    def toggle_fullscreen(self) -> bool:
        self.view.fullscreen = not self.view.fullscreen
        return self.view.fullscreen

    def on_input(self, key: str) -> Optional[InputAction]:
        """
        Apply the action bound to a key.

        Export has no state to change here; the action is returned so the
        host can deliver export_trajectories() as a download. Unbound keys
        return None.
        """
        action = KEY_BINDINGS.get(key.lower()) if key else None
        if action == InputAction.TOGGLE_PAUSE:
            self.toggle_paused()
        elif action == InputAction.TOGGLE_FULLSCREEN:
            self.toggle_fullscreen()
        elif action == InputAction.TOGGLE_MAP:
            self.toggle_map()
        elif action == InputAction.TOGGLE_TRAJECTORIES:
            self.toggle_trajectories()
        return action

    def trajectory_segments(self) -> List[Tuple[Point, Point]]:
        """Origin -> current position segments for the trajectory overlay."""
        return [(a.origin_pos, a.position) for a in self.require_scene().agents]

    def export_trajectories(self) -> Optional[str]:
        """SVG document of all origin -> target segments, or None without agents."""
        return export_trajectories_svg(self.require_scene().agents, self.export_options)
