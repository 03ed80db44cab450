"""
Agent population built from the displacement matrix.

Every non-zero (origin, destination) flow becomes at least one agent; larger
flows get proportionally more. Each agent starts at a random point inside its
origin state and heads for a random point inside its destination state.
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Set

import numpy as np
import structlog

from .displacement import DisplacementMatrix
from .geometry import Point
from .regions import RegionIndex
from .sampling import DEFAULT_MAX_ATTEMPTS, sample_region_point

logger = structlog.get_logger()


@dataclass
class PopulationOptions:
    """Population sizing options."""

    agent_scale_factor: float = 0.00003  # Agents per displaced person
    max_attempts: int = DEFAULT_MAX_ATTEMPTS  # Rejection sampling attempts per point


@dataclass
class Agent:
    """One flow particle oscillating between its origin and target points."""

    x: float
    y: float
    origin_pos: Point
    target_pos: Point
    origin: str
    destination: str
    rotation: float
    target_rotation: float
    outbound: bool = True  # Heading for target_pos rather than origin_pos
    pause_frames: int = 0

    @property
    def current_target(self) -> Point:
        return self.target_pos if self.outbound else self.origin_pos

    @property
    def position(self) -> Point:
        return self.x, self.y

    @property
    def is_paused(self) -> bool:
        return self.pause_frames > 0

    @property
    def heading(self) -> float:
        """Drawn orientation in radians."""
        return self.rotation

    def heading_to_target(self) -> float:
        """Angle from the current position to the current waypoint."""
        tx, ty = self.current_target
        return math.atan2(ty - self.y, tx - self.x)

    def flip_target(self) -> None:
        self.outbound = not self.outbound


def agents_for_count(count: int, scale: float) -> int:
    """Agents for a flow: none for empty flows, otherwise at least one."""
    if count <= 0:
        return 0
    return max(1, math.floor(count * scale))


def make_agent(start: Point, end: Point, origin: str, destination: str) -> Agent:
    """Agent at start, facing and heading for end."""
    angle = math.atan2(end[1] - start[1], end[0] - start[0])
    return Agent(
        x=start[0],
        y=start[1],
        origin_pos=start,
        target_pos=end,
        origin=origin,
        destination=destination,
        rotation=angle,
        target_rotation=angle,
    )


def build_population(
    matrix: DisplacementMatrix,
    index: RegionIndex,
    options: Optional[PopulationOptions] = None,
    rng: Optional[np.random.Generator] = None,
) -> List[Agent]:
    """
    Build a fresh agent population.

    A missing totals row yields an empty population. Flows whose origin or
    destination has no boundary geometry are skipped; the rest proceed.

    Args:
        matrix: Displacement matrix
        index: Region index for the current projection
        options: Population sizing options
        rng: Random generator for agent placement

    Returns:
        New list of agents
    """
    options = options or PopulationOptions()
    rng = rng or np.random.default_rng()

    if matrix.totals_row is None:
        logger.warning("No origin totals row, population is empty")
        return []

    agents: List[Agent] = []
    unresolved: Set[str] = set()

    for origin, destination, count in matrix.flows():
        origin_region = index.get(origin)
        if origin_region is None:
            if origin not in unresolved:
                logger.warning("No boundary geometry for origin", region=origin)
                unresolved.add(origin)
            continue

        destination_region = index.get(destination)
        if destination_region is None:
            if destination not in unresolved:
                logger.warning("No boundary geometry for destination", region=destination)
                unresolved.add(destination)
            continue

        for _ in range(agents_for_count(count, options.agent_scale_factor)):
            start = sample_region_point(origin_region, rng, options.max_attempts)
            end = sample_region_point(destination_region, rng, options.max_attempts)
            agents.append(make_agent(start, end, origin, destination))

    logger.info("Agents prepared", count=len(agents), skipped_regions=sorted(unresolved))
    return agents
