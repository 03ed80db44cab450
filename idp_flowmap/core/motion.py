"""
Agent motion: travel to the current waypoint, dwell, then head back.

Each agent is either pausing (pause_frames > 0) or traveling. A traveling
agent that would reach its waypoint within one step flips the waypoint to the
other endpoint and starts a fixed dwell of pause_frames ticks. When the dwell
runs out it turns around and travels again. The cycle never ends.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from .agents import Agent


class SpeedMode(str, Enum):
    """How the per-tick step length is derived."""

    FIXED_PER_FRAME = "fixed_per_frame"
    PER_SECOND = "per_second"


class RotationMode(str, Enum):
    """How the heading follows the direction of travel."""

    INSTANT = "instant"
    SMOOTHED = "smoothed"


@dataclass
class MotionOptions:
    """Motion model parameters."""

    speed: float = 10.0  # px per second (PER_SECOND) or px per tick (FIXED_PER_FRAME)
    rotation_speed: float = 3.0  # rad per second when smoothed
    pause_frames: int = 120  # Dwell in ticks, not scaled by time
    speed_mode: SpeedMode = SpeedMode.PER_SECOND
    rotation_mode: RotationMode = RotationMode.SMOOTHED

    def step_length(self, dt: float) -> float:
        if self.speed_mode == SpeedMode.FIXED_PER_FRAME:
            return self.speed
        return self.speed * dt


def lerp_angle(a: float, b: float, t: float) -> float:
    """Interpolate from angle a toward b along the shorter way round."""
    diff = (b - a + math.pi) % (2 * math.pi) - math.pi
    return a + diff * t


def step_agent(agent: Agent, dt: float, options: MotionOptions) -> None:
    """Advance one agent by one tick of dt seconds."""
    if agent.pause_frames > 0:
        agent.pause_frames -= 1
        if agent.pause_frames == 0:
            agent.target_rotation = agent.rotation + math.pi
    else:
        tx, ty = agent.current_target
        dx = tx - agent.x
        dy = ty - agent.y
        dist = math.hypot(dx, dy)
        step = options.step_length(dt)

        if dist > step:
            agent.x += dx * (step / dist)
            agent.y += dy * (step / dist)
            agent.target_rotation = math.atan2(dy, dx)
        else:
            agent.flip_target()
            agent.pause_frames = options.pause_frames

    if options.rotation_mode == RotationMode.SMOOTHED:
        agent.rotation = lerp_angle(
            agent.rotation, agent.target_rotation, min(1.0, options.rotation_speed * dt)
        )
    else:
        agent.rotation = agent.target_rotation


def advance_population(agents: Iterable[Agent], dt: float, options: MotionOptions) -> None:
    """Advance every agent by one tick."""
    for agent in agents:
        step_agent(agent, dt, options)
