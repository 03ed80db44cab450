"""Configuration management."""

import os
from pathlib import Path
from typing import Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core.agents import PopulationOptions
from .core.export import ExportOptions
from .core.motion import MotionOptions, RotationMode, SpeedMode
from .core.projection import ProjectionOptions

# Load .env for local/dev environments only where values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ and v is not None}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    debug: bool = Field(default=False, description="Enable debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # Input data
    boundary_path: str = Field(default="data/map.json", description="GeoJSON state boundaries")
    displacement_path: str = Field(default="data/data.json", description="IDP displacement matrix")

    # Canvas
    canvas_width: int = Field(default=1280, description="Default canvas width in pixels")
    canvas_height: int = Field(default=800, description="Default canvas height in pixels")

    # Map positioning & scaling
    map_scale_factor: float = Field(default=0.73, description="Fraction of the canvas the map spans")
    map_vertical_offset: float = Field(default=0.125, description="Top margin when fitting to height")
    map_shift_x: float = Field(default=0.0, description="Horizontal shift as a canvas fraction")
    map_left_margin: float = Field(default=0.125, description="Left margin when fitting to width")
    graticule_step: int = Field(default=2, description="Grid spacing in degrees")
    country_name: str = Field(default="Sudan", description="Country label drawn at the canvas centre")

    # Agents
    agent_scale_factor: float = Field(default=0.00003, description="Agents per displaced person")
    agent_speed: float = Field(default=10.0, description="Agent speed (px/s, or px/frame in fixed mode)")
    rotation_speed: float = Field(default=3.0, description="Heading smoothing rate in rad/s")
    pause_frames: int = Field(default=120, description="Dwell ticks at each end of a flow")
    speed_mode: SpeedMode = Field(default=SpeedMode.PER_SECOND, description="Step scaling mode")
    rotation_mode: RotationMode = Field(default=RotationMode.SMOOTHED, description="Heading update mode")
    sampling_attempts: int = Field(default=1000, description="Rejection sampling attempts per point")
    random_seed: Optional[int] = Field(default=None, description="Seed for agent placement")

    # Export
    export_filename: str = Field(default="agent_trajectories.svg", description="Download filename")
    export_stroke: str = Field(default="black", description="Trajectory stroke colour")
    export_stroke_width: float = Field(default=1, description="Trajectory stroke width")

    def projection_options(self) -> ProjectionOptions:
        return ProjectionOptions(
            scale_factor=self.map_scale_factor,
            vertical_offset=self.map_vertical_offset,
            horizontal_shift=self.map_shift_x,
            left_margin=self.map_left_margin,
        )

    def population_options(self) -> PopulationOptions:
        return PopulationOptions(
            agent_scale_factor=self.agent_scale_factor,
            max_attempts=self.sampling_attempts,
        )

    def motion_options(self) -> MotionOptions:
        return MotionOptions(
            speed=self.agent_speed,
            rotation_speed=self.rotation_speed,
            pause_frames=self.pause_frames,
            speed_mode=self.speed_mode,
            rotation_mode=self.rotation_mode,
        )

    def export_options(self) -> ExportOptions:
        return ExportOptions(stroke=self.export_stroke, stroke_width=self.export_stroke_width)


# Instantiate singleton settings object
settings = Settings()


def get_settings() -> Settings:
    """Return the process-wide settings instance."""
    return settings
