"""
Projection, region geometry and agent simulation core.
"""

from .geometry import bounding_box, point_in_polygon, polygon_centroid
from .projection import Projection, ProjectionOptions, compute_projection
from .regions import STATE_NAME_ALIASES, Region, RegionIndex, resolve_name
from .displacement import DisplacementMatrix, TOTAL_ROW
from .agents import Agent, PopulationOptions, build_population
from .sampling import random_point_in_polygons
from .motion import MotionOptions, RotationMode, SpeedMode, advance_population
from .export import ExportOptions, export_trajectories_svg

__all__ = ['bounding_box', 'point_in_polygon', 'polygon_centroid',
           'Projection', 'ProjectionOptions', 'compute_projection',
           'STATE_NAME_ALIASES', 'Region', 'RegionIndex', 'resolve_name',
           'DisplacementMatrix', 'TOTAL_ROW',
           'Agent', 'PopulationOptions', 'build_population',
           'random_point_in_polygons',
           'MotionOptions', 'RotationMode', 'SpeedMode', 'advance_population',
           'ExportOptions', 'export_trajectories_svg']
