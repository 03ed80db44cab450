#!/usr/bin/env python3
"""
Export agent trajectories for the configured boundary and displacement data.

Steps:
1. Load state boundaries and the displacement matrix
2. Project the map onto a canvas of the requested size
3. Seed the agent population
4. Write every origin -> destination segment to an SVG file

Usage:
    python export_trajectories.py [--boundaries map.json] [--displacement data.json]
                                  [--width 1280] [--height 800] [--seed 42]
                                  [--output agent_trajectories.svg]
"""

import argparse
import sys

from idp_flowmap.config import settings
from idp_flowmap.core.export import write_trajectories_svg
from idp_flowmap.core.simulation import SimulationContext
from idp_flowmap.errors import DataLoadError
from idp_flowmap.logging_config import configure_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--boundaries", default=settings.boundary_path, help="GeoJSON state boundaries")
    parser.add_argument("--displacement", default=settings.displacement_path, help="Displacement JSON")
    parser.add_argument("--width", type=float, default=settings.canvas_width, help="Canvas width")
    parser.add_argument("--height", type=float, default=settings.canvas_height, help="Canvas height")
    parser.add_argument("--seed", type=int, default=settings.random_seed, help="Agent placement seed")
    parser.add_argument("--output", default=settings.export_filename, help="Output SVG path")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(settings.log_level, "console")

    print("IDP Flow Map trajectory export")
    print("=" * 40)

    try:
        simulation = SimulationContext.from_files(
            args.boundaries,
            args.displacement,
            projection_options=settings.projection_options(),
            population_options=settings.population_options(),
            motion_options=settings.motion_options(),
            export_options=settings.export_options(),
            seed=args.seed,
        )
    except DataLoadError as e:
        print(f"✗ {e}")
        return 1

    scene = simulation.rebuild(args.width, args.height)
    print(f"  Canvas: {args.width:g}x{args.height:g}")
    print(f"  Regions: {len(scene.regions)}")
    print(f"  Agents: {len(scene.agents)}")

    path = write_trajectories_svg(scene.agents, args.output, simulation.export_options)
    if path is None:
        print("✗ No agents to export")
        return 1

    print(f"✓ Trajectories written to {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
