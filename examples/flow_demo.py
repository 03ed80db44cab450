#!/usr/bin/env python3
"""
Simple demo script showing displacement flow simulation on synthetic states.
"""

import numpy as np
from idp_flowmap.core import DisplacementMatrix, MotionOptions, PopulationOptions
from idp_flowmap.core.simulation import SimulationContext


def square_state(name, lon, lat, size):
    ring = [[lon, lat], [lon + size, lat], [lon + size, lat + size], [lon, lat + size], [lon, lat]]
    return {
        "type": "Feature",
        "properties": {"name": name},
        "geometry": {"type": "Polygon", "coordinates": [ring]},
    }


def main():
    """Demonstrate population building and motion."""
    print("IDP Flow Map Demo")
    print("=" * 40)

    features = [
        square_state("Khartoum", 32.0, 15.0, 1.5),
        square_state("Gezira", 33.0, 13.5, 1.2),
        square_state("River Nile", 33.0, 17.0, 2.0),
        square_state("Kassala", 35.5, 15.0, 1.5),
    ]
    matrix = DisplacementMatrix.from_dict(
        {
            "data": [
                {
                    "state_of_displacement": "Total",
                    "by_state_of_origin": {"Khartoum": 350000, "Aj Jazirah": 90000},
                },
                {
                    "state_of_displacement": "River Nile",
                    "by_state_of_origin": {"Khartoum": 250000, "Aj Jazirah": 15000},
                },
                {
                    "state_of_displacement": "Kassala",
                    "by_state_of_origin": {"Khartoum": 100000, "Aj Jazirah": 75000},
                },
            ]
        }
    )

    context = SimulationContext(
        features,
        matrix,
        population_options=PopulationOptions(agent_scale_factor=0.0001),
        motion_options=MotionOptions(speed=40.0, pause_frames=30),
        seed=2024,
    )

    for width, height in [(1280, 800), (600, 900)]:
        print(f"\nCanvas {width}x{height}:")
        print("-" * 30)
        scene = context.rebuild(width, height)
        print(f"  Scale: {scene.projection.scale:.1f} px/degree")
        print(f"  Regions: {', '.join(scene.regions.names())}")
        print(f"  Agents: {len(scene.agents)}")

        for _ in range(120):
            context.tick(1 / 30)

        paused = sum(1 for a in scene.agents if a.is_paused)
        returning = sum(1 for a in scene.agents if not a.outbound)
        distances = np.array([np.hypot(a.x - a.origin_pos[0], a.y - a.origin_pos[1]) for a in scene.agents])
        print(f"  After 4s: {paused} paused, {returning} returning")
        print(f"  Mean distance from origin: {distances.mean():.1f} px")

    document = context.export_trajectories()
    print(f"\nExported {document.count('<line ')} trajectories ({len(document)} bytes)")
    print("\nDemo complete!")


if __name__ == "__main__":
    main()
