"""Rejection sampling of random points inside projected region polygons."""

from typing import Optional, Sequence

import numpy as np
import structlog

from .geometry import Point, point_in_polygon, polygon_centroid, ring_bounds
from .regions import Region

logger = structlog.get_logger()

DEFAULT_MAX_ATTEMPTS = 1000


def random_point_in_polygons(
    rings: Sequence[Sequence[Point]],
    rng: Optional[np.random.Generator] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    fallback: Optional[Point] = None,
) -> Point:
    """
    Sample a uniformly random point inside one of a region's polygons.

    Each attempt picks a polygon uniformly, draws a point uniformly inside
    its bounding box and keeps it if it falls inside the ring. Thin shapes
    may exhaust the attempts; the fallback point is returned then, or the
    centroid of the first ring when none is given, so the call always
    terminates with a usable point.

    Args:
        rings: Projected outer rings, one per polygon part
        rng: Random generator
        max_attempts: Attempts before giving up on sampling
        fallback: Point to return once the attempts are exhausted

    Returns:
        (x, y) in the rings' coordinate space
    """
    rng = rng or np.random.default_rng()
    boxes = [ring_bounds(ring) for ring in rings]

    for _ in range(max_attempts):
        i = int(rng.integers(len(rings)))
        min_x, min_y, max_x, max_y = boxes[i]
        x = float(rng.uniform(min_x, max_x))
        y = float(rng.uniform(min_y, max_y))
        if point_in_polygon((x, y), rings[i]):
            return x, y

    if fallback is not None:
        logger.debug("Rejection sampling exhausted, using fallback point", attempts=max_attempts)
        return fallback
    logger.debug("Rejection sampling exhausted, using centroid", attempts=max_attempts)
    return polygon_centroid(rings[0], fallback=True)


def sample_region_point(
    region: Region,
    rng: Optional[np.random.Generator] = None,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> Point:
    """Random point inside a region's projected polygons, else its centroid."""
    return random_point_in_polygons(region.projected_rings, rng, max_attempts, fallback=region.centroid)
