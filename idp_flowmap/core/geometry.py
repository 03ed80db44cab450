"""
Planar geometry helpers for region polygons.

Rings are sequences of (x, y) pairs and are closed implicitly. Boundary
features follow GeoJSON: a Polygon is a list of rings with the outer ring
first, a MultiPolygon is a list of such polygons. Only outer rings are ever
consulted; holes are ignored and regions are treated as solid shapes.
"""

from typing import Iterable, List, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]
Bounds = Tuple[float, float, float, float]

# Added to the edge slope denominator so horizontal edges never divide by zero
POINT_IN_POLYGON_EPSILON = 1e-7


def polygon_parts(geometry: dict) -> List[list]:
    """
    Normalise a Polygon or MultiPolygon geometry to a list of polygons.

    Args:
        geometry: GeoJSON geometry mapping

    Returns:
        List of polygons, each a list of rings (outer ring first)
    """
    geom_type = geometry.get("type")
    coords = geometry.get("coordinates") or []
    if geom_type == "Polygon":
        return [coords]
    if geom_type == "MultiPolygon":
        return list(coords)
    raise ValueError(f"Unsupported geometry type: {geom_type}")


def outer_ring(geometry: dict) -> list:
    """First ring of the first polygon of a geometry."""
    return polygon_parts(geometry)[0][0]


def bounding_box(features: Iterable[dict]) -> Bounds:
    """
    Compute (lon_min, lat_min, lon_max, lat_max) over a feature collection.

    Every polygon of every feature contributes its outer ring.
    """
    lon_min = lat_min = float("inf")
    lon_max = lat_max = float("-inf")

    for feature in features:
        for polygon in polygon_parts(feature["geometry"]):
            if not polygon or not polygon[0]:
                continue
            ring = np.asarray(polygon[0], dtype=float)
            lon_min = min(lon_min, float(ring[:, 0].min()))
            lon_max = max(lon_max, float(ring[:, 0].max()))
            lat_min = min(lat_min, float(ring[:, 1].min()))
            lat_max = max(lat_max, float(ring[:, 1].max()))

    return lon_min, lat_min, lon_max, lat_max


def ring_bounds(ring: Sequence[Point]) -> Bounds:
    """Axis-aligned (min_x, min_y, max_x, max_y) of a ring."""
    pts = np.asarray(ring, dtype=float)
    return (
        float(pts[:, 0].min()),
        float(pts[:, 1].min()),
        float(pts[:, 0].max()),
        float(pts[:, 1].max()),
    )


def polygon_centroid(ring: Sequence[Point], fallback: bool = False) -> Point:
    """
    Area-weighted centroid of a ring using the shoelace formula.

    Args:
        ring: Ring vertices, closed implicitly
        fallback: Return the bounding-box centre for zero-area rings instead
            of raising ZeroDivisionError

    Returns:
        (cx, cy) centroid
    """
    pts = np.asarray(ring, dtype=float)
    if pts.size == 0:
        raise ValueError("Cannot compute the centroid of an empty ring")

    x0 = pts[:, 0]
    y0 = pts[:, 1]
    x1 = np.roll(x0, -1)
    y1 = np.roll(y0, -1)
    cross = x0 * y1 - x1 * y0

    area = float(cross.sum()) / 2.0
    if area == 0.0 and fallback:
        min_x, min_y, max_x, max_y = ring_bounds(pts)
        return (min_x + max_x) / 2.0, (min_y + max_y) / 2.0

    cx = float(((x0 + x1) * cross).sum()) / (6.0 * area)
    cy = float(((y0 + y1) * cross).sum()) / (6.0 * area)
    return cx, cy


def point_in_polygon(point: Point, ring: Sequence[Point]) -> bool:
    """
    Even-odd ray casting containment test.

    Args:
        point: (x, y) to test
        ring: Polygon ring in the same coordinate space as the point

    Returns:
        True when the point lies inside the ring
    """
    x, y = point
    pts = np.asarray(ring, dtype=float)
    if len(pts) < 3:
        return False

    xi = pts[:, 0]
    yi = pts[:, 1]
    # Edge i runs from the previous vertex j = i - 1 (wrapping) to vertex i
    xj = np.roll(xi, 1)
    yj = np.roll(yi, 1)

    straddles = (yi > y) != (yj > y)
    with np.errstate(divide="ignore", invalid="ignore"):
        x_cross = (xj - xi) * (y - yi) / (yj - yi + POINT_IN_POLYGON_EPSILON) + xi
    crossings = np.count_nonzero(straddles & (x < x_cross))
    return bool(crossings % 2)
