"""
Equirectangular projection from longitude/latitude to canvas pixels.

The map is fitted to the canvas preserving its aspect ratio: a map that is
wide relative to the canvas is fitted to the canvas width, otherwise to the
canvas height. The module also derives the map furniture that depends on the
projection (coordinate grid and scale bar) so renderers only have to draw.
"""

import math
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import structlog

from .geometry import Bounds, Point

logger = structlog.get_logger()

KM_PER_DEGREE = 111.32
SCALE_BAR_STEPS_KM = [50, 100, 200, 500, 1000, 2000, 5000]

# Map furniture sizes are tuned for a scale of 40 px per degree
REFERENCE_SCALE = 40.0


@dataclass
class ProjectionOptions:
    """Map placement options, as fractions of the canvas."""

    scale_factor: float = 0.73  # Share of the fitted canvas dimension the map spans
    vertical_offset: float = 0.125  # Top margin when fitting to height
    horizontal_shift: float = 0.0  # Extra horizontal shift in both fit modes
    left_margin: float = 0.125  # Left margin when fitting to width


@dataclass(frozen=True)
class Projection:
    """Affine lon/lat -> pixel transform for one canvas size."""

    scale: float
    offset_x: float
    offset_y: float
    lon_min: float
    lat_min: float
    lon_max: float
    lat_max: float
    width: float
    height: float

    @property
    def bounds(self) -> Bounds:
        return self.lon_min, self.lat_min, self.lon_max, self.lat_max

    def project(self, lon: float, lat: float) -> Point:
        """Project a geographic coordinate to canvas pixels.

        Latitude grows northward while screen y grows downward, hence the
        inversion against lat_max.
        """
        x = self.offset_x + (lon - self.lon_min) * self.scale
        y = self.offset_y + (self.lat_max - lat) * self.scale
        return x, y

    def unproject(self, x: float, y: float) -> Point:
        """Inverse of project()."""
        lon = self.lon_min + (x - self.offset_x) / self.scale
        lat = self.lat_max - (y - self.offset_y) / self.scale
        return lon, lat

    def project_ring(self, ring: Sequence[Sequence[float]]) -> np.ndarray:
        """Project a lon/lat ring to an (n, 2) pixel array."""
        coords = np.asarray(ring, dtype=float)[:, :2]
        projected = np.empty_like(coords)
        projected[:, 0] = self.offset_x + (coords[:, 0] - self.lon_min) * self.scale
        projected[:, 1] = self.offset_y + (self.lat_max - coords[:, 1]) * self.scale
        return projected

    def distance_in_pixels(self, km: float) -> float:
        """Horizontal pixel length of a distance along the map's centre latitude."""
        center_lat = (self.lat_min + self.lat_max) / 2
        degrees = km / KM_PER_DEGREE
        x0, _ = self.project(self.lon_min, center_lat)
        x1, _ = self.project(self.lon_min + degrees, center_lat)
        return abs(x1 - x0)

    @property
    def furniture_scale(self) -> float:
        """Multiplier for stroke widths and font sizes that follow the map scale."""
        return self.scale / REFERENCE_SCALE


def compute_projection(
    bounds: Bounds,
    width: float,
    height: float,
    options: Optional[ProjectionOptions] = None,
) -> Projection:
    """
    Fit the geographic bounding box to the canvas.

    Degenerate bounds (zero longitude or latitude range) divide by zero;
    callers must supply a non-degenerate feature collection.

    Args:
        bounds: (lon_min, lat_min, lon_max, lat_max)
        width: Canvas width in pixels
        height: Canvas height in pixels
        options: Placement options

    Returns:
        Projection for this canvas
    """
    options = options or ProjectionOptions()
    lon_min, lat_min, lon_max, lat_max = bounds
    lon_range = lon_max - lon_min
    lat_range = lat_max - lat_min

    map_aspect = lon_range / lat_range
    canvas_aspect = width / height

    if map_aspect > canvas_aspect:
        scale = (width * options.scale_factor) / lon_range
        offset_x = width * (options.left_margin + options.horizontal_shift)
        offset_y = (height - lat_range * scale) / 2
    else:
        scale = (height * options.scale_factor) / lat_range
        offset_y = height * options.vertical_offset
        offset_x = (width - lon_range * scale) / 2 + width * options.horizontal_shift

    logger.debug(
        "Projection computed",
        width=width,
        height=height,
        scale=scale,
        fit="width" if map_aspect > canvas_aspect else "height",
    )

    return Projection(
        scale=scale,
        offset_x=offset_x,
        offset_y=offset_y,
        lon_min=lon_min,
        lat_min=lat_min,
        lon_max=lon_max,
        lat_max=lat_max,
        width=width,
        height=height,
    )


@dataclass
class GridLabel:
    text: str
    x: float
    y: float


@dataclass
class Graticule:
    """Projected latitude/longitude grid lines with their labels."""

    step: int
    parallels: List[Tuple[Point, Point]] = field(default_factory=list)
    meridians: List[Tuple[Point, Point]] = field(default_factory=list)
    latitude_labels: List[GridLabel] = field(default_factory=list)
    longitude_labels: List[GridLabel] = field(default_factory=list)


def graticule(projection: Projection, step: int = 2, label_offset: float = 12) -> Graticule:
    """
    Build the coordinate grid on whole degrees around the map bounds.

    Latitude labels sit left of the western edge, longitude labels below the
    southern edge, both label_offset pixels away from the grid.
    """
    lon_min_r = math.floor(projection.lon_min)
    lon_max_r = math.ceil(projection.lon_max)
    lat_min_r = math.floor(projection.lat_min)
    lat_max_r = math.ceil(projection.lat_max)

    grid = Graticule(step=step)

    for lat in range(lat_min_r, lat_max_r + 1, step):
        start = projection.project(lon_min_r, lat)
        end = projection.project(lon_max_r, lat)
        grid.parallels.append((start, end))
        grid.latitude_labels.append(GridLabel(f"{lat}°N", start[0] - label_offset, start[1]))

    for lon in range(lon_min_r, lon_max_r + 1, step):
        start = projection.project(lon, lat_min_r)
        end = projection.project(lon, lat_max_r)
        grid.meridians.append((start, end))
        grid.longitude_labels.append(GridLabel(f"{lon}°E", start[0], start[1] + label_offset))

    return grid


@dataclass
class ScaleBar:
    """Scale bar and north arrow placement in canvas pixels."""

    length_km: int
    length_px: float
    x: float
    y: float
    block_height: float
    labels: List[GridLabel]
    compass_x: float
    compass_y: float
    compass_radius: float


def nice_scale_length(map_width_km: float) -> int:
    """Smallest round length covering a sixth of the map width."""
    target = map_width_km / 6
    for step in SCALE_BAR_STEPS_KM:
        if step >= target:
            return step
    return SCALE_BAR_STEPS_KM[-1]


def scale_bar(projection: Projection, divisions: int = 4) -> ScaleBar:
    """
    Place a scale bar under the south-east corner of the map.

    The bar is split into alternating blocks; the compass sits above its
    right end.
    """
    mid_lat = math.radians((projection.lat_min + projection.lat_max) / 2)
    map_width_km = (projection.lon_max - projection.lon_min) * KM_PER_DEGREE * math.cos(mid_lat)
    length_km = nice_scale_length(map_width_km)
    length_px = projection.distance_in_pixels(length_km)

    k = projection.furniture_scale
    right_x, bottom_y = projection.project(projection.lon_max, projection.lat_min)
    x = right_x - length_px - 20
    y = bottom_y + 5
    block_height = 6 * k

    block_width = length_px / divisions
    labels = []
    for i in range(divisions + 1):
        # Half-up rounding, so 12.5 km reads as 13
        text = str(math.floor(length_km / divisions * i + 0.5))
        if i == divisions:
            text += "km"
        labels.append(GridLabel(text, x + i * block_width, y - block_height / 2 - 4 * k))

    compass_radius = 11.3 * k
    return ScaleBar(
        length_km=length_km,
        length_px=length_px,
        x=x,
        y=y,
        block_height=block_height,
        labels=labels,
        compass_x=x + length_px,
        compass_y=y - 28 * k - compass_radius,
        compass_radius=compass_radius,
    )


@dataclass
class CountryLabel:
    """Country name centred on the canvas over a backing box."""

    text: str
    x: float
    y: float
    font_size: float


def country_label(projection: Projection, text: str = "Sudan", base_size: float = 13) -> CountryLabel:
    """Centre the country label on the canvas; its size follows the map scale."""
    return CountryLabel(
        text=text,
        x=projection.width / 2,
        y=projection.height / 2,
        font_size=base_size * projection.furniture_scale,
    )
