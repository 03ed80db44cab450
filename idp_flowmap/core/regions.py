"""
Region index: canonical state names mapped to projected geometry.

Boundary data and displacement statistics name some states differently.
Boundary names are resolved through a fixed alias table; names missing from
the table are used verbatim.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import numpy as np
import structlog

from .geometry import Bounds, Point, polygon_centroid, polygon_parts, ring_bounds
from .projection import Projection

logger = structlog.get_logger()

# Boundary-source state name -> displacement-statistics state name
STATE_NAME_ALIASES: Dict[str, str] = {
    "Gezira": "Aj Jazirah",
    "Gadarif": "Gedaref",
    "Blue Nile": "Blue Nile",
    "Central Darfur": "Central Darfur",
    "East Darfur": "East Darfur",
    "Khartoum": "Khartoum",
    "North Darfur": "North Darfur",
    "North Kordofan": "North Kordofan",
    "Northern": "Northern",
    "Red Sea": "Red Sea",
    "River Nile": "River Nile",
    "Sennar": "Sennar",
    "South Darfur": "South Darfur",
    "South Kordofan": "South Kordofan",
    "West Darfur": "West Darfur",
    "West Kordofan": "West Kordofan",
    "White Nile": "White Nile",
    "Kassala": "Kassala",
}

# Labels drawn on two lines to fit inside their state
SPLIT_LABELS: Dict[str, Tuple[str, str]] = {
    "West Darfur": ("West", "Darfur"),
    "Central Darfur": ("Central", "Darfur"),
    "White Nile": ("White", "Nile"),
}


def resolve_name(raw: Optional[str], aliases: Mapping[str, str] = STATE_NAME_ALIASES) -> Optional[str]:
    """
    Resolve a boundary name to its canonical statistical name.

    Returns None when there is no name at all, the alias when one exists,
    and the raw name unchanged otherwise.
    """
    if not raw:
        return None
    return aliases.get(raw, raw)


def feature_name(feature: dict) -> Optional[str]:
    """Raw state name of a boundary feature (``name`` or ``NAME_1``)."""
    properties = feature.get("properties") or {}
    return properties.get("name") or properties.get("NAME_1")


def label_lines(name: str) -> List[str]:
    """Label text for a state, one entry per line."""
    return list(SPLIT_LABELS.get(name, (name,)))


@dataclass
class Region:
    """One state: its lon/lat polygons plus geometry derived for a projection."""

    name: str
    raw_name: str
    polygons: List[list]
    projected_rings: List[np.ndarray] = field(default_factory=list)
    centroid: Point = (0.0, 0.0)
    bounds: Bounds = (0.0, 0.0, 0.0, 0.0)

    @property
    def label_lines(self) -> List[str]:
        return label_lines(self.name)

    def reproject(self, projection: Projection) -> None:
        """Recompute every projection-dependent field."""
        self.projected_rings = [projection.project_ring(polygon[0]) for polygon in self.polygons]
        # Centroid comes from the outer ring of the first polygon only
        self.centroid = polygon_centroid(self.projected_rings[0], fallback=True)
        boxes = np.array([ring_bounds(ring) for ring in self.projected_rings])
        self.bounds = (
            float(boxes[:, 0].min()),
            float(boxes[:, 1].min()),
            float(boxes[:, 2].max()),
            float(boxes[:, 3].max()),
        )


class RegionIndex:
    """Canonical name -> Region mapping for one projection."""

    def __init__(self, regions: Optional[Dict[str, Region]] = None):
        self._regions: Dict[str, Region] = regions or {}

    @classmethod
    def build(
        cls,
        features: Iterable[dict],
        projection: Projection,
        aliases: Mapping[str, str] = STATE_NAME_ALIASES,
    ) -> "RegionIndex":
        """
        Build the index from boundary features.

        Features without a name or without polygon rings are skipped. When two
        features resolve to the same canonical name the later one wins.

        Args:
            features: GeoJSON features with Polygon/MultiPolygon geometry
            projection: Projection used for screen-space geometry
            aliases: Boundary-name -> statistical-name table

        Returns:
            New RegionIndex
        """
        regions: Dict[str, Region] = {}

        for feature in features:
            raw = feature_name(feature)
            name = resolve_name(raw, aliases)
            if name is None:
                logger.warning("Skipping boundary feature without a name")
                continue

            polygons = [p for p in polygon_parts(feature["geometry"]) if p and len(p[0]) > 0]
            if not polygons:
                logger.warning("Skipping boundary feature without rings", region=name)
                continue

            if name in regions:
                logger.warning("Duplicate region name, replacing earlier feature", region=name)

            region = Region(name=name, raw_name=raw, polygons=polygons)
            region.reproject(projection)
            regions[name] = region

        logger.info("Region index built", regions=len(regions))
        return cls(regions)

    def get(self, name: str) -> Optional[Region]:
        return self._regions.get(name)

    def names(self) -> List[str]:
        return list(self._regions)

    def centroids(self) -> Dict[str, Point]:
        return {name: region.centroid for name, region in self._regions.items()}

    def __contains__(self, name: str) -> bool:
        return name in self._regions

    def __iter__(self) -> Iterator[Region]:
        return iter(self._regions.values())

    def __len__(self) -> int:
        return len(self._regions)
