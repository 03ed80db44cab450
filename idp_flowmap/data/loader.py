"""Loading of boundary GeoJSON and displacement statistics."""

import json
from pathlib import Path
from typing import List, Union

import structlog
from pydantic import ValidationError

from ..core.displacement import DisplacementMatrix
from ..errors import DataLoadError

logger = structlog.get_logger()

SUPPORTED_GEOMETRIES = ("Polygon", "MultiPolygon")


def _read_json(path: Union[str, Path]):
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as fh:
            return json.load(fh)
    except FileNotFoundError as e:
        raise DataLoadError(f"Data file not found: {path}") from e
    except json.JSONDecodeError as e:
        raise DataLoadError(f"Invalid JSON in {path}: {e}") from e


def parse_boundaries(payload: dict) -> List[dict]:
    """
    Extract polygon features from a GeoJSON FeatureCollection.

    Features of other geometry types are skipped.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        raise DataLoadError("Boundary data is not a GeoJSON FeatureCollection")

    features = []
    for feature in payload["features"]:
        geometry = feature.get("geometry") or {}
        if geometry.get("type") not in SUPPORTED_GEOMETRIES:
            logger.warning(
                "Skipping feature with unsupported geometry",
                geometry_type=geometry.get("type"),
                properties=feature.get("properties"),
            )
            continue
        features.append(feature)

    if not features:
        raise DataLoadError("Boundary data has no polygon features")
    return features


def load_boundaries(path: Union[str, Path]) -> List[dict]:
    """Load state boundary features from a GeoJSON file."""
    features = parse_boundaries(_read_json(path))
    logger.info("Boundaries loaded", path=str(path), features=len(features))
    return features


def load_displacement(path: Union[str, Path]) -> DisplacementMatrix:
    """Load the displacement matrix from a JSON file."""
    payload = _read_json(path)
    try:
        matrix = DisplacementMatrix.from_dict(payload)
    except ValidationError as e:
        raise DataLoadError(f"Invalid displacement data in {path}: {e}") from e
    logger.info("Displacement data loaded", path=str(path), rows=len(matrix))
    return matrix
