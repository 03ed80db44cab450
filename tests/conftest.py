"""Shared fixtures: a small synthetic country with three states."""

import pytest

from idp_flowmap.core.displacement import DisplacementMatrix


def square(lon0, lat0, size):
    return [
        [lon0, lat0],
        [lon0 + size, lat0],
        [lon0 + size, lat0 + size],
        [lon0, lat0 + size],
        [lon0, lat0],
    ]


def polygon_feature(name, ring, key="name"):
    return {
        "type": "Feature",
        "properties": {key: name},
        "geometry": {"type": "Polygon", "coordinates": [ring]},
    }


@pytest.fixture
def features():
    """Gezira (aliased), Khartoum (NAME_1 property) and a two-part Kassala."""
    return [
        polygon_feature("Gezira", square(0, 0, 2)),
        polygon_feature("Khartoum", square(4, 0, 2), key="NAME_1"),
        {
            "type": "Feature",
            "properties": {"name": "Kassala"},
            "geometry": {
                "type": "MultiPolygon",
                "coordinates": [[square(8, 0, 1)], [square(8, 1.5, 0.5)]],
            },
        },
    ]


@pytest.fixture
def displacement_payload():
    return {
        "data": [
            {
                "state_of_displacement": "Total",
                "by_state_of_origin": {
                    "Aj Jazirah": 100000,
                    "Khartoum": 50000,
                    "Unknown": 500,
                    "Kassala": 0,
                },
            },
            {
                "state_of_displacement": "Khartoum",
                "by_state_of_origin": {"Aj Jazirah": 40000, "Unknown": 500},
            },
            {
                "state_of_displacement": "Kassala",
                "by_state_of_origin": {"Aj Jazirah": 10, "Khartoum": 50000},
            },
            {
                "state_of_displacement": "Nowhere",
                "by_state_of_origin": {"Khartoum": 100},
            },
        ]
    }


@pytest.fixture
def matrix(displacement_payload):
    return DisplacementMatrix.from_dict(displacement_payload)
