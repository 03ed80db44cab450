"""Tests for name resolution and the region index."""

import numpy as np
import pytest

from idp_flowmap.core.geometry import bounding_box
from idp_flowmap.core.projection import compute_projection
from idp_flowmap.core.regions import (
    STATE_NAME_ALIASES,
    RegionIndex,
    feature_name,
    label_lines,
    resolve_name,
)
from tests.conftest import polygon_feature, square


class TestNameResolution:
    """Test boundary -> statistical name aliasing."""

    def test_alias_table_covers_all_states(self):
        assert len(STATE_NAME_ALIASES) == 18

    def test_aliased_names(self):
        assert resolve_name("Gezira") == "Aj Jazirah"
        assert resolve_name("Gadarif") == "Gedaref"

    def test_identity_alias(self):
        assert resolve_name("Khartoum") == "Khartoum"

    def test_unknown_name_falls_back_to_raw(self):
        assert resolve_name("Abyei") == "Abyei"

    def test_missing_name(self):
        assert resolve_name(None) is None
        assert resolve_name("") is None

    def test_custom_alias_table(self):
        assert resolve_name("A", {"A": "Alpha"}) == "Alpha"

    def test_feature_name_properties(self):
        assert feature_name({"properties": {"name": "Sennar"}}) == "Sennar"
        assert feature_name({"properties": {"NAME_1": "Sennar"}}) == "Sennar"
        assert feature_name({"properties": {}}) is None

    def test_label_lines(self):
        assert label_lines("West Darfur") == ["West", "Darfur"]
        assert label_lines("Khartoum") == ["Khartoum"]


class TestRegionIndex:
    """Test building the canonical region index."""

    @pytest.fixture
    def projection(self, features):
        return compute_projection(bounding_box(features), 800, 600)

    def test_canonical_names(self, features, projection):
        index = RegionIndex.build(features, projection)

        assert sorted(index.names()) == ["Aj Jazirah", "Kassala", "Khartoum"]
        assert "Gezira" not in index
        assert index.get("Aj Jazirah").raw_name == "Gezira"

    def test_centroid_in_screen_space(self, features, projection):
        index = RegionIndex.build(features, projection)
        expected = projection.project(1, 1)

        np.testing.assert_allclose(index.get("Aj Jazirah").centroid, expected)
        assert index.centroids()["Aj Jazirah"] == index.get("Aj Jazirah").centroid

    def test_multipolygon_centroid_uses_first_polygon(self, features, projection):
        kassala = RegionIndex.build(features, projection).get("Kassala")

        assert len(kassala.projected_rings) == 2
        np.testing.assert_allclose(kassala.centroid, projection.project(8.5, 0.5))

    def test_bounds_cover_all_parts(self, features, projection):
        kassala = RegionIndex.build(features, projection).get("Kassala")
        x0, y0 = projection.project(8, 2)
        x1, y1 = projection.project(9, 0)

        assert kassala.bounds == pytest.approx((x0, y0, x1, y1))

    def test_rebuild_is_idempotent(self, features, projection):
        first = RegionIndex.build(features, projection)
        second = RegionIndex.build(features, projection)

        assert first.centroids() == second.centroids()

    def test_reprojection_changes_centroids(self, features, projection):
        small = RegionIndex.build(features, projection)
        large = RegionIndex.build(features, compute_projection(bounding_box(features), 1600, 1200))

        assert small.get("Khartoum").centroid != large.get("Khartoum").centroid

    def test_skips_unnamed_features(self, projection):
        features = [
            {"properties": {}, "geometry": {"type": "Polygon", "coordinates": [square(0, 0, 1)]}},
            polygon_feature("Sennar", square(2, 0, 1)),
        ]
        index = RegionIndex.build(features, projection)

        assert len(index) == 1
        assert [region.name for region in index] == ["Sennar"]

    def test_custom_aliases(self, features, projection):
        index = RegionIndex.build(features, projection, aliases={})
        assert "Gezira" in index
        assert "Aj Jazirah" not in index
