"""Tests for the equirectangular projection engine."""

import pytest

from idp_flowmap.core.projection import (
    ProjectionOptions,
    compute_projection,
    country_label,
    graticule,
    nice_scale_length,
    scale_bar,
)


class TestComputeProjection:
    """Test fitting the map to the canvas."""

    def test_fit_to_width(self):
        """A wide map on a 4:3 canvas is fitted to the width."""
        projection = compute_projection((0, 0, 9, 2), 800, 600)

        assert projection.scale == pytest.approx(800 * 0.73 / 9)
        assert projection.offset_x == pytest.approx(800 * 0.125)
        assert projection.offset_y == pytest.approx((600 - 2 * projection.scale) / 2)

    def test_fit_to_height(self):
        """A tall map is fitted to the height and centred horizontally."""
        projection = compute_projection((0, 0, 2, 4), 800, 600)

        assert projection.scale == pytest.approx(600 * 0.73 / 4)
        assert projection.offset_y == pytest.approx(600 * 0.125)
        assert projection.offset_x == pytest.approx((800 - 2 * projection.scale) / 2)

    def test_horizontal_shift(self):
        options = ProjectionOptions(horizontal_shift=0.1)
        wide = compute_projection((0, 0, 9, 2), 800, 600, options)
        tall = compute_projection((0, 0, 2, 4), 800, 600, options)

        assert wide.offset_x == pytest.approx(800 * (0.125 + 0.1))
        assert tall.offset_x == pytest.approx((800 - 2 * tall.scale) / 2 + 80)

    def test_custom_scale_and_offset(self):
        options = ProjectionOptions(scale_factor=0.5, vertical_offset=0.2)
        projection = compute_projection((0, 0, 2, 4), 800, 600, options)

        assert projection.scale == pytest.approx(600 * 0.5 / 4)
        assert projection.offset_y == pytest.approx(120)

    def test_map_fits_inside_canvas(self):
        projection = compute_projection((21.8, 8.7, 38.6, 22.2), 1280, 800)
        x0, y0 = projection.project(21.8, 22.2)
        x1, y1 = projection.project(38.6, 8.7)

        assert 0 <= x0 < x1 <= 1280
        assert 0 <= y0 < y1 <= 800

    def test_degenerate_bounds_divide_by_zero(self):
        with pytest.raises(ZeroDivisionError):
            compute_projection((5, 5, 8, 5), 800, 600)


class TestProject:
    """Test the lon/lat -> pixel transform."""

    @pytest.fixture
    def projection(self):
        return compute_projection((0, 0, 9, 2), 800, 600)

    def test_corners(self, projection):
        assert projection.project(0, 2) == pytest.approx((projection.offset_x, projection.offset_y))
        x, y = projection.project(9, 0)
        assert x == pytest.approx(projection.offset_x + 9 * projection.scale)
        assert y == pytest.approx(projection.offset_y + 2 * projection.scale)

    def test_latitude_inverted(self, projection):
        _, y_north = projection.project(3, 2)
        _, y_south = projection.project(3, 0)
        assert y_north < y_south

    @pytest.mark.parametrize("lon,lat", [(0, 0), (4.5, 1.0), (-3.25, 7.5), (8.999, 0.001)])
    def test_round_trip(self, projection, lon, lat):
        x, y = projection.project(lon, lat)
        assert projection.unproject(x, y) == pytest.approx((lon, lat))

    def test_project_ring_matches_project(self, projection):
        ring = [[0, 0], [9, 0], [4.5, 2]]
        projected = projection.project_ring(ring)

        assert projected.shape == (3, 2)
        for (lon, lat), (x, y) in zip(ring, projected):
            assert (x, y) == pytest.approx(projection.project(lon, lat))

    def test_distance_in_pixels(self, projection):
        assert projection.distance_in_pixels(111.32) == pytest.approx(projection.scale)


class TestGraticule:
    """Test the coordinate grid."""

    def test_lines_on_whole_degrees(self):
        projection = compute_projection((0.4, 0.2, 8.6, 1.9), 800, 600)
        grid = graticule(projection, step=2)

        assert len(grid.parallels) == 2  # 0°, 2°
        assert len(grid.meridians) == 5  # 0°, 2°, 4°, 6°, 8°
        assert [label.text for label in grid.latitude_labels] == ["0°N", "2°N"]
        assert grid.longitude_labels[-1].text == "8°E"

    def test_label_offsets(self):
        projection = compute_projection((0, 0, 9, 2), 800, 600)
        grid = graticule(projection, step=2, label_offset=12)

        (start, _) = grid.parallels[0]
        assert grid.latitude_labels[0].x == pytest.approx(start[0] - 12)
        (start, _) = grid.meridians[0]
        assert grid.longitude_labels[0].y == pytest.approx(start[1] + 12)


class TestScaleBar:
    """Test scale bar sizing and placement."""

    def test_nice_scale_length(self):
        assert nice_scale_length(60) == 50
        assert nice_scale_length(1200) == 200
        assert nice_scale_length(100000) == 5000

    def test_scale_bar(self):
        projection = compute_projection((20, 8, 40, 22), 1000, 800)
        bar = scale_bar(projection)

        assert bar.length_km == 500
        assert bar.length_px == pytest.approx(500 / 111.32 * projection.scale)
        assert [label.text for label in bar.labels] == ["0", "125", "250", "375", "500km"]

        right_x, bottom_y = projection.project(40, 8)
        assert bar.x == pytest.approx(right_x - bar.length_px - 20)
        assert bar.y == pytest.approx(bottom_y + 5)
        assert bar.compass_x == pytest.approx(bar.x + bar.length_px)


class TestCountryLabel:
    """Test the central country label."""

    def test_centred_and_scaled(self):
        projection = compute_projection((20, 8, 40, 22), 1000, 800)
        label = country_label(projection)

        assert label.text == "Sudan"
        assert (label.x, label.y) == (500, 400)
        assert label.font_size == pytest.approx(13 * projection.scale / 40)

    def test_custom_text(self):
        projection = compute_projection((20, 8, 40, 22), 1000, 800)
        assert country_label(projection, "Chad").text == "Chad"
