"""Tests for geo.projection module."""

import math

import numpy as np
import pytest

from staticmap.exceptions import InvalidCoordinateError
from staticmap.geo.projection import (
    geo_to_pixel,
    is_tile_row_in_world,
    lat_to_y,
    lon_to_x,
    pixel_to_geo,
    pixel_to_tile,
    project_many,
    validate_latitude,
    wrap_tile_x,
    x_to_lon,
    y_to_lat,
)
from staticmap.shared.constants import MAX_LATITUDE


class TestForwardProjection:
    """Tests for lon_to_x / lat_to_y."""

    def test_origin_maps_to_world_center(self):
        """(0, 0) should land in the middle of the world at any zoom."""
        for zoom in (0, 3, 10):
            assert lon_to_x(0.0, zoom) == pytest.approx(2**zoom / 2)
            assert lat_to_y(0.0, zoom) == pytest.approx(2**zoom / 2)

    def test_antimeridian_edges(self):
        """-180 maps to 0 and +180 to the world width."""
        assert lon_to_x(-180.0, 5) == pytest.approx(0.0)
        assert lon_to_x(180.0, 5) == pytest.approx(32.0)

    def test_mercator_limit_is_world_edge(self):
        """The Mercator latitude limit should map to the top/bottom edge."""
        assert lat_to_y(MAX_LATITUDE, 0) == pytest.approx(0.0, abs=1e-9)
        assert lat_to_y(-MAX_LATITUDE, 0) == pytest.approx(1.0, abs=1e-9)

    def test_north_is_up(self):
        """Larger latitude should give smaller y."""
        assert lat_to_y(60.0, 4) < lat_to_y(10.0, 4)

    def test_known_tile_for_berlin(self):
        """Berlin at zoom 10 is tile (550, 335) in the OSM scheme."""
        x = lon_to_x(13.4050, 10)
        y = lat_to_y(52.5200, 10)
        assert math.floor(x) == 550
        assert math.floor(y) == 335


class TestRoundTrip:
    """Projection followed by its inverse should be the identity."""

    @pytest.mark.parametrize('zoom', [0, 1, 7, 17])
    @pytest.mark.parametrize(
        ('lon', 'lat'),
        [(0.0, 0.0), (13.4, 52.6), (-122.42, 37.77), (179.9, -85.0), (-179.9, 85.0)],
    )
    def test_pixel_round_trip(self, zoom, lon, lat):
        px, py = geo_to_pixel(lon, lat, zoom, 256)
        lon2, lat2 = pixel_to_geo(px, py, zoom, 256)
        assert lon2 == pytest.approx(lon, abs=1e-9)
        assert lat2 == pytest.approx(lat, abs=1e-9)

    def test_tile_coordinate_round_trip(self):
        assert x_to_lon(lon_to_x(42.5, 6), 6) == pytest.approx(42.5)
        assert y_to_lat(lat_to_y(-33.9, 6), 6) == pytest.approx(-33.9)


class TestValidation:
    """Coordinates outside the Mercator range should be rejected."""

    @pytest.mark.parametrize('lat', [90.0, -90.0, 85.06, -86.0, math.inf, math.nan])
    def test_invalid_latitude_raises(self, lat):
        with pytest.raises(InvalidCoordinateError):
            lat_to_y(lat, 3)

    def test_invalid_longitude_raises(self):
        with pytest.raises(InvalidCoordinateError):
            lon_to_x(math.nan, 3)

    def test_limit_itself_is_valid(self):
        assert validate_latitude(MAX_LATITUDE) == MAX_LATITUDE

    def test_error_is_value_error(self):
        """InvalidCoordinateError should also be catchable as ValueError."""
        with pytest.raises(ValueError):
            validate_latitude(91.0)


class TestTileHelpers:
    """Tests for pixel_to_tile, wrap_tile_x and is_tile_row_in_world."""

    def test_pixel_to_tile_floors(self):
        assert pixel_to_tile(255.9, 256.0, 256) == (0, 1)
        assert pixel_to_tile(-0.5, 10.0, 256) == (-1, 0)

    def test_wrap_tile_x_same_key_one_world_apart(self):
        """x and x + 2**z should address the same tile column."""
        for zoom in (0, 2, 5):
            n = 2**zoom
            for x in (-1, 0, n - 1, n + 3):
                assert wrap_tile_x(x, zoom) == wrap_tile_x(x + n, zoom)
                assert 0 <= wrap_tile_x(x, zoom) < n

    def test_tile_rows_outside_world(self):
        assert is_tile_row_in_world(0, 2)
        assert is_tile_row_in_world(3, 2)
        assert not is_tile_row_in_world(-1, 2)
        assert not is_tile_row_in_world(4, 2)


class TestProjectMany:
    """Vectorised projection should match the scalar functions."""

    def test_matches_scalar(self):
        lons = [13.0, 13.5, 14.0]
        lats = [52.0, 52.5, 53.0]
        xs, ys = project_many(lons, lats, 9)
        assert isinstance(xs, np.ndarray)
        for i in range(3):
            assert xs[i] == pytest.approx(lon_to_x(lons[i], 9))
            assert ys[i] == pytest.approx(lat_to_y(lats[i], 9))

    def test_rejects_out_of_range_latitude(self):
        with pytest.raises(InvalidCoordinateError):
            project_many([0.0, 1.0], [10.0, 89.0], 3)

    def test_rejects_mismatched_shapes(self):
        with pytest.raises(InvalidCoordinateError):
            project_many([0.0, 1.0], [10.0], 3)
