"""Tests for StaticMap and StaticMapBuilder."""

from unittest.mock import AsyncMock, patch

import pytest
from PIL import Image
from pydantic import ValidationError

from staticmap import (
    Circle,
    InvalidSizeError,
    Line,
    MapSettings,
    MissingCenterError,
    MissingZoomError,
    StaticMap,
    StaticMapBuilder,
    TileCache,
    TileFetchError,
)
from staticmap.imaging.composer import decode_image

GREY = (200, 200, 200, 255)
DOWNLOAD = 'staticmap.tiles.fetcher.download_tile_bytes'


@pytest.fixture
def berlin_map():
    """300x300 map at zoom 4 over Berlin."""
    return (
        StaticMapBuilder()
        .width(300)
        .height(300)
        .zoom(4)
        .lat_center(52.6)
        .lon_center(13.4)
        .build()
    )


class TestRender:
    """End-to-end rendering with downloads mocked."""

    def test_renders_full_canvas(self, berlin_map, tile_png):
        with patch(DOWNLOAD, new=AsyncMock(return_value=tile_png)) as mock_dl:
            img = berlin_map.render()
        assert img.size == (300, 300)
        assert img.mode == 'RGBA'
        assert mock_dl.await_count == 9
        # Every pixel is covered by some tile
        assert img.getextrema()[3] == (255, 255)
        assert img.getpixel((0, 0)) == GREY
        assert img.getpixel((299, 299)) == GREY

    def test_encode_png(self, berlin_map, tile_png):
        berlin_map.add_tool(Circle(52.6, 13.4, radius=10, color='red'))
        with patch(DOWNLOAD, new=AsyncMock(return_value=tile_png)):
            data = berlin_map.encode_png()
        assert data.startswith(b'\x89PNG')
        img = decode_image(data)
        assert img.size == (300, 300)
        assert img.getpixel((150, 150)) == (255, 0, 0, 255)

    def test_save_png(self, berlin_map, tile_png, tmp_path):
        out = tmp_path / 'berlin.png'
        with patch(DOWNLOAD, new=AsyncMock(return_value=tile_png)):
            berlin_map.save_png(out)
        with Image.open(out) as img:
            assert img.size == (300, 300)

    def test_view_inferred_from_tools(self):
        static_map = StaticMap(tools=[Line([52.0, 53.0], [13.0, 14.0])])
        view = static_map.view()
        assert view.zoom == 8
        assert view.center_lon == pytest.approx(13.5)
        assert view.center_lat == pytest.approx(52.5)

    def test_missing_zoom_raised_before_download(self):
        static_map = StaticMap(MapSettings(center_lat=1.0, center_lon=1.0))
        with patch(DOWNLOAD, new=AsyncMock()) as mock_dl:
            with pytest.raises(MissingZoomError):
                static_map.render()
        mock_dl.assert_not_awaited()

    def test_missing_center(self):
        static_map = StaticMap(MapSettings(zoom=3))
        with patch(DOWNLOAD, new=AsyncMock()) as mock_dl:
            with pytest.raises(MissingCenterError):
                static_map.render()
        mock_dl.assert_not_awaited()

    def test_zero_width_raises_invalid_size(self):
        static_map = StaticMap(MapSettings(width=0, zoom=3, center_lat=0, center_lon=0))
        with pytest.raises(InvalidSizeError):
            static_map.render()

    def test_unallocatable_canvas_raised_before_download(self):
        """A canvas Pillow cannot allocate fails before any tile is requested."""
        static_map = StaticMap(
            MapSettings(width=600_000_000, height=1, zoom=0, center_lat=0, center_lon=0)
        )
        with patch(DOWNLOAD, new=AsyncMock()) as mock_dl:
            with pytest.raises(InvalidSizeError):
                static_map.render()
        mock_dl.assert_not_awaited()

    def test_canvas_allocated_before_acquire(self, berlin_map):
        with patch(
            'staticmap.map.new_canvas', side_effect=InvalidSizeError('no memory')
        ), patch('staticmap.map.TileAcquirer') as mock_acquirer:
            with pytest.raises(InvalidSizeError):
                berlin_map.render()
        mock_acquirer.assert_not_called()

    @pytest.mark.asyncio
    async def test_async_render_inside_running_loop(self, berlin_map, tile_png):
        with patch(DOWNLOAD, new=AsyncMock(return_value=tile_png)) as mock_dl:
            img = await berlin_map.async_render()
        assert img.size == (300, 300)
        assert mock_dl.await_count == 9

    def test_tile_failure_propagates(self, berlin_map):
        settings = berlin_map.settings.model_copy(update={'retry_delay': 0})
        static_map = StaticMap(settings)
        with patch(DOWNLOAD, new=AsyncMock(side_effect=RuntimeError('HTTP 500'))):
            with pytest.raises(TileFetchError):
                static_map.render()


class TestSharedCache:
    """Maps sharing one TileCache should reuse each other's tiles."""

    def test_each_url_fetched_once(self, tile_png):
        cache = TileCache()
        first = StaticMapBuilder().zoom(4).lat_center(52.6).lon_center(13.4).cache(cache).build()
        second = StaticMapBuilder().zoom(4).lat_center(52.6).lon_center(13.4).cache(cache).build()
        second.add_tool(Circle(52.6, 13.4))

        with patch(DOWNLOAD, new=AsyncMock(return_value=tile_png)) as mock_dl:
            first.render()
            second.render()
            first.render()

        urls = [c.args[1] for c in mock_dl.await_args_list]
        assert len(urls) == len(set(urls)) == 9
        assert cache.stats().hits == 18

    def test_rendering_does_not_mutate_cached_tiles(self, tile_png):
        cache = TileCache()
        static_map = (
            StaticMapBuilder().zoom(4).lat_center(52.6).lon_center(13.4).cache(cache).build()
        )
        static_map.add_tool(Circle(52.6, 13.4, radius=100, color='red'))
        with patch(DOWNLOAD, new=AsyncMock(return_value=tile_png)):
            static_map.render()
        for url in ('https://a.tile.osm.org/4/8/5.png', 'https://a.tile.osm.org/4/9/5.png'):
            assert cache.get(url).getpixel((0, 0)) == GREY


class TestTools:
    def test_tools_kept_in_order(self):
        static_map = StaticMap()
        a, b = Circle(0, 0), Circle(1, 1)
        static_map.add_tool(a)
        static_map.add_tool(b)
        assert static_map.tools == (a, b)

    def test_tools_property_is_read_only_view(self):
        static_map = StaticMap(tools=[Circle(0, 0)])
        assert isinstance(static_map.tools, tuple)


class TestBuilder:
    """Tests for StaticMapBuilder."""

    def test_defaults(self):
        settings = StaticMapBuilder().build().settings
        assert settings.width == 300
        assert settings.height == 300
        assert settings.padding == (0, 0)
        assert settings.zoom is None
        assert settings.center_lat is None
        assert settings.center_lon is None
        assert settings.url_template == 'https://a.tile.osm.org/{z}/{x}/{y}.png'
        assert settings.tile_size == 256

    def test_setters_chain(self):
        builder = StaticMapBuilder()
        assert builder.width(10) is builder
        assert builder.padding((1, 2)) is builder

    def test_all_fields(self):
        cache = TileCache()
        static_map = (
            StaticMapBuilder()
            .width(640)
            .height(480)
            .padding((10, 20))
            .zoom(12)
            .lat_center(48.85)
            .lon_center(2.35)
            .url_template('https://tiles.example/{z}/{y}/{x}.png')
            .tile_size(512)
            .concurrency(4)
            .cache(cache)
            .build()
        )
        s = static_map.settings
        assert (s.width, s.height) == (640, 480)
        assert s.padding == (10, 20)
        assert s.zoom == 12
        assert (s.center_lat, s.center_lon) == (48.85, 2.35)
        assert s.tile_size == 512
        assert s.concurrency == 4
        assert static_map.cache is cache

    @pytest.mark.parametrize(
        'configure',
        [
            lambda b: b.zoom(18),
            lambda b: b.width(-1),
            lambda b: b.lat_center(89.0),
            lambda b: b.url_template('https://tiles.example/{z}/{x}.png'),
            lambda b: b.padding((150, 0)),
        ],
    )
    def test_invalid_configuration(self, configure):
        with pytest.raises(ValidationError):
            configure(StaticMapBuilder()).build()
