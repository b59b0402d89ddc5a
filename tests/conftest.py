"""Pytest configuration and fixtures for staticmap tests."""

import io
import sys
from pathlib import Path

import pytest
from PIL import Image

# Add src directory to path for imports
src_path = Path(__file__).parent.parent / 'src'
sys.path.insert(0, str(src_path))


def make_tile_png(color=(200, 200, 200, 255), size=256) -> bytes:
    """Encode a solid-colour tile as PNG bytes."""
    buf = io.BytesIO()
    Image.new('RGBA', (size, size), color).save(buf, format='PNG')
    return buf.getvalue()


class FakeSession:
    """Stands in for aiohttp.ClientSession when downloads are patched."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return None


@pytest.fixture
def tile_png():
    """PNG bytes of a grey 256x256 tile."""
    return make_tile_png()


@pytest.fixture
def fake_session_factory():
    return lambda concurrency: FakeSession()
