"""
Map profiles stored as TOML.

A profile holds MapSettings fields at the top level plus optional arrays of
tables describing annotations:

    width = 600
    zoom = 12

    [[markers]]
    lat = 52.52
    lon = 13.40
    symbol = "triangle"

    [[lines]]
    points = [[52.5, 13.3], [52.6, 13.5]]
    width = 3
    color = "#ff0000"
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomlkit

from staticmap.domain.models import MapSettings
from staticmap.tools import Circle, Line, Marker, Polygon

if TYPE_CHECKING:
    from staticmap.tools import Tool

logger = logging.getLogger(__name__)

TOOL_SECTIONS = ('markers', 'circles', 'lines', 'polygons')


def _plain(value: Any) -> Any:
    """Unwrap tomlkit containers into built-in types."""
    unwrap = getattr(value, 'unwrap', None)
    return unwrap() if callable(unwrap) else value


def _split_points(points: list[list[float]]) -> tuple[list[float], list[float]]:
    lats = [float(p[0]) for p in points]
    lons = [float(p[1]) for p in points]
    return lats, lons


def _marker(entry: dict[str, Any]) -> Tool:
    kwargs = {k: entry[k] for k in ('symbol', 'size', 'color', 'outline_width') if k in entry}
    if 'outline_color' in entry:
        kwargs['outline_color'] = entry['outline_color'] or None
    return Marker(entry['lat'], entry['lon'], **kwargs)


def _circle(entry: dict[str, Any]) -> Tool:
    kwargs = {k: entry[k] for k in ('radius', 'color') if k in entry}
    return Circle(entry['lat'], entry['lon'], **kwargs)


def _line(entry: dict[str, Any]) -> Tool:
    lats, lons = _split_points(entry['points'])
    kwargs = {k: entry[k] for k in ('color', 'width', 'simplify') if k in entry}
    return Line(lats, lons, **kwargs)


def _polygon(entry: dict[str, Any]) -> Tool:
    lats, lons = _split_points(entry['points'])
    kwargs = {
        k: entry[k] for k in ('fill_color', 'outline_color', 'width') if k in entry
    }
    return Polygon(lats, lons, **kwargs)


_TOOL_FACTORIES = {
    'markers': _marker,
    'circles': _circle,
    'lines': _line,
    'polygons': _polygon,
}


def tools_from_profile(data: dict[str, Any]) -> list[Tool]:
    """Build tools from the annotation sections, section by section in file order."""
    tools: list[Tool] = []
    for section in TOOL_SECTIONS:
        for entry in data.get(section, []):
            try:
                tools.append(_TOOL_FACTORIES[section](entry))
            except KeyError as e:
                msg = f'Entry in [[{section}]] is missing required key {e}'
                raise ValueError(msg) from e
    return tools


def load_profile(path: str | Path) -> tuple[MapSettings, list[Tool]]:
    """Загрузка профиля TOML -> (MapSettings, аннотации)."""
    p = Path(path)
    if not p.exists():
        msg = f'Профиль не найден: {p}'
        raise FileNotFoundError(msg)
    data = _plain(tomlkit.parse(p.read_text(encoding='utf-8')))
    settings = MapSettings.model_validate(data)
    tools = tools_from_profile(data)
    logger.info('Loaded profile %s: %d tools', p, len(tools))
    return settings, tools


def load_settings(path: str | Path) -> MapSettings:
    settings, _ = load_profile(path)
    return settings


def save_settings(path: str | Path, settings: MapSettings) -> Path:
    """Сохранение настроек в TOML (поля со значением None пропускаются)."""
    p = Path(path)
    data = settings.model_dump(exclude_none=True)
    data['background'] = list(data['background'])
    p.write_text(tomlkit.dumps(data), encoding='utf-8')
    return p
