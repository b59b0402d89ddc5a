"""Command line entry point: render a static map to a PNG file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from staticmap.domain.models import MapSettings
from staticmap.domain.profiles import load_profile
from staticmap.exceptions import StaticMapError
from staticmap.map import StaticMap
from staticmap.shared.constants import LOG_FORMAT
from staticmap.tools import Line, Marker

logger = logging.getLogger(__name__)


def setup_logging(*, verbose: bool = False) -> None:
    """Configure root logging to stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )


def _lat_lon_pair(raw: str) -> tuple[float, float]:
    """Parse 'LAT,LON'."""
    try:
        lat_s, lon_s = raw.split(',')
        return float(lat_s), float(lon_s)
    except ValueError:
        msg = f'expected LAT,LON, got {raw!r}'
        raise argparse.ArgumentTypeError(msg) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='staticmap',
        description='Render a static map image from XYZ tiles.',
    )
    parser.add_argument('-o', '--output', type=Path, required=True, help='PNG file to write')
    parser.add_argument('--profile', type=Path, help='TOML profile with settings and tools')
    parser.add_argument('--width', type=int)
    parser.add_argument('--height', type=int)
    parser.add_argument('--zoom', type=int)
    parser.add_argument(
        '--center', nargs=2, type=float, metavar=('LAT', 'LON'), help='map center'
    )
    parser.add_argument('--padding', nargs=2, type=int, metavar=('X', 'Y'))
    parser.add_argument('--url-template', help='tile URL with {z}, {x} and {y}')
    parser.add_argument(
        '--marker',
        action='append',
        default=[],
        type=_lat_lon_pair,
        metavar='LAT,LON',
        help='add a marker (repeatable)',
    )
    parser.add_argument(
        '--line',
        action='append',
        default=[],
        nargs='+',
        type=_lat_lon_pair,
        metavar='LAT,LON',
        help='add a polyline through two or more points (repeatable)',
    )
    parser.add_argument('-v', '--verbose', action='store_true')
    return parser


def settings_from_args(
    args: argparse.Namespace, base: MapSettings | None = None
) -> MapSettings:
    """Overlay command line options on top of ``base`` settings."""
    data = (base or MapSettings()).model_dump()
    if args.width is not None:
        data['width'] = args.width
    if args.height is not None:
        data['height'] = args.height
    if args.zoom is not None:
        data['zoom'] = args.zoom
    if args.center is not None:
        data['center_lat'], data['center_lon'] = args.center
    if args.padding is not None:
        data['padding_x'], data['padding_y'] = args.padding
    if args.url_template is not None:
        data['url_template'] = args.url_template
    return MapSettings.model_validate(data)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose)

    try:
        base, tools = (None, [])
        if args.profile is not None:
            base, tools = load_profile(args.profile)
        settings = settings_from_args(args, base)
        for lat, lon in args.marker:
            tools.append(Marker(lat, lon))
        for points in args.line:
            tools.append(Line([p[0] for p in points], [p[1] for p in points]))
    except (ValidationError, ValueError, FileNotFoundError) as e:
        parser.error(str(e))

    static_map = StaticMap(settings, tools=tools)
    try:
        static_map.save_png(args.output)
    except StaticMapError as e:
        logger.error('Rendering failed: %s', e)  # noqa: TRY400
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
