#===============================================================================
#
#  MBTiles tileset reader
#
#  Copyright (c) 2019-2024  David Brooks
#
#  Licensed under the Apache License, Version 2.0 (the "License");
#  you may not use this file except in compliance with the License.
#  You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
#  Unless required by applicable law or agreed to in writing, software
#  distributed under the License is distributed on an "AS IS" BASIS,
#  WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
#  See the License for the specific language governing permissions and
#  limitations under the License.
#
#===============================================================================

import argparse
import json
import logging.config
import sys
from typing import Optional

import yaml

#===============================================================================

from . import __version__
from .errors import TilesetError
from .mbtiles import MBTiles
from .settings import normalise_path, settings

#===============================================================================

LOGGING_CONFIG = '''
version: 1
disable_existing_loggers: False
formatters:
  generic:
    format: '%(asctime)s.%(msecs)03d] [%(name)s] [%(levelname)s] %(message)s'
    datefmt: '[%Y-%m-%d %H:%M:%S'
handlers:
  console:
    class: logging.StreamHandler
    formatter: generic
    stream: 'ext://sys.stderr'
root:
  handlers:
  - console
  level: WARNING
loggers:
  tileset:
    handlers:
    - console
    level: {LOG_LEVEL}
    propagate: False
'''

#===============================================================================

def configure_logging(level: str):
#=================================
    logging.config.dictConfig(yaml.safe_load(LOGGING_CONFIG.format(LOG_LEVEL=level)))

#===============================================================================

def print_info(mbtiles: MBTiles, args):
#======================================
    print(json.dumps(mbtiles.get_info(), indent=4))

def write_tile(mbtiles: MBTiles, args):
#======================================
    (tile, headers) = mbtiles.get_tile(args.z, args.x, args.y)
    if args.headers:
        for name, value in headers.items():
            print(f'{name}: {value}', file=sys.stderr)
    if args.output is None:
        sys.stdout.buffer.write(tile)
        sys.stdout.buffer.flush()
    else:
        with open(args.output, 'wb') as fp:
            fp.write(tile)

#===============================================================================

def main(argv: Optional[list[str]]=None) -> int:
#===============================================
    parser = argparse.ArgumentParser(description='Read tiles and metadata from an MBTiles file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('--log-level', dest='log_level', metavar='LEVEL', default=settings['LOG_LEVEL'],
                        help='Logging level (default: %(default)s)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    info_parser = subparsers.add_parser('info', help="Print a tileset's metadata as JSON")
    info_parser.add_argument('path', metavar='MBTILES', help='The MBTiles file')
    info_parser.set_defaults(action=print_info)

    tile_parser = subparsers.add_parser('tile', help='Extract a tile, addressed in the XYZ scheme')
    tile_parser.add_argument('path', metavar='MBTILES', help='The MBTiles file')
    tile_parser.add_argument('z', type=int, help='Zoom level')
    tile_parser.add_argument('x', type=int, help='Tile column')
    tile_parser.add_argument('y', type=int, help='Tile row')
    tile_parser.add_argument('--output', metavar='FILE', help='Write the tile to FILE instead of stdout')
    tile_parser.add_argument('--headers', action='store_true', help='Print response headers to stderr')
    tile_parser.set_defaults(action=write_tile)

    args = parser.parse_args(argv)
    configure_logging(args.log_level.upper())

    try:
        with MBTiles(normalise_path(args.path)) as mbtiles:
            args.action(mbtiles, args)
    except TilesetError as error:
        print(f'{parser.prog}: {error}', file=sys.stderr)
        return 1
    return 0

#===============================================================================

if __name__ == '__main__':
#=========================
    sys.exit(main())

#===============================================================================
#===============================================================================
