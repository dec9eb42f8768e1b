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

"""
Build a tileset's metadata record from its ``metadata`` table, filling in
``minzoom``, ``maxzoom``, ``bounds`` and ``center`` from the tiles themselves
when they haven't been given.

The ``db`` argument of these functions is an open ``sqlite3`` connection.
SQLite's generic error (e.g. a missing table) means there is nothing to
infer from; any other database error is raised to the caller.
"""

#===============================================================================

import json
import math
import sqlite3
import warnings
from typing import Any, Optional

#===============================================================================

import mercantile

#===============================================================================

from .errors import MetadataCorruptError, is_generic_error
from .settings import settings

#===============================================================================

# Zoom levels 0..29 are probed for tiles. A tileset's zoom range beyond
# this isn't discovered.

MAX_ZOOM_PROBES = 30

# World limits that inferred bounds are clamped to

WORLD_BOUNDS = [-180.0, -90.0, 180.0, 90.0]

#===============================================================================

COERCED_KEYS = ['minzoom', 'maxzoom', 'center', 'bounds']

# Allowed number of values in the coordinate lists

COORDINATE_LENGTHS = {
    'bounds': [4],
    'center': [2, 3],
}

#===============================================================================

def coerce_value(name: str, value: Any) -> Optional[Any]:
#========================================================
    """
    Convert a known metadata key's value, either text from the table or
    a value from JSON metadata, to its proper type.

    :returns: The converted value, or ``None`` if it can't be converted
    """
    try:
        if name in ['minzoom', 'maxzoom']:
            return int(float(str(value).strip()))
        elif name in COORDINATE_LENGTHS:
            values = value if isinstance(value, (list, tuple)) else str(value).split(',')
            if len(values) not in COORDINATE_LENGTHS[name]:
                raise ValueError('wrong number of values')
            return [float(v) for v in values]
    except (OverflowError, TypeError, ValueError):
        settings['LOGGER'].warning(f'Ignoring invalid `{name}` metadata: {value}')
        return None
    return value

#===============================================================================

def load_metadata(db: sqlite3.Connection, info: dict[str, Any]):
#===============================================================
    """
    Add the rows of the ``metadata`` table to ``info``.

    The special ``json`` row holds a JSON object whose keys are merged into
    the record, so allowing nested properties and non-string values. Such
    keys never replace those from the table itself.

    :raises MetadataCorruptError: if the ``json`` row isn't a JSON object
    """
    try:
        rows = db.execute('SELECT name, value FROM metadata').fetchall()
    except sqlite3.OperationalError as error:
        if not is_generic_error(error):
            raise
        rows = []
    json_values = []
    for (name, value) in rows:
        if name == 'json':
            json_values.append(value)
        elif name in COERCED_KEYS:
            if (value := coerce_value(name, value)) is not None:
                info[name] = value
        else:
            info[name] = value
    for value in json_values:
        try:
            json_data = json.loads(value)
        except (TypeError, ValueError) as error:
            raise MetadataCorruptError(f'Invalid JSON metadata: {error}') from error
        if not isinstance(json_data, dict):
            raise MetadataCorruptError('JSON metadata is not an object')
        for key, json_value in json_data.items():
            if key in info:
                continue
            elif key in COERCED_KEYS:
                if (json_value := coerce_value(key, json_value)) is not None:
                    info[key] = json_value
            else:
                info[key] = json_value

#===============================================================================

def ensure_zooms(db: sqlite3.Connection, info: dict[str, Any]):
#==============================================================
    if 'minzoom' in info and 'maxzoom' in info:
        return
    zooms = []
    try:
        cursor = db.cursor()
        for zoom in range(MAX_ZOOM_PROBES):
            row = cursor.execute('SELECT zoom_level FROM tiles WHERE zoom_level = ? LIMIT 1',
                                 (zoom,)).fetchone()
            if row is not None:
                zooms.append(row[0])
        cursor.close()
    except sqlite3.OperationalError as error:
        if not is_generic_error(error):
            raise
        return
    if zooms:
        info['minzoom'] = min(zooms)
        info['maxzoom'] = max(zooms)
        settings['LOGGER'].debug(f'Inferred zoom range {info["minzoom"]}..{info["maxzoom"]}')

#===============================================================================

def ensure_bounds(db: sqlite3.Connection, info: dict[str, Any]):
#===============================================================
    """
    Set ``bounds`` from the extent of the tiles at ``minzoom``.

    The result is clamped to the world's limits. It is imprecise at zoom
    level zero and when a tileset has tiles outside of the world.
    """
    if 'bounds' in info or 'minzoom' not in info:
        return
    zoom = info['minzoom']
    try:
        row = db.execute('''SELECT MAX(tile_column), MIN(tile_column), MAX(tile_row), MIN(tile_row)
                                FROM tiles WHERE zoom_level = ?''', (zoom,)).fetchone()
    except sqlite3.OperationalError as error:
        if not is_generic_error(error):
            raise
        return
    if row is None or None in row:
        return
    (max_x, min_x, max_y, min_y) = row
    upper_right = tms_tile_bounds(max_x, max_y, zoom)
    lower_left = tms_tile_bounds(min_x, min_y, zoom)
    info['bounds'] = [
        max(lower_left.west, WORLD_BOUNDS[0]),
        max(lower_left.south, WORLD_BOUNDS[1]),
        min(upper_right.east, WORLD_BOUNDS[2]),
        min(upper_right.north, WORLD_BOUNDS[3])
    ]
    settings['LOGGER'].debug(f'Inferred bounds {info["bounds"]}')

def tms_tile_bounds(x: int, y: int, zoom: int) -> mercantile.LngLatBbox:
#=======================================================================
    """
    The bounds of a tile given in the TMS scheme. Tiles outside of the
    world are allowed, their latitudes being limited to the poles.
    """
    xyz_y = 2**zoom - 1 - y
    with warnings.catch_warnings():
        # Out of range tiles are deprecated by mercantile
        warnings.simplefilter('ignore', FutureWarning)
        (west, north) = tile_corner(x, xyz_y, zoom)
        (east, south) = tile_corner(x + 1, xyz_y + 1, zoom)
    return mercantile.LngLatBbox(west, south, east, north)

def tile_corner(x: int, y: int, zoom: int) -> tuple[float, float]:
#=================================================================
    try:
        return tuple(mercantile.ul(x, y, zoom))
    except OverflowError:
        # Latitude is beyond a pole
        tiles = 2**zoom
        return (x/tiles*360.0 - 180.0, WORLD_BOUNDS[3] if 2*y < tiles else WORLD_BOUNDS[1])

#===============================================================================

def ensure_center(info: dict[str, Any]):
#=======================================
    if 'center' in info:
        return
    if 'bounds' not in info or 'minzoom' not in info or 'maxzoom' not in info:
        return
    bounds = info['bounds']
    zoom_range = info['maxzoom'] - info['minzoom']
    info['center'] = [
        (bounds[2] - bounds[0])/2 + bounds[0],
        (bounds[3] - bounds[1])/2 + bounds[1],
        info['maxzoom'] if zoom_range <= 1 else math.floor(zoom_range*0.5) + info['minzoom']
    ]

#===============================================================================
#===============================================================================
