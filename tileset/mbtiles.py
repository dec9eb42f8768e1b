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

import copy
from email.utils import formatdate
from enum import Enum
import os
import pathlib
import sqlite3
import threading
from typing import Any, Optional

#===============================================================================

from landez.sources import MBTilesReader

#===============================================================================

from .coordinates import flip_y
from .errors import InvalidTileError, MetadataCorruptError, NotLoadedError
from .errors import StorageError, TileNotFoundError, is_generic_error
from .headers import format_headers, tile_headers
from .metadata import ensure_bounds, ensure_center, ensure_zooms, load_metadata
from .settings import settings

#===============================================================================

GET_TILE_SQL = 'SELECT tile_data FROM tiles WHERE zoom_level=? AND tile_column=? AND tile_row=?'

#===============================================================================

def storage_error(error: sqlite3.Error) -> StorageError:
#=======================================================
    return StorageError(str(error), getattr(error, 'sqlite_errorcode', None))

#===============================================================================

class HeaderSource(Enum):
    """Where the content headers of a tileset's tiles come from"""
    UNRESOLVED = 'unresolved'
    METADATA = 'metadata'       # From the tileset's ``format``, fixed for all tiles
    PER_TILE = 'per-tile'       # From each tile's binary signature

#===============================================================================

class MBTiles(MBTilesReader):
    """
    Read-only access to the tiles and metadata of an MBTiles file.

    Tiles are addressed using the XYZ scheme, rows being flipped to the TMS
    scheme of the file. The file is opened when the object is created and
    stays open until :meth:`close` is called.

    :param path: The path of the MBTiles file
    :raises StorageError: if the file doesn't exist or isn't an SQLite database
    """
    def __init__(self, path: str|os.PathLike):
        self.__path = pathlib.Path(path)
        super().__init__(str(self.__path))
        self.__lock = threading.RLock()
        self.__info: Optional[dict[str, Any]] = None
        self.__header_source = HeaderSource.UNRESOLVED
        self.__headers: dict[str, str] = {}
        try:
            stat = os.stat(self.__path)
        except OSError as error:
            raise StorageError(f'Cannot open tile database {self.__path}: {error.strerror}') from error
        self.__filesize = stat.st_size
        self.__last_modified = formatdate(stat.st_mtime, usegmt=True)
        uri = f'{self.__path.absolute().as_uri()}?mode=ro'
        try:
            connection = sqlite3.connect(uri, uri=True, check_same_thread=False)
        except sqlite3.Error as error:
            raise storage_error(error) from error
        try:
            connection.execute('PRAGMA schema_version').fetchone()
        except sqlite3.Error as error:
            connection.close()
            raise storage_error(error) from error
        self.__connection: Optional[sqlite3.Connection] = connection
        # The tile lookup's prepared statement stays in this cursor's
        # connection cache for as long as the file is open
        self.__tile_cursor: Optional[sqlite3.Cursor] = connection.cursor()
        settings['LOGGER'].debug(f'Opened {self.__path}')

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()

    @property
    def filesize(self) -> int:
        return self.__filesize

    @property
    def header_source(self) -> HeaderSource:
        return self.__header_source

    @property
    def last_modified(self) -> str:
        return self.__last_modified

    @property
    def loaded(self) -> bool:
        return self.__connection is not None

    def close(self):
    #===============
        with self.__lock:
            if self.__connection is not None:
                if self.__tile_cursor is not None:
                    self.__tile_cursor.close()
                self.__connection.close()
                settings['LOGGER'].debug(f'Closed {self.__path}')
            self.__connection = None
            self.__tile_cursor = None
            self.__info = None
            self.__header_source = HeaderSource.UNRESOLVED
            self.__headers = {}

    def _query(self, sql, *args):
    #============================
        with self.__lock:
            if self.__connection is None:
                raise NotLoadedError()
            try:
                return self.__connection.execute(sql, *args)
            except sqlite3.Error as error:
                raise storage_error(error) from error

    def get_info(self) -> dict[str, Any]:
    #====================================
        """
        Get the tileset's metadata, inferring the zoom range, bounds and center
        from its tiles if they aren't specified.

        The metadata is computed on the first call and cached. The ``scheme``
        is always ``xyz``, being that of :meth:`get_tile`.

        :raises NotLoadedError: if the file has been closed
        :raises MetadataCorruptError: if ``json`` metadata can't be parsed
        :raises StorageError: if the database can't be read
        """
        with self.__lock:
            if self.__connection is None:
                raise NotLoadedError()
            if self.__info is None:
                info = {
                    'basename': self.__path.name,
                    'id': self.__path.stem,
                    'filesize': self.__filesize,
                }
                try:
                    load_metadata(self.__connection, info)
                    info['scheme'] = 'xyz'
                    ensure_zooms(self.__connection, info)
                    ensure_bounds(self.__connection, info)
                    ensure_center(info)
                except sqlite3.Error as error:
                    raise storage_error(error) from error
                self.__info = info
            return copy.deepcopy(self.__info)

    def get_tile(self, z: int, x: int, y: int) -> tuple[bytes, dict[str, str]]:
    #==========================================================================
        """
        Get a tile and its response headers.

        :param z: The tile's zoom level
        :param x: The tile's column
        :param y: The tile's row, in the XYZ scheme
        :raises NotLoadedError: if the file has been closed
        :raises TileNotFoundError: if there is no tile at the position
        :raises InvalidTileError: if the tile's data isn't a binary blob
        :raises StorageError: if the database can't be read
        """
        with self.__lock:
            if self.__tile_cursor is None:
                raise NotLoadedError()
            try:
                row = self.__tile_cursor.execute(GET_TILE_SQL, (z, x, flip_y(z, y))).fetchone()
            except OverflowError as error:
                raise TileNotFoundError() from error
            except sqlite3.Error as error:
                if is_generic_error(error):
                    raise TileNotFoundError() from error
                raise storage_error(error) from error
            if row is None:
                raise TileNotFoundError()
            tile = row[0]
            if not isinstance(tile, bytes) or len(tile) == 0:
                raise InvalidTileError()
            headers = self.__content_headers(tile)
            headers['Last-Modified'] = self.__last_modified
            return (tile, headers)

    def tile(self, z, x, y):
    #=======================
        return self.get_tile(z, x, y)[0]

    def __content_headers(self, tile: bytes) -> dict[str, str]:
    #==========================================================
        if self.__header_source == HeaderSource.UNRESOLVED:
            self.__resolve_headers()
        if self.__header_source == HeaderSource.METADATA:
            return dict(self.__headers)
        return tile_headers(tile)

    def __resolve_headers(self):
    #===========================
        try:
            headers = format_headers(self.get_info())
        except MetadataCorruptError as error:
            settings['LOGGER'].warning(f'{self.__path}: {error}, using tile signatures for headers')
            headers = None
        if headers is None:
            self.__header_source = HeaderSource.PER_TILE
        else:
            self.__headers = headers
            self.__header_source = HeaderSource.METADATA

#===============================================================================
#===============================================================================
