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

import sqlite3
from typing import Optional

#===============================================================================

from landez.sources import ExtractionError, InvalidFormatError

#===============================================================================

# SQLite's primary result codes that we need to tell apart

SQLITE_ERROR = 1        # Generic error, e.g. ``no such table``
SQLITE_CORRUPT = 11     # ``database disk image is malformed``

def is_generic_error(error: sqlite3.Error) -> bool:
#==================================================
    return getattr(error, 'sqlite_errorcode', None) == SQLITE_ERROR

#===============================================================================

class TilesetError(Exception):
    """Base class of all errors raised when reading a tileset"""

#===============================================================================

class NotLoadedError(TilesetError):
    def __init__(self, message: str='MBTiles not yet loaded'):
        super().__init__(message)

#===============================================================================

class TileNotFoundError(TilesetError, ExtractionError):
    def __init__(self, message: str='Tile does not exist'):
        super().__init__(message)

#===============================================================================

class InvalidTileError(TilesetError):
    code = 'EINVALIDTILE'

    def __init__(self, message: str='Tile is invalid'):
        super().__init__(message)

#===============================================================================

class StorageError(TilesetError, InvalidFormatError):
    """
    The SQLite engine failed. The message is the engine's own diagnostic
    and ``code`` its primary result code (if known).
    """
    def __init__(self, message: str, code: Optional[int]=None):
        super().__init__(message)
        self.code = code

#===============================================================================

class MetadataCorruptError(TilesetError, ValueError):
    pass

#===============================================================================
#===============================================================================
