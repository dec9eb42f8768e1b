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

import os

#===============================================================================

__version__ = '1.0.0'

#===============================================================================

from .errors import TilesetError, NotLoadedError, TileNotFoundError, InvalidTileError
from .errors import StorageError, MetadataCorruptError
from .mbtiles import HeaderSource, MBTiles

#===============================================================================

def open(path: str|os.PathLike) -> MBTiles:
#==========================================
    """
    Open an MBTiles file for reading.

    :raises StorageError: if the file doesn't exist or isn't an SQLite database
    """
    return MBTiles(path)

#===============================================================================
#===============================================================================
