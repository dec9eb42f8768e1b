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
Conversion between XYZ tile rows (row 0 at the top of the map) and the TMS
rows (row 0 at the bottom) that MBTiles files store.
"""

#===============================================================================

INT32_MASK = 0xFFFFFFFF
INT32_SIGN = 0x80000000

#===============================================================================

def tile_span(zoom: int) -> int:
#===============================
    """
    The number of tile rows at a zoom level, i.e. ``1 << zoom``.

    The shift has 32-bit semantics: the count is taken modulo 32 and the
    result is a signed 32-bit integer. So ``tile_span(-1)`` is ``-2**31``
    and ``tile_span(32)`` is ``1``. Zoom levels outside 0..30 never match
    a stored tile, but still give a well-defined row to look up.
    """
    span = (1 << (int(zoom) & 31)) & INT32_MASK
    return span - (INT32_MASK + 1) if span & INT32_SIGN else span

def flip_y(zoom: int, y: int) -> int:
#====================================
    """
    Flip a tile row between the XYZ and TMS schemes. The conversion is its
    own inverse.
    """
    return tile_span(zoom) - 1 - int(y)

#===============================================================================
#===============================================================================
