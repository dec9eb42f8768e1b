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

import io
from typing import Any, Optional

#===============================================================================

from PIL import Image, UnidentifiedImageError

#===============================================================================

PROTOBUF_CONTENT_TYPE = 'application/x-protobuf'

FORMAT_CONTENT_TYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'webp': 'image/webp',
}

GZIP_SIGNATURE = b'\x1f\x8b'
ZLIB_SIGNATURE = b'\x78\x9c'

#===============================================================================

def format_headers(info: dict[str, Any]) -> Optional[dict[str, str]]:
#====================================================================
    """
    Response headers implied by a tileset's ``format`` metadata.

    :param info: A tileset's metadata record
    :returns: The headers, or ``None`` when ``format`` is missing or not
              recognised and headers have to come from the tiles themselves
    """
    format = info.get('format')
    if not isinstance(format, str) or not format.strip():
        return None
    format = format.strip()
    if format.lower() == 'pbf':
        headers = {'Content-Type': PROTOBUF_CONTENT_TYPE}
        encoding = info.get('compression', 'gzip')
        if encoding and str(encoding).lower() != 'none':
            headers['Content-Encoding'] = str(encoding)
        return headers
    elif (content_type := FORMAT_CONTENT_TYPES.get(format.lower())) is not None:
        return {'Content-Type': content_type}
    elif '/' in format:
        return {'Content-Type': format}
    return None

#===============================================================================

def tile_headers(data: bytes) -> dict[str, str]:
#===============================================
    """
    Response headers from a tile's binary signature.

    Compressed vector tiles are recognised by their gzip or zlib signature,
    raster tiles by whatever Pillow can identify. Data that can't be
    identified gets no content headers.
    """
    if data.startswith(GZIP_SIGNATURE):
        return {'Content-Type': PROTOBUF_CONTENT_TYPE, 'Content-Encoding': 'gzip'}
    elif data.startswith(ZLIB_SIGNATURE):
        return {'Content-Type': PROTOBUF_CONTENT_TYPE, 'Content-Encoding': 'deflate'}
    try:
        with Image.open(io.BytesIO(data)) as image:
            format = image.format
    except (UnidentifiedImageError, Image.DecompressionBombError):
        return {}
    if format is not None and (content_type := Image.MIME.get(format)) is not None:
        return {'Content-Type': content_type}
    return {}

#===============================================================================
#===============================================================================
