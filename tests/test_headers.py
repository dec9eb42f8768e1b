import gzip
import struct
import zlib

import pytest

import tileset
from tileset import HeaderSource
from tileset.headers import format_headers, tile_headers

from utility import image_tile, make_mbtiles

#===============================================================================

@pytest.mark.parametrize('info, headers', [
    ({'format': 'pbf'}, {'Content-Type': 'application/x-protobuf', 'Content-Encoding': 'gzip'}),
    ({'format': 'pbf', 'compression': 'deflate'}, {'Content-Type': 'application/x-protobuf', 'Content-Encoding': 'deflate'}),
    ({'format': 'pbf', 'compression': 'none'}, {'Content-Type': 'application/x-protobuf'}),
    ({'format': 'jpg'}, {'Content-Type': 'image/jpeg'}),
    ({'format': 'png'}, {'Content-Type': 'image/png'}),
    ({'format': 'webp'}, {'Content-Type': 'image/webp'}),
    ({'format': 'image/avif'}, {'Content-Type': 'image/avif'}),
])
def test_format_headers(info, headers):
    assert format_headers(info) == headers

@pytest.mark.parametrize('info', [{}, {'format': ''}, {'format': 'unknown'}, {'format': 3}])
def test_format_headers_unrecognised(info):
    assert format_headers(info) is None

#===============================================================================

def test_tile_headers_images():
    assert tile_headers(image_tile(format='png')) == {'Content-Type': 'image/png'}
    assert tile_headers(image_tile(format='jpeg')) == {'Content-Type': 'image/jpeg'}
    assert tile_headers(image_tile(format='webp')) == {'Content-Type': 'image/webp'}

def test_tile_headers_vector_tiles():
    assert tile_headers(gzip.compress(b'\x1a\x02layer')) == {
        'Content-Type': 'application/x-protobuf', 'Content-Encoding': 'gzip'}
    assert tile_headers(zlib.compress(b'\x1a\x02layer')) == {
        'Content-Type': 'application/x-protobuf', 'Content-Encoding': 'deflate'}

def test_tile_headers_unknown():
    assert tile_headers(b'\x1a\x02layer') == {}

#===============================================================================

def test_headers_from_metadata(tmp_path):
    # Headers come from ``format`` even when a tile's content differs
    path = make_mbtiles(tmp_path / 'jpeg.mbtiles', {'format': 'jpg'}, [
        (0, 0, 0, image_tile(format='jpeg')),
        (1, 0, 0, image_tile(format='png')),
    ])
    with tileset.open(path) as mbtiles:
        assert mbtiles.header_source == HeaderSource.UNRESOLVED
        (_, headers) = mbtiles.get_tile(0, 0, 0)
        assert mbtiles.header_source == HeaderSource.METADATA
        assert headers['Content-Type'] == 'image/jpeg'
        assert 'Last-Modified' in headers
        (_, headers) = mbtiles.get_tile(1, 0, 1)
        assert headers['Content-Type'] == 'image/jpeg'

def test_headers_from_vector_metadata(tmp_path):
    path = make_mbtiles(tmp_path / 'vector.mbtiles', {'format': 'pbf'}, [
        (0, 0, 0, gzip.compress(b'\x1a\x02layer')),
    ])
    with tileset.open(path) as mbtiles:
        (_, headers) = mbtiles.get_tile(0, 0, 0)
    assert headers['Content-Type'] == 'application/x-protobuf'
    assert headers['Content-Encoding'] == 'gzip'

def test_headers_per_tile(tmp_path):
    path = make_mbtiles(tmp_path / 'mixed.mbtiles', {'name': 'mixed'}, [
        (0, 0, 0, image_tile(format='jpeg')),
        (1, 0, 0, image_tile(format='png')),
    ])
    with tileset.open(path) as mbtiles:
        (_, headers) = mbtiles.get_tile(0, 0, 0)
        assert mbtiles.header_source == HeaderSource.PER_TILE
        assert headers['Content-Type'] == 'image/jpeg'
        (_, headers) = mbtiles.get_tile(1, 0, 1)
        assert headers['Content-Type'] == 'image/png'

def test_headers_after_corrupt_metadata(tmp_path):
    path = make_mbtiles(tmp_path / 'bad_json.mbtiles', {'format': 'jpg', 'json': '{"level1": '}, [
        (0, 0, 0, image_tile(format='png')),
    ])
    with tileset.open(path) as mbtiles:
        (_, headers) = mbtiles.get_tile(0, 0, 0)
        assert mbtiles.header_source == HeaderSource.PER_TILE
        assert headers['Content-Type'] == 'image/png'

def test_headers_not_resolved_by_missing_tile(plain_path):
    with tileset.open(plain_path) as mbtiles:
        with pytest.raises(tileset.TileNotFoundError):
            mbtiles.get_tile(9, 0, 0)
        assert mbtiles.header_source == HeaderSource.UNRESOLVED

def png_chunk(type: bytes, data: bytes) -> bytes:
    return struct.pack('>I', len(data)) + type + data + struct.pack('>I', zlib.crc32(type + data))

def test_tile_headers_huge_image():
    # A PNG header claiming far more pixels than Pillow will open
    data = (b'\x89PNG\r\n\x1a\n'
          + png_chunk(b'IHDR', struct.pack('>IIBBBBB', 100000, 100000, 8, 6, 0, 0, 0))
          + png_chunk(b'IDAT', b''))
    assert tile_headers(data) == {}
