import json

import pytest

from utility import corrupt_mbtiles, image_tile, make_mbtiles, world_tiles

#===============================================================================

PLAIN_METADATA = {
    'name': 'plain_1',
    'description': 'demo description',
    'version': '1.0.3',
    'type': 'baselayer',
    'json': json.dumps({'level1': {'level2': 'property'}}),
}

#===============================================================================

@pytest.fixture
def plain_tiles():
    # Zooms 0 to 2 cover the world, zoom 4 only has TMS rows 5 to 10
    tiles = world_tiles(0, 2)
    for x in range(3, 13):
        for y in range(5, 11):
            tiles[(4, x, y)] = image_tile((64, 8*x, 8*y, 255))
    return tiles

@pytest.fixture
def plain_path(tmp_path, plain_tiles):
    return make_mbtiles(tmp_path / 'plain_1.mbtiles', PLAIN_METADATA,
                        [(z, x, y, data) for (z, x, y), data in plain_tiles.items()])

@pytest.fixture
def corrupt_path(tmp_path):
    path = make_mbtiles(tmp_path / 'corrupt.mbtiles', {'name': 'corrupt'},
                        [(z, x, y, data) for (z, x, y), data in world_tiles(0, 4).items()])
    corrupt_mbtiles(path)
    return path

@pytest.fixture
def invalid_tile_path(tmp_path):
    return make_mbtiles(tmp_path / 'corrupt_null_tile.mbtiles', {'name': 'corrupt_null_tile'}, [
        (0, 0, 0, image_tile()),
        (1, 0, 0, None),
        (1, 1, 0, b''),
        (1, 0, 1, 'not a blob'),
    ])
