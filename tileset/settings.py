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

import logging
import os

#===============================================================================

# Global settings

settings = {}

settings['LOGGER'] = logging.getLogger('tileset')

#===============================================================================

TILESET_ROOT = os.environ.get('TILESET_ROOT', '.')
settings['TILESET_ROOT'] = os.path.abspath(TILESET_ROOT)

def normalise_path(path):
#========================
    return os.path.normpath(os.path.join(settings['TILESET_ROOT'], path))

#===============================================================================

settings['LOG_LEVEL'] = os.environ.get('TILESET_LOG_LEVEL', 'INFO').upper()

#===============================================================================
#===============================================================================
