"""
Layouts of the EEPROM contents.

Each version of the layout is an immutable tuple of FieldDescriptor: the
offset of a field is the sum of the sizes of the fields preceding it, so the
order matters. All the known layouts cover exactly EEPROM_SIZE bytes.
"""
import logging
from types import MappingProxyType
from typing import Tuple

from .enum import FieldType, LayoutVersion
from .meta import FieldDescriptor as F


logger = logging.getLogger(__name__)

EEPROM_SIZE = 256
LAYOUT_CHECK_BYTE = 44

NO_LAYOUT_FIELDS = 'Unknown layout. Dumping raw data'

Schema = Tuple[F, ...]


LAYOUT_LEGACY: Schema = (
    F('MAC address',                 'mac',    6,   FieldType.MAC),
    F('Board Revision',              'rev',    2,   FieldType.BINARY),
    F('Serial Number',               'sn',     8,   FieldType.BINARY),
    F('Board Configuration',         'conf',   64,  FieldType.ASCII),
    F('Reserved fields',             'rsvd',   176, FieldType.RESERVED),
)

# the first fields are shared by all the versioned layouts
_COMMON_HEADER: Schema = (
    F('Major Revision',              'major',  2,   FieldType.VERSION),
    F('Minor Revision',              'minor',  2,   FieldType.VERSION),
    F('1st MAC Address',             'mac1',   6,   FieldType.MAC),
    F('2nd MAC Address',             'mac2',   6,   FieldType.MAC),
    F('Production Date',             'date',   4,   FieldType.DATE),
    F('Serial Number',               'sn',     12,  FieldType.REVERSED),
)

_PRODUCT_INFO: Schema = (
    F('Product Name',                'name',   16,  FieldType.ASCII),
    F('Product Options #1',          'opt1',   16,  FieldType.ASCII),
    F('Product Options #2',          'opt2',   16,  FieldType.ASCII),
    F('Product Options #3',          'opt3',   16,  FieldType.ASCII),
)

LAYOUT_V1: Schema = _COMMON_HEADER + (
    F('Reserved fields',             'rsvd',   96,  FieldType.RESERVED),
) + _PRODUCT_INFO + (
    F('Reserved fields',             'rsvd',   64,  FieldType.RESERVED),
)

LAYOUT_V2: Schema = _COMMON_HEADER + (
    F('3rd MAC Address (WIFI)',      'mac3',   6,   FieldType.MAC),
    F('4th MAC Address (Bluetooth)', 'mac4',   6,   FieldType.MAC),
    F('Layout Version',              'layout', 1,   FieldType.BINARY),
    F('Reserved fields',             'rsvd',   83,  FieldType.RESERVED),
) + _PRODUCT_INFO + (
    F('Reserved fields',             'rsvd',   64,  FieldType.RESERVED),
)

LAYOUT_V3: Schema = _COMMON_HEADER + (
    F('3rd MAC Address (WIFI)',      'mac3',   6,   FieldType.MAC),
    F('4th MAC Address (Bluetooth)', 'mac4',   6,   FieldType.MAC),
    F('Layout Version',              'layout', 1,   FieldType.BINARY),
    F('CompuLab EEPROM ID',          'id',     3,   FieldType.BINARY),
    F('Reserved fields',             'rsvd',   80,  FieldType.RESERVED),
) + _PRODUCT_INFO + (
    F('Reserved fields',             'rsvd',   64,  FieldType.RESERVED),
)

LAYOUT_V4: Schema = _COMMON_HEADER + (
    F('3rd MAC Address (WIFI)',      'mac3',   6,   FieldType.MAC),
    F('4th MAC Address (Bluetooth)', 'mac4',   6,   FieldType.MAC),
    F('Layout Version',              'layout', 1,   FieldType.BINARY),
    F('CompuLab EEPROM ID',          'id',     3,   FieldType.BINARY),
    F('5th MAC Address',             'mac5',   6,   FieldType.MAC),
    F('6th MAC Address',             'mac6',   6,   FieldType.MAC),
    F('Scratchpad',                  'spad',   4,   FieldType.BINARY),
    F('Reserved fields',             'rsvd',   64,  FieldType.RESERVED),
) + _PRODUCT_INFO + (
    F('Product Options #4',          'opt4',   16,  FieldType.ASCII),
    F('Product Options #5',          'opt5',   16,  FieldType.ASCII),
    F('Reserved fields',             'rsvd',   32,  FieldType.RESERVED),
)

RAW_SCHEMA: Schema = (
    F(NO_LAYOUT_FIELDS,              'raw',    EEPROM_SIZE, FieldType.RAW),
)

SCHEMAS = MappingProxyType({
    LayoutVersion.LEGACY: LAYOUT_LEGACY,
    LayoutVersion.V1: LAYOUT_V1,
    LayoutVersion.V2: LAYOUT_V2,
    LayoutVersion.V3: LAYOUT_V3,
    LayoutVersion.V4: LAYOUT_V4,
})


def schema_size(schema: Schema) -> int:
    return sum(_.size for _ in schema)


def detect_layout(data: bytes) -> LayoutVersion:
    '''Guess the layout version from the byte at LAYOUT_CHECK_BYTE.

    Values below 0x20 that are not a known version can't be part of the
    ascii contents of the legacy layout, so the layout is unrecognized.'''
    check = data[LAYOUT_CHECK_BYTE]

    if check in (0xff, 0x00):
        version = LayoutVersion.V1
    elif check == 0x02:
        version = LayoutVersion.V2
    elif check == 0x03:
        version = LayoutVersion.V3
    elif check == 0x04:
        version = LayoutVersion.V4
    elif check >= 0x20:
        version = LayoutVersion.LEGACY
    else:
        version = LayoutVersion.UNRECOGNIZED

    logger.debug('check byte 0x%02x detected as layout %s' % (check, version.name))

    return version


def get_schema(version: LayoutVersion) -> Schema:
    '''Return the fields for a resolved version, unknown versions fallback to the raw dump.'''
    if version == LayoutVersion.AUTODETECT:
        raise ValueError('the layout version must be resolved before asking for its schema')

    return SCHEMAS.get(version, RAW_SCHEMA)
