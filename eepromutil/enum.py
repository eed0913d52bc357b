from enum import Enum, auto


class FieldType(Enum):
    '''It indicates how the bytes of a field must be interpreted'''
    BINARY   = 0
    REVERSED = auto()
    VERSION  = auto()
    ASCII    = auto()
    MAC      = auto()
    DATE     = auto()
    RAW      = auto()
    RESERVED = auto()


class LayoutVersion(Enum):
    '''Versions of the layout of the EEPROM contents.

    AUTODETECT is only an input value: the layout resolves it looking at the data.
    RAW forces the dump of the raw data without looking at the fields.'''
    AUTODETECT   = -1
    LEGACY       = 0
    V1           = 1
    V2           = 2
    V3           = 3
    V4           = 4
    UNRECOGNIZED = auto()
    RAW          = auto()
