import io
import logging
import re
from pathlib import Path
from typing import Iterator, Optional, Tuple

from .schemas import EEPROM_SIZE
from .exceptions import EepromIOException


logger = logging.getLogger(__name__)

EEPROM_PAGE_SIZE = 16

SYSFS_I2C_ROOT = '/sys/bus/i2c/devices'
DEFAULT_I2C_BUS = 3
DEFAULT_I2C_ADDR = 0x50
MAX_I2C_BUS = 255

DEVICE_DIR_RE = re.compile(r'([0-9]+)-([0-9a-fA-F]{4})')


def driver_path(bus: int = DEFAULT_I2C_BUS, addr: int = DEFAULT_I2C_ADDR, root: str = SYSFS_I2C_ROOT) -> str:
    '''Path of the file exported by the eeprom driver for the device at <addr> on <bus>.'''
    return str(Path(root) / ('%d-%04x' % (bus, addr)) / 'eeprom')


def list_devices(bus: Optional[int] = None, root: str = SYSFS_I2C_ROOT) -> Iterator[Tuple[int, int]]:
    '''Yield (bus, address) of the devices with an eeprom driver bound.'''
    for path in sorted(Path(root).glob('*/eeprom')):
        match = DEVICE_DIR_RE.fullmatch(path.parent.name)
        if not match:
            continue

        device_bus, device_addr = int(match.group(1)), int(match.group(2), 16)
        if bus is not None and device_bus != bus:
            continue

        logger.debug('found eeprom at \'%s\'' % path)
        yield device_bus, device_addr


class Stream(object):
    '''This is a simple wrapper around bytes/File object to uniform the access
    to the EEPROM contents: a path is the file exported by the driver, raw bytes
    are kept in memory.

    Use flags='w' to be able to write back.'''
    def __init__(self, obj, flags='r'):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        self.flags = flags
        self.obj = obj

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)
        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of object to use as stream' % self.obj.__class__.__name__)

        init_method()

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def __del__(self):
        self.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def close(self):
        obj = self.__dict__.get('obj')
        if isinstance(obj, io.IOBase):
            obj.close()

    def init_str(self):
        '''We think this is a path'''
        mode = 'r+b' if 'w' in self.flags else 'rb'
        logger.debug('opening path \'%s\' (mode %s)' % (self.obj, mode))
        try:
            self.obj = open(self.obj, mode)
        except OSError as e:
            raise EepromIOException(f"Can't open '{self.obj}': {e.strerror}") from e

    def init_PosixPath(self):
        self.obj = str(self.obj)
        self.init_str()

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

    def read_eeprom(self, offset=0, size=EEPROM_SIZE) -> bytes:
        try:
            self.seek(offset)
            data = self.obj.read(size)
        except OSError as e:
            raise EepromIOException(f'Read failed: {e.strerror}') from e

        if len(data) != size:
            raise EepromIOException(f'Read failed: {len(data)} bytes read instead of {size}')

        logger.debug('read %d bytes at offset 0x%02x' % (size, offset))

        return data

    def write_eeprom(self, data: bytes, offset=0) -> int:
        '''The device is written one page at a time.'''
        if 'w' not in self.flags:
            raise EepromIOException('Write failed: the stream is read only')

        try:
            for page in range(0, len(data), EEPROM_PAGE_SIZE):
                self.seek(offset + page)
                self.obj.write(data[page:page + EEPROM_PAGE_SIZE])
                self.obj.flush()
                logger.debug('written page at offset 0x%02x' % (offset + page))
        except OSError as e:
            raise EepromIOException(f'Write failed: {e.strerror}') from e

        return len(data)

    def getvalue(self) -> bytes:
        return self.obj.getvalue()
