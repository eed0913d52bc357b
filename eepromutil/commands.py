"""
Commands exposed by the command line utility: each one reads the EEPROM
through a Stream, works on a Layout and writes back what changed.
"""
import logging
from typing import List, Optional, Tuple

from .core import Layout, BatchResult
from .enum import LayoutVersion
from .schemas import EEPROM_SIZE
from .streams import Stream, EEPROM_PAGE_SIZE, SYSFS_I2C_ROOT, list_devices


logger = logging.getLogger(__name__)


def list_command(bus: Optional[int] = None, root: str = SYSFS_I2C_ROOT) -> str:
    lines = ['Bus %d: 0x%02x' % (device_bus, addr) for device_bus, addr in list_devices(bus, root=root)]
    if not lines:
        lines.append('No EEPROM found')

    return '\n'.join(lines)


def read_layout(stream: Stream, version: LayoutVersion = LayoutVersion.AUTODETECT) -> Layout:
    return Layout(stream.read_eeprom(), version)


def write_back(stream: Stream, old: bytes, new: bytes) -> int:
    '''Write only the pages that differ, returns the number of bytes written.'''
    written = 0
    for offset in range(0, len(new), EEPROM_PAGE_SIZE):
        page = new[offset:offset + EEPROM_PAGE_SIZE]
        if page == old[offset:offset + EEPROM_PAGE_SIZE]:
            continue

        written += stream.write_eeprom(page, offset=offset)

    logger.debug('written back %d bytes' % written)

    return written


def read_command(path, version: LayoutVersion = LayoutVersion.AUTODETECT) -> str:
    with Stream(path) as stream:
        return read_layout(stream, version).print_layout()


def _write_command(path, version, apply) -> BatchResult:
    with Stream(path, flags='w') as stream:
        layout = read_layout(stream, version)
        old = layout.data
        result = apply(layout)

        # a failed batch leaves the device untouched
        if result.ok and result.count > 0:
            write_back(stream, old, layout.data)

    return result


def write_fields_command(path, changes: List[Tuple[str, str]],
                         version: LayoutVersion = LayoutVersion.AUTODETECT) -> BatchResult:
    return _write_command(path, version, lambda layout: layout.update_fields(changes))


def write_bytes_command(path, changes: List[Tuple[int, int, int]],
                        version: LayoutVersion = LayoutVersion.AUTODETECT) -> BatchResult:
    return _write_command(path, version, lambda layout: layout.update_bytes(changes))


def clear_command(path) -> BatchResult:
    '''Erase the whole EEPROM.'''
    return _write_command(
        path,
        LayoutVersion.RAW,
        lambda layout: layout.clear_bytes([(0, EEPROM_SIZE - 1)]),
    )
