"""
A Field is a named window over the data of a layout: it doesn't own any byte,
it only knows where its bytes are (offset and size) and how to interpret them.

How a field is rendered, updated and cleared depends only on its type: the
association between FieldType and the operations is a static table (FIELD_OPS),
so a new kind of field is defined by writing its functions and adding a row.
"""
import calendar
import logging
import re
from types import MappingProxyType
from typing import Callable, NamedTuple, Optional

from bitstring import Bits

from .enum import FieldType
from .meta import FieldDescriptor
from .exceptions import (
    SyntaxException,
    ValueTooLongException,
    ValueOutOfRangeException,
    InvalidDateException,
    ReadOnlyFieldException,
)


# an erased EEPROM has all the bits set
CLEARED_BYTE = 0xff
PRINT_FIELD_WIDTH = 30
RAW_ROW_SIZE = 16

MONTHS = ('Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
          'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec')

HEX_BYTE_RE = re.compile(r'[0-9a-fA-F]{1,2}')
VERSION_RE = re.compile(r'([+-]?[0-9]+)\.([+-]?[0-9]+)')
DATE_RE = re.compile(r'([0-9]+)/([^/]*)/(.*)')
NUMBER_RE = re.compile(r'[0-9]+')


class Field(object):
    """Runtime view of a FieldDescriptor inside a layout.

    The bytes are resolved from the backend of the father (the layout) each time
    they are accessed, writing to "raw" writes directly into the father's data.
    A Field without father has its own zeroed backend, this is useful to work
    with a single field."""

    def __init__(self, descriptor: FieldDescriptor, father=None, offset=0):
        self.logger = logging.getLogger(__name__)
        self.descriptor = descriptor
        self.father = father
        self.offset = offset
        self._backend = bytearray(descriptor.size) if father is None else None

    def __repr__(self):
        return '<%s(%s, offset=0x%02x, size=%d)>' % (
            self.__class__.__name__, self.key, self.offset, self.size)

    def __str__(self):
        if self.type == FieldType.RAW:
            return '%s\n%s' % (self.name, self.render())

        return '%-*s%s' % (PRINT_FIELD_WIDTH, self.name, self.render())

    name = property(fget=lambda self: self.descriptor.name)
    key = property(fget=lambda self: self.descriptor.key)
    size = property(fget=lambda self: self.descriptor.size)
    type = property(fget=lambda self: self.descriptor.type)

    def get_backend(self) -> bytearray:
        """This is the storage the field reads and writes."""
        if self.father is not None:
            return self.father.get_backend()

        return self._backend

    def _get_raw(self) -> bytes:
        return bytes(self.get_backend()[self.offset:self.offset + self.size])

    def _set_raw(self, value: bytes) -> None:
        if len(value) != self.size:
            raise ValueError(f"field '{self.key}' can only accept binary strings of length {self.size}")

        self.get_backend()[self.offset:self.offset + self.size] = value

    raw = property(
        fget=lambda self: self._get_raw(),
        fset=lambda self, value: self._set_raw(value),
    )

    @property
    def ops(self) -> "FieldOps":
        return FIELD_OPS[self.type]

    @property
    def is_updatable(self) -> bool:
        return self.ops.update is not None

    def is_named(self, name: str) -> bool:
        return self.descriptor.is_named(name)

    def render(self) -> str:
        '''Return the textual representation of the value, without the name.'''
        return self.ops.render(self)

    def update(self, value: str) -> None:
        if self.ops.update is None:
            raise ReadOnlyFieldException(self.name, value)

        self.logger.debug('updating field \'%s\' at offset 0x%02x with \'%s\'' % (self.key, self.offset, value))
        self.ops.update(self, value)

    def clear(self) -> None:
        if self.ops.clear is None:
            raise ReadOnlyFieldException(self.name, '')

        self.logger.debug('clearing field \'%s\' at offset 0x%02x' % (self.key, self.offset))
        self.ops.clear(self)


def _parse_hex_byte(field, group, value):
    if not HEX_BYTE_RE.fullmatch(group):
        raise SyntaxException(field.name, value)

    return int(group, 16)


def _render_bin(field, delimiter='', reverse=False):
    raw = field.raw[::-1] if reverse else field.raw
    return delimiter.join('%02x' % _ for _ in raw)


def _update_bin(field, value, reverse=False):
    '''Each couple of characters is a byte; when reversing the string is consumed
    starting from its end so that a lonely character is the most significant nibble.'''
    if len(value) > field.size * 2:
        raise ValueTooLongException(field.name, value)

    if reverse:
        groups = [value[max(0, idx - 2):idx] for idx in range(len(value), 0, -2)]
    else:
        groups = [value[idx:idx + 2] for idx in range(0, len(value), 2)]

    # pad with zeros
    data = bytearray(field.size)
    for idx, group in enumerate(groups):
        data[idx] = _parse_hex_byte(field, group, value)

    field.raw = bytes(data)


def render_bin(field):
    return _render_bin(field)


def update_bin(field, value):
    """Update the field with a string of byte values (i.e. "10b234a")."""
    _update_bin(field, value)


def render_bin_rev(field):
    return _render_bin(field, reverse=True)


def update_bin_rev(field, value):
    """Update the field storing the bytes in reverse order: if the input string
    is "1234" the field contains "3412"."""
    _update_bin(field, value, reverse=True)


def render_mac(field):
    return _render_bin(field, delimiter=':')


def update_mac(field, value):
    """Update the field with colon delimited byte values (i.e. "1:02:3:ff")."""
    groups = value.split(':')
    if len(groups) != field.size:
        raise SyntaxException(field.name, value)

    field.raw = bytes(_parse_hex_byte(field, _, value) for _ in groups)


def render_bin_ver(field):
    '''The version is stored as major * 100 + minor, a cleared field is shown as 0.00'''
    raw = field.raw
    version = 0 if raw == bytes([CLEARED_BYTE] * 2) else Bits(raw).uintle

    return '%d.%02d' % divmod(version, 100)


def update_bin_ver(field, value):
    """The syntax is strictly "x.y" with y made of at most two digits."""
    match = VERSION_RE.fullmatch(value)
    if not match:
        raise SyntaxException(field.name, value)

    major, minor = int(match.group(1)), int(match.group(2))

    if major < 0 or minor < 0:
        raise ValueOutOfRangeException(field.name, value, reason='Version must be positive')

    if minor > 99:
        raise ValueOutOfRangeException(field.name, value, reason='Minor version is 1-2 digits')

    version = major * 100 + minor
    if version >> 16:
        raise ValueOutOfRangeException(field.name, value, reason='Version is too big')

    field.raw = Bits(uintle=version, length=16).bytes


def render_date(field):
    raw = field.raw
    month = MONTHS[raw[1] - 1] if 1 <= raw[1] <= 12 else 'BAD'
    year = Bits(raw[2:4]).uintle

    return '%02d/%s/%d' % (raw[0], month, year)


def days_in_month(month: int, year: int) -> int:
    if month == 2:
        return 29 if calendar.isleap(year) else 28

    return 30 if month in (4, 6, 9, 11) else 31


def update_date(field, value):
    """The syntax is strictly "dd/Mon/yyyy" and the date must exist."""
    match = DATE_RE.fullmatch(value)
    if not match:
        raise SyntaxException(field.name, value)

    day = int(match.group(1))
    if day == 0:
        raise InvalidDateException(field.name, value, reason='Invalid day')

    if match.group(2) not in MONTHS:
        raise SyntaxException(field.name, value, reason='Invalid month')

    month = MONTHS.index(match.group(2)) + 1

    if not NUMBER_RE.fullmatch(match.group(3)):
        raise SyntaxException(field.name, value)

    year = int(match.group(3))

    if day > days_in_month(month, year):
        raise InvalidDateException(field.name, value)

    if year >> 16:
        raise ValueOutOfRangeException(field.name, value, reason='Year overflow')

    field.raw = bytes([day, month]) + Bits(uintle=year, length=16).bytes


def is_trivial(raw: bytes) -> bool:
    '''A string is trivial when it's only made of 0x00 or only of 0xff, checked word by word.'''
    words = [raw[idx:idx + 4] for idx in range(0, len(raw), 4)]
    pattern = words[0]

    if pattern not in (b'\x00' * 4, b'\xff' * 4):
        return False

    return all(_ == pattern for _ in words)


def render_ascii(field):
    raw = field.raw
    if is_trivial(raw):
        return ''

    return raw.split(b'\x00', 1)[0].decode('latin1')


def update_ascii(field, value):
    """Write the string followed by its terminator; what follows the terminator is left untouched."""
    try:
        encoded = value.encode('ascii')
    except UnicodeEncodeError:
        raise SyntaxException(field.name, value, reason='Only ASCII characters are allowed')

    if len(encoded) >= field.size:
        raise ValueTooLongException(field.name, value)

    data = bytearray(field.raw)
    data[:len(encoded) + 1] = encoded + b'\x00'
    field.raw = bytes(data)


def _printable(byte):
    if byte in (0x00, 0xff):
        return '.'
    if byte < 0x20 or byte >= 0x7f:
        return '?'

    return chr(byte)


def render_bin_raw(field):
    '''Dump the data both in hexadecimal and in ascii format, 16 bytes per row.'''
    raw = field.raw
    lines = ['     %s     %s' % ('  '.join('%x' % _ for _ in range(RAW_ROW_SIZE)), '0123456789abcdef')]

    for row in range(0, len(raw), RAW_ROW_SIZE):
        chunk = raw[row:row + RAW_ROW_SIZE]
        lines.append('%02x: %s    %s' % (
            row,
            ''.join('%02x ' % _ for _ in chunk),
            ''.join(_printable(_) for _ in chunk),
        ))

    return '\n'.join(lines)


def render_reserved(field):
    return '(%d bytes)' % field.size


def clear_field(field):
    """A cleared field has all its bytes set to 0xff."""
    field.raw = bytes([CLEARED_BYTE] * field.size)


class FieldOps(NamedTuple):
    render: Callable[[Field], str]
    update: Optional[Callable[[Field, str], None]]
    clear: Optional[Callable[[Field], None]]


def _ops_updatable(render, update):
    return FieldOps(render=render, update=update, clear=clear_field)


FIELD_OPS = MappingProxyType({
    FieldType.BINARY:   _ops_updatable(render_bin, update_bin),
    FieldType.REVERSED: _ops_updatable(render_bin_rev, update_bin_rev),
    FieldType.VERSION:  _ops_updatable(render_bin_ver, update_bin_ver),
    FieldType.ASCII:    _ops_updatable(render_ascii, update_ascii),
    FieldType.MAC:      _ops_updatable(render_mac, update_mac),
    FieldType.DATE:     _ops_updatable(render_date, update_date),
    FieldType.RESERVED: FieldOps(render=render_reserved, update=None, clear=clear_field),
    FieldType.RAW:      FieldOps(render=render_bin_raw, update=None, clear=None),
})
