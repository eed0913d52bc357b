"""
Core module: the Layout binds the data read from an EEPROM to the fields of
one of the known schemas.

The batch operations (update_fields(), clear_fields(), update_bytes() and
clear_bytes()) apply a list of changes in order and stop at the first failure:
the changes already applied are NOT rolled back, the caller receives a
BatchResult telling how many changes went through and what went wrong.
"""
import logging
from typing import Iterable, List, NamedTuple, Optional, Tuple

from .enum import FieldType, LayoutVersion
from .fields import Field, CLEARED_BYTE
from .schemas import (
    LAYOUT_CHECK_BYTE,
    detect_layout,
    get_schema,
    schema_size,
)
from .exceptions import (
    EepromException,
    UnknownFieldException,
    FieldsUnavailableException,
    InvalidOffsetException,
    InvalidValueException,
    InvalidBufferSizeException,
)


class BatchResult(NamedTuple):
    '''Outcome of a batch operation: "count" are the fields or the bytes
    modified, "error" is the exception that stopped the batch (if any).'''
    count: int
    error: Optional[EepromException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Layout(object):
    """
    Decoded view of the contents of an EEPROM.

    The layout keeps its own copy of the data passed to the constructor and
    the fields are windows over it, so modifying a field modifies the data
    of the layout.
    """

    def __init__(self, data: bytes, version: LayoutVersion = LayoutVersion.AUTODETECT):
        self.logger = logging.getLogger(__name__)

        if version == LayoutVersion.AUTODETECT:
            if len(data) <= LAYOUT_CHECK_BYTE:
                raise InvalidBufferSizeException(len(data), LAYOUT_CHECK_BYTE + 1)

            version = detect_layout(data)

        self.version = version
        self.schema = get_schema(version)

        size = schema_size(self.schema)
        if len(data) < size:
            raise InvalidBufferSizeException(len(data), size)

        self._backend = bytearray(data)
        self.fields = self.build_fields()

        self.logger.debug('built layout %s with %d fields' % (self.version.name, len(self.fields)))

    def build_fields(self) -> List[Field]:
        fields = []
        offset = 0
        for descriptor in self.schema:
            fields.append(Field(descriptor, father=self, offset=offset))
            offset += descriptor.size

        return fields

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, self.version.name)

    def __str__(self):
        return self.print_layout()

    def get_backend(self) -> bytearray:
        return self._backend

    @property
    def data(self) -> bytes:
        '''The contents of the EEPROM, ready to be written back.'''
        return bytes(self._backend)

    @property
    def size(self) -> int:
        return schema_size(self.schema)

    @property
    def is_raw(self) -> bool:
        return len(self.fields) == 1 and self.fields[0].type == FieldType.RAW

    @property
    def layout(self) -> List[Tuple[str, int, int]]:
        return [(field.key, field.offset, field.size) for field in self.fields]

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (key, instance) for each field.'''
        return [(field.key, field) for field in self.fields]

    def print_layout(self) -> str:
        return '\n'.join(str(field) for field in self.fields)

    def find_field(self, name: str) -> Field:
        '''Return the first field having the given key or display name.'''
        if self.is_raw:
            raise FieldsUnavailableException()

        for field in self.fields:
            if field.is_named(name):
                return field

        raise UnknownFieldException(name)

    def __getitem__(self, name: str) -> Field:
        return self.find_field(name)

    def _fail(self, count, exc) -> BatchResult:
        self.logger.warning(str(exc))
        return BatchResult(count, exc)

    def update_fields(self, changes: Iterable[Tuple[str, str]]) -> BatchResult:
        '''Update the fields with the given textual values, an empty value clears the field.'''
        count = 0
        for name, value in changes:
            try:
                field = self.find_field(name)
                if value == '':
                    field.clear()
                else:
                    field.update(value)
            except EepromException as e:
                return self._fail(count, e)

            count += 1

        return BatchResult(count)

    def clear_fields(self, names: Iterable[str]) -> BatchResult:
        count = 0
        for name in names:
            try:
                self.find_field(name).clear()
            except EepromException as e:
                return self._fail(count, e)

            count += 1

        return BatchResult(count)

    def get_bytes_range(self, start: int, end: int) -> int:
        '''Check an inclusive range of offsets and return its length.'''
        if start < 0 or start >= self.size or end < start or end >= self.size:
            raise InvalidOffsetException(start, end)

        return end - start + 1

    def _fill(self, start, end, value) -> int:
        length = self.get_bytes_range(start, end)
        if not 0 <= value <= 0xff:
            raise InvalidValueException(value, start, end)

        self.logger.debug('filling 0x%02x-0x%02x with 0x%02x' % (start, end, value))
        self._backend[start:end + 1] = bytes([value] * length)

        return length

    def update_bytes(self, changes: Iterable[Tuple[int, int, int]]) -> BatchResult:
        '''Fill each inclusive range [start, end] with value.

        An invalid entry aborts the batch reporting zero bytes updated, even if
        the entries before it were already written.'''
        count = 0
        for start, end, value in changes:
            try:
                count += self._fill(start, end, value)
            except EepromException as e:
                return self._fail(0, e)

        return BatchResult(count)

    def clear_bytes(self, ranges: Iterable[Tuple[int, int]]) -> BatchResult:
        return self.update_bytes((start, end, CLEARED_BYTE) for start, end in ranges)
