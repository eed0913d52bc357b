"""
Parsing of the changes passed by the user.

Fields are changed with "<field_name>=<value>" and bytes with
"<offset>[-<offset-end>],<value>"; the same syntax is used for the
changes read one per line from a file.
"""
import logging
import re
from typing import Iterable, List, Tuple

from .enum import LayoutVersion
from .exceptions import ChangeSyntaxException


logger = logging.getLogger(__name__)

FIELD_DELIMITER = '='
BYTES_DELIMITER = ','
RANGE_DELIMITER = '-'

# only ASCII digits, no digit separators
NUMBER_RE = re.compile(r'([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)')
LAYOUT_NUMBER_RE = re.compile(r'v?([1-4])')


def parse_layout_version(value: str) -> LayoutVersion:
    '''Accepts "auto", "legacy", "raw" and the version number with an optional "v" prefix.'''
    if value == 'legacy':
        return LayoutVersion.LEGACY
    elif value == 'raw':
        return LayoutVersion.RAW
    elif value == 'auto':
        return LayoutVersion.AUTODETECT

    match = LAYOUT_NUMBER_RE.fullmatch(value)
    if match:
        return LayoutVersion(int(match.group(1)))

    raise ValueError(f"'{value}' is not a valid layout version")


def parse_number(value: str) -> int:
    '''Parse an integer like strtol() with base 0 does: "0x" is hex, a leading zero is octal.'''
    match = NUMBER_RE.fullmatch(value.strip())
    if not match:
        raise ValueError(f"'{value}' is not a valid number")

    sign, digits = match.groups()

    if digits[:2].lower() == '0x':
        number = int(digits[2:], 16)
    elif digits.startswith('0'):
        number = int(digits, 8)
    else:
        number = int(digits)

    return -number if sign == '-' else number


def _split(change: str, delimiter: str) -> Tuple[str, str]:
    if change.startswith(delimiter) or delimiter not in change:
        raise ChangeSyntaxException(f"Invalid change '{change}'")

    key, value = change.split(delimiter, 1)

    return key, value


def parse_field_changes(changes: Iterable[str]) -> List[Tuple[str, str]]:
    '''An empty value is allowed: it means the field must be cleared.'''
    return [_split(change, FIELD_DELIMITER) for change in changes]


def parse_offset(key: str) -> Tuple[int, int]:
    '''Parse "<offset>" or "<offset>-<offset-end>"; a range must be ascending.'''
    start, _, end = key.partition(RANGE_DELIMITER)

    try:
        start = parse_number(start)
        end = parse_number(end) if end else start
    except ValueError:
        raise ChangeSyntaxException(f"Invalid offset '{key}'")

    if start < 0 or end < 0 or (key.count(RANGE_DELIMITER) and start >= end):
        raise ChangeSyntaxException(f"Invalid offset '{key}'")

    return start, end


def parse_byte_changes(changes: Iterable[str]) -> List[Tuple[int, int, int]]:
    result = []
    for change in changes:
        key, value = _split(change, BYTES_DELIMITER)
        start, end = parse_offset(key)

        try:
            value = parse_number(value)
        except ValueError:
            raise ChangeSyntaxException(f"Invalid value '{value}' at offset '{key}'")

        result.append((start, end, value))

    logger.debug('parsed %d byte changes' % len(result))

    return result


def read_changes(lines: Iterable[str]) -> List[str]:
    '''Each non empty line is a change, no quoting is needed for spaces.'''
    return [_ for _ in (line.rstrip('\r\n') for line in lines) if _]
