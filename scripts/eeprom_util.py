#!/usr/bin/env python3
'''
Read and modify the contents of the EEPROM of a board.

The device is accessed via the file exported by the eeprom kernel driver;
set SYSFS_ROOT in the environment to use a different root than /sys/bus/i2c/devices.
'''
import os
import sys
import logging

from eepromutil import __version__
from eepromutil.enum import LayoutVersion
from eepromutil.exceptions import EepromException
from eepromutil.streams import driver_path, SYSFS_I2C_ROOT, MAX_I2C_BUS
from eepromutil.changes import (
    parse_layout_version,
    parse_number,
    parse_field_changes,
    parse_byte_changes,
    read_changes,
)
from eepromutil.commands import (
    list_command,
    read_command,
    write_fields_command,
    write_bytes_command,
    clear_command,
)


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)

SYSFS_ROOT = os.environ.get('SYSFS_ROOT', SYSFS_I2C_ROOT)


def banner():
    return f'EEPROM utility version {__version__}'


def usage(progname, message=None, status=1):
    if message:
        print(message, file=sys.stderr)

    print(f'''{banner()}

usage: {progname} list [<bus_num>]
       {progname} read [-l <layout_version>] <bus_num> <device_addr>
       {progname} write (fields|bytes) [-l <layout_version>] <bus_num> <device_addr> CHANGES
       {progname} clear <bus_num> <device_addr>
       {progname} version|-v|--version
       {progname} [help|-h|--help]

COMMANDS
       list     List device addresses with an EEPROM
       read     Read from EEPROM
       write    Write to EEPROM
       clear    Clear EEPROM
       version  Print the version banner and exit
       help     Print this help and exit

LAYOUT VERSIONS
The -l option can be used to force the utility to interpret the EEPROM data using the chosen layout.
If the -l option is omitted, the utility will auto detect the layout based on the data in the EEPROM.
       auto                 use auto-detection to print layout
       legacy, 1, 2, 3, 4   print according to layout version
       raw                  print raw data

CHANGES FORMAT
The list of changes to the write command can be passed inline:
       {progname} write fields [-l <layout_version>] <bus_num> <device_addr> [<field_name>=<value> ]*
       {progname} write bytes [-l <layout_version>] <bus_num> <device_addr> [<offset>[-<offset-end>],<value> ]*
or via file input:
       {progname} write (fields|bytes) [-l <layout_version>] <bus_num> <device_addr> < file

When file input is used each change must be on its own line, and no quote marks
are necessary if there are spaces in either <field_name> or <value>.
Ranges are inclusive and can be mixed with single offsets.''')
    sys.exit(status)


def parse_bus(progname, value):
    try:
        bus = parse_number(value)
    except ValueError:
        bus = -1

    if not 0 <= bus <= MAX_I2C_BUS:
        usage(progname, 'Invalid bus number!')

    return bus


def parse_address(progname, value):
    try:
        addr = parse_number(value)
    except ValueError:
        addr = -1

    if not 0 <= addr <= 0xff:
        usage(progname, 'Invalid device address!')

    return addr


def get_changes(progname, args):
    '''The changes on the command line win, stdin is read only without them.'''
    changes = args
    if not changes and not sys.stdin.isatty():
        changes = read_changes(sys.stdin)

    if not changes:
        usage(progname, 'No changes to write!')

    return changes


def main(progname, args):
    if not args or args[0] in ('help', '-h', '--help'):
        usage(progname, status=0)

    if args[0] in ('version', '-v', '--version'):
        print(banner())
        return 0

    action, args = args[0], args[1:]

    if action == 'list':
        bus = parse_bus(progname, args[0]) if args else None
        print(list_command(bus, root=SYSFS_ROOT))
        return 0

    if action == 'write':
        if not args or args[0] not in ('fields', 'bytes'):
            usage(progname, 'Unknown function!')
        action, args = f'write {args[0]}', args[1:]
    elif action not in ('read', 'clear'):
        usage(progname, 'Unknown function!')

    version = LayoutVersion.AUTODETECT
    if args and args[0] == '-l':
        if len(args) < 2:
            usage(progname, 'Missing parameters!')
        try:
            version = parse_layout_version(args[1])
        except ValueError:
            usage(progname, 'Invalid parameter for action!')
        args = args[2:]

    if len(args) < 2:
        usage(progname, 'Missing parameters!')

    path = driver_path(parse_bus(progname, args[0]), parse_address(progname, args[1]), root=SYSFS_ROOT)
    args = args[2:]
    logger.debug('using device file \'%s\'' % path)

    if action == 'read':
        print(read_command(path, version))
        return 0

    if action == 'clear':
        clear_command(path)
        print('EEPROM cleared')
        return 0

    if action == 'write fields':
        result = write_fields_command(path, parse_field_changes(get_changes(progname, args)), version)
        what = 'fields'
    else:
        result = write_bytes_command(path, parse_byte_changes(get_changes(progname, args)), version)
        what = 'bytes'

    if not result.ok:
        print(str(result.error), file=sys.stderr)
        print('Nothing has been written to the EEPROM', file=sys.stderr)
        return 1

    print(f'{result.count} {what} updated')
    return 0


if __name__ == '__main__':
    try:
        status = main(sys.argv[0], sys.argv[1:])
    except EepromException as e:
        print(str(e), file=sys.stderr)
        status = 1

    sys.exit(status)
