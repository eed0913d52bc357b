from eepromutil.enum import LayoutVersion
from eepromutil.exceptions import UnknownFieldException, InvalidOffsetException
from eepromutil.commands import (
    list_command,
    read_command,
    write_back,
    write_fields_command,
    write_bytes_command,
    clear_command,
)
from eepromutil.streams import Stream


def test_read_command(eeprom_file):
    text = read_command(str(eeprom_file))

    assert text.split('\n')[0] == 'Major Revision                0.00'

    text = read_command(str(eeprom_file), LayoutVersion.RAW)

    assert text.startswith('Unknown layout. Dumping raw data\n')


def test_write_fields_command(eeprom_file):
    result = write_fields_command(str(eeprom_file), [
        ('mac1', 'aa:bb:cc:dd:ee:ff'),
        ('name', 'Board'),
    ])

    assert result.ok
    assert result.count == 2

    data = eeprom_file.read_bytes()

    assert data[4:10] == b'\xaa\xbb\xcc\xdd\xee\xff'
    assert data[128:134] == b'Board\x00'
    assert 'Board' in read_command(str(eeprom_file))


def test_write_fields_command_failure(eeprom_file, blank_data):
    """Nothing is written if the batch fails."""
    result = write_fields_command(str(eeprom_file), [
        ('mac1', 'aa:bb:cc:dd:ee:ff'),
        ('mac9', '00:00:00:00:00:00'),
    ])

    assert result.count == 1
    assert isinstance(result.error, UnknownFieldException)
    assert eeprom_file.read_bytes() == blank_data


def test_write_bytes_command(eeprom_file):
    result = write_bytes_command(str(eeprom_file), [(0x10, 0x1f, 0x00), (0xff, 0xff, 0x42)])

    assert result.count == 17

    data = eeprom_file.read_bytes()

    assert data[0x10:0x20] == b'\x00' * 16
    assert data[0x0f] == 0xff
    assert data[0xff] == 0x42


def test_write_bytes_command_failure(eeprom_file, blank_data):
    result = write_bytes_command(str(eeprom_file), [(0, 1, 0x00), (0x100, 0x100, 0x00)])

    assert result.count == 0
    assert isinstance(result.error, InvalidOffsetException)
    assert eeprom_file.read_bytes() == blank_data


def test_clear_command(eeprom_file):
    eeprom_file.write_bytes(bytes(range(256)))

    result = clear_command(str(eeprom_file))

    assert result.count == 256
    assert eeprom_file.read_bytes() == b'\xff' * 256


def test_write_back_changed_pages():
    old = b'\xff' * 64
    new = b'\xff' * 20 + b'\x00' + b'\xff' * 43
    stream = Stream(b'\xee' * 64, flags='w')

    assert write_back(stream, old, new) == 16
    # only the second page has been written
    assert stream.getvalue() == b'\xee' * 16 + new[16:32] + b'\xee' * 32


def test_list_command(tmp_path):
    assert list_command(root=str(tmp_path)) == 'No EEPROM found'

    (tmp_path / '3-0050').mkdir()
    (tmp_path / '3-0050' / 'eeprom').write_bytes(b'')

    assert list_command(root=str(tmp_path)) == 'Bus 3: 0x50'
