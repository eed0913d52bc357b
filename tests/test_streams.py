import pytest

from eepromutil.exceptions import EepromIOException
from eepromutil.streams import Stream, driver_path, list_devices


def test_bytes_stream_read():
    data = bytes(range(256))

    stream = Stream(data)

    assert stream.read_eeprom() == data
    assert stream.read_eeprom(offset=0x10, size=2) == b'\x10\x11'


def test_bytes_stream_short_read():
    stream = Stream(b'\xff' * 100)

    with pytest.raises(EepromIOException):
        stream.read_eeprom()


def test_bytes_stream_write():
    stream = Stream(b'\xff' * 256, flags='w')

    assert stream.write_eeprom(b'\x00' * 20, offset=0x10) == 20

    assert stream.getvalue() == b'\xff' * 0x10 + b'\x00' * 20 + b'\xff' * (256 - 0x10 - 20)


def test_stream_read_only():
    stream = Stream(b'\xff' * 256)

    with pytest.raises(EepromIOException):
        stream.write_eeprom(b'\x00')


def test_file_stream(eeprom_file):
    with Stream(str(eeprom_file), flags='w') as stream:
        stream.write_eeprom(b'\x01' * 16, offset=16)

    data = eeprom_file.read_bytes()

    assert len(data) == 256
    assert data[16:32] == b'\x01' * 16
    assert data[:16] == b'\xff' * 16

    with Stream(eeprom_file) as stream:
        assert stream.read_eeprom() == data


def test_file_stream_missing(tmp_path):
    with pytest.raises(EepromIOException):
        Stream(str(tmp_path / 'missing'))


def test_wrong_stream():
    with pytest.raises(ValueError):
        Stream(3.14)


def test_driver_path():
    assert driver_path() == '/sys/bus/i2c/devices/3-0050/eeprom'
    assert driver_path(1, 0x51, root='/tmp/devices') == '/tmp/devices/1-0051/eeprom'


def test_list_devices(tmp_path):
    for name in ('3-0050', '1-0051', 'foo'):
        (tmp_path / name).mkdir()
        (tmp_path / name / 'eeprom').write_bytes(b'')
    (tmp_path / '3-0052').mkdir()

    assert list(list_devices(root=str(tmp_path))) == [(1, 0x51), (3, 0x50)]
    assert list(list_devices(3, root=str(tmp_path))) == [(3, 0x50)]
    assert list(list_devices(7, root=str(tmp_path))) == []
