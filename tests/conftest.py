import pytest

from eepromutil.schemas import EEPROM_SIZE, LAYOUT_CHECK_BYTE


@pytest.fixture
def blank_data():
    '''The contents of an erased EEPROM (detected as layout version 1).'''
    return b'\xff' * EEPROM_SIZE


@pytest.fixture
def make_data():
    '''Build erased contents with the given value in the layout check byte.'''
    def _make(check):
        data = bytearray(b'\xff' * EEPROM_SIZE)
        data[LAYOUT_CHECK_BYTE] = check
        return bytes(data)

    return _make


@pytest.fixture
def eeprom_file(tmp_path, blank_data):
    '''A file mimicking the one exported by the eeprom driver.'''
    path = tmp_path / 'eeprom'
    path.write_bytes(blank_data)

    return path
