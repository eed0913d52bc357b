import pytest

from eepromutil.enum import FieldType, LayoutVersion
from eepromutil.schemas import (
    EEPROM_SIZE,
    LAYOUT_CHECK_BYTE,
    SCHEMAS,
    RAW_SCHEMA,
    detect_layout,
    get_schema,
    schema_size,
)


@pytest.mark.parametrize('version', list(SCHEMAS.keys()))
def test_schema_size(version):
    assert schema_size(SCHEMAS[version]) == EEPROM_SIZE


def test_raw_schema():
    assert schema_size(RAW_SCHEMA) == EEPROM_SIZE
    assert len(RAW_SCHEMA) == 1
    assert RAW_SCHEMA[0].type == FieldType.RAW


@pytest.mark.parametrize('check,version', [
    (0xff, LayoutVersion.V1),
    (0x00, LayoutVersion.V1),
    (0x02, LayoutVersion.V2),
    (0x03, LayoutVersion.V3),
    (0x04, LayoutVersion.V4),
    (0x01, LayoutVersion.UNRECOGNIZED),
    (0x05, LayoutVersion.UNRECOGNIZED),
    (0x1f, LayoutVersion.UNRECOGNIZED),
    (0x20, LayoutVersion.LEGACY),
    (0x30, LayoutVersion.LEGACY),
])
def test_detect_layout(make_data, check, version):
    assert detect_layout(make_data(check)) == version


def test_layout_version_byte():
    """In the versioned layouts the check byte is the 'Layout Version' field."""
    for version in (LayoutVersion.V2, LayoutVersion.V3, LayoutVersion.V4):
        offset = 0
        for descriptor in SCHEMAS[version]:
            if descriptor.key == 'layout':
                break
            offset += descriptor.size

        assert offset == LAYOUT_CHECK_BYTE


def test_get_schema():
    assert get_schema(LayoutVersion.V3) is SCHEMAS[LayoutVersion.V3]
    assert get_schema(LayoutVersion.UNRECOGNIZED) is RAW_SCHEMA
    assert get_schema(LayoutVersion.RAW) is RAW_SCHEMA

    with pytest.raises(ValueError):
        get_schema(LayoutVersion.AUTODETECT)


def test_schemas_immutable():
    with pytest.raises(TypeError):
        SCHEMAS[LayoutVersion.V1] = RAW_SCHEMA

    with pytest.raises(AttributeError):
        SCHEMAS[LayoutVersion.V1][0].size = 4
