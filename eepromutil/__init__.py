"""
# eepromutil: EEPROM contents for humans.

The EEPROM of a board contains a 256 bytes record describing it (revision,
MAC addresses, production date, serial number, product name and options).
The record has been defined in different versions during the years, so the
same bytes can mean different things.

The main operations are

 1. layout: detect (or be told) the version of the record and split the
    data in typed fields (core.Layout).

 2. print: represent each field as text, in a way that the same text can be
    used to update the field.

 3. update/clear: modify a batch of fields, or of byte ranges, validating the
    values. A batch stops at the first invalid change but what was already
    applied stays applied.

Reading and writing the device is done through the file exported by the
kernel eeprom driver (streams.Stream).
"""

__version__ = '0.0.1'
