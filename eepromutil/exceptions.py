class EepromException(Exception):
    '''Base class to extend in order to throw exception in eepromutil.

    The message passed as argument must be a complete diagnostic since
    it's what is shown to the user.
    '''

    def __init__(self, message):
        self.message = message
        super().__init__(message)


class FieldException(EepromException):
    '''Exception related to the value passed to a single field.'''

    reason = 'Invalid value'

    def __init__(self, field, value, reason=None):
        self.field = field
        self.value = value
        self.reason = reason or self.reason
        super().__init__(f'Invalid value "{value}" for field "{field}" - {self.reason}')


class SyntaxException(FieldException):
    reason = 'Syntax error'


class ValueTooLongException(SyntaxException):
    reason = 'Value is too long'


class ValueOutOfRangeException(FieldException):
    reason = 'Value out of range'


class InvalidDateException(FieldException):
    reason = 'Invalid date'


class ReadOnlyFieldException(FieldException):
    reason = 'Field is read only'


class UnknownFieldException(EepromException):

    def __init__(self, field):
        self.field = field
        super().__init__(f'Field "{field}" not found')


class FieldsUnavailableException(EepromException):

    def __init__(self):
        super().__init__("Layout error: Can't operate on fields. The layout is unknown.")


def offset_to_string(start, end):
    '''Format an offset or an inclusive range like '0x0a' or '0x0a-0x10'.'''
    if start == end:
        return f"'0x{start:02x}'"

    return f"'0x{start:02x}-0x{end:02x}'"


class InvalidOffsetException(EepromException):

    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(f'Invalid offset {offset_to_string(start, end)}')


class InvalidValueException(EepromException):

    def __init__(self, value, start, end):
        self.value = value
        self.start = start
        self.end = end
        super().__init__(f"Invalid value '0x{value:02x}' at offset {offset_to_string(start, end)}")


class InvalidBufferSizeException(EepromException):

    def __init__(self, size, expected):
        self.size = size
        self.expected = expected
        super().__init__(f'Invalid buffer size {size} (at least {expected} bytes are needed)')


class ChangeSyntaxException(EepromException):
    '''A change passed by the user can't be parsed.'''
    pass


class EepromIOException(EepromException):
    '''It's not possible to access the device.'''
    pass
