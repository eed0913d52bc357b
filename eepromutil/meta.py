from typing import NamedTuple

from .enum import FieldType


class FieldDescriptor(NamedTuple):
    """Static description of a field: it never changes once defined in a schema.

    The name is the one shown to the user, the key is the short identifier
    used to refer to the field from the command line."""
    name: str
    key: str
    size: int
    type: FieldType

    def is_named(self, name: str) -> bool:
        return name in (self.key, self.name)
