"""Domain Types - enums shared by field descriptors and table descriptors.

Invariants:
    - A field has exactly one IdRole; NONE means the field is not an identity field
    - All valid states encoded as Enums, no raw string matching
"""

from enum import Enum


class IdRole(str, Enum):
    """Identity role of a persistent field."""
    NONE = "none"
    ID = "id"
    GENERATED_ID = "generated_id"
    GENERATED_ID_SEQUENCE = "generated_id_sequence"

    @property
    def is_identity(self) -> bool:
        return self is not IdRole.NONE
