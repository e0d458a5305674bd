"""Boundary Protocols - contracts between the metadata layer and its collaborators.

Invariants:
    - Core NEVER imports from db/ or infrastructure/; implementations are injected
    - DatabaseType is opaque here: only entity-name normalisation is consumed
    - Dao is the external CRUD layer; this package only hands it to objects that ask

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - DaoEnabled is runtime_checkable: instantiation tests it with isinstance()
"""

from typing import Any, Protocol, runtime_checkable


class DatabaseType(Protocol):
    """Dialect handle used while resolving field descriptors."""
    database_name: str
    upcase_entity_names: bool

    def normalize_entity_name(self, name: str) -> str: ...


class ConnectionSource(Protocol):
    """Source of database connections; only its dialect is consulted."""

    @property
    def database_type(self) -> DatabaseType: ...


class Dao(Protocol):
    """Contract for the data-access object that performs CRUD for one class."""
    def create(self, obj: Any) -> int: ...
    def refresh(self, obj: Any) -> int: ...
    def update(self, obj: Any) -> int: ...
    def update_id(self, obj: Any, new_id: Any) -> int: ...
    def delete(self, obj: Any) -> int: ...
    def extract_id(self, obj: Any) -> Any: ...
    def object_to_string(self, obj: Any) -> str: ...


@runtime_checkable
class DaoEnabled(Protocol):
    """Objects that want a reference to their owning dao after construction."""
    def set_dao(self, dao: Any) -> None: ...
