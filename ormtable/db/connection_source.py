"""Connection Source - SQLAlchemy engine and dialect adapters for the metadata layer.

Invariants:
    - Only the engine's dialect is consulted; no connection is ever opened here
    - create_engine is lazy, so building a connection source performs no I/O
    - Entity names are upper-cased only for dialects that fold unquoted names to upper case

Design Decisions:
    - SqlAlchemyDatabaseType wraps a Dialect instead of re-describing dialects by hand
"""

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import Dialect

from ormtable.config import get_settings

logger = logging.getLogger(__name__)

# Dialects whose unquoted identifiers are stored upper case.
_UPCASE_DIALECTS = frozenset({"oracle"})


class SqlAlchemyDatabaseType:
    """DatabaseType backed by a SQLAlchemy Dialect."""

    def __init__(self, dialect: Dialect):
        self.dialect = dialect
        self.database_name: str = dialect.name
        self.upcase_entity_names: bool = dialect.name in _UPCASE_DIALECTS

    def normalize_entity_name(self, name: str) -> str:
        if self.upcase_entity_names:
            return name.upper()
        return name

    def __repr__(self) -> str:
        return f"SqlAlchemyDatabaseType({self.database_name!r})"


class EngineConnectionSource:
    """ConnectionSource backed by a SQLAlchemy Engine."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._database_type = SqlAlchemyDatabaseType(engine.dialect)

    @property
    def database_type(self) -> SqlAlchemyDatabaseType:
        return self._database_type

    def __repr__(self) -> str:
        return f"EngineConnectionSource({self.engine.url.render_as_string(hide_password=True)!r})"


def create_connection_source(database_url: str | None = None) -> EngineConnectionSource:
    """Create a connection source for the given URL (defaults to settings)."""
    settings = get_settings()
    url = database_url or settings.database_url
    engine = create_engine(url, echo=settings.database_echo)
    logger.debug(f"Connection source created for dialect {engine.dialect.name}")
    return EngineConnectionSource(engine)
