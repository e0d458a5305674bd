"""Table Descriptor - validated, cached metadata for one mapped class.

Invariants:
    - At most one identity field (id, generated id, or sequence id); a second is a
      SchemaConfigError raised at construction, naming the class and both fields
    - field_types keeps the order supplied by the configuration
    - Every field belongs to data_class or one of its bases
    - Immutable after construction; the column index is the only lazily built state
    - create_object never returns a partially initialized object: it returns or raises

Design Decisions:
    - Column index is built into a local dict and published once as a read-only mapping;
      concurrent first lookups may build it twice but never observe a partial index
    - Dao injection is a structural check against the DaoEnabled protocol
    - A table with no identity field is valid but not updatable (join tables, append-only logs)
"""

import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping

from ormtable.core.errors import (
    DataAccessError,
    DescribeError,
    ErrorContext,
    InstantiationError,
    MisusedColumnNameError,
    SchemaConfigError,
    TableConfigError,
    UnknownColumnError,
)
from ormtable.core.field_type import FieldType
from ormtable.core.protocols import ConnectionSource, Dao, DaoEnabled, DatabaseType
from ormtable.table.table_config import DatabaseTableConfig

logger = logging.getLogger(__name__)


class TableInfo:
    """Information about a database table: name, class, constructor and fields."""

    def __init__(
        self,
        database_type: DatabaseType,
        dao: Dao | None,
        table_config: DatabaseTableConfig,
    ):
        self._dao = dao
        self._data_class = table_config.data_class
        self._table_name = table_config.table_name
        self._field_types = tuple(table_config.get_field_types(database_type))
        self._column_index: Mapping[str, FieldType] | None = None

        id_field = None
        foreign_auto_create = False
        for field_type in self._field_types:
            if not issubclass(self._data_class, field_type.owner):
                raise self._schema_error(
                    f"Field {field_type} does not belong to class {self._data_class.__name__}"
                )
            if field_type.is_identity:
                if id_field is not None:
                    raise self._schema_error(
                        f"More than 1 idField configured for class "
                        f"{self._data_class.__name__} ({id_field},{field_type})"
                    )
                id_field = field_type
            if field_type.is_foreign_auto_create:
                foreign_auto_create = True

        self._id_field = id_field
        self._constructor = table_config.get_constructor()
        self._foreign_auto_create = foreign_auto_create
        logger.debug(
            f"Table {self._table_name} registered for {self._data_class.__name__}",
            extra={
                "table_name": self._table_name,
                "data_class": self._data_class.__name__,
                "field_count": len(self._field_types),
            },
        )

    @classmethod
    def from_class(
        cls, connection_source: ConnectionSource, dao: Dao | None, data_class: type,
    ) -> "TableInfo":
        """Resolve the configuration for data_class and build its descriptor."""
        try:
            table_config = DatabaseTableConfig.from_class(connection_source, data_class)
        except DataAccessError:
            raise
        except Exception as e:
            raise TableConfigError(
                f"Could not resolve table configuration for class {data_class.__name__}",
                ErrorContext(data_class=data_class.__name__),
                cause=e,
            ) from e
        return cls(connection_source.database_type, dao, table_config)

    # ─── Accessors ───────────────────────────────────────────────

    @property
    def data_class(self) -> type:
        return self._data_class

    @property
    def table_name(self) -> str:
        return self._table_name

    @property
    def field_types(self) -> tuple[FieldType, ...]:
        return self._field_types

    @property
    def id_field(self) -> FieldType | None:
        """The identity field, or None for tables without one."""
        return self._id_field

    @property
    def constructor(self) -> Callable[[], Any]:
        return self._constructor

    @property
    def dao(self) -> Dao | None:
        return self._dao

    # ─── Column resolution ───────────────────────────────────────

    def get_field_type_by_column_name(self, column_name: str) -> FieldType:
        """Return the FieldType for column_name.

        A field name passed by mistake raises MisusedColumnNameError carrying the
        column name to use instead; anything else unknown raises UnknownColumnError.
        """
        index = self._column_index
        if index is None:
            index = MappingProxyType(
                {field_type.column_name: field_type for field_type in self._field_types}
            )
            self._column_index = index
        field_type = index.get(column_name)
        if field_type is not None:
            return field_type
        # a field name passed where a column name was expected
        for candidate in self._field_types:
            if candidate.field_name == column_name:
                raise MisusedColumnNameError(
                    column_name, candidate.column_name, self._table_name,
                    ErrorContext(data_class=self._data_class.__name__),
                )
        raise UnknownColumnError(
            column_name, self._table_name,
            ErrorContext(data_class=self._data_class.__name__),
        )

    def has_column_name(self, column_name: str) -> bool:
        return any(field_type.column_name == column_name for field_type in self._field_types)

    # ─── Object lifecycle ────────────────────────────────────────

    def create_object(self) -> Any:
        """Create a new instance using the configured constructor and dao."""
        return TableInfo.create_object_with(self._constructor, self._dao, self._data_class)

    @staticmethod
    def create_object_with(
        constructor: Callable[[], Any],
        dao: Dao | None,
        data_class: type | None = None,
    ) -> Any:
        """Create an instance from any constructor, injecting dao when asked for.

        Failures name data_class when given, otherwise the constructor itself.
        """
        try:
            instance = constructor()
            if isinstance(instance, DaoEnabled):
                instance.set_dao(dao)
            return instance
        except Exception as e:
            name = data_class.__name__ if data_class is not None else _constructor_name(constructor)
            raise InstantiationError(name, cause=e) from e

    # ─── Diagnostics ─────────────────────────────────────────────

    def object_to_string(self, obj: Any) -> str:
        """Render class name then column=value for every field, in field order."""
        parts = [type(obj).__name__]
        for field_type in self._field_types:
            try:
                value = field_type.extract_value(obj)
            except Exception as e:
                raise DescribeError(
                    str(field_type),
                    cause=e,
                    context=ErrorContext(
                        table_name=self._table_name,
                        data_class=self._data_class.__name__,
                        column_name=field_type.column_name,
                        field_name=field_type.field_name,
                    ),
                ) from e
            parts.append(f"{field_type.column_name}={value}")
        return " ".join(parts)

    # ─── Predicates ──────────────────────────────────────────────

    def is_updatable(self) -> bool:
        """An id field and at least one other field are needed to update by id."""
        return self._id_field is not None and len(self._field_types) > 1

    def is_foreign_auto_create(self) -> bool:
        return self._foreign_auto_create

    def _schema_error(self, message: str) -> SchemaConfigError:
        logger.error(
            message,
            extra={
                "table_name": self._table_name,
                "data_class": self._data_class.__name__,
                "error_code": "SCHEMA_CONFIG_ERROR",
            },
        )
        return SchemaConfigError(
            message,
            ErrorContext(table_name=self._table_name, data_class=self._data_class.__name__),
        )

    def __repr__(self) -> str:
        id_name = self._id_field.column_name if self._id_field else None
        return (
            f"TableInfo({self._data_class.__name__}, table={self._table_name!r}, "
            f"fields={len(self._field_types)}, id={id_name!r})"
        )


def _constructor_name(constructor: Callable[[], Any]) -> str:
    name = getattr(constructor, "__qualname__", None) or getattr(constructor, "__name__", None)
    if name is None:
        func = getattr(constructor, "func", None)  # functools.partial
        name = getattr(func, "__qualname__", None)
    return name or repr(constructor)
