"""Table Configuration - resolves a class into a table name, field configs and constructor.

Invariants:
    - table_name is non-empty and field_configs has at least one entry
    - Field order is the declaration order of the class (dataclass fields or table columns)
    - The constructor is callable with no arguments, checked once at configuration time
    - Field types are resolved at most once per (dialect name, name case) and never re-derived

Design Decisions:
    - SQLAlchemy declarative classes read their mapper; dataclasses read field(metadata=...)
    - Per-field options pass through FieldConfig, so both sources share one validator
"""

import dataclasses
import inspect
import logging
from typing import Any, Callable

from pydantic import ValidationError
from sqlalchemy import Column, Sequence, inspect as sa_inspect
from sqlalchemy.orm import Mapper

from ormtable.core.errors import ErrorContext, TableConfigError
from ormtable.core.field_type import FieldConfig, FieldType
from ormtable.core.protocols import ConnectionSource, DatabaseType

logger = logging.getLogger(__name__)

_REQUIRED_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
    inspect.Parameter.KEYWORD_ONLY,
)


class DatabaseTableConfig:
    """Table configuration for one class, before it is resolved against a dialect."""

    def __init__(
        self,
        data_class: type,
        table_name: str,
        field_configs: list[FieldConfig],
        constructor: Callable[[], Any] | None = None,
    ):
        context = ErrorContext(table_name=table_name, data_class=data_class.__name__)
        if not table_name or not table_name.strip():
            raise TableConfigError(
                f"Table name for class {data_class.__name__} cannot be empty", context,
            )
        if not field_configs:
            raise TableConfigError(
                f"No persisted fields configured for class {data_class.__name__}", context,
            )
        self.data_class = data_class
        self.table_name = table_name
        self.field_configs = tuple(field_configs)
        self.constructor = constructor or find_no_arg_constructor(data_class)
        self._field_types: dict[tuple[str, bool], tuple[FieldType, ...]] = {}

    def get_field_types(self, database_type: DatabaseType) -> tuple[FieldType, ...]:
        """Resolve field configs against a dialect, in configuration order."""
        key = (database_type.database_name, bool(database_type.upcase_entity_names))
        cached = self._field_types.get(key)
        if cached is None:
            cached = tuple(
                FieldType.from_config(self.data_class, config, database_type)
                for config in self.field_configs
            )
            self._field_types[key] = cached
        return cached

    def get_constructor(self) -> Callable[[], Any]:
        return self.constructor

    @classmethod
    def from_class(
        cls, connection_source: ConnectionSource, data_class: type,
    ) -> "DatabaseTableConfig":
        """Build a configuration from a SQLAlchemy mapped class or a dataclass."""
        mapper = sa_inspect(data_class, raiseerr=False)
        if isinstance(mapper, Mapper):
            field_configs = _field_configs_from_mapper(mapper)
        elif dataclasses.is_dataclass(data_class):
            field_configs = _field_configs_from_dataclass(data_class)
        else:
            raise TableConfigError(
                f"Class {data_class.__name__} is neither a SQLAlchemy mapped class nor a dataclass",
                ErrorContext(data_class=data_class.__name__),
            )
        config = cls(data_class, extract_table_name(data_class), field_configs)
        config.get_field_types(connection_source.database_type)
        return config

    def __repr__(self) -> str:
        return (
            f"DatabaseTableConfig({self.data_class.__name__}, "
            f"table={self.table_name!r}, fields={len(self.field_configs)})"
        )


def extract_table_name(data_class: type) -> str:
    """__tablename__, then the mapped table, then the lower-cased class name."""
    name = getattr(data_class, "__tablename__", None)
    if name:
        return name
    mapper = sa_inspect(data_class, raiseerr=False)
    if isinstance(mapper, Mapper) and mapper.local_table is not None:
        return mapper.local_table.name
    return data_class.__name__.lower()


def find_no_arg_constructor(data_class: type) -> Callable[[], Any]:
    """Return the class itself if it can be called without arguments."""
    try:
        signature = inspect.signature(data_class)
    except (TypeError, ValueError):
        # builtins and C extensions; failures surface at instantiation
        return data_class
    required = [
        name for name, param in signature.parameters.items()
        if param.kind in _REQUIRED_KINDS and param.default is inspect.Parameter.empty
    ]
    if required:
        raise TableConfigError(
            f"Can't find a no-arg constructor for class {data_class.__name__} "
            f"(required arguments: {', '.join(required)})",
            ErrorContext(data_class=data_class.__name__),
        )
    return data_class


def _field_configs_from_mapper(mapper: Mapper) -> list[FieldConfig]:
    table = mapper.local_table
    configs = []
    for prop in mapper.column_attrs:
        column = prop.columns[0]
        if not isinstance(column, Column):
            continue  # column_property() expressions are not persisted
        options: dict[str, Any] = {
            "field_name": prop.key,
            "column_name": column.name,
            "foreign": bool(column.foreign_keys),
            "foreign_auto_create": bool(column.info.get("foreign_auto_create", False)),
            "nullable": bool(column.nullable),
        }
        if column.primary_key:
            if isinstance(column.default, Sequence):
                options["generated_id_sequence"] = column.default.name
            elif getattr(table, "autoincrement_column", None) is column:
                options["generated_id"] = True
            else:
                options["id"] = True
        configs.append(_validate_field_options(mapper.class_, options))
    return configs


def _field_configs_from_dataclass(data_class: type) -> list[FieldConfig]:
    known = set(FieldConfig.model_fields)
    configs = []
    for f in dataclasses.fields(data_class):
        if f.metadata.get("persisted", True) is False:
            continue
        options = {k: v for k, v in f.metadata.items() if k in known}
        options["field_name"] = f.name
        configs.append(_validate_field_options(data_class, options))
    return configs


def _validate_field_options(data_class: type, options: dict[str, Any]) -> FieldConfig:
    try:
        return FieldConfig.model_validate(options)
    except ValidationError as e:
        logger.error(
            f"Invalid field options on {data_class.__name__}.{options.get('field_name')}",
            extra={
                "data_class": data_class.__name__,
                "field_name": options.get("field_name"),
                "error_code": "TABLE_CONFIG_ERROR",
            },
        )
        raise TableConfigError(
            f"Invalid configuration for field {data_class.__name__}.{options.get('field_name')}: {e}",
            ErrorContext(data_class=data_class.__name__, field_name=options.get("field_name")),
            cause=e,
        ) from e
