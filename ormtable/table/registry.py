"""Table Registry - one TableInfo per mapped class per connection source.

Invariants:
    - A class is resolved and validated once; later lookups return the same TableInfo
    - get() never builds: an unregistered class is a TableConfigError
    - A registered class keeps its first dao; a different dao is a TableConfigError
    - Registration happens during single-threaded application startup
"""

import logging

from ormtable.core.errors import ErrorContext, TableConfigError
from ormtable.core.protocols import ConnectionSource, Dao
from ormtable.table.table_info import TableInfo

logger = logging.getLogger(__name__)


class TableRegistry:
    """Caches table descriptors for a connection source."""

    def __init__(self, connection_source: ConnectionSource):
        self.connection_source = connection_source
        self._tables: dict[type, TableInfo] = {}

    def register(self, data_class: type, dao: Dao | None = None) -> TableInfo:
        """Return the descriptor for data_class, building it on first registration.

        Re-registering with a different dao raises TableConfigError; passing no dao
        returns the cached descriptor unchanged.
        """
        table_info = self._tables.get(data_class)
        if table_info is not None and dao is not None and dao is not table_info.dao:
            message = (
                f"Class {data_class.__name__} is already registered as table "
                f"{table_info.table_name} with a different dao"
            )
            logger.error(
                message,
                extra={
                    "table_name": table_info.table_name,
                    "data_class": data_class.__name__,
                    "error_code": "TABLE_CONFIG_ERROR",
                },
            )
            raise TableConfigError(
                message,
                ErrorContext(table_name=table_info.table_name, data_class=data_class.__name__),
            )
        if table_info is None:
            table_info = TableInfo.from_class(self.connection_source, dao, data_class)
            self._tables[data_class] = table_info
            logger.info(
                f"Registered {data_class.__name__} as table {table_info.table_name}",
                extra={"table_name": table_info.table_name, "data_class": data_class.__name__},
            )
        return table_info

    def get(self, data_class: type) -> TableInfo:
        table_info = self._tables.get(data_class)
        if table_info is None:
            raise TableConfigError(
                f"Class {data_class.__name__} has not been registered",
                ErrorContext(data_class=data_class.__name__),
            )
        return table_info

    def clear(self) -> None:
        self._tables.clear()

    def __contains__(self, data_class: object) -> bool:
        return data_class in self._tables

    def __len__(self) -> int:
        return len(self._tables)
