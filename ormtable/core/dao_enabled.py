"""Dao-enabled Base Class - lets a mapped object operate on itself through its dao.

Invariants:
    - The dao is injected by TableInfo.create_object() right after construction
    - Every convenience method raises DaoNotSetError when no dao is attached
    - Methods delegate one-to-one; no persistence logic lives here
"""

from typing import Any

from ormtable.core.errors import DaoNotSetError


class BaseDaoEnabled:
    """Mixin for mapped classes that want a back-reference to their dao."""

    _dao = None

    def set_dao(self, dao: Any) -> None:
        self._dao = dao

    @property
    def dao(self) -> Any:
        return self._dao

    def create(self) -> int:
        return self._require_dao().create(self)

    def refresh(self) -> int:
        return self._require_dao().refresh(self)

    def update(self) -> int:
        return self._require_dao().update(self)

    def update_id(self, new_id: Any) -> int:
        return self._require_dao().update_id(self, new_id)

    def delete(self) -> int:
        return self._require_dao().delete(self)

    def extract_id(self) -> Any:
        return self._require_dao().extract_id(self)

    def object_to_string(self) -> str:
        return self._require_dao().object_to_string(self)

    def _require_dao(self) -> Any:
        if self._dao is None:
            raise DaoNotSetError(type(self).__name__)
        return self._dao
