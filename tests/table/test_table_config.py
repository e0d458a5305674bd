"""Table Configuration - tests for resolving classes into table configurations.

Tests cover:
    - SQLAlchemy mapped classes: table name, column order, id roles, sequences, foreign keys
    - Dataclasses: metadata options, skipped fields, default table name
    - No-arg constructor check
    - Unsupported classes and invalid field options raise TableConfigError
    - Field types cached separately per dialect name and name case
"""

from dataclasses import dataclass, field

import pytest

from ormtable.core.domain_types import IdRole
from ormtable.core.errors import TableConfigError
from ormtable.core.field_type import FieldConfig
from ormtable.table.table_config import (
    DatabaseTableConfig,
    extract_table_name,
    find_no_arg_constructor,
)
from ormtable.table.table_info import TableInfo
from tests.fakes import (
    Account, AuditEntry, FakeDatabaseType, Invoice, Member, NeedsArgs, Note, Ticket,
)


# ─── DatabaseTableConfig ─────────────────────────────────────────

def test_empty_table_name_is_rejected():
    with pytest.raises(TableConfigError, match="cannot be empty"):
        DatabaseTableConfig(AuditEntry, "  ", [FieldConfig(field_name="message")])


def test_no_fields_is_rejected():
    with pytest.raises(TableConfigError, match="No persisted fields"):
        DatabaseTableConfig(AuditEntry, "audit", [])


def test_field_types_resolved_once_per_dialect():
    config = DatabaseTableConfig(AuditEntry, "audit", [FieldConfig(field_name="message")])
    lower = FakeDatabaseType("lower")
    upper = FakeDatabaseType("upper", upcase=True)
    assert config.get_field_types(lower) is config.get_field_types(lower)
    assert config.get_field_types(upper)[0].column_name == "MESSAGE"
    assert config.get_field_types(lower)[0].column_name == "message"


def test_same_dialect_name_with_different_case_resolves_separately():
    config = DatabaseTableConfig(
        AuditEntry, "audit",
        [FieldConfig(field_name="message", id=True), FieldConfig(field_name="level")],
    )
    plain = TableInfo(FakeDatabaseType("db"), None, config)
    upper = TableInfo(FakeDatabaseType("db", upcase=True), None, config)
    assert plain.id_field.column_name == "message"
    assert upper.id_field.column_name == "MESSAGE"
    assert upper.has_column_name("LEVEL")
    assert not upper.has_column_name("level")


def test_explicit_constructor_is_kept():
    def factory():
        return AuditEntry(message="preset")

    config = DatabaseTableConfig(
        AuditEntry, "audit", [FieldConfig(field_name="message")], constructor=factory,
    )
    assert config.get_constructor() is factory


def test_find_no_arg_constructor_accepts_defaults():
    assert find_no_arg_constructor(Member) is Member


def test_find_no_arg_constructor_rejects_required_args():
    with pytest.raises(TableConfigError, match="no-arg constructor.*name"):
        find_no_arg_constructor(NeedsArgs)


def test_extract_table_name():
    assert extract_table_name(Account) == "accounts"
    assert extract_table_name(Note) == "notes"
    assert extract_table_name(AuditEntry) == "auditentry"


# ─── SQLAlchemy mapped classes ──────────────────────────────────

def test_mapped_class_columns_and_generated_id(fake_connection_source, database_type):
    config = DatabaseTableConfig.from_class(fake_connection_source, Account)
    fields = config.get_field_types(database_type)
    assert config.table_name == "accounts"
    assert [f.column_name for f in fields] == ["id", "name"]
    assert fields[0].id_role is IdRole.GENERATED_ID
    assert fields[1].id_role is IdRole.NONE
    assert fields[1].nullable is False


def test_mapped_class_sequence_foreign_and_column_alias(fake_connection_source, database_type):
    config = DatabaseTableConfig.from_class(fake_connection_source, Invoice)
    fields = config.get_field_types(database_type)
    assert [(f.field_name, f.column_name) for f in fields] == [
        ("id", "id"), ("account_id", "account_id"), ("memo", "memo_text"),
    ]
    assert fields[0].is_generated_id_sequence
    assert fields[0].sequence_name == "invoice_seq"
    assert fields[1].foreign
    assert fields[1].is_foreign_auto_create
    assert fields[2].nullable


def test_mapped_class_with_string_key_uses_plain_id(fake_connection_source, database_type):
    config = DatabaseTableConfig.from_class(fake_connection_source, Ticket)
    assert config.get_field_types(database_type)[0].is_id


# ─── Dataclasses ────────────────────────────────────────────────

def test_dataclass_metadata_options(fake_connection_source, database_type):
    config = DatabaseTableConfig.from_class(fake_connection_source, Note)
    fields = config.get_field_types(database_type)
    assert config.table_name == "notes"
    assert [f.field_name for f in fields] == ["id", "body"]
    assert fields[0].is_generated_id


def test_dataclass_column_name_option(fake_connection_source, database_type):
    config = DatabaseTableConfig.from_class(fake_connection_source, Member)
    assert [f.column_name for f in config.get_field_types(database_type)] == ["user_name", "age"]


def test_dataclass_without_persisted_fields_is_rejected(fake_connection_source):
    @dataclass
    class Scratch:
        value: int = field(default=0, metadata={"persisted": False})

    with pytest.raises(TableConfigError, match="No persisted fields"):
        DatabaseTableConfig.from_class(fake_connection_source, Scratch)


def test_invalid_field_options_are_wrapped(fake_connection_source):
    @dataclass
    class Broken:
        parent_id: int = field(default=0, metadata={"foreign_auto_create": True})

    with pytest.raises(TableConfigError) as exc_info:
        DatabaseTableConfig.from_class(fake_connection_source, Broken)
    assert "Broken.parent_id" in str(exc_info.value)
    assert exc_info.value.cause is not None


def test_plain_class_is_rejected(fake_connection_source):
    class Plain:
        pass

    with pytest.raises(TableConfigError, match="neither a SQLAlchemy mapped class nor a dataclass"):
        DatabaseTableConfig.from_class(fake_connection_source, Plain)
