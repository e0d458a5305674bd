"""Error Hierarchy - typed, categorized exceptions for every ormtable failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Every error is a DataAccessError; callers can catch the single base kind
    - The underlying cause is chained (raise ... from exc) and exposed as .cause
    - Messages name enough context (table, class, fields, column) to diagnose without re-running

Design Decisions:
    - Single hierarchy with DataAccessError base, one subclass per failure mode
    - Column lookup errors are also ValueError: they are caller-input errors
    - ErrorContext as dataclass: structured fields for logging without coupling to a formatter
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


class ErrorSeverity(str, Enum):
    """Error severity for observability."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories."""
    SCHEMA = "schema"
    CONFIGURATION = "configuration"
    VALIDATION = "validation"
    INSTANTIATION = "instantiation"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Structured context attached to every error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    table_name: str | None = None
    data_class: str | None = None
    column_name: str | None = None
    field_name: str | None = None
    debug_info: dict[str, Any] | None = None


class DataAccessError(Exception):
    """Base exception for all ormtable errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.cause = cause

    def to_dict(self) -> dict:
        """Convert to a structured envelope for logs and diagnostics."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "table_name": self.context.table_name,
                    "data_class": self.context.data_class,
                    "column_name": self.context.column_name,
                    "field_name": self.context.field_name,
                },
                "cause": repr(self.cause) if self.cause is not None else None,
            }
        }


# ─── Construction-time Errors ───────────────────────────────────

class SchemaConfigError(DataAccessError):
    """Mapped class has an invalid schema (e.g. more than one identity field)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "SCHEMA_CONFIG_ERROR", ErrorCategory.SCHEMA,
            ErrorSeverity.CRITICAL, context,
        )


class TableConfigError(DataAccessError):
    """Table configuration could not be resolved for a class."""
    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(
            message, "TABLE_CONFIG_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, cause,
        )


# ─── Query-time Errors ──────────────────────────────────────────

class UnknownColumnError(DataAccessError, ValueError):
    """Column name matches neither a column nor a field of the table."""
    def __init__(self, column_name: str, table_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.column_name = column_name
        ctx.table_name = table_name
        super().__init__(
            f"Unknown column name '{column_name}' in table {table_name}",
            "UNKNOWN_COLUMN", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx,
        )
        self.column_name = column_name
        self.table_name = table_name


class MisusedColumnNameError(DataAccessError, ValueError):
    """A field name was passed where a column name was expected."""
    def __init__(
        self,
        field_name: str,
        column_name: str,
        table_name: str,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field_name = field_name
        ctx.column_name = column_name
        ctx.table_name = table_name
        super().__init__(
            f"You should use columnName '{column_name}' for table {table_name} "
            f"instead of fieldName '{field_name}'",
            "FIELD_NAME_USED_AS_COLUMN", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx,
        )
        self.field_name = field_name
        self.column_name = column_name
        self.table_name = table_name


# ─── Object Lifecycle Errors ────────────────────────────────────

class InstantiationError(DataAccessError):
    """Constructing a new instance of a mapped class failed."""
    def __init__(
        self,
        class_name: str,
        cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.data_class = class_name
        super().__init__(
            f"Could not create object for {class_name}",
            "INSTANTIATION_ERROR", ErrorCategory.INSTANTIATION,
            ErrorSeverity.ERROR, ctx, cause,
        )


class DescribeError(DataAccessError):
    """A field value could not be extracted while rendering an object."""
    def __init__(
        self,
        field_description: str,
        cause: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Could not generate toString of field {field_description}",
            "DESCRIBE_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.ERROR, context, cause,
        )


class DaoNotSetError(DataAccessError):
    """A dao-enabled object was used before its dao was attached."""
    def __init__(self, class_name: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.data_class = class_name
        super().__init__(
            f"Dao has not been set on {class_name}",
            "DAO_NOT_SET", ErrorCategory.CONFIGURATION,
            ErrorSeverity.ERROR, ctx,
        )
