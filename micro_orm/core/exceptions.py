"""micro_orm exception hierarchy.

Raw driver exceptions are wrapped by the Driver; the Repository never
catches, so every error below reaches the caller unchanged.
"""

from __future__ import annotations


class MicroOrmError(Exception):
    """Base exception for all micro_orm errors."""


# --- Mapping ---


class MappingError(MicroOrmError):
    """Base for mapping errors."""


class FieldMappingInvalidError(MappingError):
    """Raised when a field-map entry names a property the instance does not have."""

    def __init__(self, entity_name: str, property_name: str) -> None:
        self.entity_name = entity_name
        self.property_name = property_name
        super().__init__(
            f"Field map of {entity_name} references unknown property '{property_name}'"
        )


class BeforeHookInvalidError(MappingError):
    """Raised when a before-insert/before-update hook returns an empty or non-mapping value."""

    def __init__(self, hook_name: str, returned: object) -> None:
        self.hook_name = hook_name
        self.returned = returned
        super().__init__(
            f"Invalid {hook_name} hook result: expected a non-empty mapping, "
            f"got {type(returned).__name__}"
        )


class MapperCompilationError(MappingError):
    """Raised when a mapper definition fails validation during build()."""


# --- Statement building ---


class StatementError(MicroOrmError):
    """Base for SQL statement building errors."""


class InvalidFieldsError(StatementError):
    """Raised when an insert or update statement would have no columns."""

    def __init__(self, table: str, action: str) -> None:
        self.table = table
        self.action = action
        super().__init__(f"Cannot build {action} for '{table}': no fields to write")


class MissingFilterError(StatementError):
    """Raised when an update or delete statement has no filter."""

    def __init__(self, table: str, action: str) -> None:
        self.table = table
        self.action = action
        super().__init__(f"Refusing to build {action} for '{table}' without a filter")


class ParameterBindingError(StatementError):
    """Raised when placeholders and bound values do not line up."""

    def __init__(self, filter_text: str, detail: str) -> None:
        self.filter_text = filter_text
        super().__init__(f"Parameter binding error for '{filter_text}': {detail}")


class UnusedParameterWarning(UserWarning):
    """Emitted when a filter binds a value no placeholder refers to."""


# --- Execution ---


class ExecutionError(MicroOrmError):
    """Base for statement execution errors."""


class StatementExecutionError(ExecutionError):
    """Raised when the database rejects a statement.

    The raw driver exception is available as ``__cause__``.
    """

    def __init__(self, sql: str, detail: str) -> None:
        self.sql = sql
        super().__init__(f"Execution failed for '{sql}': {detail}")


# --- Transaction ---


class TransactionError(MicroOrmError):
    """Base for transaction errors."""


class TransactionStateError(TransactionError):
    """Raised on invalid transaction state transitions."""

    def __init__(self, current_state: str, attempted_action: str) -> None:
        self.current_state = current_state
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} transaction in state '{current_state}'")


# --- Adapter ---


class AdapterError(MicroOrmError):
    """Base for adapter errors."""


class ConnectionError(AdapterError):  # noqa: A001
    """Raised on connection failures."""


class PoolError(AdapterError):
    """Raised on connection pool failures."""
