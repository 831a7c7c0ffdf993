"""micro_orm - a small data mapper between record instances and table rows."""

from __future__ import annotations

from micro_orm.core.connection import ConnectionConfig, ConnectionManager
from micro_orm.core.driver import Driver
from micro_orm.core.enums import DatabaseBackend
from micro_orm.core.exceptions import (
    AdapterError,
    BeforeHookInvalidError,
    ConnectionError,  # noqa: A004
    ExecutionError,
    FieldMappingInvalidError,
    InvalidFieldsError,
    MapperCompilationError,
    MappingError,
    MicroOrmError,
    MissingFilterError,
    ParameterBindingError,
    PoolError,
    StatementError,
    StatementExecutionError,
    TransactionError,
    TransactionStateError,
    UnusedParameterWarning,
)
from micro_orm.core.helpers import DbHelper
from micro_orm.core.transaction import TransactionManager
from micro_orm.mapping import FieldMapping, Mapper, default_mask, do_not_update, mapper
from micro_orm.query import FilterExpression, Query, Updatable
from micro_orm.repository import Repository, RepositoryHooks

__all__ = [
    # Connection
    "ConnectionConfig",
    "ConnectionManager",
    # Driver
    "Driver",
    "DbHelper",
    "TransactionManager",
    # Mapping
    "Mapper",
    "FieldMapping",
    "mapper",
    "default_mask",
    "do_not_update",
    # Statements
    "FilterExpression",
    "Query",
    "Updatable",
    # Repository
    "Repository",
    "RepositoryHooks",
    # Enums
    "DatabaseBackend",
    # Exceptions
    "MicroOrmError",
    "MappingError",
    "FieldMappingInvalidError",
    "BeforeHookInvalidError",
    "MapperCompilationError",
    "StatementError",
    "InvalidFieldsError",
    "MissingFilterError",
    "ParameterBindingError",
    "UnusedParameterWarning",
    "ExecutionError",
    "StatementExecutionError",
    "TransactionError",
    "TransactionStateError",
    "AdapterError",
    "ConnectionError",
    "PoolError",
]
