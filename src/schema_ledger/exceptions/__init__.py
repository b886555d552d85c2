"""Exception hierarchy for Schema Ledger."""

from .base import SchemaLedgerError
from .config import ConfigurationError, InvalidConfigError
from .storage import (
    InvalidKeyError,
    ProjectNotFoundError,
    RegistryError,
    StoreError,
    StoreWriteError,
)
from .validation import SchemaNamingError, ValidationError

__all__ = [
    "SchemaLedgerError",
    "ConfigurationError",
    "InvalidConfigError",
    "StoreError",
    "StoreWriteError",
    "InvalidKeyError",
    "RegistryError",
    "ProjectNotFoundError",
    "ValidationError",
    "SchemaNamingError",
]
