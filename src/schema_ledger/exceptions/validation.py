"""Snapshot validation exceptions."""

from typing import List, Optional

from .base import SchemaLedgerError


class ValidationError(SchemaLedgerError):
    """Base class for snapshot validation errors."""

    pass


class SchemaNamingError(ValidationError):
    """Raised when a snapshot carries module or base type names that are not portable.

    The message lists every offending name so the schema owner can fix them
    in one pass.
    """

    def __init__(
        self,
        module_names: Optional[List[str]] = None,
        base_type_names: Optional[List[str]] = None,
    ):
        self.module_names = list(module_names or [])
        self.base_type_names = list(base_type_names or [])

        lines = ["The data source has names that must be changed by its owner:"]
        lines.extend(f"  module name {name!r} is not a portable identifier" for name in self.module_names)
        lines.extend(
            f"  base type name {name!r} is not a portable identifier"
            for name in self.base_type_names
        )
        super().__init__(
            "\n".join(lines),
            details={
                "modules": str(len(self.module_names)),
                "base_types": str(len(self.base_type_names)),
            },
        )
