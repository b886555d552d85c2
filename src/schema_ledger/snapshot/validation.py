"""Naming policy for fetched snapshots.

Module and base type names end up as identifiers in generated code, so they
must be non-empty ASCII. A snapshot that breaks the policy is rejected as a
whole with every offending name listed.
"""

from typing import Any, List, Optional

from ..exceptions import SchemaNamingError
from .models import DataSourceSnapshot


def is_portable_name(name: Optional[Any]) -> bool:
    """True if ``name`` is a non-empty string of ASCII characters."""
    return isinstance(name, str) and bool(name) and name.isascii()


def find_naming_violations(snapshot: DataSourceSnapshot) -> tuple[List[str], List[str]]:
    """Return ``(module_names, base_type_names)`` that break the naming policy."""
    bad_mods = [str(m.get("name")) for m in snapshot.mods if not is_portable_name(m.get("name"))]
    bad_bases = [
        str(b.get("name")) for b in snapshot.base_classes if not is_portable_name(b.get("name"))
    ]
    return bad_mods, bad_bases


def check_naming(snapshot: DataSourceSnapshot) -> None:
    """Raise ``SchemaNamingError`` if any module or base type name is not portable."""
    bad_mods, bad_bases = find_naming_violations(snapshot)
    if bad_mods or bad_bases:
        raise SchemaNamingError(bad_mods, bad_bases)
