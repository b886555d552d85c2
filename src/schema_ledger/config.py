"""Configuration loading for Schema Ledger.

Configuration sources are merged in priority order (lowest to highest):
    1. Defaults (defined in LedgerConfig)
    2. Global config (~/.schema-ledger.toml)
    3. Project config (./schema-ledger.toml)
    4. Explicit config file
    5. Environment variables (SCHEMA_LEDGER_* prefix)
    6. Overrides passed as kwargs (typically CLI flags)

Example:
    >>> config = load_config(polling_seconds=30)
    >>> config.polling_seconds
    30
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

ENV_PREFIX = "SCHEMA_LEDGER_"

DEFAULT_ROOT_DIR = str(Path.home() / ".schema-ledger")


@dataclass(frozen=True)
class LedgerConfig:
    """Settings shared by the store, the registry and the diff engine.

    Attributes:
        root_dir: Directory holding the manifest and every project's records
        manifest_filename: Storage key of the manifest document
        context_key: Reserved key stripped from entities before comparison
        polling_seconds: Interval between refresh cycles when watching
        itemize_property_changes: Report one item per changed base type property
            instead of a single "properties updated" item
        validate_names: Reject fetched snapshots with non-portable names
    """

    root_dir: str = DEFAULT_ROOT_DIR
    manifest_filename: str = "projects_manifest.json"
    context_key: str = "context"
    polling_seconds: int = 20
    itemize_property_changes: bool = False
    validate_names: bool = True

    def __post_init__(self) -> None:
        if not self.root_dir:
            raise InvalidConfigError("root_dir", self.root_dir, "must not be empty")
        if not self.manifest_filename or "/" in self.manifest_filename:
            raise InvalidConfigError(
                "manifest_filename", self.manifest_filename, "must be a plain file name"
            )
        if not self.context_key:
            raise InvalidConfigError("context_key", self.context_key, "must not be empty")
        if self.polling_seconds < 1:
            raise InvalidConfigError(
                "polling_seconds", self.polling_seconds, "must be at least 1"
            )

    @property
    def root_path(self) -> Path:
        """Root directory with ``~`` expanded."""
        return Path(self.root_dir).expanduser()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> LedgerConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides; ``None`` values are ignored

    Returns:
        Validated LedgerConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / ".schema-ledger.toml"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / "schema-ledger.toml"
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    known = {f.name for f in fields(LedgerConfig)}
    unknown = sorted(set(merged) - known)
    if unknown:
        raise ConfigurationError(f"Unknown configuration keys: {', '.join(unknown)}")

    return LedgerConfig(**merged)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from SCHEMA_LEDGER_* environment variables.

    Returns:
        Dict of field_name -> parsed_value for any variables found.
    """
    type_hints = get_type_hints(LedgerConfig)
    result: dict[str, Any] = {}

    for field_name in LedgerConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)
        if env_value is None:
            continue
        try:
            result[field_name] = _parse_env_value(env_value, type_hints[field_name])
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse an environment variable string to the field's type."""
    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        if lower in ("false", "0", "no", "off"):
            return False
        raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    return value


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load a TOML file, accepting either top-level keys or a [schema-ledger] table."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigurationError(f"Invalid config file '{path}': {e}")

    section = data.get("schema-ledger")
    if isinstance(section, dict):
        return dict(section)
    return data
