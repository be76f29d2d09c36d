# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for entity discovery, translation and logging
# LAST_REVIEWED: 18 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for the schema bridge.
These can be overridden via environment variables or CLI flags.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from core.contracts import DEFAULT_CONNECTION


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_paths(name: str) -> Tuple[str, ...]:
    value = os.getenv(name, "")
    return tuple(part for part in value.split(os.pathsep) if part)


@dataclass(frozen=True)
class DiscoveryDefaults:
    """
    Where entity classes live.

    ENTITY_DIRS is a path list separated by os.pathsep.
    """
    entity_dirs: Tuple[str, ...] = ()

    @classmethod
    def from_env(cls) -> "DiscoveryDefaults":
        """Create from environment variables."""
        return cls(entity_dirs=_env_paths("ENTITY_DIRS"))


@dataclass(frozen=True)
class TranslationDefaults:
    """
    Defaults for schema translation.
    """
    connection_name: str = DEFAULT_CONNECTION
    database_url: str = "sqlite://"
    strict: bool = False
    default_string_length: int = 255

    @classmethod
    def from_env(cls) -> "TranslationDefaults":
        """Create from environment variables."""
        return cls(
            connection_name=os.getenv("ENTITY_CONNECTION", DEFAULT_CONNECTION),
            database_url=os.getenv("DATABASE_URL", "sqlite://"),
            strict=_env_bool("SCHEMA_STRICT"),
            default_string_length=int(os.getenv("DEFAULT_STRING_LENGTH", 255)),
        )


@dataclass(frozen=True)
class LoggingDefaults:
    """Log level and output format."""
    level: str = "INFO"
    json_output: bool = False

    @classmethod
    def from_env(cls) -> "LoggingDefaults":
        """Create from environment variables."""
        return cls(
            level=os.getenv("LOG_LEVEL", "INFO"),
            json_output=os.getenv("LOG_FORMAT", "").lower() == "json",
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    discovery: DiscoveryDefaults = field(default_factory=DiscoveryDefaults)
    translation: TranslationDefaults = field(default_factory=TranslationDefaults)
    logging: LoggingDefaults = field(default_factory=LoggingDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            discovery=DiscoveryDefaults.from_env(),
            translation=TranslationDefaults.from_env(),
            logging=LoggingDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "DiscoveryDefaults",
    "TranslationDefaults",
    "LoggingDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
