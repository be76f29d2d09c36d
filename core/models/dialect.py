# ============================================================================
# DIALECT CAPABILITIES
# ============================================================================
# STATUS: Core model - Target database feature flags
# PURPOSE: Answer "does the target support X" for the translator
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: DialectCapabilities
# DEPENDENCIES: pydantic
# ============================================================================
"""
Dialect Capabilities

The translator never inspects a live database. It asks a capability
object instead. Capabilities are derived from a dialect name
("mysql", "sqlite", ...) or from anything SQLAlchemy-shaped that
exposes one (Engine, Connection, Dialect).
"""

from typing import Any, ClassVar, FrozenSet

from pydantic import BaseModel, ConfigDict


class DialectCapabilities(BaseModel):
    """Feature flags for one target dialect."""
    model_config = ConfigDict(frozen=True)

    NATIVE_ENUM_DIALECTS: ClassVar[FrozenSet[str]] = frozenset({"mysql", "mariadb"})

    name: str
    supports_native_enum: bool = False
    distinguishes_immutable_datetime: bool = False

    @classmethod
    def for_name(cls, name: str) -> "DialectCapabilities":
        """
        Build capabilities from a dialect name.

        Driver suffixes are ignored ("mysql+pymysql" -> "mysql").
        """
        base = name.split("+", 1)[0].lower()
        return cls(
            name=base,
            supports_native_enum=base in cls.NATIVE_ENUM_DIALECTS,
        )

    @classmethod
    def from_sqlalchemy(cls, target: Any) -> "DialectCapabilities":
        """
        Build capabilities from an Engine, Connection or Dialect.
        """
        name = getattr(target, "name", None)
        if not isinstance(name, str):
            name = getattr(getattr(target, "dialect", None), "name", None)
        if not isinstance(name, str) or not name:
            raise TypeError(f"Cannot determine dialect name from {target!r}")
        return cls.for_name(name)


__all__ = ["DialectCapabilities"]
