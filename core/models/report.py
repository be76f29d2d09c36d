# ============================================================================
# TRANSLATION REPORT
# ============================================================================
# STATUS: Core model - Per-entity translation outcomes
# PURPOSE: Collect success/skip/failure per entity for lenient or strict callers
# LAST_REVIEWED: 18 OCT 2026
# EXPORTS: EntityResult, TranslationReport
# DEPENDENCIES: dataclasses
# ============================================================================

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.contracts import EntityStatus
from core.models.table_schema import TableSchema


@dataclass
class EntityResult:
    """Result of translating a single entity."""
    entity_name: str
    status: EntityStatus
    table: Optional[TableSchema] = None
    connection_name: Optional[str] = None
    error: Optional[str] = None


@dataclass
class TranslationReport:
    """Complete result of one translation run."""
    target_connection: str
    dialect: str
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    results: List[EntityResult] = field(default_factory=list)

    @property
    def tables(self) -> List[TableSchema]:
        """Emitted tables in input order."""
        return [r.table for r in self.results if r.status.produced_table()]

    @property
    def failures(self) -> List[EntityResult]:
        return [r for r in self.results if r.status == EntityStatus.FAILED]

    @property
    def success(self) -> bool:
        return not self.failures

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "target_connection": self.target_connection,
            "dialect": self.dialect,
            "timestamp": self.timestamp,
            "success": self.success,
            "entities": [
                {
                    "entity": r.entity_name,
                    "status": r.status.value,
                    "connection": r.connection_name,
                    "table": r.table.name if r.table else None,
                    "error": r.error,
                }
                for r in self.results
            ],
            "summary": {
                "total": len(self.results),
                "translated": len([r for r in self.results if r.status == EntityStatus.TRANSLATED]),
                "skipped": len([r for r in self.results if r.status == EntityStatus.SKIPPED]),
                "failed": len(self.failures),
            },
        }


__all__ = ["EntityResult", "TranslationReport"]
