"""
Audit Service — in-process record of terminal review actions.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


class AuditService:
    """
    Records who authorized or returned which requisition, and why.
    Entries live in memory for the lifetime of the process.
    """

    def __init__(self):
        self._entries: list[dict[str, Any]] = []

    def record(
        self,
        requisition_id: str,
        action: str,
        outcome: str,
        details: str = "",
        reviewer: str = "",
    ) -> dict[str, Any]:
        """Record an audit entry and return it."""
        entry = {
            "requisition_id": requisition_id,
            "action": action,
            "outcome": outcome,
            "details": details,
            "reviewer": reviewer,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        self._entries.append(entry)
        logger.debug(f"[AUDIT] {requisition_id} {action} → {outcome}: {details}")
        return entry

    def get_trail(self, requisition_id: str) -> list[dict[str, Any]]:
        """Return all audit entries for a requisition."""
        return [e for e in self._entries if e["requisition_id"] == requisition_id]
