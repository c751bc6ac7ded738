"""
Runbook Registry

In-memory, thread-safe catalog of runbook definitions keyed by ID.
"""

import logging
import threading
from typing import Dict, List, Optional, Tuple

from .models import Runbook

logger = logging.getLogger(__name__)


class RunbookRegistry:
    """
    Catalog of fully-formed runbooks.

    Registering a runbook whose ID is already present replaces the prior
    definition entirely. Every method returns fresh lists, so callers can
    mutate what they get back without touching registry state.

    Example:
        registry = RunbookRegistry()
        registry.register(Runbook(id="ha-health", name="HA Health", category="ha"))

        runbook, found = registry.get("ha-health")
        ha_runbooks = registry.list_by_category("ha")
    """

    def __init__(self):
        self._runbooks: Dict[str, Runbook] = {}
        self._lock = threading.RLock()

    def register(self, runbook: Runbook) -> None:
        """Add or replace a runbook."""
        with self._lock:
            replaced = runbook.id in self._runbooks
            self._runbooks[runbook.id] = runbook

        if replaced:
            logger.debug(f"Replaced runbook definition: {runbook.id}")

    def get(self, runbook_id: str) -> Tuple[Optional[Runbook], bool]:
        """Get a runbook by ID. Returns (runbook, found)."""
        with self._lock:
            runbook = self._runbooks.get(runbook_id)
        return runbook, runbook is not None

    def list(self) -> List[Runbook]:
        """Snapshot of all registered runbooks (order unspecified)."""
        with self._lock:
            return list(self._runbooks.values())

    def list_by_category(self, category: str) -> List[Runbook]:
        """Runbooks whose category matches exactly."""
        with self._lock:
            return [rb for rb in self._runbooks.values() if rb.category == category]

    def categories(self) -> List[str]:
        """Distinct non-empty categories."""
        with self._lock:
            return list({rb.category for rb in self._runbooks.values() if rb.category})

    def count(self) -> int:
        with self._lock:
            return len(self._runbooks)

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, runbook_id: str) -> bool:
        with self._lock:
            return runbook_id in self._runbooks
