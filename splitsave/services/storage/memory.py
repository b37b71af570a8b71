"""
In-Memory Storage

Dictionary-backed implementations of the storage interfaces. Used by
tests and for running the engine without a backing store.
"""

from typing import Optional
from uuid import UUID

import structlog

from splitsave.models.audit import AuditEvent
from splitsave.models.household import (
    Expense,
    Goal,
    MonthlyContributionRecord,
    Partnership,
    SafetyPotState,
)
from splitsave.services.storage.interface import (
    AuditStorageInterface,
    HouseholdDataSource,
    HouseholdSnapshot,
    NotFoundError,
)


logger = structlog.get_logger()


class InMemoryHouseholdDataSource(HouseholdDataSource):
    """Holds households in plain dictionaries keyed by partnership id."""

    def __init__(self):
        self._partnerships: dict[str, Partnership] = {}
        self._expenses: dict[str, list[Expense]] = {}
        self._goals: dict[str, list[Goal]] = {}
        self._safety_pots: dict[str, SafetyPotState] = {}
        self._records: dict[str, dict[tuple[str, str], MonthlyContributionRecord]] = {}

    def add_partnership(
        self,
        partnership: Partnership,
        expenses: Optional[list[Expense]] = None,
        goals: Optional[list[Goal]] = None,
        safety_pot: Optional[SafetyPotState] = None,
        records: Optional[list[MonthlyContributionRecord]] = None,
    ) -> None:
        pid = partnership.partnership_id
        self._partnerships[pid] = partnership
        self._expenses[pid] = list(expenses or [])
        self._goals[pid] = list(goals or [])
        self._safety_pots[pid] = safety_pot or SafetyPotState()
        self._records[pid] = {(r.month, r.user_id): r for r in records or []}

    async def load_snapshot(self, partnership_id: str, month: str) -> HouseholdSnapshot:
        partnership = self._partnerships.get(partnership_id)
        if partnership is None:
            raise NotFoundError(f"Partnership not found: {partnership_id}")

        logger.debug("snapshot_loaded", partnership_id=partnership_id, month=month)

        return HouseholdSnapshot(
            partnership=partnership,
            expenses=list(self._expenses[partnership_id]),
            goals=list(self._goals[partnership_id]),
            safety_pot=self._safety_pots[partnership_id],
            contribution_records=list(self._records[partnership_id].values()),
        )

    async def save_contribution_record(self, record: MonthlyContributionRecord) -> bool:
        for pid, partnership in self._partnerships.items():
            if record.user_id in partnership.user_ids:
                self._records[pid][(record.month, record.user_id)] = record
                return True
        raise NotFoundError(f"No partnership for user: {record.user_id}")


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_recent_events(self, limit: int = 100) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
