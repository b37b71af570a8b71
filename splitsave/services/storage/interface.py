"""
Abstract Storage Interface

DESIGN DECISION: The engine never talks to a database. The monthly plan
flow reads one household snapshot through this interface, and the audit
logger appends events through it. This allows us to:
1. Plug in whatever store the API layer uses
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

A snapshot is read once per plan, so every figure in one plan is
computed from the same observed data.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from splitsave.models.audit import AuditEvent
from splitsave.models.household import (
    Expense,
    Goal,
    MonthlyContributionRecord,
    Partnership,
    SafetyPotState,
)


class HouseholdSnapshot(BaseModel):
    """Everything the engine needs about one partnership, read at once."""
    model_config = ConfigDict(frozen=True)

    partnership: Partnership
    expenses: list[Expense] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    safety_pot: SafetyPotState = Field(default_factory=SafetyPotState)
    contribution_records: list[MonthlyContributionRecord] = Field(default_factory=list)


class HouseholdDataSource(ABC):
    """
    Abstract interface for reading household data.

    Any storage implementation (PostgreSQL, a REST backend, etc.)
    must implement these methods.
    """

    @abstractmethod
    async def load_snapshot(self, partnership_id: str, month: str) -> HouseholdSnapshot:
        """
        Load a consistent snapshot of a partnership's data.

        Args:
            partnership_id: The partnership to load
            month: Month key (YYYY-MM) the caller is planning for

        Returns:
            The household snapshot

        Raises:
            NotFoundError: If the partnership doesn't exist
            StorageError: If the read fails
        """
        pass

    @abstractmethod
    async def save_contribution_record(self, record: MonthlyContributionRecord) -> bool:
        """
        Store a partner's contribution record for a month.

        Replaces an existing record for the same partner and month.

        Returns:
            True if saved successfully

        Raises:
            NotFoundError: If the user belongs to no known partnership
            StorageError: If the write fails
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one monthly plan).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass
