"""Services package."""

from splitsave.services.storage import (
    AuditStorageInterface,
    HouseholdDataSource,
    HouseholdSnapshot,
    InMemoryAuditStorage,
    InMemoryHouseholdDataSource,
    NotFoundError,
    StorageError,
)

__all__ = [
    "AuditStorageInterface",
    "HouseholdDataSource",
    "HouseholdSnapshot",
    "InMemoryAuditStorage",
    "InMemoryHouseholdDataSource",
    "NotFoundError",
    "StorageError",
]
