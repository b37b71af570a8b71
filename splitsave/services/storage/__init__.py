"""
Storage Services Package

Provides abstract interfaces and in-memory implementations for household
data and audit storage. Real backends live in the integrating service.
"""

from splitsave.services.storage.interface import (
    AuditStorageInterface,
    HouseholdDataSource,
    HouseholdSnapshot,
    NotFoundError,
    StorageError,
)
from splitsave.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryHouseholdDataSource,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "HouseholdDataSource",
    "HouseholdSnapshot",
    # Exceptions
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryHouseholdDataSource",
]
