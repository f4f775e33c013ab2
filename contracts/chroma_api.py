"""Chroma API client contract.

Defines the abstract interface for a Chroma client: collection lifecycle
plus database-level operations. Every method returns an OperationResult.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from contracts.collection import Collection
from contracts.result import OperationResult


class ChromaAPI(ABC):
    """Abstract base class for Chroma clients."""

    # ── database-level ───────────────────────────────────────────────

    @abstractmethod
    async def heartbeat(self) -> OperationResult[int]:
        """Server time in nanoseconds since epoch."""
        ...

    @abstractmethod
    async def version(self) -> OperationResult[str]:
        """Server version string."""
        ...

    @abstractmethod
    async def reset(self) -> OperationResult[None]:
        """Wipe the database. Refused unless the server allows resets."""
        ...

    # ── collections ──────────────────────────────────────────────────

    @abstractmethod
    async def create_collection(
        self, name: str, metadata: dict[str, Any] | None = None
    ) -> OperationResult[Collection]:
        """Create a new collection. Fails if the name is taken."""
        ...

    @abstractmethod
    async def get_or_create_collection(
        self, name: str, metadata: dict[str, Any] | None = None
    ) -> OperationResult[Collection]:
        """Return the named collection, creating it if needed."""
        ...

    @abstractmethod
    async def get_collection(self, name: str) -> OperationResult[Collection]:
        """Fetch an existing collection by name."""
        ...

    @abstractmethod
    async def list_collections(
        self, limit: int | None = None, offset: int | None = None
    ) -> OperationResult[list[Collection]]:
        """List collections in the current tenant/database."""
        ...

    @abstractmethod
    async def count_collections(self) -> OperationResult[int]:
        """Number of collections in the current tenant/database."""
        ...

    @abstractmethod
    async def modify_collection(
        self,
        collection_id: str,
        new_name: str | None = None,
        new_metadata: dict[str, Any] | None = None,
    ) -> OperationResult[None]:
        """Rename a collection and/or replace its metadata."""
        ...

    @abstractmethod
    async def delete_collection(self, name: str) -> OperationResult[None]:
        """Delete a collection by name."""
        ...
