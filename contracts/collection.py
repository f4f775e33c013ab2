"""Collection contracts.

The client-side Collection value plus the JSON shapes exchanged with the
Chroma v1 REST API for collection and database-level operations.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# ── Client-side value ────────────────────────────────────────────────


class Collection(BaseModel):
    """A named, server-managed collection as seen by the client."""

    model_config = ConfigDict(frozen=True)

    name: str
    id: str
    metadata: dict[str, Any] | None = None
    tenant: str | None = None
    database: str | None = None


# ── Request bodies ───────────────────────────────────────────────────


class CreateCollectionRequest(BaseModel):
    name: str
    metadata: dict[str, Any] | None = None
    get_or_create: bool = False


class ModifyCollectionRequest(BaseModel):
    new_name: str | None = None
    new_metadata: dict[str, Any] | None = None


# ── Response bodies ──────────────────────────────────────────────────


class CollectionResponse(BaseModel):
    """Collection as returned by create / get / list."""

    name: str
    id: str
    metadata: dict[str, Any] | None = None
    tenant: str | None = None
    database: str | None = None

    def to_collection(self) -> Collection:
        return Collection(
            name=self.name,
            id=self.id,
            metadata=self.metadata,
            tenant=self.tenant,
            database=self.database,
        )


class HeartbeatResponse(BaseModel):
    nanosecond_heartbeat: int = Field(alias="nanosecond heartbeat", ge=0)
