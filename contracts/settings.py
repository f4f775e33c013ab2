"""Client settings schema: Pydantic models.

Mirrors the layout of a chromakit.yaml file. Every field has a default so a
bare ``ClientSettings()`` points at a local Chroma on port 8000.
"""

from __future__ import annotations

from pydantic import BaseModel, field_validator

DEFAULT_TENANT = "default_tenant"
DEFAULT_DATABASE = "default_database"


class ClientSettings(BaseModel):
    """Construction parameters for a ChromaHttpClient."""

    host: str = "localhost"
    port: str = "8000"
    ssl: bool = False
    headers: dict[str, str] = {}
    tenant: str = DEFAULT_TENANT
    database: str = DEFAULT_DATABASE
    timeout: float = 30.0

    @field_validator("port", mode="before")
    @classmethod
    def _port_as_str(cls, value: object) -> object:
        # YAML and argparse hand us ints
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value
