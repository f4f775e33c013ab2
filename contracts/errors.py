"""Error taxonomy contracts.

Every failure a client operation can report is one of six kinds, ordered by
where in the request pipeline it originates.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ErrorKind(str, Enum):
    CONFIGURATION = "configuration"      # bad client construction input
    URL = "url"                          # malformed request URL
    PREFLIGHT = "preflight"              # service not ready
    REQUEST = "request"                  # transport failure: DNS, refused, timeout
    RESPONSE_STATUS = "response_status"  # HTTP status outside 2xx
    RESPONSE_PARSE = "response_parse"    # body does not match expected shape


class ClientError(BaseModel):
    """Structured, inspectable description of a failed operation."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind
    message: str
    status_code: int | None = None
    detail: dict[str, Any] = {}

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"[{self.kind.value}] ({self.status_code}) {self.message}"
        return f"[{self.kind.value}] {self.message}"


class ChromaClientError(Exception):
    """Raised when a failure has to leave the result-value world.

    Only the client constructor and ``Failure.unwrap()`` raise it; public
    operations return failures instead.
    """

    def __init__(self, error: ClientError) -> None:
        super().__init__(str(error))
        self.error = error

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind
