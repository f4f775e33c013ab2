"""Shared contracts: source of truth for all chromakit interfaces."""

from contracts.chroma_api import ChromaAPI
from contracts.collection import (
    Collection,
    CollectionResponse,
    CreateCollectionRequest,
    HeartbeatResponse,
    ModifyCollectionRequest,
)
from contracts.errors import ChromaClientError, ClientError, ErrorKind
from contracts.result import Failure, OperationResult, Success, fail
from contracts.settings import DEFAULT_DATABASE, DEFAULT_TENANT, ClientSettings

__all__ = [
    # api
    "ChromaAPI",
    # collection
    "Collection",
    "CollectionResponse",
    "CreateCollectionRequest",
    "HeartbeatResponse",
    "ModifyCollectionRequest",
    # errors
    "ChromaClientError",
    "ClientError",
    "ErrorKind",
    # result
    "Failure",
    "OperationResult",
    "Success",
    "fail",
    # settings
    "ClientSettings",
    "DEFAULT_DATABASE",
    "DEFAULT_TENANT",
]
