"""chromakit: async client for the Chroma HTTP API."""

import logging

from chromakit.client import ChromaHttpClient
from chromakit.context import ConnectionContext, build_context
from chromakit.settings_loader import load_settings

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "ChromaHttpClient",
    "ConnectionContext",
    "build_context",
    "load_settings",
]
