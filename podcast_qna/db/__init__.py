"""
Vector store package for the podcast Q&A assistant.

Structure:
- qdrant_client.py: Qdrant connection management and the TranscriptIndex

Qdrant uses connection-per-run with the get_qdrant_client() context manager;
the TranscriptIndex is built on the open client and passed to each stage.
"""

from .qdrant_client import (
    DEFAULT_MIN_RELEVANCE,
    DEFAULT_QDRANT_URL,
    TranscriptIndex,
    get_qdrant_client,
    manifest_id,
    point_id,
)

__all__ = [
    "DEFAULT_MIN_RELEVANCE",
    "DEFAULT_QDRANT_URL",
    "TranscriptIndex",
    "get_qdrant_client",
    "manifest_id",
    "point_id",
]
