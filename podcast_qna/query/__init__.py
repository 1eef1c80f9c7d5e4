"""
Query module for the podcast Q&A assistant.

Retrieves transcript passages from the episode's Qdrant collection and
answers questions with the OpenAI completion model.
"""

from .service import DEFAULT_TOP_K, TranscriptQAService

__all__ = [
    "DEFAULT_TOP_K",
    "TranscriptQAService",
]
