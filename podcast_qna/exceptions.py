"""
Exceptions raised by the podcast Q&A assistant.

Every fatal condition of a run derives from PodcastQnaError so the CLI can
report it uniformly. An empty retrieval result is not an error and has no
exception type.
"""


class PodcastQnaError(Exception):
    """Base exception for all podcast_qna errors."""

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(PodcastQnaError):
    """Raised when a required credential or setting is missing or invalid."""


class FeedParseError(PodcastQnaError):
    """Raised when a feed item lacks a show number, title or enclosure."""


class SelectionError(PodcastQnaError):
    """Raised when the picked show cannot be resolved to a catalog episode."""


class BackendError(PodcastQnaError):
    """Raised when the feed, transcription, embedding, completion or vector store backend fails."""


class OperationCancelled(PodcastQnaError):
    """Raised once cancellation has been observed; no further output may follow."""

    def __init__(self, message: str = "Operation cancelled", details: dict = None):
        super().__init__(message, details)
