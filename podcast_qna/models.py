"""
Data records shared by every stage of the Q&A workflow.

- Episode: one show of the podcast feed, immutable once parsed
- TranscriptChunk: one bounded passage of an episode transcript
- QueryContext: the passages retrieved for a single question
"""

from dataclasses import dataclass, field
from typing import Any, Optional


COLLECTION_PREFIX = "Transcript_"


def collection_name_for(show_number: int) -> str:
    """Return the vector store collection name holding a show's transcript."""
    return f"{COLLECTION_PREFIX}{show_number}"


@dataclass(frozen=True)
class Episode:
    """A podcast show as listed in the feed."""

    number: int
    title: str
    audio_url: str
    index: Optional[int] = None

    @property
    def collection_id(self) -> str:
        return collection_name_for(self.number)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the JSON shape exchanged with the generation backend."""
        data: dict[str, Any] = {
            "show_number": self.number,
            "title": self.title,
            "audio_url": self.audio_url,
        }
        if self.index is not None:
            data = {"index": self.index, **data}
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Episode":
        """
        Build an Episode from its JSON shape.

        Args:
            data: Mapping with show_number, title, audio_url and optional index

        Returns:
            Episode instance

        Raises:
            KeyError: If a required field is missing
            TypeError: If a field has the wrong type
            ValueError: If show_number or index is not an integer
        """
        number = data["show_number"]
        title = data["title"]
        audio_url = data["audio_url"]
        index = data.get("index")

        # bool is an int subclass, reject it explicitly
        if isinstance(number, bool) or not isinstance(number, (int, str)):
            raise TypeError(f"show_number must be an integer, got {number!r}")
        if not isinstance(title, str) or not title.strip():
            raise TypeError(f"title must be a non-empty string, got {title!r}")
        if not isinstance(audio_url, str) or not audio_url.strip():
            raise TypeError(f"audio_url must be a non-empty string, got {audio_url!r}")
        if index is not None and (isinstance(index, bool) or not isinstance(index, (int, str))):
            raise TypeError(f"index must be an integer, got {index!r}")

        return cls(
            number=int(number),
            title=title,
            audio_url=audio_url,
            index=int(index) if index is not None else None,
        )


@dataclass(frozen=True)
class TranscriptChunk:
    """A passage of a transcript, stored and retrieved as one unit."""

    collection_id: str
    ordinal: int
    text: str


@dataclass(frozen=True)
class QueryContext:
    """Passages retrieved for one question, most similar first."""

    question: str
    retrieved_passages: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_empty(self) -> bool:
        return not self.retrieved_passages

    @property
    def grounding_context(self) -> str:
        return "".join(f"{passage}\n" for passage in self.retrieved_passages)
