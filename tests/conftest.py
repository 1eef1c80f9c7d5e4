"""
Shared pytest fixtures for all tests.
"""
import io
import json
import sys
from pathlib import Path
from typing import Iterable, List, Optional

import pytest
from rich.console import Console

# Add project root and tests directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))
sys.path.insert(0, str(Path(__file__).parent))

from podcast_qna.db import TranscriptIndex, get_qdrant_client
from podcast_qna.models import Episode

from mocks.mock_embedding import KeywordEmbedding


VOCABULARY = ["blazor", "maui", "rust", "azure", "guest"]


# ==================== Feed Fixtures ====================

def build_feed(items: Iterable[str]) -> str:
    """Wrap RSS item snippets in a minimal feed document."""
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<rss version="2.0"><channel><title>.NET Rocks!</title>\n'
        + "\n".join(items)
        + "\n</channel></rss>"
    )


def feed_item(
    number: Optional[int] = None,
    title: Optional[str] = "Untitled",
    audio_url: Optional[str] = "https://example.com/audio.mp3",
    link: Optional[str] = None,
) -> str:
    parts = ["<item>"]
    if title is not None:
        parts.append(f"<title>{title}</title>")
    if link is None and number is not None:
        link = f"https://www.dotnetrocks.com/default.aspx?ShowNum={number}"
    if link is not None:
        parts.append(f"<link>{link}</link>")
    if audio_url is not None:
        parts.append(f'<enclosure url="{audio_url}" length="1" type="audio/mpeg"/>')
    parts.append("</item>")
    return "".join(parts)


@pytest.fixture
def sample_feed() -> str:
    """Feed with three shows, newest first as published."""
    return build_feed(
        [
            feed_item(1000, "A", "https://example.com/dnr1000.mp3"),
            feed_item(1001, "B", "https://example.com/dnr1001.mp3"),
            feed_item(1002, "C", "https://example.com/dnr1002.mp3"),
        ]
    )


@pytest.fixture
def catalog() -> List[Episode]:
    return [
        Episode(number=1000, title="A", audio_url="https://example.com/dnr1000.mp3", index=1),
        Episode(number=1001, title="B", audio_url="https://example.com/dnr1001.mp3", index=2),
        Episode(number=1002, title="C", audio_url="https://example.com/dnr1002.mp3", index=3),
    ]


def resolve_by_index(catalog: List[Episode]):
    """Responder that answers pick prompts like a well-behaved model would."""

    def responder(prompt: str) -> str:
        if "Query:" not in prompt:
            return "\n".join(f"{e.index}. {e.title}" for e in catalog) + "\nPick one."
        query = prompt.rsplit("Query:", 1)[1].split("\n", 1)[0].strip()
        for episode in catalog:
            if query == str(episode.index) or query.lower() in episode.title.lower():
                return json.dumps(episode.to_dict())
        return "I could not find that show."

    return responder


# ==================== Vector Store Fixtures ====================

@pytest.fixture
def embed_model() -> KeywordEmbedding:
    return KeywordEmbedding(vocabulary=VOCABULARY)


@pytest.fixture
def qdrant_client():
    with get_qdrant_client(location=":memory:") as client:
        yield client


@pytest.fixture
def transcript_index(qdrant_client, embed_model) -> TranscriptIndex:
    return TranscriptIndex(qdrant_client, embed_model, min_relevance=0.2)


# ==================== Console Fixtures ====================

def scripted_console(lines: Iterable[str]) -> Console:
    """Console whose input() returns the given lines, then signals end of input."""
    console = Console(file=io.StringIO(), force_terminal=False, width=200)
    pending = list(lines)

    def fake_input(prompt: str = "", **kwargs) -> str:
        console.print(prompt, end="")
        if not pending:
            raise EOFError
        line = pending.pop(0)
        console.print(line, markup=False)
        return line

    console.input = fake_input
    return console


def console_output(console: Console) -> str:
    return console.file.getvalue()
