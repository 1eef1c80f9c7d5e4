import functools
from typing import Callable, Iterable

from chonkie import RecursiveChunker, RecursiveLevel, RecursiveRules

from podcast_qna.logger import get_logger
from podcast_qna.models import TranscriptChunk
from .token_counter import get_encoding, token_length_function


DEFAULT_LINE_BUDGET = 128
DEFAULT_PARAGRAPH_BUDGET = 1024
CHUNK_UNITS = ("chars", "tokens")

# Break points from most to least natural; the last level cuts on the
# unit itself when a single word is over budget.
LINE_RULES = RecursiveRules(
    levels=[
        RecursiveLevel(delimiters=[". ", "! ", "? "]),
        RecursiveLevel(delimiters=["; ", ": "]),
        RecursiveLevel(delimiters=[", "]),
        RecursiveLevel(whitespace=True),
        RecursiveLevel(),
    ]
)

LengthFunction = Callable[[str], int]


def _check_budget(max_length: int) -> None:
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length < 1:
        raise ValueError(f"Chunk budget must be a positive integer, got {max_length!r}")


def _check_unit(unit: str) -> None:
    if unit not in CHUNK_UNITS:
        raise ValueError(f"Unknown chunk unit {unit!r}, expected one of {CHUNK_UNITS}")


@functools.lru_cache(maxsize=None)
def _get_chunker(max_length: int, unit: str) -> RecursiveChunker:
    """Recursive chunker measuring in characters or in cl100k_base tokens."""
    tokenizer = "character" if unit == "chars" else get_encoding("cl100k_base")
    return RecursiveChunker(
        tokenizer,
        chunk_size=max_length,
        rules=LINE_RULES,
        min_characters_per_chunk=1,
    )


def _split_to_budget(text: str, max_length: int, unit: str) -> list[str]:
    """Split one line at its most natural break points, stripped, blanks dropped."""
    if not text.strip():
        return []
    chunks = _get_chunker(max_length, unit).chunk(text)
    return [chunk.text.strip() for chunk in chunks if chunk.text.strip()]


def split_lines(
    text: str,
    max_length: int = DEFAULT_LINE_BUDGET,
    unit: str = "chars",
) -> list[str]:
    """
    Split text into lines no longer than max_length.

    Existing line breaks are kept. Longer lines are broken after sentence
    ends, then clause marks, then commas, then at whitespace; a word longer
    than the budget is cut as a last resort.

    Parameters:
        text (str): Text to split.
        max_length (int): Line budget in units. Defaults to 128.
        unit (str): "chars" or "tokens". Defaults to "chars".

    Returns:
        list[str]: Non-empty, stripped lines in text order.
    """
    _check_budget(max_length)
    _check_unit(unit)
    lines = []
    for raw_line in text.splitlines():
        lines.extend(_split_to_budget(raw_line, max_length, unit))
    return lines


def split_paragraphs(
    lines: Iterable[str],
    max_length: int = DEFAULT_PARAGRAPH_BUDGET,
    unit: str = "chars",
) -> list[str]:
    """
    Group consecutive lines into paragraphs no longer than max_length.

    Lines are joined with newlines. A line that would push the current
    paragraph over budget starts a new one; a single line above the budget
    is split first.

    Parameters:
        lines (Iterable[str]): Lines in text order, usually from split_lines.
        max_length (int): Paragraph budget in units. Defaults to 1024.
        unit (str): "chars" or "tokens". Defaults to "chars".

    Returns:
        list[str]: Paragraphs in text order.
    """
    _check_budget(max_length)
    length_function = get_length_function(unit)
    paragraphs = []
    current: list[str] = []
    for line in lines:
        if length_function(line) <= max_length:
            pieces = [line]
        else:
            pieces = _split_to_budget(line, max_length, unit)
        for piece in pieces:
            if current and length_function("\n".join(current + [piece])) > max_length:
                paragraphs.append("\n".join(current))
                current = []
            current.append(piece)
    if current:
        paragraphs.append("\n".join(current))
    return paragraphs


def get_length_function(unit: str = "chars") -> LengthFunction:
    """Return the length function for a chunk unit ("chars" or "tokens")."""
    _check_unit(unit)
    if unit == "tokens":
        return token_length_function()
    return len


def chunk_transcript(
    text: str,
    collection_id: str,
    line_budget: int = DEFAULT_LINE_BUDGET,
    paragraph_budget: int = DEFAULT_PARAGRAPH_BUDGET,
    unit: str = "chars",
) -> list[TranscriptChunk]:
    """
    Chunk a transcript into ordered passages for indexing.

    Parameters:
        text (str): Full transcript text.
        collection_id (str): Collection the chunks belong to.
        line_budget (int): Budget of the line pass. Defaults to 128.
        paragraph_budget (int): Budget of the paragraph pass. Defaults to 1024.
        unit (str): "chars" or "tokens". Defaults to "chars".

    Returns:
        list[TranscriptChunk]: Chunks with ordinals 0..n-1 in transcript order.
    """
    logger = get_logger("chunker")

    lines = split_lines(text, line_budget, unit)
    paragraphs = split_paragraphs(lines, paragraph_budget, unit)

    logger.info(
        f"Chunked transcript for {collection_id}: {len(lines)} lines, "
        f"{len(paragraphs)} paragraphs (budgets {line_budget}/{paragraph_budget} {unit})"
    )
    return [
        TranscriptChunk(collection_id=collection_id, ordinal=ordinal, text=paragraph)
        for ordinal, paragraph in enumerate(paragraphs)
    ]
