from .token_counter import count_tokens
from .chunker import (
    CHUNK_UNITS,
    DEFAULT_LINE_BUDGET,
    DEFAULT_PARAGRAPH_BUDGET,
    chunk_transcript,
    get_length_function,
    split_lines,
    split_paragraphs,
)


__all__ = [
    # Token counting function
    "count_tokens",
    # Chunker functions
    "CHUNK_UNITS",
    "DEFAULT_LINE_BUDGET",
    "DEFAULT_PARAGRAPH_BUDGET",
    "chunk_transcript",
    "get_length_function",
    "split_lines",
    "split_paragraphs",
]
