"""Token counting for chunk budgets expressed in tokens.

Uses tiktoken, which matches the tokenizers of the OpenAI completion and
embedding models.
"""

import functools
from typing import Callable

import tiktoken


DEFAULT_ENCODING = "cl100k_base"


@functools.lru_cache(maxsize=None)
def get_encoding(encoding_name: str) -> tiktoken.Encoding:
    try:
        return tiktoken.get_encoding(encoding_name)
    except ValueError as e:
        raise ValueError(f"Invalid encoding name: {encoding_name}") from e


def count_tokens(text: str, encoding_name: str = DEFAULT_ENCODING) -> int:
    """Count the number of tokens in a text string.

    Args:
        text: The text string to count tokens for.
        encoding_name: The encoding to use. "cl100k_base" (default) is used by
            GPT-4, GPT-3.5-turbo and the text-embedding-3 models.

    Returns:
        The number of tokens in the text.

    Raises:
        ValueError: If the encoding_name is not recognized.

    Example:
        >>> count_tokens("Hello, world!")
        4
    """
    return len(get_encoding(encoding_name).encode(text))


def token_length_function(encoding_name: str = DEFAULT_ENCODING) -> Callable[[str], int]:
    """Return a length function measuring text in tokens of the given encoding."""
    return functools.partial(count_tokens, encoding_name=encoding_name)
