"""
Terminal helpers: status indicator and cancellable line input.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console

from podcast_qna.cancellation import CancellationToken
from podcast_qna.logger import get_logger


logger = get_logger("console")


@contextmanager
def status(console: Console, message: str) -> Iterator[None]:
    """
    Show a spinner for the duration of a blocking operation.

    The spinner is stopped when the block exits, whether it returns, raises
    or is cancelled, so no error message is printed under a live spinner.
    """
    indicator = console.status(message, spinner="dots")
    indicator.start()
    logger.debug(f"Status started: {message}")
    try:
        yield
    finally:
        indicator.stop()
        logger.debug(f"Status stopped: {message}")


def _input_or_none(console: Console, prompt: str) -> Optional[str]:
    try:
        return console.input(prompt)
    except EOFError:
        return None


async def read_line(
    console: Console, prompt: str, cancellation: CancellationToken
) -> Optional[str]:
    """
    Read one line of user input.

    Returns:
        The line, or None at end of input

    Raises:
        OperationCancelled: If cancellation is requested while waiting
    """
    return await cancellation.run(_input_or_none, console, prompt)
