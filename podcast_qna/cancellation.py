"""
Cooperative cancellation for the interactive workflow.

Blocking work (backend calls, console reads) runs on daemon threads so a
cancelled run can exit without waiting for it. The token is checked before
each call starts and again after it finishes: a result that completes after
cancellation was requested is discarded, never displayed.

Usage:
    token = CancellationToken(asyncio.get_running_loop())
    loop.add_signal_handler(signal.SIGINT, token.cancel)
    answer = await token.run(generator.generate, ASK_QUESTION_PROMPT, ...)
"""

import asyncio
import threading
from typing import Any, Callable, Optional, TypeVar

from podcast_qna.exceptions import OperationCancelled
from podcast_qna.logger import get_logger


T = TypeVar("T")

logger = get_logger("cancellation")


def _consume_result(future: asyncio.Future) -> None:
    # Results of abandoned calls are dropped without "never retrieved" warnings
    if not future.cancelled():
        future.exception()


def run_in_daemon_thread(func: Callable[..., T], *args: Any, **kwargs: Any) -> asyncio.Future:
    """
    Run a blocking callable on a daemon thread.

    Returns:
        A future of the running loop resolved with the callable's result or exception
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    def _resolve(result: Any = None, error: Optional[BaseException] = None) -> None:
        if future.done():
            return
        if error is not None:
            future.set_exception(error)
        else:
            future.set_result(result)

    def _deliver(result: Any, error: Optional[BaseException]) -> None:
        try:
            loop.call_soon_threadsafe(_resolve, result, error)
        except RuntimeError:
            # Loop already closed: the run is over and nobody awaits this call
            return

    def _target() -> None:
        try:
            result = func(*args, **kwargs)
        except BaseException as e:
            _deliver(None, e)
            return
        _deliver(result, None)

    threading.Thread(target=_target, name=getattr(func, "__name__", "worker"), daemon=True).start()
    return future


class CancellationToken:
    """Process-wide cancellation signal observed at every suspending call."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop or asyncio.get_running_loop()
        self._flag = threading.Event()
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._flag.is_set()

    def cancel(self) -> None:
        """Request cancellation; safe to call from any thread or a signal handler."""
        if self._flag.is_set():
            return
        logger.info("Cancellation requested")
        self._flag.set()
        try:
            self._loop.call_soon_threadsafe(self._event.set)
        except RuntimeError:
            # Loop already closed; the flag alone is observed from here on
            pass

    def raise_if_cancelled(self) -> None:
        if self._flag.is_set():
            raise OperationCancelled()

    async def run(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        Run a blocking call unless or until cancellation is requested.

        Raises:
            OperationCancelled: If cancellation was requested before, during or
                right after the call
        """
        self.raise_if_cancelled()
        future = run_in_daemon_thread(func, *args, **kwargs)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({future, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()

        if self._flag.is_set():
            future.add_done_callback(_consume_result)
            raise OperationCancelled()
        return future.result()
