"""
Interactive console for the podcast Q&A assistant.

Modules:
    console: status spinner and cancellable line input
    chat: the question/answer loop
"""

from .chat import (
    EXIT_COMMANDS,
    NO_CONTEXT_MESSAGE,
    LoopState,
    QASession,
    ask_questions,
)
from .console import read_line, status

__all__ = [
    "EXIT_COMMANDS",
    "NO_CONTEXT_MESSAGE",
    "LoopState",
    "QASession",
    "ask_questions",
    "read_line",
    "status",
]
