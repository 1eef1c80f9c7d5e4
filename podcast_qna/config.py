"""
Configuration settings for the podcast Q&A assistant.

Values come from the environment (a .env file is loaded first) and can be
overridden on the command line: command line > environment > defaults.
"""

import argparse
import os
from dataclasses import dataclass, field, fields
from typing import Optional

from dotenv import load_dotenv

from podcast_qna.chunker import (
    CHUNK_UNITS,
    DEFAULT_LINE_BUDGET,
    DEFAULT_PARAGRAPH_BUDGET,
)
from podcast_qna.db import DEFAULT_MIN_RELEVANCE, DEFAULT_QDRANT_URL
from podcast_qna.exceptions import ConfigurationError
from podcast_qna.ingestion import DEFAULT_FEED_URL
from podcast_qna.logger import DEFAULT_LOG_FILE


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from e


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


@dataclass
class QnaConfig:
    """Configuration for the podcast Q&A assistant"""

    # API keys
    openai_api_key: Optional[str] = None
    assemblyai_api_key: Optional[str] = None

    # Models
    completion_model: str = "gpt-4o-mini"
    embedding_model: str = "text-embedding-3-small"

    # Feed
    feed_url: str = DEFAULT_FEED_URL
    show: Optional[str] = None

    # Qdrant connection
    qdrant_url: str = DEFAULT_QDRANT_URL
    qdrant_path: Optional[str] = None
    qdrant_api_key: Optional[str] = None

    # Retrieval settings
    top_k: int = 3
    min_relevance: float = DEFAULT_MIN_RELEVANCE

    # Chunking
    line_budget: int = DEFAULT_LINE_BUDGET
    paragraph_budget: int = DEFAULT_PARAGRAPH_BUDGET
    chunk_unit: str = "chars"

    # Transcription
    language_code: Optional[str] = None

    # Logging
    log_file: str = DEFAULT_LOG_FILE
    verbose: bool = False

    required: tuple[str, ...] = field(
        default=("openai_api_key", "assemblyai_api_key"), repr=False
    )

    @classmethod
    def from_env(cls) -> "QnaConfig":
        """Build a configuration from the environment and an optional .env file."""
        load_dotenv()
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            assemblyai_api_key=os.getenv("ASSEMBLYAI_API_KEY"),
            completion_model=os.getenv("COMPLETION_MODEL") or cls.completion_model,
            embedding_model=os.getenv("EMBEDDING_MODEL") or cls.embedding_model,
            feed_url=os.getenv("FEED_URL") or DEFAULT_FEED_URL,
            qdrant_url=os.getenv("QDRANT_URL") or DEFAULT_QDRANT_URL,
            qdrant_path=os.getenv("QDRANT_PATH") or None,
            qdrant_api_key=os.getenv("QDRANT_API_KEY") or None,
            top_k=_env_int("TOP_K", 3),
            min_relevance=_env_float("MIN_RELEVANCE", DEFAULT_MIN_RELEVANCE),
            line_budget=_env_int("LINE_BUDGET", DEFAULT_LINE_BUDGET),
            paragraph_budget=_env_int("PARAGRAPH_BUDGET", DEFAULT_PARAGRAPH_BUDGET),
            chunk_unit=os.getenv("CHUNK_UNIT") or "chars",
            language_code=os.getenv("TRANSCRIPT_LANGUAGE") or None,
            log_file=os.getenv("LOG_FILE") or DEFAULT_LOG_FILE,
        )

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "QnaConfig":
        """Build a configuration from the environment, then apply command-line overrides."""
        config = cls.from_env()
        names = {f.name for f in fields(cls)}
        for name, value in vars(args).items():
            if name in names and value is not None:
                setattr(config, name, value)
        return config

    def validate(self) -> "QnaConfig":
        """
        Check credentials and numeric settings before any network activity.

        Raises:
            ConfigurationError: Listing every missing or invalid setting
        """
        problems = []
        env_names = {
            "openai_api_key": "OPENAI_API_KEY",
            "assemblyai_api_key": "ASSEMBLYAI_API_KEY",
        }
        for name in self.required:
            if not getattr(self, name):
                problems.append(f"{env_names.get(name, name.upper())} is required")

        if self.top_k < 1:
            problems.append(f"top_k must be at least 1, got {self.top_k}")
        if not 0.0 <= self.min_relevance <= 1.0:
            problems.append(
                f"min_relevance must be between 0 and 1, got {self.min_relevance}"
            )
        if self.line_budget < 1 or self.paragraph_budget < 1:
            problems.append(
                f"chunk budgets must be positive, got {self.line_budget}/{self.paragraph_budget}"
            )
        if self.chunk_unit not in CHUNK_UNITS:
            problems.append(
                f"chunk_unit must be one of {CHUNK_UNITS}, got {self.chunk_unit!r}"
            )

        if problems:
            raise ConfigurationError(
                "Invalid configuration: " + "; ".join(problems), {"problems": problems}
            )
        return self
