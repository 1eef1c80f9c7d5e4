"""
Command-line entry point of the .NET Rocks! Q&A assistant.

Pick a show from the podcast feed, have it transcribed and indexed (once),
then ask questions about it.

Usage:
    python -m podcast_qna
    python -m podcast_qna --show 2
    python -m podcast_qna --qdrant-path data/qdrant --verbose
"""

import argparse
import asyncio
import functools
import signal
import sys
from typing import Optional

from rich.console import Console

from podcast_qna import __version__
from podcast_qna.cancellation import CancellationToken
from podcast_qna.chunker import CHUNK_UNITS
from podcast_qna.cli_chat import LoopState
from podcast_qna.config import QnaConfig
from podcast_qna.db import TranscriptIndex, get_qdrant_client
from podcast_qna.exceptions import (
    ConfigurationError,
    OperationCancelled,
    PodcastQnaError,
)
from podcast_qna.ingestion import fetch_catalog
from podcast_qna.llm import TextGenerator, init_embed_model_openai, init_llm_openai
from podcast_qna.logger import ROOT_LOGGER_NAME, get_logger, setup_logging
from podcast_qna.pipeline import run_workflow
from podcast_qna.query import TranscriptQAService
from podcast_qna.transcription import transcribe


EXIT_CANCELLED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podcast-qna",
        description="Ask questions about a .NET Rocks! podcast show",
        epilog="""
Examples:
  python -m podcast_qna
  python -m podcast_qna --show 2
  python -m podcast_qna --show "blazor" --qdrant-path data/qdrant

Required environment variables (or flags):
  OPENAI_API_KEY      - OpenAI API key (completion and embeddings)
  ASSEMBLYAI_API_KEY  - AssemblyAI API key (transcription)

Optional environment variables:
  FEED_URL, COMPLETION_MODEL, EMBEDDING_MODEL, QDRANT_URL, QDRANT_PATH,
  QDRANT_API_KEY, TOP_K, MIN_RELEVANCE, LINE_BUDGET, PARAGRAPH_BUDGET,
  CHUNK_UNIT, TRANSCRIPT_LANGUAGE, LOG_FILE
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--show", help="Show to pick (display number or title), skips the listing")
    parser.add_argument("--feed-url", help="Podcast RSS feed URL")
    parser.add_argument("--openai-api-key", help="OpenAI API key")
    parser.add_argument("--assemblyai-api-key", help="AssemblyAI API key")
    parser.add_argument("--completion-model", help="OpenAI completion model")
    parser.add_argument("--embedding-model", help="OpenAI embedding model")
    parser.add_argument("--qdrant-url", help="Qdrant server URL")
    parser.add_argument("--qdrant-path", help="Use an embedded Qdrant store in this directory")
    parser.add_argument("--top-k", type=int, help="Passages retrieved per question")
    parser.add_argument(
        "--min-relevance", type=float, help="Minimum similarity score of a retrieved passage"
    )
    parser.add_argument("--line-budget", type=int, help="Maximum length of a transcript line")
    parser.add_argument(
        "--paragraph-budget", type=int, help="Maximum length of an indexed passage"
    )
    parser.add_argument(
        "--chunk-unit", choices=CHUNK_UNITS, help="Unit of the chunk budgets"
    )
    parser.add_argument("--language-code", help="Transcription language code, e.g. en")
    parser.add_argument("--log-file", help="Log file path")
    parser.add_argument(
        "--verbose", "-v", action="store_true", default=None, help="Also log to the console"
    )
    return parser


def _install_interrupt_handler(
    loop: asyncio.AbstractEventLoop, cancellation: CancellationToken
) -> bool:
    try:
        loop.add_signal_handler(signal.SIGINT, cancellation.cancel)
        return True
    except (NotImplementedError, RuntimeError):
        # No loop signal handlers on this platform; KeyboardInterrupt ends the run
        return False


async def run(config: QnaConfig, console: Console) -> LoopState:
    """Build the backends once and run the interactive workflow."""
    loop = asyncio.get_running_loop()
    cancellation = CancellationToken(loop)
    handler_installed = _install_interrupt_handler(loop, cancellation)

    selection_generator = TextGenerator(init_llm_openai(config, temperature=0.0))
    qa_generator = TextGenerator(init_llm_openai(config))
    embed_model = init_embed_model_openai(config)

    catalog_reader = functools.partial(fetch_catalog, config.feed_url)
    transcriber = functools.partial(
        transcribe,
        api_key=config.assemblyai_api_key,
        line_budget=config.line_budget,
        paragraph_budget=config.paragraph_budget,
        unit=config.chunk_unit,
        language_code=config.language_code,
    )

    try:
        with get_qdrant_client(
            url=config.qdrant_url, path=config.qdrant_path, api_key=config.qdrant_api_key
        ) as client:
            index = TranscriptIndex(client, embed_model, min_relevance=config.min_relevance)
            info = await cancellation.run(index.get_info)
            get_logger("cli").info(
                f"Vector store holds {info['collection_count']} transcribed show(s): "
                f"{', '.join(info['collections']) or 'none'}"
            )
            service = TranscriptQAService(index, qa_generator, top_k=config.top_k)
            return await run_workflow(
                catalog_reader,
                selection_generator,
                index,
                transcriber,
                service,
                console,
                cancellation,
                show_query=config.show,
            )
    finally:
        if handler_installed:
            loop.remove_signal_handler(signal.SIGINT)


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point with argument parsing"""
    args = build_parser().parse_args(argv)
    console = Console()

    try:
        config = QnaConfig.from_args(args)
        setup_logging(ROOT_LOGGER_NAME, config.log_file, verbose=config.verbose)
        config.validate()
    except ConfigurationError as e:
        console.print(f"Configuration error: {e.message}", style="red", markup=False)
        console.print("Add the required API keys to your .env file or pass them as flags.")
        return 1

    logger = get_logger("cli")
    logger.info(f"Starting podcast-qna {__version__} with feed {config.feed_url}")

    try:
        final_state = asyncio.run(run(config, console))
    except (OperationCancelled, KeyboardInterrupt):
        logger.info("Run cancelled by user")
        console.print("\nGoodbye!")
        return EXIT_CANCELLED
    except PodcastQnaError as e:
        logger.error(f"{type(e).__name__}: {e.message}")
        console.print(f"Error: {e.message}", style="red", markup=False)
        return 1

    console.print("Goodbye!")
    return EXIT_CANCELLED if final_state is LoopState.CANCELLED else 0


if __name__ == "__main__":
    sys.exit(main())
