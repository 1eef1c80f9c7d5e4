from typing import Callable, Optional, Sequence

from rich.console import Console
from rich.text import Text

from podcast_qna.cancellation import CancellationToken
from podcast_qna.cli_chat import LoopState, ask_questions, read_line, status
from podcast_qna.db import TranscriptIndex
from podcast_qna.exceptions import SelectionError
from podcast_qna.llm import TextGenerator
from podcast_qna.logger import get_logger
from podcast_qna.models import Episode, TranscriptChunk
from podcast_qna.query import TranscriptQAService
from podcast_qna.selection import describe_catalog, select_episode


CatalogReader = Callable[[], Sequence[Episode]]
Transcriber = Callable[[str, str], Sequence[TranscriptChunk]]

PICK_PROMPT = "[bold green]Pick a show:[/bold green] "


async def pick_show(
    catalog_reader: CatalogReader,
    generator: TextGenerator,
    console: Console,
    cancellation: CancellationToken,
    query: Optional[str] = None,
) -> Episode:
    """
    Fetch the catalog and let the user pick one episode.

    The catalog listing is printed before input is requested. When a query
    is given up front the listing is skipped.

    Raises:
        SelectionError: If no show is picked or the pick cannot be resolved
    """
    logger = get_logger("pipeline")

    with status(console, "Getting .NET Rocks! shows"):
        catalog = await cancellation.run(catalog_reader)
        logger.info(f"Fetched {len(catalog)} shows")
        shows_list = None
        if query is None:
            shows_list = await cancellation.run(describe_catalog, generator, catalog)

    if shows_list is not None:
        console.print(Text(shows_list))
        console.print()
        query = await read_line(console, PICK_PROMPT, cancellation)

    if query is None or not query.strip():
        raise SelectionError("You have to pick a show.")

    with status(console, "Querying show"):
        episode = await cancellation.run(select_episode, generator, catalog, query)

    console.print(Text.assemble("You picked show: ", (f'"{episode.title}"', "bold")))
    console.print()
    return episode


async def transcribe_show(
    episode: Episode,
    index: TranscriptIndex,
    transcriber: Transcriber,
    console: Console,
    cancellation: CancellationToken,
) -> bool:
    """
    Transcribe and index an episode unless its collection is already committed.

    Returns:
        True if the episode was transcribed, False if it was skipped
    """
    logger = get_logger("pipeline")
    collection_id = episode.collection_id

    if await cancellation.run(index.exists, collection_id):
        logger.info(f"Show {episode.number} already transcribed in '{collection_id}'")
        console.print("Show already transcribed\n")
        return False

    with status(console, "Transcribing show"):
        chunks = await cancellation.run(transcriber, episode.audio_url, collection_id)
        await cancellation.run(
            index.index, collection_id, chunks, should_stop=lambda: cancellation.cancelled
        )

    logger.info(f"Show {episode.number} indexed as {len(chunks)} passages")
    console.print(f"[dim]Transcript stored as {len(chunks)} passages[/dim]\n")
    return True


async def run_workflow(
    catalog_reader: CatalogReader,
    selection_generator: TextGenerator,
    index: TranscriptIndex,
    transcriber: Transcriber,
    service: TranscriptQAService,
    console: Console,
    cancellation: CancellationToken,
    show_query: Optional[str] = None,
) -> LoopState:
    """
    Pick a show, make sure it is transcribed, then answer questions about it.

    Returns:
        Final state of the Q&A loop

    Raises:
        OperationCancelled: If cancelled before the Q&A loop starts
        PodcastQnaError: On any fatal error
    """
    logger = get_logger("pipeline")
    logger.info("=== WORKFLOW STARTED ===")

    episode = await pick_show(
        catalog_reader, selection_generator, console, cancellation, query=show_query
    )
    await transcribe_show(episode, index, transcriber, console, cancellation)
    final_state = await ask_questions(episode, service, console, cancellation)

    logger.info(f"=== WORKFLOW ENDED ({final_state.value}) ===")
    return final_state
