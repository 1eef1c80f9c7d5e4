"""
Interactive Q&A loop over one episode's transcript.

The loop cycles WAITING_FOR_QUESTION -> RETRIEVING -> GENERATING ->
DISPLAYING until end of input, an exit command or cancellation. Once
cancellation is observed nothing more is printed for the current question.
"""

from enum import Enum

from rich.console import Console
from rich.text import Text

from podcast_qna.cancellation import CancellationToken
from podcast_qna.exceptions import OperationCancelled
from podcast_qna.logger import get_logger
from podcast_qna.models import Episode
from podcast_qna.query import TranscriptQAService
from .console import read_line, status


EXIT_COMMANDS = ("exit", "quit", "/quit", "/q")
QUESTION_PROMPT = "[bold green]Ask a question:[/bold green] "
NO_CONTEXT_MESSAGE = "No context retrieved from transcript vector DB."


class LoopState(Enum):
    WAITING_FOR_QUESTION = "waiting_for_question"
    RETRIEVING = "retrieving"
    GENERATING = "generating"
    DISPLAYING = "displaying"
    FINISHED = "finished"
    CANCELLED = "cancelled"


class QASession:
    """
    Question/answer loop for a picked episode.

    Args:
        episode: Episode whose collection is queried
        service: Retrieval and generation service
        console: Rich console used for prompts and answers
        cancellation: Token observed at every loop boundary and backend call
    """

    def __init__(
        self,
        episode: Episode,
        service: TranscriptQAService,
        console: Console,
        cancellation: CancellationToken,
    ):
        self.episode = episode
        self.service = service
        self.console = console
        self.cancellation = cancellation
        self.state = LoopState.WAITING_FOR_QUESTION
        self.transitions: list[LoopState] = []
        self.logger = get_logger("chat")

    def _enter(self, state: LoopState) -> None:
        self.logger.debug(f"Q&A loop: {self.state.value} -> {state.value}")
        self.state = state
        self.transitions.append(state)

    async def _answer(self, question: str) -> str:
        with status(self.console, "Generating answers"):
            self._enter(LoopState.RETRIEVING)
            context = await self.cancellation.run(
                self.service.retrieve, self.episode.collection_id, question
            )
            if context.is_empty:
                self.console.print(f"[yellow]{NO_CONTEXT_MESSAGE}[/yellow]\n")

            self._enter(LoopState.GENERATING)
            return await self.cancellation.run(self.service.answer, context)

    async def run(self) -> LoopState:
        """
        Run the loop until end of input, an exit command or cancellation.

        Returns:
            LoopState.FINISHED or LoopState.CANCELLED

        Raises:
            BackendError: If retrieval or generation fails
        """
        try:
            while True:
                self.cancellation.raise_if_cancelled()
                self._enter(LoopState.WAITING_FOR_QUESTION)
                question = await read_line(self.console, QUESTION_PROMPT, self.cancellation)

                if question is None:
                    self.console.print()
                    break
                question = question.strip()
                if not question:
                    continue
                if question.lower() in EXIT_COMMANDS:
                    break

                answer = await self._answer(question)
                self.cancellation.raise_if_cancelled()

                self._enter(LoopState.DISPLAYING)
                self.console.print(Text.assemble(("Answer: ", "bold blue"), answer))
                self.console.print()

        except OperationCancelled:
            self.logger.info("Q&A loop cancelled")
            self._enter(LoopState.CANCELLED)
            return self.state

        self._enter(LoopState.FINISHED)
        return self.state


async def ask_questions(
    episode: Episode,
    service: TranscriptQAService,
    console: Console,
    cancellation: CancellationToken,
) -> LoopState:
    """Print the session banner and run the Q&A loop for an episode."""
    settings = service.get_status()
    console.print(
        Text.assemble(
            ("Ask anything about ", "dim"),
            (episode.title, "bold"),
            (f" (top {settings['top_k']} passages). Type 'exit' or press Ctrl+C to quit.", "dim"),
        )
    )
    return await QASession(episode, service, console, cancellation).run()
