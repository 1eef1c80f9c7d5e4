"""
Core transcript Q&A service - stateless retrieval-augmented answering.

Each question is answered on its own: the top passages of the episode's
collection are retrieved, joined into a grounding context and bound with the
question into the Q&A prompt. There is no conversation memory.
"""

from podcast_qna.db import TranscriptIndex
from podcast_qna.llm import ASK_QUESTION_PROMPT, TextGenerator
from podcast_qna.logger import get_logger
from podcast_qna.models import QueryContext


DEFAULT_TOP_K = 3


class TranscriptQAService:
    """
    Answers questions about one episode from its indexed transcript.

    Designed to be driven by the interactive loop, which owns cancellation
    and display.
    """

    def __init__(
        self,
        index: TranscriptIndex,
        generator: TextGenerator,
        top_k: int = DEFAULT_TOP_K,
    ):
        self.index = index
        self.generator = generator
        self.top_k = top_k
        self.logger = get_logger("query")

    def retrieve(self, collection_id: str, question: str) -> QueryContext:
        """
        Retrieve the passages most relevant to a question.

        Args:
            collection_id: Collection of the current episode
            question: User's question

        Returns:
            QueryContext with up to top_k passages, most similar first
        """
        passages = self.index.search(collection_id, question, k=self.top_k)
        if not passages:
            self.logger.warning(
                f"No context retrieved from '{collection_id}' for question: {question[:50]}"
            )
        return QueryContext(question=question, retrieved_passages=tuple(passages))

    def answer(self, context: QueryContext) -> str:
        """
        Generate an answer grounded in the retrieved passages.

        An empty context is passed through; the model is still asked.
        """
        self.logger.debug(f"Processing query: {context.question[:50]}...")
        return self.generator.generate(
            ASK_QUESTION_PROMPT,
            transcript=context.grounding_context,
            question=context.question,
        )

    def get_status(self) -> dict:
        """
        Get service status and configuration info.

        Returns:
            Dictionary with service status information
        """
        return {
            "service_type": "stateless",
            "top_k": self.top_k,
            "min_relevance": self.index.min_relevance,
        }
