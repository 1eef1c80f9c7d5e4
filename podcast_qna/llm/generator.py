"""
Text generation backend: renders a prompt template and returns the completion.
"""

from llama_index.core import PromptTemplate
from llama_index.core.llms import LLM

from podcast_qna.exceptions import BackendError
from podcast_qna.logger import get_logger, log_function


class TextGenerator:
    """Binds variables into a prompt template and asks the LLM to complete it."""

    def __init__(self, llm: LLM):
        self.llm = llm
        self.logger = get_logger("llm")

    @log_function(logger_name="podcast_qna.llm", log_execution_time=True)
    def generate(self, template: PromptTemplate, **variables: str) -> str:
        """
        Complete a prompt template.

        Args:
            template: Prompt with {placeholders}
            **variables: Values for every placeholder of the template

        Returns:
            The completion text, stripped

        Raises:
            BackendError: If the completion backend fails
        """
        prompt = template.format(**variables)
        self.logger.debug(f"Prompt ({len(prompt)} characters): {prompt[:200]}...")
        try:
            response = self.llm.complete(prompt)
        except Exception as e:
            self.logger.error(f"Completion backend failed: {e}")
            raise BackendError(f"Completion backend failed: {e}") from e

        text = (response.text or "").strip()
        self.logger.debug(f"Generated response: {len(text)} characters")
        return text
