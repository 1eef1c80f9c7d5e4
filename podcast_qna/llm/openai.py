from llama_index.embeddings.openai import OpenAIEmbedding
from llama_index.llms.openai import OpenAI

from podcast_qna.config import QnaConfig
from podcast_qna.exceptions import ConfigurationError


DEFAULT_TEMPERATURE = 0.7


def init_llm_openai(config: QnaConfig, temperature: float = DEFAULT_TEMPERATURE) -> OpenAI:
    """
    Initialize the OpenAI completion model.

    Args:
        config: Validated configuration
        temperature: Sampling temperature (0 for deterministic selection prompts)

    Returns:
        llama-index OpenAI LLM instance

    Raises:
        ConfigurationError: If OPENAI_API_KEY is missing
    """
    if not config.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY not found in environment variables.")
    return OpenAI(
        model=config.completion_model,
        api_key=config.openai_api_key,
        temperature=temperature,
    )


def init_embed_model_openai(config: QnaConfig) -> OpenAIEmbedding:
    """
    Initialize the OpenAI embedding model used for transcript chunks and questions.

    Raises:
        ConfigurationError: If OPENAI_API_KEY is missing
    """
    if not config.openai_api_key:
        raise ConfigurationError("OPENAI_API_KEY not found in environment variables.")
    return OpenAIEmbedding(
        model=config.embedding_model,
        api_key=config.openai_api_key,
    )
