"""
Speech-to-text for podcast episodes using AssemblyAI.

AssemblyAI fetches the audio itself from the episode's enclosure URL, so
nothing is downloaded locally. The call blocks until the transcript is
complete, which can take several minutes for a full show.
"""

import time
from typing import Optional

import assemblyai as aai

from podcast_qna.chunker import (
    DEFAULT_LINE_BUDGET,
    DEFAULT_PARAGRAPH_BUDGET,
    chunk_transcript,
)
from podcast_qna.exceptions import BackendError, ConfigurationError
from podcast_qna.logger import get_logger, log_function
from podcast_qna.models import TranscriptChunk


@log_function(logger_name="podcast_qna.transcription", log_execution_time=True)
def transcribe_audio_url(
    audio_url: str, api_key: str, language_code: Optional[str] = None
) -> str:
    """
    Transcribe a remote audio file with AssemblyAI.

    Args:
        audio_url: Public URL of the episode audio
        api_key: AssemblyAI API key
        language_code: Optional language code (AssemblyAI default when None)

    Returns:
        Full transcript text ("" when nothing was recognised)

    Raises:
        ConfigurationError: If the API key is empty
        BackendError: If the transcription fails
    """
    logger = get_logger("transcription")

    if not api_key:
        raise ConfigurationError("ASSEMBLYAI_API_KEY is required for transcription")

    aai.settings.api_key = api_key
    config = aai.TranscriptionConfig(
        language_code=language_code,
        punctuate=True,
        format_text=True,
    )

    logger.info(f"Starting AssemblyAI transcription of {audio_url}")
    start_time = time.time()

    try:
        transcript = aai.Transcriber(config=config).transcribe(audio_url)
    except Exception as e:
        logger.error(f"AssemblyAI transcription failed: {e}")
        raise BackendError(
            f"AssemblyAI transcription failed: {e}", {"audio_url": audio_url}
        ) from e

    if transcript.status == aai.TranscriptStatus.error:
        logger.error(f"AssemblyAI transcription failed: {transcript.error}")
        raise BackendError(
            f"AssemblyAI transcription failed: {transcript.error}",
            {"audio_url": audio_url},
        )

    text = transcript.text or ""
    logger.info(
        f"AssemblyAI transcription completed in {time.time() - start_time:.2f}s "
        f"({len(text)} characters)"
    )
    return text


def transcribe(
    audio_url: str,
    collection_id: str,
    api_key: str,
    line_budget: int = DEFAULT_LINE_BUDGET,
    paragraph_budget: int = DEFAULT_PARAGRAPH_BUDGET,
    unit: str = "chars",
    language_code: Optional[str] = None,
) -> list[TranscriptChunk]:
    """Transcribe an episode and chunk the transcript for indexing."""
    text = transcribe_audio_url(audio_url, api_key, language_code=language_code)
    return chunk_transcript(
        text,
        collection_id,
        line_budget=line_budget,
        paragraph_budget=paragraph_budget,
        unit=unit,
    )
