"""
Tests for AssemblyAI transcription, with the AssemblyAI client patched.
"""
from unittest.mock import MagicMock, patch

import assemblyai as aai
import pytest

from podcast_qna.exceptions import BackendError, ConfigurationError
from podcast_qna.transcription import transcribe, transcribe_audio_url


AUDIO_URL = "https://example.com/dnr1000.mp3"


def fake_transcript(text="", status=aai.TranscriptStatus.completed, error=None):
    transcript = MagicMock()
    transcript.text = text
    transcript.status = status
    transcript.error = error
    return transcript


@patch("podcast_qna.transcription.transcript.aai.Transcriber")
def test_transcribes_remote_url(mock_transcriber):
    mock_transcriber.return_value.transcribe.return_value = fake_transcript("Hello and welcome.")

    text = transcribe_audio_url(AUDIO_URL, "aai-key", language_code="en")

    assert text == "Hello and welcome."
    mock_transcriber.return_value.transcribe.assert_called_once_with(AUDIO_URL)
    assert mock_transcriber.call_args.kwargs["config"].language_code == "en"


@patch("podcast_qna.transcription.transcript.aai.Transcriber")
def test_no_speech_is_empty_text(mock_transcriber):
    mock_transcriber.return_value.transcribe.return_value = fake_transcript(None)

    assert transcribe_audio_url(AUDIO_URL, "aai-key") == ""


@patch("podcast_qna.transcription.transcript.aai.Transcriber")
def test_error_status_is_backend_error(mock_transcriber):
    mock_transcriber.return_value.transcribe.return_value = fake_transcript(
        status=aai.TranscriptStatus.error, error="audio url unreachable"
    )

    with pytest.raises(BackendError, match="audio url unreachable"):
        transcribe_audio_url(AUDIO_URL, "aai-key")


@patch("podcast_qna.transcription.transcript.aai.Transcriber")
def test_client_exception_is_backend_error(mock_transcriber):
    mock_transcriber.return_value.transcribe.side_effect = RuntimeError("timeout")

    with pytest.raises(BackendError) as exc_info:
        transcribe_audio_url(AUDIO_URL, "aai-key")
    assert exc_info.value.details["audio_url"] == AUDIO_URL


def test_missing_api_key():
    with pytest.raises(ConfigurationError):
        transcribe_audio_url(AUDIO_URL, "")


@patch("podcast_qna.transcription.transcript.aai.Transcriber")
def test_transcribe_returns_chunks(mock_transcriber):
    mock_transcriber.return_value.transcribe.return_value = fake_transcript(
        "First line of the show.\nSecond line of the show."
    )

    chunks = transcribe(AUDIO_URL, "Transcript_1000", "aai-key", paragraph_budget=30)

    assert [c.text for c in chunks] == ["First line of the show.", "Second line of the show."]
    assert [c.ordinal for c in chunks] == [0, 1]
