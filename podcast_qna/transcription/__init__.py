# Transcription module - turns an episode audio URL into transcript chunks

from podcast_qna.transcription.transcript import transcribe, transcribe_audio_url

__all__ = [
    "transcribe",
    "transcribe_audio_url",
]
