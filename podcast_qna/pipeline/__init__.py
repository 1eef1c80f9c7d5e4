"""
Podcast Q&A workflow.

This module orchestrates the complete interactive session:
    1. Feed fetch and show selection (podcast_qna.ingestion, podcast_qna.selection)
    2. Transcription and chunking, skipped for indexed shows (podcast_qna.transcription)
    3. Indexing (podcast_qna.db)
    4. Question answering (podcast_qna.cli_chat)

Usage:
    python -m podcast_qna
    python -m podcast_qna --show 2
"""

from .orchestrator import pick_show, run_workflow, transcribe_show

__all__ = [
    "pick_show",
    "run_workflow",
    "transcribe_show",
]
