"""This package contains modules related to large language models (LLMs).
prompts.py : Instruction prompts for show listing, show picking and Q&A
openai.py : OpenAI completion and embedding model initialization
generator.py : Prompt rendering and completion
"""

from .generator import TextGenerator
from .openai import init_embed_model_openai, init_llm_openai
from .prompts import ASK_QUESTION_PROMPT, LIST_SHOWS_PROMPT, PICK_SHOW_PROMPT


__all__ = [
    "ASK_QUESTION_PROMPT",
    "LIST_SHOWS_PROMPT",
    "PICK_SHOW_PROMPT",
    "TextGenerator",
    "init_embed_model_openai",
    "init_llm_openai",
]
