"""
Episode selection through the generation backend.

The backend first renders the catalog as a numbered list for the user, then
resolves the user's free-text pick (display number or partial title) to one
catalog entry returned as JSON.
"""

import json
import re
from typing import Sequence

from podcast_qna.exceptions import SelectionError
from podcast_qna.llm import LIST_SHOWS_PROMPT, PICK_SHOW_PROMPT, TextGenerator
from podcast_qna.logger import get_logger
from podcast_qna.models import Episode


_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)

logger = get_logger("selection")


def catalog_to_json(catalog: Sequence[Episode]) -> str:
    """Serialize the catalog into the JSON array bound into the prompts."""
    return json.dumps([episode.to_dict() for episode in catalog], ensure_ascii=False)


def describe_catalog(generator: TextGenerator, catalog: Sequence[Episode]) -> str:
    """Ask the backend for a human-readable, ordered list of the shows."""
    return generator.generate(LIST_SHOWS_PROMPT, shows=catalog_to_json(catalog))


def parse_episode_reply(reply: str) -> Episode:
    """
    Parse the backend's JSON reply into an Episode.

    Raises:
        SelectionError: If the reply is not a JSON object with the Episode fields
    """
    text = reply.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SelectionError(
            f"Failed to deserialize show: {e}", {"reply": reply}
        ) from e

    if not isinstance(data, dict):
        raise SelectionError(
            "Failed to deserialize show: expected a JSON object", {"reply": reply}
        )

    try:
        return Episode.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise SelectionError(
            f"Failed to deserialize show: invalid field {e}", {"reply": reply}
        ) from e


def select_episode(
    generator: TextGenerator, catalog: Sequence[Episode], query: str
) -> Episode:
    """
    Resolve a user's pick to one catalog episode.

    Args:
        generator: Generation backend
        catalog: Episodes shown to the user
        query: Display number or (partial) title typed by the user

    Returns:
        The catalog's own Episode record

    Raises:
        SelectionError: If the query is blank, the reply cannot be parsed, or
            the resolved show is not in the catalog
    """
    if not query or not query.strip():
        raise SelectionError("You have to pick a show.")

    reply = generator.generate(
        PICK_SHOW_PROMPT, shows=catalog_to_json(catalog), query=query.strip()
    )
    logger.debug(f"Pick reply for {query!r}: {reply}")
    picked = parse_episode_reply(reply)

    by_number = {episode.number: episode for episode in catalog}
    if picked.number not in by_number:
        raise SelectionError(
            f"Show {picked.number} is not in the catalog",
            {"reply": reply, "query": query},
        )

    episode = by_number[picked.number]
    logger.info(f"Query {query!r} resolved to show {episode.number}: {episode.title}")
    return episode
