from .selector import (
    catalog_to_json,
    describe_catalog,
    parse_episode_reply,
    select_episode,
)

__all__ = [
    "catalog_to_json",
    "describe_catalog",
    "parse_episode_reply",
    "select_episode",
]
