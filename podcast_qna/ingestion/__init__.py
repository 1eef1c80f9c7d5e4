"""
Ingestion package: reads the podcast RSS feed into Episode records.

Modules:
    feed: feed fetch and item parsing
"""

from .feed import DEFAULT_FEED_URL, fetch_catalog, parse_catalog, parse_show_number

__all__ = [
    "DEFAULT_FEED_URL",
    "fetch_catalog",
    "parse_catalog",
    "parse_show_number",
]
