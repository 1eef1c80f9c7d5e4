"""
RSS feed reader for the .NET Rocks! podcast.

Fetches the feed once and turns every ``item`` into an Episode. An item
without a numeric ShowNum link parameter, a title or an enclosure URL is a
fatal parse error: the catalog is never silently shortened.

Usage:
    from podcast_qna.ingestion import fetch_catalog

    catalog = fetch_catalog()
    catalog = fetch_catalog("https://pwop.com/feed.aspx?show=dotnetrocks")
"""

from typing import Optional
from urllib.parse import parse_qs, urlparse

import requests
from bs4 import BeautifulSoup

from podcast_qna.exceptions import BackendError, FeedParseError
from podcast_qna.logger import get_logger, log_function
from podcast_qna.models import Episode


DEFAULT_FEED_URL = "https://pwop.com/feed.aspx?show=dotnetrocks"
SHOW_NUMBER_PARAM = "ShowNum"

logger = get_logger("feed")


def parse_show_number(link: str) -> int:
    """Extract the integer ShowNum query parameter from an episode link.

    Args:
        link: Episode page URL, e.g. "https://www.dotnetrocks.com/?ShowNum=1850"

    Returns:
        The show number

    Raises:
        ValueError: If the parameter is missing or not an integer
    """
    query = parse_qs(urlparse(link.strip()).query)
    # Parameter names are matched case-insensitively
    values = next(
        (v for k, v in query.items() if k.lower() == SHOW_NUMBER_PARAM.lower()), None
    )
    if not values:
        raise ValueError(f"no {SHOW_NUMBER_PARAM} parameter in link {link!r}")
    return int(values[0])


def parse_catalog(xml: str | bytes) -> list[Episode]:
    """
    Parse an RSS document into the ordered episode catalog.

    Args:
        xml: Raw RSS document

    Returns:
        Episodes in feed order, with 1-based display index

    Raises:
        FeedParseError: If an item is incomplete or show numbers repeat
    """
    soup = BeautifulSoup(xml, "xml")
    episodes: list[Episode] = []
    seen: dict[int, int] = {}

    for position, item in enumerate(soup.find_all("item"), start=1):
        link_tag = item.find("link")
        if link_tag is None or not link_tag.get_text(strip=True):
            raise FeedParseError(
                f"Feed item {position} has no link", {"item": position}
            )
        link = link_tag.get_text(strip=True)
        try:
            number = parse_show_number(link)
        except ValueError as e:
            raise FeedParseError(
                f"Feed item {position} has no numeric {SHOW_NUMBER_PARAM}: {e}",
                {"item": position, "link": link},
            ) from e

        title_tag = item.find("title")
        title = title_tag.get_text(strip=True) if title_tag else ""
        if not title:
            raise FeedParseError(
                f"Feed item {position} (show {number}) has no title",
                {"item": position, "show_number": number},
            )

        enclosure_tag = item.find("enclosure")
        if enclosure_tag is None or not enclosure_tag.get("url"):
            raise FeedParseError(
                f"Feed item {position} (show {number}) has no enclosure url",
                {"item": position, "show_number": number},
            )

        if number in seen:
            raise FeedParseError(
                f"Show number {number} appears twice in the feed (items {seen[number]} and {position})",
                {"show_number": number},
            )
        seen[number] = position

        episodes.append(
            Episode(
                number=number,
                title=title,
                audio_url=enclosure_tag["url"].strip(),
                index=position,
            )
        )

    logger.info(f"Parsed {len(episodes)} episodes from feed")
    return episodes


@log_function(logger_name="podcast_qna.feed", log_execution_time=True)
def fetch_catalog(
    feed_url: Optional[str] = None, timeout: float = 30
) -> list[Episode]:
    """
    Fetch the podcast feed and parse it into episodes.

    Args:
        feed_url: RSS feed URL (default: the .NET Rocks! feed)
        timeout: HTTP timeout in seconds

    Returns:
        Episodes in feed order

    Raises:
        BackendError: If the feed cannot be fetched
        FeedParseError: If an item is incomplete
    """
    url = feed_url or DEFAULT_FEED_URL
    logger.info(f"Fetching feed from {url}...")
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Error fetching feed: {e}")
        raise BackendError(f"Could not fetch feed {url}: {e}", {"url": url}) from e

    return parse_catalog(response.content)
