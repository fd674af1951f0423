"""Topic providers for the blog generator.

Three independent sources feed the aggregator:
- a curated tech RSS feed (one picked at random per run)
- Hacker News top stories
- The Guardian technology section (only when GUARDIAN_KEY is set)

Each provider normalizes into TopicCandidate and raises on transport errors;
isolation of failures is the aggregator's job.
"""

from __future__ import annotations

import random
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import feedparser
import requests

from autoblog.config import USER_AGENT
from autoblog.ingestion.topic_types import TopicCandidate

FEED_TIMEOUT = 10
API_TIMEOUT = 15
MAX_MATCHES = 5

TECH_FEEDS = [
    "https://techcrunch.com/feed/",
    "https://www.theverge.com/rss/index.xml",
    "https://feeds.arstechnica.com/arstechnica/index",
    "https://www.wired.com/feed/rss",
    "https://venturebeat.com/feed/",
    "https://mashable.com/feeds/rss/all",
    "https://www.engadget.com/rss.xml",
]

TECH_KEYWORDS = [
    "ai", "artificial intelligence", "machine learning", "deep learning",
    "blockchain", "cryptocurrency", "bitcoin", "ethereum", "web3",
    "startup", "funding", "venture capital", "ipo",
    "software", "programming", "developer", "api",
    "cloud", "aws", "azure", "google cloud",
    "mobile", "app", "ios", "android",
    "data", "analytics", "big data",
    "cybersecurity", "privacy", "security",
    "iot", "internet of things", "smart",
    "robotics", "automation", "tech",
]


def is_tech_related(text: str) -> bool:
    """Substring match against the tech keyword allowlist (case-insensitive)."""
    lower = (text or "").lower()
    return any(keyword in lower for keyword in TECH_KEYWORDS)


def _strip_html(text: str) -> str:
    return re.sub(r"\s+", " ", re.sub(r"<[^>]+>", "", text or "")).strip()


class BaseSource:
    name: str = "base"

    def fetch(self) -> List[TopicCandidate]:
        raise NotImplementedError


@dataclass(frozen=True)
class RSSFeedSource(BaseSource):
    """Reads one randomly chosen feed from the pool per fetch."""

    feeds: Sequence[str] = tuple(TECH_FEEDS)
    rng: random.Random = field(default_factory=random.Random)
    limit: int = MAX_MATCHES

    name: str = "RSS"

    def pick_feed(self) -> str:
        return self.rng.choice(list(self.feeds))

    def fetch(self) -> List[TopicCandidate]:
        feed_url = self.pick_feed()
        resp = requests.get(feed_url, headers={"User-Agent": USER_AGENT}, timeout=FEED_TIMEOUT)
        resp.raise_for_status()
        parsed = feedparser.parse(resp.content)
        if parsed.bozo and not parsed.entries:
            raise ValueError(f"unparseable feed {feed_url}: {parsed.get('bozo_exception')}")

        out: List[TopicCandidate] = []
        for entry in parsed.entries or []:
            title = (entry.get("title") or "").strip()
            link = (entry.get("link") or "").strip()
            if not title or not link:
                continue
            summary = _strip_html(entry.get("summary") or entry.get("description") or "")
            if not is_tech_related(f"{title} {summary}"):
                continue
            out.append(TopicCandidate(title=title, url=link, description=summary, source=self.name))
            if len(out) >= self.limit:
                break
        return out


@dataclass(frozen=True)
class HackerNewsSource(BaseSource):
    """Walks the ranked top-story list until enough tech links are found."""

    endpoint: str = "https://hacker-news.firebaseio.com/v0"
    max_ids: int = 20
    limit: int = MAX_MATCHES

    name: str = "Hacker News"

    def _get_json(self, path: str):
        resp = requests.get(f"{self.endpoint}/{path}", headers={"User-Agent": USER_AGENT}, timeout=API_TIMEOUT)
        resp.raise_for_status()
        return resp.json()

    def fetch(self) -> List[TopicCandidate]:
        ids = self._get_json("topstories.json") or []
        if not isinstance(ids, list):
            raise ValueError("topstories payload is not a list")

        out: List[TopicCandidate] = []
        for story_id in ids[: self.max_ids]:
            try:
                item = self._get_json(f"item/{story_id}.json") or {}
            except (requests.RequestException, ValueError):
                continue
            if not isinstance(item, dict):
                continue
            url = item.get("url")
            title = (item.get("title") or "").strip()
            if url and title and is_tech_related(title):
                out.append(TopicCandidate(title=title, url=url, description="", source=self.name))
            if len(out) >= self.limit:
                break
        return out


@dataclass(frozen=True)
class GuardianSource(BaseSource):
    """Guardian Open Platform search, technology section."""

    api_key: Optional[str] = None
    endpoint: str = "https://content.guardianapis.com/search"
    page_size: int = 10

    name: str = "Guardian"

    def fetch(self) -> List[TopicCandidate]:
        if not self.api_key:
            return []
        params = {
            "section": "technology",
            "page-size": self.page_size,
            "show-fields": "trailText",
            "api-key": self.api_key,
        }
        resp = requests.get(self.endpoint, params=params, headers={"User-Agent": USER_AGENT}, timeout=API_TIMEOUT)
        resp.raise_for_status()
        data = resp.json() or {}
        results = (data.get("response") or {}).get("results") or []

        out: List[TopicCandidate] = []
        for item in results:
            if not isinstance(item, dict):
                continue
            title = (item.get("webTitle") or "").strip()
            url = (item.get("webUrl") or "").strip()
            if not title or not url:
                continue
            fields = item.get("fields") or {}
            out.append(
                TopicCandidate(
                    title=title,
                    url=url,
                    description=_strip_html(fields.get("trailText") or ""),
                    source=self.name,
                )
            )
        return out[: self.page_size]


def default_sources(*, guardian_key: Optional[str] = None, rng: Optional[random.Random] = None) -> List[BaseSource]:
    """The three providers in their canonical order (order is irrelevant after shuffling)."""
    rng = rng or random.Random()
    return [
        GuardianSource(api_key=guardian_key),
        HackerNewsSource(),
        RSSFeedSource(rng=rng),
    ]
