"""Shared topic data types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# Extracted article text handed to the drafting/fact-check prompts is capped here.
FULL_CONTENT_MAX_CHARS = 4000


@dataclass(frozen=True)
class TopicCandidate:
    """Story suggested by a news provider (pre-fulltext)."""

    title: str
    url: str
    description: str = ""
    source: str = "unknown"


@dataclass(frozen=True)
class Topic:
    """The subject chosen for this run's post.

    `full_content` is empty when no article text could be extracted; the
    drafting and fact-check steps switch behaviour on it.
    """

    title: str
    description: str = ""
    full_content: str = ""
    source: Optional[str] = None

    @property
    def has_context(self) -> bool:
        return bool(self.full_content.strip())

    @classmethod
    def from_candidate(cls, candidate: TopicCandidate, full_content: str = "") -> "Topic":
        return cls(
            title=candidate.title,
            description=candidate.description,
            full_content=full_content[:FULL_CONTENT_MAX_CHARS],
            source=candidate.source,
        )
