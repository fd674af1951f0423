"""Topic acquisition across all news providers.

Fan-out/fan-in: the providers are queried concurrently, merged, shuffled
with an injected random source, then the first few candidates are tried for
fulltext until one yields enough material.
"""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from autoblog.extraction.fulltext import extract
from autoblog.generation.outcomes import Outcome
from autoblog.ingestion.sources import BaseSource
from autoblog.ingestion.topic_types import FULL_CONTENT_MAX_CHARS, Topic, TopicCandidate

logger = logging.getLogger(__name__)

MIN_CONTENT_CHARS = 500
EXTRACTION_ATTEMPTS = 3


def _fetch_source(source: BaseSource) -> Outcome[List[TopicCandidate]]:
    try:
        items = source.fetch()
    except Exception as e:
        logger.warning(f"{source.name} fetch failed: {e}")
        return Outcome.degraded(str(e), value=[], source=source.name)
    return Outcome.success(list(items or []), source=source.name)


class TopicAggregator:
    def __init__(
        self,
        sources: Sequence[BaseSource],
        *,
        extractor: Callable[[str], str] = extract,
        rng: Optional[random.Random] = None,
        min_content_chars: int = MIN_CONTENT_CHARS,
        attempts: int = EXTRACTION_ATTEMPTS,
    ):
        self.sources = list(sources)
        self.extractor = extractor
        self.rng = rng or random.Random()
        self.min_content_chars = min_content_chars
        self.attempts = attempts

    def gather(self) -> List[TopicCandidate]:
        """Query every provider concurrently; return all candidates shuffled."""
        if not self.sources:
            return []
        with ThreadPoolExecutor(max_workers=len(self.sources)) as pool:
            outcomes = list(pool.map(_fetch_source, self.sources))

        candidates: List[TopicCandidate] = []
        for outcome in outcomes:
            logger.info(f"{outcome.source}: {len(outcome.value or [])} candidates ({outcome.status})")
            candidates.extend(outcome.value or [])
        self.rng.shuffle(candidates)
        return candidates

    def acquire(self) -> Optional[Topic]:
        logger.info("Fetching topic suggestions...")
        candidates = self.gather()
        if not candidates:
            logger.info("No tech stories found from sources")
            return None

        for candidate in candidates[: self.attempts]:
            logger.info(f"Extracting content from: {candidate.title}")
            try:
                text = self.extractor(candidate.url) or ""
            except Exception as e:
                logger.warning(f"Extractor raised for {candidate.url}: {e}")
                text = ""
            if len(text) > self.min_content_chars:
                logger.info(f"Found suitable story from {candidate.source}")
                return Topic.from_candidate(candidate, text[:FULL_CONTENT_MAX_CHARS])

        fallback = candidates[0]
        logger.warning(f"Using fallback story without context: {fallback.title}")
        return Topic.from_candidate(fallback, "")
