"""Single-post generation pipeline.

AcquireTopic > CheckDuplicate > Draft > FactCheck > AcquireImage > Persist >
UpdateHistory > RegenerateIndexes

Only the duplicate check and the fact-check can abort a run, and both sit
before anything is written to disk.
"""

from __future__ import annotations

import logging
import os
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from autoblog.config import DEFAULT_STATIC_PAGES, Settings
from autoblog.contracts.post_metadata import validate_post_metadata
from autoblog.generation.drafting import draft_post
from autoblog.generation.fact_check import FactCheckResult, fact_check
from autoblog.generation.gemini_client import GeminiClient
from autoblog.generation.outcomes import Outcome
from autoblog.generation.topic_fallback import synthesize
from autoblog.imaging.hero import HeroImageStrategy, acquire_hero_image, default_strategies, save_hero_image
from autoblog.ingestion.aggregator import TopicAggregator
from autoblog.ingestion.sources import default_sources
from autoblog.ingestion.topic_types import Topic
from autoblog.publishing.indexes import regenerate_indexes
from autoblog.publishing.metadata import build_metadata, folder_name_for, resolve_post_date
from autoblog.publishing.post_writer import ASSETS_SUBDIR, POSTS_DIRNAME, write_post_files
from autoblog.storage.history import history_path, is_duplicate_title, load_history, save_history

logger = logging.getLogger(__name__)


class PipelineAborted(Exception):
    """A gate stopped the run. Nothing has been written to disk."""

    stage = "unknown"

    def __init__(self, message: str):
        super().__init__(f"[{self.stage}] {message}")


class DuplicateTopicError(PipelineAborted):
    stage = "check_duplicate"

    def __init__(self, title: str):
        self.title = title
        super().__init__(f'Duplicate title detected: "{title}"')


class FactCheckFailedError(PipelineAborted):
    stage = "fact_check"

    def __init__(self, issues: List[str]):
        self.issues = list(issues)
        super().__init__("Fact-check failed - aborting post generation")


@dataclass
class PipelineOptions:
    output_dir: str = "."
    date: Optional[str] = None
    skip_duplicate_check: bool = False
    site_url: str = "https://example.com"
    site_title: str = "Tech Blog"
    site_description: str = "Latest tech news and insights"
    static_pages: List[str] = field(default_factory=lambda: list(DEFAULT_STATIC_PAGES))
    guardian_key: Optional[str] = None
    seed: Optional[int] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "PipelineOptions":
        return cls(
            output_dir=settings.output_dir,
            date=settings.date_override,
            skip_duplicate_check=settings.skip_duplicate_check,
            site_url=settings.site_url,
            site_title=settings.site_title,
            site_description=settings.site_description,
            static_pages=list(settings.static_pages),
            guardian_key=settings.guardian_key or None,
        )


@dataclass(frozen=True)
class PostResult:
    folder_name: str
    metadata: Dict[str, Any]
    image_path: str
    post_dir: str
    image_source: str = ""


def _acquire_topic(aggregator: TopicAggregator, client: GeminiClient) -> Topic:
    topic = aggregator.acquire()
    if topic is None:
        topic = synthesize(client)
    return topic


def check_duplicate(title: str, history: List[str]) -> Outcome[str]:
    """FATAL when `title` was already published."""
    if is_duplicate_title(title, history):
        return Outcome.fatal_error(f'Duplicate title detected: "{title}"', value=title, source=DuplicateTopicError.stage)
    return Outcome.success(title, source=DuplicateTopicError.stage)


def check_facts(client: GeminiClient, draft: str, topic: Topic) -> Outcome[FactCheckResult]:
    """FATAL when the draft makes claims the topic's article does not support."""
    result = fact_check(client, draft, topic.full_content)
    if not result.ok:
        return Outcome.fatal_error(f"{len(result.issues)} unsupported claims", value=result,
                                   source=FactCheckFailedError.stage)
    return Outcome.success(result, source=FactCheckFailedError.stage)


def generate_blog_post(
    options: Optional[PipelineOptions] = None,
    *,
    client: Optional[GeminiClient] = None,
    aggregator: Optional[TopicAggregator] = None,
    image_strategies: Optional[Sequence[HeroImageStrategy]] = None,
    now: Optional[datetime] = None,
) -> PostResult:
    options = options or PipelineOptions()
    client = client or GeminiClient(os.environ.get("GEMINI_API_KEY", ""))
    if aggregator is None:
        rng = random.Random(options.seed)
        aggregator = TopicAggregator(default_sources(guardian_key=options.guardian_key, rng=rng), rng=rng)
    if image_strategies is None:
        image_strategies = default_strategies(client)

    output_dir = options.output_dir
    date = resolve_post_date(options.date, now=now)
    logger.info("Starting blog post generation...")

    hist_path = history_path(output_dir)
    history = [] if options.skip_duplicate_check else load_history(hist_path)
    logger.info(f"Loaded {len(history)} history entries")

    # AcquireTopic
    topic = _acquire_topic(aggregator, client)
    logger.info(f"Topic: {topic.title} (source: {topic.source or 'unknown'})")

    # CheckDuplicate
    if not options.skip_duplicate_check and check_duplicate(topic.title, history).fatal:
        raise DuplicateTopicError(topic.title)

    # Draft
    logger.info("Drafting post...")
    draft = draft_post(client, topic)

    # FactCheck
    if topic.has_context:
        logger.info("Fact-checking draft...")
        gate = check_facts(client, draft, topic)
        if gate.fatal:
            logger.error(f"Fact-check failed: {gate.reason}")
            for issue in gate.value.issues:
                logger.error(f"  - {issue}")
            raise FactCheckFailedError(gate.value.issues)
        logger.info("Fact-check passed")

    folder_name = folder_name_for(date, topic.title)
    metadata = build_metadata(
        title=topic.title,
        description=topic.description,
        date=date,
        draft=draft,
        folder_name=folder_name,
    )
    errors = validate_post_metadata(metadata)
    if errors:
        raise ValueError("Post metadata failed validation:\n" + "\n".join(f"  - {e}" for e in errors))

    post_dir = os.path.join(output_dir, POSTS_DIRNAME, folder_name)
    assets_dir = os.path.join(output_dir, ASSETS_SUBDIR)
    os.makedirs(post_dir, exist_ok=True)
    os.makedirs(assets_dir, exist_ok=True)

    # AcquireImage
    logger.info("Generating hero image...")
    image_path = os.path.join(assets_dir, f"{folder_name}.png")
    image_source = save_hero_image(acquire_hero_image(topic, image_strategies), image_path)

    # Persist
    write_post_files(post_dir, title=topic.title, draft=draft, metadata=metadata, folder_name=folder_name)

    # UpdateHistory
    if not options.skip_duplicate_check:
        save_history(hist_path, history + [topic.title])
        logger.info("Updated history")

    # RegenerateIndexes
    regenerate_indexes(
        output_dir,
        site_url=options.site_url,
        site_title=options.site_title,
        site_description=options.site_description,
        static_pages=options.static_pages,
    )

    logger.info("Blog post generation completed")
    return PostResult(
        folder_name=folder_name,
        metadata=metadata,
        image_path=image_path,
        post_dir=post_dir,
        image_source=image_source,
    )


def run_once(settings: Settings) -> PostResult:
    """Convenience wrapper: build the client from settings and generate one post."""
    client = GeminiClient(
        settings.gemini_api_key,
        text_model=settings.text_model,
        image_model=settings.image_model,
    )
    return generate_blog_post(PipelineOptions.from_settings(settings), client=client)
