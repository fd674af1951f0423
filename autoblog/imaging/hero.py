"""Hero image acquisition as an ordered fallback chain.

Strategies are tried in order and the first one producing a plausible
payload wins. The placeholder strategy sits last and cannot fail, so
acquisition always resolves to an image.
"""

from __future__ import annotations

import logging
import os
from typing import List, Optional, Sequence

from autoblog.generation.gemini_client import GeminiClient, GeminiError
from autoblog.generation.outcomes import Outcome
from autoblog.imaging.optimize import save_and_optimize_image
from autoblog.imaging.placeholder import render_placeholder, write_placeholder
from autoblog.ingestion.topic_types import Topic

logger = logging.getLogger(__name__)

# Payloads below this many bytes are treated as corrupt (sanity check, not a format check).
MIN_IMAGE_BYTES = 100

PLACEHOLDER = "placeholder"


class ImageGenerationError(Exception):
    pass


def build_image_prompt(title: str) -> str:
    return (
        f'Generate a visually appealing, abstract 16:9 hero image for a tech blog about "{title}". '
        "The image must NOT contain any text, letters, numbers, captions, or watermarks; pure imagery only."
    )


class HeroImageStrategy:
    name: str = "base"

    def produce(self, topic: Topic) -> bytes:
        raise NotImplementedError


class GeminiHeroImage(HeroImageStrategy):
    name = "gemini"

    def __init__(self, client: GeminiClient):
        self.client = client

    def produce(self, topic: Topic) -> bytes:
        try:
            return self.client.generate_image(build_image_prompt(topic.title))
        except GeminiError as e:
            raise ImageGenerationError(str(e)) from e


class PlaceholderHeroImage(HeroImageStrategy):
    name = PLACEHOLDER

    def produce(self, topic: Topic) -> bytes:
        return render_placeholder()


def default_strategies(client: GeminiClient) -> List[HeroImageStrategy]:
    return [GeminiHeroImage(client), PlaceholderHeroImage()]


def acquire_hero_image(
    topic: Topic,
    strategies: Sequence[HeroImageStrategy],
    *,
    min_bytes: int = MIN_IMAGE_BYTES,
) -> Outcome[bytes]:
    """SUCCESS when the first strategy delivered, DEGRADED when a later one did."""
    reasons: List[str] = []
    for i, strategy in enumerate(strategies):
        try:
            data = strategy.produce(topic)
        except Exception as e:
            reasons.append(f"{strategy.name}: {e}")
            logger.warning(f"Hero image strategy {strategy.name} failed: {e}")
            continue
        if not data or len(data) < min_bytes:
            size = len(data or b"")
            reasons.append(f"{strategy.name}: payload too small ({size} bytes)")
            logger.warning(f"Hero image strategy {strategy.name} returned {size} bytes, treating as failure")
            continue
        if i == 0:
            return Outcome.success(data, source=strategy.name)
        return Outcome.degraded("; ".join(reasons), value=data, source=strategy.name)

    logger.warning("Hero image generation failed, creating placeholder")
    return Outcome.degraded("; ".join(reasons) or "no strategies", value=render_placeholder(), source=PLACEHOLDER)


def save_hero_image(outcome: Outcome[bytes], image_path: str) -> str:
    """Write the acquired image; returns the name of the strategy that ended up on disk.

    Generated payloads go through the optimizer (and compression log). If the
    optimizer cannot decode them, the placeholder is written instead.
    """
    if outcome.source != PLACEHOLDER and outcome.value:
        try:
            save_and_optimize_image(outcome.value, image_path)
            logger.info(f"Saved hero image: {image_path}")
            return outcome.source
        except (OSError, ValueError) as e:
            logger.warning(f"Could not optimize generated image ({e}), creating placeholder")
        write_placeholder(image_path)
        return PLACEHOLDER

    logger.warning("Using placeholder hero image")
    if outcome.value:
        os.makedirs(os.path.dirname(image_path) or ".", exist_ok=True)
        with open(image_path, "wb") as f:
            f.write(outcome.value)
    else:
        write_placeholder(image_path)
    return PLACEHOLDER


def provide_hero_image(topic: Topic, image_path: str, strategies: Optional[Sequence[HeroImageStrategy]] = None,
                       *, client: Optional[GeminiClient] = None, min_bytes: int = MIN_IMAGE_BYTES) -> str:
    if strategies is None:
        strategies = default_strategies(client) if client else [PlaceholderHeroImage()]
    return save_hero_image(acquire_hero_image(topic, strategies, min_bytes=min_bytes), image_path)
