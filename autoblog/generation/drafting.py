"""Draft the post body from the chosen topic."""

from __future__ import annotations

import logging

from autoblog.generation.gemini_client import GeminiClient
from autoblog.ingestion.topic_types import Topic

logger = logging.getLogger(__name__)

# Lines starting with this marker are opinions and are exempt from fact-checking.
OPINION_MARKER = "My take:"

CONTEXT_PROMPT_CHARS = 20000
TARGET_WORDS = 700


def build_draft_prompt(topic: Topic) -> str:
    if topic.has_context:
        base = (
            f"Write a {TARGET_WORDS} word blog post that summarizes and analyses the following article. "
            f"Use only facts from the context; do not invent details. Tag any opinions with '{OPINION_MARKER}'.\n\n"
            f"--- BEGIN CONTEXT ---\n{topic.full_content[:CONTEXT_PROMPT_CHARS]}\n--- END CONTEXT ---"
        )
    else:
        base = f'Write a {TARGET_WORDS} word blog post in markdown about "{topic.title}".\n\nContext: {topic.description}.'

    return (
        f"{base}\n\nUse headings, sub-headings, lists and a friendly explanatory tone.\n\n"
        f"IMPORTANT: Do NOT include a top-level title heading (# {topic.title}). "
        "Begin directly with the introduction paragraph or a sub-heading."
    )


def draft_post(client: GeminiClient, topic: Topic) -> str:
    draft = client.generate_text(build_draft_prompt(topic))
    logger.info(f"Drafted post ({len(draft)} characters)")
    return draft
