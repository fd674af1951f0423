"""Generative topic fallback, used when no news provider yields a candidate."""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

from autoblog.generation.gemini_client import GeminiClient
from autoblog.ingestion.topic_types import Topic

logger = logging.getLogger(__name__)

TITLE_MAX_CHARS = 70
DEFAULT_TITLE = "The Week in Tech"

TOPIC_PROMPT = (
    "You are a technology trend spotter. Suggest a fresh, timely tech-topic for a short blog post.\n"
    "Return JSON with exactly these keys: title, description. "
    "Title must be ≤ 70 characters, description ≤ 200."
)

_FENCE_RE = re.compile(r"```json(.*?)```", re.IGNORECASE | re.DOTALL)
_TITLE_RE = re.compile(r'"title"\s*:\s*"([^"]+)"', re.IGNORECASE)
_DESC_RE = re.compile(r'"description"\s*:\s*"([^"]+)"', re.IGNORECASE)


def _load_json(candidate: str) -> Optional[Dict[str, Any]]:
    try:
        data = json.loads(candidate)
    except ValueError:
        return None
    if isinstance(data, dict) and str(data.get("title") or "").strip():
        return data
    return None


def parse_topic_response(text: str) -> Topic:
    """Turn free-form model output into a Topic. Never raises.

    Tries, in order: a fenced json block, the whole text as JSON, regex
    extraction of the two keys, and finally the raw text as the title.
    The returned title is never blank.
    """
    text = text or ""
    fence = _FENCE_RE.search(text)
    for candidate in ([fence.group(1).strip()] if fence else []) + [text.strip()]:
        data = _load_json(candidate)
        if data:
            return Topic(
                title=str(data["title"]).strip(),
                description=str(data.get("description") or "").strip(),
                source="Gemini",
            )

    title = next((m.group(1).strip() for m in _TITLE_RE.finditer(text) if m.group(1).strip()), "")
    if title:
        desc_match = _DESC_RE.search(text)
        return Topic(
            title=title,
            description=desc_match.group(1).strip() if desc_match else "",
            source="Gemini",
        )

    raw = text.strip()[:TITLE_MAX_CHARS].strip()
    return Topic(title=raw or DEFAULT_TITLE, description="", source="Gemini")


def synthesize(client: GeminiClient) -> Topic:
    logger.info("Generating topic with AI...")
    return parse_topic_response(client.generate_text(TOPIC_PROMPT))
