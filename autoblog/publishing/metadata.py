"""Post metadata helpers: slug, dates, reading time, metadata assembly."""

from __future__ import annotations

import math
import os
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from autoblog.analytics.keywords import extract_keywords
from autoblog.config import DATE_PATTERN

IST = timezone(timedelta(hours=5, minutes=30), name="IST")

WORDS_PER_MINUTE = 200
SLUG_MAX_LENGTH = 100
EMPTY_SLUG = "post"


def slugify(title: str) -> str:
    """URL-safe slug: [a-z0-9] runs joined by single hyphens, at most 100 chars."""
    slug = (title or "").lower()
    slug = re.sub(r"[^a-z0-9\s-]", "", slug)
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug).strip("-")
    slug = slug[:SLUG_MAX_LENGTH].rstrip("-")
    return slug or EMPTY_SLUG


def ist_date(now: Optional[datetime] = None) -> str:
    """YYYY-MM-DD for `now` (default: current time) in India Standard Time."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(IST).strftime("%Y-%m-%d")


def resolve_post_date(explicit: Optional[str] = None, *, now: Optional[datetime] = None) -> str:
    """Explicit option, then a valid DATE env override, then today in IST."""
    if explicit:
        if not DATE_PATTERN.match(explicit):
            raise ValueError(f"date must be YYYY-MM-DD, got {explicit!r}")
        return explicit
    env_date = os.environ.get("DATE", "").strip()
    if DATE_PATTERN.match(env_date):
        return env_date
    return ist_date(now)


def count_words(content: str) -> int:
    text = re.sub(r"```[\s\S]*?```", "", content or "")
    text = re.sub(r"`[^`]+`", "", text)
    text = re.sub(r"[#*_\[\]()]", "", text)
    return len([w for w in text.split() if w])


def reading_time_minutes(content: str) -> int:
    return max(1, math.ceil(count_words(content) / WORDS_PER_MINUTE))


def folder_name_for(date: str, title: str) -> str:
    return f"{date}-{slugify(title)}"


def default_description(title: str) -> str:
    return f"Exploring {title} and its implications for the tech industry."


def build_metadata(*, title: str, description: str, date: str, draft: str, folder_name: str) -> Dict[str, Any]:
    return {
        "title": title,
        "description": description or default_description(title),
        "date": date,
        "readingTime": f"{reading_time_minutes(draft)} min read",
        "image": f"/assets/images/{folder_name}.png",
        "keywords": extract_keywords(f"{title} {draft}"),
        "slug": folder_name,
    }
