"""Published-title history and the duplicate guard.

Storage: <outputDir>/.blog-history.json, a JSON array of titles.
"""

from __future__ import annotations

import json
import os
from typing import Iterable, List

HISTORY_FILENAME = ".blog-history.json"


def history_path(output_dir: str) -> str:
    return os.path.join(output_dir, HISTORY_FILENAME)


def load_history(path: str) -> List[str]:
    """Load title history. Missing or malformed files read as empty."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return []
    if not isinstance(data, list):
        return []
    return [str(t) for t in data if isinstance(t, str)]


def save_history(path: str, titles: List[str]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(list(titles), f, indent=2)


def normalize_title(title: str) -> str:
    return (title or "").lower().strip()


def is_duplicate_title(title: str, history: Iterable[str]) -> bool:
    target = normalize_title(title)
    return any(normalize_title(prev) == target for prev in history)
