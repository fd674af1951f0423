"""SEO keyword extraction for post metadata.

Frequency ranking over lowercase words with punctuation dropped; short words
(≤3 chars) and stopwords are ignored. Ties keep first-seen order.
"""

from __future__ import annotations

import re
from typing import Dict, List

STOPWORDS = {
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with", "by",
    "is", "are", "was", "were", "be", "been", "have", "has", "had", "do", "does", "did",
    "will", "would", "could", "should", "this", "that", "these", "those",
}

MAX_KEYWORDS = 10
MIN_WORD_LENGTH = 4


def tokenize(text: str) -> List[str]:
    if not text:
        return []
    cleaned = re.sub(r"[^\w\s]", "", text.lower())
    out = []
    for t in cleaned.split():
        if len(t) < MIN_WORD_LENGTH or t in STOPWORDS:
            continue
        out.append(t)
    return out


def count_terms(text: str) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for t in tokenize(text):
        counts[t] = counts.get(t, 0) + 1
    return counts


def extract_keywords(text: str, *, top_k: int = MAX_KEYWORDS) -> List[str]:
    counts = count_terms(text)
    # sorted() is stable, so equal counts stay in first-seen order
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    return [term for term, _ in ranked[:top_k]]
