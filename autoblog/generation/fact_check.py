"""Fact-check gate: verify a context-grounded draft against its source article.

Verification is best-effort. With no context there is nothing to check
against, and a failed request fails open; only an explicit list of
unsupported claims makes the gate trip.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from autoblog.generation.drafting import OPINION_MARKER
from autoblog.generation.gemini_client import GeminiClient, GeminiError

logger = logging.getLogger(__name__)

MAX_ISSUES = 10
PROMPT_CHARS = 20000


@dataclass(frozen=True)
class FactCheckResult:
    ok: bool
    issues: List[str] = field(default_factory=list)


def build_fact_check_prompt(draft: str, context: str) -> str:
    return (
        "You are a strict fact checker. Given the ORIGINAL ARTICLE and a BLOG DRAFT, list any statements "
        "that are presented as fact but are NOT supported by the article. "
        f'IGNORE any lines that begin with "{OPINION_MARKER}" (these are clearly-marked opinions). '
        'If every factual statement is supported, reply ONLY with "OK".\n\n'
        f"--- ORIGINAL ARTICLE ---\n{context[:PROMPT_CHARS]}\n--- BLOG DRAFT ---\n{draft[:PROMPT_CHARS]}"
    )


def parse_fact_check_response(text: str) -> FactCheckResult:
    cleaned = (text or "").strip()
    if cleaned.lower() == "ok":
        return FactCheckResult(ok=True, issues=[])
    issues = [line.strip() for line in cleaned.splitlines() if line.strip()]
    return FactCheckResult(ok=False, issues=issues[:MAX_ISSUES])


def fact_check(client: GeminiClient, draft: str, context: str) -> FactCheckResult:
    if not (context or "").strip():
        return FactCheckResult(ok=True, issues=[])

    try:
        response = client.generate_text(build_fact_check_prompt(draft, context))
    except GeminiError as e:
        logger.warning(f"Fact-check failed, assuming OK: {e}")
        return FactCheckResult(ok=True, issues=[])
    return parse_fact_check_response(response)
