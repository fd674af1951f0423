"""Runtime configuration for the blog generator.

Values come from the environment (optionally a local `.env` file).
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

DEFAULT_STATIC_PAGES = ["/", "/about", "/contact", "/services", "/portfolio"]

USER_AGENT = "Mozilla/5.0 (compatible; auto-tech-blog/1.0)"


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Configuration for one generator run."""

    gemini_api_key: str = ""
    guardian_key: str = ""

    # Gemini models
    text_model: str = "gemini-2.5-flash"
    image_model: str = "gemini-2.0-flash-preview-image-generation"

    # Output / site
    output_dir: str = "."
    site_url: str = "https://example.com"
    site_title: str = "Tech Blog"
    site_description: str = "Latest tech news and insights"
    static_pages: List[str] = field(default_factory=lambda: list(DEFAULT_STATIC_PAGES))

    # Run behaviour
    date_override: Optional[str] = None
    skip_duplicate_check: bool = False
    debug: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, *, require_api_key: bool = True) -> "Settings":
        """Load and validate configuration from environment variables"""
        load_dotenv()
        raw_date = os.getenv("DATE", "").strip()
        settings = cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", "").strip(),
            guardian_key=os.getenv("GUARDIAN_KEY", "").strip(),
            text_model=os.getenv("GEMINI_TEXT_MODEL", cls.text_model),
            image_model=os.getenv("GEMINI_IMAGE_MODEL", cls.image_model),
            output_dir=os.getenv("BLOG_OUTPUT_DIR", os.getcwd()),
            site_url=os.getenv("SITE_URL", cls.site_url).rstrip("/"),
            site_title=os.getenv("SITE_TITLE", cls.site_title),
            site_description=os.getenv("SITE_DESCRIPTION", cls.site_description),
            date_override=raw_date if DATE_PATTERN.match(raw_date) else None,
            skip_duplicate_check=_env_flag("SKIP_DUPLICATE_CHECK"),
            debug=_env_flag("DEBUG"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )
        if raw_date and settings.date_override is None:
            logger.warning(f"Ignoring DATE={raw_date!r}: expected YYYY-MM-DD")
        settings._validate(require_api_key=require_api_key)
        return settings

    def _validate(self, *, require_api_key: bool = True) -> None:
        """Validate configuration values"""
        errors = []

        if require_api_key and not self.gemini_api_key:
            errors.append("GEMINI_API_KEY is required (get one at https://aistudio.google.com/)")

        if not self.site_url.startswith(("http://", "https://")):
            errors.append("SITE_URL must start with http:// or https://")

        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"LOG_LEVEL {self.log_level!r} is not a logging level name")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {error}" for error in errors)
            raise ValueError(error_msg)
