#!/usr/bin/env python3
"""Blog post generation worker.

Generates one post per invocation into BLOG_OUTPUT_DIR (default: cwd):
- topic from news sources (Guardian / Hacker News / RSS) or Gemini
- draft + fact-check with Gemini
- hero image (Gemini, placeholder fallback)
- posts/<date>-<slug>/, rss.xml, sitemap.xml

Environment: GEMINI_API_KEY (required), GUARDIAN_KEY, DATE, DEBUG, LOG_LEVEL.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from dataclasses import replace

from autoblog.config import DATE_PATTERN, Settings
from autoblog.pipeline.orchestrator import PipelineAborted, run_once
from autoblog.storage.compression_log import LOG_FILENAME, compression_stats

logger = logging.getLogger("generate_post_worker")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate one AI-written tech blog post")
    parser.add_argument("--output-dir", default=None, help="Output directory (defaults to BLOG_OUTPUT_DIR or cwd)")
    parser.add_argument("--date", default=None, help="Fixed post date YYYY-MM-DD (defaults to DATE env or today IST)")
    parser.add_argument("--skip-duplicate-check", action="store_true", help="Do not read or update title history")
    args = parser.parse_args(argv)

    if args.date and not DATE_PATTERN.match(args.date):
        parser.error("--date must be YYYY-MM-DD")

    try:
        settings = Settings.from_env()
    except ValueError as e:
        _configure_logging("INFO")
        logger.error(str(e))
        return 1
    _configure_logging(settings.log_level)

    overrides = {}
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if args.date:
        overrides["date_override"] = args.date
    if args.skip_duplicate_check:
        overrides["skip_duplicate_check"] = True
    settings = replace(settings, **overrides)

    try:
        result = run_once(settings)
    except PipelineAborted as e:
        logger.error(f"Aborted: {e}")
        return 2
    except Exception as e:
        logger.error(f"Error: {e}", exc_info=settings.debug)
        return 1

    logger.info(f"Generated: {result.folder_name}")
    logger.info(f"Title: {result.metadata['title']}")
    logger.info(f"Reading time: {result.metadata['readingTime']}")
    stats = compression_stats(os.path.join(os.path.dirname(result.image_path), LOG_FILENAME))
    if stats["totalFiles"]:
        logger.info(
            f"Images: {stats['totalFiles']} optimized, {stats['totalSavings'] / 1024:.1f}KB saved "
            f"(avg {stats['averageSavingsPercent']}%)"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
