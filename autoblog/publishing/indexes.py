"""RSS feed and sitemap regeneration over every post already on disk.

Posts are discovered by folder name (YYYY-MM-DD-slug) and read back from
their metadata.json; unreadable posts are skipped.
"""

from __future__ import annotations

import json
import logging
import os
import re
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Any, Dict, List, Optional, Sequence
from xml.sax.saxutils import escape

from autoblog.config import DATE_PATTERN, DEFAULT_STATIC_PAGES
from autoblog.publishing.post_writer import POSTS_DIRNAME

logger = logging.getLogger(__name__)

POST_FOLDER_RE = re.compile(r"^\d{4}-\d{2}-\d{2}-")
_TITLE_LINE_RE = re.compile(r"^# .*\n\n")


def load_posts(output_dir: str, *, with_content: bool = False) -> List[Dict[str, Any]]:
    posts_dir = os.path.join(output_dir, POSTS_DIRNAME)
    if not os.path.isdir(posts_dir):
        return []

    posts: List[Dict[str, Any]] = []
    for folder in sorted(os.listdir(posts_dir)):
        if not POST_FOLDER_RE.match(folder):
            continue
        try:
            with open(os.path.join(posts_dir, folder, "metadata.json"), "r", encoding="utf-8") as f:
                post = json.load(f)
            if not isinstance(post, dict):
                raise ValueError("metadata is not an object")
            if with_content:
                with open(os.path.join(posts_dir, folder, "content.md"), "r", encoding="utf-8") as f:
                    post["content"] = f.read()
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load post {folder}: {e}")
            continue
        post["folder"] = folder
        posts.append(post)
    return posts


def _post_datetime(date: Any) -> datetime:
    try:
        return datetime.strptime(date or "", "%Y-%m-%d").replace(tzinfo=timezone.utc)
    except (TypeError, ValueError):
        return datetime.fromtimestamp(0, tz=timezone.utc)


def _valid_date(date: Any) -> bool:
    return isinstance(date, str) and bool(DATE_PATTERN.match(date))


def generate_rss(
    output_dir: str,
    *,
    site_url: str = "https://example.com",
    title: str = "Tech Blog",
    description: str = "Latest tech news and insights",
    now: Optional[datetime] = None,
) -> str:
    now = now or datetime.now(timezone.utc)
    posts = load_posts(output_dir, with_content=True)
    posts.sort(key=lambda p: _post_datetime(p.get("date", "")), reverse=True)

    items = []
    for post in posts:
        url = f"{site_url}/blog/{post['folder']}"
        body = _TITLE_LINE_RE.sub("", post.get("content", ""), count=1)
        enclosure = ""
        if post.get("image"):
            enclosure = f'\n      <enclosure url="{escape(site_url + str(post["image"]))}" length="0" type="image/png"/>'
        items.append(
            f"""    <item>
      <title>{escape(str(post.get("title", "")))}</title>
      <link>{escape(url)}</link>
      <guid>{escape(url)}</guid>
      <pubDate>{format_datetime(_post_datetime(post.get("date", "")))}</pubDate>
      <description>{escape(str(post.get("description", "")))}</description>
      <content:encoded>{escape(body)}</content:encoded>{enclosure}
    </item>"""
        )

    return f"""<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>{escape(title)}</title>
    <link>{escape(site_url)}</link>
    <description>{escape(description)}</description>
    <language>en</language>
    <copyright>{escape(f"© {now.year} {title}")}</copyright>
    <lastBuildDate>{format_datetime(now)}</lastBuildDate>
    <atom:link href="{escape(site_url)}/rss.xml" rel="self" type="application/rss+xml"/>
{chr(10).join(items)}
  </channel>
</rss>
"""


def save_rss_feed(output_dir: str, *, rss_path: str = "rss.xml", **rss_options) -> str:
    xml = generate_rss(output_dir, **rss_options)
    path = os.path.join(output_dir, rss_path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(xml)
    logger.info(f"RSS feed generated at {path}")
    return path


def generate_sitemap(
    output_dir: str,
    *,
    site_url: str = "https://example.com",
    static_pages: Optional[Sequence[str]] = None,
    now: Optional[datetime] = None,
) -> str:
    today = (now or datetime.now(timezone.utc)).strftime("%Y-%m-%d")
    pages = DEFAULT_STATIC_PAGES if static_pages is None else list(static_pages)

    urls = []
    for page in pages:
        urls.append({
            "loc": f"{site_url}{page}",
            "lastmod": today,
            "changefreq": "daily" if page == "/" else "monthly",
            "priority": "1.0" if page == "/" else "0.8",
        })
    urls.append({"loc": f"{site_url}/blog", "lastmod": today, "changefreq": "daily", "priority": "0.9"})

    for post in load_posts(output_dir):
        urls.append({
            "loc": f"{site_url}/blog/{post['folder']}",
            "lastmod": post["date"] if _valid_date(post.get("date")) else today,
            "changefreq": "weekly",
            "priority": "0.7",
        })

    urls.sort(key=lambda u: (float(u["priority"]), u["lastmod"]), reverse=True)

    entries = "".join(
        f"""
  <url>
    <loc>{escape(u["loc"])}</loc>
    <lastmod>{escape(u["lastmod"])}</lastmod>
    <changefreq>{u["changefreq"]}</changefreq>
    <priority>{u["priority"]}</priority>
  </url>"""
        for u in urls
    )
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">{entries}
</urlset>
"""


def save_sitemap(output_dir: str, *, sitemap_path: str = "sitemap.xml", **sitemap_options) -> str:
    xml = generate_sitemap(output_dir, **sitemap_options)
    path = os.path.join(output_dir, sitemap_path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(xml)
    logger.info(f"Sitemap generated with {xml.count('<url>')} entries at {path}")
    return path


def regenerate_indexes(
    output_dir: str,
    *,
    site_url: str,
    site_title: str,
    site_description: str,
    static_pages: Optional[Sequence[str]] = None,
) -> Dict[str, bool]:
    """Rebuild rss.xml and sitemap.xml. Failures are logged, never raised."""
    results = {"rss": False, "sitemap": False}
    try:
        save_rss_feed(output_dir, site_url=site_url, title=site_title, description=site_description)
        results["rss"] = True
    except Exception as e:
        logger.warning(f"RSS generation failed: {e}")
    try:
        save_sitemap(output_dir, site_url=site_url, static_pages=static_pages)
        results["sitemap"] = True
    except Exception as e:
        logger.warning(f"Sitemap generation failed: {e}")
    return results
