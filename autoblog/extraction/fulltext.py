"""Article fulltext fetch + extraction.

Best-effort enrichment for topic candidates: the returned text grounds the
draft and the fact-check. Nothing here raises; failures come back as a
status on FulltextResult (or an empty string from `extract`).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import ipaddress
import logging
from urllib.parse import urlparse

import requests
import trafilatura

from autoblog.config import USER_AGENT

logger = logging.getLogger(__name__)

FETCH_TIMEOUT = 10


@dataclass(frozen=True)
class FulltextResult:
    text: Optional[str]
    status: str
    error: Optional[str] = None
    method: str = "trafilatura"

    @property
    def ok(self) -> bool:
        return self.status == "ok" and bool(self.text)


_PRIVATE_NETS = [
    ipaddress.ip_network("127.0.0.0/8"),
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
    ipaddress.ip_network("169.254.0.0/16"),
    ipaddress.ip_network("0.0.0.0/8"),
    ipaddress.ip_network("::1/128"),
    ipaddress.ip_network("fc00::/7"),
    ipaddress.ip_network("fe80::/10"),
]


def _is_private_ip(hostname: str) -> bool:
    try:
        ip = ipaddress.ip_address(hostname)
    except ValueError:
        return False
    return any(ip in net for net in _PRIVATE_NETS)


def _validate_fetch_url(url: str) -> Optional[str]:
    """Return error string if URL should not be fetched."""
    try:
        p = urlparse(url)
    except ValueError:
        return "invalid_url"
    if p.scheme not in ("http", "https"):
        return "bad_scheme"
    host = (p.hostname or "").strip().lower()
    if not host:
        return "missing_host"
    if host in ("localhost", "localhost.localdomain"):
        return "blocked_host"
    if _is_private_ip(host):
        return "blocked_private_ip"
    return None


def fetch_and_extract(url: str, *, timeout: int = FETCH_TIMEOUT, max_bytes: int = 2_000_000) -> FulltextResult:
    if not url:
        return FulltextResult(text=None, status="error", error="empty_url")
    err = _validate_fetch_url(url)
    if err:
        return FulltextResult(text=None, status="blocked", error=err)
    try:
        with requests.get(
            url,
            headers={"User-Agent": USER_AGENT},
            timeout=timeout,
            allow_redirects=True,
            stream=True,
        ) as resp:
            if resp.status_code >= 400:
                return FulltextResult(text=None, status=f"http_{resp.status_code}", error=f"http_{resp.status_code}")
            content = b""
            for chunk in resp.iter_content(chunk_size=64 * 1024):
                if not chunk:
                    continue
                content += chunk
                if len(content) > max_bytes:
                    return FulltextResult(text=None, status="too_large", error="too_large")
            encoding = resp.encoding or "utf-8"
        html = content.decode(encoding, errors="replace")
        if not html.strip():
            return FulltextResult(text=None, status="empty", error="empty_html")
        text = trafilatura.extract(html, url=url, include_comments=False, include_tables=False)
        if not text or not text.strip():
            return FulltextResult(text=None, status="no_extract", error="no_extract")
        return FulltextResult(text=text.strip(), status="ok")
    except Exception as e:
        return FulltextResult(text=None, status="error", error=str(e))


def extract(url: str) -> str:
    """Readable main-article text for `url`, or "" on any failure."""
    res = fetch_and_extract(url)
    if not res.ok:
        logger.warning(f"Failed to extract content from {url}: {res.error or res.status}")
        return ""
    return res.text or ""
