# services/content_service.py
"""
Getting the article in: server-side URL fetching and HTML sanitization
before anything is handed to a model.
"""
import logging
import re
from typing import Optional, Tuple

import httpx

from config import settings
from schemas.analysis import AnalysisRequest

logger = logging.getLogger(__name__)

BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


class FetchError(Exception):
    """Raised when an article URL can't be retrieved."""

    def __init__(self, status_code: Optional[int], reason: str):
        self.status_code = status_code
        self.reason = reason
        if status_code is None:
            super().__init__(reason)
        else:
            super().__init__(f"{status_code} {reason}".strip())


def _block_pattern(tag: str) -> re.Pattern:
    return re.compile(
        rf"<{tag}\b[^<]*(?:(?!</{tag}>)<[^<]*)*</{tag}>",
        re.IGNORECASE,
    )


_SCRIPT_RE = _block_pattern("script")
_STYLE_RE = _block_pattern("style")
_IFRAME_RE = _block_pattern("iframe")
_OBJECT_RE = _block_pattern("object")
_EMBED_RE = _block_pattern("embed")
_EVENT_HANDLER_RE = re.compile(r"""\s+on\w+\s*=\s*("[^"]*"|'[^']*'|[^>\s]*)""", re.IGNORECASE)
_COMMENT_RE = re.compile(r"<!--[\s\S]*?-->")


def sanitize_html(html: str) -> str:
    """
    Strip scripts, styles, embedded frames/objects, inline event handlers
    and comments. Pattern based, so malformed markup is left as is.
    """
    sanitized = _SCRIPT_RE.sub("", html)
    sanitized = _EVENT_HANDLER_RE.sub("", sanitized)
    sanitized = _IFRAME_RE.sub("", sanitized)
    sanitized = _STYLE_RE.sub("", sanitized)
    sanitized = _COMMENT_RE.sub("", sanitized)
    sanitized = _OBJECT_RE.sub("", sanitized)
    sanitized = _EMBED_RE.sub("", sanitized)
    return sanitized


async def fetch_url(url: str, timeout: Optional[float] = None) -> str:
    """
    Download the raw HTML behind an article URL.

    Raises:
        FetchError: on a non-2xx response or a network failure
    """
    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(
                url,
                headers=BROWSER_HEADERS,
                timeout=timeout or settings.FETCH_TIMEOUT_SECONDS,
                follow_redirects=True,
            )
    except httpx.HTTPError as e:
        logger.error(f"Error fetching {url}: {e}")
        raise FetchError(None, str(e) or type(e).__name__) from e

    if not response.is_success:
        raise FetchError(response.status_code, response.reason_phrase)

    html = response.text
    logger.info(f"Fetched {len(html)} bytes from {url}")
    return html


async def acquire_content(request: AnalysisRequest) -> Tuple[str, bool]:
    """
    Returns the article body and whether it is HTML. URL input is always
    fetched and treated as HTML; anything else passes through untouched.
    """
    if request.isUrl and request.url:
        logger.info(f"Server-side fetching URL: {request.url}")
        return await fetch_url(request.url), True
    return request.content, request.isHtml
