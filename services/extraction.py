# services/extraction.py
"""
Regex based helpers that pull structure out of raw HTML and generated
Markdown: source identity, article title, image URLs, plus the score to
label mappings shown to the user.
"""
import logging
import re
from typing import List, Optional
from urllib.parse import urlparse

from schemas.analysis import AnalysisRequest, SourceIdentity

logger = logging.getLogger(__name__)

UNKNOWN_SOURCE = SourceIdentity(domain="unknown-source.com", name="Unknown Source")

_OG_URL_RE = re.compile(r"""<meta[^>]*property=["']og:url["'][^>]*content=["']([^"']+)["']""", re.IGNORECASE)
_TITLE_RES = [
    re.compile(r"<title[^>]*>(.*?)</title>", re.IGNORECASE),
    re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE),
    re.compile(r"""<meta[^>]*property=["']og:title["'][^>]*content=["']([^"']+)["']""", re.IGNORECASE),
]
_IMAGE_RE = re.compile(r"""!\[[^\]]*\]\(\s*((?:[^()\s]|\([^()\s]*\))+)(?:\s+["'][^"']*["'])?\s*\)""")

MAX_TITLE_LINE_LENGTH = 100

RELIABILITY_TIERS = [
    (0.90, "Very Reliable"),
    (0.75, "Reliable"),
    (0.60, "Mostly Reliable"),
    (0.40, "Mixed Reliability"),
    (0.25, "Somewhat Unreliable"),
]

POLITICAL_BANDS = [
    (20, "Far Left"),
    (40, "Center-Left"),
    (60, "Centrist"),
    (80, "Center-Right"),
]


def reliability_label(score: float) -> str:
    for threshold, label in RELIABILITY_TIERS:
        if score >= threshold:
            return label
    return "Unreliable"


def political_category(score: float) -> str:
    """Band a 0-100 political leaning score (0 = far left)."""
    for upper, category in POLITICAL_BANDS:
        if score <= upper:
            return category
    return "Far Right"


def source_identity_from_url(url: str) -> Optional[SourceIdentity]:
    """
    'https://www.example-news.com/a' -> domain 'www.example-news.com',
    name 'Example News'. Returns None if the URL has no host.
    """
    try:
        hostname = urlparse(url).hostname
    except ValueError as e:
        logger.error(f"URL parsing error for {url}: {e}")
        return None
    if not hostname:
        return None

    first_label = re.sub(r"^www\.", "", hostname, flags=re.IGNORECASE).split(".")[0]
    name = " ".join(word[:1].upper() + word[1:] for word in first_label.split("-"))
    return SourceIdentity(domain=hostname, name=name)


def derive_source_identity(request: AnalysisRequest, html: Optional[str] = None) -> SourceIdentity:
    """
    Priority: explicit request URL, then the og:url meta tag of the HTML,
    then the unknown-source fallback.
    """
    identity = None
    if request.isUrl and request.url:
        identity = source_identity_from_url(request.url)
    elif html:
        match = _OG_URL_RE.search(html)
        if match:
            identity = source_identity_from_url(match.group(1))
    return identity or UNKNOWN_SOURCE


def extract_title(content: str, is_html: bool) -> str:
    if is_html:
        for pattern in _TITLE_RES:
            match = pattern.search(content)
            if match and match.group(1):
                return match.group(1).strip()

    first_line = content.split("\n")[0].strip()
    if first_line and len(first_line) < MAX_TITLE_LINE_LENGTH:
        return first_line
    return "Untitled Article"


def extract_images(markdown: str) -> List[str]:
    """Image URLs from ![alt](url) syntax, in document order."""
    return _IMAGE_RE.findall(markdown.replace("\n", ""))
