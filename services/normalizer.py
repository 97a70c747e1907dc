# services/normalizer.py
"""
Turns raw model output into the result schemas.

Models are asked for bare JSON but regularly wrap it in code fences, drop
fields or answer with prose. Each decoder here fills the gaps with fixed
defaults so a single bad answer never sinks the whole analysis.
"""
import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from schemas.analysis import (
    ArticleFactuality,
    FactualityResult,
    PoliticalLeaning,
    PoliticalLeaningResult,
    SentimentEntity,
    SentimentResult,
    SourceCredibilityResult,
    SourceFactuality,
    SourceIdentity,
)
from services.extraction import political_category, reliability_label

logger = logging.getLogger(__name__)

_LEADING_FENCE_RE = re.compile(r"^```(?:json|markdown|md)?(?!\w)[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE_RE = re.compile(r"\n?```$")

DEFAULT_FACTUALITY_RATING = 0.5
DEFAULT_FACTUALITY_LABEL = "Mixed Factuality"
DEFAULT_POLITICAL_SCORE = 50.0
DEFAULT_CREDIBILITY = 0.5
DEFAULT_BIAS = "None"


def strip_code_fences(text: str) -> str:
    """Remove the fence wrapping a whole answer. Code blocks inside it are kept."""
    stripped = text.strip()
    unwrapped = _LEADING_FENCE_RE.sub("", stripped, count=1)
    if unwrapped != stripped:
        unwrapped = _TRAILING_FENCE_RE.sub("", unwrapped, count=1)
    return unwrapped.strip()


def parse_json_payload(text: Optional[str]) -> Optional[Dict[str, Any]]:
    """JSON object from model output, or None if there isn't one."""
    if not text:
        return None
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        logger.warning(f"Model returned invalid JSON: {e}")
        return None
    if not isinstance(data, dict):
        logger.warning(f"Model returned JSON {type(data).__name__}, expected an object")
        return None
    return data


def merge_citations(sources: Iterable[Any], citations: Iterable[str]) -> List[str]:
    merged: List[str] = []
    for url in list(sources) + list(citations):
        if isinstance(url, str) and url and url not in merged:
            merged.append(url)
    return merged


def _number(value: Any, default: float, low: float, high: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if number != number:  # NaN
        return default
    return min(max(number, low), high)


def _unit_score(value: Any, default: float) -> float:
    """0-1 score; answers on a 0-100 scale are rescaled rather than clamped to 1."""
    number = _number(value, default, 0.0, 100.0)
    if number > 1.0:
        logger.info(f"Rescaling score {number} from a 0-100 scale")
        number = number / 100.0
    return number


def _text(value: Any, default: str = "") -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.get(key)
    return section if isinstance(section, dict) else {}


def decode_sentiment(raw: Optional[str]) -> SentimentResult:
    data = parse_json_payload(raw)
    if data is None:
        logger.warning("Falling back to neutral sentiment")
        return SentimentResult()

    entities = []
    raw_entities = data.get("entities")
    for item in raw_entities if isinstance(raw_entities, list) else []:
        if not isinstance(item, dict):
            continue
        name = _text(item.get("name"))
        if name:
            entities.append(SentimentEntity(name=name, score=_number(item.get("score"), 0.0, -1.0, 1.0)))

    return SentimentResult(
        overall_score=_number(data.get("overall_score"), 0.0, -1.0, 1.0),
        entities=entities,
    )


def decode_factuality(raw: Optional[str], citations: Iterable[str] = ()) -> FactualityResult:
    """
    Article and source factuality. Citations from the grounded provider are
    merged into the parsed article sources; an unusable answer gets the
    fixed defaults with no sources.
    """
    data = parse_json_payload(raw)
    if data is None:
        logger.warning("Falling back to default factuality")
        return FactualityResult(
            article=ArticleFactuality(
                rating=DEFAULT_FACTUALITY_RATING,
                ratingLabel=DEFAULT_FACTUALITY_LABEL,
                sources=[],
            ),
            source=SourceFactuality(rating=DEFAULT_FACTUALITY_RATING, ratingLabel=DEFAULT_FACTUALITY_LABEL),
        )

    # Older prompt revisions asked for a flat {rating, ratingLabel, sources} object
    article = _section(data, "article") if "article" in data else data
    source = _section(data, "source")

    article_rating = _unit_score(article.get("rating"), DEFAULT_FACTUALITY_RATING)
    source_rating = _unit_score(source.get("rating"), DEFAULT_FACTUALITY_RATING)
    sources = article.get("sources")

    return FactualityResult(
        article=ArticleFactuality(
            rating=article_rating,
            ratingLabel=_text(article.get("ratingLabel"), reliability_label(article_rating)),
            sources=merge_citations(sources if isinstance(sources, list) else [], citations),
        ),
        source=SourceFactuality(
            rating=source_rating,
            ratingLabel=_text(source.get("ratingLabel"), reliability_label(source_rating)),
        ),
    )


def _decode_leaning(section: Dict[str, Any]) -> PoliticalLeaning:
    score = _number(section.get("score"), DEFAULT_POLITICAL_SCORE, 0.0, 100.0)
    return PoliticalLeaning(
        score=score,
        category=_text(section.get("category"), political_category(score)),
        reasoning=_text(section.get("reasoning")),
    )


def decode_political_leaning(raw: Optional[str]) -> PoliticalLeaningResult:
    data = parse_json_payload(raw)
    if data is None:
        logger.warning("Falling back to centrist political leaning")
        return PoliticalLeaningResult()
    return PoliticalLeaningResult(
        article=_decode_leaning(_section(data, "article")),
        source=_decode_leaning(_section(data, "source")),
    )


def decode_source_credibility(
    raw: Optional[str],
    source: SourceIdentity,
    citations: Iterable[str] = (),
) -> SourceCredibilityResult:
    data = parse_json_payload(raw)
    if data is None:
        logger.warning(f"Falling back to default credibility for {source.domain}")
        data = {}

    credibility = _unit_score(data.get("credibility"), DEFAULT_CREDIBILITY)
    return SourceCredibilityResult(
        name=_text(data.get("name"), source.name),
        url=_text(data.get("url"), source.domain),
        reliability=_text(data.get("reliability"), reliability_label(credibility)),
        bias=_text(data.get("bias"), DEFAULT_BIAS),
        credibility=credibility,
        reasoning=_text(data.get("reasoning")),
        citations=merge_citations([], citations),
    )
