# services/openai_service.py
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from config import settings

logger = logging.getLogger(__name__)


@dataclass
class GroundedResponse:
    """Answer text from the search-grounded model plus the URLs it searched."""

    text: str
    citations: List[str] = field(default_factory=list)


@lru_cache(maxsize=1)
def get_openai_client() -> AsyncOpenAI:
    """
    Singleton-style client for the general provider so we don't recreate it everywhere.
    """
    return AsyncOpenAI(api_key=settings.OPENAI_API_KEY)


@lru_cache(maxsize=1)
def get_perplexity_client() -> AsyncOpenAI:
    """
    Singleton-style client for the search-grounded provider (OpenAI-compatible API).
    """
    return AsyncOpenAI(
        api_key=settings.PERPLEXITY_API_KEY,
        base_url=settings.PERPLEXITY_BASE_URL,
    )


def _message_text(completion: Any) -> str:
    if not completion.choices:
        return ""
    return completion.choices[0].message.content or ""


def _citations(completion: Any) -> List[str]:
    # Perplexity returns citations as an extra top-level field, newer
    # responses also carry them as search_results entries.
    citations = list(getattr(completion, "citations", None) or [])
    if not citations:
        for result in getattr(completion, "search_results", None) or []:
            url = result.get("url") if isinstance(result, dict) else getattr(result, "url", None)
            if url:
                citations.append(url)
    return [c for c in citations if isinstance(c, str) and c]


async def run_completion(
    prompt: str,
    *,
    use_search: bool = False,
    model: Optional[str] = None,
    temperature: Optional[float] = None,
) -> Optional[str]:
    """
    Single-prompt completion on the general provider, returning the raw content string.

    - use_search: route through the search model with web search enabled
    - model: override model if needed; otherwise uses default from settings
    - temperature: override temperature if needed (ignored by search models)

    Returns None when the call fails or the model answers with nothing.
    """
    client = get_openai_client()

    kwargs: Dict[str, Any] = {
        "messages": [{"role": "user", "content": prompt}],
    }
    if use_search:
        kwargs["model"] = model or settings.OPENAI_SEARCH_MODEL
        kwargs["web_search_options"] = {}
    else:
        kwargs["model"] = model or settings.OPENAI_TEXT_MODEL
        kwargs["temperature"] = settings.OPENAI_TEMPERATURE if temperature is None else temperature

    try:
        completion = await client.chat.completions.create(**kwargs)
    except Exception as e:
        logger.error(f"General model call failed ({kwargs['model']}): {e}")
        return None

    text = _message_text(completion)
    if not text.strip():
        logger.warning(f"General model returned an empty response ({kwargs['model']})")
        return None
    return text


async def run_grounded_completion(
    prompt: str,
    *,
    model: Optional[str] = None,
) -> Optional[GroundedResponse]:
    """
    Completion on the search-grounded provider. Citations come back out of band
    and are not guaranteed to appear in the answer text.
    """
    client = get_perplexity_client()
    m = model or settings.PERPLEXITY_MODEL

    try:
        completion = await client.chat.completions.create(
            model=m,
            messages=[{"role": "user", "content": prompt}],
        )
    except Exception as e:
        logger.error(f"Grounded model call failed ({m}): {e}")
        return None

    text = _message_text(completion)
    if not text.strip():
        logger.warning(f"Grounded model returned an empty response ({m})")
        return None

    citations = _citations(completion)
    logger.info(f"Grounded model returned {len(text)} chars and {len(citations)} citations")
    return GroundedResponse(text=text, citations=citations)


async def describe_image(image_url: str, prompt: str, *, model: Optional[str] = None) -> Optional[str]:
    """Multimodal call on the general provider describing one image."""
    client = get_openai_client()
    m = model or settings.OPENAI_VISION_MODEL

    try:
        completion = await client.chat.completions.create(
            model=m,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image_url}},
                    ],
                }
            ],
            temperature=settings.OPENAI_TEMPERATURE,
        )
    except Exception as e:
        logger.error(f"Image description failed for {image_url}: {e}")
        return None

    text = _message_text(completion).strip()
    return text or None
