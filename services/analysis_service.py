import asyncio
import logging
from typing import List, Optional

from config import settings
from schemas.analysis import (
    AnalysisRequest,
    AnalysisResults,
    ArticleInfo,
    FactualityResult,
    ImageDescription,
    PoliticalLeaningResult,
    SentimentResult,
    SourceCredibilityResult,
    SourceIdentity,
)
from services import prompts
from services.content_service import acquire_content, sanitize_html
from services.extraction import derive_source_identity, extract_images, extract_title
from services.normalizer import (
    decode_factuality,
    decode_political_leaning,
    decode_sentiment,
    decode_source_credibility,
    strip_code_fences,
)
from services.openai_service import describe_image, run_completion, run_grounded_completion

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """A required pipeline step failed; carries the HTTP status to answer with."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def html_to_markdown(html: str) -> Optional[str]:
    sanitized = sanitize_html(html)
    logger.info(f"Sanitized HTML from {len(html)} to {len(sanitized)} chars")

    raw = await run_completion(prompts.markdown_conversion_prompt(sanitized), use_search=True)
    if raw is None:
        return None

    markdown = strip_code_fences(raw)
    logger.info(f"Markdown conversion result length: {len(markdown)}")
    return markdown or None


async def get_sentiment(article: str) -> Optional[SentimentResult]:
    raw = await run_completion(prompts.sentiment_prompt(article))
    if raw is None:
        return None
    return decode_sentiment(raw)


async def get_factuality(article: str, source: SourceIdentity) -> Optional[FactualityResult]:
    response = await run_grounded_completion(prompts.factuality_prompt(article, source))
    if response is None:
        return None
    return decode_factuality(response.text, response.citations)


async def get_political_leaning(article: str, source: SourceIdentity) -> PoliticalLeaningResult:
    response = await run_grounded_completion(prompts.political_leaning_prompt(article, source))
    return decode_political_leaning(response.text if response else None)


async def get_source_credibility(article: str, source: SourceIdentity) -> SourceCredibilityResult:
    response = await run_grounded_completion(prompts.source_credibility_prompt(article, source))
    if response is None:
        return decode_source_credibility(None, source)
    return decode_source_credibility(response.text, source, response.citations)


async def get_image_descriptions(images: List[str]) -> List[ImageDescription]:
    """
    Describe up to MAX_IMAGE_DESCRIPTIONS images concurrently.
    Images the model could not describe are left out.
    """
    selected = images[: settings.MAX_IMAGE_DESCRIPTIONS]
    if not selected:
        return []

    prompt = prompts.image_description_prompt()
    descriptions = await asyncio.gather(*(describe_image(url, prompt) for url in selected))
    return [
        ImageDescription(url=url, description=description)
        for url, description in zip(selected, descriptions)
        if description
    ]


async def analyze_content(request: AnalysisRequest) -> AnalysisResults:
    """
    Full pipeline for one request: acquire, convert, score every dimension
    concurrently and merge everything into one result.

    Raises:
        FetchError: the article URL could not be fetched
        AnalysisError: conversion, sentiment or factuality produced nothing
    """
    content, is_html = await acquire_content(request)

    if is_html:
        article_markdown = await html_to_markdown(content)
        if not article_markdown:
            raise AnalysisError(400, "Failed to convert HTML to Markdown")
    else:
        # Plain text is treated as Markdown already
        article_markdown = content

    source = derive_source_identity(request, content if is_html else None)
    logger.info(f"Analyzing article from {source.name} ({source.domain})")

    images = extract_images(article_markdown)

    sentiment, factuality, political_leaning, source_credibility, image_descriptions = await asyncio.gather(
        get_sentiment(article_markdown),
        get_factuality(article_markdown, source),
        get_political_leaning(article_markdown, source),
        get_source_credibility(article_markdown, source),
        get_image_descriptions(images),
    )

    if sentiment is None:
        raise AnalysisError(500, "Failed to analyze sentiment")
    if factuality is None:
        raise AnalysisError(500, "Failed to analyze factuality")

    if request.isUrl:
        article_url = request.url
    elif is_html:
        article_url = source.domain
    else:
        article_url = None

    return AnalysisResults(
        sentiment=sentiment,
        factuality=factuality,
        politicalLeaning=political_leaning,
        source=source_credibility,
        article=ArticleInfo(
            title=extract_title(content, is_html),
            content=article_markdown,
            url=article_url,
        ),
        imageDescriptions=image_descriptions,
    )
