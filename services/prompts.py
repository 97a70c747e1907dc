# services/prompts.py
"""
Prompt templates for every model task. Builders only format strings;
calling the models and validating what comes back happens elsewhere.
"""
from schemas.analysis import SourceIdentity

JSON_ONLY_DIRECTIVE = """
Only return the JSON, do not include any additional text, explanation or commentary.
Do not wrap the JSON in ``` (code blocks).
"""

MARKDOWN_CONVERSION_PROMPT_TEMPLATE = """
You have been tasked with extracting and converting an article from a potentially incomplete HTML document.
Your job is to perform a comprehensive extraction of the main article content from this HTML and convert it to well-formatted Markdown.

IMPORTANT INSTRUCTIONS:
1. Focus on identifying and extracting ALL main article content, even if the HTML appears incomplete
2. Look for content within article tags, main tags, or divs with class/id containing terms like "content", "article", "story", "body"
3. Extract ALL text content you can find related to the main article - DO NOT STOP EARLY
4. Include EVERY paragraph, heading, list, table, blockquote, and content element that appears to be part of the article
5. Preserve ALL images (convert to markdown format: ![alt text](image URL)) and their captions
6. Maintain formatting like bold, italic, underline, and links
7. Exclude navigation elements, headers, footers, sidebars, ads, and other non-article content
8. If the article appears to be truncated, note this at the end
9. Pay special attention to clues in the HTML structure to identify the beginning and end of the article content
10. Convert ALL headings to proper markdown format (# for h1, ## for h2, etc.)

Your goal is to produce complete, well-structured Markdown that contains the ENTIRE article content,
including ALL paragraphs, sections, images, and formatted text.

{html}

Return ONLY the converted Markdown with no additional text, explanation, or commentary.
"""

SENTIMENT_PROMPT_TEMPLATE = """
You have been tasked with analyzing the following article for sentiment.

Provide a sentiment score for the entire article, as well as individual scores for any relevant
entities (people, organisations, policies, places) mentioned in it.
Every score is a float between -1 and 1: -1 is strongly negative, 0 is neutral, 1 is strongly positive.

Return the data in the following JSON format:
{{
    "overall_score": 0.1,
    "entities": [
        {{"name": "President Smith", "score": 0.7}},
        {{"name": "New Policy", "score": -0.5}},
        {{"name": "Economic Reform", "score": 0.3}},
        {{"name": "Opposition Party", "score": -0.6}}
    ]
}}

ARTICLE:
{article}
{directive}"""

FACTUALITY_PROMPT_TEMPLATE = """
You have been tasked with analyzing the factuality of the following article and of the outlet that published it.
The article was published by {source_name} ({source_domain}).

Search the web and examine the article for:
1. Verifiable claims and statements
2. Referenced sources or citations
3. Consistency with known facts
4. Presence of misleading or incorrect information
5. Use of reliable primary sources

Then judge the publisher separately, based on its track record for accurate reporting.

Return the data in the following JSON format:
{{
    "article": {{
        "rating": a number between 0 and 1, higher values indicating more factual content,
        "ratingLabel": one of "Very Factual", "Mostly Factual", "Mixed Factuality", "Somewhat Unfactual", "Not Factual",
        "sources": an array of URLs that support or refute the claims in the article (3-5 if possible)
    }},
    "source": {{
        "rating": a number between 0 and 1 for the factual track record of {source_name},
        "ratingLabel": one of "Very Factual", "Mostly Factual", "Mixed Factuality", "Somewhat Unfactual", "Not Factual"
    }}
}}

ARTICLE:
{article}
{directive}"""

POLITICAL_LEANING_PROMPT_TEMPLATE = """
You have been tasked with analyzing the political leaning of the following article and of the outlet that published it.
The article was published by {source_name} ({source_domain}).

Carefully and objectively analyze the article's content, language, framing of issues and overall
perspective to determine its position on the political spectrum. Look at:
1. Word choice and framing that indicates political perspective
2. Which issues are emphasized and how they are presented
3. Treatment of different political groups, policies, or figures
4. Overall narrative and perspective on political matters
5. Any explicit or implicit bias toward particular ideologies

Judge the publisher separately, based on its overall editorial record.

Scores run from 0 to 100:
- 0-20: Far Left (strongly progressive/socialist perspective)
- 21-40: Center-Left (liberal/progressive perspective)
- 41-60: Centrist (balanced perspective with minimal bias)
- 61-80: Center-Right (conservative perspective)
- 81-100: Far Right (strongly conservative/nationalist perspective)

Return your analysis in the following JSON format:
{{
    "article": {{
        "score": a number between 0 and 100,
        "category": one of "Far Left", "Center-Left", "Centrist", "Center-Right", "Far Right",
        "reasoning": a brief explanation highlighting key indicators in the text
    }},
    "source": {{
        "score": a number between 0 and 100,
        "category": one of "Far Left", "Center-Left", "Centrist", "Center-Right", "Far Right",
        "reasoning": a brief explanation of the publisher's overall leaning
    }}
}}

ARTICLE:
{article}
{directive}"""

SOURCE_CREDIBILITY_PROMPT_TEMPLATE = """
You have been tasked with assessing the credibility of a news outlet.
The outlet is {source_name} ({source_domain}). One of its articles is included below for context.

Search the web for the outlet's ownership, fact-check record, corrections policy and reputation.

Return the data in the following JSON format:
{{
    "name": "{source_name}",
    "url": "{source_domain}",
    "reliability": one of "Very Reliable", "Reliable", "Mostly Reliable", "Mixed Reliability", "Somewhat Unreliable", "Unreliable",
    "bias": one of "None", "Biased", "Unbiased",
    "credibility": a number between 0 and 1, higher values indicating a more credible outlet,
    "reasoning": a brief explanation of the assessment
}}

ARTICLE:
{article}
{directive}"""

IMAGE_DESCRIPTION_PROMPT = (
    "Describe this news article image in one or two sentences. "
    "Mention the people, places and objects shown and the overall tone. "
    "Return only the description."
)


def markdown_conversion_prompt(html: str) -> str:
    return MARKDOWN_CONVERSION_PROMPT_TEMPLATE.format(html=html)


def sentiment_prompt(article: str) -> str:
    return SENTIMENT_PROMPT_TEMPLATE.format(article=article, directive=JSON_ONLY_DIRECTIVE)


def factuality_prompt(article: str, source: SourceIdentity) -> str:
    return FACTUALITY_PROMPT_TEMPLATE.format(
        article=article,
        source_name=source.name,
        source_domain=source.domain,
        directive=JSON_ONLY_DIRECTIVE,
    )


def political_leaning_prompt(article: str, source: SourceIdentity) -> str:
    return POLITICAL_LEANING_PROMPT_TEMPLATE.format(
        article=article,
        source_name=source.name,
        source_domain=source.domain,
        directive=JSON_ONLY_DIRECTIVE,
    )


def source_credibility_prompt(article: str, source: SourceIdentity) -> str:
    return SOURCE_CREDIBILITY_PROMPT_TEMPLATE.format(
        article=article,
        source_name=source.name,
        source_domain=source.domain,
        directive=JSON_ONLY_DIRECTIVE,
    )


def image_description_prompt() -> str:
    return IMAGE_DESCRIPTION_PROMPT
