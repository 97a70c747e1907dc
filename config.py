import logging
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # General provider: HTML to Markdown, sentiment, image descriptions
    OPENAI_API_KEY: str = "sk-xxxx-your-key-here"
    OPENAI_TEXT_MODEL: str = "gpt-4.1"
    OPENAI_SEARCH_MODEL: str = "gpt-4o-search-preview"
    OPENAI_VISION_MODEL: str = "gpt-4.1-mini"
    OPENAI_TEMPERATURE: float = 0.2

    # Grounded provider: factuality, political leaning, source credibility.
    # Perplexity speaks the OpenAI chat completions protocol and returns
    # the search citations next to the answer.
    PERPLEXITY_API_KEY: str = "pplx-xxxx-your-key-here"
    PERPLEXITY_BASE_URL: str = "https://api.perplexity.ai"
    PERPLEXITY_MODEL: str = "sonar"

    FETCH_TIMEOUT_SECONDS: float = 20.0
    MAX_IMAGE_DESCRIPTIONS: int = 5

    CORS_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"

    @property
    def log_level(self) -> int:
        return getattr(logging, self.LOG_LEVEL.upper(), logging.INFO)


settings = Settings()
