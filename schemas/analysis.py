from urllib.parse import urlparse

from pydantic import BaseModel, Field, model_validator
from typing import List, Optional


class AnalysisRequest(BaseModel):
    content: str = ""
    isHtml: bool = False
    isUrl: bool = False
    url: Optional[str] = None

    @model_validator(mode="after")
    def check_content(self):
        if self.isUrl:
            parsed = urlparse(self.url or "")
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ValueError("url must be an absolute http(s) URL when isUrl is set")
        elif not self.content.strip():
            raise ValueError("content is required")
        return self


class SourceIdentity(BaseModel):
    domain: str
    name: str


class SentimentEntity(BaseModel):
    name: str
    score: float


class SentimentResult(BaseModel):
    overall_score: float = 0.0
    entities: List[SentimentEntity] = Field(default_factory=list)


class ArticleFactuality(BaseModel):
    rating: float
    ratingLabel: str
    sources: List[str] = Field(default_factory=list)


class SourceFactuality(BaseModel):
    rating: float
    ratingLabel: str


class FactualityResult(BaseModel):
    article: ArticleFactuality
    source: SourceFactuality


class PoliticalLeaning(BaseModel):
    score: float = 50
    category: str = "Centrist"  # "Far Left" | "Center-Left" | "Centrist" | "Center-Right" | "Far Right"
    reasoning: str = ""


class PoliticalLeaningResult(BaseModel):
    article: PoliticalLeaning = Field(default_factory=PoliticalLeaning)
    source: PoliticalLeaning = Field(default_factory=PoliticalLeaning)


class SourceCredibilityResult(BaseModel):
    name: str
    url: str
    reliability: str  # one of the six reliability labels
    bias: str  # "None" | "Biased" | "Unbiased"
    credibility: float
    reasoning: str = ""
    citations: List[str] = Field(default_factory=list)


class ArticleInfo(BaseModel):
    title: str
    content: str
    url: Optional[str] = None


class ImageDescription(BaseModel):
    url: str
    description: str


class AnalysisResults(BaseModel):
    sentiment: SentimentResult
    factuality: FactualityResult
    politicalLeaning: PoliticalLeaningResult
    source: SourceCredibilityResult
    article: ArticleInfo
    imageDescriptions: List[ImageDescription] = Field(default_factory=list)
