"""Canonical data contracts for the article pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


T = TypeVar("T")


class SourceType(str, Enum):
    """Content source categories, each bound to one scraper."""

    FIRECRAWL = "firecrawl"
    TWITTER = "twitter"

    @property
    def label(self) -> str:
        return _SOURCE_LABELS[self]


_SOURCE_LABELS = {
    SourceType.FIRECRAWL: "FireCrawl",
    SourceType.TWITTER: "Twitter",
}


class MediaItem(BaseModel):
    """Image or video attached to a scraped item."""

    url: str
    type: str = "image"
    size: Optional[Dict[str, int]] = None


class ContentMetadata(BaseModel):
    """Free-form metadata; ``keywords`` is rewritten by enrichment."""

    model_config = ConfigDict(extra="allow")

    source: str = ""
    keywords: List[str] = Field(default_factory=list)


class ScrapedContent(BaseModel):
    """One content item from any source; ``id`` is the join key within a run."""

    id: str
    title: str = ""
    content: str = ""
    url: str = ""
    publish_date: Optional[datetime] = None
    score: float = 0.0
    metadata: ContentMetadata = Field(default_factory=ContentMetadata)
    media: List[MediaItem] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _non_empty_id(cls, value: Any) -> str:
        text = str(value or "").strip()
        if not text:
            raise ValueError("id is required")
        return text


class RankResult(BaseModel):
    """Score assigned to one item by the ranker."""

    id: str
    score: float


class Summary(BaseModel):
    """Rewritten title/body/keywords returned by the summarizer."""

    title: str = ""
    content: str = ""
    keywords: List[str] = Field(default_factory=list)


class PublishRecord(BaseModel):
    """Rendering view of a ScrapedContent."""

    id: str
    title: str
    content: str
    url: str
    publish_date: Optional[datetime] = None
    metadata: ContentMetadata
    keywords: List[str] = Field(default_factory=list)
    media: List[MediaItem] = Field(default_factory=list)

    @classmethod
    def from_content(cls, item: ScrapedContent) -> "PublishRecord":
        return cls(
            id=item.id,
            title=item.title,
            content=item.content,
            url=item.url,
            publish_date=item.publish_date,
            metadata=item.metadata.model_copy(deep=True),
            keywords=list(item.metadata.keywords),
            media=[m.model_copy() for m in item.media],
        )


class PublishResult(BaseModel):
    """Outcome of a publish call on the target platform."""

    status: str
    publish_id: Optional[str] = None
    media_id: Optional[str] = None
    url: Optional[str] = None


class ImageRequest(BaseModel):
    """Poster-style cover image generation request."""

    title: str
    sub_title: str = ""
    prompt_text_zh: str = ""
    generate_mode: str = "generate"
    generate_num: int = 1


class SourceConfig(BaseModel):
    identifier: str


class SourceLists(BaseModel):
    """Categorized source identifiers for one run."""

    firecrawl: List[SourceConfig] = Field(default_factory=list)
    twitter: List[SourceConfig] = Field(default_factory=list)

    def by_type(self) -> Dict[SourceType, List[SourceConfig]]:
        return {
            SourceType.FIRECRAWL: list(self.firecrawl),
            SourceType.TWITTER: list(self.twitter),
        }

    @property
    def total(self) -> int:
        return len(self.firecrawl) + len(self.twitter)


@dataclass
class RunStats:
    """Per-source counters produced by the scrape stage."""

    success: int = 0
    failed: int = 0
    contents: int = 0

    @property
    def attempted(self) -> int:
        return self.success + self.failed


class StageOutcome(str, Enum):
    SUCCESS = "success"
    DEGRADED = "degraded"
    HALTED = "halted"
    FATAL = "fatal"


@dataclass
class StageResult(Generic[T]):
    """Outcome of one pipeline stage plus the value it produced."""

    outcome: StageOutcome
    value: T
    error: Optional[BaseException] = None

    @classmethod
    def ok(cls, value: T) -> "StageResult[T]":
        return cls(StageOutcome.SUCCESS, value)

    @classmethod
    def degraded(cls, value: T, error: Optional[BaseException] = None) -> "StageResult[T]":
        return cls(StageOutcome.DEGRADED, value, error)

    @classmethod
    def halted(cls, value: T) -> "StageResult[T]":
        return cls(StageOutcome.HALTED, value)

    @classmethod
    def fatal(cls, value: T, error: Optional[BaseException] = None) -> "StageResult[T]":
        return cls(StageOutcome.FATAL, value, error)

    @property
    def is_fatal(self) -> bool:
        return self.outcome is StageOutcome.FATAL

    @property
    def is_halted(self) -> bool:
        return self.outcome is StageOutcome.HALTED
