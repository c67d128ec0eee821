"""Core contracts and shared types for the article pipeline."""

from .contracts import (
    ContentMetadata,
    ImageRequest,
    MediaItem,
    PublishRecord,
    PublishResult,
    RankResult,
    RunStats,
    ScrapedContent,
    SourceConfig,
    SourceLists,
    SourceType,
    StageOutcome,
    StageResult,
    Summary,
)

__all__ = [
    "ContentMetadata",
    "ImageRequest",
    "MediaItem",
    "PublishRecord",
    "PublishResult",
    "RankResult",
    "RunStats",
    "ScrapedContent",
    "SourceConfig",
    "SourceLists",
    "SourceType",
    "StageOutcome",
    "StageResult",
    "Summary",
]
