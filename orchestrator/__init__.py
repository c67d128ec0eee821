"""Single-run article pipeline orchestration."""

from .factory import build_workflow
from .workflow import (
    ArticleWorkflow,
    PipelineState,
    RunReport,
    ScrapeOutput,
)

__all__ = [
    "ArticleWorkflow",
    "PipelineState",
    "RunReport",
    "ScrapeOutput",
    "build_workflow",
]
