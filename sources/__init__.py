"""Source-list providers."""

from .providers import (
    FileSourceProvider,
    SourceProvider,
    StaticSourceProvider,
    parse_source_lists,
)

__all__ = [
    "FileSourceProvider",
    "SourceProvider",
    "StaticSourceProvider",
    "parse_source_lists",
]
