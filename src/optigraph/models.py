"""Shared domain models used across optigraph."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence


@dataclass(frozen=True)
class SearchResultItem:
    """Backend-agnostic content record produced from a graph search hit."""

    guid: str | None
    name: str
    content_type: str
    language: str
    url: str | None = None
    score: float | None = None
    modified: str | None = None
    status: str | None = None
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "guid": self.guid,
            "name": self.name,
            "contentType": self.content_type,
            "language": self.language,
            "url": self.url,
            "score": self.score,
            "modified": self.modified,
            "status": self.status,
            "id": self.id,
        }


@dataclass(frozen=True)
class SearchResult:
    """Outcome of a content search; ``error`` is set instead of raising."""

    items: Sequence[SearchResultItem] = field(default_factory=list)
    error: str | None = None


@dataclass(frozen=True)
class SynonymUploadResult:
    """Tri-state outcome of a synonym upload."""

    success: bool
    message: str
    error: str | None = None
