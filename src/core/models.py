"""Core domain models.

These dataclasses are shared across the core and adapters to avoid tight
coupling to any storage-specific types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PostItem:
    """One post as seen by the classifier."""

    post_id: Optional[str]
    title: str
    body: str
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ClassificationResult:
    """Winning category for one post."""

    category_id: str
    category_name: str
    confidence: float
    matched_keywords: tuple[str, ...] = ()
    matched_patterns: tuple[str, ...] = ()


@dataclass(frozen=True)
class BatchEntry:
    """Classification of one item plus the outcome of writing it back."""

    post_id: Optional[str]
    classification: ClassificationResult
    updated: bool = False
    error: Optional[str] = None


@dataclass
class BatchReport:
    """Totals for a batch run; entries keep input order."""

    entries: list[BatchEntry] = field(default_factory=list)
    success_count: int = 0
    failure_count: int = 0

    @property
    def processed(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class CategoryCount:
    name: str
    count: int


@dataclass(frozen=True)
class CategoryStats:
    """Distribution of stored posts across categories."""

    total_posts: int
    unclassified_posts: int
    categories: tuple[CategoryCount, ...]
    classification_rate: int


@dataclass(frozen=True)
class StoredPost:
    """A stored post with its current classification, used for summaries."""

    post_id: str
    title: str
    body: str
    tags: tuple[str, ...]
    keyword_used: Optional[str]
    category_name: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class SamplePost:
    post_id: str
    title: str
    created_at: datetime


@dataclass(frozen=True)
class CategorySummary:
    name: str
    post_count: int
    percentage: int
    top_tags: tuple[str, ...]
    sample_posts: tuple[SamplePost, ...]


@dataclass(frozen=True)
class TagSummary:
    tag: str
    frequency: int
    categories: tuple[str, ...]
    last_used: datetime


@dataclass(frozen=True)
class KeywordSummary:
    """Report for the posts scraped under one search keyword."""

    keyword: Optional[str]
    total_posts: int
    categories: tuple[CategorySummary, ...]
    tags: tuple[TagSummary, ...]
    earliest: Optional[datetime]
    latest: Optional[datetime]
    average_content_length: int
    time_frames: tuple[tuple[str, int], ...]


@dataclass(frozen=True)
class OverviewStats:
    """Store-wide counts and recent activity."""

    total_posts: int
    total_keywords: int
    total_categories: int
    today: int
    this_week: int
    this_month: int
    top_categories: tuple[CategoryCount, ...]
