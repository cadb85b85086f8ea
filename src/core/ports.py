"""Ports (interfaces) used by the categorization processor.

Ports define the minimal contracts for storage adapters so that the core can
be reused with different backends.
"""

from __future__ import annotations

from typing import List, Optional, Protocol

from core.models import PostItem, StoredPost


class CategoryStorePort(Protocol):
    """Write-back operations for classification results.

    ``resolve_category_id`` raises CategoryNotFoundError for unknown names and
    ``update_post_category`` raises PersistenceError when the write fails.
    """

    def resolve_category_id(self, category_name: str) -> str:
        ...

    def update_post_category(self, post_id: str, category_id: str, confidence: float) -> None:
        ...


class PostSourcePort(Protocol):
    """Read operations for stored posts."""

    def list_posts(self, keyword: Optional[str] = None, limit: Optional[int] = None) -> List[PostItem]:
        ...

    def list_reprocess_candidates(self, threshold: float, limit: Optional[int] = None) -> List[PostItem]:
        ...

    def list_stored_posts(self, keyword: Optional[str] = None, limit: Optional[int] = None) -> List[StoredPost]:
        ...
