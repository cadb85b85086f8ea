"""Core categorization pipeline.

This module is storage-agnostic. It only relies on ports for reading posts
and writing results back, so classification and persistence stay separate
failure domains: a store failure is recorded on the entry and the batch
moves on to the next item.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from core.config import DEFAULT_REPROCESS, ReprocessConfig
from core.errors import StoreError
from core.models import BatchEntry, BatchReport, ClassificationResult, PostItem
from core.ports import CategoryStorePort, PostSourcePort
from core.rules_engine import CategoryRule, classify, classify_batch

LOGGER = logging.getLogger(__name__)


def _normalize_limit(limit: Optional[int]) -> Optional[int]:
    if limit is None or limit <= 0:
        return None
    return limit


class CategorizationProcessor:
    """Orchestrates classification and optional write-back."""

    def __init__(
        self,
        rules: Iterable[CategoryRule],
        store: Optional[CategoryStorePort] = None,
        posts: Optional[PostSourcePort] = None,
        reprocess_config: ReprocessConfig = DEFAULT_REPROCESS,
    ) -> None:
        self._rules = tuple(rules)
        self._store = store
        self._posts = posts
        self._reprocess = reprocess_config

    def _persist(self, post_id: Optional[str], result: ClassificationResult) -> BatchEntry:
        if self._store is None:
            raise RuntimeError("No category store configured for write-back")
        if not post_id:
            return BatchEntry(post_id, result, updated=False, error="missing post id")

        try:
            category_id = self._store.resolve_category_id(result.category_name)
            self._store.update_post_category(post_id, category_id, result.confidence)
        except StoreError as exc:
            LOGGER.warning("Failed to update category for post %s: %s", post_id, exc)
            return BatchEntry(post_id, result, updated=False, error=str(exc))

        return BatchEntry(post_id, result, updated=True)

    def categorize_one(self, item: PostItem, update: bool = False) -> BatchEntry:
        """Classify one post and optionally write the result back."""

        result = classify(item.title, item.body, item.tags, self._rules)
        LOGGER.debug("Post %s classified as %s (%.3f)", item.post_id, result.category_name, result.confidence)
        if not update:
            return BatchEntry(item.post_id, result)
        return self._persist(item.post_id, result)

    def categorize_batch(self, items: Iterable[PostItem], update: bool = False) -> BatchReport:
        """Classify items in order; each write-back failure is local to its item."""

        report = BatchReport()
        for post_id, result in classify_batch(items, self._rules):
            entry = self._persist(post_id, result) if update else BatchEntry(post_id, result)
            report.entries.append(entry)
            if update and not entry.updated:
                report.failure_count += 1
            else:
                report.success_count += 1

        LOGGER.info(
            "Batch complete: processed=%s, success=%s, failures=%s",
            report.processed,
            report.success_count,
            report.failure_count,
        )
        return report

    def categorize_stored(
        self,
        keyword: Optional[str] = None,
        limit: Optional[int] = None,
        update: bool = False,
    ) -> BatchReport:
        """Classify stored posts, newest first, optionally filtered by scrape keyword."""

        if self._posts is None:
            raise RuntimeError("No post source configured")
        items = self._posts.list_posts(keyword=keyword, limit=_normalize_limit(limit))
        if not items:
            LOGGER.info("No posts to categorize (keyword=%s)", keyword or "all")
        return self.categorize_batch(items, update=update)

    def reprocess(self, limit: Optional[int] = None, threshold: Optional[float] = None) -> BatchReport:
        """Reclassify unclassified or low-confidence posts and write them back.

        Arguments left as None fall back to the processor's ReprocessConfig.
        """

        if self._posts is None:
            raise RuntimeError("No post source configured")
        if limit is None:
            limit = self._reprocess.limit
        if threshold is None:
            threshold = self._reprocess.threshold
        items = self._posts.list_reprocess_candidates(threshold=threshold, limit=_normalize_limit(limit))
        LOGGER.info("Reprocessing %s posts below confidence %s", len(items), threshold)
        return self.categorize_batch(items, update=True)
