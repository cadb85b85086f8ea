"""Keyword summaries and store-wide overview (core domain).

Both reports are computed from already-loaded StoredPost records so they stay
independent of the storage backend.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence

from core.models import (
    CategoryCount,
    CategorySummary,
    KeywordSummary,
    OverviewStats,
    SamplePost,
    StoredPost,
    TagSummary,
)

UNCLASSIFIED_LABEL = "未分类"
TOP_TAGS_PER_CATEGORY = 5
SAMPLES_PER_CATEGORY = 3
TOP_TAGS = 20
TOP_CATEGORIES = 5

# Upper bound (hours) of each age bucket; the last bucket is open-ended.
TIME_FRAMES = (("24h", 24), ("7d", 24 * 7), ("30d", 24 * 30), ("older", None))


def _percentage(part: int, total: int) -> int:
    return round(part / total * 100) if total else 0


def _top_tags(posts: Sequence[StoredPost], limit: int) -> tuple[str, ...]:
    counts: Counter[str] = Counter(tag for post in posts for tag in post.tags)
    return tuple(tag for tag, _ in counts.most_common(limit))


def _category_summaries(posts: Sequence[StoredPost]) -> tuple[CategorySummary, ...]:
    groups: Dict[str, List[StoredPost]] = {}
    for post in posts:
        groups.setdefault(post.category_name or UNCLASSIFIED_LABEL, []).append(post)

    summaries = [
        CategorySummary(
            name=name,
            post_count=len(members),
            percentage=_percentage(len(members), len(posts)),
            top_tags=_top_tags(members, TOP_TAGS_PER_CATEGORY),
            sample_posts=tuple(
                SamplePost(post_id=post.post_id, title=post.title, created_at=post.created_at)
                for post in members[:SAMPLES_PER_CATEGORY]
            ),
        )
        for name, members in groups.items()
    ]
    # sorted() is stable, so equal counts keep first-seen order.
    return tuple(sorted(summaries, key=lambda item: -item.post_count))


def _tag_summaries(posts: Sequence[StoredPost]) -> tuple[TagSummary, ...]:
    frequency: Counter[str] = Counter()
    categories: Dict[str, Dict[str, None]] = {}
    last_used: Dict[str, datetime] = {}
    for post in posts:
        category = post.category_name or UNCLASSIFIED_LABEL
        for tag in post.tags:
            frequency[tag] += 1
            categories.setdefault(tag, {})[category] = None
            if tag not in last_used or post.created_at > last_used[tag]:
                last_used[tag] = post.created_at

    return tuple(
        TagSummary(tag=tag, frequency=count, categories=tuple(categories[tag]), last_used=last_used[tag])
        for tag, count in frequency.most_common(TOP_TAGS)
    )


def _time_frames(posts: Sequence[StoredPost], now: datetime) -> tuple[tuple[str, int], ...]:
    counts = {label: 0 for label, _ in TIME_FRAMES}
    for post in posts:
        age_hours = (now - post.created_at).total_seconds() / 3600
        for label, bound in TIME_FRAMES:
            if bound is None or age_hours <= bound:
                counts[label] += 1
                break
    return tuple((label, count) for label, count in counts.items() if count)


def summarize_keyword(
    posts: Sequence[StoredPost],
    keyword: Optional[str] = None,
    now: Optional[datetime] = None,
) -> KeywordSummary:
    """Summarize posts scraped for one keyword (or all posts when None)."""

    now = now or datetime.now(timezone.utc)
    if not posts:
        return KeywordSummary(
            keyword=keyword,
            total_posts=0,
            categories=(),
            tags=(),
            earliest=None,
            latest=None,
            average_content_length=0,
            time_frames=(),
        )

    total_length = sum(len(post.title) + len(post.body) for post in posts)
    return KeywordSummary(
        keyword=keyword,
        total_posts=len(posts),
        categories=_category_summaries(posts),
        tags=_tag_summaries(posts),
        earliest=min(post.created_at for post in posts),
        latest=max(post.created_at for post in posts),
        average_content_length=round(total_length / len(posts)),
        time_frames=_time_frames(posts, now),
    )


def overview(
    posts: Sequence[StoredPost],
    total_categories: int,
    now: Optional[datetime] = None,
) -> OverviewStats:
    """Store-wide totals, recent activity windows and the top categories.

    Windows start at midnight of ``now`` (in its own timezone); the week and
    month windows reach back 7 and 30 days from that midnight.
    """

    now = now or datetime.now(timezone.utc)
    today = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_start = today - timedelta(days=7)
    month_start = today - timedelta(days=30)

    counts: Counter[str] = Counter(post.category_name for post in posts if post.category_name)
    top = sorted(counts.items(), key=lambda item: (-item[1], item[0]))[:TOP_CATEGORIES]

    return OverviewStats(
        total_posts=len(posts),
        total_keywords=len({post.keyword_used for post in posts if post.keyword_used}),
        total_categories=total_categories,
        today=sum(1 for post in posts if post.created_at >= today),
        this_week=sum(1 for post in posts if post.created_at >= week_start),
        this_month=sum(1 for post in posts if post.created_at >= month_start),
        top_categories=tuple(CategoryCount(name=name, count=count) for name, count in top),
    )
