from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Optional

from adapters.result_formatting import format_keyword_summary, format_overview
from core.models import CategoryCount, StoredPost
from core.summary import overview, summarize_keyword

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


def _post(
    post_id: str,
    *,
    category: Optional[str],
    hours_ago: float,
    tags: tuple[str, ...] = (),
    keyword: Optional[str] = "护肤",
    title: str = "标题",
    body: str = "内容内容",
) -> StoredPost:
    return StoredPost(
        post_id=post_id,
        title=title,
        body=body,
        tags=tags,
        keyword_used=keyword,
        category_name=category,
        created_at=NOW - timedelta(hours=hours_ago),
    )


def _posts() -> list[StoredPost]:
    return [
        _post("p1", category="美妆护肤", hours_ago=1, tags=("护肤", "面膜")),
        _post("p2", category="美妆护肤", hours_ago=30, tags=("护肤",)),
        _post("p3", category=None, hours_ago=200, tags=("推荐",)),
        _post("p4", category="美妆护肤", hours_ago=2000, tags=("护肤", "精华")),
        _post("p5", category="美食", hours_ago=5, tags=("推荐",)),
    ]


def test_keyword_summary_groups_categories() -> None:
    summary = summarize_keyword(_posts(), keyword="护肤", now=NOW)

    assert summary.total_posts == 5
    assert [(item.name, item.post_count, item.percentage) for item in summary.categories] == [
        ("美妆护肤", 3, 60),
        ("未分类", 1, 20),
        ("美食", 1, 20),
    ]
    beauty = summary.categories[0]
    assert beauty.top_tags[0] == "护肤"
    assert [sample.post_id for sample in beauty.sample_posts] == ["p1", "p2", "p4"]


def test_keyword_summary_tags_and_time_range() -> None:
    summary = summarize_keyword(_posts(), keyword="护肤", now=NOW)

    top = summary.tags[0]
    assert (top.tag, top.frequency) == ("护肤", 3)
    assert top.categories == ("美妆护肤",)
    assert top.last_used == NOW - timedelta(hours=1)
    recommended = next(tag for tag in summary.tags if tag.tag == "推荐")
    assert recommended.categories == ("未分类", "美食")

    assert summary.earliest == NOW - timedelta(hours=2000)
    assert summary.latest == NOW - timedelta(hours=1)
    assert summary.average_content_length == 6
    assert summary.time_frames == (("24h", 2), ("7d", 1), ("30d", 1), ("older", 1))


def test_empty_keyword_summary() -> None:
    summary = summarize_keyword([], keyword="无", now=NOW)

    assert summary.total_posts == 0
    assert summary.categories == ()
    assert summary.earliest is None
    assert "Total posts: 0" in format_keyword_summary(summary)


def test_overview_counts_recent_activity() -> None:
    posts = _posts() + [_post("p6", category="美食", hours_ago=3, keyword="美食")]

    stats = overview(posts, total_categories=8, now=NOW)

    assert stats.total_posts == 6
    assert stats.total_keywords == 2
    assert stats.total_categories == 8
    # Midnight of NOW is 12 hours back.
    assert stats.today == 3
    assert stats.this_week == 4
    assert stats.this_month == 5
    assert stats.top_categories == (CategoryCount("美妆护肤", 3), CategoryCount("美食", 2))


def test_formatters_render_summary_and_overview() -> None:
    summary_text = format_keyword_summary(summarize_keyword(_posts(), keyword="护肤", now=NOW))
    assert "美妆护肤: 3 (60%)" in summary_text
    assert "Top tags: 护肤 (3)" in summary_text

    overview_text = format_overview(overview(_posts(), total_categories=8, now=NOW))
    assert "Today/7d/30d:     2/3/4" in overview_text
    assert "美妆护肤: 3" in overview_text
