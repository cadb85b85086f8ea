"""Shared result formatting helpers.

Keeping formatting here prevents drift between the CLI commands and keeps
output consistent regardless of how it is displayed.
"""

from __future__ import annotations

import html

from core.models import BatchReport, CategoryStats, ClassificationResult, KeywordSummary, OverviewStats

DIVIDER = "──────────────"


def describe_matches(result: ClassificationResult) -> str:
    """Return a human-readable reason for the chosen category."""

    parts = []
    if result.matched_keywords:
        parts.append(f"keyword(s): {', '.join(result.matched_keywords)}")
    if result.matched_patterns:
        parts.append(f"regex: {', '.join(result.matched_patterns)}")
    return "\n".join(parts) or "no rule matched"


def _format_text(result: ClassificationResult) -> str:
    lines = [
        f"Category:   {result.category_name}",
        f"Confidence: {result.confidence:.3f}",
        DIVIDER,
        "Why:",
        describe_matches(result),
    ]
    return "\n".join(lines)


def _format_html(result: ClassificationResult) -> str:
    reason = html.escape(describe_matches(result)).replace("\n", "<br>")
    parts = [
        f"<b>Category:</b> {html.escape(result.category_name)}",
        f"<b>Confidence:</b> {result.confidence:.3f}",
        DIVIDER,
        "<b>Why:</b>",
        reason,
    ]
    return "\n".join(parts)


def format_result(result: ClassificationResult, mode: str = "text") -> str:
    """Return the classification formatted for the requested mode."""

    if mode == "text":
        return _format_text(result)
    if mode == "html":
        return _format_html(result)
    raise ValueError(f"Unsupported result format: {mode}")


def format_report(report: BatchReport, preview: int = 10) -> str:
    """Summarize a batch run, listing at most ``preview`` entries."""

    lines = [
        f"Processed: {report.processed}",
        f"Succeeded: {report.success_count}",
        f"Failed:    {report.failure_count}",
    ]
    if report.entries and preview > 0:
        lines.append(DIVIDER)
        for entry in report.entries[:preview]:
            status = "updated" if entry.updated else (entry.error or "not written")
            lines.append(
                f"{entry.post_id or '-'}: {entry.classification.category_name} "
                f"({entry.classification.confidence:.3f}) [{status}]"
            )
        hidden = report.processed - preview
        if hidden > 0:
            lines.append(f"... {hidden} more")
    return "\n".join(lines)


def format_stats(stats: CategoryStats) -> str:
    lines = [
        f"Classified posts:   {stats.total_posts}",
        f"Unclassified posts: {stats.unclassified_posts}",
        f"Classification rate: {stats.classification_rate}%",
        DIVIDER,
    ]
    lines.extend(f"{item.name}: {item.count}" for item in stats.categories)
    return "\n".join(lines)


def _timestamp(value) -> str:
    return value.astimezone().strftime("%Y-%m-%d %H:%M") if value else "-"


def format_keyword_summary(summary: KeywordSummary) -> str:
    """Render a keyword summary: categories, tags, time range, age buckets."""

    lines = [
        f"Keyword:     {summary.keyword or 'all'}",
        f"Total posts: {summary.total_posts}",
    ]
    if not summary.total_posts:
        return "\n".join(lines)

    lines.extend(
        [
            f"Time range:  {_timestamp(summary.earliest)} .. {_timestamp(summary.latest)}",
            f"Avg length:  {summary.average_content_length}",
            DIVIDER,
        ]
    )
    for category in summary.categories:
        lines.append(f"{category.name}: {category.post_count} ({category.percentage}%)")
        if category.top_tags:
            lines.append(f"  tags: {', '.join(category.top_tags)}")
        for sample in category.sample_posts:
            lines.append(f"  - {sample.title or sample.post_id}")
    if summary.tags:
        lines.append(DIVIDER)
        lines.append("Top tags: " + ", ".join(f"{tag.tag} ({tag.frequency})" for tag in summary.tags))
    if summary.time_frames:
        lines.append("Age: " + ", ".join(f"{label}: {count}" for label, count in summary.time_frames))
    return "\n".join(lines)


def format_overview(stats: OverviewStats) -> str:
    lines = [
        f"Total posts:      {stats.total_posts}",
        f"Keywords:         {stats.total_keywords}",
        f"Categories:       {stats.total_categories}",
        f"Today/7d/30d:     {stats.today}/{stats.this_week}/{stats.this_month}",
        DIVIDER,
    ]
    lines.extend(f"{item.name}: {item.count}" for item in stats.top_categories)
    return "\n".join(lines)
