from __future__ import annotations

import pytest

from adapters.result_formatting import describe_matches, format_report, format_result
from core.models import BatchEntry, BatchReport, ClassificationResult


def _result() -> ClassificationResult:
    return ClassificationResult(
        category_id="美食",
        category_name="美食",
        confidence=0.25,
        matched_keywords=("火锅", "<b>"),
        matched_patterns=("火锅|烧烤|炒菜|面条",),
    )


def test_describe_matches_lists_keywords_and_patterns() -> None:
    reason = describe_matches(_result())
    assert "keyword(s): 火锅, <b>" in reason
    assert "regex: 火锅|烧烤|炒菜|面条" in reason


def test_describe_matches_for_fallback() -> None:
    fallback = ClassificationResult("其他", "其他", 0.1)
    assert describe_matches(fallback) == "no rule matched"


def test_html_output_is_escaped() -> None:
    output = format_result(_result(), mode="html")
    assert "&lt;b&gt;" in output
    assert "<b>Category:</b> 美食" in output


def test_unknown_mode_raises() -> None:
    with pytest.raises(ValueError):
        format_result(_result(), mode="markdown")


def test_report_preview_is_truncated() -> None:
    entries = [BatchEntry(f"p{i}", _result(), updated=True) for i in range(5)]
    report = BatchReport(entries=entries, success_count=5)

    output = format_report(report, preview=2)

    assert "Processed: 5" in output
    assert "p1: 美食 (0.250) [updated]" in output
    assert "p2:" not in output
    assert "... 3 more" in output
