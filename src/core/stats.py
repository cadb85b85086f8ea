"""Category distribution helpers (core domain)."""

from __future__ import annotations

from collections import Counter
from typing import Iterable, Optional

from core.models import CategoryCount, CategoryStats


def compute_stats(category_names: Iterable[Optional[str]]) -> CategoryStats:
    """Summarize stored assignments; ``None`` marks an unclassified post."""

    counts: Counter[str] = Counter()
    unclassified = 0
    for name in category_names:
        if name is None:
            unclassified += 1
        else:
            counts[name] += 1

    classified = sum(counts.values())
    total = classified + unclassified
    rate = round(classified / total * 100) if total else 0
    ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))

    return CategoryStats(
        total_posts=classified,
        unclassified_posts=unclassified,
        categories=tuple(CategoryCount(name=name, count=count) for name, count in ordered),
        classification_rate=rate,
    )
