"""Category rule compilation and scoring (core domain)."""

from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from core.catalog import DEFAULT_CATALOG, FALLBACK_CATEGORY, FALLBACK_CONFIDENCE
from core.models import ClassificationResult, PostItem

KEYWORD_WEIGHT = 1
PATTERN_WEIGHT = 3
PRIORITY_BONUS_UNIT = 0.5


@dataclass(frozen=True)
class CategoryRule:
    """Compiled category rule used by the classifier."""

    id: str
    name: str
    keywords: Tuple[str, ...]
    content_patterns: Tuple[re.Pattern, ...]
    raw_patterns: Tuple[str, ...]
    priority: int
    priority_bonus: float

    @property
    def max_score(self) -> float:
        return (
            len(self.keywords) * KEYWORD_WEIGHT
            + len(self.content_patterns) * PATTERN_WEIGHT
            + self.priority_bonus
        )


def build_rules(rules_config: Iterable[dict]) -> Tuple[CategoryRule, ...]:
    """Normalize rule configs and compile regex patterns.

    A rule without an explicit priority takes its 1-based position in the
    config. The priority bonus scales with ``max_priority + 1 - priority``
    so it stays positive whatever the size of the catalog.
    """

    enabled = [rule for rule in rules_config if rule.get("enabled", True)]
    priorities: List[int] = []
    for position, rule in enumerate(enabled, start=1):
        if not rule.get("name"):
            raise ValueError(f"Rule #{position} has no name")
        priorities.append(int(rule.get("priority", position)))

    if not enabled:
        return ()

    ceiling = max(priorities) + 1
    compiled: List[CategoryRule] = []
    for rule, priority in zip(enabled, priorities):
        raw_patterns = tuple(rule.get("patterns", []) or [])
        try:
            patterns = tuple(re.compile(pattern, re.IGNORECASE) for pattern in raw_patterns)
        except re.error as exc:
            raise ValueError(f"Invalid pattern in rule {rule['name']!r}: {exc}") from exc
        compiled.append(
            CategoryRule(
                id=rule.get("id", rule["name"]),
                name=rule["name"],
                keywords=tuple(rule.get("keywords", []) or []),
                content_patterns=patterns,
                raw_patterns=raw_patterns,
                priority=priority,
                priority_bonus=(ceiling - priority) * PRIORITY_BONUS_UNIT,
            )
        )
    return tuple(compiled)


DEFAULT_RULES = build_rules(DEFAULT_CATALOG)


def build_subject(title: Optional[str], body: Optional[str], tags: Optional[Sequence[str]]) -> str:
    """Return the lower-cased text every rule is matched against."""

    tag_text = " ".join(tag for tag in (tags or ()) if tag is not None)
    return f"{title or ''} {body or ''} {tag_text}".lower()


def fallback_result() -> ClassificationResult:
    return ClassificationResult(
        category_id=FALLBACK_CATEGORY,
        category_name=FALLBACK_CATEGORY,
        confidence=FALLBACK_CONFIDENCE,
    )


def classify(
    title: Optional[str],
    body: Optional[str],
    tags: Optional[Sequence[str]] = None,
    rules: Optional[Sequence[CategoryRule]] = None,
) -> ClassificationResult:
    """Score the text against every rule and return the best category.

    Scoring:
    - +1 for each keyword present in the subject (presence, not frequency).
    - +3 for each pattern that matches anywhere in the subject.
    - + the rule's priority bonus, only for rules that hit something.

    The highest raw score wins and the earlier rule wins ties. Confidence is
    the score over the rule's own maximum, capped at 1.0.
    """

    subject = build_subject(title, body, tags)
    best: Optional[ClassificationResult] = None
    best_score = 0.0

    for rule in DEFAULT_RULES if rules is None else rules:
        keyword_hits = [k for k in rule.keywords if k.lower() in subject]
        pattern_hits = [
            raw for raw, pattern in zip(rule.raw_patterns, rule.content_patterns) if pattern.search(subject)
        ]
        if not keyword_hits and not pattern_hits:
            continue

        score = (
            len(keyword_hits) * KEYWORD_WEIGHT
            + len(pattern_hits) * PATTERN_WEIGHT
            + rule.priority_bonus
        )
        # Strict comparison keeps the first rule on ties.
        if best is not None and score <= best_score:
            continue

        best_score = score
        best = ClassificationResult(
            category_id=rule.id,
            category_name=rule.name,
            confidence=min(score / rule.max_score, 1.0),
            matched_keywords=tuple(keyword_hits),
            matched_patterns=tuple(pattern_hits),
        )

    return best if best is not None else fallback_result()


def classify_batch(
    items: Iterable[PostItem],
    rules: Optional[Sequence[CategoryRule]] = None,
) -> List[Tuple[Optional[str], ClassificationResult]]:
    """Classify items one after another; output order follows input order."""

    return [(item.post_id, classify(item.title, item.body, item.tags, rules)) for item in items]
