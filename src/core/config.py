"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReprocessConfig:
    """Which stored posts are picked up again by ``reprocess``."""

    threshold: float
    limit: int


DEFAULT_REPROCESS = ReprocessConfig(threshold=0.5, limit=50)
