"""Errors raised by store adapters and handled by the core processor."""

from __future__ import annotations


class StoreError(Exception):
    """Base class for failures while writing classifications back."""


class CategoryNotFoundError(StoreError):
    """A category name has no stored identifier."""

    def __init__(self, category_name: str) -> None:
        super().__init__(f"Category not found: {category_name}")
        self.category_name = category_name


class PersistenceError(StoreError):
    """Writing a classification to the store failed."""
