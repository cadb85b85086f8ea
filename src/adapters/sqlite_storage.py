"""SQLite storage adapter.

Implements the core CategoryStorePort and PostSourcePort using a simple
SQLite database.
"""

from __future__ import annotations

import json
import sqlite3
import uuid
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Sequence

from core.errors import CategoryNotFoundError, PersistenceError
from core.models import PostItem, StoredPost


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the store and post source ports."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self) -> None:
        """Create tables if they do not exist.

        Tables:
        - categories: category names and their stored identifiers
        - posts: scraped posts and their current classification
        """

        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS categories (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL UNIQUE,
                    description TEXT
                )
                """
            )
            # Fields:
            # - tags: JSON array of strings
            # - keyword_used: search keyword the post was scraped for
            # - category_id/confidence: NULL until the post is classified
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS posts (
                    id TEXT PRIMARY KEY,
                    title TEXT NOT NULL DEFAULT '',
                    content TEXT NOT NULL DEFAULT '',
                    tags TEXT NOT NULL DEFAULT '[]',
                    keyword_used TEXT,
                    category_id TEXT REFERENCES categories(id),
                    confidence REAL,
                    created_at TIMESTAMP NOT NULL,
                    updated_at TIMESTAMP
                )
                """
            )

    def seed_categories(self, names: Iterable[str]) -> int:
        """Insert any missing categories and return how many were added."""

        added = 0
        with self._connect() as conn:
            for name in names:
                cur = conn.execute(
                    "INSERT OR IGNORE INTO categories (id, name) VALUES (?, ?)",
                    (str(uuid.uuid4()), name),
                )
                added += cur.rowcount
        return added

    def list_categories(self) -> List[sqlite3.Row]:
        with self._connect() as conn:
            return conn.execute("SELECT id, name, description FROM categories ORDER BY name").fetchall()

    def add_post(
        self,
        post_id: str,
        title: str,
        content: str,
        tags: Sequence[str] = (),
        keyword_used: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> None:
        """Insert or replace a post, keeping any existing classification."""

        created = created_at or datetime.now(timezone.utc)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO posts (id, title, content, tags, keyword_used, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    content = excluded.content,
                    tags = excluded.tags,
                    keyword_used = excluded.keyword_used
                """,
                (post_id, title, content, json.dumps(list(tags), ensure_ascii=False), keyword_used, created.isoformat()),
            )

    @staticmethod
    def _to_item(row: sqlite3.Row) -> PostItem:
        try:
            tags = tuple(json.loads(row["tags"] or "[]"))
        except json.JSONDecodeError:
            tags = ()
        return PostItem(post_id=row["id"], title=row["title"] or "", body=row["content"] or "", tags=tags)

    def list_posts(self, keyword: Optional[str] = None, limit: Optional[int] = None) -> List[PostItem]:
        """Return posts newest first, optionally filtered by scrape keyword."""

        query = "SELECT id, title, content, tags FROM posts"
        params: list = []
        if keyword:
            query += " WHERE keyword_used = ?"
            params.append(keyword)
        query += " ORDER BY created_at DESC, id"
        if limit:
            query += " LIMIT ?"
            params.append(limit)

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._to_item(row) for row in rows]

    def list_reprocess_candidates(self, threshold: float, limit: Optional[int] = None) -> List[PostItem]:
        """Return posts that are unclassified or below the confidence threshold."""

        query = """
            SELECT id, title, content, tags FROM posts
            WHERE category_id IS NULL OR confidence IS NULL OR confidence < ?
            ORDER BY created_at DESC, id
        """
        params: list = [threshold]
        if limit:
            query += " LIMIT ?"
            params.append(limit)

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()
        return [self._to_item(row) for row in rows]

    def resolve_category_id(self, category_name: str) -> str:
        """Return the stored identifier for a category name."""

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT id FROM categories WHERE name = ?",
                    (category_name,),
                ).fetchone()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to look up category {category_name}: {exc}") from exc
        if row is None:
            raise CategoryNotFoundError(category_name)
        return row["id"]

    def update_post_category(self, post_id: str, category_id: str, confidence: float) -> None:
        """Write a classification back to a post."""

        updated_at = datetime.now(timezone.utc)
        try:
            with self._connect() as conn:
                cur = conn.execute(
                    """
                    UPDATE posts
                    SET category_id = ?, confidence = ?, updated_at = ?
                    WHERE id = ?
                    """,
                    (category_id, confidence, updated_at.isoformat(), post_id),
                )
        except sqlite3.Error as exc:
            raise PersistenceError(f"Failed to update post {post_id}: {exc}") from exc
        if cur.rowcount == 0:
            raise PersistenceError(f"Post not found: {post_id}")

    def list_stored_posts(self, keyword: Optional[str] = None, limit: Optional[int] = None) -> List[StoredPost]:
        """Return posts with their category name, newest first."""

        query = """
            SELECT posts.id AS id, posts.title AS title, posts.content AS content, posts.tags AS tags,
                   posts.keyword_used AS keyword_used, posts.created_at AS created_at,
                   categories.name AS category_name
            FROM posts
            LEFT JOIN categories ON categories.id = posts.category_id
        """
        params: list = []
        if keyword:
            query += " WHERE posts.keyword_used = ?"
            params.append(keyword)
        query += " ORDER BY posts.created_at DESC, posts.id"
        if limit:
            query += " LIMIT ?"
            params.append(limit)

        with self._connect() as conn:
            rows = conn.execute(query, params).fetchall()

        posts: List[StoredPost] = []
        for row in rows:
            item = self._to_item(row)
            created_at = datetime.fromisoformat(row["created_at"])
            if created_at.tzinfo is None:
                created_at = created_at.replace(tzinfo=timezone.utc)
            posts.append(
                StoredPost(
                    post_id=row["id"],
                    title=item.title,
                    body=item.body,
                    tags=item.tags,
                    keyword_used=row["keyword_used"],
                    category_name=row["category_name"],
                    created_at=created_at,
                )
            )
        return posts

    def count_categories(self) -> int:
        with self._connect() as conn:
            row = conn.execute("SELECT COUNT(*) AS total FROM categories").fetchone()
        return int(row["total"])

    def category_assignments(self) -> List[Optional[str]]:
        """Return the category name of every post (None when unclassified)."""

        with self._connect() as conn:
            rows = conn.execute(
                """
                SELECT categories.name AS name
                FROM posts
                LEFT JOIN categories ON categories.id = posts.category_id
                """
            ).fetchall()
        return [row["name"] for row in rows]
