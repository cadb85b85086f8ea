"""Application entry point for the postsorter CLI."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint
from dotenv import load_dotenv

import settings
from adapters.result_formatting import (
    format_keyword_summary,
    format_overview,
    format_report,
    format_result,
    format_stats,
)
from adapters.sqlite_storage import SQLiteStorage
from core.catalog import CATALOG_VERSION, category_names
from core.config import ReprocessConfig
from core.models import PostItem
from core.processor import CategorizationProcessor
from core.rules_engine import build_rules
from core.stats import compute_stats
from core.summary import overview, summarize_keyword

NAME = "POSTSORTER"
FONT = "tarty-1"


def _print_banner() -> None:
    tprint(NAME, FONT, space=1)


class _RedactingFormatter(logging.Formatter):
    def __init__(self, secrets: list[str], fmt: str, datefmt: Optional[str] = None) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self._secrets = [secret for secret in secrets if secret]

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for secret in self._secrets:
            message = message.replace(secret, "***")
        return message


def _collect_redaction_values(config: dict) -> list[str]:
    redact_cfg = config.get("redact", {}) if config else {}
    if not redact_cfg.get("enabled", False):
        return []
    values = []
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging() -> None:
    config = settings.LOGGING or {}
    if not config.get("enabled", False):
        return

    load_dotenv()
    level_name = str(config.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    formatter = _RedactingFormatter(_collect_redaction_values(config), fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if config.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = config.get("file", {})
    if file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/postsorter.log")
        if not os.path.isabs(path):
            path = os.path.join(settings.BASE_DIR, path)
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        file_handler = RotatingFileHandler(
            path,
            maxBytes=int(file_cfg.get("max_bytes", 5 * 1024 * 1024)),
            backupCount=int(file_cfg.get("backup_count", 5)),
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers)


def _open_storage() -> SQLiteStorage:
    storage = SQLiteStorage(settings.DB_PATH)
    storage.init_db()
    added = storage.seed_categories(category_names(settings.RULES_CONFIG))
    if added:
        logging.getLogger(__name__).info("Seeded %s categories", added)
    return storage


def _build_processor(storage: SQLiteStorage) -> CategorizationProcessor:
    rules = build_rules(settings.RULES_CONFIG)
    logging.getLogger(__name__).info("%s rules are loaded (catalog %s)", len(rules), CATALOG_VERSION)
    reprocess_config = ReprocessConfig(threshold=settings.REPROCESS_THRESHOLD, limit=settings.REPROCESS_LIMIT)
    return CategorizationProcessor(rules=rules, store=storage, posts=storage, reprocess_config=reprocess_config)


def _load_posts_file(path: str) -> list[dict]:
    with open(path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if isinstance(payload, dict):
        payload = payload.get("posts", [])
    if not isinstance(payload, list):
        raise ValueError(f"Expected a list of posts in {path}")
    return payload


def _cmd_classify(args: argparse.Namespace) -> int:
    if not args.title and not args.body:
        print("Title or body is required.", file=sys.stderr)
        return 2

    item = PostItem(post_id=args.post_id, title=args.title or "", body=args.body or "", tags=tuple(args.tag))
    if args.update:
        processor = _build_processor(_open_storage())
    else:
        processor = CategorizationProcessor(rules=build_rules(settings.RULES_CONFIG))
    entry = processor.categorize_one(item, update=args.update)

    print(format_result(entry.classification, mode="html" if args.html else "text"))
    if args.update and not entry.updated:
        # Classification succeeded; only the write-back did not.
        print(f"Database update failed: {entry.error}", file=sys.stderr)
        return 1
    return 0


def _cmd_import(args: argparse.Namespace) -> int:
    storage = _open_storage()
    posts = _load_posts_file(args.path)
    imported = 0
    for index, post in enumerate(posts):
        post_id = post.get("id")
        if not post_id:
            logging.getLogger(__name__).warning("Skipping post #%s without id", index)
            continue
        storage.add_post(
            post_id=str(post_id),
            title=post.get("title") or "",
            content=post.get("content") or post.get("body") or "",
            tags=post.get("tags") or [],
            keyword_used=post.get("keyword") or post.get("keyword_used"),
        )
        imported += 1
    print(f"Imported {imported} posts")
    return 0


def _cmd_batch(args: argparse.Namespace) -> int:
    processor = _build_processor(_open_storage())
    report = processor.categorize_stored(keyword=args.keyword, limit=args.limit, update=args.update)
    if not report.entries:
        print("No posts to categorize.")
        return 0
    print(format_report(report, preview=settings.REPORT_PREVIEW))
    return 0


def _cmd_reprocess(args: argparse.Namespace) -> int:
    processor = _build_processor(_open_storage())
    report = processor.reprocess(limit=args.limit, threshold=args.threshold)
    if not report.entries:
        print("No posts need reprocessing.")
        return 0
    print(f"Reprocessed: {report.success_count}/{report.processed} updated")
    print(format_report(report, preview=settings.REPORT_PREVIEW))
    return 0


def _cmd_stats(args: argparse.Namespace) -> int:
    storage = _open_storage()
    print(format_stats(compute_stats(storage.category_assignments())))
    return 0


def _cmd_summary(args: argparse.Namespace) -> int:
    storage = _open_storage()
    if args.keyword:
        limit = settings.SUMMARY_LIMIT if args.limit is None else args.limit
        posts = storage.list_stored_posts(keyword=args.keyword, limit=limit if limit > 0 else None)
        print(format_keyword_summary(summarize_keyword(posts, keyword=args.keyword)))
        return 0

    posts = storage.list_stored_posts()
    print(format_overview(overview(posts, total_categories=storage.count_categories())))
    return 0


def _cmd_categories(args: argparse.Namespace) -> int:
    storage = _open_storage()
    for row in storage.list_categories():
        print(f"{row['id']}  {row['name']}")
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    _open_storage()
    print(f"Database ready at {settings.DB_PATH}")
    return 0


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="postsorter")
    subparsers = parser.add_subparsers(dest="command")

    classify_parser = subparsers.add_parser("classify", help="Classify a single post")
    classify_parser.add_argument("--title", default="")
    classify_parser.add_argument("--body", default="")
    classify_parser.add_argument("--tag", action="append", default=[])
    classify_parser.add_argument("--post-id")
    classify_parser.add_argument("--update", action="store_true", help="Write the result back to the post")
    classify_parser.add_argument("--html", action="store_true", help="Render the result as HTML")
    classify_parser.set_defaults(handler=_cmd_classify)

    import_parser = subparsers.add_parser("import", help="Import posts from a JSON file")
    import_parser.add_argument("path")
    import_parser.set_defaults(handler=_cmd_import)

    batch_parser = subparsers.add_parser("batch", help="Classify stored posts")
    batch_parser.add_argument("--keyword", help="Only posts scraped for this keyword")
    batch_parser.add_argument("--limit", type=int)
    batch_parser.add_argument("--update", action="store_true", help="Write results back")
    batch_parser.set_defaults(handler=_cmd_batch)

    reprocess_parser = subparsers.add_parser("reprocess", help="Reclassify unclassified or low-confidence posts")
    reprocess_parser.add_argument("--limit", type=int)
    reprocess_parser.add_argument("--threshold", type=float)
    reprocess_parser.set_defaults(handler=_cmd_reprocess)

    summary_parser = subparsers.add_parser("summary", help="Summarize posts for a keyword, or the whole store")
    summary_parser.add_argument("--keyword", help="Scrape keyword to summarize")
    summary_parser.add_argument("--limit", type=int, help="Newest posts to consider for a keyword")
    summary_parser.set_defaults(handler=_cmd_summary)

    subparsers.add_parser("stats", help="Show category distribution").set_defaults(handler=_cmd_stats)
    subparsers.add_parser("categories", help="List stored categories").set_defaults(handler=_cmd_categories)
    subparsers.add_parser("init", help="Create the database and seed categories").set_defaults(handler=_cmd_init)
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not getattr(args, "handler", None):
        parser.print_help()
        return 0

    _print_banner()
    _configure_logging()
    logger = logging.getLogger(__name__)
    try:
        return args.handler(args)
    except Exception:
        logger.exception("Command %s failed", args.command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
