"""Application entry point for the playreview harvester."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from art import tprint

import settings
from adapters.slack_notifier import SlackWebhookNotifier
from adapters.sqlite_storage import SQLiteReviewStore
from adapters.storefront_fetcher import StorefrontFetcher
from core.config import AppConfig
from core.errors import PlayReviewError
from core.processor import ReviewHarvester
from core.rating import LOCALES, render_rating

NAME = "PLAYREVIEW"
FONT = "tarty-1"

LOGGER = logging.getLogger(__name__)


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


def _collect_redaction_values(config: AppConfig) -> list[str]:
    redact_cfg = config.logging.get("redact", {})
    if not redact_cfg.get("enabled", True):
        return []
    values = [config.notifications.web_hook_uri]
    for name in redact_cfg.get("patterns", []):
        value = os.getenv(name)
        if value:
            values.append(value)
    return sorted(set(values), key=len, reverse=True)


def _configure_logging(config: Optional[AppConfig]) -> None:
    log_cfg = config.logging if config else {}
    level_name = str(log_cfg.get("level", "INFO")).upper()
    level = getattr(logging, level_name, logging.INFO)

    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    secrets = _collect_redaction_values(config) if config else []
    formatter = _RedactingFormatter(secrets, fmt=fmt, datefmt=datefmt)

    handlers: list[logging.Handler] = []

    if not log_cfg.get("enabled", True):
        handlers.append(logging.NullHandler())
    elif log_cfg.get("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    file_cfg = log_cfg.get("file", {})
    if log_cfg.get("enabled", True) and file_cfg.get("enabled", False):
        path = file_cfg.get("path", "logs/playreview.log")
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        max_bytes = int(file_cfg.get("max_bytes", 5 * 1024 * 1024))
        backup_count = int(file_cfg.get("backup_count", 5))
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    if not handlers:
        return

    logging.basicConfig(level=level, handlers=handlers, force=True)


def _build_fetcher(config: AppConfig) -> StorefrontFetcher:
    return StorefrontFetcher(
        base_url=config.fetch.base_url,
        timeout=config.fetch.timeout,
        language=config.fetch.language,
    )


def _run(config: AppConfig) -> None:
    LOGGER.info("Start getting Google Play reviews for %s", config.app_id)

    store = SQLiteReviewStore(config.db_path)
    store.init_db()
    notifier = SlackWebhookNotifier(
        config.notifications,
        base_url=config.fetch.base_url,
        timeout=config.fetch.timeout,
    )
    harvester = ReviewHarvester(
        fetcher=_build_fetcher(config),
        store=store,
        notifier=notifier,
        app_id=config.app_id,
        locale=LOCALES[config.locale],
    )
    result = harvester.run()
    LOGGER.info(
        "Done: extracted=%s, new=%s, notified=%s",
        result.extracted,
        len(result.new_reviews),
        result.notified,
    )


def _check(config: AppConfig) -> None:
    _build_fetcher(config).ensure_app_exists(config.app_id)
    LOGGER.info("Configuration OK, %s exists on the storefront", config.app_id)


def _init_db(config: AppConfig) -> None:
    SQLiteReviewStore(config.db_path).init_db()
    LOGGER.info("Review table ready in %s", config.db_path)


def _history(config: AppConfig, limit: int) -> None:
    store = SQLiteReviewStore(config.db_path)
    store.init_db()
    records = store.list_recent(limit)
    if not records:
        print("No reviews stored yet.")
        return

    for record in records:
        stars = render_rating(record.rate, "*") or "-"
        print(f"{record.id}. {record.updated_at:%Y-%m-%d} | {stars} | {record.author} | {record.title}")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="playreview")
    parser.add_argument("-c", "--config", default=settings.DEFAULT_CONFIG_PATH, help="config file")
    parser.add_argument("--no-banner", action="store_true", help="do not print the banner")
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("run", help="Fetch reviews, save new ones and notify")
    subparsers.add_parser("check", help="Validate the config and the app id")
    subparsers.add_parser("init-db", help="Create the review table")
    history = subparsers.add_parser("history", help="Show the latest stored reviews")
    history.add_argument("-n", "--limit", type=int, default=10)

    args = parser.parse_args(argv)
    if not args.no_banner:
        _print_banner()

    try:
        config = settings.load_settings(args.config)
    except PlayReviewError as exc:
        _configure_logging(None)
        LOGGER.error("%s", exc)
        return 1

    _configure_logging(config)

    try:
        if args.command == "check":
            _check(config)
        elif args.command == "init-db":
            _init_db(config)
        elif args.command == "history":
            _history(config, args.limit)
        else:
            _run(config)
    except PlayReviewError as exc:
        LOGGER.error("%s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
