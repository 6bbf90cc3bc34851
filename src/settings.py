"""Configuration loading for playreview.

All user-editable settings (app, notifications, logging) live in a single
JSON file; the webhook URL may instead come from the environment so it stays
out of the file.
"""

from __future__ import annotations

import json
import os
from typing import Any, Optional

from dotenv import load_dotenv

from core.config import MAX_REVIEW_NUM, AppConfig, FetchConfig, NotificationConfig
from core.errors import ConfigError
from core.rating import LOCALES

DEFAULT_CONFIG_PATH = "config.json"
DEFAULT_DB_NAME = "playreview.db"
WEBHOOK_ENV = "SLACK_WEBHOOK_URL"


def _load_json_config(path: str) -> dict:
    """Load the JSON config file with a flat, user-friendly schema."""

    if not os.path.exists(path):
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Config file is not valid JSON: {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a JSON object: {path}")
    return data


def _review_count(raw: Any) -> int:
    # bool is an int subclass; reject it explicitly.
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise ConfigError(f"Please set review_count between 1 and {MAX_REVIEW_NUM}.")
    if raw < 1 or raw > MAX_REVIEW_NUM:
        raise ConfigError(f"Please set review_count between 1 and {MAX_REVIEW_NUM}.")
    return raw


def _normalize_notifications(raw: dict) -> NotificationConfig:
    """Validate the notifications section; the environment wins for the webhook."""

    web_hook_uri = os.getenv(WEBHOOK_ENV) or raw.get("web_hook_uri")
    if not web_hook_uri:
        raise ConfigError(f"notifications.web_hook_uri or {WEBHOOK_ENV} is required")

    return NotificationConfig(
        review_count=_review_count(raw.get("review_count")),
        bot_name=str(raw.get("bot_name", "playreview")),
        icon_emoji=str(raw.get("icon_emoji", ":star:")),
        message_text=str(raw.get("message_text", "")),
        web_hook_uri=web_hook_uri,
    )


def _normalize_fetch(raw: dict) -> FetchConfig:
    timeout = raw.get("timeout")
    if timeout is not None:
        try:
            timeout = float(timeout)
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"fetch.timeout must be a number: {timeout!r}") from exc
    return FetchConfig(
        base_url=str(raw.get("base_url") or FetchConfig.base_url),
        timeout=timeout,
        language=raw.get("language") or None,
    )


def _resolve_db_path(raw: Optional[str], config_path: str) -> str:
    """Resolve a relative db_path against the config file's directory."""

    db_path = raw or DEFAULT_DB_NAME
    if db_path == ":memory:" or os.path.isabs(db_path):
        return db_path
    base_dir = os.path.dirname(os.path.abspath(config_path))
    return os.path.join(base_dir, db_path)


def _normalize_logging(raw: dict, config_path: str) -> dict:
    """Return the logging section with a relative file path made absolute."""

    logging_cfg = dict(raw)
    file_cfg = dict(logging_cfg.get("file", {}))
    path = file_cfg.get("path", "logs/playreview.log")
    if not os.path.isabs(path):
        path = os.path.join(os.path.dirname(os.path.abspath(config_path)), path)
    file_cfg["path"] = path
    logging_cfg["file"] = file_cfg
    return logging_cfg


def load_settings(path: str = DEFAULT_CONFIG_PATH) -> AppConfig:
    """Load, validate and return the application configuration."""

    load_dotenv()
    data = _load_json_config(path)

    app_id = str(data.get("app_id") or "").strip()
    if not app_id:
        raise ConfigError("Please set your Google Play app_id.")

    locale = str(data.get("locale", "ja"))
    if locale not in LOCALES:
        raise ConfigError(f"locale must be one of {', '.join(sorted(LOCALES))}, got {locale!r}")

    return AppConfig(
        app_id=app_id,
        locale=locale,
        db_path=_resolve_db_path(data.get("db_path"), path),
        notifications=_normalize_notifications(data.get("notifications", {})),
        fetch=_normalize_fetch(data.get("fetch", {})),
        logging=_normalize_logging(data.get("logging", {}), path),
    )
