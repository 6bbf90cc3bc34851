"""Core configuration dataclasses.

We keep config parsing outside the core, but these dataclasses define the
shape the core expects so adapters and app layers can build safely.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

BASE_URI = "https://play.google.com"
MAX_REVIEW_NUM = 40


@dataclass(frozen=True)
class NotificationConfig:
    """Webhook delivery settings consumed by the notifier adapter."""

    review_count: int
    bot_name: str
    icon_emoji: str
    message_text: str
    web_hook_uri: str


@dataclass(frozen=True)
class FetchConfig:
    """Storefront request settings."""

    base_url: str = BASE_URI
    timeout: Optional[float] = None
    language: Optional[str] = None


@dataclass(frozen=True)
class AppConfig:
    """Validated application configuration."""

    app_id: str
    locale: str
    db_path: str
    notifications: NotificationConfig
    fetch: FetchConfig = field(default_factory=FetchConfig)
    logging: dict[str, Any] = field(default_factory=dict)
