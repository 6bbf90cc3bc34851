"""Slack incoming-webhook notification adapter.

Posts one message per run; every review of the batch is an attachment.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Optional, Sequence

from adapters.notification_formatting import build_payload
from core.config import BASE_URI, NotificationConfig
from core.errors import DeliveryFailed
from core.models import ReviewRecord

LOGGER = logging.getLogger(__name__)


class SlackWebhookNotifier:
    """Notifier adapter that posts review batches to a Slack webhook."""

    def __init__(
        self,
        config: NotificationConfig,
        base_url: str = BASE_URI,
        timeout: Optional[float] = None,
    ) -> None:
        self._config = config
        self._base_url = base_url
        self._timeout = timeout

    def send(self, records: Sequence[ReviewRecord]) -> int:
        """Post the batch and return the number of reviews in the message."""

        if not records:
            return 0

        payload = build_payload(records, self._config, self._base_url)
        data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
        request = urllib.request.Request(self._config.web_hook_uri, data=data, method="POST")
        request.add_header("Content-Type", "application/json; charset=utf-8")
        kwargs = {} if self._timeout is None else {"timeout": self._timeout}
        try:
            with urllib.request.urlopen(request, **kwargs) as response:
                status = response.status
        except urllib.error.HTTPError as e:
            body = e.read().decode("utf-8", errors="replace")
            raise DeliveryFailed(f"Webhook error {e.code}: {body}") from e
        except (urllib.error.URLError, OSError) as e:
            raise DeliveryFailed(f"Webhook unreachable: {e}") from e

        if not 200 <= status < 300:
            raise DeliveryFailed(f"Webhook returned status {status}")

        sent = len(payload["attachments"])
        LOGGER.debug("Webhook accepted %s attachments", sent)
        return sent
