"""
Notification service for shipline.

Sends build outcome messages to the team chat. Without a configured
webhook URL every call is a silent no-op.
"""

import logging
from typing import Optional

from ..infra.teams_client import TeamsClient

logger = logging.getLogger(__name__)

ERROR_COLOR = "f44336"
SUCCESS_COLOR = "00acc1"


class Notifier:
    """
    Sends Teams messages for a pipeline run.

    Example:
        notifier = Notifier(webhook_url)
        notifier.send("New Release", "Version 1.2.3 is out", is_error=False)
    """

    def __init__(self, webhook_url: Optional[str], client: Optional[TeamsClient] = None):
        """
        Initialize Notifier.

        Args:
            webhook_url: Teams incoming webhook URL (empty disables sending)
            client: TeamsClient instance (creates new if None)
        """
        self.webhook_url = (webhook_url or "").strip()
        self.client = client or TeamsClient()

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    def send(self, title: str, message: str, is_error: bool) -> bool:
        """
        Send a message if a webhook is configured.

        Returns:
            True if a message was sent, False if notifications are disabled
        """
        if not self.enabled:
            logger.debug(f"No webhook configured, not sending '{title}'")
            return False

        theme_color = ERROR_COLOR if is_error else SUCCESS_COLOR
        self.client.send_message(self.webhook_url, title, message, theme_color)
        return True
