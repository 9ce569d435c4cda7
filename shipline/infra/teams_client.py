"""
Microsoft Teams incoming-webhook client for shipline.
"""

import logging
from typing import Dict, Any

import requests

from ..exit_codes import APIError

logger = logging.getLogger(__name__)


def build_message_card(title: str, text: str, theme_color: str) -> Dict[str, Any]:
    """Build a legacy MessageCard payload accepted by Teams webhooks."""
    return {
        '@type': 'MessageCard',
        '@context': 'http://schema.org/extensions',
        'summary': title,
        'title': title,
        'text': text,
        'themeColor': theme_color,
    }


class TeamsClient:
    """Posts MessageCards to a Teams incoming webhook."""

    def __init__(self, timeout: int = 30):
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
        })

    def send_message(self, webhook_url: str, title: str, text: str, theme_color: str) -> None:
        """
        Send one message.

        Raises:
            APIError: If the webhook rejects the message or is unreachable
        """
        payload = build_message_card(title, text, theme_color)
        try:
            response = self.session.post(webhook_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise APIError(f"Teams webhook call failed: {e}") from e
        logger.debug(f"Sent Teams message '{title}'")
