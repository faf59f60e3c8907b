"""Notifier implementations."""

from typing import Optional

import httpx

from logger import logger
from . import config
from .ports import Notifier


class LogNotifier(Notifier):
    """Writes notifications to the log only."""

    async def present(self, notification_id: int, title: str, body: str) -> None:
        logger.info(f"[Notification {notification_id}] {title}: {body}")


class DiscordWebhookNotifier(Notifier):
    """Posts notifications to a Discord channel via webhook."""

    def __init__(self, webhook_url: str, timeout: float = config.WEBHOOK_TIMEOUT):
        self.webhook_url = webhook_url
        self.timeout = timeout

    async def present(self, notification_id: int, title: str, body: str) -> None:
        """Send the notification.

        Raises:
            httpx.HTTPError: If the webhook request fails
        """
        payload = {
            "username": "Meal Reminders",
            "embeds": [{
                "title": f"🍽️ {title}",
                "description": body,
                "footer": {"text": f"Reminder #{notification_id}"},
            }],
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(self.webhook_url, json=payload)
            response.raise_for_status()
        logger.info(f"Sent meal reminder {notification_id} to Discord")


def build_notifier(kind: Optional[str] = None) -> Notifier:
    """Create the notifier selected by configuration."""
    kind = (kind or config.NOTIFIER).lower()

    if kind == "discord":
        if config.DISCORD_WEBHOOK_URL:
            return DiscordWebhookNotifier(config.DISCORD_WEBHOOK_URL)
        logger.warning("Discord notifier requested but DISCORD_WEBHOOK_MEALS is not set, using log notifier")
    elif kind != "log":
        logger.warning(f"Unknown notifier '{kind}', using log notifier")

    return LogNotifier()
