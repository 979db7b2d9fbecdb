"""
Best-effort failure notifications over an HTTP webhook.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class Notifier:
    """Posts failure reports to a webhook using one long-lived client.

    notify() never raises: delivery errors are logged and dropped. Without a
    webhook URL the report is only logged.
    """

    def __init__(
        self,
        webhook_url: str = "",
        token: str = "",
        timeout: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.webhook_url = webhook_url
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self.client = client or httpx.AsyncClient(timeout=timeout, headers=headers)

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def notify(self, event: str, details: str) -> None:
        """Send one failure report."""
        if not self.enabled:
            logger.info(f"Notification ({event}) not sent, no webhook configured: {details}")
            return

        payload = {
            "text": f"[pastr] {event}: {details}",
            "event": event,
            "details": details,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            response = await self.client.post(self.webhook_url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning(f"Failed to deliver notification ({event}): {type(e).__name__}: {e}")
        except Exception as e:
            logger.warning(f"Unexpected error delivering notification ({event}): {e}")

    async def aclose(self) -> None:
        await self.client.aclose()
