"""Webhook alert sink - POSTs alert content to an HTTP endpoint"""
from datetime import datetime
from typing import Optional

import aiohttp
from loguru import logger

from .base import AlertRequest, AlertSink
from .console import build_alert_content

logger = logger.bind(module="sinks.webhook")


class WebhookAlertSink(AlertSink):
    """Delivers alerts to a webhook (home automation, push gateway, ...)

    Raises on failure; the ticker logs and swallows it.
    """

    def __init__(
        self,
        url: str,
        headers: Optional[dict[str, str]] = None,
        timeout_seconds: float = 15.0,
    ):
        if not url:
            raise ValueError("No webhook URL configured")
        self.url = url
        self.headers = headers or {}
        self.timeout_seconds = timeout_seconds

    async def alert(self, request: AlertRequest) -> None:
        content = build_alert_content(request)
        body = {
            **request.to_dict(),
            **content.to_dict(),
            "timestamp": datetime.now().isoformat(),
        }

        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            async with session.post(self.url, json=body, headers=self.headers) as resp:
                if resp.status >= 400:
                    raise RuntimeError(f"Webhook failed with status {resp.status}")
                logger.info(f"Webhook alert sent for {request.prayer}: {resp.status}")
