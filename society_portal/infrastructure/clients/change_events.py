"""Change event webhook client with exponential backoff retry logic"""

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from society_portal.config import settings
from society_portal.infrastructure.observability.metrics import webhook_failure_counter, webhook_latency_histogram

INSERT = "INSERT"
UPDATE = "UPDATE"
DELETE = "DELETE"


def change_event(table: str, event: str, record_id: str) -> Dict[str, Any]:
    return {"table": table, "event": event, "record_id": record_id}


class ChangeEventClient:
    """Publishes row-level change events so subscribers can re-fetch"""

    def __init__(self, webhook_url: Optional[str] = None, timeout: Optional[float] = None):
        self.webhook_url = webhook_url if webhook_url is not None else settings.change_webhook_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.max_retries = settings.webhook_max_retries
        self.backoff_base = settings.webhook_backoff_base

    @property
    def enabled(self) -> bool:
        return bool(self.webhook_url)

    async def publish(self, payload: Dict[str, Any]) -> None:
        """
        Send a change event with retry logic.

        Retry strategy:
        - Exponential backoff: 1s, 2s, 4s, 8s (base * 2^attempt)
        - Retries on HTTP error responses and network failures
        - Final failure is logged and counted, not raised

        Args:
            payload: {"table", "event", "record_id"}
        """
        if not self.enabled:
            return

        attempt = 0
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            while attempt < self.max_retries:
                try:
                    with webhook_latency_histogram.time():
                        response = await client.post(self.webhook_url, json=payload)
                        response.raise_for_status()
                        return  # Success

                except (httpx.HTTPStatusError, httpx.RequestError) as e:
                    attempt += 1
                    webhook_failure_counter.inc()

                    if attempt >= self.max_retries:
                        logging.error(
                            f"Change event delivery failed: {e}",
                            extra={"table": payload.get("table"), "attempts": attempt},
                        )
                        return

                    backoff = self.backoff_base * (2 ** (attempt - 1))
                    await asyncio.sleep(backoff)
