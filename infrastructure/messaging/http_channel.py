"""
HTTP message channel to the phone.

Posts the completed-workout payload to the phone-side sync endpoint
(``POST /sync/completed-workouts``). Delivery is fire-and-forget: failures
are logged and never surface to the workout engine.
"""
from typing import Optional
import logging

import httpx

from domain.models import CompletedWorkoutPayload

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0
SYNC_PATH = "/sync/completed-workouts"


class HttpMessageChannel:
    """MessageChannel implementation over an async httpx client."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize the channel.

        Args:
            base_url: Root URL of the phone-side API
            api_key: Value for the X-API-Key header
            client: Preconfigured async httpx client (built from base_url if omitted)
            timeout: Request timeout in seconds
        """
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["X-API-Key"] = api_key
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
        )

    async def send(self, payload: CompletedWorkoutPayload) -> None:
        body = payload.model_dump(mode="json", by_alias=True)
        try:
            response = await self._client.post(SYNC_PATH, json=body)
            if response.status_code >= 400:
                logger.warning(
                    f"Completed workout {payload.id} rejected: "
                    f"{response.status_code} - {response.text[:200]}"
                )
                return
            logger.info(f"Completed workout {payload.id} sent to phone")
        except httpx.TimeoutException:
            logger.warning(f"Sending completed workout {payload.id} timed out")
        except httpx.HTTPError as e:
            logger.error(f"Sending completed workout {payload.id} failed: {e}")

    async def close(self) -> None:
        await self._client.aclose()
