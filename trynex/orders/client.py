"""Storefront order API client."""
import os
from typing import Any, Dict, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from trynex.errors import ERROR_ORDER_FAILED, ERROR_ORDER_NO_TRACKING_ID, OrderSubmissionError
from trynex.logging import get_logger, sanitize_id_for_logging
from .models import OrderResult

logger = get_logger(__name__)

TRYNEX_API_URL = os.environ.get("TRYNEX_API_URL", "https://trynex-lifestyle.pages.dev")


def _is_retryable(exc: BaseException) -> bool:
    """Network failures and 5xx are worth another try; 4xx are not."""
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code >= 500
    return False


class OrderClient:
    """Talks to the storefront's /api/orders endpoints."""

    def __init__(
        self,
        base_url: str = TRYNEX_API_URL,
        http_client: Optional[httpx.AsyncClient] = None,
        max_attempts: int = 3,
        backoff: float = 0.5,
    ):
        self.base_url = base_url.rstrip("/")
        self.max_attempts = max_attempts
        self.backoff = backoff
        self._http_client = http_client

    async def _get_http_client(self) -> httpx.AsyncClient:
        """Lazy shared httpx client with timeouts."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(15.0, connect=5.0),
                limits=httpx.Limits(max_connections=10, max_keepalive_connections=5),
            )
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        client = await self._get_http_client()
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_retryable),
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.backoff, max=8),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                resp = await client.request(method, f"{self.base_url}{path}", **kwargs)
                if resp.status_code >= 500:
                    resp.raise_for_status()
        return resp

    async def create_order(self, payload: Dict[str, Any]) -> OrderResult:
        """
        Submit an order.

        Raises:
            OrderSubmissionError: rejected, unreachable, or no tracking id in the reply
        """
        try:
            resp = await self._request("POST", "/api/orders", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Order submission failed: {e}")
            status = e.response.status_code if isinstance(e, httpx.HTTPStatusError) else None
            raise OrderSubmissionError(f"{ERROR_ORDER_FAILED}: {e}", status_code=status) from e

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if resp.status_code >= 400 or data.get("success") is False:
            message = data.get("message") or ERROR_ORDER_FAILED
            logger.warning(f"Order rejected ({resp.status_code}): {message}")
            raise OrderSubmissionError(message, status_code=resp.status_code)

        tracking_id = data.get("tracking_id") or data.get("tracking_number")
        if not tracking_id:
            raise OrderSubmissionError(ERROR_ORDER_NO_TRACKING_ID, status_code=resp.status_code)

        result = OrderResult(
            tracking_id=str(tracking_id),
            order_id=str(data["id"]) if data.get("id") else data.get("order_id"),
            status=data.get("status") or "pending",
            total=str(data["total"]) if data.get("total") is not None else None,
        )
        logger.info(f"Order placed, tracking {sanitize_id_for_logging(result.tracking_id)}")
        return result

    async def track_order(self, tracking_id: str) -> Optional[Dict[str, Any]]:
        """Look an order up by tracking id. None when the storefront does not know it."""
        try:
            resp = await self._request("GET", f"/api/orders/{tracking_id}")
        except httpx.HTTPError as e:
            logger.error(f"Order lookup failed for {sanitize_id_for_logging(tracking_id)}: {e}")
            raise OrderSubmissionError(f"Order lookup failed: {e}") from e

        if resp.status_code == 404:
            return None
        if resp.status_code >= 400:
            raise OrderSubmissionError(f"Order lookup failed ({resp.status_code})", status_code=resp.status_code)
        return resp.json()
