"""
Async polling client for the orders API.

Drives the asynchronous request-reply flow from the caller's side:
submit an order, poll its status at a fixed interval until the server
answers 303 See Other, then follow the redirect to the final resource.

Failed requests are not retried.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from types import TracebackType

import httpx
import structlog

from app.domain.orders import OrderStatus

logger = structlog.get_logger(__name__)

CREATE_PATH = "/api/orders/create"
STATUS_PATH = "/api/orders/status/{order_id}"
FINAL_PATH = "/api/orders/{order_id}"


class OrderClientError(Exception):
    """Base exception class for the orders client."""


class UnknownOrderError(OrderClientError):
    """The server has no order under the requested id."""

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class PollingTimeoutError(OrderClientError):
    """The order did not complete within the polling timeout."""


@dataclass(frozen=True)
class PollingConfig:
    """
    Polling behaviour.

    Attributes:
        interval: Seconds between two status requests.
        timeout: Overall seconds to wait for completion.
    """

    interval: float = 0.5
    timeout: float = 30.0


@dataclass(frozen=True)
class StatusReply:
    """One answer of the status endpoint."""

    status: OrderStatus
    location: str | None = None

    @property
    def done(self) -> bool:
        return self.status is OrderStatus.COMPLETED


class OrderClient:
    """
    Client for the orders API.

    Args:
        base_url: Root URL of the service, e.g. "http://localhost:8000".
        polling_config: Polling interval and timeout.
        transport: Optional httpx transport (tests pass an ASGITransport).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        polling_config: PollingConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.polling_config = polling_config or PollingConfig()
        self._http = httpx.AsyncClient(
            base_url=base_url, transport=transport, follow_redirects=False
        )

    async def __aenter__(self) -> OrderClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def submit(self, order_id: int) -> str:
        """
        Submit an order.

        Returns:
            The `Location` header of the 202 acknowledgment.
        """
        response = await self._http.post(CREATE_PATH, params={"orderId": order_id})
        response.raise_for_status()
        location = response.headers.get("Location", "")
        logger.info("order_submitted", order_id=order_id, location=location)
        return location

    async def get_status(self, order_id: int) -> StatusReply:
        """
        Query the status endpoint once.

        Raises:
            UnknownOrderError: On 404.
            httpx.HTTPStatusError: On any other unexpected status.
        """
        response = await self._http.get(STATUS_PATH.format(order_id=order_id))
        if response.status_code == httpx.codes.NOT_FOUND:
            raise UnknownOrderError(order_id)
        if response.status_code == httpx.codes.SEE_OTHER:
            return StatusReply(
                status=OrderStatus(response.json()["status"]),
                location=response.headers.get("Location"),
            )
        response.raise_for_status()
        return StatusReply(status=OrderStatus(response.json()["status"]))

    async def fetch_final(self, order_id: int, location: str | None = None) -> str:
        """
        Fetch the final resource of an order.

        Args:
            order_id: Order id.
            location: Redirect target from the status endpoint, if known.

        Raises:
            UnknownOrderError: On 404.
        """
        response = await self._http.get(location or FINAL_PATH.format(order_id=order_id))
        if response.status_code == httpx.codes.NOT_FOUND:
            raise UnknownOrderError(order_id)
        response.raise_for_status()
        return response.text

    async def wait_for_completion(self, order_id: int) -> str:
        """
        Poll until the order is completed, then return its final resource.

        Raises:
            PollingTimeoutError: If the order is still processing after the timeout.
            UnknownOrderError: If the server does not know the order.
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.polling_config.timeout
        attempts = 0

        while True:
            attempts += 1
            reply = await self.get_status(order_id)
            if reply.done:
                logger.info("order_completed", order_id=order_id, attempts=attempts)
                return await self.fetch_final(order_id, reply.location)

            if loop.time() + self.polling_config.interval > deadline:
                raise PollingTimeoutError(
                    f"Order {order_id} did not complete within "
                    f"{self.polling_config.timeout} seconds"
                )
            logger.debug("order_pending", order_id=order_id, attempts=attempts)
            await asyncio.sleep(self.polling_config.interval)
