from __future__ import annotations

import threading
from concurrent.futures import CancelledError, ThreadPoolExecutor
from dataclasses import replace

import structlog

from app.domain.orders import OrderRecord, OrderStatus
from app.repositories.orders import OrdersRepository

logger = structlog.get_logger(__name__)

DEFAULT_PROCESSING_DELAY_SECONDS = 10.0


class OrderNotFoundError(LookupError):
    """Raised when no order was ever submitted under the given id."""

    def __init__(self, order_id: int) -> None:
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id


class OrderTracker:
    """
    Order lifecycle application service.

    Owns the order records and the pool running the simulated processing.
    It does NOT know about HTTP: unknown ids raise `OrderNotFoundError`
    and routers decide what status code that becomes.

    Lifecycle of a record:
    1. `submit` stores it as Processing and schedules a background unit.
    2. The unit blocks for the processing delay, then writes Completed.
    3. The record is kept for the lifetime of the tracker.
    """

    def __init__(
        self,
        repo: OrdersRepository | None = None,
        processing_delay: float = DEFAULT_PROCESSING_DELAY_SECONDS,
        max_workers: int | None = None,
    ) -> None:
        """
        Initialize OrderTracker.

        Args:
            repo: Record store. A fresh in-memory one is created if omitted.
            processing_delay: Seconds a background unit blocks before completing.
            max_workers: Thread pool size; None keeps the executor default.
        """
        self._repo = repo if repo is not None else OrdersRepository()
        self._processing_delay = processing_delay
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="order-worker"
        )
        self._stop = threading.Event()
        self._submit_lock = threading.Lock()

    @property
    def processing_delay(self) -> float:
        return self._processing_delay

    def submit(self, order_id: int) -> OrderRecord:
        """
        Accept an order and start its background processing.

        Notes:
            Submitting an id again resets it to Processing and schedules another
            unit. A unit from the earlier submission may still write Completed
            afterwards; the last write wins.

        Args:
            order_id: Externally supplied order id.

        Returns:
            The record as stored at submission, carrying the task handle.
        """
        with self._submit_lock:
            saved = self._repo.save(OrderRecord(order_id=order_id, status=OrderStatus.PROCESSING))
            task = self._executor.submit(self._process, order_id)
            self._repo.attach_task(order_id, task)
        record = replace(saved, task=task)
        logger.info("order_submitted", order_id=order_id, delay=self._processing_delay)
        return record

    def query_status(self, order_id: int) -> OrderStatus:
        """
        Return the current status of an order.

        Raises:
            OrderNotFoundError: If the id was never submitted.
        """
        record = self._repo.get(order_id)
        if record is None:
            raise OrderNotFoundError(order_id)
        return record.status

    def fetch_final(self, order_id: int) -> str:
        """
        Return the final confirmation for an order.

        The status is not checked: any submitted id gets the confirmation,
        even while it is still processing.

        Raises:
            OrderNotFoundError: If the id was never submitted.
        """
        if not self._repo.exists(order_id):
            raise OrderNotFoundError(order_id)
        return f"Order {order_id} is ready!"

    def wait(self, order_id: int, timeout: float | None = None) -> OrderStatus:
        """
        Block until the latest background unit of an order has finished.

        Args:
            order_id: Order id.
            timeout: Seconds to wait; None waits indefinitely.

        Returns:
            The status observed after the unit finished. A unit cancelled by
            `shutdown` before it started counts as finished.

        Raises:
            OrderNotFoundError: If the id was never submitted.
            concurrent.futures.TimeoutError: If the unit is still running after `timeout`.
        """
        record = self._repo.get(order_id)
        if record is None:
            raise OrderNotFoundError(order_id)
        if record.task is not None:
            try:
                record.task.result(timeout=timeout)
            except CancelledError:
                logger.debug("order_processing_cancelled", order_id=order_id)
        return self.query_status(order_id)

    def summary(self) -> dict[str, int]:
        """Number of orders per status."""
        return self._repo.count_by_status()

    def shutdown(self, wait: bool = False) -> None:
        """
        Interrupt pending units and stop the pool.

        Interrupted units return without writing, so their orders stay
        Processing for good.
        """
        self._stop.set()
        self._executor.shutdown(wait=wait, cancel_futures=True)
        logger.info("tracker_shutdown", orders=self.summary())

    def _process(self, order_id: int) -> None:
        # Event.wait returns True only when shutdown interrupted the delay.
        if self._stop.wait(self._processing_delay):
            logger.debug("order_processing_interrupted", order_id=order_id)
            return
        self._repo.set_status(order_id, OrderStatus.COMPLETED)
        logger.info("order_completed", order_id=order_id)
