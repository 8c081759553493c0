"""
Orders repository (in-memory).

This repository is the single place that knows where order records live:
a process-wide map from order id to `OrderRecord`, with no eviction.

Every public method takes the internal lock, so request handlers and
background workers may call it concurrently without external locking.
Each mutation touches exactly one key; concurrent writes to the same key
resolve as last writer wins.
"""

from __future__ import annotations

import threading
from collections import Counter
from concurrent.futures import Future
from dataclasses import replace

from app.domain.orders import OrderRecord, OrderStatus


class OrdersRepository:
    """Thread-safe in-memory store of order records."""

    def __init__(self) -> None:
        self._records: dict[int, OrderRecord] = {}
        self._lock = threading.Lock()

    def save(self, record: OrderRecord) -> OrderRecord:
        """
        Insert or overwrite the record for `record.order_id`.

        Args:
            record: Record to store.

        Returns:
            The stored record.
        """
        with self._lock:
            self._records[record.order_id] = record
        return record

    def get(self, order_id: int) -> OrderRecord | None:
        """
        Get a record by id.

        Args:
            order_id: Order id.

        Returns:
            The record, or None if the id was never saved.
        """
        with self._lock:
            return self._records.get(order_id)

    def exists(self, order_id: int) -> bool:
        with self._lock:
            return order_id in self._records

    def set_status(self, order_id: int, status: OrderStatus) -> OrderRecord | None:
        """
        Replace the status of an existing record.

        Notes:
            Unknown ids are left alone; a status write never creates a record.

        Args:
            order_id: Order id.
            status: New status.

        Returns:
            Updated record, or None if the id is unknown.
        """
        with self._lock:
            current = self._records.get(order_id)
            if current is None:
                return None
            updated = replace(current, status=status)
            self._records[order_id] = updated
            return updated

    def attach_task(self, order_id: int, task: Future[None]) -> None:
        """Remember the background task handle on an existing record."""
        with self._lock:
            current = self._records.get(order_id)
            if current is not None:
                self._records[order_id] = replace(current, task=task)

    def count_by_status(self) -> dict[str, int]:
        """Return the number of records per status (every status listed)."""
        with self._lock:
            counts = Counter(r.status for r in self._records.values())
        return {status.value: counts.get(status, 0) for status in OrderStatus}
