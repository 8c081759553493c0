"""Order domain types."""
from __future__ import annotations

import enum
from concurrent.futures import Future
from dataclasses import dataclass


class OrderStatus(str, enum.Enum):
    """Allowed order statuses."""
    PROCESSING = "Processing"
    COMPLETED = "Completed"


@dataclass(frozen=True)
class OrderRecord:
    """Order tracked in memory.

    Attributes:
        order_id: Externally supplied order id, the only key.
        status: Current lifecycle status.
        task: Handle of the background completion unit of the latest submission.
    """

    order_id: int
    status: OrderStatus = OrderStatus.PROCESSING
    task: Future[None] | None = None
