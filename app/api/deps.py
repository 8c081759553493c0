"""
FastAPI dependency providers.

The order tracker is created by the application lifespan and kept on
`app.state`; routers receive it through `OrderTrackerDep`. Tests replace it
with `app.dependency_overrides[get_order_tracker]`.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from app.services.orders import OrderTracker


def get_order_tracker(request: Request) -> OrderTracker:
    """
    Provide the application-wide order tracker.

    Args:
        request: Current request, used to reach `app.state`.

    Returns:
        OrderTracker owned by the running application.
    """
    tracker: OrderTracker = request.app.state.order_tracker
    return tracker


# ---- Public dependency aliases (use these in routers) ----

OrderTrackerDep = Annotated[OrderTracker, Depends(get_order_tracker)]
