"""Order endpoints implementing asynchronous request-reply."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Query, Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from app.api.deps import OrderTrackerDep
from app.domain.orders import OrderStatus
from app.schemas.orders import OrderStatusRead
from app.services.orders import OrderNotFoundError

router = APIRouter(prefix="/api/orders", tags=["orders"])

STATUS_LOCATION = "/orders/status/{order_id}"
FINAL_LOCATION = "/api/orders/{order_id}"


@router.get("/test", response_class=PlainTextResponse)
async def hello_endpoint() -> str:
    """Liveness probe of the orders router."""
    return "Hello World!"


@router.post("/create", status_code=status.HTTP_202_ACCEPTED)
async def create_order_endpoint(
    tracker: OrderTrackerDep,
    order_id: Annotated[int, Query(alias="orderId")],
) -> Response:
    """Accept an order; processing continues in the background."""
    tracker.submit(order_id)
    return Response(
        status_code=status.HTTP_202_ACCEPTED,
        headers={"Location": STATUS_LOCATION.format(order_id=order_id)},
    )


@router.get(
    "/status/{order_id}",
    response_model=OrderStatusRead,
    responses={
        status.HTTP_202_ACCEPTED: {"model": OrderStatusRead},
        status.HTTP_303_SEE_OTHER: {"model": OrderStatusRead},
        status.HTTP_404_NOT_FOUND: {"description": "Order not found"},
    },
)
async def get_order_status_endpoint(order_id: int, tracker: OrderTrackerDep) -> Response:
    """202 while processing, 303 to the final resource once completed."""
    try:
        current = tracker.query_status(order_id)
    except OrderNotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)

    body = OrderStatusRead(status=current).model_dump(mode="json")
    if current is OrderStatus.COMPLETED:
        return JSONResponse(
            status_code=status.HTTP_303_SEE_OTHER,
            content=body,
            headers={"Location": FINAL_LOCATION.format(order_id=order_id)},
        )
    return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content=body)


@router.get("/{order_id}", response_class=PlainTextResponse)
async def get_final_order_endpoint(order_id: int, tracker: OrderTrackerDep) -> Response:
    """Final resource of an order."""
    try:
        message = tracker.fetch_final(order_id)
    except OrderNotFoundError:
        return Response(status_code=status.HTTP_404_NOT_FOUND)
    return PlainTextResponse(message)
