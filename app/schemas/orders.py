"""Schemas for order endpoints."""
from __future__ import annotations

from pydantic import BaseModel

from app.domain.orders import OrderStatus


class OrderStatusRead(BaseModel):
    """Output schema for the status polling endpoint."""
    status: OrderStatus


class HealthRead(BaseModel):
    """Output schema for the health endpoint."""
    status: str
    detail: dict[str, dict[str, int]]
