"""Order endpoints.

POST   /orders                   create (renter only)
GET    /orders/{order_id}        read (renter or host)
PUT    /orders/{order_id}        replace listing/dates (renter only)
DELETE /orders/{order_id}        cancel (renter or host)
GET    /users/{user_id}/orders   renter's own orders
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Path
from pydantic import BaseModel, Field

from stayhub.api.auth import get_current_caller
from stayhub.api.services import Services, get_services
from stayhub.domain.models import CallerIdentity, OrderChange

router = APIRouter(tags=["orders"])


class CreateOrderRequest(BaseModel):
    user_id: str = Field(min_length=1)
    listing_id: str = Field(min_length=1)
    start_date: date
    end_date: date


class UpdateOrderRequest(BaseModel):
    listing_id: str = Field(min_length=1)
    start_date: date
    end_date: date


@router.post("/orders", status_code=201)
def create_order(
    body: CreateOrderRequest,
    caller: CallerIdentity = Depends(get_current_caller),
    services: Services = Depends(get_services),
) -> dict:
    order = services.bookings.create_order(
        listing_id=body.listing_id,
        user_id=body.user_id,
        start_date=body.start_date,
        end_date=body.end_date,
        caller=caller,
    )
    return {"message": "Order created successfully", "order": order.to_dict()}


@router.get("/orders/{order_id}")
def get_order(
    order_id: str = Path(..., min_length=1),
    caller: CallerIdentity = Depends(get_current_caller),
    services: Services = Depends(get_services),
) -> dict:
    return services.bookings.get_order(order_id, caller=caller).to_dict()


@router.put("/orders/{order_id}")
def update_order(
    body: UpdateOrderRequest,
    order_id: str = Path(..., min_length=1),
    caller: CallerIdentity = Depends(get_current_caller),
    services: Services = Depends(get_services),
) -> dict:
    change = OrderChange(
        listing_id=body.listing_id,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    order = services.bookings.update_order(order_id, change, caller=caller)
    return {"message": "Order updated successfully", "order": order.to_dict()}


@router.delete("/orders/{order_id}")
def cancel_order(
    order_id: str = Path(..., min_length=1),
    caller: CallerIdentity = Depends(get_current_caller),
    services: Services = Depends(get_services),
) -> dict:
    services.bookings.cancel_order(order_id, caller=caller)
    return {"message": "Order deleted successfully", "order_id": order_id}


@router.get("/users/{user_id}/orders")
def list_user_orders(
    user_id: str = Path(..., min_length=1),
    caller: CallerIdentity = Depends(get_current_caller),
    services: Services = Depends(get_services),
) -> list[dict]:
    return [o.to_dict() for o in services.bookings.list_orders_by_user(user_id, caller=caller)]
