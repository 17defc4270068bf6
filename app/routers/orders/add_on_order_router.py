from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date

from app.core.db import get_db
from app.utils.response import success_response, APIResponse

from app.schemas.billing.billing_schemas import PaymentApply
from app.schemas.orders.add_on_schemas import (
    AddOnOrderCreate,
    AddOnOrderOut,
    AddOnOrderListData,
)

from app.services.orders.add_on_order_service import (
    create_add_on_order,
    get_add_on_order,
    list_add_on_orders,
    apply_add_on_payment,
    toggle_add_on_paid,
)
from app.services.billing.receipt_service import add_on_receipt

router = APIRouter(
    prefix="/add-on-orders",
    tags=["Add-On Orders"],
)


@router.post(
    "",
    response_model=APIResponse[AddOnOrderOut],
)
async def create_add_on_order_api(
    payload: AddOnOrderCreate,
    db: AsyncSession = Depends(get_db),
):
    order = await create_add_on_order(db, payload)
    return success_response("Add-on order created successfully", order)


@router.get(
    "/",
    response_model=APIResponse[AddOnOrderListData],
)
async def list_add_on_orders_api(
    db: AsyncSession = Depends(get_db),
    created_on: date | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    data = await list_add_on_orders(db, created_on=created_on, page=page, page_size=page_size)
    return success_response("Add-on orders retrieved successfully", data)


@router.get(
    "/{order_id}",
    response_model=APIResponse[AddOnOrderOut],
)
async def get_add_on_order_api(
    order_id: int,
    db: AsyncSession = Depends(get_db),
):
    order = await get_add_on_order(db, order_id)
    return success_response("Add-on order retrieved successfully", order)


@router.post(
    "/{order_id}/payment",
    response_model=APIResponse[AddOnOrderOut],
)
async def apply_payment_api(
    order_id: int,
    payload: PaymentApply,
    db: AsyncSession = Depends(get_db),
):
    order = await apply_add_on_payment(db, order_id, payload)
    return success_response("Payment saved successfully", order)


@router.post(
    "/{order_id}/toggle-paid",
    response_model=APIResponse[AddOnOrderOut],
)
async def toggle_paid_api(
    order_id: int,
    db: AsyncSession = Depends(get_db),
):
    order = await toggle_add_on_paid(db, order_id)
    return success_response("Paid status updated", order)


@router.get("/{order_id}/receipt")
async def add_on_receipt_api(
    order_id: int,
    db: AsyncSession = Depends(get_db),
):
    path = await add_on_receipt(db, order_id)
    return FileResponse(path, media_type="application/pdf", filename=f"receipt_add_on_{order_id}.pdf")
