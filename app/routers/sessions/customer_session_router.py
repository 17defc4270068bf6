from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date

from app.core.db import get_db
from app.utils.response import success_response, APIResponse, DeletedCount

from app.schemas.billing.billing_schemas import DiscountApply, PaymentApply
from app.schemas.sessions.customer_session_schemas import (
    CustomerSessionCreate,
    CustomerSessionOut,
    CustomerSessionListData,
)

from app.services.sessions.customer_session_service import (
    create_session,
    get_session,
    list_sessions,
    stop_session,
    apply_session_discount,
    apply_session_payment,
    toggle_session_paid,
    delete_session,
    delete_sessions_by_date,
)
from app.services.billing.receipt_service import session_receipt

router = APIRouter(
    prefix="/customer-sessions",
    tags=["Customer Sessions"],
)


# =====================================================
# CREATE
# =====================================================
@router.post(
    "",
    response_model=APIResponse[CustomerSessionOut],
)
async def create_session_api(
    payload: CustomerSessionCreate,
    db: AsyncSession = Depends(get_db),
):
    # walk-ins only; reservations go through /reservations
    payload = payload.model_copy(update={"reservation": False, "reservation_date": None})
    session = await create_session(db, payload)
    return success_response("Customer session created successfully", session)


# =====================================================
# LIST / GET
# =====================================================
@router.get(
    "/",
    response_model=APIResponse[CustomerSessionListData],
)
async def list_sessions_api(
    db: AsyncSession = Depends(get_db),
    on_date: date | None = Query(None),
    full_name: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    data = await list_sessions(
        db,
        reservation=False,
        on_date=on_date,
        full_name=full_name,
        page=page,
        page_size=page_size,
    )
    return success_response("Customer sessions retrieved successfully", data)


@router.get(
    "/{session_id}",
    response_model=APIResponse[CustomerSessionOut],
)
async def get_session_api(
    session_id: int,
    db: AsyncSession = Depends(get_db),
):
    session = await get_session(db, session_id)
    return success_response("Customer session retrieved successfully", session)


# =====================================================
# ACTIONS
# =====================================================
@router.post(
    "/{session_id}/stop",
    response_model=APIResponse[CustomerSessionOut],
)
async def stop_session_api(
    session_id: int,
    db: AsyncSession = Depends(get_db),
):
    session = await stop_session(db, session_id)
    return success_response("Time stopped successfully", session)


@router.post(
    "/{session_id}/discount",
    response_model=APIResponse[CustomerSessionOut],
)
async def apply_discount_api(
    session_id: int,
    payload: DiscountApply,
    db: AsyncSession = Depends(get_db),
):
    session = await apply_session_discount(db, session_id, payload)
    return success_response("Discount saved successfully", session)


@router.post(
    "/{session_id}/payment",
    response_model=APIResponse[CustomerSessionOut],
)
async def apply_payment_api(
    session_id: int,
    payload: PaymentApply,
    db: AsyncSession = Depends(get_db),
):
    session = await apply_session_payment(db, session_id, payload)
    return success_response("Payment saved successfully", session)


@router.post(
    "/{session_id}/toggle-paid",
    response_model=APIResponse[CustomerSessionOut],
)
async def toggle_paid_api(
    session_id: int,
    db: AsyncSession = Depends(get_db),
):
    session = await toggle_session_paid(db, session_id)
    return success_response("Paid status updated", session)


@router.get("/{session_id}/receipt")
async def session_receipt_api(
    session_id: int,
    db: AsyncSession = Depends(get_db),
):
    path = await session_receipt(db, session_id)
    return FileResponse(path, media_type="application/pdf", filename=f"receipt_session_{session_id}.pdf")


# =====================================================
# DELETE
# =====================================================
@router.delete(
    "/by-date/{on_date}",
    response_model=APIResponse[DeletedCount],
)
async def delete_by_date_api(
    on_date: date,
    db: AsyncSession = Depends(get_db),
):
    deleted = await delete_sessions_by_date(db, on_date)
    return success_response("Customer sessions deleted successfully", DeletedCount(deleted=deleted))


@router.delete(
    "/{session_id}",
    response_model=APIResponse[None],
)
async def delete_session_api(
    session_id: int,
    db: AsyncSession = Depends(get_db),
):
    await delete_session(db, session_id)
    return success_response("Customer session deleted successfully")
