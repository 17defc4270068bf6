from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date

from app.core.db import get_db
from app.utils.response import success_response, APIResponse, DeletedCount

from app.schemas.billing.billing_schemas import DiscountApply, PaymentApply
from app.schemas.sessions.customer_session_schemas import (
    ReservationCreate,
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
    prefix="/reservations",
    tags=["Reservations"],
)


@router.post(
    "",
    response_model=APIResponse[CustomerSessionOut],
)
async def create_reservation_api(
    payload: ReservationCreate,
    db: AsyncSession = Depends(get_db),
):
    payload = payload.model_copy(update={"reservation": True})
    reservation = await create_session(db, payload)
    return success_response("Reservation created successfully", reservation)


@router.get(
    "/",
    response_model=APIResponse[CustomerSessionListData],
)
async def list_reservations_api(
    db: AsyncSession = Depends(get_db),
    on_date: date | None = Query(None, description="Reservation date"),
    full_name: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    data = await list_sessions(
        db,
        reservation=True,
        on_date=on_date,
        full_name=full_name,
        page=page,
        page_size=page_size,
    )
    return success_response("Reservations retrieved successfully", data)


@router.get(
    "/{reservation_id}",
    response_model=APIResponse[CustomerSessionOut],
)
async def get_reservation_api(
    reservation_id: int,
    db: AsyncSession = Depends(get_db),
):
    reservation = await get_session(db, reservation_id, reservation=True)
    return success_response("Reservation retrieved successfully", reservation)


@router.post(
    "/{reservation_id}/stop",
    response_model=APIResponse[CustomerSessionOut],
)
async def stop_reservation_api(
    reservation_id: int,
    db: AsyncSession = Depends(get_db),
):
    reservation = await stop_session(db, reservation_id, reservation=True)
    return success_response("Time stopped successfully", reservation)


@router.post(
    "/{reservation_id}/discount",
    response_model=APIResponse[CustomerSessionOut],
)
async def apply_discount_api(
    reservation_id: int,
    payload: DiscountApply,
    db: AsyncSession = Depends(get_db),
):
    reservation = await apply_session_discount(db, reservation_id, payload, reservation=True)
    return success_response("Discount saved successfully", reservation)


@router.post(
    "/{reservation_id}/payment",
    response_model=APIResponse[CustomerSessionOut],
)
async def apply_payment_api(
    reservation_id: int,
    payload: PaymentApply,
    db: AsyncSession = Depends(get_db),
):
    reservation = await apply_session_payment(db, reservation_id, payload, reservation=True)
    return success_response("Payment saved successfully", reservation)


@router.post(
    "/{reservation_id}/toggle-paid",
    response_model=APIResponse[CustomerSessionOut],
)
async def toggle_paid_api(
    reservation_id: int,
    db: AsyncSession = Depends(get_db),
):
    reservation = await toggle_session_paid(db, reservation_id, reservation=True)
    return success_response("Paid status updated", reservation)


@router.get("/{reservation_id}/receipt")
async def reservation_receipt_api(
    reservation_id: int,
    db: AsyncSession = Depends(get_db),
):
    path = await session_receipt(db, reservation_id, reservation=True)
    return FileResponse(path, media_type="application/pdf", filename=f"receipt_reservation_{reservation_id}.pdf")


@router.delete(
    "/by-date/{on_date}",
    response_model=APIResponse[DeletedCount],
)
async def delete_by_date_api(
    on_date: date,
    db: AsyncSession = Depends(get_db),
):
    deleted = await delete_sessions_by_date(db, on_date, reservation=True)
    return success_response("Reservations deleted successfully", DeletedCount(deleted=deleted))


@router.delete(
    "/{reservation_id}",
    response_model=APIResponse[None],
)
async def delete_reservation_api(
    reservation_id: int,
    db: AsyncSession = Depends(get_db),
):
    await delete_session(db, reservation_id, reservation=True)
    return success_response("Reservation deleted successfully")
