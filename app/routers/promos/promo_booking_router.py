from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import date

from app.core.db import get_db
from app.utils.response import success_response, APIResponse

from app.schemas.billing.billing_schemas import DiscountApply, PaymentApply
from app.schemas.promos.promo_booking_schemas import (
    PromoBookingCreate,
    PromoBookingOut,
    PromoBookingListData,
)

from app.services.promos.promo_booking_service import (
    create_promo_booking,
    get_promo_booking,
    list_promo_bookings,
    apply_promo_discount,
    apply_promo_payment,
    toggle_promo_paid,
)
from app.services.billing.receipt_service import promo_receipt

router = APIRouter(
    prefix="/promo-bookings",
    tags=["Promo Bookings"],
)


@router.post(
    "",
    response_model=APIResponse[PromoBookingOut],
)
async def create_promo_booking_api(
    payload: PromoBookingCreate,
    db: AsyncSession = Depends(get_db),
):
    booking = await create_promo_booking(db, payload)
    return success_response("Promo booking created successfully", booking)


@router.get(
    "/",
    response_model=APIResponse[PromoBookingListData],
)
async def list_promo_bookings_api(
    db: AsyncSession = Depends(get_db),
    created_on: date | None = Query(None),
    full_name: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    data = await list_promo_bookings(
        db,
        created_on=created_on,
        full_name=full_name,
        page=page,
        page_size=page_size,
    )
    return success_response("Promo bookings retrieved successfully", data)


@router.get(
    "/{booking_id}",
    response_model=APIResponse[PromoBookingOut],
)
async def get_promo_booking_api(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
):
    booking = await get_promo_booking(db, booking_id)
    return success_response("Promo booking retrieved successfully", booking)


@router.post(
    "/{booking_id}/discount",
    response_model=APIResponse[PromoBookingOut],
)
async def apply_discount_api(
    booking_id: int,
    payload: DiscountApply,
    db: AsyncSession = Depends(get_db),
):
    booking = await apply_promo_discount(db, booking_id, payload)
    return success_response("Discount saved successfully", booking)


@router.post(
    "/{booking_id}/payment",
    response_model=APIResponse[PromoBookingOut],
)
async def apply_payment_api(
    booking_id: int,
    payload: PaymentApply,
    db: AsyncSession = Depends(get_db),
):
    booking = await apply_promo_payment(db, booking_id, payload)
    return success_response("Payment saved successfully", booking)


@router.post(
    "/{booking_id}/toggle-paid",
    response_model=APIResponse[PromoBookingOut],
)
async def toggle_paid_api(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
):
    booking = await toggle_promo_paid(db, booking_id)
    return success_response("Paid status updated", booking)


@router.get("/{booking_id}/receipt")
async def promo_receipt_api(
    booking_id: int,
    db: AsyncSession = Depends(get_db),
):
    path = await promo_receipt(db, booking_id)
    return FileResponse(path, media_type="application/pdf", filename=f"receipt_promo_{booking_id}.pdf")
