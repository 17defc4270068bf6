# app/services/billing/receipt_service.py

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.services.orders.add_on_order_service import get_add_on_order
from app.services.orders.consignment_service import get_consignment_sale
from app.services.promos.promo_booking_service import get_promo_booking
from app.services.sessions.customer_session_service import get_session
from app.utils.decimal_utils import money_text
from app.utils.pdf_generators.receipt_pdf import ReceiptData, generate_receipt_pdf
from app.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


def _stamp(value) -> str:
    return value.strftime("%d-%m-%Y %H:%M") if value else "-"


async def session_receipt(db: AsyncSession, session_id: int, *, reservation: bool = False) -> str:
    session = await get_session(db, session_id, reservation=reservation)

    prefix = "RES" if reservation else "CS"
    lines = [
        ("Name", session.full_name),
        ("Seat", session.seat_number),
        ("Customer Type", session.customer_type),
    ]
    if reservation:
        lines.append(("Reservation Date", session.reservation_date.isoformat() if session.reservation_date else "-"))

    rows = [[
        "Open Time" if session.is_open_time else "Study Time",
        session.total_time_text,
        _stamp(session.time_started),
        _stamp(session.time_ended) if not session.is_open_time else "ONGOING",
    ]]

    path = generate_receipt_pdf(ReceiptData(
        title="Reservation Receipt" if reservation else "Customer Session Receipt",
        reference=f"{prefix}-{session.id}",
        issued_at=utc_now(),
        billing=session.billing,
        customer_lines=lines,
        item_header=["Time", "Duration", "Started", "Ended"],
        item_rows=rows,
        note=session.discount_reason,
    ))
    logger.info("Receipt generated", extra={"reference": f"{prefix}-{session.id}", "path": path})
    return path


async def promo_receipt(db: AsyncSession, booking_id: int) -> str:
    booking = await get_promo_booking(db, booking_id)

    rows = [[
        booking.package_title or "Promo",
        booking.option_name or "-",
        _stamp(booking.start_at),
        _stamp(booking.end_at),
    ]]

    path = generate_receipt_pdf(ReceiptData(
        title="Promo Booking Receipt",
        reference=f"PROMO-{booking.id}",
        issued_at=utc_now(),
        billing=booking.billing,
        customer_lines=[
            ("Name", booking.full_name),
            ("Area", booking.area_label),
            ("Seat", booking.seat_label),
        ],
        item_header=["Package", "Option", "Start", "End"],
        item_rows=rows,
        note=booking.discount_reason,
    ))
    logger.info("Receipt generated", extra={"reference": f"PROMO-{booking.id}", "path": path})
    return path


async def add_on_receipt(db: AsyncSession, order_id: int) -> str:
    order = await get_add_on_order(db, order_id)

    rows = [
        [item.item_name, str(item.quantity), money_text(item.price), money_text(item.total)]
        for item in order.items
    ]

    path = generate_receipt_pdf(ReceiptData(
        title="Add-Ons Receipt",
        reference=f"ADD-{order.id}",
        issued_at=utc_now(),
        billing=order.billing,
        customer_lines=[("Name", order.full_name), ("Seat", order.seat_number)],
        item_rows=rows,
    ))
    logger.info("Receipt generated", extra={"reference": f"ADD-{order.id}", "path": path})
    return path


async def consignment_receipt(db: AsyncSession, sale_id: int) -> str:
    sale = await get_consignment_sale(db, sale_id)

    name = sale.item_name if not sale.size else f"{sale.item_name} ({sale.size})"
    path = generate_receipt_pdf(ReceiptData(
        title="Consignment Receipt",
        reference=f"CON-{sale.id}",
        issued_at=utc_now(),
        billing=sale.billing,
        customer_lines=[("Name", sale.full_name), ("Seat", sale.seat_number)],
        item_rows=[[name, str(sale.quantity), money_text(sale.price), money_text(sale.total)]],
        note=f"VOIDED: {sale.void_note}" if sale.voided else None,
    ))
    logger.info("Receipt generated", extra={"reference": f"CON-{sale.id}", "path": path})
    return path
