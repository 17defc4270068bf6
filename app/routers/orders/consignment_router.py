from typing import List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.utils.response import success_response, APIResponse

from app.schemas.billing.billing_schemas import PaymentApply
from app.schemas.orders.consignment_schemas import (
    ConsignmentItemCreate,
    ConsignmentItemOut,
    ConsignmentSaleCreate,
    ConsignmentSaleOut,
    ConsignmentSaleListData,
    ConsignmentTotalsOut,
    ConsignmentVoid,
)

from app.services.orders.consignment_service import (
    create_consignment_item,
    list_consignment_items,
    create_consignment_sale,
    get_consignment_sale,
    list_consignment_sales,
    consignment_totals,
    apply_consignment_payment,
    toggle_consignment_paid,
    void_consignment_sale,
)
from app.services.billing.receipt_service import consignment_receipt

router = APIRouter(
    prefix="/consignment",
    tags=["Consignment"],
)


# =====================================================
# CATALOG
# =====================================================
@router.post(
    "/items",
    response_model=APIResponse[ConsignmentItemOut],
)
async def create_item_api(
    payload: ConsignmentItemCreate,
    db: AsyncSession = Depends(get_db),
):
    item = await create_consignment_item(db, payload)
    return success_response("Consignment item created successfully", item)


@router.get(
    "/items",
    response_model=APIResponse[List[ConsignmentItemOut]],
)
async def list_items_api(
    db: AsyncSession = Depends(get_db),
):
    items = await list_consignment_items(db)
    return success_response("Consignment items retrieved successfully", items)


# =====================================================
# SALES
# =====================================================
@router.post(
    "/sales",
    response_model=APIResponse[ConsignmentSaleOut],
)
async def create_sale_api(
    payload: ConsignmentSaleCreate,
    db: AsyncSession = Depends(get_db),
):
    sale = await create_consignment_sale(db, payload)
    return success_response("Consignment sale recorded successfully", sale)


@router.get(
    "/sales",
    response_model=APIResponse[ConsignmentSaleListData],
)
async def list_sales_api(
    db: AsyncSession = Depends(get_db),
    search: str | None = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(50, ge=1, le=200),
):
    data = await list_consignment_sales(db, search=search, page=page, page_size=page_size)
    return success_response("Consignment records retrieved successfully", data)


@router.get(
    "/sales/totals",
    response_model=APIResponse[ConsignmentTotalsOut],
)
async def sales_totals_api(
    db: AsyncSession = Depends(get_db),
    search: str | None = Query(None),
):
    totals = await consignment_totals(db, search=search)
    return success_response("Consignment totals retrieved successfully", totals)


@router.get(
    "/sales/{sale_id}",
    response_model=APIResponse[ConsignmentSaleOut],
)
async def get_sale_api(
    sale_id: int,
    db: AsyncSession = Depends(get_db),
):
    sale = await get_consignment_sale(db, sale_id)
    return success_response("Consignment record retrieved successfully", sale)


@router.post(
    "/sales/{sale_id}/payment",
    response_model=APIResponse[ConsignmentSaleOut],
)
async def apply_payment_api(
    sale_id: int,
    payload: PaymentApply,
    db: AsyncSession = Depends(get_db),
):
    sale = await apply_consignment_payment(db, sale_id, payload)
    return success_response("Payment saved successfully", sale)


@router.post(
    "/sales/{sale_id}/toggle-paid",
    response_model=APIResponse[ConsignmentSaleOut],
)
async def toggle_paid_api(
    sale_id: int,
    db: AsyncSession = Depends(get_db),
):
    sale = await toggle_consignment_paid(db, sale_id)
    return success_response("Paid status updated", sale)


@router.post(
    "/sales/{sale_id}/void",
    response_model=APIResponse[ConsignmentSaleOut],
)
async def void_sale_api(
    sale_id: int,
    payload: ConsignmentVoid,
    db: AsyncSession = Depends(get_db),
):
    sale = await void_consignment_sale(db, sale_id, payload)
    return success_response("Consignment record voided", sale)


@router.get("/sales/{sale_id}/receipt")
async def consignment_receipt_api(
    sale_id: int,
    db: AsyncSession = Depends(get_db),
):
    path = await consignment_receipt(db, sale_id)
    return FileResponse(path, media_type="application/pdf", filename=f"receipt_consignment_{sale_id}.pdf")
