from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from app.schemas.billing.billing_schemas import BillingOut


# =========================
# CATALOG
# =========================
class ConsignmentItemCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=150)
    item_name: str = Field(min_length=1, max_length=150)
    category: Optional[str] = None
    size: Optional[str] = None
    image_url: Optional[str] = None
    price: Decimal = Field(ge=0)
    stock: int = Field(ge=0)


class ConsignmentItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    full_name: str
    item_name: str
    category: Optional[str]
    size: Optional[str]
    image_url: Optional[str]
    price: Decimal
    stock: int


# =========================
# SALES
# =========================
class ConsignmentSaleCreate(BaseModel):
    consignment_id: int
    full_name: str = Field(min_length=1, max_length=150)
    seat_number: str = Field(min_length=1)
    quantity: int = Field(gt=0)


class ConsignmentVoid(BaseModel):
    reason: str


class ConsignmentSaleOut(BaseModel):
    id: int
    consignment_id: int
    item_name: str
    category: Optional[str]
    size: Optional[str]
    full_name: str
    seat_number: str
    quantity: int
    price: Decimal
    total: Decimal

    billing: BillingOut

    voided: bool
    voided_at: Optional[datetime]
    void_note: Optional[str]
    created_at: Optional[datetime]


class ConsignmentSaleListData(BaseModel):
    total: int
    items: List[ConsignmentSaleOut]


class ConsignmentTotalsOut(BaseModel):
    total_amount: Decimal
    total_gcash: Decimal
    total_cash: Decimal
