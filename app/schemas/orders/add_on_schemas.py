from pydantic import BaseModel, Field, ConfigDict
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from app.schemas.billing.billing_schemas import BillingOut


class AddOnItemCreate(BaseModel):
    item_name: str = Field(min_length=1, max_length=150)
    category: Optional[str] = None
    quantity: int = Field(gt=0)
    price: Decimal = Field(ge=0)


class AddOnOrderCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=150)
    seat_number: str = Field(min_length=1)
    items: List[AddOnItemCreate]


class AddOnItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    item_name: str
    category: Optional[str]
    quantity: int
    price: Decimal
    total: Decimal


class AddOnOrderOut(BaseModel):
    id: int
    full_name: str
    seat_number: str
    items: List[AddOnItemOut]
    billing: BillingOut
    created_at: Optional[datetime]


class AddOnOrderListData(BaseModel):
    total: int
    items: List[AddOnOrderOut]
