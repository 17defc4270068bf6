from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from app.models.enums.session_status import SessionStatus
from app.schemas.billing.billing_schemas import BillingOut
from app.utils.time_utils import as_utc

PackageArea = Literal["common_area", "conference_room"]


class PromoBookingCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=150)
    phone_number: Optional[str] = None
    area: PackageArea = "common_area"
    seat_number: Optional[str] = None
    package_title: Optional[str] = None
    option_name: Optional[str] = None
    start_at: datetime
    end_at: datetime
    price: Decimal = Field(ge=0)

    @model_validator(mode="after")
    def _check_range(self):
        if as_utc(self.end_at) <= as_utc(self.start_at):
            raise ValueError("end_at must be after start_at")
        return self


class PromoBookingOut(BaseModel):
    id: int
    full_name: str
    phone_number: Optional[str]
    area: PackageArea
    area_label: str
    seat_label: str
    package_title: Optional[str]
    option_name: Optional[str]
    start_at: datetime
    end_at: datetime
    status: SessionStatus

    discount_reason: Optional[str]
    billing: BillingOut

    created_at: Optional[datetime]


class PromoBookingListData(BaseModel):
    total: int
    items: List[PromoBookingOut]
