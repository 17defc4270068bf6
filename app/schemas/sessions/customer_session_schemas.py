from pydantic import BaseModel, Field, model_validator
from datetime import date, datetime
from typing import List, Optional

from app.models.enums.session_status import SessionStatus
from app.schemas.billing.billing_schemas import BillingOut
from app.utils.time_utils import as_utc


class CustomerSessionCreate(BaseModel):
    full_name: str = Field(min_length=1, max_length=150)
    phone_number: Optional[str] = None
    customer_type: str = "regular"
    customer_field: Optional[str] = None
    has_id: bool = False
    id_number: Optional[str] = None
    seat_number: str = Field(min_length=1)

    session_date: Optional[date] = None
    time_started: Optional[datetime] = None
    # None means open time: billed live until stopped
    time_ended: Optional[datetime] = None

    reservation: bool = False
    reservation_date: Optional[date] = None

    @model_validator(mode="after")
    def _check_times(self):
        if self.reservation and self.reservation_date is None:
            raise ValueError("reservation_date is required for reservations")
        if (
            self.time_started is not None
            and self.time_ended is not None
            and as_utc(self.time_ended) <= as_utc(self.time_started)
        ):
            raise ValueError("time_ended must be after time_started")
        return self


class CustomerSessionOut(BaseModel):
    id: int
    session_date: date
    full_name: str
    phone_number: Optional[str]
    customer_type: str
    customer_field: Optional[str]
    has_id: bool
    id_number: Optional[str]
    seat_number: str

    hour_avail: str
    time_started: datetime
    time_ended: Optional[datetime]
    is_open_time: bool
    total_minutes: int
    total_time_text: str
    status: SessionStatus

    reservation: bool
    reservation_date: Optional[date]

    discount_reason: Optional[str]
    billing: BillingOut

    created_at: Optional[datetime]


class CustomerSessionListData(BaseModel):
    total: int
    items: List[CustomerSessionOut]


class ReservationCreate(CustomerSessionCreate):
    reservation: bool = True
    reservation_date: date
