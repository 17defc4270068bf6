from sqlalchemy import Column, Integer, String, Numeric, Date, DateTime, Boolean, Index, CheckConstraint
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, DiscountMixin, PaymentMixin
from app.models.enums.session_status import HourAvail


class CustomerSession(Base, TimestampMixin, DiscountMixin, PaymentMixin):
    __tablename__ = "customer_sessions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    full_name = Column(String(150), nullable=False)
    phone_number = Column(String(30), nullable=True)
    customer_type = Column(String(50), nullable=False, default="regular")
    customer_field = Column(String(100), nullable=True)
    has_id = Column(Boolean, nullable=False, default=False)
    id_number = Column(String(50), nullable=True)
    seat_number = Column(String(100), nullable=False)

    hour_avail = Column(String(20), nullable=False, default=HourAvail.open.value)
    time_started = Column(DateTime(timezone=True), nullable=False)
    time_ended = Column(DateTime(timezone=True), nullable=True)
    total_time = Column(Integer, nullable=False, default=0)  # minutes
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)  # system cost before discount

    reservation = Column(Boolean, nullable=False, default=False)
    reservation_date = Column(Date, nullable=True)

    __table_args__ = (
        CheckConstraint("total_time >= 0", name="ck_session_total_time_non_negative"),
        Index("ix_session_reservation_date", "reservation", "reservation_date"),
    )

    def __repr__(self):
        return f"<CustomerSession id={self.id} name={self.full_name} seat={self.seat_number}>"
