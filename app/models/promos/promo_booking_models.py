from sqlalchemy import Column, Integer, String, Numeric, DateTime, CheckConstraint
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, DiscountMixin, PaymentMixin


class PromoBooking(Base, TimestampMixin, DiscountMixin, PaymentMixin):
    __tablename__ = "promo_bookings"

    id = Column(Integer, primary_key=True)
    full_name = Column(String(150), nullable=False)
    phone_number = Column(String(30), nullable=True)

    area = Column(String(30), nullable=False, default="common_area")  # common_area | conference_room
    seat_number = Column(String(100), nullable=True)
    package_title = Column(String(150), nullable=True)
    option_name = Column(String(150), nullable=True)

    start_at = Column(DateTime(timezone=True), nullable=False)
    end_at = Column(DateTime(timezone=True), nullable=False)
    price = Column(Numeric(10, 2), nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("area IN ('common_area', 'conference_room')", name="ck_promo_area"),
        CheckConstraint("end_at > start_at", name="ck_promo_date_range"),
    )

    def __repr__(self):
        return f"<PromoBooking id={self.id} name={self.full_name} area={self.area}>"
