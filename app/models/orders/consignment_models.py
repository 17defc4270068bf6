from sqlalchemy import Column, Integer, String, Numeric, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, PaymentMixin


class ConsignmentItem(Base, TimestampMixin):
    __tablename__ = "consignment"

    id = Column(Integer, primary_key=True)
    full_name = Column(String(150), nullable=False)  # consignor
    item_name = Column(String(150), nullable=False)
    category = Column(String(100), nullable=True)
    size = Column(String(50), nullable=True)
    image_url = Column(String(500), nullable=True)
    price = Column(Numeric(10, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_consignment_stock_non_negative"),
    )

    def __repr__(self):
        return f"<ConsignmentItem id={self.id} name={self.item_name} stock={self.stock}>"


class ConsignmentSale(Base, TimestampMixin, PaymentMixin):
    __tablename__ = "customer_session_consignment"

    id = Column(Integer, primary_key=True)
    consignment_id = Column(Integer, ForeignKey("consignment.id"), nullable=False, index=True)

    full_name = Column(String(150), nullable=False)
    seat_number = Column(String(100), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)

    voided = Column(Boolean, nullable=False, default=False)
    voided_at = Column(DateTime(timezone=True), nullable=True)
    void_note = Column(String(255), nullable=True)

    consignment = relationship("ConsignmentItem", lazy="joined")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_consignment_sale_quantity_positive"),
    )

    def __repr__(self):
        return f"<ConsignmentSale id={self.id} item={self.consignment_id} qty={self.quantity}>"
