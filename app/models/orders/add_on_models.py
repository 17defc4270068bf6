from sqlalchemy import Column, Integer, String, Numeric, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from app.core.db import Base
from app.models.base.mixins import TimestampMixin, PaymentMixin


class AddOnOrder(Base, TimestampMixin, PaymentMixin):
    __tablename__ = "add_on_orders"

    id = Column(Integer, primary_key=True)
    full_name = Column(String(150), nullable=False)
    seat_number = Column(String(100), nullable=False)
    grand_total = Column(Numeric(10, 2), nullable=False, default=0)

    items = relationship(
        "AddOnOrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="AddOnOrderItem.id",
    )

    def __repr__(self):
        return f"<AddOnOrder id={self.id} name={self.full_name} total={self.grand_total}>"


class AddOnOrderItem(Base):
    __tablename__ = "add_on_order_items"

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("add_on_orders.id", ondelete="CASCADE"), nullable=False, index=True)

    item_name = Column(String(150), nullable=False)
    category = Column(String(100), nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)

    order = relationship("AddOnOrder", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_add_on_item_quantity_positive"),
    )
