from sqlalchemy import Column, Integer, String, Boolean, DateTime
from app.core.db import Base

VIEW_STATE_ID = 1


class CustomerViewState(Base):
    """Single row (id=1): which record is mirrored to the customer display."""

    __tablename__ = "customer_view_state"

    id = Column(Integer, primary_key=True, default=VIEW_STATE_ID)
    enabled = Column(Boolean, nullable=False, default=False)
    session_id = Column(String(64), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)
