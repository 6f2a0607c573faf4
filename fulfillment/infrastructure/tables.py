from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, Numeric, String
from sqlalchemy.orm import relationship

from fulfillment.infrastructure.database import Base

class OrderRow(Base):
    __tablename__ = "orders"

    id = Column(String, primary_key=True, index=True)
    status = Column(String, nullable=False, default="pending", index=True)
    customer_name = Column(String, nullable=True)
    customer_email = Column(String, nullable=True)

    # Line items arrive fully formed from checkout and are never queried
    # individually, so they stay a JSON list.
    items = Column(JSON, nullable=False, default=list)

    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    tip = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    printed = Column(Boolean, nullable=False, default=False)

    history = relationship(
        "StatusHistoryRow",
        back_populates="order",
        order_by="StatusHistoryRow.id",
        cascade="all, delete-orphan",
    )

class StatusHistoryRow(Base):
    __tablename__ = "order_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String, ForeignKey("orders.id"), nullable=False, index=True)
    status = Column(String, nullable=False)
    changed_at = Column(DateTime(timezone=True), nullable=False)
    actor = Column(String, nullable=True)

    order = relationship("OrderRow", back_populates="history")
