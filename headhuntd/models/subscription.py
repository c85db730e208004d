from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String
from sqlalchemy.sql import func

from headhuntd.database import Base


class Subscription(Base):
    __tablename__ = "subscriptions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    package_id = Column(String(32), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(8), nullable=False, default="usd")
    status = Column(String(16), nullable=False, default="pending", index=True)

    checkout_session_id = Column(String(255), unique=True, nullable=False)
    customer_id = Column(String(64), nullable=True)
    payment_intent_id = Column(String(64), nullable=True)

    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
