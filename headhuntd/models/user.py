# user.py
from uuid import uuid4

from sqlalchemy import Column, DateTime, Integer, JSON, String
from sqlalchemy.sql import func

from headhuntd.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    mobile_number = Column(String(32), nullable=True)
    role = Column(String(16), index=True, nullable=False)
    # Fixed at signup; the onboarding steps a user walks through never change afterwards.
    onboarding_flow = Column(String(32), nullable=False)
    selected_goal = Column(String(32), nullable=True)

    # Onboarding documents, one per step. Full replace on every save.
    personal_details = Column(JSON(none_as_null=True), nullable=True)
    personal_summary = Column(JSON(none_as_null=True), nullable=True)
    work_experience = Column(JSON(none_as_null=True), nullable=True)
    availability = Column(JSON(none_as_null=True), nullable=True)
    business_summary = Column(JSON(none_as_null=True), nullable=True)

    subscription_status = Column(String(16), nullable=False, default="none")
    subscription_customer_id = Column(String(64), nullable=True)

    login_attempts = Column(Integer, nullable=False, default=0)
    lock_until = Column(DateTime(timezone=True), nullable=True)
    last_login = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
