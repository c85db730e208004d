# subscription.py
from datetime import datetime
from typing import Literal, Optional

from pydantic import ConfigDict

from headhuntd.schemas.base import CamelModel


Entitlement = Literal["active", "pending", "none"]


class PackageRead(CamelModel):
    id: str
    name: str
    price: float
    currency: str
    interval: str


class CheckoutRequest(CamelModel):
    package_id: str = "user-plus"
    success_url: Optional[str] = None
    cancel_url: Optional[str] = None


class CheckoutSession(CamelModel):
    session_id: str
    url: Optional[str] = None
    subscription_id: str


class VerificationResult(CamelModel):
    actor_id: str
    entitlement: Entitlement
    attempts: int
    session_id: str


class SubscriptionRead(CamelModel):
    id: str
    package_id: str
    price: float
    currency: str
    status: str
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CurrentSubscription(CamelModel):
    subscription: Optional[SubscriptionRead] = None
    has_active_subscription: bool = False
