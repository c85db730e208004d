"""Subscription checkout against a hosted payment page.

A checkout starts by asking the provider for a session and recording a
``pending`` subscription keyed by the session id. After the provider redirects
back, ``verify_session`` polls the session a bounded number of times. If the
payment never shows up as paid the caller gets a ``pending`` entitlement back
instead of an error, and can verify again later.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Any, Callable, Optional, Protocol

import httpx
from sqlalchemy.orm import Session

from headhuntd.config import settings
from headhuntd.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    PaymentProviderError,
    ValidationError,
)
from headhuntd.models.subscription import Subscription
from headhuntd.models.user import User
from headhuntd.schemas.subscription import (
    CheckoutSession,
    CurrentSubscription,
    PackageRead,
    SubscriptionRead,
    VerificationResult,
)
from headhuntd.utils.clock import as_utc, utc_now


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Package:
    id: str
    name: str
    price: Decimal
    currency: str = "usd"
    interval: str = "month"

    @property
    def unit_amount(self) -> int:
        """Price in the smallest currency unit (cents)."""
        return int(self.price * 100)


PACKAGES: dict[str, Package] = {
    "user-plus": Package(id="user-plus", name="User +", price=Decimal("8.00")),
}

_PAID_STATUSES = {"paid", "no_payment_required"}


class CheckoutGateway(Protocol):
    def create_session(
        self,
        *,
        package: Package,
        customer_email: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
    ) -> dict[str, Any]:
        ...

    def retrieve_session(self, session_id: str) -> dict[str, Any]:
        ...


class StripeCheckoutGateway:
    """Checkout Sessions over the Stripe REST API (form-encoded, basic auth)."""

    def __init__(
        self,
        secret_key: str,
        api_base: str = "https://api.stripe.com/v1",
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.secret_key = secret_key
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.api_base,
            auth=(self.secret_key, ""),
            timeout=self.timeout,
            transport=self.transport,
        )

    def create_session(
        self,
        *,
        package: Package,
        customer_email: str,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
    ) -> dict[str, Any]:
        data = {
            "mode": "payment",
            "customer_email": customer_email,
            "payment_method_types[0]": "card",
            "line_items[0][quantity]": "1",
            "line_items[0][price_data][currency]": package.currency,
            "line_items[0][price_data][unit_amount]": str(package.unit_amount),
            "line_items[0][price_data][product_data][name]": package.name,
            "line_items[0][price_data][product_data][description]": "Monthly subscription",
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        for key, value in metadata.items():
            data[f"metadata[{key}]"] = value

        with self._client() as client:
            resp = client.post("/checkout/sessions", data=data)
            resp.raise_for_status()
            result: dict[str, Any] = resp.json()
            return result

    def retrieve_session(self, session_id: str) -> dict[str, Any]:
        with self._client() as client:
            resp = client.get(f"/checkout/sessions/{session_id}")
            resp.raise_for_status()
            result: dict[str, Any] = resp.json()
            return result


def list_packages() -> list[PackageRead]:
    return [
        PackageRead(id=p.id, name=p.name, price=float(p.price), currency=p.currency, interval=p.interval)
        for p in PACKAGES.values()
    ]


def _is_active(sub: Subscription) -> bool:
    if sub.status != "active":
        return False
    return sub.end_date is None or as_utc(sub.end_date) > utc_now()


def expire_lapsed(db: Session, user_id: str) -> int:
    """Mark the user's active subscriptions whose period has ended as ``expired``."""
    active = db.query(Subscription).filter(Subscription.user_id == user_id, Subscription.status == "active").all()
    lapsed = [sub for sub in active if not _is_active(sub)]
    if not lapsed:
        return 0
    for sub in lapsed:
        sub.status = "expired"
    user = db.query(User).filter(User.id == user_id).first()
    if user is not None and len(lapsed) == len(active):
        user.subscription_status = "expired"
    db.commit()
    logger.info("checkout.expired user_id=%s count=%s", user_id, len(lapsed))
    return len(lapsed)


def start_checkout(
    db: Session,
    user: User,
    package_id: str,
    gateway: CheckoutGateway,
    success_url: Optional[str] = None,
    cancel_url: Optional[str] = None,
) -> CheckoutSession:
    package = PACKAGES.get(package_id)
    if package is None:
        raise ValidationError("packageId", "invalid", "Invalid package selected")

    expire_lapsed(db, user.id)
    active = (
        db.query(Subscription)
        .filter(Subscription.user_id == user.id, Subscription.status == "active")
        .all()
    )
    if any(_is_active(sub) for sub in active):
        raise ConflictError("Subscription already active")

    frontend = settings.frontend_url.rstrip("/")
    try:
        session = gateway.create_session(
            package=package,
            customer_email=user.email,
            success_url=success_url or f"{frontend}/signup/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=cancel_url or f"{frontend}/signup/subscription",
            metadata={"user_id": user.id, "package_id": package.id},
        )
    except httpx.HTTPError as exc:
        logger.error("checkout.create_failed user_id=%s error=%s", user.id, exc)
        raise PaymentProviderError("Failed to create checkout session") from exc

    sub = Subscription(
        user_id=user.id,
        package_id=package.id,
        price=package.price,
        currency=package.currency,
        status="pending",
        checkout_session_id=session["id"],
        customer_id=session.get("customer"),
    )
    db.add(sub)
    user.subscription_status = "pending"
    db.commit()
    db.refresh(sub)
    logger.info("checkout.started user_id=%s session_id=%s", user.id, sub.checkout_session_id)
    return CheckoutSession(session_id=sub.checkout_session_id, url=session.get("url"), subscription_id=sub.id)


def _activate(db: Session, sub: Subscription, session: dict[str, Any]) -> None:
    now = utc_now()
    sub.status = "active"
    sub.start_date = now
    sub.end_date = now + timedelta(days=settings.subscription_period_days)
    sub.customer_id = session.get("customer") or sub.customer_id
    sub.payment_intent_id = session.get("payment_intent") or sub.payment_intent_id

    user = db.query(User).filter(User.id == sub.user_id).first()
    if user is not None:
        user.subscription_status = "active"
        if sub.customer_id:
            user.subscription_customer_id = sub.customer_id
    db.commit()
    logger.info("checkout.activated user_id=%s session_id=%s", sub.user_id, sub.checkout_session_id)


def verify_session(
    db: Session,
    session_id: str,
    gateway: CheckoutGateway,
    sleep: Callable[[float], None] = time.sleep,
    *,
    actor_id: Optional[str] = None,
    max_attempts: Optional[int] = None,
    delay_seconds: Optional[float] = None,
) -> VerificationResult:
    """Poll the provider until the session is paid or the attempt budget runs out.

    Returns entitlement ``active`` once paid, ``pending`` when the budget is
    exhausted, and ``none`` for a subscription that is no longer pending or
    active. A provider error on one attempt counts as an unpaid attempt.
    """
    sub = db.query(Subscription).filter(Subscription.checkout_session_id == session_id).first()
    if sub is None:
        raise NotFoundError("Checkout session")
    if actor_id is not None and sub.user_id != actor_id:
        logger.warning("checkout.access_denied session_id=%s actor_id=%s", session_id, actor_id)
        raise AuthorizationError("Checkout session")

    expire_lapsed(db, sub.user_id)
    if sub.status == "active":
        return VerificationResult(actor_id=sub.user_id, entitlement="active", attempts=0, session_id=session_id)
    if sub.status != "pending":
        return VerificationResult(actor_id=sub.user_id, entitlement="none", attempts=0, session_id=session_id)

    budget = max_attempts if max_attempts is not None else settings.checkout_verify_max_attempts
    delay = delay_seconds if delay_seconds is not None else settings.checkout_verify_delay_seconds

    for attempt in range(1, budget + 1):
        try:
            session = gateway.retrieve_session(session_id)
        except httpx.HTTPError as exc:
            logger.warning("checkout.verify_error session_id=%s attempt=%s error=%s", session_id, attempt, exc)
            session = None

        if session is not None and session.get("payment_status") in _PAID_STATUSES:
            _activate(db, sub, session)
            return VerificationResult(actor_id=sub.user_id, entitlement="active", attempts=attempt, session_id=session_id)

        if attempt < budget:
            sleep(delay)

    logger.info("checkout.verify_pending session_id=%s attempts=%s", session_id, budget)
    return VerificationResult(actor_id=sub.user_id, entitlement="pending", attempts=budget, session_id=session_id)


def get_current_subscription(db: Session, user_id: str) -> CurrentSubscription:
    expire_lapsed(db, user_id)
    sub = (
        db.query(Subscription)
        .filter(Subscription.user_id == user_id)
        .order_by(Subscription.created_at.desc())
        .first()
    )
    if sub is None:
        return CurrentSubscription(subscription=None, has_active_subscription=False)
    return CurrentSubscription(
        subscription=SubscriptionRead.model_validate(sub),
        has_active_subscription=_is_active(sub),
    )


def cancel_subscription(db: Session, user_id: str) -> SubscriptionRead:
    expire_lapsed(db, user_id)
    sub = (
        db.query(Subscription)
        .filter(Subscription.user_id == user_id, Subscription.status == "active")
        .order_by(Subscription.created_at.desc())
        .first()
    )
    if sub is None:
        raise NotFoundError("Active subscription")

    sub.status = "cancelled"
    sub.cancelled_at = utc_now()
    user = db.query(User).filter(User.id == user_id).first()
    if user is not None:
        user.subscription_status = "cancelled"
    db.commit()
    db.refresh(sub)
    logger.info("checkout.cancelled user_id=%s subscription_id=%s", user_id, sub.id)
    return SubscriptionRead.model_validate(sub)
