# subscriptions.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from headhuntd.config import settings
from headhuntd.database import get_db
from headhuntd.errors import PaymentProviderError
from headhuntd.models.user import User
from headhuntd.routers.dependencies import get_current_user
from headhuntd.schemas.subscription import (
    CheckoutRequest,
    CheckoutSession,
    CurrentSubscription,
    PackageRead,
    SubscriptionRead,
    VerificationResult,
)
from headhuntd.services import checkout
from headhuntd.services.checkout import CheckoutGateway, StripeCheckoutGateway


router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


def get_checkout_gateway() -> CheckoutGateway:
    if not settings.stripe_secret_key:
        raise PaymentProviderError("Payment provider is not configured")
    return StripeCheckoutGateway(
        settings.stripe_secret_key,
        api_base=settings.stripe_api_base,
        timeout=settings.stripe_timeout_seconds,
    )


@router.get("/packages", response_model=list[PackageRead])
def read_packages():
    return checkout.list_packages()


@router.post("/checkout", response_model=CheckoutSession)
def create_checkout_session(
    payload: CheckoutRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway: CheckoutGateway = Depends(get_checkout_gateway),
):
    return checkout.start_checkout(
        db,
        current_user,
        payload.package_id,
        gateway,
        success_url=payload.success_url,
        cancel_url=payload.cancel_url,
    )


@router.get("/verify/{session_id}", response_model=VerificationResult)
def verify_checkout_session(
    session_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
    gateway: CheckoutGateway = Depends(get_checkout_gateway),
):
    return checkout.verify_session(db, session_id, gateway, actor_id=current_user.id)


@router.get("/current", response_model=CurrentSubscription)
def read_current_subscription(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return checkout.get_current_subscription(db, current_user.id)


@router.post("/cancel", response_model=SubscriptionRead)
def cancel_current_subscription(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return checkout.cancel_subscription(db, current_user.id)
