# auth.py
import logging
from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from headhuntd.config import settings
from headhuntd.database import get_db
from headhuntd.errors import AccountLockedError, ConflictError
from headhuntd.models.user import User
from headhuntd.routers.dependencies import get_current_user
from headhuntd.schemas.auth import LoginRequest, SignupRequest
from headhuntd.schemas.user import AuthResponse, CheckEmailRequest, CheckEmailResponse, UserRead
from headhuntd.services.flows import onboarding_flow_for_role
from headhuntd.utils.clock import as_utc, utc_now
from headhuntd.utils.jwt_handler import clear_auth_cookie, issue_user_token, set_auth_cookie
from headhuntd.utils.password_hash import hash_password, verify_password


router = APIRouter()

logger = logging.getLogger(__name__)


def _auth_response(user: User, response: Response) -> AuthResponse:
    token = issue_user_token(user.id, user.role)
    set_auth_cookie(response, token)
    return AuthResponse(access_token=token, user=UserRead.model_validate(user))


@router.post("/check-email", response_model=CheckEmailResponse)
def check_email(payload: CheckEmailRequest, db: Session = Depends(get_db)) -> CheckEmailResponse:
    exists = db.query(User.id).filter(User.email == payload.email).first() is not None
    return CheckEmailResponse(exists=exists)


@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def signup(payload: SignupRequest, response: Response, db: Session = Depends(get_db)) -> AuthResponse:
    existing_user = db.query(User).filter(User.email == payload.email).first()
    if existing_user:
        raise ConflictError("Email already registered")
    user = User(
        email=payload.email,
        password=hash_password(payload.password),
        full_name=payload.full_name,
        mobile_number=payload.mobile_number,
        role=payload.role,
        onboarding_flow=onboarding_flow_for_role(payload.role).value,
        selected_goal=payload.selected_goal,
        subscription_status="none",
        login_attempts=0,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        # A concurrent signup claimed the email between the check and the insert.
        db.rollback()
        logger.info("user.signup_conflict email=%s", payload.email)
        raise ConflictError("Email already registered") from exc
    db.refresh(user)
    logger.info("user.signup id=%s role=%s", user.id, user.role)
    return _auth_response(user, response)


@router.post("/login", response_model=AuthResponse)
def login(payload: LoginRequest, response: Response, db: Session = Depends(get_db)) -> AuthResponse:
    user = db.query(User).filter(User.email == payload.email).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    now = utc_now()
    if user.lock_until is not None:
        if as_utc(user.lock_until) > now:
            raise AccountLockedError()
        # Lock expired: start counting again.
        user.lock_until = None
        user.login_attempts = 0

    if not verify_password(payload.password, user.password):
        user.login_attempts = (user.login_attempts or 0) + 1
        if user.login_attempts >= settings.max_login_attempts:
            user.lock_until = now + timedelta(minutes=settings.lockout_minutes)
            logger.warning("user.locked id=%s attempts=%s", user.id, user.login_attempts)
        db.commit()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    user.login_attempts = 0
    user.lock_until = None
    user.last_login = now
    db.commit()
    db.refresh(user)
    return _auth_response(user, response)


@router.post("/logout")
def logout(response: Response) -> dict:
    clear_auth_cookie(response)
    return {"success": True}


@router.get("/me", response_model=UserRead)
def read_me(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)
