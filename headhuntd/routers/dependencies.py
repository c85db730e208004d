# dependencies.py
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from headhuntd.config import settings
from headhuntd.database import get_db
from headhuntd.models.user import User
from headhuntd.services.flows import Role
from headhuntd.utils.jwt_handler import decode_access_token


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login", auto_error=False)


def get_current_user(
    request: Request,
    db: Session = Depends(get_db),
    bearer: str | None = Depends(oauth2_scheme),
) -> User:
    token = bearer or request.cookies.get(settings.auth_cookie_name)
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    user = db.query(User).filter(User.id == str(user_id)).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


def require_employer(current_user: User = Depends(get_current_user)) -> User:
    if current_user.role != Role.EMPLOYER.value:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Employer account required")
    return current_user
