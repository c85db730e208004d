# users.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from headhuntd.database import get_db
from headhuntd.models.user import User
from headhuntd.routers.dependencies import get_current_user
from headhuntd.schemas.user import UserRead, UserUpdate


router = APIRouter()


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_current_user)) -> UserRead:
    return UserRead.model_validate(current_user)


@router.patch("/me", response_model=UserRead)
def update_current_user(update: UserUpdate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)) -> UserRead:
    # Email, role and password are not patchable.
    update_data = update.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(current_user, field, value)
    db.add(current_user)
    db.commit()
    db.refresh(current_user)
    return UserRead.model_validate(current_user)
