from typing import Optional
from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from teacher_eval.models.user_model import User


def get_user(db: Session, user_id: int) -> Optional[User]:
    stmt = select(User).options(selectinload(User.roles)).where(User.user_id == user_id)
    return db.execute(stmt).scalars().first()


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    stmt = select(User).options(selectinload(User.roles)).where(User.username == username)
    return db.execute(stmt).scalars().first()
