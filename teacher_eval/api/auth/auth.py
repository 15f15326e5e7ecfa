# teacher_eval/api/auth/auth.py
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt  # type: ignore
from sqlalchemy.orm import Session

from teacher_eval.api.deps import get_db
from teacher_eval.config import SECRET_KEY, ACCESS_TOKEN_EXPIRE_MINUTES
from teacher_eval.crud import user_crud
from teacher_eval.exceptions import UnauthorizedError
from teacher_eval.models.role_model import ADMIN_ROLES, ROLE_STUDENT
from teacher_eval.models.user_model import User
from teacher_eval.schemas.auth_schema import TokenData, AuthenticatedUser

# Cấu hình JWT
ALGORITHM = "HS256"

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None):
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def verify_token(token: str) -> TokenData:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id = payload.get("sub")
        if user_id is None:
            raise credentials_exception
        return TokenData(user_id=int(user_id), session_token=payload.get("sid"))
    except (JWTError, ValueError):
        raise credentials_exception


def to_authenticated_user(user: User, session_token: Optional[str] = None) -> AuthenticatedUser:
    return AuthenticatedUser(
        user_id=user.user_id,
        username=user.username,
        email=user.email,
        full_name=user.full_name,
        is_active=user.is_active,
        roles=user.role_names,
        session_token=session_token,
    )


def get_current_active_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> AuthenticatedUser:
    token_data = verify_token(token)
    user = user_crud.get_user(db, token_data.user_id)
    if not user or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return to_authenticated_user(user, token_data.session_token)


def has_roles(required_roles: List[str]):
    """
    Dependency factory để kiểm tra quyền truy cập dựa trên vai trò.
    Hàm này trả về một dependency mới dựa trên danh sách vai trò yêu cầu.
    """
    def role_checker(current_user: AuthenticatedUser = Depends(get_current_active_user)):
        # Người dùng phải có ít nhất một trong các vai trò yêu cầu
        if not any(role in required_roles for role in current_user.roles):
            raise UnauthorizedError("Bạn không có quyền để thực hiện hành động này.")
        return current_user
    return role_checker


ADMIN_ONLY = has_roles(ADMIN_ROLES)
STUDENT_ONLY = has_roles([ROLE_STUDENT])
ADMIN_AND_STUDENT = has_roles(ADMIN_ROLES + [ROLE_STUDENT])


def client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None
