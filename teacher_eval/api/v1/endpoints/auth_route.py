# teacher_eval/api/v1/endpoints/auth_route.py
import logging

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from teacher_eval.api.deps import get_db
from teacher_eval.api.auth.auth import (
    client_ip,
    create_access_token,
    get_current_active_user,
    to_authenticated_user,
)
from teacher_eval.crud import user_crud
from teacher_eval.schemas.auth_schema import AuthenticatedUser, LoginRequest, LogoutResponse, TokenResponse
from teacher_eval.services import activity_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse, summary="Đăng nhập và mở phiên")
def login(data: LoginRequest, request: Request, db: Session = Depends(get_db)):
    logger.info(f"Attempting login for user: {data.username}")
    user = user_crud.get_user_by_username(db, data.username)
    if not user or not user.is_active or not user.verify_password(data.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Sai tài khoản hoặc mật khẩu")

    principal = to_authenticated_user(user)
    login_row = activity_service.record_login(
        db, principal, client_ip(request), request.headers.get("user-agent")
    )
    access_token = create_access_token({"sub": str(user.user_id), "sid": login_row.session_token})
    logger.info(f"Login successful for user: {user.username}")
    return TokenResponse(
        access_token=access_token,
        user_id=user.user_id,
        username=user.username,
        full_name=user.full_name,
        roles=principal.roles,
    )


@router.post("/logout", response_model=LogoutResponse, summary="Đăng xuất và đóng phiên")
def logout(
    request: Request,
    db: Session = Depends(get_db),
    current_user: AuthenticatedUser = Depends(get_current_active_user),
):
    closed = activity_service.record_logout(
        db,
        current_user,
        client_ip(request),
        session_token=current_user.session_token,
        user_agent=request.headers.get("user-agent"),
    )
    return LogoutResponse(message="Đăng xuất thành công", session_closed=closed is not None)


@router.get("/me", response_model=AuthenticatedUser, summary="Thông tin người dùng hiện tại")
def read_me(current_user: AuthenticatedUser = Depends(get_current_active_user)):
    return current_user
