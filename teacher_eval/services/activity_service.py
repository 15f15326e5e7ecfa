# teacher_eval/services/activity_service.py
"""
Ghi nhật ký hoạt động và ghép cặp Login/Logout để tính thời lượng phiên.

Mỗi lần đăng nhập được cấp một session_token (nằm trong JWT, claim "sid").
Khi đăng xuất, dòng Login được tìm chính xác theo token; chỉ khi không có token
mới dùng "dòng Login mở gần nhất của username".
"""
import logging
import math
import uuid
from datetime import datetime
from typing import Dict, Optional

import requests
from sqlalchemy.orm import Session

from teacher_eval.config import (
    ACTIVITY_LOG_PAGE_SIZE,
    IP_GEOLOCATION_ENABLED,
    IP_GEOLOCATION_TIMEOUT,
    IP_GEOLOCATION_URL,
)
from teacher_eval.crud import activity_log_crud
from teacher_eval.models.activity_log_model import ActivityLog, ActivityType
from teacher_eval.exceptions import NotFoundError
from teacher_eval.schemas.activity_log_schema import ActivityLogPage, ActivityLogView
from teacher_eval.schemas.auth_schema import AuthenticatedUser

logger = logging.getLogger(__name__)

LOCAL_ADDRESSES = {"127.0.0.1", "::1", "localhost", "testclient"}


def lookup_location(ip_address: Optional[str]) -> Dict[str, str]:
    """
    Tra cứu vị trí của địa chỉ IP qua dịch vụ geolocation.
    Địa chỉ nội bộ trả về "Local"; lỗi mạng hoặc phản hồi lỗi trả về "Unknown".
    """
    if not ip_address or ip_address in LOCAL_ADDRESSES:
        return {"city": "Local", "region": "Local", "country": "Local"}
    if not IP_GEOLOCATION_ENABLED:
        return {}

    unknown = {"city": "Unknown", "region": "Unknown", "country": "Unknown"}
    try:
        response = requests.get(IP_GEOLOCATION_URL.format(ip=ip_address), timeout=IP_GEOLOCATION_TIMEOUT)
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"Không tra cứu được vị trí cho IP {ip_address}: {e}")
        return unknown

    if data.get("status") != "success":
        return unknown
    return {
        "city": data.get("city") or "Unknown",
        "region": data.get("regionName") or "Unknown",
        "country": data.get("country") or "Unknown",
    }


def _base_log(
    principal: AuthenticatedUser,
    activity_type: ActivityType,
    description: str,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ActivityLog:
    return ActivityLog(
        user_id=principal.user_id,
        username=principal.username,
        role=principal.primary_role,
        activity_type=activity_type,
        description=description,
        ip_address=ip_address,
        user_agent=user_agent,
        timestamp=now or datetime.now(),
        **lookup_location(ip_address),
    )


def record_login(
    db: Session,
    principal: AuthenticatedUser,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ActivityLog:
    """Ghi dòng Login với time_in = now và cấp session_token mới."""
    now = now or datetime.now()
    log = _base_log(principal, ActivityType.Login, f"{principal.username} logged in", ip_address, user_agent, now)
    log.session_token = uuid.uuid4().hex
    log.time_in = now
    return activity_log_crud.add_activity_log(db, log)


def record_logout(
    db: Session,
    principal: AuthenticatedUser,
    ip_address: Optional[str] = None,
    session_token: Optional[str] = None,
    user_agent: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[ActivityLog]:
    """
    Đóng dòng Login tương ứng (time_out, duration) và ghi thêm một dòng Logout.
    Trả về dòng Login đã đóng, hoặc None nếu không tìm thấy phiên mở nào.
    """
    now = now or datetime.now()
    if session_token:
        # Token đã đóng hoặc không tồn tại thì không được đóng phiên khác của cùng username
        open_login = activity_log_crud.find_open_login_by_token(db, session_token)
    else:
        open_login = activity_log_crud.find_latest_open_login(db, principal.username)

    if open_login is not None:
        open_login.time_out = now
        open_login.duration = now - (open_login.time_in or open_login.timestamp)
    else:
        logger.warning(f"Không tìm thấy phiên đăng nhập mở cho {principal.username}")

    logout = _base_log(principal, ActivityType.Logout, f"{principal.username} logged out", ip_address, user_agent, now)
    logout.session_token = open_login.session_token if open_login is not None else session_token
    activity_log_crud.add_activity_log(db, logout, commit=False)
    db.commit()
    if open_login is not None:
        db.refresh(open_login)
    return open_login


def record_evaluation_event(
    db: Session,
    principal: AuthenticatedUser,
    activity_type: ActivityType,
    description: str,
    student_id: Optional[int] = None,
    teacher_id: Optional[int] = None,
    subject_id: Optional[int] = None,
    evaluation_id: Optional[int] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
    now: Optional[datetime] = None,
) -> ActivityLog:
    """Ghi sự kiện EvaluationStarted / EvaluationCompleted, commit riêng."""
    log = _base_log(principal, activity_type, description, ip_address, user_agent, now)
    log.student_id = student_id
    log.teacher_id = teacher_id
    log.subject_id = subject_id
    log.evaluation_id = evaluation_id
    return activity_log_crud.add_activity_log(db, log)


def search_logs(
    db: Session,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    activity_type: Optional[ActivityType] = None,
    username: Optional[str] = None,
    page: int = 1,
    page_size: int = ACTIVITY_LOG_PAGE_SIZE,
) -> ActivityLogPage:
    page = max(page, 1)
    items, total = activity_log_crud.search_activity_logs(
        db,
        date_from=date_from,
        date_to=date_to,
        activity_type=activity_type,
        username=username,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return ActivityLogPage(
        items=[ActivityLogView.model_validate(item) for item in items],
        total_count=total,
        page=page,
        page_size=page_size,
        total_pages=math.ceil(total / page_size) if total else 0,
    )


def get_log(db: Session, activity_log_id: int) -> ActivityLog:
    log = activity_log_crud.get_activity_log(db, activity_log_id)
    if log is None:
        raise NotFoundError("Activity log", activity_log_id)
    return log
