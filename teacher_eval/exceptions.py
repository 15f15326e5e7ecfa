"""
Các lỗi nghiệp vụ của hệ thống đánh giá giáo viên.

Mỗi lỗi mang một error_code ổn định (InvalidRange, OverlappingPeriod, ...) để phía
gọi phân biệt được, và một thông báo ngắn cho người dùng.
"""
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status


class EvaluationSystemError(HTTPException):
    """Lỗi cơ sở; được main.py render thành {"success": false, "error", "detail"}."""

    error_code = "Error"
    status_code_default = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        detail: str,
        status_code: Optional[int] = None,
        extra: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(
            status_code=status_code or self.status_code_default,
            detail=detail,
            headers=headers,
        )
        self.extra = extra or {}


class InvalidRangeError(EvaluationSystemError):
    error_code = "InvalidRange"

    def __init__(self, detail: str = "End date must be after start date"):
        super().__init__(detail)


class OverlappingPeriodError(EvaluationSystemError):
    error_code = "OverlappingPeriod"
    status_code_default = status.HTTP_409_CONFLICT

    def __init__(self, conflicting_period_id: Optional[int] = None):
        super().__init__(
            "This period overlaps with an existing active period",
            extra={"conflicting_period_id": conflicting_period_id},
        )


class NotFoundError(EvaluationSystemError):
    error_code = "NotFound"
    status_code_default = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, resource_id: Any = None):
        detail = f"{resource} not found" if resource_id is None else f"{resource} {resource_id} not found"
        super().__init__(detail, extra={"resource": resource, "id": resource_id})


class HasDependentsError(EvaluationSystemError):
    error_code = "HasDependents"
    status_code_default = status.HTTP_409_CONFLICT

    def __init__(self, detail: str, count: int = 0):
        super().__init__(detail, extra={"count": count})


class PeriodNotActiveError(EvaluationSystemError):
    error_code = "PeriodNotActive"

    def __init__(self, detail: str = "Evaluation period is not active or has ended."):
        super().__init__(detail)


class NotEnrolledError(EvaluationSystemError):
    error_code = "NotEnrolled"

    def __init__(self, detail: str = "You are not enrolled in this teacher's class."):
        super().__init__(detail)


class AlreadyEvaluatedError(EvaluationSystemError):
    error_code = "AlreadyEvaluated"
    status_code_default = status.HTTP_409_CONFLICT

    def __init__(self, detail: str = "You have already evaluated this teacher for this subject in the current period."):
        super().__init__(detail)


class UnauthorizedError(EvaluationSystemError):
    error_code = "Unauthorized"
    status_code_default = status.HTTP_403_FORBIDDEN

    def __init__(self, detail: str = "You are not allowed to access this resource."):
        super().__init__(detail)


class UnavailableError(EvaluationSystemError):
    error_code = "Unavailable"
    status_code_default = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, detail: str = "The service is temporarily unavailable, please retry."):
        super().__init__(detail)


class InvalidEnrollmentError(EvaluationSystemError):
    error_code = "InvalidEnrollment"

    def __init__(self, errors: List[str]):
        super().__init__("No subjects enrolled", extra={"errors": errors})


class InvalidScoresError(EvaluationSystemError):
    error_code = "InvalidScores"

    def __init__(self, detail: str, question_ids: Optional[List[int]] = None):
        super().__init__(detail, extra={"question_ids": question_ids or []})
