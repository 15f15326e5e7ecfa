# teacher_eval/api/v1/api.py
from fastapi import APIRouter

from teacher_eval.api.v1.endpoints.auth_route import router as auth_router
from teacher_eval.api.v1.endpoints.evaluation_period_route import router as evaluation_period_router
from teacher_eval.api.v1.endpoints.enrollment_route import router as enrollment_router
from teacher_eval.api.v1.endpoints.evaluation_route import router as evaluation_router
from teacher_eval.api.v1.endpoints.criteria_route import router as criteria_router
from teacher_eval.api.v1.endpoints.activity_log_route import router as activity_log_router
from teacher_eval.api.v1.endpoints.report_route import router as report_router

api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["Auth"])
api_router.include_router(evaluation_period_router, prefix="/evaluation-periods", tags=["Evaluation Periods"])
api_router.include_router(enrollment_router, prefix="/enrollments", tags=["Enrollments"])
api_router.include_router(evaluation_router, prefix="/evaluations", tags=["Evaluations"])
api_router.include_router(criteria_router, prefix="/criteria", tags=["Criteria"])
api_router.include_router(activity_log_router, prefix="/activity-logs", tags=["Activity Logs"])
api_router.include_router(report_router, prefix="/reports", tags=["Reports"])
