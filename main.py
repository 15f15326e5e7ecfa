# main.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from apscheduler.schedulers.asyncio import AsyncIOScheduler # type: ignore
from apscheduler.triggers.cron import CronTrigger # type: ignore
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware
from teacher_eval.api.v1.api import api_router
from teacher_eval.config import CORS_ORIGINS, PERIOD_CHECK_HOUR
from teacher_eval.database import Base, engine, SessionLocal
from teacher_eval.exceptions import EvaluationSystemError, UnavailableError
from teacher_eval.models import *
from teacher_eval.services import period_service
import logging

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logging.getLogger('apscheduler').setLevel(logging.INFO)

logger = logging.getLogger(__name__)

# Tạo scheduler
scheduler = AsyncIOScheduler()


async def run_period_check_task():
    """Tác vụ kiểm tra kỳ đánh giá hiện tại, chạy mỗi ngày."""
    db = SessionLocal()
    try:
        period_service.check_current_period(db)
    except Exception:
        logger.error("Lỗi khi chạy tác vụ kiểm tra kỳ đánh giá", exc_info=True)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    scheduler.add_job(
        run_period_check_task,
        trigger=CronTrigger(hour=PERIOD_CHECK_HOUR, minute=0),
        id="evaluation_period_check_job",
        name="Check Current Evaluation Period"
    )
    scheduler.start()
    logger.info("Scheduler đã được khởi động.")

    # Tạo tất cả các bảng trong cơ sở dữ liệu
    Base.metadata.create_all(bind=engine)

    yield

    scheduler.shutdown()
    logger.info("Scheduler đã tắt.")


app = FastAPI(
    title="Teacher Evaluation API",
    description="API cho hệ thống đánh giá giáo viên theo kỳ đánh giá.",
    version="1.0.0",
    lifespan=lifespan
)


@app.exception_handler(EvaluationSystemError)
async def evaluation_error_handler(request: Request, exc: EvaluationSystemError):
    content = {"success": False, "error": exc.error_code, "detail": exc.detail}
    if exc.extra:
        content.update(exc.extra)
    return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)


@app.exception_handler(OperationalError)
async def operational_error_handler(request: Request, exc: OperationalError):
    logger.error(f"Lỗi kết nối cơ sở dữ liệu: {exc}")
    return await evaluation_error_handler(request, UnavailableError())


app.add_middleware(
    ProxyHeadersMiddleware,
    trusted_hosts=["*"]
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Bao gồm router chính của API v1
app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"message": "Welcome to the Teacher Evaluation API! Visit /docs for API documentation."}
