# teacher_eval/database.py
from sqlalchemy import create_engine, event
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from teacher_eval.config import DATABASE_URL


class Base(DeclarativeBase):
    """
    Lớp cơ sở khai báo cho các mô hình SQLAlchemy 2.0.
    Tất cả các mô hình khác sẽ kế thừa từ lớp này.
    """
    pass


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite mặc định không kiểm tra khóa ngoại
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def build_engine(url: str, **kwargs):
    """Tạo engine; với SQLite thì bật kiểm tra khóa ngoại cho mọi kết nối."""
    if url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        db_engine = create_engine(url, connect_args=connect_args, **kwargs)
        event.listen(db_engine, "connect", _enable_sqlite_foreign_keys)
        return db_engine
    return create_engine(url, pool_pre_ping=True, **kwargs)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
