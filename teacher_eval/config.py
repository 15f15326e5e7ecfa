from dotenv import load_dotenv
import os


load_dotenv(dotenv_path="credentials.env")

POSTGRES_USER = os.getenv("POSTGRES_USER")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD")
POSTGRES_DB = os.getenv("POSTGRES_DB")
POSTGRES_HOST = os.getenv("POSTGRES_HOST")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")
SECRET_KEY = os.getenv("SECRET_KEY", "your-default-secret-key")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# Ưu tiên DATABASE_URL, sau đó tới PostgreSQL, cuối cùng là SQLite cục bộ
if os.getenv("DATABASE_URL"):
    DATABASE_URL = os.getenv("DATABASE_URL")
elif POSTGRES_HOST:
    DATABASE_URL = f"postgresql+psycopg2://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}"
else:
    DATABASE_URL = "sqlite:///./teacher_evaluation.db"

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost,http://localhost:3000").split(",")
    if origin.strip()
]

# Thang điểm Likert: 1 = Poor, 5 = Excellent
SCORE_MIN = 1
SCORE_MAX = 5

TOP_RATED_LIMIT = int(os.getenv("TOP_RATED_LIMIT", "10"))
ACTIVITY_LOG_PAGE_SIZE = int(os.getenv("ACTIVITY_LOG_PAGE_SIZE", "20"))
CURRENT_PERIOD_MAX_RETRIES = int(os.getenv("CURRENT_PERIOD_MAX_RETRIES", "3"))

AUTO_ENROLL_DURING_OPEN_PERIOD = os.getenv("AUTO_ENROLL_DURING_OPEN_PERIOD", "true").lower() == "true"

IP_GEOLOCATION_ENABLED = os.getenv("IP_GEOLOCATION_ENABLED", "false").lower() == "true"
IP_GEOLOCATION_URL = os.getenv("IP_GEOLOCATION_URL", "http://ip-api.com/json/{ip}")
IP_GEOLOCATION_TIMEOUT = float(os.getenv("IP_GEOLOCATION_TIMEOUT", "5"))

PERIOD_CHECK_HOUR = int(os.getenv("PERIOD_CHECK_HOUR", "0"))
