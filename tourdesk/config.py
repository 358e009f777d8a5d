import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tourdesk.db")

# Security - CRITICAL: No default secret key in production
SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    import warnings

    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))

# File uploads (member documents, tour package cover photos)
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", "./uploads")).resolve()
MAX_UPLOAD_FILES = int(os.getenv("MAX_UPLOAD_FILES", "10"))
MAX_UPLOAD_SIZE_MB = int(os.getenv("MAX_UPLOAD_SIZE_MB", "10"))

# Members get a sequential id (e.g. ALMB00001) and a MEMBER login account
MEMBER_ID_PREFIX = os.getenv("MEMBER_ID_PREFIX", "ALMB")
MEMBER_EMAIL_DOMAIN = os.getenv("MEMBER_EMAIL_DOMAIN", "members.tourdesk.local")
MEMBER_DEFAULT_PASSWORD = os.getenv("MEMBER_DEFAULT_PASSWORD", "Member@12345")

# SMS gateway (templated HTTP GET, DLT template id required by the provider)
SMS_GATEWAY_URL = os.getenv("SMS_GATEWAY_URL", "http://site.ping4sms.com/api/smsapi")
SMS_ACCOUNT_KEY = os.getenv("SMS_ACCOUNT_KEY")
SMS_ROUTE = os.getenv("SMS_ROUTE")
SMS_SENDER = os.getenv("SMS_SENDER")
SMS_TEMPLATE_ID = os.getenv("SMS_TEMPLATE_ID")
SMS_TIMEOUT_SECONDS = float(os.getenv("SMS_TIMEOUT_SECONDS", "10"))

# Bulk reminders schedule the next one this many days out unless a date is given
REMINDER_INTERVAL_DAYS = int(os.getenv("REMINDER_INTERVAL_DAYS", "7"))

ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:5173,http://localhost:3000",
).split(",")
