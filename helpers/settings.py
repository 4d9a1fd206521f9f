import os
from datetime import timedelta

from dotenv import load_dotenv

load_dotenv()


DATABASE_URI = os.getenv("DATABASE_URI", "sqlite://quiet_hours.sqlite3")

JWT_SECRET = os.getenv("JWT_SECRET")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "authenticated")

# admin user lookup (GoTrue-style /admin/users/{id})
AUTH_ADMIN_URL = os.getenv("AUTH_ADMIN_URL")
AUTH_SERVICE_KEY = os.getenv("AUTH_SERVICE_KEY")

CRON_SECRET_KEY = os.getenv("CRON_SECRET_KEY")

# outbound mail; SendGrid wins when both are configured
SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
EMAIL_FROM = os.getenv("EMAIL_FROM")
SMTP_SERVER = os.getenv("SMTP_SERVER", "smtp.gmail.com")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_FROM_ADDRESS = os.getenv("SMTP_FROM_ADDRESS")
SMTP_FROM_USER = os.getenv("SMTP_FROM_USER")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def _minutes(name: str, default: int) -> timedelta:
    return timedelta(minutes=int(os.getenv(name, default)))


def _seconds(name: str, default: int) -> timedelta:
    return timedelta(seconds=int(os.getenv(name, default)))


NOTIFY_LOOKAHEAD = _minutes("NOTIFY_LOOKAHEAD_MINUTES", 10)
NOTIFY_SLACK = _minutes("NOTIFY_SLACK_MINUTES", 1)
BLOCK_GRACE = _seconds("BLOCK_GRACE_SECONDS", 60)
DISPATCH_INTERVAL = _seconds("DISPATCH_INTERVAL_SECONDS", 60)
