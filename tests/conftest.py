import os

os.environ["JWT_SECRET"] = "test-jwt-secret-with-enough-length-for-hs256"
os.environ["JWT_AUDIENCE"] = "authenticated"
os.environ["CRON_SECRET_KEY"] = "test-cron-key"
os.environ["DATABASE_URI"] = "sqlite://:memory:"
# keep a developer .env from routing test mail anywhere real
for name in ("SENDGRID_API_KEY", "EMAIL_FROM", "SMTP_FROM_ADDRESS", "SMTP_PASSWORD", "AUTH_ADMIN_URL", "AUTH_SERVICE_KEY"):
    os.environ[name] = ""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
from tortoise import Tortoise


@pytest.fixture
async def db():
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["models.block"]},
        use_tz=True,
        timezone="UTC",
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture
def tomorrow(now) -> datetime:
    """Midnight UTC the day after ``now``; far enough out to dodge staleness."""
    return (now + timedelta(days=1)).replace(hour=0, minute=0, second=0)


def make_interval(start: datetime, end: datetime, title: str = "block"):
    return SimpleNamespace(title=title, start_time=start, end_time=end)


class RecordingSender:
    """Email transport double; optionally fails for chosen recipients."""

    def __init__(self, fail_for=(), error=None):
        self.fail_for = set(fail_for)
        self.error = error
        self.sent = []

    async def __call__(self, to, subject, text, html=None):
        if to in self.fail_for:
            raise self.error
        self.sent.append({"to": to, "subject": subject, "text": text, "html": html})


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()
