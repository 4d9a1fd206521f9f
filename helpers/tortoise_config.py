from tortoise import Tortoise
from contextlib import asynccontextmanager

from helpers.settings import DATABASE_URI


TORTOISE_CONFIG = {

    'connections': {
        'default': DATABASE_URI
    },
    "apps": {
        "models": {
            "models": [
                "models.block",
                "aerich.models"
            ]
        }
    },
    "use_tz": True,
    "timezone": "UTC",
    }


async def init_db():
    await Tortoise.init(config=TORTOISE_CONFIG)


async def close_db():
    await Tortoise.close_connections()


@asynccontextmanager
async def lifespan(_):
    await init_db()
    try:
        yield
    finally:
        await close_db()
