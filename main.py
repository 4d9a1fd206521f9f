import logging

from dotenv import load_dotenv
load_dotenv()
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from helpers.settings import LOG_LEVEL
from helpers.tortoise_config import lifespan
from controllers.block_controller import block_router
from controllers.cron_controller import cron_router


logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)


app = FastAPI(lifespan=lifespan)


app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def malformed_request(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={
            "detail": {
                "error": "Invalid request",
                "rule": "malformed",
                "message": str(exc.errors()),
            }
        },
    )


app.include_router(block_router, prefix='/api', tags=['Blocks'])
app.include_router(cron_router, prefix='/api', tags=['Notifications'])


@app.get('/')
def greetings():
    return {
        "Message": "Quiet Hours Scheduler is running"
    }
