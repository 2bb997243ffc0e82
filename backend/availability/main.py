import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .redis_client import redis_client
from .routers import availability, availability_overrides, availability_rules, internal

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Provider Availability API")

# Fixed-path routers first: /availability/{calendar_id} would shadow them
app.include_router(availability_overrides.router)
app.include_router(availability_rules.router)
app.include_router(availability.router)
app.include_router(internal.router)


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Storage error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Storage error"})


@app.get("/health")
def health():
    return {"redis": redis_client.ping()}
