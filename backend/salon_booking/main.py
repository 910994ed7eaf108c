import logging

from fastapi import FastAPI
from redis.exceptions import RedisError

from .config import settings
from .database import engine
from .models.generated import Base
from .redis_client import redis_client
from .routers import bookings, settings as settings_router, slots

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

Base.metadata.create_all(bind=engine)

app = FastAPI(title="Salon Booking API")

app.include_router(slots.router)
app.include_router(bookings.router)
app.include_router(settings_router.router)


@app.get("/health")
def health():
    try:
        redis_ok = redis_client.ping()
    except RedisError:
        logger.exception("Redis health check failed")
        redis_ok = False
    return {"status": "ok", "redis": redis_ok}
