import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.auth import router as auth_router
from app.api.bookings import router as bookings_router
from app.api.catalog import router as catalog_router
from app.api.dashboard import router as dashboard_router
from app.api.dropbox import router as dropbox_router
from app.api.email import router as email_router
from app.core.config import settings
from app.wiring.dependencies import get_synchronizer

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in (
            "booking_id", "count", "status", "provider", "size",
            "to", "folder", "path", "generation", "reason", "error",
        ):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    sync = None
    if settings.POLLING_ENABLED:
        try:
            sync = get_synchronizer()
        except ValueError as e:
            logger.error("Booking polling disabled", extra={"error": str(e)})
        else:
            sync.start()
            logger.info("Booking polling started")
    yield
    if sync is not None:
        await sync.stop()
        logger.info("Booking polling stopped")


app = FastAPI(title="Booking Dashboard", version="1.0.0", lifespan=lifespan)

app.include_router(bookings_router, tags=["bookings"])
app.include_router(catalog_router, tags=["catalog"])
app.include_router(email_router, tags=["email"])
app.include_router(dropbox_router, tags=["dropbox"])
app.include_router(auth_router, tags=["auth"])
app.include_router(dashboard_router, tags=["dashboard"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
