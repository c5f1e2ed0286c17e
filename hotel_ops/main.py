# hotel_ops/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hotel_ops.config import ALLOWED_ORIGINS, API_PREFIX, RECONCILE_ON_STARTUP
from hotel_ops.errors import register_error_handlers
from hotel_ops.logging_config import setup_logging
from hotel_ops.middleware import RequestIDMiddleware
from hotel_ops.routes.bookings import router as bookings_router
from hotel_ops.routes.health import router as health_router
from hotel_ops.routes.metrics import router as metrics_router
from hotel_ops.routes.rooms import router as rooms_router
from hotel_ops.routes.users import router as users_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Hotel Operations API",
    description="Rooms, bookings and guest accounts for hotel front-desk operations",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

register_error_handlers(app)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(users_router, prefix=f"{API_PREFIX}/users", tags=["Users"])
app.include_router(rooms_router, prefix=f"{API_PREFIX}/rooms", tags=["Rooms"])
app.include_router(bookings_router, prefix=f"{API_PREFIX}/bookings", tags=["Bookings"])


@app.on_event("startup")
def startup_event() -> None:
    """Initialize application on startup."""
    logger.info("FastAPI application starting up...")

    if RECONCILE_ON_STARTUP:
        from hotel_ops.db.engine import engine
        from hotel_ops.services.room_status import reconcile_room_statuses

        reconcile_room_statuses(engine)

    logger.info("FastAPI application initialized")
