import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, engine
from shared.helpers.exception_handler import setup_exception_handlers
from shared.wrappers.response_wrapper import JsonResponseMiddleware
from . import models  # noqa: F401  registers every table on Base
from .router import (
    admin_signatures_router,
    auth_router,
    bookings_router,
    contacts_router,
    contract_templates_router,
    contracts_router,
    dashboard_router,
    payments_router,
    reservations_router,
    rooms_router,
    users_router,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
)

# Create tables
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.APP_NAME)

origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom JSON response wrapper middleware
app.add_middleware(JsonResponseMiddleware)

# Register exception handlers
setup_exception_handlers(app)

# Routers
app.include_router(auth_router.router)
app.include_router(rooms_router.router)
app.include_router(bookings_router.router)
app.include_router(reservations_router.router)
app.include_router(payments_router.router)
app.include_router(contacts_router.router)
app.include_router(users_router.router)
app.include_router(dashboard_router.router)
app.include_router(contract_templates_router.router)
app.include_router(admin_signatures_router.router)
app.include_router(contracts_router.router)
app.include_router(contracts_router.signing_router)


@app.get("/api/health")
def health():
    return {"status": "healthy"}
