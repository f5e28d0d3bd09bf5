"""
Banking Ledger FastAPI application.

This is the entry point for the application.
All routers are registered here.
"""

from fastapi import FastAPI

from banking_ledger.config import get_settings
from banking_ledger.logging_config import setup_logging
from banking_ledger.api.health import router as health_router
from banking_ledger.api.users import router as users_router
from banking_ledger.api.accounts import router as accounts_router
from banking_ledger.api.transactions import router as transactions_router

settings = get_settings()

app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="A double-entry ledger for users, accounts and transfers",
)

# Built once and handed to services through get_app_logger
app.state.logger = setup_logging(settings.ENVIRONMENT, settings.LOG_LEVEL)

# Register routers
app.include_router(health_router)
app.include_router(users_router)
app.include_router(accounts_router)
app.include_router(transactions_router)
