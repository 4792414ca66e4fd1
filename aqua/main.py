# aqua/main.py

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
import sys

from aqua.core.database import test_connection, init_db, AsyncSessionLocal
from aqua.core.config import settings
from aqua.core.rate_limiter import limiter
from aqua.core.roles import UserRole
from aqua.services.auth_service import get_user_by_email, create_user

# Routers
from aqua.api.endpoints import (
    access as access_router,
    account as account_router,
    assignment as assignment_router,
    auth as auth_router,
    complaints as complaints_router,
    customers as customers_router,
    dashboard as dashboard_router,
    logs as logs_router,
    metrics as metrics_router,
    notifications as notifications_router,
    products as products_router,
    services as services_router,
    users as users_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    colorize=True,
    backtrace=True,
    diagnose=settings.ENV != "prod",
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title="Aqua Backend",
    version="1.0.0",
    description="Backend service for the Aqua water utility management dashboard.",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ------------------------------------------------------------
# CORS CONFIGURATION
# ------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(auth_router.router)
app.include_router(account_router.router)
app.include_router(access_router.router)
app.include_router(users_router.router)
app.include_router(customers_router.router)
app.include_router(complaints_router.router)
# Assignment routes live under /api/services; register them before /{service_id}
app.include_router(assignment_router.router)
app.include_router(services_router.router)
app.include_router(products_router.router)
app.include_router(notifications_router.router)
app.include_router(dashboard_router.router)
app.include_router(logs_router.router)
app.include_router(metrics_router.router)


# ------------------------------------------------------------
# SUPER ADMIN SEEDING
# ------------------------------------------------------------
async def seed_super_admin():
    if not settings.SUPER_ADMIN_EMAIL or not settings.SUPER_ADMIN_PASSWORD:
        logger.warning("Missing Super Admin credentials in settings.")
        return

    async with AsyncSessionLocal() as session:
        existing = await get_user_by_email(session, settings.SUPER_ADMIN_EMAIL)
        if existing:
            logger.info("Super Admin already exists. Skipping.")
            return

        logger.info(f"Seeding Super Admin: {settings.SUPER_ADMIN_EMAIL}")
        await create_user(
            session=session,
            full_name=settings.SUPER_ADMIN_NAME or "Super Admin",
            email=settings.SUPER_ADMIN_EMAIL,
            password=settings.SUPER_ADMIN_PASSWORD,
            role=UserRole.Admin,
        )
        logger.success("Super Admin created successfully.")


# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    logger.info("Starting Aqua Backend...")

    try:
        await test_connection()
        logger.success("Database connection established.")
    except Exception:
        logger.exception("Startup aborted: Database connection failed.")
        return

    try:
        await init_db()
        logger.success("Database tables ready.")
    except Exception as e:
        logger.warning(f"Table initialization encountered an issue: {e}")

    try:
        await seed_super_admin()
    except Exception:
        logger.exception("Super Admin seeding failed.")

    logger.success("Backend startup completed successfully.")


# ------------------------------------------------------------
# ROOT HEALTH CHECK
# ------------------------------------------------------------
@app.get("/", tags=["System"])
async def root():
    return {
        "status": "ok",
        "service": "Aqua Backend",
        "version": app.version,
        "message": "Backend running successfully",
        "metrics_url": "/api/metrics",
    }
