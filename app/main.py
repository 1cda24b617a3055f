from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from app.core.config import get_settings
from app.core.logging_config import setup_logging
from app.database import Database
from app.services.notification.dispatcher import NotificationDispatcher
from app.services.notification.gateway import SmtpNotificationGateway
from app.routes.order.order_routes import router as order_router
from app.routes.payment.payment_routes import router as payment_router
from app.routes.refund.refund_routes import router as refund_router
from app.utils.response import validation_error_response

settings = get_settings()
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for the application"""
    # Startup
    await Database.connect_db(settings)
    app.state.dispatcher = NotificationDispatcher(SmtpNotificationGateway(settings), settings)

    yield
    # Shutdown: let in-flight emails finish before closing
    await app.state.dispatcher.drain()
    await Database.close_db()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="FollowersCart API for orders, payments and refunds",
    lifespan=lifespan
)

# CORS middleware
# In development, allow all origins for easier testing
cors_origins = [
    settings.frontend_url,
    "http://localhost:3000",
    "http://localhost:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins if not settings.debug else ["*"],
    allow_credentials=not settings.debug,  # Can't use credentials with wildcard origin
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed or missing request fields are invalid arguments (400)"""
    errors = {
        ".".join(str(part) for part in error["loc"]): error["msg"]
        for error in exc.errors()
    }
    return validation_error_response(message="Invalid request data", errors=errors)


# Include routers with /api prefix
app.include_router(order_router, prefix="/api")
app.include_router(payment_router, prefix="/api")
app.include_router(refund_router, prefix="/api")


@app.get("/")
async def read_root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.app_name} API",
        "version": settings.app_version,
        "docs": "/docs"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}
