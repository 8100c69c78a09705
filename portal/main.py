import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from . import config
from . import models  # noqa: F401  (registers tables on Base)
from .database import Base, engine
from .domain.analytics import router as analytics_router
from .domain.appointments import router as appointments_router
from .domain.billing import router as billing_router
from .domain.contacts import router as contacts_router
from .domain.documents import router as documents_router
from .domain.reservations import router as reservations_router
from .routes.account import router as account_router
from .routes.notifications import router as notifications_router
from .routes.staff import router as staff_router
from .routes.workflows import router as workflows_router
from .security_headers import SecurityHeadersMiddleware
from .webhook_security import N8N_SIGNATURE_HEADER, WebhookError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("botocore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except SQLAlchemyError as e:
        # Another worker may have created the tables at the same moment
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")
            raise

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="Business Portal API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(WebhookError)
async def webhook_error_handler(request: Request, exc: WebhookError):
    """n8n webhook errors keep their {error, code} body"""
    if exc.status_code >= 500:
        logger.error(f"Webhook error on {request.url.path}: {exc.error}")
    else:
        logger.warning(f"Webhook rejected on {request.url.path}: {exc.status_code} {exc.error}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    # ctx may carry the raw exception object
    return [{k: v for k, v in error.items() if k != "ctx"} for error in exc.errors()]


if config.SECURITY_HEADERS_ENABLED:
    app.add_middleware(
        SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"]
    )
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {config.ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["Authorization", "Content-Type", "x-api-key", N8N_SIGNATURE_HEADER],
)

# Routes
app.include_router(account_router)
app.include_router(staff_router)
app.include_router(contacts_router)
app.include_router(analytics_router)
app.include_router(notifications_router)
app.include_router(billing_router)
app.include_router(workflows_router)
app.include_router(reservations_router)
app.include_router(appointments_router)
app.include_router(documents_router)


@app.get("/")
def root():
    return {"message": "Business Portal API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
