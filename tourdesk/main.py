import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import ALLOWED_ORIGINS, UPLOAD_DIR
from .database import Base, engine
from .domain.auth.router import router as auth_router
from .domain.dashboard.router import router as dashboard_router
from .domain.enquiries.router import router as enquiries_router
from .domain.members.router import router as members_router
from .domain.reminders.router import router as reminders_router
from .domain.tour_members.router import router as tour_members_router
from .domain.tour_packages.router import router as tour_packages_router
from .domain.users.router import router as users_router
from .errors import AppError
from .responses import error_response
from .shared.validators import format_validation_errors

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    Base.metadata.create_all(bind=engine, checkfirst=True)
    logger.info("Database tables created successfully")

    UPLOAD_DIR.mkdir(parents=True, exist_ok=True)
    logger.info(f"📁 Upload directory: {UPLOAD_DIR}")

    yield
    logger.info("Application shutting down...")


app = FastAPI(title="TourDesk API", version="1.0.0", lifespan=lifespan)


# ============================================================================
# ERROR HANDLING
# ============================================================================


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"❌ {request.method} {request.url.path} - {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} - {exc.status_code} {exc.message}")
    return error_response(exc.status_code, exc.message, exc.errors)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Request body, query, path and form validation failures become 400s"""
    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return error_response(400, "Validation failed", format_validation_errors(exc.errors()))


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"❌ Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(500, "Internal Server Error")


# CORS Configuration
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(enquiries_router)
app.include_router(members_router)
app.include_router(tour_packages_router)
# Registered before tour members so /tour-members/payment-reminders is not read as an id
app.include_router(reminders_router)
app.include_router(tour_members_router)
app.include_router(dashboard_router)


@app.get("/")
def root():
    return {"message": "TourDesk API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
