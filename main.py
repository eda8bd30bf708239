from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException
import structlog

from shared.config import settings
from shared.config.database import create_all
from shared.errors import StoreError
from shared.observability import setup_observability
from shared.security import limiter

# IMPORTANT: import models so they register with Base
from services.auth_service import models as auth_models
from services.catalog_service import models as catalog_models
from services.cart_service import models as cart_models
from services.order_service import models as order_models
from services.notification_service import models as notification_models

from services.auth_service.router import router as auth_router
from services.catalog_service.router import deal_router, product_router
from services.cart_service.router import router as cart_router
from services.order_service.router import router as order_router
from services.notification_service.router import router as notification_router

logger = structlog.get_logger(__name__)

app = FastAPI(title="Storefront API", version="1.0.0")

# --- OBSERVABILITY BOOTSTRAP ---
setup_observability(app, settings.SERVICE_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- SECURITY SETUP ---
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# --- ERROR ENVELOPE: {success: false, message, error} ---
@app.exception_handler(StoreError)
async def store_error_handler(request: Request, exc: StoreError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message, "error": exc.kind},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail), "error": "HTTPError"},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"{field}: {first.get('msg')}" if field else str(first.get("msg", "Invalid request"))
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": message, "error": "ValidationError"},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled_error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "message": "Internal server error", "error": "InternalError"},
    )


@app.on_event("startup")
async def startup_event():
    await create_all()


@app.get("/health")
async def health_check():
    return {"service": settings.SERVICE_NAME, "status": "running"}


app.include_router(auth_router, prefix="/api/user")
app.include_router(product_router, prefix="/api/product")
app.include_router(deal_router, prefix="/api/deal")
app.include_router(cart_router, prefix="/api/cart")
# Notification paths are fixed strings, so they go before the order routes
app.include_router(notification_router, prefix="/api/order")
app.include_router(order_router, prefix="/api/order")
