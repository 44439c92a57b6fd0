"""
InfinityTech Storefront - Main FastAPI Application.

REST layer over the storefront services: cart, checkout, orders,
returns, wallet and the admin back office.
"""
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.domain.exceptions import StorefrontError
from storefront.infrastructure.database import close_database, init_database
from storefront.infrastructure.logging_config import configure_logging
from storefront_api.routes import admin, cart, checkout, health, orders, wallet

logger = logging.getLogger(__name__)

# Domain error code -> HTTP status
ERROR_STATUS = {
    "ValidationError": 400,
    "InvalidCoupon": 400,
    "PaymentVerificationFailed": 400,
    "Unauthorized": 401,
    "InsufficientFunds": 402,
    "Forbidden": 403,
    "NotFound": 404,
    "NotEligible": 409,
    "InsufficientStock": 409,
    "Internal": 500,
}


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title="InfinityTech Storefront API",
    description="""
    Storefront core: carts, checkout with coupons and offers,
    order lifecycle with proportional refunds, returns and wallet.
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and duration."""
    start_time = time.time()
    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"← {request.method} {request.url.path} "
        f"[{response.status_code}] ({duration:.3f}s)"
    )
    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def failure(code: str, message: str, status_code: int) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": code, "message": message},
    )


@app.exception_handler(StorefrontError)
async def storefront_error_handler(request: Request, exc: StorefrontError):
    status_code = ERROR_STATUS.get(exc.code, 500)
    if status_code >= 500:
        logger.error(f"{exc.code} on {request.url.path}: {exc.message}", exc_info=True)
    else:
        logger.info(f"{exc.code} on {request.url.path}: {exc.message}")
    return failure(exc.code, exc.message, status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{location}: {first.get('msg', 'invalid request')}" if location else "Invalid request"
    return failure("ValidationError", message, 400)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Unexpected failures: log everything, return nothing internal."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return failure("Internal", "Internal server error", 500)


# =============================================================================
# STARTUP/SHUTDOWN EVENTS
# =============================================================================

@app.on_event("startup")
async def startup_event():
    configure_logging()
    logger.info("🚀 Storefront API starting up...")
    await init_database()


@app.on_event("shutdown")
async def shutdown_event():
    await close_database()
    logger.info("👋 Storefront API shutting down...")


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(health.router, tags=["Health"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])
app.include_router(checkout.router, prefix="/api/v1/checkout", tags=["Checkout"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(wallet.router, prefix="/api/v1/wallet", tags=["Wallet"])
app.include_router(admin.router, prefix="/api/v1/admin", tags=["Admin"])


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "InfinityTech Storefront API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health",
    }
