"""Storefront FastAPI application.

Usage:
    uvicorn storefront.app:app --host 0.0.0.0 --port 8000 --reload
"""

import time
import uuid

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront import __version__
from storefront.catalogue.api import category_router, product_router
from storefront.config import load_settings
from storefront.domain import init_domain
from storefront.errors import register_exception_handlers
from storefront.identity.api import auth_router, user_router
from storefront.ordering.api import cart_router, order_router
from storefront.reviews.api import review_router
from storefront.utils.logging import add_context, clear_context, configure_logging, get_logger
from storefront.wishlist.api import wishlist_router

settings = load_settings()
configure_logging()
logger = get_logger(__name__)

# Initialized at module level so uvicorn workers share the domain
storefront = init_domain()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="E-commerce backend: identity, catalogue, cart, orders, reviews and wishlist",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the storefront domain context for each request."""
    with storefront.domain_context():
        response = await call_next(request)
    return response


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    """Bind request details to the log context for the duration of the request."""
    request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
    add_context(request_id=request_id, method=request.method, path=request.url.path)
    started = time.perf_counter()
    try:
        response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        logger.debug(
            "request_completed",
            status_code=response.status_code,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        return response
    finally:
        clear_context()


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
app.include_router(auth_router)
app.include_router(user_router)
app.include_router(category_router)
app.include_router(product_router)
app.include_router(cart_router)
app.include_router(order_router)
app.include_router(review_router)
app.include_router(wishlist_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/")
async def root():
    return {"name": "Storefront API", "version": __version__}


@app.get("/health")
def health():
    if not all(provider.is_alive() for provider in storefront.providers.values()):
        logger.error("health_check_failed")
        return JSONResponse(status_code=503, content={"status": "unavailable", "database": "down"})
    return JSONResponse(content={"status": "ok", "database": "up", "environment": settings.env})
