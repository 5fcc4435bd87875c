"""Storefront FastAPI application.

Single-domain web server over one in-memory shopping session. Commands
are processed synchronously; the promotional timers run as tasks on the
server's event loop.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.domain import storefront
from storefront.utils.logging import get_logger

# PROTEAN_ENV selects the domain.toml overlay ("test", "production", ...)
storefront.init()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    from storefront.api import get_storefront, reset_storefront

    store = get_storefront()
    if store.settings.autostart_promotions:
        store.start_promotions()
    logger.info("Storefront API started", cart_id=store.cart_id)

    yield

    reset_storefront()
    logger.info("Storefront API stopped")


# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Storefront API",
    description="Cart, pricing, stock and loyalty engine",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from storefront.api import router as storefront_router  # noqa: E402

app.include_router(storefront_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(
        content={
            "status": "ok",
            "domains": {
                "storefront": {"name": storefront.name},
            },
        }
    )
