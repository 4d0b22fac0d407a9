import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tiersync.api.v1.routers.categories import router as categories_router
from tiersync.api.v1.routers.cats import router as cats_router
from tiersync.api.v1.routers.health import router as health_router
from tiersync.api.v1.routers.library import router as library_router
from tiersync.api.v1.routers.stream import router as stream_router
from tiersync.api.v1.routers.stripe_webhook import router as stripe_router
from tiersync.core.config import settings
from tiersync.core.errors import BigCommerceError
from tiersync.core.logging_config import setup_logging

setup_logging(json_output=settings.log_json, level=settings.log_level)

logger = logging.getLogger(__name__)

app = FastAPI(title="TierSync", version="0.1.0")

# storefront origin만 브라우저 호출 허용
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.site_origin] if settings.site_origin else [],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "X-Admin-Key"],
)

app.include_router(health_router, prefix="/api/v1")
app.include_router(stripe_router, prefix="/api/v1")
app.include_router(categories_router, prefix="/api/v1")
app.include_router(cats_router, prefix="/api/v1")
app.include_router(library_router, prefix="/api/v1")
app.include_router(stream_router, prefix="/api/v1")


@app.exception_handler(BigCommerceError)
async def bigcommerce_error_handler(request: Request, exc: BigCommerceError) -> JSONResponse:
    logger.error("BigCommerce error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"ok": False, "error": str(exc)})


@app.on_event("startup")
def validate_settings() -> None:
    if settings.env in ("local", "test"):
        return
    missing = settings.missing_required()
    if missing:
        raise RuntimeError(f"Missing required settings: {', '.join(missing)}. Check your .env file.")
