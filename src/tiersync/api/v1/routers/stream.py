import logging

import requests
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from tiersync.api.deps import get_settings
from tiersync.core.config import Settings
from tiersync.services.stream_tokens import check_stream_token

logger = logging.getLogger(__name__)

router = APIRouter(tags=["stream"])

_CHUNK_SIZE = 64 * 1024


def _bad(status_code: int, msg: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": msg or "forbidden"})


@router.get("/stream")
def stream(
    request: Request,
    u: str = Query(default=""),
    exp: str = Query(default=""),
    sig: str = Query(default=""),
    cfg: Settings = Depends(get_settings),
):
    req_origin = request.headers.get("origin") or ""
    if cfg.site_origin and req_origin and req_origin != cfg.site_origin:
        return _bad(403, "origin")

    if not cfg.token_secret:
        logger.error("TOKEN_SECRET is not set; refusing to relay")
        return _bad(500, "config")

    try:
        exp_at = int(exp)
    except ValueError:
        exp_at = 0  # 숫자 아니면 params 거절로

    rejection = check_stream_token(
        u,
        exp_at,
        sig,
        secret=cfg.token_secret.get_secret_value(),
        max_minutes=cfg.stream_max_min,
    )
    if rejection == "params":
        return _bad(400, "params")
    if rejection is not None:
        return _bad(403, rejection)

    try:
        upstream = requests.get(u, stream=True, timeout=30)
    except requests.RequestException as e:
        logger.warning("Stream upstream failed: %s", e)
        return _bad(502, "upstream")

    if not upstream.ok:
        upstream.close()
        return _bad(502, "upstream")

    return StreamingResponse(
        upstream.iter_content(chunk_size=_CHUNK_SIZE),
        status_code=200,
        media_type=upstream.headers.get("content-type") or "audio/mpeg",
        headers={
            "Accept-Ranges": "bytes",
            "Cache-Control": "private, max-age=60, stale-while-revalidate=30",
        },
        background=BackgroundTask(upstream.close),
    )
