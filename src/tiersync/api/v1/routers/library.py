import csv
import io
import logging
import re
from typing import Literal

import requests
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from tiersync.api.deps import get_settings
from tiersync.core.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["library"])

_HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)

# 크롤러가 인덱싱하지 않도록
_CSV_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Robots-Tag": "noindex, nofollow",
}


@router.get("/library")
def library(
    format: Literal["csv", "json"] = Query(default="csv"),
    cfg: Settings = Depends(get_settings),
) -> Response:
    csv_url = (cfg.csv_source_url or "").strip()
    if not _HTTP_URL.match(csv_url):
        logger.error("Bad CSV url: %r", csv_url)
        return PlainTextResponse("Server misconfigured: CSV URL is missing or invalid.", status_code=500)

    try:
        upstream = requests.get(csv_url, allow_redirects=True, timeout=15)
    except requests.RequestException as e:
        logger.error("Upstream CSV fetch failed: %s", e)
        return PlainTextResponse("Upstream CSV fetch failed.", status_code=502)

    if not upstream.ok:
        logger.error("Upstream fetch failed: %s %s", upstream.status_code, (upstream.text or "")[:200])
        return PlainTextResponse("Upstream CSV fetch failed.", status_code=502)

    csv_text = upstream.text
    if format == "json":
        rows = list(csv.DictReader(io.StringIO(csv_text)))
        return JSONResponse({"rows": rows, "count": len(rows)}, headers=_CSV_HEADERS)

    return Response(
        content=csv_text,
        media_type="text/csv; charset=utf-8",
        headers=_CSV_HEADERS,
    )
