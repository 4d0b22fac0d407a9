from __future__ import annotations

import hashlib
import hmac
import time
from typing import Literal, Optional
from urllib.parse import urlencode

StreamRejection = Literal["params", "expired", "sig", "window"]


def sign(url: str, exp: int, secret: str) -> str:
    """HMAC-SHA256 hex over 'url|exp'."""
    return hmac.new(secret.encode("utf-8"), f"{url}|{exp}".encode("utf-8"), hashlib.sha256).hexdigest()


def check_stream_token(
    url: str,
    exp: int,
    sig: str,
    *,
    secret: str,
    max_minutes: int,
    now: Optional[int] = None,
) -> Optional[StreamRejection]:
    """통과하면 None, 아니면 거절 사유."""
    if not url or not exp or not sig:
        return "params"

    now = int(time.time()) if now is None else now
    if now > exp:
        return "expired"
    if not hmac.compare_digest(sign(url, exp, secret), sig):
        return "sig"
    # 너무 먼 만료시각은 발급된 링크가 아님 (30초 여유)
    if exp - now > max_minutes * 60 + 30:
        return "window"
    return None


def sign_stream_url(
    relay_base: str,
    url: str,
    *,
    secret: str,
    ttl_minutes: int,
    now: Optional[int] = None,
) -> str:
    now = int(time.time()) if now is None else now
    exp = now + ttl_minutes * 60
    query = urlencode({"u": url, "exp": exp, "sig": sign(url, exp, secret)})
    return f"{relay_base}?{query}"
