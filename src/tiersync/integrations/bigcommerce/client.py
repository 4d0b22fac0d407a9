from __future__ import annotations

import json
from typing import Any, Optional

import requests

from tiersync.core.config import Settings
from tiersync.core.errors import BigCommerceError

MODERN: str = "v3"
LEGACY: str = "v2"


class BigCommerceClient:
    """
    BigCommerce REST 호출 래퍼.
    non-2xx / transport 오류는 모두 BigCommerceError로 올린다 (fallback 판단은 호출자 몫).
    """

    def __init__(
        self,
        *,
        store_url: str,
        client_id: str,
        access_token: str,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.store_url = store_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._headers = {
            "X-Auth-Client": client_id,
            "X-Auth-Token": access_token,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "BigCommerceClient":
        token = settings.bc_access_token
        return cls(
            store_url=settings.bc_store_url,
            client_id=settings.bc_client_id or "",
            access_token=token.get_secret_value() if token else "",
            timeout=settings.bc_timeout_sec,
        )

    def request(
        self,
        method: str,
        generation: str,
        path: str,
        *,
        operation: str,
        json_body: Any = None,
        params: Optional[dict] = None,
    ) -> Any:
        url = f"{self.store_url}/{generation}/{path.lstrip('/')}"
        try:
            resp = self._session.request(
                method,
                url,
                headers=self._headers,
                json=json_body,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise BigCommerceError(
                f"{generation} {operation} transport error: {e}",
                operation=operation,
                generation=generation,
            ) from e

        text = resp.text or ""
        if resp.status_code >= 400:
            raise BigCommerceError(
                f"{generation} {operation} {resp.status_code}: {text[:300]}",
                operation=operation,
                generation=generation,
                status_code=resp.status_code,
                body=text,
            )

        # 204 / 빈 body도 성공 (v2 검색 결과 없음, v3 PATCH 등)
        if resp.status_code == 204 or not text.strip():
            return None
        try:
            return json.loads(text)
        except ValueError as e:
            raise BigCommerceError(
                f"{generation} {operation} returned non-JSON body",
                operation=operation,
                generation=generation,
                status_code=resp.status_code,
                body=text,
            ) from e
