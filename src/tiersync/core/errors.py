from __future__ import annotations

from typing import Optional


class WebhookVerificationError(Exception):
    """Stripe-Signature 누락/불일치, 시크릿 미설정. 항상 400."""


class PaymentLookupError(Exception):
    """session / customer 등 Stripe 부가 조회 실패. 정규화 단계에서 non-fatal."""


class BigCommerceError(Exception):
    """BigCommerce 호출 실패 (non-2xx 또는 transport 오류)."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        generation: str,
        status_code: Optional[int] = None,
        body: str = "",
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.generation = generation
        self.status_code = status_code
        self.body = body


class CategoryLimitError(Exception):
    """선택한 카테고리 수가 그룹 한도와 다름. 400."""

    def __init__(self, *, group_id: int, limit: int) -> None:
        super().__init__(f"Your plan allows exactly {limit} categories")
        self.group_id = group_id
        self.limit = limit
