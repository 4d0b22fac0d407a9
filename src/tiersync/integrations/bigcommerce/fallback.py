from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Sequence, TypeVar

from tiersync.core.errors import BigCommerceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# API 세대 불일치로 보는 응답 코드 (operation별로 다름)
LOOKUP_FALLTHROUGH: frozenset[int] = frozenset({404, 405, 501})
CREATE_FALLTHROUGH: frozenset[int] = frozenset({400, 404, 405, 422, 501})
UPDATE_FALLTHROUGH: frozenset[int] = frozenset({400, 404, 405, 422, 500, 501})


@dataclass(frozen=True)
class Attempt(Generic[T]):
    name: str
    call: Callable[[], T]
    # 이 status로 실패하면 다음 attempt로 넘어간다. 그 외 실패는 그대로 raise
    fallthrough_statuses: frozenset[int] = frozenset()

    def falls_through(self, err: BigCommerceError) -> bool:
        return err.status_code is not None and err.status_code in self.fallthrough_statuses


def run_attempts(operation: str, attempts: Sequence[Attempt[T]]) -> T:
    """
    attempts를 순서대로 시도한다.
    fallthrough 신호가 아닌 실패, 또는 마지막 attempt의 실패는 호출자에게 전파.
    """
    if not attempts:
        raise ValueError(f"no attempts for {operation}")

    last = len(attempts) - 1
    for i, attempt in enumerate(attempts):
        try:
            return attempt.call()
        except BigCommerceError as e:
            if i == last or not attempt.falls_through(e):
                raise
            logger.warning(
                "%s: %s rejected with %s, falling back to %s",
                operation,
                attempt.name,
                e.status_code,
                attempts[i + 1].name,
            )

    raise AssertionError("unreachable")
