from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from tiersync.core.stripe_events import KIND_IGNORED, EventKind


@dataclass(frozen=True)
class InboundEvent:
    """검증된 webhook 1건을 정규화한 결과. 요청이 끝나면 버린다."""

    kind: EventKind
    event_type: str
    event_id: Optional[str] = None
    # 발견 순서 유지 + 중복 제거 (tier 판정이 discovery order에 의존)
    price_refs: tuple[str, ...] = field(default_factory=tuple)
    purchaser_email: Optional[str] = None
    purchaser_name: Optional[str] = None

    @property
    def ignored(self) -> bool:
        return self.kind == KIND_IGNORED
