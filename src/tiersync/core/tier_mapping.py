from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from tiersync.core.config import Settings


@dataclass(frozen=True)
class TierMapping:
    """price id -> customer group id. exact match only, 등록 순서 유지."""

    entries: tuple[tuple[str, int], ...] = ()

    @classmethod
    def from_pairs(cls, pairs: Mapping[str, int] | Iterable[tuple[str, int]]) -> "TierMapping":
        items = pairs.items() if isinstance(pairs, Mapping) else pairs
        seen: dict[str, int] = {}
        for price_id, group_id in items:
            if price_id and price_id not in seen:
                seen[price_id] = int(group_id)
        return cls(entries=tuple(seen.items()))

    @classmethod
    def from_settings(cls, settings: Settings) -> "TierMapping":
        # 1) 구조화된 PRICE_GROUP_MAP 우선
        if settings.price_group_map:
            return cls.from_pairs(settings.price_group_map)

        # 2) fallback: monthly / yearly intro price 2개
        return cls.from_pairs(
            [
                (settings.price_intro_monthly or "", settings.intro_group_id),
                (settings.price_intro_yearly or "", settings.intro_group_id),
            ]
        )

    def group_for(self, price_id: str) -> Optional[int]:
        for pid, group_id in self.entries:
            if pid == price_id:
                return group_id
        return None

    def __len__(self) -> int:
        return len(self.entries)
