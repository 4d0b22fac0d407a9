from __future__ import annotations

from typing import Iterable, Optional

from tiersync.core.tier_mapping import TierMapping


def resolve_group(price_refs: Iterable[str], mapping: TierMapping) -> Optional[int]:
    # 발견 순서대로, mapping에 있는 첫 price가 이긴다 (highest-tier 아님)
    for price_id in price_refs:
        group_id = mapping.group_for(price_id)
        if group_id is not None:
            return group_id
    return None
