from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from tiersync.core.errors import CategoryLimitError
from tiersync.integrations.bigcommerce.client import BigCommerceClient
from tiersync.integrations.bigcommerce.customers import (
    create_customer,
    get_customer,
    lookup_customer_id,
    update_customer_notes,
)
from tiersync.services.category_notes import (
    clean_categories,
    extract_categories,
    limit_for_group,
    set_categories,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemberCategories:
    categories: list[str]
    group_id: int
    limit: int


def read_member_categories(
    client: BigCommerceClient,
    email: str,
    *,
    limits: Mapping[int, int],
    default_limit: int,
    no_group_id: int = 0,
) -> MemberCategories:
    customer_id = lookup_customer_id(client, email)
    customer = get_customer(client, customer_id) if customer_id is not None else None
    if customer is None:
        return MemberCategories(categories=[], group_id=no_group_id, limit=default_limit)

    return MemberCategories(
        categories=extract_categories(customer.notes),
        group_id=customer.group_id,
        limit=limit_for_group(customer.group_id, limits, default_limit),
    )


def save_member_categories(
    client: BigCommerceClient,
    email: str,
    categories: Iterable[object],
    *,
    limits: Mapping[int, int],
    default_limit: int,
    enforce_limit: bool = True,
) -> Optional[MemberCategories]:
    """
    customer를 찾거나 만든 뒤 notes 태그에 저장.
    customer를 끝내 못 읽으면 None.
    enforce_limit=False는 운영자 override (개수 제한 건너뜀).
    """
    customer_id = lookup_customer_id(client, email)
    if customer_id is None:
        customer_id = create_customer(client, email).customer_id

    customer = get_customer(client, customer_id)
    if customer is None:
        return None

    limit = limit_for_group(customer.group_id, limits, default_limit)
    cleaned = clean_categories(categories)
    if enforce_limit and len(cleaned) != limit:
        raise CategoryLimitError(group_id=customer.group_id, limit=limit)

    update_customer_notes(client, customer_id, set_categories(customer.notes, cleaned))
    logger.info("Saved %d categories for customer %s", len(cleaned), customer_id)

    return MemberCategories(categories=cleaned, group_id=customer.group_id, limit=limit)
