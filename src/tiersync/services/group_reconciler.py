from __future__ import annotations

import logging

from tiersync.integrations.bigcommerce.client import MODERN, BigCommerceClient
from tiersync.integrations.bigcommerce.fallback import UPDATE_FALLTHROUGH, Attempt, run_attempts

logger = logging.getLogger(__name__)


def _update_precise(client: BigCommerceClient, customer_id: int, group_id: int) -> None:
    client.request(
        "PATCH",
        MODERN,
        f"customers/{int(customer_id)}",
        operation="update_group",
        json_body={"customer_group_id": group_id},
    )


def _update_bulk(client: BigCommerceClient, customer_id: int, group_id: int) -> None:
    client.request(
        "PUT",
        MODERN,
        "customers",
        operation="update_group",
        json_body=[{"id": int(customer_id), "customer_group_id": group_id}],
    )


def apply_group(client: BigCommerceClient, customer_id: int, group_id: int) -> None:
    """
    customer의 group을 group_id로 설정. "no group"(0)도 같은 경로로 설정한다.
    같은 값을 여러 번 넣어도 안전 (webhook 재전송 대비).
    """
    run_attempts(
        "update_group",
        [
            Attempt("precise update", lambda: _update_precise(client, customer_id, group_id), UPDATE_FALLTHROUGH),
            Attempt("bulk update", lambda: _update_bulk(client, customer_id, group_id)),
        ],
    )
    logger.info("Customer %s group set to %s", customer_id, group_id)
