from __future__ import annotations

import argparse
import logging

from tiersync.api.deps import (
    get_bigcommerce_client,
    get_reconcile_policy,
    get_stripe_gateway,
    get_tier_mapping,
)
from tiersync.core.config import settings
from tiersync.core.errors import BigCommerceError, PaymentLookupError
from tiersync.core.logging_config import setup_logging
from tiersync.services.reconciliation import reconcile_event

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Stripe에 저장된 event를 다시 가져와 pipeline을 한 번 더 돌린다 (idempotent)."""
    parser = argparse.ArgumentParser(description="Replay a Stripe event through tier sync")
    parser.add_argument("event_id", help="Stripe event id (evt_...)")
    args = parser.parse_args(argv)

    setup_logging(json_output=settings.log_json, level=settings.log_level)

    gateway = get_stripe_gateway()
    try:
        event = gateway.retrieve_event(args.event_id)
    except PaymentLookupError as e:
        print(f"❌ Could not retrieve event: {e}")
        return 1

    try:
        outcome = reconcile_event(
            event,
            gateway=gateway,
            client=get_bigcommerce_client(),
            mapping=get_tier_mapping(),
            policy=get_reconcile_policy(),
        )
    except BigCommerceError as e:
        print(f"❌ BigCommerce error: {e}")
        return 1

    print(f"✅ {args.event_id}: {outcome.status} {outcome.to_response()}")
    if outcome.result:
        print(f"   customer={outcome.result.customer_id} group={outcome.result.applied_group_id} created={outcome.result.created}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
