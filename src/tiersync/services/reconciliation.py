from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal, Optional

from tiersync.core.stripe_events import (
    KIND_PURCHASE_COMPLETED,
    KIND_PURCHASE_FAILED,
)
from tiersync.core.tier_mapping import TierMapping
from tiersync.integrations.bigcommerce.client import BigCommerceClient
from tiersync.integrations.bigcommerce.customers import create_customer, lookup_customer_id
from tiersync.models.customer import ReconciliationResult
from tiersync.models.inbound_event import InboundEvent
from tiersync.services.event_normalizer import PaymentGateway, normalize_event
from tiersync.services.group_reconciler import apply_group
from tiersync.services.tier_resolver import resolve_group

logger = logging.getLogger(__name__)

OutcomeStatus = Literal["reconciled", "noop", "ignored", "skipped"]


@dataclass(frozen=True)
class ReconcilePolicy:
    no_group_id: int = 0
    remove_group_on_payment_failed: bool = False


@dataclass(frozen=True)
class ReconciliationOutcome:
    status: OutcomeStatus
    event_type: str
    reason: Optional[str] = None
    result: Optional[ReconciliationResult] = None

    def to_response(self) -> dict[str, Any]:
        # Stripe는 2xx만 보면 재시도를 멈춘다. ignored / skipped도 ok:true
        body: dict[str, Any] = {"ok": True}
        if self.status == "ignored":
            body["ignored"] = self.event_type
        elif self.status == "skipped":
            body["skipped"] = self.reason
        return body


def _ensure_customer(
    client: BigCommerceClient,
    inbound: InboundEvent,
    group_id: Optional[int],
) -> tuple[int, bool, bool]:
    """(customer_id, created, group_applied) - email 기준 upsert"""
    email = inbound.purchaser_email or ""
    customer_id = lookup_customer_id(client, email)
    if customer_id is not None:
        return customer_id, False, False

    created = create_customer(client, email, inbound.purchaser_name, group_id)
    logger.info("Created BigCommerce customer %s for %s", created.customer_id, email)
    return created.customer_id, True, created.group_applied


def _reconcile_purchase(
    client: BigCommerceClient,
    inbound: InboundEvent,
    mapping: TierMapping,
) -> ReconciliationOutcome:
    group_id = resolve_group(inbound.price_refs, mapping)
    customer_id, created, group_applied = _ensure_customer(client, inbound, group_id)

    if group_id is None:
        logger.info("No mapped tier in this purchase for %s (prices=%s)", inbound.purchaser_email, list(inbound.price_refs))
        return ReconciliationOutcome(
            status="noop",
            event_type=inbound.event_type,
            reason="no_mapped_tier",
            result=ReconciliationResult(customer_id=customer_id, applied_group_id=None, created=created),
        )

    if not group_applied:
        apply_group(client, customer_id, group_id)

    logger.info("✅ Set group %s for %s (customer %s)", group_id, inbound.purchaser_email, customer_id)
    return ReconciliationOutcome(
        status="reconciled",
        event_type=inbound.event_type,
        result=ReconciliationResult(customer_id=customer_id, applied_group_id=group_id, created=created),
    )


def _reconcile_removal(
    client: BigCommerceClient,
    inbound: InboundEvent,
    policy: ReconcilePolicy,
) -> ReconciliationOutcome:
    if inbound.kind == KIND_PURCHASE_FAILED and not policy.remove_group_on_payment_failed:
        logger.info("Payment failed for %s; group removal disabled", inbound.purchaser_email)
        return ReconciliationOutcome(status="noop", event_type=inbound.event_type, reason="removal_disabled")

    # 해지는 조회만 한다. 없는 customer를 만들어서 group 0을 넣을 이유가 없음
    customer_id = lookup_customer_id(client, inbound.purchaser_email or "")
    if customer_id is None:
        logger.info("No BigCommerce customer for %s; nothing to clear", inbound.purchaser_email)
        return ReconciliationOutcome(status="noop", event_type=inbound.event_type, reason="customer_not_found")

    apply_group(client, customer_id, policy.no_group_id)
    logger.info("Cleared group for %s (customer %s)", inbound.purchaser_email, customer_id)
    return ReconciliationOutcome(
        status="reconciled",
        event_type=inbound.event_type,
        result=ReconciliationResult(customer_id=customer_id, applied_group_id=policy.no_group_id, created=False),
    )


def reconcile_event(
    event: dict,
    *,
    gateway: PaymentGateway,
    client: BigCommerceClient,
    mapping: TierMapping,
    policy: ReconcilePolicy,
) -> ReconciliationOutcome:
    """
    검증이 끝난 Stripe event 1건을 BigCommerce customer group에 반영한다.
    BigCommerceError는 잡지 않는다 (router에서 500 -> Stripe 재전송).
    """
    inbound = normalize_event(event, gateway)

    if inbound.ignored:
        logger.info("Ignoring event type %s", inbound.event_type)
        return ReconciliationOutcome(status="ignored", event_type=inbound.event_type)

    if not inbound.purchaser_email:
        # 재시도해도 email이 생기지 않는 이벤트로 본다
        logger.warning("⚠️ No email for %s (%s); skipping", inbound.event_id, inbound.event_type)
        return ReconciliationOutcome(status="skipped", event_type=inbound.event_type, reason="missing_email")

    if inbound.kind == KIND_PURCHASE_COMPLETED:
        return _reconcile_purchase(client, inbound, mapping)
    return _reconcile_removal(client, inbound, policy)
