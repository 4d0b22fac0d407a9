import logging

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from tiersync.api.deps import (
    get_bigcommerce_client,
    get_reconcile_policy,
    get_stripe_gateway,
    get_tier_mapping,
    get_webhook_secret,
)
from tiersync.core.errors import BigCommerceError, WebhookVerificationError
from tiersync.core.tier_mapping import TierMapping
from tiersync.integrations.bigcommerce.client import BigCommerceClient
from tiersync.integrations.stripe.gateway import StripeGateway
from tiersync.integrations.stripe.webhook import construct_event
from tiersync.services.notifications.slack import send_slack_message
from tiersync.services.notifications.templates import reconciliation_failure_to_slack_text
from tiersync.services.reconciliation import ReconcilePolicy, reconcile_event

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stripe", tags=["stripe"])


@router.post("/webhook")
async def stripe_webhook(
    request: Request,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
    webhook_secret: str | None = Depends(get_webhook_secret),
    gateway: StripeGateway = Depends(get_stripe_gateway),
    client: BigCommerceClient = Depends(get_bigcommerce_client),
    mapping: TierMapping = Depends(get_tier_mapping),
    policy: ReconcilePolicy = Depends(get_reconcile_policy),
):
    # body는 검증 전까지 raw bytes 그대로 둔다 (JSON 파싱하면 서명 검증 불가)
    payload = await request.body()

    # 1) Verify + parse
    try:
        event = construct_event(payload, stripe_signature, webhook_secret)
    except WebhookVerificationError as e:
        logger.warning("❌ Verification failed: %s", e)
        raise HTTPException(status_code=400, detail=f"Webhook Error: {e}") from e

    # 2) Reconcile (외부 API는 blocking이라 threadpool에서)
    try:
        outcome = await run_in_threadpool(
            reconcile_event,
            event,
            gateway=gateway,
            client=client,
            mapping=mapping,
            policy=policy,
        )
    except BigCommerceError as e:
        # ✅ 500이면 Stripe가 나중에 재전송한다. 로컬 재시도는 하지 않음
        logger.exception("❌ BigCommerce error for %s", event.get("id"))
        return await _failed(event, e)
    except Exception as e:
        logger.exception("❌ Unexpected error for %s", event.get("id"))
        return await _failed(event, e)

    return outcome.to_response()


async def _failed(event: dict, error: Exception) -> JSONResponse:
    text = reconciliation_failure_to_slack_text(
        event_id=event.get("id"),
        event_type=event.get("type"),
        error=str(error),
    )
    await run_in_threadpool(send_slack_message, text)
    return JSONResponse(status_code=500, content={"ok": False, "error": str(error)})
