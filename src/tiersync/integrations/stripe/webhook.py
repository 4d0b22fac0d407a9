import json

import stripe

from tiersync.core.errors import WebhookVerificationError


def construct_event(payload: bytes, signature: str | None, secret: str | None) -> dict:
    """
    Stripe signature 검증 후 event 파싱.
    payload는 요청 body 원본 bytes 그대로여야 한다 (재직렬화하면 서명이 깨짐).
    검증이 끝난 뒤에만 JSON으로 읽는다.
    """
    if not signature:
        raise WebhookVerificationError("Missing Stripe-Signature header")
    if not secret:
        raise WebhookVerificationError("Webhook secret is not configured")

    try:
        stripe.Webhook.construct_event(
            payload=payload,
            sig_header=signature,
            secret=secret,
        )
    except stripe.SignatureVerificationError as e:
        raise WebhookVerificationError(str(e)) from e
    except ValueError as e:
        # body가 JSON이 아니거나 UTF-8이 아님
        raise WebhookVerificationError(f"Invalid payload: {e}") from e
    except (AttributeError, TypeError) as e:
        # 서명은 맞지만 JSON object가 아님 (예: [] 나 "x")
        raise WebhookVerificationError(f"Invalid payload: {e}") from e

    event = json.loads(payload)
    if not isinstance(event, dict):
        raise WebhookVerificationError("Invalid payload: event must be a JSON object")
    return event


def verify_signature(payload: bytes, signature: str | None, secret: str | None) -> bool:
    try:
        construct_event(payload, signature, secret)
    except WebhookVerificationError:
        return False
    return True
