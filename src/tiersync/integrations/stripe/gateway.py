from __future__ import annotations

from typing import Any

import stripe

from tiersync.core.errors import PaymentLookupError


def _as_dict(obj: Any) -> dict:
    if obj is None:
        return {}
    if isinstance(obj, dict):
        return obj
    return obj.to_dict()


class StripeGateway:
    """Stripe 리소스 조회 (checkout session / customer / event). 모두 plain dict 반환."""

    def __init__(self, api_key: str | None) -> None:
        self._api_key = api_key

    def retrieve_checkout_session(self, session_id: str) -> dict:
        try:
            session = stripe.checkout.Session.retrieve(
                session_id,
                expand=["line_items.data.price.product"],
                api_key=self._api_key,
            )
        except stripe.StripeError as e:
            raise PaymentLookupError(f"checkout session {session_id}: {e}") from e
        return _as_dict(session)

    def retrieve_customer(self, customer_id: str) -> dict:
        try:
            customer = stripe.Customer.retrieve(customer_id, api_key=self._api_key)
        except stripe.StripeError as e:
            raise PaymentLookupError(f"customer {customer_id}: {e}") from e
        return _as_dict(customer)

    def retrieve_event(self, event_id: str) -> dict:
        try:
            event = stripe.Event.retrieve(event_id, api_key=self._api_key)
        except stripe.StripeError as e:
            raise PaymentLookupError(f"event {event_id}: {e}") from e
        return _as_dict(event)
