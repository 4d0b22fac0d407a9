from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional, Protocol

from tiersync.core.errors import PaymentLookupError
from tiersync.core.stripe_events import (
    CHECKOUT_SESSION_COMPLETED,
    KIND_IGNORED,
    KIND_SUBSCRIPTION_ENDED,
    kind_for_event_type,
)
from tiersync.models.inbound_event import InboundEvent

logger = logging.getLogger(__name__)


class PaymentGateway(Protocol):
    def retrieve_checkout_session(self, session_id: str) -> dict: ...

    def retrieve_customer(self, customer_id: str) -> dict: ...


def _dig(obj: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _id_of(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    if isinstance(value, dict) and isinstance(value.get("id"), str):
        return value["id"]
    return None


# -----------------------------
# price id extraction
# -----------------------------
# API 버전마다 line item의 price 위치가 다르다. 우선순위 순서대로 시도, 첫 값 채택
PriceExtractor = Callable[[dict], Optional[str]]

PRICE_EXTRACTORS: tuple[PriceExtractor, ...] = (
    lambda li: _id_of(li.get("price")),
    lambda li: _id_of(_dig(li, "pricing", "price_details", "price")),
    lambda li: _id_of(li.get("plan")),
)


def extract_price_id(line_item: dict) -> Optional[str]:
    for extractor in PRICE_EXTRACTORS:
        value = extractor(line_item)
        if value:
            return value
    return None


def collect_price_refs(line_items: Iterable[Any]) -> tuple[str, ...]:
    refs: list[str] = []
    for li in line_items:
        if not isinstance(li, dict):
            continue
        pid = extract_price_id(li)
        if pid and pid not in refs:
            refs.append(pid)
    return tuple(refs)


def _line_items(container: Any, key: str) -> list:
    items = _dig(container, key, "data")
    return items if isinstance(items, list) else []


# -----------------------------
# email / name
# -----------------------------
def _first_present(*values: Any) -> Optional[str]:
    for v in values:
        if isinstance(v, str) and v.strip():
            return v.strip()
    return None


def _fetch_customer(gateway: PaymentGateway, customer_ref: Any) -> dict:
    if isinstance(customer_ref, dict) and customer_ref.get("email") is not None:
        return customer_ref  # 이미 expand된 customer

    customer_id = _id_of(customer_ref)
    if not customer_id:
        return {}
    try:
        return gateway.retrieve_customer(customer_id)
    except PaymentLookupError as e:
        logger.warning("Customer retrieve failed: %s", e)
        return {}


def _fill_from_customer(
    gateway: PaymentGateway,
    customer_ref: Any,
    email: Optional[str],
    name: Optional[str],
) -> tuple[Optional[str], Optional[str]]:
    if email:
        return email, name
    customer = _fetch_customer(gateway, customer_ref)
    return _first_present(customer.get("email")), name or _first_present(customer.get("name"))


# -----------------------------
# per event type
# -----------------------------
def _from_checkout_session(obj: dict, gateway: PaymentGateway) -> tuple[tuple[str, ...], Optional[str], Optional[str]]:
    session = obj
    session_id = obj.get("id")
    if session_id:
        try:
            session = gateway.retrieve_checkout_session(session_id)
        except PaymentLookupError as e:
            # event에 실린 session 필드로 계속 진행
            logger.warning("Session retrieve failed: %s", e)

    price_refs = collect_price_refs(_line_items(session, "line_items"))
    email = _first_present(
        _dig(session, "customer_details", "email"),
        session.get("customer_email"),
    )
    name = _first_present(_dig(session, "customer_details", "name"))
    email, name = _fill_from_customer(gateway, session.get("customer"), email, name)
    return price_refs, email, name


def _from_invoice(obj: dict, gateway: PaymentGateway) -> tuple[tuple[str, ...], Optional[str], Optional[str]]:
    price_refs = collect_price_refs(_line_items(obj, "lines"))
    email = _first_present(obj.get("customer_email"), _dig(obj, "customer_details", "email"))
    name = _first_present(obj.get("customer_name"), _dig(obj, "customer_details", "name"))
    email, name = _fill_from_customer(gateway, obj.get("customer"), email, name)
    return price_refs, email, name


def _from_subscription(obj: dict, gateway: PaymentGateway) -> tuple[tuple[str, ...], Optional[str], Optional[str]]:
    # 해지 이벤트는 price를 보지 않는다. email은 customer 리소스에서만
    email, name = _fill_from_customer(gateway, obj.get("customer"), None, None)
    return (), email, name


def normalize_event(event: dict, gateway: PaymentGateway) -> InboundEvent:
    event_type = str(event.get("type") or "")
    event_id = event.get("id")
    kind = kind_for_event_type(event_type)

    if kind == KIND_IGNORED:
        return InboundEvent(kind=kind, event_type=event_type, event_id=event_id)

    obj = _dig(event, "data", "object")
    if not isinstance(obj, dict):
        obj = {}

    if event_type == CHECKOUT_SESSION_COMPLETED:
        price_refs, email, name = _from_checkout_session(obj, gateway)
    elif kind == KIND_SUBSCRIPTION_ENDED:
        price_refs, email, name = _from_subscription(obj, gateway)
    else:
        price_refs, email, name = _from_invoice(obj, gateway)

    return InboundEvent(
        kind=kind,
        event_type=event_type,
        event_id=event_id,
        price_refs=price_refs,
        purchaser_email=email.lower() if email else None,
        purchaser_name=name,
    )
