from typing import Final, Literal

# 처리하는 이벤트 분류 (코드로 고정)
# purchase 계열은 group 부여, failure/ended 계열은 group 해제

EventKind = Literal["purchase_completed", "purchase_failed", "subscription_ended", "ignored"]

KIND_PURCHASE_COMPLETED: Final = "purchase_completed"
KIND_PURCHASE_FAILED: Final = "purchase_failed"
KIND_SUBSCRIPTION_ENDED: Final = "subscription_ended"
KIND_IGNORED: Final = "ignored"

CHECKOUT_SESSION_COMPLETED: Final = "checkout.session.completed"
INVOICE_PAYMENT_SUCCEEDED: Final = "invoice.payment_succeeded"
INVOICE_PAID: Final = "invoice.paid"
INVOICE_PAYMENT_FAILED: Final = "invoice.payment_failed"
SUBSCRIPTION_DELETED: Final = "customer.subscription.deleted"

EVENT_TYPE_TO_KIND: Final[dict[str, EventKind]] = {
    CHECKOUT_SESSION_COMPLETED: KIND_PURCHASE_COMPLETED,
    INVOICE_PAYMENT_SUCCEEDED: KIND_PURCHASE_COMPLETED,
    INVOICE_PAID: KIND_PURCHASE_COMPLETED,
    INVOICE_PAYMENT_FAILED: KIND_PURCHASE_FAILED,
    SUBSCRIPTION_DELETED: KIND_SUBSCRIPTION_ENDED,
}


def kind_for_event_type(event_type: str | None) -> EventKind:
    return EVENT_TYPE_TO_KIND.get(event_type or "", KIND_IGNORED)
