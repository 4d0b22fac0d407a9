import json
import os

# Settings는 import 시점에 읽히므로 app import 전에 고정
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SLACK_WEBHOOK_URL", "")

import pytest
from fastapi.testclient import TestClient

from fakes import STORE_URL, WEBHOOK_SECRET, FakeBigCommerceStore, FakeGateway, stripe_signature
from tiersync.api.deps import (
    get_bigcommerce_client,
    get_reconcile_policy,
    get_stripe_gateway,
    get_tier_mapping,
    get_webhook_secret,
)
from tiersync.core.tier_mapping import TierMapping
from tiersync.integrations.bigcommerce.client import BigCommerceClient
from tiersync.services.reconciliation import ReconcilePolicy


@pytest.fixture
def store() -> FakeBigCommerceStore:
    return FakeBigCommerceStore()


@pytest.fixture
def bc_client(store) -> BigCommerceClient:
    return BigCommerceClient(store_url=STORE_URL, client_id="client-id", access_token="tok-123", session=store)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def mapping() -> TierMapping:
    return TierMapping.from_pairs({"price_intro_m": 2, "price_intro_y": 2, "price_std_m": 3})


@pytest.fixture
def app(bc_client, gateway, mapping):
    from tiersync.main import app as fastapi_app

    fastapi_app.dependency_overrides[get_webhook_secret] = lambda: WEBHOOK_SECRET
    fastapi_app.dependency_overrides[get_bigcommerce_client] = lambda: bc_client
    fastapi_app.dependency_overrides[get_stripe_gateway] = lambda: gateway
    fastapi_app.dependency_overrides[get_tier_mapping] = lambda: mapping
    fastapi_app.dependency_overrides[get_reconcile_policy] = lambda: ReconcilePolicy()
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def api(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def post_event(api):
    """서명된 webhook POST 헬퍼"""

    def _post(event: dict, *, secret: str = WEBHOOK_SECRET, signature: str | None = None):
        payload = json.dumps(event).encode("utf-8")
        sig = signature if signature is not None else stripe_signature(payload, secret)
        return api.post(
            "/api/v1/stripe/webhook",
            content=payload,
            headers={"Stripe-Signature": sig, "Content-Type": "application/json"},
        )

    return _post
