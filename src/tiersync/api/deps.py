from functools import lru_cache

from tiersync.core.config import Settings, settings
from tiersync.core.tier_mapping import TierMapping
from tiersync.integrations.bigcommerce.client import BigCommerceClient
from tiersync.integrations.stripe.gateway import StripeGateway
from tiersync.services.reconciliation import ReconcilePolicy


def get_settings() -> Settings:
    return settings


def get_webhook_secret() -> str | None:
    secret = settings.stripe_webhook_secret
    return secret.get_secret_value() if secret else None


@lru_cache
def get_tier_mapping() -> TierMapping:
    """process 시작 시 한 번 만들고 read-only로 주입"""
    return TierMapping.from_settings(settings)


@lru_cache
def get_reconcile_policy() -> ReconcilePolicy:
    return ReconcilePolicy(
        no_group_id=settings.no_group_id,
        remove_group_on_payment_failed=settings.remove_group_on_payment_failed,
    )


@lru_cache
def get_bigcommerce_client() -> BigCommerceClient:
    return BigCommerceClient.from_settings(settings)


@lru_cache
def get_stripe_gateway() -> StripeGateway:
    key = settings.stripe_api_key
    return StripeGateway(key.get_secret_value() if key else None)
