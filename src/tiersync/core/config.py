from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    env: str = "local"

    log_level: str = "INFO"
    log_json: bool = False

    stripe_api_key: SecretStr | None = None
    stripe_webhook_secret: SecretStr | None = None

    # BigCommerce store credentials
    bc_store_hash: str = ""
    bc_client_id: str | None = None
    bc_access_token: SecretStr | None = None
    bc_api_base: str = "https://api.bigcommerce.com/stores"
    bc_timeout_sec: int = 15

    # ✅ price id -> customer group id. JSON object, 순서 유지 (first match wins)
    price_group_map: dict[str, int] = {}

    # 구조화된 map이 없을 때 쓰는 단순 2-entry fallback (Intro = group 2)
    price_intro_monthly: str | None = None
    price_intro_yearly: str | None = None
    intro_group_id: int = 2

    no_group_id: int = 0
    remove_group_on_payment_failed: bool = False

    csv_source_url: str | None = None
    site_origin: str = "https://www.brainwaveentrainmentstore.net"

    token_secret: SecretStr | None = None
    stream_max_min: int = 70

    # group id -> 선택 가능한 카테고리 수
    group_category_limits: dict[int, int] = {2: 2, 3: 3, 4: 4}
    default_category_limit: int = 2

    # /cats 운영자 setter + X-Admin-Key override. 비어 있으면 admin 경로는 항상 403
    admin_cats_key: SecretStr | None = None

    slack_webhook_url: SecretStr | None = None

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def bc_store_url(self) -> str:
        return f"{self.bc_api_base.rstrip('/')}/{self.bc_store_hash.strip()}"

    def missing_required(self) -> list[str]:
        missing = []
        if not self.stripe_webhook_secret:
            missing.append("STRIPE_WEBHOOK_SECRET")
        if not self.bc_store_hash.strip():
            missing.append("BC_STORE_HASH")
        if not self.bc_client_id:
            missing.append("BC_CLIENT_ID")
        if not self.bc_access_token:
            missing.append("BC_ACCESS_TOKEN")
        return missing


settings = Settings()
