import hmac
import logging

from fastapi import APIRouter, Depends, Header, Query
from fastapi.responses import JSONResponse

from tiersync.api.deps import get_bigcommerce_client, get_settings
from tiersync.api.v1.routers.categories import limit_error_response
from tiersync.api.v1.schemas.categories import CatsIn, CatsOut, CatsSavedOut
from tiersync.core.config import Settings
from tiersync.core.errors import BigCommerceError, CategoryLimitError
from tiersync.integrations.bigcommerce.client import BigCommerceClient
from tiersync.services.member_categories import read_member_categories, save_member_categories

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cats", tags=["categories"])


def email_from_key(key: str | None) -> str:
    return (key or "").strip().split("::")[0].strip().lower()


def is_admin(cfg: Settings, incoming: str | None) -> bool:
    expected = cfg.admin_cats_key.get_secret_value().strip() if cfg.admin_cats_key else ""
    if not expected or not incoming:
        return False
    return hmac.compare_digest(incoming.strip().encode("utf-8"), expected.encode("utf-8"))


def _save(client: BigCommerceClient, cfg: Settings, email: str, categories, *, admin: bool):
    try:
        saved = save_member_categories(
            client,
            email,
            categories,
            limits=cfg.group_category_limits,
            default_limit=cfg.default_category_limit,
            enforce_limit=not admin,
        )
    except CategoryLimitError as e:
        return limit_error_response(e)

    if saved is None:
        return JSONResponse(status_code=500, content={"error": "Could not resolve or create customer"})
    return CatsSavedOut(categories=saved.categories)


@router.get("")
def get_cats(
    key: str = Query(default=""),
    set_: str = Query(default="", alias="set"),
    admin: str = Query(default=""),
    cats: str = Query(default=""),
    client: BigCommerceClient = Depends(get_bigcommerce_client),
    cfg: Settings = Depends(get_settings),
):
    # 운영자 URL setter: /cats?set=1&admin=...&key=user@x.com::2&cats=a,b
    if set_ == "1":
        if not is_admin(cfg, admin):
            return JSONResponse(status_code=403, content={"error": "Forbidden"})

        email = email_from_key(key)
        categories = [c.strip().lower() for c in cats.split(",") if c.strip()]
        if not email or not categories:
            return JSONResponse(status_code=400, content={"error": "Missing email or categories"})

        logger.info("Admin category override for %s", email)
        return _save(client, cfg, email, categories, admin=True)

    email = email_from_key(key)
    if not email:
        return CatsOut(categories=[])

    # 읽기는 실패해도 빈 목록 (storefront 렌더링이 깨지면 안 됨)
    try:
        found = read_member_categories(
            client,
            email,
            limits=cfg.group_category_limits,
            default_limit=cfg.default_category_limit,
            no_group_id=cfg.no_group_id,
        )
    except BigCommerceError as e:
        logger.warning("Category read failed for %s: %s", email, e)
        return CatsOut(categories=[])

    return CatsOut(categories=found.categories)


@router.post("")
def post_cats(
    payload: CatsIn,
    x_admin_key: str | None = Header(default=None, alias="X-Admin-Key"),
    client: BigCommerceClient = Depends(get_bigcommerce_client),
    cfg: Settings = Depends(get_settings),
):
    email = email_from_key(payload.key)
    if not email:
        return JSONResponse(status_code=400, content={"error": "Missing email in key"})

    # 틀린 admin key는 거절하지 않고 일반 member 저장으로 처리
    return _save(client, cfg, email, payload.categories, admin=is_admin(cfg, x_admin_key))
