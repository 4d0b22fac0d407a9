from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from tiersync.api.deps import get_bigcommerce_client, get_settings
from tiersync.api.v1.schemas.categories import CategoriesIn, CategoriesOut, CategoriesSavedOut
from tiersync.core.config import Settings
from tiersync.core.errors import CategoryLimitError
from tiersync.integrations.bigcommerce.client import BigCommerceClient
from tiersync.services.member_categories import read_member_categories, save_member_categories

router = APIRouter(prefix="/categories", tags=["categories"])


def limit_error_response(e: CategoryLimitError) -> JSONResponse:
    # storefront는 body.error를 바로 읽는다 (detail로 감싸지 않음)
    return JSONResponse(
        status_code=400,
        content={"error": str(e), "groupId": e.group_id, "limit": e.limit},
    )


@router.get("", response_model=CategoriesOut)
def get_categories(
    email: str = Query(default=""),
    client: BigCommerceClient = Depends(get_bigcommerce_client),
    cfg: Settings = Depends(get_settings),
):
    email = email.strip()
    if not email:
        return JSONResponse(status_code=400, content={"error": "Missing email"})

    found = read_member_categories(
        client,
        email,
        limits=cfg.group_category_limits,
        default_limit=cfg.default_category_limit,
        no_group_id=cfg.no_group_id,
    )
    return CategoriesOut(categories=found.categories, group_id=found.group_id, limit=found.limit)


@router.post("", response_model=CategoriesSavedOut)
def save_categories(
    payload: CategoriesIn,
    client: BigCommerceClient = Depends(get_bigcommerce_client),
    cfg: Settings = Depends(get_settings),
):
    email = payload.email.strip()
    if not email:
        return JSONResponse(status_code=400, content={"error": "Missing email"})

    try:
        saved = save_member_categories(
            client,
            email,
            payload.categories,
            limits=cfg.group_category_limits,
            default_limit=cfg.default_category_limit,
        )
    except CategoryLimitError as e:
        return limit_error_response(e)

    if saved is None:
        return JSONResponse(status_code=500, content={"error": "Could not resolve or create customer"})

    return CategoriesSavedOut(categories=saved.categories, group_id=saved.group_id, limit=saved.limit)
