from __future__ import annotations

import logging
from typing import Any, Optional

from tiersync.core.errors import BigCommerceError
from tiersync.integrations.bigcommerce.client import LEGACY, MODERN, BigCommerceClient
from tiersync.integrations.bigcommerce.fallback import (
    CREATE_FALLTHROUGH,
    LOOKUP_FALLTHROUGH,
    Attempt,
    run_attempts,
)
from tiersync.models.customer import CreatedCustomer, DirectoryCustomer

logger = logging.getLogger(__name__)

# BigCommerce는 빈 이름을 거부한다
PLACEHOLDER_FIRST_NAME = "Member"
PLACEHOLDER_LAST_NAME = "Account"


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def split_name(name: Optional[str]) -> tuple[str, str]:
    """'Ada Lovelace King' -> ('Ada', 'Lovelace King'). 첫 공백 기준."""
    parts = (name or "").strip().split(None, 1)
    if not parts:
        return PLACEHOLDER_FIRST_NAME, PLACEHOLDER_LAST_NAME
    if len(parts) == 1:
        return parts[0], PLACEHOLDER_LAST_NAME
    return parts[0], parts[1].strip()


def _first_exact_match(rows: Any, email: str) -> Optional[int]:
    # near-match가 섞여 올 수 있어서 exact(case-insensitive)만 인정
    if not isinstance(rows, list):
        return None
    for row in rows:
        if isinstance(row, dict) and normalize_email(row.get("email")) == email:
            cid = row.get("id")
            if cid is not None:
                return int(cid)
    return None


# -----------------------------
# lookup
# -----------------------------
def _lookup_modern(client: BigCommerceClient, email: str) -> Optional[int]:
    body = client.request(
        "POST",
        MODERN,
        "customers/lookup",
        operation="lookup",
        json_body={"emails": [email]},
    )
    rows = (body or {}).get("data") if isinstance(body, dict) else None
    return _first_exact_match(rows, email)


def _lookup_legacy(client: BigCommerceClient, email: str) -> Optional[int]:
    rows = client.request(
        "GET",
        LEGACY,
        "customers",
        operation="lookup",
        params={"email": email},
    )
    return _first_exact_match(rows, email)


def lookup_customer_id(client: BigCommerceClient, email: str) -> Optional[int]:
    normalized = normalize_email(email)
    if not normalized:
        return None

    return run_attempts(
        "lookup",
        [
            Attempt(f"{MODERN} lookup", lambda: _lookup_modern(client, normalized), LOOKUP_FALLTHROUGH),
            Attempt(f"{LEGACY} search", lambda: _lookup_legacy(client, normalized)),
        ],
    )


# -----------------------------
# create
# -----------------------------
def _created_id(body: Any, generation: str) -> int:
    if isinstance(body, dict) and isinstance(body.get("data"), list) and body["data"]:
        body = body["data"][0]
    cid = body.get("id") if isinstance(body, dict) else None
    if cid is None:
        raise BigCommerceError(
            f"{generation} create returned no customer id",
            operation="create",
            generation=generation,
            body=str(body)[:300],
        )
    return int(cid)


def _create_modern(
    client: BigCommerceClient,
    email: str,
    first_name: str,
    last_name: str,
    group_id: Optional[int],
) -> CreatedCustomer:
    row: dict[str, Any] = {"email": email, "first_name": first_name, "last_name": last_name}
    if group_id is not None:
        row["customer_group_id"] = group_id

    body = client.request("POST", MODERN, "customers", operation="create", json_body=[row])
    return CreatedCustomer(customer_id=_created_id(body, MODERN), group_applied=group_id is not None)


def _create_legacy(client: BigCommerceClient, email: str, first_name: str, last_name: str) -> CreatedCustomer:
    body = client.request(
        "POST",
        LEGACY,
        "customers",
        operation="create",
        json_body={"email": email, "first_name": first_name, "last_name": last_name},
    )
    # v2 create는 group을 못 넣는다. 호출자가 따로 apply 해야 함
    return CreatedCustomer(customer_id=_created_id(body, LEGACY), group_applied=False)


def create_customer(
    client: BigCommerceClient,
    email: str,
    name: Optional[str] = None,
    group_id: Optional[int] = None,
) -> CreatedCustomer:
    normalized = normalize_email(email)
    first_name, last_name = split_name(name)

    return run_attempts(
        "create",
        [
            Attempt(
                f"{MODERN} create",
                lambda: _create_modern(client, normalized, first_name, last_name, group_id),
                CREATE_FALLTHROUGH,
            ),
            Attempt(f"{LEGACY} create", lambda: _create_legacy(client, normalized, first_name, last_name)),
        ],
    )


# -----------------------------
# read / notes (categories 기능용)
# -----------------------------
def get_customer(client: BigCommerceClient, customer_id: int) -> Optional[DirectoryCustomer]:
    body = client.request(
        "GET",
        MODERN,
        "customers",
        operation="get",
        params={"id:in": str(customer_id)},
    )
    rows = body.get("data") if isinstance(body, dict) else None
    if not rows:
        return None

    row = rows[0]
    return DirectoryCustomer(
        external_id=int(row["id"]),
        email=normalize_email(row.get("email")),
        group_id=int(row.get("customer_group_id") or 0),
        notes=row.get("notes") or "",
    )


def update_customer_notes(client: BigCommerceClient, customer_id: int, notes: str) -> None:
    client.request(
        "PUT",
        MODERN,
        "customers",
        operation="update_notes",
        json_body=[{"id": int(customer_id), "notes": notes}],
    )
