import pytest

from fakes import STORE_URL, FakeBigCommerceStore
from tiersync.core.errors import BigCommerceError
from tiersync.integrations.bigcommerce.client import BigCommerceClient
from tiersync.services.group_reconciler import apply_group


def _client(store) -> BigCommerceClient:
    return BigCommerceClient(store_url=STORE_URL, client_id="client-id", access_token="tok-123", session=store)


def test_precise_update_with_empty_response(store, bc_client):
    cid = store.add_customer("a@x.com")

    apply_group(bc_client, cid, 2)

    assert store.customers[cid]["customer_group_id"] == 2
    assert store.calls == [("PATCH", f"v3/customers/{cid}")]
    assert store.bodies[0] == {"customer_group_id": 2}


@pytest.mark.parametrize("status", [400, 404, 405, 422, 500, 501])
def test_shape_mismatch_falls_back_to_bulk(status):
    store = FakeBigCommerceStore(precise_update_status=status)
    cid = store.add_customer("a@x.com")

    apply_group(_client(store), cid, 3)

    assert store.customers[cid]["customer_group_id"] == 3
    assert store.calls == [("PATCH", f"v3/customers/{cid}"), ("PUT", "v3/customers")]
    assert store.bodies[1] == [{"id": cid, "customer_group_id": 3}]


@pytest.mark.parametrize("status", [401, 403, 429, 503])
def test_other_failures_do_not_fall_back(status):
    store = FakeBigCommerceStore(precise_update_status=status)
    cid = store.add_customer("a@x.com")

    with pytest.raises(BigCommerceError):
        apply_group(_client(store), cid, 3)
    assert store.calls == [("PATCH", f"v3/customers/{cid}")]


def test_bulk_failure_is_fatal():
    store = FakeBigCommerceStore(precise_update_status=500)
    store.forced[("PUT", "v3/customers")] = 500
    cid = store.add_customer("a@x.com")

    with pytest.raises(BigCommerceError) as exc:
        apply_group(_client(store), cid, 3)
    assert exc.value.operation == "update_group"


def test_clearing_uses_the_same_path(store, bc_client):
    cid = store.add_customer("a@x.com", group_id=2)

    apply_group(bc_client, cid, 0)
    apply_group(bc_client, cid, 0)

    assert store.customers[cid]["customer_group_id"] == 0
