import pytest
import requests

from fakes import STORE_URL, FakeBigCommerceStore
from tiersync.core.errors import BigCommerceError
from tiersync.integrations.bigcommerce.client import BigCommerceClient
from tiersync.integrations.bigcommerce.customers import (
    create_customer,
    get_customer,
    lookup_customer_id,
    split_name,
    update_customer_notes,
)


def _client(store) -> BigCommerceClient:
    return BigCommerceClient(store_url=STORE_URL, client_id="client-id", access_token="tok-123", session=store)


class TestLookup:
    def test_modern_lookup_normalizes_email(self, store, bc_client):
        cid = store.add_customer("ada@x.com")

        assert lookup_customer_id(bc_client, "  ADA@X.com ") == cid
        assert store.calls == [("POST", "v3/customers/lookup")]
        assert store.bodies[0] == {"emails": ["ada@x.com"]}

    def test_near_matches_are_filtered(self, store, bc_client):
        store.add_customer("grandma@x.com.au")
        store.add_customer("ma@x.com.au")

        assert lookup_customer_id(bc_client, "ma@x.com") is None

    def test_exact_match_is_case_insensitive(self, store, bc_client):
        store.add_customer("xma@x.com")
        cid = store.add_customer("MA@X.COM")

        assert lookup_customer_id(bc_client, "ma@x.com") == cid

    def test_falls_back_to_legacy_search(self):
        store = FakeBigCommerceStore(modern_lookup_status=404)
        cid = store.add_customer("ada@x.com")

        assert lookup_customer_id(_client(store), "ada@x.com") == cid
        assert store.calls == [("POST", "v3/customers/lookup"), ("GET", "v2/customers")]

    def test_legacy_empty_response_means_not_found(self):
        store = FakeBigCommerceStore(modern_lookup_status=405)

        assert lookup_customer_id(_client(store), "nobody@x.com") is None

    def test_hard_failure_does_not_fall_through(self, store, bc_client):
        store.forced[("POST", "v3/customers/lookup")] = 401

        with pytest.raises(BigCommerceError) as exc:
            lookup_customer_id(bc_client, "ada@x.com")

        assert exc.value.status_code == 401
        assert ("GET", "v2/customers") not in store.calls

    def test_legacy_failure_surfaces(self):
        store = FakeBigCommerceStore(modern_lookup_status=404)
        store.forced[("GET", "v2/customers")] = 500

        with pytest.raises(BigCommerceError) as exc:
            lookup_customer_id(_client(store), "ada@x.com")
        assert exc.value.generation == "v2"

    def test_blank_email_makes_no_calls(self, store, bc_client):
        assert lookup_customer_id(bc_client, "   ") is None
        assert store.calls == []


class TestCreate:
    def test_modern_create_sets_group(self, store, bc_client):
        created = create_customer(bc_client, "Ada@X.com", "Ada Lovelace", group_id=2)

        assert created.group_applied is True
        row = store.customers[created.customer_id]
        assert row["email"] == "ada@x.com"
        assert (row["first_name"], row["last_name"]) == ("Ada", "Lovelace")
        assert row["customer_group_id"] == 2
        # array-wrapped payload
        assert isinstance(store.bodies[0], list)

    def test_modern_create_without_group(self, store, bc_client):
        created = create_customer(bc_client, "b@x.com")

        assert created.group_applied is False
        assert "customer_group_id" not in store.bodies[0][0]
        assert store.customers[created.customer_id]["first_name"] == "Member"

    def test_rejected_modern_create_falls_back_to_legacy(self):
        store = FakeBigCommerceStore(modern_create_status=422)

        created = create_customer(_client(store), "c@x.com", "Grace", group_id=3)

        assert created.group_applied is False
        assert store.customers[created.customer_id]["customer_group_id"] == 0
        assert store.calls == [("POST", "v3/customers"), ("POST", "v2/customers")]
        assert store.bodies[1] == {"email": "c@x.com", "first_name": "Grace", "last_name": "Account"}

    def test_auth_failure_is_fatal(self, store, bc_client):
        store.forced[("POST", "v3/customers")] = 403

        with pytest.raises(BigCommerceError):
            create_customer(bc_client, "d@x.com")
        assert len(store.calls) == 1

    def test_missing_id_in_response_is_fatal(self, store, bc_client, monkeypatch):
        from fakes import FakeResponse

        monkeypatch.setattr(store, "request", lambda *a, **kw: FakeResponse(200, {"data": []}))
        with pytest.raises(BigCommerceError, match="no customer id"):
            create_customer(bc_client, "e@x.com")


class TestClientTransport:
    def test_required_headers_on_every_call(self, store, bc_client):
        lookup_customer_id(bc_client, "a@x.com")

        headers = store.headers[0]
        assert headers["X-Auth-Client"] == "client-id"
        assert headers["X-Auth-Token"] == "tok-123"
        assert headers["Accept"] == "application/json"
        assert headers["Content-Type"] == "application/json"

    def test_transport_error_never_falls_through(self, store, bc_client, monkeypatch):
        def _boom(*args, **kwargs):
            raise requests.ConnectionError("connection reset")

        monkeypatch.setattr(store, "request", _boom)
        with pytest.raises(BigCommerceError) as exc:
            lookup_customer_id(bc_client, "a@x.com")
        assert exc.value.status_code is None


@pytest.mark.parametrize(
    "name, expected",
    [
        ("Ada Lovelace", ("Ada", "Lovelace")),
        ("  Ada   Lovelace King ", ("Ada", "Lovelace King")),
        ("Cher", ("Cher", "Account")),
        ("", ("Member", "Account")),
        (None, ("Member", "Account")),
    ],
)
def test_split_name(name, expected):
    assert split_name(name) == expected


def test_get_customer_and_update_notes(store, bc_client):
    cid = store.add_customer("a@x.com", group_id=3, notes="vip")

    customer = get_customer(bc_client, cid)
    assert customer.group_id == 3
    assert customer.notes == "vip"

    update_customer_notes(bc_client, cid, "vip\n[[BWE_CATEGORIES:sleep]]")
    assert store.customers[cid]["notes"].endswith("[[BWE_CATEGORIES:sleep]]")


def test_get_customer_missing(store, bc_client):
    assert get_customer(bc_client, 999) is None
