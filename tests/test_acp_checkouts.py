from datetime import timedelta
import pytest
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from agentix.adapters.mock import MockAdapter
from agentix.checkout import services
from agentix.common.utils import now
from agentix.main import app
from agentix.schema.full_schema import Checkout, CheckoutEvent, CheckoutItem, OrderItem, Orders
from agentix.tenants.dependencies import get_tenant_adapter
from tests.helpers import ACP, ADA_ADDRESS, ADA_BUYER, checkout_body, spt, totals_by_type

CHECKOUTS = f"{ACP}/checkouts"


@pytest.fixture
def no_shipping_adapter():
    app.dependency_overrides[get_tenant_adapter] = lambda: MockAdapter(shipping_methods=[])
    yield
    app.dependency_overrides.pop(get_tenant_adapter, None)


async def _create(ac_client, **kwargs):
    items = kwargs.pop("items", [{"sku": "MUG-STONE-12", "quantity": 1}])
    resp = await ac_client.post(CHECKOUTS, json=checkout_body(items, **kwargs))
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _events(session_factory, checkout_id):
    async with session_factory() as session:
        res = await session.execute(
            select(CheckoutEvent.type).where(CheckoutEvent.checkout_id == checkout_id).order_by(CheckoutEvent.created_at)
        )
        return list(res.scalars().all())


@pytest.mark.asyncio
async def test_create_checkout_without_address(ac_client, products):
    body = await _create(ac_client)

    assert body["status"] == "not_ready_for_payment"
    assert body["currency"] == "usd"
    assert "buyer" not in body
    assert "fulfillment_address" not in body
    assert body["payment_provider"] == {"provider": "stripe", "supported_payment_methods": ["card"]}

    [line] = body["line_items"]
    assert line["item"] == {"id": products["MUG-STONE-12"].id, "quantity": 1}
    assert line["base_amount"] == 1999 and line["total"] == 1999

    assert [o["id"] for o in body["fulfillment_options"]] == ["standard", "express", "overnight"]
    assert body["fulfillment_options"][0]["subtitle"] == "5-7 days"
    assert body["fulfillment_option_id"] == "standard"
    assert [(t["type"], t["amount"]) for t in body["totals"]] == [
        ("subtotal", 1999), ("fulfillment", 500), ("total", 2499),
    ]
    assert body["messages"] == []
    assert {link["type"] for link in body["links"]} == {"terms_of_use", "privacy_policy"}


@pytest.mark.asyncio
async def test_create_with_address_and_buyer_is_ready(ac_client, db_session):
    body = await _create(ac_client, address=ADA_ADDRESS, buyer=ADA_BUYER, fulfillment_option_id="express",
                         metadata={"agent": "shopping-assistant"})

    assert body["status"] == "ready_for_payment"
    assert body["buyer"] == {"first_name": "Ada", "last_name": "Lovelace", "email": "ada@agentix.dev",
                             "phone_number": "+15550100"}
    assert body["fulfillment_address"]["line_one"] == "12 Analytical Row"
    assert body["fulfillment_option_id"] == "express"
    assert totals_by_type(body)["total"] == 1999 + 1299

    row = await db_session.get(Checkout, body["id"])
    assert row.protocol == "ACP"
    assert row.status == "PAYMENT_PENDING"
    assert row.metadata_["agent"] == "shopping-assistant"
    assert row.metadata_["buyer_first_name"] == "Ada"
    assert str(row.total_amount) == "32.98"


@pytest.mark.asyncio
async def test_create_keeps_item_order_and_drops_unknown_refs(ac_client, products):
    body = await _create(ac_client, items=[
        {"sku": "BAG-CANVAS-TOTE", "quantity": 2},
        {"sku": "DOES-NOT-EXIST", "quantity": 1},
        {"id": products["MUG-STONE-12"].id, "quantity": 1},
    ])
    assert [li["item"]["id"] for li in body["line_items"]] == [
        products["BAG-CANVAS-TOTE"].id, products["MUG-STONE-12"].id,
    ]
    assert totals_by_type(body)["subtotal"] == 4500 * 2 + 1999


@pytest.mark.asyncio
async def test_caller_price_and_title_are_ignored(ac_client, session_factory, products):
    body = await _create(ac_client, items=[
        {"sku": "MUG-STONE-12", "quantity": 2, "price": 0.01, "title": "Free Mug"},
    ])
    [line] = body["line_items"]
    assert line["base_amount"] == 3998 and line["total"] == 3998
    assert totals_by_type(body)["subtotal"] == 3998

    async with session_factory() as session:
        res = await session.execute(select(CheckoutItem).where(CheckoutItem.checkout_id == body["id"]))
        [stored] = res.scalars().all()
    assert stored.title == products["MUG-STONE-12"].title
    assert str(stored.price) == "19.99"


@pytest.mark.asyncio
async def test_create_with_no_resolvable_items(ac_client):
    resp = await ac_client.post(CHECKOUTS, json=checkout_body([{"sku": "NOPE", "quantity": 1}]))
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_ITEMS"


@pytest.mark.asyncio
async def test_create_rejects_item_without_id_or_sku(ac_client):
    resp = await ac_client.post(CHECKOUTS, json=checkout_body([{"quantity": 1}]))
    assert resp.status_code == 400
    err = resp.json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    assert any("Either id or sku must be provided" in d["message"] for d in err["details"])


@pytest.mark.asyncio
async def test_create_rejects_zero_quantity_and_empty_items(ac_client):
    zero = await ac_client.post(CHECKOUTS, json=checkout_body([{"sku": "MUG-STONE-12", "quantity": 0}]))
    assert zero.status_code == 400
    assert zero.json()["error"]["details"][0]["path"] == "items.0.quantity"

    empty = await ac_client.post(CHECKOUTS, json=checkout_body([]))
    assert empty.status_code == 400


@pytest.mark.asyncio
async def test_get_is_stable(ac_client):
    created = await _create(ac_client, address=ADA_ADDRESS)

    first = await ac_client.get(f"{CHECKOUTS}/{created['id']}")
    second = await ac_client.get(f"{CHECKOUTS}/{created['id']}")
    assert first.status_code == 200
    assert first.json() == second.json()
    assert first.json()["totals"] == created["totals"]
    assert first.json()["line_items"] == created["line_items"]


@pytest.mark.asyncio
async def test_get_unknown_checkout(ac_client):
    resp = await ac_client.get(f"{CHECKOUTS}/missing-id")
    assert resp.status_code == 404
    assert resp.json()["error"] == {"code": "NOT_FOUND", "message": "Checkout 'missing-id' not found"}
    assert resp.headers["X-Request-ID"] == resp.json()["request_id"]


@pytest.mark.asyncio
async def test_update_address_makes_checkout_ready(ac_client):
    created = await _create(ac_client)

    resp = await ac_client.put(f"{CHECKOUTS}/{created['id']}", json={"fulfillment_address": ADA_ADDRESS})
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ready_for_payment"
    assert body["fulfillment_address"]["postal_code"] == "11201"
    assert body["line_items"] == created["line_items"]


@pytest.mark.asyncio
async def test_update_items_and_option_recomputes_totals(ac_client):
    created = await _create(ac_client, address=ADA_ADDRESS)

    resp = await ac_client.put(f"{CHECKOUTS}/{created['id']}", json={
        "items": [{"sku": "BOTTLE-STEEL-750", "quantity": 2}],
        "fulfillment_option_id": "overnight",
    })
    body = resp.json()
    assert resp.status_code == 200
    assert [li["base_amount"] for li in body["line_items"]] == [6500]
    assert body["fulfillment_option_id"] == "overnight"
    assert [(t["type"], t["amount"]) for t in body["totals"]] == [
        ("subtotal", 6500), ("fulfillment", 2499), ("total", 8999),
    ]
    assert body["status"] == "ready_for_payment"


@pytest.mark.asyncio
async def test_update_buyer_merges_metadata(ac_client, db_session):
    created = await _create(ac_client, metadata={"agent": "shopping-assistant"})

    resp = await ac_client.put(f"{CHECKOUTS}/{created['id']}", json={"buyer": ADA_BUYER})
    assert resp.json()["buyer"]["email"] == "ada@agentix.dev"

    row = await db_session.get(Checkout, created["id"])
    assert row.email == "ada@agentix.dev"
    assert row.metadata_ == {"agent": "shopping-assistant", "buyer_first_name": "Ada",
                             "buyer_last_name": "Lovelace", "buyer_phone": "+15550100"}


@pytest.mark.asyncio
async def test_update_with_no_resolvable_items(ac_client):
    created = await _create(ac_client)
    resp = await ac_client.put(f"{CHECKOUTS}/{created['id']}", json={"items": [{"sku": "NOPE", "quantity": 1}]})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "INVALID_ITEMS"


@pytest.mark.asyncio
async def test_complete_requires_ready_status(ac_client):
    created = await _create(ac_client)

    resp = await ac_client.post(f"{CHECKOUTS}/{created['id']}/complete", json=spt("spt_abc"))
    assert resp.status_code == 409
    err = resp.json()["error"]
    assert err["code"] == "INVALID_STATE"
    assert err["message"] == "Cannot complete checkout in 'ITEMS_ADDED' status"


@pytest.mark.asyncio
async def test_complete_with_bad_token_returns_checkout(ac_client, db_session):
    created = await _create(ac_client, address=ADA_ADDRESS)

    resp = await ac_client.post(f"{CHECKOUTS}/{created['id']}/complete", json=spt("bad_token"))
    assert resp.status_code == 400
    body = resp.json()
    assert body["id"] == created["id"]
    assert body["status"] == "ready_for_payment"
    [msg] = body["messages"]
    assert msg["type"] == "error" and msg["code"] == "payment_declined"

    row = await db_session.get(Checkout, created["id"])
    assert row.status == "PAYMENT_PENDING"
    assert row.payment_token is None


@pytest.mark.asyncio
async def test_complete_rejects_other_token_types(ac_client):
    created = await _create(ac_client, address=ADA_ADDRESS)
    resp = await ac_client.post(f"{CHECKOUTS}/{created['id']}/complete",
                                json={"payment_token": {"type": "paypal", "token": "spt_x"}})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_complete_creates_order(ac_client, session_factory, no_shipping_adapter):
    created = await _create(ac_client, items=[{"sku": "CANDLE-CEDAR", "quantity": 1}],
                            address=ADA_ADDRESS, buyer=ADA_BUYER)
    assert created["fulfillment_options"] == []
    assert "fulfillment_option_id" not in created

    resp = await ac_client.post(f"{CHECKOUTS}/{created['id']}/complete", json=spt("spt_demo_1"))
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["status"] == "completed"
    order_number = "ORD-" + created["id"].replace("-", "")[:8].upper()
    assert body["messages"] == [{"type": "info", "content_type": "plain",
                                 "content": f"Order confirmed! Order #{order_number}"}]

    async with session_factory() as session:
        checkout = await session.get(Checkout, created["id"])
        assert checkout.status == "COMPLETED"
        assert checkout.payment_status == "CAPTURED"
        assert checkout.payment_method == "card"
        assert checkout.completed_at is not None

        order = (await session.execute(select(Orders).where(Orders.checkout_id == created["id"]))).scalar_one()
        assert order.order_number == order_number
        assert str(order.total_amount) == "10.00"
        assert order.status == "CONFIRMED"
        assert order.payment_reference == "spt_demo_1"
        assert order.source == "acp"
        assert order.email == "ada@agentix.dev"

        items = (await session.execute(select(OrderItem).where(OrderItem.order_id == order.id))).scalars().all()
        assert [(i.sku, i.quantity) for i in items] == [("CANDLE-CEDAR", 1)]

    assert await _events(session_factory, created["id"]) == ["CHECKOUT_CREATED", "CHECKOUT_COMPLETED"]


@pytest.mark.asyncio
async def test_completed_checkout_is_closed(ac_client):
    created = await _create(ac_client, address=ADA_ADDRESS)
    done = await ac_client.post(f"{CHECKOUTS}/{created['id']}/complete", json=spt())
    assert done.status_code == 200

    again = await ac_client.post(f"{CHECKOUTS}/{created['id']}/complete", json=spt())
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "INVALID_STATE"

    upd = await ac_client.put(f"{CHECKOUTS}/{created['id']}", json={"fulfillment_option_id": "express"})
    assert upd.status_code == 409
    assert upd.json()["error"]["code"] == "CHECKOUT_CLOSED"

    cancel = await ac_client.delete(f"{CHECKOUTS}/{created['id']}")
    assert cancel.status_code == 409


@pytest.mark.asyncio
async def test_order_snapshot_failure_keeps_checkout_completed(ac_client, session_factory, monkeypatch):

    async def broken_snapshot(*args, **kwargs):
        raise SQLAlchemyError("orders table unavailable")

    monkeypatch.setattr(services, "create_order_from_checkout", broken_snapshot)
    created = await _create(ac_client, address=ADA_ADDRESS)

    resp = await ac_client.post(f"{CHECKOUTS}/{created['id']}/complete", json=spt())
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"

    async with session_factory() as session:
        orders = (await session.execute(select(Orders).where(Orders.checkout_id == created["id"]))).all()
        assert orders == []


@pytest.mark.asyncio
async def test_unexpected_error_uses_error_envelope(ac_client, monkeypatch):

    async def exploding_get(self, checkout_id):
        raise RuntimeError("adapter exploded")

    monkeypatch.setattr(services.CheckoutEngine, "get", exploding_get)

    resp = await ac_client.get(f"{CHECKOUTS}/anything")
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["error"]["code"] == "INTERNAL_ERROR"


@pytest.mark.asyncio
async def test_cancel_checkout(ac_client, session_factory):
    created = await _create(ac_client)

    resp = await ac_client.delete(f"{CHECKOUTS}/{created['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "canceled"
    assert body["messages"][0]["content"] == "Checkout cancelled"

    again = await ac_client.delete(f"{CHECKOUTS}/{created['id']}")
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "INVALID_STATE"

    assert await _events(session_factory, created["id"]) == ["CHECKOUT_CREATED", "CHECKOUT_CANCELLED"]


async def _backdate(session_factory, checkout_id):
    async with session_factory() as session:
        await session.execute(
            update(Checkout).where(Checkout.id == checkout_id).values(expires_at=now() - timedelta(minutes=1))
        )
        await session.commit()


@pytest.mark.asyncio
async def test_get_marks_stale_checkout_expired(ac_client, session_factory):
    created = await _create(ac_client, address=ADA_ADDRESS)
    await _backdate(session_factory, created["id"])

    resp = await ac_client.get(f"{CHECKOUTS}/{created['id']}")
    assert resp.status_code == 200
    assert resp.json()["status"] == "canceled"

    async with session_factory() as session:
        assert (await session.get(Checkout, created["id"])).status == "EXPIRED"

    upd = await ac_client.put(f"{CHECKOUTS}/{created['id']}", json={"fulfillment_option_id": "express"})
    assert upd.status_code == 409
    assert upd.json()["error"]["code"] == "CHECKOUT_CLOSED"


@pytest.mark.asyncio
async def test_update_on_stale_checkout_reports_expiry(ac_client, session_factory):
    created = await _create(ac_client)
    await _backdate(session_factory, created["id"])

    resp = await ac_client.put(f"{CHECKOUTS}/{created['id']}", json={"fulfillment_address": ADA_ADDRESS})
    assert resp.status_code == 409
    assert resp.json()["error"] == {"code": "CHECKOUT_EXPIRED", "message": "Checkout has expired"}

    async with session_factory() as session:
        assert (await session.get(Checkout, created["id"])).status == "EXPIRED"


@pytest.mark.asyncio
async def test_complete_on_stale_checkout_reports_expiry(ac_client, session_factory):
    created = await _create(ac_client, address=ADA_ADDRESS)
    await _backdate(session_factory, created["id"])

    resp = await ac_client.post(f"{CHECKOUTS}/{created['id']}/complete", json=spt())
    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "CHECKOUT_EXPIRED"


@pytest.mark.asyncio
async def test_update_writes_audit_event(ac_client, session_factory):
    created = await _create(ac_client)
    await ac_client.put(f"{CHECKOUTS}/{created['id']}", json={"fulfillment_address": ADA_ADDRESS})

    async with session_factory() as session:
        res = await session.execute(
            select(CheckoutEvent).where(CheckoutEvent.checkout_id == created["id"], CheckoutEvent.type == "CHECKOUT_UPDATED")
        )
        event = res.scalar_one()
    assert event.data == {"has_new_items": False, "has_new_address": True}


@pytest.mark.asyncio
async def test_shipping_quote_failure_degrades_to_no_options(ac_client):

    class NoRatesAdapter(MockAdapter):
        async def get_shipping_rates(self, checkout=None):
            raise RuntimeError("carrier api down")

    app.dependency_overrides[get_tenant_adapter] = lambda: NoRatesAdapter()
    try:
        body = await _create(ac_client, address=ADA_ADDRESS)
    finally:
        app.dependency_overrides.pop(get_tenant_adapter, None)

    assert body["fulfillment_options"] == []
    assert [t["type"] for t in body["totals"]] == ["subtotal", "total"]
    assert body["status"] == "ready_for_payment"
