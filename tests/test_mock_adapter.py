from decimal import Decimal
import pytest
from agentix.adapters.errors import AdapterOrderNotFoundError, InsufficientStockError
from agentix.adapters.mock import MockAdapter
from agentix.adapters.models import OrderLine, OrderRequest, ProductQuery


@pytest.fixture
def adapter():
    return MockAdapter()


@pytest.mark.asyncio
async def test_starts_connected(adapter):
    assert adapter.is_connected()
    result = await adapter.test_connection()
    assert result.success and result.shop_name == "Mock Store"


@pytest.mark.asyncio
async def test_get_products_paginates(adapter):
    page = await adapter.get_products(ProductQuery(limit=2, offset=0))
    assert page.total == 6
    assert len(page.data) == 2
    assert page.has_more

    last = await adapter.get_products(ProductQuery(limit=2, offset=4))
    assert not last.has_more


@pytest.mark.asyncio
async def test_filters_by_category_tag_and_price(adapter):
    gifts = await adapter.get_products(ProductQuery(category="gift"))
    assert {p.sku for p in gifts.data} == {"MUG-STONE-12", "CANDLE-CEDAR"}

    cheap = await adapter.get_products(ProductQuery(max_price=Decimal("15"), order_by="price"))
    assert [p.sku for p in cheap.data] == ["CANDLE-CEDAR", "NOTEBOOK-A5-DOT"]

    stocked = await adapter.get_products(ProductQuery(in_stock=True))
    assert "NOTEBOOK-A5-DOT" not in {p.sku for p in stocked.data}


@pytest.mark.asyncio
async def test_sort_descending_by_price(adapter):
    page = await adapter.get_products(ProductQuery(order_by="price", order_dir="desc", limit=1))
    assert page.data[0].sku == "BAG-CANVAS-TOTE"


@pytest.mark.asyncio
async def test_get_product_by_variant_sku(adapter):
    product = await adapter.get_product_by_sku("TEE-CLASSIC-BLK-M")
    assert product is not None and product.sku == "TEE-CLASSIC-BLK"
    assert await adapter.get_product_by_sku("NOPE") is None


@pytest.mark.asyncio
async def test_search_matches_vendor(adapter):
    results = await adapter.search_products("northwind")
    assert {p.sku for p in results} == {"TEE-CLASSIC-BLK", "BAG-CANVAS-TOTE"}


@pytest.mark.asyncio
async def test_reservations_reduce_availability(adapter):
    before = await adapter.check_inventory("MUG-STONE-12")
    assert before.quantity == 4

    reservation = await adapter.reserve_inventory("MUG-STONE-12", 3)
    assert (await adapter.check_inventory("MUG-STONE-12")).quantity == 1

    with pytest.raises(InsufficientStockError) as exc_info:
        await adapter.reserve_inventory("MUG-STONE-12", 2)
    assert exc_info.value.available == 1

    await adapter.release_inventory(reservation.id)
    assert (await adapter.check_inventory("MUG-STONE-12")).quantity == 4


@pytest.mark.asyncio
async def test_variant_inventory_is_tracked_per_sku(adapter):
    level = await adapter.check_inventory("TEE-CLASSIC-BLK-L")
    assert level.quantity == 30


@pytest.mark.asyncio
async def test_unknown_sku_inventory(adapter):
    level = await adapter.check_inventory("MISSING")
    assert not level.available and level.quantity == 0


@pytest.mark.asyncio
async def test_create_order_deducts_inventory(adapter):
    request = OrderRequest(
        checkout_id="chk_1",
        items=[OrderLine(product_id="mock_prod_002", sku="MUG-STONE-12", title="Stoneware Mug",
                         price=Decimal("19.99"), quantity=3, line_total=Decimal("59.97"))],
        total_amount=Decimal("59.97"),
    )
    order = await adapter.create_order(request)
    assert order.status == "CONFIRMED"
    assert order.order_number.startswith("MK-")
    assert (await adapter.check_inventory("MUG-STONE-12")).quantity == 1
    assert await adapter.get_order(order.id) == order

    cancelled = await adapter.cancel_order(order.id, "changed mind")
    assert cancelled.status == "CANCELLED" and cancelled.notes == "changed mind"


@pytest.mark.asyncio
async def test_unknown_order_raises(adapter):
    with pytest.raises(AdapterOrderNotFoundError):
        await adapter.update_order_status("ord_missing", "SHIPPED")


@pytest.mark.asyncio
async def test_shipping_rates_are_fixed(adapter):
    rates = await adapter.get_shipping_rates()
    assert [(r.id, r.price) for r in rates] == [
        ("standard", Decimal("5.00")), ("express", Decimal("12.99")), ("overnight", Decimal("24.99")),
    ]


@pytest.mark.asyncio
async def test_instances_do_not_share_state():
    first, second = MockAdapter(), MockAdapter()
    await first.reserve_inventory("MUG-STONE-12", 4)
    assert (await first.check_inventory("MUG-STONE-12")).quantity == 0
    assert (await second.check_inventory("MUG-STONE-12")).quantity == 4

    (await first.get_product("mock_prod_002")).title = "Renamed"
    assert (await second.get_product("mock_prod_002")).title == "Stoneware Mug"


@pytest.mark.asyncio
async def test_webhooks_are_noops(adapter):
    assert await adapter.register_webhooks("https://hooks.agentix.dev/mock") == []
    result = await adapter.handle_webhook({}, "sig")
    assert not result.processed
