import time
from typing import Any, Dict, List, Optional
from agentix.adapters.base import BaseAdapter
from agentix.adapters.constants import DEFAULT_RESERVATION_TTL, logger
from agentix.adapters.errors import AdapterOrderNotFoundError, InsufficientStockError
from agentix.adapters.mock_data import MOCK_PRODUCTS, MOCK_SHIPPING_METHODS
from agentix.adapters.models import (
    CatalogProduct, ConnectionResult, InventoryLevel, OrderRequest, PlatformOrder, ProductPage,
    ProductQuery, Reservation, ShippingMethod, SyncResult, WebhookRegistration, WebhookResult,
)
from agentix.common.utils import generate_id, is_expired, minutes_from_now, now, to_base36


class MockAdapter(BaseAdapter):
    """In-memory adapter for demos and tests.

    Every instance owns its own catalog copy, reservation ledger, inventory
    overrides and orders; nothing is shared between instances.
    """

    platform = "MOCK"
    version = "1.0.0"

    def __init__(self, products: Optional[List[CatalogProduct]] = None,
                 shipping_methods: Optional[List[ShippingMethod]] = None):
        super().__init__()
        source = products if products is not None else MOCK_PRODUCTS
        self._products = [p.model_copy(deep=True) for p in source]
        methods = shipping_methods if shipping_methods is not None else MOCK_SHIPPING_METHODS
        self._shipping_methods = [m.model_copy(deep=True) for m in methods]
        self._orders: Dict[str, PlatformOrder] = {}
        self._reservations: Dict[str, Reservation] = {}
        self._inventory_overrides: Dict[str, int] = {}
        self._connected = True

    async def _do_connect(self, credentials: Dict[str, Any]) -> ConnectionResult:
        return ConnectionResult(success=True, shop_name="Mock Store")

    async def _do_test_connection(self) -> ConnectionResult:
        return ConnectionResult(success=True, shop_name="Mock Store")

    # products

    async def get_products(self, params: ProductQuery) -> ProductPage:
        filtered = self._apply_filters(self._products, params)
        if params.order_by:
            filtered = self._sort(filtered, params.order_by, params.order_dir)

        total = len(filtered)
        page = filtered[params.offset:params.offset + params.limit]
        return ProductPage(
            data=page,
            total=total,
            limit=params.limit,
            offset=params.offset,
            has_more=params.offset + params.limit < total,
        )

    async def get_product(self, product_id: str) -> Optional[CatalogProduct]:
        return next((p for p in self._products if p.id == product_id), None)

    async def get_product_by_sku(self, sku: str) -> Optional[CatalogProduct]:
        direct = next((p for p in self._products if p.sku == sku), None)
        if direct is not None:
            return direct
        for p in self._products:
            if p.variants and any(v.sku == sku for v in p.variants):
                return p
        return None

    async def search_products(self, query: str, filters: Optional[ProductQuery] = None) -> List[CatalogProduct]:
        q = query.lower()
        results = [
            p for p in self._products
            if q in " ".join([p.title, p.description or "", " ".join(p.tags), p.product_type or "", p.vendor or ""]).lower()
        ]
        if filters is not None:
            results = self._apply_filters(results, filters.model_copy(update={"query": None}))
        return results

    async def sync_products(self) -> SyncResult:
        return SyncResult(updated=len(self._products))

    # inventory

    def _base_quantity(self, product: CatalogProduct, sku: str) -> int:
        if sku in self._inventory_overrides:
            return self._inventory_overrides[sku]
        variant = next((v for v in product.variants or [] if v.sku == sku), None)
        return variant.inventory_quantity if variant else product.inventory_quantity

    def _reserved(self, sku: str) -> int:
        # expired reservations are ignored here rather than swept
        return sum(r.quantity for r in self._reservations.values() if r.sku == sku and not is_expired(r.expires_at))

    async def check_inventory(self, sku: str) -> InventoryLevel:
        product = await self.get_product_by_sku(sku)
        if product is None:
            return InventoryLevel(sku=sku, quantity=0, available=False, policy="DENY")

        available = self._base_quantity(product, sku) - self._reserved(sku)
        return InventoryLevel(sku=sku, quantity=available, available=available > 0, policy=product.inventory_policy)

    async def reserve_inventory(self, sku: str, quantity: int, ttl: int = DEFAULT_RESERVATION_TTL) -> Reservation:
        level = await self.check_inventory(sku)
        if level.quantity < quantity:
            raise InsufficientStockError(sku, quantity, level.quantity)

        reservation = Reservation(id=generate_id("rsv"), sku=sku, quantity=quantity, expires_at=minutes_from_now(ttl))
        self._reservations[reservation.id] = reservation
        logger.debug("mock.inventory.reserved", extra={"sku": sku, "quantity": quantity, "reservation_id": reservation.id})
        return reservation

    async def release_inventory(self, reservation_id: str) -> None:
        self._reservations.pop(reservation_id, None)

    # orders

    async def create_order(self, request: OrderRequest) -> PlatformOrder:
        order_id = generate_id("ord")
        order = PlatformOrder(
            id=order_id,
            checkout_id=request.checkout_id,
            external_id=order_id,
            order_number=f"MK-{to_base36(int(time.time() * 1000)).upper()}",
            status="CONFIRMED",
            items=[item.model_copy() for item in request.items],
            email=request.email or "guest@example.com",
            shipping_address=dict(request.shipping_address or {}),
            shipping_method=request.shipping_method,
            shipping_cost=request.shipping_cost,
            subtotal=request.subtotal,
            tax_amount=request.tax_amount,
            total_amount=request.total_amount,
            currency=request.currency,
            payment_method=request.payment_method,
        )

        for item in request.items:
            if not item.sku:
                continue
            product = await self.get_product_by_sku(item.sku)
            current = self._base_quantity(product, item.sku) if product else 0
            self._inventory_overrides[item.sku] = max(0, current - item.quantity)

        self._orders[order.id] = order
        return order

    async def get_order(self, order_id: str) -> Optional[PlatformOrder]:
        return self._orders.get(order_id)

    async def update_order_status(self, order_id: str, status: str) -> PlatformOrder:
        order = self._orders.get(order_id)
        if order is None:
            raise AdapterOrderNotFoundError(order_id)
        order.status = status
        order.updated_at = now()
        return order

    async def cancel_order(self, order_id: str, reason: Optional[str] = None) -> PlatformOrder:
        order = self._orders.get(order_id)
        if order is None:
            raise AdapterOrderNotFoundError(order_id)
        order.status = "CANCELLED"
        order.notes = reason
        order.updated_at = now()
        return order

    # shipping

    async def get_shipping_rates(self, checkout: Any = None) -> List[ShippingMethod]:
        return [m.model_copy() for m in self._shipping_methods]

    # webhooks

    async def register_webhooks(self, callback_url: str) -> List[WebhookRegistration]:
        return []

    async def handle_webhook(self, payload: Any, signature: str) -> WebhookResult:
        return WebhookResult(event="unknown", processed=False)

    # helpers

    @staticmethod
    def _apply_filters(products: List[CatalogProduct], params: ProductQuery) -> List[CatalogProduct]:
        result = products

        if params.query:
            q = params.query.lower()
            result = [p for p in result if q in f"{p.title} {p.description or ''} {' '.join(p.tags)}".lower()]

        if params.category:
            cat = params.category.lower()
            result = [
                p for p in result
                if (p.product_type or "").lower() == cat or any(t.lower() == cat for t in p.tags)
            ]

        if params.min_price is not None:
            result = [p for p in result if p.price >= params.min_price]
        if params.max_price is not None:
            result = [p for p in result if p.price <= params.max_price]

        if params.in_stock:
            result = [p for p in result if p.inventory_quantity > 0]

        if params.vendor:
            result = [p for p in result if (p.vendor or "").lower() == params.vendor.lower()]

        if params.tags:
            wanted = {t.lower() for t in params.tags}
            result = [p for p in result if any(t.lower() in wanted for t in p.tags)]

        if params.ids:
            ids = set(params.ids)
            result = [p for p in result if p.id in ids]

        if params.skus:
            skus = set(params.skus)
            result = [p for p in result if p.sku in skus]

        return list(result)

    @staticmethod
    def _sort(products: List[CatalogProduct], order_by: str, order_dir: str) -> List[CatalogProduct]:
        keys = {
            "title": lambda p: p.title.lower(),
            "price": lambda p: p.price,
            "created_at": lambda p: p.created_at,
        }
        return sorted(products, key=keys[order_by], reverse=order_dir == "desc")
