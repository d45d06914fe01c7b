from typing import Any, Dict, List, Optional
from agentix.adapters.base import BaseAdapter
from agentix.adapters.constants import DEFAULT_RESERVATION_TTL
from agentix.adapters.credentials import ShopifyCredentials
from agentix.adapters.models import (
    CatalogProduct, ConnectionResult, InventoryLevel, OrderRequest, PlatformOrder, ProductPage,
    ProductQuery, Reservation, ShippingMethod, SyncResult, WebhookRegistration, WebhookResult,
)


class ShopifyAdapter(BaseAdapter):
    """Shopify Admin API adapter. Connects, every data operation is an open extension point."""

    platform = "SHOPIFY"
    version = "0.1.0"

    def __init__(self):
        super().__init__()
        self._creds: Optional[ShopifyCredentials] = None

    async def _do_connect(self, credentials: Dict[str, Any]) -> ConnectionResult:
        self._creds = ShopifyCredentials.model_validate(credentials)
        return ConnectionResult(success=True, shop_name=self._creds.shop)

    async def _do_disconnect(self) -> None:
        self._creds = None

    async def _do_test_connection(self) -> ConnectionResult:
        return ConnectionResult(success=True, shop_name=self._creds.shop if self._creds else None)

    async def get_products(self, params: ProductQuery) -> ProductPage:
        self._not_implemented("get_products")

    async def get_product(self, product_id: str) -> Optional[CatalogProduct]:
        self._not_implemented("get_product")

    async def get_product_by_sku(self, sku: str) -> Optional[CatalogProduct]:
        self._not_implemented("get_product_by_sku")

    async def search_products(self, query: str, filters: Optional[ProductQuery] = None) -> List[CatalogProduct]:
        self._not_implemented("search_products")

    async def sync_products(self) -> SyncResult:
        self._not_implemented("sync_products")

    async def check_inventory(self, sku: str) -> InventoryLevel:
        self._not_implemented("check_inventory")

    async def reserve_inventory(self, sku: str, quantity: int, ttl: int = DEFAULT_RESERVATION_TTL) -> Reservation:
        self._not_implemented("reserve_inventory")

    async def release_inventory(self, reservation_id: str) -> None:
        self._not_implemented("release_inventory")

    async def create_order(self, request: OrderRequest) -> PlatformOrder:
        self._not_implemented("create_order")

    async def get_order(self, order_id: str) -> Optional[PlatformOrder]:
        self._not_implemented("get_order")

    async def update_order_status(self, order_id: str, status: str) -> PlatformOrder:
        self._not_implemented("update_order_status")

    async def cancel_order(self, order_id: str, reason: Optional[str] = None) -> PlatformOrder:
        self._not_implemented("cancel_order")

    async def get_shipping_rates(self, checkout: Any = None) -> List[ShippingMethod]:
        self._not_implemented("get_shipping_rates")

    async def register_webhooks(self, callback_url: str) -> List[WebhookRegistration]:
        self._not_implemented("register_webhooks")

    async def handle_webhook(self, payload: Any, signature: str) -> WebhookResult:
        self._not_implemented("handle_webhook")
