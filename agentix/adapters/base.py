import abc
from typing import Any, Dict, List, Optional
from agentix.adapters.constants import DEFAULT_RESERVATION_TTL, logger
from agentix.adapters.errors import AdapterNotImplementedError
from agentix.adapters.models import (
    CatalogProduct, ConnectionResult, InventoryLevel, OrderRequest, PlatformOrder, ProductPage,
    ProductQuery, Reservation, ShippingMethod, SyncResult, WebhookRegistration, WebhookResult,
)


class ISVAdapter(abc.ABC):
    """Capability contract every commerce platform adapter exposes.

    The checkout engine only ever talks to this interface, so swapping the
    platform behind a tenant is a pure substitution.
    """

    platform: str
    version: str

    # connection lifecycle
    @abc.abstractmethod
    async def connect(self, credentials: Dict[str, Any]) -> ConnectionResult: ...

    @abc.abstractmethod
    async def disconnect(self) -> None: ...

    @abc.abstractmethod
    async def test_connection(self) -> ConnectionResult: ...

    @abc.abstractmethod
    def is_connected(self) -> bool: ...

    # products
    @abc.abstractmethod
    async def get_products(self, params: ProductQuery) -> ProductPage: ...

    @abc.abstractmethod
    async def get_product(self, product_id: str) -> Optional[CatalogProduct]: ...

    @abc.abstractmethod
    async def get_product_by_sku(self, sku: str) -> Optional[CatalogProduct]: ...

    @abc.abstractmethod
    async def search_products(self, query: str, filters: Optional[ProductQuery] = None) -> List[CatalogProduct]: ...

    @abc.abstractmethod
    async def sync_products(self) -> SyncResult: ...

    # inventory
    @abc.abstractmethod
    async def check_inventory(self, sku: str) -> InventoryLevel: ...

    @abc.abstractmethod
    async def reserve_inventory(self, sku: str, quantity: int, ttl: int = DEFAULT_RESERVATION_TTL) -> Reservation: ...

    @abc.abstractmethod
    async def release_inventory(self, reservation_id: str) -> None: ...

    # orders
    @abc.abstractmethod
    async def create_order(self, request: OrderRequest) -> PlatformOrder: ...

    @abc.abstractmethod
    async def get_order(self, order_id: str) -> Optional[PlatformOrder]: ...

    @abc.abstractmethod
    async def update_order_status(self, order_id: str, status: str) -> PlatformOrder: ...

    @abc.abstractmethod
    async def cancel_order(self, order_id: str, reason: Optional[str] = None) -> PlatformOrder: ...

    # shipping
    @abc.abstractmethod
    async def get_shipping_rates(self, checkout: Any = None) -> List[ShippingMethod]: ...

    # webhooks
    @abc.abstractmethod
    async def register_webhooks(self, callback_url: str) -> List[WebhookRegistration]: ...

    @abc.abstractmethod
    async def handle_webhook(self, payload: Any, signature: str) -> WebhookResult: ...


class BaseAdapter(ISVAdapter):
    """Connection state shared by all adapters: a connected flag and the credentials."""

    def __init__(self):
        self._connected = False
        self._credentials: Optional[Dict[str, Any]] = None

    def is_connected(self) -> bool:
        return self._connected

    async def connect(self, credentials: Dict[str, Any]) -> ConnectionResult:
        self._credentials = credentials
        try:
            result = await self._do_connect(credentials)
        except Exception as exc:
            # connect reports failure through the result, callers decide what to do with it
            self._connected = False
            logger.warning("adapter.connect.failed", extra={"platform": self.platform, "reason": str(exc)})
            return ConnectionResult(success=False, error=str(exc) or "Unknown connection error")
        self._connected = result.success
        logger.info("adapter.connect.done", extra={"platform": self.platform, "success": result.success})
        return result

    async def disconnect(self) -> None:
        await self._do_disconnect()
        self._connected = False
        self._credentials = None

    async def test_connection(self) -> ConnectionResult:
        if not self._connected:
            return ConnectionResult(success=False, error="Not connected")
        return await self._do_test_connection()

    def _not_implemented(self, operation: str, reason: str = "Not implemented"):
        raise AdapterNotImplementedError(type(self).__name__, operation, reason)

    @abc.abstractmethod
    async def _do_connect(self, credentials: Dict[str, Any]) -> ConnectionResult: ...

    async def _do_disconnect(self) -> None:
        return None

    @abc.abstractmethod
    async def _do_test_connection(self) -> ConnectionResult: ...
