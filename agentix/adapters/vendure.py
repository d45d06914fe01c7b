from typing import Any, Dict, List, Optional
import httpx
from agentix.adapters import vendure_queries as q
from agentix.adapters.base import BaseAdapter
from agentix.adapters.constants import DEFAULT_RESERVATION_TTL, logger
from agentix.adapters.credentials import VendureCredentials
from agentix.adapters.errors import AdapterError, AdapterNotConnectedError, InsufficientStockError
from agentix.adapters.models import (
    CatalogProduct, ConnectionResult, InventoryLevel, OrderLine, OrderRequest, PlatformOrder, ProductImage,
    ProductPage, ProductQuery, ProductVariant, Reservation, ShippingMethod, SyncResult, WebhookRegistration,
    WebhookResult,
)
from agentix.common.money import cents_to_dollars, dollars_to_cents
from agentix.common.utils import generate_id, is_expired, minutes_from_now
from agentix.config.settings import config_settings

# Vendure order states -> internal order status
VENDURE_STATE_MAP = {
    "AddingItems": "PENDING",
    "ArrangingPayment": "PENDING",
    "PaymentAuthorized": "CONFIRMED",
    "PaymentSettled": "CONFIRMED",
    "PartiallyShipped": "SHIPPED",
    "Shipped": "SHIPPED",
    "PartiallyDelivered": "DELIVERED",
    "Delivered": "DELIVERED",
    "Cancelled": "CANCELLED",
}

SESSION_HEADER = "vendure-auth-token"


class VendureAdapter(BaseAdapter):
    """Vendure Shop API adapter speaking GraphQL over httpx.

    Vendure prices are integer minor units; they are converted to decimal
    dollars at this boundary. The shop session token returned in the
    ``vendure-auth-token`` header is carried on later calls so an order
    can be assembled across several mutations.
    """

    platform = "VENDURE"
    version = "1.0.0"

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: Optional[float] = None):
        super().__init__()
        self._transport = transport
        self._timeout = timeout or config_settings.VENDURE_TIMEOUT
        self._creds: Optional[VendureCredentials] = None
        self._session_token: Optional[str] = None
        self._reservations: Dict[str, Reservation] = {}

    # connection

    async def _do_connect(self, credentials: Dict[str, Any]) -> ConnectionResult:
        self._creds = VendureCredentials.model_validate(credentials)
        try:
            data = await self._gql(q.ACTIVE_CHANNEL)
        except (httpx.HTTPError, AdapterError) as exc:
            raise AdapterError(f"Failed to connect to Vendure at {self._creds.api_url}: {exc}") from exc
        channel = data.get("activeChannel") or {}
        return ConnectionResult(success=True, shop_name=channel.get("code") or self._creds.api_url)

    async def _do_disconnect(self) -> None:
        self._creds = None
        self._session_token = None

    async def _do_test_connection(self) -> ConnectionResult:
        try:
            data = await self._gql(q.ACTIVE_CHANNEL)
        except (httpx.HTTPError, AdapterError) as exc:
            return ConnectionResult(success=False, error=str(exc) or "Connection test failed")
        channel = data.get("activeChannel") or {}
        return ConnectionResult(success=True, shop_name=channel.get("code"))

    # products

    async def get_products(self, params: ProductQuery) -> ProductPage:
        data = await self._gql(q.SEARCH_PRODUCTS, {
            "term": params.query or "",
            "take": params.limit,
            "skip": params.offset,
        })
        items = data["search"]["items"]
        total = data["search"]["totalItems"]

        # Vendure search has no price filter, apply it client side
        if params.min_price is not None:
            items = [i for i in items if self._search_price(i) >= params.min_price]
        if params.max_price is not None:
            items = [i for i in items if self._search_price(i) <= params.max_price]

        return ProductPage(
            data=[self._from_search_item(i) for i in items],
            total=total,
            limit=params.limit,
            offset=params.offset,
            has_more=params.offset + params.limit < total,
        )

    async def get_product(self, product_id: str) -> Optional[CatalogProduct]:
        data = await self._gql(q.GET_PRODUCT_BY_ID, {"id": product_id})
        if not data.get("product"):
            # the id may be a slug
            data = await self._gql(q.GET_PRODUCT_BY_SLUG, {"slug": product_id})
        product = data.get("product")
        return self._from_product(product) if product else None

    async def get_product_by_sku(self, sku: str) -> Optional[CatalogProduct]:
        match = await self._find_search_item(sku)
        if match is None:
            return None
        return await self.get_product(match["slug"])

    async def search_products(self, query: str, filters: Optional[ProductQuery] = None) -> List[CatalogProduct]:
        params = (filters or ProductQuery()).model_copy(update={"query": query, "limit": 50, "offset": 0})
        page = await self.get_products(params)
        return page.data

    async def sync_products(self) -> SyncResult:
        data = await self._gql(q.SEARCH_PRODUCTS, {"term": "", "take": 100})
        return SyncResult(updated=len(data["search"]["items"]))

    # inventory

    async def check_inventory(self, sku: str) -> InventoryLevel:
        product = await self.get_product_by_sku(sku)
        if product is None:
            return InventoryLevel(sku=sku, quantity=0, available=False, policy="DENY")
        variant = next((v for v in product.variants or [] if v.sku == sku), None)
        quantity = variant.inventory_quantity if variant else product.inventory_quantity
        quantity -= sum(r.quantity for r in self._reservations.values() if r.sku == sku and not is_expired(r.expires_at))
        return InventoryLevel(sku=sku, quantity=quantity, available=quantity > 0, policy=product.inventory_policy)

    async def reserve_inventory(self, sku: str, quantity: int, ttl: int = DEFAULT_RESERVATION_TTL) -> Reservation:
        # the Shop API has no holds, reservations are tracked on this instance only
        level = await self.check_inventory(sku)
        if level.quantity < quantity:
            raise InsufficientStockError(sku, quantity, level.quantity)
        reservation = Reservation(id=generate_id("rsv"), sku=sku, quantity=quantity, expires_at=minutes_from_now(ttl))
        self._reservations[reservation.id] = reservation
        return reservation

    async def release_inventory(self, reservation_id: str) -> None:
        self._reservations.pop(reservation_id, None)

    # orders

    async def create_order(self, request: OrderRequest) -> PlatformOrder:
        vendure_order = None
        for item in request.items:
            variant_id = item.variant_id or await self._resolve_variant_id(item.sku)
            if not variant_id:
                raise AdapterError(f"Could not resolve variant for SKU {item.sku}")
            data = await self._gql(q.ADD_ITEM_TO_ORDER, {"productVariantId": variant_id, "quantity": item.quantity})
            vendure_order = self._mutation_result(data["addItemToOrder"])

        address = request.shipping_address or {}
        if request.email:
            name_parts = (address.get("name") or "Guest").split(" ")
            data = await self._gql(q.SET_CUSTOMER, {"input": {
                "emailAddress": request.email,
                "firstName": name_parts[0],
                "lastName": " ".join(name_parts[1:]),
            }})
            self._mutation_result(data["setCustomerForOrder"])

        if address:
            data = await self._gql(q.SET_SHIPPING_ADDRESS, {"input": {
                "fullName": address.get("name") or "Guest",
                "streetLine1": address.get("address1"),
                "streetLine2": address.get("address2") or "",
                "city": address.get("city"),
                "province": address.get("state"),
                "postalCode": address.get("zip"),
                "countryCode": address.get("country") or "US",
            }})
            self._mutation_result(data["setOrderShippingAddress"])

        if request.shipping_method:
            data = await self._gql(q.SET_SHIPPING_METHOD, {"shippingMethodId": [request.shipping_method]})
            self._mutation_result(data["setOrderShippingMethod"])

        data = await self._gql(q.TRANSITION_TO_ARRANGING_PAYMENT)
        self._mutation_result(data["transitionOrderToState"])

        data = await self._gql(q.ADD_PAYMENT, {"input": {
            "method": request.payment_method or "standard-payment",
            "metadata": {"checkoutId": request.checkout_id},
        }})
        vendure_order = self._mutation_result(data["addPaymentToOrder"]) or vendure_order
        logger.info("vendure.order.created", extra={"checkout_id": request.checkout_id, "code": vendure_order.get("code")})
        return self._to_order(vendure_order, request)

    async def get_order(self, order_id: str) -> Optional[PlatformOrder]:
        # the Shop API only exposes the session's active order
        data = await self._gql(q.GET_ACTIVE_ORDER)
        active = data.get("activeOrder")
        if not active or str(active["id"]) != order_id:
            return None
        return self._to_order(active, None)

    async def update_order_status(self, order_id: str, status: str) -> PlatformOrder:
        self._not_implemented("update_order_status", "Requires Admin API")

    async def cancel_order(self, order_id: str, reason: Optional[str] = None) -> PlatformOrder:
        self._not_implemented("cancel_order", "Requires Admin API")

    # shipping

    async def get_shipping_rates(self, checkout: Any = None) -> List[ShippingMethod]:
        data = await self._gql(q.GET_SHIPPING_METHODS)
        return [
            ShippingMethod(
                id=str(m["id"]),
                title=m["name"],
                description=m.get("description") or None,
                price=cents_to_dollars(m.get("priceWithTax") or 0),
                currency="USD",
            )
            for m in data["eligibleShippingMethods"]
        ]

    # webhooks are delivered by Vendure plugins

    async def register_webhooks(self, callback_url: str) -> List[WebhookRegistration]:
        self._not_implemented("register_webhooks", "Configure webhooks through a Vendure plugin")

    async def handle_webhook(self, payload: Any, signature: str) -> WebhookResult:
        self._not_implemented("handle_webhook", "Configure webhooks through a Vendure plugin")

    # helpers

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._session_token or (self._creds.auth_token if self._creds else None)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if self._creds and self._creds.channel_token:
            headers["vendure-token"] = self._creds.channel_token
        return headers

    async def _gql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        if self._creds is None:
            raise AdapterNotConnectedError("VendureAdapter: Not connected. Call connect() first.")

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
            resp = await client.post(self._creds.api_url, json={"query": query, "variables": variables or {}},
                                     headers=self._headers())
            resp.raise_for_status()
            body = resp.json()

        new_token = resp.headers.get(SESSION_HEADER)
        if new_token and new_token != self._session_token:
            self._session_token = new_token

        if body.get("errors"):
            messages = "; ".join(e.get("message", "unknown error") for e in body["errors"])
            raise AdapterError(f"Vendure GraphQL error: {messages}")
        return body.get("data") or {}

    @staticmethod
    def _mutation_result(result: Dict[str, Any]) -> Dict[str, Any]:
        if result.get("__typename") == "Order":
            return result
        raise AdapterError(f"Vendure mutation error: {result.get('message')} ({result.get('errorCode')})")

    async def _find_search_item(self, sku: str) -> Optional[Dict[str, Any]]:
        data = await self._gql(q.SEARCH_PRODUCTS, {"term": sku, "take": 10})
        return next((i for i in data["search"]["items"] if i.get("sku") == sku), None)

    async def _resolve_variant_id(self, sku: Optional[str]) -> Optional[str]:
        if not sku:
            return None
        match = await self._find_search_item(sku)
        return str(match["productVariantId"]) if match else None

    @staticmethod
    def _search_price(item: Dict[str, Any]):
        price = item.get("priceWithTax") or {}
        return cents_to_dollars(price.get("value", price.get("min", 0)) or 0)

    def _from_search_item(self, item: Dict[str, Any]) -> CatalogProduct:
        asset = item.get("productAsset")
        return CatalogProduct(
            id=str(item["productId"]),
            external_id=str(item["productId"]),
            sku=item.get("sku") or "",
            title=item["productName"],
            description=item.get("description") or None,
            price=self._search_price(item),
            currency=item.get("currencyCode") or "USD",
            images=[ProductImage(url=asset["preview"], alt=item["productName"])] if asset else [],
        )

    @staticmethod
    def _from_product(product: Dict[str, Any]) -> CatalogProduct:
        variants = [
            ProductVariant(
                id=str(v["id"]),
                sku=v.get("sku") or "",
                title=v["name"],
                price=cents_to_dollars(v.get("priceWithTax") or 0),
                inventory_quantity=_stock_level(v.get("stockLevel")),
            )
            for v in product.get("variants") or []
        ]
        first = variants[0] if variants else None
        images = []
        if product.get("featuredAsset"):
            images.append(ProductImage(url=product["featuredAsset"]["preview"], alt=product["name"]))
        images.extend(ProductImage(url=a["preview"], alt=product["name"]) for a in product.get("assets") or [])
        currency = (product.get("variants") or [{}])[0].get("currencyCode") or "USD"

        return CatalogProduct(
            id=str(product["id"]),
            external_id=str(product["id"]),
            sku=first.sku if first else "",
            title=product["name"],
            description=product.get("description") or None,
            price=first.price if first else 0,
            currency=currency,
            images=images,
            inventory_quantity=first.inventory_quantity if first else 0,
            variants=variants if len(variants) > 1 else None,
        )

    @staticmethod
    def _to_order(vendure_order: Dict[str, Any], request: Optional[OrderRequest]) -> PlatformOrder:
        lines = []
        for line in vendure_order.get("lines") or []:
            variant = line.get("productVariant") or {}
            lines.append(OrderLine(
                product_id=str(variant.get("id", "")),
                sku=variant.get("sku"),
                title=variant.get("name", ""),
                price=cents_to_dollars(variant.get("priceWithTax") or 0),
                quantity=line["quantity"],
                line_total=cents_to_dollars(line.get("linePriceWithTax") or 0),
            ))
        customer = vendure_order.get("customer") or {}
        return PlatformOrder(
            id=str(vendure_order["id"]),
            checkout_id=request.checkout_id if request else None,
            external_id=vendure_order.get("code") or str(vendure_order["id"]),
            order_number=vendure_order.get("code"),
            status=VENDURE_STATE_MAP.get(vendure_order.get("state", ""), "PENDING"),
            items=lines,
            email=customer.get("emailAddress") or (request.email if request else None),
            shipping_address=(request.shipping_address or {}) if request else {},
            shipping_method=request.shipping_method if request else None,
            shipping_cost=cents_to_dollars(vendure_order.get("shippingWithTax") or 0),
            subtotal=cents_to_dollars(vendure_order.get("subTotalWithTax") or 0),
            total_amount=cents_to_dollars(vendure_order.get("totalWithTax") or 0),
            currency=vendure_order.get("currencyCode") or "USD",
            payment_method=request.payment_method if request else None,
        )


def _stock_level(value: Any) -> int:
    # Shop API exposes stockLevel as a string ("IN_STOCK" or a number) depending on strategy
    if isinstance(value, int):
        return value
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
