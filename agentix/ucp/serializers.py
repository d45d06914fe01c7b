from typing import Any, Dict, List, Optional, Sequence
from agentix.checkout.models import CheckoutView, ShippingOption
from agentix.common.money import dollars_to_cents
from agentix.common.utils import isoformat
from agentix.products.utils import availability, encode_page_token
from agentix.schema.full_schema import CheckoutStatus, OrderItem, OrderStatus, Orders, Product, Tenant

CART_STATUS = {
    CheckoutStatus.PAYMENT_PENDING.value: "ready",
    CheckoutStatus.COMPLETED.value: "completed",
    CheckoutStatus.CANCELLED.value: "cancelled",
    CheckoutStatus.EXPIRED.value: "cancelled",
}

ORDER_STATUS = {
    OrderStatus.PENDING.value: "pending",
    OrderStatus.CONFIRMED.value: "confirmed",
    OrderStatus.PROCESSING.value: "processing",
    OrderStatus.SHIPPED.value: "shipped",
    OrderStatus.DELIVERED.value: "delivered",
    OrderStatus.CANCELLED.value: "cancelled",
    OrderStatus.REFUNDED.value: "cancelled",
}


def to_cart_status(status: str) -> str:
    return CART_STATUS.get(status, "open")


def to_order_status(status: str) -> str:
    return ORDER_STATUS.get(status, "pending")


def money(cents: int, currency: str = "USD") -> Dict[str, Any]:
    return {"amount": cents, "currency_code": currency}


def capabilities(tenant: Tenant) -> Dict[str, Any]:
    name = tenant.company_name or tenant.name
    return {
        "merchant": {"name": name, "description": f"Products from {name} via Agentix"},
        "capabilities": [
            {"type": "catalog", "version": "1.0"},
            {"type": "cart", "version": "1.0"},
            {"type": "checkout", "version": "1.0"},
            {"type": "order_tracking", "version": "1.0"},
        ],
        "supported_currencies": ["USD"],
        "supported_countries": ["US"],
    }


def catalog_item(product: Product) -> Dict[str, Any]:
    item: Dict[str, Any] = {
        "id": product.id,
        "title": product.title,
        "description": product.description or "",
        "images": [{"url": img.get("url"), "alt_text": img.get("alt")} for img in product.images or []],
        "price": money(dollars_to_cents(product.price), product.currency),
        "availability": availability(product),
    }
    if product.product_type:
        item["category"] = product.product_type
    if product.vendor:
        item["brand"] = product.vendor
    return item


def catalog_page(products: List[Product], total: int, offset: int, page_size: int) -> Dict[str, Any]:
    next_offset = offset + page_size
    return {
        "items": [catalog_item(p) for p in products],
        "total_results": total,
        "next_page_token": encode_page_token(next_offset) if next_offset < total else None,
    }


def _item(item, currency: str) -> Dict[str, Any]:
    out = {"id": item.id, "product_id": item.product_id}
    if item.variant_id:
        out["variant_id"] = item.variant_id
    out.update(
        title=item.title,
        sku=item.sku,
        quantity=item.quantity,
        unit_price=money(dollars_to_cents(item.price), currency),
        line_total=money(dollars_to_cents(item.line_total), currency),
    )
    return out


def _line_item(li, currency: str) -> Dict[str, Any]:
    # line items already carry cents for the total, unit price is still dollars
    out = {"id": li.id, "product_id": li.product_id}
    if li.variant_id:
        out["variant_id"] = li.variant_id
    out.update(
        title=li.title,
        sku=li.sku,
        quantity=li.quantity,
        unit_price=money(dollars_to_cents(li.unit_price), currency),
        line_total=money(li.total, currency),
    )
    return out


def _address(stored: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not stored:
        return None
    out = {
        "recipient_name": stored.get("name") or "",
        "street_address": stored.get("address1") or "",
        "city": stored.get("city") or "",
        "region": stored.get("state") or "",
        "postal_code": stored.get("zip") or "",
        "country_code": stored.get("country") or "",
    }
    if stored.get("address2"):
        out["street_address_2"] = stored["address2"]
    if stored.get("phone"):
        out["phone"] = stored["phone"]
    return out


def _shipping_method(opt: ShippingOption, currency: str) -> Dict[str, Any]:
    out = {"id": opt.id, "title": opt.title}
    if opt.estimated_days:
        out["description"] = f"{opt.estimated_days} delivery"
        out["estimated_delivery"] = opt.estimated_days
    out["price"] = money(opt.total, currency)
    return out


def ucp_cart(view: CheckoutView) -> Dict[str, Any]:
    checkout = view.checkout
    currency = checkout.currency
    items = [_line_item(li, currency) for li in view.line_items]

    body: Dict[str, Any] = {
        "id": checkout.id,
        "status": to_cart_status(checkout.status),
        "items": items,
        "subtotal": money(dollars_to_cents(checkout.subtotal or 0), currency),
        "tax": money(dollars_to_cents(checkout.tax_amount or 0), currency),
        "shipping": money(dollars_to_cents(checkout.shipping_cost or 0), currency),
        "total": money(dollars_to_cents(checkout.total_amount or 0), currency),
    }
    address = _address(checkout.shipping_address)
    if address is not None:
        body["shipping_address"] = address
    body["available_shipping_methods"] = [_shipping_method(o, currency) for o in view.fulfillment_options]
    if checkout.shipping_method:
        body["selected_shipping_method_id"] = checkout.shipping_method
    return body


def ucp_order(order: Orders, items: Sequence[OrderItem]) -> Dict[str, Any]:
    currency = order.currency
    body: Dict[str, Any] = {
        "id": order.id,
        "cart_id": order.checkout_id,
        "status": to_order_status(order.status),
        "order_number": order.order_number or order.external_id,
        "items": [_item(i, currency) for i in items],
        "subtotal": money(dollars_to_cents(order.subtotal), currency),
        "tax": money(dollars_to_cents(order.tax_amount), currency),
        "shipping": money(dollars_to_cents(order.shipping_cost), currency),
        "total": money(dollars_to_cents(order.total_amount), currency),
        "shipping_address": _address(order.shipping_address) or {},
    }
    if order.tracking_number and order.tracking_url:
        body["tracking"] = {
            "carrier": order.carrier or order.shipping_method or "Unknown",
            "tracking_number": order.tracking_number,
            "tracking_url": order.tracking_url,
        }
    body["created_at"] = isoformat(order.created_at)
    return body
