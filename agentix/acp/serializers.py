from typing import Any, Dict, List, Optional
from agentix.checkout.models import CheckoutView, LineItem, ShippingOption
from agentix.checkout.totals import build_totals
from agentix.common.money import dollars_to_cents
from agentix.config.settings import config_settings
from agentix.products.utils import inventory_status
from agentix.schema.full_schema import CheckoutStatus, Product

ACP_STATUS = {
    CheckoutStatus.CREATED.value: "not_ready_for_payment",
    CheckoutStatus.ITEMS_ADDED.value: "not_ready_for_payment",
    CheckoutStatus.SHIPPING_SET.value: "not_ready_for_payment",
    CheckoutStatus.PAYMENT_PENDING.value: "ready_for_payment",
    CheckoutStatus.COMPLETED.value: "completed",
    CheckoutStatus.CANCELLED.value: "canceled",
    CheckoutStatus.EXPIRED.value: "canceled",
    CheckoutStatus.FAILED.value: "not_ready_for_payment",
}


def to_acp_status(status: str) -> str:
    return ACP_STATUS.get(status, "not_ready_for_payment")


def _line_item(li: LineItem) -> Dict[str, Any]:
    return {
        "id": li.id,
        "item": {"id": li.product_id, "quantity": li.quantity},
        "base_amount": li.base_amount,
        "discount": li.discount,
        "subtotal": li.subtotal,
        "tax": li.tax,
        "total": li.total,
    }


def _fulfillment_option(opt: ShippingOption) -> Dict[str, Any]:
    out = {"type": "shipping", "id": opt.id, "title": opt.title}
    if opt.estimated_days:
        out["subtitle"] = f"{opt.estimated_days} days"
    if opt.carrier:
        out["carrier"] = opt.carrier
    out.update(subtotal=opt.subtotal, tax=opt.tax, total=opt.total)
    return out


def _address(stored: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not stored:
        return None
    out = {
        "name": stored.get("name") or "",
        "line_one": stored.get("address1") or "",
        "city": stored.get("city") or "",
        "state": stored.get("state") or "",
        "country": stored.get("country") or "",
        "postal_code": stored.get("zip") or "",
    }
    if stored.get("address2"):
        out["line_two"] = stored["address2"]
    return out


def _buyer(checkout) -> Optional[Dict[str, Any]]:
    if not checkout.email:
        return None
    meta = checkout.metadata_ or {}
    buyer = {
        "first_name": meta.get("buyer_first_name") or "",
        "last_name": meta.get("buyer_last_name") or "",
        "email": checkout.email,
    }
    if meta.get("buyer_phone"):
        buyer["phone_number"] = meta["buyer_phone"]
    return buyer


def acp_checkout(view: CheckoutView) -> Dict[str, Any]:
    checkout = view.checkout
    body: Dict[str, Any] = {
        "id": checkout.id,
        "status": to_acp_status(checkout.status),
        "currency": checkout.currency.lower(),
    }

    buyer = _buyer(checkout)
    if buyer is not None:
        body["buyer"] = buyer

    body["payment_provider"] = {"provider": "stripe", "supported_payment_methods": ["card"]}
    body["line_items"] = [_line_item(li) for li in view.line_items]

    address = _address(checkout.shipping_address)
    if address is not None:
        body["fulfillment_address"] = address

    body["fulfillment_options"] = [_fulfillment_option(o) for o in view.fulfillment_options]
    if checkout.shipping_method:
        body["fulfillment_option_id"] = checkout.shipping_method

    body["totals"] = [t.model_dump() for t in build_totals(view.line_items, view.selected_option)]
    body["messages"] = [m.model_dump(exclude_none=True) for m in view.messages]
    body["links"] = [
        {"type": "terms_of_use", "url": config_settings.TERMS_URL},
        {"type": "privacy_policy", "url": config_settings.PRIVACY_URL},
    ]
    return body


def acp_product(product: Product) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "id": product.id,
        "sku": product.sku,
        "title": product.title,
        "description": product.description or "",
        "price": dollars_to_cents(product.price),
    }
    if product.compare_at_price is not None:
        out["compare_at_price"] = dollars_to_cents(product.compare_at_price)
    out["currency"] = product.currency.lower()
    out["images"] = [{"url": img.get("url"), "alt": img.get("alt")} for img in product.images or []]
    out["inventory"] = {
        "quantity": product.inventory_quantity,
        "status": inventory_status(product.inventory_quantity),
    }
    if product.product_type:
        out["category"] = product.product_type
    return out


def acp_products_page(products: List[Product], total: int, limit: int, offset: int) -> Dict[str, Any]:
    return {
        "products": [acp_product(p) for p in products],
        "total": total,
        "limit": limit,
        "offset": offset,
        "has_more": offset + limit < total,
    }
