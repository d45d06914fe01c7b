from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from agentix.common.utils import now


class ConnectionResult(BaseModel):
    success: bool
    shop_name: Optional[str] = None
    error: Optional[str] = None


class ProductImage(BaseModel):
    url: str
    alt: Optional[str] = None


class ProductVariant(BaseModel):
    id: str
    sku: str
    title: str
    price: Decimal
    inventory_quantity: int = 0


class CatalogProduct(BaseModel):
    id: str
    external_id: Optional[str] = None
    sku: str
    title: str
    description: Optional[str] = None
    price: Decimal
    compare_at_price: Optional[Decimal] = None
    currency: str = "USD"
    images: List[ProductImage] = Field(default_factory=list)
    inventory_quantity: int = 0
    inventory_policy: Literal["DENY", "CONTINUE"] = "DENY"
    product_type: Optional[str] = None
    vendor: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    variants: Optional[List[ProductVariant]] = None
    status: str = "ACTIVE"
    created_at: datetime = Field(default_factory=now)


class ProductQuery(BaseModel):
    query: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    in_stock: bool = False
    vendor: Optional[str] = None
    tags: Optional[List[str]] = None
    ids: Optional[List[str]] = None
    skus: Optional[List[str]] = None
    order_by: Optional[Literal["title", "price", "created_at"]] = None
    order_dir: Literal["asc", "desc"] = "asc"
    limit: int = 20
    offset: int = 0


class ProductPage(BaseModel):
    data: List[CatalogProduct]
    total: int
    limit: int
    offset: int
    has_more: bool


class InventoryLevel(BaseModel):
    sku: str
    quantity: int
    available: bool
    policy: Literal["DENY", "CONTINUE"] = "DENY"


class Reservation(BaseModel):
    id: str
    sku: str
    quantity: int
    expires_at: datetime


class SyncResult(BaseModel):
    created: int = 0
    updated: int = 0
    deleted: int = 0
    failed: int = 0
    errors: List[str] = Field(default_factory=list)
    duration_ms: int = 0


class ShippingMethod(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    carrier: Optional[str] = None
    price: Decimal
    currency: str = "USD"
    estimated_days: Optional[str] = None


class OrderLine(BaseModel):
    product_id: str
    sku: Optional[str] = None
    title: str
    price: Decimal
    quantity: int
    variant_id: Optional[str] = None
    line_total: Decimal


class OrderRequest(BaseModel):
    """What an adapter needs to place an order on the platform side."""
    checkout_id: str
    tenant_id: Optional[str] = None
    protocol: str = "ACP"
    email: Optional[str] = None
    items: List[OrderLine]
    shipping_address: Optional[Dict[str, Any]] = None
    shipping_method: Optional[str] = None
    shipping_cost: Decimal = Decimal("0")
    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    currency: str = "USD"
    payment_method: Optional[str] = None


class PlatformOrder(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str
    checkout_id: Optional[str] = None
    external_id: Optional[str] = None
    order_number: Optional[str] = None
    status: str = "PENDING"
    items: List[OrderLine] = Field(default_factory=list)
    email: Optional[str] = None
    shipping_address: Dict[str, Any] = Field(default_factory=dict)
    shipping_method: Optional[str] = None
    shipping_cost: Decimal = Decimal("0")
    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    total_amount: Decimal = Decimal("0")
    currency: str = "USD"
    payment_method: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)


class WebhookRegistration(BaseModel):
    id: str
    topic: str
    address: str


class WebhookResult(BaseModel):
    event: str
    processed: bool
    data: Optional[Dict[str, Any]] = None
