import enum
import uuid
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlmodel import Column, Field, SQLModel
from uuid6 import uuid7
from agentix.common.utils import now


def _uuid7_str() -> str:
    return str(uuid7())


def _uuid4_str() -> str:
    # order numbers are cut from the leading hex chars, which must not be time ordered
    return str(uuid.uuid4())


class Protocol(str, enum.Enum):
    ACP = "ACP"
    UCP = "UCP"


class CheckoutStatus(str, enum.Enum):
    CREATED = "CREATED"
    ITEMS_ADDED = "ITEMS_ADDED"
    SHIPPING_SET = "SHIPPING_SET"
    PAYMENT_PENDING = "PAYMENT_PENDING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"
    FAILED = "FAILED"


class PaymentStatus(str, enum.Enum):
    PENDING = "PENDING"
    AUTHORIZED = "AUTHORIZED"
    CAPTURED = "CAPTURED"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"
    PARTIALLY_REFUNDED = "PARTIALLY_REFUNDED"


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


class FulfillmentStatus(str, enum.Enum):
    UNFULFILLED = "UNFULFILLED"
    PARTIALLY_FULFILLED = "PARTIALLY_FULFILLED"
    FULFILLED = "FULFILLED"


class ProductStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    DRAFT = "DRAFT"
    ARCHIVED = "ARCHIVED"
    DELETED = "DELETED"


class InventoryPolicy(str, enum.Enum):
    DENY = "DENY"
    CONTINUE = "CONTINUE"


class Platform(str, enum.Enum):
    SHOPIFY = "SHOPIFY"
    WOOCOMMERCE = "WOOCOMMERCE"
    VENDURE = "VENDURE"
    CUSTOM = "CUSTOM"


class TenantStatus(str, enum.Enum):
    ONBOARDING = "ONBOARDING"
    CONNECTING = "CONNECTING"
    SYNCING = "SYNCING"
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    DISCONNECTED = "DISCONNECTED"


class Tenant(SQLModel, table=True):

    id: str = Field(default_factory=_uuid7_str, sa_column=Column(String(36), primary_key=True))
    name: str = Field(sa_column=Column(String(255), nullable=False))
    company_name: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    api_key: str = Field(sa_column=Column(String(128), nullable=False, unique=True, index=True))
    platform: str = Field(default=Platform.CUSTOM.value, sa_column=Column(String(32), nullable=False))
    # AES-GCM encrypted JSON, see tenants/crypto.py
    platform_config: Optional[str] = Field(default=None, sa_column=Column(Text(), nullable=True))
    status: str = Field(default=TenantStatus.ONBOARDING.value, sa_column=Column(String(32), nullable=False))
    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now))
    updated_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now, onupdate=now))


class Product(SQLModel, table=True):

    id: str = Field(default_factory=_uuid7_str, sa_column=Column(String(36), primary_key=True))
    tenant_id: str = Field(sa_column=Column(String(36), ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True))
    external_id: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    sku: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True, index=True))
    title: str = Field(sa_column=Column(String(512), nullable=False))
    description: Optional[str] = Field(default=None, sa_column=Column(Text(), nullable=True))
    price: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    compare_at_price: Optional[Decimal] = Field(default=None, sa_column=Column(Numeric(12, 2), nullable=True))
    currency: str = Field(default="USD", sa_column=Column(String(8), nullable=False))
    images: List[Dict[str, Any]] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    inventory_quantity: int = Field(default=0, sa_column=Column(Integer, nullable=False))
    inventory_policy: str = Field(default=InventoryPolicy.DENY.value, sa_column=Column(String(16), nullable=False))
    product_type: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    vendor: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    variants: Optional[List[Dict[str, Any]]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    status: str = Field(default=ProductStatus.ACTIVE.value, sa_column=Column(String(16), nullable=False))
    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now))
    updated_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now, onupdate=now))

    __table_args__ = (
        Index("ix_product_tenant_status", "tenant_id", "status"),
    )


class Checkout(SQLModel, table=True):

    id: str = Field(default_factory=_uuid4_str, sa_column=Column(String(36), primary_key=True))
    tenant_id: str = Field(sa_column=Column(String(36), ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True))
    protocol: str = Field(default=Protocol.ACP.value, sa_column=Column(String(8), nullable=False))
    external_id: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    status: str = Field(default=CheckoutStatus.CREATED.value, sa_column=Column(String(32), nullable=False, index=True))

    email: Optional[str] = Field(default=None, sa_column=Column(String(320), nullable=True))
    # attribute renamed: SQLModel reserves `metadata`
    metadata_: Dict[str, Any] = Field(default_factory=dict, sa_column=Column("metadata", JSON, nullable=False))

    shipping_address: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    shipping_method: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    shipping_cost: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))

    subtotal: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    tax_amount: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    total_amount: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    currency: str = Field(default="USD", sa_column=Column(String(8), nullable=False))

    payment_token: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    payment_status: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))
    payment_method: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))

    expires_at: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False, index=True))
    completed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    cancelled_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now))
    updated_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now, onupdate=now))

    __table_args__ = (
        Index("ix_checkout_tenant_protocol", "tenant_id", "protocol"),
    )


class CheckoutItem(SQLModel, table=True):

    id: str = Field(default_factory=_uuid7_str, sa_column=Column(String(64), primary_key=True))
    checkout_id: str = Field(sa_column=Column(String(36), ForeignKey("checkout.id", ondelete="CASCADE"), nullable=False, index=True))
    # insertion order, items are rendered in the order the caller listed them
    position: int = Field(default=0, sa_column=Column(Integer, nullable=False))
    product_id: str = Field(sa_column=Column(String(36), nullable=False))
    sku: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    title: str = Field(sa_column=Column(String(512), nullable=False))
    price: Decimal = Field(sa_column=Column(Numeric(12, 2), nullable=False))
    quantity: int = Field(sa_column=Column(Integer, nullable=False))
    variant_id: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    line_total: Decimal = Field(sa_column=Column(Numeric(12, 2), nullable=False))


class CheckoutEvent(SQLModel, table=True):

    id: str = Field(default_factory=_uuid7_str, sa_column=Column(String(36), primary_key=True))
    checkout_id: str = Field(sa_column=Column(String(36), ForeignKey("checkout.id", ondelete="CASCADE"), nullable=False, index=True))
    type: str = Field(sa_column=Column(String(64), nullable=False))
    data: Dict[str, Any] = Field(default_factory=dict, sa_column=Column(JSON, nullable=False))
    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now))


class Orders(SQLModel, table=True):

    id: str = Field(default_factory=_uuid7_str, sa_column=Column(String(36), primary_key=True))
    tenant_id: str = Field(sa_column=Column(String(36), ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True))
    # 1:1 with the completed checkout by construction, not enforced
    checkout_id: Optional[str] = Field(default=None, sa_column=Column(String(36), ForeignKey("checkout.id", ondelete="SET NULL"), nullable=True, index=True))
    external_id: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))
    order_number: str = Field(sa_column=Column(String(32), nullable=False, index=True))
    status: str = Field(default=OrderStatus.PENDING.value, sa_column=Column(String(32), nullable=False))
    fulfillment_status: str = Field(default=FulfillmentStatus.UNFULFILLED.value, sa_column=Column(String(32), nullable=False))
    email: Optional[str] = Field(default=None, sa_column=Column(String(320), nullable=True))
    shipping_address: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    shipping_method: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    shipping_cost: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    subtotal: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    tax_amount: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    total_amount: Decimal = Field(default=Decimal("0"), sa_column=Column(Numeric(12, 2), nullable=False))
    currency: str = Field(default="USD", sa_column=Column(String(8), nullable=False))
    payment_method: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))
    payment_reference: Optional[str] = Field(default=None, sa_column=Column(String(255), nullable=True))
    source: Optional[str] = Field(default=None, sa_column=Column(String(32), nullable=True))
    protocol: str = Field(default=Protocol.ACP.value, sa_column=Column(String(8), nullable=False))
    carrier: Optional[str] = Field(default=None, sa_column=Column(String(64), nullable=True))
    tracking_number: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    tracking_url: Optional[str] = Field(default=None, sa_column=Column(String(1024), nullable=True))
    created_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now))
    updated_at: datetime = Field(default_factory=now,
        sa_column=Column(DateTime(timezone=True), nullable=False, default=now, onupdate=now))


class OrderItem(SQLModel, table=True):

    id: str = Field(default_factory=_uuid7_str, sa_column=Column(String(36), primary_key=True))
    order_id: str = Field(sa_column=Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True))
    position: int = Field(default=0, sa_column=Column(Integer, nullable=False))
    product_id: str = Field(sa_column=Column(String(36), nullable=False))
    sku: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    title: str = Field(sa_column=Column(String(512), nullable=False))
    price: Decimal = Field(sa_column=Column(Numeric(12, 2), nullable=False))
    quantity: int = Field(sa_column=Column(Integer, nullable=False))
    variant_id: Optional[str] = Field(default=None, sa_column=Column(String(128), nullable=True))
    line_total: Decimal = Field(sa_column=Column(Numeric(12, 2), nullable=False))
