from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field
from agentix.schema.full_schema import Checkout, Orders


class ItemRef(BaseModel):
    id: Optional[str] = None
    sku: Optional[str] = None
    variant_id: Optional[str] = None
    quantity: int = Field(ge=1)


class BuyerInfo(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ShippingAddress(BaseModel):
    """Address in storage form. Protocol layers translate their own field names into this."""
    name: str
    address1: str
    address2: Optional[str] = None
    city: str
    state: str
    zip: str
    country: str
    phone: Optional[str] = None


class CheckoutDraft(BaseModel):
    items: List[ItemRef]
    buyer: Optional[BuyerInfo] = None
    address: Optional[ShippingAddress] = None
    fulfillment_option_id: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)


class CheckoutChanges(BaseModel):
    items: Optional[List[ItemRef]] = None
    buyer: Optional[BuyerInfo] = None
    address: Optional[ShippingAddress] = None
    fulfillment_option_id: Optional[str] = None


class LineItem(BaseModel):
    id: str
    product_id: str
    sku: Optional[str] = None
    title: str
    unit_price: Decimal
    quantity: int
    variant_id: Optional[str] = None
    base_amount: int
    discount: int = 0
    subtotal: int
    tax: int = 0
    total: int


class ShippingOption(BaseModel):
    """Adapter quoted shipping method, amounts in cents."""
    id: str
    title: str
    description: Optional[str] = None
    carrier: Optional[str] = None
    estimated_days: Optional[str] = None
    subtotal: int
    tax: int = 0
    total: int


class Message(BaseModel):
    type: Literal["info", "error"]
    code: Optional[str] = None
    content_type: Literal["plain", "markdown"] = "plain"
    content: str


class Total(BaseModel):
    type: str
    display_text: str
    amount: int


class TotalsSummary(BaseModel):
    subtotal: int = 0
    discount: int = 0
    tax: int = 0
    fulfillment: int = 0
    total: int = 0


@dataclass
class CheckoutView:
    """Everything a protocol renderer needs for one response."""
    checkout: Checkout
    line_items: List[LineItem]
    fulfillment_options: List[ShippingOption]
    selected_option: Optional[ShippingOption] = None
    messages: List[Message] = field(default_factory=list)
    order: Optional[Orders] = None
