from typing import List, Optional
from pydantic import BaseModel, Field
from agentix.checkout.models import CheckoutChanges, CheckoutDraft, ItemRef, ShippingAddress


class UCPCartItemInput(BaseModel):
    product_id: str = Field(min_length=1)
    variant_id: Optional[str] = None
    quantity: int = Field(ge=1)

    def to_ref(self) -> ItemRef:
        return ItemRef(id=self.product_id, variant_id=self.variant_id, quantity=self.quantity)


class UCPShippingAddress(BaseModel):
    recipient_name: str = Field(min_length=1)
    street_address: str = Field(min_length=1)
    street_address_2: Optional[str] = None
    city: str = Field(min_length=1)
    region: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)
    country_code: str = Field(min_length=2, max_length=3)
    phone: Optional[str] = None

    def to_address(self) -> ShippingAddress:
        return ShippingAddress(
            name=self.recipient_name,
            address1=self.street_address,
            address2=self.street_address_2 or "",
            city=self.city,
            state=self.region,
            zip=self.postal_code,
            country=self.country_code,
            phone=self.phone,
        )


class UCPCreateCart(BaseModel):
    items: List[UCPCartItemInput] = Field(min_length=1)

    def to_draft(self) -> CheckoutDraft:
        return CheckoutDraft(items=[i.to_ref() for i in self.items])


class UCPUpdateCart(BaseModel):
    items: Optional[List[UCPCartItemInput]] = Field(default=None, min_length=1)
    shipping_address: Optional[UCPShippingAddress] = None
    shipping_method_id: Optional[str] = None

    def to_changes(self) -> CheckoutChanges:
        return CheckoutChanges(
            items=[i.to_ref() for i in self.items] if self.items is not None else None,
            address=self.shipping_address.to_address() if self.shipping_address else None,
            fulfillment_option_id=self.shipping_method_id,
        )


class UCPCreateOrder(BaseModel):
    cart_id: str = Field(min_length=1)
    payment_token: str = Field(min_length=1)
