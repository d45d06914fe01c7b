from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, EmailStr, Field, model_validator
from agentix.checkout.models import BuyerInfo, CheckoutChanges, CheckoutDraft, ItemRef, ShippingAddress


class ACPBuyer(BaseModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    phone_number: Optional[str] = None

    def to_buyer(self) -> BuyerInfo:
        return BuyerInfo(first_name=self.first_name, last_name=self.last_name,
                         email=str(self.email), phone=self.phone_number)


class ACPAddress(BaseModel):
    name: str = Field(min_length=1)
    line_one: str = Field(min_length=1)
    line_two: Optional[str] = None
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    country: str = Field(min_length=1)
    postal_code: str = Field(min_length=1)

    def to_address(self) -> ShippingAddress:
        return ShippingAddress(
            name=self.name,
            address1=self.line_one,
            address2=self.line_two or "",
            city=self.city,
            state=self.state,
            zip=self.postal_code,
            country=self.country,
        )


class ACPItemInput(BaseModel):
    id: Optional[str] = None
    sku: Optional[str] = None
    quantity: int = Field(ge=1)

    @model_validator(mode="after")
    def id_or_sku(self):
        if self.id is None and self.sku is None:
            raise ValueError("Either id or sku must be provided")
        return self

    def to_ref(self) -> ItemRef:
        return ItemRef(id=self.id, sku=self.sku, quantity=self.quantity)


class ACPCreateCheckout(BaseModel):
    items: List[ACPItemInput] = Field(min_length=1)
    buyer: Optional[ACPBuyer] = None
    fulfillment_address: Optional[ACPAddress] = None
    fulfillment_option_id: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    def to_draft(self) -> CheckoutDraft:
        return CheckoutDraft(
            items=[i.to_ref() for i in self.items],
            buyer=self.buyer.to_buyer() if self.buyer else None,
            address=self.fulfillment_address.to_address() if self.fulfillment_address else None,
            fulfillment_option_id=self.fulfillment_option_id,
            metadata=self.metadata or {},
        )


class ACPUpdateCheckout(BaseModel):
    items: Optional[List[ACPItemInput]] = Field(default=None, min_length=1)
    buyer: Optional[ACPBuyer] = None
    fulfillment_address: Optional[ACPAddress] = None
    fulfillment_option_id: Optional[str] = None

    def to_changes(self) -> CheckoutChanges:
        return CheckoutChanges(
            items=[i.to_ref() for i in self.items] if self.items is not None else None,
            buyer=self.buyer.to_buyer() if self.buyer else None,
            address=self.fulfillment_address.to_address() if self.fulfillment_address else None,
            fulfillment_option_id=self.fulfillment_option_id,
        )


class PaymentToken(BaseModel):
    type: Literal["stripe_spt"]
    token: str = Field(min_length=1)


class ACPCompleteCheckout(BaseModel):
    payment_token: PaymentToken
