from typing import List, Optional, Sequence
from fastapi import status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from agentix.adapters.base import ISVAdapter
from agentix.checkout.constants import BUYER_METADATA_KEYS, PAYMENT_DECLINED_TEXT, PROTOCOL_TERMS, logger
from agentix.checkout.events import AuditTrail
from agentix.checkout.line_items import build_line_items, line_items_from_stored, to_checkout_items
from agentix.checkout.models import (
    BuyerInfo, CheckoutChanges, CheckoutDraft, CheckoutView, LineItem, Message, ShippingOption,
)
from agentix.checkout.repository import checkout_for_tenant, checkout_items, replace_checkout_items
from agentix.checkout.state_machine import advance_status, can_transition, is_terminal
from agentix.checkout.totals import summarize_totals
from agentix.common.constants import CHECKOUT_EXPIRY_MINUTES, DEFAULT_CURRENCY, PAYMENT_TOKEN_PREFIX
from agentix.common.custom_exceptions import APIError, ConflictError, InvalidItemsError, NotFoundError
from agentix.common.money import cents_to_dollars, dollars_to_cents
from agentix.common.utils import is_expired, minutes_from_now, now
from agentix.orders.repository import create_order_from_checkout
from agentix.orders.utils import order_number_for
from agentix.schema.full_schema import Checkout, CheckoutStatus, PaymentStatus, Protocol, Tenant


class PaymentTokenRejected(APIError):
    """Raised with the unchanged checkout so ACP can answer with the full body and an inline message."""

    def __init__(self, view: CheckoutView):
        super().__init__(status.HTTP_400_BAD_REQUEST, "INVALID_PAYMENT", PAYMENT_DECLINED_TEXT)
        self.view = view


def to_shipping_option(method) -> ShippingOption:
    cents = dollars_to_cents(method.price)
    return ShippingOption(
        id=method.id,
        title=method.title,
        description=method.description,
        carrier=method.carrier,
        estimated_days=method.estimated_days,
        subtotal=cents,
        tax=0,
        total=cents,
    )


def find_option(options: Sequence[ShippingOption], option_id: Optional[str]) -> Optional[ShippingOption]:
    if not option_id:
        return None
    return next((o for o in options if o.id == option_id), None)


def merge_buyer(metadata: Optional[dict], buyer: BuyerInfo) -> dict:
    merged = dict(metadata or {})
    for field, key in BUYER_METADATA_KEYS.items():
        value = getattr(buyer, field)
        if value is not None:
            merged[key] = value
    return merged


class CheckoutEngine:
    """Protocol agnostic checkout lifecycle.

    One engine per request: it holds the request session, the authenticated
    tenant id and the tenant's adapter. ACP and UCP differ only in the protocol
    they pass in, which picks error code prefixes, event names and whether
    loads are restricted to rows created through that protocol.
    """

    def __init__(self, session: AsyncSession, tenant: Tenant, adapter: ISVAdapter,
                 protocol: Protocol, audit: AuditTrail):
        self.session = session
        # plain copy, a rollback expires the ORM row
        self.tenant_id = tenant.id
        self.adapter = adapter
        self.protocol = protocol
        self.audit = audit
        self.terms = PROTOCOL_TERMS[protocol]

    # shipping

    async def quote_shipping_options(self, checkout: Optional[Checkout] = None) -> List[ShippingOption]:
        try:
            methods = await self.adapter.get_shipping_rates(checkout)
        except Exception as exc:
            # a missing quote degrades to no shipping options
            logger.warning("adapter.shipping_rates.failed",
                           extra={"tenant_id": self.tenant_id, "platform": self.adapter.platform, "reason": str(exc)})
            return []
        return [to_shipping_option(m) for m in methods]

    def _selected_for(self, checkout: Checkout, options: Sequence[ShippingOption]) -> Optional[ShippingOption]:
        selected = find_option(options, checkout.shipping_method)
        if selected is None and checkout.shipping_method and checkout.shipping_cost and checkout.shipping_cost > 0:
            # the adapter no longer quotes the stored method, keep charging what was stored
            cents = dollars_to_cents(checkout.shipping_cost)
            selected = ShippingOption(id=checkout.shipping_method, title="Shipping", subtotal=cents, total=cents)
        return selected

    # persistence helpers

    async def _load(self, checkout_id: str) -> Checkout:
        protocol = self.protocol.value if self.protocol == Protocol.UCP else None
        checkout = await checkout_for_tenant(self.session, checkout_id, self.tenant_id, protocol)
        if checkout is None:
            raise NotFoundError(self.terms["noun"], checkout_id)
        return checkout

    async def _commit(self, checkout: Checkout, action: str):
        checkout_id = checkout.id
        try:
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            logger.error(f"checkout.{action}.failed",
                         extra={"tenant_id": self.tenant_id, "checkout_id": checkout_id}, exc_info=True)
            raise

    async def _expire_if_due(self, checkout: Checkout) -> bool:
        if is_terminal(checkout.status) or not is_expired(checkout.expires_at):
            return False
        checkout.status = CheckoutStatus.EXPIRED.value
        checkout.updated_at = now()
        await self._commit(checkout, "expire")
        logger.info("checkout.expired", extra={"tenant_id": self.tenant_id, "checkout_id": checkout.id})
        return True

    def _expired_error(self) -> ConflictError:
        return ConflictError(f"{self.terms['code_prefix']}_EXPIRED", f"{self.terms['noun']} has expired")

    def _apply_totals(self, checkout: Checkout, line_items: Sequence[LineItem],
                      selected: Optional[ShippingOption]) -> None:
        summary = summarize_totals(line_items, selected)
        checkout.subtotal = cents_to_dollars(summary.subtotal)
        checkout.tax_amount = cents_to_dollars(summary.tax)
        checkout.shipping_cost = cents_to_dollars(summary.fulfillment)
        checkout.total_amount = cents_to_dollars(summary.total)

    async def _view(self, checkout: Checkout, messages: Optional[List[Message]] = None,
                    line_items: Optional[List[LineItem]] = None,
                    options: Optional[List[ShippingOption]] = None, order=None) -> CheckoutView:
        if line_items is None:
            line_items = line_items_from_stored(await checkout_items(self.session, checkout.id))
        if options is None:
            options = await self.quote_shipping_options(checkout)
        return CheckoutView(
            checkout=checkout,
            line_items=line_items,
            fulfillment_options=options,
            selected_option=self._selected_for(checkout, options),
            messages=messages or [],
            order=order,
        )

    # operations

    async def create(self, draft: CheckoutDraft) -> CheckoutView:
        line_items = await build_line_items(self.session, self.tenant_id, draft.items)
        if not line_items:
            raise InvalidItemsError()

        options = await self.quote_shipping_options()
        selected = find_option(options, draft.fulfillment_option_id) or (options[0] if options else None)

        metadata = dict(draft.metadata)
        email = None
        if draft.buyer is not None:
            metadata = merge_buyer(metadata, draft.buyer)
            email = draft.buyer.email

        checkout = Checkout(
            tenant_id=self.tenant_id,
            protocol=self.protocol.value,
            status=(CheckoutStatus.PAYMENT_PENDING if draft.address else CheckoutStatus.ITEMS_ADDED).value,
            email=email,
            metadata_=metadata,
            shipping_address=draft.address.model_dump() if draft.address else None,
            shipping_method=selected.id if selected else None,
            currency=DEFAULT_CURRENCY,
            expires_at=minutes_from_now(CHECKOUT_EXPIRY_MINUTES),
        )
        self._apply_totals(checkout, line_items, selected)

        self.session.add(checkout)
        await self.session.flush()
        self.session.add_all(to_checkout_items(checkout.id, line_items))
        await self._commit(checkout, "create")

        logger.info("checkout.create.success", extra={
            "tenant_id": self.tenant_id, "checkout_id": checkout.id,
            "protocol": self.protocol.value, "item_count": len(line_items),
        })
        await self.audit.record(checkout.id, self.terms["created"], {"item_count": len(line_items)})
        return await self._view(checkout, line_items=line_items, options=options)

    async def get(self, checkout_id: str) -> CheckoutView:
        checkout = await self._load(checkout_id)
        await self._expire_if_due(checkout)
        return await self._view(checkout)

    async def update(self, checkout_id: str, changes: CheckoutChanges) -> CheckoutView:
        checkout = await self._load(checkout_id)

        if is_terminal(checkout.status):
            raise ConflictError(f"{self.terms['code_prefix']}_CLOSED",
                                f"Cannot update a completed, cancelled, or expired {self.terms['noun'].lower()}")
        if await self._expire_if_due(checkout):
            raise self._expired_error()

        if changes.items is not None:
            line_items = await build_line_items(self.session, self.tenant_id, changes.items)
            if not line_items:
                raise InvalidItemsError()
            await replace_checkout_items(self.session, checkout.id, to_checkout_items(checkout.id, line_items))
        else:
            line_items = line_items_from_stored(await checkout_items(self.session, checkout.id))

        if changes.buyer is not None:
            checkout.metadata_ = merge_buyer(checkout.metadata_, changes.buyer)
            if changes.buyer.email is not None:
                checkout.email = changes.buyer.email

        if changes.address is not None:
            checkout.shipping_address = changes.address.model_dump()

        options = await self.quote_shipping_options(checkout)
        new_option_id = changes.fulfillment_option_id
        if new_option_id and new_option_id != checkout.shipping_method:
            selected = find_option(options, new_option_id)
            checkout.shipping_method = new_option_id
        else:
            selected = self._selected_for(checkout, options)

        checkout.status = advance_status(
            checkout.status,
            items_changed=changes.items is not None,
            has_address=checkout.shipping_address is not None,
        ).value
        self._apply_totals(checkout, line_items, selected)
        checkout.updated_at = now()
        await self._commit(checkout, "update")

        logger.info("checkout.update.success", extra={
            "tenant_id": self.tenant_id, "checkout_id": checkout.id, "status": checkout.status,
        })
        await self.audit.record(checkout.id, self.terms["updated"], {
            "has_new_items": changes.items is not None,
            "has_new_address": changes.address is not None,
        })
        return await self._view(checkout, line_items=line_items, options=options)

    async def complete(self, checkout_id: str, payment_token: str) -> CheckoutView:
        checkout = await self._load(checkout_id)

        if await self._expire_if_due(checkout):
            raise self._expired_error()

        if not can_transition(checkout.status, CheckoutStatus.COMPLETED):
            raise ConflictError("INVALID_STATE",
                                f"Cannot {self.terms['complete_action']} in '{checkout.status}' status")

        if not payment_token.startswith(PAYMENT_TOKEN_PREFIX):
            logger.info("checkout.complete.payment_declined",
                        extra={"tenant_id": self.tenant_id, "checkout_id": checkout.id})
            declined = Message(type="error", code="payment_declined", content=PAYMENT_DECLINED_TEXT)
            raise PaymentTokenRejected(await self._view(checkout, messages=[declined]))

        checkout.status = CheckoutStatus.COMPLETED.value
        checkout.payment_token = payment_token
        checkout.payment_status = PaymentStatus.CAPTURED.value
        checkout.payment_method = "card"
        checkout.completed_at = now()
        checkout.updated_at = checkout.completed_at
        await self._commit(checkout, "complete")

        items = await checkout_items(self.session, checkout.id)
        line_items = line_items_from_stored(items)

        # the checkout stays completed even when the order snapshot cannot be written
        checkout_id = checkout.id
        order = None
        try:
            order = await create_order_from_checkout(self.session, checkout, items)
            await self.session.commit()
        except SQLAlchemyError:
            await self.session.rollback()
            order = None
            logger.exception("checkout.order.materialize_failed",
                             extra={"tenant_id": self.tenant_id, "checkout_id": checkout_id})
            await self.session.refresh(checkout)

        logger.info("checkout.complete.success", extra={
            "tenant_id": self.tenant_id, "checkout_id": checkout.id,
            "order_id": order.id if order else None,
        })
        await self.audit.record(checkout.id, self.terms["completed"], {
            "payment_method": "card",
            "order_id": order.id if order else None,
        })

        confirmed = Message(type="info", content=f"Order confirmed! Order #{order_number_for(checkout.id)}")
        return await self._view(checkout, messages=[confirmed], line_items=line_items, order=order)

    async def cancel(self, checkout_id: str) -> CheckoutView:
        checkout = await self._load(checkout_id)
        await self._expire_if_due(checkout)

        if not can_transition(checkout.status, CheckoutStatus.CANCELLED):
            raise ConflictError("INVALID_STATE",
                                f"Cannot cancel {self.terms['noun'].lower()} in '{checkout.status}' status")

        checkout.status = CheckoutStatus.CANCELLED.value
        checkout.cancelled_at = now()
        checkout.updated_at = checkout.cancelled_at
        await self._commit(checkout, "cancel")

        logger.info("checkout.cancel.success", extra={"tenant_id": self.tenant_id, "checkout_id": checkout.id})
        await self.audit.record(checkout.id, self.terms["cancelled"])
        cancelled = Message(type="info", content=f"{self.terms['noun']} cancelled")
        return await self._view(checkout, messages=[cancelled])
