import base64
import binascii
import hashlib
from typing import Optional
from agentix.products.constants import LOW_STOCK_THRESHOLD
from agentix.products.models import CatalogQuery
from agentix.schema.full_schema import InventoryPolicy, Product


def inventory_status(quantity: int) -> str:
    if quantity <= 0:
        return "out_of_stock"
    if quantity <= LOW_STOCK_THRESHOLD:
        return "low_stock"
    return "in_stock"


def availability(product: Product) -> str:
    if product.inventory_quantity > 0:
        return "in_stock"
    if product.inventory_policy == InventoryPolicy.CONTINUE.value:
        return "preorder"
    return "out_of_stock"


def encode_page_token(offset: int) -> str:
    return base64.b64encode(str(offset).encode()).decode()


def decode_page_token(token: Optional[str]) -> int:
    # opaque to callers, a token that does not decode restarts from the first page
    if not token:
        return 0
    try:
        offset = int(base64.b64decode(token.encode(), validate=True).decode())
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return 0
    return max(offset, 0)


def make_params_key(params: CatalogQuery) -> str:
    parts = [f"limit={params.limit}", f"offset={params.offset}"]
    if params.query:
        parts.append(f"q={params.query.lower()}")
    if params.category:
        parts.append(f"cat={params.category.lower()}")
    if params.min_price is not None:
        parts.append(f"min={params.min_price}")
    if params.max_price is not None:
        parts.append(f"max={params.max_price}")
    joined = "|".join(parts)
    if len(joined) > 200:
        return hashlib.sha256(joined.encode()).hexdigest()
    return joined
