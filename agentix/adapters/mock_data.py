from datetime import datetime, timezone
from decimal import Decimal
from agentix.adapters.models import CatalogProduct, ProductImage, ProductVariant, ShippingMethod

_CREATED = datetime(2025, 1, 15, tzinfo=timezone.utc)

MOCK_PRODUCTS = [
    CatalogProduct(
        id="mock_prod_001", external_id="mock_prod_001", sku="TEE-CLASSIC-BLK",
        title="Classic Cotton Tee", description="Heavyweight cotton t-shirt in washed black.",
        price=Decimal("24.00"), compare_at_price=Decimal("30.00"),
        images=[ProductImage(url="https://cdn.agentix.dev/mock/tee-black.jpg", alt="Classic Cotton Tee")],
        inventory_quantity=120, product_type="Apparel", vendor="Northwind Basics",
        tags=["apparel", "cotton", "bestseller"],
        variants=[
            ProductVariant(id="mock_var_001_s", sku="TEE-CLASSIC-BLK-S", title="Small", price=Decimal("24.00"), inventory_quantity=40),
            ProductVariant(id="mock_var_001_m", sku="TEE-CLASSIC-BLK-M", title="Medium", price=Decimal("24.00"), inventory_quantity=50),
            ProductVariant(id="mock_var_001_l", sku="TEE-CLASSIC-BLK-L", title="Large", price=Decimal("24.00"), inventory_quantity=30),
        ],
        created_at=_CREATED,
    ),
    CatalogProduct(
        id="mock_prod_002", external_id="mock_prod_002", sku="MUG-STONE-12",
        title="Stoneware Mug", description="12oz speckled stoneware mug, dishwasher safe.",
        price=Decimal("19.99"),
        images=[ProductImage(url="https://cdn.agentix.dev/mock/mug.jpg", alt="Stoneware Mug")],
        inventory_quantity=4, product_type="Kitchen", vendor="Clay & Co",
        tags=["kitchen", "gift"], created_at=_CREATED,
    ),
    CatalogProduct(
        id="mock_prod_003", external_id="mock_prod_003", sku="BAG-CANVAS-TOTE",
        title="Canvas Tote Bag", description="Waxed canvas tote with leather handles.",
        price=Decimal("45.00"),
        images=[ProductImage(url="https://cdn.agentix.dev/mock/tote.jpg", alt="Canvas Tote Bag")],
        inventory_quantity=35, product_type="Accessories", vendor="Northwind Basics",
        tags=["accessories", "canvas"], created_at=_CREATED,
    ),
    CatalogProduct(
        id="mock_prod_004", external_id="mock_prod_004", sku="CANDLE-CEDAR",
        title="Cedar Soy Candle", description="Hand-poured soy candle, 40 hour burn.",
        price=Decimal("10.00"),
        images=[ProductImage(url="https://cdn.agentix.dev/mock/candle.jpg", alt="Cedar Soy Candle")],
        inventory_quantity=0, inventory_policy="CONTINUE", product_type="Home", vendor="Ember Goods",
        tags=["home", "gift", "preorder"], created_at=_CREATED,
    ),
    CatalogProduct(
        id="mock_prod_005", external_id="mock_prod_005", sku="BOTTLE-STEEL-750",
        title="Insulated Steel Bottle", description="750ml double-wall bottle, keeps drinks cold for 24h.",
        price=Decimal("32.50"),
        images=[ProductImage(url="https://cdn.agentix.dev/mock/bottle.jpg", alt="Insulated Steel Bottle")],
        inventory_quantity=60, product_type="Outdoor", vendor="Trailhead",
        tags=["outdoor", "hydration"], created_at=_CREATED,
    ),
    CatalogProduct(
        id="mock_prod_006", external_id="mock_prod_006", sku="NOTEBOOK-A5-DOT",
        title="Dot Grid Notebook", description="A5 lay-flat notebook with 160 dot grid pages.",
        price=Decimal("14.00"),
        images=[ProductImage(url="https://cdn.agentix.dev/mock/notebook.jpg", alt="Dot Grid Notebook")],
        inventory_quantity=0, product_type="Stationery", vendor="Paperline",
        tags=["stationery"], created_at=_CREATED,
    ),
]

MOCK_SHIPPING_METHODS = [
    ShippingMethod(id="standard", title="Standard Shipping", description="Ground delivery",
                   carrier="USPS", price=Decimal("5.00"), estimated_days="5-7"),
    ShippingMethod(id="express", title="Express Shipping", description="Two day air",
                   carrier="UPS", price=Decimal("12.99"), estimated_days="2-3"),
    ShippingMethod(id="overnight", title="Overnight Shipping", description="Next business day",
                   carrier="FedEx", price=Decimal("24.99"), estimated_days="1"),
]
