from typing import Any, Dict, Optional
from agentix.adapters.base import ISVAdapter
from agentix.adapters.constants import logger
from agentix.adapters.errors import AdapterError
from agentix.adapters.mock import MockAdapter
from agentix.adapters.shopify import ShopifyAdapter
from agentix.adapters.vendure import VendureAdapter
from agentix.adapters.woocommerce import WooCommerceAdapter
from agentix.schema.full_schema import Platform, Tenant
from agentix.tenants.crypto import CredentialDecryptionError, decrypt_credentials

ADAPTERS = {
    Platform.SHOPIFY.value: ShopifyAdapter,
    Platform.WOOCOMMERCE.value: WooCommerceAdapter,
    Platform.VENDURE.value: VendureAdapter,
    # custom platforms run against the in-memory catalog until a real adapter exists
    Platform.CUSTOM.value: MockAdapter,
}


def create_adapter(platform: str) -> ISVAdapter:
    adapter_cls = ADAPTERS.get(str(platform).upper())
    if adapter_cls is None:
        raise AdapterError(f"Unsupported platform: {platform}")
    return adapter_cls()


async def get_adapter(platform: str, credentials: Optional[Dict[str, Any]] = None) -> ISVAdapter:
    adapter = create_adapter(platform)
    if credentials:
        result = await adapter.connect(credentials)
        if not result.success:
            logger.warning("adapter.connect.unsuccessful", extra={"platform": platform, "reason": result.error})
    return adapter


async def resolve_tenant_adapter(tenant: Tenant) -> ISVAdapter:
    """Adapter for the tenant's platform, connected with its stored credentials when they decrypt.

    Credentials that are missing or cannot be decrypted leave the adapter in demo mode.
    """
    credentials = None
    if tenant.platform_config:
        try:
            credentials = decrypt_credentials(tenant.platform_config)
        except CredentialDecryptionError as exc:
            logger.warning("tenant.credentials.decrypt_failed",
                           extra={"tenant_id": tenant.id, "platform": tenant.platform, "reason": str(exc)})

    return await get_adapter(tenant.platform, credentials)
