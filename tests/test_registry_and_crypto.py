import pytest
from agentix.adapters.errors import AdapterError, AdapterNotImplementedError
from agentix.adapters.mock import MockAdapter
from agentix.adapters.registry import create_adapter, get_adapter, resolve_tenant_adapter
from agentix.adapters.shopify import ShopifyAdapter
from agentix.adapters.vendure import VendureAdapter
from agentix.adapters.woocommerce import WooCommerceAdapter
from agentix.schema.full_schema import Platform, Tenant, TenantStatus
from agentix.tenants.crypto import CredentialDecryptionError, decrypt_credentials, encrypt_credentials

SHOPIFY_CREDS = {"shop": "ada-goods.myshopify.com", "accessToken": "shpat_test", "scope": "read_products"}


def _tenant(platform: str, platform_config=None) -> Tenant:
    return Tenant(name="Ada Goods", api_key="agx_registry", platform=platform,
                  platform_config=platform_config, status=TenantStatus.ACTIVE.value)


def test_encrypted_credentials_decrypt_with_same_key():
    stored = encrypt_credentials(SHOPIFY_CREDS, secret="k1")
    iv, tag, cipher = stored.split(":")
    assert len(bytes.fromhex(iv)) == 16
    assert len(bytes.fromhex(tag)) == 16
    assert "shpat_test" not in stored
    assert decrypt_credentials(stored, secret="k1") == SHOPIFY_CREDS


def test_each_encryption_uses_a_fresh_iv():
    assert encrypt_credentials(SHOPIFY_CREDS, secret="k1") != encrypt_credentials(SHOPIFY_CREDS, secret="k1")


def test_wrong_key_is_rejected():
    stored = encrypt_credentials(SHOPIFY_CREDS, secret="k1")
    with pytest.raises(CredentialDecryptionError):
        decrypt_credentials(stored, secret="k2")


@pytest.mark.parametrize("stored", ["not-encrypted", "aa:bb", "zz:zz:zz", "00:11:22:33"])
def test_malformed_payload_is_rejected(stored):
    with pytest.raises(CredentialDecryptionError):
        decrypt_credentials(stored, secret="k1")


def test_empty_key_is_rejected():
    with pytest.raises(CredentialDecryptionError):
        encrypt_credentials(SHOPIFY_CREDS, secret="")


@pytest.mark.parametrize("platform,cls", [
    ("SHOPIFY", ShopifyAdapter),
    ("woocommerce", WooCommerceAdapter),
    ("VENDURE", VendureAdapter),
    ("CUSTOM", MockAdapter),
])
def test_create_adapter_by_platform(platform, cls):
    assert isinstance(create_adapter(platform), cls)


def test_unknown_platform_raises():
    with pytest.raises(AdapterError, match="Unsupported platform"):
        create_adapter("MAGENTO")


@pytest.mark.asyncio
async def test_get_adapter_connects_with_credentials():
    adapter = await get_adapter("SHOPIFY", SHOPIFY_CREDS)
    assert adapter.is_connected()
    assert (await adapter.test_connection()).shop_name == "ada-goods.myshopify.com"


@pytest.mark.asyncio
async def test_get_adapter_keeps_going_on_bad_credentials():
    adapter = await get_adapter("WOOCOMMERCE", {"storeUrl": "https://woo.agentix.dev"})
    assert not adapter.is_connected()


@pytest.mark.asyncio
async def test_resolve_decrypts_stored_config():
    tenant = _tenant(Platform.SHOPIFY.value, encrypt_credentials(SHOPIFY_CREDS))
    adapter = await resolve_tenant_adapter(tenant)
    assert isinstance(adapter, ShopifyAdapter)
    assert adapter.is_connected()
    with pytest.raises(AdapterNotImplementedError):
        await adapter.get_shipping_rates()


@pytest.mark.asyncio
async def test_resolve_survives_undecryptable_config():
    tenant = _tenant(Platform.SHOPIFY.value, encrypt_credentials(SHOPIFY_CREDS, secret="another-key"))
    adapter = await resolve_tenant_adapter(tenant)
    assert isinstance(adapter, ShopifyAdapter)
    assert not adapter.is_connected()


@pytest.mark.asyncio
async def test_resolve_custom_tenant_without_config_is_mock():
    adapter = await resolve_tenant_adapter(_tenant(Platform.CUSTOM.value))
    assert isinstance(adapter, MockAdapter)
    assert adapter.is_connected()
