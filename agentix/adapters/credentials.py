from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class _Credentials(BaseModel):
    # stored platform configs use camelCase keys
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ShopifyCredentials(_Credentials):
    shop: str = Field(min_length=1)
    access_token: str = Field(alias="accessToken", min_length=1)
    scope: Optional[str] = None


class WooCommerceCredentials(_Credentials):
    store_url: str = Field(alias="storeUrl", min_length=1)
    consumer_key: str = Field(alias="consumerKey", min_length=1)
    consumer_secret: str = Field(alias="consumerSecret", min_length=1)


class VendureCredentials(_Credentials):
    api_url: str = Field(alias="apiUrl", min_length=1)
    auth_token: Optional[str] = Field(default=None, alias="authToken")
    channel_token: Optional[str] = Field(default=None, alias="channelToken")
