from typing import Optional
from pydantic import BaseModel, Field
from agentix.common.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT


class CatalogQuery(BaseModel):
    query: Optional[str] = None
    category: Optional[str] = None
    min_price: Optional[int] = Field(default=None, ge=0, description="cents")
    max_price: Optional[int] = Field(default=None, ge=0, description="cents")
    limit: int = Field(default=DEFAULT_PAGE_LIMIT, ge=1, le=MAX_PAGE_LIMIT)
    offset: int = Field(default=0, ge=0)
