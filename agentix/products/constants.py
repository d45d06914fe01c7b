from agentix.common.logging_setup import get_logger

logger = get_logger("agentix.products")

LOW_STOCK_THRESHOLD = 5
CATALOG_CACHE_NAMESPACE = "catalog"
