class AdapterError(Exception):
    """Failure talking to or inside a commerce platform adapter."""


class AdapterNotConnectedError(AdapterError):
    pass


class AdapterNotImplementedError(AdapterError, NotImplementedError):
    def __init__(self, adapter: str, operation: str, reason: str = "Not implemented"):
        super().__init__(f"{adapter}.{operation}: {reason}")
        self.adapter = adapter
        self.operation = operation


class InsufficientStockError(AdapterError):
    def __init__(self, sku: str, requested: int, available: int):
        super().__init__(f"Insufficient stock for {sku}: requested {requested}, available {available}")
        self.sku = sku
        self.requested = requested
        self.available = available


class AdapterOrderNotFoundError(AdapterError):
    def __init__(self, order_id: str):
        super().__init__(f"Order {order_id} not found")
        self.order_id = order_id
