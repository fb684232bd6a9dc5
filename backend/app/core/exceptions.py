"""
Domain exceptions

Raised by repositories and services, translated to HTTP errors by the API
layer (see app/api/errors.py).

Author: TM3
Date: 2026-10-17
"""
from typing import List, Optional


class DukaanError(Exception):
    """Base class for all business errors raised by the backend"""

    status_code = 500


class OrderNotFoundError(DukaanError, LookupError):
    status_code = 404

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class ProductNotFoundError(DukaanError, LookupError):
    status_code = 404

    def __init__(self, product_id: str):
        self.product_id = product_id
        super().__init__(f"Product {product_id} not found")


class CustomerNotFoundError(DukaanError, LookupError):
    status_code = 404

    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"No orders found for customer {customer_id}")


class InvalidStatusTransitionError(DukaanError, ValueError):
    """Order status change not allowed from the current status"""

    status_code = 409

    def __init__(self, order_id: str, current: str, requested: str, allowed: Optional[List[str]] = None):
        self.order_id = order_id
        self.current = current
        self.requested = requested
        self.allowed = allowed or []
        allowed_text = ", ".join(self.allowed) if self.allowed else "none (terminal status)"
        super().__init__(
            f"Cannot move order {order_id} from '{current}' to '{requested}'. Allowed: {allowed_text}"
        )


class InsufficientInventoryError(DukaanError):
    status_code = 409

    def __init__(self, order_id: str, out_of_stock_items: list):
        self.order_id = order_id
        self.out_of_stock_items = out_of_stock_items
        names = ", ".join(item.name for item in out_of_stock_items)
        super().__init__(f"Order {order_id} has items out of stock: {names}")


class PaymentFailedError(DukaanError):
    status_code = 402

    def __init__(self, order_id: str, message: str):
        self.order_id = order_id
        super().__init__(f"Payment for order {order_id} failed: {message}")


class UnsupportedDocumentError(DukaanError, ValueError):
    status_code = 400

    def __init__(self, document_type: str):
        self.document_type = document_type
        super().__init__(f"Document type '{document_type}' is not supported")
