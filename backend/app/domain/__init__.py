"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.

Author: TM3
Date: 2026-10-17
"""
from app.domain.product import Product, ProductVariant, ProductCreate, ProductUpdate
from app.domain.order import (
    Order, OrderItem, OrderStatus, PaymentStatus, PaymentMethod,
    ShippingAddress, ShippingInfo, TrackingUpdate, PaymentInfo, BuyerProfile,
)
from app.domain.recognition import RecognizedProduct, ProductAttribute, BoundingBox

__all__ = [
    'Product', 'ProductVariant', 'ProductCreate', 'ProductUpdate',
    'Order', 'OrderItem', 'OrderStatus', 'PaymentStatus', 'PaymentMethod',
    'ShippingAddress', 'ShippingInfo', 'TrackingUpdate', 'PaymentInfo', 'BuyerProfile',
    'RecognizedProduct', 'ProductAttribute', 'BoundingBox',
]
