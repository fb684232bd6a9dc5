"""
Repository Layer - Data Access

This layer owns the in-memory catalog and order store and returns domain
models. Repositories keep storage details away from business logic.

Author: TM3
Date: 2026-10-17
"""
from app.repositories.product_repository import ProductRepository
from app.repositories.order_repository import OrderRepository

__all__ = [
    'ProductRepository',
    'OrderRepository',
]
