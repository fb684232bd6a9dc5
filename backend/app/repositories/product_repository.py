"""
Product Repository - Data Access Layer for Products

Keeps the catalog in memory and returns Product domain models.

Author: TM3
Date: 2026-10-17
"""
import time
from collections import defaultdict
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple, Dict, Iterable

from app.domain.product import Product, ProductCreate, ProductUpdate, LOW_STOCK_THRESHOLD
from app.repositories.seed_data import load_seed_products


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProductRepository:
    """
    Repository for Product data access

    All catalog reads and writes are centralized here.
    Returns Product domain models, not raw dictionaries.
    """

    def __init__(self, products: Optional[Iterable[Product]] = None):
        if products is None:
            products = load_seed_products()
        # Insertion order is the catalog order
        self._products: Dict[str, Product] = {product.id: product for product in products}

    def _new_id(self) -> str:
        """Millisecond timestamp, bumped until unused"""
        candidate = int(time.time() * 1000)
        while str(candidate) in self._products:
            candidate += 1
        return str(candidate)

    def find_by_id(self, product_id: str) -> Optional[Product]:
        """
        Find product by ID

        Args:
            product_id: Product ID

        Returns:
            Product or None if not found
        """
        return self._products.get(product_id)

    def find_many(self, product_ids: Iterable[str]) -> List[Product]:
        return [self._products[pid] for pid in product_ids if pid in self._products]

    def find_all(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 100,
        offset: int = 0
    ) -> Tuple[List[Product], int]:
        """
        Find products with filters

        Args:
            category: Filter by category (case-insensitive)
            search: Search in name, description or tags
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of products, total count)
        """
        products = list(self._products.values())

        if category:
            products = [p for p in products if p.category.lower() == category.lower()]

        if search:
            term = search.lower()
            products = [
                p for p in products
                if term in p.name.lower()
                or term in p.description.lower()
                or any(term in tag.lower() for tag in p.tags)
            ]

        total = len(products)
        return products[offset:offset + limit], total

    def find_low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> List[Product]:
        """Products with stock strictly below the threshold"""
        return [p for p in self._products.values() if p.stock < threshold]

    def create(self, data: ProductCreate) -> Product:
        now = _utcnow()
        product = Product(
            id=self._new_id(),
            created_at=now,
            updated_at=now,
            **data.model_dump()
        )
        self._products[product.id] = product
        return product

    def update(self, product_id: str, data: ProductUpdate) -> Optional[Product]:
        """
        Merge the fields set on `data` into the product

        Returns:
            Updated product or None if not found
        """
        product = self._products.get(product_id)
        if product is None:
            return None

        merged = product.model_dump()
        merged.update(data.model_dump(exclude_unset=True, exclude_none=True))
        merged['updated_at'] = _utcnow()
        updated = Product.model_validate(merged)
        self._products[product_id] = updated
        return updated

    def delete(self, product_id: str) -> bool:
        return self._products.pop(product_id, None) is not None

    def update_stock(self, product_id: str, quantity: int) -> Optional[Product]:
        """
        Remove `quantity` units from stock

        A negative quantity puts units back (restock).
        """
        product = self._products.get(product_id)
        if product is None:
            return None

        product.stock -= quantity
        product.updated_at = _utcnow()
        return product

    def get_stats(self, low_stock_threshold: int = LOW_STOCK_THRESHOLD) -> Dict:
        """
        Catalog statistics

        Returns:
            Dict with totals, products per category and stock levels
        """
        products = list(self._products.values())

        by_category: Dict[str, int] = defaultdict(int)
        for product in products:
            by_category[product.category] += 1

        inventory_value = sum((p.inventory_value for p in products), Decimal('0'))

        return {
            'total_products': len(products),
            'by_category': dict(by_category),
            'total_stock': sum(max(p.stock, 0) for p in products),
            'low_stock': sum(1 for p in products if p.stock < low_stock_threshold),
            'out_of_stock': sum(1 for p in products if p.is_out_of_stock),
            'inventory_value': float(inventory_value),
        }
