"""
Product Domain Model

Represents a product in the seller's catalog.
This is the single source of truth for product data structure.

Author: TM3
Date: 2026-10-17
"""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from decimal import Decimal

LOW_STOCK_THRESHOLD = 5


class ProductVariant(BaseModel):
    """A selectable product option (e.g. Size: S/M/L)"""

    id: str = Field(..., description="Variant key (size, color, ...)")
    name: str = Field(..., description="Display name")
    values: List[str] = Field(default_factory=list, description="Available values")


class Product(BaseModel):
    """
    Product domain model - represents a product in the catalog

    Fields:
        id: Product ID
        name: Product name
        price: Selling price (INR)
        description: Product description
        images: Image URLs
        category: Product category
        tags: Search tags
        stock: Units in stock (negative means back-ordered)
        variants: Selectable options
        created_at: When product was created
        updated_at: When product was last updated
    """

    id: str = Field(..., description="Product ID")
    name: str = Field(..., description="Product name")
    price: Decimal = Field(..., description="Selling price", ge=0)
    description: str = Field("", description="Product description")
    images: List[str] = Field(default_factory=list, description="Image URLs")
    category: str = Field(..., description="Product category")
    tags: List[str] = Field(default_factory=list, description="Search tags")

    # Inventory (allow negative for back-orders/corrections)
    stock: int = Field(0, description="Units in stock")
    variants: List[ProductVariant] = Field(default_factory=list, description="Product variants")

    # Metadata
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    # Computed properties
    @property
    def is_low_stock(self) -> bool:
        """Check if product stock is below the low stock threshold"""
        return self.stock < LOW_STOCK_THRESHOLD

    @property
    def is_out_of_stock(self) -> bool:
        """Check if product is out of stock"""
        return self.stock <= 0

    @property
    def inventory_value(self) -> Decimal:
        return self.price * max(self.stock, 0)

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump()

        data['is_low_stock'] = self.is_low_stock
        data['is_out_of_stock'] = self.is_out_of_stock

        # Convert Decimal to float for JSON compatibility
        data['price'] = float(data['price'])

        data['created_at'] = self.created_at.isoformat()
        data['updated_at'] = self.updated_at.isoformat()

        return data


class ProductCreate(BaseModel):
    """Schema for creating a new product"""
    name: str = Field(..., min_length=1)
    price: Decimal = Field(..., ge=0)
    description: str = ""
    images: List[str] = Field(default_factory=list)
    category: str
    tags: List[str] = Field(default_factory=list)
    stock: int = 0
    variants: List[ProductVariant] = Field(default_factory=list)


class ProductUpdate(BaseModel):
    """Schema for updating an existing product (only set fields are applied)"""
    name: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    description: Optional[str] = None
    images: Optional[List[str]] = None
    category: Optional[str] = None
    tags: Optional[List[str]] = None
    stock: Optional[int] = None
    variants: Optional[List[ProductVariant]] = None


class StockAdjustment(BaseModel):
    """Units to remove from stock (negative quantity restocks)"""
    quantity: int
