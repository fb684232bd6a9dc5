"""
Products API Endpoints
Handles the seller's product catalog and stock levels

Author: TM3
Date: 2026-10-17
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.errors import to_http_exception
from app.core.config import settings
from app.core.dependencies import get_product_repository
from app.core.exceptions import DukaanError, ProductNotFoundError
from app.domain.product import ProductCreate, ProductUpdate, StockAdjustment
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_products(
    category: Optional[str] = Query(None, description="Filter by category"),
    search: Optional[str] = Query(None, description="Search by name, description or tag"),
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    repo: ProductRepository = Depends(get_product_repository),
):
    """
    Get all products with optional filters
    """
    try:
        products, total = repo.find_all(
            category=category,
            search=search,
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/stats")
async def get_product_stats(repo: ProductRepository = Depends(get_product_repository)):
    """
    Get product statistics

    Returns:
    - Total products
    - Products by category
    - Stock levels and inventory value
    """
    try:
        return {
            "status": "success",
            "data": repo.get_stats(low_stock_threshold=settings.LOW_STOCK_THRESHOLD)
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching stats: {str(e)}")


@router.get("/low-stock")
async def get_low_stock_products(
    threshold: int = Query(settings.LOW_STOCK_THRESHOLD, ge=0, description="Stock below this is low"),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Products that need restocking"""
    try:
        products = repo.find_low_stock(threshold)
        return {
            "status": "success",
            "threshold": threshold,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching low stock products: {str(e)}")


@router.get("/{product_id}")
async def get_product(product_id: str, repo: ProductRepository = Depends(get_product_repository)):
    try:
        product = repo.find_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


@router.post("/", status_code=201)
async def create_product(data: ProductCreate, repo: ProductRepository = Depends(get_product_repository)):
    try:
        product = repo.create(data)
        logger.info(f"Product {product.id} created: {product.name}")

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating product: {str(e)}")


@router.put("/{product_id}")
async def update_product(
    product_id: str,
    data: ProductUpdate,
    repo: ProductRepository = Depends(get_product_repository),
):
    """Partial update: only the fields sent are changed"""
    try:
        product = repo.update(product_id, data)
        if product is None:
            raise ProductNotFoundError(product_id)

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating product: {str(e)}")


@router.delete("/{product_id}")
async def delete_product(product_id: str, repo: ProductRepository = Depends(get_product_repository)):
    try:
        if not repo.delete(product_id):
            raise ProductNotFoundError(product_id)

        logger.info(f"Product {product_id} deleted")
        return {
            "status": "success",
            "message": f"Product {product_id} deleted"
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting product: {str(e)}")


@router.post("/{product_id}/stock")
async def adjust_stock(
    product_id: str,
    adjustment: StockAdjustment,
    repo: ProductRepository = Depends(get_product_repository),
):
    """
    Remove units from stock

    A negative quantity puts units back.
    """
    try:
        product = repo.update_stock(product_id, adjustment.quantity)
        if product is None:
            raise ProductNotFoundError(product_id)

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating stock: {str(e)}")
