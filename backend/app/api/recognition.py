"""
Product Recognition API Endpoints
Suggests catalog products from seller photos

Author: TM3
Date: 2026-10-17
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from app.core.dependencies import get_product_repository, get_recognition_service
from app.domain.recognition import AnalyzeImageRequest, RecognizedProduct
from app.repositories.product_repository import ProductRepository
from app.services.product_recognition_service import ProductRecognitionService

logger = logging.getLogger(__name__)

router = APIRouter()


class PublishRecognizedProduct(BaseModel):
    product: RecognizedProduct
    stock: int = Field(1, ge=0, description="Initial stock for the new catalog product")


@router.post("/analyze")
async def analyze_image(
    request: AnalyzeImageRequest,
    service: ProductRecognitionService = Depends(get_recognition_service),
):
    """
    Recognize products in an image

    Returns one suggestion per product with attributes, a suggested price
    and, for pictures with several products, where each one is.
    """
    try:
        products = await service.analyze_image(request.image_url, request.count)
        return {
            "status": "success",
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error analyzing image: {str(e)}")


@router.post("/describe")
async def describe_product(
    product: RecognizedProduct,
    service: ProductRecognitionService = Depends(get_recognition_service),
):
    try:
        return {
            "status": "success",
            "data": {"description": service.generate_description(product)}
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error generating description: {str(e)}")


@router.post("/tags")
async def tag_product(
    product: RecognizedProduct,
    service: ProductRecognitionService = Depends(get_recognition_service),
):
    try:
        return {
            "status": "success",
            "data": {"tags": service.generate_tags(product)}
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error generating tags: {str(e)}")


@router.post("/to-product", status_code=201)
async def publish_recognized_product(
    request: PublishRecognizedProduct,
    service: ProductRecognitionService = Depends(get_recognition_service),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Add a recognized product to the catalog"""
    try:
        product = repo.create(service.to_product_create(request.product, stock=request.stock))
        logger.info(f"Recognized product {request.product.id} published as {product.id}")

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating product: {str(e)}")
