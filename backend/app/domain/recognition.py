"""
Recognition Domain Models

Ephemeral results of product recognition on a photo. Not persisted: a
recognized product only reaches the catalog when converted to a
ProductCreate.
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal


class ProductAttribute(BaseModel):
    name: str
    value: str
    confidence: int = Field(..., ge=0, le=100)


class BoundingBox(BaseModel):
    """Relative coordinates (0-1) of a product inside the analyzed image"""
    x: float
    y: float
    width: float
    height: float


class RecognizedProduct(BaseModel):
    id: str
    name: str
    category: str
    attributes: List[ProductAttribute] = Field(default_factory=list)
    suggested_price: Decimal = Field(..., ge=0)
    confidence: int = Field(..., ge=0, le=100)
    bounding_box: Optional[BoundingBox] = None

    def attribute_map(self) -> dict:
        return {attribute.name: attribute.value for attribute in self.attributes}

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['suggested_price'] = float(self.suggested_price)
        return data


class AnalyzeImageRequest(BaseModel):
    image_url: str
    count: int = Field(1, ge=1, le=25)
