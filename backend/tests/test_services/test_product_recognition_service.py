"""
Unit tests for ProductRecognitionService

Author: TM3
Date: 2026-10-17
"""
import asyncio
import random
import re
from decimal import Decimal

import pytest

from app.domain.recognition import ProductAttribute, RecognizedProduct
from app.services.product_recognition_service import (
    CATEGORY_ATTRIBUTES, PRODUCT_TEMPLATES, ProductRecognitionService,
)


@pytest.fixture
def recognition_service():
    return ProductRecognitionService(rng=random.Random(7), latency_seconds=0)


@pytest.fixture
def saree():
    return RecognizedProduct(
        id='rec_1_0',
        name='Traditional Saree',
        category='Clothing & Accessories',
        attributes=[
            ProductAttribute(name='color', value='red', confidence=90),
            ProductAttribute(name='material', value='silk', confidence=85),
            ProductAttribute(name='pattern', value='floral', confidence=80),
        ],
        suggested_price=Decimal('2400'),
        confidence=88,
    )


class TestAnalyzeImage:
    """Test simulated recognition results"""

    def test_single_product_has_no_bounding_box(self, recognition_service):
        products = asyncio.run(recognition_service.analyze_image('https://img.example/kurti.jpg'))

        assert len(products) == 1
        assert products[0].bounding_box is None
        assert re.fullmatch(r'rec_\d+_0', products[0].id)

    def test_generated_products_respect_templates(self, recognition_service):
        """Test price range, attribute count and confidence bounds"""
        products = asyncio.run(recognition_service.analyze_image('https://img.example/stall.jpg', count=25))

        for product in products:
            names = [a.name for a in product.attributes]
            low, high = next(
                (lo, hi) for name, lo, hi in PRODUCT_TEMPLATES[product.category] if name == product.name
            )
            assert low <= product.suggested_price < high
            assert 2 <= len(names) <= 4
            assert len(set(names)) == len(names)
            assert set(names) <= set(CATEGORY_ATTRIBUTES[product.category])
            assert 70 <= product.confidence <= 99
            assert all(70 <= a.confidence <= 99 for a in product.attributes)

    def test_bounding_boxes_form_a_grid(self, recognition_service):
        """Test 4 products are laid out on a 2x2 grid"""
        products = asyncio.run(recognition_service.analyze_image('https://img.example/shelf.jpg', count=4))

        boxes = [(round(p.bounding_box.x, 2), round(p.bounding_box.y, 2)) for p in products]
        assert boxes == [(0.1, 0.1), (0.5, 0.1), (0.1, 0.5), (0.5, 0.5)]
        assert all(p.bounding_box.width == pytest.approx(0.4) for p in products)

    def test_count_must_be_positive(self, recognition_service):
        with pytest.raises(ValueError):
            asyncio.run(recognition_service.analyze_image('https://img.example/none.jpg', count=0))


class TestDescriptionsAndTags:

    def test_description_uses_attributes(self, recognition_service, saree):
        description = recognition_service.generate_description(saree)

        assert 'Traditional Saree' in description
        assert 'silk' in description
        assert '  ' not in description

    def test_description_for_unknown_category(self, recognition_service, saree):
        product = saree.model_copy(update={'category': 'Toys', 'name': 'Wooden Top'})

        description = recognition_service.generate_description(product)

        assert description in (
            'High-quality Wooden Top with excellent craftsmanship. Perfect for daily use.',
            'Premium Wooden Top designed for durability and style. A must-have item.',
        )

    def test_jewelry_description_skips_no_gemstone(self, recognition_service):
        ring = RecognizedProduct(
            id='rec_1_0',
            name='Statement Ring',
            category='Jewelry & Accessories',
            attributes=[ProductAttribute(name='gemstone', value='none', confidence=75)],
            suggested_price=Decimal('900'),
            confidence=80,
        )

        for _ in range(5):
            assert 'none' not in recognition_service.generate_description(ring)

    def test_tags(self, saree):
        tags = ProductRecognitionService.generate_tags(saree)

        assert tags == [
            'traditional', 'saree', 'clothing & accessories', 'red', 'silk', 'floral',
            'fashion', 'apparel', 'clothing', 'wear',
        ]

    def test_tags_are_deduplicated_and_skip_short_words(self):
        product = RecognizedProduct(
            id='rec_1_0',
            name='Mi TV Smartphone',
            category='Electronics',
            attributes=[ProductAttribute(name='type', value='smartphone', confidence=90)],
            suggested_price=Decimal('9000'),
            confidence=90,
        )

        tags = ProductRecognitionService.generate_tags(product)

        assert tags == ['smartphone', 'electronics', 'gadget', 'device', 'tech']

    def test_to_product_create(self, recognition_service, saree):
        data = recognition_service.to_product_create(saree, stock=3)

        assert data.name == 'Traditional Saree'
        assert data.price == Decimal('2400')
        assert data.stock == 3
        assert data.category == 'Clothing & Accessories'
        assert 'fashion' in data.tags
        assert data.description
