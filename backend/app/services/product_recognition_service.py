"""
Product Recognition Service
Turns a product photo into catalog-ready product suggestions

The recognition model is simulated: each call waits for a configurable
latency and returns randomly drawn products from per-category templates.
Descriptions and tags are derived from the recognized attributes so a
seller can publish a suggestion with one click.

Author: TM3
Date: 2026-10-17
"""
import asyncio
import logging
import math
import random
import time
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from app.core.config import settings
from app.domain.product import ProductCreate
from app.domain.recognition import BoundingBox, ProductAttribute, RecognizedProduct

logger = logging.getLogger(__name__)

CLOTHING = 'Clothing & Accessories'
JEWELRY = 'Jewelry & Accessories'
HANDICRAFTS = 'Handicrafts'
ELECTRONICS = 'Electronics'

MIN_CONFIDENCE = 70
MAX_CONFIDENCE = 99

# Attribute name -> possible values, per category
CATEGORY_ATTRIBUTES: Dict[str, Dict[str, List[str]]] = {
    CLOTHING: {
        'material': ['cotton', 'silk', 'wool', 'polyester', 'linen'],
        'color': ['red', 'blue', 'green', 'black', 'white', 'yellow', 'pink', 'purple'],
        'size': ['S', 'M', 'L', 'XL', 'XXL'],
        'pattern': ['solid', 'striped', 'floral', 'checked', 'printed'],
        'sleeve': ['full', 'half', 'sleeveless', '3/4th'],
    },
    JEWELRY: {
        'material': ['gold', 'silver', 'platinum', 'brass', 'copper'],
        'gemstone': ['diamond', 'ruby', 'emerald', 'sapphire', 'pearl', 'none'],
        'style': ['traditional', 'modern', 'antique', 'fusion'],
        'weight': ['light', 'medium', 'heavy'],
    },
    HANDICRAFTS: {
        'material': ['wood', 'clay', 'fabric', 'metal', 'glass'],
        'technique': ['handwoven', 'handpainted', 'embroidered', 'carved', 'molded'],
        'origin': ['Rajasthan', 'Gujarat', 'Bengal', 'Kerala', 'Kashmir'],
        'type': ['decorative', 'functional', 'wearable'],
    },
    ELECTRONICS: {
        'type': ['smartphone', 'laptop', 'tablet', 'headphones', 'speaker'],
        'brand': ['Apple', 'Samsung', 'Mi', 'Sony', 'JBL'],
        'color': ['black', 'white', 'silver', 'gold', 'blue'],
        'condition': ['new', 'like new', 'good', 'fair'],
    },
}

# (name, low price, high price) in INR
PRODUCT_TEMPLATES: Dict[str, List[tuple]] = {
    CLOTHING: [
        ('Traditional Saree', 1200, 5000),
        ('Cotton Kurta', 600, 1800),
        ('Casual Shirt', 500, 1500),
        ('Formal Pants', 800, 2000),
        ('Designer Dupatta', 400, 1200),
    ],
    JEWELRY: [
        ('Handcrafted Earrings', 500, 2500),
        ('Traditional Necklace', 1500, 8000),
        ('Silver Anklet', 800, 3000),
        ('Statement Ring', 400, 1500),
        ('Wedding Jewelry Set', 5000, 25000),
    ],
    HANDICRAFTS: [
        ('Handwoven Carpet', 1500, 8000),
        ('Wooden Sculpture', 700, 3000),
        ('Embroidered Wall Hanging', 400, 2000),
        ('Ceramic Pottery', 300, 1500),
        ('Brass Decor Item', 600, 2500),
    ],
    ELECTRONICS: [
        ('Smartphone', 8000, 50000),
        ('Bluetooth Earbuds', 1500, 8000),
        ('Portable Speaker', 1000, 5000),
        ('Tablet', 15000, 60000),
        ('Smart Watch', 2000, 25000),
    ],
}

CATEGORY_TAGS: Dict[str, List[str]] = {
    CLOTHING: ['fashion', 'apparel', 'clothing', 'wear'],
    JEWELRY: ['jewelry', 'accessories', 'ornament', 'adornment'],
    HANDICRAFTS: ['handicraft', 'handmade', 'artisan', 'craft'],
    ELECTRONICS: ['electronics', 'gadget', 'device', 'tech'],
}


def _when(value: Optional[str], text: str) -> str:
    return text.format(value) if value else ''


def _gem(attrs: Dict[str, str], text: str) -> str:
    gemstone = attrs.get('gemstone')
    return text.format(gemstone) if gemstone and gemstone != 'none' else ''


# Description templates: (product name, attribute map) -> text
DESCRIPTION_TEMPLATES: Dict[str, List[Callable[[str, Dict[str, str]], str]]] = {
    CLOTHING: [
        lambda name, a: (
            f"Beautiful {a.get('color', '')} {name} made from premium {a.get('material') or 'fabric'}. "
            f"{_when(a.get('pattern'), 'Features a stylish {} pattern.')} "
            f"{_when(a.get('sleeve'), 'Has {} sleeves.')} Perfect for any occasion."
        ),
        lambda name, a: (
            f"Elegant {name} crafted with high-quality {a.get('material') or 'fabric'}. "
            f"{_when(a.get('color'), 'Available in {}.')} "
            f"{_when(a.get('pattern'), 'Showcases a {} design.')} Ideal for both casual and formal wear."
        ),
    ],
    JEWELRY: [
        lambda name, a: (
            f"Exquisite {a.get('material', '')} {name} {_gem(a, 'adorned with {}.')} "
            f"{_when(a.get('style'), 'Features a {} design.')} Perfect for adding elegance to any outfit."
        ),
        lambda name, a: (
            f"Stunning {name} made from premium {a.get('material') or 'metal'}. "
            f"{_gem(a, 'Set with beautiful {}.')} "
            f"{_when(a.get('style'), 'Crafted in {} style.')} An ideal gift for someone special."
        ),
    ],
    HANDICRAFTS: [
        lambda name, a: (
            f"Authentic {a.get('material', '')} {name} "
            f"{_when(a.get('technique'), 'that is {} by skilled artisans.')} "
            f"{_when(a.get('origin'), 'Originates from {}.')} A perfect addition to your home decor."
        ),
        lambda name, a: (
            f"Traditional {name} handcrafted from {a.get('material') or 'natural materials'}. "
            f"{_when(a.get('technique'), 'Features intricate {} work.')} "
            f"{_when(a.get('origin'), 'Sourced from the artistic traditions of {}.')} "
            f"Brings cultural richness to any space."
        ),
    ],
    ELECTRONICS: [
        lambda name, a: (
            f"Premium {a.get('brand', '')} {name} in {a.get('color') or 'sleek design'}. "
            f"{_when(a.get('condition'), 'Product is in {} condition.')} "
            f"Features the latest technology for an enhanced user experience."
        ),
        lambda name, a: (
            f"High-quality {name} from {a.get('brand') or 'a trusted brand'}. "
            f"{_when(a.get('color'), 'Available in {}.')} "
            f"{_when(a.get('condition'), 'Offered in {} condition.')} "
            f"Designed for optimal performance and reliability."
        ),
    ],
}

DEFAULT_DESCRIPTION_TEMPLATES: List[Callable[[str, Dict[str, str]], str]] = [
    lambda name, a: f"High-quality {name} with excellent craftsmanship. Perfect for daily use.",
    lambda name, a: f"Premium {name} designed for durability and style. A must-have item.",
]


class ProductRecognitionService:
    """
    Service for recognizing products in seller photos

    Randomness and latency are injectable so results are reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None, latency_seconds: Optional[float] = None):
        self.rng = rng or random.Random(settings.RANDOM_SEED)
        self.latency_seconds = (
            settings.RECOGNITION_LATENCY_SECONDS if latency_seconds is None else latency_seconds
        )

    async def analyze_image(self, image_url: str, count: int = 1) -> List[RecognizedProduct]:
        """
        Detect products in an image

        Args:
            image_url: Image to analyze
            count: Number of products in the picture

        Returns:
            One RecognizedProduct per detected product
        """
        if count < 1:
            raise ValueError("count must be at least 1")

        await asyncio.sleep(self.latency_seconds)

        products = [self.generate_random_product(index, count) for index in range(count)]
        logger.info(f"Recognized {len(products)} products in {image_url}")
        return products

    def confidence_score(self) -> int:
        return self.rng.randint(MIN_CONFIDENCE, MAX_CONFIDENCE)

    def generate_random_product(self, index: int, total: int) -> RecognizedProduct:
        category = self.rng.choice(list(PRODUCT_TEMPLATES))
        name, low, high = self.rng.choice(PRODUCT_TEMPLATES[category])
        price = self.rng.randrange(low, high)

        bounding_box = None
        if total > 1:
            per_row = math.ceil(math.sqrt(total))
            side = 0.8 / per_row
            row, col = divmod(index, per_row)
            bounding_box = BoundingBox(
                x=0.1 + col * side,
                y=0.1 + row * side,
                width=side,
                height=side,
            )

        return RecognizedProduct(
            id=f"rec_{int(time.time() * 1000)}_{index}",
            name=name,
            category=category,
            attributes=self.generate_attributes(category),
            suggested_price=Decimal(price),
            confidence=self.confidence_score(),
            bounding_box=bounding_box,
        )

    def generate_attributes(self, category: str) -> List[ProductAttribute]:
        """2 to 4 distinct attributes drawn from the category table"""
        options = CATEGORY_ATTRIBUTES.get(category, CATEGORY_ATTRIBUTES[CLOTHING])
        names = self.rng.sample(list(options), min(self.rng.randint(2, 4), len(options)))
        return [
            ProductAttribute(
                name=name,
                value=self.rng.choice(options[name]),
                confidence=self.confidence_score(),
            )
            for name in names
        ]

    def generate_description(self, product: RecognizedProduct) -> str:
        templates = DESCRIPTION_TEMPLATES.get(product.category, DEFAULT_DESCRIPTION_TEMPLATES)
        template = self.rng.choice(templates)
        text = template(product.name, product.attribute_map())
        return ' '.join(text.split())

    @staticmethod
    def generate_tags(product: RecognizedProduct) -> List[str]:
        """Search tags from name words, category and attribute values"""
        tags = [word.lower() for word in product.name.split(' ') if len(word) > 2]
        tags.append(product.category.lower())
        tags.extend(attribute.value.lower() for attribute in product.attributes)
        tags.extend(CATEGORY_TAGS.get(product.category, []))

        # dict keeps first occurrence order
        return list(dict.fromkeys(tags))

    def to_product_create(self, product: RecognizedProduct, stock: int = 1) -> ProductCreate:
        """Catalog entry for a recognized product"""
        return ProductCreate(
            name=product.name,
            price=product.suggested_price,
            description=self.generate_description(product),
            category=product.category,
            tags=self.generate_tags(product),
            stock=stock,
        )
