"""
Application container and FastAPI dependencies

One Container per process owns the in-memory repositories and the services
built on top of them. Routes receive them through Depends; tests override
get_container with a fresh Container.

Author: TM3
Date: 2026-10-17
"""
import random
from typing import Optional

from fastapi import Depends

from app.connectors.shiprocket_connector import ShiprocketConnector
from app.core.config import settings
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.services.document_service import DocumentService
from app.services.order_lifecycle_service import OrderLifecycleService
from app.services.order_processing_service import OrderProcessingService
from app.services.product_recognition_service import ProductRecognitionService


class Container:
    """Repositories and services sharing one catalog and order store"""

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        latency_seconds: Optional[float] = None,
        shipping_connector: Optional[ShiprocketConnector] = None,
    ):
        """
        Args:
            rng: Random source shared by every simulated gateway
            latency_seconds: Overrides every simulated latency (tests use 0)
            shipping_connector: Shipping aggregator, None to generate tracking IDs locally
        """
        rng = rng or random.Random(settings.RANDOM_SEED)

        self.product_repository = ProductRepository()
        self.order_repository = OrderRepository(rng=rng)
        self.processing_service = OrderProcessingService(
            self.product_repository,
            rng=rng,
            latency_seconds=latency_seconds,
            payment_latency_seconds=latency_seconds,
        )
        self.document_service = DocumentService()
        self.lifecycle_service = OrderLifecycleService(
            self.order_repository,
            self.processing_service,
            shipping_connector=shipping_connector,
        )
        self.recognition_service = ProductRecognitionService(rng=rng, latency_seconds=latency_seconds)


_container: Optional[Container] = None


def get_container() -> Container:
    global _container
    if _container is None:
        _container = Container(shipping_connector=ShiprocketConnector.from_settings())
    return _container


def reset_container(container: Optional[Container] = None) -> None:
    """Replace the process container (None rebuilds it on next use)"""
    global _container
    _container = container


def get_product_repository(container: Container = Depends(get_container)) -> ProductRepository:
    return container.product_repository


def get_order_repository(container: Container = Depends(get_container)) -> OrderRepository:
    return container.order_repository


def get_processing_service(container: Container = Depends(get_container)) -> OrderProcessingService:
    return container.processing_service


def get_document_service(container: Container = Depends(get_container)) -> DocumentService:
    return container.document_service


def get_lifecycle_service(container: Container = Depends(get_container)) -> OrderLifecycleService:
    return container.lifecycle_service


def get_recognition_service(container: Container = Depends(get_container)) -> ProductRecognitionService:
    return container.recognition_service
