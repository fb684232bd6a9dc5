"""
Dukaan Seller Platform - Backend API
Catalog, orders, fulfillment and product recognition for small sellers
"""
import logging
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import products, orders, recognition, buyers
from app.core.config import settings
from app.core.dependencies import Container, get_container

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    debug=settings.API_DEBUG,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_allowed_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

# Include API routers
app.include_router(products.router, prefix="/api/v1/products", tags=["Products"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])
app.include_router(recognition.router, prefix="/api/v1/recognition", tags=["Recognition"])
app.include_router(buyers.router, prefix="/api/v1/buyer", tags=["Buyers"])


@app.get("/")
async def root():
    """Root endpoint - API status"""
    return {
        "message": "Dukaan Seller API",
        "status": "online",
        "version": settings.API_VERSION,
        "description": settings.API_DESCRIPTION
    }


@app.get("/health")
async def health(container: Container = Depends(get_container)):
    """Health check endpoint for monitoring"""
    connector = container.lifecycle_service.shipping_connector

    return {
        "status": "healthy",
        "service": "dukaan-api",
        "version": settings.API_VERSION,
        "store": {
            "products": container.product_repository.find_all(limit=1)[1],
            "orders": container.order_repository.find_all(limit=1)[1],
        },
        "integrations": {
            "shiprocket": "configured" if connector is not None else "not_configured"
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.API_DEBUG)
