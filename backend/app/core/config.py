"""
Centralized application configuration
"""
from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_TITLE: str = "Dukaan Seller API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Seller dashboard backend: catalog, orders, fulfillment and product recognition"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    API_DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS - Can be string (comma-separated) or JSON array
    # Example: "http://localhost:5173,https://yourdomain.com" or '["http://localhost:5173"]'
    ALLOWED_ORIGINS: Optional[str] = "http://localhost:5173,http://localhost:3000"

    def get_allowed_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS string into list"""
        if not self.ALLOWED_ORIGINS:
            return ["http://localhost:5173"]

        # Try JSON parse first (for array format)
        import json
        try:
            origins = json.loads(self.ALLOWED_ORIGINS)
            if isinstance(origins, list):
                return origins
        except (json.JSONDecodeError, ValueError):
            pass

        # Fall back to comma-separated string
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    # Simulated external calls (seconds)
    SIMULATED_LATENCY_SECONDS: float = 0.5
    PAYMENT_LATENCY_SECONDS: float = 1.5
    RECOGNITION_LATENCY_SECONDS: float = 1.5
    PAYMENT_SUCCESS_RATE: float = 0.95
    RANDOM_SEED: Optional[int] = None

    # Business rules
    FREE_SHIPPING_THRESHOLD: float = 2000
    GST_RATE: float = 0.18
    LOW_STOCK_THRESHOLD: int = 5

    # Shipping aggregator (optional)
    SHIPROCKET_BASE_URL: str = ""
    SHIPROCKET_EMAIL: str = ""
    SHIPROCKET_PASSWORD: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
