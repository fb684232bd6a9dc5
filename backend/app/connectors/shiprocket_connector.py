"""
Shiprocket API Connector
Books shipments with the shipping aggregator and reads tracking

API CONFIGURATION:
- Base URL: SHIPROCKET_BASE_URL (e.g. http://localhost:3001 for the mock server)

AUTHENTICATION:
- Login: POST /shiprocket/auth/login
  - Body: {"email": "...", "password": "..."}
  - Returns: {"token": "..."}
- Order endpoints require the token as Bearer in the Authorization header

ENDPOINTS:
- POST /shiprocket/orders/create/adhoc - Book a shipment, returns AWB code
- GET  /shiprocket/orders/track/{shipment_id} - Tracking data (no auth)

Author: TM3
Date: 2026-10-17
"""
import logging
from typing import Dict, Optional, Any

import httpx

from app.core.config import settings
from app.domain.order import Order, PaymentMethod

logger = logging.getLogger(__name__)


class ShiprocketConnector:
    """
    Connector for the Shiprocket shipping aggregator

    Handles:
    - Authentication (token-based)
    - Shipment booking (returns AWB used as tracking ID)
    - Shipment tracking
    """

    LOGIN_PATH = "/shiprocket/auth/login"
    CREATE_ORDER_PATH = "/shiprocket/orders/create/adhoc"
    TRACK_PATH = "/shiprocket/orders/track/{shipment_id}"

    def __init__(
        self,
        base_url: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
    ):
        """
        Initialize Shiprocket connector

        Args:
            base_url: Aggregator base URL
            email: Account email
            password: Account password
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = (base_url or settings.SHIPROCKET_BASE_URL).rstrip('/')
        self.email = email or settings.SHIPROCKET_EMAIL
        self.password = password or settings.SHIPROCKET_PASSWORD
        self._transport = transport
        self._timeout = timeout
        self._token: Optional[str] = None

        if not self.base_url:
            raise ValueError(
                "Shiprocket not configured. Set SHIPROCKET_BASE_URL environment variable"
            )

    @classmethod
    def from_settings(cls) -> Optional["ShiprocketConnector"]:
        """Connector built from settings, or None when not configured"""
        if not settings.SHIPROCKET_BASE_URL:
            return None
        return cls()

    @property
    def _headers(self) -> Dict[str, str]:
        """Get headers with authentication token"""
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(base_url=self.base_url, transport=self._transport, timeout=self._timeout)

    async def login(self) -> bool:
        """
        Authenticate with Shiprocket

        Returns:
            True if login successful
        """
        payload = {"email": self.email, "password": self.password}

        async with self._client() as client:
            try:
                response = await client.post(self.LOGIN_PATH, json=payload)
                response.raise_for_status()
                data = response.json()
            except httpx.HTTPStatusError as e:
                logger.error(f"Shiprocket login failed: {e.response.status_code} - {e.response.text}")
                raise

        self._token = data.get("token")
        if not self._token:
            logger.error("Shiprocket login response missing token")
            return False

        logger.info(f"Shiprocket login successful for {self.email}")
        return True

    async def _ensure_authenticated(self):
        """Ensure we have a valid authentication token, raising ValueError if login yields none"""
        if not self._token and not await self.login():
            raise ValueError("Shiprocket login failed: no token returned")

    @staticmethod
    def build_order_payload(order: Order) -> Dict[str, Any]:
        """Map an order to the aggregator's adhoc order format"""
        address = order.shipping_address
        return {
            "order_id": order.id,
            "order_date": order.created_at.isoformat(),
            "pickup_location": "Primary",
            "billing_customer_name": order.customer_name,
            "billing_address": address.street,
            "billing_city": address.city,
            "billing_pincode": address.pincode,
            "billing_state": address.state,
            "billing_country": "India",
            "billing_phone": order.customer_phone,
            "shipping_is_billing": True,
            "order_items": [
                {
                    "name": item.name,
                    "sku": item.product_id,
                    "units": item.quantity,
                    "selling_price": float(item.price),
                }
                for item in order.items
            ],
            "payment_method": "COD" if order.payment.method == PaymentMethod.COD else "Prepaid",
            "sub_total": float(order.total_amount),
        }

    async def create_order(self, order: Order) -> Dict[str, Any]:
        """
        Book a shipment for an order

        Returns:
            Dict with shipment_id, awb_code and courier_name
            (awb_code is None until the aggregator assigns a courier)
        """
        await self._ensure_authenticated()

        async with self._client() as client:
            try:
                response = await client.post(
                    self.CREATE_ORDER_PATH,
                    json=self.build_order_payload(order),
                    headers=self._headers,
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                logger.error(f"Shiprocket booking failed for {order.id}: {e.response.status_code} - {e.response.text}")
                raise

        data = response.json()
        awb_code = data.get("awb_code")
        logger.info(f"Shipment booked for order {order.id}: AWB {awb_code or 'pending'}")
        return {
            "shipment_id": data.get("shipment_id"),
            "awb_code": str(awb_code) if awb_code else None,
            "courier_name": data.get("courier_name"),
        }

    async def track(self, shipment_id: int) -> Dict[str, Any]:
        """
        Get tracking data for a shipment

        Returns:
            The tracking_data object from the aggregator
        """
        async with self._client() as client:
            response = await client.get(self.TRACK_PATH.format(shipment_id=shipment_id))
            response.raise_for_status()
            return response.json().get("tracking_data", {})
