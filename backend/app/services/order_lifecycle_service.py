"""
Order Lifecycle Service
Moves orders through their status machine and applies the side effects

Status machine:
    pending    -> confirmed | cancelled
    confirmed  -> processing | cancelled
    processing -> shipped | cancelled
    shipped    -> delivered
    delivered, cancelled: final

Side effects per target status:
- confirmed:  inventory must cover every item (unless skipped)
- processing: stock is taken from the catalog
- shipped:    tracking is assigned if the order has none
- delivered:  a delivered tracking update is recorded
- cancelled:  stock taken at processing is put back
Every change notifies the customer.

Changes to one order are serialized: a change waiting on stock or the
shipping aggregator holds the order, and the next one re-reads its status.

Author: TM3
Date: 2026-10-17
"""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

import httpx

from app.connectors.shiprocket_connector import ShiprocketConnector
from app.core.exceptions import (
    OrderNotFoundError, InvalidStatusTransitionError,
    InsufficientInventoryError, PaymentFailedError,
)
from app.domain.fulfillment import (
    NotificationType, NotificationPreferences, FulfillmentStatus, ShippingMethod,
)
from app.domain.order import (
    Order, OrderStatus, PaymentStatus, PaymentMethod, TrackingUpdate,
)
from app.repositories.order_repository import OrderRepository
from app.services.order_processing_service import OrderProcessingService, has_reached

logger = logging.getLogger(__name__)

DEFAULT_CARRIER = 'AutoDukaan Logistics'
TRACKING_URL = 'https://tracking.autodukaan.com/{tracking_id}'
DISPATCH_HUB = 'Mumbai Distribution Center'
SORTING_CENTER = 'Mumbai Sorting Center'

ALLOWED_TRANSITIONS: Dict[OrderStatus, List[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.CONFIRMED, OrderStatus.CANCELLED],
    OrderStatus.CONFIRMED: [OrderStatus.PROCESSING, OrderStatus.CANCELLED],
    OrderStatus.PROCESSING: [OrderStatus.SHIPPED, OrderStatus.CANCELLED],
    OrderStatus.SHIPPED: [OrderStatus.DELIVERED],
    OrderStatus.DELIVERED: [],
    OrderStatus.CANCELLED: [],
}

STATUS_NOTIFICATIONS: Dict[OrderStatus, NotificationType] = {
    OrderStatus.CONFIRMED: NotificationType.ORDER_CONFIRMED,
    OrderStatus.PROCESSING: NotificationType.ORDER_PROCESSING,
    OrderStatus.SHIPPED: NotificationType.ORDER_SHIPPED,
    OrderStatus.DELIVERED: NotificationType.ORDER_DELIVERED,
    OrderStatus.CANCELLED: NotificationType.ORDER_CANCELLED,
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderLifecycleService:
    """
    Service for order status changes

    The repository accepts any status; this service is the only place
    that decides which changes are legal.
    """

    def __init__(
        self,
        order_repository: OrderRepository,
        processing_service: OrderProcessingService,
        shipping_connector: Optional[ShiprocketConnector] = None,
    ):
        self.orders = order_repository
        self.processing = processing_service
        self.shipping_connector = shipping_connector
        self._locks: Dict[str, asyncio.Lock] = {}

    @staticmethod
    def allowed_transitions(status: OrderStatus) -> List[OrderStatus]:
        return list(ALLOWED_TRANSITIONS[status])

    def _lock(self, order_id: str) -> asyncio.Lock:
        return self._locks.setdefault(order_id, asyncio.Lock())

    def get_order(self, order_id: str) -> Order:
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    async def transition(
        self,
        order_id: str,
        status: OrderStatus,
        reason: Optional[str] = None,
        require_inventory: bool = True,
        preferences: Optional[NotificationPreferences] = None,
        lang: str = 'en',
    ) -> Order:
        """
        Change an order's status

        Args:
            order_id: Order to update
            status: Target status
            reason: Cancellation reason, stored as the order notes
            require_inventory: Refuse to confirm orders with items out of stock
            preferences: Customer notification channels
            lang: Notification language

        Raises:
            OrderNotFoundError: unknown order
            InvalidStatusTransitionError: status change not allowed
            InsufficientInventoryError: confirming with items out of stock
        """
        async with self._lock(order_id):
            return await self._transition(order_id, status, reason, require_inventory, preferences, lang)

    async def _transition(
        self,
        order_id: str,
        status: OrderStatus,
        reason: Optional[str] = None,
        require_inventory: bool = True,
        preferences: Optional[NotificationPreferences] = None,
        lang: str = 'en',
    ) -> Order:
        """Status change for a caller already holding the order's lock"""
        order = self.get_order(order_id)
        current = order.status
        allowed = ALLOWED_TRANSITIONS[current]

        if status not in allowed:
            raise InvalidStatusTransitionError(
                order_id, current.value, status.value, [s.value for s in allowed]
            )

        if status == OrderStatus.CONFIRMED and require_inventory:
            check = self.processing.check_order_inventory(order)
            if not check.in_stock:
                raise InsufficientInventoryError(order_id, check.out_of_stock_items)

        if status == OrderStatus.PROCESSING:
            await self.processing.update_inventory(order.items)

        if status == OrderStatus.CANCELLED:
            if has_reached(order, OrderStatus.PROCESSING):
                await self.processing.update_inventory(order.items, restock=True)
            if reason:
                self.orders.update_notes(order_id, reason)

        if status == OrderStatus.SHIPPED and order.shipping_info is None:
            await self._assign_tracking(order)

        order = self.orders.update_status(order_id, status)
        logger.info(f"Order {order_id} moved from {current.value} to {status.value}")

        if status == OrderStatus.DELIVERED and order.shipping_info is not None:
            self.orders.add_tracking_update(order_id, TrackingUpdate(
                status='delivered',
                location=order.shipping_address.city,
                timestamp=_utcnow(),
                description='Package has been delivered',
            ))

        await self.processing.send_notification(STATUS_NOTIFICATIONS[status], order, preferences, lang)
        return order

    async def _assign_tracking(self, order: Order) -> None:
        """Book the shipment with the aggregator, or generate our own tracking ID"""
        tracking_id = None
        carrier = DEFAULT_CARRIER

        if self.shipping_connector is not None:
            try:
                booking = await self.shipping_connector.create_order(order)
                tracking_id = booking['awb_code']
                carrier = booking.get('courier_name') or DEFAULT_CARRIER
            except (httpx.HTTPError, ValueError, KeyError) as e:
                logger.warning(f"Shipment booking failed for order {order.id}, using local tracking ID: {e!r}")

        if not tracking_id:
            tracking_id = self.processing.generate_tracking_id()

        self.orders.add_tracking_info(
            order.id,
            tracking_id=tracking_id,
            carrier=carrier,
            tracking_url=TRACKING_URL.format(tracking_id=tracking_id),
            tracking_updates=[TrackingUpdate(
                status='shipped',
                location=DISPATCH_HUB,
                timestamp=_utcnow(),
                description='Package has been shipped',
            )],
        )
        logger.info(f"Tracking {tracking_id} ({carrier}) assigned to order {order.id}")

    async def add_tracking(
        self,
        order_id: str,
        tracking_id: str,
        carrier: str = DEFAULT_CARRIER,
        tracking_url: Optional[str] = None,
    ) -> Order:
        """
        Attach a seller-provided tracking number

        Confirmed and processing orders are shipped right away
        (confirmed orders pass through processing first).
        """
        async with self._lock(order_id):
            order = self.get_order(order_id)

            self.orders.add_tracking_info(
                order_id,
                tracking_id=tracking_id,
                carrier=carrier,
                tracking_url=tracking_url or TRACKING_URL.format(tracking_id=tracking_id),
                tracking_updates=[TrackingUpdate(
                    status='processing',
                    location=SORTING_CENTER,
                    timestamp=_utcnow(),
                    description='Package has been processed',
                )],
            )

            if order.status == OrderStatus.CONFIRMED:
                order = await self._transition(order_id, OrderStatus.PROCESSING)
            if order.status == OrderStatus.PROCESSING:
                order = await self._transition(order_id, OrderStatus.SHIPPED)

            return order

    async def mark_payment(self, order_id: str, status: PaymentStatus) -> Order:
        """Record a payment status reported by the seller"""
        async with self._lock(order_id):
            return await self._mark_payment(order_id, status)

    async def _mark_payment(self, order_id: str, status: PaymentStatus) -> Order:
        self.get_order(order_id)
        order = self.orders.update_payment_status(order_id, status)
        logger.info(f"Order {order_id} payment marked {status.value}")

        if status == PaymentStatus.PAID:
            await self.processing.send_notification(NotificationType.PAYMENT_RECEIVED, order)
        return order

    async def pay(
        self,
        order_id: str,
        method: PaymentMethod,
        transaction_id: Optional[str] = None,
    ) -> Order:
        """
        Charge an order through the payment gateway

        Paying an order that is already paid returns it unchanged.

        Raises:
            PaymentFailedError: the gateway declined the payment
        """
        async with self._lock(order_id):
            order = self.get_order(order_id)
            if order.is_paid:
                return order

            result = await self.processing.process_payment(order, method, transaction_id)
            if not result.success:
                self.orders.update_payment_status(order_id, PaymentStatus.FAILED)
                raise PaymentFailedError(order_id, result.error_message)

            self.orders.update_payment_method(order_id, method, result.transaction_id)
            return await self._mark_payment(order_id, PaymentStatus.PAID)

    def fulfillment_status(self, order: Order) -> FulfillmentStatus:
        """Picking/packing/shipping flags mirrored from the order status"""
        info = order.shipping_info
        processing_update = info.find_update('processing') if info else None
        shipped_update = info.find_update('shipped') if info else None
        delivered_update = info.find_update('delivered') if info else None

        is_picked = has_reached(order, OrderStatus.PROCESSING)
        is_shipped = has_reached(order, OrderStatus.SHIPPED)
        is_delivered = order.status == OrderStatus.DELIVERED

        picked_at = None
        if is_picked:
            picked_at = processing_update.timestamp if processing_update else order.updated_at

        shipped_at = None
        if is_shipped:
            shipped_at = shipped_update.timestamp if shipped_update else order.updated_at

        status = FulfillmentStatus(
            is_picked=is_picked,
            is_packed=is_picked,
            is_labeled=is_shipped,
            is_shipped=is_shipped,
            is_delivered=is_delivered,
            picked_at=picked_at,
            packed_at=picked_at,
            labeled_at=shipped_at,
            shipped_at=shipped_at,
            delivered_at=(delivered_update.timestamp if delivered_update else order.updated_at) if is_delivered else None,
        )

        if is_shipped and not is_delivered:
            if info and info.tracking_updates:
                status.current_location = info.tracking_updates[-1].location
            status.estimated_delivery = self.processing.estimate_delivery_date(
                order, ShippingMethod.STANDARD, now=shipped_at
            ).latest

        return status
