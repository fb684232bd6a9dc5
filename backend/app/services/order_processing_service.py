"""
Order Processing Service
Business rules applied to an order between receipt and delivery

Handles:
- Shipping cost and delivery estimates
- Inventory availability checks and stock movements
- Customer-facing order timeline
- Notification content and dispatch (email / SMS / WhatsApp)
- Payment gateway calls and tracking ID generation

Payment and notification gateways are simulated: calls wait for a
configurable latency and succeed (payments with a configurable rate).

Author: TM3
Date: 2026-10-17
"""
import asyncio
import logging
import random
import string
import time
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Dict, List, Optional, Sequence

from app.core.config import settings
from app.domain.fulfillment import (
    ShippingMethod, NotificationType, NotificationPreferences, NotificationContent,
    InventoryCheckResult, OutOfStockItem, TimelineEvent, DeliveryWindow, PaymentResult,
)
from app.domain.order import Order, OrderItem, OrderStatus, PaymentStatus, PaymentMethod
from app.domain.product import Product
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)

# Shipping rates (INR)
SHIPPING_RATES: Dict[ShippingMethod, Decimal] = {
    ShippingMethod.STANDARD: Decimal('40'),
    ShippingMethod.EXPRESS: Decimal('120'),
    ShippingMethod.SAME_DAY: Decimal('200'),
}

# Shipping time estimates (min, max days)
SHIPPING_TIMES: Dict[ShippingMethod, tuple] = {
    ShippingMethod.STANDARD: (3, 5),
    ShippingMethod.EXPRESS: (1, 2),
    ShippingMethod.SAME_DAY: (0, 0),
}

LARGE_ORDER_ITEM_COUNT = 5
LARGE_ORDER_FEE = Decimal('30')

METRO_CITIES = ['Mumbai', 'Delhi', 'Bangalore', 'Chennai', 'Kolkata', 'Hyderabad']

TRACKING_ID_PREFIX = 'AD'
TRACKING_ID_CHARS = string.ascii_uppercase + string.digits

PAYMENT_FAILED_MESSAGE = 'Payment failed. Please try again.'

# Progress of a non-cancelled order
STATUS_RANK = {
    OrderStatus.PENDING: 0,
    OrderStatus.CONFIRMED: 1,
    OrderStatus.PROCESSING: 2,
    OrderStatus.SHIPPED: 3,
    OrderStatus.DELIVERED: 4,
}


def has_reached(order: Order, status: OrderStatus) -> bool:
    """True when a non-cancelled order is at `status` or further along"""
    if order.status == OrderStatus.CANCELLED:
        return False
    return STATUS_RANK[order.status] >= STATUS_RANK[status]


def format_inr(amount: Decimal) -> str:
    """₹1499 for whole amounts, ₹1499.50 otherwise"""
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return f"₹{int(amount)}"
    return f"₹{amount:.2f}"


# Notification templates per language. Placeholders: {order_id}, {amount},
# {tracking_line}, {reason_line}
NOTIFICATION_TEMPLATES: Dict[NotificationType, Dict[str, Dict[str, str]]] = {
    NotificationType.ORDER_CREATED: {
        'en': {
            'subject': 'New Order Received',
            'body': "Thank you for your order #{order_id}. We've received your order and are processing it now.",
        },
        'hi': {
            'subject': 'नया ऑर्डर प्राप्त हुआ',
            'body': 'आपके ऑर्डर #{order_id} के लिए धन्यवाद। हमें आपका ऑर्डर मिल गया है और हम इसे प्रोसेस कर रहे हैं।',
        },
    },
    NotificationType.PAYMENT_RECEIVED: {
        'en': {
            'subject': 'Payment Received',
            'body': "We've received your payment of {amount} for order #{order_id}.",
        },
        'hi': {
            'subject': 'भुगतान प्राप्त हुआ',
            'body': 'हमें आपके ऑर्डर #{order_id} के लिए {amount} का भुगतान प्राप्त हुआ है।',
        },
    },
    NotificationType.ORDER_CONFIRMED: {
        'en': {
            'subject': 'Order Confirmed',
            'body': 'Good news! Your order #{order_id} has been confirmed and is being prepared for shipping.',
        },
        'hi': {
            'subject': 'ऑर्डर की पुष्टि हुई',
            'body': 'अच्छी खबर! आपका ऑर्डर #{order_id} कन्फर्म हो गया है और शिपिंग के लिए तैयार किया जा रहा है।',
        },
    },
    NotificationType.ORDER_PROCESSING: {
        'en': {
            'subject': 'Order Processing',
            'body': "We're now processing your order #{order_id}. We'll notify you once it ships.",
        },
        'hi': {
            'subject': 'ऑर्डर प्रोसेसिंग',
            'body': 'हम अब आपका ऑर्डर #{order_id} प्रोसेस कर रहे हैं। जब यह शिप होगा, तब हम आपको सूचित करेंगे।',
        },
    },
    NotificationType.ORDER_SHIPPED: {
        'en': {
            'subject': 'Order Shipped',
            'body': 'Your order #{order_id} has been shipped! {tracking_line}',
            'tracking_line': 'Track your package with tracking ID: {tracking_id}',
        },
        'hi': {
            'subject': 'ऑर्डर शिप हो गया',
            'body': 'आपका ऑर्डर #{order_id} शिप हो गया है! {tracking_line}',
            'tracking_line': 'ट्रैकिंग आईडी के साथ अपने पैकेज को ट्रैक करें: {tracking_id}',
        },
    },
    NotificationType.ORDER_DELIVERED: {
        'en': {
            'subject': 'Order Delivered',
            'body': 'Your order #{order_id} has been delivered! We hope you enjoy your purchase.',
        },
        'hi': {
            'subject': 'ऑर्डर डिलीवर हो गया',
            'body': 'आपका ऑर्डर #{order_id} डिलीवर हो गया है! हमें आशा है कि आप अपनी खरीदारी का आनंद लेंगे।',
        },
    },
    NotificationType.ORDER_CANCELLED: {
        'en': {
            'subject': 'Order Cancelled',
            'body': 'Your order #{order_id} has been cancelled. {reason_line}',
            'reason_line': 'Reason: {reason}',
        },
        'hi': {
            'subject': 'ऑर्डर रद्द हो गया',
            'body': 'आपका ऑर्डर #{order_id} रद्द कर दिया गया है। {reason_line}',
            'reason_line': 'कारण: {reason}',
        },
    },
}


class OrderProcessingService:
    """
    Service for order processing rules

    Pure calculations (shipping, inventory check, timeline, notification
    content) never touch state. The async methods stand in for external
    gateways and for stock updates on the product repository.
    """

    def __init__(
        self,
        product_repository: ProductRepository,
        rng: Optional[random.Random] = None,
        latency_seconds: Optional[float] = None,
        payment_latency_seconds: Optional[float] = None,
        payment_success_rate: Optional[float] = None,
        free_shipping_threshold: Optional[float] = None,
    ):
        self.product_repository = product_repository
        self.rng = rng or random.Random(settings.RANDOM_SEED)
        self.latency_seconds = settings.SIMULATED_LATENCY_SECONDS if latency_seconds is None else latency_seconds
        self.payment_latency_seconds = (
            settings.PAYMENT_LATENCY_SECONDS if payment_latency_seconds is None else payment_latency_seconds
        )
        self.payment_success_rate = (
            settings.PAYMENT_SUCCESS_RATE if payment_success_rate is None else payment_success_rate
        )
        threshold = settings.FREE_SHIPPING_THRESHOLD if free_shipping_threshold is None else free_shipping_threshold
        self.free_shipping_threshold = Decimal(str(threshold))

        # Every notification dispatched, newest last
        self.outbox: List[Dict] = []

    # ------------------------------------------------------------------
    # Shipping
    # ------------------------------------------------------------------

    def calculate_shipping(self, order: Order, method: ShippingMethod) -> Decimal:
        """
        Shipping cost for an order

        Base rate per method, plus a fee for more than 5 units.
        Orders above the free shipping threshold ship free.
        """
        if order.total_amount > self.free_shipping_threshold:
            return Decimal('0')

        shipping_cost = SHIPPING_RATES[method]
        if order.total_quantity > LARGE_ORDER_ITEM_COUNT:
            shipping_cost += LARGE_ORDER_FEE

        return shipping_cost

    @staticmethod
    def calculate_delivery_estimate(method: ShippingMethod, now: Optional[datetime] = None) -> DeliveryWindow:
        """Delivery window for a shipping method, counted from now"""
        now = now or datetime.now(timezone.utc)
        min_days, max_days = SHIPPING_TIMES[method]
        return DeliveryWindow(
            earliest=now + timedelta(days=min_days),
            latest=now + timedelta(days=max_days),
        )

    @staticmethod
    def is_metro_city(city: str) -> bool:
        city = city.lower()
        return any(metro.lower() in city for metro in METRO_CITIES)

    def estimate_delivery_date(
        self,
        order: Order,
        method: ShippingMethod,
        now: Optional[datetime] = None
    ) -> DeliveryWindow:
        """
        Delivery window for a specific order

        Deliveries outside metro cities take one extra day.
        """
        window = self.calculate_delivery_estimate(method, now)
        if self.is_metro_city(order.shipping_address.city):
            return window

        extra = timedelta(days=1)
        return DeliveryWindow(earliest=window.earliest + extra, latest=window.latest + extra)

    # ------------------------------------------------------------------
    # Inventory
    # ------------------------------------------------------------------

    @staticmethod
    def check_inventory(items: Sequence[OrderItem], products: Sequence[Product]) -> InventoryCheckResult:
        """
        Check every order item against catalog stock

        Items whose product is missing from the catalog count as
        out of stock with nothing available.
        """
        by_id = {product.id: product for product in products}
        out_of_stock_items = []

        for item in items:
            product = by_id.get(item.product_id)

            if product is None:
                out_of_stock_items.append(OutOfStockItem(
                    id=item.product_id,
                    name=item.name,
                    requested=item.quantity,
                    available=0,
                ))
                continue

            if product.stock < item.quantity:
                out_of_stock_items.append(OutOfStockItem(
                    id=product.id,
                    name=product.name,
                    requested=item.quantity,
                    available=product.stock,
                ))

        return InventoryCheckResult(
            in_stock=not out_of_stock_items,
            out_of_stock_items=out_of_stock_items,
        )

    def check_order_inventory(self, order: Order) -> InventoryCheckResult:
        """check_inventory against the live catalog"""
        products = self.product_repository.find_many(item.product_id for item in order.items)
        return self.check_inventory(order.items, products)

    async def update_inventory(self, items: Sequence[OrderItem], restock: bool = False) -> bool:
        """
        Move stock for the given items

        Args:
            items: Order items
            restock: Put units back instead of removing them

        Returns:
            True once stock has been updated
        """
        await asyncio.sleep(self.latency_seconds)

        for item in items:
            quantity = -item.quantity if restock else item.quantity
            product = self.product_repository.update_stock(item.product_id, quantity)
            if product is None:
                logger.warning(f"Stock not updated: product {item.product_id} ({item.name}) not in catalog")

        logger.info(f"Inventory {'restocked' if restock else 'updated'} for {len(items)} order items")
        return True

    # ------------------------------------------------------------------
    # Timeline
    # ------------------------------------------------------------------

    def generate_order_timeline(self, order: Order) -> List[TimelineEvent]:
        """
        Customer-facing timeline of an order

        Steps not reached yet are included with is_completed=False so the
        customer can see what comes next.
        """
        timeline = [
            TimelineEvent(
                status='Order Placed',
                date=order.created_at,
                description='Your order has been received',
                is_completed=True,
            )
        ]

        amount = format_inr(order.total_amount)
        if order.payment.status == PaymentStatus.PAID:
            timeline.append(TimelineEvent(
                status='Payment Confirmed',
                date=order.payment.updated_at or order.created_at,
                description=f"Payment of {amount} received via {order.payment.method.value}",
                is_completed=True,
            ))
        elif order.payment.status == PaymentStatus.PENDING:
            timeline.append(TimelineEvent(
                status='Payment Pending',
                date=order.created_at,
                description=f"Waiting for payment of {amount}",
                is_completed=False,
            ))

        if order.status == OrderStatus.CANCELLED:
            timeline.append(TimelineEvent(
                status='Order Cancelled',
                date=order.updated_at,
                description=order.notes or 'Order was cancelled',
                is_completed=True,
            ))
            return timeline

        if order.status == OrderStatus.PENDING:
            return timeline

        shipping_info = order.shipping_info

        timeline.append(TimelineEvent(
            status='Order Confirmed',
            date=order.updated_at,
            description='Your order has been confirmed and is being prepared',
            is_completed=has_reached(order, OrderStatus.CONFIRMED),
        ))

        timeline.append(TimelineEvent(
            status='Order Processing',
            date=order.updated_at,
            description='Your order is being processed and packed',
            is_completed=has_reached(order, OrderStatus.PROCESSING),
        ))

        if has_reached(order, OrderStatus.PROCESSING):
            shipped_update = shipping_info.find_update('shipped') if shipping_info else None
            if shipping_info and shipping_info.tracking_id:
                description = f"Your order has been shipped. Tracking ID: {shipping_info.tracking_id}"
            else:
                description = 'Your order has been shipped'
            timeline.append(TimelineEvent(
                status='Order Shipped',
                date=shipped_update.timestamp if shipped_update else order.created_at + timedelta(hours=24),
                description=description,
                is_completed=has_reached(order, OrderStatus.SHIPPED),
            ))

        if has_reached(order, OrderStatus.SHIPPED):
            delivered_update = shipping_info.find_update('delivered') if shipping_info else None
            timeline.append(TimelineEvent(
                status='Order Delivered',
                date=delivered_update.timestamp if delivered_update else order.created_at + timedelta(days=4),
                description='Your order has been delivered',
                is_completed=has_reached(order, OrderStatus.DELIVERED),
            ))

        return timeline

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    @staticmethod
    def generate_notification_content(
        notification_type: NotificationType,
        order: Order,
        lang: str = 'en'
    ) -> NotificationContent:
        """
        Subject and body for an order event

        Falls back to English when the language has no template.
        """
        templates = NOTIFICATION_TEMPLATES[notification_type]
        template = templates.get(lang) or templates['en']

        tracking_line = ''
        if 'tracking_line' in template and order.shipping_info and order.shipping_info.tracking_id:
            tracking_line = template['tracking_line'].format(tracking_id=order.shipping_info.tracking_id)

        reason_line = ''
        if 'reason_line' in template and order.notes:
            reason_line = template['reason_line'].format(reason=order.notes)

        body = template['body'].format(
            order_id=order.id,
            amount=format_inr(order.total_amount),
            tracking_line=tracking_line,
            reason_line=reason_line,
        )
        return NotificationContent(subject=template['subject'], body=body.strip())

    async def send_notification(
        self,
        notification_type: NotificationType,
        order: Order,
        preferences: Optional[NotificationPreferences] = None,
        lang: str = 'en'
    ) -> bool:
        """
        Send an order event to the customer on every enabled channel

        Returns:
            True once dispatched
        """
        preferences = preferences or NotificationPreferences()
        content = self.generate_notification_content(notification_type, order, lang)
        channels = preferences.enabled_channels()

        await asyncio.sleep(self.latency_seconds)

        for channel in channels:
            self.outbox.append({
                'type': notification_type.value,
                'order_id': order.id,
                'channel': channel,
                'recipient': order.customer_phone,
                'subject': content.subject,
                'body': content.body,
                'sent_at': datetime.now(timezone.utc),
            })

        logger.info(f"Notification sent: {notification_type.value} for order {order.id} via {channels}")
        return True

    # ------------------------------------------------------------------
    # Payments and tracking
    # ------------------------------------------------------------------

    async def process_payment(
        self,
        order: Order,
        method: PaymentMethod,
        transaction_id: Optional[str] = None
    ) -> PaymentResult:
        """
        Charge an order through the payment gateway

        Returns:
            PaymentResult with the transaction ID on success
        """
        await asyncio.sleep(self.payment_latency_seconds)

        if self.rng.random() < self.payment_success_rate:
            txn = transaction_id or f"txn_{int(time.time() * 1000)}"
            logger.info(f"Payment succeeded for order {order.id} via {method.value}: {txn}")
            return PaymentResult(success=True, transaction_id=txn)

        logger.warning(f"Payment failed for order {order.id} via {method.value}")
        return PaymentResult(success=False, error_message=PAYMENT_FAILED_MESSAGE)

    def generate_tracking_id(self) -> str:
        """AD followed by 10 random uppercase letters/digits"""
        suffix = ''.join(self.rng.choice(TRACKING_ID_CHARS) for _ in range(10))
        return f"{TRACKING_ID_PREFIX}{suffix}"
