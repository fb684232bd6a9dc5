"""
Order Repository - Data Access Layer for Orders

Keeps orders in memory and returns Order domain models.
Mutators are plain state changes: lifecycle rules (allowed status
transitions, stock movements, notifications) live in
OrderLifecycleService.

Author: TM3
Date: 2026-10-17
"""
import random
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple, Dict, Iterable

from app.domain.order import (
    BuyerProfile, Order, OrderCreate, ChatOrderCreate, OrderStats, OrderStatus,
    PaymentStatus, PaymentMethod, PaymentInfo, ShippingInfo, TrackingUpdate,
)
from app.repositories.seed_data import load_seed_orders


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderRepository:
    """
    Repository for Order data access

    All order reads and writes are centralized here.
    Update methods return the updated Order, or None when the id is unknown.
    """

    def __init__(self, orders: Optional[Iterable[Order]] = None, rng: Optional[random.Random] = None):
        if orders is None:
            orders = load_seed_orders()
        self._orders: Dict[str, Order] = {order.id: order for order in orders}
        self._rng = rng or random.Random()

    def _new_id(self) -> str:
        while True:
            order_id = f"ORD{self._rng.randint(100000, 999999)}"
            if order_id not in self._orders:
                return order_id

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_by_id(self, order_id: str) -> Optional[Order]:
        """
        Find order by ID

        Args:
            order_id: Order ID (e.g. ORD123456)

        Returns:
            Order or None if not found
        """
        return self._orders.get(order_id)

    def find_all(
        self,
        status: Optional[OrderStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        customer_id: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0
    ) -> Tuple[List[Order], int]:
        """
        Find orders with filters

        Args:
            status: Filter by order status
            payment_status: Filter by payment status
            customer_id: Filter by customer
            search: Search by order id, customer name, phone or city
            limit: Maximum results to return
            offset: Number of results to skip

        Returns:
            Tuple of (list of orders, total count)
        """
        orders = list(self._orders.values())

        if status:
            orders = [o for o in orders if o.status == status]
        if payment_status:
            orders = [o for o in orders if o.payment.status == payment_status]
        if customer_id:
            orders = [o for o in orders if o.customer_id == customer_id]
        if search:
            term = search.lower()
            orders = [
                o for o in orders
                if term in o.id.lower()
                or term in o.customer_name.lower()
                or term in o.customer_phone.lower()
                or term in o.shipping_address.city.lower()
            ]

        total = len(orders)
        return orders[offset:offset + limit], total

    def find_by_status(self, status: OrderStatus) -> List[Order]:
        return [o for o in self._orders.values() if o.status == status]

    def find_by_customer(self, customer_id: str) -> List[Order]:
        return [o for o in self._orders.values() if o.customer_id == customer_id]

    def find_recent(self, limit: int = 5) -> List[Order]:
        """Newest orders first"""
        return sorted(self._orders.values(), key=lambda o: o.created_at, reverse=True)[:limit]

    def get_buyer_profile(self, customer_id: str) -> Optional[BuyerProfile]:
        """
        Profile of a customer built from their orders

        Contact details and address come from the latest order; total
        spent only counts paid orders.
        """
        orders = sorted(self.find_by_customer(customer_id), key=lambda o: o.created_at)
        if not orders:
            return None

        latest = orders[-1]
        return BuyerProfile(
            customer_id=customer_id,
            name=latest.customer_name,
            phone=latest.customer_phone,
            shipping_address=latest.shipping_address,
            order_count=len(orders),
            total_spent=sum((o.total_amount for o in orders if o.is_paid), Decimal('0')),
            last_order_at=latest.created_at,
        )

    def get_stats(self) -> OrderStats:
        """
        Get order statistics

        Revenue only counts paid orders, the average covers every order.
        """
        orders = list(self._orders.values())
        stats = OrderStats(total=len(orders))

        for status in OrderStatus:
            setattr(stats, status.value, sum(1 for o in orders if o.status == status))

        stats.total_revenue = sum((o.total_amount for o in orders if o.is_paid), Decimal('0'))
        if orders:
            stats.average_order_value = sum((o.total_amount for o in orders), Decimal('0')) / len(orders)

        return stats

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, data: OrderCreate) -> Order:
        now = _utcnow()
        order = Order(id=self._new_id(), created_at=now, updated_at=now, **dict(data))
        self._orders[order.id] = order
        return order

    def create_from_chat(self, data: ChatOrderCreate) -> Order:
        """Create a pending cash-on-delivery order, total computed from the items"""
        total_amount = sum((item.price * item.quantity for item in data.items), Decimal('0'))
        now = _utcnow()
        order = Order(
            id=self._new_id(),
            customer_id=data.customer_id,
            customer_name=data.customer_name,
            customer_phone=data.customer_phone,
            items=data.items,
            total_amount=total_amount,
            status=OrderStatus.PENDING,
            payment=PaymentInfo(status=PaymentStatus.PENDING, method=PaymentMethod.COD),
            shipping_address=data.shipping_address,
            created_at=now,
            updated_at=now,
        )
        self._orders[order.id] = order
        return order

    def update_status(self, order_id: str, status: OrderStatus) -> Optional[Order]:
        order = self._orders.get(order_id)
        if order is None:
            return None
        order.status = status
        order.updated_at = _utcnow()
        return order

    def update_payment_status(self, order_id: str, status: PaymentStatus) -> Optional[Order]:
        order = self._orders.get(order_id)
        if order is None:
            return None
        now = _utcnow()
        order.payment.status = status
        order.payment.updated_at = now
        order.updated_at = now
        return order

    def update_payment_method(
        self,
        order_id: str,
        method: PaymentMethod,
        transaction_id: Optional[str] = None
    ) -> Optional[Order]:
        order = self._orders.get(order_id)
        if order is None:
            return None
        now = _utcnow()
        order.payment.method = method
        if transaction_id:
            order.payment.transaction_id = transaction_id
        order.payment.updated_at = now
        order.updated_at = now
        return order

    def add_tracking_info(
        self,
        order_id: str,
        tracking_id: str,
        carrier: str,
        tracking_url: Optional[str] = None,
        tracking_updates: Optional[List[TrackingUpdate]] = None
    ) -> Optional[Order]:
        """Replace the order's shipping info"""
        order = self._orders.get(order_id)
        if order is None:
            return None
        order.shipping_info = ShippingInfo(
            tracking_id=tracking_id,
            carrier=carrier,
            tracking_url=tracking_url,
            tracking_updates=list(tracking_updates or []),
        )
        order.updated_at = _utcnow()
        return order

    def add_tracking_update(self, order_id: str, update: TrackingUpdate) -> Optional[Order]:
        """Append a tracking update; ignored when the order has no shipping info"""
        order = self._orders.get(order_id)
        if order is None or order.shipping_info is None:
            return None
        order.shipping_info.tracking_updates.append(update)
        order.updated_at = _utcnow()
        return order

    def update_notes(self, order_id: str, notes: str) -> Optional[Order]:
        order = self._orders.get(order_id)
        if order is None:
            return None
        order.notes = notes
        order.updated_at = _utcnow()
        return order
