"""
Order Domain Models

Represents order-related entities in the seller dashboard.
These are the single source of truth for order data structure.

Author: TM3
Date: 2026-10-17
"""
from enum import Enum
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from decimal import Decimal


class OrderStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


class PaymentMethod(str, Enum):
    UPI = "upi"
    COD = "cod"
    CARD = "card"
    BANK_TRANSFER = "bank_transfer"


class OrderItem(BaseModel):
    """
    Order Item domain model - a line item in an order

    Name and price are captured at order time and do not follow later
    catalog edits.
    """

    product_id: str = Field(..., description="Reference to product catalog")
    name: str = Field(..., description="Product name at order time")
    image: Optional[str] = Field(None, description="Product image URL")
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    price: Decimal = Field(..., description="Price per unit", ge=0)
    variant: Optional[str] = Field(None, description="Selected variant (e.g. 'M / Blue')")

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data['price'] = float(data['price'])
        data['line_total'] = float(self.line_total)
        return data


class ShippingAddress(BaseModel):
    name: str
    phone: str
    street: str
    city: str
    state: str
    pincode: str


class TrackingUpdate(BaseModel):
    """A single scan/event reported by the carrier"""

    status: str = Field(..., description="Tracking status (processing, shipped, delivered, ...)")
    location: Optional[str] = None
    timestamp: datetime
    description: Optional[str] = None


class ShippingInfo(BaseModel):
    tracking_id: str
    carrier: str
    tracking_url: Optional[str] = None
    tracking_updates: List[TrackingUpdate] = Field(default_factory=list)

    def find_update(self, status: str) -> Optional[TrackingUpdate]:
        """First tracking update with the given status"""
        for update in self.tracking_updates:
            if update.status == status:
                return update
        return None


class PaymentInfo(BaseModel):
    status: PaymentStatus = PaymentStatus.PENDING
    method: PaymentMethod = PaymentMethod.COD
    transaction_id: Optional[str] = None
    updated_at: Optional[datetime] = None


class Order(BaseModel):
    """
    Order domain model - represents a customer order

    Fields:
        id: Order ID (ORD + 6 digits)
        customer_id: Reference to customer
        customer_name: Customer name
        customer_phone: Customer phone

        items: Ordered line items
        total_amount: Final order total (INR)

        status: Order lifecycle status
        payment: Payment status, method and transaction
        shipping_address: Delivery address
        shipping_info: Carrier and tracking (once shipped)
        notes: Seller/customer notes, also holds the cancellation reason

        created_at: When order was placed
        updated_at: When order was last updated
    """

    id: str = Field(..., description="Order ID")
    customer_id: str = Field(..., description="Customer ID")
    customer_name: str = Field(..., description="Customer name")
    customer_phone: str = Field(..., description="Customer phone")

    items: List[OrderItem] = Field(default_factory=list, description="Order items")
    total_amount: Decimal = Field(..., description="Total order amount", ge=0)

    status: OrderStatus = Field(OrderStatus.PENDING, description="Order status")
    payment: PaymentInfo = Field(default_factory=PaymentInfo)
    shipping_address: ShippingAddress
    shipping_info: Optional[ShippingInfo] = None
    notes: Optional[str] = None

    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = ConfigDict(from_attributes=True)

    # Computed properties
    @property
    def item_count(self) -> int:
        """Total number of line items in order"""
        return len(self.items)

    @property
    def total_quantity(self) -> int:
        """Total quantity of all items"""
        return sum(item.quantity for item in self.items)

    @property
    def subtotal(self) -> Decimal:
        return sum((item.line_total for item in self.items), Decimal('0'))

    @property
    def is_paid(self) -> bool:
        """Check if order is paid"""
        return self.payment.status == PaymentStatus.PAID

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Returns dict with all fields plus computed properties
        """
        data = self.model_dump(mode='json')

        data['item_count'] = self.item_count
        data['total_quantity'] = self.total_quantity
        data['is_paid'] = self.is_paid

        # Convert Decimal to float for JSON compatibility
        data['total_amount'] = float(self.total_amount)
        data['items'] = [item.to_dict() for item in self.items]

        return data


class OrderCreate(BaseModel):
    """Schema for creating a new order (id and timestamps are assigned)"""
    customer_id: str
    customer_name: str
    customer_phone: str
    items: List[OrderItem] = Field(..., min_length=1)
    total_amount: Decimal = Field(..., ge=0)
    status: OrderStatus = OrderStatus.PENDING
    payment: PaymentInfo = Field(default_factory=PaymentInfo)
    shipping_address: ShippingAddress
    shipping_info: Optional[ShippingInfo] = None
    notes: Optional[str] = None


class ChatOrderCreate(BaseModel):
    """Schema for an order captured from a chat conversation (total is computed)"""
    customer_id: str
    customer_name: str
    customer_phone: str
    items: List[OrderItem] = Field(..., min_length=1)
    shipping_address: ShippingAddress


class OrderStats(BaseModel):
    total: int = 0
    pending: int = 0
    confirmed: int = 0
    processing: int = 0
    shipped: int = 0
    delivered: int = 0
    cancelled: int = 0
    total_revenue: Decimal = Decimal('0')
    average_order_value: Decimal = Decimal('0')

    def to_dict(self) -> dict:
        data = self.model_dump()
        data['total_revenue'] = float(self.total_revenue)
        data['average_order_value'] = round(float(self.average_order_value), 2)
        return data


class BuyerProfile(BaseModel):
    """Customer view assembled from their orders"""
    customer_id: str
    name: str
    phone: str
    shipping_address: ShippingAddress
    order_count: int
    total_spent: Decimal = Decimal('0')
    last_order_at: datetime

    def to_dict(self) -> dict:
        data = self.model_dump(mode='json')
        data['total_spent'] = float(self.total_spent)
        return data
