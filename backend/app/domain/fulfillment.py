"""
Fulfillment Domain Models

Value objects produced by the order processing and lifecycle services:
shipping methods, notification/document types, inventory checks,
timelines and the derived fulfillment status.

Author: TM3
Date: 2026-10-17
"""
from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


class ShippingMethod(str, Enum):
    STANDARD = "standard"
    EXPRESS = "express"
    SAME_DAY = "same_day"


class NotificationType(str, Enum):
    ORDER_CREATED = "order_created"
    PAYMENT_RECEIVED = "payment_received"
    ORDER_CONFIRMED = "order_confirmed"
    ORDER_PROCESSING = "order_processing"
    ORDER_SHIPPED = "order_shipped"
    ORDER_DELIVERED = "order_delivered"
    ORDER_CANCELLED = "order_cancelled"


class DocumentType(str, Enum):
    INVOICE = "invoice"
    SHIPPING_LABEL = "shipping_label"
    PACKING_SLIP = "packing_slip"
    RETURN_LABEL = "return_label"


class NotificationPreferences(BaseModel):
    """Channels a customer wants to be notified on"""
    email: bool = True
    sms: bool = True
    whatsapp: bool = True

    def enabled_channels(self) -> List[str]:
        return [channel for channel in ('email', 'sms', 'whatsapp') if getattr(self, channel)]


class NotificationContent(BaseModel):
    subject: str
    body: str


class OutOfStockItem(BaseModel):
    id: str
    name: str
    requested: int
    available: int


class InventoryCheckResult(BaseModel):
    in_stock: bool
    out_of_stock_items: List[OutOfStockItem] = Field(default_factory=list)


class TimelineEvent(BaseModel):
    status: str
    date: datetime
    description: str
    is_completed: bool


class DeliveryWindow(BaseModel):
    """Earliest and latest expected delivery date"""
    earliest: datetime
    latest: datetime


class PaymentResult(BaseModel):
    success: bool
    transaction_id: Optional[str] = None
    error_message: Optional[str] = None


class FulfillmentStatus(BaseModel):
    """
    Picking/packing/shipping flags mirrored from the order status.

    Never stored: always derived from the order (see
    OrderLifecycleService.fulfillment_status).
    """
    is_picked: bool = False
    is_packed: bool = False
    is_labeled: bool = False
    is_shipped: bool = False
    is_delivered: bool = False
    picked_at: Optional[datetime] = None
    packed_at: Optional[datetime] = None
    labeled_at: Optional[datetime] = None
    shipped_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None
    current_location: Optional[str] = None
    estimated_delivery: Optional[datetime] = None
