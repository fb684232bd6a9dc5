"""
Orders API Endpoints
Handles order management, status changes and fulfillment

Status changes go through OrderLifecycleService, which enforces the
allowed transitions and applies stock, tracking and notification side
effects. Raw repository mutations are only exposed for notes, payment
method and tracking updates.

Author: TM3
Date: 2026-10-17
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field

from app.api.errors import to_http_exception
from app.core.dependencies import (
    get_order_repository, get_processing_service, get_lifecycle_service, get_document_service,
)
from app.core.exceptions import DukaanError, OrderNotFoundError
from app.domain.fulfillment import DocumentType, NotificationType, ShippingMethod
from app.domain.order import (
    ChatOrderCreate, OrderCreate, OrderStatus, PaymentMethod, PaymentStatus, TrackingUpdate,
)
from app.repositories.order_repository import OrderRepository
from app.services.document_service import DocumentService
from app.services.order_lifecycle_service import OrderLifecycleService, DEFAULT_CARRIER
from app.services.order_processing_service import OrderProcessingService

logger = logging.getLogger(__name__)

router = APIRouter()


# Request models
class StatusChange(BaseModel):
    status: OrderStatus
    reason: Optional[str] = Field(None, description="Cancellation reason, saved as order notes")
    require_inventory: bool = Field(True, description="Refuse to confirm orders with items out of stock")
    lang: str = Field("en", description="Notification language")


class PaymentStatusChange(BaseModel):
    status: PaymentStatus


class PaymentRequest(BaseModel):
    method: PaymentMethod
    transaction_id: Optional[str] = None


class PaymentMethodChange(BaseModel):
    method: PaymentMethod
    transaction_id: Optional[str] = None


class TrackingRequest(BaseModel):
    tracking_id: str = Field(..., min_length=1)
    carrier: str = DEFAULT_CARRIER
    tracking_url: Optional[str] = None


class TrackingUpdateRequest(BaseModel):
    status: str
    location: Optional[str] = None
    description: Optional[str] = None
    timestamp: Optional[datetime] = Field(None, description="Defaults to now")


class NotesChange(BaseModel):
    notes: str


def _get_order_or_404(repo: OrderRepository, order_id: str):
    order = repo.find_by_id(order_id)
    if order is None:
        raise OrderNotFoundError(order_id)
    return order


@router.get("/")
async def get_orders(
    status: Optional[OrderStatus] = Query(None, description="Filter by order status"),
    payment_status: Optional[PaymentStatus] = Query(None, description="Filter by payment status"),
    customer_id: Optional[str] = Query(None, description="Filter by customer"),
    search: Optional[str] = Query(None, description="Search by order ID, customer name, phone or city"),
    limit: int = Query(50, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    repo: OrderRepository = Depends(get_order_repository),
):
    """
    Get all orders with optional filters
    """
    try:
        orders, total = repo.find_all(
            status=status,
            payment_status=payment_status,
            customer_id=customer_id,
            search=search,
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/stats")
async def get_order_stats(repo: OrderRepository = Depends(get_order_repository)):
    """
    Get order statistics

    Returns:
    - Orders per status
    - Revenue from paid orders
    - Average order value
    """
    try:
        return {
            "status": "success",
            "data": repo.get_stats().to_dict()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order stats: {str(e)}")


@router.get("/recent")
async def get_recent_orders(
    limit: int = Query(5, ge=1, le=100),
    repo: OrderRepository = Depends(get_order_repository),
):
    try:
        orders = repo.find_recent(limit)
        return {
            "status": "success",
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching recent orders: {str(e)}")


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    repo: OrderRepository = Depends(get_order_repository),
    lifecycle: OrderLifecycleService = Depends(get_lifecycle_service),
):
    """Order details with the statuses it can move to next"""
    try:
        order = _get_order_or_404(repo, order_id)
        data = order.to_dict()
        data["allowed_transitions"] = [s.value for s in lifecycle.allowed_transitions(order.status)]

        return {
            "status": "success",
            "data": data
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.post("/", status_code=201)
async def create_order(
    data: OrderCreate,
    repo: OrderRepository = Depends(get_order_repository),
    processing: OrderProcessingService = Depends(get_processing_service),
):
    try:
        order = repo.create(data)
        logger.info(f"Order {order.id} created for customer {order.customer_id}")
        await processing.send_notification(NotificationType.ORDER_CREATED, order)

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating order: {str(e)}")


@router.post("/from-chat", status_code=201)
async def create_order_from_chat(
    data: ChatOrderCreate,
    repo: OrderRepository = Depends(get_order_repository),
    processing: OrderProcessingService = Depends(get_processing_service),
):
    """
    Create an order captured in a chat conversation

    The order starts pending with cash on delivery; the total is computed
    from the items.
    """
    try:
        order = repo.create_from_chat(data)
        logger.info(f"Chat order {order.id} created for customer {order.customer_id}")
        await processing.send_notification(NotificationType.ORDER_CREATED, order)

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating chat order: {str(e)}")


@router.post("/{order_id}/status")
async def change_order_status(
    order_id: str,
    change: StatusChange,
    lifecycle: OrderLifecycleService = Depends(get_lifecycle_service),
):
    try:
        order = await lifecycle.transition(
            order_id,
            change.status,
            reason=change.reason,
            require_inventory=change.require_inventory,
            lang=change.lang,
        )

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating order status: {str(e)}")


@router.post("/{order_id}/payment")
async def change_payment_status(
    order_id: str,
    change: PaymentStatusChange,
    lifecycle: OrderLifecycleService = Depends(get_lifecycle_service),
):
    """Record a payment status reported by the seller"""
    try:
        order = await lifecycle.mark_payment(order_id, change.status)
        return {
            "status": "success",
            "data": order.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating payment status: {str(e)}")


@router.post("/{order_id}/pay")
async def pay_order(
    order_id: str,
    payment: PaymentRequest,
    lifecycle: OrderLifecycleService = Depends(get_lifecycle_service),
):
    """Charge the order through the payment gateway (402 when declined)"""
    try:
        order = await lifecycle.pay(order_id, payment.method, payment.transaction_id)
        return {
            "status": "success",
            "data": order.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error processing payment: {str(e)}")


@router.put("/{order_id}/payment-method")
async def change_payment_method(
    order_id: str,
    change: PaymentMethodChange,
    repo: OrderRepository = Depends(get_order_repository),
):
    try:
        order = repo.update_payment_method(order_id, change.method, change.transaction_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating payment method: {str(e)}")


@router.post("/{order_id}/tracking")
async def add_tracking(
    order_id: str,
    tracking: TrackingRequest,
    lifecycle: OrderLifecycleService = Depends(get_lifecycle_service),
):
    """
    Attach a tracking number

    Confirmed and processing orders are marked shipped.
    """
    try:
        order = await lifecycle.add_tracking(
            order_id,
            tracking.tracking_id,
            carrier=tracking.carrier,
            tracking_url=tracking.tracking_url,
        )

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding tracking: {str(e)}")


@router.post("/{order_id}/tracking/updates")
async def add_tracking_update(
    order_id: str,
    update: TrackingUpdateRequest,
    repo: OrderRepository = Depends(get_order_repository),
):
    try:
        order = _get_order_or_404(repo, order_id)
        if order.shipping_info is None:
            raise HTTPException(status_code=409, detail=f"Order {order_id} has no tracking information")

        order = repo.add_tracking_update(order_id, TrackingUpdate(
            status=update.status,
            location=update.location,
            description=update.description,
            timestamp=update.timestamp or datetime.now(timezone.utc),
        ))

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding tracking update: {str(e)}")


@router.put("/{order_id}/notes")
async def change_notes(
    order_id: str,
    change: NotesChange,
    repo: OrderRepository = Depends(get_order_repository),
):
    try:
        order = repo.update_notes(order_id, change.notes)
        if order is None:
            raise OrderNotFoundError(order_id)

        return {
            "status": "success",
            "data": order.to_dict()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating notes: {str(e)}")


@router.get("/{order_id}/timeline")
async def get_order_timeline(
    order_id: str,
    repo: OrderRepository = Depends(get_order_repository),
    processing: OrderProcessingService = Depends(get_processing_service),
):
    try:
        order = _get_order_or_404(repo, order_id)
        timeline = processing.generate_order_timeline(order)

        return {
            "status": "success",
            "order_id": order_id,
            "data": [event.model_dump(mode="json") for event in timeline]
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error building timeline: {str(e)}")


@router.get("/{order_id}/fulfillment")
async def get_fulfillment_status(
    order_id: str,
    lifecycle: OrderLifecycleService = Depends(get_lifecycle_service),
):
    try:
        order = lifecycle.get_order(order_id)
        return {
            "status": "success",
            "order_id": order_id,
            "data": lifecycle.fulfillment_status(order).model_dump(mode="json")
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching fulfillment status: {str(e)}")


@router.get("/{order_id}/inventory-check")
async def check_order_inventory(
    order_id: str,
    repo: OrderRepository = Depends(get_order_repository),
    processing: OrderProcessingService = Depends(get_processing_service),
):
    try:
        order = _get_order_or_404(repo, order_id)
        return {
            "status": "success",
            "order_id": order_id,
            "data": processing.check_order_inventory(order).model_dump()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error checking inventory: {str(e)}")


@router.get("/{order_id}/shipping")
async def get_shipping_quote(
    order_id: str,
    method: ShippingMethod = Query(ShippingMethod.STANDARD, description="Shipping method"),
    repo: OrderRepository = Depends(get_order_repository),
    processing: OrderProcessingService = Depends(get_processing_service),
):
    """Shipping cost and delivery window for an order"""
    try:
        order = _get_order_or_404(repo, order_id)
        cost = processing.calculate_shipping(order, method)
        window = processing.estimate_delivery_date(order, method)

        return {
            "status": "success",
            "order_id": order_id,
            "data": {
                "method": method.value,
                "cost": float(cost),
                "delivery": window.model_dump(mode="json"),
            }
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error calculating shipping: {str(e)}")


@router.get("/{order_id}/documents/{document_type}", response_class=HTMLResponse)
async def get_order_document(
    order_id: str,
    document_type: DocumentType,
    repo: OrderRepository = Depends(get_order_repository),
    documents: DocumentService = Depends(get_document_service),
):
    """Invoice, shipping label or packing slip as printable HTML"""
    try:
        order = _get_order_or_404(repo, order_id)
        return HTMLResponse(content=documents.generate(document_type, order))

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error generating document: {str(e)}")


@router.get("/{order_id}/notifications/{notification_type}")
async def preview_notification(
    order_id: str,
    notification_type: NotificationType,
    lang: str = Query("en", description="Template language (en, hi)"),
    repo: OrderRepository = Depends(get_order_repository),
    processing: OrderProcessingService = Depends(get_processing_service),
):
    """Notification text the customer would receive for an order event"""
    try:
        order = _get_order_or_404(repo, order_id)
        content = processing.generate_notification_content(notification_type, order, lang)

        return {
            "status": "success",
            "order_id": order_id,
            "data": content.model_dump()
        }

    except HTTPException:
        raise
    except DukaanError as e:
        raise to_http_exception(e)
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error generating notification: {str(e)}")
