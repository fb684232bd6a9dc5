"""
Unit tests for OrderLifecycleService

Covers the status machine and the stock, tracking and notification side
effects of each change.

Author: TM3
Date: 2026-10-17
"""
import asyncio
import re
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from app.core.exceptions import (
    InsufficientInventoryError, InvalidStatusTransitionError, OrderNotFoundError, PaymentFailedError,
)
from app.connectors.shiprocket_connector import ShiprocketConnector
from app.domain.order import OrderStatus, PaymentMethod, PaymentStatus
from app.services.order_lifecycle_service import OrderLifecycleService
from app.services.order_processing_service import OrderProcessingService


def notification_types(processing_service):
    return [n['type'] for n in processing_service.outbox if n['channel'] == 'email']


def aggregator(booking_response):
    """Shiprocket connector whose bookings get the given response"""
    def handler(request):
        if request.url.path == ShiprocketConnector.LOGIN_PATH:
            return httpx.Response(200, json={"token": "tok-1"})
        return booking_response

    return ShiprocketConnector(
        base_url="http://shiprocket.test",
        email="seller@example.com",
        password="secret",
        transport=httpx.MockTransport(handler),
    )


async def run_together(*changes):
    return await asyncio.gather(*changes, return_exceptions=True)


class TestStatusMachine:
    """Test allowed and rejected transitions"""

    @pytest.mark.parametrize("status,expected", [
        (OrderStatus.PENDING, [OrderStatus.CONFIRMED, OrderStatus.CANCELLED]),
        (OrderStatus.CONFIRMED, [OrderStatus.PROCESSING, OrderStatus.CANCELLED]),
        (OrderStatus.PROCESSING, [OrderStatus.SHIPPED, OrderStatus.CANCELLED]),
        (OrderStatus.SHIPPED, [OrderStatus.DELIVERED]),
        (OrderStatus.DELIVERED, []),
        (OrderStatus.CANCELLED, []),
    ])
    def test_allowed_transitions(self, status, expected):
        assert OrderLifecycleService.allowed_transitions(status) == expected

    def test_confirm_pending_order(self, lifecycle_service, processing_service):
        order = asyncio.run(lifecycle_service.transition('ORD123458', OrderStatus.CONFIRMED))

        assert order.status == OrderStatus.CONFIRMED
        assert notification_types(processing_service) == ['order_confirmed']
        assert len(processing_service.outbox) == 3

    def test_skipping_a_step_is_rejected(self, lifecycle_service, order_repo):
        """Test pending orders cannot jump straight to shipped"""
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            asyncio.run(lifecycle_service.transition('ORD123458', OrderStatus.SHIPPED))

        assert exc_info.value.allowed == ['confirmed', 'cancelled']
        assert order_repo.find_by_id('ORD123458').status == OrderStatus.PENDING

    def test_terminal_status_cannot_change(self, lifecycle_service):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            asyncio.run(lifecycle_service.transition('ORD123460', OrderStatus.CANCELLED))

        assert exc_info.value.allowed == []
        assert 'terminal' in str(exc_info.value)

    def test_same_status_is_rejected(self, lifecycle_service):
        with pytest.raises(InvalidStatusTransitionError):
            asyncio.run(lifecycle_service.transition('ORD123456', OrderStatus.CONFIRMED))

    def test_unknown_order(self, lifecycle_service):
        with pytest.raises(OrderNotFoundError):
            asyncio.run(lifecycle_service.transition('ORD000000', OrderStatus.CONFIRMED))


class TestStatusSideEffects:
    """Test inventory, tracking and notification side effects"""

    def test_confirm_requires_inventory(self, lifecycle_service, product_repo, order_repo, processing_service):
        # Arrange: sell out the anklet ordered in ORD123458
        product_repo.update_stock('4', 12)

        # Act
        with pytest.raises(InsufficientInventoryError) as exc_info:
            asyncio.run(lifecycle_service.transition('ORD123458', OrderStatus.CONFIRMED))

        # Assert
        assert exc_info.value.out_of_stock_items[0].name == 'Silver Anklet'
        assert order_repo.find_by_id('ORD123458').status == OrderStatus.PENDING
        assert processing_service.outbox == []

    def test_confirm_without_inventory_gate(self, lifecycle_service, product_repo):
        product_repo.update_stock('4', 12)

        order = asyncio.run(lifecycle_service.transition(
            'ORD123458', OrderStatus.CONFIRMED, require_inventory=False
        ))

        assert order.status == OrderStatus.CONFIRMED

    def test_processing_decrements_stock(self, lifecycle_service, product_repo):
        asyncio.run(lifecycle_service.transition('ORD123456', OrderStatus.PROCESSING))

        assert product_repo.find_by_id('3').stock == 4

    def test_shipping_assigns_tracking(self, lifecycle_service, processing_service):
        # Act
        order = asyncio.run(lifecycle_service.transition('ORD123457', OrderStatus.SHIPPED))

        # Assert
        info = order.shipping_info
        assert re.fullmatch(r'AD[A-Z0-9]{10}', info.tracking_id)
        assert info.carrier == 'AutoDukaan Logistics'
        assert info.tracking_url == f'https://tracking.autodukaan.com/{info.tracking_id}'
        assert [(u.status, u.location) for u in info.tracking_updates] == [
            ('shipped', 'Mumbai Distribution Center'),
        ]
        assert info.tracking_id in processing_service.outbox[0]['body']

    def test_shipping_uses_aggregator_awb(self, order_repo, processing_service):
        """Test the aggregator's AWB becomes the tracking id"""
        # Arrange
        connector = MagicMock()
        connector.create_order = AsyncMock(return_value={
            'shipment_id': 5001, 'awb_code': '1234567890', 'courier_name': 'Delhivery',
        })
        service = OrderLifecycleService(order_repo, processing_service, shipping_connector=connector)

        # Act
        order = asyncio.run(service.transition('ORD123457', OrderStatus.SHIPPED))

        # Assert
        connector.create_order.assert_awaited_once()
        assert order.shipping_info.tracking_id == '1234567890'
        assert order.shipping_info.carrier == 'Delhivery'

    def test_shipping_falls_back_when_aggregator_fails(self, order_repo, processing_service):
        connector = MagicMock()
        connector.create_order = AsyncMock(side_effect=httpx.ConnectError("connection refused"))
        service = OrderLifecycleService(order_repo, processing_service, shipping_connector=connector)

        order = asyncio.run(service.transition('ORD123457', OrderStatus.SHIPPED))

        assert order.status == OrderStatus.SHIPPED
        assert order.shipping_info.tracking_id.startswith('AD')
        assert order.shipping_info.carrier == 'AutoDukaan Logistics'

    def test_shipping_without_awb_generates_tracking_id(self, order_repo, processing_service):
        """Test a booking with no AWB yet falls back to a local tracking id"""
        # Arrange
        connector = aggregator(httpx.Response(200, json={"shipment_id": 1}))
        service = OrderLifecycleService(order_repo, processing_service, shipping_connector=connector)

        # Act
        order = asyncio.run(service.transition('ORD123457', OrderStatus.SHIPPED))

        # Assert
        info = order.shipping_info
        assert re.fullmatch(r'AD[A-Z0-9]{10}', info.tracking_id)
        assert info.carrier == 'AutoDukaan Logistics'
        assert info.tracking_url == f'https://tracking.autodukaan.com/{info.tracking_id}'

    def test_shipping_survives_malformed_booking_response(self, order_repo, processing_service):
        """Test a non-JSON booking response still ships with tracking and a notification"""
        # Arrange
        connector = aggregator(httpx.Response(200, text="<html>Bad Gateway</html>"))
        service = OrderLifecycleService(order_repo, processing_service, shipping_connector=connector)

        # Act
        order = asyncio.run(service.transition('ORD123457', OrderStatus.SHIPPED))

        # Assert
        assert order.status == OrderStatus.SHIPPED
        assert order.shipping_info.tracking_id.startswith('AD')
        assert order_repo.find_by_id('ORD123457').shipping_info is not None
        assert notification_types(processing_service) == ['order_shipped']

    def test_delivery_records_tracking_update(self, lifecycle_service):
        order = asyncio.run(lifecycle_service.transition('ORD123459', OrderStatus.DELIVERED))

        last = order.shipping_info.tracking_updates[-1]
        assert last.status == 'delivered'
        assert last.location == 'Jaipur'

    def test_cancel_after_processing_restocks(self, lifecycle_service, product_repo, processing_service):
        """Test stock taken at processing is returned on cancellation"""
        # Arrange
        asyncio.run(lifecycle_service.transition('ORD123456', OrderStatus.PROCESSING))
        assert product_repo.find_by_id('3').stock == 4

        # Act
        order = asyncio.run(lifecycle_service.transition(
            'ORD123456', OrderStatus.CANCELLED, reason='Customer changed mind'
        ))

        # Assert
        assert order.status == OrderStatus.CANCELLED
        assert order.notes == 'Customer changed mind'
        assert product_repo.find_by_id('3').stock == 5
        assert processing_service.outbox[-1]['body'].endswith('Reason: Customer changed mind')

    def test_cancel_before_processing_leaves_stock(self, lifecycle_service, product_repo):
        asyncio.run(lifecycle_service.transition('ORD123458', OrderStatus.CANCELLED))

        assert product_repo.find_by_id('4').stock == 12


class TestPayments:
    """Test payment recording and gateway charges"""

    def test_mark_paid_sends_payment_received(self, lifecycle_service, processing_service):
        order = asyncio.run(lifecycle_service.mark_payment('ORD123458', PaymentStatus.PAID))

        assert order.payment.status == PaymentStatus.PAID
        assert notification_types(processing_service) == ['payment_received']

    def test_mark_failed_sends_nothing(self, lifecycle_service, processing_service):
        asyncio.run(lifecycle_service.mark_payment('ORD123458', PaymentStatus.FAILED))
        assert processing_service.outbox == []

    def test_pay_success(self, lifecycle_service):
        order = asyncio.run(lifecycle_service.pay('ORD123458', PaymentMethod.UPI, 'UPI-REF-77'))

        assert order.payment.status == PaymentStatus.PAID
        assert order.payment.method == PaymentMethod.UPI
        assert order.payment.transaction_id == 'UPI-REF-77'

    def test_pay_declined(self, lifecycle_service, processing_service, order_repo):
        processing_service.payment_success_rate = 0.0

        with pytest.raises(PaymentFailedError):
            asyncio.run(lifecycle_service.pay('ORD123458', PaymentMethod.CARD))

        order = order_repo.find_by_id('ORD123458')
        assert order.payment.status == PaymentStatus.FAILED
        assert order.payment.method == PaymentMethod.COD

    def test_pay_already_paid_is_unchanged(self, lifecycle_service, processing_service):
        order = asyncio.run(lifecycle_service.pay('ORD123456', PaymentMethod.CARD))

        assert order.payment.transaction_id == 'TXN98765432'
        assert processing_service.outbox == []


class TestTracking:
    """Test seller-provided tracking numbers"""

    def test_add_tracking_ships_confirmed_order(self, lifecycle_service, product_repo, processing_service):
        """Test confirmed orders pass through processing on their way to shipped"""
        # Act
        order = asyncio.run(lifecycle_service.add_tracking('ORD123456', 'DLV0001', carrier='Delhivery'))

        # Assert
        assert order.status == OrderStatus.SHIPPED
        assert order.shipping_info.tracking_id == 'DLV0001'
        assert order.shipping_info.carrier == 'Delhivery'
        assert [(u.status, u.location) for u in order.shipping_info.tracking_updates] == [
            ('processing', 'Mumbai Sorting Center'),
        ]
        assert product_repo.find_by_id('3').stock == 4
        assert notification_types(processing_service) == ['order_processing', 'order_shipped']

    def test_add_tracking_to_pending_order_keeps_status(self, lifecycle_service):
        order = asyncio.run(lifecycle_service.add_tracking('ORD123458', 'DLV0002'))

        assert order.status == OrderStatus.PENDING
        assert order.shipping_info.tracking_url == 'https://tracking.autodukaan.com/DLV0002'


class TestFulfillmentStatus:
    """Test fulfillment flags derived from the order"""

    def test_pending_order_has_nothing_done(self, lifecycle_service, order_repo):
        status = lifecycle_service.fulfillment_status(order_repo.find_by_id('ORD123458'))

        assert not any([status.is_picked, status.is_packed, status.is_shipped, status.is_delivered])
        assert status.estimated_delivery is None

    def test_shipped_order(self, lifecycle_service, order_repo):
        # Act
        status = lifecycle_service.fulfillment_status(order_repo.find_by_id('ORD123459'))

        # Assert
        shipped_at = datetime(2023, 6, 19, 14, 20, tzinfo=timezone.utc)
        assert status.is_picked and status.is_packed and status.is_labeled and status.is_shipped
        assert status.is_delivered is False
        assert status.picked_at == datetime(2023, 6, 19, 9, 30, tzinfo=timezone.utc)
        assert status.shipped_at == shipped_at
        assert status.current_location == 'Jaipur Distribution Center'
        # standard shipping, 5 days plus 1 outside metro cities
        assert status.estimated_delivery == shipped_at + timedelta(days=6)

    def test_delivered_order(self, lifecycle_service, order_repo):
        status = lifecycle_service.fulfillment_status(order_repo.find_by_id('ORD123460'))

        assert status.is_delivered is True
        assert status.delivered_at == datetime(2023, 6, 16, 14, 20, tzinfo=timezone.utc)
        assert status.current_location is None


class TestConcurrentChanges:
    """Test overlapping changes to the same order"""

    @pytest.fixture
    def slow_lifecycle(self, order_repo, product_repo, rng):
        processing = OrderProcessingService(
            product_repo,
            rng=rng,
            latency_seconds=0.02,
            payment_latency_seconds=0.02,
            payment_success_rate=1.0,
        )
        return OrderLifecycleService(order_repo, processing)

    def test_cancel_during_processing_wins_and_restocks(self, slow_lifecycle, order_repo, product_repo):
        """Test a cancel sent while processing waits on stock is applied after it"""
        # Act
        results = asyncio.run(run_together(
            slow_lifecycle.transition('ORD123456', OrderStatus.PROCESSING),
            slow_lifecycle.transition('ORD123456', OrderStatus.CANCELLED),
        ))

        # Assert
        assert [r.status for r in results] == [OrderStatus.PROCESSING, OrderStatus.CANCELLED]
        assert order_repo.find_by_id('ORD123456').status == OrderStatus.CANCELLED
        assert product_repo.find_by_id('3').stock == 5

    def test_duplicate_change_is_rejected(self, slow_lifecycle, product_repo):
        """Test the same change sent twice takes stock once"""
        # Act
        first, second = asyncio.run(run_together(
            slow_lifecycle.transition('ORD123456', OrderStatus.PROCESSING),
            slow_lifecycle.transition('ORD123456', OrderStatus.PROCESSING),
        ))

        # Assert
        assert first.status == OrderStatus.PROCESSING
        assert isinstance(second, InvalidStatusTransitionError)
        assert product_repo.find_by_id('3').stock == 4

    def test_cancelled_order_is_not_reopened(self, slow_lifecycle, order_repo):
        _, reopened = asyncio.run(run_together(
            slow_lifecycle.transition('ORD123456', OrderStatus.CANCELLED),
            slow_lifecycle.transition('ORD123456', OrderStatus.PROCESSING),
        ))

        assert isinstance(reopened, InvalidStatusTransitionError)
        assert order_repo.find_by_id('ORD123456').status == OrderStatus.CANCELLED

    def test_double_payment_charges_once(self, slow_lifecycle):
        results = asyncio.run(run_together(
            slow_lifecycle.pay('ORD123458', PaymentMethod.UPI),
            slow_lifecycle.pay('ORD123458', PaymentMethod.UPI),
        ))

        assert [r.payment.status for r in results] == [PaymentStatus.PAID, PaymentStatus.PAID]
        assert notification_types(slow_lifecycle.processing) == ['payment_received']
