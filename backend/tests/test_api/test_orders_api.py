"""
API tests for the orders endpoints

Each test gets a TestClient bound to a fresh container seeded with the
mock orders and catalog.

Author: TM3
Date: 2026-10-17
"""
BASE = "/api/v1/orders"

SHIPPING_ADDRESS = {
    "name": "Kavya Nair",
    "phone": "+91 99887 76655",
    "street": "12 Marine Drive",
    "city": "Kochi",
    "state": "Kerala",
    "pincode": "682001",
}


class TestOrderQueries:

    def test_list_orders(self, client):
        response = client.get(f"{BASE}/")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "success"
        assert body["total"] == 5
        assert body["count"] == 5
        assert body["data"][0]["id"] == "ORD123456"
        assert body["data"][0]["total_amount"] == 1499.0

    def test_list_orders_with_filters(self, client):
        response = client.get(f"{BASE}/", params={"status": "pending", "limit": 10})

        body = response.json()
        assert body["total"] == 1
        assert body["data"][0]["customer_name"] == "Priya Patel"

    def test_invalid_status_filter(self, client):
        assert client.get(f"{BASE}/", params={"status": "lost"}).status_code == 422

    def test_stats(self, client):
        data = client.get(f"{BASE}/stats").json()["data"]

        assert data["total"] == 5
        assert data["total_revenue"] == 5192.0
        assert data["average_order_value"] == 1118.2

    def test_recent(self, client):
        data = client.get(f"{BASE}/recent", params={"limit": 2}).json()["data"]
        assert [o["id"] for o in data] == ["ORD123459", "ORD123458"]

    def test_get_order_includes_allowed_transitions(self, client):
        data = client.get(f"{BASE}/ORD123456").json()["data"]

        assert data["status"] == "confirmed"
        assert data["allowed_transitions"] == ["processing", "cancelled"]
        assert data["is_paid"] is True

    def test_get_unknown_order(self, client):
        response = client.get(f"{BASE}/ORD000000")

        assert response.status_code == 404
        assert response.json()["detail"] == "Order ORD000000 not found"


class TestOrderCreation:

    def test_create_order(self, client, container):
        # Arrange
        payload = {
            "customer_id": "CUST9",
            "customer_name": "Kavya Nair",
            "customer_phone": "+91 99887 76655",
            "items": [{"product_id": "2", "name": "Handmade Jhumkas", "quantity": 1, "price": 299}],
            "total_amount": 339,
            "shipping_address": SHIPPING_ADDRESS,
        }

        # Act
        response = client.post(f"{BASE}/", json=payload)

        # Assert
        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == "pending"
        assert data["total_amount"] == 339.0
        assert container.processing_service.outbox[0]["type"] == "order_created"

    def test_create_order_requires_items(self, client):
        payload = {
            "customer_id": "CUST9",
            "customer_name": "Kavya Nair",
            "customer_phone": "+91 99887 76655",
            "items": [],
            "total_amount": 0,
            "shipping_address": SHIPPING_ADDRESS,
        }

        assert client.post(f"{BASE}/", json=payload).status_code == 422

    def test_create_from_chat(self, client):
        payload = {
            "customer_id": "CUST9",
            "customer_name": "Kavya Nair",
            "customer_phone": "+91 99887 76655",
            "items": [
                {"product_id": "1", "name": "Cotton Kurti", "quantity": 2, "price": 599},
                {"product_id": "4", "name": "Silver Anklet", "quantity": 1, "price": 399},
            ],
            "shipping_address": SHIPPING_ADDRESS,
        }

        response = client.post(f"{BASE}/from-chat", json=payload)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["total_amount"] == 1597.0
        assert data["payment"] == {"status": "pending", "method": "cod", "transaction_id": None, "updated_at": None}


class TestOrderStatus:

    def test_confirm(self, client):
        response = client.post(f"{BASE}/ORD123458/status", json={"status": "confirmed"})

        assert response.status_code == 200
        assert response.json()["data"]["status"] == "confirmed"

    def test_invalid_transition_is_conflict(self, client):
        response = client.post(f"{BASE}/ORD123458/status", json={"status": "shipped"})

        assert response.status_code == 409
        assert "Allowed: confirmed, cancelled" in response.json()["detail"]

    def test_confirm_out_of_stock_lists_items(self, client, container):
        container.product_repository.update_stock("4", 12)

        response = client.post(f"{BASE}/ORD123458/status", json={"status": "confirmed"})

        assert response.status_code == 409
        detail = response.json()["detail"]
        assert detail["out_of_stock_items"] == [
            {"id": "4", "name": "Silver Anklet", "requested": 1, "available": 0},
        ]

    def test_cancel_with_reason(self, client):
        response = client.post(
            f"{BASE}/ORD123456/status",
            json={"status": "cancelled", "reason": "Address not serviceable"},
        )

        data = response.json()["data"]
        assert data["status"] == "cancelled"
        assert data["notes"] == "Address not serviceable"

    def test_ship_assigns_tracking(self, client):
        data = client.post(f"{BASE}/ORD123457/status", json={"status": "shipped"}).json()["data"]

        assert data["shipping_info"]["tracking_id"].startswith("AD")
        assert data["shipping_info"]["carrier"] == "AutoDukaan Logistics"


class TestPayments:

    def test_mark_paid(self, client):
        response = client.post(f"{BASE}/ORD123458/payment", json={"status": "paid"})
        assert response.json()["data"]["payment"]["status"] == "paid"

    def test_pay(self, client):
        response = client.post(f"{BASE}/ORD123458/pay", json={"method": "upi", "transaction_id": "UPI-1"})

        payment = response.json()["data"]["payment"]
        assert payment == {**payment, "status": "paid", "method": "upi", "transaction_id": "UPI-1"}

    def test_pay_declined(self, client, container):
        container.processing_service.payment_success_rate = 0.0

        response = client.post(f"{BASE}/ORD123458/pay", json={"method": "card"})

        assert response.status_code == 402
        assert "Payment failed. Please try again." in response.json()["detail"]

    def test_change_payment_method(self, client):
        response = client.put(f"{BASE}/ORD123458/payment-method", json={"method": "bank_transfer"})
        assert response.json()["data"]["payment"]["method"] == "bank_transfer"


class TestTrackingAndNotes:

    def test_add_tracking_ships_order(self, client):
        response = client.post(
            f"{BASE}/ORD123456/tracking",
            json={"tracking_id": "DLV0001", "carrier": "Delhivery"},
        )

        data = response.json()["data"]
        assert data["status"] == "shipped"
        assert data["shipping_info"]["tracking_id"] == "DLV0001"

    def test_tracking_update_requires_tracking(self, client):
        response = client.post(f"{BASE}/ORD123456/tracking/updates", json={"status": "in_transit"})
        assert response.status_code == 409

    def test_tracking_update(self, client):
        response = client.post(
            f"{BASE}/ORD123459/tracking/updates",
            json={"status": "out_for_delivery", "location": "Jaipur"},
        )

        updates = response.json()["data"]["shipping_info"]["tracking_updates"]
        assert updates[-1]["status"] == "out_for_delivery"

    def test_update_notes(self, client):
        response = client.put(f"{BASE}/ORD123456/notes", json={"notes": "Call before delivery"})
        assert response.json()["data"]["notes"] == "Call before delivery"

    def test_update_notes_unknown_order(self, client):
        assert client.put(f"{BASE}/ORD000000/notes", json={"notes": "x"}).status_code == 404


class TestFulfillmentViews:

    def test_timeline(self, client):
        body = client.get(f"{BASE}/ORD123458/timeline").json()
        assert [e["status"] for e in body["data"]] == ["Order Placed", "Payment Pending"]

    def test_fulfillment(self, client):
        data = client.get(f"{BASE}/ORD123459/fulfillment").json()["data"]

        assert data["is_shipped"] is True
        assert data["current_location"] == "Jaipur Distribution Center"

    def test_inventory_check(self, client):
        data = client.get(f"{BASE}/ORD123459/inventory-check").json()["data"]

        assert data["in_stock"] is False
        assert [item["id"] for item in data["out_of_stock_items"]] == ["5", "6"]

    def test_shipping_quote(self, client):
        data = client.get(f"{BASE}/ORD123458/shipping", params={"method": "express"}).json()["data"]

        assert data["method"] == "express"
        assert data["cost"] == 120.0
        assert set(data["delivery"]) == {"earliest", "latest"}

    def test_invoice_document(self, client):
        response = client.get(f"{BASE}/ORD123456/documents/invoice")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "INV-ORD123456" in response.text

    def test_return_label_not_supported(self, client):
        assert client.get(f"{BASE}/ORD123456/documents/return_label").status_code == 400

    def test_unknown_document_type(self, client):
        assert client.get(f"{BASE}/ORD123456/documents/receipt").status_code == 422

    def test_notification_preview_in_hindi(self, client):
        response = client.get(f"{BASE}/ORD123456/notifications/order_confirmed", params={"lang": "hi"})
        assert response.json()["data"]["subject"] == "ऑर्डर की पुष्टि हुई"
