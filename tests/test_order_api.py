"""
订单HTTP接口测试。
"""
import pytest
from rest_framework.test import APIClient

from orders.infrastructure.models.order_models import Order as OrderModel

pytestmark = pytest.mark.django_db

ORDERS_URL = "/api/orders/"


def _item(product_id, quantity=1, unit_price="10.00"):
    return {
        "product_id": product_id,
        "product_sku": f"SKU-{product_id}",
        "product_name": f"Product {product_id}",
        "quantity": quantity,
        "unit_price": unit_price,
    }


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def create_order(client):
    def _create(customer_id=1, items=None):
        payload = {"customer_id": customer_id}
        if items is not None:
            payload["items"] = items
        response = client.post(ORDERS_URL, payload, format="json")
        assert response.status_code == 201, response.json()
        return response.json()["data"]
    return _create


def _order_url(order_id, suffix=""):
    return f"{ORDERS_URL}{order_id}/{suffix}"


class TestCreateOrder:

    def test_create(self, client):
        response = client.post(
            ORDERS_URL,
            {"customer_id": 5, "items": [_item(1, 2, "12.50"), _item(2, 1, "0.99")]},
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["code"] == 10001
        assert body["success"] is True
        assert body["traceId"]
        data = body["data"]
        assert data["customer_id"] == 5
        assert data["status"] == "pending"
        assert data["total_amount"] == "25.99"
        assert data["item_count"] == 2
        assert data["items"][0]["total_price"] == "25.00"
        assert data["version"] == 0
        assert OrderModel.objects.filter(id=data["id"]).exists()

    def test_create_without_items(self, create_order):
        data = create_order(customer_id=3)
        assert data["items"] == []
        assert data["total_amount"] == "0.00"

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"customer_id": 0},
            {"customer_id": 1, "items": [_item(1, quantity=0)]},
            {"customer_id": 1, "items": [_item(1, unit_price="0.00")]},
            {"customer_id": 1, "items": [{"product_id": 1}]},
        ],
    )
    def test_invalid_payload(self, client, payload):
        response = client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == 40001
        assert body["success"] is False
        assert OrderModel.objects.count() == 0

    def test_malformed_json(self, client):
        response = client.post(ORDERS_URL, "{not json", content_type="application/json")

        assert response.status_code == 400
        assert response.json()["code"] == 40002


class TestOrderDetail:

    def test_get(self, client, create_order):
        created = create_order(items=[_item(1)])

        response = client.get(_order_url(created["id"]))

        assert response.status_code == 200
        assert response.json()["data"] == created

    def test_get_missing(self, client):
        response = client.get(_order_url(999))

        assert response.status_code == 404
        body = response.json()
        assert body["code"] == 40404
        assert body["data"]["error"] == "ORDER_NOT_FOUND"

    def test_delete(self, client, create_order):
        created = create_order(items=[_item(1)])

        response = client.delete(_order_url(created["id"]))

        assert response.status_code == 200
        assert response.json()["code"] == 10003
        assert "data" not in response.json()
        assert client.get(_order_url(created["id"])).status_code == 404
        assert client.delete(_order_url(created["id"])).status_code == 404


class TestOrderItems:

    def test_add_item_merges_quantity(self, client, create_order):
        created = create_order(items=[_item(1, 1, "4.00")])

        response = client.post(_order_url(created["id"], "items/"), _item(1, 2, "4.00"), format="json")

        assert response.status_code == 200
        body = response.json()
        assert body["code"] == 10002
        assert body["data"]["items"][0]["quantity"] == 3
        assert body["data"]["total_amount"] == "12.00"
        assert body["data"]["version"] == created["version"] + 1

    def test_update_quantity(self, client, create_order):
        created = create_order(items=[_item(1, 1, "4.00"), _item(2, 1, "1.00")])

        response = client.put(_order_url(created["id"], "items/1/"), {"quantity": 5}, format="json")

        assert response.status_code == 200
        assert response.json()["data"]["total_amount"] == "21.00"

    def test_update_quantity_invalid(self, client, create_order):
        created = create_order(items=[_item(1)])

        response = client.put(_order_url(created["id"], "items/1/"), {"quantity": 0}, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == 40001

    def test_remove_item(self, client, create_order):
        created = create_order(items=[_item(1), _item(2)])

        response = client.delete(_order_url(created["id"], "items/1/"))

        assert response.status_code == 200
        assert [item["product_id"] for item in response.json()["data"]["items"]] == [2]

    def test_remove_missing_item(self, client, create_order):
        created = create_order(items=[_item(1)])

        response = client.delete(_order_url(created["id"], "items/42/"))

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == 40405
        assert body["data"]["error"] == "ORDER_ITEM_NOT_FOUND"

    def test_add_item_to_missing_order(self, client):
        response = client.post(_order_url(77, "items/"), _item(1), format="json")
        assert response.status_code == 404


class TestOrderLifecycle:

    def test_confirm_and_cancel(self, client, create_order):
        created = create_order(items=[_item(1)])

        confirmed = client.post(_order_url(created["id"], "confirm/"))
        assert confirmed.status_code == 200
        assert confirmed.json()["data"]["status"] == "confirmed"

        cancelled = client.post(_order_url(created["id"], "cancel/"))
        assert cancelled.status_code == 200
        assert cancelled.json()["data"]["status"] == "cancelled"

    def test_confirm_empty_order(self, client, create_order):
        created = create_order()

        response = client.post(_order_url(created["id"], "confirm/"))

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == 41103
        assert body["data"]["error"] == "EMPTY_ORDER"

    def test_modify_cancelled_order(self, client, create_order):
        created = create_order(items=[_item(1)])
        client.post(_order_url(created["id"], "cancel/"))

        response = client.post(_order_url(created["id"], "items/"), _item(2), format="json")

        assert response.status_code == 400
        assert response.json()["data"]["error"] == "ORDER_NOT_MODIFIABLE"

    def test_status_transitions(self, client, create_order):
        created = create_order(items=[_item(1)])

        for target in ("confirmed", "processing", "shipped", "delivered", "refunded"):
            response = client.put(_order_url(created["id"], "status/"), {"status": target}, format="json")
            assert response.status_code == 200
            assert response.json()["data"]["status"] == target

    def test_status_unknown_choice(self, client, create_order):
        created = create_order(items=[_item(1)])

        response = client.put(_order_url(created["id"], "status/"), {"status": "lost"}, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == 40001

    def test_status_pending_is_not_a_target(self, client, create_order):
        created = create_order(items=[_item(1)])

        response = client.put(_order_url(created["id"], "status/"), {"status": "pending"}, format="json")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == 40002
        assert body["data"]["error"] == "UNSUPPORTED_STATUS_TRANSITION"

    def test_refund_requires_delivery(self, client, create_order):
        created = create_order(items=[_item(1)])

        response = client.put(_order_url(created["id"], "status/"), {"status": "refunded"}, format="json")

        assert response.status_code == 400
        assert response.json()["data"]["error"] == "ONLY_DELIVERED_CAN_REFUND"


class TestOrderLists:

    def test_list_pagination(self, client, create_order):
        for customer_id in range(1, 4):
            create_order(customer_id=customer_id)

        response = client.get(ORDERS_URL, {"page": 0, "page_size": 2})

        assert response.status_code == 200
        data = response.json()["data"]
        assert len(data["items"]) == 2
        assert data["pagination"] == {
            "total": 3,
            "page": 0,
            "pageSize": 2,
            "totalPages": 2,
            "hasMore": True,
        }

    def test_list_newest_first(self, client, create_order):
        first = create_order(customer_id=1)
        second = create_order(customer_id=2)

        items = client.get(ORDERS_URL).json()["data"]["items"]

        assert [item["id"] for item in items] == [second["id"], first["id"]]

    def test_list_lenient_paging(self, client, create_order):
        create_order()

        response = client.get(ORDERS_URL, {"page": "abc", "page_size": "1000"})

        assert response.status_code == 200
        pagination = response.json()["data"]["pagination"]
        assert pagination["page"] == 0
        assert pagination["pageSize"] == 10

    def test_list_summary(self, client, create_order):
        create_order(items=[_item(1)])

        items = client.get(ORDERS_URL, {"summary": "true"}).json()["data"]["items"]

        assert "items" not in items[0]
        assert items[0]["item_count"] == 1

    def test_by_status(self, client, create_order):
        confirmed = create_order(items=[_item(1)])
        create_order(items=[_item(1)])
        client.post(_order_url(confirmed["id"], "confirm/"))

        data = client.get(f"{ORDERS_URL}status/confirmed/").json()["data"]

        assert [item["id"] for item in data["items"]] == [confirmed["id"]]
        assert data["pagination"]["total"] == 1

    def test_by_invalid_status(self, client):
        response = client.get(f"{ORDERS_URL}status/lost/")

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == 40002
        assert body["data"]["error"] == "INVALID_ORDER_STATUS"

    def test_customer_orders(self, client, create_order):
        create_order(customer_id=8)
        create_order(customer_id=9)
        create_order(customer_id=8)

        response = client.get("/api/customers/8/orders/")

        data = response.json()["data"]
        assert data["pagination"]["total"] == 2
        assert {item["customer_id"] for item in data["items"]} == {8}
