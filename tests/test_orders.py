import pytest

from models.inventory import InventoryChangeType, InventoryLog
from models.order import OrderStatus
from models.product import Product
from services import cart as cart_service
from services import orders as orders_service
from services.checkout import checkout
from services.errors import InvalidStatusTransitionError, NotFoundError


@pytest.fixture()
def order(db, user, serum, balm):
    cart_service.add_item(db, user.id, serum.id, 2)
    cart_service.add_item(db, user.id, balm.id, 1)
    return checkout(db, user.id)


class TestStatusTransitions:
    def test_happy_path(self, db, order):
        for status in (OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            updated = orders_service.update_status(db, order.id, status)
            assert updated.status == status

    @pytest.mark.parametrize("target", [OrderStatus.SHIPPED, OrderStatus.DELIVERED, OrderStatus.PENDING])
    def test_cannot_skip_or_repeat_from_pending(self, db, order, target):
        with pytest.raises(InvalidStatusTransitionError) as exc_info:
            orders_service.update_status(db, order.id, target)
        assert exc_info.value.context["current"] == "pending"

    def test_cancel_from_processing(self, db, order):
        orders_service.update_status(db, order.id, OrderStatus.PROCESSING)
        cancelled = orders_service.update_status(db, order.id, OrderStatus.CANCELLED)
        assert cancelled.status == OrderStatus.CANCELLED

    def test_cannot_cancel_after_shipping(self, db, order):
        orders_service.update_status(db, order.id, OrderStatus.PROCESSING)
        orders_service.update_status(db, order.id, OrderStatus.SHIPPED)

        with pytest.raises(InvalidStatusTransitionError):
            orders_service.update_status(db, order.id, OrderStatus.CANCELLED)

    def test_cancelled_is_terminal(self, db, order):
        orders_service.update_status(db, order.id, OrderStatus.CANCELLED)
        with pytest.raises(InvalidStatusTransitionError):
            orders_service.update_status(db, order.id, OrderStatus.PROCESSING)

    def test_unknown_order(self, db):
        with pytest.raises(NotFoundError):
            orders_service.update_status(db, 999, OrderStatus.PROCESSING)


class TestCancellationRestock:
    def test_stock_returns_to_shelf(self, db, order, serum, balm):
        orders_service.update_status(db, order.id, OrderStatus.CANCELLED, actor_id=None)

        db.expire_all()
        assert db.get(Product, serum.id).stock == 50
        assert db.get(Product, balm.id).stock == 75

        additions = (
            db.query(InventoryLog)
            .filter(InventoryLog.order_id == order.id, InventoryLog.change_type == InventoryChangeType.ADD)
            .all()
        )
        assert sorted((e.product_id, e.quantity) for e in additions) == sorted([(serum.id, 2), (balm.id, 1)])
        assert all(e.reason == "order cancelled" for e in additions)

    def test_totals_are_not_recalculated(self, db, order):
        total = order.total
        cancelled = orders_service.update_status(db, order.id, OrderStatus.CANCELLED)
        assert cancelled.total == total


class TestOrderQueries:
    def test_user_orders_newest_first(self, db, user, serum):
        cart_service.add_item(db, user.id, serum.id, 1)
        first = checkout(db, user.id)
        cart_service.add_item(db, user.id, serum.id, 1)
        second = checkout(db, user.id)

        orders = orders_service.list_user_orders(db, user.id)
        assert [o.id for o in orders] == [second.id, first.id]

    def test_list_orders_filters_by_status(self, db, make_user, serum):
        ids = []
        for _ in range(3):
            shopper = make_user()
            cart_service.add_item(db, shopper.id, serum.id, 1)
            ids.append(checkout(db, shopper.id).id)
        orders_service.update_status(db, ids[0], OrderStatus.CANCELLED)

        pending, total = orders_service.list_orders(db, status=OrderStatus.PENDING)
        assert total == 2
        assert sorted(o.id for o in pending) == sorted(ids[1:])

        page, total = orders_service.list_orders(db, page=2, page_size=2)
        assert total == 3
        assert len(page) == 1


class TestOrdersApi:
    def test_get_order(self, client, order):
        response = client.get(f"/orders/{order.id}")
        assert response.status_code == 200
        body = response.json()
        assert body["id"] == order.id
        assert len(body["items"]) == 2

    def test_missing_order(self, client):
        response = client.get("/orders/12345")
        assert response.status_code == 404
        assert response.json()["detail"]["resource"] == "Order"

    def test_user_orders(self, client, user, order):
        response = client.get(f"/orders/user/{user.id}")
        assert [o["id"] for o in response.json()] == [order.id]

    def test_list_orders_page(self, client, order):
        body = client.get("/orders", params={"status": "pending"}).json()
        assert body["total"] == 1
        assert body["items"][0]["id"] == order.id

    def test_patch_status_and_invalid_transition(self, client, order):
        response = client.patch(f"/orders/{order.id}/status", json={"status": "processing"})
        assert response.status_code == 200
        assert response.json()["status"] == "processing"

        response = client.patch(f"/orders/{order.id}/status", json={"status": "delivered"})
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "InvalidStatusTransitionError"
        assert body["detail"]["allowed"] == ["cancelled", "shipped"]

    def test_unknown_status_value_is_422(self, client, order):
        response = client.patch(f"/orders/{order.id}/status", json={"status": "lost"})
        assert response.status_code == 422

    def test_cancel_via_api_restocks(self, client, db, order, serum):
        client.patch(f"/orders/{order.id}/status", json={"status": "cancelled"})
        db.expire_all()
        assert db.get(Product, serum.id).stock == 50
        assert client.get(f"/orders/{order.id}").json()["total"] == 76.0
