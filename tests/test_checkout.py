"""Cart -> order conversion: stock gate, totals, atomicity."""

from decimal import Decimal

import pytest
from sqlalchemy import update

from models.cart import CartItem
from models.inventory import InventoryChangeType, InventoryLog
from models.log import Log
from models.order import Order, OrderItem, OrderStatus
from models.product import Product
from services import cart as cart_service
from services import checkout as checkout_service
from services.checkout import checkout
from services.errors import (
    EmptyCartError, InvalidPromoCodeError, InvalidShippingMethodError, NotFoundError, StockConflictError
)


def _sales(db, product_id):
    return (
        db.query(InventoryLog)
        .filter(InventoryLog.product_id == product_id, InventoryLog.change_type == InventoryChangeType.SALE)
        .all()
    )


class TestCheckout:
    def test_single_item_order(self, db, user, serum):
        cart_service.add_item(db, user.id, serum.id, 2)

        order = checkout(db, user.id)

        assert order.id is not None
        assert order.status == OrderStatus.PENDING
        assert order.subtotal == Decimal("56.00")
        assert order.shipping == Decimal("5.00")
        assert order.total == Decimal("61.00")
        assert [(i.product_id, i.quantity, i.price_at_purchase) for i in order.items] == [
            (serum.id, 2, Decimal("28.00"))
        ]
        assert cart_service.get_cart(db, user.id) == []

        sales = _sales(db, serum.id)
        assert len(sales) == 1
        assert sales[0].quantity == 2
        assert sales[0].order_id == order.id

    def test_stock_is_decremented(self, db, user, serum, balm):
        cart_service.add_item(db, user.id, serum.id, 2)
        cart_service.add_item(db, user.id, balm.id, 5)

        checkout(db, user.id)

        db.expire_all()
        assert db.get(Product, serum.id).stock == 48
        assert db.get(Product, balm.id).stock == 70

    def test_sustainability_figures(self, db, user, serum):
        cart_service.add_item(db, user.id, serum.id, 2)
        order = checkout(db, user.id)

        # total 61.00 -> floor(61 / 30) + 1 trees
        assert order.trees_planted == 3
        assert order.carbon_offset == Decimal("1.80")

    def test_cart_to_order_conservation(self, db, user, serum, balm):
        cart_service.add_item(db, user.id, serum.id, 3)
        cart_service.add_item(db, user.id, balm.id, 2)
        expected_subtotal = cart_service.cart_subtotal(cart_service.get_cart(db, user.id))

        order = checkout(db, user.id, shipping_method="express")

        line_sum = sum(i.quantity * i.price_at_purchase for i in order.items)
        assert line_sum == expected_subtotal == order.subtotal
        assert order.total == order.subtotal + order.shipping - order.discount
        assert db.query(CartItem).filter(CartItem.user_id == user.id).count() == 0

    def test_price_is_frozen(self, db, user, serum):
        cart_service.add_item(db, user.id, serum.id, 1)
        order = checkout(db, user.id)
        order_id = order.id

        serum.price = Decimal("99.00")
        db.commit()
        db.expire_all()

        stored = db.get(Order, order_id)
        assert stored.items[0].price_at_purchase == Decimal("28.00")
        assert stored.total == Decimal("33.00")

    def test_empty_cart(self, db, user):
        with pytest.raises(EmptyCartError):
            checkout(db, user.id)
        assert db.query(Order).count() == 0

    def test_unknown_user(self, db):
        with pytest.raises(NotFoundError):
            checkout(db, 4040)

    def test_stock_depleted_by_another_purchase(self, db, make_user, make_product):
        product = make_product(stock=3)
        first, second = make_user(), make_user()
        cart_service.add_item(db, first.id, product.id, 2)
        cart_service.add_item(db, second.id, product.id, 2)

        checkout(db, first.id)

        with pytest.raises(StockConflictError) as exc_info:
            checkout(db, second.id)

        assert exc_info.value.product_ids == [product.id]
        assert exc_info.value.conflicts[0]["available"] == 1
        assert exc_info.value.conflicts[0]["requested"] == 2

        db.expire_all()
        assert db.get(Product, product.id).stock == 1
        assert db.query(Order).filter(Order.user_id == second.id).count() == 0
        # The losing cart is kept so the shopper can adjust it
        assert db.query(CartItem).filter(CartItem.user_id == second.id).one().quantity == 2

    def test_conflict_names_every_offending_product(self, db, user, make_product):
        a = make_product(stock=5)
        b = make_product(stock=5)
        c = make_product(stock=5)
        for p in (a, b, c):
            cart_service.add_item(db, user.id, p.id, 4)

        a.stock = 1
        c.stock = 0
        db.commit()

        with pytest.raises(StockConflictError) as exc_info:
            checkout(db, user.id)
        assert sorted(exc_info.value.product_ids) == sorted([a.id, c.id])

        db.expire_all()
        assert db.get(Product, b.id).stock == 5
        assert _sales(db, b.id) == []

    def test_failure_midway_rolls_everything_back(self, db, user, serum, monkeypatch):
        cart_service.add_item(db, user.id, serum.id, 2)

        def broken_log(*args, **kwargs):
            raise RuntimeError("inventory log unavailable")

        monkeypatch.setattr("services.checkout.log_inventory_change", broken_log)

        with pytest.raises(RuntimeError):
            checkout(db, user.id)

        db.expire_all()
        assert db.query(Order).count() == 0
        assert db.query(OrderItem).count() == 0
        assert db.get(Product, serum.id).stock == 50
        assert db.query(CartItem).filter(CartItem.user_id == user.id).one().quantity == 2
        assert db.query(Log).filter(Log.action == "ORDER_CREATE").count() == 0

    def test_stock_lost_after_locked_read_aborts_checkout(self, db, user, serum, balm, monkeypatch):
        cart_service.add_item(db, user.id, serum.id, 3)
        cart_service.add_item(db, user.id, balm.id, 1)
        real_order_impact = checkout_service.order_impact

        def shelf_emptied_meanwhile(total):
            # Runs after the locked re-validation and before the decrements
            db.execute(update(Product).where(Product.id == serum.id).values(stock=1))
            return real_order_impact(total)

        monkeypatch.setattr("services.checkout.order_impact", shelf_emptied_meanwhile)

        with pytest.raises(StockConflictError) as exc_info:
            checkout(db, user.id)
        assert exc_info.value.conflicts == [
            {"product_id": serum.id, "name": "Bakuchiol Glow Serum", "requested": 3, "available": 1}
        ]

        db.expire_all()
        assert db.query(Order).count() == 0
        assert db.query(OrderItem).count() == 0
        assert _sales(db, serum.id) == [] and _sales(db, balm.id) == []
        assert db.get(Product, serum.id).stock == 50
        assert db.get(Product, balm.id).stock == 75
        assert db.query(CartItem).filter(CartItem.user_id == user.id).count() == 2
        assert db.query(Log).filter(Log.action == "ORDER_CREATE").count() == 0

    def test_audit_entry_written(self, db, user, serum):
        cart_service.add_item(db, user.id, serum.id, 1)
        order = checkout(db, user.id, ip="10.0.0.7")

        entry = db.query(Log).filter(Log.action == "ORDER_CREATE").one()
        assert entry.resource_id == order.id
        assert entry.ip == "10.0.0.7"


class TestShippingAndPromo:
    @pytest.mark.parametrize("method,cost", [
        ("standard", Decimal("5.00")),
        ("express", Decimal("15.00")),
        ("overnight", Decimal("25.00")),
    ])
    def test_flat_shipping_rates(self, db, user, serum, method, cost):
        cart_service.add_item(db, user.id, serum.id, 1)
        order = checkout(db, user.id, shipping_method=method)

        assert order.shipping == cost
        assert order.total == Decimal("28.00") + cost

    def test_unknown_shipping_method(self, db, user, serum):
        cart_service.add_item(db, user.id, serum.id, 1)
        with pytest.raises(InvalidShippingMethodError):
            checkout(db, user.id, shipping_method="teleport")
        assert db.query(CartItem).count() == 1

    def test_promo_code_discount(self, db, user, serum):
        cart_service.add_item(db, user.id, serum.id, 2)
        order = checkout(db, user.id, promo_code="green10")

        assert order.promo_code == "GREEN10"
        assert order.discount == Decimal("5.60")
        assert order.total == Decimal("55.40")
        # 55.40 -> floor(55.40 / 30) + 1
        assert order.trees_planted == 2

    def test_unknown_promo_code(self, db, user, serum):
        cart_service.add_item(db, user.id, serum.id, 1)
        with pytest.raises(InvalidPromoCodeError):
            checkout(db, user.id, promo_code="FREESTUFF")
        assert db.query(Order).count() == 0


class TestCheckoutApi:
    def test_checkout_returns_created_order(self, client, user, serum):
        client.post(f"/cart/{user.id}/items", json={"product_id": serum.id, "quantity": 2})

        response = client.post(
            f"/orders/checkout/{user.id}",
            json={
                "shipping_method": "standard",
                "shipping_name": "Ada Green",
                "shipping_address_street": "1 Fern Lane",
                "shipping_address_city": "Bristol",
                "shipping_address_zip": "BS1 4DJ",
                "shipping_address_country": "UK",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["subtotal"] == 56.0
        assert body["total"] == 61.0
        assert body["trees_planted"] == 3
        assert body["carbon_offset"] == 1.8
        assert body["shipping_address"]["city"] == "Bristol"
        assert body["items"][0]["price_at_purchase"] == 28.0
        assert body["items"][0]["line_total"] == 56.0

        assert client.get(f"/cart/{user.id}").json()["items"] == []

    def test_empty_cart_is_400(self, client, user):
        response = client.post(f"/orders/checkout/{user.id}", json={})
        assert response.status_code == 400
        assert response.json()["error"] == "EmptyCartError"

    def test_stock_conflict_is_409(self, client, db, user, make_product):
        product = make_product(stock=2)
        client.post(f"/cart/{user.id}/items", json={"product_id": product.id, "quantity": 2})
        product.stock = 1
        db.commit()

        response = client.post(f"/orders/checkout/{user.id}", json={})
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "StockConflictError"
        assert body["detail"]["conflicts"][0]["product_id"] == product.id
