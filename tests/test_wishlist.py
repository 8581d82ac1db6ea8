"""Wishlist presence semantics."""

import pytest

from models.wishlist import WishlistItem
from services import wishlist as wishlist_service
from services.errors import NotFoundError


class TestWishlist:
    def test_add_twice_keeps_one_row(self, db, user, serum):
        first = wishlist_service.add_item(db, user.id, serum.id)
        second = wishlist_service.add_item(db, user.id, serum.id)

        assert first.id == second.id
        rows = db.query(WishlistItem).filter(
            WishlistItem.user_id == user.id, WishlistItem.product_id == serum.id
        ).count()
        assert rows == 1
        assert wishlist_service.is_present(db, user.id, serum.id)

    def test_remove_absent_is_a_no_op(self, db, user, serum):
        assert wishlist_service.remove_item(db, user.id, serum.id) is False
        assert not wishlist_service.is_present(db, user.id, serum.id)

    def test_remove_present(self, db, user, serum, balm):
        wishlist_service.add_item(db, user.id, serum.id)
        wishlist_service.add_item(db, user.id, balm.id)

        assert wishlist_service.remove_item(db, user.id, serum.id) is True
        assert [w.product_id for w in wishlist_service.get_wishlist(db, user.id)] == [balm.id]

    def test_unknown_product(self, db, user):
        with pytest.raises(NotFoundError):
            wishlist_service.add_item(db, user.id, 31337)

    def test_presence_is_per_user(self, db, make_user, serum):
        a, b = make_user(), make_user()
        wishlist_service.add_item(db, a.id, serum.id)

        assert wishlist_service.is_present(db, a.id, serum.id)
        assert not wishlist_service.is_present(db, b.id, serum.id)


class TestWishlistApi:
    def test_add_get_presence_remove(self, client, user, serum):
        url = f"/wishlist/{user.id}/items/{serum.id}"

        assert client.post(url).status_code == 200
        body = client.post(url).json()
        assert len(body["items"]) == 1
        assert body["items"][0]["price"] == 28.0
        assert body["items"][0]["in_stock"] is True

        assert client.get(url).json()["present"] is True

        assert client.delete(url).json()["items"] == []
        assert client.delete(url).status_code == 200
        assert client.get(url).json()["present"] is False

    def test_unknown_user(self, client, serum):
        response = client.post(f"/wishlist/999/items/{serum.id}")
        assert response.status_code == 404
