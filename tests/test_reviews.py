from decimal import Decimal

import pytest

from models.product import Product
from services import reviews as review_service
from services.errors import DuplicateReviewError, InvalidRatingError, NotFoundError


def _aggregate(db, product_id):
    db.expire_all()
    product = db.get(Product, product_id)
    return product.rating, product.review_count


class TestRatingRecompute:
    def test_create_updates_aggregate(self, db, make_user, serum):
        review_service.create_review(db, serum.id, make_user().id, 5, "Lovely")
        review_service.create_review(db, serum.id, make_user().id, 4)
        review_service.create_review(db, serum.id, make_user().id, 4)

        assert _aggregate(db, serum.id) == (Decimal("4.33"), 3)

    def test_update_and_delete_recompute(self, db, make_user, serum):
        first = review_service.create_review(db, serum.id, make_user().id, 2)
        second = review_service.create_review(db, serum.id, make_user().id, 4)

        review_service.update_review(db, first.id, rating=5)
        assert _aggregate(db, serum.id) == (Decimal("4.50"), 2)

        review_service.delete_review(db, second.id)
        assert _aggregate(db, serum.id) == (Decimal("5.00"), 1)

        review_service.delete_review(db, first.id)
        assert _aggregate(db, serum.id) == (Decimal("0"), 0)

    def test_comment_only_update_keeps_rating(self, db, user, serum):
        review = review_service.create_review(db, serum.id, user.id, 3)
        updated = review_service.update_review(db, review.id, comment="Still good")

        assert updated.rating == 3
        assert updated.comment == "Still good"
        assert _aggregate(db, serum.id) == (Decimal("3.00"), 1)


class TestReviewValidation:
    @pytest.mark.parametrize("rating", [0, 6, -1])
    def test_rating_bounds(self, db, user, serum, rating):
        with pytest.raises(InvalidRatingError):
            review_service.create_review(db, serum.id, user.id, rating)

    def test_one_review_per_user_and_product(self, db, user, serum):
        review_service.create_review(db, serum.id, user.id, 4)
        with pytest.raises(DuplicateReviewError):
            review_service.create_review(db, serum.id, user.id, 5)

    def test_unknown_product(self, db, user):
        with pytest.raises(NotFoundError):
            review_service.create_review(db, 8080, user.id, 4)


class TestReviewsApi:
    def test_post_list_patch_delete(self, client, user, serum):
        created = client.post(f"/products/{serum.id}/reviews", json={"user_id": user.id, "rating": 4})
        assert created.status_code == 201
        review_id = created.json()["id"]

        listing = client.get(f"/products/{serum.id}/reviews").json()
        assert listing["total"] == 1
        assert client.get(f"/products/{serum.id}").json()["rating"] == 4.0

        client.patch(f"/reviews/{review_id}", json={"rating": 2})
        assert client.get(f"/products/{serum.id}").json()["rating"] == 2.0

        assert client.delete(f"/reviews/{review_id}").status_code == 204
        product = client.get(f"/products/{serum.id}").json()
        assert (product["rating"], product["review_count"]) == (0.0, 0)

    def test_invalid_rating_is_400(self, client, user, serum):
        response = client.post(f"/products/{serum.id}/reviews", json={"user_id": user.id, "rating": 9})
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidRatingError"

    def test_duplicate_review_is_409(self, client, user, serum):
        client.post(f"/products/{serum.id}/reviews", json={"user_id": user.id, "rating": 4})
        response = client.post(f"/products/{serum.id}/reviews", json={"user_id": user.id, "rating": 5})
        assert response.status_code == 409
