"""
Tests for the error taxonomy
"""
from bazar.core import errors


class TestErrorTaxonomy:

    def test_categories_map_to_http_statuses(self):
        assert errors.EmptyCart().status_code == 400
        assert errors.InvalidQuantity().status_code == 400
        assert errors.MissingCredential().status_code == 401
        assert errors.InvalidCredentials().status_code == 401
        assert errors.ProductNotFound(9).status_code == 404
        assert errors.InsufficientStock(1, available=0, requested=1).status_code == 409
        assert errors.PersistenceFailure().status_code == 500

    def test_duplicate_email_is_a_conflict_reported_as_bad_request(self):
        error = errors.DuplicateEmail()

        assert isinstance(error, errors.ConflictError)
        assert error.status_code == 400

    def test_specific_errors_belong_to_their_category(self):
        assert isinstance(errors.ExpiredToken(), errors.AuthError)
        assert isinstance(errors.EmptyCart(), errors.ValidationError)
        assert isinstance(errors.ProductNotFound(1), errors.NotFoundError)
        assert isinstance(errors.PersistenceFailure(), errors.PersistenceError)

    def test_insufficient_stock_payload_names_product_and_availability(self):
        error = errors.InsufficientStock(2, available=1, requested=3)

        assert error.to_dict() == {
            "kind": "InsufficientStock",
            "message": "Only 1 units of product 2 available (3 requested)",
            "product_id": 2,
            "available": 1,
            "requested": 3,
        }

    def test_custom_message_overrides_default(self):
        assert errors.InvalidQuantity("bad").to_dict() == {"kind": "InvalidQuantity", "message": "bad"}
