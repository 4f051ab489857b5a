"""Integration tests for order queries and the materials catalog."""

import pytest

from matpay.domain.exceptions import EntityNotFoundError, InvalidStatus, ValidationError
from matpay.domain.model.gateway_events import ChargeSucceeded
from tests.fakes import BUYER, SELLER, charge_body, make_container, place_and_initialize, place_order


class TestShowOrder:

    def test_includes_latest_payment(self):
        c = make_container()
        order, ref = place_and_initialize(c)
        c.apply_charge.handle(ChargeSucceeded.from_data(charge_body(ref)["data"]))

        dto = c.show_order.handle(order.id)

        assert dto.status == "CONFIRMED"
        assert dto.payment.reference == ref
        assert dto.payment.status == "COMPLETED"

    def test_unpaid_order_has_no_payment(self):
        c = make_container()
        order = place_order(c)
        assert c.show_order.handle(order.id).payment is None

    def test_unknown_order(self):
        with pytest.raises(EntityNotFoundError):
            make_container().show_order.handle(1)


class TestListOrders:

    def _three_orders(self):
        c = make_container()
        ids = [place_order(c, (("M1", 1),)).id for _ in range(3)]
        c.cancel_order.handle(ids[0])
        return c, ids

    def test_buyer_listing_newest_first(self):
        c, ids = self._three_orders()
        page = c.list_orders.for_buyer(BUYER)
        assert [o.id for o in page.orders] == list(reversed(ids))
        assert page.total == 3
        assert page.pages == 1

    def test_status_filter(self):
        c, ids = self._three_orders()
        page = c.list_orders.for_seller(SELLER, status="cancelled")
        assert [o.id for o in page.orders] == [ids[0]]

    def test_pagination(self):
        c, ids = self._three_orders()
        page = c.list_orders.for_buyer(BUYER, page=2, limit=2)
        assert [o.id for o in page.orders] == [ids[0]]
        assert page.pages == 2

    def test_bad_paging_rejected(self):
        c = make_container()
        with pytest.raises(ValidationError):
            c.list_orders.for_buyer(BUYER, page=0)
        with pytest.raises(ValidationError):
            c.list_orders.for_buyer(BUYER, limit=1000)

    def test_bad_status_filter_rejected(self):
        with pytest.raises(InvalidStatus):
            make_container().list_orders.for_buyer(BUYER, status="LOST")


class TestMaterials:

    def test_add_and_list(self):
        c = make_container()
        dto = c.add_material.handle(SELLER, "Geometry Set", "12.5", 7)
        assert dto.price == "12.50"
        assert dto.id == f"{SELLER}-3"

        names = [m.name for m in c.list_materials.handle(SELLER)]
        assert names == ["Exercise Book Pack", "Geometry Set", "Mathematics Textbook"]

    def test_non_positive_price_rejected(self):
        with pytest.raises(ValidationError, match="Price must be positive"):
            make_container().add_material.handle(SELLER, "Free pen", "0", 1)

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            make_container().add_material.handle(SELLER, "Pen", "1", -1)

    def test_duplicate_explicit_id_rejected(self):
        with pytest.raises(ValidationError, match="already exists"):
            make_container().add_material.handle(SELLER, "Pen", "1", 1, material_id="M1")
