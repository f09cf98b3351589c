"""
Tests for Order/Product record serialization.
"""

from decimal import Decimal

from domain.models import Order, Product, empty_order


def test_empty_order_has_one_blank_product():
    order = empty_order()

    assert order.id is None
    assert order.products == (Product(),)
    assert (order.daraz_commission, order.profit, order.loss) == (None, None, None)


def test_to_record_is_a_fresh_json_ready_snapshot():
    order = Order(
        id="abc",
        order_id="D-1",
        products=(Product(name="Mug", purchasing_price="100", units_sold="2", list="L1"),),
        net_sales="800",
        profit=Decimal("600"),
    )
    record = order.to_record()

    assert "id" not in record
    assert record["products"] == [
        {"product_name": "Mug", "purchasing_price": "100", "units_sold": "2", "list": "L1"}
    ]
    assert record["profit"] == "600"
    assert record["loss"] is None

    record["products"][0]["product_name"] = "changed"
    assert order.products[0].name == "Mug"
    assert order.to_record() is not record


def test_from_record_reads_stored_row():
    row = {
        "id": 42,
        "date_time": "2024-05-01T09:15",
        "order_id": "D-9",
        "products": [{"product_name": "A", "purchasing_price": 10, "units_sold": 3, "list": ""}],
        "gross_sale": 100,
        "net_sales": "90",
        "daraz_commission": 10,
        "profit": 60,
        "loss": None,
        "payment": "Paid",
        "created_at": "2024-05-01T09:16:00+00:00",
    }
    order = Order.from_record(row)

    assert order.id == "42"
    assert order.products == (Product(name="A", purchasing_price="10", units_sold="3", list=""),)
    assert order.gross_sale == "100"
    assert order.daraz_commission == Decimal("10")
    assert order.profit == Decimal("60")
    assert order.loss is None
    assert order.created_at == "2024-05-01T09:16:00+00:00"
    assert order.updated_at is None


def test_from_record_tolerates_missing_fields():
    order = Order.from_record({"id": "x", "loss": ""})

    assert order.products == ()
    assert order.loss is None
    assert order.payment == ""
