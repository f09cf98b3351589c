"""
Tests for the spreadsheet export.
"""

import io
from decimal import Decimal

import pandas as pd

from domain.models import Order, Product
from services.export_service import (
    EXPORT_COLUMNS,
    EXPORT_SHEET_NAME,
    NOTHING_TO_EXPORT,
    build_orders_workbook,
    export_orders,
    order_rows,
)


def sample_order():
    return Order(
        id="1",
        order_id="D-100",
        date_time="2024-02-01T12:00",
        products=(
            Product(name="A", purchasing_price="10", units_sold="2", list="L1"),
            Product(name="B", purchasing_price="5", units_sold="1", list="L2"),
        ),
        gross_sale="100",
        net_sales="90",
        daraz_commission=Decimal("10"),
        profit=Decimal("65"),
        payment="COD",
    )


def test_export_with_no_orders_generates_nothing(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("workbook should not be built")

    monkeypatch.setattr("services.export_service.build_orders_workbook", fail)

    assert export_orders([]) == (False, NOTHING_TO_EXPORT, None)


def test_products_column_joins_name_and_units():
    rows = order_rows([sample_order()])

    assert rows[0]["Products"] == "A(2) | B(1)"


def test_row_projection():
    row = order_rows([sample_order()])[0]

    assert list(row) == EXPORT_COLUMNS
    assert row["Order ID"] == "D-100"
    assert row["Date/Time"] == "2024-02-01T12:00"
    assert row["Gross Sale"] == "100"
    assert row["Net Sale"] == "90"
    assert row["Daraz Commission"] == 10
    assert row["Profit"] == 65
    assert row["Loss"] == ""
    assert row["Payment"] == "COD"


def test_workbook_has_orders_sheet():
    payload = build_orders_workbook([sample_order()])

    sheets = pd.read_excel(io.BytesIO(payload), sheet_name=None, engine="openpyxl")
    assert list(sheets) == [EXPORT_SHEET_NAME]

    df = sheets[EXPORT_SHEET_NAME]
    assert list(df.columns) == EXPORT_COLUMNS
    assert len(df) == 1
    assert df.loc[0, "Products"] == "A(2) | B(1)"


def test_export_orders_returns_workbook_bytes():
    ok, msg, payload = export_orders([sample_order(), sample_order()])

    assert ok
    assert "2" in msg
    assert payload[:2] == b"PK"


def test_huge_amounts_export_as_text():
    order = Order(order_id="D-1", net_sales="9e999999", profit=Decimal("9e999999"))

    row = order_rows([order])[0]

    assert row["Profit"] == "9E+999999"
    assert build_orders_workbook([order])[:2] == b"PK"
