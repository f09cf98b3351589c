# daraz_orders/services/export_service.py

import io
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from domain.models import Order
from utils.formatting import to_spreadsheet_number

logger = logging.getLogger(__name__)

EXPORT_FILE_NAME = "orders.xlsx"
EXPORT_SHEET_NAME = "Orders"
EXPORT_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

EXPORT_COLUMNS = [
    "Order ID",
    "Date/Time",
    "Gross Sale",
    "Net Sale",
    "Daraz Commission",
    "Profit",
    "Loss",
    "Payment",
    "Products",
]

NOTHING_TO_EXPORT = "No orders to export!"


def products_summary(order: Order) -> str:
    """
    Example: [A x2, B x1] -> "A(2) | B(1)"
    """
    return " | ".join(f"{p.name}({p.units_sold})" for p in order.products)


def order_rows(orders: Sequence[Order]) -> List[Dict[str, Any]]:
    """
    Flatten orders into spreadsheet rows.
    Purchasing price and list per product are not exported.
    """
    return [
        {
            "Order ID": o.order_id,
            "Date/Time": o.date_time,
            "Gross Sale": o.gross_sale,
            "Net Sale": o.net_sales,
            "Daraz Commission": to_spreadsheet_number(o.daraz_commission),
            "Profit": to_spreadsheet_number(o.profit),
            "Loss": to_spreadsheet_number(o.loss),
            "Payment": o.payment,
            "Products": products_summary(o),
        }
        for o in orders
    ]


def build_orders_workbook(orders: Sequence[Order]) -> bytes:
    df = pd.DataFrame(order_rows(orders), columns=EXPORT_COLUMNS)

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=EXPORT_SHEET_NAME, index=False)

    return buffer.getvalue()


def export_orders(orders: Sequence[Order]) -> Tuple[bool, str, Optional[bytes]]:
    """
    Returns (ok, message, workbook_bytes). Nothing is generated for an empty list.
    """
    if not orders:
        logger.info("Export skipped: no orders")
        return False, NOTHING_TO_EXPORT, None

    payload = build_orders_workbook(orders)
    logger.info("Exported %d orders to %s", len(orders), EXPORT_FILE_NAME)
    return True, f"Exported {len(orders)} orders", payload
