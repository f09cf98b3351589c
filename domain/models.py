# daraz_orders/domain/models.py

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from utils.formatting import parse_amount, to_record_amount

USER_FIELDS = ("date_time", "order_id", "gross_sale", "net_sales", "payment")
PRODUCT_FIELDS = ("name", "purchasing_price", "units_sold", "list")


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class Product:
    """
    One line item of an order. Numeric-looking fields hold the raw form text.
    """
    name: str = ""
    purchasing_price: str = ""
    units_sold: str = ""
    list: str = ""

    def to_record(self) -> Dict[str, str]:
        return {
            "product_name": self.name,
            "purchasing_price": self.purchasing_price,
            "units_sold": self.units_sold,
            "list": self.list,
        }

    @classmethod
    def from_record(cls, row: Dict[str, Any]) -> "Product":
        return cls(
            name=_text(row.get("product_name", row.get("name"))),
            purchasing_price=_text(row.get("purchasing_price")),
            units_sold=_text(row.get("units_sold")),
            list=_text(row.get("list")),
        )


@dataclass(frozen=True)
class Order:
    """
    A sales order as edited in the form and stored in the `orders` table.

    daraz_commission, profit and loss are derived (see services.calculator)
    and are None when they cannot be computed.
    """
    id: Optional[str] = None  # assigned by the store
    date_time: str = ""
    order_id: str = ""
    products: Tuple[Product, ...] = field(default_factory=lambda: (Product(),))
    gross_sale: str = ""
    net_sales: str = ""
    daraz_commission: Optional[Decimal] = None
    profit: Optional[Decimal] = None
    loss: Optional[Decimal] = None
    payment: str = ""
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        """
        Serialize to a fresh, JSON-ready dict. Timestamps and id are left to the store.
        """
        return {
            "date_time": self.date_time,
            "order_id": self.order_id,
            "products": [p.to_record() for p in self.products],
            "gross_sale": self.gross_sale,
            "net_sales": self.net_sales,
            "daraz_commission": to_record_amount(self.daraz_commission),
            "profit": to_record_amount(self.profit),
            "loss": to_record_amount(self.loss),
            "payment": self.payment,
        }

    @classmethod
    def from_record(cls, row: Dict[str, Any]) -> "Order":
        products = tuple(Product.from_record(p) for p in (row.get("products") or []))
        row_id = row.get("id")
        return cls(
            id=str(row_id) if row_id is not None else None,
            date_time=_text(row.get("date_time")),
            order_id=_text(row.get("order_id")),
            products=products,
            gross_sale=_text(row.get("gross_sale")),
            net_sales=_text(row.get("net_sales")),
            daraz_commission=parse_amount(row.get("daraz_commission")),
            profit=parse_amount(row.get("profit")),
            loss=parse_amount(row.get("loss")),
            payment=_text(row.get("payment")),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )


def empty_order() -> Order:
    """A blank draft with exactly one empty product row."""
    return Order()
