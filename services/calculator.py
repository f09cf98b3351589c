# daraz_orders/services/calculator.py

from dataclasses import replace
from decimal import Decimal, DivisionByZero, InvalidOperation, Overflow, localcontext
from typing import Iterable, Optional

from domain.models import Order, Product
from utils.formatting import to_decimal


def _quiet_context(ctx):
    # overflow gives Infinity and inf - inf gives NaN instead of raising
    ctx.traps[Overflow] = False
    ctx.traps[InvalidOperation] = False
    ctx.traps[DivisionByZero] = False
    return ctx


def _finite(value: Decimal) -> Optional[Decimal]:
    return value if value.is_finite() else None


def purchasing_total(products: Iterable[Product]) -> Decimal:
    """
    Sum of purchasing_price * units_sold over all lines.
    Blank or non-numeric text counts as 0. May be Infinity for absurdly large input.
    """
    with localcontext() as ctx:
        _quiet_context(ctx)
        return sum(
            (to_decimal(p.purchasing_price) * to_decimal(p.units_sold) for p in products),
            Decimal(0),
        )


def calculate_order(draft: Order) -> Order:
    """
    Return a copy of `draft` with daraz_commission, profit and loss recomputed.

    Derived fields are always cleared first, so re-running on a calculated
    order gives the same result. Never raises on malformed input: a value
    that cannot be represented is left empty.
    """
    gross = to_decimal(draft.gross_sale)
    net = to_decimal(draft.net_sales)

    commission = None
    profit = None
    loss = None

    with localcontext() as ctx:
        _quiet_context(ctx)

        if gross and net:
            commission = _finite(gross - net)

        if net:
            result = _finite(net - purchasing_total(draft.products))
            if result is None:
                pass
            # break-even counts as profit
            elif result >= 0:
                profit = result
            else:
                loss = abs(result)

    return replace(draft, daraz_commission=commission, profit=profit, loss=loss)
