import streamlit as st
import pandas as pd

from domain.models import Order, Product
from services.order_service import OrderController
from utils.formatting import format_amount


def _on_product_change(controller: OrderController, index: int, name: str, key: str):
    controller.set_product_field(index, name, st.session_state[key])


def product_row(controller: OrderController, index: int, product: Product):
    """One editable product line with its remove button."""
    rev = controller.revision
    cols = st.columns([3, 2, 2, 2, 1])

    fields = [
        ("name", "Name", product.name),
        ("purchasing_price", "Price", product.purchasing_price),
        ("units_sold", "Units", product.units_sold),
        ("list", "List", product.list),
    ]

    for col, (name, label, value) in zip(cols, fields):
        key = f"product_{rev}_{index}_{name}"
        with col:
            st.text_input(
                label,
                value=value,
                key=key,
                placeholder=label,
                label_visibility="collapsed" if index else "visible",
                on_change=_on_product_change,
                args=(controller, index, name, key),
            )

    with cols[4]:
        if index == 0:
            st.write("")
            st.write("")
        st.button(
            "✕",
            key=f"remove_{rev}_{index}",
            disabled=not controller.can_remove_product,
            on_click=controller.remove_product,
            args=(index,),
        )


@st.dialog("Confirm")
def confirm_delete_dialog(controller: OrderController, order: Order):
    st.write("Delete this order?")

    df = pd.DataFrame(
        [
            ("Order ID", order.order_id),
            ("Date/Time", order.date_time),
            ("Net Sale", order.net_sales),
            ("Profit", format_amount(order.profit)),
            ("Loss", format_amount(order.loss)),
        ],
        columns=["Key", "Value"],
    )
    st.dataframe(df, hide_index=True)

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button("Yes", type="primary", key="confirm_yes"):
            status, msg = controller.delete(order.id, confirmed=True)

            if not status:
                st.error(msg)
            else:
                st.session_state["flash_message"] = msg
                st.rerun()
    with col_no:
        if st.button("No", key="confirm_no"):
            controller.delete(order.id, confirmed=False)
            st.rerun()
