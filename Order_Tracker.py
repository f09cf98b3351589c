import os
import logging

import streamlit as st

from data_integrator import OrderStore
from element_component import confirm_delete_dialog, product_row
from services.export_service import EXPORT_FILE_NAME, EXPORT_MIME_TYPE
from services.order_service import EditorMode, OrderController
from utils.formatting import format_amount, join_date_time, split_date_time

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

st.set_page_config(
    page_title="Daraz Order Tracker",
    page_icon="🧾",
    layout="wide",
)

st.sidebar.header("🧾 Daraz Order Tracker")

if "order_controller" not in st.session_state:
    controller = OrderController(OrderStore())
    ok, msg = controller.refresh()
    if not ok:
        st.error(msg)
    st.session_state["order_controller"] = controller

controller: OrderController = st.session_state["order_controller"]

if st.session_state.get("flash_message"):
    st.success(st.session_state.pop("flash_message"))


def _on_field_change(name: str, key: str):
    controller.set_field(name, st.session_state[key])


def _on_date_time_change(date_key: str, time_key: str):
    controller.set_field(
        "date_time",
        join_date_time(st.session_state[date_key], st.session_state[time_key]),
    )


# -----------------------------------------------------------------------------
# Toolbar
# -----------------------------------------------------------------------------
col_add, col_export, _ = st.columns([1, 1, 6])

with col_add:
    st.button("+ Add Order", type="primary", on_click=controller.open_new)

with col_export:
    if st.button("Export Sheet"):
        ok, msg, payload = controller.export()
        if not ok:
            st.warning(msg)
        else:
            st.session_state["export_payload"] = payload

if st.session_state.get("export_payload"):
    st.download_button(
        "Download orders.xlsx",
        data=st.session_state["export_payload"],
        file_name=EXPORT_FILE_NAME,
        mime=EXPORT_MIME_TYPE,
        on_click=lambda: st.session_state.pop("export_payload", None),
    )

# -----------------------------------------------------------------------------
# Order form
# -----------------------------------------------------------------------------
if controller.is_open:
    draft = controller.draft
    rev = controller.revision

    with st.container(border=True):
        st.subheader("Edit Order" if controller.mode is EditorMode.EDIT else "New Order")

        day, at = split_date_time(draft.date_time)
        date_key, time_key = f"date_{rev}", f"time_{rev}"

        col_date, col_time, col_order = st.columns(3)
        with col_date:
            st.date_input(
                "Date", value=day, key=date_key,
                on_change=_on_date_time_change, args=(date_key, time_key),
            )
        with col_time:
            st.time_input(
                "Time", value=at, key=time_key,
                on_change=_on_date_time_change, args=(date_key, time_key),
            )
        with col_order:
            key = f"order_id_{rev}"
            st.text_input(
                "Order ID *", value=draft.order_id, key=key,
                on_change=_on_field_change, args=("order_id", key),
            )

        st.markdown("**Products**")
        for i, product in enumerate(draft.products):
            product_row(controller, i, product)

        st.button("+ Add Product", key=f"add_product_{rev}", on_click=controller.add_product)

        col_gross, col_net, col_payment = st.columns(3)
        for col, (name, label) in zip(
                (col_gross, col_net, col_payment),
                (("gross_sale", "Gross Sale"), ("net_sales", "Net Sales"), ("payment", "Payment")),
        ):
            key = f"{name}_{rev}"
            with col:
                st.text_input(
                    label, value=getattr(draft, name), key=key,
                    on_change=_on_field_change, args=(name, key),
                )

        # derived fields, read-only
        draft = controller.draft
        col_comm, col_profit, col_loss = st.columns(3)
        col_comm.metric("Daraz Commission", format_amount(draft.daraz_commission) or "-")
        col_profit.metric("Profit", format_amount(draft.profit) or "-")
        col_loss.metric("Loss", format_amount(draft.loss) or "-")

        col_submit, col_cancel, _ = st.columns([1, 1, 6])
        with col_submit:
            label = "Update Order" if controller.mode is EditorMode.EDIT else "Submit Order"
            if st.button(label, type="primary", key=f"submit_{rev}"):
                ok, msg = controller.submit()
                if ok:
                    st.session_state["flash_message"] = msg
                    st.rerun()
                else:
                    st.error(msg)
        with col_cancel:
            st.button("Cancel", key=f"cancel_{rev}", on_click=controller.cancel)

# -----------------------------------------------------------------------------
# Order list
# -----------------------------------------------------------------------------
st.divider()

if not controller.orders:
    st.info("No orders yet.")
else:
    header = st.columns([2, 1, 1, 1, 1, 1, 3, 1, 1])
    for col, title in zip(
            header,
            ("Order", "Gross", "Net", "Commission", "Profit", "Loss", "Products", "", ""),
    ):
        col.markdown(f"**{title}**")

    for order in controller.orders:
        cols = st.columns([2, 1, 1, 1, 1, 1, 3, 1, 1])
        cols[0].write(order.order_id)
        cols[1].write(order.gross_sale)
        cols[2].write(order.net_sales)
        cols[3].write(format_amount(order.daraz_commission))
        cols[4].markdown(f":green[{format_amount(order.profit)}]" if order.profit is not None else "")
        cols[5].markdown(f":red[{format_amount(order.loss)}]" if order.loss is not None else "")
        cols[6].markdown("  \n".join(f"{p.name} ({p.units_sold})" for p in order.products))
        with cols[7]:
            st.button("Edit", key=f"edit_{order.id}", on_click=controller.open_edit, args=(order.id,))
        with cols[8]:
            if st.button("Delete", key=f"delete_{order.id}"):
                confirm_delete_dialog(controller, order)
