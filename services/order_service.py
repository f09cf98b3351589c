# daraz_orders/services/order_service.py

import logging
from dataclasses import replace
from enum import Enum
from typing import List, Optional, Tuple

from data_integrator import OrderStore, PersistenceError
from domain.models import Order, Product, PRODUCT_FIELDS, USER_FIELDS, empty_order
from services.calculator import calculate_order
from services.export_service import export_orders

logger = logging.getLogger(__name__)


class EditorMode(str, Enum):
    CLOSED = "closed"
    NEW = "new"
    EDIT = "edit"


class OrderController:
    """
    Owns the order list and the editor for the order tracker page.

    Editor states:
      closed -> new  (open_new)   -> closed (submit persists / cancel discards)
      closed -> edit (open_edit)  -> closed (submit overwrites / cancel discards)

    The list is always re-fetched in full after a mutation.
    """

    def __init__(self, store: OrderStore):
        self.store = store
        self.orders: List[Order] = []
        self.mode = EditorMode.CLOSED
        self.draft: Optional[Order] = None
        self.edit_id: Optional[str] = None
        # bumped whenever the form's widgets must be rebuilt
        self.revision = 0

    # ------------------------------------------------------------------
    # List
    # ------------------------------------------------------------------

    def refresh(self) -> Tuple[bool, str]:
        try:
            self.orders = self.store.list_orders()
        except PersistenceError as e:
            logger.error("Could not load orders: %s", e)
            return False, str(e)
        return True, f"Loaded {len(self.orders)} orders"

    def find(self, order_id: str) -> Optional[Order]:
        return next((o for o in self.orders if o.id == order_id), None)

    # ------------------------------------------------------------------
    # Editor
    # ------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self.mode is not EditorMode.CLOSED

    @property
    def can_remove_product(self) -> bool:
        return self.draft is not None and len(self.draft.products) > 1

    def _set_draft(self, draft: Order, rebuild: bool = False):
        self.draft = calculate_order(draft)
        if rebuild:
            self.revision += 1

    def _require_draft(self) -> Order:
        if self.draft is None:
            raise RuntimeError("No order is being edited")
        return self.draft

    def open_new(self):
        self.mode = EditorMode.NEW
        self.edit_id = None
        self._set_draft(empty_order(), rebuild=True)

    def open_edit(self, order_id: str) -> bool:
        order = self.find(order_id)
        if order is None:
            logger.warning("Cannot edit unknown order id=%s", order_id)
            return False

        products = order.products or (Product(),)
        self.mode = EditorMode.EDIT
        self.edit_id = order_id
        self._set_draft(replace(order, products=products), rebuild=True)
        return True

    def cancel(self):
        self.mode = EditorMode.CLOSED
        self.draft = None
        self.edit_id = None
        self.revision += 1

    def set_field(self, name: str, value: str):
        if name not in USER_FIELDS:
            raise ValueError(f"Unknown order field: {name}")
        draft = self._require_draft()
        self._set_draft(replace(draft, **{name: value}))

    def set_product_field(self, index: int, name: str, value: str):
        if name not in PRODUCT_FIELDS:
            raise ValueError(f"Unknown product field: {name}")
        draft = self._require_draft()
        products = list(draft.products)
        products[index] = replace(products[index], **{name: value})
        self._set_draft(replace(draft, products=tuple(products)))

    def add_product(self):
        draft = self._require_draft()
        self._set_draft(replace(draft, products=draft.products + (Product(),)), rebuild=True)

    def remove_product(self, index: int) -> bool:
        """The last remaining row is never removed."""
        draft = self._require_draft()
        if len(draft.products) <= 1:
            return False

        products = draft.products[:index] + draft.products[index + 1:]
        self._set_draft(replace(draft, products=products), rebuild=True)
        return True

    def submit(self) -> Tuple[bool, str]:
        """
        Persist the draft. On failure the editor stays open with the draft intact.
        """
        draft = self._require_draft()

        try:
            if self.mode is EditorMode.EDIT:
                self.store.update_order(self.edit_id, draft)
                msg = f"Order {draft.order_id} updated"
            else:
                self.store.create_order(draft)
                msg = f"Order {draft.order_id} saved"
        except PersistenceError as e:
            logger.error("Saving order %s failed: %s", draft.order_id, e)
            return False, str(e)

        self.cancel()
        self.refresh()
        return True, msg

    def delete(self, order_id: str, confirmed: bool) -> Tuple[bool, str]:
        if not confirmed:
            return False, "Delete cancelled"

        try:
            self.store.delete_order(order_id)
        except PersistenceError as e:
            logger.error("Deleting order id=%s failed: %s", order_id, e)
            return False, str(e)

        if self.edit_id == order_id:
            self.cancel()

        self.refresh()
        return True, "Order deleted"

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self) -> Tuple[bool, str, Optional[bytes]]:
        return export_orders(self.orders)
