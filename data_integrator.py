import os
import logging
from datetime import datetime, timezone
from functools import lru_cache
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from supabase import create_client, Client

from domain.models import Order
from services.calculator import calculate_order

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA = "public"
DEFAULT_TABLE = "orders"


class PersistenceError(Exception):
    """Raised when the backing store cannot complete a read or write."""


@lru_cache(maxsize=1)
def get_supabase() -> Client:
    url: Optional[str] = os.getenv("SUPABASE_URL")
    key: Optional[str] = os.getenv("SUPABASE_KEY")

    if not url or not key:
        raise PersistenceError("SUPABASE_URL and SUPABASE_KEY must be set in the environment")

    return create_client(url, key)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class OrderStore:
    """
    CRUD access to the `orders` table.

    Every failure (transport, auth, backend rejection, missing row) surfaces
    as PersistenceError.
    """

    def __init__(
            self,
            client: Optional[Any] = None,
            schema: Optional[str] = None,
            table: Optional[str] = None,
    ):
        self._client = client
        self.schema = schema or os.getenv("SCHEMA") or DEFAULT_SCHEMA
        self.table = table or os.getenv("ORDERS_TABLE") or DEFAULT_TABLE

    def _query(self):
        if self._client is None:
            self._client = get_supabase()
        return self._client.schema(self.schema).table(self.table)

    def list_orders(self) -> List[Order]:
        """
        Fetch every order. Ordering is whatever the database returns.
        """
        try:
            resp = self._query().select("*").execute()
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Fetch orders failed: {e}") from e

        if getattr(resp, "error", None):
            raise PersistenceError(f"Fetch orders failed: {resp.error}")

        return [Order.from_record(row) for row in (resp.data or [])]

    def create_order(self, draft: Order) -> Order:
        """
        Calculate, snapshot and insert `draft` as a new row.
        Returns the stored order, including its new id.
        """
        payload: Dict[str, Any] = calculate_order(draft).to_record()
        payload["created_at"] = _now_iso()

        try:
            resp = self._query().insert(payload).execute()
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Insert order failed: {e}") from e

        if getattr(resp, "error", None):
            raise PersistenceError(f"Insert order failed: {resp.error}")

        if not resp.data:
            raise PersistenceError("Insert order failed: no data returned")

        created = Order.from_record(resp.data[0])
        logger.info("Created order %s (id=%s)", created.order_id, created.id)
        return created

    def update_order(self, order_id: str, draft: Order) -> Order:
        """
        Calculate and overwrite the row addressed by `order_id`.
        The row keeps its id.
        """
        payload: Dict[str, Any] = calculate_order(draft).to_record()
        payload["updated_at"] = _now_iso()

        try:
            resp = (
                self._query()
                .update(payload)
                .eq("id", order_id)
                .execute()
            )
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Update order {order_id} failed: {e}") from e

        if getattr(resp, "error", None):
            raise PersistenceError(f"Update order {order_id} failed: {resp.error}")

        if not resp.data:
            raise PersistenceError(f"Order {order_id} not found")

        logger.info("Updated order id=%s", order_id)
        return Order.from_record(resp.data[0])

    def delete_order(self, order_id: str) -> None:
        """Hard delete, there is no undo."""
        try:
            resp = (
                self._query()
                .delete()
                .eq("id", order_id)
                .execute()
            )
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Delete order {order_id} failed: {e}") from e

        if getattr(resp, "error", None):
            raise PersistenceError(f"Delete order {order_id} failed: {resp.error}")

        if not resp.data:
            raise PersistenceError(f"Order {order_id} not found")

        logger.info("Deleted order id=%s", order_id)
