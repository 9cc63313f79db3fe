"""SQL access for customer orders and their items."""

from protean.exceptions import ObjectNotFoundError
from sqlalchemy import Row

from storefront.domain import storefront
from storefront.ordering.order.order import CustomerOrder, OrderItem, OrderStatus
from storefront.shared.pagination import Page, PageRequest
from storefront.shared.repository import SqlRepository, stamp_params
from storefront.shared.rows import as_datetime, as_decimal, as_id, db_id, db_money, db_timestamp

_ORDER_COLUMNS = (
    "id, created_at, updated_at, user_id, order_number, status, payment_status, shipping_method_id, "
    "payment_method_id, subtotal, shipping_cost, total, customer_notes, cancelled_at"
)
_ITEM_COLUMNS = (
    "id, created_at, updated_at, order_id, product_id, product_name, product_sku, unit_price, "
    "quantity, total_price"
)


def _to_item(row: Row) -> OrderItem:
    m = row._mapping
    item = OrderItem(
        id=as_id(m["id"]),
        created_at=as_datetime(m["created_at"]),
        updated_at=as_datetime(m["updated_at"]),
        product_id=as_id(m["product_id"]),
        product_name=m["product_name"],
        product_sku=m["product_sku"],
        unit_price=as_decimal(m["unit_price"]),
        quantity=int(m["quantity"]),
        total_price=as_decimal(m["total_price"]),
    )
    item.state_.mark_retrieved()
    return item


@storefront.repository(part_of=CustomerOrder)
class OrderRepository(SqlRepository):
    def _insert(self, session, order: CustomerOrder) -> None:
        with self._unique("order_number", f"Order number already exists: {order.order_number}"):
            self._run(
                session,
                f"INSERT INTO customer_orders ({_ORDER_COLUMNS}) VALUES (:id, :created_at, :updated_at, "
                ":user_id, :order_number, :status, :payment_status, :shipping_method_id, :payment_method_id, "
                ":subtotal, :shipping_cost, :total, :customer_notes, :cancelled_at)",
                self._params(order),
            )
        for item in order.items:
            self._run(
                session,
                f"INSERT INTO order_items ({_ITEM_COLUMNS}) VALUES (:id, :created_at, :updated_at, :order_id, "
                ":product_id, :product_name, :product_sku, :unit_price, :quantity, :total_price)",
                {
                    **stamp_params(item),
                    "order_id": db_id(order.id),
                    "product_id": db_id(item.product_id),
                    "product_name": item.product_name,
                    "product_sku": item.product_sku,
                    "unit_price": db_money(item.unit_price),
                    "quantity": item.quantity,
                    "total_price": db_money(item.total_price),
                },
            )
            item.state_.mark_saved()

    def _update(self, session, order: CustomerOrder) -> None:
        """Lines are immutable once placed; only statuses and the cancellation time change."""
        self._run(
            session,
            "UPDATE customer_orders SET updated_at = :updated_at, status = :status, "
            "payment_status = :payment_status, cancelled_at = :cancelled_at WHERE id = :id",
            self._params(order),
        )

    def get(self, order_id) -> CustomerOrder:
        order = self.get_or_none(order_id)
        if order is None:
            raise ObjectNotFoundError({"order_id": [f"Order not found: {order_id}"]})
        return order

    def get_or_none(self, order_id) -> CustomerOrder | None:
        row = self._first(f"SELECT {_ORDER_COLUMNS} FROM customer_orders WHERE id = :id", {"id": db_id(order_id)})
        return self._assemble(row) if row else None

    def get_by_number(self, order_number: str) -> CustomerOrder | None:
        row = self._first(
            f"SELECT {_ORDER_COLUMNS} FROM customer_orders WHERE order_number = :order_number",
            {"order_number": order_number.strip()},
        )
        return self._assemble(row) if row else None

    def number_taken(self, order_number: str) -> bool:
        row = self._first("SELECT 1 FROM customer_orders WHERE order_number = :order_number", {"order_number": order_number})
        return row is not None

    def list_all(self, request: PageRequest) -> Page[CustomerOrder]:
        return self._list("", {}, request)

    def list_by_user(self, user_id, request: PageRequest) -> Page[CustomerOrder]:
        return self._list("WHERE user_id = :user_id", {"user_id": db_id(user_id)}, request)

    def list_by_status(self, status: OrderStatus, request: PageRequest) -> Page[CustomerOrder]:
        return self._list("WHERE status = :status", {"status": status.value}, request)

    def count(self, status: OrderStatus | None = None) -> int:
        if status is None:
            return int(self._scalar("SELECT COUNT(*) FROM customer_orders") or 0)
        return int(
            self._scalar("SELECT COUNT(*) FROM customer_orders WHERE status = :status", {"status": status.value})
            or 0
        )

    def user_has_delivered_product(self, user_id, product_id) -> bool:
        row = self._first(
            "SELECT 1 FROM order_items oi JOIN customer_orders o ON o.id = oi.order_id "
            "WHERE o.user_id = :user_id AND oi.product_id = :product_id AND o.status = :status",
            {
                "user_id": db_id(user_id),
                "product_id": db_id(product_id),
                "status": OrderStatus.DELIVERED.value,
            },
        )
        return row is not None

    def delete(self, order_id) -> bool:
        params = {"id": db_id(order_id)}
        with self._session() as session:
            self._run(session, "DELETE FROM order_items WHERE order_id = :id", params)
            return self._run(session, "DELETE FROM customer_orders WHERE id = :id", params).rowcount == 1

    def _list(self, where: str, params: dict, request: PageRequest) -> Page[CustomerOrder]:
        return self._page(
            f"SELECT {_ORDER_COLUMNS} FROM customer_orders {where} ORDER BY created_at DESC, order_number",
            f"SELECT COUNT(*) FROM customer_orders {where}",
            params,
            request,
            self._assemble,
        )

    def _assemble(self, row: Row) -> CustomerOrder:
        m = row._mapping
        items = self._all(
            f"SELECT {_ITEM_COLUMNS} FROM order_items WHERE order_id = :order_id ORDER BY created_at, product_sku",
            {"order_id": db_id(m["id"])},
        )
        order = CustomerOrder(
            id=as_id(m["id"]),
            created_at=as_datetime(m["created_at"]),
            updated_at=as_datetime(m["updated_at"]),
            user_id=as_id(m["user_id"]),
            order_number=m["order_number"],
            status=m["status"],
            payment_status=m["payment_status"],
            shipping_method_id=as_id(m["shipping_method_id"]),
            payment_method_id=as_id(m["payment_method_id"]),
            subtotal=as_decimal(m["subtotal"]),
            shipping_cost=as_decimal(m["shipping_cost"]),
            total=as_decimal(m["total"]),
            customer_notes=m["customer_notes"],
            cancelled_at=as_datetime(m["cancelled_at"]),
            items=[_to_item(item) for item in items],
        )
        order.state_.mark_retrieved()
        return order

    @staticmethod
    def _params(order: CustomerOrder) -> dict:
        return {
            **stamp_params(order),
            "user_id": db_id(order.user_id),
            "order_number": order.order_number,
            "status": order.status,
            "payment_status": order.payment_status,
            "shipping_method_id": db_id(order.shipping_method_id),
            "payment_method_id": db_id(order.payment_method_id),
            "subtotal": db_money(order.subtotal),
            "shipping_cost": db_money(order.shipping_cost),
            "total": db_money(order.total),
            "customer_notes": order.customer_notes,
            "cancelled_at": db_timestamp(order.cancelled_at),
        }
