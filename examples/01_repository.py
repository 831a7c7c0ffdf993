"""
Example 01: Repository

Saves, fetches and deletes records through a Repository backed by an
in-memory SQLite database, then reads two tables per row with a join.
"""

import uuid
from dataclasses import dataclass
from typing import Any, Optional

from micro_orm import ConnectionConfig, Driver, Query, Repository, do_not_update, mapper


@dataclass
class Customer:
    id: Optional[int] = None
    name: str = ""
    email: str = ""
    display_name: str = ""


@dataclass
class Order:
    id: Optional[str] = None
    customer_id: Optional[int] = None
    total: float = 0.0


def display_name(value: Any, customer: Customer) -> str:
    return f"{customer.name} <{customer.email}>"


def main() -> None:
    driver = Driver.from_config(ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1))
    driver.execute(
        "CREATE TABLE customers (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, email TEXT)"
    )
    driver.execute("CREATE TABLE orders (id TEXT PRIMARY KEY, customer_id INTEGER, total REAL)")

    customers = Repository(
        driver,
        mapper(Customer, "customers")
        .field("display_name", select_mask=display_name, update_mask=do_not_update)
        .build(),
    )
    order_mapper = (
        mapper(Order, "orders")
        .alias("id", "order_id")
        .key_generator(lambda: uuid.uuid4().hex)
        .build()
    )
    orders = Repository(driver, order_mapper)

    # Insert: the key comes back from the database
    ann = customers.save(Customer(name="Ann", email="ann@example.com"))
    print(f"Inserted customer {ann.id}")

    # Update: same key, existing row
    ann.email = "ann@example.org"
    customers.save(ann)
    print(f"Fetched: {customers.get(ann.id)}")

    # Insert with a client-side generated key
    order = orders.save(Order(customer_id=ann.id, total=42.5))
    print(f"Inserted order {order.id}")

    # Two record types per row
    query = (
        Query()
        .table("customers", "c")
        .fields(["c.id", "c.name", "c.email", "o.id AS order_id", "o.customer_id", "o.total"])
        .join("orders", "o.customer_id = c.id", alias="o")
    )
    for customer, customer_order in customers.get_by_query(query, [order_mapper]):
        print(f"{customer.display_name} ordered {customer_order.total} ({customer_order.id})")

    # Writes that must be atomic go through a transaction
    with driver.transaction():
        orders.delete(order.id)
        customers.delete(ann.id)

    print(f"After delete: {customers.get(ann.id)}")
    driver.close()


if __name__ == "__main__":
    main()
