"""Shared fixtures: an in-memory catalog standing in for the SQL repositories."""
from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from customers import repository as customers_repository
from main import create_app
from products import repository as products_repository
from reports import repository as reports_repository


class StubDatabase:
    """Storage handle that never touches a server."""

    def __init__(self, reachable: bool = True):
        self.reachable = reachable
        self.connected = False

    async def connect(self):
        self.connected = True

    async def close(self):
        self.connected = False

    async def ping(self):
        return self.reachable


class InMemoryCatalog:
    """Mirrors the repository functions' contracts over plain dicts."""

    def __init__(self):
        self.manufacturers = {1: "Logitech", 2: "Sony"}
        self.categories = {1: "Electronics", 2: "Gaming", 3: "Accessories"}
        self.shipping_methods = {1: "Standard", 2: "Express"}
        self.products = {
            1: {"product_id": 1, "manufacturer_id": 1, "name": "Gaming Mouse",
                "description": "RGB mouse", "price": 49.99, "stock": 20},
            2: {"product_id": 2, "manufacturer_id": 2, "name": "Headphones",
                "description": "Noise cancelling", "price": 199.0, "stock": 5},
            3: {"product_id": 3, "manufacturer_id": 2, "name": "gamepad",
                "description": "Wireless controller", "price": 59.5, "stock": 0},
        }
        self.links = [(1, 1), (1, 2), (2, 1), (3, 2)]
        self.customers = {
            1: {"customer_id": 1, "name": "Anna Berg", "address": "Storgatan 1",
                "email": "anna@example.com", "phone": "0701234567"},
            2: {"customer_id": 2, "name": "Bo Ek", "address": "Lillgatan 2",
                "email": "bo@example.com", "phone": "0707654321"},
        }
        self.orders = {
            10: {"order_id": 10, "customer_id": 1, "order_date": date(2024, 1, 5), "shipping_method_id": 1},
            11: {"order_id": 11, "customer_id": 1, "order_date": date(2024, 2, 9), "shipping_method_id": 2},
        }
        self.order_details = [
            {"order_id": 10, "product_id": 1, "quantity": 1, "status": "shipped"},
            {"order_id": 10, "product_id": 2, "quantity": 2, "status": "shipped"},
            {"order_id": 11, "product_id": 3, "quantity": 1, "status": "pending"},
        ]
        self.reviews = [(1, 5), (1, 4), (2, 3)]
        self._next_product_id = max(self.products) + 1

    # products

    async def list_products(self, db):
        rows = []
        for pid in sorted(self.products):
            p = self.products[pid]
            category_ids = sorted(cid for (lp, cid) in self.links if lp == pid) or [None]
            for cid in category_ids:
                rows.append({
                    "product_id": pid,
                    "product_name": p["name"],
                    "description": p["description"],
                    "price": p["price"],
                    "stock": p["stock"],
                    "category_name": self.categories.get(cid),
                    "manufacturer_name": self.manufacturers.get(p["manufacturer_id"]),
                })
        return rows

    async def get_product_by_id(self, db, product_id):
        row = self.products.get(product_id)
        return dict(row) if row is not None else None

    async def search_products_by_name(self, db, term):
        return [dict(p) for pid, p in sorted(self.products.items()) if term in p["name"]]

    async def get_products_by_category(self, db, category_id):
        return [
            {"product_id": pid, "product_name": self.products[pid]["name"],
             "category_id": cid, "category_name": self.categories[cid]}
            for (pid, cid) in sorted(self.links)
            if cid == category_id
        ]

    async def search_products_by_name_and_category(self, db, *, name=None, category=None):
        rows = []
        for (pid, cid) in sorted(self.links):
            product_name = self.products[pid]["name"]
            category_name = self.categories[cid]
            if name and name not in product_name:
                continue
            if category and category not in category_name:
                continue
            rows.append({"product_id": pid, "product_name": product_name, "category_name": category_name})
        return rows

    async def add_product(self, db, *, manufacturer_id, name, description, price, stock, category_id=None):
        pid = self._next_product_id
        self._next_product_id += 1
        self.products[pid] = {
            "product_id": pid, "manufacturer_id": manufacturer_id, "name": name,
            "description": description, "price": float(price), "stock": stock,
        }
        if category_id is not None:
            self.links.append((pid, category_id))
        return pid

    async def update_product_price(self, db, product_id, price):
        product = self.products.get(product_id)
        if product is None:
            return None
        product["price"] = float(price)
        return {"product_id": product_id, "name": product["name"], "price": product["price"]}

    async def delete_product(self, db, product_id):
        if self.products.pop(product_id, None) is None:
            return 0
        self.links = [(pid, cid) for (pid, cid) in self.links if pid != product_id]
        self.reviews = [(pid, rating) for (pid, rating) in self.reviews if pid != product_id]
        return 1

    # customers

    async def get_customer_with_orders(self, db, customer_id):
        customer = self.customers.get(customer_id)
        if customer is None:
            return []
        rows = []
        for detail in self.order_details:
            order = self.orders[detail["order_id"]]
            if order["customer_id"] != customer_id:
                continue
            rows.append({
                "customer_id": customer_id,
                "customer_name": customer["name"],
                "address": customer["address"],
                "email": customer["email"],
                "phone": customer["phone"],
                "order_id": order["order_id"],
                "order_date": order["order_date"],
                "shipping_method_id": order["shipping_method_id"],
                "shipping_method": self.shipping_methods.get(order["shipping_method_id"]),
                "product_id": detail["product_id"],
                "product_name": self.products[detail["product_id"]]["name"],
                "quantity": detail["quantity"],
                "status": detail["status"],
            })
        return rows

    async def update_customer(self, db, customer_id, *, name, address, email, phone):
        customer = self.customers.get(customer_id)
        if customer is None:
            return None
        if name is not None:
            customer["name"] = name
        customer.update(address=address, email=email, phone=phone)
        return dict(customer)

    async def get_customer_orders(self, db, customer_id):
        return [dict(o) for oid, o in sorted(self.orders.items()) if o["customer_id"] == customer_id]

    # reports

    async def get_product_stats(self, db):
        stats = []
        for cid, cname in sorted(self.categories.items(), key=lambda item: item[1]):
            prices = [self.products[pid]["price"] for (pid, lc) in self.links if lc == cid]
            if prices:
                stats.append({
                    "category": cname,
                    "total_products": len(prices),
                    "average_price": round(sum(prices) / len(prices), 2),
                })
        return stats

    async def get_review_stats(self, db):
        ratings = {}
        for pid, rating in self.reviews:
            ratings.setdefault(pid, []).append(rating)
        return [
            {"product_id": pid, "product_name": self.products[pid]["name"],
             "average_rating": round(sum(values) / len(values), 2)}
            for pid, values in sorted(ratings.items())
        ]


REPOSITORY_FUNCTIONS = {
    products_repository: [
        "list_products",
        "get_product_by_id",
        "search_products_by_name",
        "get_products_by_category",
        "search_products_by_name_and_category",
        "add_product",
        "update_product_price",
        "delete_product",
    ],
    customers_repository: [
        "get_customer_with_orders",
        "update_customer",
        "get_customer_orders",
    ],
    reports_repository: [
        "get_product_stats",
        "get_review_stats",
    ],
}


@pytest.fixture
def catalog(monkeypatch):
    fake = InMemoryCatalog()
    for module, names in REPOSITORY_FUNCTIONS.items():
        for name in names:
            monkeypatch.setattr(module, name, getattr(fake, name))
    return fake


@pytest.fixture
def stub_db():
    return StubDatabase()


@pytest.fixture
def app(stub_db):
    return create_app(database=stub_db)


@pytest.fixture
def client(app, catalog):
    return TestClient(app)
