import os

# must be set before orderhub reads its settings
os.environ["DATABASE_URL"] = "sqlite://"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from orderhub.data.database import Base, get_db, init_db
from orderhub.domain.errors import DependencyError
from orderhub.domain.schemas import ProductInfo, ShippingAddress
from orderhub.main import create_app
from orderhub.services.cart_service import CartService
from orderhub.services.order_service import OrderService

BUYER = "buyer@example.com"
OTHER_BUYER = "other@example.com"
SELLER_1 = "seller1@example.com"
SELLER_2 = "seller2@example.com"


class FakeCatalog:
    """In-memory stand-in for ProductClient that records every stock call."""

    def __init__(self):
        self.products = {}
        self.reduced = []
        self.restored = []
        self.fetch_calls = []
        self.seller_id_calls = []
        # operations that raise DependencyError: fetch, seller, reduce, restore
        self.failing = set()

    def add(self, product_id, name, price, stock, seller_id="seller-1", expose_seller=True):
        self.products[product_id] = {
            "name": name,
            "price": Decimal(str(price)),
            "stock": stock,
            "seller_id": seller_id,
            "expose_seller": expose_seller,
        }

    def stock(self, product_id):
        return self.products[product_id]["stock"]

    def _check(self, operation):
        if operation in self.failing:
            raise DependencyError(f"catalog unavailable ({operation})")

    def fetch_product(self, product_id):
        self.fetch_calls.append(product_id)
        self._check("fetch")
        p = self.products.get(product_id)
        if p is None:
            return None
        return ProductInfo(
            id=product_id,
            name=p["name"],
            price=p["price"],
            stock=p["stock"],
            seller_id=p["seller_id"] if p["expose_seller"] else None,
        )

    def fetch_seller_id(self, product_id):
        self.seller_id_calls.append(product_id)
        self._check("seller")
        p = self.products.get(product_id)
        return p["seller_id"] if p else None

    def reduce_stock(self, product_id, quantity):
        self._check("reduce")
        self.products[product_id]["stock"] -= quantity
        self.reduced.append((product_id, quantity))

    def restore_stock(self, product_id, quantity):
        self._check("restore")
        self.products[product_id]["stock"] += quantity
        self.restored.append((product_id, quantity))


class FakeDirectory:
    def __init__(self, users=None):
        self.users = dict(users or {})

    def find_user_id_by_email(self, email):
        return self.users.get(email)


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def catalog():
    c = FakeCatalog()
    c.add("p-lip", "Red Lipstick", "19.99", 10, seller_id="seller-1")
    c.add("p-mascara", "Mascara", "24.50", 2, seller_id="seller-1")
    c.add("p-serum", "Face Serum", "42.00", 5, seller_id="seller-2")
    return c


@pytest.fixture()
def directory():
    return FakeDirectory({SELLER_1: "seller-1", SELLER_2: "seller-2", BUYER: "buyer-1"})


@pytest.fixture()
def cart_service(db, catalog):
    return CartService(db=db, product_client=catalog)


@pytest.fixture()
def order_service(db, catalog, directory):
    return OrderService(db=db, product_client=catalog, user_client=directory)


@pytest.fixture()
def address():
    return ShippingAddress(full_name="Jane Doe", address="1 Main St", city="Springfield", phone="555-0100")


@pytest.fixture()
def client(session_factory, catalog, directory):
    app = create_app(product_client=catalog, user_client=directory, lifespan=None)

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_test_db
    return TestClient(app)
