import os

# Settings are read at import time, so the test environment goes first
os.environ["ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///./test.db"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("LOG_DIR", "logs")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator
from decimal import Decimal

from main import app
from core.database import Base
from models.users import User
from models.customers import Customer
from models.products import Product
from models.cart_items import CartItem
from services.payment_gateway import PaymentGateway, GatewaySession, get_payment_gateway
from services.token_service import TokenService
from utils.deps import get_db
from utils.hashing import get_password_hash

# SYNC SQLite for testing (matches sync service layer)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

TEST_PASSWORD = "TestPassword123!"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)

TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


class FakeGateway(PaymentGateway):
    """
    In-memory hosted checkout. Sessions it creates are reported as paid
    with the amount of their line items unless a test says otherwise.
    """

    def __init__(self):
        self.sessions: dict[str, GatewaySession] = {}
        self.created_requests: list[dict] = []
        self.retrieve_calls = 0

    def create_checkout_session(self, line_items, success_url, cancel_url,
                                client_reference_id, customer_email):
        session_id = f"cs_test_{len(self.sessions) + 1}"
        self.created_requests.append({
            "line_items": line_items,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "client_reference_id": client_reference_id,
            "customer_email": customer_email,
        })
        session = GatewaySession(
            id=session_id,
            url=f"https://checkout.example/pay/{session_id}",
            payment_status="paid",
            client_reference_id=client_reference_id,
            amount_total=sum(item.unit_amount * item.quantity for item in line_items)
        )
        self.sessions[session_id] = session
        return session

    def pay(self, session_id: str, user_id: int, amount_total: int, payment_status: str = "paid"):
        self.sessions[session_id] = GatewaySession(
            id=session_id,
            payment_status=payment_status,
            client_reference_id=str(user_id),
            amount_total=amount_total
        )

    def retrieve_session(self, session_id: str) -> GatewaySession:
        self.retrieve_calls += 1
        return self.sessions.get(session_id, GatewaySession(id=session_id, payment_status="unpaid"))


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Creates a fresh, empty database for each test.
    Uses SYNC SQLAlchemy to match the service layer.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def fake_gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
async def client(session: Session, fake_gateway: FakeGateway):
    """
    Yields an HTTP client that interacts with the app using the test database.
    The client is async (for FastAPI), but the DB session is sync.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass  # Session cleanup handled by session fixture

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: fake_gateway

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


def create_customer(session: Session, email: str = "test@example.com",
                    phone_number: str = "+201111111111", is_verified: bool = True,
                    password: str = TEST_PASSWORD) -> User:
    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        role="customer",
        is_verified=is_verified,
        is_active=True
    )
    user.customer = Customer(
        first_name="Test",
        last_name="User",
        phone_number=phone_number,
        terms_accepted=True
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def bearer(user: User) -> dict:
    token = TokenService.create_access_token(user.email, user.id, user.role, user.session_version)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def verified_user(session: Session) -> User:
    return create_customer(session)


@pytest.fixture
def auth_headers(verified_user: User) -> dict:
    return bearer(verified_user)


@pytest.fixture
def admin_user(session: Session) -> User:
    admin = User(
        email="admin",
        hashed_password=get_password_hash("password123"),
        role="admin",
        is_verified=True,
        is_active=True,
        must_change_password=True
    )
    session.add(admin)
    session.commit()
    session.refresh(admin)
    return admin


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return bearer(admin_user)


@pytest.fixture
def make_product(session: Session):
    """Factory: make_product(name=..., price=..., ...) -> committed Product."""
    counter = {"n": 0}

    def _make(**overrides) -> Product:
        counter["n"] += 1
        data = {
            "name": f"Silk Saree {counter['n']}",
            "description": "Handwoven silk saree",
            "price": Decimal("1499.00"),
            "category": "Sarees",
            "image_url": "/images/saree.jpg",
            "color": "Maroon",
            "stock_quantity": 10,
            "is_available": True,
        }
        data.update(overrides)
        product = Product(**data)
        session.add(product)
        session.commit()
        session.refresh(product)
        return product

    return _make


@pytest.fixture
def add_to_cart(session: Session):
    def _add(user: User, product: Product, quantity: int = 1) -> CartItem:
        item = CartItem(user_id=user.id, product_id=product.id, quantity=quantity)
        session.add(item)
        session.commit()
        return item

    return _add


@pytest.fixture
def make_customer(session: Session):
    """Factory for extra customers: make_customer(email=..., phone_number=...)."""
    def _make(**kwargs) -> User:
        return create_customer(session, **kwargs)

    return _make


@pytest.fixture
def headers_for():
    """Bearer headers for any user: headers_for(user)."""
    return bearer
