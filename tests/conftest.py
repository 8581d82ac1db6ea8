from decimal import Decimal
from itertools import count

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, get_db, import_models
from main import app
from services.catalog import create_product
from services.users import create_user

import_models()

_seq = count(1)


@pytest.fixture()
def engine():
    # One in-memory database per test, shared by every session through StaticPool
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def make_user(db):
    def _make_user(email=None, **fields):
        email = email or f"shopper{next(_seq)}@example.com"
        return create_user(db, email=email, **fields)

    return _make_user


@pytest.fixture()
def make_product(db):
    def _make_product(**overrides):
        data = {
            "name": f"Product {next(_seq)}",
            "description": "",
            "category": "serums",
            "price": Decimal("28.00"),
            "stock": 10,
            "sustainability_score": 90,
            "recyclable_packaging": True,
            "carbon_footprint": Decimal("0.50"),
        }
        data.update(overrides)
        return create_product(db, data)

    return _make_product


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def serum(make_product):
    return make_product(name="Bakuchiol Glow Serum", price=Decimal("28.00"), stock=50)


@pytest.fixture()
def balm(make_product):
    return make_product(name="Beet Tinted Balm", category="makeup", price=Decimal("15.00"), stock=75,
                        carbon_footprint=Decimal("0.30"))
