"""
Test configuration and fixtures.
"""
import os
from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Set test database URL before importing app
os.environ["DATABASE_URL"] = "sqlite://"

from src.main import app
from src.db.base import Base
from src.db.session import get_db
from src.models import (
    ComponentIngredient,
    Ingredient,
    MenuItem,
    MenuItemComponent,
    MenuItemIngredient,
)


# In-memory database shared by every connection of the test engine
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Create a fresh schema and a database session for the test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session) -> Generator[TestClient, None, None]:
    """Create test client with database session override."""
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def burger(db: Session) -> MenuItem:
    """
    House burger with two components:

    Patty: 0.25 lb beef @ $8.00/lb            = 2.00
    Bun:   1 brioche bun @ $0.50 + 1 slice of cheese with no price = 0.50
    Price $12.00
    """
    beef = Ingredient(name="Ground Beef", unit="lb", last_price=Decimal("8.00"))
    bun = Ingredient(name="Brioche Bun", unit="each", last_price=Decimal("0.50"))
    cheese = Ingredient(name="Cheddar Slice", unit="each", last_price=None)
    db.add_all([beef, bun, cheese])
    db.flush()

    item = MenuItem(name="House Burger", price=Decimal("12.00"))
    db.add(item)
    db.flush()

    patty = MenuItemComponent(menu_item_id=item.id, name="Patty", cost=Decimal("2.00"))
    bread = MenuItemComponent(menu_item_id=item.id, name="Bun", cost=Decimal("0.40"))
    db.add_all([patty, bread])
    db.flush()

    db.add_all([
        ComponentIngredient(component_id=patty.id, ingredient_id=beef.id, quantity=Decimal("0.25"), unit="lb"),
        ComponentIngredient(component_id=bread.id, ingredient_id=bun.id, quantity=Decimal("1"), unit="each"),
        ComponentIngredient(component_id=bread.id, ingredient_id=cheese.id, quantity=Decimal("1"), unit="each"),
    ])
    db.commit()
    db.refresh(item)
    return item


@pytest.fixture
def fries(db: Session) -> MenuItem:
    """
    Legacy flat-recipe item: 0.5 lb potatoes @ $1.20/lb = 0.60, price $4.00.
    """
    potato = Ingredient(name="Russet Potato", unit="lb", last_price=Decimal("1.20"))
    db.add(potato)
    db.flush()

    item = MenuItem(name="Fries", price=Decimal("4.00"))
    db.add(item)
    db.flush()

    db.add(MenuItemIngredient(menu_item_id=item.id, ingredient_id=potato.id, quantity=Decimal("0.5")))
    db.commit()
    db.refresh(item)
    return item
