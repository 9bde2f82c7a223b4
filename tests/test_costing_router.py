"""
Tests for the menu item costing endpoints.
"""
from datetime import datetime
from decimal import Decimal
from uuid import uuid4

from fastapi.testclient import TestClient

from src.core.deps import get_unit_converter
from src.main import app
from src.models import ComponentIngredient, Ingredient, MenuItem, MenuItemComponent, MenuItemCostHistory


class TestCostBreakdownEndpoint:

    def test_cost_breakdown(self, client: TestClient, burger):
        response = client.get(f"/api/menu-items/{burger.id}/cost-breakdown")

        assert response.status_code == 200
        data = response.json()
        assert data["menu_item_name"] == "House Burger"
        assert Decimal(data["menu_price"]) == Decimal("12.00")

        breakdown = data["breakdown"]
        assert breakdown["source"] == "components"
        assert Decimal(breakdown["total_cost"]) == Decimal("2.50")
        assert [c["name"] for c in breakdown["components"]] == ["Bun", "Patty"]
        assert breakdown["has_complete_data"] is False
        assert breakdown["missing_price_count"] == 1
        assert breakdown["missing_price_ingredients"][0]["name"] == "Cheddar Slice"
        assert breakdown["missing_price_ingredients"][0]["has_price"] is False

        assert data["margin"]["tier"] == "excellent"
        assert data["food_cost_rating"] == "low"
        assert Decimal(data["pricing_tiers"]["break_even"]) == Decimal("2.50") / Decimal("0.30")

    def test_cost_breakdown_without_price(self, client: TestClient, db):
        item = MenuItem(name="Daily Special", price=None)
        db.add(item)
        db.commit()

        response = client.get(f"/api/menu-items/{item.id}/cost-breakdown")

        assert response.status_code == 200
        data = response.json()
        assert data["menu_price"] is None
        assert data["margin"] == {"margin": None, "tier": "unknown"}
        assert data["contribution_margin"] is None
        assert data["food_cost_percentage"] is None

    def test_cost_breakdown_not_found(self, client: TestClient):
        response = client.get(f"/api/menu-items/{uuid4()}/cost-breakdown")

        assert response.status_code == 404
        assert response.json()["detail"] == "Menu item not found"

    def test_cost_breakdown_malformed_recipe(self, client: TestClient, db):
        oil = Ingredient(name="Olive Oil", unit="L", last_price=Decimal("9"))
        item = MenuItem(name="Focaccia", price=Decimal("6"))
        db.add_all([oil, item])
        db.flush()
        component = MenuItemComponent(menu_item_id=item.id, name="Dough")
        db.add(component)
        db.flush()
        db.add(ComponentIngredient(component_id=component.id, ingredient_id=oil.id, quantity=Decimal("-0.1"), unit="L"))
        db.commit()

        response = client.get(f"/api/menu-items/{item.id}/cost-breakdown")

        assert response.status_code == 422
        assert "malformed" in response.json()["detail"]

    def test_converter_dependency_can_be_overridden(self, client: TestClient, burger):
        class FailingConverter:
            def standardized_cost(self, quantity, unit, unit_price, ingredient_name):
                raise KeyError(unit)

        app.dependency_overrides[get_unit_converter] = lambda: FailingConverter()

        response = client.get(f"/api/menu-items/{burger.id}/cost-breakdown")

        # Conversion failures degrade to quantity x price instead of failing
        assert response.status_code == 200
        assert Decimal(response.json()["breakdown"]["total_cost"]) == Decimal("2.50")


class TestScenarioEndpoint:

    def test_scenario_scales_component(self, client: TestClient, burger):
        patty_id = next(c.id for c in burger.components if c.name == "Patty")

        response = client.post(
            f"/api/menu-items/{burger.id}/scenario",
            json={"multipliers": {str(patty_id): 0.5}, "price_override": "10"},
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["base_total_cost"]) == Decimal("2.50")
        assert Decimal(data["total_cost"]) == Decimal("1.50")
        assert Decimal(data["price"]) == Decimal(10)
        assert data["price_source"] == "override"
        assert Decimal(data["margin"]["margin"]) == Decimal(85)

        patty = next(c for c in data["components"] if c["key"] == str(patty_id))
        assert Decimal(patty["multiplier"]) == Decimal("0.5")
        assert Decimal(patty["lines"][0]["quantity"]) == Decimal("0.125")

    def test_scenario_coerces_bad_input(self, client: TestClient, burger):
        keys = [str(c.id) for c in burger.components]

        response = client.post(
            f"/api/menu-items/{burger.id}/scenario",
            json={"multipliers": {keys[0]: "", keys[1]: None}, "price_override": "free"},
        )

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["total_cost"]) == 0
        assert data["price_source"] == "menu"
        assert data["margin"]["margin"] is None

    def test_empty_scenario_matches_breakdown(self, client: TestClient, fries):
        breakdown = client.get(f"/api/menu-items/{fries.id}/cost-breakdown").json()
        scenario = client.post(f"/api/menu-items/{fries.id}/scenario", json={}).json()

        assert Decimal(scenario["total_cost"]) == Decimal(breakdown["breakdown"]["total_cost"])
        assert Decimal(scenario["margin"]["margin"]) == Decimal(breakdown["margin"]["margin"])
        assert [c["key"] for c in scenario["components"]] == ["lines"]

    def test_scenario_not_found(self, client: TestClient):
        response = client.post(f"/api/menu-items/{uuid4()}/scenario", json={"multipliers": {}})
        assert response.status_code == 404


class TestCostHistoryEndpoint:

    def test_cost_history(self, client: TestClient, db, burger):
        db.add_all([
            MenuItemCostHistory(menu_item_id=burger.id, old_cost=Decimal("2.00"), new_cost=Decimal("2.50"),
                                change_reason="invoice_saved", created_at=datetime(2024, 6, 1)),
            MenuItemCostHistory(menu_item_id=burger.id, old_cost=Decimal("1.80"), new_cost=Decimal("2.00"),
                                change_reason="manual_update", created_at=datetime(2024, 5, 1)),
        ])
        db.commit()

        response = client.get(f"/api/menu-items/{burger.id}/cost-history")

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert [i["reason_label"] for i in data["items"]] == ["Invoice Processing", "Manual Update"]
        assert Decimal(data["items"][0]["change"]) == Decimal("0.50")

    def test_cost_history_limit(self, client: TestClient, db, burger):
        for day in range(1, 4):
            db.add(MenuItemCostHistory(menu_item_id=burger.id, old_cost=Decimal(1), new_cost=Decimal(2),
                                       change_reason="invoice_saved", created_at=datetime(2024, 6, day)))
        db.commit()

        response = client.get(f"/api/menu-items/{burger.id}/cost-history", params={"limit": 1})

        assert response.status_code == 200
        assert response.json()["total"] == 1

    def test_cost_history_rejects_bad_limit(self, client: TestClient, burger):
        response = client.get(f"/api/menu-items/{burger.id}/cost-history", params={"limit": 0})
        assert response.status_code == 422

    def test_cost_history_not_found(self, client: TestClient):
        response = client.get(f"/api/menu-items/{uuid4()}/cost-history")
        assert response.status_code == 404
