"""
HTTP tests for the pricing endpoints and access control.
The database dependency is replaced by a FakeSession; tests that need
rows pass one with queued results.
"""

import uuid
from decimal import Decimal


# ═══════════════════════════════════════════════════════════════════════════════
# PRICING
# ═══════════════════════════════════════════════════════════════════════════════

class TestMarkupCommissionEndpoint:

    def test_minimum_markup_in_request(self, client_for, agent_profile):
        client = client_for(agent_profile)
        response = client.post("/pricing/markup-commission", json={
            "cost": 100,
            "sell_price": 100,
            "current_commission_rate": 10,
            "agent_commission_rate": 15,
            "minimum_markup": 20,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["minimum_markup"] == 15.0
        assert data["original_minimum_markup"] == 20.0
        assert data["commission_reduction"] == 10.0
        assert data["final_commission_rate"] == 0.0
        assert data["is_valid"] is True
        assert data["message"] == "Commission reduced by 10.0% due to markup below minimum (15%)"

    def test_default_agent_rate_from_settings(self, client_for, agent_profile):
        client = client_for(agent_profile)
        response = client.post("/pricing/markup-commission", json={
            "cost": 100,
            "sell_price": 150,
            "current_commission_rate": 15,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["current_markup"] == 50.0
        assert data["final_commission_rate"] == 15.0
        assert data["message"] is None

    def test_sell_below_cost_is_reported_not_rejected(self, client_for, agent_profile):
        client = client_for(agent_profile)
        response = client.post("/pricing/markup-commission", json={
            "cost": 100,
            "sell_price": 80,
            "current_commission_rate": 15,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is False
        assert data["error_message"] == "Sell price cannot be below cost"

    def test_negative_cost_rejected(self, client_for, agent_profile):
        client = client_for(agent_profile)
        response = client.post("/pricing/markup-commission", json={
            "cost": -1,
            "sell_price": 80,
            "current_commission_rate": 15,
        })
        assert response.status_code == 422

    def test_rate_above_given_ceiling_rejected(self, client_for, agent_profile):
        response = client_for(agent_profile).post("/pricing/markup-commission", json={
            "cost": 100,
            "sell_price": 130,
            "current_commission_rate": 20,
            "agent_commission_rate": 15,
        })
        assert response.status_code == 422

    def test_rate_above_default_ceiling_rejected(self, client_for, agent_profile):
        response = client_for(agent_profile).post("/pricing/markup-commission", json={
            "cost": 100,
            "sell_price": 130,
            "current_commission_rate": 20,
        })
        assert response.status_code == 422


class TestAgentCeiling:
    """When no rate is posted, the ceiling comes from the agent record."""

    def test_uses_agent_maximum_rate(self, client_for, agent_profile, session_with):
        session = session_with(Decimal("10.00"))
        response = client_for(agent_profile, session).post("/pricing/markup-commission", json={
            "cost": 100,
            "sell_price": 150,
            "current_commission_rate": 8,
            "agent_id": str(uuid.uuid4()),
        })
        assert response.status_code == 200
        assert response.json()["final_commission_rate"] == 8.0
        assert len(session.executed) == 1
        assert "agents.maximum_commission_rate" in str(session.executed[0])

    def test_rate_above_agent_maximum_rejected(self, client_for, agent_profile, session_with):
        session = session_with(Decimal("10.00"))
        response = client_for(agent_profile, session).post("/pricing/markup-commission", json={
            "cost": 100,
            "sell_price": 150,
            "current_commission_rate": 12,
            "agent_id": str(uuid.uuid4()),
        })
        assert response.status_code == 422
        assert "10%" in response.json()["detail"]

    def test_unknown_agent_falls_back_to_settings(self, client_for, agent_profile, session_with):
        session = session_with(None)
        response = client_for(agent_profile, session).post("/pricing/markup-commission", json={
            "cost": 100,
            "sell_price": 150,
            "current_commission_rate": 15,
            "agent_id": str(uuid.uuid4()),
        })
        assert response.status_code == 200
        assert response.json()["final_commission_rate"] == 15.0


class TestTotalsEndpoint:

    def test_totals(self, client_for, user_profile):
        client = client_for(user_profile)
        response = client.post("/pricing/totals", json={"items": [
            {"charge_type": "MRC", "unit_price": 99.99, "quantity": 2},
            {"charge_type": "NRC", "unit_price": 250, "quantity": 1},
            {"charge_type": "MRC", "unit_price": 0, "total_price": 10},
        ]})
        assert response.status_code == 200
        assert response.json() == {
            "mrc_total": 209.98,
            "nrc_total": 250.0,
            "total_amount": 459.98,
        }

    def test_empty(self, client_for, user_profile):
        response = client_for(user_profile).post("/pricing/totals", json={})
        assert response.json()["total_amount"] == 0.0

    def test_unknown_charge_type_rejected(self, client_for, user_profile):
        response = client_for(user_profile).post("/pricing/totals", json={"items": [
            {"charge_type": "ONE_TIME", "unit_price": 1},
        ]})
        assert response.status_code == 422


class TestCommissionEndpoint:

    def test_quote_override(self, client_for, agent_profile):
        response = client_for(agent_profile).post("/pricing/commission", json={
            "amount": 1000,
            "quote_override": 20,
        })
        assert response.status_code == 200
        data = response.json()
        assert data["source"] == "quote_override"
        assert data["rate"] == 20.0
        assert data["commission"] == 200.0

    def test_no_rate_available(self, client_for, agent_profile):
        response = client_for(agent_profile).post("/pricing/commission", json={"amount": 1000})
        data = response.json()
        assert data["source"] == "none"
        assert data["rate"] is None
        assert data["commission"] == 0.0


# ═══════════════════════════════════════════════════════════════════════════════
# ACCESS CONTROL
# ═══════════════════════════════════════════════════════════════════════════════

class TestAccessControl:

    def test_missing_token_is_401(self, client_for):
        response = client_for(None).post("/pricing/totals", json={})
        assert response.status_code == 401

    def test_invalid_token_is_401(self, client_for):
        response = client_for(None).post(
            "/pricing/totals",
            json={},
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert response.status_code == 401

    def test_admin_only_endpoint_forbidden(self, client_for, agent_profile):
        response = client_for(agent_profile).post("/agents", json={
            "first_name": "Ada",
            "last_name": "Agent",
            "email": "ada@example.com",
        })
        assert response.status_code == 403

    def test_invalid_quote_id_is_422(self, client_for, user_profile):
        response = client_for(user_profile).get(f"/quotes/{uuid.uuid4()}x")
        assert response.status_code == 422


class TestHealth:

    def test_root(self, client_for):
        response = client_for(None).get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
