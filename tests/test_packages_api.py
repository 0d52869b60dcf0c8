"""
API tests for the staff package endpoints.
"""

import pytest

from tests.fixtures.test_data import generate_customer, generate_legacy_payload, generate_package_payload

API = "/api/v1"


async def _create(client, headers, **overrides):
    response = await client.post(f"{API}/packages", json=generate_package_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreatePackageApi:
    """POST /api/v1/packages"""

    async def test_scenario_package(self, client, staff_headers, customer):
        response = await client.post(
            f"{API}/packages",
            json={"tracking_number": "TAS-000001", "user_code": "CUST001", "weight": 2.5, "weight_unit": "lb"},
            headers=staff_headers,
        )

        assert response.status_code == 201
        data = response.json()
        assert data["tracking_number"] == "TAS-000001"
        assert data["status"] == "received"
        assert data["costs"]["shipping_cost_jmd"] == 1400
        assert data["costs"]["storage_fee_jmd"] == 0
        assert data["costs"]["outstanding_balance_jmd"] == 1400
        assert data["costs"]["customs_duty_usd"] == 0

    async def test_legacy_payload(self, client, staff_headers, customer):
        response = await client.post(f"{API}/packages", json=generate_legacy_payload(), headers=staff_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["weight_unit"] == "lb"
        assert data["item_value_usd"] == 75
        assert data["current_location"] == "Kingston"
        assert data["length"] == 30
        assert "itemValue" not in data

    async def test_duplicate_is_conflict(self, client, staff_headers, customer):
        await _create(client, staff_headers, tracking_number="TAS-DUPAPI")

        response = await client.post(
            f"{API}/packages",
            json=generate_package_payload(tracking_number="TAS-DUPAPI"),
            headers=staff_headers,
        )
        assert response.status_code == 409
        assert response.json()["error"] == "conflict"

    async def test_case_variant_duplicate_is_conflict(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="tas-abc123")
        assert created["tracking_number"] == "TAS-ABC123"

        response = await client.post(
            f"{API}/packages",
            json=generate_package_payload(tracking_number=" TAS-ABC123 "),
            headers=staff_headers,
        )
        assert response.status_code == 409

        response = await client.get(f"{API}/tracking/TAS-ABC123")
        assert response.status_code == 200
        assert response.json()["tracking_number"] == "TAS-ABC123"

    async def test_unknown_customer_is_not_found(self, client, staff_headers, customer):
        response = await client.post(
            f"{API}/packages",
            json=generate_package_payload(user_code="MISSING"),
            headers=staff_headers,
        )
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.parametrize("payload", [
        {"user_code": "CUST001"},
        {"tracking_number": "TAS-000009"},
        {"tracking_number": "ab", "user_code": "CUST001"},
        {"tracking_number": "TAS-000009", "user_code": "CUST001", "weight": -1},
    ])
    async def test_invalid_payload(self, client, staff_headers, customer, payload):
        response = await client.post(f"{API}/packages", json=payload, headers=staff_headers)
        assert response.status_code == 422


class TestReadPackagesApi:
    """GET /api/v1/packages and /api/v1/packages/{id}"""

    async def test_list_with_counts(self, client, staff_headers, customer):
        await _create(client, staff_headers, tracking_number="TAS-R1")
        await _create(client, staff_headers, tracking_number="TAS-R2")

        response = await client.get(f"{API}/packages", headers=staff_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_count"] == 2
        assert data["status_counts"] == {"received": 2}
        assert data["page"] == 1
        assert data["per_page"] == 20
        assert all(p["costs"] is not None for p in data["packages"])

    async def test_search_and_bad_status(self, client, staff_headers, customer):
        await _create(client, staff_headers, tracking_number="TAS-FIND1", shipper="Shein")
        await _create(client, staff_headers, tracking_number="TAS-FIND2", shipper="Amazon")

        response = await client.get(f"{API}/packages", params={"q": "shein"}, headers=staff_headers)
        assert [p["tracking_number"] for p in response.json()["packages"]] == ["TAS-FIND1"]

        response = await client.get(f"{API}/packages", params={"status": "misplaced"}, headers=staff_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    async def test_get_by_id(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="TAS-GET1")

        response = await client.get(f"{API}/packages/{created['id']}", headers=staff_headers)

        assert response.status_code == 200
        assert response.json()["tracking_number"] == "TAS-GET1"

    async def test_get_missing(self, client, staff_headers):
        response = await client.get(
            f"{API}/packages/00000000-0000-0000-0000-000000000000", headers=staff_headers
        )
        assert response.status_code == 404

    async def test_stats(self, client, staff_headers, customer):
        await _create(client, staff_headers, tracking_number="TAS-ST1", weight=1.0)

        response = await client.get(f"{API}/packages/stats", headers=staff_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["total_packages"] == 1
        assert data["active_packages"] == 1
        assert data["outstanding_balance_jmd"] == 700


class TestUpdatePackageApi:
    """PATCH /api/v1/packages/{id}"""

    async def test_no_changes_detected(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="TAS-U1", weight=2.0)

        response = await client.patch(
            f"{API}/packages/{created['id']}", json={"weight": 2.0}, headers=staff_headers
        )

        assert response.status_code == 200
        data = response.json()
        assert data["ok"] is True
        assert data["changed_fields"] == []
        assert data["message"] == "No changes detected"
        assert data["package"]["updated_at"] == created["updated_at"]

    async def test_legacy_status_label(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="TAS-U2")

        response = await client.patch(
            f"{API}/packages/{created['id']}",
            json={"status": "In Transit", "branch": "Montego Bay"},
            headers=staff_headers,
        )

        data = response.json()
        assert sorted(data["changed_fields"]) == ["current_location", "status"]
        assert data["package"]["status"] == "in_transit"
        assert data["package"]["current_location"] == "Montego Bay"

    async def test_additional_fees_change_totals(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="TAS-U3", weight=1.0)

        response = await client.patch(
            f"{API}/packages/{created['id']}",
            json={"additional_fees": [{"label": "Oversize", "amount": 300}], "delivery_fee_jmd": 200},
            headers=staff_headers,
        )

        costs = response.json()["package"]["costs"]
        assert costs["total_cost_jmd"] == 700 + 300 + 200
        assert costs["additional_fees_total_jmd"] == 300


class TestDeletePackageApi:
    """DELETE /api/v1/packages/{id}"""

    async def test_soft_delete_round_trip(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="TAS-D1")
        url = f"{API}/packages/{created['id']}"

        response = await client.delete(url, params={"reason": "Refused by customer"}, headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["status"] == "returned"
        assert response.json()["already_deleted"] is False

        response = await client.delete(url, headers=staff_headers)
        assert response.status_code == 200
        assert response.json()["already_deleted"] is True

        response = await client.get(url, headers=staff_headers)
        assert response.json()["status"] == "returned"
        assert response.json()["status_reason"] == "Refused by customer"

        listing = (await client.get(f"{API}/packages", headers=staff_headers)).json()
        assert listing["total_count"] == 0

        listing = (await client.get(f"{API}/packages", params={"status": "returned"}, headers=staff_headers)).json()
        assert listing["total_count"] == 1

    async def test_returned_package_status_locked(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="TAS-D2")
        url = f"{API}/packages/{created['id']}"
        await client.delete(url, headers=staff_headers)

        response = await client.patch(url, json={"status": "delivered"}, headers=staff_headers)
        assert response.status_code == 409


class TestPaymentsApi:
    """Payments and invoices on a package."""

    async def test_record_and_list(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="TAS-P1", weight=2.0)
        url = f"{API}/packages/{created['id']}/payments"

        response = await client.post(url, json={"amount_jmd": 1050, "method": "cash"}, headers=staff_headers)

        assert response.status_code == 201
        data = response.json()
        assert data["package"]["payment_status"] == "paid"
        assert data["package"]["costs"]["outstanding_balance_jmd"] == 0

        response = await client.get(url, headers=staff_headers)
        assert response.json()["total_paid_jmd"] == 1050

        response = await client.get(f"{API}/packages/{created['id']}/invoice", headers=staff_headers)
        assert response.json()["status"] == "paid"

    async def test_invoice_follows_amount_paid_edit(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="TAS-P3", weight=1.0)

        response = await client.patch(
            f"{API}/packages/{created['id']}", json={"amount_paid_jmd": 700}, headers=staff_headers
        )
        assert response.json()["package"]["payment_status"] == "paid"

        invoice = (await client.get(f"{API}/packages/{created['id']}/invoice", headers=staff_headers)).json()
        assert invoice["status"] == "paid"
        assert invoice["amount_paid_jmd"] == 700
        assert invoice["balance_due_jmd"] == 0

    async def test_rejects_bad_amount(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="TAS-P2")
        response = await client.post(
            f"{API}/packages/{created['id']}/payments", json={"amount_jmd": 0}, headers=staff_headers
        )
        assert response.status_code == 422


class TestSupportingEndpoints:
    """Tracking numbers, customers, public tracking and health."""

    async def test_new_tracking_number(self, client, staff_headers):
        response = await client.get(f"{API}/tracking-numbers/new", params={"short": True}, headers=staff_headers)

        data = response.json()
        assert data["tracking_number"].startswith("TAS-")
        assert len(data["tracking_number"]) == 10
        assert data["available"] is True

    async def test_customer_crud(self, client, support_headers):
        payload = generate_customer(user_code="CUST777")

        response = await client.post(f"{API}/customers", json=payload, headers=support_headers)
        assert response.status_code == 201

        response = await client.post(f"{API}/customers", json=payload, headers=support_headers)
        assert response.status_code == 409

        response = await client.get(f"{API}/customers/CUST777", headers=support_headers)
        assert response.json()["email"] == payload["email"]

        response = await client.get(f"{API}/customers", params={"q": "cust7"}, headers=support_headers)
        assert response.json()["total_count"] == 1

        response = await client.get(f"{API}/customers/NOPE", headers=support_headers)
        assert response.status_code == 404

    async def test_public_tracking_hides_money(self, client, staff_headers, customer):
        created = await _create(client, staff_headers, tracking_number="TAS-PUB1")
        await client.patch(
            f"{API}/packages/{created['id']}", json={"status": "shipped"}, headers=staff_headers
        )

        response = await client.get(f"{API}/tracking/tas-pub1")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "shipped"
        assert [h["status"] for h in data["history"]] == ["received", "shipped"]
        assert "costs" not in data
        assert "amount_paid_jmd" not in data
        assert "receiver_phone" not in data

    async def test_public_tracking_unknown(self, client):
        response = await client.get(f"{API}/tracking/NOPE-0000")
        assert response.status_code == 404

    async def test_health(self, client):
        response = await client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"
