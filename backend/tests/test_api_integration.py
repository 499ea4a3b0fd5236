"""
API Integration Tests
End-to-end testing of the inventory REST endpoints
"""

from decimal import Decimal
from fastapi.testclient import TestClient

API = "/api/v1"


def _create_item(client: TestClient, number="PIPE-2", unit_cost="5.00") -> dict:
    response = client.post(f"{API}/items/", json={
        "number": number,
        "description": "2in steel pipe",
        "unit": "ft",
        "category": "raw_material",
        "reorder_point": "10",
        "unit_cost": unit_cost,
    })
    assert response.status_code == 201, response.text
    return response.json()


def _create_warehouse(client: TestClient, name="Central Yard", type="yard") -> dict:
    response = client.post(f"{API}/warehouses/", json={"name": name, "type": type})
    assert response.status_code == 201, response.text
    return response.json()


class TestSystemAPI:
    """Health and routing"""

    def test_health_check(self, client: TestClient):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] in ("healthy", "degraded")
        assert "version" in data


class TestMasterDataAPI:
    """Items and warehouses"""

    def test_create_and_get_item(self, client: TestClient):
        item = _create_item(client)
        assert Decimal(item["avg_cost"]) == Decimal("5.00")
        response = client.get(f"{API}/items/{item['id']}")
        assert response.status_code == 200
        assert response.json()["number"] == "PIPE-2"

    def test_duplicate_item_is_422(self, client: TestClient):
        _create_item(client)
        response = client.post(f"{API}/items/", json={"number": "PIPE-2", "description": "again"})
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_missing_item_is_404(self, client: TestClient):
        response = client.get(f"{API}/items/999")
        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "not_found"
        assert body["message"] == "Item 999 not found"
        assert body["detail"]["entity_id"] == 999

    def test_list_and_deactivate(self, client: TestClient):
        item = _create_item(client)
        client.post(f"{API}/items/{item['id']}/deactivate")
        assert client.get(f"{API}/items/", params={"active": True}).json() == []

    def test_warehouse_crud(self, client: TestClient):
        warehouse = _create_warehouse(client)
        response = client.patch(f"{API}/warehouses/{warehouse['id']}", json={"contact_name": "Lee"})
        assert response.status_code == 200
        assert response.json()["contact_name"] == "Lee"
        assert len(client.get(f"{API}/warehouses/", params={"type": "yard"}).json()) == 1


class TestLedgerAPI:
    """Postings, stock and valuation"""

    def test_receive_issue_and_stock(self, client: TestClient, events):
        item = _create_item(client)
        yard = _create_warehouse(client)

        response = client.post(f"{API}/transactions/receipt", json={
            "item_id": item["id"], "warehouse_id": yard["id"], "quantity": "40", "unit_cost": "6.00",
        })
        assert response.status_code == 201
        assert Decimal(response.json()["total_cost"]) == Decimal("240.00")

        response = client.post(f"{API}/transactions/issue", json={
            "item_id": item["id"], "warehouse_id": yard["id"], "quantity": "15", "job_id": "JOB-5",
        })
        assert response.status_code == 201
        assert Decimal(response.json()["unit_cost"]) == Decimal("6.00")

        level = client.get(f"{API}/stock/level", params={"item_id": item["id"], "warehouse_id": yard["id"]})
        assert Decimal(level.json()["quantity"]) == Decimal("25")

        rows = client.get(f"{API}/warehouses/{yard['id']}/stock").json()
        assert Decimal(rows[0]["total_value"]) == Decimal("150.00")

        valuation = client.get(f"{API}/valuation", params={"method": "fifo"}).json()
        assert valuation["method"] == "fifo"
        assert Decimal(valuation["total_value"]) == Decimal("150.00")

        assert "inventory.issued" in events.names()

    def test_stock_level_unknown_warehouse_is_404(self, client: TestClient):
        item = _create_item(client)
        response = client.get(f"{API}/stock/level", params={"item_id": item["id"], "warehouse_id": 999})
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_invalid_quantity_is_422(self, client: TestClient):
        item = _create_item(client)
        yard = _create_warehouse(client)
        response = client.post(f"{API}/transactions/issue", json={
            "item_id": item["id"], "warehouse_id": yard["id"], "quantity": "0",
        })
        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"

    def test_transfer_and_listing(self, client: TestClient):
        item = _create_item(client)
        yard = _create_warehouse(client)
        site = _create_warehouse(client, name="Site 9", type="job_site")
        client.post(f"{API}/transactions/receipt", json={
            "item_id": item["id"], "warehouse_id": yard["id"], "quantity": "10", "unit_cost": "1",
        })
        response = client.post(f"{API}/transactions/transfer", json={
            "item_id": item["id"], "from_warehouse_id": yard["id"], "to_warehouse_id": site["id"], "quantity": "4",
        })
        assert response.status_code == 201
        transfers = client.get(f"{API}/transactions/", params={"type": "transfer"}).json()
        assert len(transfers) == 1
        level = client.get(f"{API}/items/{item['id']}/stock", params={"warehouse_id": site["id"]})
        assert Decimal(level.json()["quantity"]) == Decimal("4")

    def test_low_stock(self, client: TestClient):
        item = _create_item(client)
        alerts = client.get(f"{API}/stock/low").json()
        assert [a["item_id"] for a in alerts] == [item["id"]]


class TestWorkflowAPI:
    """Requisitions and counts over HTTP"""

    def test_requisition_transitions(self, client: TestClient):
        item = _create_item(client)
        response = client.post(f"{API}/requisitions/", json={
            "number": "R-1", "job_id": "JOB-5", "requested_by": "Foreman",
            "item_id": item["id"], "quantity": "10",
        })
        assert response.status_code == 201
        req_id = response.json()["id"]

        conflict = client.post(f"{API}/requisitions/{req_id}/approve", json={"approved_by": "PM"})
        assert conflict.status_code == 409
        assert conflict.json()["error"] == "state_conflict"
        assert conflict.json()["detail"]["current_status"] == "draft"

        assert client.post(f"{API}/requisitions/{req_id}/submit").json()["status"] == "submitted"
        assert client.post(f"{API}/requisitions/{req_id}/approve", json={"approved_by": "PM"}).status_code == 200
        filled = client.post(f"{API}/requisitions/{req_id}/fill", json={"quantity": "10", "filled_by": "Yard"})
        assert filled.json()["status"] == "filled"
        fills = client.get(f"{API}/requisitions/{req_id}/fills").json()
        assert len(fills) == 1

    def test_count_post_flow(self, client: TestClient):
        item = _create_item(client)
        yard = _create_warehouse(client)
        client.post(f"{API}/transactions/receipt", json={
            "item_id": item["id"], "warehouse_id": yard["id"], "quantity": "20", "unit_cost": "2",
        })
        response = client.post(f"{API}/counts/start", json={
            "warehouse_id": yard["id"], "item_id": item["id"], "counted_by": "Auditor", "counted_quantity": "18",
        })
        assert response.status_code == 201
        count = response.json()
        assert Decimal(count["variance"]) == Decimal("-2")

        assert client.post(f"{API}/counts/{count['id']}/post").status_code == 409
        client.post(f"{API}/counts/{count['id']}/complete")
        posted = client.post(f"{API}/counts/{count['id']}/post").json()
        assert posted["status"] == "posted"
        assert posted["adjustment_transaction_id"] is not None
        assert client.post(f"{API}/counts/{count['id']}/post").status_code == 409

    def test_reports(self, client: TestClient):
        item = _create_item(client)
        yard = _create_warehouse(client)
        client.post(f"{API}/transactions/receipt", json={
            "item_id": item["id"], "warehouse_id": yard["id"], "quantity": "5", "unit_cost": "3",
        })
        client.post(f"{API}/transactions/waste", json={
            "item_id": item["id"], "warehouse_id": yard["id"], "quantity": "1", "job_id": "JOB-5",
        })
        summary = client.get(f"{API}/reports/job-materials/JOB-5").json()
        assert Decimal(summary["waste_cost"]) == Decimal("3.00")
        waste = client.get(f"{API}/reports/waste", params={"job_id": "JOB-5"}).json()
        assert waste["entries"][0]["warehouse_name"] == "Central Yard"
