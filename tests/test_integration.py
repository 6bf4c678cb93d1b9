from decimal import Decimal
from pathlib import Path

import httpx
from fastapi.testclient import TestClient

from src.marketplace.models.domain import OwnerType
from src.marketplace.persistence.memory import MemoryStore
from src.marketplace.services.geocoding import NominatimClient

from .conftest import RESTAURANT_LAT, RESTAURANT_LNG, north_of


def _fee_payload(subtotal: float) -> dict:
    lat, lng = north_of(RESTAURANT_LAT, RESTAURANT_LNG, 5.0)
    return {"customerLat": lat, "customerLng": lng, "restaurantId": "rest-1", "orderSubtotal": subtotal}


def test_delivery_fee_endpoint(api_client: TestClient) -> None:
    response = api_client.post("/api/delivery-fees/calculate", json=_fee_payload(2000))

    assert response.status_code == 200
    payload = response.json()
    assert payload["success"] is True
    assert payload["fee"] == 250.0
    assert payload["billedFee"] == 250.0
    assert payload["distance"] == 5.0
    assert payload["estimatedTime"] == "30-45 minutes"
    assert payload["isFreeDelivery"] is False


def test_delivery_fee_endpoint_free_delivery(api_client: TestClient) -> None:
    payload = api_client.post("/api/delivery-fees/calculate", json=_fee_payload(3500)).json()

    assert payload["fee"] == 250.0
    assert payload["billedFee"] == 0.0
    assert payload["isFreeDelivery"] is True
    assert payload["freeDeliveryReason"]


def test_delivery_fee_endpoint_reports_failures_with_200(api_client: TestClient) -> None:
    missing = api_client.post("/api/delivery-fees/calculate", json={"restaurantId": "rest-1", "orderSubtotal": 10})
    unknown = api_client.post("/api/delivery-fees/calculate", json={**_fee_payload(10), "restaurantId": "nope"})

    assert missing.status_code == 200
    assert missing.json()["success"] is False
    assert missing.json()["error"] == "missing_customer_location"
    assert unknown.status_code == 200
    assert unknown.json()["error"] == "restaurant_not_found"


def test_driver_wallet_endpoints(api_client: TestClient) -> None:
    empty = api_client.get("/api/drivers/driver-1/wallet")
    assert empty.status_code == 200
    assert empty.json()["balance"] == 0.0

    credited = api_client.post(
        "/api/drivers/driver-1/wallet/add-balance", json={"amount": 75.5, "description": "Bonus"}
    )
    assert credited.status_code == 200
    assert credited.json()["balance"] == 75.5
    assert credited.json()["totalEarned"] == 75.5

    history = api_client.get("/api/wallets/driver/driver-1/transactions").json()
    assert history["wallet"]["ownerId"] == "driver-1"
    assert history["items"][0]["type"] == "manual_credit"
    assert history["items"][0]["balanceAfter"] == 75.5


def test_wallet_errors_use_error_envelope(api_client: TestClient) -> None:
    unknown = api_client.get("/api/drivers/ghost/wallet")
    invalid = api_client.post("/api/drivers/driver-1/wallet/add-balance", json={"amount": -5})

    assert unknown.status_code == 404
    assert unknown.json()["error"] == "not_found"
    assert invalid.status_code == 400
    assert invalid.json() == {"error": "invalid_input", "detail": "Invalid amount"}


def test_withdrawal_lifecycle(api_client: TestClient, store: MemoryStore) -> None:
    store.credit_wallet(OwnerType.DRIVER, "driver-1", Decimal("100"))

    too_much = api_client.post(
        "/api/withdrawal-requests", json={"entityType": "driver", "entityId": "driver-1", "amount": 500}
    )
    assert too_much.status_code == 400
    assert too_much.json()["error"] == "insufficient_balance"

    created = api_client.post(
        "/api/withdrawal-requests",
        json={"entityType": "driver", "entityId": "driver-1", "amount": 80, "bankName": "CAC Bank"},
    )
    assert created.status_code == 201
    request_id = created.json()["id"]
    assert created.json()["status"] == "pending"

    pending = api_client.get("/api/admin/withdrawal-requests/pending").json()
    assert [item["id"] for item in pending] == [request_id]

    approved = api_client.post(
        f"/api/admin/withdrawal-requests/{request_id}/approve", json={"approvedBy": "admin-1"}
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"
    assert approved.json()["approvedBy"] == "admin-1"
    assert api_client.get("/api/drivers/driver-1/wallet").json()["balance"] == 20.0

    conflict = api_client.post(f"/api/admin/withdrawal-requests/{request_id}/reject", json={"reason": "late"})
    assert conflict.status_code == 409
    assert conflict.json()["error"] == "invalid_transition"

    completed = api_client.post(f"/api/admin/withdrawal-requests/{request_id}/complete")
    assert completed.status_code == 200
    assert api_client.get(f"/api/withdrawal-requests/{request_id}").json()["status"] == "completed"


def test_settle_order_endpoint_is_idempotent(api_client: TestClient) -> None:
    first = api_client.post("/api/orders/order-1/settle")
    second = api_client.post("/api/orders/order-1/settle")

    assert first.status_code == 200
    assert first.json()["alreadySettled"] is False
    assert first.json()["settlement"]["driverEarnings"] == 175.0
    assert second.status_code == 200
    assert second.json()["alreadySettled"] is True
    assert second.json()["restaurantWallet"]["balance"] == 1800.0

    pending = api_client.post("/api/orders/order-pending/settle")
    assert pending.status_code == 400


def test_financial_report_export(api_client: TestClient, tmp_path: Path) -> None:
    api_client.post("/api/orders/order-1/settle")
    api_client.post("/api/orders/order-pickup/settle")

    response = api_client.get("/api/admin/financial-reports", params={"export": True})

    assert response.status_code == 200
    payload = response.json()
    assert payload["totalOrders"] == 2
    assert payload["totalRevenue"] == 2750.0
    assert payload["totalCompanyProfit"] == 325.0
    run_id = payload["exportRunId"]
    run_dir = tmp_path / "outputs" / run_id
    assert (run_dir / "summary.json").exists()
    assert (run_dir / "settlements.csv").exists()
    assert (run_dir / "settlements.xlsx").exists()

    runs = api_client.get("/api/admin/financial-reports/exports").json()
    assert runs[0]["id"] == run_id
    assert runs[0]["totalOrders"] == 2

    download = api_client.get(f"/api/admin/financial-reports/exports/{run_id}/settlements.csv")
    assert download.status_code == 200
    assert download.text.startswith("order_id,")
    assert api_client.get(f"/api/admin/financial-reports/exports/{run_id}/../secret.txt").status_code == 404


def test_financial_report_rejects_inverted_window(api_client: TestClient) -> None:
    response = api_client.get(
        "/api/admin/financial-reports",
        params={"start": "2026-02-01T00:00:00Z", "end": "2026-01-01T00:00:00Z"},
    )

    assert response.status_code == 400


def test_commission_settings_and_health(api_client: TestClient) -> None:
    assert api_client.get("/api/admin/commission-settings").json() == []
    assert api_client.get("/api/health").json() == {"status": "ok"}
    database = api_client.get("/api/health/database").json()
    assert database["backend"] == "memory"
    assert database["configured"] is False


def test_geocode_endpoints(api_client: TestClient) -> None:
    from src.marketplace.api.dependencies import get_geocoder

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/reverse"):
            return httpx.Response(
                200, json={"lat": "15.3694", "lon": "44.1910", "display_name": "Tahrir Square, Sanaa"}
            )
        return httpx.Response(503)

    client = NominatimClient(
        base_url="https://geo.test", max_retries=0, transport=httpx.MockTransport(handler)
    )
    api_client.app.dependency_overrides[get_geocoder] = lambda: client

    reverse = api_client.get("/api/geocode/reverse", params={"lat": 15.3694, "lng": 44.191})
    assert reverse.status_code == 200
    assert reverse.json()["displayName"] == "Tahrir Square, Sanaa"

    assert api_client.get("/api/geocode/reverse", params={"lat": 95, "lng": 44}).status_code == 400
    assert api_client.get("/api/geocode/search", params={"q": "Sanaa"}).status_code == 503


def test_oversized_amounts_are_rejected_not_crashing(api_client: TestClient, store: MemoryStore) -> None:
    store.credit_wallet(OwnerType.DRIVER, "driver-1", Decimal("100"))

    quote = api_client.post("/api/delivery-fees/calculate", json=_fee_payload(1e30))
    withdrawal = api_client.post(
        "/api/withdrawal-requests", json={"entityType": "driver", "entityId": "driver-1", "amount": 1e30}
    )
    credit = api_client.post("/api/drivers/driver-1/wallet/add-balance", json={"amount": 1e30})

    assert quote.status_code == 200
    assert quote.json()["success"] is False
    assert quote.json()["error"] == "invalid_subtotal"
    assert withdrawal.status_code == 400
    assert withdrawal.json()["error"] == "invalid_input"
    assert credit.status_code == 400
    assert credit.json()["error"] == "invalid_input"
    assert api_client.get("/api/drivers/driver-1/wallet").json()["balance"] == 100.0
