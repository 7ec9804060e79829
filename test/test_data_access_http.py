import json
from datetime import datetime, timezone
from urllib.parse import parse_qsl, urlsplit

import pytest
import requests
import responses

from rsm.config import BackendSettings
from rsm.repositories.supabase_repo import SupabaseRepository
from rsm.services.inventory_service import InventoryService
from rsm.services.reporting_service import ReportingService
from rsm.services.transaction_service import TransactionService

BASE = "https://demo.supabase.co"
REST = f"{BASE}/rest/v1"
ORG = "00000000-0000-0000-0000-000000000001"


def _repo() -> SupabaseRepository:
    return SupabaseRepository(BackendSettings(url=BASE, anon_key="anon-key", org_id=ORG, timeout_seconds=2))


def _query(call) -> list[tuple[str, str]]:
    return parse_qsl(urlsplit(call.request.url).query)


@responses.activate
def test_fetch_products_filters_by_org_and_sorts_by_sku():
    responses.add(
        responses.GET, f"{REST}/inventory_on_hand",
        json=[
            {"product_id": "a", "sku": "RICE-1", "name": "Jasmine", "category": "Jasmine",
             "pack_size_kg": 25, "reorder_point_kg": 100, "on_hand_kg": 50, "org_id": ORG},
        ],
    )
    products = InventoryService(_repo()).fetch_products()

    assert products is not None and len(products) == 1
    assert products[0].status == "low"
    q = _query(responses.calls[0])
    assert ("org_id", f"eq.{ORG}") in q
    assert ("order", "sku.asc") in q
    assert responses.calls[0].request.headers["apikey"] == "anon-key"
    assert responses.calls[0].request.headers["Authorization"] == "Bearer anon-key"


@responses.activate
def test_fetch_kpis_calls_rpc_with_org_id():
    responses.add(
        responses.POST, f"{REST}/rpc/get_dashboard_kpis",
        json={"total_stock_kg": 1250.5, "sku_count": 4, "low_stock_count": 1, "sales_7d_kg": 300},
    )
    kpis = ReportingService(_repo()).fetch_kpis()

    assert kpis is not None
    assert kpis.total_stock_kg == 1250.5
    assert kpis.sku_count == 4
    assert json.loads(responses.calls[0].request.body) == {"p_org_id": ORG}


@responses.activate
def test_fetch_kpis_server_error_resolves_to_none():
    responses.add(responses.POST, f"{REST}/rpc/get_dashboard_kpis", json={"message": "boom"}, status=500)
    assert ReportingService(_repo()).fetch_kpis() is None


@responses.activate
def test_network_failure_never_escapes_the_boundary():
    responses.add(responses.GET, f"{REST}/inventory_on_hand", body=requests.ConnectionError("offline"))
    responses.add(responses.GET, f"{REST}/inventory_txn", body=requests.ConnectionError("offline"))

    assert InventoryService(_repo()).fetch_products() is None
    assert TransactionService(_repo()).fetch_transactions() is None


@responses.activate
def test_fetch_transactions_joins_product_name_and_limits_to_fifty():
    responses.add(
        responses.GET, f"{REST}/inventory_txn",
        json=[
            {"id": "t2", "created_at": "2024-03-30T08:00:00+00:00", "type": "OUT", "product_id": "a",
             "qty_kg": 25, "ref": "INV-002", "note": None, "org_id": ORG,
             "products": {"sku": "RICE-1", "name": "Jasmine"}},
            {"id": "t1", "created_at": "2024-03-29T08:00:00.123456+00:00", "type": "IN", "product_id": "a",
             "qty_kg": 100, "ref": None, "note": "first lot", "org_id": ORG,
             "products": {"sku": "RICE-1", "name": "Jasmine"}},
        ],
    )
    txns = TransactionService(_repo()).fetch_transactions()

    assert [t.id for t in txns] == ["t2", "t1"]
    assert txns[0].product_name == "Jasmine"
    assert txns[1].note == "first lot"
    q = dict(_query(responses.calls[0]))
    assert q["select"] == "*,products(sku,name)"
    assert q["order"] == "created_at.desc"
    assert q["limit"] == "50"


@responses.activate
def test_sales_window_sends_lower_and_upper_bounds():
    responses.add(
        responses.GET, f"{REST}/inventory_txn",
        json=[{"created_at": "2024-03-20T10:00:00Z", "qty_kg": 40}],
    )
    start = datetime(2024, 3, 17, 12, 0, tzinfo=timezone.utc)
    end = datetime(2024, 3, 24, 12, 0, tzinfo=timezone.utc)
    records = ReportingService(_repo()).fetch_sales_window(start, end)

    assert records is not None and records[0].qty_kg == 40
    q = _query(responses.calls[0])
    assert ("type", "eq.OUT") in q
    assert ("created_at", "gte.2024-03-17T12:00:00+00:00") in q
    assert ("created_at", "lt.2024-03-24T12:00:00+00:00") in q


@responses.activate
def test_open_ended_sales_window_has_no_upper_bound():
    responses.add(responses.GET, f"{REST}/inventory_txn", json=[])
    ReportingService(_repo()).fetch_sales_window(datetime(2024, 3, 24, tzinfo=timezone.utc))

    bounds = [v for k, v in _query(responses.calls[0]) if k == "created_at"]
    assert bounds == ["gte.2024-03-24T00:00:00+00:00"]


@responses.activate
def test_create_product_posts_generated_sku_for_org():
    responses.add(responses.POST, f"{REST}/products", status=201)
    svc = InventoryService(_repo(), clock=lambda: 1711800000.5)
    result = svc.create_product({
        "name": "Jasmine Premium", "name_th": "ข้าวหอมมะลิ", "category": "Jasmine",
        "pack_size_kg": "25", "reorder_point_kg": "",
    })

    assert result.ok
    body = json.loads(responses.calls[0].request.body)
    assert body["org_id"] == ORG
    assert body["sku"] == "RICE-1711800000500"
    assert body["reorder_point_kg"] == 0.0
    assert responses.calls[0].request.headers["Prefer"] == "return=minimal"


@responses.activate
def test_create_product_surfaces_store_error_verbatim():
    responses.add(
        responses.POST, f"{REST}/products",
        json={"code": "23505", "message": 'duplicate key value violates unique constraint "products_sku_key"'},
        status=409,
    )
    result = InventoryService(_repo()).create_product({"name": "A", "category": "White", "pack_size_kg": "5"})

    assert not result.ok
    assert "duplicate key" in result.error


def test_create_product_validation_failure_does_not_call_store():
    result = InventoryService(repo=None).create_product({"name": "A", "category": "White", "pack_size_kg": "0"})
    assert not result.ok
    assert "must be > 0" in result.error


@responses.activate
def test_create_transaction_passes_rpc_arguments():
    responses.add(responses.POST, f"{REST}/rpc/create_transaction", json={"success": True})
    result = TransactionService(_repo()).create_transaction("in", "prod-1", "12.5", ref=" INV-001 ", note="")

    assert result.ok
    assert json.loads(responses.calls[0].request.body) == {
        "p_org_id": ORG,
        "p_product_id": "prod-1",
        "p_type": "IN",
        "p_qty_kg": 12.5,
        "p_ref": "INV-001",
        "p_note": None,
    }


@responses.activate
def test_create_transaction_business_rejection_is_a_failure_result():
    responses.add(
        responses.POST, f"{REST}/rpc/create_transaction",
        json={"success": False, "error": "Insufficient stock"},
    )
    result = TransactionService(_repo()).create_transaction("OUT", "prod-1", 999)

    assert not result.ok
    assert result.error == "Insufficient stock"


@responses.activate
def test_create_transaction_transport_error_is_a_failure_result():
    responses.add(responses.POST, f"{REST}/rpc/create_transaction", body=requests.Timeout("slow"))
    result = TransactionService(_repo()).create_transaction("ADJUST", "prod-1", 1)

    assert not result.ok
    assert "Network error" in result.error


def test_create_transaction_rejects_non_positive_quantity_locally():
    svc = TransactionService(repo=None)
    assert svc.create_transaction("IN", "p", "0").error == "Quantity (kg) must be > 0."
    assert svc.create_transaction("IN", "", "5").error == "Product is required."
    assert svc.create_transaction("MOVE", "p", "5").ok is False


@pytest.mark.parametrize("qty", ["nan", "inf", "-inf", float("nan")])
def test_create_transaction_rejects_non_finite_quantity_locally(qty):
    result = TransactionService(repo=None).create_transaction("IN", "prod-1", qty)
    assert not result.ok
    assert result.error == "Quantity (kg) must be a number."
