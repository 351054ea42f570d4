from fastapi.testclient import TestClient

from carsql.config import INDEXES, SUMMARY_VIEW
from carsql.main import create_app


def test_health_after_startup(client):
    r = client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["loaded"] is True
    assert data["rows"] == 9
    assert SUMMARY_VIEW in data["views"]
    assert "car_specs" in data["tables"]
    assert set(INDEXES) <= set(data["indexes"])


def test_catalog(client):
    data = client.get("/api/catalog").json()
    names = [ix["name"] for ix in data["indexes"]["car_prices"]]
    assert "idx_car_prices_make" in names
    assert all(ix["unique"] is False for ix in data["indexes"]["car_prices"])


def test_averages(client):
    data = client.get("/api/averages").json()
    assert data["columns"] == ["make", "sales", "avg_price"]
    assert data["rows"][0] == {"make": "BMW", "sales": 2, "avg_price": 30000.0}
    assert data["row_count"] == 5


def test_averages_by_several_columns(client):
    data = client.get("/api/averages", params=[("by", "make"), ("by", "year"), ("limit", "2")]).json()
    assert data["columns"] == ["make", "year", "sales", "avg_price"]
    assert data["row_count"] == 2


def test_averages_unknown_column(client):
    r = client.get("/api/averages", params={"by": "nope"})
    assert r.status_code == 400
    assert "Schema error" in r.json()["detail"]


def test_above_average(client):
    data = client.get("/api/above-average").json()
    assert [row["sellingprice"] for row in data["rows"]] == [30000.0, 30000.0, 22000.0]


def test_max_per_make(client):
    data = client.get("/api/max-per-make").json()
    assert data["row_count"] == 6


def test_summary_for_one_make(client):
    data = client.get("/api/summary", params={"make": "BMW"}).json()
    assert data["rows"] == [{"make": "BMW", "year": 2016, "car_count": 2, "avg_price": 30000.0}]


def test_summary_null_average_is_null(client):
    rows = client.get("/api/summary", params={"make": "Ford"}).json()["rows"]
    by_year = {row["year"]: row for row in rows}
    assert by_year[2014]["car_count"] == 2
    assert by_year[2014]["avg_price"] is None


def test_sales_filter(client):
    data = client.get("/api/sales", params={"make": "Toyota"}).json()
    assert [row["sellingprice"] for row in data["rows"]] == [22000.0, 18000.0]


def test_ad_hoc_query(client):
    r = client.post("/api/query", json={"sql": "SELECT COUNT(*) AS n FROM car_prices"})
    assert r.status_code == 200
    assert r.json()["rows"] == [{"n": 9}]

    r = client.post("/api/query", json={
        "sql": "SELECT model FROM car_prices WHERE make = :make ORDER BY model",
        "params": {"make": "Toyota"},
    })
    assert [row["model"] for row in r.json()["rows"]] == ["Camry", "Corolla"]


def test_ad_hoc_query_refuses_schema_statements(client):
    r = client.post("/api/query", json={"sql": "CREATE VIEW v AS SELECT 1"})
    assert r.status_code == 400
    r = client.post("/api/query", json={"sql": "DELETE FROM car_prices"})
    assert r.status_code == 400
    assert client.get("/api/health").json()["rows"] == 9


def test_ad_hoc_query_bad_sql(client):
    r = client.post("/api/query", json={"sql": "SELECT price FROM car_prices"})
    assert r.status_code == 400


def test_unloaded_catalog(empty_store):
    with TestClient(create_app(empty_store)) as c:
        health = c.get("/api/health").json()
        assert health["loaded"] is False
        assert health["rows"] == 0
        assert c.get("/api/averages").status_code == 503
        assert c.post("/api/query", json={"sql": "SELECT 1"}).status_code == 503
