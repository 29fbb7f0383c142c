from app.config import get_settings
from app.models.employee import Employee, TripRecord
from tests.factories import d


def _trip(country, entry, exit_date=None, trip_id=None):
    return {"id": trip_id, "country": country, "entry_date": entry, "exit_date": exit_date}


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json() == {"status": "healthy"}


def test_calculate(client):
    res = client.post(
        "/compliance/calculate",
        json={"trips": [_trip("FR", "2025-11-01", "2025-11-10")], "config": {"reference_date": "2025-12-01"}},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["days_used"] == 10
    assert body["days_remaining"] == 80
    assert body["risk_level"] == "green"
    assert body["is_compliant"] is True


def test_calculate_rejects_exit_before_entry(client):
    res = client.post(
        "/compliance/calculate",
        json={"trips": [_trip("FR", "2025-11-10", "2025-11-01")], "config": {"reference_date": "2025-12-01"}},
    )
    assert res.status_code == 422


def test_calculate_rejects_bad_thresholds(client):
    res = client.post(
        "/compliance/calculate",
        json={
            "trips": [],
            "config": {"reference_date": "2025-12-01", "thresholds": {"green": 5, "amber": 10}},
        },
    )
    assert res.status_code == 400
    assert "thresholds.amber" in res.json()["detail"]


def test_safe_entry(client):
    res = client.post(
        "/compliance/safe-entry",
        json={"trips": [_trip("IT", "2025-07-15", "2025-10-12")], "config": {"reference_date": "2026-01-10"}},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["can_enter_today"] is False
    assert body["earliest_safe_date"] == "2026-01-11"
    assert body["days_until_compliant"] == 1
    assert body["max_stay_days"] == 0


def test_vector(client):
    res = client.post(
        "/compliance/vector",
        json={
            "trips": [_trip("FR", "2025-11-01", "2025-11-10")],
            "config": {"mode": "planning", "reference_date": "2025-12-31"},
            "start_date": "2025-11-01",
            "end_date": "2025-11-30",
        },
    )
    assert res.status_code == 200
    days = res.json()
    assert len(days) == 30
    assert days[0]["days_used"] == 1
    assert days[-1]["days_used"] == 10


def test_vector_rejects_bad_ranges(client):
    base = {"trips": [], "config": {"reference_date": "2025-12-01"}}
    reversed_range = client.post("/compliance/vector", json={**base, "start_date": "2025-12-02", "end_date": "2025-12-01"})
    assert reversed_range.status_code == 400
    too_long = client.post("/compliance/vector", json={**base, "start_date": "2020-01-01", "end_date": "2025-12-01"})
    assert too_long.status_code == 400


def test_batch(client):
    res = client.post(
        "/compliance/batch",
        json={
            "reference_date": "2025-12-01",
            "employees": [
                {"id": "a", "trips": [_trip("FR", "2025-11-01", "2025-11-10")]},
                {"id": "b", "trips": [_trip("IE", "2025-11-01", "2025-11-30")]},
            ],
        },
    )
    assert res.status_code == 200
    results = res.json()["results"]
    assert results["a"]["days_used"] == 10
    assert results["b"]["days_used"] == 0


def test_batch_rejects_duplicate_ids(client):
    res = client.post(
        "/compliance/batch",
        json={"reference_date": "2025-12-01", "employees": [{"id": "a", "trips": []}, {"id": "a", "trips": []}]},
    )
    assert res.status_code == 400


def test_countries(client):
    countries = client.get("/countries/schengen").json()
    assert len(countries) == 33
    assert {"code": "MC", "name": "Monaco", "is_microstate": True, "member_since": None} in countries

    ireland = client.get("/countries/ie").json()
    assert ireland["is_schengen_member"] is False
    assert ireland["is_non_schengen_eu"] is True

    bulgaria_before = client.get("/countries/BG", params={"on": "2024-06-01"}).json()
    assert bulgaria_before["is_schengen_member"] is False
    assert bulgaria_before["is_non_schengen_eu"] is True
    assert client.get("/countries/Bulgaria", params={"on": "2025-06-01"}).json()["is_schengen_member"] is True


def test_employee_compliance(client, db):
    employee = Employee(
        name="Ana",
        trips=[
            TripRecord(country="IT", entry_date=d("2025-07-15"), exit_date=d("2025-10-12")),
            TripRecord(country="GR", entry_date=d("2025-11-01"), exit_date=d("2025-11-05"), ghosted=True),
        ],
    )
    db.add(employee)
    db.flush()
    employee_id = employee.id
    db.commit()

    res = client.get(f"/employees/{employee_id}/compliance", params={"reference_date": "2026-01-10"})
    assert res.status_code == 200
    body = res.json()
    assert body["days_used"] == 90
    assert body["risk_level"] == "red"
    assert body["total_trips"] == 1
    assert body["last_trip_date"] == "2025-10-12"
    assert body["next_reset_date"] == "2026-01-11"
    assert body["severity_score"] == 100

    refreshed = client.post(f"/employees/{employee_id}/compliance/refresh", params={"reference_date": "2026-01-11"})
    assert refreshed.status_code == 200
    assert refreshed.json()["days_used"] == 89


def test_employee_list_is_sorted_by_severity(client, db):
    db.add(Employee(name="Relaxed", trips=[TripRecord(country="FR", entry_date=d("2025-11-01"), exit_date=d("2025-11-02"))]))
    db.add(Employee(name="Busy", trips=[TripRecord(country="FR", entry_date=d("2025-07-15"), exit_date=d("2025-10-12"))]))
    db.commit()

    rows = client.get("/employees/", params={"reference_date": "2026-01-10"}).json()
    assert [r["name"] for r in rows] == ["Busy", "Relaxed"]


def test_unknown_employee(client):
    assert client.get("/employees/999/compliance").status_code == 404


def test_configured_compliance_start_applies_to_every_route(client, db, monkeypatch):
    monkeypatch.setattr(get_settings(), "compliance_start_date", d("2025-11-06"))
    trips = [_trip("FR", "2025-11-01", "2025-11-10")]

    calculated = client.post("/compliance/calculate", json={"trips": trips, "config": {"reference_date": "2025-12-01"}})
    assert calculated.json()["days_used"] == 5

    batch = client.post(
        "/compliance/batch",
        json={"reference_date": "2025-12-01", "employees": [{"id": "a", "trips": trips}]},
    )
    assert batch.json()["results"]["a"]["days_used"] == 5

    vector = client.post(
        "/compliance/vector",
        json={"trips": trips, "config": {"reference_date": "2025-12-01"}, "start_date": "2025-12-01", "end_date": "2025-12-01"},
    )
    assert vector.json()[0]["days_used"] == 5

    employee = Employee(name="Ana", trips=[TripRecord(country="FR", entry_date=d("2025-11-01"), exit_date=d("2025-11-10"))])
    db.add(employee)
    db.flush()
    employee_id = employee.id
    db.commit()
    dashboard = client.get(f"/employees/{employee_id}/compliance", params={"reference_date": "2025-12-01"})
    assert dashboard.json()["days_used"] == 5

    explicit = client.post(
        "/compliance/calculate",
        json={"trips": trips, "config": {"reference_date": "2025-12-01", "compliance_start_date": "2025-11-08"}},
    )
    assert explicit.json()["days_used"] == 3


def test_safe_entry_in_planning_mode_ignores_planned_travel(client):
    res = client.post(
        "/compliance/safe-entry",
        json={
            "trips": [_trip("DE", "2026-01-01", "2027-06-30")],
            "config": {"mode": "planning", "reference_date": "2026-05-01"},
        },
    )
    assert res.status_code == 200
    body = res.json()
    assert body["can_enter_today"] is False
    assert body["earliest_safe_date"] == "2026-07-31"
    assert body["days_until_compliant"] == 91
    assert body["max_stay_days"] == 0


def test_forecast(client):
    res = client.post(
        "/compliance/forecast",
        json={
            "trip": _trip("FR", "2026-01-10", "2026-01-19"),
            "history": [_trip("IT", "2025-07-15", "2025-10-12")],
        },
    )
    assert res.status_code == 200
    body = res.json()
    assert body["days_used_before_trip"] == 90
    assert body["days_after_trip"] == 100
    assert body["risk_level"] == "red"
    assert body["is_compliant"] is False
    assert body["compliant_from_date"] == "2026-01-21"


def test_forecast_rejects_bad_input(client):
    open_trip = client.post("/compliance/forecast", json={"trip": _trip("FR", "2026-01-10")})
    assert open_trip.status_code == 422
    bad_threshold = client.post(
        "/compliance/forecast",
        json={"trip": _trip("FR", "2026-01-10", "2026-01-19"), "warning_threshold": 0},
    )
    assert bad_threshold.status_code == 400


def test_future_forecasts(client, db):
    res = client.post(
        "/compliance/forecast/future",
        json={
            "from_date": "2026-01-01",
            "trips": [
                _trip("FR", "2025-11-01", "2025-11-10", "past"),
                _trip("DE", "2026-02-01", "2026-02-10", "feb"),
                _trip("ES", "2026-01-10", "2026-01-14", "jan"),
            ],
        },
    )
    assert res.status_code == 200
    assert [(f["trip"]["id"], f["days_after_trip"]) for f in res.json()] == [("jan", 15), ("feb", 25)]

    employee = Employee(
        name="Ben",
        trips=[
            TripRecord(country="FR", entry_date=d("2025-11-01"), exit_date=d("2025-11-10")),
            TripRecord(country="ES", entry_date=d("2026-01-10"), exit_date=d("2026-01-14")),
            TripRecord(country="PT", entry_date=d("2026-01-20"), exit_date=d("2026-01-29"), ghosted=True),
        ],
    )
    db.add(employee)
    db.flush()
    employee_id = employee.id
    db.commit()
    forecasts = client.get(f"/employees/{employee_id}/forecast", params={"from_date": "2026-01-01"}).json()
    assert [(f["trip"]["country"], f["days_after_trip"]) for f in forecasts] == [("ES", 15)]
    assert client.get("/employees/999/forecast").status_code == 404
