from fastapi.testclient import TestClient

from appointment_api.app.main import create_app
from appointment_api.app.services.appointment_store import AppointmentStore

BASE = "/api/v1/appointments"


def ids(response):
    return [item["id"] for item in response.json()]


def test_index(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["appointments"] == f"{BASE}/"


def test_list_all(client):
    response = client.get(f"{BASE}/")
    assert response.status_code == 200
    assert sorted(ids(response)) == ["A", "B", "C"]


def test_list_sorted(client):
    response = client.get(f"{BASE}/sorted")
    assert ids(response) == ["B", "A", "C"]
    assert response.json()[0] == {"id": "B", "date": "2025-01-05", "description": "y"}


def test_upcoming_and_previous_with_reference_date(client):
    assert ids(client.get(f"{BASE}/upcoming", params={"reference_date": "2025-01-06"})) == ["A", "C"]
    assert ids(client.get(f"{BASE}/previous", params={"reference_date": "2025-01-06"})) == ["B"]


def test_upcoming_defaults_to_today(client):
    # Every sample appointment is in the past relative to today.
    assert client.get(f"{BASE}/upcoming").json() == []
    assert ids(client.get(f"{BASE}/previous")) == ["A", "C", "B"]


def test_range_inclusive_by_default(client):
    response = client.get(f"{BASE}/range", params={"start": "2025-01-05", "end": "2025-01-10"})
    assert ids(response) == ["B", "A", "C"]


def test_range_exclusive(client):
    client.post(f"{BASE}/", json={"id": "D", "date": "2025-01-07", "description": "mid"})
    response = client.get(
        f"{BASE}/range", params={"start": "2025-01-05", "end": "2025-01-10", "bounds": "exclusive"}
    )
    assert ids(response) == ["D"]


def test_range_errors(client):
    missing = client.get(f"{BASE}/range", params={"start": "2025-01-05"})
    assert missing.status_code == 400
    assert "start and end" in missing.json()["error"]

    backwards = client.get(f"{BASE}/range", params={"start": "2025-01-10", "end": "2025-01-05"})
    assert backwards.status_code == 400
    assert "end date" in backwards.json()["error"]

    malformed = client.get(f"{BASE}/range", params={"start": "2025-13-40", "end": "2025-01-05"})
    assert malformed.status_code == 400
    assert malformed.json()["error"].startswith("start")

    bad_bounds = client.get(
        f"{BASE}/range", params={"start": "2025-01-05", "end": "2025-01-10", "bounds": "open"}
    )
    assert bad_bounds.status_code == 400


def test_get_one(client):
    response = client.get(f"{BASE}/A")
    assert response.status_code == 200
    assert response.json() == {"id": "A", "date": "2025-01-10", "description": "x"}


def test_get_missing_is_404(client):
    response = client.get(f"{BASE}/nope")
    assert response.status_code == 404
    assert "does not exist" in response.json()["error"]


def test_create(client, sample_store):
    response = client.post(f"{BASE}/", json={"id": " N1 ", "date": "2025-02-01", "description": " New "})
    assert response.status_code == 201
    assert response.json() == {"status": "created", "id": "N1"}
    assert sample_store.get("N1").description == "New"


def test_create_duplicate_is_409(client, sample_store):
    response = client.post(f"{BASE}/", json={"id": "A", "date": "2025-02-01", "description": "again"})
    assert response.status_code == 409
    assert "already exists" in response.json()["error"]
    assert sample_store.get("A").description == "x"


def test_create_invalid_fields_are_400(client, sample_store):
    too_long = client.post(f"{BASE}/", json={"id": "X" * 11, "date": "2025-02-01", "description": "d"})
    assert too_long.status_code == 400
    assert too_long.json()["error"].startswith("id")

    too_early = client.post(f"{BASE}/", json={"id": "E1", "date": "1999-12-31", "description": "d"})
    assert too_early.status_code == 400
    assert too_early.json()["error"].startswith("date")

    blank = client.post(f"{BASE}/", json={"id": "E2", "date": "2025-02-01", "description": "  "})
    assert blank.status_code == 400
    assert blank.json()["error"].startswith("description")

    malformed = client.post(f"{BASE}/", json={"id": "E3", "date": "not-a-date", "description": "d"})
    assert malformed.status_code == 400

    missing = client.post(f"{BASE}/", json={"id": "E4"})
    assert missing.status_code == 400

    assert len(sample_store) == 3


def test_update_description(client):
    response = client.patch(f"{BASE}/A", json={"description": "changed"})
    assert response.status_code == 200
    assert response.json()["description"] == "changed"

    invalid = client.patch(f"{BASE}/A", json={"description": ""})
    assert invalid.status_code == 400
    assert client.get(f"{BASE}/A").json()["description"] == "changed"

    assert client.patch(f"{BASE}/nope", json={"description": "x"}).status_code == 404


def test_delete(client):
    response = client.delete(f"{BASE}/A")
    assert response.status_code == 200
    assert response.json() == {"status": "deleted", "id": "A"}
    assert client.get(f"{BASE}/A").status_code == 404
    assert ids(client.get(f"{BASE}/sorted")) == ["B", "C"]

    again = client.delete(f"{BASE}/A")
    assert again.status_code == 404


def test_export_csv(client):
    response = client.get(f"{BASE}/export")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.headers["content-disposition"] == "attachment; filename=appointments-all.csv"
    assert response.text.splitlines() == [
        "id,date,description",
        "B,2025-01-05,y",
        "A,2025-01-10,x",
        "C,2025-01-10,z",
    ]


def test_export_json_range(client):
    response = client.get(
        f"{BASE}/export", params={"format": "json", "scope": "range", "start": "2025-01-06", "end": "2025-01-10"}
    )
    assert response.status_code == 200
    assert response.headers["content-disposition"] == "attachment; filename=appointments-range.json"
    assert ids(response) == ["A", "C"]


def test_export_errors(client):
    assert client.get(f"{BASE}/export", params={"format": "xml"}).status_code == 400
    assert client.get(f"{BASE}/export", params={"scope": "someday"}).status_code == 400
    missing = client.get(f"{BASE}/export", params={"scope": "range", "start": "2025-01-06"})
    assert missing.status_code == 400
    assert "requires start and end" in missing.json()["error"]


class BrokenStore(AppointmentStore):
    def list_all(self):
        raise RuntimeError("index corrupted")


def test_unexpected_errors_are_500():
    client = TestClient(create_app(store=BrokenStore(), seed_file=""), raise_server_exceptions=False)
    response = client.get(f"{BASE}/")
    assert response.status_code == 500
    assert response.json() == {"error": "Unexpected server error. Please try again."}


def test_create_rejects_non_iso_dates(client, sample_store):
    for bad_date in (1736467200, "2025-01-10T00:00:00", "20250110", "2025-02-30"):
        response = client.post(f"{BASE}/", json={"id": "N", "date": bad_date, "description": "d"})
        assert response.status_code == 400, bad_date
        assert response.json()["error"].startswith("date")
    assert sample_store.get("N") is None


def test_query_dates_must_be_iso(client):
    for bad_date in ("1736467200", "2025-01-10T00:00:00"):
        response = client.get(f"{BASE}/range", params={"start": bad_date, "end": "2025-02-01"})
        assert response.status_code == 400, bad_date
        assert response.json()["error"].startswith("start")
        upcoming = client.get(f"{BASE}/upcoming", params={"reference_date": bad_date})
        assert upcoming.status_code == 400, bad_date
        export = client.get(f"{BASE}/export", params={"scope": "range", "start": bad_date, "end": "2025-02-01"})
        assert export.status_code == 400, bad_date


def test_create_rejects_ids_that_shadow_listing_routes(client, sample_store):
    for reserved in ("sorted", "upcoming", "previous", "range", "export"):
        response = client.post(f"{BASE}/", json={"id": reserved, "date": "2025-02-01", "description": "d"})
        assert response.status_code == 400
        assert "reserved" in response.json()["error"]
        assert sample_store.get(reserved) is None
    # Only exact path matches collide.
    assert client.post(f"{BASE}/", json={"id": "Sorted", "date": "2025-02-01", "description": "d"}).status_code == 201
    assert client.get(f"{BASE}/Sorted").json()["id"] == "Sorted"
