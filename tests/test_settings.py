# tests/test_settings.py

from cortexia.services.settings_service import DEFAULTS, deep_merge


def test_deep_merge_keeps_siblings():
    merged = deep_merge(DEFAULTS, {"notifications": {"tasks": False}, "theme": "dark"})
    assert merged["theme"] == "dark"
    assert merged["notifications"] == {"enabled": True, "tasks": False, "habits": True, "insights": True}
    # base is not mutated
    assert DEFAULTS["notifications"]["tasks"] is True


def test_defaults_for_new_user(client, auth_headers):
    assert client.get("/api/v1/settings", headers=auth_headers).json() == DEFAULTS


def test_partial_update_and_reset(client, auth_headers):
    resp = client.put(
        "/api/v1/settings", json={"preferences": {"time_format": "12h"}}, headers=auth_headers
    )
    assert resp.json()["data"]["preferences"] == {"start_of_week": "monday", "time_format": "12h", "language": "en"}

    client.put("/api/v1/settings", json={"theme": "dark"}, headers=auth_headers)
    saved = client.get("/api/v1/settings", headers=auth_headers).json()
    assert saved["theme"] == "dark"
    assert saved["preferences"]["time_format"] == "12h"

    reset = client.delete("/api/v1/settings", headers=auth_headers).json()["data"]
    assert reset == DEFAULTS
    assert client.get("/api/v1/settings", headers=auth_headers).json() == DEFAULTS


def test_settings_are_per_user(client, auth_headers, other_headers):
    client.put("/api/v1/settings", json={"theme": "dark"}, headers=auth_headers)
    assert client.get("/api/v1/settings", headers=other_headers).json()["theme"] == "system"


def test_malformed_sections_are_rejected(client, auth_headers):
    for body in ({"preferences": "x"}, {"preferences": {"start_of_week": "friday"}}, {"theme": 3}):
        resp = client.put("/api/v1/settings", json=body, headers=auth_headers)
        assert resp.status_code == 400, body
        assert resp.json()["error"] == "Validation error"

    assert client.get("/api/v1/settings", headers=auth_headers).json() == DEFAULTS
    assert client.get("/api/v1/time/stats/weekly", headers=auth_headers).status_code == 200


def test_unknown_keys_and_nulls(client, auth_headers):
    data = client.put(
        "/api/v1/settings", json={"preferences": {"density": "compact"}, "privacy": None}, headers=auth_headers
    ).json()["data"]
    assert data["preferences"]["density"] == "compact"
    assert data["privacy"] == DEFAULTS["privacy"]
