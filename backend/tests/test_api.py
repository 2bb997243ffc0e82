"""HTTP tests: public calendar, overrides, rules, slot check, internal cache writes."""

from __future__ import annotations

from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from availability.config import settings


# ── GET /availability/{calendar_id} ─────────────────────────────────────


def test_unknown_calendar_returns_empty_slots(client):
    resp = client.get("/availability/xyz", params={"startDate": "2025-01-01"})

    assert resp.status_code == 200
    assert resp.json() == {"slots": []}


def test_missing_start_date_is_400(client, provider):
    resp = client.get("/availability/cal-1")

    assert resp.status_code == 400
    assert "startDate" in resp.json()["detail"]


def test_malformed_dates_are_400(client, provider):
    assert client.get("/availability/cal-1", params={"startDate": "2025-13-01"}).status_code == 400
    assert client.get(
        "/availability/cal-1", params={"startDate": "2025-02-01", "endDate": "tomorrow"}
    ).status_code == 400


def test_calendar_slots_shape(client, provider, add_cache_row):
    add_cache_row("cal-1", "2025-02-01", "unavailable", "busy")

    resp = client.get(
        "/availability/cal-1", params={"startDate": "2025-01-10", "endDate": "2025-02-01"}
    )

    assert resp.status_code == 200
    slots = resp.json()["slots"]
    assert len(slots) == 2 * 23
    assert slots[0] == {
        "date": "2025-01-10",
        "timeSlot": "morning",
        "status": "unavailable",
        "available": False,
    }
    assert slots[2]["date"] == "2025-01-11"
    assert slots[2]["available"] is True
    assert slots[-2:] == [
        {"date": "2025-02-01", "timeSlot": "morning", "status": "unavailable", "available": False},
        {"date": "2025-02-01", "timeSlot": "afternoon", "status": "busy", "available": False},
    ]


def test_calendar_range_at_end_of_calendar(client, provider):
    resp = client.get(
        "/availability/cal-1", params={"startDate": "9999-12-30", "endDate": "9999-12-31"}
    )

    assert resp.status_code == 200
    assert len(resp.json()["slots"]) == 4


# ── /availability/overrides ─────────────────────────────────────────────


def test_post_override_returns_row(client, provider):
    resp = client.post("/availability/overrides", json={
        "providerId": provider.id,
        "date": "2025-03-01",
        "kind": "block",
        "timeSlot": "morning",
        "note": "dentist",
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["override"]["provider_id"] == provider.id
    assert body["override"]["time_slot"] == "morning"
    assert body["override"]["note"] == "dentist"


def test_full_day_then_afternoon_leaves_one_afternoon_block(client, provider):
    for slot in ("full_day", "afternoon"):
        resp = client.post("/availability/overrides", json={
            "providerId": provider.id, "date": "2025-03-01", "kind": "block", "timeSlot": slot,
        })
        assert resp.status_code == 200

    resp = client.get("/availability/overrides", params={"providerId": provider.id, "date": "2025-03-01"})

    body = resp.json()
    assert [o["time_slot"] for o in body["allOverrides"]] == ["afternoon"]
    assert body["override"]["time_slot"] == "afternoon"


def test_post_extra_by_business_id(client, provider):
    resp = client.post("/availability/overrides", json={
        "businessId": provider.business_id,
        "date": "2025-03-01",
        "kind": "extra",
        "startTime": "17:00",
        "endTime": "20:00",
        "maxConcurrentJobs": 1,
    })

    assert resp.status_code == 200
    override = resp.json()["override"]
    assert override["kind"] == "extra"
    assert override["time_slot"] is None
    assert (override["start_time"], override["end_time"]) == ("17:00:00", "20:00:00")


def test_post_override_client_errors(client, provider):
    base = {"providerId": provider.id, "date": "2025-03-01"}

    resp = client.post("/availability/overrides", json={**base, "kind": "vacation"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == 'kind must be "block" or "extra"'

    resp = client.post("/availability/overrides", json={"providerId": provider.id, "kind": "block"})
    assert resp.status_code == 400

    resp = client.post("/availability/overrides", json={"date": "2025-03-01", "kind": "block"})
    assert resp.status_code == 400


def test_post_override_unknown_provider_is_404(client, provider):
    resp = client.post("/availability/overrides", json={
        "providerId": 999, "date": "2025-03-01", "kind": "block",
    })

    assert resp.status_code == 404


def test_get_overrides_prefers_full_day(client, provider):
    client.post("/availability/overrides", json={
        "providerId": provider.id, "date": "2025-03-01", "kind": "extra", "startTime": "18:00", "endTime": "20:00",
    })
    client.post("/availability/overrides", json={
        "providerId": provider.id, "date": "2025-03-01", "kind": "block",
    })

    body = client.get(
        "/availability/overrides", params={"providerId": provider.id, "date": "2025-03-01"}
    ).json()

    assert body["override"]["kind"] == "block"
    assert body["override"]["time_slot"] == "full_day"
    assert len(body["allOverrides"]) == 2


def test_get_overrides_requires_date(client, provider):
    resp = client.get("/availability/overrides", params={"providerId": provider.id})

    assert resp.status_code == 400


def test_get_overrides_unknown_business_is_empty(client):
    resp = client.get("/availability/overrides", params={"businessId": 77, "date": "2025-03-01"})

    assert resp.status_code == 200
    assert resp.json() == {"override": None, "allOverrides": []}


def test_delete_single_slot(client, provider):
    for slot in ("morning", "afternoon"):
        client.post("/availability/overrides", json={
            "providerId": provider.id, "date": "2025-03-01", "kind": "block", "timeSlot": slot,
        })

    resp = client.delete(
        "/availability/overrides",
        params={"providerId": provider.id, "date": "2025-03-01", "timeSlot": "afternoon"},
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    remaining = client.get(
        "/availability/overrides", params={"providerId": provider.id, "date": "2025-03-01"}
    ).json()["allOverrides"]
    assert [o["time_slot"] for o in remaining] == ["morning"]


def test_delete_requires_date_and_known_provider(client, provider):
    assert client.delete("/availability/overrides", params={"providerId": provider.id}).status_code == 400
    assert client.delete(
        "/availability/overrides", params={"providerId": 999, "date": "2025-03-01"}
    ).status_code == 404


def test_storage_error_is_500(client, provider):
    with patch(
        "availability.routers.availability_overrides.set_override",
        side_effect=OperationalError("INSERT", {}, Exception("database is locked")),
    ):
        resp = client.post("/availability/overrides", json={
            "providerId": provider.id, "date": "2025-03-01", "kind": "block",
        })

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Storage error"}


# ── /availability/check ─────────────────────────────────────────────────


def test_check_slot_uses_resolver(client, provider, add_cache_row):
    add_cache_row("cal-1", "2025-02-01", "busy", None)

    def check(**params):
        return client.get("/availability/check", params={"providerId": provider.id, **params})

    assert check(date="2025-02-01", timeSlot="morning").json() == {"available": False}
    assert check(date="2025-02-01", timeSlot="afternoon").json() == {"available": True}
    # Inside the 24h notice window
    assert check(date="2025-01-10", timeSlot="afternoon").json() == {"available": False}


def test_check_slot_errors(client, provider):
    assert client.get("/availability/check", params={"providerId": provider.id, "date": "2025-02-01"}).status_code == 400
    assert client.get("/availability/check", params={
        "providerId": provider.id, "date": "2025-02-01", "timeSlot": "full_day",
    }).status_code == 400
    assert client.get("/availability/check", params={
        "providerId": 999, "date": "2025-02-01", "timeSlot": "morning",
    }).status_code == 404


# ── /availability/rules ─────────────────────────────────────────────────


def test_rules_replace_and_list(client, provider, redis_mock):
    resp = client.post("/availability/rules", json={
        "providerId": provider.id,
        "rules": [
            {"weekday": 3, "start_time": "07:00", "morning_jobs": 2},
            {"weekday": 1},
        ],
    })

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert [r["weekday"] for r in body["rules"]] == [1, 3]
    monday, wednesday = body["rules"]
    assert monday["start_time"] == "08:00:00"
    assert monday["max_concurrent_jobs"] == 1
    assert monday["crew_capacity"] == 2
    assert wednesday["start_time"] == "07:00:00"
    assert wednesday["morning_jobs"] == 2
    assert redis_mock.rpush.called

    resp = client.post("/availability/rules", json={
        "businessId": provider.business_id, "rules": [{"weekday": 5}],
    })
    assert [r["weekday"] for r in resp.json()["rules"]] == [5]

    listed = client.get("/availability/rules", params={"providerId": provider.id}).json()
    assert [r["weekday"] for r in listed["rules"]] == [5]


def test_rules_reject_bad_weekday(client, provider):
    resp = client.post("/availability/rules", json={
        "providerId": provider.id, "rules": [{"weekday": 7}],
    })

    assert resp.status_code == 400


def test_rules_unknown_provider_is_404(client):
    assert client.get("/availability/rules", params={"providerId": 5}).status_code == 404


# ── /internal/public-availability ───────────────────────────────────────


def test_internal_cache_write_feeds_resolver(client, provider):
    resp = client.post("/internal/public-availability", json={
        "calendarId": "cal-1",
        "entries": [
            {"date": "2025-02-01", "morningStatus": "unavailable", "afternoonStatus": "busy"},
            {"date": "2025-02-02", "morningStatus": "available"},
        ],
    })
    assert resp.status_code == 200
    assert resp.json() == {"calendarId": "cal-1", "written": 2}

    # Rewriting a date replaces its row
    client.post("/internal/public-availability", json={
        "calendarId": "cal-1",
        "entries": [{"date": "2025-02-01", "morningStatus": "available", "afternoonStatus": "busy"}],
    })

    slots = client.get(
        "/availability/cal-1", params={"startDate": "2025-02-01", "endDate": "2025-02-02"}
    ).json()["slots"]
    assert [s["status"] for s in slots] == ["available", "busy", "available", "available"]


def test_internal_cache_write_rejects_unknown_status(client):
    resp = client.post("/internal/public-availability", json={
        "calendarId": "cal-1",
        "entries": [{"date": "2025-02-01", "morningStatus": "closed"}],
    })

    assert resp.status_code == 422


def test_internal_cache_write_is_host_restricted(client, monkeypatch):
    monkeypatch.setattr(settings, "internal_allowed_hosts", ["127.0.0.1"])

    resp = client.post("/internal/public-availability", json={"calendarId": "cal-1", "entries": []})

    assert resp.status_code == 403


def test_health_reports_redis(client):
    with patch("availability.main.redis_client") as redis:
        redis.ping.return_value = True
        resp = client.get("/health")

    assert resp.json() == {"redis": True}
