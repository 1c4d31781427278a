"""Tests for the HTTP surface."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from index import app


@pytest.fixture
def client():
    return TestClient(app)


def minutes(hhmm):
    hour, minute = hhmm.split(":")
    return int(hour) * 60 + int(minute)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "online"
    assert "/api/timesForGPS" in data["endpoints"]


def test_times_for_gps_dhaka(client):
    response = client.get(
        "/api/timesForGPS",
        params={"lat": 23.8103, "lng": 90.4125, "date": "2026-02-18", "days": 2, "timezoneOffset": 360},
    )
    assert response.status_code == 200
    times = response.json()["times"]
    assert list(times) == ["2026-02-18", "2026-02-19"]

    imsak, fajr, sunrise, dhuhr, asr, maghrib, isha, midnight, last_third = times["2026-02-18"]
    assert minutes(fajr) - minutes(imsak) == 10
    assert abs(minutes(maghrib) - minutes("17:55")) <= 3
    assert minutes(fajr) < minutes(sunrise) < minutes(dhuhr) < minutes(asr) < minutes(maghrib) < minutes(isha)


def test_times_for_gps_uses_default_location(client):
    default = client.get("/api/timesForGPS", params={"date": "2026-02-18"}).json()
    explicit = client.get("/api/timesForGPS", params={"lat": 23.8103, "lng": 90.4125, "date": "2026-02-18"}).json()
    assert default == explicit


def test_invalid_latitude(client):
    response = client.get("/api/timesForGPS", params={"lat": 95, "lng": 90, "date": "2026-02-18"})
    assert response.status_code == 422
    assert "Latitude" in response.json()["detail"]


def test_unknown_method(client):
    response = client.get("/api/timesForGPS", params={"date": "2026-02-18", "calculationMethod": "Atlantis"})
    assert response.status_code == 400


def test_malformed_date(client):
    response = client.get("/api/timesForGPS", params={"date": "18/02/2026"})
    assert response.status_code == 422


def test_next_event_during_fast(client):
    response = client.get(
        "/api/nextEvent",
        params={"lat": 23.8103, "lng": 90.4125, "now": "2026-02-18T12:00:00+06:00"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["kind"] == "iftar"
    assert data["hours"] == 5
    assert data["remainingSeconds"] == data["hours"] * 3600 + data["minutes"] * 60 + data["seconds"]
    assert datetime.fromisoformat(data["at"]) > datetime.fromisoformat("2026-02-18T12:00:00+06:00")


def test_next_event_after_iftar(client):
    data = client.get("/api/nextEvent", params={"now": "2026-02-18T21:00:00+06:00"}).json()
    assert data["kind"] == "sehri_ends"
    assert data["at"].startswith("2026-02-18T23:")


def test_next_event_without_now(client):
    response = client.get("/api/nextEvent")
    assert response.status_code == 200
    assert response.json()["kind"] in ("sehri_ends", "iftar")


def test_next_event_accepts_z_suffix(client):
    zulu = client.get("/api/nextEvent", params={"now": "2026-02-18T06:00:00Z"})
    explicit = client.get("/api/nextEvent", params={"now": "2026-02-18T06:00:00+00:00"})
    assert zulu.status_code == 200
    assert zulu.json() == explicit.json()


def test_next_event_naive_now_is_utc(client):
    naive = client.get("/api/nextEvent", params={"now": "2026-02-18T06:00:00"}).json()
    explicit = client.get("/api/nextEvent", params={"now": "2026-02-18T06:00:00+00:00"}).json()
    assert naive == explicit
    assert naive["kind"] == "iftar"


def test_next_event_bad_timestamp(client):
    assert client.get("/api/nextEvent", params={"now": "yesterday"}).status_code == 422


def test_ramadan_calendar(client):
    response = client.get("/api/ramadanCalendar")
    assert response.status_code == 200
    rows = response.json()["calendar"]
    assert len(rows) == 30
    assert rows[0]["day"] == 1
    assert rows[0]["date"] == "2026-02-18"
    assert rows[-1]["date"] == "2026-03-19"
    assert all(minutes(r["sehri"]) < minutes(r["iftar"]) for r in rows)


def test_ramadan_calendar_days_bounds(client):
    assert client.get("/api/ramadanCalendar", params={"days": 0}).status_code == 422


def test_qibla(client):
    data = client.get("/api/qibla", params={"lat": 23.8103, "lng": 90.4125}).json()
    assert data["direction"] == pytest.approx(277.6, abs=0.5)
