"""
Tests for events and their computed status.
"""
from datetime import datetime, timedelta

import pytest

from blog_api.models.event import Event, EventStatus


T0 = datetime(2030, 5, 1, 9, 0, 0)
T1 = datetime(2030, 5, 1, 17, 0, 0)


def _payload(start, end, **fields):
    payload = {
        "name": "Meetup",
        "start_time": start.isoformat(),
        "end_time": end.isoformat(),
        "title": "Monthly meetup",
        "content": "Talks and pizza",
        "location": "Hall A",
    }
    payload.update(fields)
    return payload


class TestStatusProjection:
    @pytest.mark.parametrize(
        "now, expected",
        [
            (T0 - timedelta(seconds=1), EventStatus.UPCOMING),
            (T0, EventStatus.ONGOING),
            (T0 + timedelta(hours=1), EventStatus.ONGOING),
            (T1, EventStatus.ONGOING),
            (T1 + timedelta(seconds=1), EventStatus.FINISHED),
        ],
    )
    def test_status_at(self, now, expected):
        event = Event(start_time=T0, end_time=T1)
        assert event.status_at(now) == expected


class TestEventEndpoints:
    def test_create_returns_computed_status(self, client, manager_headers):
        now = datetime.utcnow()
        response = client.post(
            "/events",
            json=_payload(now + timedelta(days=1), now + timedelta(days=2)),
            headers=manager_headers,
        )
        assert response.status_code == 201
        assert response.json()["status"] == "upcoming"

    def test_timezone_aware_input_is_normalized(self, client, manager_headers):
        response = client.post(
            "/events",
            json=_payload(T0, T1, start_time="2030-05-01T11:00:00+02:00"),
            headers=manager_headers,
        )
        assert response.status_code == 201
        assert response.json()["start_time"].startswith("2030-05-01T09:00:00")

    def test_end_before_start_rejected(self, client, manager_headers):
        response = client.post("/events", json=_payload(T1, T0), headers=manager_headers)
        assert response.status_code == 400

    def test_missing_fields_rejected(self, client, manager_headers):
        response = client.post("/events", json={"name": "Meetup"}, headers=manager_headers)
        assert response.status_code == 400

    def test_editor_cannot_create(self, client, editor_headers):
        assert client.post("/events", json=_payload(T0, T1), headers=editor_headers).status_code == 403

    def test_update_checks_merged_window(self, client, manager_headers):
        event_id = client.post("/events", json=_payload(T0, T1), headers=manager_headers).json()["id"]

        bad = client.put(
            f"/events/{event_id}",
            json={"start_time": (T1 + timedelta(hours=1)).isoformat()},
            headers=manager_headers,
        )
        assert bad.status_code == 400

        good = client.put(f"/events/{event_id}", json={"location": "Hall B"}, headers=manager_headers)
        assert good.status_code == 200
        assert good.json()["location"] == "Hall B"

    def test_list_filters_by_status(self, client, manager_headers):
        now = datetime.utcnow()
        client.post(
            "/events",
            json=_payload(now - timedelta(days=3), now - timedelta(days=2), name="past"),
            headers=manager_headers,
        )
        client.post(
            "/events",
            json=_payload(now - timedelta(hours=1), now + timedelta(hours=1), name="live"),
            headers=manager_headers,
        )
        client.post(
            "/events",
            json=_payload(now + timedelta(days=2), now + timedelta(days=3), name="future"),
            headers=manager_headers,
        )

        listing = client.get("/events").json()
        assert [e["name"] for e in listing] == ["future", "live", "past"]
        assert [e["status"] for e in listing] == ["upcoming", "ongoing", "finished"]

        ongoing = client.get("/events", params={"status": "ongoing"}).json()
        assert [e["name"] for e in ongoing] == ["live"]

    def test_soft_delete(self, client, manager_headers):
        event_id = client.post("/events", json=_payload(T0, T1), headers=manager_headers).json()["id"]
        assert client.delete(f"/events/{event_id}", headers=manager_headers).status_code == 204

        assert client.get(f"/events/{event_id}").status_code == 404
        assert client.get("/events").json() == []

        everything = client.get("/events/all", headers=manager_headers).json()
        assert [e["id"] for e in everything] == [event_id]
        assert everything[0]["deleted_at"] is not None

    def test_all_requires_manager(self, client, editor_headers):
        assert client.get("/events/all", headers=editor_headers).status_code == 403
