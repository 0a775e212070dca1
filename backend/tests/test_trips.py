"""Tests for trip setup and the organizer settings read by the voting core."""
from datetime import timedelta

from tests.conftest import FIXED_NOW, add_test_member, build_trip, commit_with_votes, create_test_trip


class TestTripSetup:
    def test_create_trip_adds_organizer(self, client):
        trip = create_test_trip(client, policy="prevent")
        assert trip["duplicate_policy"] == "prevent"
        assert trip["currency"] == "EUR"
        assert len(trip["members"]) == 1
        assert trip["members"][0]["role"] == "organizer"

    def test_default_policy_is_soft_block(self, client):
        resp = client.post("/api/trips/", json={"name": "Porto", "organizer_name": "Olivia"})
        assert resp.status_code == 201
        assert resp.json()["duplicate_policy"] == "soft_block"
        assert resp.json()["timezone"] == "UTC"

    def test_invalid_timezone(self, client):
        resp = client.post("/api/trips/", json={
            "name": "Nowhere",
            "organizer_name": "Olivia",
            "timezone": "Mars/Olympus",
        })
        assert resp.status_code == 400

    def test_invalid_policy(self, client):
        resp = client.post("/api/trips/", json={
            "name": "Porto",
            "organizer_name": "Olivia",
            "duplicate_policy": "sometimes",
        })
        assert resp.status_code == 400

    def test_get_trip(self, client):
        trip = create_test_trip(client)
        add_test_member(client, trip["id"], "Ana")
        resp = client.get(f"/api/trips/{trip['id']}")
        assert resp.status_code == 200
        assert len(resp.json()["members"]) == 2
        assert client.get("/api/trips/missing").status_code == 404

    def test_invalid_member_role(self, client):
        trip = create_test_trip(client)
        resp = client.post(f"/api/trips/{trip['id']}/members", json={"display_name": "Ana", "role": "admin"})
        assert resp.status_code == 400

    def test_duplicate_day_conflict(self, client):
        trip = create_test_trip(client)
        assert client.post(f"/api/trips/{trip['id']}/days", json={"date": "2026-06-02"}).status_code == 201
        assert client.post(f"/api/trips/{trip['id']}/days", json={"date": "2026-06-02"}).status_code == 409

    def test_duplicate_block_label_conflict(self, client):
        trip = build_trip(client)
        resp = client.post(f"/api/trips/{trip['trip_id']}/days/{trip['day_id']}/blocks", json={"label": "Morning"})
        assert resp.status_code == 409


class TestDuplicatePolicyUpdate:
    def _update(self, client, trip, policy, member_id=None):
        return client.patch(f"/api/trips/{trip['trip_id']}/duplicate-policy", json={
            "member_id": member_id or trip["organizer"],
            "duplicate_policy": policy,
        })

    def test_update_before_commits(self, client):
        trip = build_trip(client)
        resp = self._update(client, trip, "allow")
        assert resp.status_code == 200
        assert resp.json()["duplicate_policy"] == "allow"

    def test_update_forbidden_for_collaborator(self, client):
        trip = build_trip(client)
        assert self._update(client, trip, "allow", member_id=trip["members"][0]).status_code == 403

    def test_locked_after_first_commit(self, client):
        trip = build_trip(client)
        commit_with_votes(client, trip, "Morning", "Tram 28")
        resp = self._update(client, trip, "prevent")
        assert resp.status_code == 409
        assert resp.json()["detail"]["code"] == "policy_locked"


class TestVotingWindowSettings:
    def _url(self, trip):
        return f"/api/trips/{trip['trip_id']}/blocks/{trip['blocks']['Morning']}/voting-window"

    def test_set_and_clear_window(self, client):
        trip = build_trip(client)
        resp = client.put(self._url(trip), json={
            "member_id": trip["organizer"],
            "vote_open_ts": FIXED_NOW.isoformat(),
            "vote_close_ts": (FIXED_NOW + timedelta(hours=6)).isoformat(),
        })
        assert resp.status_code == 200
        assert resp.json()["vote_close_ts"] is not None

        resp = client.delete(self._url(trip), params={"member_id": trip["organizer"]})
        assert resp.status_code == 200
        assert resp.json()["vote_open_ts"] is None
        assert resp.json()["vote_close_ts"] is None

    def test_window_must_open_before_close(self, client):
        trip = build_trip(client)
        resp = client.put(self._url(trip), json={
            "member_id": trip["organizer"],
            "vote_open_ts": FIXED_NOW.isoformat(),
            "vote_close_ts": (FIXED_NOW - timedelta(hours=1)).isoformat(),
        })
        assert resp.status_code == 400
        assert resp.json()["detail"]["code"] == "invalid_voting_window"

    def test_window_forbidden_for_collaborator(self, client):
        trip = build_trip(client)
        resp = client.put(self._url(trip), json={"member_id": trip["members"][0]})
        assert resp.status_code == 403


class TestHealth:
    def test_health(self, client):
        assert client.get("/api/health").json() == {"status": "ok"}
