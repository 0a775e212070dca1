"""Tests for the proposal store and block reset."""
from tests.conftest import build_trip, commit_with_votes, propose, vote


class TestProposals:
    def test_create_and_list(self, client):
        trip = build_trip(client)
        block_id = trip["blocks"]["Morning"]
        resp = propose(client, trip, block_id, trip["activities"]["Tram 28"], member_id=trip["members"][0])
        assert resp.status_code == 201
        assert resp.json()["created_by"] == trip["members"][0]

        listed = client.get(f"/api/trips/{trip['trip_id']}/blocks/{block_id}/proposals").json()
        assert [p["activity_id"] for p in listed] == [trip["activities"]["Tram 28"]]

    def test_duplicate_proposal_conflict(self, client):
        trip = build_trip(client)
        block_id = trip["blocks"]["Morning"]
        propose(client, trip, block_id, trip["activities"]["Tram 28"])
        resp = propose(client, trip, block_id, trip["activities"]["Tram 28"])
        assert resp.status_code == 409
        assert resp.json()["detail"]["code"] == "proposal_exists"

    def test_same_activity_in_several_blocks(self, client):
        trip = build_trip(client)
        tram = trip["activities"]["Tram 28"]
        assert propose(client, trip, trip["blocks"]["Morning"], tram).status_code == 201
        assert propose(client, trip, trip["blocks"]["Evening"], tram).status_code == 201

    def test_outsider_cannot_propose(self, client):
        trip = build_trip(client)
        other = build_trip(client)
        resp = propose(client, trip, trip["blocks"]["Morning"], trip["activities"]["Tram 28"], member_id=other["organizer"])
        assert resp.status_code == 403

    def test_propose_into_committed_block(self, client):
        trip = build_trip(client)
        commit_with_votes(client, trip, "Morning", "Tram 28")
        resp = propose(client, trip, trip["blocks"]["Morning"], trip["activities"]["Belem Tower"])
        assert resp.status_code == 409
        assert resp.json()["detail"]["code"] == "already_committed"

    def test_remove_proposal(self, client):
        trip = build_trip(client)
        block_id = trip["blocks"]["Morning"]
        tram = trip["activities"]["Tram 28"]
        propose(client, trip, block_id, tram)

        resp = client.delete(
            f"/api/trips/{trip['trip_id']}/blocks/{block_id}/proposals/{tram}",
            params={"member_id": trip["members"][1]},
        )
        assert resp.status_code == 204
        assert client.get(f"/api/trips/{trip['trip_id']}/blocks/{block_id}/proposals").json() == []

    def test_remove_missing_proposal(self, client):
        trip = build_trip(client)
        resp = client.delete(
            f"/api/trips/{trip['trip_id']}/blocks/{trip['blocks']['Morning']}/proposals/{trip['activities']['Tram 28']}",
            params={"member_id": trip["organizer"]},
        )
        assert resp.status_code == 404

    def test_cannot_remove_from_committed_block(self, client):
        trip = build_trip(client)
        commit_with_votes(client, trip, "Morning", "Tram 28")
        resp = client.delete(
            f"/api/trips/{trip['trip_id']}/blocks/{trip['blocks']['Morning']}/proposals/{trip['activities']['Tram 28']}",
            params={"member_id": trip["organizer"]},
        )
        assert resp.status_code == 409


class TestBlockReset:
    def test_reset_clears_proposals_and_votes(self, client):
        trip = build_trip(client)
        block_id = trip["blocks"]["Morning"]
        for title in ("Tram 28", "Belem Tower"):
            propose(client, trip, block_id, trip["activities"][title])
            vote(client, trip, block_id, trip["activities"][title], trip["members"][0])

        resp = client.post(
            f"/api/trips/{trip['trip_id']}/blocks/{block_id}/reset",
            json={"member_id": trip["organizer"]},
        )
        assert resp.status_code == 200
        assert resp.json() == {"removed_proposals": 2, "removed_votes": 2}
        assert client.get(f"/api/trips/{trip['trip_id']}/blocks/{block_id}/votes").json() == []

    def test_reset_forbidden_for_collaborator(self, client):
        trip = build_trip(client)
        resp = client.post(
            f"/api/trips/{trip['trip_id']}/blocks/{trip['blocks']['Morning']}/reset",
            json={"member_id": trip["members"][0]},
        )
        assert resp.status_code == 403

    def test_reset_committed_block_rejected(self, client):
        trip = build_trip(client)
        commit_with_votes(client, trip, "Morning", "Tram 28")
        resp = client.post(
            f"/api/trips/{trip['trip_id']}/blocks/{trip['blocks']['Morning']}/reset",
            json={"member_id": trip["organizer"]},
        )
        assert resp.status_code == 409
