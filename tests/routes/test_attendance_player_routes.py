from fastapi.testclient import TestClient

MATCH = {
    "date": "2099-05-01T19:30:00",
    "time": "19:30",
    "opponent": "Harbor City FC",
    "location": "Harbor Sports Complex",
}


class TestAttendanceRoutes:

    def test_rsvp_upserts(self, admin_client: TestClient, member_client: TestClient, storage):
        match_id = admin_client.post("/api/matches", json=MATCH).json()["id"]

        first = member_client.post("/api/attendance", json={"matchId": match_id, "status": "pending"})
        assert first.status_code == 200
        second = member_client.post("/api/attendance", json={"matchId": match_id, "status": "attending"})
        assert second.status_code == 200

        assert second.json()["id"] == first.json()["id"]
        assert second.json()["status"] == "attending"
        assert len(storage.get_attendances_by_match(match_id)) == 1

    def test_snake_case_body_is_accepted(self, admin_client: TestClient):
        match_id = admin_client.post("/api/matches", json=MATCH).json()["id"]
        response = admin_client.post("/api/attendance", json={"match_id": match_id, "status": "attending"})
        assert response.status_code == 200
        assert response.json()["matchId"] == match_id

    def test_rsvp_invalid_status(self, admin_client: TestClient):
        match_id = admin_client.post("/api/matches", json=MATCH).json()["id"]
        response = admin_client.post("/api/attendance", json={"matchId": match_id, "status": "maybe"})
        assert response.status_code == 422

    def test_rsvp_unknown_match(self, member_client: TestClient):
        response = member_client.post("/api/attendance", json={"matchId": 999, "status": "attending"})
        assert response.status_code == 404

    def test_rsvp_requires_login(self, client: TestClient):
        response = client.post("/api/attendance", json={"matchId": 1, "status": "attending"})
        assert response.status_code == 401

    def test_match_attendance_list_includes_users(self, admin_client: TestClient, member_client: TestClient):
        match_id = admin_client.post("/api/matches", json=MATCH).json()["id"]
        admin_client.post("/api/attendance", json={"matchId": match_id, "status": "attending"})
        member_client.post("/api/attendance", json={"matchId": match_id, "status": "notAttending"})

        response = member_client.get(f"/api/attendance/match/{match_id}")
        assert response.status_code == 200
        rows = {row["user"]["email"]: row["status"] for row in response.json()}
        assert rows == {"alex@example.com": "attending", "emma@example.com": "notAttending"}

        assert member_client.get("/api/attendance/match/999").json() == []


class TestPlayerRoutes:

    def test_roster_with_no_matches(self, admin_client: TestClient, member_client: TestClient):
        response = member_client.get("/api/players")
        assert response.status_code == 200
        players = response.json()
        assert len(players) == 2
        for player in players:
            assert player["attendanceRate"] == 0
            assert player["totalMatches"] == 0
            assert player["status"] == "Active"

    def test_roster_attendance_rate(self, admin_client: TestClient):
        first = admin_client.post("/api/matches", json=MATCH).json()["id"]
        admin_client.post("/api/matches", json={**MATCH, "opponent": "Valley Athletic"})
        admin_client.post("/api/attendance", json={"matchId": first, "status": "attending"})

        [player] = admin_client.get("/api/players").json()
        assert player["user"]["email"] == "alex@example.com"
        assert player["attendedMatches"] == 1
        assert player["totalMatches"] == 2
        assert player["attendanceRate"] == 50.0

    def test_get_player(self, admin_client: TestClient):
        player_id = admin_client.get("/api/players").json()[0]["id"]
        response = admin_client.get(f"/api/players/{player_id}")
        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Alex Johnson"
        assert admin_client.get("/api/players/999").status_code == 404

    def test_admin_updates_player(self, admin_client: TestClient, member_client: TestClient):
        players = admin_client.get("/api/players").json()
        emma = next(p for p in players if p["user"]["email"] == "emma@example.com")

        response = admin_client.put(f"/api/players/{emma['id']}", json={"position": "Goalkeeper", "status": "Injured"})
        assert response.status_code == 200
        assert response.json()["position"] == "Goalkeeper"
        assert response.json()["status"] == "Injured"
        assert response.json()["userId"] == emma["userId"]

    def test_member_cannot_update_player(self, member_client: TestClient):
        player_id = member_client.get("/api/players").json()[0]["id"]
        response = member_client.put(f"/api/players/{player_id}", json={"status": "Inactive"})
        assert response.status_code == 403

    def test_update_player_validation(self, admin_client: TestClient):
        player_id = admin_client.get("/api/players").json()[0]["id"]
        assert admin_client.put(f"/api/players/{player_id}", json={"status": "Retired"}).status_code == 422
        assert admin_client.put(f"/api/players/{player_id}", json={"status": None}).status_code == 400
        assert admin_client.put("/api/players/999", json={"position": "Striker"}).status_code == 404
