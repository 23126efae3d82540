"""Player routes: creation under owned teams, stat page, deletion."""

from conftest import add_game, create_player, create_team


def test_create_player_keeps_number_as_text(client, owner):
    team = create_team(client, owner)
    player = create_player(client, owner, team["id"], name="Zero", number="00", position="C")

    assert player["number"] == "00"
    assert player["team_id"] == team["id"]
    assert player["profile_pic"] is None


def test_create_player_requires_fields(client, owner):
    team = create_team(client, owner)
    r = client.post(
        "/api/v1/players",
        data={"team_id": str(team["id"]), "name": "Casey"},
        headers=owner,
    )
    assert r.status_code == 422

    r = client.post(
        "/api/v1/players",
        data={"team_id": str(2**70), "name": "Casey", "number": "7", "position": "SS"},
        headers=owner,
    )
    assert r.status_code == 422
    assert r.json()["error"] == "validation"


def test_create_player_on_foreign_or_missing_team(client, owner, stranger):
    team = create_team(client, owner)
    form = {"name": "Mole", "number": "1", "position": "P"}

    r = client.post("/api/v1/players", data={**form, "team_id": str(team["id"])}, headers=stranger)
    assert r.status_code == 403

    r = client.post("/api/v1/players", data={**form, "team_id": "9999"}, headers=owner)
    assert r.status_code == 404

    roster = client.get(f"/api/v1/teams/{team['id']}/players", headers=owner).json()["players"]
    assert roster == []


def test_player_page_with_stats(client, owner):
    team = create_team(client, owner)
    player = create_player(client, owner, team["id"])
    add_game(client, owner, player["id"], date="2024-04-01", at_bats=4, hits=2, doubles=1)
    add_game(client, owner, player["id"], date="2024-04-08", at_bats=3, walks=1)

    r = client.get(f"/api/v1/players/{player['id']}", headers=owner)
    assert r.status_code == 200
    body = r.json()

    assert body["player"]["id"] == player["id"]
    assert body["stats"]["games"] == 2
    assert body["stats"]["totals"]["at_bats"] == 7
    assert body["stats"]["derived"]["avg"] == ".286"
    assert body["stats"]["derived"]["slg"] == ".429"
    assert [g["date"] for g in body["games"]] == ["2024-04-08", "2024-04-01"]


def test_player_without_games_has_zero_stats(client, owner):
    team = create_team(client, owner)
    player = create_player(client, owner, team["id"])

    body = client.get(f"/api/v1/players/{player['id']}", headers=owner).json()
    assert body["stats"]["games"] == 0
    assert body["stats"]["derived"]["obp"] == ".000"
    assert body["stats"]["derived"]["era"] == "0.00"
    assert body["games"] == []


def test_player_access_control(client, owner, stranger):
    team = create_team(client, owner)
    player = create_player(client, owner, team["id"])

    assert client.get(f"/api/v1/players/{player['id']}", headers=stranger).status_code == 403
    assert client.get(f"/api/v1/players/{player['id']}/games", headers=stranger).status_code == 403
    assert client.delete(f"/api/v1/players/{player['id']}", headers=stranger).status_code == 403
    assert client.get("/api/v1/players/9999", headers=owner).status_code == 404
    assert client.delete("/api/v1/players/9999", headers=owner).status_code == 404

    assert client.get(f"/api/v1/players/{player['id']}", headers=owner).status_code == 200


def test_delete_player_cascades_to_games(client, owner):
    team = create_team(client, owner)
    player = create_player(client, owner, team["id"])
    game = add_game(client, owner, player["id"], at_bats=2)

    assert client.delete(f"/api/v1/players/{player['id']}", headers=owner).status_code == 200
    assert client.get(f"/api/v1/teams/{team['id']}/players", headers=owner).json()["players"] == []
    assert client.delete(f"/api/v1/games/{game['id']}", headers=owner).status_code == 404


def test_players_are_not_updatable(client, owner):
    team = create_team(client, owner)
    player = create_player(client, owner, team["id"])

    r = client.put(f"/api/v1/players/{player['id']}", json={"name": "Renamed"}, headers=owner)
    assert r.status_code == 405
