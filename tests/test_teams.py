"""Team CRUD, ownership checks and cascade delete."""

from conftest import add_game, create_player, create_team


def test_create_and_list_teams(client, owner, stranger):
    first = create_team(client, owner, name="Rockets")
    second = create_team(client, owner, name="Comets", season=2025)
    create_team(client, stranger, name="Not Mine")

    r = client.get("/api/v1/teams", headers=owner)
    assert r.status_code == 200
    names = [t["name"] for t in r.json()["teams"]]
    assert names == ["Comets", "Rockets"]
    assert first["season"] == 2024
    assert second["league"] == "Little League"


def test_create_team_validation(client, owner):
    r = client.post("/api/v1/teams", json={"name": "Rockets", "league": "LL"}, headers=owner)
    assert r.status_code == 422
    r = client.post("/api/v1/teams", json={"name": "", "league": "LL", "season": 2024}, headers=owner)
    assert r.status_code == 422


def test_get_team_includes_players(client, owner):
    team = create_team(client, owner)
    create_player(client, owner, team["id"], name="Casey")

    r = client.get(f"/api/v1/teams/{team['id']}", headers=owner)
    assert r.status_code == 200
    body = r.json()
    assert body["team"]["id"] == team["id"]
    assert [p["name"] for p in body["players"]] == ["Casey"]


def test_partial_update_keeps_other_fields(client, owner):
    team = create_team(client, owner, name="Rockets", league="LL", season=2024)

    r = client.put(f"/api/v1/teams/{team['id']}", json={"season": 2025}, headers=owner)
    assert r.status_code == 200
    updated = r.json()["team"]
    assert updated["season"] == 2025
    assert updated["name"] == "Rockets"
    assert updated["league"] == "LL"


def test_owner_cannot_be_changed(client, owner, stranger):
    team = create_team(client, owner)
    me = client.get("/api/v1/auth/me", headers=owner).json()["user"]
    other = client.get("/api/v1/auth/me", headers=stranger).json()["user"]

    r = client.put(f"/api/v1/teams/{team['id']}", json={"user_id": other["id"]}, headers=owner)
    assert r.status_code == 200
    assert r.json()["team"]["user_id"] == me["id"]


def test_non_owner_is_forbidden(client, owner, stranger):
    team = create_team(client, owner)
    url = f"/api/v1/teams/{team['id']}"

    for method, kwargs in [
        ("GET", {}),
        ("PUT", {"json": {"name": "Stolen"}}),
        ("DELETE", {}),
    ]:
        r = client.request(method, url, headers=stranger, **kwargs)
        assert r.status_code == 403, method
        assert r.json()["error"] == "forbidden"

    assert client.get(f"{url}/players", headers=stranger).status_code == 403
    assert client.get(f"{url}/stats", headers=stranger).status_code == 403
    assert client.get(url, headers=owner).json()["team"]["name"] == "Rockets"


def test_unknown_team_is_not_found(client, owner):
    for method in ("GET", "PUT", "DELETE"):
        kwargs = {"json": {"name": "x"}} if method == "PUT" else {}
        r = client.request(method, "/api/v1/teams/9999", headers=owner, **kwargs)
        assert r.status_code == 404, method
        assert r.json()["error"] == "not_found"


def test_delete_cascades_to_players_and_games(client, owner):
    team = create_team(client, owner)
    player = create_player(client, owner, team["id"])
    game = add_game(client, owner, player["id"], at_bats=4, hits=2)

    r = client.delete(f"/api/v1/teams/{team['id']}", headers=owner)
    assert r.status_code == 200

    assert client.get(f"/api/v1/teams/{team['id']}", headers=owner).status_code == 404
    assert client.get(f"/api/v1/players/{player['id']}", headers=owner).status_code == 404
    assert client.put(f"/api/v1/games/{game['id']}", json={"hits": 1}, headers=owner).status_code == 404
    assert client.get(f"/api/v1/public/players/{player['id']}").status_code == 404
    assert client.get("/api/v1/teams", headers=owner).json()["teams"] == []


def test_team_stats_summary(client, owner):
    team = create_team(client, owner)
    hitter = create_player(client, owner, team["id"], name="Hitter")
    create_player(client, owner, team["id"], name="Bench")
    add_game(client, owner, hitter["id"], at_bats=4, hits=2, doubles=1)

    r = client.get(f"/api/v1/teams/{team['id']}/stats", headers=owner)
    assert r.status_code == 200
    body = r.json()

    by_name = {p["player"]["name"]: p["stats"] for p in body["players"]}
    assert by_name["Hitter"]["derived"]["avg"] == ".500"
    assert by_name["Bench"]["games"] == 0
    assert by_name["Bench"]["derived"]["avg"] == ".000"
    assert body["team_stats"]["totals"]["at_bats"] == 4
