"""Game stat-line routes."""

from conftest import add_game, create_player, create_team


def _player(client, headers):
    team = create_team(client, headers)
    return create_player(client, headers, team["id"])


def test_add_game_defaults_missing_stats_to_zero(client, owner):
    player = _player(client, owner)
    game = add_game(client, owner, player["id"], at_bats=4, hits=1)

    assert game["player_id"] == player["id"]
    assert game["date"] == "2024-04-01"
    assert game["at_bats"] == 4
    assert game["walks"] == 0
    assert game["innings_pitched"] == 0.0


def test_add_game_accepts_camel_case(client, owner):
    player = _player(client, owner)
    r = client.post(
        "/api/v1/games",
        json={
            "playerId": player["id"],
            "date": "2024-05-01",
            "opponent": "Comets",
            "atBats": 3,
            "homeRuns": 1,
            "hits": 1,
            "inningsPitched": 2.1,
            "groundIntoDP": 1,
        },
        headers=owner,
    )
    assert r.status_code == 201, r.text
    game = r.json()["game"]
    assert game["at_bats"] == 3
    assert game["home_runs"] == 1
    assert game["innings_pitched"] == 2.1
    assert game["ground_into_dp"] == 1


def test_add_game_validation(client, owner):
    player = _player(client, owner)

    missing_opponent = client.post(
        "/api/v1/games", json={"player_id": player["id"], "date": "2024-04-01"}, headers=owner
    )
    negative = client.post(
        "/api/v1/games",
        json={"player_id": player["id"], "date": "2024-04-01", "opponent": "X", "hits": -1},
        headers=owner,
    )
    bad_date = client.post(
        "/api/v1/games",
        json={"player_id": player["id"], "date": "yesterday", "opponent": "X"},
        headers=owner,
    )

    for r in (missing_opponent, negative, bad_date):
        assert r.status_code == 422
        assert r.json()["error"] == "validation"


def test_add_game_for_foreign_or_missing_player(client, owner, stranger):
    player = _player(client, owner)

    r = client.post(
        "/api/v1/games",
        json={"player_id": player["id"], "date": "2024-04-01", "opponent": "X"},
        headers=stranger,
    )
    assert r.status_code == 403

    r = client.post(
        "/api/v1/games",
        json={"player_id": 9999, "date": "2024-04-01", "opponent": "X"},
        headers=owner,
    )
    assert r.status_code == 404


def test_games_listed_newest_first(client, owner):
    player = _player(client, owner)
    add_game(client, owner, player["id"], date="2024-04-10", opponent="B")
    add_game(client, owner, player["id"], date="2024-03-01", opponent="A")
    add_game(client, owner, player["id"], date="2024-05-20", opponent="C")

    r = client.get(f"/api/v1/players/{player['id']}/games", headers=owner)
    assert [g["opponent"] for g in r.json()["games"]] == ["C", "B", "A"]


def test_partial_update(client, owner):
    player = _player(client, owner)
    game = add_game(client, owner, player["id"], at_bats=4, hits=1, walks=1)

    r = client.put(f"/api/v1/games/{game['id']}", json={"hits": 2, "opponent": "Jets"}, headers=owner)
    assert r.status_code == 200
    updated = r.json()["game"]
    assert updated["hits"] == 2
    assert updated["opponent"] == "Jets"
    assert updated["at_bats"] == 4
    assert updated["walks"] == 1

    stats = client.get(f"/api/v1/players/{player['id']}", headers=owner).json()["stats"]
    assert stats["derived"]["avg"] == ".500"


def test_update_rejects_negative_stats(client, owner):
    player = _player(client, owner)
    game = add_game(client, owner, player["id"])

    r = client.put(f"/api/v1/games/{game['id']}", json={"runs": -3}, headers=owner)
    assert r.status_code == 422


def test_non_owner_cannot_touch_games(client, owner, stranger):
    player = _player(client, owner)
    game = add_game(client, owner, player["id"], hits=1, at_bats=1)

    r = client.put(f"/api/v1/games/{game['id']}", json={"hits": 0}, headers=stranger)
    assert r.status_code == 403
    r = client.delete(f"/api/v1/games/{game['id']}", headers=stranger)
    assert r.status_code == 403

    games = client.get(f"/api/v1/players/{player['id']}/games", headers=owner).json()["games"]
    assert [g["hits"] for g in games] == [1]


def test_delete_game(client, owner):
    player = _player(client, owner)
    game = add_game(client, owner, player["id"])

    assert client.delete(f"/api/v1/games/{game['id']}", headers=owner).status_code == 200
    assert client.get(f"/api/v1/players/{player['id']}/games", headers=owner).json()["games"] == []
    assert client.delete(f"/api/v1/games/{game['id']}", headers=owner).status_code == 404


def test_non_finite_innings_are_rejected(client, owner):
    player = _player(client, owner)

    for value in ("inf", "-inf", "nan", "Infinity"):
        r = client.post(
            "/api/v1/games",
            json={"player_id": player["id"], "date": "2024-04-01", "opponent": "X", "innings_pitched": value},
            headers=owner,
        )
        assert r.status_code == 422, value
        assert r.json()["error"] == "validation"

    # nothing was stored, so the stat pages still render
    r = client.get(f"/api/v1/players/{player['id']}", headers=owner)
    assert r.status_code == 200
    assert r.json()["games"] == []
    assert client.get(f"/api/v1/public/teams/{player['team_id']}").status_code == 200


def test_values_beyond_integer_columns_are_rejected(client, owner):
    player = _player(client, owner)
    game = add_game(client, owner, player["id"])

    too_big = 2**31
    payloads = [
        {"player_id": player["id"], "date": "2024-04-01", "opponent": "X", "at_bats": 2**70},
        {"player_id": player["id"], "date": "2024-04-01", "opponent": "X", "earnedRuns": too_big},
        {"player_id": too_big, "date": "2024-04-01", "opponent": "X"},
    ]
    for payload in payloads:
        r = client.post("/api/v1/games", json=payload, headers=owner)
        assert r.status_code == 422, payload
        assert r.json()["error"] == "validation"

    r = client.put(f"/api/v1/games/{game['id']}", json={"hits": too_big}, headers=owner)
    assert r.status_code == 422

    largest = add_game(client, owner, player["id"], at_bats=2**31 - 1)
    assert largest["at_bats"] == 2**31 - 1


def test_out_of_range_ids_in_paths_are_not_found(client, owner):
    huge = 2**70
    assert client.get(f"/api/v1/players/{huge}", headers=owner).status_code == 404
    assert client.get(f"/api/v1/teams/{huge}/stats", headers=owner).status_code == 404
    assert client.delete(f"/api/v1/games/{huge}", headers=owner).status_code == 404
    assert client.get(f"/api/v1/public/players/{huge}").status_code == 404
