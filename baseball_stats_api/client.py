"""Python client for the stats API with an explicit offline mode.

`StatsClient` wraps an `httpx.Client` pointed at the API (tests hand it
FastAPI's `TestClient`, which is one). Each data call goes to the server
first. If the server cannot be reached at all (`httpx.TransportError`), the
call is applied to an in-memory `OfflineMirror` instead and the client marks
itself `degraded`. Mirror records are never sent to the server and are lost
with the process; callers should surface `client.degraded` to the user
rather than treat mirrored data as saved.

HTTP error responses (401, 403, 404, 422, ...) are *not* a reason to go
offline: they raise `ApiClientError` with the server's error code.

Authentication (`register`, `login`, `me`) never falls back; without a server
there is no credential to issue, so those raise `ApiUnavailable`.

Public pages (`public_team`, `public_player`) are fetched without credentials
and have no offline form either. `share_url` builds the link to one.

Statistics are always re-derived locally with `stats.summarize`, so the
online and offline paths compute them identically.

UI state lives in an immutable `ViewState`; `reduce(state, action)` returns
the next state for an action dict like `{"type": "team_added", "team": {...}}`.
"""

import datetime as dt
import itertools
import logging
from dataclasses import dataclass, replace

import httpx

from .stats import PlayerSummary, stat_values, summarize

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
PUBLIC_KINDS = ("teams", "players")


class ApiClientError(Exception):
    """The API answered with an error envelope."""

    def __init__(self, status_code: int, code: str, detail):
        super().__init__(f"{status_code} {code}: {detail}")
        self.status_code = status_code
        self.code = code
        self.detail = detail


class ApiUnavailable(ApiClientError):
    """The API could not be reached and the call has no offline equivalent."""

    def __init__(self, detail: str):
        super().__init__(0, "unavailable", detail)


class OfflineMirror:
    """Unpersisted in-memory stand-in for the server's teams/players/games.

    Ids handed out here are negative so they can never be mistaken for
    server ids. Deletes cascade the same way the database does.
    """

    def __init__(self):
        self._ids = itertools.count(-1, -1)
        self.teams: dict[int, dict] = {}
        self.players: dict[int, dict] = {}
        self.games: dict[int, dict] = {}

    def create_team(self, name: str, league: str, season: int) -> dict:
        team = {"id": next(self._ids), "name": name, "league": league, "season": season, "local": True}
        self.teams[team["id"]] = team
        return team

    def list_teams(self) -> list[dict]:
        return sorted(self.teams.values(), key=lambda t: t["id"])

    def delete_team(self, team_id: int) -> None:
        self.teams.pop(team_id, None)
        for player_id in [p["id"] for p in self.players.values() if p["team_id"] == team_id]:
            self.delete_player(player_id)

    def create_player(self, team_id: int, name: str, number: str, position: str) -> dict:
        player = {
            "id": next(self._ids),
            "team_id": team_id,
            "name": name,
            "number": number,
            "position": position,
            "profile_pic": None,
            "local": True,
        }
        self.players[player["id"]] = player
        return player

    def list_players(self, team_id: int) -> list[dict]:
        return [p for p in self.players.values() if p["team_id"] == team_id]

    def delete_player(self, player_id: int) -> None:
        self.players.pop(player_id, None)
        for game_id in [g["id"] for g in self.games.values() if g["player_id"] == player_id]:
            del self.games[game_id]

    def add_game(self, player_id: int, game: dict) -> dict:
        record = stat_values(game)
        record.update(
            id=next(self._ids),
            player_id=player_id,
            date=str(game.get("date") or dt.date.today().isoformat()),
            opponent=game.get("opponent", ""),
            local=True,
        )
        self.games[record["id"]] = record
        return record

    def list_games(self, player_id: int) -> list[dict]:
        games = [g for g in self.games.values() if g["player_id"] == player_id]
        return sorted(games, key=lambda g: (g["date"], -g["id"]), reverse=True)


class StatsClient:
    def __init__(self, http: httpx.Client, token: str | None = None, mirror: OfflineMirror | None = None):
        self.http = http
        self.token = token
        self.mirror = mirror or OfflineMirror()
        self.degraded = False

    # -- transport ---------------------------------------------------------

    def _headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, path: str, authenticated: bool = True, **kwargs) -> dict:
        headers = self._headers() if authenticated else {}
        response = self.http.request(method, API_PREFIX + path, headers=headers, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = {}
        if response.status_code >= 400:
            raise ApiClientError(
                response.status_code,
                body.get("error", "error"),
                body.get("detail", response.text),
            )
        self.degraded = False
        return body

    def _online_or_mirror(self, online, offline):
        try:
            return online()
        except httpx.TransportError as exc:
            if not self.degraded:
                logger.warning("API unreachable (%s); using offline mirror", exc)
            self.degraded = True
            return offline()

    def _online_only(self, online):
        try:
            return online()
        except httpx.TransportError as exc:
            raise ApiUnavailable(str(exc)) from exc

    # -- auth --------------------------------------------------------------

    def register(self, email: str, password: str, name: str, image: tuple | None = None) -> dict:
        """Create an account and keep its token. `image` is `(filename, bytes, content_type)`."""
        files = {"profile_pic": image} if image else None
        body = self._online_only(
            lambda: self._request(
                "POST", "/auth/register",
                data={"email": email, "password": password, "name": name},
                files=files,
            )
        )
        self.token = body["token"]
        return body["user"]

    def login(self, email: str, password: str) -> dict:
        body = self._online_only(
            lambda: self._request("POST", "/auth/login", json={"email": email, "password": password})
        )
        self.token = body["token"]
        return body["user"]

    def me(self) -> dict:
        return self._online_only(lambda: self._request("GET", "/auth/me"))["user"]

    # -- teams -------------------------------------------------------------

    def list_teams(self) -> list[dict]:
        return self._online_or_mirror(
            lambda: self._request("GET", "/teams")["teams"],
            self.mirror.list_teams,
        )

    def create_team(self, name: str, league: str, season: int) -> dict:
        return self._online_or_mirror(
            lambda: self._request(
                "POST", "/teams", json={"name": name, "league": league, "season": season}
            )["team"],
            lambda: self.mirror.create_team(name, league, season),
        )

    def delete_team(self, team_id: int) -> None:
        self._online_or_mirror(
            lambda: self._request("DELETE", f"/teams/{team_id}"),
            lambda: self.mirror.delete_team(team_id),
        )

    # -- players -----------------------------------------------------------

    def list_players(self, team_id: int) -> list[dict]:
        return self._online_or_mirror(
            lambda: self._request("GET", f"/teams/{team_id}/players")["players"],
            lambda: self.mirror.list_players(team_id),
        )

    def create_player(self, team_id: int, name: str, number: str, position: str, image: tuple | None = None) -> dict:
        files = {"profile_pic": image} if image else None
        return self._online_or_mirror(
            lambda: self._request(
                "POST", "/players",
                data={"team_id": str(team_id), "name": name, "number": number, "position": position},
                files=files,
            )["player"],
            lambda: self.mirror.create_player(team_id, name, number, position),
        )

    def delete_player(self, player_id: int) -> None:
        self._online_or_mirror(
            lambda: self._request("DELETE", f"/players/{player_id}"),
            lambda: self.mirror.delete_player(player_id),
        )

    # -- games -------------------------------------------------------------

    def list_games(self, player_id: int) -> list[dict]:
        return self._online_or_mirror(
            lambda: self._request("GET", f"/players/{player_id}/games")["games"],
            lambda: self.mirror.list_games(player_id),
        )

    def add_game(self, player_id: int, **game) -> dict:
        """Record a game. Keyword arguments are `date`, `opponent` and any stat field."""
        payload = dict(game, player_id=player_id)
        if isinstance(payload.get("date"), dt.date):
            payload["date"] = payload["date"].isoformat()
        return self._online_or_mirror(
            lambda: self._request("POST", "/games", json=payload)["game"],
            lambda: self.mirror.add_game(player_id, payload),
        )

    def player_stats(self, player_id: int) -> PlayerSummary:
        """Re-derive a player's stats from their game log (server or mirror)."""
        return summarize(self.list_games(player_id))

    # -- public pages ------------------------------------------------------

    def share_url(self, kind: str, entity_id: int) -> str:
        """Absolute link to the public page of a team or player.

        Args:
            kind: "teams" or "players".
            entity_id: Server id. Offline (negative) ids have no public page.

        Raises:
            ValueError: Unknown `kind`, or an id that only exists in the mirror.
        """
        if kind not in PUBLIC_KINDS:
            raise ValueError(f"Cannot share {kind!r}; expected one of {PUBLIC_KINDS}")
        if entity_id <= 0:
            raise ValueError("Offline records are not on the server and cannot be shared")
        base = str(self.http.base_url).rstrip("/")
        return f"{base}{API_PREFIX}/public/{kind}/{entity_id}"

    def public_team(self, team_id: int) -> dict:
        """Fetch a team's public page without credentials."""
        return self._online_only(
            lambda: self._request("GET", f"/public/teams/{team_id}", authenticated=False)
        )

    def public_player(self, player_id: int) -> dict:
        """Fetch a player's public page without credentials."""
        return self._online_only(
            lambda: self._request("GET", f"/public/players/{player_id}", authenticated=False)
        )


# -- view state ------------------------------------------------------------


@dataclass(frozen=True)
class ViewState:
    user: dict | None = None
    teams: tuple = ()
    players: tuple = ()
    games: tuple = ()
    current_view: str = "dashboard"
    degraded: bool = False
    errors: tuple = ()


def _without(items: tuple, key: str, value) -> tuple:
    return tuple(i for i in items if i[key] != value)


def reduce(state: ViewState, action: dict) -> ViewState:
    """Return the state that results from applying `action` to `state`.

    Unknown action types raise `ValueError` so typos fail loudly.
    """
    kind = action["type"]

    if kind == "logged_in":
        return replace(state, user=action["user"])
    if kind == "logged_out":
        return ViewState()
    if kind == "navigate":
        return replace(state, current_view=action["view"])
    if kind == "connectivity":
        return replace(state, degraded=action["degraded"])
    if kind == "error":
        return replace(state, errors=state.errors + (action["message"],))

    if kind == "teams_loaded":
        return replace(state, teams=tuple(action["teams"]))
    if kind == "team_added":
        return replace(state, teams=state.teams + (action["team"],))
    if kind == "team_removed":
        team_id = action["team_id"]
        gone = {p["id"] for p in state.players if p["team_id"] == team_id}
        return replace(
            state,
            teams=_without(state.teams, "id", team_id),
            players=_without(state.players, "team_id", team_id),
            games=tuple(g for g in state.games if g["player_id"] not in gone),
        )

    if kind == "players_loaded":
        return replace(state, players=tuple(action["players"]))
    if kind == "player_added":
        return replace(state, players=state.players + (action["player"],))
    if kind == "player_removed":
        player_id = action["player_id"]
        return replace(
            state,
            players=_without(state.players, "id", player_id),
            games=_without(state.games, "player_id", player_id),
        )

    if kind == "games_loaded":
        return replace(state, games=tuple(action["games"]))
    if kind == "game_added":
        return replace(state, games=state.games + (action["game"],))
    if kind == "game_removed":
        return replace(state, games=_without(state.games, "id", action["game_id"]))

    raise ValueError(f"Unknown action type: {kind}")
