"""Read queries shared by the private and public routes.

Both the owner-only endpoints and the shareable public endpoints return the
same team/player payloads; only the authorization step in front of them
differs. Keeping the queries here means both paths compute statistics from
identical rows through `stats.summarize`.
"""

from sqlalchemy import text
from sqlalchemy.orm import Session

from .schemas import game_out, player_out, team_out
from .stats import summarize, summarize_team


def fetch_players(db: Session, team_id: int) -> list[dict]:
    rows = db.execute(
        text("SELECT * FROM players WHERE team_id = :team_id ORDER BY name, id"),
        {"team_id": team_id},
    ).mappings().all()
    return [dict(r) for r in rows]


def fetch_games(db: Session, player_id: int) -> list[dict]:
    """Games for one player, newest date first (ties broken by newest id)."""
    rows = db.execute(
        text("""
            SELECT * FROM games
            WHERE player_id = :player_id
            ORDER BY date DESC, id DESC
        """),
        {"player_id": player_id},
    ).mappings().all()
    return [dict(r) for r in rows]


def fetch_team_games(db: Session, team_id: int) -> dict[int, list[dict]]:
    """All games for a team's roster in one query, grouped by player id."""
    rows = db.execute(
        text("""
            SELECT g.*
            FROM games g
            JOIN players p ON g.player_id = p.id
            WHERE p.team_id = :team_id
            ORDER BY g.date DESC, g.id DESC
        """),
        {"team_id": team_id},
    ).mappings().all()

    by_player = {}
    for r in rows:
        by_player.setdefault(r["player_id"], []).append(dict(r))
    return by_player


def player_detail(db: Session, player: dict) -> dict:
    """Player payload with totals, derived stats and the game log."""
    games = fetch_games(db, player["id"])
    return {
        "ok": True,
        "player": player_out(player),
        "stats": summarize(games).as_dict(),
        "games": [game_out(g) for g in games],
    }


def team_summary(db: Session, team: dict) -> dict:
    """Team payload with a stat line per player and a team-wide roll-up.

    Players without games still appear, with zero-valued stats.
    """
    roster = fetch_players(db, team["id"])
    games_by_player = fetch_team_games(db, team["id"])

    per_player, team_stats = summarize_team(
        {p["id"]: games_by_player.get(p["id"], []) for p in roster}
    )

    return {
        "ok": True,
        "team": team_out(team),
        "players": [
            {"player": player_out(p), "stats": per_player[p["id"]].as_dict()}
            for p in roster
        ],
        "team_stats": team_stats.as_dict(),
    }
