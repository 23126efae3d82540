"""Shareable read-only routes.

These endpoints back the "share" links in the web client: anyone holding a
team or player id can view its statistics without logging in. They return
exactly what the owner-only endpoints return and skip the ownership check.
Nothing here writes.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..access import resolve_owner
from ..db import get_db
from ..errors import NotFound
from ..queries import player_detail, team_summary

router = APIRouter(prefix="/public", tags=["public"])


@router.get("/teams/{team_id}")
def public_team(team_id: int, db: Session = Depends(get_db)):
    """Public team page: roster with per-player stat lines and a team roll-up.

    Raises:
        NotFound: 404 if the team does not exist.
    """
    team = resolve_owner(db, "team", team_id)
    if team is None:
        raise NotFound("Team not found")
    return team_summary(db, team)


@router.get("/players/{player_id}")
def public_player(player_id: int, db: Session = Depends(get_db)):
    """Public player page: totals, derived stats and the game log.

    Raises:
        NotFound: 404 if the player does not exist.
    """
    player = resolve_owner(db, "player", player_id)
    if player is None:
        raise NotFound("Player not found")
    return player_detail(db, player)
