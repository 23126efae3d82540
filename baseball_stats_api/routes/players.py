"""Player routes.

Responsibilities:
- roster management (`POST /players`, `DELETE /players/{id}`)
- the player stat page (`GET /players/{id}`): totals, derived rate stats and
  the game log, newest first
- the raw game log (`GET /players/{id}/games`)

Players are created with a multipart form so a profile picture can be
attached. They are not editable after creation.
"""

import logging

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..access import authorize
from ..db import get_db
from ..models import MAX_INT
from ..queries import fetch_games, player_detail
from ..schemas import game_out, player_out
from ..security import get_current_user
from ..uploads import discard_image, save_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/players", tags=["players"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_player(
    team_id: int = Form(..., ge=1, le=MAX_INT),
    name: str = Form(..., min_length=1),
    number: str = Form(..., min_length=1),
    position: str = Form(..., min_length=1),
    profile_pic: UploadFile | None = File(None),
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Add a player to one of the caller's teams.

    Args:
        team_id: Team to add the player to; must be owned by the caller.
        name: Player name.
        number: Jersey number. Free text, so "00" keeps its leading zero.
        position: Fielding position label (e.g. "SS", "P").
        profile_pic: Optional image file (jpeg/png/gif, max 5 MiB).
        user: Authenticated user (injected).
        db: SQLAlchemy session (injected).

    Returns:
        dict: `{ "ok": true, "player": {...} }`.

    Raises:
        NotFound: 404 if the team does not exist.
        Forbidden: 403 if the team belongs to another user.
        UploadRejected: 413/415 for an invalid image.
    """
    authorize(db, "team", team_id, user["id"])

    pic = save_image(profile_pic)
    try:
        row = db.execute(
            text("""
                INSERT INTO players (team_id, name, number, position, profile_pic)
                VALUES (:team_id, :name, :number, :position, :profile_pic)
                RETURNING *
            """),
            {
                "team_id": team_id,
                "name": name,
                "number": number,
                "position": position,
                "profile_pic": pic,
            },
        ).mappings().one()
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        discard_image(pic)
        raise

    logger.info("User %s added player id=%s to team id=%s", user["id"], row["id"], team_id)
    return {"ok": True, "player": player_out(row)}


@router.get("/{player_id}")
def get_player(player_id: int, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Fetch a player with accumulated stats and the game log.

    Returns:
        dict: `{ "ok": true, "player": {...}, "stats": {"totals", "derived", "games"}, "games": [...] }`.
        A player with no games gets zero-valued stats.

    Raises:
        NotFound: 404 if the player does not exist.
        Forbidden: 403 if the player's team belongs to another user.
    """
    player = authorize(db, "player", player_id, user["id"])
    return player_detail(db, player)


@router.delete("/{player_id}")
def delete_player(player_id: int, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete a player and, by cascade, their games."""
    authorize(db, "player", player_id, user["id"])

    db.execute(text("DELETE FROM players WHERE id = :player_id"), {"player_id": player_id})
    db.commit()

    logger.info("User %s deleted player id=%s", user["id"], player_id)
    return {"ok": True, "message": "Player deleted successfully"}


@router.get("/{player_id}/games")
def list_player_games(player_id: int, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """List a player's games, newest date first."""
    authorize(db, "player", player_id, user["id"])
    return {"ok": True, "games": [game_out(g) for g in fetch_games(db, player_id)]}
