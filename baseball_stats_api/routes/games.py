"""Game (per-game stat line) routes.

A game row belongs to one player. Creating one requires owning the player's
team; updating or deleting one resolves game -> player -> team -> owner
through `access.authorize`.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.orm import Session

from ..access import authorize
from ..db import get_db
from ..schemas import GameCreate, GameUpdate, game_out
from ..security import get_current_user
from ..stats import STAT_FIELDS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/games", tags=["games"])

_GAME_COLUMNS = ("player_id", "date", "opponent") + STAT_FIELDS


def _load_game(db: Session, game_id: int) -> dict:
    return dict(
        db.execute(
            text("SELECT * FROM games WHERE id = :game_id"),
            {"game_id": game_id},
        ).mappings().one()
    )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_game(
    body: GameCreate,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record a game for one of the caller's players.

    Stats omitted from the body are stored as zero.

    Returns:
        dict: `{ "ok": true, "game": {...} }`.

    Raises:
        NotFound: 404 if the player does not exist.
        Forbidden: 403 if the player belongs to another user's team.
    """
    authorize(db, "player", body.player_id, user["id"])

    values = body.model_dump(include=set(_GAME_COLUMNS))
    values["date"] = values["date"].isoformat()

    columns = ", ".join(_GAME_COLUMNS)
    params = ", ".join(f":{c}" for c in _GAME_COLUMNS)
    game_id = db.execute(
        text(f"INSERT INTO games ({columns}) VALUES ({params}) RETURNING id"),
        values,
    ).scalar_one()
    db.commit()

    logger.info("User %s added game id=%s for player id=%s", user["id"], game_id, body.player_id)
    return {"ok": True, "game": game_out(_load_game(db, game_id))}


@router.put("/{game_id}")
def update_game(
    game_id: int,
    body: GameUpdate,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a game's date, opponent and/or stats.

    Only fields present in the body are written; a game cannot be moved to a
    different player.

    Returns:
        dict: `{ "ok": true, "game": {...} }` with the stored values.
    """
    authorize(db, "game", game_id, user["id"])

    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    if "date" in changes:
        changes["date"] = changes["date"].isoformat()

    if changes:
        assignments = ", ".join(f"{col} = :{col}" for col in changes)
        db.execute(
            text(f"UPDATE games SET {assignments} WHERE id = :game_id"),
            {**changes, "game_id": game_id},
        )
        db.commit()
        logger.info("User %s updated game id=%s", user["id"], game_id)

    return {"ok": True, "message": "Game updated successfully", "game": game_out(_load_game(db, game_id))}


@router.delete("/{game_id}")
def delete_game(game_id: int, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete a single game."""
    authorize(db, "game", game_id, user["id"])

    db.execute(text("DELETE FROM games WHERE id = :game_id"), {"game_id": game_id})
    db.commit()

    logger.info("User %s deleted game id=%s", user["id"], game_id)
    return {"ok": True, "message": "Game deleted successfully"}
