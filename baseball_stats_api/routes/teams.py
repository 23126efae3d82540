"""Team routes.

Teams are the root of everything a user owns. Every route here is scoped to
the authenticated user: listing only returns the caller's teams, and reads,
updates and deletes go through `access.authorize`, which answers 404 for an
unknown id and 403 for someone else's team.

Deleting a team cascades to its players and their games in the database.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import text
from sqlalchemy.orm import Session

from ..access import authorize
from ..db import get_db
from ..queries import fetch_players, team_summary
from ..schemas import TeamCreate, TeamUpdate, player_out, team_out
from ..security import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/teams", tags=["teams"])


@router.post("", status_code=status.HTTP_201_CREATED)
def create_team(
    body: TeamCreate,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Create a team owned by the caller.

    Returns:
        dict: `{ "ok": true, "team": {...} }`.
    """
    row = db.execute(
        text("""
            INSERT INTO teams (user_id, name, league, season)
            VALUES (:user_id, :name, :league, :season)
            RETURNING *
        """),
        {"user_id": user["id"], "name": body.name, "league": body.league, "season": body.season},
    ).mappings().one()
    db.commit()

    logger.info("User %s created team id=%s", user["id"], row["id"])
    return {"ok": True, "team": team_out(row)}


@router.get("")
def list_teams(user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """List the caller's teams, newest first.

    Returns:
        dict: `{ "ok": true, "teams": [...] }`.
    """
    rows = db.execute(
        text("""
            SELECT * FROM teams
            WHERE user_id = :user_id
            ORDER BY created_at DESC, id DESC
        """),
        {"user_id": user["id"]},
    ).mappings().all()

    return {"ok": True, "teams": [team_out(r) for r in rows]}


@router.get("/{team_id}")
def get_team(team_id: int, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Fetch one team with its roster.

    Raises:
        NotFound: 404 if the team does not exist.
        Forbidden: 403 if the caller does not own it.
    """
    team = authorize(db, "team", team_id, user["id"])
    return {
        "ok": True,
        "team": team_out(team),
        "players": [player_out(p) for p in fetch_players(db, team_id)],
    }


@router.get("/{team_id}/stats")
def get_team_stats(team_id: int, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Owner view of the team summary: per-player stat lines and a team roll-up.

    Same payload as `GET /public/teams/{team_id}`, behind the ownership check.
    """
    team = authorize(db, "team", team_id, user["id"])
    return team_summary(db, team)


@router.put("/{team_id}")
def update_team(
    team_id: int,
    body: TeamUpdate,
    user: dict = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update a team's name, league and/or season.

    Only fields present (and non-null) in the body change. The owner is not
    updatable.

    Returns:
        dict: `{ "ok": true, "team": {...} }` with the updated values.
    """
    authorize(db, "team", team_id, user["id"])

    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    if changes:
        assignments = ", ".join(f"{col} = :{col}" for col in changes)
        db.execute(
            text(f"UPDATE teams SET {assignments} WHERE id = :team_id"),
            {**changes, "team_id": team_id},
        )
        db.commit()
        logger.info("User %s updated team id=%s (%s)", user["id"], team_id, ", ".join(changes))

    row = db.execute(
        text("SELECT * FROM teams WHERE id = :team_id"),
        {"team_id": team_id},
    ).mappings().one()
    return {"ok": True, "message": "Team updated successfully", "team": team_out(row)}


@router.delete("/{team_id}")
def delete_team(team_id: int, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """Delete a team and, by cascade, its players and their games."""
    authorize(db, "team", team_id, user["id"])

    db.execute(text("DELETE FROM teams WHERE id = :team_id"), {"team_id": team_id})
    db.commit()

    logger.info("User %s deleted team id=%s", user["id"], team_id)
    return {"ok": True, "message": "Team deleted successfully"}


@router.get("/{team_id}/players")
def list_team_players(team_id: int, user: dict = Depends(get_current_user), db: Session = Depends(get_db)):
    """List the players on one of the caller's teams."""
    authorize(db, "team", team_id, user["id"])
    return {"ok": True, "players": [player_out(p) for p in fetch_players(db, team_id)]}
