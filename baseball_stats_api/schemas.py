"""API schemas.

Request bodies are validated with Pydantic models so malformed input is
rejected (422) before any query runs. Stat payloads accept both snake_case
and the camelCase keys the web client sends (`atBats`, `stolenBases`, ...).

Responses are plain dictionaries built by the `*_out` helpers at the bottom of
this module. They normalize driver-specific column types (SQLite returns
dates as text, PostgreSQL as `datetime.date`) into JSON-friendly values.
"""

import datetime as dt
from typing import Annotated

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import MAX_INT
from .stats import INTEGER_STAT_FIELDS

Count = Annotated[int, Field(ge=0, le=MAX_INT)]
RowId = Annotated[int, Field(ge=1, le=MAX_INT)]


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class TeamCreate(BaseModel):
    name: str = Field(..., min_length=1)
    league: str = Field(..., min_length=1)
    season: int = Field(..., ge=1800, le=3000)


class TeamUpdate(BaseModel):
    """Partial team update. Omitted fields keep their current value."""

    name: str | None = Field(None, min_length=1)
    league: str | None = Field(None, min_length=1)
    season: int | None = Field(None, ge=1800, le=3000)


class GameStats(BaseModel):
    """Counting stats for one game. Absent stats default to zero; negatives are rejected."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    at_bats: Count = 0
    hits: Count = 0
    doubles: Count = 0
    triples: Count = 0
    home_runs: Count = 0
    runs: Count = 0
    rbis: Count = 0
    walks: Count = 0
    strikeouts: Count = 0
    stolen_bases: Count = 0
    caught_stealing: Count = 0
    hit_by_pitch: Count = 0
    sacrifice_flies: Count = 0
    sacrifice_bunts: Count = 0
    ground_into_dp: Count = Field(
        0,
        validation_alias=AliasChoices("ground_into_dp", "groundIntoDP", "groundIntoDp"),
    )
    errors: Count = 0
    putouts: Count = 0
    assists: Count = 0

    innings_pitched: float = Field(0, ge=0, allow_inf_nan=False)
    pitches_thrown: Count = 0
    strikeouts_pitched: Count = 0
    walks_allowed: Count = 0
    hits_allowed: Count = 0
    runs_allowed: Count = 0
    earned_runs: Count = 0
    home_runs_allowed: Count = 0


class GameCreate(GameStats):
    player_id: RowId
    date: dt.date
    opponent: str = Field(..., min_length=1)


class GameUpdate(GameStats):
    """Partial game update; only fields present in the request body are written."""

    date: dt.date | None = None
    opponent: str | None = Field(None, min_length=1)


def _text(value):
    return None if value is None else str(value)


def user_out(row) -> dict:
    return {
        "id": row["id"],
        "email": row["email"],
        "name": row["name"],
        "profile_pic": row["profile_pic"],
    }


def team_out(row) -> dict:
    return {
        "id": row["id"],
        "user_id": row["user_id"],
        "name": row["name"],
        "league": row["league"],
        "season": row["season"],
        "created_at": _text(row.get("created_at")),
    }


def player_out(row) -> dict:
    return {
        "id": row["id"],
        "team_id": row["team_id"],
        "name": row["name"],
        "number": row["number"],
        "position": row["position"],
        "profile_pic": row["profile_pic"],
        "created_at": _text(row.get("created_at")),
    }


def game_out(row) -> dict:
    out = {
        "id": row["id"],
        "player_id": row["player_id"],
        "date": _text(row["date"]),
        "opponent": row["opponent"],
    }
    for field in INTEGER_STAT_FIELDS:
        out[field] = int(row[field] or 0)
    out["innings_pitched"] = float(row["innings_pitched"] or 0)
    out["created_at"] = _text(row.get("created_at"))
    return out

