"""Relational schema for users, teams, players and games.

Tables are declared with SQLAlchemy Core metadata so the same definitions
create the schema on SQLite (local dev, tests) and PostgreSQL (deployment).
Route handlers query them with `sqlalchemy.text` like the rest of the
service; the metadata is the single source of truth for DDL.

Ownership chain (every foreign key is ON DELETE CASCADE):

    users -> teams -> players -> games
"""

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    func,
)

from .stats import INTEGER_STAT_FIELDS

metadata = MetaData()

# Largest value an `Integer` column holds on every supported backend
MAX_INT = 2**31 - 1


users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True),
    Column("email", String(255), nullable=False, unique=True, index=True),
    Column("password_hash", String(255), nullable=False),
    Column("name", String(255), nullable=False),
    Column("profile_pic", String(512)),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)

teams = Table(
    "teams",
    metadata,
    Column("id", Integer, primary_key=True),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", String(255), nullable=False),
    Column("league", String(255), nullable=False),
    Column("season", Integer, nullable=False),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)

players = Table(
    "players",
    metadata,
    Column("id", Integer, primary_key=True),
    Column(
        "team_id",
        Integer,
        ForeignKey("teams.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("name", String(255), nullable=False),
    # jersey "number" is free text ("00", "12A")
    Column("number", String(16), nullable=False),
    Column("position", String(32), nullable=False),
    Column("profile_pic", String(512)),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)

games = Table(
    "games",
    metadata,
    Column("id", Integer, primary_key=True),
    Column(
        "player_id",
        Integer,
        ForeignKey("players.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("date", Date, nullable=False),
    Column("opponent", String(255), nullable=False),
    *[Column(name, Integer, nullable=False, server_default="0") for name in INTEGER_STAT_FIELDS],
    Column("innings_pitched", Float, nullable=False, server_default="0"),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
)
