"""Ownership resolution and authorization.

Every team, player and game belongs to exactly one user through the chain

    game -> player -> team -> user

`resolve_owner` walks that chain with a single join query for any entity
kind, so routes never re-derive ownership on their own. `authorize` layers
the owner comparison on top and distinguishes the two failure outcomes:

- the record does not exist          -> NotFound (404)
- it exists but belongs to someone else -> Forbidden (403)

Public read routes call `resolve_owner` directly and skip the comparison.
"""

import logging

from sqlalchemy import text
from sqlalchemy.orm import Session

from .errors import Forbidden, NotFound
from .models import MAX_INT

logger = logging.getLogger(__name__)

_OWNER_QUERIES = {
    "team": """
        SELECT t.*, t.user_id AS owner_id
        FROM teams t
        WHERE t.id = :entity_id
    """,
    "player": """
        SELECT p.*, t.user_id AS owner_id
        FROM players p
        JOIN teams t ON p.team_id = t.id
        WHERE p.id = :entity_id
    """,
    "game": """
        SELECT g.*, p.team_id AS team_id, t.user_id AS owner_id
        FROM games g
        JOIN players p ON g.player_id = p.id
        JOIN teams t ON p.team_id = t.id
        WHERE g.id = :entity_id
    """,
}

ENTITY_KINDS = tuple(_OWNER_QUERIES)


def resolve_owner(db: Session, kind: str, entity_id: int) -> dict | None:
    """Load an entity together with the id of the user who owns it.

    Args:
        db: SQLAlchemy session.
        kind: One of "team", "player", "game".
        entity_id: Primary key of the entity.

    Returns:
        dict | None: The entity's columns plus `owner_id`, or None if it does not exist.
            Ids outside the primary key range resolve to None without a query.

    Raises:
        ValueError: If `kind` is not a known entity kind.
    """
    if kind not in _OWNER_QUERIES:
        raise ValueError(f"Unknown entity kind: {kind}")
    if not 0 < entity_id <= MAX_INT:
        return None

    row = db.execute(text(_OWNER_QUERIES[kind]), {"entity_id": entity_id}).mappings().first()
    return dict(row) if row else None


def authorize(db: Session, kind: str, entity_id: int, user_id: int) -> dict:
    """Resolve an entity and require that `user_id` owns it.

    Returns:
        dict: The resolved entity row (see `resolve_owner`).

    Raises:
        NotFound: No such entity.
        Forbidden: The entity belongs to another user.
    """
    row = resolve_owner(db, kind, entity_id)
    if row is None:
        raise NotFound(f"{kind.title()} not found")
    if row["owner_id"] != user_id:
        logger.warning("User %s denied access to %s %s", user_id, kind, entity_id)
        raise Forbidden()
    return row
