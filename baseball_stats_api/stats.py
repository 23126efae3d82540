"""Batting and pitching statistics derived from per-game counting stats.

This module is the only place rate statistics are computed. Server routes
(private and public) and the API client all call `summarize`, so every
consumer sees the same numbers.

Pipeline:
    games -> aggregate_totals() -> derive() -> PlayerSummary

Conventions:
- A game is any mapping (DB row, JSON payload) or attribute object. Keys may
  be snake_case (`at_bats`) or the camelCase the web client sends (`atBats`).
  Missing or null stats count as zero.
- Rates are `Decimal`, rounded half-up: batting rates to 3 places, pitching
  rates to 2. A zero denominator yields zero, never an error.
- OBP uses the four-term formula (hits + walks + HBP over AB + BB + HBP + SF)
  everywhere.
- OPS is the sum of the *rounded* OBP and SLG, so OPS == OBP + SLG exactly.
- The engine does not validate cross-field consistency. If extra-base hits
  exceed hits, singles go negative and the arithmetic carries on.

Example:
    >>> s = summarize([{"at_bats": 4, "hits": 2, "doubles": 1}, {"at_bats": 3, "walks": 1}])
    >>> s.as_dict()["derived"]["avg"]
    '.286'
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

BATTING_FIELDS = (
    "at_bats",
    "hits",
    "doubles",
    "triples",
    "home_runs",
    "runs",
    "rbis",
    "walks",
    "strikeouts",
    "stolen_bases",
    "caught_stealing",
    "hit_by_pitch",
    "sacrifice_flies",
    "sacrifice_bunts",
    "ground_into_dp",
)
FIELDING_FIELDS = ("errors", "putouts", "assists")
PITCHING_FIELDS = (
    "pitches_thrown",
    "strikeouts_pitched",
    "walks_allowed",
    "hits_allowed",
    "runs_allowed",
    "earned_runs",
    "home_runs_allowed",
)
INTEGER_STAT_FIELDS = BATTING_FIELDS + FIELDING_FIELDS + PITCHING_FIELDS
STAT_FIELDS = INTEGER_STAT_FIELDS + ("innings_pitched",)

_THREE_PLACES = Decimal("0.001")
_TWO_PLACES = Decimal("0.01")
_ZERO = Decimal(0)
_NINE = Decimal(9)

# camelCase spellings that don't follow the mechanical conversion
_EXTRA_ALIASES = {
    "ground_into_dp": ("groundIntoDP",),
    "sacrifice_flies": ("sacFlies",),
}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


_KEYS = {
    field: (field, _camel(field)) + _EXTRA_ALIASES.get(field, ())
    for field in STAT_FIELDS
}


def _raw(game, field: str):
    if isinstance(game, Mapping):
        for key in _KEYS[field]:
            value = game.get(key)
            if value is not None:
                return value
        return None
    return getattr(game, field, None)


def stat_values(game) -> dict:
    """Read every stat field from `game` under its canonical snake_case name.

    Accepts the same snake_case and camelCase keys as `summarize`; absent
    fields come back as 0.
    """
    values = {}
    for field in STAT_FIELDS:
        value = _raw(game, field)
        values[field] = 0 if value is None else value
    return values


def _int_stat(game, field: str) -> int:
    value = _raw(game, field)
    return int(value) if value is not None else 0


def _innings(game) -> Decimal:
    value = _raw(game, "innings_pitched")
    if value is None:
        return _ZERO
    # str() first so 6.1 stays 6.1 rather than its binary expansion
    return Decimal(str(value))


def aggregate_totals(games: Iterable) -> dict:
    """Sum every counting stat across `games`.

    Args:
        games: Iterable of game rows (mappings or objects).

    Returns:
        dict: One entry per field in `STAT_FIELDS`. Integer stats are `int`,
        `innings_pitched` is a `Decimal`.
    """
    totals = {field: 0 for field in INTEGER_STAT_FIELDS}
    totals["innings_pitched"] = _ZERO
    for game in games:
        for field in INTEGER_STAT_FIELDS:
            totals[field] += _int_stat(game, field)
        totals["innings_pitched"] += _innings(game)
    return totals


def _ratio(numerator, denominator, places: Decimal) -> Decimal:
    if not denominator:
        return _ZERO.quantize(places)
    return (Decimal(numerator) / Decimal(denominator)).quantize(places, rounding=ROUND_HALF_UP)


def format_batting_rate(value: Decimal) -> str:
    """Render a batting rate the way box scores do: `.286`, `.000`, `1.000`."""
    text = f"{value:.3f}"
    if text.startswith("0."):
        return text[1:]
    if text.startswith("-0."):
        return "-" + text[2:]
    return text


def format_pitching_rate(value: Decimal) -> str:
    return f"{value:.2f}"


@dataclass(frozen=True)
class DerivedStats:
    singles: int
    total_bases: int
    avg: Decimal
    obp: Decimal
    slg: Decimal
    ops: Decimal
    era: Decimal
    whip: Decimal
    k9: Decimal
    bb9: Decimal

    def as_dict(self) -> dict:
        return {
            "singles": self.singles,
            "total_bases": self.total_bases,
            "avg": format_batting_rate(self.avg),
            "obp": format_batting_rate(self.obp),
            "slg": format_batting_rate(self.slg),
            "ops": format_batting_rate(self.ops),
            "era": format_pitching_rate(self.era),
            "whip": format_pitching_rate(self.whip),
            "k9": format_pitching_rate(self.k9),
            "bb9": format_pitching_rate(self.bb9),
        }


def derive(totals: Mapping) -> DerivedStats:
    """Compute rate statistics from aggregated totals.

    Args:
        totals: Output of `aggregate_totals` (or any mapping with the same keys;
            missing keys count as zero).

    Returns:
        DerivedStats: Rounded rate stats plus singles and total bases.
    """
    t = {field: totals.get(field) or 0 for field in STAT_FIELDS}
    ip = Decimal(str(t["innings_pitched"]))

    singles = t["hits"] - t["doubles"] - t["triples"] - t["home_runs"]
    total_bases = singles + 2 * t["doubles"] + 3 * t["triples"] + 4 * t["home_runs"]

    obp = _ratio(
        t["hits"] + t["walks"] + t["hit_by_pitch"],
        t["at_bats"] + t["walks"] + t["hit_by_pitch"] + t["sacrifice_flies"],
        _THREE_PLACES,
    )
    slg = _ratio(total_bases, t["at_bats"], _THREE_PLACES)

    return DerivedStats(
        singles=singles,
        total_bases=total_bases,
        avg=_ratio(t["hits"], t["at_bats"], _THREE_PLACES),
        obp=obp,
        slg=slg,
        ops=obp + slg,
        era=_ratio(t["earned_runs"] * _NINE, ip, _TWO_PLACES),
        whip=_ratio(t["walks_allowed"] + t["hits_allowed"], ip, _TWO_PLACES),
        k9=_ratio(t["strikeouts_pitched"] * _NINE, ip, _TWO_PLACES),
        bb9=_ratio(t["walks_allowed"] * _NINE, ip, _TWO_PLACES),
    )


@dataclass(frozen=True)
class PlayerSummary:
    totals: dict
    derived: DerivedStats
    games: int

    def as_dict(self) -> dict:
        """JSON-ready form: totals as numbers, derived rates as display strings."""
        totals = dict(self.totals)
        totals["innings_pitched"] = float(totals["innings_pitched"])
        return {"totals": totals, "derived": self.derived.as_dict(), "games": self.games}


def summarize(games: Iterable) -> PlayerSummary:
    """Aggregate a player's games and derive rate stats.

    A player with no games gets zero totals and a zero-valued derived record,
    never `None`, so every endpoint returns the same shape.

    Args:
        games: Iterable of game rows for one player, in any order.

    Returns:
        PlayerSummary: Totals, derived stats and game count.
    """
    games = list(games)
    totals = aggregate_totals(games)
    return PlayerSummary(totals=totals, derived=derive(totals), games=len(games))


def summarize_team(games_by_player: Mapping) -> tuple[dict, PlayerSummary]:
    """Summarize every player on a roster plus the team as a whole.

    Args:
        games_by_player: Mapping of player key -> iterable of that player's games.

    Returns:
        tuple: (`{player key: PlayerSummary}`, team-level `PlayerSummary` over all games).
    """
    per_player = {}
    all_games = []
    for key, games in games_by_player.items():
        games = list(games)
        per_player[key] = summarize(games)
        all_games.extend(games)
    return per_player, summarize(all_games)
