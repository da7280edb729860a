"""Default roster generator: fictional leagues, clubs and squads for a new save."""

from __future__ import annotations

import logging
import random

from .config import FREE_AGENT_POOL_SIZE
from .models import Club, League, Player, PlayerStats, Position
from .names import NameGenerator
from .world import World

_log = logging.getLogger("soccer_sim.roster")

# Position -> (offensive offset range, defensive offset range, physical offset range, floors).
# Positive ranges are added to overall, negative ones subtracted.
_STAT_PROFILES: dict[Position, tuple[tuple[int, int], tuple[int, int], tuple[int, int], tuple[int, int, int]]] = {
    Position.GOALKEEPER: ((-35, -20), (5, 15), (-10, 0), (10, 0, 30)),
    Position.CENTER_BACK: ((-25, -10), (5, 15), (0, 10), (15, 0, 0)),
    Position.LEFT_BACK: ((-25, -10), (5, 15), (0, 10), (15, 0, 0)),
    Position.RIGHT_BACK: ((-25, -10), (5, 15), (0, 10), (15, 0, 0)),
    Position.DEFENSIVE_MIDFIELD: ((-15, -5), (3, 10), (0, 8), (20, 0, 0)),
    Position.CENTRAL_MIDFIELD: ((0, 10), (-15, -5), (-8, 0), (0, 25, 30)),
    Position.ATTACKING_MIDFIELD: ((0, 10), (-15, -5), (-8, 0), (0, 25, 30)),
    Position.LEFT_WING: ((5, 15), (-30, -15), (0, 10), (0, 15, 0)),
    Position.RIGHT_WING: ((5, 15), (-30, -15), (0, 10), (0, 15, 0)),
    Position.STRIKER: ((8, 18), (-35, -20), (0, 8), (0, 10, 0)),
}

SQUAD_TEMPLATE: tuple[tuple[Position, int], ...] = (
    (Position.GOALKEEPER, 2),
    (Position.CENTER_BACK, 4),
    (Position.LEFT_BACK, 2),
    (Position.RIGHT_BACK, 2),
    (Position.DEFENSIVE_MIDFIELD, 2),
    (Position.CENTRAL_MIDFIELD, 3),
    (Position.ATTACKING_MIDFIELD, 2),
    (Position.LEFT_WING, 2),
    (Position.RIGHT_WING, 2),
    (Position.STRIKER, 3),
)

# (name, country, tier, club count, club rating range)
DEFAULT_LEAGUES: tuple[tuple[str, str, int, int, tuple[int, int]], ...] = (
    ("Northland Premier Division", "Northland", 1, 20, (62, 88)),
    ("Northland First Division", "Northland", 2, 18, (45, 66)),
    ("Southmark Liga", "Southmark", 1, 12, (50, 78)),
)

RATING_SQUAD_DEPTH = 15


def _offset_stat(overall: int, offset: tuple[int, int], floor: int, rng: random.Random) -> int:
    low, high = offset
    value = overall + rng.randint(low, high)
    return max(floor, min(Player.MAX_STAT, value))


def generate_player(
    club_id: str | None,
    position: Position,
    quality: int,
    rng: random.Random,
    names: NameGenerator,
) -> Player:
    overall = max(25, min(Player.MAX_STAT, quality + rng.randint(-12, 12)))
    off_range, def_range, phy_range, (off_floor, def_floor, phy_floor) = _STAT_PROFILES[position]
    stats = PlayerStats(
        overall=overall,
        offensive=_offset_stat(overall, off_range, off_floor, rng),
        defensive=_offset_stat(overall, def_range, def_floor, rng),
        physical=_offset_stat(overall, phy_range, phy_floor, rng),
    )
    first_name, last_name = names.next_name()
    return Player(
        first_name=first_name,
        last_name=last_name,
        age=rng.randint(17, 35),
        position=position,
        stats=stats,
        club_id=club_id,
        wage=max(1000, overall * overall * 5),
        contract_years_left=rng.randint(1, 5),
    )


def generate_squad(club_id: str, quality: int, rng: random.Random, names: NameGenerator) -> list[Player]:
    return [
        generate_player(club_id, position, quality, rng, names)
        for position, count in SQUAD_TEMPLATE
        for _ in range(count)
    ]


def squad_rating(squad: list[Player]) -> int | None:
    """Mean overall of the strongest players in a squad."""
    top = sorted((p.stats.overall for p in squad), reverse=True)[:RATING_SQUAD_DEPTH]
    if not top:
        return None
    return sum(top) // len(top)


def generate_free_agents(
    tier: int,
    rng: random.Random,
    names: NameGenerator,
    count: int = FREE_AGENT_POOL_SIZE,
) -> list[Player]:
    """Unattached players whose quality band shrinks with the league tier."""
    quality_low = max(18, 30 - (tier - 1) * 5)
    quality_high = max(40, 70 - (tier - 1) * 10)
    positions = list(Position)
    pool: list[Player] = []
    for _ in range(count):
        player = generate_player(None, rng.choice(positions), rng.randint(quality_low, quality_high), rng, names)
        player.contract_years_left = 0
        pool.append(player)
    return pool


def build_default_world(seed: int | None = None) -> World:
    rng = random.Random(seed)
    names = NameGenerator(seed)
    total_clubs = sum(count for _name, _country, _tier, count, _range in DEFAULT_LEAGUES)
    club_names = iter(names.club_names(total_clubs))

    world = World()
    for league_name, country, tier, club_count, (low, high) in DEFAULT_LEAGUES:
        league = League(name=league_name, country=country, tier=tier, max_rating=high)
        world.leagues[league.league_id] = league
        for _ in range(club_count):
            name = next(club_names)
            rating = rng.randint(low, high)
            club = Club(
                name=name,
                league_id=league.league_id,
                rating=rating,
                short_name=name[:3].upper(),
                budget=rating * rating * 10_000,
                stadium_name=f"{name.split()[0]} Park",
                stadium_capacity=rng.randint(8, 60) * 1000,
            )
            club.wage_budget = club.budget // 3
            world.clubs[club.club_id] = club
            squad = generate_squad(club.club_id, rating - 10, rng, names)
            world.add_players(squad)
            club.rating = squad_rating(squad) or club.rating

    _log.info(
        "Built default world: %d leagues, %d clubs, %d players",
        len(world.leagues),
        len(world.clubs),
        len(world.players),
    )
    return world
