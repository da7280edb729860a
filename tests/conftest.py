import random

import pytest

from soccer_sim.models import Club, League
from soccer_sim.names import NameGenerator
from soccer_sim.roster import generate_squad
from soccer_sim.world import World


def make_world(
    league_sizes: dict[str, int],
    *,
    country: str = "Testland",
    tier_of: dict[str, int] | None = None,
    with_squads: bool = False,
    seed: int = 1,
) -> World:
    rng = random.Random(seed)
    names = NameGenerator(seed)
    world = World()
    for league_name, size in league_sizes.items():
        league = League(
            name=league_name,
            country=country,
            tier=(tier_of or {}).get(league_name, 1),
            max_rating=90,
        )
        world.leagues[league.league_id] = league
        for idx in range(size):
            club = Club(name=f"{league_name} Club {idx + 1}", league_id=league.league_id, rating=50 + idx)
            world.clubs[club.club_id] = club
            if with_squads:
                world.add_players(generate_squad(club.club_id, club.rating, rng, names))
    return world


@pytest.fixture
def world_factory():
    return make_world


@pytest.fixture
def small_world() -> World:
    """Two tiers in one country plus a foreign league, all with full squads."""
    world = make_world(
        {"Top": 6, "Second": 4},
        tier_of={"Top": 1, "Second": 2},
        with_squads=True,
    )
    foreign = make_world({"Abroad": 4}, country="Elsewhere", with_squads=True, seed=2)
    world.leagues.update(foreign.leagues)
    world.clubs.update(foreign.clubs)
    world.add_players(foreign.players.values())
    return world
