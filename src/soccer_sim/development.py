from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Callable

from .config import (
    INJURY_CADENCE_DAYS,
    INJURY_ONSET_PROBABILITY,
    INJURY_WEEKS_RANGE,
    TRAINING_BASE_CHANCE,
    TRAINING_CADENCE_DAYS,
    TRAINING_MAX_AGE,
    YOUTH_AGE_RANGE,
    YOUTH_CHANCE_PER_SLOT,
    YOUTH_INTAKE_CADENCE_DAYS,
)
from .models import Player, Position
from .names import NameGenerator
from .roster import generate_player
from .world import World

_log = logging.getLogger("soccer_sim.development")


@dataclass(slots=True)
class DevelopmentContext:
    world: World
    club_id: str
    rng: random.Random
    names: NameGenerator


PeriodicTask = Callable[[DevelopmentContext], list[str]]


def process_injuries(ctx: DevelopmentContext) -> list[str]:
    """Weekly tick for the managed squad: injured players count down, fit ones may get hurt."""
    news: list[str] = []
    for player in ctx.world.roster(ctx.club_id, include_injured=True):
        if player.is_injured:
            player.injury_weeks_left -= 1
            if player.injury_weeks_left <= 0:
                player.is_injured = False
                player.injury_weeks_left = 0
                news.append(f"{player.full_name} has recovered from injury!")
        elif ctx.rng.random() < INJURY_ONSET_PROBABILITY:
            player.is_injured = True
            player.injury_weeks_left = ctx.rng.randint(*INJURY_WEEKS_RANGE)
            news.append(f"{player.full_name} is injured for {player.injury_weeks_left} weeks!")
    return news


def _boost_stat(player: Player, boost: int, rng: random.Random) -> None:
    stats = player.stats
    choice = rng.randint(0, 2)
    if choice == 0:
        stats.offensive = min(Player.MAX_STAT, stats.offensive + boost)
    elif choice == 1:
        stats.defensive = min(Player.MAX_STAT, stats.defensive + boost)
    else:
        stats.physical = min(Player.MAX_STAT, stats.physical + boost)


def apply_training(ctx: DevelopmentContext) -> list[str]:
    club = ctx.world.club(ctx.club_id)
    if club is None:
        return []
    improved = 0
    for player in ctx.world.roster(ctx.club_id, include_injured=True):
        if ctx.rng.random() < TRAINING_BASE_CHANCE * club.training_boost and player.age < TRAINING_MAX_AGE:
            boost = ctx.rng.randint(1, 2)
            player.stats.overall = min(player.potential_peak, player.stats.overall + boost)
            _boost_stat(player, boost, ctx.rng)
            improved += 1
    _log.debug("Training improved %d player(s) at %s", improved, club.name)
    return []


def youth_intake(ctx: DevelopmentContext) -> list[str]:
    club = ctx.world.club(ctx.club_id)
    if club is None:
        return []
    if ctx.rng.random() >= club.players_per_year * YOUTH_CHANCE_PER_SLOT:
        return []
    quality = club.academy_base_quality + ctx.rng.randint(-5, 10)
    player = generate_player(club.club_id, ctx.rng.choice(list(Position)), quality, ctx.rng, ctx.names)
    player.age = ctx.rng.randint(*YOUTH_AGE_RANGE)
    player.contract_years_left = 3
    player.market_value = player.calculate_market_value()
    ctx.world.add_players([player])
    _log.info("Youth intake at %s: %s", club.name, player.full_name)
    return [
        f"Youth academy produced: {player.full_name} ({player.position.value}, {player.stats.overall} OVR)"
    ]


DEFAULT_PERIODIC_TASKS: tuple[tuple[int, PeriodicTask], ...] = (
    (INJURY_CADENCE_DAYS, process_injuries),
    (TRAINING_CADENCE_DAYS, apply_training),
    (YOUTH_INTAKE_CADENCE_DAYS, youth_intake),
)
