from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .config import (
    DEFAULT_CLUB_RATING,
    EXPECTED_GOALS_BASELINE,
    EXPECTED_GOALS_DIVISOR,
    HOME_ADVANTAGE,
    MATCH_MINUTES,
    MAX_CARDS_PER_MATCH,
    RATING_BASE_OFFSET,
    RATING_GOAL_BONUS,
    RATING_NOISE,
    RATING_OVERALL_DIVISOR,
    RATING_RANGE,
    RED_CARD_PROBABILITY,
    SHOTS_ON_TARGET_MIN,
    SHOTS_RANGE,
    STRENGTH_NOISE,
    UNKNOWN_NAME,
)
from .models import Match, MatchEvent, MatchEventType, MatchType, Player, Position, pick_starting_xi
from .world import World

if TYPE_CHECKING:
    from .standings import StandingsTracker

_log = logging.getLogger("soccer_sim.engine")


@dataclass(slots=True)
class _Side:
    club_id: str
    rating: int
    strength: float
    lineup: list[Player]
    is_home: bool


def sample_poisson(lam: float, rng: random.Random) -> int:
    """Knuth's multiplication method: count uniform draws until the product falls to e^-lam."""
    if lam <= 0:
        return 0
    limit = math.exp(-lam)
    k = 0
    p = 1.0
    while p > limit:
        k += 1
        p *= rng.random()
    return k - 1


def expected_goals(strength: float) -> float:
    return max(0.0, (strength - EXPECTED_GOALS_BASELINE) / EXPECTED_GOALS_DIVISOR)


def club_rating(world: World, club_id: str) -> int:
    club = world.club(club_id)
    return club.rating if club is not None else DEFAULT_CLUB_RATING


def _strength(rating: int, rng: random.Random, is_home: bool) -> float:
    strength = rating + rng.uniform(-STRENGTH_NOISE, STRENGTH_NOISE)
    if is_home:
        strength += HOME_ADVANTAGE
    return strength


def _build_side(world: World, club_id: str, rng: random.Random, is_home: bool) -> _Side:
    rating = club_rating(world, club_id)
    club = world.club(club_id)
    roster = world.roster(club_id)
    lineup = pick_starting_xi(roster, club.formation) if club is not None else roster[:11]
    return _Side(
        club_id=club_id,
        rating=rating,
        strength=_strength(rating, rng, is_home),
        lineup=lineup,
        is_home=is_home,
    )


def possession_split(home_strength: float, away_strength: float) -> tuple[int, int]:
    """Home and away possession percentages; the home share rounds half up."""
    total = max(home_strength + away_strength, 1.0)
    home = min(100, max(0, math.floor(100 * home_strength / total + 0.5)))
    return home, 100 - home


def _shots(rng: random.Random) -> tuple[int, int]:
    shots = rng.randint(*SHOTS_RANGE)
    on_target = rng.randint(min(SHOTS_ON_TARGET_MIN, shots), shots)
    return shots, on_target


def _pick_scorer(lineup: list[Player], rng: random.Random) -> Player | None:
    attackers = [p for p in lineup if p.position.is_attacking]
    if attackers:
        return rng.choice(attackers)
    outfield = [p for p in lineup if p.position is not Position.GOALKEEPER]
    if outfield:
        return rng.choice(outfield)
    if lineup:
        return rng.choice(lineup)
    return None


def _pick_assist(lineup: list[Player], scorer: Player | None, rng: random.Random) -> Player | None:
    if scorer is None:
        return None
    teammates = [p for p in lineup if p.player_id != scorer.player_id]
    if not teammates:
        return None
    return rng.choice(teammates)


def _goal_events(side: _Side, goals: int, rng: random.Random) -> tuple[list[MatchEvent], list[Player]]:
    events: list[MatchEvent] = []
    scorers: list[Player] = []
    for _ in range(goals):
        minute = rng.randint(1, MATCH_MINUTES)
        scorer = _pick_scorer(side.lineup, rng)
        assister = _pick_assist(side.lineup, scorer, rng)
        if scorer is not None:
            scorer.goals += 1
            scorer.matches_played += 1
            scorers.append(scorer)
        if assister is not None:
            assister.assists += 1
        events.append(
            MatchEvent(
                minute=minute,
                event_type=MatchEventType.GOAL,
                player_name=scorer.full_name if scorer is not None else UNKNOWN_NAME,
                is_home=side.is_home,
                assist_player_name=assister.full_name if assister is not None else None,
            )
        )
    return events, scorers


def _card_events(home: _Side, away: _Side, rng: random.Random) -> list[MatchEvent]:
    events: list[MatchEvent] = []
    for _ in range(rng.randint(0, MAX_CARDS_PER_MATCH)):
        side = home if rng.random() < 0.5 else away
        if not side.lineup:
            continue
        player = rng.choice(side.lineup)
        minute = rng.randint(1, MATCH_MINUTES)
        if rng.random() < RED_CARD_PROBABILITY:
            player.red_cards += 1
            event_type = MatchEventType.RED_CARD
        else:
            player.yellow_cards += 1
            event_type = MatchEventType.YELLOW_CARD
        events.append(
            MatchEvent(minute=minute, event_type=event_type, player_name=player.full_name, is_home=side.is_home)
        )
    return events


def _player_ratings(sides: tuple[_Side, _Side], scorers: list[Player], rng: random.Random) -> dict[str, float]:
    low, high = RATING_RANGE
    ratings: dict[str, float] = {}
    for side in sides:
        for player in side.lineup:
            base = player.stats.overall / RATING_OVERALL_DIVISOR + RATING_BASE_OFFSET
            base += rng.uniform(-RATING_NOISE, RATING_NOISE)
            ratings[player.player_id] = min(high, max(low, base))
    # One bonus per goal, only for players who were rated.
    for scorer in scorers:
        if scorer.player_id in ratings:
            ratings[scorer.player_id] = min(high, ratings[scorer.player_id] + RATING_GOAL_BONUS)
    return ratings


def _fold_result(match: Match, standings: StandingsTracker | None, update_standings: bool) -> None:
    if standings is None or not update_standings or match.match_type is not MatchType.LEAGUE:
        return
    standings.record_result(match)


def simulate_match(
    match: Match,
    world: World,
    rng: random.Random,
    standings: StandingsTracker | None = None,
    update_standings: bool = True,
) -> Match:
    """Resolve an unplayed fixture in place and return it.

    Both clubs' available (uninjured) players take part. Scorers, assisters
    and carded players have their season counters updated. A league result
    is folded into ``standings`` unless ``update_standings`` is False, which
    lets a caller resolve a whole date before refreshing the tables.
    """
    if match.is_played:
        _log.debug("Match %s already played, leaving %s untouched", match.match_id, match.scoreline)
        return match

    home = _build_side(world, match.home_club_id, rng, is_home=True)
    away = _build_side(world, match.away_club_id, rng, is_home=False)

    match.home_possession, match.away_possession = possession_split(home.strength, away.strength)
    match.home_shots, match.home_shots_on_target = _shots(rng)
    match.away_shots, match.away_shots_on_target = _shots(rng)

    home_goals = sample_poisson(expected_goals(home.strength), rng)
    away_goals = sample_poisson(expected_goals(away.strength), rng)

    home_events, home_scorers = _goal_events(home, home_goals, rng)
    away_events, away_scorers = _goal_events(away, away_goals, rng)
    events = home_events + away_events + _card_events(home, away, rng)
    events.sort(key=lambda e: e.minute)

    match.home_score = home_goals
    match.away_score = away_goals
    match.events = events
    match.player_ratings = _player_ratings((home, away), home_scorers + away_scorers, rng)
    match.is_played = True

    _fold_result(match, standings, update_standings)
    return match


def simulate_match_lightweight(
    match: Match,
    world: World,
    rng: random.Random,
    standings: StandingsTracker | None = None,
    update_standings: bool = True,
) -> Match:
    """Score-only resolution for fixtures nobody watches: no events, stats or player counters."""
    if match.is_played:
        return match
    home_strength = _strength(club_rating(world, match.home_club_id), rng, is_home=True)
    away_strength = _strength(club_rating(world, match.away_club_id), rng, is_home=False)
    match.home_score = sample_poisson(expected_goals(home_strength), rng)
    match.away_score = sample_poisson(expected_goals(away_strength), rng)
    match.home_possession, match.away_possession = possession_split(home_strength, away_strength)
    match.is_played = True
    _fold_result(match, standings, update_standings)
    return match
