from __future__ import annotations

import calendar
import logging
import random
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Sequence

from .config import (
    CUP_BRACKET_SIZE,
    CUP_GAP_AFTER_DAYS,
    CUP_GAP_BEFORE_DAYS,
    CUP_ROUND_AFTER_MATCHDAY,
    FRIENDLY_COUNT,
    FRIENDLY_INTERVAL_DAYS,
    FRIENDLY_RATING_WINDOW,
    LEAGUE_START_OFFSET_MONTHS,
    MATCHDAY_GAP_DAYS,
)
from .models import Club, Match, MatchType
from .world import World

_log = logging.getLogger("soccer_sim.schedule")

Pairing = tuple[str, str]


@dataclass(slots=True)
class ScheduleReport:
    """Diagnostics for everything the scheduler skipped or dropped without failing."""

    skipped_league_ids: list[str] = field(default_factory=list)
    dropped_bye_pairings: int = 0
    cup_league_id: str | None = None
    cup_evicted_club_id: str | None = None
    cup_scheduled: bool = False


@dataclass(slots=True)
class SeasonSchedule:
    league_fixtures: list[Match]
    cup_fixtures: list[Match]
    friendlies: list[Match]
    report: ScheduleReport

    def all_fixtures(self) -> list[Match]:
        return sorted(
            [*self.league_fixtures, *self.cup_fixtures, *self.friendlies],
            key=lambda m: m.date,
        )


def add_months(start: date, months: int) -> date:
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def _single_round_pairings(team_count: int) -> list[list[tuple[int, int]]]:
    """Slot-index pairings for one half of a round robin (team_count must be even)."""
    # Circle method: slot 0 stays fixed, the rest rotate one place per round.
    rotating = list(range(1, team_count))
    matches_per_round = team_count // 2
    rounds: list[list[tuple[int, int]]] = []
    for _round_idx in range(team_count - 1):
        pairings = [(0, rotating[-1])]
        for m in range(matches_per_round - 1):
            pairings.append((rotating[m], rotating[-2 - m]))
        rounds.append(pairings)
        rotating = [rotating[-1], *rotating[:-1]]
    return rounds


def build_round_robin_rounds(
    club_ids: Sequence[str],
    rng: random.Random,
    report: ScheduleReport | None = None,
) -> list[list[Pairing]]:
    """Full double round robin: every half-round, then the same half-rounds with venues swapped."""
    if len(club_ids) < 2:
        return []

    slots: list[str | None] = list(club_ids)
    rng.shuffle(slots)
    if len(slots) % 2 == 1:
        slots.append(None)

    half_rounds = _single_round_pairings(len(slots))
    full_rounds = [*half_rounds, *[[(b, a) for a, b in pairings] for pairings in half_rounds]]

    season: list[list[Pairing]] = []
    for pairings in full_rounds:
        day: list[Pairing] = []
        for home_idx, away_idx in pairings:
            home, away = slots[home_idx], slots[away_idx]
            if home is None or away is None:
                if report is not None:
                    report.dropped_bye_pairings += 1
                continue
            day.append((home, away))
        season.append(day)
    return season


def build_cup_round(
    world: World,
    managed_club_id: str,
    rng: random.Random,
    report: ScheduleReport | None = None,
) -> list[tuple[Club, Club]]:
    """Round-of-16 pairings drawn from the managed club's league.

    The managed club is always in the draw: when the random sixteen miss it,
    it takes the last slot and that slot's club is dropped from the cup.
    """
    managed = world.club(managed_club_id)
    league = world.league_of(managed_club_id)
    if managed is None or league is None or not league.has_national_cup:
        return []

    league_clubs = world.league_clubs(league.league_id)
    rng.shuffle(league_clubs)
    entrants = league_clubs[:CUP_BRACKET_SIZE]
    if len(entrants) < 2:
        return []
    if all(c.club_id != managed.club_id for c in entrants):
        evicted = entrants[-1]
        entrants[-1] = managed
        _log.debug("Cup draw: %s forced in, %s dropped", managed.name, evicted.name)
        if report is not None:
            report.cup_evicted_club_id = evicted.club_id
    if report is not None:
        report.cup_league_id = league.league_id
    return [(entrants[i], entrants[i + 1]) for i in range(0, len(entrants) - 1, 2)]


def build_friendlies(
    world: World,
    managed_club_id: str,
    start_date: date,
    rng: random.Random,
) -> list[Match]:
    managed = world.club(managed_club_id)
    if managed is None:
        return []

    others = [c for c in world.clubs.values() if c.club_id != managed_club_id]
    eligible = [c for c in others if abs(c.rating - managed.rating) <= FRIENDLY_RATING_WINDOW]
    rng.shuffle(eligible)
    opponents = eligible[:FRIENDLY_COUNT]
    if len(opponents) < FRIENDLY_COUNT:
        taken = {c.club_id for c in opponents}
        spare = [c for c in others if c.club_id not in taken]
        rng.shuffle(spare)
        opponents.extend(spare[: FRIENDLY_COUNT - len(opponents)])

    fixtures: list[Match] = []
    for idx, opponent in enumerate(opponents, start=1):
        home, away = (managed, opponent) if rng.random() < 0.5 else (opponent, managed)
        fixtures.append(
            Match(
                home_club_id=home.club_id,
                away_club_id=away.club_id,
                home_club_name=home.name,
                away_club_name=away.name,
                match_type=MatchType.FRIENDLY,
                date=start_date + timedelta(days=FRIENDLY_INTERVAL_DAYS * idx),
            )
        )
    return fixtures


def build_season_schedule(
    world: World,
    managed_club_id: str,
    start_date: date,
    rng: random.Random,
    cup_after_matchday: int = CUP_ROUND_AFTER_MATCHDAY,
) -> SeasonSchedule:
    """Friendlies, every league's round robin and the cup round on one shared calendar."""
    report = ScheduleReport()
    friendlies = build_friendlies(world, managed_club_id, start_date, rng)

    league_rounds: list[tuple[str, list[list[Pairing]]]] = []
    for league in world.leagues.values():
        club_ids = [c.club_id for c in world.league_clubs(league.league_id)]
        if len(club_ids) < 2:
            report.skipped_league_ids.append(league.league_id)
            _log.debug("Skipping %s: %d club(s)", league.name, len(club_ids))
            continue
        league_rounds.append((league.league_id, build_round_robin_rounds(club_ids, rng, report)))

    cup_pairs = build_cup_round(world, managed_club_id, rng, report)

    league_fixtures: list[Match] = []
    cup_fixtures: list[Match] = []
    total_matchdays = max((len(rounds) for _league_id, rounds in league_rounds), default=0)
    cursor = add_months(start_date, LEAGUE_START_OFFSET_MONTHS)

    for matchday in range(1, total_matchdays + 1):
        for league_id, rounds in league_rounds:
            if matchday > len(rounds):
                continue
            for home_id, away_id in rounds[matchday - 1]:
                league_fixtures.append(
                    Match(
                        home_club_id=home_id,
                        away_club_id=away_id,
                        home_club_name=world.club_name(home_id),
                        away_club_name=world.club_name(away_id),
                        match_type=MatchType.LEAGUE,
                        date=cursor,
                        league_id=league_id,
                        matchday=matchday,
                    )
                )

        if matchday == cup_after_matchday and cup_pairs:
            cursor += timedelta(days=CUP_GAP_BEFORE_DAYS)
            for home, away in cup_pairs:
                cup_fixtures.append(
                    Match(
                        home_club_id=home.club_id,
                        away_club_id=away.club_id,
                        home_club_name=home.name,
                        away_club_name=away.name,
                        match_type=MatchType.NATIONAL_CUP,
                        date=cursor,
                    )
                )
            report.cup_scheduled = True
            cursor += timedelta(days=CUP_GAP_AFTER_DAYS)
        else:
            cursor += timedelta(days=rng.randint(*MATCHDAY_GAP_DAYS))

    if cup_pairs and not report.cup_scheduled:
        _log.debug("Cup round not placed: season has only %d matchdays", total_matchdays)

    league_fixtures.sort(key=lambda m: m.date)
    _log.info(
        "Scheduled %d league, %d cup and %d friendly fixtures across %d matchdays",
        len(league_fixtures),
        len(cup_fixtures),
        len(friendlies),
        total_matchdays,
    )
    return SeasonSchedule(
        league_fixtures=league_fixtures,
        cup_fixtures=cup_fixtures,
        friendlies=friendlies,
        report=report,
    )
