from __future__ import annotations

import logging
import random
from datetime import date, timedelta
from typing import Sequence

from .config import SEASON_START_DATE
from .development import DEFAULT_PERIODIC_TASKS, DevelopmentContext, PeriodicTask
from .engine import simulate_match, simulate_match_lightweight
from .models import Club, Match, Player, StandingsEntry
from .names import NameGenerator
from .roster import generate_free_agents
from .schedule import SeasonSchedule, build_season_schedule
from .standings import StandingsTracker
from .world import World

_log = logging.getLogger("soccer_sim.season")

MAX_NEWS_ITEMS = 50


class Season:
    """Day clock and UI-driver surface for one managed club's season.

    The clock is blocked whenever the managed club has an unplayed fixture
    dated today: ``advance_day`` refuses to move until that match has been
    entered with ``play_match`` and resolved with ``finish_match``.
    """

    def __init__(
        self,
        world: World,
        seed: int | None = None,
        start_date: date = SEASON_START_DATE,
        periodic_tasks: Sequence[tuple[int, PeriodicTask]] = DEFAULT_PERIODIC_TASKS,
    ) -> None:
        self.world = world
        self._rng = random.Random(seed)
        self._names = NameGenerator(seed=seed)
        self._names.reserve([(p.first_name, p.last_name) for p in world.players.values()])
        self._periodic_tasks = tuple(periodic_tasks)
        self.start_date = start_date
        self.current_date = start_date
        self.day_counter = 0
        self.managed_club_id: str | None = None
        self.active_league_ids: set[str] = set()
        self.schedule: SeasonSchedule | None = None
        self.fixtures: list[Match] = []
        self.standings = StandingsTracker()
        self.current_match: Match | None = None
        self.news: list[str] = []

    # -- setup -------------------------------------------------------------

    def start_new_game(self, club_id: str) -> SeasonSchedule:
        if self.managed_club_id is not None:
            raise RuntimeError("A game is already in progress; start a fresh Season to play again")
        club = self.world.club(club_id)
        if club is None:
            raise ValueError(f"Unknown club id: {club_id}")

        self.managed_club_id = club_id
        self.current_date = self.start_date
        self.day_counter = 0
        self.current_match = None
        self.active_league_ids = self.world.active_league_ids(club_id)

        self.schedule = build_season_schedule(self.world, club_id, self.start_date, self._rng)
        self.fixtures = self.schedule.all_fixtures()
        self.standings.init_tables(self.world)

        league = self.world.league_of(club_id)
        tier = league.tier if league is not None else 1
        self.world.add_players(generate_free_agents(tier, self._rng, self._names))

        self.news = ["You've been appointed as the new manager! Good luck!"]
        _log.info(
            "New game: managing %s, %d fixtures, %d active league(s)",
            club.name,
            len(self.fixtures),
            len(self.active_league_ids),
        )
        return self.schedule

    # -- derived views -----------------------------------------------------

    @property
    def managed_club(self) -> Club | None:
        return self.world.club(self.managed_club_id)

    def _managed_fixtures(self) -> list[Match]:
        if self.managed_club_id is None:
            return []
        return [m for m in self.fixtures if m.involves(self.managed_club_id)]

    @property
    def next_match(self) -> Match | None:
        upcoming = self.upcoming_fixtures()
        return upcoming[0] if upcoming else None

    @property
    def today_match(self) -> Match | None:
        return next(
            (m for m in self._managed_fixtures() if not m.is_played and m.date == self.current_date),
            None,
        )

    @property
    def is_match_day(self) -> bool:
        return self.today_match is not None

    @property
    def can_advance(self) -> bool:
        return self.managed_club_id is not None and not self.is_match_day

    def upcoming_fixtures(self, limit: int | None = None) -> list[Match]:
        matches = sorted((m for m in self._managed_fixtures() if not m.is_played), key=lambda m: m.date)
        return matches if limit is None else matches[:limit]

    def recent_results(self, limit: int | None = None) -> list[Match]:
        matches = sorted(
            (m for m in self._managed_fixtures() if m.is_played),
            key=lambda m: m.date,
            reverse=True,
        )
        return matches if limit is None else matches[:limit]

    def league_table(self, league_id: str) -> list[StandingsEntry]:
        return self.standings.table(league_id)

    def current_league_standings(self) -> list[StandingsEntry]:
        club = self.managed_club
        if club is None:
            return []
        return self.standings.table(club.league_id)

    def free_agents(self) -> list[Player]:
        return self.world.free_agents()

    # -- match resolution --------------------------------------------------

    def _is_active(self, match: Match) -> bool:
        return match.league_id is None or match.league_id in self.active_league_ids

    def _resolve(self, match: Match, update_standings: bool = True) -> Match:
        if self._is_active(match):
            return simulate_match(match, self.world, self._rng, self.standings, update_standings)
        return simulate_match_lightweight(match, self.world, self._rng, self.standings, update_standings)

    def play_match(self, match: Match) -> Match | None:
        """Enter the managed club's fixture for today; it is resolved by ``finish_match``."""
        if match.is_played or not match.involves(self.managed_club_id):
            _log.debug("Refusing to enter match %s", match.match_id)
            return None
        if match.date != self.current_date:
            _log.debug("Match %s is dated %s, today is %s", match.match_id, match.date, self.current_date)
            return None
        self.current_match = match
        return match

    def finish_match(self) -> Match | None:
        """Resolve the entered match and every other fixture sharing its date, then update the tables."""
        match = self.current_match
        if match is None:
            return None
        self.current_match = None

        resolved = [self._resolve(match, update_standings=False)]
        for other in self.fixtures:
            if not other.is_played and other.date == match.date:
                resolved.append(self._resolve(other, update_standings=False))
        folded = self.standings.record_results(resolved)
        _log.debug("Resolved %d fixture(s) on %s, %d table update(s)", len(resolved), match.date, folded)

        self.news.insert(0, f"{match.home_club_name} {match.scoreline} {match.away_club_name}")
        self._trim_news()
        return match

    # -- clock -------------------------------------------------------------

    def advance_day(self) -> bool:
        if not self.can_advance:
            _log.debug("Clock blocked on %s", self.current_date)
            return False

        self.current_date += timedelta(days=1)
        self.day_counter += 1

        swept = 0
        for match in self.fixtures:
            if match.is_played or match.date > self.current_date or match.involves(self.managed_club_id):
                continue
            self._resolve(match)
            swept += 1
        if swept:
            _log.debug("Resolved %d fixture(s) up to %s", swept, self.current_date)

        self._run_periodic_tasks()
        return True

    def advance_to_match_day(self) -> bool:
        """Advance until today is the managed club's next fixture date."""
        target = self.next_match
        if target is None:
            return False
        while self.current_date < target.date:
            if not self.advance_day():
                return False
        return self.current_date == target.date

    def _run_periodic_tasks(self) -> None:
        if self.managed_club_id is None:
            return
        ctx = DevelopmentContext(world=self.world, club_id=self.managed_club_id, rng=self._rng, names=self._names)
        for cadence, task in self._periodic_tasks:
            if self.day_counter % cadence == 0:
                for item in task(ctx):
                    self.news.insert(0, item)
        self._trim_news()

    def _trim_news(self) -> None:
        del self.news[MAX_NEWS_ITEMS:]
