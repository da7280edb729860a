from __future__ import annotations

import logging
from typing import Iterable

from .models import Match, MatchType, StandingsEntry
from .world import World

_log = logging.getLogger("soccer_sim.standings")


class StandingsTracker:
    """One league table per league id, fed by finished league matches."""

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, StandingsEntry]] = {}

    def init_tables(self, world: World) -> None:
        self._tables = {}
        for league_id in world.leagues:
            self._tables[league_id] = {
                club.club_id: StandingsEntry(club_id=club.club_id, club_name=club.name)
                for club in world.league_clubs(league_id)
            }

    @property
    def league_ids(self) -> list[str]:
        return list(self._tables)

    def entry(self, league_id: str, club_id: str) -> StandingsEntry | None:
        return self._tables.get(league_id, {}).get(club_id)

    def record_result(self, match: Match) -> bool:
        if not match.is_played or match.match_type is not MatchType.LEAGUE or match.league_id is None:
            return False
        home = self.entry(match.league_id, match.home_club_id)
        away = self.entry(match.league_id, match.away_club_id)
        if home is not None:
            home.register_result(match.home_score, match.away_score)
        if away is not None:
            away.register_result(match.away_score, match.home_score)
        if home is None or away is None:
            _log.debug("Partial table update for %s in league %s", match.match_id, match.league_id)
        return home is not None or away is not None

    def record_results(self, matches: Iterable[Match]) -> int:
        return sum(1 for match in matches if self.record_result(match))

    def table(self, league_id: str) -> list[StandingsEntry]:
        return sorted(
            self._tables.get(league_id, {}).values(),
            key=lambda entry: entry.sort_key,
            reverse=True,
        )
