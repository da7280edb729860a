from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .config import UNKNOWN_NAME
from .models import Club, League, Player


@dataclass(slots=True)
class World:
    """Id-keyed registry of every league, club and player in a save.

    Components receive the world by reference and resolve ids through it;
    an absent id is reported as ``None`` rather than raised.
    """

    leagues: dict[str, League] = field(default_factory=dict)
    clubs: dict[str, Club] = field(default_factory=dict)
    players: dict[str, Player] = field(default_factory=dict)

    def add_players(self, players: Iterable[Player]) -> None:
        for player in players:
            self.players[player.player_id] = player

    def league(self, league_id: str | None) -> League | None:
        if league_id is None:
            return None
        return self.leagues.get(league_id)

    def club(self, club_id: str | None) -> Club | None:
        if club_id is None:
            return None
        return self.clubs.get(club_id)

    def league_named(self, name: str) -> League | None:
        return next((league for league in self.leagues.values() if league.name == name), None)

    def player(self, player_id: str) -> Player | None:
        return self.players.get(player_id)

    def club_name(self, club_id: str | None) -> str:
        club = self.club(club_id)
        return club.name if club is not None else UNKNOWN_NAME

    def league_of(self, club_id: str | None) -> League | None:
        club = self.club(club_id)
        if club is None:
            return None
        return self.league(club.league_id)

    def league_clubs(self, league_id: str) -> list[Club]:
        return [club for club in self.clubs.values() if club.league_id == league_id]

    def roster(self, club_id: str | None, include_injured: bool = False) -> list[Player]:
        if club_id is None:
            return []
        return [
            p
            for p in self.players.values()
            if p.club_id == club_id and (include_injured or not p.is_injured)
        ]

    def free_agents(self) -> list[Player]:
        return [p for p in self.players.values() if p.club_id is None]

    def active_league_ids(self, club_id: str | None) -> set[str]:
        """Leagues simulated in full detail: the club's league plus same-country neighbours one tier apart."""
        home_league = self.league_of(club_id)
        if home_league is None:
            return set()
        return {
            league.league_id
            for league in self.leagues.values()
            if league.country == home_league.country and abs(league.tier - home_league.tier) <= 1
        }
