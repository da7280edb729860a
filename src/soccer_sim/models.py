from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import ClassVar
from uuid import uuid4


def _new_id() -> str:
    return uuid4().hex


class Position(str, Enum):
    GOALKEEPER = "GK"
    CENTER_BACK = "CB"
    LEFT_BACK = "LB"
    RIGHT_BACK = "RB"
    DEFENSIVE_MIDFIELD = "CDM"
    CENTRAL_MIDFIELD = "CM"
    ATTACKING_MIDFIELD = "CAM"
    LEFT_WING = "LW"
    RIGHT_WING = "RW"
    STRIKER = "ST"

    @property
    def is_attacking(self) -> bool:
        return self in FORWARD_POSITIONS or self in MIDFIELD_POSITIONS


GOALKEEPER_POSITIONS = frozenset({Position.GOALKEEPER})
DEFENDER_POSITIONS = frozenset({Position.CENTER_BACK, Position.LEFT_BACK, Position.RIGHT_BACK})
MIDFIELD_POSITIONS = frozenset(
    {Position.DEFENSIVE_MIDFIELD, Position.CENTRAL_MIDFIELD, Position.ATTACKING_MIDFIELD}
)
FORWARD_POSITIONS = frozenset({Position.LEFT_WING, Position.RIGHT_WING, Position.STRIKER})

# Required slot position -> player positions acceptable in that slot.
POSITION_COMPATIBILITY: dict[Position, frozenset[Position]] = {
    Position.GOALKEEPER: GOALKEEPER_POSITIONS,
    Position.CENTER_BACK: DEFENDER_POSITIONS,
    Position.LEFT_BACK: frozenset({Position.LEFT_BACK, Position.LEFT_WING}),
    Position.RIGHT_BACK: frozenset({Position.RIGHT_BACK, Position.RIGHT_WING}),
    Position.DEFENSIVE_MIDFIELD: MIDFIELD_POSITIONS,
    Position.CENTRAL_MIDFIELD: MIDFIELD_POSITIONS,
    Position.ATTACKING_MIDFIELD: MIDFIELD_POSITIONS | FORWARD_POSITIONS,
    Position.LEFT_WING: frozenset({Position.LEFT_BACK}) | FORWARD_POSITIONS,
    Position.RIGHT_WING: frozenset({Position.RIGHT_BACK}) | FORWARD_POSITIONS,
    Position.STRIKER: FORWARD_POSITIONS | {Position.ATTACKING_MIDFIELD},
}

_GK = Position.GOALKEEPER
_CB = Position.CENTER_BACK
_LB = Position.LEFT_BACK
_RB = Position.RIGHT_BACK
_DM = Position.DEFENSIVE_MIDFIELD
_CM = Position.CENTRAL_MIDFIELD
_AM = Position.ATTACKING_MIDFIELD
_LW = Position.LEFT_WING
_RW = Position.RIGHT_WING
_ST = Position.STRIKER

FORMATION_SLOTS: dict[str, tuple[Position, ...]] = {
    "4-4-2": (_GK, _LB, _CB, _CB, _RB, _LW, _CM, _CM, _RW, _ST, _ST),
    "4-3-3": (_GK, _LB, _CB, _CB, _RB, _CM, _CM, _CM, _LW, _ST, _RW),
    "3-5-2": (_GK, _CB, _CB, _CB, _LB, _CM, _DM, _CM, _RB, _ST, _ST),
    "4-2-3-1": (_GK, _LB, _CB, _CB, _RB, _DM, _DM, _LW, _AM, _RW, _ST),
    "4-1-4-1": (_GK, _LB, _CB, _CB, _RB, _DM, _LW, _CM, _CM, _RW, _ST),
    "3-4-3": (_GK, _CB, _CB, _CB, _LB, _CM, _CM, _RB, _LW, _ST, _RW),
    "5-3-2": (_GK, _LB, _CB, _CB, _CB, _RB, _CM, _CM, _CM, _ST, _ST),
    "4-5-1": (_GK, _LB, _CB, _CB, _RB, _LW, _CM, _AM, _CM, _RW, _ST),
}


def is_compatible(player_position: Position, required: Position) -> bool:
    return player_position in POSITION_COMPATIBILITY[required]


def formation_slots(formation: str) -> tuple[Position, ...]:
    """Slot positions for a formation; unknown formations fill 11 central midfield slots."""
    return FORMATION_SLOTS.get(formation, (_CM,) * 11)


def pick_starting_xi(players: list[Player], formation: str) -> list[Player]:
    """Fill each formation slot with the best exact fit, then a compatible fit, then anyone left."""
    available = sorted(players, key=lambda p: p.stats.overall, reverse=True)
    selected: list[Player] = []
    for required in formation_slots(formation):
        if not available:
            break
        chosen = next((p for p in available if p.position is required), None)
        if chosen is None:
            chosen = next((p for p in available if is_compatible(p.position, required)), None)
        if chosen is None:
            chosen = available[0]
        available.remove(chosen)
        selected.append(chosen)
    return selected


class MatchType(str, Enum):
    FRIENDLY = "Friendly"
    LEAGUE = "League"
    NATIONAL_CUP = "Cup"
    CHAMPIONS_LEAGUE = "Champions League"
    EUROPA_LEAGUE = "Europa League"


class MatchEventType(str, Enum):
    GOAL = "goal"
    OWN_GOAL = "own_goal"
    YELLOW_CARD = "yellow_card"
    RED_CARD = "red_card"
    INJURY = "injury"
    SUBSTITUTION = "substitution"
    PENALTY = "penalty"
    PENALTY_MISS = "penalty_miss"


@dataclass(slots=True)
class League:
    name: str
    country: str
    tier: int
    max_rating: int
    promotion_spots: int = 2
    relegation_spots: int = 3
    has_national_cup: bool = True
    country_emoji: str = ""
    league_id: str = field(default_factory=_new_id)


@dataclass(slots=True)
class Club:
    name: str
    league_id: str
    rating: int
    short_name: str = ""
    budget: int = 0
    wage_budget: int = 0
    stadium_name: str = ""
    stadium_capacity: int = 0
    formation: str = "4-4-2"
    academy_recruiting_level: int = 1
    academy_quality_level: int = 1
    academy_training_level: int = 1
    league_titles: int = 0
    cup_wins: int = 0
    primary_color: str = "blue"
    secondary_color: str = "white"
    club_id: str = field(default_factory=_new_id)

    @property
    def players_per_year(self) -> int:
        return 1 + self.academy_recruiting_level

    @property
    def academy_base_quality(self) -> int:
        return 30 + self.academy_quality_level * 8

    @property
    def training_boost(self) -> float:
        return 1.0 + self.academy_training_level * 0.15


@dataclass(slots=True)
class PlayerStats:
    overall: int
    offensive: int
    defensive: int
    physical: int


@dataclass(slots=True)
class Player:
    first_name: str
    last_name: str
    age: int
    position: Position
    stats: PlayerStats
    club_id: str | None = None
    wage: int = 5000
    market_value: int = 0
    contract_years_left: int = 3
    morale: int = 70
    is_injured: bool = False
    injury_weeks_left: int = 0
    yellow_cards: int = 0
    red_cards: int = 0
    goals: int = 0
    assists: int = 0
    matches_played: int = 0
    potential_peak: int = 0
    player_id: str = field(default_factory=_new_id)

    MAX_STAT: ClassVar[int] = 99

    def __post_init__(self) -> None:
        if self.potential_peak <= 0:
            self.potential_peak = min(self.MAX_STAT, self.stats.overall + 10)
        if self.market_value <= 0:
            self.market_value = self.calculate_market_value()

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_free_agent(self) -> bool:
        return self.club_id is None

    def calculate_market_value(self) -> int:
        base_value = self.stats.overall * self.stats.overall * 500
        if self.age <= 23:
            age_factor = 1.5
        elif self.age <= 28:
            age_factor = 1.3
        elif self.age <= 31:
            age_factor = 1.0
        elif self.age <= 34:
            age_factor = 0.6
        else:
            age_factor = 0.3
        return int(base_value * age_factor)



@dataclass(frozen=True, slots=True)
class MatchEvent:
    minute: int
    event_type: MatchEventType
    player_name: str
    is_home: bool
    assist_player_name: str | None = None


@dataclass(slots=True)
class Match:
    home_club_id: str
    away_club_id: str
    home_club_name: str
    away_club_name: str
    match_type: MatchType
    date: date
    league_id: str | None = None
    matchday: int | None = None
    home_score: int = 0
    away_score: int = 0
    is_played: bool = False
    events: list[MatchEvent] = field(default_factory=list)
    home_possession: int = 50
    away_possession: int = 50
    home_shots: int = 0
    away_shots: int = 0
    home_shots_on_target: int = 0
    away_shots_on_target: int = 0
    player_ratings: dict[str, float] = field(default_factory=dict)
    match_id: str = field(default_factory=_new_id)

    def involves(self, club_id: str | None) -> bool:
        return club_id is not None and club_id in (self.home_club_id, self.away_club_id)

    @property
    def scoreline(self) -> str:
        return f"{self.home_score}-{self.away_score}"

    def result_for(self, club_id: str) -> str:
        if not self.is_played or not self.involves(club_id):
            return "-"
        if club_id == self.home_club_id:
            goals_for, goals_against = self.home_score, self.away_score
        else:
            goals_for, goals_against = self.away_score, self.home_score
        if goals_for > goals_against:
            return "W"
        if goals_for == goals_against:
            return "D"
        return "L"


@dataclass(slots=True)
class StandingsEntry:
    club_id: str
    club_name: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0

    @property
    def points(self) -> int:
        return self.won * 3 + self.drawn

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    @property
    def sort_key(self) -> tuple[int, int, int]:
        return (self.points, self.goal_difference, self.goals_for)

    def register_result(self, goals_for: int, goals_against: int) -> None:
        self.played += 1
        self.goals_for += goals_for
        self.goals_against += goals_against
        if goals_for > goals_against:
            self.won += 1
        elif goals_for == goals_against:
            self.drawn += 1
        else:
            self.lost += 1
