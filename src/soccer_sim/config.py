"""Static simulation configuration constants."""

from datetime import date

SEASON_START_DATE: date = date(2025, 7, 1)
SEASON_YEAR: int = 2025

# Calendar walk.
LEAGUE_START_OFFSET_MONTHS: int = 1
CUP_ROUND_AFTER_MATCHDAY: int = 8
CUP_GAP_BEFORE_DAYS: int = 3
CUP_GAP_AFTER_DAYS: int = 4
MATCHDAY_GAP_DAYS: tuple[int, int] = (4, 5)
CUP_BRACKET_SIZE: int = 16

# Friendlies.
FRIENDLY_COUNT: int = 3
FRIENDLY_INTERVAL_DAYS: int = 7
FRIENDLY_RATING_WINDOW: int = 25

# Match engine.
DEFAULT_CLUB_RATING: int = 50
HOME_ADVANTAGE: float = 3.0
STRENGTH_NOISE: float = 15.0
EXPECTED_GOALS_BASELINE: float = 30.0
EXPECTED_GOALS_DIVISOR: float = 20.0
SHOTS_RANGE: tuple[int, int] = (5, 20)
SHOTS_ON_TARGET_MIN: int = 2
MAX_CARDS_PER_MATCH: int = 6
RED_CARD_PROBABILITY: float = 0.05
MATCH_MINUTES: int = 90
STARTING_XI_SIZE: int = 11
RATING_BASE_OFFSET: float = 3.0
RATING_OVERALL_DIVISOR: float = 15.0
RATING_NOISE: float = 1.5
RATING_GOAL_BONUS: float = 0.5
RATING_RANGE: tuple[float, float] = (1.0, 10.0)
UNKNOWN_NAME: str = "Unknown"

# Day clock cadences, counted in advanced days.
INJURY_CADENCE_DAYS: int = 7
TRAINING_CADENCE_DAYS: int = 28
YOUTH_INTAKE_CADENCE_DAYS: int = 84

# Periodic collaborators.
INJURY_ONSET_PROBABILITY: float = 0.02
INJURY_WEEKS_RANGE: tuple[int, int] = (1, 8)
TRAINING_BASE_CHANCE: float = 0.30
TRAINING_MAX_AGE: int = 30
YOUTH_CHANCE_PER_SLOT: float = 0.25
YOUTH_AGE_RANGE: tuple[int, int] = (16, 19)

# Free-agent pool seeded at game start.
FREE_AGENT_POOL_SIZE: int = 40
