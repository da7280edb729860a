from __future__ import annotations

from threading import Lock
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .models import Match, Player, Position, StandingsEntry
from .roster import build_default_world
from .season import Season


class ClubSelection(BaseModel):
    club_id: str


class ResetRequest(BaseModel):
    seed: int | None = None


class SimService:
    def __init__(self, seed: int | None = None) -> None:
        self._lock = Lock()
        self.reset(seed)

    def reset(self, seed: int | None = None) -> dict[str, Any]:
        self.seed = seed
        self.season = Season(build_default_world(seed), seed=seed)
        return {"ok": True, "seed": seed}

    def _require_game(self) -> Season:
        if self.season.managed_club_id is None:
            raise HTTPException(status_code=409, detail="No game in progress; choose a club first")
        return self.season

    @staticmethod
    def _match_to_dict(match: Match) -> dict[str, Any]:
        return {
            "match_id": match.match_id,
            "date": match.date.isoformat(),
            "type": match.match_type.value,
            "league_id": match.league_id,
            "matchday": match.matchday,
            "home": match.home_club_name,
            "away": match.away_club_name,
            "home_club_id": match.home_club_id,
            "away_club_id": match.away_club_id,
            "played": match.is_played,
            "home_score": match.home_score if match.is_played else None,
            "away_score": match.away_score if match.is_played else None,
            "possession": [match.home_possession, match.away_possession],
            "shots": [match.home_shots, match.away_shots],
            "shots_on_target": [match.home_shots_on_target, match.away_shots_on_target],
            "events": [
                {
                    "minute": e.minute,
                    "type": e.event_type.value,
                    "player": e.player_name,
                    "side": "home" if e.is_home else "away",
                    "assist": e.assist_player_name,
                }
                for e in match.events
            ],
        }

    @staticmethod
    def _entry_to_dict(position: int, entry: StandingsEntry) -> dict[str, Any]:
        return {
            "pos": position,
            "club_id": entry.club_id,
            "club": entry.club_name,
            "played": entry.played,
            "won": entry.won,
            "drawn": entry.drawn,
            "lost": entry.lost,
            "gf": entry.goals_for,
            "ga": entry.goals_against,
            "gd": entry.goal_difference,
            "points": entry.points,
        }

    @staticmethod
    def _player_to_dict(player: Player) -> dict[str, Any]:
        return {
            "player_id": player.player_id,
            "name": player.full_name,
            "age": player.age,
            "position": player.position.value,
            "overall": player.stats.overall,
            "offensive": player.stats.offensive,
            "defensive": player.stats.defensive,
            "physical": player.stats.physical,
            "injured": player.is_injured,
            "injury_weeks_left": player.injury_weeks_left,
            "goals": player.goals,
            "assists": player.assists,
            "matches_played": player.matches_played,
            "yellow_cards": player.yellow_cards,
            "red_cards": player.red_cards,
            "market_value": player.market_value,
            "wage": player.wage,
        }

    def meta(self) -> dict[str, Any]:
        world = self.season.world
        leagues = []
        for league in sorted(world.leagues.values(), key=lambda lg: (lg.country, lg.tier)):
            leagues.append(
                {
                    "league_id": league.league_id,
                    "name": league.name,
                    "country": league.country,
                    "tier": league.tier,
                    "clubs": [
                        {"club_id": c.club_id, "name": c.name, "rating": c.rating}
                        for c in sorted(world.league_clubs(league.league_id), key=lambda c: -c.rating)
                    ],
                }
            )
        club = self.season.managed_club
        return {
            "leagues": leagues,
            "managed_club_id": self.season.managed_club_id,
            "managed_club": club.name if club is not None else "",
            "date": self.season.current_date.isoformat(),
            "day": self.season.day_counter,
            "is_match_day": self.season.is_match_day,
            "can_advance": self.season.can_advance,
        }

    def new_game(self, club_id: str) -> dict[str, Any]:
        try:
            schedule = self.season.start_new_game(club_id)
        except ValueError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except RuntimeError as exc:
            raise HTTPException(status_code=409, detail=f"{exc}; call /api/reset first") from exc
        return {
            "ok": True,
            "club_id": club_id,
            "fixtures": len(self.season.fixtures),
            "cup_scheduled": schedule.report.cup_scheduled,
            "date": self.season.current_date.isoformat(),
        }

    def advance(self) -> dict[str, Any]:
        season = self._require_game()
        moved = season.advance_day()
        if not moved:
            raise HTTPException(status_code=409, detail="Play today's match before advancing")
        return {"ok": True, "date": season.current_date.isoformat(), "is_match_day": season.is_match_day}

    def advance_to_match(self) -> dict[str, Any]:
        season = self._require_game()
        reached = season.advance_to_match_day()
        today = season.today_match
        return {
            "ok": reached,
            "date": season.current_date.isoformat(),
            "match": self._match_to_dict(today) if today is not None else None,
        }

    def play_today(self) -> dict[str, Any]:
        season = self._require_game()
        match = season.today_match
        if match is None:
            raise HTTPException(status_code=409, detail="No match scheduled today")
        season.play_match(match)
        season.finish_match()
        return self._match_to_dict(match)

    def next_match(self) -> dict[str, Any] | None:
        match = self._require_game().next_match
        return self._match_to_dict(match) if match is not None else None

    def fixtures(self, limit: int) -> list[dict[str, Any]]:
        return [self._match_to_dict(m) for m in self._require_game().upcoming_fixtures(limit)]

    def results(self, limit: int) -> list[dict[str, Any]]:
        return [self._match_to_dict(m) for m in self._require_game().recent_results(limit)]

    def standings(self, league_id: str | None) -> dict[str, Any]:
        season = self._require_game()
        if league_id is None:
            club = season.managed_club
            league_id = club.league_id if club is not None else None
        league = season.world.league(league_id)
        if league is None:
            raise HTTPException(status_code=404, detail="League not found")
        rows = [self._entry_to_dict(idx, e) for idx, e in enumerate(season.league_table(league.league_id), start=1)]
        return {"league_id": league.league_id, "league": league.name, "rows": rows}

    def squad(self, club_id: str | None) -> list[dict[str, Any]]:
        season = self._require_game()
        club_id = club_id or season.managed_club_id
        if season.world.club(club_id) is None:
            raise HTTPException(status_code=404, detail="Club not found")
        players = season.world.roster(club_id, include_injured=True)
        order = list(Position)
        players.sort(key=lambda p: (order.index(p.position), -p.stats.overall))
        return [self._player_to_dict(p) for p in players]

    def free_agents(self, limit: int) -> list[dict[str, Any]]:
        players = sorted(self._require_game().free_agents(), key=lambda p: -p.stats.overall)
        return [self._player_to_dict(p) for p in players[:limit]]

    def news(self, limit: int) -> list[str]:
        return self.season.news[:limit]


service = SimService()
app = FastAPI(title="Soccer Sim API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/meta")
def meta() -> dict[str, Any]:
    with service._lock:
        return service.meta()


@app.post("/api/reset")
def reset(payload: ResetRequest) -> dict[str, Any]:
    with service._lock:
        return service.reset(payload.seed)


@app.post("/api/new-game")
def new_game(payload: ClubSelection) -> dict[str, Any]:
    with service._lock:
        return service.new_game(payload.club_id)


@app.post("/api/advance")
def advance() -> dict[str, Any]:
    with service._lock:
        return service.advance()


@app.post("/api/advance-to-match")
def advance_to_match() -> dict[str, Any]:
    with service._lock:
        return service.advance_to_match()


@app.post("/api/play")
def play() -> dict[str, Any]:
    with service._lock:
        return service.play_today()


@app.get("/api/next-match")
def next_match() -> dict[str, Any] | None:
    with service._lock:
        return service.next_match()


@app.get("/api/fixtures")
def fixtures(limit: int = 10) -> list[dict[str, Any]]:
    if limit < 1:
        raise HTTPException(status_code=400, detail="limit must be positive")
    with service._lock:
        return service.fixtures(limit)


@app.get("/api/results")
def results(limit: int = 10) -> list[dict[str, Any]]:
    if limit < 1:
        raise HTTPException(status_code=400, detail="limit must be positive")
    with service._lock:
        return service.results(limit)


@app.get("/api/standings")
def standings(league_id: str | None = None) -> dict[str, Any]:
    with service._lock:
        return service.standings(league_id)


@app.get("/api/squad")
def squad(club_id: str | None = None) -> list[dict[str, Any]]:
    with service._lock:
        return service.squad(club_id)


@app.get("/api/free-agents")
def free_agents(limit: int = 40) -> list[dict[str, Any]]:
    with service._lock:
        return service.free_agents(limit)


@app.get("/api/news")
def news(limit: int = 20) -> list[str]:
    with service._lock:
        return service.news(limit)
