from __future__ import annotations

import argparse
import logging
from typing import Iterable, Sequence

from .models import Match, Player, StandingsEntry
from .roster import build_default_world
from .season import Season
from .world import World

_log = logging.getLogger("soccer_sim.app")


def format_standings(entries: Iterable[StandingsEntry], title: str = "") -> str:
    lines = [title] if title else []
    lines.append("Pos Club                       P  W  D  L  GF  GA  GD Pts")
    for idx, entry in enumerate(entries, start=1):
        lines.append(
            f"{idx:>3} {entry.club_name:<24} {entry.played:>3} {entry.won:>2} {entry.drawn:>2} {entry.lost:>2}"
            f" {entry.goals_for:>3} {entry.goals_against:>3} {entry.goal_difference:>3} {entry.points:>3}"
        )
    return "\n".join(lines)


def format_results(matches: Iterable[Match], club_id: str | None = None) -> str:
    lines = ["Date       Type     Fixture"]
    for match in matches:
        outcome = f" ({match.result_for(club_id)})" if club_id is not None else ""
        lines.append(
            f"{match.date.isoformat()} {match.match_type.value:<8} "
            f"{match.home_club_name} {match.scoreline} {match.away_club_name}{outcome}"
        )
    return "\n".join(lines)


def format_player_stats(players: Iterable[Player], world: World, title: str, limit: int = 20) -> str:
    lines = [title, "Club                     Player                   Age Pos OVR MP  G  A  Y  R"]
    for player in list(players)[:limit]:
        lines.append(
            f"{world.club_name(player.club_id):<24} {player.full_name:<24} {player.age:>3} {player.position.value:<3}"
            f" {player.stats.overall:>3} {player.matches_played:>2} {player.goals:>2} {player.assists:>2}"
            f" {player.yellow_cards:>2} {player.red_cards:>2}"
        )
    return "\n".join(lines)


def top_scorers(world: World, league_id: str) -> list[Player]:
    club_ids = {c.club_id for c in world.league_clubs(league_id)}
    players = [p for p in world.players.values() if p.club_id in club_ids and p.goals > 0]
    return sorted(players, key=lambda p: (p.goals, p.assists), reverse=True)


def _pick_club(world: World, query: str | None) -> str:
    if query:
        needle = query.lower()
        for club in world.clubs.values():
            if club.club_id == query or needle in club.name.lower():
                return club.club_id
        raise SystemExit(f"No club matches '{query}'")
    top_tier = min(league.tier for league in world.leagues.values())
    clubs = [c for c in world.clubs.values() if world.league_of(c.club_id).tier == top_tier]
    return max(clubs, key=lambda c: c.rating).club_id


def run_season(season: Season, max_days: int | None = None) -> int:
    """Drive the clock headlessly, playing every managed fixture as it comes up. Returns days advanced."""
    days = 0
    while season.next_match is not None:
        if max_days is not None and days >= max_days:
            break
        if season.is_match_day:
            today = season.today_match
            season.play_match(today)
            season.finish_match()
            continue
        season.advance_day()
        days += 1
    return days


def main(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Simulate a football season headlessly.")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--club", default=None, help="club name fragment or id to manage")
    parser.add_argument("--days", type=int, default=None, help="stop after this many days")
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    world = build_default_world(args.seed)
    season = Season(world, seed=args.seed)
    club_id = _pick_club(world, args.club)
    season.start_new_game(club_id)
    days = run_season(season, args.days)
    _log.info("Advanced %d day(s) to %s", days, season.current_date)

    club = season.managed_club
    print(f"Managing {club.name} - {season.current_date.isoformat()}")
    print()
    print(format_standings(season.current_league_standings(), title=world.league(club.league_id).name))
    print()
    print(format_results(season.recent_results(10), club_id))
    print()
    print(format_player_stats(top_scorers(world, club.league_id), world, "Top scorers", limit=10))
    print()
    for item in season.news[:10]:
        print(f"* {item}")


if __name__ == "__main__":
    main()
