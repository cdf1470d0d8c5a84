"""
Season-end rewards and career progression.

Runs once after the final fixture week: prize money by league position,
individual awards, club streaks, retirements, the debt check, youth
replenishment, manager achievements and career history, and finally job
offers for the human manager. Produces the season summary shown to the user.
"""
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from models import Achievement, CareerSeason, Club, Player, SeasonState, TickResult, ACHIEVEMENTS
from models.constants import (
    PRIZE_BASE,
    PRIZE_PER_PLACE,
    UNBEATEN_ACHIEVEMENT_RUN,
    WIN_STREAK_ACHIEVEMENT_RUN,
    SEVERITY_SUCCESS,
    SEVERITY_INFO,
    SEVERITY_WARNING,
    SEVERITY_ERROR,
)
from models.manager import MAX_DEBT_STRIKES
from simulation.manager_offers import generate_manager_offers
from simulation.squad import enforce_in_place, remove_player

logger = logging.getLogger(__name__)

CHAMPIONSHIP_TROPHY = "premier_league"

AWARD_TITLES = {
    "mvp": "Player of the Season",
    "top_scorer": "Golden Boot",
    "top_assister": "Playmaker Award",
    "season_goalkeeper": "Goalkeeper of the Season",
}


@dataclass
class PlayerScore:
    player: Player
    club: Club
    goals: int = 0
    assists: int = 0
    score: float = 0.0


@dataclass
class Streaks:
    club: Club
    longest_unbeaten: int = 0
    longest_win: int = 0


def prize_for_rank(rank: int, num_clubs: int) -> int:
    return PRIZE_BASE + (num_clubs - rank) * PRIZE_PER_PLACE


def rank_clubs(clubs: List[Club]) -> List[Club]:
    """Points, then goal difference, then goals scored."""
    return sorted(clubs, key=lambda c: (c.points, c.goal_difference, c.goals_for), reverse=True)


def _league_players(state: SeasonState, clubs: List[Club]) -> list[tuple[Player, Club]]:
    return [(p, club) for club in clubs for p in state.roster_players(club.id)]


def count_goals_and_assists(state: SeasonState, club_ids: set[str]) -> tuple[dict[str, int], dict[str, int]]:
    goals: dict[str, int] = {}
    assists: dict[str, int] = {}
    for fixture in state.fixtures:
        if not fixture.played or not (fixture.home_id in club_ids or fixture.away_id in club_ids):
            continue
        for goal in fixture.goals:
            goals[goal.scorer_id] = goals.get(goal.scorer_id, 0) + 1
            if goal.assist_id:
                assists[goal.assist_id] = assists.get(goal.assist_id, 0) + 1
    return goals, assists


def _best(items: list, key) -> Optional[Any]:
    # first strictly better wins; ties keep the earlier entry
    best = None
    for item in items:
        if best is None or key(item) > key(best):
            best = item
    return best


def season_player_score(player: Player, goals: int, assists: int, rank: int, num_clubs: int) -> float:
    stats = player.season_stats
    return (
        stats.mvp * 10
        + stats.average_rating * 0.5
        + goals * 3
        + assists * 2
        + stats.tackles * 0.1
        + stats.interceptions * 0.15
        + stats.saves * 0.2
        + (num_clubs - rank + 1) * 0.5
    )


def calculate_streaks(state: SeasonState, club: Club) -> Streaks:
    streaks = Streaks(club=club)
    unbeaten = wins = 0
    matches = sorted(
        (f for f in state.fixtures if f.played and f.involves(club.id)),
        key=lambda f: f.week,
    )
    for fixture in matches:
        outcome = fixture.outcome_for(club.id)
        if outcome == "W":
            wins += 1
            unbeaten += 1
        elif outcome == "D":
            wins = 0
            unbeaten += 1
        else:
            wins = unbeaten = 0
        streaks.longest_win = max(streaks.longest_win, wins)
        streaks.longest_unbeaten = max(streaks.longest_unbeaten, unbeaten)
    return streaks


def _give_award(player: Player | None, award: str, season: str) -> None:
    if player is None:
        return
    label = f"{AWARD_TITLES[award]} {season}"
    if label not in player.awards:
        player.awards.append(label)


def _achievement(kind: str, season: str, club_name: str, detail: str) -> Achievement:
    return Achievement(kind=kind, title=ACHIEVEMENTS[kind], season=season, club_name=club_name, detail=detail)


def _retire_players(state: SeasonState, result: TickResult) -> list[str]:
    retired: list[str] = []
    for club in state.clubs.values():
        leaving = [
            p for p in state.roster_players(club.id)
            if p.retirement.announced and not p.retirement.persuasion_successful
        ]
        for player in leaving:
            retired.append(player.name)
            if club.id == state.user_club_id:
                result.notify(f"{player.name} has retired from professional football.", SEVERITY_INFO)
            remove_player(state, player.id)
    return retired


def _check_debt(state: SeasonState, result: TickResult) -> str:
    club = state.user_club
    career = state.career
    if club.budget >= 0:
        career.debt_strikes = 0
        return "ok"
    career.debt_strikes = min(MAX_DEBT_STRIKES, career.debt_strikes + 1)
    if career.debt_strikes >= MAX_DEBT_STRIKES:
        career.game_over = True
        result.notify(
            f"{club.name} finished a second consecutive season in debt. Your career is over.",
            SEVERITY_ERROR,
        )
        logger.info("Career over: %s in debt for %d seasons", club.name, career.debt_strikes)
        return "game_over"
    result.notify(
        f"{club.name} finished the season in debt. The board cleared it, "
        "but another season in the red will end your career.",
        SEVERITY_WARNING,
    )
    club.budget = 0
    return "warning"


def run_season_end(state: SeasonState, rng: random.Random) -> TickResult:
    """Season-end calculation; callers run it once, after the final week."""
    result = TickResult(state=state.clone())
    new_state = result.state
    season = new_state.season_label
    week = new_state.total_weeks
    user = new_state.user_club

    # prizes
    table = rank_clubs([new_state.clubs[cid] for cid in new_state.league_club_ids(user.league)])
    num_clubs = len(table)
    ranks: Dict[str, int] = {}
    user_rank = 0
    user_prize = 0
    for index, club in enumerate(table):
        rank = index + 1
        prize = prize_for_rank(rank, num_clubs)
        club.budget += prize
        club.financials.income_prize_money += prize
        ranks[club.id] = rank
        if club.id == user.id:
            user_rank, user_prize = rank, prize
    champion = table[0] if table else None
    logger.info("Season %s finished: %s champions, user club placed %d", season, champion and champion.name, user_rank)

    # individual awards, computed before retirements change the rosters
    club_ids = {c.id for c in table}
    goals, assists = count_goals_and_assists(new_state, club_ids)
    scores = [
        PlayerScore(
            player=p,
            club=club,
            goals=goals.get(p.id, 0),
            assists=assists.get(p.id, 0),
            score=season_player_score(p, goals.get(p.id, 0), assists.get(p.id, 0), ranks[club.id], num_clubs),
        )
        for p, club in _league_players(new_state, table)
    ]
    top_scorer = _best(scores, lambda s: s.goals)
    top_assister = _best(scores, lambda s: s.assists)
    season_player = _best(scores, lambda s: s.score)

    keepers = []
    for club in table:
        gk = next((p for p in new_state.roster_players(club.id) if p.position == "GK"), None)
        if gk is not None:
            keepers.append((gk, club))
    season_keeper = _best(keepers, lambda k: -k[1].goals_against)

    streaks = [calculate_streaks(new_state, club) for club in table]
    best_unbeaten = _best(streaks, lambda s: s.longest_unbeaten)
    best_win = _best(streaks, lambda s: s.longest_win)
    user_streaks = next((s for s in streaks if s.club.id == user.id), Streaks(club=user))

    retired = _retire_players(new_state, result)
    debt_status = _check_debt(new_state, result)

    summary: Dict[str, Any] = {
        "season": season,
        "club_name": user.name,
        "rank": user_rank,
        "prize_money": user_prize,
        "champion": {
            "club_name": champion.name if champion else "Unknown",
            "points": champion.points if champion else 0,
            "prize_money": prize_for_rank(1, num_clubs) if champion else 0,
        },
        "table": [
            {"rank": ranks[c.id], "club_id": c.id, "club_name": c.name, "points": c.points,
             "goal_difference": c.goal_difference, "goals_for": c.goals_for}
            for c in table
        ],
        "top_scorer": _player_line(top_scorer, "goals"),
        "top_assister": _player_line(top_assister, "assists"),
        "season_player": _player_line(season_player, "score"),
        "season_goalkeeper": {
            "player_name": season_keeper[0].name if season_keeper else "Unknown",
            "club_name": season_keeper[1].name if season_keeper else "Unknown",
            "goals_conceded": season_keeper[1].goals_against if season_keeper else 0,
        },
        "longest_unbeaten": {
            "club_name": best_unbeaten.club.name if best_unbeaten else "Unknown",
            "matches": best_unbeaten.longest_unbeaten if best_unbeaten else 0,
        },
        "longest_win_streak": {
            "club_name": best_win.club.name if best_win else "Unknown",
            "matches": best_win.longest_win if best_win else 0,
        },
        "retired_players": retired,
        "debt_status": debt_status,
        "manager_offers": [],
    }

    for club_id in list(new_state.clubs):
        enforce_in_place(new_state, club_id, rng, week, result)

    new_state.season_complete = True
    new_state.season_summary = summary
    if new_state.career.game_over:
        return result

    if top_scorer is not None:
        _give_award(new_state.players.get(top_scorer.player.id), "top_scorer", season)
    if top_assister is not None:
        _give_award(new_state.players.get(top_assister.player.id), "top_assister", season)
    if season_player is not None:
        _give_award(new_state.players.get(season_player.player.id), "mvp", season)
    if season_keeper is not None:
        _give_award(new_state.players.get(season_keeper[0].id), "season_goalkeeper", season)

    achievements: List[Achievement] = []
    if champion is not None and champion.id == user.id:
        achievements.append(_achievement("championship", season, user.name, f"{champion.points} points"))
    elif user_rank == 2:
        achievements.append(_achievement("runner_up", season, user.name, "2nd place"))
    elif user_rank == 3:
        achievements.append(_achievement("third_place", season, user.name, "3rd place"))
    if top_scorer is not None and top_scorer.club.id == user.id and top_scorer.goals > 0:
        achievements.append(_achievement(
            "top_scorer_player", season, user.name, f"{top_scorer.player.name} - {top_scorer.goals} goals"))
    if season_player is not None and season_player.club.id == user.id:
        achievements.append(_achievement(
            "mvp_player", season, user.name, f"{season_player.player.name} - MVP"))
    if top_assister is not None and top_assister.club.id == user.id and top_assister.assists > 0:
        achievements.append(_achievement(
            "top_assister_player", season, user.name, f"{top_assister.player.name} - {top_assister.assists} assists"))
    if season_keeper is not None and season_keeper[1].id == user.id:
        achievements.append(_achievement(
            "season_goalkeeper_player", season, user.name,
            f"{season_keeper[0].name} - {season_keeper[1].goals_against} goals conceded"))
    if user_streaks.longest_unbeaten >= UNBEATEN_ACHIEVEMENT_RUN:
        achievements.append(_achievement(
            "unbeaten_streak", season, user.name, f"{user_streaks.longest_unbeaten} matches unbeaten"))
    if user_streaks.longest_win >= WIN_STREAK_ACHIEVEMENT_RUN:
        achievements.append(_achievement(
            "win_streak", season, user.name, f"{user_streaks.longest_win} consecutive wins"))

    career = new_state.career
    career.achievements.extend(achievements)
    trophies = []
    if champion is not None and champion.id == user.id:
        trophies.append(CHAMPIONSHIP_TROPHY)
        career.premium_tickets += 1
        result.notify(f"{user.name} are league champions!", SEVERITY_SUCCESS)
    if not any(h.season == season and h.club_id == user.id for h in career.history):
        career.history.append(CareerSeason(
            season=season, club_id=user.id, club_name=user.name, league_position=user_rank, trophies=trophies,
        ))

    career.offers = generate_manager_offers(new_state, user_rank, rng)
    summary["manager_offers"] = [o.to_dict() for o in career.offers]
    if career.offers:
        result.notify(f"{len(career.offers)} club(s) want you as their manager.", SEVERITY_INFO)
    result.notify(
        f"Season {season} complete: {user.name} finished {user_rank} and earned {user_prize:,} in prize money.",
        SEVERITY_SUCCESS,
    )
    return result


def _player_line(entry: PlayerScore | None, field_name: str) -> Dict[str, Any]:
    if entry is None:
        return {"player_name": "Unknown", "club_name": "Unknown", field_name: 0}
    value = entry.score if field_name == "score" else getattr(entry, field_name)
    return {
        "player_id": entry.player.id,
        "player_name": entry.player.name,
        "club_name": entry.club.name,
        field_name: round(value, 2) if isinstance(value, float) else value,
    }
