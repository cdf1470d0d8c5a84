"""
Fixture DTOs.

GoalEvent and CardEvent carry minute and club attribution.
MatchPerformance holds one player's line for a single match.
Fixture is the scheduling record; it becomes played exactly once.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List


@dataclass
class GoalEvent:
    scorer_id: str = ""
    scorer_name: str = ""
    minute: int = 0
    club_id: str = ""
    assist_id: str | None = None
    assist_name: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scorer_id": self.scorer_id,
            "scorer_name": self.scorer_name,
            "minute": self.minute,
            "club_id": self.club_id,
            "assist_id": self.assist_id,
            "assist_name": self.assist_name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GoalEvent":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class CardEvent:
    player_id: str = ""
    player_name: str = ""
    minute: int = 0
    club_id: str = ""
    colour: str = "yellow"  # yellow | red

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "player_name": self.player_name,
            "minute": self.minute,
            "club_id": self.club_id,
            "colour": self.colour,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CardEvent":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class MatchPerformance:
    """One player's line for a single match."""

    player_id: str = ""
    club_id: str = ""
    name: str = ""
    position: str = ""
    rating: float = 6.0
    goals: int = 0
    assists: int = 0
    shots: int = 0
    passes: int = 0
    pass_accuracy: int = 0
    tackles: int = 0
    interceptions: int = 0
    saves: int = 0
    minutes_played: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "player_id": self.player_id,
            "club_id": self.club_id,
            "name": self.name,
            "position": self.position,
            "rating": self.rating,
            "goals": self.goals,
            "assists": self.assists,
            "shots": self.shots,
            "passes": self.passes,
            "pass_accuracy": self.pass_accuracy,
            "tackles": self.tackles,
            "interceptions": self.interceptions,
            "saves": self.saves,
            "minutes_played": self.minutes_played,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchPerformance":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class Fixture:
    """A scheduled match between two clubs in a given week."""

    id: str = ""
    week: int = 0
    home_id: str = ""
    away_id: str = ""
    is_derby: bool = False
    played: bool = False
    home_goals: int = 0
    away_goals: int = 0
    goals: List[GoalEvent] = field(default_factory=list)
    cards: List[CardEvent] = field(default_factory=list)
    performances: List[MatchPerformance] = field(default_factory=list)
    man_of_the_match: str | None = None  # player id
    late_winner: bool = False  # winning goal scored from the 85th minute

    def involves(self, club_id: str) -> bool:
        return club_id in (self.home_id, self.away_id)

    def goals_for(self, club_id: str) -> int:
        return self.home_goals if club_id == self.home_id else self.away_goals

    def goals_against(self, club_id: str) -> int:
        return self.away_goals if club_id == self.home_id else self.home_goals

    def outcome_for(self, club_id: str) -> str:
        """'W', 'D' or 'L' from the given club's point of view."""
        gf, ga = self.goals_for(club_id), self.goals_against(club_id)
        if gf > ga:
            return "W"
        if gf == ga:
            return "D"
        return "L"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "week": self.week,
            "home_id": self.home_id,
            "away_id": self.away_id,
            "is_derby": self.is_derby,
            "played": self.played,
            "home_goals": self.home_goals,
            "away_goals": self.away_goals,
            "goals": [g.to_dict() for g in self.goals],
            "cards": [c.to_dict() for c in self.cards],
            "performances": [p.to_dict() for p in self.performances],
            "man_of_the_match": self.man_of_the_match,
            "late_winner": self.late_winner,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Fixture":
        return cls(
            id=data.get("id", ""),
            week=data.get("week", 0),
            home_id=data.get("home_id", ""),
            away_id=data.get("away_id", ""),
            is_derby=data.get("is_derby", False),
            played=data.get("played", False),
            home_goals=data.get("home_goals", 0),
            away_goals=data.get("away_goals", 0),
            goals=[GoalEvent.from_dict(g) for g in data.get("goals", [])],
            cards=[CardEvent.from_dict(c) for c in data.get("cards", [])],
            performances=[MatchPerformance.from_dict(p) for p in data.get("performances", [])],
            man_of_the_match=data.get("man_of_the_match"),
            late_winner=data.get("late_winner", False),
        )
