"""
Manager career DTOs.
The human manager accumulates achievements, a season-by-season career history,
debt strikes and job offers from other clubs.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List

from models.constants import PRESTIGE_LOW

# Achievement kinds and their display titles
ACHIEVEMENTS: Dict[str, str] = {
    "championship": "League Champions",
    "runner_up": "League Runners-up",
    "third_place": "Third Place Finish",
    "top_scorer_player": "Golden Boot Winner",
    "mvp_player": "Player of the Season",
    "top_assister_player": "Playmaker of the Season",
    "season_goalkeeper_player": "Goalkeeper of the Season",
    "unbeaten_streak": "Unbeaten Run",
    "win_streak": "Winning Streak",
}

# Consecutive seasons in debt that end a career
MAX_DEBT_STRIKES = 2


@dataclass
class Achievement:
    kind: str = ""
    title: str = ""
    season: str = ""
    club_name: str = ""
    detail: str = ""

    def __post_init__(self) -> None:
        if self.kind not in ACHIEVEMENTS:
            raise ValueError(f"kind must be one of {list(ACHIEVEMENTS)}, got {self.kind!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "title": self.title,
            "season": self.season,
            "club_name": self.club_name,
            "detail": self.detail,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Achievement":
        return cls(
            kind=data.get("kind", "championship"),
            title=data.get("title", ""),
            season=data.get("season", ""),
            club_name=data.get("club_name", ""),
            detail=data.get("detail", ""),
        )


@dataclass
class CareerSeason:
    """One finished season in the manager's career history."""

    season: str = ""
    club_id: str = ""
    club_name: str = ""
    league_position: int = 0
    trophies: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "season": self.season,
            "club_id": self.club_id,
            "club_name": self.club_name,
            "league_position": self.league_position,
            "trophies": list(self.trophies),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CareerSeason":
        return cls(
            season=data.get("season", ""),
            club_id=data.get("club_id", ""),
            club_name=data.get("club_name", ""),
            league_position=data.get("league_position", 0),
            trophies=list(data.get("trophies", [])),
        )


@dataclass
class ManagerOffer:
    """A job offer from another club after the season ends."""

    id: str = ""
    club_id: str = ""
    club_name: str = ""
    club_rating: int = 0
    prestige: str = PRESTIGE_LOW
    reason: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "club_id": self.club_id,
            "club_name": self.club_name,
            "club_rating": self.club_rating,
            "prestige": self.prestige,
            "reason": self.reason,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManagerOffer":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class Manager:
    """Represents the human player as the club's manager."""

    name: str = ""
    achievements: List[Achievement] = field(default_factory=list)
    history: List[CareerSeason] = field(default_factory=list)
    debt_strikes: int = 0
    game_over: bool = False
    premium_tickets: int = 0  # earned by winning the league
    offers: List[ManagerOffer] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 0 <= self.debt_strikes <= MAX_DEBT_STRIKES:
            raise ValueError(f"debt_strikes must be between 0 and {MAX_DEBT_STRIKES}, got {self.debt_strikes}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "achievements": [a.to_dict() for a in self.achievements],
            "history": [h.to_dict() for h in self.history],
            "debt_strikes": self.debt_strikes,
            "game_over": self.game_over,
            "premium_tickets": self.premium_tickets,
            "offers": [o.to_dict() for o in self.offers],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Manager":
        return cls(
            name=data.get("name", ""),
            achievements=[Achievement.from_dict(a) for a in data.get("achievements", [])],
            history=[CareerSeason.from_dict(h) for h in data.get("history", [])],
            debt_strikes=data.get("debt_strikes", 0),
            game_over=data.get("game_over", False),
            premium_tickets=data.get("premium_tickets", 0),
            offers=[ManagerOffer.from_dict(o) for o in data.get("offers", [])],
        )
