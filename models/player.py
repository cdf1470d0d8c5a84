"""
Player DTO for the season engine.
Rating and potential are 0-99. Contract, conditions, retirement and season
stats are nested value records; offers and a pending transfer hang off the player.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from models.constants import POSITIONS, SENIOR_AGE
from models.offer import TransferOffer, PendingTransfer


@dataclass
class Contract:
    """Weekly wage and remaining years; release clause is optional."""

    wage: int = 0
    years_left: int = 0
    performance_bonus: int = 0
    release_clause: int | None = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "wage": self.wage,
            "years_left": self.years_left,
            "performance_bonus": self.performance_bonus,
        }
        if self.release_clause is not None:
            d["release_clause"] = self.release_clause
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Contract":
        return cls(
            wage=data.get("wage", 0),
            years_left=data.get("years_left", 0),
            performance_bonus=data.get("performance_bonus", 0),
            release_clause=data.get("release_clause"),
        )


@dataclass
class Condition:
    """An injury or illness; the player is unavailable while weeks_out > 0."""

    type: str = ""
    severity: str = ""
    weeks_out: int = 0
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "severity": self.severity,
            "weeks_out": self.weeks_out,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Condition":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class RetirementStatus:
    considering: bool = False
    announced: bool = False
    retirement_week: int | None = None
    persuasion_attempted: bool = False
    persuasion_successful: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "considering": self.considering,
            "announced": self.announced,
            "retirement_week": self.retirement_week,
            "persuasion_attempted": self.persuasion_attempted,
            "persuasion_successful": self.persuasion_successful,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RetirementStatus":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class SeasonStats:
    """Accumulated from match performances; reset at season transition."""

    appearances: int = 0
    goals: int = 0
    assists: int = 0
    mvp: int = 0
    rating_total: float = 0.0
    tackles: int = 0
    interceptions: int = 0
    saves: int = 0
    minutes: int = 0

    @property
    def average_rating(self) -> float:
        if self.appearances == 0:
            return 0.0
        return self.rating_total / self.appearances

    def to_dict(self) -> Dict[str, Any]:
        return {
            "appearances": self.appearances,
            "goals": self.goals,
            "assists": self.assists,
            "mvp": self.mvp,
            "rating_total": self.rating_total,
            "tackles": self.tackles,
            "interceptions": self.interceptions,
            "saves": self.saves,
            "minutes": self.minutes,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeasonStats":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class Player:
    """A footballer owned by exactly one club roster (referenced by id)."""

    id: str = ""
    name: str = ""
    position: str = "CM"
    age: int = 20
    rating: int = 50
    potential: int = 50
    market_value: int = 0
    contract: Contract = field(default_factory=Contract)
    on_loan_list: bool = False
    on_transfer_list: bool = False
    transfer_list_week: int | None = None
    injury: Optional[Condition] = None
    illness: Optional[Condition] = None
    suspension_games: int = 0
    offers: List[TransferOffer] = field(default_factory=list)
    pending_transfer: Optional[PendingTransfer] = None
    retirement: RetirementStatus = field(default_factory=RetirementStatus)
    awards: List[str] = field(default_factory=list)
    is_youth_academy: bool = False
    season_stats: SeasonStats = field(default_factory=SeasonStats)

    def __post_init__(self) -> None:
        if self.position not in POSITIONS:
            raise ValueError(f"position must be one of {POSITIONS}, got {self.position!r}")
        for key in ("rating", "potential"):
            val = getattr(self, key)
            if not 0 <= val <= 99:
                raise ValueError(f"{key} must be between 0 and 99, got {val}")
        if self.suspension_games < 0:
            raise ValueError(f"suspension_games must be >= 0, got {self.suspension_games}")

    @property
    def is_senior(self) -> bool:
        return self.age >= SENIOR_AGE

    @property
    def is_available(self) -> bool:
        return self.injury is None and self.illness is None and self.suspension_games == 0

    def find_offer(self, offer_id: str) -> TransferOffer | None:
        for offer in self.offers:
            if offer.id == offer_id:
                return offer
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "position": self.position,
            "age": self.age,
            "rating": self.rating,
            "potential": self.potential,
            "market_value": self.market_value,
            "contract": self.contract.to_dict(),
            "on_loan_list": self.on_loan_list,
            "on_transfer_list": self.on_transfer_list,
            "transfer_list_week": self.transfer_list_week,
            "injury": self.injury.to_dict() if self.injury else None,
            "illness": self.illness.to_dict() if self.illness else None,
            "suspension_games": self.suspension_games,
            "offers": [o.to_dict() for o in self.offers],
            "pending_transfer": self.pending_transfer.to_dict() if self.pending_transfer else None,
            "retirement": self.retirement.to_dict(),
            "awards": list(self.awards),
            "is_youth_academy": self.is_youth_academy,
            "season_stats": self.season_stats.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Player":
        injury = data.get("injury")
        illness = data.get("illness")
        pending = data.get("pending_transfer")
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            position=data.get("position", "CM"),
            age=data.get("age", 20),
            rating=data.get("rating", 50),
            potential=data.get("potential", 50),
            market_value=data.get("market_value", 0),
            contract=Contract.from_dict(data.get("contract") or {}),
            on_loan_list=data.get("on_loan_list", False),
            on_transfer_list=data.get("on_transfer_list", False),
            transfer_list_week=data.get("transfer_list_week"),
            injury=Condition.from_dict(injury) if injury else None,
            illness=Condition.from_dict(illness) if illness else None,
            suspension_games=data.get("suspension_games", 0),
            offers=[TransferOffer.from_dict(o) for o in data.get("offers", [])],
            pending_transfer=PendingTransfer.from_dict(pending) if pending else None,
            retirement=RetirementStatus.from_dict(data.get("retirement") or {}),
            awards=list(data.get("awards", [])),
            is_youth_academy=data.get("is_youth_academy", False),
            season_stats=SeasonStats.from_dict(data.get("season_stats") or {}),
        )
