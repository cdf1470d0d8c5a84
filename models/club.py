"""
Club DTO for the season engine.
Clubs hold a budget, standings counters, a roster of player ids, a financial
ledger, fan sentiment and stadium state.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from models.constants import BASE_TICKET_PRICE


@dataclass
class Financials:
    """Season-to-date income and expense accumulators."""

    income_transfers: int = 0
    income_tickets: int = 0
    income_sponsors: int = 0
    income_prize_money: int = 0
    expense_transfers: int = 0
    expense_wages: int = 0
    expense_facilities: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "income": {
                "transfers": self.income_transfers,
                "tickets": self.income_tickets,
                "sponsors": self.income_sponsors,
                "prize_money": self.income_prize_money,
            },
            "expenses": {
                "transfers": self.expense_transfers,
                "wages": self.expense_wages,
                "facilities": self.expense_facilities,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Financials":
        income = data.get("income", {})
        expenses = data.get("expenses", {})
        return cls(
            income_transfers=income.get("transfers", 0),
            income_tickets=income.get("tickets", 0),
            income_sponsors=income.get("sponsors", 0),
            income_prize_money=income.get("prize_money", 0),
            expense_transfers=expenses.get("transfers", 0),
            expense_wages=expenses.get("wages", 0),
            expense_facilities=expenses.get("facilities", 0),
        )


@dataclass
class StadiumExpansion:
    """start_week 0 means paid for but not yet started."""

    start_week: int = 0
    completion_week: int = 0
    new_capacity: int = 0
    cost: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start_week": self.start_week,
            "completion_week": self.completion_week,
            "new_capacity": self.new_capacity,
            "cost": self.cost,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StadiumExpansion":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class StadiumSponsor:
    """Naming-rights deal; an unaccepted offer uses the same shape with expiry_week set."""

    sponsor_name: str = ""
    stadium_name: str = ""
    yearly_payment: int = 0
    years: int = 0
    start_week: int = 0
    end_week: int = 0
    expiry_week: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sponsor_name": self.sponsor_name,
            "stadium_name": self.stadium_name,
            "yearly_payment": self.yearly_payment,
            "years": self.years,
            "start_week": self.start_week,
            "end_week": self.end_week,
            "expiry_week": self.expiry_week,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StadiumSponsor":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class Club:
    """A club in a league. Exactly one club in a save is human-managed."""

    id: str = ""
    name: str = ""
    league: str = ""
    base_rating: int = 60  # 0-99
    budget: int = 0  # signed; may be negative until season-end debt check
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0
    roster: List[str] = field(default_factory=list)  # player ids, unsorted
    financials: Financials = field(default_factory=Financials)
    fan_count: int = 50_000
    fan_morale: int = 50  # 0-100
    ticket_price: int = BASE_TICKET_PRICE
    stadium_name: str = ""
    stadium_capacity: int = 30_000
    original_stadium_name: str = ""
    pending_expansion: Optional[StadiumExpansion] = None
    stadium_sponsor: Optional[StadiumSponsor] = None
    pending_sponsor_offer: Optional[StadiumSponsor] = None
    last_sponsor_offer_week: int = 0
    rival_ids: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not 0 <= self.base_rating <= 99:
            raise ValueError(f"base_rating must be between 0 and 99, got {self.base_rating}")
        if not 0 <= self.fan_morale <= 100:
            raise ValueError(f"fan_morale must be between 0 and 100, got {self.fan_morale}")

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def reset_standings(self) -> None:
        self.played = self.won = self.drawn = self.lost = 0
        self.goals_for = self.goals_against = self.points = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "league": self.league,
            "base_rating": self.base_rating,
            "budget": self.budget,
            "played": self.played,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "goals_for": self.goals_for,
            "goals_against": self.goals_against,
            "points": self.points,
            "roster": list(self.roster),
            "financials": self.financials.to_dict(),
            "fan_count": self.fan_count,
            "fan_morale": self.fan_morale,
            "ticket_price": self.ticket_price,
            "stadium_name": self.stadium_name,
            "stadium_capacity": self.stadium_capacity,
            "original_stadium_name": self.original_stadium_name,
            "pending_expansion": self.pending_expansion.to_dict() if self.pending_expansion else None,
            "stadium_sponsor": self.stadium_sponsor.to_dict() if self.stadium_sponsor else None,
            "pending_sponsor_offer": (
                self.pending_sponsor_offer.to_dict() if self.pending_sponsor_offer else None
            ),
            "last_sponsor_offer_week": self.last_sponsor_offer_week,
            "rival_ids": list(self.rival_ids),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Club":
        expansion = data.get("pending_expansion")
        sponsor = data.get("stadium_sponsor")
        sponsor_offer = data.get("pending_sponsor_offer")
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            league=data.get("league", ""),
            base_rating=data.get("base_rating", 60),
            budget=data.get("budget", 0),
            played=data.get("played", 0),
            won=data.get("won", 0),
            drawn=data.get("drawn", 0),
            lost=data.get("lost", 0),
            goals_for=data.get("goals_for", 0),
            goals_against=data.get("goals_against", 0),
            points=data.get("points", 0),
            roster=list(data.get("roster", [])),
            financials=Financials.from_dict(data.get("financials") or {}),
            fan_count=data.get("fan_count", 50_000),
            fan_morale=data.get("fan_morale", 50),
            ticket_price=data.get("ticket_price", BASE_TICKET_PRICE),
            stadium_name=data.get("stadium_name", ""),
            stadium_capacity=data.get("stadium_capacity", 30_000),
            original_stadium_name=data.get("original_stadium_name", ""),
            pending_expansion=StadiumExpansion.from_dict(expansion) if expansion else None,
            stadium_sponsor=StadiumSponsor.from_dict(sponsor) if sponsor else None,
            pending_sponsor_offer=StadiumSponsor.from_dict(sponsor_offer) if sponsor_offer else None,
            last_sponsor_offer_week=data.get("last_sponsor_offer_week", 0),
            rival_ids=list(data.get("rival_ids", [])),
        )
