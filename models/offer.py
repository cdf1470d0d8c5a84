"""
Transfer offer DTOs.
An offer is owned by the player it targets; acceptance deletes it rather than flagging it.
"""
from dataclasses import dataclass, field
from typing import Dict, Any, List

from models.constants import (
    OFFER_TYPES,
    OFFER_TRANSFER,
    OFFER_STATUSES,
    STATUS_PENDING,
    STATUS_REJECTED,
    MAX_NEGOTIATION_ROUNDS,
)


@dataclass
class NegotiationEntry:
    """One step of a negotiation: who moved, how much, and why."""

    round: int = 0
    actor: str = ""  # USER | AI
    amount: int = 0
    timestamp: int = 0  # tick counter (season week) at which the step happened
    note: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "round": self.round,
            "actor": self.actor,
            "amount": self.amount,
            "timestamp": self.timestamp,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NegotiationEntry":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class TransferOffer:
    """A CPU club's bid for one of the human club's players."""

    id: str = ""
    club_id: str = ""
    club_name: str = ""
    player_id: str = ""
    type: str = OFFER_TRANSFER
    fee: int = 0
    original_fee: int = 0
    anchor_fee: int = 0  # last fee the bidding club itself stood behind
    status: str = STATUS_PENDING
    round: int = 0
    last_counter_offer: int | None = None
    waiting_for_response: bool = False
    expiry_week: int = 0
    history: List[NegotiationEntry] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.type not in OFFER_TYPES:
            raise ValueError(f"type must be one of {OFFER_TYPES}, got {self.type!r}")
        if self.status not in OFFER_STATUSES:
            raise ValueError(f"status must be one of {OFFER_STATUSES}, got {self.status!r}")
        if not 0 <= self.round <= MAX_NEGOTIATION_ROUNDS:
            raise ValueError(f"round must be between 0 and {MAX_NEGOTIATION_ROUNDS}, got {self.round}")

    @property
    def is_open(self) -> bool:
        return self.status != STATUS_REJECTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "club_id": self.club_id,
            "club_name": self.club_name,
            "player_id": self.player_id,
            "type": self.type,
            "fee": self.fee,
            "original_fee": self.original_fee,
            "anchor_fee": self.anchor_fee,
            "status": self.status,
            "round": self.round,
            "last_counter_offer": self.last_counter_offer,
            "waiting_for_response": self.waiting_for_response,
            "expiry_week": self.expiry_week,
            "history": [h.to_dict() for h in self.history],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransferOffer":
        return cls(
            id=data.get("id", ""),
            club_id=data.get("club_id", ""),
            club_name=data.get("club_name", ""),
            player_id=data.get("player_id", ""),
            type=data.get("type", OFFER_TRANSFER),
            fee=data.get("fee", 0),
            original_fee=data.get("original_fee", 0),
            anchor_fee=data.get("anchor_fee", 0),
            status=data.get("status", STATUS_PENDING),
            round=data.get("round", 0),
            last_counter_offer=data.get("last_counter_offer"),
            waiting_for_response=data.get("waiting_for_response", False),
            expiry_week=data.get("expiry_week", 0),
            history=[NegotiationEntry.from_dict(h) for h in data.get("history", [])],
        )


@dataclass
class PendingTransfer:
    """A deal agreed while the window was closed; executes at transfer_week."""

    target_club_id: str = ""
    target_club_name: str = ""
    transfer_week: int = 0
    fee: int = 0
    type: str = OFFER_TRANSFER
    wage: int | None = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_club_id": self.target_club_id,
            "target_club_name": self.target_club_name,
            "transfer_week": self.transfer_week,
            "fee": self.fee,
            "type": self.type,
            "wage": self.wage,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PendingTransfer":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})
