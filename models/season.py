"""
Season state container and the records that flow out of every engine step.

SeasonState owns all clubs and players through id lookup tables; a club's
roster is a list of player ids, so moving a player is a table update.
TickResult is the single return shape of every engine component.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict, Any, List, Optional

from models.club import Club
from models.constants import SEVERITY_INFO
from models.fixture import Fixture
from models.manager import Manager
from models.player import Player


@dataclass
class Notification:
    """A discrete {message, severity} event for the human-facing layer."""

    message: str = ""
    severity: str = SEVERITY_INFO  # success | info | warning | error
    player_id: str | None = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"message": self.message, "severity": self.severity}
        if self.player_id is not None:
            d["player_id"] = self.player_id
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Notification":
        return cls(
            message=data.get("message", ""),
            severity=data.get("severity", SEVERITY_INFO),
            player_id=data.get("player_id"),
        )


@dataclass
class TransferRecord:
    """One line of the append-only transfer history."""

    id: str = ""
    player_name: str = ""
    from_club: str = ""
    to_club: str = ""
    fee: int = 0
    type: str = "TRANSFER"  # TRANSFER | LOAN | YOUTH | FREE
    season: str = ""
    week: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "player_name": self.player_name,
            "from_club": self.from_club,
            "to_club": self.to_club,
            "fee": self.fee,
            "type": self.type,
            "season": self.season,
            "week": self.week,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransferRecord":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class MailItem:
    id: str = ""
    week: int = 0
    season: str = ""
    subject: str = ""
    body: str = ""
    severity: str = SEVERITY_INFO
    read: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "week": self.week,
            "season": self.season,
            "subject": self.subject,
            "body": self.body,
            "severity": self.severity,
            "read": self.read,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MailItem":
        return cls(**{k: data.get(k, getattr(cls(), k)) for k in cls.__dataclass_fields__})


@dataclass
class SeasonState:
    """Everything a save contains. Components never mutate a state they are given."""

    season_label: str = "2025/26"
    current_week: int = 1
    user_club_id: str = ""
    clubs: Dict[str, Club] = field(default_factory=dict)
    players: Dict[str, Player] = field(default_factory=dict)
    fixtures: List[Fixture] = field(default_factory=list)
    transfer_history: List[TransferRecord] = field(default_factory=list)
    favorites: List[str] = field(default_factory=list)  # player ids
    mailbox: List[MailItem] = field(default_factory=list)
    career: Manager = field(default_factory=Manager)
    retirement_checked: bool = False
    awaiting_retirement_decision: bool = False
    season_complete: bool = False
    season_summary: Optional[Dict[str, Any]] = None
    id_counter: int = 0

    def clone(self) -> "SeasonState":
        return copy.deepcopy(self)

    def new_id(self, prefix: str) -> str:
        """Deterministic ids so seeded runs reproduce exactly."""
        self.id_counter += 1
        return f"{prefix}-{self.id_counter}"

    @property
    def total_weeks(self) -> int:
        """Season length is the highest fixture week."""
        return max((f.week for f in self.fixtures), default=0)

    @property
    def user_club(self) -> Club:
        return self.clubs[self.user_club_id]

    def cpu_club_ids(self) -> List[str]:
        return [cid for cid in self.clubs if cid != self.user_club_id]

    def roster_players(self, club_id: str) -> List[Player]:
        club = self.clubs[club_id]
        return [self.players[pid] for pid in club.roster if pid in self.players]

    def owner_of(self, player_id: str) -> str | None:
        for club in self.clubs.values():
            if player_id in club.roster:
                return club.id
        return None

    def league_club_ids(self, league: str) -> List[str]:
        return [c.id for c in self.clubs.values() if c.league == league]

    def fixtures_for_week(self, week: int) -> List[Fixture]:
        return [f for f in self.fixtures if f.week == week]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "season_label": self.season_label,
            "current_week": self.current_week,
            "user_club_id": self.user_club_id,
            "clubs": [c.to_dict() for c in self.clubs.values()],
            "players": [p.to_dict() for p in self.players.values()],
            "fixtures": [f.to_dict() for f in self.fixtures],
            "transfer_history": [t.to_dict() for t in self.transfer_history],
            "favorites": list(self.favorites),
            "mailbox": [m.to_dict() for m in self.mailbox],
            "career": self.career.to_dict(),
            "retirement_checked": self.retirement_checked,
            "awaiting_retirement_decision": self.awaiting_retirement_decision,
            "season_complete": self.season_complete,
            "season_summary": self.season_summary,
            "id_counter": self.id_counter,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SeasonState":
        clubs = [Club.from_dict(c) for c in data.get("clubs", [])]
        players = [Player.from_dict(p) for p in data.get("players", [])]
        return cls(
            season_label=data.get("season_label", "2025/26"),
            current_week=data.get("current_week", 1),
            user_club_id=data.get("user_club_id", ""),
            clubs={c.id: c for c in clubs},
            players={p.id: p for p in players},
            fixtures=[Fixture.from_dict(f) for f in data.get("fixtures", [])],
            transfer_history=[TransferRecord.from_dict(t) for t in data.get("transfer_history", [])],
            favorites=list(data.get("favorites", [])),
            mailbox=[MailItem.from_dict(m) for m in data.get("mailbox", [])],
            career=Manager.from_dict(data.get("career") or {}),
            retirement_checked=data.get("retirement_checked", False),
            awaiting_retirement_decision=data.get("awaiting_retirement_decision", False),
            season_complete=data.get("season_complete", False),
            season_summary=data.get("season_summary"),
            id_counter=data.get("id_counter", 0),
        )


@dataclass
class TickResult:
    """New state plus what happened while producing it."""

    state: SeasonState
    events: List[Notification] = field(default_factory=list)
    transfers: List[TransferRecord] = field(default_factory=list)
    ok: bool = True

    def notify(self, message: str, severity: str = SEVERITY_INFO, player_id: str | None = None) -> None:
        self.events.append(Notification(message=message, severity=severity, player_id=player_id))

    def extend(self, other: "TickResult") -> None:
        """Fold a later step's result into this one; the later state wins."""
        self.state = other.state
        self.events.extend(other.events)
        self.transfers.extend(other.transfers)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "events": [e.to_dict() for e in self.events],
            "transfers": [t.to_dict() for t in self.transfers],
        }
