"""
Data models for the season engine.
"""
from .club import Club, Financials, StadiumExpansion, StadiumSponsor
from .fixture import Fixture, GoalEvent, CardEvent, MatchPerformance
from .manager import Manager, Achievement, CareerSeason, ManagerOffer, ACHIEVEMENTS
from .offer import TransferOffer, NegotiationEntry, PendingTransfer
from .player import Player, Contract, Condition, RetirementStatus, SeasonStats
from .season import SeasonState, TickResult, Notification, TransferRecord, MailItem

__all__ = [
    "Club",
    "Financials",
    "StadiumExpansion",
    "StadiumSponsor",
    "Fixture",
    "GoalEvent",
    "CardEvent",
    "MatchPerformance",
    "Manager",
    "Achievement",
    "CareerSeason",
    "ManagerOffer",
    "ACHIEVEMENTS",
    "TransferOffer",
    "NegotiationEntry",
    "PendingTransfer",
    "Player",
    "Contract",
    "Condition",
    "RetirementStatus",
    "SeasonStats",
    "SeasonState",
    "TickResult",
    "Notification",
    "TransferRecord",
    "MailItem",
]
