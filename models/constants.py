"""
League structure and tuning constants for the season engine.
Squad limits, transfer windows, negotiation and CPU transfer tuning, awards.
"""
from typing import Dict, List, Tuple

# Squad limits: floor on total size, cap on players aged 21 and over
MIN_SQUAD_SIZE = 20
MAX_SENIOR_PLAYERS = 25
SENIOR_AGE = 21
# A CPU club only sells while it has more than this many players
MIN_SELLER_SQUAD = 18

POSITIONS = [
    "GK",
    "LB", "CB", "RB", "LWB", "RWB",
    "CDM", "CM", "CAM", "LM", "RM",
    "LW", "RW", "CF", "ST",
]

POSITIONS_GOALKEEPER = ["GK"]
POSITIONS_DEFENSE = ["LB", "CB", "RB", "LWB", "RWB"]
POSITIONS_MIDFIELD = ["CDM", "CM", "CAM", "LM", "RM"]
POSITIONS_ATTACK = ["LW", "RW", "CF", "ST"]

# Generated squads: how many players per position line
SQUAD_TEMPLATE: Dict[str, int] = {
    "GK": 3, "LB": 2, "CB": 4, "RB": 2,
    "CDM": 2, "CM": 3, "CAM": 2, "LW": 2, "RW": 2, "ST": 3,
}

# Transfer windows: summer is the first 4 weeks, winter is 2 weeks at mid-season
SUMMER_WINDOW_WEEKS = 4
WINTER_WINDOW_WEEKS = 2

# Offer types and statuses
OFFER_TRANSFER = "TRANSFER"
OFFER_LOAN = "LOAN"
OFFER_TYPES = [OFFER_TRANSFER, OFFER_LOAN]

STATUS_PENDING = "PENDING"
STATUS_NEGOTIATING = "NEGOTIATING"
STATUS_REJECTED = "REJECTED"
OFFER_STATUSES = [STATUS_PENDING, STATUS_NEGOTIATING, STATUS_REJECTED]

ACTOR_USER = "USER"
ACTOR_AI = "AI"

# Transfer history record kinds
RECORD_TRANSFER = "TRANSFER"
RECORD_LOAN = "LOAN"
RECORD_YOUTH = "YOUTH"
RECORD_FREE = "FREE"

# Negotiation tuning
MAX_NEGOTIATION_ROUNDS = 3
AI_RESPONSE_CHANCE = 0.7
AI_ACCEPT_RATIO = 0.95
AI_COUNTER_MIN = 0.9  # AI counter = anchor * U(0.9, 1.0)
OFFER_EXPIRY_WEEKS = 2

# Offers for listed players
MAX_INTERESTED_CLUBS = 3
OFFER_BUDGET_RATIO = 0.5  # club must hold more than this share of market value
TRANSFER_OFFER_BASE = 0.7
TRANSFER_OFFER_BASE_YOUTH = 0.4
TRANSFER_OFFER_SPREAD = 0.3
LOAN_OFFER_RATIO = 0.1

# CPU transfer AI tuning
CPU_BUDGET_REFERENCE = 500_000_000
CPU_BASE_ATTEMPT = 0.3
CPU_ATTEMPT_BUDGET_WEIGHT = 0.4
CPU_TOP_SHARE_BASE = 0.3
CPU_TOP_SHARE_BUDGET_WEIGHT = 0.2
CPU_PREMIUM = 1.2
CPU_PREMIUM_YOUTH = 0.8
CPU_PREMIUM_BUDGET_WEIGHT = 0.5
CPU_MAX_SPEND_SHARE = 0.5

# Injuries and illness (weekly chances)
INJURY_BASE_CHANCE = 0.03
INJURY_AGE_BONUS = 0.02  # applied over 30 and again over 35
ILLNESS_CHANCE = 0.02

INJURY_TYPES: List[Tuple[str, str, int, int]] = [
    # (type, severity, min weeks, max weeks)
    ("Hamstring strain", "Minor", 1, 3),
    ("Ankle sprain", "Minor", 1, 3),
    ("Groin strain", "Moderate", 2, 5),
    ("Calf tear", "Moderate", 3, 6),
    ("Knee ligament damage", "Severe", 6, 12),
    ("Broken metatarsal", "Severe", 8, 14),
]
ILLNESS_TYPES: List[Tuple[str, str, int, int]] = [
    ("Flu", "Minor", 1, 2),
    ("Stomach bug", "Minor", 1, 1),
    ("Chest infection", "Moderate", 2, 3),
]

# Market value
MIN_MARKET_VALUE = 50_000
WAGE_VALUE_RATIO = 0.0025
MIN_WAGE = 500

# Season rewards
PRIZE_BASE = 5_000_000
PRIZE_PER_PLACE = 5_000_000
UNBEATEN_ACHIEVEMENT_RUN = 10
WIN_STREAK_ACHIEVEMENT_RUN = 5

# Fans and stadium
MIN_FANS = 10_000
MAX_FANS = 5_000_000
BASE_TICKET_PRICE = 50
SPONSOR_OFFER_MIN_GAP = 6

# Manager offer prestige levels
PRESTIGE_LOW = "LOW"
PRESTIGE_MEDIUM = "MEDIUM"
PRESTIGE_HIGH = "HIGH"
PRESTIGE_ELITE = "ELITE"

SEVERITY_SUCCESS = "success"
SEVERITY_INFO = "info"
SEVERITY_WARNING = "warning"
SEVERITY_ERROR = "error"

CLUB_NAME_PREFIXES = [
    "Athletic", "Real", "Sporting", "Racing", "Dynamo", "Union", "United",
    "City", "Rovers", "Wanderers", "Olympic", "Inter",
]
CITY_NAMES = [
    "Ashford", "Bramley", "Carlow", "Dunmore", "Eastleigh", "Fairhaven",
    "Glenwood", "Harrowgate", "Ivybridge", "Kingsport", "Lakeside", "Millbrook",
    "Northam", "Oakridge", "Portwell", "Queensbury", "Redcliffe", "Stonebridge",
    "Thornbury", "Westmere", "Yarrow", "Zellford",
]
FIRST_NAMES = [
    "Adam", "Bruno", "Carlos", "Daniel", "Emil", "Felix", "Gabriel", "Hugo",
    "Ivan", "Jonas", "Kai", "Luca", "Mateo", "Nico", "Oscar", "Pablo",
    "Rafael", "Samuel", "Theo", "Victor", "Yusuf", "Zane",
]
LAST_NAMES = [
    "Almeida", "Berg", "Costa", "Dembele", "Eriksen", "Fischer", "Garcia",
    "Hansen", "Ito", "Jensen", "Kovac", "Lindqvist", "Moreau", "Novak",
    "Okafor", "Petrov", "Quinn", "Rossi", "Silva", "Tanaka", "Ulloa",
    "Vidal", "Walker", "Yilmaz", "Zielinski",
]
