"""
Procedural generation of clubs, squads and youth-academy players.
Stands in for the content generator the engine consumes.
"""
from .generate import generate_league, generate_youth_player, generate_squad, scouting_report

__all__ = ["generate_league", "generate_youth_player", "generate_squad", "scouting_report"]
