"""Core game engine: ships, boards, players and the game session."""

from .board import AttackOutcome, BoardSnapshot, Gameboard, PlacementStatus, ShipInfo
from .game import GamePhase, GameSession, GameStats, TurnResult
from .geometry import Coordinate, Orientation
from .player import AttackMode, Difficulty, Player, PlayerKind, TargetingState
from .ship import Ship, ShipClass, fleet_for_board_size

__all__ = [
    "AttackMode",
    "AttackOutcome",
    "BoardSnapshot",
    "Coordinate",
    "Difficulty",
    "GamePhase",
    "GameSession",
    "GameStats",
    "Gameboard",
    "Orientation",
    "PlacementStatus",
    "Player",
    "PlayerKind",
    "Ship",
    "ShipClass",
    "ShipInfo",
    "TargetingState",
    "TurnResult",
    "fleet_for_board_size",
]
