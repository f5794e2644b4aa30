"""本将棋 (Full Shogi, 9x9) rules engine."""

from shogi_core.board import HandPool, Piece, Position
from shogi_core.check import is_checkmate, is_in_check, legal_moves
from shogi_core.executor import apply_move
from shogi_core.game import ShogiGame
from shogi_core.movegen import generate
from shogi_core.moves import Drop, Move, NormalMove, Terminal, TerminalReason
from shogi_core.pieces import PieceFace, PieceType
from shogi_core.types import Side, Square

__all__ = [
    "Drop",
    "HandPool",
    "Move",
    "NormalMove",
    "Piece",
    "PieceFace",
    "PieceType",
    "Position",
    "ShogiGame",
    "Side",
    "Square",
    "Terminal",
    "TerminalReason",
    "apply_move",
    "generate",
    "is_checkmate",
    "is_in_check",
    "legal_moves",
]
