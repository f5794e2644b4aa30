"""Move model for 本将棋.

指し手は次の3種類の閉じた集合:
  NormalMove: 盤上の駒を動かす（成り・不成を含む）
  Drop:       持ち駒を打つ（常に未成の面で置かれる）
  Terminal:   終局（終局理由と勝者）

各クラスは frozen dataclass で、等価性・ハッシュは自分のフィールドだけで決まる。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique

from shogi_core.pieces import FACE_SYMBOLS, SIDE_NAMES, PieceFace, PieceType
from shogi_core.types import Side, Square


@unique
class TerminalReason(IntEnum):
    RESIGN = 0              # 投了
    CHECKMATE = 1           # 詰
    KING_LEFT_EN_PRISE = 2  # 王手放置（相手玉を取れる）
    REPETITION = 3          # 千日手（表現のみ、検出はしない）


_REASON_NAMES = {
    TerminalReason.RESIGN: "投了",
    TerminalReason.CHECKMATE: "詰",
    TerminalReason.KING_LEFT_EN_PRISE: "王手放置",
    TerminalReason.REPETITION: "千日手",
}


@dataclass(frozen=True)
class NormalMove:
    """Move the piece showing ``face`` from ``origin`` to ``target``."""

    side: Side
    origin: Square
    target: Square
    face: PieceFace
    promote: bool = False

    @property
    def resulting_face(self) -> PieceFace:
        """移動後の面。成る場合は成った面。"""
        if self.promote and self.face.promoted is not None:
            return self.face.promoted
        return self.face

    def __str__(self) -> str:
        suffix = "成" if self.promote else "不成"
        return f"{SIDE_NAMES[self.side]}: {self.origin} -> {self.target} {FACE_SYMBOLS[self.face]} {suffix}"


@dataclass(frozen=True)
class Drop:
    """Drop a ``piece_type`` from hand onto the empty ``target``."""

    side: Side
    target: Square
    piece_type: PieceType

    def __str__(self) -> str:
        return f"{SIDE_NAMES[self.side]}: {self.target} {FACE_SYMBOLS[self.piece_type.face]} 打"


@dataclass(frozen=True)
class Terminal:
    """End of game. ``winner`` is None when the game is undecided."""

    reason: TerminalReason
    winner: Side | None = None

    def __str__(self) -> str:
        if self.winner is None:
            return "まで勝敗つかず"
        return f"まで {SIDE_NAMES[self.winner]} の勝ち [{_REASON_NAMES[self.reason]}]"


Move = NormalMove | Drop | Terminal
