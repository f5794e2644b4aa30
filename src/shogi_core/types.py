"""Coordinate model for 本将棋 (Full Shogi, 9x9).

筋（file）・段（rank）・升（square）と手番の基本型。

盤面配列のインデックスは行優先で、row 0 = 一段目（後手側の端）、
col 0 = ９筋（盤の左端）になる。将棋の筋は右から左へ数えるので、
col と筋の番号は逆向きになる点に注意。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, unique

ROWS = 9
COLS = 9
NUM_SQUARES = ROWS * COLS  # 81マス

FILES = range(1, COLS + 1)  # 筋 1..9
RANKS = range(1, ROWS + 1)  # 段 1..9


@unique
class Side(IntEnum):
    """Side identifiers.

    先手（SENTE）は九段目から一段目に向かって進む（rank が減る方向）。
    後手（GOTE）は一段目から九段目に向かって進む（rank が増える方向）。
    """

    SENTE = 0  # 先手
    GOTE = 1   # 後手

    @property
    def opponent(self) -> Side:
        """相手側を返す。"""
        return Side(1 - self.value)

    @property
    def direction(self) -> int:
        """Forward-direction sign.

        駒の移動オフセットは先手視点（前 = rank − 1）で定義されている。
        段方向の成分にこの符号を掛けると、後手の向きに反転できる。
        """
        return 1 if self == Side.SENTE else -1


@dataclass(frozen=True, order=True)
class Square:
    """A square on the board, identified by file (筋) and rank (段)."""

    file: int
    rank: int

    def __post_init__(self) -> None:
        if self.file not in FILES or self.rank not in RANKS:
            msg = f"Square out of range: file={self.file}, rank={self.rank}"
            raise ValueError(msg)

    @property
    def row(self) -> int:
        return self.rank - 1

    @property
    def col(self) -> int:
        return COLS - self.file

    @property
    def index(self) -> int:
        """配列インデックス（0..80）。row * 9 + col。"""
        return self.row * COLS + self.col

    @staticmethod
    def from_index(index: int) -> Square:
        return SQUARES[index]

    @staticmethod
    def at(file: int, rank: int) -> Square | None:
        """盤内なら Square を、盤外なら None を返す。"""
        if file in FILES and rank in RANKS:
            return SQUARES[(rank - 1) * COLS + (COLS - file)]
        return None

    def offset(self, d_rank: int, d_col: int) -> Square | None:
        """Return the square shifted by (d_rank, d_col), or None off the board.

        d_col は配列の列方向（右へ +1 = 筋番号が 1 減る）。
        """
        return Square.at(self.file - d_col, self.rank + d_rank)

    def __str__(self) -> str:
        return f"{self.file}{self.rank}"


# 81マスを配列インデックス順に並べた定数タプル
SQUARES: tuple[Square, ...] = tuple(
    Square(COLS - col, row + 1) for row in range(ROWS) for col in range(COLS)
)

# 敵陣（成ることができる3段）
_PROMOTION_ZONES: dict[Side, frozenset[int]] = {
    Side.SENTE: frozenset({1, 2, 3}),
    Side.GOTE: frozenset({7, 8, 9}),
}


def promotion_zone(side: Side) -> frozenset[int]:
    """Ranks where pieces of ``side`` may promote (the enemy camp)."""
    return _PROMOTION_ZONES[side]


def in_promotion_zone(side: Side, rank: int) -> bool:
    return rank in _PROMOTION_ZONES[side]


def ranks_ahead(side: Side, rank: int) -> int:
    """Number of ranks left in front of a piece of ``side`` standing on ``rank``.

    先手なら一段目まで、後手なら九段目までの残り段数。
    行き所のない駒（配置禁止）の判定に使う。
    """
    if side == Side.SENTE:
        return rank - 1
    return ROWS - rank
