"""Board/state representation for 本将棋 (9x9).

局面（Position）は 81マスの配列・先手/後手の持ち駒・手番からなる
イミュータブルなデータクラス。変更メソッドはすべて新しい Position を返す。
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property

from shogi_core.pieces import HAND_PIECE_TYPES, PieceFace, PieceType
from shogi_core.types import COLS, NUM_SQUARES, RANKS, SQUARES, Side, Square


@dataclass(frozen=True)
class Piece:
    """A piece on the board.

    盤上の駒。駒の面と所有者を持つ。空きマスは None で表す。
    """

    face: PieceFace
    side: Side


@dataclass(frozen=True)
class HandPool:
    """Captured pieces available to drop (持ち駒).

    counts[i] は PieceType(i) の枚数（歩〜飛の7種）。成り状態は持たない。
    """

    counts: tuple[int, ...] = (0,) * len(HAND_PIECE_TYPES)

    def __post_init__(self) -> None:
        if len(self.counts) != len(HAND_PIECE_TYPES):
            msg = f"HandPool needs {len(HAND_PIECE_TYPES)} counts, got {len(self.counts)}"
            raise ValueError(msg)
        if any(c < 0 for c in self.counts):
            msg = f"HandPool counts must be non-negative: {self.counts}"
            raise ValueError(msg)

    @staticmethod
    def from_mapping(mapping: Mapping[PieceType, int]) -> HandPool:
        counts = [0] * len(HAND_PIECE_TYPES)
        for pt, n in mapping.items():
            counts[_hand_slot(pt)] += n
        return HandPool(tuple(counts))

    def count(self, piece_type: PieceType) -> int:
        return self.counts[_hand_slot(piece_type)]

    def add(self, piece_type: PieceType) -> HandPool:
        counts = list(self.counts)
        counts[_hand_slot(piece_type)] += 1
        return HandPool(tuple(counts))

    def remove(self, piece_type: PieceType) -> HandPool:
        """持ち駒から1枚取り除いた新しい HandPool を返す。"""
        slot = _hand_slot(piece_type)
        if self.counts[slot] == 0:
            msg = f"No {piece_type.name} in hand"
            raise ValueError(msg)
        counts = list(self.counts)
        counts[slot] -= 1
        return HandPool(tuple(counts))

    def items(self) -> list[tuple[PieceType, int]]:
        """(駒種, 枚数) のリスト。枚数 0 の駒種は含めない。"""
        return [(pt, n) for pt, n in zip(HAND_PIECE_TYPES, self.counts) if n > 0]

    @property
    def total(self) -> int:
        return sum(self.counts)


def _hand_slot(piece_type: PieceType) -> int:
    if piece_type == PieceType.KING:
        msg = "The king can never be held in hand"
        raise ValueError(msg)
    return PieceType(piece_type).value


def _initial_squares() -> tuple[Piece | None, ...]:
    """Return the standard starting layout (平手).

    Row 0 = 一段目（後手の後段）、Row 8 = 九段目（先手の後段）。
    Col 0 = ９筋。
    """
    squares: list[Piece | None] = [None] * NUM_SQUARES

    # 後段: 香桂銀金玉金銀桂香
    back_rank = [
        PieceFace.LANCE, PieceFace.KNIGHT, PieceFace.SILVER,
        PieceFace.GOLD, PieceFace.KING, PieceFace.GOLD,
        PieceFace.SILVER, PieceFace.KNIGHT, PieceFace.LANCE,
    ]
    for c, face in enumerate(back_rank):
        squares[0 * COLS + c] = Piece(face, Side.GOTE)
        squares[8 * COLS + c] = Piece(face, Side.SENTE)

    # 後手: 飛車は８二、角行は２二
    squares[1 * COLS + 1] = Piece(PieceFace.ROOK, Side.GOTE)
    squares[1 * COLS + 7] = Piece(PieceFace.BISHOP, Side.GOTE)
    # 先手: 角行は８八、飛車は２八（後手と点対称）
    squares[7 * COLS + 1] = Piece(PieceFace.BISHOP, Side.SENTE)
    squares[7 * COLS + 7] = Piece(PieceFace.ROOK, Side.SENTE)

    for c in range(COLS):
        squares[2 * COLS + c] = Piece(PieceFace.PAWN, Side.GOTE)
        squares[6 * COLS + c] = Piece(PieceFace.PAWN, Side.SENTE)

    return tuple(squares)


@dataclass(frozen=True)
class Position:
    """Immutable game position for 9x9 本将棋.

    squares:      81要素のタプル（行優先）。squares[square.index] でアクセス。
    hands:        (先手の持ち駒, 後手の持ち駒)
    side_to_move: 手番

    等価性とハッシュは上の3フィールドだけで決まる（値として振る舞う）。
    駒の位置表（locations）はインスタンスごとに遅延計算してキャッシュする。
    """

    squares: tuple[Piece | None, ...] = field(default_factory=_initial_squares)
    hands: tuple[HandPool, HandPool] = (HandPool(), HandPool())
    side_to_move: Side = Side.SENTE

    def __post_init__(self) -> None:
        if len(self.squares) != NUM_SQUARES:
            msg = f"Position needs {NUM_SQUARES} squares, got {len(self.squares)}"
            raise ValueError(msg)

    @staticmethod
    def initial() -> Position:
        """平手の初期局面（先手番）。"""
        return Position()

    def piece_at(self, square: Square) -> Piece | None:
        """マスの駒を返す。駒がなければ None。"""
        return self.squares[square.index]

    def set_piece(self, square: Square, piece: Piece | None) -> Position:
        """マスの駒を変更した新しい Position を返す。"""
        squares = list(self.squares)
        squares[square.index] = piece
        return Position(squares=tuple(squares), hands=self.hands, side_to_move=self.side_to_move)

    def hand(self, side: Side) -> HandPool:
        return self.hands[side.value]

    def _with_hand(self, side: Side, pool: HandPool) -> Position:
        hands = list(self.hands)
        hands[side.value] = pool
        return Position(squares=self.squares, hands=(hands[0], hands[1]), side_to_move=self.side_to_move)

    def add_to_hand(self, side: Side, piece: PieceFace | PieceType) -> Position:
        """Add a captured piece to ``side``'s hand, reverting promotion.

        取った駒を持ち駒に追加する。成り駒は元の駒種に戻す。
        例: 竜（成り飛）を取ったら、飛車として持ち駒に加える。
        """
        piece_type = piece.base if isinstance(piece, PieceFace) else piece
        return self._with_hand(side, self.hand(side).add(piece_type))

    def remove_from_hand(self, side: Side, piece_type: PieceType) -> Position:
        return self._with_hand(side, self.hand(side).remove(piece_type))

    def with_side_to_move(self, side: Side) -> Position:
        return Position(squares=self.squares, hands=self.hands, side_to_move=side)

    def search(self, contents: Iterable[Piece | None]) -> list[Square]:
        """指定した内容（駒 or 空き=None）のいずれかを持つマスを列挙する。

        例: 「後手の玉を探す」→ search({Piece(PieceFace.KING, Side.GOTE)})
        """
        wanted = set(contents)
        return [sq for sq, content in zip(SQUARES, self.squares) if content in wanted]

    def file_contents(self, file: int) -> tuple[Piece | None, ...]:
        """筋（縦一列）の内容を一段目から順に返す。"""
        return tuple(self.piece_at(Square(file, rank)) for rank in RANKS)

    def count_pawns(self, side: Side, file: int) -> int:
        """Count unpromoted pawns of ``side`` in ``file`` (for 二歩).

        同じ筋に自分の未成の歩が2枚並ぶ（二歩）のを防ぐために使う。
        と金は歩として数えない。
        """
        pawn = Piece(PieceFace.PAWN, side)
        return sum(1 for content in self.file_contents(file) if content == pawn)

    @cached_property
    def locations(self) -> dict[Side, dict[PieceFace, tuple[Square, ...]]]:
        """Piece-location index: side → face → squares (index order).

        盤面から毎回作り直す（差分更新はしない）。
        """
        table: dict[Side, dict[PieceFace, list[Square]]] = {side: {} for side in Side}
        for sq, content in zip(SQUARES, self.squares):
            if content is not None:
                table[content.side].setdefault(content.face, []).append(sq)
        return {
            side: {face: tuple(squares) for face, squares in faces.items()}
            for side, faces in table.items()
        }

    def king_square(self, side: Side) -> Square | None:
        """玉の位置を返す。玉がない（取られた）場合は None。"""
        squares = self.locations[side].get(PieceFace.KING, ())
        return squares[0] if squares else None
