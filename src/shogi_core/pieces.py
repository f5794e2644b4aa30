"""Piece model for 本将棋.

駒の種類（PieceType, 8種）と駒の面（PieceFace, 14種 = 表8 + 成り6）。

駒の動きは仮想メソッドではなく、駒の面をキーにした定数テーブルで定義する。
すべてのテーブルは全ての駒の面を網羅しており、欠けていれば import 時に失敗する。
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum, unique
from types import MappingProxyType

from shogi_core.types import Side, ranks_ahead


@unique
class PieceType(IntEnum):
    """Piece identity, independent of promotion (8種).

    持ち駒はこの単位で数える。取られた駒は成りが解除されてこの型に戻る。
    """

    PAWN = 0    # 歩
    LANCE = 1   # 香
    KNIGHT = 2  # 桂
    SILVER = 3  # 銀
    GOLD = 4    # 金
    BISHOP = 5  # 角
    ROOK = 6    # 飛
    KING = 7    # 玉

    @property
    def face(self) -> PieceFace:
        """未成の面（打つときの面）。"""
        return PieceFace(self.value)

    @property
    def promoted_face(self) -> PieceFace | None:
        return PROMOTION_MAP.get(self.face)


@unique
class PieceFace(IntEnum):
    """The face a piece shows on the board (14種).

    0〜7: 表（未成）、8〜13: 成り駒。値 0〜7 は PieceType と一致する。
    """

    PAWN = 0         # 歩
    LANCE = 1        # 香
    KNIGHT = 2       # 桂
    SILVER = 3       # 銀
    GOLD = 4         # 金
    BISHOP = 5       # 角
    ROOK = 6         # 飛
    KING = 7         # 玉
    PRO_PAWN = 8     # と
    PRO_LANCE = 9    # 杏（成香）
    PRO_KNIGHT = 10  # 圭（成桂）
    PRO_SILVER = 11  # 全（成銀）
    HORSE = 12       # 馬（成り角）
    DRAGON = 13      # 竜（成り飛）

    @property
    def base(self) -> PieceType:
        return BASE_TYPES[self]

    @property
    def promoted(self) -> PieceFace | None:
        """成った面。成れない駒は None。"""
        return PROMOTION_MAP.get(self)

    @property
    def can_promote(self) -> bool:
        return self in PROMOTION_MAP

    @property
    def is_promoted(self) -> bool:
        return self in UNPROMOTION_MAP

    @property
    def steps(self) -> tuple[tuple[int, int], ...]:
        return STEP_OFFSETS[self]

    @property
    def slides(self) -> tuple[tuple[int, int], ...]:
        return SLIDE_VECTORS[self]


# 成り変換テーブル: 未成の面 → 成った面（金・玉は成れない）
PROMOTION_MAP: Mapping[PieceFace, PieceFace] = MappingProxyType({
    PieceFace.PAWN: PieceFace.PRO_PAWN,
    PieceFace.LANCE: PieceFace.PRO_LANCE,
    PieceFace.KNIGHT: PieceFace.PRO_KNIGHT,
    PieceFace.SILVER: PieceFace.PRO_SILVER,
    PieceFace.BISHOP: PieceFace.HORSE,
    PieceFace.ROOK: PieceFace.DRAGON,
})

# 逆変換: 成った面 → 未成の面
UNPROMOTION_MAP: Mapping[PieceFace, PieceFace] = MappingProxyType(
    {v: k for k, v in PROMOTION_MAP.items()}
)

BASE_TYPES: Mapping[PieceFace, PieceType] = MappingProxyType({
    face: PieceType(UNPROMOTION_MAP.get(face, face).value) for face in PieceFace
})

# 持ち駒として使える駒種（玉以外の7種）
HAND_PIECE_TYPES: tuple[PieceType, ...] = tuple(pt for pt in PieceType if pt != PieceType.KING)

# 1マス移動のオフセット (d_rank, d_col)。先手視点で「前」は d_rank = -1。
_GOLD_STEPS = ((-1, -1), (-1, 0), (-1, 1), (0, -1), (0, 1), (1, 0))
_KING_STEPS = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)
_ORTHOGONAL = ((-1, 0), (1, 0), (0, -1), (0, 1))
_DIAGONAL = ((-1, -1), (-1, 1), (1, -1), (1, 1))

STEP_OFFSETS: Mapping[PieceFace, tuple[tuple[int, int], ...]] = MappingProxyType({
    PieceFace.PAWN: ((-1, 0),),
    PieceFace.LANCE: (),
    PieceFace.KNIGHT: ((-2, -1), (-2, 1)),  # 桂は間の駒を飛び越える
    PieceFace.SILVER: ((-1, -1), (-1, 0), (-1, 1), (1, -1), (1, 1)),
    PieceFace.GOLD: _GOLD_STEPS,
    PieceFace.BISHOP: (),
    PieceFace.ROOK: (),
    PieceFace.KING: _KING_STEPS,
    # 成り駒（と・杏・圭・全）は金と同じ動き
    PieceFace.PRO_PAWN: _GOLD_STEPS,
    PieceFace.PRO_LANCE: _GOLD_STEPS,
    PieceFace.PRO_KNIGHT: _GOLD_STEPS,
    PieceFace.PRO_SILVER: _GOLD_STEPS,
    PieceFace.HORSE: _ORTHOGONAL,   # 馬: 斜めの遠距離 + 縦横1マス
    PieceFace.DRAGON: _DIAGONAL,    # 竜: 縦横の遠距離 + 斜め1マス
})

# 遠距離移動の方向（盤端・駒に当たるまで繰り返す）
SLIDE_VECTORS: Mapping[PieceFace, tuple[tuple[int, int], ...]] = MappingProxyType({
    PieceFace.PAWN: (),
    PieceFace.LANCE: ((-1, 0),),
    PieceFace.KNIGHT: (),
    PieceFace.SILVER: (),
    PieceFace.GOLD: (),
    PieceFace.BISHOP: _DIAGONAL,
    PieceFace.ROOK: _ORTHOGONAL,
    PieceFace.KING: (),
    PieceFace.PRO_PAWN: (),
    PieceFace.PRO_LANCE: (),
    PieceFace.PRO_KNIGHT: (),
    PieceFace.PRO_SILVER: (),
    PieceFace.HORSE: _DIAGONAL,
    PieceFace.DRAGON: _ORTHOGONAL,
})

# 行き所のない駒: その面が存在するために前方に必要な段数
_MIN_RANKS_AHEAD: Mapping[PieceFace, int] = MappingProxyType({
    PieceFace.PAWN: 1,
    PieceFace.LANCE: 1,
    PieceFace.KNIGHT: 2,
})

for _table in (STEP_OFFSETS, SLIDE_VECTORS, BASE_TYPES):
    _missing = set(PieceFace) - set(_table)
    if _missing:
        msg = f"Piece table is missing faces: {sorted(_missing)}"
        raise RuntimeError(msg)


def is_placement_prohibited(face: PieceFace, side: Side, rank: int) -> bool:
    """True if ``face`` owned by ``side`` may never stand on ``rank``.

    歩・香は最奥の1段、桂は最奥の2段に置けない（打ち・不成の両方に使う）。
    この判定は駒打ちの禁則と、成りの強制（不成の手を生成しない）の両方に使われる。
    """
    return ranks_ahead(side, rank) < _MIN_RANKS_AHEAD.get(face, 0)


# 表示用の記号
FACE_SYMBOLS: Mapping[PieceFace, str] = MappingProxyType({
    PieceFace.PAWN: "歩",
    PieceFace.LANCE: "香",
    PieceFace.KNIGHT: "桂",
    PieceFace.SILVER: "銀",
    PieceFace.GOLD: "金",
    PieceFace.BISHOP: "角",
    PieceFace.ROOK: "飛",
    PieceFace.KING: "玉",
    PieceFace.PRO_PAWN: "と",
    PieceFace.PRO_LANCE: "杏",
    PieceFace.PRO_KNIGHT: "圭",
    PieceFace.PRO_SILVER: "全",
    PieceFace.HORSE: "馬",
    PieceFace.DRAGON: "竜",
})

SIDE_MARKERS: Mapping[Side, str] = MappingProxyType({
    Side.SENTE: "▲",
    Side.GOTE: "▽",
})

SIDE_NAMES: Mapping[Side, str] = MappingProxyType({
    Side.SENTE: "先手",
    Side.GOTE: "後手",
})
