"""Pseudo-legal move generation for 本将棋.

generate() は局面から指し手候補を列挙する純粋関数。自玉の安全は考慮しない
（王手放置の判定は check.py が担当する）。例外は送出せず、空リストも正当な結果。

成りの強制は「不成の手を生成しない」ことで表現する:
  - 成れる駒が敵陣に入る・敵陣から出る → 成る手を生成
  - 移動先の段がその面にとって配置禁止でなければ → 不成の手も生成
"""

from __future__ import annotations

from collections.abc import Iterable

from shogi_core.board import HandPool, Position
from shogi_core.moves import Drop, Move, NormalMove
from shogi_core.pieces import PieceFace, PieceType, is_placement_prohibited
from shogi_core.types import SQUARES, Side, Square, in_promotion_zone


def destinations(position: Position, square: Square, include_own: bool = False) -> list[Square]:
    """Squares the piece on ``square`` can reach.

    1マス移動のオフセットは1回だけ、遠距離移動の方向は盤端か駒に当たるまで繰り返す。
    相手の駒のマスは含めてそこで止まり、自分の駒のマスは含めずに止まる。

    include_own=True の場合は自分の駒がいるマスも含める（利き = そのマスを守っている）。
    駒がなければ空リストを返す。
    """
    piece = position.piece_at(square)
    if piece is None:
        return []

    side = piece.side
    direction = side.direction
    result: list[Square] = []

    # Step moves
    for dr, dc in piece.face.steps:
        target = square.offset(dr * direction, dc)
        if target is None:
            continue
        occupant = position.piece_at(target)
        if occupant is not None and occupant.side == side and not include_own:
            continue
        result.append(target)

    # Slide moves
    for dr, dc in piece.face.slides:
        dr *= direction
        target = square.offset(dr, dc)
        while target is not None:
            occupant = position.piece_at(target)
            if occupant is not None:
                if occupant.side != side or include_own:
                    result.append(target)
                break  # Blocked, stop sliding
            result.append(target)
            target = target.offset(dr, dc)

    return result


def attack_map(position: Position, side: Side, include_own: bool = False) -> set[Square]:
    """All squares reached by any piece of ``side``."""
    reached: set[Square] = set()
    for square in _own_squares(position, side):
        reached.update(destinations(position, square, include_own))
    return reached


def attackers(position: Position, side: Side, target: Square) -> list[Square]:
    """Squares of ``side``'s pieces that can move to ``target``."""
    return [square for square in _own_squares(position, side) if target in destinations(position, square)]


def move_pairs(position: Position, side: Side) -> list[tuple[Square, Square]]:
    """(移動元, 移動先) の組を列挙する。成り・不成の区別はしない。"""
    return [
        (origin, target)
        for origin in _own_squares(position, side)
        for target in destinations(position, origin)
    ]


def _own_squares(position: Position, side: Side) -> list[Square]:
    """side の駒があるマスを配列インデックス順に返す。"""
    squares = [sq for group in position.locations[side].values() for sq in group]
    return sorted(squares, key=lambda sq: sq.index)


def generate(position: Position, squares: Iterable[Square] | None = None) -> list[Move]:
    """Generate pseudo-legal moves for the side to move.

    squares を指定するとそのマスだけを走査する（既定は全81マス）。
    空きマスでは持ち駒を打つ手、自分の駒があるマスでは駒を動かす手を生成する。
    """
    side = position.side_to_move
    hand = position.hand(side)
    moves: list[Move] = []

    for square in SQUARES if squares is None else squares:
        content = position.piece_at(square)
        if content is None:
            _generate_drops(position, side, hand, square, moves)
        elif content.side == side:
            for target in destinations(position, square):
                _add_move_with_promotion(moves, side, square, target, content.face)

    return moves


def _add_move_with_promotion(
    moves: list[Move],
    side: Side,
    origin: Square,
    target: Square,
    face: PieceFace,
) -> None:
    """Add a move, possibly with promotion variants."""
    in_zone = in_promotion_zone(side, origin.rank) or in_promotion_zone(side, target.rank)
    if face.can_promote and in_zone:
        moves.append(NormalMove(side, origin, target, face, promote=True))
    # 行き所のない駒になる場合は不成を生成しない（成りの強制）
    if not is_placement_prohibited(face, side, target.rank):
        moves.append(NormalMove(side, origin, target, face, promote=False))


def _generate_drops(
    position: Position,
    side: Side,
    hand: HandPool,
    square: Square,
    moves: list[Move],
) -> None:
    """Generate drops onto an empty square with nifu (二歩) and dead-piece restrictions."""
    for piece_type, _count in hand.items():
        # 行き所のない駒: 打った後に動けないマスには打てない
        if is_placement_prohibited(piece_type.face, side, square.rank):
            continue
        # 二歩: 自分の未成の歩がある筋には歩を打てない
        if piece_type == PieceType.PAWN and position.count_pawns(side, square.file) > 0:
            continue
        moves.append(Drop(side, square, piece_type))
