"""Move execution for 本将棋.

apply_move() は局面と指し手から次の局面を作る純粋関数。元の局面は変化しない。
終局（Terminal）を渡された場合は次の局面を作らず None を返す。

前提条件（手番・移動元の駒・持ち駒の枚数・打つマスが空いていること）は
利用者の入力検証ではなく内部の整合性契約。違反した場合は MoveContractError で即座に止める。
"""

from __future__ import annotations

from loguru import logger

from shogi_core.board import Piece, Position
from shogi_core.errors import MoveContractError
from shogi_core.moves import Drop, Move, NormalMove, Terminal
from shogi_core.pieces import PieceType


def apply_move(position: Position, move: Move) -> Position | None:
    """Return the position after ``move``, or None when the move ends the game."""
    if isinstance(move, Terminal):
        logger.info("Game over: {}", move)
        return None
    if move.side != position.side_to_move:
        msg = f"{move} played while {position.side_to_move.name} is to move"
        raise MoveContractError(msg)
    if isinstance(move, NormalMove):
        next_position = _apply_normal_move(position, move)
    else:
        next_position = _apply_drop(position, move)
    # 手番交代
    return next_position.with_side_to_move(position.side_to_move.opponent)


def _apply_normal_move(position: Position, move: NormalMove) -> Position:
    """Apply a board move (with or without promotion)."""
    piece = position.piece_at(move.origin)
    if piece is None or piece.side != move.side or piece.face.base != move.face.base:
        msg = f"{move} does not match the piece on {move.origin}: {piece}"
        raise MoveContractError(msg)
    if move.promote and not move.face.can_promote:
        msg = f"{move} promotes a piece that cannot promote"
        raise MoveContractError(msg)

    target = position.piece_at(move.target)
    if target is not None and target.side == move.side:
        msg = f"{move} captures its own piece on {move.target}"
        raise MoveContractError(msg)

    new_position = position.set_piece(move.origin, None)

    # Capture: 成り駒は元の駒種に戻して持ち駒に加える
    # 玉を取った場合は持ち駒に加えない（その時点で終局）
    if target is not None and target.face.base != PieceType.KING:
        new_position = new_position.add_to_hand(move.side, target.face)

    return new_position.set_piece(move.target, Piece(move.resulting_face, move.side))


def _apply_drop(position: Position, move: Drop) -> Position:
    """Apply a drop move."""
    if move.piece_type == PieceType.KING:
        msg = f"{move} drops a king"
        raise MoveContractError(msg)
    if position.hand(move.side).count(move.piece_type) == 0:
        msg = f"{move} drops a piece that is not in hand"
        raise MoveContractError(msg)
    if position.piece_at(move.target) is not None:
        msg = f"{move} drops onto an occupied square"
        raise MoveContractError(msg)

    new_position = position.remove_from_hand(move.side, move.piece_type)
    return new_position.set_piece(move.target, Piece(move.piece_type.face, move.side))
