"""Check / checkmate detection for 本将棋.

王手の判定は「相手玉のマスに移動できる駒があるか」で行う。
相手玉を取れる局面では、取れる側の勝ち（王手放置）を表す Terminal を合成する。

詰みの判定（is_checkmate）は玉の逃げ場だけを見る簡易判定:
  (a) 玉が動けるマス（自分の駒のマスを除く）
  (b) 相手の駒の利きがあるマス（相手自身の駒で守られたマスを含む）
  (a) − (b) が空なら詰み。
王手している駒を取る手・合駒（間に駒を動かす/打つ）は考慮しないため、
実際には逃れられる局面でも詰みと判定することがある（既知の制限）。
"""

from __future__ import annotations

from shogi_core.board import Position
from shogi_core.executor import apply_move
from shogi_core.movegen import attack_map, attackers, destinations, generate
from shogi_core.moves import Move, Terminal, TerminalReason
from shogi_core.types import Side


def king_capture_moves(position: Position, side: Side) -> list[Move]:
    """Terminal move for ``side`` if it can capture the opposing king.

    相手玉に駒が届くなら [Terminal(王手放置, 勝者=side)]、届かなければ []。
    相手玉がいない場合も [] を返す。
    """
    king = position.king_square(side.opponent)
    if king is not None and attackers(position, side, king):
        return [Terminal(TerminalReason.KING_LEFT_EN_PRISE, winner=side)]
    return []


def candidate_moves(position: Position) -> list[Move]:
    """generate() plus the king-capture Terminal for the side to move."""
    return generate(position) + king_capture_moves(position, position.side_to_move)


def is_in_check(position: Position, side: Side) -> bool:
    """True if the opponent of ``side`` can reach ``side``'s king."""
    return bool(king_capture_moves(position, side.opponent))


def legal_moves(position: Position) -> list[Move]:
    """Generate moves that do not leave the mover's king capturable.

    王手放置禁止: 指した後の局面で相手が自玉を取れる手を除く。
    打ち歩詰めなどの禁則は扱わない。
    """
    mover = position.side_to_move
    legal: list[Move] = []
    for move in generate(position):
        next_position = apply_move(position, move)
        if next_position is not None and not king_capture_moves(next_position, mover.opponent):
            legal.append(move)
    return legal


def checking_moves(position: Position) -> list[Move]:
    """Moves after which the mover threatens the opposing king (王手探索)."""
    mover = position.side_to_move
    result: list[Move] = []
    for move in generate(position):
        next_position = apply_move(position, move)
        if next_position is not None and king_capture_moves(next_position, mover):
            result.append(move)
    return result


def is_checkmate(position: Position) -> bool:
    """King-mobility checkmate test for the side to move.

    玉がいない場合は False。判定の制限についてはモジュールの docstring を参照。
    """
    side = position.side_to_move
    king = position.king_square(side)
    if king is None:
        return False
    escapes = set(destinations(position, king, include_own=False))
    covered = attack_map(position, side.opponent, include_own=True)
    return not (escapes - covered)
