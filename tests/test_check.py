"""Tests for check, legality and checkmate detection."""

from __future__ import annotations

from shogi_core.board import HandPool, Piece, Position
from shogi_core.check import (
    candidate_moves,
    checking_moves,
    is_checkmate,
    is_in_check,
    king_capture_moves,
    legal_moves,
)
from shogi_core.moves import NormalMove, Terminal, TerminalReason
from shogi_core.pieces import PieceFace
from shogi_core.types import NUM_SQUARES, Side, Square


def _make_position(
    pieces: list[tuple[int, int, PieceFace, Side]],
    side_to_move: Side = Side.SENTE,
) -> Position:
    squares: list[Piece | None] = [None] * NUM_SQUARES
    for file, rank, face, side in pieces:
        squares[Square(file, rank).index] = Piece(face, side)
    return Position(squares=tuple(squares), hands=(HandPool(), HandPool()), side_to_move=side_to_move)


class TestKingCapture:
    def test_terminal_when_king_reachable(self) -> None:
        position = _make_position(
            [
                (9, 9, PieceFace.KING, Side.SENTE),
                (5, 1, PieceFace.KING, Side.GOTE),
                (5, 7, PieceFace.ROOK, Side.SENTE),
            ]
        )
        expected = Terminal(TerminalReason.KING_LEFT_EN_PRISE, Side.SENTE)
        assert king_capture_moves(position, Side.SENTE) == [expected]
        assert expected in candidate_moves(position)

    def test_no_terminal_when_blocked(self) -> None:
        position = _make_position(
            [
                (9, 9, PieceFace.KING, Side.SENTE),
                (5, 1, PieceFace.KING, Side.GOTE),
                (5, 7, PieceFace.ROOK, Side.SENTE),
                (5, 3, PieceFace.PAWN, Side.GOTE),
            ]
        )
        assert king_capture_moves(position, Side.SENTE) == []
        assert not any(isinstance(m, Terminal) for m in candidate_moves(position))

    def test_missing_king(self) -> None:
        position = _make_position([(9, 9, PieceFace.KING, Side.SENTE)])
        assert king_capture_moves(position, Side.SENTE) == []


class TestInCheck:
    def test_initial_not_in_check(self) -> None:
        assert not is_in_check(Position(), Side.SENTE)
        assert not is_in_check(Position(), Side.GOTE)

    def test_rook_check(self) -> None:
        position = _make_position(
            [
                (5, 9, PieceFace.KING, Side.SENTE),
                (1, 1, PieceFace.KING, Side.GOTE),
                (5, 2, PieceFace.ROOK, Side.GOTE),
            ]
        )
        assert is_in_check(position, Side.SENTE)
        assert not is_in_check(position, Side.GOTE)


class TestLegalMoves:
    def test_initial_30(self) -> None:
        assert len(legal_moves(Position())) == 30

    def test_pinned_gold(self) -> None:
        """ピンされた金は筋から外れられない。"""
        position = _make_position(
            [
                (5, 9, PieceFace.KING, Side.SENTE),
                (5, 8, PieceFace.GOLD, Side.SENTE),
                (5, 1, PieceFace.ROOK, Side.GOTE),
                (1, 1, PieceFace.KING, Side.GOTE),
            ]
        )
        gold_targets = {
            m.target
            for m in legal_moves(position)
            if isinstance(m, NormalMove) and m.origin == Square(5, 8)
        }
        assert gold_targets == {Square(5, 7)}

    def test_must_escape_check(self) -> None:
        position = _make_position(
            [
                (5, 9, PieceFace.KING, Side.SENTE),
                (1, 1, PieceFace.KING, Side.GOTE),
                (5, 5, PieceFace.ROOK, Side.GOTE),
                (9, 7, PieceFace.PAWN, Side.SENTE),
            ]
        )
        moves = legal_moves(position)
        assert moves
        # 王手を放置する歩の手は非合法
        assert not any(isinstance(m, NormalMove) and m.origin == Square(9, 7) for m in moves)
        for move in moves:
            assert isinstance(move, NormalMove)
            assert move.target.file != 5

    def test_king_cannot_walk_into_attack(self) -> None:
        position = _make_position(
            [
                (5, 9, PieceFace.KING, Side.SENTE),
                (1, 1, PieceFace.KING, Side.GOTE),
                (4, 1, PieceFace.ROOK, Side.GOTE),
            ]
        )
        targets = {m.target for m in legal_moves(position) if isinstance(m, NormalMove)}
        assert Square(4, 8) not in targets
        assert Square(4, 9) not in targets
        assert Square(6, 8) in targets

    def test_king_capture_is_listed(self) -> None:
        """相手玉を取れる局面でも合法手を列挙でき、玉を取る手を含む。"""
        position = _make_position(
            [
                (9, 9, PieceFace.KING, Side.SENTE),
                (5, 1, PieceFace.KING, Side.GOTE),
                (5, 7, PieceFace.ROOK, Side.SENTE),
            ]
        )
        moves = legal_moves(position)
        assert NormalMove(Side.SENTE, Square(5, 7), Square(5, 1), PieceFace.ROOK) in moves
        assert not any(isinstance(m, Terminal) for m in moves)


class TestCheckingMoves:
    def test_rook_checks(self) -> None:
        position = _make_position(
            [
                (9, 9, PieceFace.KING, Side.SENTE),
                (5, 1, PieceFace.KING, Side.GOTE),
                (1, 5, PieceFace.ROOK, Side.SENTE),
            ]
        )
        checks = checking_moves(position)
        assert NormalMove(Side.SENTE, Square(1, 5), Square(5, 5), PieceFace.ROOK) in checks
        assert NormalMove(Side.SENTE, Square(1, 5), Square(1, 1), PieceFace.ROOK, promote=True) in checks
        assert NormalMove(Side.SENTE, Square(1, 5), Square(1, 6), PieceFace.ROOK) not in checks

    def test_initial_has_none(self) -> None:
        assert checking_moves(Position()) == []


class TestCheckmate:
    @staticmethod
    def _corner(with_support: bool) -> Position:
        """１九の玉に１八の金で王手。１七の歩が金を支えていれば詰み。"""
        pieces = [
            (1, 9, PieceFace.KING, Side.SENTE),
            (9, 1, PieceFace.KING, Side.GOTE),
            (1, 8, PieceFace.GOLD, Side.GOTE),
        ]
        if with_support:
            pieces.append((1, 7, PieceFace.PAWN, Side.GOTE))
        return _make_position(pieces)

    def test_supported_gold_mates(self) -> None:
        position = self._corner(with_support=True)
        assert is_in_check(position, Side.SENTE)
        assert is_checkmate(position)

    def test_unsupported_gold_can_be_captured(self) -> None:
        position = self._corner(with_support=False)
        assert is_in_check(position, Side.SENTE)
        assert not is_checkmate(position)

    def test_own_piece_blocks_escape(self) -> None:
        """１九の玉に１八の歩で王手（１七の金が支える）。２九が自分の金で塞がれていれば詰み。"""
        pieces = [
            (1, 9, PieceFace.KING, Side.SENTE),
            (9, 1, PieceFace.KING, Side.GOTE),
            (1, 8, PieceFace.PAWN, Side.GOTE),
            (1, 7, PieceFace.GOLD, Side.GOTE),
        ]
        assert not is_checkmate(_make_position(pieces))  # ２九へ逃げられる
        blocked = _make_position(pieces + [(2, 9, PieceFace.GOLD, Side.SENTE)])
        assert is_in_check(blocked, Side.SENTE)
        assert is_checkmate(blocked)

    def test_initial_not_checkmate(self) -> None:
        assert not is_checkmate(Position())

    def test_no_king(self) -> None:
        position = _make_position([(9, 1, PieceFace.KING, Side.GOTE)])
        assert not is_checkmate(position)

    def test_only_king_mobility_counts(self) -> None:
        """逃げ場がなければ、王手駒を取れる場合でも詰みと判定される（既知の制限）。"""
        position = self._corner(with_support=True)
        # 先手の飛車が１八の金を取れるが、判定は玉の逃げ場だけを見る
        position = position.set_piece(Square(5, 8), Piece(PieceFace.ROOK, Side.SENTE))
        assert is_checkmate(position)
        assert any(
            isinstance(m, NormalMove) and m.target == Square(1, 8) and m.origin == Square(5, 8)
            for m in legal_moves(position)
        )
