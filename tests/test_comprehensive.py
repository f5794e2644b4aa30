"""Comprehensive test suite for 本将棋 (Full Shogi, 9x9).

Coverage map:
  - Individual piece movement: Pawn, Lance, Knight, Silver, Gold,
    Bishop, Rook, King, Horse (成り角), Dragon (成り飛)
  - Gote orientation: every canonical offset is mirrored
  - Full game: random legal play, material conservation

Board coordinate convention (from types.py):
  Square(file, rank), file 1..9 right to left, rank 1..9 top to bottom
  SENTE moves forward = decreasing rank (rank 9 → rank 1)
  GOTE  moves forward = increasing rank (rank 1 → rank 9)

Helper: _make_position(pieces, side_to_move=Side.SENTE)
  pieces: list of (file, rank, PieceFace, Side)
  Returns a Position with exactly those pieces and empty hands.
"""

from __future__ import annotations

import random

from shogi_core.board import HandPool, Piece, Position
from shogi_core.check import legal_moves
from shogi_core.game import ShogiGame
from shogi_core.moves import NormalMove
from shogi_core.pieces import PieceFace
from shogi_core.types import NUM_SQUARES, Side, Square

# ---------------------------------------------------------------------------
# Shared helper
# ---------------------------------------------------------------------------


def _make_position(
    pieces: list[tuple[int, int, PieceFace, Side]],
    side_to_move: Side = Side.SENTE,
) -> Position:
    """Build a Position from an explicit piece list.

    Both kings are placed in far corners (９九 for Sente, １一 for Gote)
    unless the caller supplies its own king.
    """
    squares: list[Piece | None] = [None] * NUM_SQUARES
    if not any(face == PieceFace.KING for _, _, face, _ in pieces):
        pieces = pieces + [
            (9, 9, PieceFace.KING, Side.SENTE),
            (1, 1, PieceFace.KING, Side.GOTE),
        ]
    for file, rank, face, side in pieces:
        squares[Square(file, rank).index] = Piece(face, side)
    return Position(squares=tuple(squares), hands=(HandPool(), HandPool()), side_to_move=side_to_move)


def _destinations_from(position: Position, origin: Square) -> set[Square]:
    """Targets of legal moves that start on ``origin``."""
    return {
        m.target
        for m in legal_moves(position)
        if isinstance(m, NormalMove) and m.origin == origin
    }


# ===========================================================================
# 1. Individual piece movement
# ===========================================================================


class TestPawnMovement:
    """歩兵（歩）: 1マス前方のみ。"""

    def test_sente_pawn_moves_one_forward(self) -> None:
        position = _make_position([(5, 5, PieceFace.PAWN, Side.SENTE)])
        assert _destinations_from(position, Square(5, 5)) == {Square(5, 4)}

    def test_pawn_blocked_by_own_piece(self) -> None:
        position = _make_position(
            [
                (5, 5, PieceFace.PAWN, Side.SENTE),
                (5, 4, PieceFace.GOLD, Side.SENTE),  # Blocking
            ]
        )
        assert _destinations_from(position, Square(5, 5)) == set()


class TestLanceMovement:
    """香車: 前方に何マスでもスライド。後方・横は不可。"""

    def test_lance_slides_forward_on_open_file(self) -> None:
        position = _make_position([(8, 9, PieceFace.LANCE, Side.SENTE)])
        assert _destinations_from(position, Square(8, 9)) == {Square(8, r) for r in range(1, 9)}

    def test_lance_can_capture_forward_enemy(self) -> None:
        position = _make_position(
            [
                (8, 9, PieceFace.LANCE, Side.SENTE),
                (8, 5, PieceFace.PAWN, Side.GOTE),
            ]
        )
        dests = _destinations_from(position, Square(8, 9))
        assert Square(8, 5) in dests  # can capture
        assert Square(8, 4) not in dests  # cannot go past enemy


class TestKnightMovement:
    """桂馬: 前2マス+左右1マスの2点のみ。間を飛び越える。"""

    def test_knight_reaches_exactly_two_squares(self) -> None:
        position = _make_position([(5, 5, PieceFace.KNIGHT, Side.SENTE)])
        assert _destinations_from(position, Square(5, 5)) == {Square(4, 3), Square(6, 3)}

    def test_knight_on_edge(self) -> None:
        position = _make_position([(1, 5, PieceFace.KNIGHT, Side.SENTE)])
        assert _destinations_from(position, Square(1, 5)) == {Square(2, 3)}


class TestSilverMovement:
    """銀将: 前3方向と斜め後ろ2方向。"""

    def test_silver_has_five_directions(self) -> None:
        position = _make_position([(5, 5, PieceFace.SILVER, Side.SENTE)])
        assert _destinations_from(position, Square(5, 5)) == {
            Square(6, 4), Square(5, 4), Square(4, 4),
            Square(6, 6), Square(4, 6),
        }


class TestGoldMovement:
    """金将: 前3方向・横2方向・真後ろ。"""

    def test_gold_has_six_directions(self) -> None:
        position = _make_position([(5, 5, PieceFace.GOLD, Side.SENTE)])
        assert _destinations_from(position, Square(5, 5)) == {
            Square(6, 4), Square(5, 4), Square(4, 4),
            Square(6, 5), Square(4, 5),
            Square(5, 6),
        }


class TestBishopMovement:
    """角行: 斜め4方向にスライド。"""

    def test_bishop_slides_all_four_diagonals(self) -> None:
        position = _make_position([(5, 5, PieceFace.BISHOP, Side.SENTE)])
        dests = _destinations_from(position, Square(5, 5))
        # 1一 は後手の玉（取れる）、9九 は先手の玉（取れない）
        assert Square(1, 1) in dests
        assert Square(9, 9) not in dests
        assert len(dests) == 15

    def test_bishop_captures_and_stops(self) -> None:
        position = _make_position(
            [
                (5, 5, PieceFace.BISHOP, Side.SENTE),
                (3, 3, PieceFace.PAWN, Side.GOTE),
            ]
        )
        dests = _destinations_from(position, Square(5, 5))
        assert Square(3, 3) in dests
        assert Square(2, 2) not in dests


class TestRookMovement:
    """飛車: 縦横4方向にスライド。"""

    def test_rook_slides_four_orthogonal_directions(self) -> None:
        position = _make_position([(5, 5, PieceFace.ROOK, Side.SENTE)])
        assert len(_destinations_from(position, Square(5, 5))) == 16

    def test_rook_blocked_by_own_piece_in_path(self) -> None:
        position = _make_position(
            [
                (5, 5, PieceFace.ROOK, Side.SENTE),
                (5, 3, PieceFace.GOLD, Side.SENTE),
            ]
        )
        dests = _destinations_from(position, Square(5, 5))
        assert Square(5, 4) in dests
        assert Square(5, 3) not in dests
        assert Square(5, 2) not in dests


class TestKingMovement:
    """玉将: 8方向に1マス。"""

    def test_king_reaches_all_eight_directions_in_open_center(self) -> None:
        position = _make_position(
            [
                (5, 5, PieceFace.KING, Side.SENTE),
                (1, 1, PieceFace.KING, Side.GOTE),
            ]
        )
        assert len(_destinations_from(position, Square(5, 5))) == 8


class TestHorseMovement:
    """竜馬（馬）: 角の動き + 縦横1マス。"""

    def test_horse_has_bishop_diagonals_plus_orthogonal_steps(self) -> None:
        position = _make_position([(5, 5, PieceFace.HORSE, Side.SENTE)])
        dests = _destinations_from(position, Square(5, 5))
        for square in (Square(5, 4), Square(5, 6), Square(4, 5), Square(6, 5)):
            assert square in dests
        assert Square(5, 3) not in dests
        assert len(dests) == 15 + 4


class TestDragonMovement:
    """竜王（竜）: 飛車の動き + 斜め1マス。"""

    def test_dragon_has_rook_slides_plus_diagonal_steps(self) -> None:
        position = _make_position([(5, 5, PieceFace.DRAGON, Side.SENTE)])
        dests = _destinations_from(position, Square(5, 5))
        for square in (Square(4, 4), Square(6, 4), Square(4, 6), Square(6, 6)):
            assert square in dests
        assert Square(3, 3) not in dests
        assert len(dests) == 16 + 4


# ===========================================================================
# 2. Gote orientation
# ===========================================================================


class TestGoteOrientationCorrectness:
    def test_gote_pawn_moves_downward(self) -> None:
        position = _make_position([(5, 5, PieceFace.PAWN, Side.GOTE)], side_to_move=Side.GOTE)
        assert _destinations_from(position, Square(5, 5)) == {Square(5, 6)}

    def test_gote_lance_slides_downward(self) -> None:
        position = _make_position([(2, 1, PieceFace.LANCE, Side.GOTE)], side_to_move=Side.GOTE)
        assert _destinations_from(position, Square(2, 1)) == {Square(2, r) for r in range(2, 10)}

    def test_gote_knight_moves_downward(self) -> None:
        position = _make_position([(5, 5, PieceFace.KNIGHT, Side.GOTE)], side_to_move=Side.GOTE)
        assert _destinations_from(position, Square(5, 5)) == {Square(4, 7), Square(6, 7)}

    def test_gote_silver_mirrors_sente(self) -> None:
        position = _make_position([(5, 5, PieceFace.SILVER, Side.GOTE)], side_to_move=Side.GOTE)
        assert _destinations_from(position, Square(5, 5)) == {
            Square(6, 6), Square(5, 6), Square(4, 6),
            Square(6, 4), Square(4, 4),
        }


# ===========================================================================
# 3. Full game
# ===========================================================================


class TestFullGame:
    def _play_random(self, seed: int, max_plies: int = 60) -> list[ShogiGame]:
        rng = random.Random(seed)
        game = ShogiGame()
        games = [game]
        for _ in range(max_plies):
            moves = game.legal_moves()
            if not moves:
                break
            game = game.apply_move(rng.choice(moves))
            games.append(game)
        return games

    def test_material_is_conserved(self) -> None:
        for game in self._play_random(seed=1):
            position = game.position
            on_board = sum(1 for p in position.squares if p is not None)
            in_hand = position.hand(Side.SENTE).total + position.hand(Side.GOTE).total
            assert on_board + in_hand == 40

    def test_kings_never_captured(self) -> None:
        for game in self._play_random(seed=2):
            for side in Side:
                assert game.position.king_square(side) is not None

    def test_mover_never_left_in_check(self) -> None:
        games = self._play_random(seed=3)
        for game in games[1:]:
            # 直前に指した側の玉に王手がかかっていてはならない
            mover = game.current_player.opponent
            assert not ShogiGame(position=game.position.with_side_to_move(mover)).in_check
