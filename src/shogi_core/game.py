"""Game session for 本将棋.

対局（ゲームツリーのノード）。現在の局面・指し手の履歴・終局結果を持つ
イミュータブルなデータクラスで、apply_move() は新しい ShogiGame を返す。

Terminal conditions（終局条件）:
1. Terminal の手（投了など）が指された
2. 王将がいない（取られた）
3. 合法手がない: 手番側の負け
"""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from shogi_core.board import Position
from shogi_core.check import is_in_check, legal_moves
from shogi_core.errors import IllegalMoveError, NotationError
from shogi_core.executor import apply_move
from shogi_core.moves import Move, Terminal
from shogi_core.notation.csa import SIDE_SIGNS, decode_move, split_statements
from shogi_core.types import Side

# 局面の再現に関係しない CSA の行（コメント・棋戦情報・対局者名・版・消費時間）
_IGNORED_PREFIXES = ("'", "$", "N+", "N-", "V", "T")
_SIDES_BY_SIGN = {sign: side for side, sign in SIDE_SIGNS.items()}


@dataclass(frozen=True)
class ShogiGame:
    """Immutable game session: current position, move history and result."""

    position: Position = field(default_factory=Position)
    history: tuple[Move, ...] = ()
    result: Terminal | None = None

    @property
    def current_player(self) -> Side:
        return self.position.side_to_move

    @property
    def in_check(self) -> bool:
        """手番側の玉に王手がかかっていれば True。"""
        return is_in_check(self.position, self.current_player)

    @property
    def is_terminal(self) -> bool:
        """ゲームが終局ならば True。"""
        if self.result is not None:
            return True
        for side in Side:
            if self.position.king_square(side) is None:
                return True
        return len(self.legal_moves()) == 0

    @property
    def winner(self) -> Side | None:
        """勝者を返す。対局中・引き分けは None。"""
        if self.result is not None:
            return self.result.winner
        # 王将がいない場合（取られた側の負け）
        for side in Side:
            if self.position.king_square(side) is None:
                return side.opponent
        # 合法手なし = 詰み → 手番側の負け
        if len(self.legal_moves()) == 0:
            return self.current_player.opponent
        return None

    def legal_moves(self) -> list[Move]:
        """合法手のリストを返す。終局後は空。"""
        if self.result is not None:
            return []
        return legal_moves(self.position)

    def apply_move(self, move: Move) -> ShogiGame:
        """Apply ``move`` and return the new session.

        Raises:
            IllegalMoveError: 終局後の手、または現在の局面で合法でない手。
        """
        if self.result is not None:
            msg = f"Game is already over: {self.result}"
            raise IllegalMoveError(msg)
        if isinstance(move, Terminal):
            return ShogiGame(position=self.position, history=self.history + (move,), result=move)
        if move not in self.legal_moves():
            msg = f"Illegal move: {move}"
            raise IllegalMoveError(msg)
        next_position = apply_move(self.position, move)
        assert next_position is not None
        return ShogiGame(position=next_position, history=self.history + (move,))

    @staticmethod
    def from_csa(text: str) -> ShogiGame:
        """Replay a CSA record and return the resulting session.

        PI（平手の初期配置）・手番行（+ / -）・指し手・% で始まる終局を解釈する。
        コメントや対局者名などの行は読み飛ばす。

        Raises:
            NotationError:    記録の書式が不正な場合
            IllegalMoveError: 記録中の手が非合法な場合
        """
        game: ShogiGame | None = None
        for statement in split_statements(text):
            if statement.startswith(_IGNORED_PREFIXES):
                continue
            if statement == "PI":
                game = ShogiGame()
            elif statement in _SIDES_BY_SIGN:
                base = game if game is not None else ShogiGame()
                position = base.position.with_side_to_move(_SIDES_BY_SIGN[statement])
                game = ShogiGame(position=position, history=base.history)
            elif statement.startswith(("+", "-", "%")):
                if game is None:
                    raise NotationError("expected PI before the first move", statement, 0)
                game = game.apply_move(decode_move(statement, game.position))
            elif statement.startswith("P"):
                raise NotationError("expected PI (only the even-game layout is supported)", statement, 0)
            else:
                logger.warning("Skipping unknown CSA statement: {}", statement)
        if game is None:
            raise NotationError("expected PI", text, 0)
        logger.debug("Replayed {} moves", len(game.history))
        return game
