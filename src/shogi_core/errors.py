"""Exception hierarchy for shogi_core.

- NotationError:     棋譜・局面図の解析失敗（入力を直せば再試行できる）
- IllegalMoveError:  対局セッションに渡された非合法手（利用者の入力ミス）
- MoveContractError: 生成器が作っていない手を実行しようとした（プログラムの欠陥）
"""

from __future__ import annotations


class ShogiError(Exception):
    """Base class for recoverable shogi_core errors."""


class NotationError(ShogiError, ValueError):
    """Malformed board-diagram or move-record text.

    expected:  期待していた内容の説明
    offset:    入力中の失敗位置（文字オフセット）
    remainder: 未消費の残りの入力
    """

    def __init__(self, expected: str, text: str = "", offset: int = 0) -> None:
        self.expected = expected
        self.offset = offset
        self.remainder = text[offset:]
        super().__init__(f"{expected}. ^{self.remainder}")


class IllegalMoveError(ShogiError, ValueError):
    """A move that is not legal in the session's current position."""


class MoveContractError(AssertionError):
    """A move violated the executor's preconditions.

    実行器に渡される手は、その局面に対して生成器が作ったものでなければならない。
    これに違反するのは呼び出し側のバグなので、回復可能なエラーとしては扱わない。
    """
