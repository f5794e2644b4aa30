"""Board-diagram notation (局面図) for 本将棋.

局面図の書式:

    持駒: なし                               ← 後手の持ち駒
    |▽香|▽桂|▽銀|▽金|▽玉|▽金|▽銀|▽桂|▽香|   ← 一段目（左端が９筋）
    ...（9行）
    |▲香|▲桂|▲銀|▲金|▲玉|▲金|▲銀|▲桂|▲香|   ← 九段目
    持駒: 飛角2歩3                            ← 先手の持ち駒
    手番: 先手

空きマスは「　・」、駒は手番記号（▲先手/▽後手）+ 駒の面。持ち駒は駒名の後に
枚数（1枚なら省略）を書き、何もなければ「なし」。

解析は字句解析（正規表現）→ 再帰下降パーサの2段構成。失敗すると
NotationError に期待内容・失敗位置・未消費の入力を入れて送出する。
"""

from __future__ import annotations

import re
from typing import NamedTuple

from shogi_core.board import HandPool, Piece, Position
from shogi_core.errors import NotationError
from shogi_core.pieces import FACE_SYMBOLS, HAND_PIECE_TYPES, SIDE_MARKERS, SIDE_NAMES, PieceType
from shogi_core.types import COLS, ROWS, Side

EMPTY_CELL = "　・"

_FACES_BY_SYMBOL = {symbol: face for face, symbol in FACE_SYMBOLS.items()}
_SIDES_BY_MARKER = {marker: side for side, marker in SIDE_MARKERS.items()}
_SIDES_BY_NAME = {name: side for side, name in SIDE_NAMES.items()}

_TOKEN_SPEC = [
    ("HAND_LABEL", r"持駒[:：]"),
    ("TURN_LABEL", r"手番[:：]"),
    ("NONE", r"なし"),
    ("SIDE_NAME", r"先手|後手"),
    ("PIPE", r"\|"),
    ("EMPTY", r"・"),
    ("MARKER", "[" + "".join(SIDE_MARKERS.values()) + "]"),
    ("FACE", "[" + "".join(FACE_SYMBOLS.values()) + "]"),
    ("COUNT", r"\d+"),
    ("NEWLINE", r"\r\n|\r|\n"),
    ("SKIP", r"[ \t　]+"),
    ("MISMATCH", r"."),
]
_TOKEN_RE = re.compile("|".join(f"(?P<{kind}>{pattern})" for kind, pattern in _TOKEN_SPEC))


class Token(NamedTuple):
    """A lexical token with its character offset in the source text."""

    kind: str
    text: str
    offset: int


def tokenize(text: str) -> list[Token]:
    """Split diagram text into tokens, ending with an EOF token.

    空白（全角スペースを含む）は読み飛ばす。未知の文字は MISMATCH トークンになり、
    パーサがその位置でエラーを報告する。
    """
    tokens = [
        Token(m.lastgroup or "MISMATCH", m.group(), m.start())
        for m in _TOKEN_RE.finditer(text)
        if m.lastgroup != "SKIP"
    ]
    tokens.append(Token("EOF", "", len(text)))
    return tokens


class _Parser:
    """Recursive-descent parser over the token list."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.pos = 0

    def peek(self) -> Token:
        return self.tokens[self.pos]

    def accept(self, kind: str) -> Token | None:
        token = self.tokens[self.pos]
        if token.kind != kind:
            return None
        self.pos += 1
        return token

    def expect(self, kind: str, expected: str) -> Token:
        token = self.accept(kind)
        if token is None:
            raise NotationError(expected, self.text, self.peek().offset)
        return token

    def skip_newlines(self) -> None:
        while self.accept("NEWLINE"):
            pass

    def end_of_line(self) -> None:
        self.expect("NEWLINE", "expected end of line")
        self.skip_newlines()

    def position(self) -> Position:
        self.skip_newlines()
        gote_hand = self.hand()
        self.end_of_line()
        squares: list[Piece | None] = []
        for _ in range(ROWS):
            squares.extend(self.row())
            self.end_of_line()
        sente_hand = self.hand()
        self.end_of_line()
        side = self.turn()
        self.skip_newlines()
        self.expect("EOF", "unexpected trailing characters")
        return Position(squares=tuple(squares), hands=(sente_hand, gote_hand), side_to_move=side)

    def hand(self) -> HandPool:
        self.expect("HAND_LABEL", "expected 持駒:")
        if self.accept("NONE"):
            return HandPool()
        counts: dict[PieceType, int] = {}
        while True:
            start = self.peek().offset
            token = self.expect("FACE", "expected piece symbol or なし")
            piece_type = _FACES_BY_SYMBOL[token.text].base
            if _FACES_BY_SYMBOL[token.text].is_promoted or piece_type not in HAND_PIECE_TYPES:
                raise NotationError("expected a piece that can be held in hand", self.text, start)
            count = self.accept("COUNT")
            counts[piece_type] = counts.get(piece_type, 0) + (int(count.text) if count else 1)
            if self.peek().kind != "FACE":
                return HandPool.from_mapping(counts)

    def row(self) -> list[Piece | None]:
        self.expect("PIPE", "expected |")
        cells: list[Piece | None] = []
        for _ in range(COLS):
            cells.append(self.cell())
            self.expect("PIPE", "expected |")
        return cells

    def cell(self) -> Piece | None:
        if self.accept("EMPTY"):
            return None
        marker = self.expect("MARKER", "expected square symbol")
        face = self.expect("FACE", "expected piece symbol")
        return Piece(_FACES_BY_SYMBOL[face.text], _SIDES_BY_MARKER[marker.text])

    def turn(self) -> Side:
        self.expect("TURN_LABEL", "expected 手番:")
        name = self.expect("SIDE_NAME", "expected '先手|後手'")
        return _SIDES_BY_NAME[name.text]


def decode_position(text: str) -> Position:
    """Parse a board diagram into a Position.

    Raises:
        NotationError: 書式が正しくない場合（期待内容と未消費の入力を含む）。
    """
    return _Parser(text).position()


def encode_position(position: Position) -> str:
    """Format a Position as a board diagram (inverse of decode_position)."""
    lines: list[str] = [_format_hand(position.hand(Side.GOTE))]
    for r in range(ROWS):
        cells = [_format_cell(piece) for piece in position.squares[r * COLS:(r + 1) * COLS]]
        lines.append("|" + "|".join(cells) + "|")
    lines.append(_format_hand(position.hand(Side.SENTE)))
    lines.append(f"手番: {SIDE_NAMES[position.side_to_move]}")
    return "\n".join(lines)


def _format_cell(piece: Piece | None) -> str:
    if piece is None:
        return EMPTY_CELL
    return SIDE_MARKERS[piece.side] + FACE_SYMBOLS[piece.face]


def _format_hand(pool: HandPool) -> str:
    if pool.total == 0:
        return "持駒: なし"
    # 飛角金銀桂香歩 の順（価値の高い駒から）
    pieces: list[str] = []
    for piece_type, count in reversed(pool.items()):
        symbol = FACE_SYMBOLS[piece_type.face]
        pieces.append(symbol if count == 1 else f"{symbol}{count}")
    return "持駒: " + "".join(pieces)
