"""CSA move-record tokens.

指し手トークンの書式: 手番記号（+ 先手 / - 後手）、移動元の筋・段、移動先の筋・段、
移動後の駒の面を表す2文字のコード。移動元が 00 なら駒打ち。

    +7776FU   先手 ７七の歩を７六へ
    -0055KA   後手 ５五に角を打つ
    +2228UM   先手 ２二の角が２八へ成る（移動元の面と異なるので成り）

成りかどうかはトークンの面と、指す前の局面の移動元の面を比べて判定する。
終局は %TORYO（投了）・%TSUMI（詰み）・%SENNICHITE（千日手）。
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from types import MappingProxyType

from shogi_core.board import Position
from shogi_core.errors import NotationError
from shogi_core.moves import Drop, Move, NormalMove, Terminal, TerminalReason
from shogi_core.pieces import PieceFace
from shogi_core.types import Side, Square

FACE_CODES: Mapping[PieceFace, str] = MappingProxyType({
    PieceFace.PAWN: "FU",
    PieceFace.LANCE: "KY",
    PieceFace.KNIGHT: "KE",
    PieceFace.SILVER: "GI",
    PieceFace.GOLD: "KI",
    PieceFace.BISHOP: "KA",
    PieceFace.ROOK: "HI",
    PieceFace.KING: "OU",
    PieceFace.PRO_PAWN: "TO",
    PieceFace.PRO_LANCE: "NY",
    PieceFace.PRO_KNIGHT: "NK",
    PieceFace.PRO_SILVER: "NG",
    PieceFace.HORSE: "UM",
    PieceFace.DRAGON: "RY",
})
_FACES_BY_CODE = {code: face for face, code in FACE_CODES.items()}

SIDE_SIGNS: Mapping[Side, str] = MappingProxyType({Side.SENTE: "+", Side.GOTE: "-"})
_SIDES_BY_SIGN = {sign: side for side, sign in SIDE_SIGNS.items()}

_SPECIAL_TOKENS: Mapping[str, TerminalReason] = MappingProxyType({
    "%TORYO": TerminalReason.RESIGN,
    "%TSUMI": TerminalReason.CHECKMATE,
    "%SENNICHITE": TerminalReason.REPETITION,
})
_SPECIAL_CODES = {reason: token for token, reason in _SPECIAL_TOKENS.items()}

_MOVE_RE = re.compile(r"([+-])(\d)(\d)(\d)(\d)([A-Z]{2})")


def is_move_token(statement: str) -> bool:
    return _MOVE_RE.fullmatch(statement.strip()) is not None


def decode_move(token: str, position: Position) -> Move:
    """Decode one CSA move token against the position before the move.

    Raises:
        NotationError: トークンの書式が不正、または局面と矛盾する場合。
    """
    token = token.strip()
    if token.startswith("%"):
        return _decode_special(token, position)

    m = _MOVE_RE.fullmatch(token)
    if m is None:
        raise NotationError("expected move token like +7776FU", token, 0)
    sign, d1, d2, d3, d4, code = m.groups()

    side = _SIDES_BY_SIGN[sign]
    if side != position.side_to_move:
        raise NotationError(f"expected {SIDE_SIGNS[position.side_to_move]} (side to move)", token, 0)
    face = _FACES_BY_CODE.get(code)
    if face is None:
        raise NotationError("expected piece code", token, 5)
    target = Square.at(int(d3), int(d4))
    if target is None:
        raise NotationError("expected destination square 11..99", token, 3)

    if d1 == "0" and d2 == "0":
        if face.is_promoted or face == PieceFace.KING:
            raise NotationError("expected droppable piece code", token, 5)
        return Drop(side, target, face.base)

    origin = Square.at(int(d1), int(d2))
    if origin is None:
        raise NotationError("expected origin square 11..99 or 00", token, 1)
    piece = position.piece_at(origin)
    if piece is None or piece.side != side:
        raise NotationError(f"expected own piece on {origin}", token, 1)
    if piece.face.base != face.base:
        raise NotationError(f"expected piece code matching the piece on {origin}", token, 5)
    # 移動元の面とトークンの面が違えば成り
    promote = piece.face != face
    if promote and piece.face.promoted != face:
        raise NotationError(f"expected promoted face of the piece on {origin}", token, 5)
    return NormalMove(side, origin, target, piece.face, promote=promote)


def _decode_special(token: str, position: Position) -> Terminal:
    reason = _SPECIAL_TOKENS.get(token)
    if reason is None:
        raise NotationError("expected %TORYO, %TSUMI or %SENNICHITE", token, 0)
    if reason == TerminalReason.REPETITION:
        return Terminal(reason, winner=None)
    # 投了・詰みはどちらも手番側の負け
    return Terminal(reason, winner=position.side_to_move.opponent)


def encode_move(move: Move) -> str:
    """Encode a move as a CSA token (inverse of decode_move)."""
    if isinstance(move, NormalMove):
        return (
            f"{SIDE_SIGNS[move.side]}{move.origin.file}{move.origin.rank}"
            f"{move.target.file}{move.target.rank}{FACE_CODES[move.resulting_face]}"
        )
    if isinstance(move, Drop):
        return f"{SIDE_SIGNS[move.side]}00{move.target.file}{move.target.rank}{FACE_CODES[move.piece_type.face]}"
    code = _SPECIAL_CODES.get(move.reason)
    if code is None:
        msg = f"No CSA token for terminal reason {move.reason.name}"
        raise ValueError(msg)
    return code


def split_statements(text: str) -> list[str]:
    """Split a CSA record into statements (lines and comma-separated parts).

    コメント行（'）はカンマを含んでも分割しない。空行は捨てる。
    """
    statements: list[str] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        if line.startswith("'"):
            statements.append(line)
            continue
        statements.extend(part.strip() for part in line.split(",") if part.strip())
    return statements
