"""Text notations: board diagrams (局面図) and CSA move records."""

from shogi_core.notation.csa import decode_move, encode_move, split_statements
from shogi_core.notation.diagram import decode_position, encode_position

__all__ = [
    "decode_move",
    "decode_position",
    "encode_move",
    "encode_position",
    "split_statements",
]
