"""FastAPI host for the shogi rules engine.

ルールエンジンを REST API として公開する Web アプリケーション。
局面は局面図テキスト、指し手は CSA トークンでやり取りする。

エンドポイント:
  POST /api/new-game    新規対局を開始（ゲームIDを返す）
  POST /api/move        手を指す（CSA トークン）
  GET  /api/state/{id}  現在の局面情報を取得
  POST /api/analyze     局面図を解析（合法手・王手・詰み判定）
  POST /api/replay      CSA 棋譜を再生して対局を作る
  POST /api/explore     指定手数先までの局面数を数える
"""

from __future__ import annotations

import uuid
from typing import Any

from fastapi import FastAPI, HTTPException
from loguru import logger
from pydantic import BaseModel

from shogi_core.check import candidate_moves, is_checkmate, is_in_check, legal_moves
from shogi_core.config import ExploreConfig, WebConfig
from shogi_core.errors import IllegalMoveError, NotationError
from shogi_core.explore import explore
from shogi_core.game import ShogiGame
from shogi_core.moves import Terminal
from shogi_core.notation.csa import decode_move, encode_move
from shogi_core.notation.diagram import decode_position, encode_position
from shogi_core.pieces import FACE_SYMBOLS, SIDE_MARKERS
from shogi_core.types import Side

CONFIG = WebConfig()

app = FastAPI(title="Shogi Core")

# 対局情報のインメモリストレージ（サーバ再起動で消える簡易実装）
_games: dict[str, ShogiGame] = {}


class MoveRequest(BaseModel):
    """指し手リクエストのスキーマ。"""

    game_id: str  # 対局ID（/api/new-game で取得）
    move: str  # CSA トークン（例: "+7776FU"、"%TORYO"）


class DiagramRequest(BaseModel):
    """局面図を受け取るリクエストのスキーマ。"""

    diagram: str


class ExploreRequest(BaseModel):
    diagram: str
    depth: int = 1  # 何手先まで展開するか（CONFIG.max_explore_depth まで）


class ReplayRequest(BaseModel):
    record: str  # CSA 形式の棋譜


def _notation_error(exc: NotationError) -> HTTPException:
    """解析エラーを 400 応答に変換する（期待内容と未消費の入力を返す）。"""
    return HTTPException(400, {"message": exc.expected, "remainder": exc.remainder})


def _game_to_dict(game: ShogiGame) -> dict[str, Any]:
    """Convert a game session to a JSON-serializable dict.

    フロントエンドが盤面を描画するための形式に変換する。
    """
    position = game.position
    squares: list[dict[str, Any] | None] = []
    for piece in position.squares:
        if piece is None:
            squares.append(None)
        else:
            squares.append(
                {
                    "face": piece.face.name,  # 駒の面（例: "PRO_PAWN"）
                    "side": piece.side.value,  # 所有者（0=先手, 1=後手）
                    "symbol": SIDE_MARKERS[piece.side] + FACE_SYMBOLS[piece.face],
                }
            )
    hands = [
        {pt.name: count for pt, count in position.hand(Side.SENTE).items()},  # 先手の持ち駒
        {pt.name: count for pt, count in position.hand(Side.GOTE).items()},  # 後手の持ち駒
    ]
    winner = game.winner

    return {
        "side_to_move": position.side_to_move.value,  # 手番（0=先手, 1=後手）
        "is_terminal": game.is_terminal,  # 終局フラグ
        "winner": winner.value if winner is not None else None,  # 勝者（None=対局中）
        "in_check": game.in_check,
        "legal_moves": [encode_move(m) for m in game.legal_moves()],  # CSA トークン
        "history": [encode_move(m) for m in game.history],
        "squares": squares,  # 81要素（行優先、左上が９一）
        "hands": hands,
        "diagram": encode_position(position),  # テキスト形式の局面図
    }


@app.post("/api/new-game")
async def new_game() -> dict[str, Any]:
    """新規対局を平手の初期局面で開始する。"""
    game_id = str(uuid.uuid4())[:8]  # 短いIDを生成
    game = ShogiGame()
    _games[game_id] = game
    logger.info("New game {}", game_id)
    return {"game_id": game_id, "state": _game_to_dict(game)}


@app.post("/api/move")
async def make_move(req: MoveRequest) -> dict[str, Any]:
    """CSA トークンで1手指して、次の局面を返す。"""
    game = _games.get(req.game_id)
    if game is None:
        raise HTTPException(404, "Game not found")
    if game.is_terminal:
        raise HTTPException(400, "Game is already over")

    try:
        move = decode_move(req.move, game.position)
        game = game.apply_move(move)
    except NotationError as exc:
        raise _notation_error(exc) from exc
    except IllegalMoveError as exc:
        raise HTTPException(400, str(exc)) from exc

    _games[req.game_id] = game
    return {"state": _game_to_dict(game), "move": encode_move(move)}


@app.get("/api/state/{game_id}")
async def get_state(game_id: str) -> dict[str, Any]:
    """現在の局面情報を取得する。"""
    game = _games.get(game_id)
    if game is None:
        raise HTTPException(404, "Game not found")
    return _game_to_dict(game)


@app.post("/api/analyze")
async def analyze(req: DiagramRequest) -> dict[str, Any]:
    """Analyze a board diagram.

    合法手（王手放置を除く）、指し手候補（相手玉を取れる場合の終局を含む）、
    手番側の王手・詰み判定を返す。詰み判定は玉の逃げ場だけを見る簡易判定。
    """
    try:
        position = decode_position(req.diagram)
    except NotationError as exc:
        raise _notation_error(exc) from exc

    side = position.side_to_move
    candidates = candidate_moves(position)
    return {
        "side_to_move": side.value,
        "legal_moves": [encode_move(m) for m in legal_moves(position)],
        "can_capture_king": any(isinstance(m, Terminal) for m in candidates),
        "in_check": is_in_check(position, side),
        "checkmate": is_checkmate(position),
        "diagram": encode_position(position),
    }


@app.post("/api/replay")
async def replay(req: ReplayRequest) -> dict[str, Any]:
    """CSA 棋譜を再生し、最終局面から新しい対局として登録する。"""
    try:
        game = ShogiGame.from_csa(req.record)
    except NotationError as exc:
        raise _notation_error(exc) from exc
    except IllegalMoveError as exc:
        raise HTTPException(400, str(exc)) from exc

    game_id = str(uuid.uuid4())[:8]
    _games[game_id] = game
    return {"game_id": game_id, "state": _game_to_dict(game)}


@app.post("/api/explore")
async def explore_positions(req: ExploreRequest) -> dict[str, Any]:
    """指定手数先までに到達できる局面を数える（重複を含む）。"""
    if not 0 <= req.depth <= CONFIG.max_explore_depth:
        raise HTTPException(400, f"depth must be between 0 and {CONFIG.max_explore_depth}")
    try:
        position = decode_position(req.diagram)
    except NotationError as exc:
        raise _notation_error(exc) from exc

    # 上限より1つ多く集めて、実際に打ち切られたかを判定する
    limit = CONFIG.max_explore_positions
    config = ExploreConfig(max_depth=req.depth, max_positions=limit + 1)
    positions = explore(position, config)
    return {
        "depth": req.depth,
        "positions": min(len(positions), limit),
        "truncated": len(positions) > limit,
    }


def main() -> None:
    """Run the web server.

    `shogi-web` または `python -m shogi_core.web.app` で起動する。
    """
    import uvicorn

    uvicorn.run(app, host=CONFIG.host, port=CONFIG.port)


if __name__ == "__main__":
    main()
