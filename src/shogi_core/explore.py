"""Depth-bounded enumeration of future positions.

再帰ではなく (局面, 残り手数) を積んだワークリスト（deque）で幅優先に展開する。
各局面の展開は自分の親局面しか読まないので、スレッドプールに分配できる。

重複局面のメモ化・循環検出は行わない。同じ局面が何度現れてもそのまま数える。
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import ThreadPoolExecutor

from loguru import logger

from shogi_core.board import Position
from shogi_core.config import SHALLOW_EXPLORE, ExploreConfig
from shogi_core.executor import apply_move
from shogi_core.movegen import generate

# 1回のディスパッチでワーカー1つあたりに渡す局面数
_BATCH_PER_WORKER = 16

_Mapper = Callable[[Callable[[Position], list[Position]], Iterable[Position]], Iterator[list[Position]]]


def successors(position: Position) -> list[Position]:
    """All positions reachable from ``position`` in one generated move."""
    result: list[Position] = []
    for move in generate(position):
        next_position = apply_move(position, move)
        if next_position is not None:
            result.append(next_position)
    return result


def explore(
    root: Position,
    config: ExploreConfig = SHALLOW_EXPLORE,
    stop_event: threading.Event | None = None,
) -> list[Position]:
    """Collect every position reachable within ``config.max_depth`` plies.

    結果は手数の浅い順（幅優先）に並ぶ。root 自身は含まない。
    stop_event がセットされるか max_positions に達した時点で打ち切る。
    """
    if config.max_workers == 1:
        return _drain(root, config, stop_event, map)
    with ThreadPoolExecutor(max_workers=config.max_workers) as pool:
        return _drain(root, config, stop_event, pool.map)


def _drain(
    root: Position,
    config: ExploreConfig,
    stop_event: threading.Event | None,
    mapper: _Mapper,
) -> list[Position]:
    collected: list[Position] = []
    if config.max_depth == 0:
        return collected

    worklist: deque[tuple[Position, int]] = deque([(root, config.max_depth)])
    batch_size = config.max_workers * _BATCH_PER_WORKER
    ply = 0

    while worklist:
        if stop_event is not None and stop_event.is_set():
            logger.info("Exploration stopped after {} positions", len(collected))
            break

        batch = [worklist.popleft() for _ in range(min(batch_size, len(worklist)))]
        batch_ply = config.max_depth - batch[0][1] + 1
        if batch_ply != ply:
            ply = batch_ply
            logger.debug("Exploring ply {} ({} positions collected)", ply, len(collected))

        expanded = mapper(successors, [position for position, _ in batch])
        for (_, remaining), children in zip(batch, expanded):
            for child in children:
                collected.append(child)
                if config.max_positions is not None and len(collected) >= config.max_positions:
                    logger.info("Exploration reached the {} position limit", config.max_positions)
                    return collected
                if remaining > 1:
                    worklist.append((child, remaining - 1))

    return collected
