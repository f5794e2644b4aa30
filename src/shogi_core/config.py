"""Configuration for exploration and the web host.

設定はイミュータブルなデータクラスで管理し、よく使う組み合わせはプリセットとして定義する。
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExploreConfig:
    """Configuration for future-state exploration.

    Attributes:
        max_depth:     探索する手数（1 = 直後の局面のみ）
        max_workers:   1 より大きければスレッドプールで局面を展開する
        max_positions: 集めた局面数の上限（None = 上限なし）

    計算量は（分岐数）^（手数）で増えるので、max_depth は必ず明示的に抑えること。
    本将棋の初期局面では1手で30局面、2手で900局面になる。
    """

    max_depth: int = 1
    max_workers: int = 1
    max_positions: int | None = None

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            msg = f"max_depth must be >= 0, got {self.max_depth}"
            raise ValueError(msg)
        if self.max_workers < 1:
            msg = f"max_workers must be >= 1, got {self.max_workers}"
            raise ValueError(msg)
        if self.max_positions is not None and self.max_positions < 1:
            msg = f"max_positions must be >= 1 or None, got {self.max_positions}"
            raise ValueError(msg)


# 直後の局面だけを列挙する軽量設定
SHALLOW_EXPLORE = ExploreConfig(max_depth=1)

# 3手先までをスレッドプールで展開する設定（局面数に上限を設ける）
PARALLEL_EXPLORE = ExploreConfig(
    max_depth=3,
    max_workers=4,
    max_positions=200_000,
)


@dataclass(frozen=True)
class WebConfig:
    """Configuration for the HTTP host.

    max_explore_depth: /api/explore で受け付ける最大手数（組み合わせ爆発の防止）
    """

    host: str = "0.0.0.0"
    port: int = 8000
    max_explore_depth: int = 2
    max_explore_positions: int = 50_000
