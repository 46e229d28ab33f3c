"""誤差拡散カーネル定義。

各カーネルは現在ピクセルからの相対オフセット (dx, dy, weight) と除数を持つ。
オフセットは走査順で未処理のピクセルのみを指す（dy > 0、または dy == 0 かつ dx > 0）。

    Floyd-Steinberg (/16):
            [*] [7]
       [3] [5] [1]
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DiffusionKernel:
    """誤差拡散カーネル。

    Attributes:
        name: カーネル名
        offsets: (dx, dy, weight) のタプル
        divisor: 重みの除数
        discarded: 意図的に拡散しない重み（Atkinson のみ 2）
    """

    name: str
    offsets: tuple[tuple[int, int, int], ...]
    divisor: int
    discarded: int = 0

    def __post_init__(self) -> None:
        if self.divisor <= 0:
            raise ValueError(f"{self.name}: divisor must be positive")
        for dx, dy, weight in self.offsets:
            if dy < 0 or (dy == 0 and dx <= 0):
                raise ValueError(
                    f"{self.name}: offset ({dx}, {dy}) points at an already visited pixel"
                )
            if weight <= 0:
                raise ValueError(f"{self.name}: weight at ({dx}, {dy}) must be positive")
        if self.weight_sum + self.discarded != self.divisor:
            raise ValueError(
                f"{self.name}: weights sum to {self.weight_sum} "
                f"(+{self.discarded} discarded), divisor is {self.divisor}"
            )

    @property
    def weight_sum(self) -> int:
        return sum(w for _, _, w in self.offsets)

    @property
    def diffused_fraction(self) -> float:
        """拡散される誤差の割合。Atkinson は 0.75、それ以外は 1.0。"""
        return self.weight_sum / self.divisor


FLOYD_STEINBERG = DiffusionKernel(
    "Floyd-Steinberg",
    (
        (1, 0, 7),
        (-1, 1, 3), (0, 1, 5), (1, 1, 1),
    ),
    16,
)

JARVIS = DiffusionKernel(
    "Jarvis-Judice-Ninke",
    (
        (1, 0, 7), (2, 0, 5),
        (-2, 1, 3), (-1, 1, 5), (0, 1, 7), (1, 1, 5), (2, 1, 3),
        (-2, 2, 1), (-1, 2, 3), (0, 2, 5), (1, 2, 3), (2, 2, 1),
    ),
    48,
)

STUCKI = DiffusionKernel(
    "Stucki",
    (
        (1, 0, 8), (2, 0, 4),
        (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
        (-2, 2, 1), (-1, 2, 2), (0, 2, 4), (1, 2, 2), (2, 2, 1),
    ),
    42,
)

# 誤差の 6/8 のみ拡散し、残り 2/8 は捨てる（コントラスト維持のため）
ATKINSON = DiffusionKernel(
    "Atkinson",
    (
        (1, 0, 1), (2, 0, 1),
        (-1, 1, 1), (0, 1, 1), (1, 1, 1),
        (0, 2, 1),
    ),
    8,
    discarded=2,
)

BURKES = DiffusionKernel(
    "Burkes",
    (
        (1, 0, 8), (2, 0, 4),
        (-2, 1, 2), (-1, 1, 4), (0, 1, 8), (1, 1, 4), (2, 1, 2),
    ),
    32,
)

SIERRA = DiffusionKernel(
    "Sierra",
    (
        (1, 0, 5), (2, 0, 3),
        (-2, 1, 2), (-1, 1, 4), (0, 1, 5), (1, 1, 4), (2, 1, 2),
        (-1, 2, 2), (0, 2, 3), (1, 2, 2),
    ),
    32,
)

TWO_ROW_SIERRA = DiffusionKernel(
    "Two-Row Sierra",
    (
        (1, 0, 4), (2, 0, 3),
        (-2, 1, 1), (-1, 1, 2), (0, 1, 3), (1, 1, 2), (2, 1, 1),
    ),
    16,
)

SIERRA_LITE = DiffusionKernel(
    "Sierra Lite",
    (
        (1, 0, 2),
        (-1, 1, 1), (0, 1, 1),
    ),
    4,
)

ALL_KERNELS: tuple[DiffusionKernel, ...] = (
    FLOYD_STEINBERG,
    JARVIS,
    STUCKI,
    ATKINSON,
    BURKES,
    SIERRA,
    TWO_ROW_SIERRA,
    SIERRA_LITE,
)
