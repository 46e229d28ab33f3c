"""組織的ディザ用の閾値行列定義。

Bayer行列は再帰で構築する:
    M(2n) = | 4M+0  4M+2 |
            | 4M+3  4M+1 |
    M(1) = [[0]]
"""

from __future__ import annotations

from dataclasses import dataclass

# 1量子化ステップ（モノクロ 0→255）分のバイアス幅
_DEFAULT_STRENGTH = 255.0


@dataclass(frozen=True)
class ThresholdMatrix:
    """タイル状に敷き詰める閾値行列。

    Attributes:
        name: 行列名
        rows: 整数閾値の2次元タプル
        denominator: 正規化用の分母
        strength: バイアスのスケール (0 でバイアスなし)
    """

    name: str
    rows: tuple[tuple[int, ...], ...]
    denominator: int
    strength: float = _DEFAULT_STRENGTH

    def __post_init__(self) -> None:
        if not self.rows or not self.rows[0]:
            raise ValueError(f"{self.name}: matrix must not be empty")
        width = len(self.rows[0])
        if any(len(row) != width for row in self.rows):
            raise ValueError(f"{self.name}: matrix rows differ in length")
        for dim in (width, len(self.rows)):
            if dim & (dim - 1):
                raise ValueError(f"{self.name}: dimension {dim} is not a power of two")
        if self.denominator <= 0:
            raise ValueError(f"{self.name}: denominator must be positive")

    @property
    def width(self) -> int:
        return len(self.rows[0])

    @property
    def height(self) -> int:
        return len(self.rows)

    def threshold(self, x: int, y: int) -> int:
        """画像座標 (x, y) に対応する閾値。行列はタイル状に繰り返す。"""
        return self.rows[y % self.height][x % self.width]

    def bias(self, x: int, y: int) -> float:
        """画像座標 (x, y) のバイアス値。"""
        return (self.threshold(x, y) / self.denominator - 0.5) * self.strength


def bayer_rows(size: int) -> tuple[tuple[int, ...], ...]:
    """size x size の Bayer 閾値 (0 .. size²-1) を再帰で構築。

    Raises:
        ValueError: size が 2 の冪でない場合
    """
    if size < 1 or size & (size - 1):
        raise ValueError(f"Bayer matrix size must be a power of two, got {size}")
    if size == 1:
        return ((0,),)

    half = bayer_rows(size // 2)
    top = tuple(
        tuple(4 * v + 0 for v in row) + tuple(4 * v + 2 for v in row) for row in half
    )
    bottom = tuple(
        tuple(4 * v + 3 for v in row) + tuple(4 * v + 1 for v in row) for row in half
    )
    return top + bottom


def bayer_matrix(size: int, strength: float = _DEFAULT_STRENGTH) -> ThresholdMatrix:
    """Bayer 閾値行列を生成。"""
    return ThresholdMatrix(f"Bayer {size}x{size}", bayer_rows(size), size * size, strength)


BAYER2X2 = bayer_matrix(2)
BAYER4X4 = bayer_matrix(4)
BAYER8X8 = bayer_matrix(8)

# Bayer ではない 2x2 の市松パターン
SIMPLE2D = ThresholdMatrix(
    "Simple 2D",
    (
        (0, 2),
        (2, 0),
    ),
    4,
)

ALL_MATRICES: tuple[ThresholdMatrix, ...] = (SIMPLE2D, BAYER2X2, BAYER4X4, BAYER8X8)
