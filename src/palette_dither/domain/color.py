"""カラーパレット定義と色距離計算。

Pure Pythonで実装（外部ライブラリ依存なし）。
距離はRGB空間の二乗ユークリッド距離。同距離の場合はパレット順で先の色を採用。
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Protocol, Sequence, Union


@dataclass(frozen=True)
class RGB:
    """RGB色空間の色。各チャンネル 0-255。"""

    r: int
    g: int
    b: int

    def __post_init__(self) -> None:
        for name, value in (("r", self.r), ("g", self.g), ("b", self.b)):
            if not 0 <= value <= 255:
                raise ValueError(f"{name} must be in 0..255, got {value}")

    def to_tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    @classmethod
    def from_hex(cls, value: int) -> RGB:
        """0xRRGGBB 形式の整数から生成。"""
        return cls((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)

    @classmethod
    def from_sequence(cls, values: Sequence[int]) -> RGB:
        """(r, g, b) の3要素シーケンスから生成。"""
        if len(values) != 3:
            raise ValueError(f"expected 3 channels, got {len(values)}")
        return cls(int(values[0]), int(values[1]), int(values[2]))


BLACK = RGB(0, 0, 0)
WHITE = RGB(255, 255, 255)

# --- 組み込みパレット ---

PALETTE_MONOCHROME: tuple[RGB, ...] = (BLACK, WHITE)

PALETTE_8C: tuple[RGB, ...] = tuple(
    RGB.from_hex(v)
    for v in (
        0x000000, 0xCC3500, 0x5EC809, 0x1D286F,
        0x00C4FF, 0x8E8E8E, 0xFFE052, 0xFFFFFF,
    )
)

PALETTE_16C: tuple[RGB, ...] = tuple(
    RGB.from_hex(v)
    for v in (
        0x000000, 0x9D9D9D, 0xFFFFFF, 0xBE2633,
        0xE06F8B, 0x493C2B, 0xA46422, 0xEB8931,
        0xF7E26B, 0x2F484E, 0x44891A, 0xA3CE27,
        0x1B2632, 0x005784, 0x31A2F2, 0xB2DCEF,
    )
)


class Palette(Protocol):
    """パレットのProtocol。

    順序付きの色リストと最近傍色検索を提供する。
    新しいパレット種別はこのProtocolを満たせばエンジン側の変更は不要。
    """

    @property
    def colors(self) -> tuple[RGB, ...]:
        ...

    def nearest(self, color: RGB) -> RGB:
        ...


class ColorPalette(Enum):
    """組み込みパレット。"""

    MONOCHROME = ("monochrome", PALETTE_MONOCHROME)
    COLOR8 = ("color8", PALETTE_8C)
    COLOR16 = ("color16", PALETTE_16C)

    def __init__(self, key: str, colors: tuple[RGB, ...]) -> None:
        self._key = key
        self._colors = colors

    @property
    def key(self) -> str:
        return self._key

    @property
    def colors(self) -> tuple[RGB, ...]:
        return self._colors

    def nearest(self, color: RGB) -> RGB:
        return find_nearest_color(color, self._colors)

    @classmethod
    def from_name(cls, name: str) -> ColorPalette:
        """CLI等の名前文字列からパレットを解決。大文字小文字は区別しない。"""
        wanted = name.strip().lower()
        for palette in cls:
            if palette.key == wanted:
                return palette
        valid = ", ".join(p.key for p in cls)
        raise ValueError(f"unknown palette {name!r} (expected one of: {valid})")


PaletteSource = Union[Palette, Sequence[RGB]]


def palette_colors(palette: PaletteSource) -> tuple[RGB, ...]:
    """Palette もしくは RGB シーケンスから色タプルを取り出す。"""
    colors = getattr(palette, "colors", palette)
    return tuple(colors)


def nearest_lookup(palette: PaletteSource) -> Callable[[RGB], RGB]:
    """最近傍色検索関数を返す。

    Palette なら自身の nearest を使い、色シーケンスなら二乗距離で検索する。
    """
    nearest = getattr(palette, "nearest", None)
    if nearest is not None:
        return nearest
    colors = tuple(palette)
    return lambda color: find_nearest_color(color, colors)


def color_distance_sq(a: RGB, b: RGB) -> int:
    """二乗ユークリッド距離。比較用途なのでsqrtは取らない。"""
    dr = a.r - b.r
    dg = a.g - b.g
    db = a.b - b.b
    return dr * dr + dg * dg + db * db


def find_nearest_color_index(color: RGB, palette: Sequence[RGB]) -> int:
    """パレットから最も近い色のインデックスを検索。

    Args:
        color: 検索対象の色
        palette: カラーパレット（順序が同距離時の優先順位になる）

    Returns:
        最近傍色のインデックス

    Raises:
        ValueError: パレットが空の場合
    """
    if len(palette) == 0:
        raise ValueError("palette must contain at least one color")

    r, g, b = color.r, color.g, color.b
    best_idx = 0
    best_dist = -1
    for i, p in enumerate(palette):
        dr = r - p.r
        dg = g - p.g
        db = b - p.b
        dist = dr * dr + dg * dg + db * db
        # 厳密な < 比較: 同距離なら先に現れた色が残る
        if best_dist < 0 or dist < best_dist:
            best_dist = dist
            best_idx = i
    return best_idx


def find_nearest_color(color: RGB, palette: Sequence[RGB]) -> RGB:
    """パレットから最も近い色を検索。"""
    return palette[find_nearest_color_index(color, palette)]
