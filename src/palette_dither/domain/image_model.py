"""画像ドメインモデル。"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from palette_dither.domain.color import RGB


class DitherFamily(Enum):
    """ディザリング手法の系統。"""

    NONE = "none"
    ERROR_DIFFUSION = "error-diffusion"
    ORDERED = "ordered"


class DitherMethod(Enum):
    """ディザリング手法。CLI名・表示名・系統を持つ。"""

    NONE = ("none", "None", DitherFamily.NONE)
    FLOYD_STEINBERG = ("floyd-steinberg", "Floyd-Steinberg", DitherFamily.ERROR_DIFFUSION)
    SIMPLE2D = ("simple2d", "Simple 2D", DitherFamily.ORDERED)
    JARVIS = ("jarvis", "Jarvis-Judice-Ninke", DitherFamily.ERROR_DIFFUSION)
    ATKINSON = ("atkinson", "Atkinson", DitherFamily.ERROR_DIFFUSION)
    STUCKI = ("stucki", "Stucki", DitherFamily.ERROR_DIFFUSION)
    BURKES = ("burkes", "Burkes", DitherFamily.ERROR_DIFFUSION)
    SIERRA = ("sierra", "Sierra", DitherFamily.ERROR_DIFFUSION)
    TWO_ROW_SIERRA = ("two-row-sierra", "Two-Row Sierra", DitherFamily.ERROR_DIFFUSION)
    SIERRA_LITE = ("sierra-lite", "Sierra Lite", DitherFamily.ERROR_DIFFUSION)
    BAYER2X2 = ("bayer2x2", "Bayer 2x2", DitherFamily.ORDERED)
    BAYER4X4 = ("bayer4x4", "Bayer 4x4", DitherFamily.ORDERED)
    BAYER8X8 = ("bayer8x8", "Bayer 8x8", DitherFamily.ORDERED)

    def __init__(self, key: str, label: str, family: DitherFamily) -> None:
        self._key = key
        self._label = label
        self._family = family

    @property
    def key(self) -> str:
        return self._key

    @property
    def label(self) -> str:
        return self._label

    @property
    def family(self) -> DitherFamily:
        return self._family

    @classmethod
    def from_name(cls, name: str) -> DitherMethod:
        """CLI名から手法を解決。"""
        wanted = name.strip().lower()
        # 旧CLIの綴り
        if wanted == "simple2-d":
            wanted = "simple2d"
        for method in cls:
            if method.key == wanted:
                return method
        valid = ", ".join(m.key for m in cls)
        raise ValueError(f"unknown dither method {name!r} (expected one of: {valid})")


@dataclass
class PixelBuffer:
    """行優先のピクセルバッファ。index = y * width + x。"""

    width: int
    height: int
    pixels: list[RGB] = field(default_factory=list)

    def validate(self) -> None:
        """寸法とピクセル数の整合性を検証。

        Raises:
            ValueError: 負の寸法、または width*height と要素数の不一致
        """
        if self.width < 0 or self.height < 0:
            raise ValueError(f"negative dimensions: {self.width}x{self.height}")
        expected = self.width * self.height
        if len(self.pixels) != expected:
            raise ValueError(
                f"buffer holds {len(self.pixels)} pixels, "
                f"expected {expected} for {self.width}x{self.height}"
            )

    @property
    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def get(self, x: int, y: int) -> RGB:
        return self.pixels[y * self.width + x]

    def set(self, x: int, y: int, color: RGB) -> None:
        self.pixels[y * self.width + x] = color

    def copy(self) -> PixelBuffer:
        return PixelBuffer(self.width, self.height, list(self.pixels))

    @classmethod
    def filled(cls, width: int, height: int, color: RGB) -> PixelBuffer:
        """単色バッファを生成。"""
        return cls(width, height, [color] * (width * height))


@dataclass
class ImageSpec:
    """画像変換の仕様。target が None の場合は元のサイズのまま処理する。"""

    target_width: int | None = None
    target_height: int | None = None
    keep_aspect_ratio: bool = True

    @property
    def resize_requested(self) -> bool:
        return self.target_width is not None and self.target_height is not None
