"""ディザリングアルゴリズム定義。

Protocol + 3系統の実装（量子化のみ / 誤差拡散 / 組織的ディザ）とディスパッチ。
domain層のためPure Python（typing依存のみ）。
NumPyによる高速版は application 層の DitherService が提供する。
"""

from __future__ import annotations

from typing import Protocol

from palette_dither.domain.color import RGB, PaletteSource, nearest_lookup, palette_colors
from palette_dither.domain.image_model import DitherFamily, DitherMethod, PixelBuffer
from palette_dither.domain import kernels, threshold
from palette_dither.domain.kernels import DiffusionKernel
from palette_dither.domain.threshold import ThresholdMatrix


class DitherAlgorithm(Protocol):
    """ディザリングアルゴリズムのProtocol。"""

    def dither(self, buffer: PixelBuffer, palette: PaletteSource) -> PixelBuffer:
        """バッファをパレット色に置き換える（インプレース）。

        Args:
            buffer: 行優先のピクセルバッファ
            palette: 使用するカラーパレット

        Returns:
            書き換え済みの同じバッファ
        """
        ...


_KERNELS: dict[DitherMethod, DiffusionKernel] = {
    DitherMethod.FLOYD_STEINBERG: kernels.FLOYD_STEINBERG,
    DitherMethod.JARVIS: kernels.JARVIS,
    DitherMethod.STUCKI: kernels.STUCKI,
    DitherMethod.ATKINSON: kernels.ATKINSON,
    DitherMethod.BURKES: kernels.BURKES,
    DitherMethod.SIERRA: kernels.SIERRA,
    DitherMethod.TWO_ROW_SIERRA: kernels.TWO_ROW_SIERRA,
    DitherMethod.SIERRA_LITE: kernels.SIERRA_LITE,
}

_MATRICES: dict[DitherMethod, ThresholdMatrix] = {
    DitherMethod.SIMPLE2D: threshold.SIMPLE2D,
    DitherMethod.BAYER2X2: threshold.BAYER2X2,
    DitherMethod.BAYER4X4: threshold.BAYER4X4,
    DitherMethod.BAYER8X8: threshold.BAYER8X8,
}


def kernel_for(method: DitherMethod) -> DiffusionKernel:
    """誤差拡散系の手法に対応するカーネル。"""
    try:
        return _KERNELS[method]
    except KeyError:
        raise ValueError(f"{method.key} is not an error-diffusion method") from None


def matrix_for(method: DitherMethod) -> ThresholdMatrix:
    """組織的ディザ系の手法に対応する閾値行列。"""
    try:
        return _MATRICES[method]
    except KeyError:
        raise ValueError(f"{method.key} is not an ordered dithering method") from None


class NoDither:
    """ディザなし。各ピクセルを独立に最近傍色へ量子化する。"""

    def dither(self, buffer: PixelBuffer, palette: PaletteSource) -> PixelBuffer:
        buffer.validate()
        nearest = nearest_lookup(palette)
        pixels = buffer.pixels
        for i, color in enumerate(pixels):
            pixels[i] = nearest(color)
        return buffer


class ErrorDiffusionDither:
    """誤差拡散ディザの Pure Python 実装。

    行優先（左→右、上→下）で走査し、量子化誤差をカーネルに従って
    未処理の近傍ピクセルへ分配する。誤差は float で蓄積し、
    クランプは量子化入力の時点でのみ行う。
    """

    def __init__(self, kernel: DiffusionKernel = kernels.FLOYD_STEINBERG) -> None:
        self._kernel = kernel

    @property
    def kernel(self) -> DiffusionKernel:
        return self._kernel

    def dither(self, buffer: PixelBuffer, palette: PaletteSource) -> PixelBuffer:
        buffer.validate()
        nearest_of = nearest_lookup(palette)
        width, height = buffer.width, buffer.height
        pixels = buffer.pixels
        offsets = self._kernel.offsets
        divisor = self._kernel.divisor

        # 誤差アキュムレータ（1パス限り）
        errors: list[list[float]] = [[0.0, 0.0, 0.0] for _ in range(width * height)]

        for y in range(height):
            for x in range(width):
                i = y * width + x
                src = pixels[i]
                acc = errors[i]

                # 元の値 + 蓄積誤差
                work_r = src.r + acc[0]
                work_g = src.g + acc[1]
                work_b = src.b + acc[2]

                nearest = nearest_of(
                    RGB(_clamp(round(work_r)), _clamp(round(work_g)), _clamp(round(work_b))),
                )

                err_r = work_r - nearest.r
                err_g = work_g - nearest.g
                err_b = work_b - nearest.b

                for dx, dy, weight in offsets:
                    nx = x + dx
                    ny = y + dy
                    if 0 <= nx < width and ny < height:
                        target = errors[ny * width + nx]
                        target[0] += err_r * weight / divisor
                        target[1] += err_g * weight / divisor
                        target[2] += err_b * weight / divisor

                pixels[i] = nearest

        return buffer


class OrderedDither:
    """組織的ディザの Pure Python 実装。

    座標に応じたバイアスを加え、0-255 にクランプして小数部を切り捨ててから
    量子化する。誤差は伝播しない。
    """

    def __init__(self, matrix: ThresholdMatrix = threshold.BAYER4X4) -> None:
        self._matrix = matrix

    @property
    def matrix(self) -> ThresholdMatrix:
        return self._matrix

    def dither(self, buffer: PixelBuffer, palette: PaletteSource) -> PixelBuffer:
        buffer.validate()
        nearest = nearest_lookup(palette)
        width, height = buffer.width, buffer.height
        pixels = buffer.pixels
        matrix = self._matrix

        for y in range(height):
            for x in range(width):
                i = y * width + x
                src = pixels[i]
                bias = matrix.bias(x, y)
                biased = RGB(
                    _truncate(src.r + bias),
                    _truncate(src.g + bias),
                    _truncate(src.b + bias),
                )
                pixels[i] = nearest(biased)

        return buffer


def algorithm_for(method: DitherMethod) -> DitherAlgorithm:
    """手法に対応するアルゴリズムを生成。"""
    if method.family is DitherFamily.ERROR_DIFFUSION:
        return ErrorDiffusionDither(kernel_for(method))
    if method.family is DitherFamily.ORDERED:
        return OrderedDither(matrix_for(method))
    return NoDither()


def dither(buffer: PixelBuffer, method: DitherMethod, palette: PaletteSource) -> PixelBuffer:
    """バッファ全体に指定手法を1回適用する（インプレース）。

    Raises:
        ValueError: バッファ寸法の不整合、またはパレットが空の場合
    """
    buffer.validate()
    if not palette_colors(palette):
        raise ValueError("palette must contain at least one color")
    if buffer.is_empty:
        return buffer
    return algorithm_for(method).dither(buffer, palette)


def _clamp(value: int, min_val: int = 0, max_val: int = 255) -> int:
    """値を指定範囲にクランプ。"""
    return max(min_val, min(max_val, value))


def _truncate(value: float) -> int:
    """0.0-255.0 にクランプしてから小数部を切り捨てる。"""
    return int(max(0.0, min(255.0, value)))
