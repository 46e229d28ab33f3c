"""ディザリング実行ユースケース。

手法とパレットを受け取り、PixelBuffer / NumPy配列に対してディザリングを実行する。
dither_array は domain層の Pure Python 実装を経由し、
dither_array_fast は同一結果をNumPyで高速に求める。
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import numpy.typing as npt

from palette_dither.domain.color import (
    RGB,
    ColorPalette,
    PaletteSource,
    find_nearest_color_index,
    palette_colors,
)
from palette_dither.domain.dithering import dither, kernel_for, matrix_for
from palette_dither.domain.image_model import DitherFamily, DitherMethod, PixelBuffer
from palette_dither.domain.kernels import DiffusionKernel
from palette_dither.infrastructure.image_io import (
    array_to_buffer,
    buffer_to_array,
    check_rgb_array,
)
from palette_dither.infrastructure.palette_lookup import bias_field, quantize_array

logger = logging.getLogger(__name__)


def _palette_name(palette: PaletteSource) -> str:
    key = getattr(palette, "key", None)
    if key is not None:
        return key
    return f"custom[{len(palette_colors(palette))}]"


class DitherService:
    """ディザリングサービス。"""

    def dither_buffer(
        self,
        buffer: PixelBuffer,
        method: DitherMethod = DitherMethod.FLOYD_STEINBERG,
        palette: PaletteSource = ColorPalette.MONOCHROME,
    ) -> PixelBuffer:
        """PixelBuffer に対してディザリングを実行（インプレース）。"""
        logger.debug(
            "dither %s palette=%s size=%dx%d",
            method.key, _palette_name(palette), buffer.width, buffer.height,
        )
        return dither(buffer, method, palette)

    def dither_array(
        self,
        rgb_array: npt.NDArray[np.uint8],
        method: DitherMethod = DitherMethod.FLOYD_STEINBERG,
        palette: PaletteSource = ColorPalette.MONOCHROME,
    ) -> npt.NDArray[np.uint8]:
        """NumPy配列に対してディザリングを実行（domain層経由）。

        Args:
            rgb_array: (H, W, 3) の uint8 配列
            method: ディザリング手法
            palette: 使用するカラーパレット

        Returns:
            ディザリング済みの (H, W, 3) uint8 配列
        """
        buffer = array_to_buffer(rgb_array)
        self.dither_buffer(buffer, method, palette)
        return buffer_to_array(buffer)

    def dither_array_fast(
        self,
        rgb_array: npt.NDArray[np.uint8],
        method: DitherMethod = DitherMethod.FLOYD_STEINBERG,
        palette: PaletteSource = ColorPalette.MONOCHROME,
    ) -> npt.NDArray[np.uint8]:
        """NumPyベースの高速ディザリング。

        結果は dither_array と画素単位で一致する。
        量子化のみ・組織的ディザは画像全体をベクトル化して処理し、
        誤差拡散は逐次依存があるためスカラーループ + 最近色キャッシュで処理する。

        Args:
            rgb_array: (H, W, 3) の uint8 配列
            method: ディザリング手法
            palette: 使用するカラーパレット

        Returns:
            ディザリング済みの (H, W, 3) uint8 配列
        """
        check_rgb_array(rgb_array)
        colors = palette_colors(palette)
        if not colors:
            raise ValueError("palette must contain at least one color")
        if not isinstance(palette, ColorPalette) and hasattr(palette, "nearest"):
            # 独自の nearest を持つパレットは domain 層で処理する
            return self.dither_array(rgb_array, method, palette)

        h, w = rgb_array.shape[:2]
        logger.debug(
            "dither(fast) %s palette=%s size=%dx%d",
            method.key, _palette_name(palette), w, h,
        )
        if h == 0 or w == 0:
            return rgb_array.copy()

        if method.family is DitherFamily.NONE:
            return quantize_array(rgb_array, colors)

        if method.family is DitherFamily.ORDERED:
            bias = bias_field(matrix_for(method), w, h)
            biased = rgb_array.astype(np.float64) + bias[:, :, np.newaxis]
            biased = np.floor(np.clip(biased, 0.0, 255.0)).astype(np.int64)
            return quantize_array(biased, colors)

        return _error_diffuse(rgb_array, kernel_for(method), colors)


def _error_diffuse(
    rgb_array: npt.NDArray[np.uint8],
    kernel: DiffusionKernel,
    palette: Sequence[RGB],
) -> npt.NDArray[np.uint8]:
    """誤差拡散のスカラーループ。

    演算順序は domain層の ErrorDiffusionDither と同一にしてあり、
    浮動小数点の結果もビット単位で一致する。
    """
    h, w = rgb_array.shape[:2]
    n = h * w
    src = rgb_array.reshape(-1, 3).tolist()
    pal_rgb = [c.to_tuple() for c in palette]

    err_r = [0.0] * n
    err_g = [0.0] * n
    err_b = [0.0] * n
    chosen = [0] * n

    # (r, g, b) → パレットインデックス
    cache: dict[tuple[int, int, int], int] = {}

    offsets = kernel.offsets
    divisor = kernel.divisor

    # ローカル変数キャッシュ（ループ高速化）
    _round = round
    _max = max
    _min = min

    for y in range(h):
        row_base = y * w
        for x in range(w):
            i = row_base + x
            r0, g0, b0 = src[i]

            work_r = r0 + err_r[i]
            work_g = g0 + err_g[i]
            work_b = b0 + err_b[i]

            key = (
                _max(0, _min(255, _round(work_r))),
                _max(0, _min(255, _round(work_g))),
                _max(0, _min(255, _round(work_b))),
            )
            idx = cache.get(key)
            if idx is None:
                idx = find_nearest_color_index(RGB(*key), palette)
                cache[key] = idx
            chosen[i] = idx

            nr, ng, nb = pal_rgb[idx]
            e_r = work_r - nr
            e_g = work_g - ng
            e_b = work_b - nb

            for dx, dy, weight in offsets:
                nx = x + dx
                if 0 <= nx < w and y + dy < h:
                    j = i + dy * w + dx
                    err_r[j] += e_r * weight / divisor
                    err_g[j] += e_g * weight / divisor
                    err_b[j] += e_b * weight / divisor

    pal_arr = np.array(pal_rgb, dtype=np.uint8)
    return pal_arr[np.array(chosen, dtype=np.intp)].reshape(h, w, 3)
