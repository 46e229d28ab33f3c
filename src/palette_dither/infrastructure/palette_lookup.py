"""NumPyによる一括パレット検索。

最近傍色検索とバイアス場の生成をベクトル化し、
組織的ディザ・量子化のみの処理を画像全体で一度に行う。
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import numpy.typing as npt

from palette_dither.domain.color import RGB
from palette_dither.domain.threshold import ThresholdMatrix

# 一度に距離計算するピクセル数 (N x P x 3 の中間配列を抑える)
CHUNK_PIXELS = 1 << 16


def palette_array(palette: Sequence[RGB]) -> npt.NDArray[np.int64]:
    """パレットを (P, 3) の int64 配列に変換。"""
    if len(palette) == 0:
        raise ValueError("palette must contain at least one color")
    return np.array([c.to_tuple() for c in palette], dtype=np.int64)


def nearest_indices(
    rgb_array: npt.NDArray[np.integer],
    palette: Sequence[RGB],
) -> npt.NDArray[np.intp]:
    """各ピクセルの最近傍パレットインデックスを一括検索。

    二乗ユークリッド距離。同距離の場合は argmin の仕様により
    パレット順で先の色が選ばれる。

    Args:
        rgb_array: (..., 3) の整数配列。値は 0-255
        palette: カラーパレット

    Returns:
        (...) のインデックス配列
    """
    pal = palette_array(palette)
    flat = rgb_array.reshape(-1, 3).astype(np.int64)
    out = np.empty(flat.shape[0], dtype=np.intp)

    for start in range(0, flat.shape[0], CHUNK_PIXELS):
        chunk = flat[start:start + CHUNK_PIXELS]
        # (N, 1, 3) - (1, P, 3) → (N, P, 3)
        diff = chunk[:, np.newaxis, :] - pal[np.newaxis, :, :]
        dist_sq = diff[..., 0] ** 2 + diff[..., 1] ** 2 + diff[..., 2] ** 2
        out[start:start + CHUNK_PIXELS] = np.argmin(dist_sq, axis=1)

    return out.reshape(rgb_array.shape[:-1])


def quantize_array(
    rgb_array: npt.NDArray[np.integer],
    palette: Sequence[RGB],
) -> npt.NDArray[np.uint8]:
    """各ピクセルを最近傍パレット色に置き換えた (H, W, 3) uint8 配列を返す。"""
    indices = nearest_indices(rgb_array, palette)
    return palette_array(palette).astype(np.uint8)[indices]


def bias_field(matrix: ThresholdMatrix, width: int, height: int) -> npt.NDArray[np.float64]:
    """閾値行列を画像サイズにタイルしたバイアス場 (H, W) を生成。"""
    thresholds = np.array(matrix.rows, dtype=np.float64)
    bias = (thresholds / matrix.denominator - 0.5) * matrix.strength
    reps_y = -(-height // matrix.height)
    reps_x = -(-width // matrix.width)
    return np.tile(bias, (reps_y, reps_x))[:height, :width]
