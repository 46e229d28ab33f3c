"""画像品質メトリクス。

ディザリング結果と元画像の比較用。
PSNR, 平均輝度ドリフト, ぼかしMSE（視距離近似）, パレット外ピクセル数。
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import numpy.typing as npt
from scipy.ndimage import gaussian_filter

from palette_dither.domain.color import RGB
from palette_dither.infrastructure.palette_lookup import quantize_array


def compute_psnr(
    original: npt.NDArray[np.uint8],
    reconstructed: npt.NDArray[np.uint8],
) -> float:
    """Peak Signal-to-Noise Ratio を算出。

    Args:
        original: (H, W, 3) uint8
        reconstructed: (H, W, 3) uint8

    Returns:
        PSNR [dB]。同一画像の場合は float('inf')。
    """
    mse = float(np.mean((original.astype(np.float64) - reconstructed.astype(np.float64)) ** 2))
    if mse < 1e-10:
        return float("inf")
    return float(10.0 * np.log10(255.0 ** 2 / mse))


def compute_mean_error(
    original: npt.NDArray[np.uint8],
    reconstructed: npt.NDArray[np.uint8],
) -> float:
    """全チャンネル平均値の差（reconstructed - original）。

    正なら明るく、負なら暗くなっている。
    誤差拡散は平均を保存するので 0 付近になるはず。
    """
    return float(
        np.mean(reconstructed.astype(np.float64)) - np.mean(original.astype(np.float64))
    )


def compute_blurred_mse(
    original: npt.NDArray[np.uint8],
    reconstructed: npt.NDArray[np.uint8],
    sigma: float = 1.5,
) -> float:
    """ガウスぼかし後のMSE。

    離れて見たときの見え方を近似する。ディザパターンは高周波なので
    ぼかすと元画像に近づき、単純量子化より小さい値になる。

    Args:
        original: (H, W, 3) uint8
        reconstructed: (H, W, 3) uint8
        sigma: ガウシアンの標準偏差 [px]

    Returns:
        ぼかし後の平均二乗誤差
    """
    # チャンネル方向にはぼかさない
    sigmas = (sigma, sigma, 0.0)
    a = gaussian_filter(original.astype(np.float64), sigma=sigmas, mode="nearest")
    b = gaussian_filter(reconstructed.astype(np.float64), sigma=sigmas, mode="nearest")
    return float(np.mean((a - b) ** 2))


def count_off_palette(
    image: npt.NDArray[np.uint8],
    palette: Sequence[RGB],
) -> int:
    """パレットに含まれない色のピクセル数。"""
    # パレット内の色なら最近傍色は自分自身になる
    nearest = quantize_array(image, palette)
    return int(np.count_nonzero(np.any(image != nearest, axis=-1)))


def compute_report(
    original: npt.NDArray[np.uint8],
    dithered: npt.NDArray[np.uint8],
) -> dict[str, float]:
    """主要メトリクスをまとめて算出。"""
    return {
        "psnr": compute_psnr(original, dithered),
        "mean_error": compute_mean_error(original, dithered),
        "blurred_mse": compute_blurred_mse(original, dithered),
    }
