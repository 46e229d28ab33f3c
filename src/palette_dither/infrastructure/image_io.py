"""画像I/O（Pillow ベース）。

画像の読み込み、保存、リサイズと、NumPy配列 ⇔ PixelBuffer の変換を担当。
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import numpy.typing as npt
from PIL import Image

from palette_dither.domain.color import RGB
from palette_dither.domain.image_model import PixelBuffer

logger = logging.getLogger(__name__)


def load_image(path: str | Path) -> npt.NDArray[np.uint8]:
    """画像ファイルを読み込み、RGB配列として返す。

    アルファチャンネルは破棄される。

    Args:
        path: 画像ファイルパス (JPEG, PNG等)

    Returns:
        (H, W, 3) の uint8 配列 (RGB)
    """
    with Image.open(path) as img:
        img = img.convert("RGB")
        array = np.array(img, dtype=np.uint8)
    logger.debug("loaded %s (%dx%d)", path, array.shape[1], array.shape[0])
    return array


def save_image(array: npt.NDArray[np.uint8], path: str | Path) -> None:
    """RGB配列を画像ファイルとして保存。形式は拡張子から決まる。

    Args:
        array: (H, W, 3) の uint8 配列 (RGB)
        path: 保存先パス (PNG, BMP等)
    """
    check_rgb_array(array)
    img = Image.fromarray(array)
    img.save(path)
    logger.info("saved %s (%dx%d)", path, array.shape[1], array.shape[0])


def resize_image(
    array: npt.NDArray[np.uint8],
    target_width: int,
    target_height: int,
    keep_aspect_ratio: bool = True,
) -> npt.NDArray[np.uint8]:
    """画像をリサイズ。

    Args:
        array: (H, W, 3) の uint8 配列
        target_width: 目標幅
        target_height: 目標高さ
        keep_aspect_ratio: True の場合は縮小後、白背景のキャンバスに中央配置

    Returns:
        (target_height, target_width, 3) の uint8 配列
    """
    if target_width <= 0 or target_height <= 0:
        raise ValueError(f"invalid target size {target_width}x{target_height}")
    img = Image.fromarray(array)

    if keep_aspect_ratio:
        img.thumbnail((target_width, target_height), Image.Resampling.LANCZOS)
        canvas = Image.new("RGB", (target_width, target_height), (255, 255, 255))
        offset_x = (target_width - img.width) // 2
        offset_y = (target_height - img.height) // 2
        canvas.paste(img, (offset_x, offset_y))
        return np.array(canvas, dtype=np.uint8)

    img = img.resize((target_width, target_height), Image.Resampling.LANCZOS)
    return np.array(img, dtype=np.uint8)


def check_rgb_array(array: npt.NDArray[np.uint8]) -> None:
    """(H, W, 3) の uint8 配列であることを検証。

    Raises:
        ValueError: 形状または dtype が不正な場合
    """
    if array.ndim != 3 or array.shape[2] != 3:
        raise ValueError(f"expected an (H, W, 3) array, got shape {array.shape}")
    if array.dtype != np.uint8:
        raise ValueError(f"expected uint8 pixels, got {array.dtype}")


def array_to_buffer(array: npt.NDArray[np.uint8]) -> PixelBuffer:
    """(H, W, 3) 配列を PixelBuffer に変換。"""
    check_rgb_array(array)
    h, w = array.shape[:2]
    flat = array.reshape(-1, 3).tolist()
    return PixelBuffer(w, h, [RGB(r, g, b) for r, g, b in flat])


def buffer_to_array(buffer: PixelBuffer) -> npt.NDArray[np.uint8]:
    """PixelBuffer を (H, W, 3) 配列に変換。"""
    buffer.validate()
    flat = np.array([c.to_tuple() for c in buffer.pixels], dtype=np.uint8)
    return flat.reshape(buffer.height, buffer.width, 3)
