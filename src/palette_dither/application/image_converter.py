"""画像変換パイプライン。

読み込み→（リサイズ）→ディザリング→出力の一連処理。
進捗コールバック対応。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import numpy as np
import numpy.typing as npt

from palette_dither.domain.color import ColorPalette
from palette_dither.domain.image_model import DitherMethod, ImageSpec
from palette_dither.application.dither_service import DitherService
from palette_dither.infrastructure.image_io import load_image, resize_image, save_image

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, float], None]
"""進捗コールバック: (stage_name, progress_0_to_1)"""

_DEFAULT_METHOD = DitherMethod.FLOYD_STEINBERG
_DEFAULT_PALETTE = ColorPalette.MONOCHROME
_FALLBACK_SUFFIX = ".png"


def default_output_path(input_path: str | Path) -> Path:
    """出力先未指定時のパス。入力と同じディレクトリに <stem>_out<suffix>。

    拡張子のない入力は PNG として保存する。
    """
    path = Path(input_path)
    suffix = path.suffix or _FALLBACK_SUFFIX
    return path.with_name(f"{path.stem}_out{suffix}")


class ImageConverter:
    """画像変換パイプライン。"""

    def __init__(
        self,
        dither_service: DitherService | None = None,
        method: DitherMethod = _DEFAULT_METHOD,
        palette: ColorPalette = _DEFAULT_PALETTE,
    ) -> None:
        self._dither_service = dither_service or DitherService()
        self._method = method
        self._palette = palette
        self._use_fast: bool = True

    @property
    def method(self) -> DitherMethod:
        return self._method

    @method.setter
    def method(self, value: DitherMethod) -> None:
        self._method = value

    @property
    def palette(self) -> ColorPalette:
        return self._palette

    @palette.setter
    def palette(self, value: ColorPalette) -> None:
        self._palette = value

    @property
    def use_fast(self) -> bool:
        """True で NumPy 高速版、False で domain層の実装を使う。結果は同じ。"""
        return self._use_fast

    @use_fast.setter
    def use_fast(self, value: bool) -> None:
        self._use_fast = value

    def _dither(self, image: npt.NDArray[np.uint8]) -> npt.NDArray[np.uint8]:
        if self._use_fast:
            return self._dither_service.dither_array_fast(image, self._method, self._palette)
        return self._dither_service.dither_array(image, self._method, self._palette)

    def prepare_array(
        self,
        image: npt.NDArray[np.uint8],
        spec: ImageSpec | None = None,
    ) -> npt.NDArray[np.uint8]:
        """ディザリング前の前処理（リサイズ）のみ実行。"""
        if spec is None or not spec.resize_requested:
            return image
        return resize_image(
            image,
            spec.target_width,
            spec.target_height,
            spec.keep_aspect_ratio,
        )

    def convert_array(
        self,
        image: npt.NDArray[np.uint8],
        spec: ImageSpec | None = None,
        progress: ProgressCallback | None = None,
    ) -> npt.NDArray[np.uint8]:
        """NumPy配列を直接変換（GUI用）。

        Args:
            image: (H, W, 3) の uint8 配列
            spec: 変換仕様。None またはサイズ未指定ならリサイズしない
            progress: 進捗コールバック

        Returns:
            ディザリング済みの配列
        """
        if spec is not None and spec.resize_requested:
            if progress:
                progress("リサイズ", 0.1)
            image = self.prepare_array(image, spec)

        if progress:
            progress("ディザリング", 0.3)

        result = self._dither(image)

        if progress:
            progress("完了", 1.0)

        return result

    def convert(
        self,
        input_path: str | Path,
        spec: ImageSpec | None = None,
        progress: ProgressCallback | None = None,
    ) -> npt.NDArray[np.uint8]:
        """画像ファイルを変換パイプラインで処理。

        Args:
            input_path: 入力画像パス
            spec: 変換仕様（サイズ等）
            progress: 進捗コールバック

        Returns:
            ディザリング済みの (H, W, 3) uint8 配列
        """
        if progress:
            progress("読み込み", 0.0)

        image = load_image(input_path)
        return self.convert_array(image, spec, progress)

    def convert_and_save(
        self,
        input_path: str | Path,
        output_path: str | Path | None = None,
        spec: ImageSpec | None = None,
        progress: ProgressCallback | None = None,
    ) -> Path:
        """画像を変換して保存。

        Returns:
            実際に保存したパス
        """
        out = Path(output_path) if output_path is not None else default_output_path(input_path)
        result = self.convert(input_path, spec, progress)
        save_image(result, out)
        logger.info(
            "%s + %s: %s -> %s",
            self._method.key, self._palette.key, input_path, out,
        )
        return out
