"""image_metrics.py のテスト。"""

import math

import numpy as np
import pytest

from palette_dither.domain.color import PALETTE_MONOCHROME
from palette_dither.infrastructure import palette_lookup
from palette_dither.infrastructure.image_metrics import (
    compute_blurred_mse,
    compute_mean_error,
    compute_psnr,
    compute_report,
    count_off_palette,
)


def _checkerboard(size: int = 16) -> np.ndarray:
    yy, xx = np.indices((size, size))
    board = np.where((xx + yy) % 2 == 0, 255, 0).astype(np.uint8)
    return np.stack([board] * 3, axis=-1)


class TestPSNR:
    def test_identical(self) -> None:
        img = np.full((4, 4, 3), 77, dtype=np.uint8)
        assert math.isinf(compute_psnr(img, img))

    def test_known_value(self) -> None:
        a = np.zeros((4, 4, 3), dtype=np.uint8)
        b = np.full((4, 4, 3), 10, dtype=np.uint8)
        # MSE = 100
        assert compute_psnr(a, b) == pytest.approx(10 * math.log10(255 ** 2 / 100))


class TestMeanError:
    def test_sign(self) -> None:
        a = np.full((2, 2, 3), 100, dtype=np.uint8)
        b = np.full((2, 2, 3), 110, dtype=np.uint8)
        assert compute_mean_error(a, b) == pytest.approx(10.0)
        assert compute_mean_error(b, a) == pytest.approx(-10.0)

    def test_checkerboard_drift(self) -> None:
        gray = np.full((16, 16, 3), 128, dtype=np.uint8)
        assert compute_mean_error(gray, _checkerboard()) == pytest.approx(-0.5)


class TestBlurredMSE:
    def test_pattern_closer_than_flat(self) -> None:
        """ぼかすと市松模様は単色の量子化結果より元の灰色に近い。"""
        gray = np.full((16, 16, 3), 128, dtype=np.uint8)
        white = np.full((16, 16, 3), 255, dtype=np.uint8)
        assert compute_blurred_mse(gray, _checkerboard()) < compute_blurred_mse(gray, white)

    def test_identical(self) -> None:
        img = _checkerboard()
        assert compute_blurred_mse(img, img) == 0.0


class TestOffPalette:
    def test_count(self) -> None:
        img = _checkerboard(4)
        assert count_off_palette(img, PALETTE_MONOCHROME) == 0
        img[0, 0] = (1, 2, 3)
        img[3, 3] = (255, 255, 254)
        assert count_off_palette(img, PALETTE_MONOCHROME) == 2

    def test_count_across_chunks(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """チャンク境界をまたいでも数え漏れしない。"""
        monkeypatch.setattr(palette_lookup, "CHUNK_PIXELS", 5)
        img = _checkerboard(8)
        img[0, 4] = (128, 128, 128)
        img[7, 7] = (0, 0, 1)
        img[5, 2] = (254, 255, 255)
        assert count_off_palette(img, PALETTE_MONOCHROME) == 3


class TestReport:
    def test_keys(self) -> None:
        gray = np.full((8, 8, 3), 128, dtype=np.uint8)
        report = compute_report(gray, _checkerboard(8))
        assert set(report) == {"psnr", "mean_error", "blurred_mse"}
        assert report["psnr"] > 0
