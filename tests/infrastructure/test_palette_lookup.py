"""palette_lookup.py のテスト。"""

import numpy as np
import pytest

from palette_dither.domain.color import PALETTE_16C, RGB, find_nearest_color_index
from palette_dither.domain.threshold import BAYER2X2, BAYER4X4
from palette_dither.infrastructure import palette_lookup
from palette_dither.infrastructure.palette_lookup import (
    bias_field,
    nearest_indices,
    palette_array,
    quantize_array,
)


class TestNearestIndices:
    def test_matches_scalar_search(self) -> None:
        rng = np.random.default_rng(1)
        image = rng.integers(0, 256, (9, 7, 3), dtype=np.uint8)
        indices = nearest_indices(image, PALETTE_16C)
        assert indices.shape == (9, 7)
        for (r, g, b), idx in zip(image.reshape(-1, 3).tolist(), indices.ravel().tolist()):
            assert idx == find_nearest_color_index(RGB(r, g, b), PALETTE_16C)

    def test_tie_prefers_first(self) -> None:
        palette = [RGB(0, 0, 0), RGB(2, 2, 2)]
        image = np.ones((1, 1, 3), dtype=np.uint8)
        assert nearest_indices(image, palette)[0, 0] == 0

    def test_chunk_boundary(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """チャンク分割しても結果は同じ。"""
        rng = np.random.default_rng(2)
        image = rng.integers(0, 256, (5, 7, 3), dtype=np.uint8)
        whole = nearest_indices(image, PALETTE_16C)
        monkeypatch.setattr(palette_lookup, "CHUNK_PIXELS", 4)
        np.testing.assert_array_equal(nearest_indices(image, PALETTE_16C), whole)

    def test_empty_palette(self) -> None:
        with pytest.raises(ValueError):
            palette_array([])


class TestQuantize:
    def test_colors(self) -> None:
        image = np.array([[[10, 10, 10], [250, 240, 230]]], dtype=np.uint8)
        result = quantize_array(image, [RGB(0, 0, 0), RGB(255, 255, 255)])
        assert result.dtype == np.uint8
        assert result.tolist() == [[[0, 0, 0], [255, 255, 255]]]


class TestBiasField:
    def test_tiling(self) -> None:
        field = bias_field(BAYER2X2, 5, 3)
        assert field.shape == (3, 5)
        for y in range(3):
            for x in range(5):
                assert field[y, x] == BAYER2X2.bias(x, y)

    def test_smaller_than_matrix(self) -> None:
        field = bias_field(BAYER4X4, 2, 1)
        assert field.shape == (1, 2)
        assert field[0, 1] == BAYER4X4.bias(1, 0)
