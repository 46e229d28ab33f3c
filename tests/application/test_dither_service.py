"""dither_service.py のテスト。"""

import numpy as np
import pytest

from palette_dither.application.dither_service import DitherService
from palette_dither.domain.color import BLACK, RGB, WHITE, ColorPalette
from palette_dither.domain.image_model import DitherFamily, DitherMethod, PixelBuffer


def _random_image(h: int, w: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, (h, w, 3), dtype=np.uint8)


class TestDitherService:
    def setup_method(self) -> None:
        self.service = DitherService()

    def test_output_shape(self) -> None:
        array = np.zeros((10, 20, 3), dtype=np.uint8)
        result = self.service.dither_array(array)
        assert result.shape == (10, 20, 3)
        assert result.dtype == np.uint8

    def test_fast_output_shape(self) -> None:
        array = np.zeros((10, 20, 3), dtype=np.uint8)
        for method in DitherMethod:
            result = self.service.dither_array_fast(array, method, ColorPalette.COLOR8)
            assert result.shape == (10, 20, 3)
            assert result.dtype == np.uint8

    def test_fast_output_only_palette_colors(self) -> None:
        array = _random_image(6, 9)
        palette_set = {c.to_tuple() for c in ColorPalette.COLOR16.colors}
        for method in DitherMethod:
            result = self.service.dither_array_fast(array, method, ColorPalette.COLOR16)
            assert {tuple(p) for p in result.reshape(-1, 3).tolist()} <= palette_set

    def test_white_image_stays_white(self) -> None:
        array = np.full((4, 4, 3), 255, dtype=np.uint8)
        result = self.service.dither_array_fast(array, DitherMethod.ATKINSON)
        np.testing.assert_array_equal(result, array)

    def test_input_not_modified(self) -> None:
        array = _random_image(5, 5)
        before = array.copy()
        self.service.dither_array_fast(array, DitherMethod.STUCKI, ColorPalette.COLOR8)
        self.service.dither_array(array, DitherMethod.STUCKI, ColorPalette.COLOR8)
        np.testing.assert_array_equal(array, before)

    def test_dither_buffer_in_place(self) -> None:
        buf = PixelBuffer.filled(8, 1, RGB(128, 128, 128))
        result = self.service.dither_buffer(buf)
        assert result is buf
        assert buf.pixels == [WHITE, BLACK] * 4

    def test_custom_palette_sequence(self) -> None:
        palette = [RGB(0, 0, 255), RGB(255, 255, 0)]
        array = _random_image(4, 4)
        result = self.service.dither_array_fast(array, DitherMethod.SIERRA, palette)
        assert {tuple(p) for p in result.reshape(-1, 3).tolist()} <= {(0, 0, 255), (255, 255, 0)}

    def test_ordered_truncates(self) -> None:
        """64 + 63.75 = 127.75 は切り捨てで 127 (黒)。"""
        array = np.full((2, 2, 3), 64, dtype=np.uint8)
        result = self.service.dither_array_fast(array, DitherMethod.BAYER2X2)
        np.testing.assert_array_equal(result, np.zeros((2, 2, 3), dtype=np.uint8))

    @pytest.mark.parametrize(
        "method",
        [m for m in DitherMethod if m.family is DitherFamily.ORDERED],
        ids=lambda m: m.key,
    )
    def test_ordered_deterministic(self, method: DitherMethod) -> None:
        array = _random_image(9, 10, seed=8)
        first = self.service.dither_array_fast(array, method, ColorPalette.COLOR16)
        second = self.service.dither_array_fast(array, method, ColorPalette.COLOR16)
        assert first.tobytes() == second.tobytes()

    def test_custom_palette_nearest(self) -> None:
        """独自の nearest を持つパレットは高速版でもそれを使う。"""

        class FirstOnly:
            colors = (RGB(0, 0, 128), RGB(255, 200, 0))

            def nearest(self, color: RGB) -> RGB:
                return self.colors[0]

        array = _random_image(4, 5)
        for method in DitherMethod:
            result = self.service.dither_array_fast(array, method, FirstOnly())
            assert (result.reshape(-1, 3) == (0, 0, 128)).all()

    def test_empty_image(self) -> None:
        array = np.zeros((0, 7, 3), dtype=np.uint8)
        assert self.service.dither_array_fast(array, DitherMethod.JARVIS).shape == (0, 7, 3)
        assert self.service.dither_array(array, DitherMethod.JARVIS).shape == (0, 7, 3)

    def test_empty_palette(self) -> None:
        array = np.zeros((2, 2, 3), dtype=np.uint8)
        with pytest.raises(ValueError):
            self.service.dither_array_fast(array, DitherMethod.NONE, [])
        with pytest.raises(ValueError):
            self.service.dither_array(array, DitherMethod.NONE, [])

    def test_rejects_bad_shape(self) -> None:
        with pytest.raises(ValueError):
            self.service.dither_array_fast(np.zeros((4, 4), dtype=np.uint8))

    def test_rejects_bad_dtype(self) -> None:
        with pytest.raises(ValueError):
            self.service.dither_array_fast(np.zeros((4, 4, 3), dtype=np.float32))


class TestFastMatchesReference:
    """NumPy 版と domain 層の結果はピクセル単位で一致する。"""

    def setup_method(self) -> None:
        self.service = DitherService()
        self.image = _random_image(11, 13, seed=42)

    @pytest.mark.parametrize("palette", list(ColorPalette), ids=lambda p: p.key)
    @pytest.mark.parametrize("method", list(DitherMethod), ids=lambda m: m.key)
    def test_random_image(self, method: DitherMethod, palette: ColorPalette) -> None:
        exact = self.service.dither_array(self.image, method, palette)
        fast = self.service.dither_array_fast(self.image, method, palette)
        np.testing.assert_array_equal(fast, exact)

    @pytest.mark.parametrize("method", list(DitherMethod), ids=lambda m: m.key)
    def test_gradient(self, method: DitherMethod) -> None:
        ramp = np.tile(np.arange(0, 256, 4, dtype=np.uint8), (6, 1))
        image = np.stack([ramp, ramp, ramp], axis=-1)
        exact = self.service.dither_array(image, method, ColorPalette.MONOCHROME)
        fast = self.service.dither_array_fast(image, method, ColorPalette.MONOCHROME)
        np.testing.assert_array_equal(fast, exact)
