"""color.py のテスト。"""

import pytest

from palette_dither.domain.color import (
    BLACK,
    PALETTE_8C,
    PALETTE_16C,
    PALETTE_MONOCHROME,
    RGB,
    WHITE,
    ColorPalette,
    color_distance_sq,
    find_nearest_color,
    find_nearest_color_index,
    palette_colors,
)


class TestRGB:
    def test_to_tuple(self) -> None:
        assert RGB(1, 2, 3).to_tuple() == (1, 2, 3)

    def test_from_hex(self) -> None:
        assert RGB.from_hex(0xCC3500) == RGB(204, 53, 0)

    def test_from_sequence(self) -> None:
        assert RGB.from_sequence([10, 20, 30]) == RGB(10, 20, 30)

    def test_from_sequence_wrong_length(self) -> None:
        with pytest.raises(ValueError):
            RGB.from_sequence([1, 2])

    @pytest.mark.parametrize("channels", [(256, 0, 0), (0, -1, 0), (0, 0, 300)])
    def test_out_of_range(self, channels: tuple[int, int, int]) -> None:
        with pytest.raises(ValueError):
            RGB(*channels)

    def test_hashable(self) -> None:
        assert len({RGB(1, 1, 1), RGB(1, 1, 1), BLACK}) == 2


class TestPalettes:
    def test_sizes(self) -> None:
        assert len(PALETTE_MONOCHROME) == 2
        assert len(PALETTE_8C) == 8
        assert len(PALETTE_16C) == 16

    def test_monochrome_order(self) -> None:
        assert PALETTE_MONOCHROME == (BLACK, WHITE)

    def test_no_duplicates(self) -> None:
        for palette in (PALETTE_MONOCHROME, PALETTE_8C, PALETTE_16C):
            assert len(set(palette)) == len(palette)

    def test_enum_colors(self) -> None:
        assert ColorPalette.COLOR8.colors is PALETTE_8C
        assert ColorPalette.COLOR16.key == "color16"

    def test_from_name(self) -> None:
        assert ColorPalette.from_name("monochrome") is ColorPalette.MONOCHROME
        assert ColorPalette.from_name(" Color8 ") is ColorPalette.COLOR8

    def test_from_name_unknown(self) -> None:
        with pytest.raises(ValueError, match="unknown palette"):
            ColorPalette.from_name("color4")

    def test_palette_colors_accepts_sequence(self) -> None:
        assert palette_colors([BLACK, WHITE]) == (BLACK, WHITE)
        assert palette_colors(ColorPalette.MONOCHROME) == PALETTE_MONOCHROME

    def test_enum_nearest(self) -> None:
        assert ColorPalette.MONOCHROME.nearest(RGB(200, 200, 200)) == WHITE


class TestNearestColor:
    def test_distance(self) -> None:
        assert color_distance_sq(RGB(0, 0, 0), RGB(1, 2, 3)) == 14

    def test_exact_match(self) -> None:
        for i, color in enumerate(PALETTE_16C):
            assert find_nearest_color_index(color, PALETTE_16C) == i

    def test_monochrome_midpoint(self) -> None:
        """127 は黒寄り、128 は白寄り。"""
        assert find_nearest_color(RGB(127, 127, 127), PALETTE_MONOCHROME) == BLACK
        assert find_nearest_color(RGB(128, 128, 128), PALETTE_MONOCHROME) == WHITE

    def test_tie_prefers_first(self) -> None:
        """同距離ならパレット順で先の色。"""
        palette = [RGB(0, 0, 0), RGB(2, 2, 2)]
        assert find_nearest_color_index(RGB(1, 1, 1), palette) == 0
        assert find_nearest_color_index(RGB(1, 1, 1), list(reversed(palette))) == 0

    def test_red_maps_to_palette_red(self) -> None:
        assert find_nearest_color(RGB(200, 30, 10), PALETTE_8C) == RGB.from_hex(0xCC3500)

    def test_single_color_palette(self) -> None:
        assert find_nearest_color(WHITE, [BLACK]) == BLACK

    def test_empty_palette(self) -> None:
        with pytest.raises(ValueError):
            find_nearest_color_index(BLACK, [])
