"""コマンドラインインターフェース。

    palette-dither -i input.jpg -o output.png -d atkinson -c color16
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from palette_dither.application.image_converter import ImageConverter, default_output_path
from palette_dither.domain.color import ColorPalette
from palette_dither.domain.image_model import DitherMethod, ImageSpec
from palette_dither.infrastructure.image_io import load_image, save_image
from palette_dither.infrastructure.image_metrics import compute_report, count_off_palette

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def _method_arg(value: str) -> DitherMethod:
    try:
        return DitherMethod.from_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _palette_arg(value: str) -> ColorPalette:
    try:
        return ColorPalette.from_name(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="palette-dither",
        description="Dither an image down to a small fixed color palette.",
    )
    parser.add_argument("-i", "--in", dest="in_img", type=Path, help="Input image file path.")
    parser.add_argument(
        "-o", "--out",
        dest="out_img",
        type=Path,
        help="Output image file path. Defaults to <input>_out.<ext>.",
    )
    parser.add_argument(
        "-d", "--dither",
        dest="method",
        type=_method_arg,
        default=DitherMethod.FLOYD_STEINBERG,
        metavar="METHOD",
        help="Dithering algorithm (default: floyd-steinberg). See --list.",
    )
    parser.add_argument(
        "-c", "--color",
        dest="palette",
        type=_palette_arg,
        default=ColorPalette.MONOCHROME,
        metavar="PALETTE",
        help="Color palette: monochrome, color8, color16 (default: monochrome).",
    )
    parser.add_argument("--width", type=int, help="Resize to this width before dithering.")
    parser.add_argument("--height", type=int, help="Resize to this height before dithering.")
    parser.add_argument(
        "--stretch",
        action="store_true",
        help="Ignore the aspect ratio when resizing (default: letterbox on white).",
    )
    parser.add_argument(
        "--exact",
        action="store_true",
        help="Use the pure-Python reference engines instead of the NumPy path.",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print PSNR, mean drift and blurred MSE against the source.",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="List dithering methods and palettes, then exit.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    return parser


def _print_choices() -> None:
    print("methods:")
    for method in DitherMethod:
        print(f"  {method.key:<16} {method.label} ({method.family.value})")
    print("palettes:")
    for palette in ColorPalette:
        print(f"  {palette.key:<16} {len(palette.colors)} colors")


def _spec_from_args(args: argparse.Namespace) -> ImageSpec | None:
    if args.width is None and args.height is None:
        return None
    if args.width is None or args.height is None:
        raise ValueError("--width and --height must be given together")
    return ImageSpec(args.width, args.height, keep_aspect_ratio=not args.stretch)


def run(args: argparse.Namespace) -> int:
    """解析済み引数で変換を実行。終了コードを返す。"""
    converter = ImageConverter(method=args.method, palette=args.palette)
    converter.use_fast = not args.exact
    out_path = args.out_img or default_output_path(args.in_img)

    try:
        spec = _spec_from_args(args)
        source = converter.prepare_array(load_image(args.in_img), spec)
        result = converter.convert_array(
            source,
            progress=lambda stage, p: logger.debug("%s (%.0f%%)", stage, p * 100),
        )
        save_image(result, out_path)
    except (OSError, ValueError) as e:
        logger.error("%s", e)
        return 1

    print(f"Saved to {out_path}")

    if args.metrics:
        report = compute_report(source, result)
        print(f"psnr         {report['psnr']:.2f} dB")
        print(f"mean_error   {report['mean_error']:+.3f}")
        print(f"blurred_mse  {report['blurred_mse']:.2f}")
        print(f"off_palette  {count_off_palette(result, args.palette.colors)}")

    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """CLIエントリーポイント。"""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=_LOG_FORMAT,
    )

    if args.list:
        _print_choices()
        return 0
    if args.in_img is None:
        parser.error("the following arguments are required: -i/--in")

    return run(args)


if __name__ == "__main__":
    sys.exit(main())
