"""サンプル画像生成スクリプト。

1枚の入力画像から全ディザ手法 × 全パレットの結果を書き出し、
品質メトリクスを一覧表示する。手法比較・目視確認用。

Usage:
    python scripts/generate_samples.py photo.jpg samples/ --width 320 --height 240
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# プロジェクトルートからインポート
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from palette_dither.application.dither_service import DitherService
from palette_dither.application.image_converter import ImageConverter
from palette_dither.domain.color import ColorPalette
from palette_dither.domain.image_model import DitherMethod, ImageSpec
from palette_dither.infrastructure.image_io import load_image, save_image
from palette_dither.infrastructure.image_metrics import compute_report


def generate(
    input_path: Path,
    out_dir: Path,
    spec: ImageSpec | None = None,
) -> list[tuple[str, str, dict[str, float]]]:
    """全組み合わせを変換して out_dir に保存。(手法, パレット, メトリクス) を返す。"""
    out_dir.mkdir(parents=True, exist_ok=True)
    converter = ImageConverter(DitherService())
    source = converter.prepare_array(load_image(input_path), spec)

    rows = []
    for palette in ColorPalette:
        converter.palette = palette
        for method in DitherMethod:
            converter.method = method
            result = converter.convert_array(source)
            save_image(result, out_dir / f"{input_path.stem}_{palette.key}_{method.key}.png")
            rows.append((method.key, palette.key, compute_report(source, result)))
    return rows


def main() -> None:
    parser = argparse.ArgumentParser(description="Render every method/palette combination.")
    parser.add_argument("input", type=Path)
    parser.add_argument("out_dir", type=Path)
    parser.add_argument("--width", type=int)
    parser.add_argument("--height", type=int)
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    spec = None
    if args.width and args.height:
        spec = ImageSpec(args.width, args.height)

    rows = generate(args.input, args.out_dir, spec)

    print(f"{'method':<16} {'palette':<11} {'psnr':>7} {'drift':>7} {'blur_mse':>9}")
    for method, palette, report in rows:
        print(
            f"{method:<16} {palette:<11} {report['psnr']:7.2f} "
            f"{report['mean_error']:+7.2f} {report['blurred_mse']:9.1f}"
        )
    print(f"Wrote {len(rows)} images to {args.out_dir}")


if __name__ == "__main__":
    main()
