"""メインウィンドウ。

2パネル並列で元画像とディザリング結果を表示。ズーム・位置は両パネルで同期。
"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
from PyQt6.QtCore import Qt, QThread, pyqtSignal
from PyQt6.QtWidgets import (
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QStatusBar,
    QVBoxLayout,
    QWidget,
)

from palette_dither.application.dither_service import DitherService
from palette_dither.application.image_converter import ImageConverter, default_output_path
from palette_dither.domain.image_model import ImageSpec
from palette_dither.infrastructure.image_io import load_image, save_image
from palette_dither.infrastructure.image_metrics import compute_report
from palette_dither.presentation.controls import ControlPanel
from palette_dither.presentation.image_viewer import ImageViewer

logger = logging.getLogger(__name__)


class ConvertWorker(QThread):
    """バックグラウンドで変換処理を実行するワーカー。

    finished は (ディザ結果, 品質レポート) を送る。
    """

    finished = pyqtSignal(np.ndarray, object)
    error = pyqtSignal(str)
    progress = pyqtSignal(str, float)

    def __init__(
        self,
        converter: ImageConverter,
        image: np.ndarray,
        spec: ImageSpec | None,
    ) -> None:
        super().__init__()
        self._converter = converter
        self._image = image
        self._spec = spec

    def run(self) -> None:
        try:
            source = self._converter.prepare_array(self._image, self._spec)
            result = self._converter.convert_array(
                source,
                progress=lambda s, p: self.progress.emit(s, p),
            )
            self.finished.emit(result, compute_report(source, result))
        except Exception as e:
            logger.exception("conversion failed")
            self.error.emit(str(e))


def _panel(title: str, viewer: ImageViewer) -> QWidget:
    panel = QWidget()
    layout = QVBoxLayout(panel)
    layout.setContentsMargins(0, 0, 0, 0)
    layout.setSpacing(2)
    label = QLabel(title)
    label.setObjectName("panelLabel")
    label.setAlignment(Qt.AlignmentFlag.AlignCenter)
    layout.addWidget(label)
    layout.addWidget(viewer)
    return panel


class MainWindow(QMainWindow):
    """Palette Dither メインウィンドウ。"""

    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle("Palette Dither")
        self.setMinimumSize(800, 500)
        self.resize(1100, 600)

        self._source_path: Path | None = None
        self._source_image: np.ndarray | None = None
        self._result_image: np.ndarray | None = None
        self._worker: ConvertWorker | None = None

        self._converter = ImageConverter(DitherService())

        self._setup_ui()

    def _setup_ui(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        main_layout = QVBoxLayout(central)
        main_layout.setContentsMargins(6, 6, 6, 6)
        main_layout.setSpacing(4)

        # --- 画像ビューア ---
        self._source_viewer = ImageViewer("元画像")
        self._result_viewer = ImageViewer("プレビュー")
        for viewer in (self._source_viewer, self._result_viewer):
            viewer.image_dropped.connect(self._load_image)
        self._source_viewer.view_changed.connect(self._result_viewer.set_view)
        self._result_viewer.view_changed.connect(self._source_viewer.set_view)

        splitter = QSplitter(Qt.Orientation.Horizontal)
        splitter.addWidget(_panel("Original", self._source_viewer))
        splitter.addWidget(_panel("Dithered", self._result_viewer))
        splitter.setSizes([550, 550])
        main_layout.addWidget(splitter, stretch=1)

        # --- コントロールパネル ---
        self._controls = ControlPanel()
        self._controls.convert_clicked.connect(self._on_convert)
        self._controls.save_clicked.connect(self._on_save)
        self._controls.method_changed.connect(self._on_settings_changed)
        self._controls.palette_changed.connect(self._on_settings_changed)
        main_layout.addWidget(self._controls)

        # --- ステータスバー ---
        self._status_bar = QStatusBar()
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage("Ready: ドラッグ&ドロップまたはCtrl+Oで画像を読み込み")

        # --- メニューバー ---
        file_menu = self.menuBar().addMenu("File")

        open_action = file_menu.addAction("Open...")
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._on_open)

        save_action = file_menu.addAction("Save As...")
        save_action.setShortcut("Ctrl+S")
        save_action.triggered.connect(self._on_save)

        file_menu.addSeparator()
        quit_action = file_menu.addAction("Quit")
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)

    def _on_open(self) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self,
            "画像を開く",
            "",
            "Images (*.png *.jpg *.jpeg *.bmp *.gif *.tiff);;All Files (*)",
        )
        if path:
            self._load_image(path)

    def _load_image(self, path: str) -> None:
        try:
            image = load_image(path)
        except OSError as e:
            QMessageBox.warning(self, "エラー", f"画像の読み込みに失敗しました:\n{e}")
            return

        self._source_path = Path(path)
        self._source_image = image
        self._source_viewer.set_image_from_array(image)
        self._clear_result()
        self._controls.set_convert_enabled(True)
        h, w = image.shape[:2]
        self._status_bar.showMessage(f"読み込み完了: {self._source_path.name} ({w}x{h})")

    def _clear_result(self) -> None:
        self._result_image = None
        self._result_viewer.clear_image()
        self._controls.set_save_enabled(False)

    def _on_settings_changed(self, _value: object) -> None:
        # 設定が変わったら古い結果は破棄
        if self._result_image is not None:
            self._clear_result()
            self._status_bar.showMessage("設定変更: 再変換してください")

    def _on_convert(self) -> None:
        if self._source_image is None:
            return

        self._converter.method = self._controls.method
        self._converter.palette = self._controls.palette

        self._controls.set_convert_enabled(False)
        self._status_bar.showMessage("変換中...")

        self._worker = ConvertWorker(
            self._converter, self._source_image, self._controls.image_spec,
        )
        self._worker.progress.connect(self._on_progress)
        self._worker.finished.connect(self._on_convert_done)
        self._worker.error.connect(self._on_convert_error)
        self._worker.start()

    def _on_progress(self, stage: str, value: float) -> None:
        self._status_bar.showMessage(f"変換中: {stage} ({int(value * 100)}%)")

    def _on_convert_done(self, result: np.ndarray, report: dict[str, float]) -> None:
        self._result_image = result
        self._result_viewer.set_image_from_array(result)
        self._controls.set_convert_enabled(True)
        self._controls.set_save_enabled(True)
        h, w = result.shape[:2]
        self._status_bar.showMessage(
            f"変換完了: {w}x{h}  {self._converter.method.label} / {self._converter.palette.key}"
            f"  PSNR {report['psnr']:.2f} dB  ΔL {report['mean_error']:+.2f}",
        )

    def _on_convert_error(self, message: str) -> None:
        self._controls.set_convert_enabled(True)
        QMessageBox.warning(self, "変換エラー", f"変換に失敗しました:\n{message}")
        self._status_bar.showMessage("変換エラー")

    def _on_save(self) -> None:
        if self._result_image is None:
            return

        suggested = (
            str(default_output_path(self._source_path))
            if self._source_path is not None
            else "dithered_output.png"
        )
        path, _ = QFileDialog.getSaveFileName(
            self,
            "画像を保存",
            suggested,
            "PNG (*.png);;BMP (*.bmp);;All Files (*)",
        )
        if not path:
            return
        try:
            save_image(self._result_image, path)
        except (OSError, ValueError) as e:
            QMessageBox.warning(self, "保存エラー", f"保存に失敗しました:\n{e}")
            return
        self._status_bar.showMessage(f"保存完了: {Path(path).name}")
