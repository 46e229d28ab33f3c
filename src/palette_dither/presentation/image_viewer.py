"""画像プレビューウィジェット。

ディザパターンが潰れないよう補間なし（最近傍）で描画する。
ホイールで整数倍ズーム、ドラッグでパン、ダブルクリックでフィット。
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt
from PyQt6.QtCore import QPointF, Qt, pyqtSignal
from PyQt6.QtGui import QDragEnterEvent, QDropEvent, QImage, QMouseEvent, QPainter, QPixmap, QWheelEvent
from PyQt6.QtWidgets import QLabel, QSizePolicy, QVBoxLayout, QWidget

_ZOOM_STEPS = (0.125, 0.25, 0.5, 1.0, 2.0, 3.0, 4.0, 6.0, 8.0, 12.0, 16.0)


class ImageViewer(QWidget):
    """画像表示ウィジェット。"""

    image_dropped = pyqtSignal(str)
    view_changed = pyqtSignal(float, QPointF)

    def __init__(self, placeholder: str = "", parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._pixmap: QPixmap | None = None
        self._scale = 1.0
        self._offset = QPointF(0, 0)
        self._drag_start: QPointF | None = None

        self.setAcceptDrops(True)
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self.setMinimumSize(200, 150)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)

        self._label = QLabel(placeholder or "ドラッグ&ドロップで画像を読み込み")
        self._label.setAlignment(Qt.AlignmentFlag.AlignCenter)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._label)

    def set_image_from_array(self, array: npt.NDArray[np.uint8]) -> None:
        """NumPy配列(RGB)から画像を設定。表示位置は維持しない。"""
        array = np.ascontiguousarray(array)
        h, w = array.shape[:2]
        qimage = QImage(array.data, w, h, 3 * w, QImage.Format.Format_RGB888)
        self._pixmap = QPixmap.fromImage(qimage.copy())
        self._label.hide()
        self._fit_to_widget()
        self.update()

    def clear_image(self) -> None:
        self._pixmap = None
        self._label.show()
        self.update()

    def set_view(self, scale: float, offset: QPointF) -> None:
        """他のビューアとズーム・位置を同期する。"""
        self._scale = scale
        self._offset = QPointF(offset)
        self.update()

    def _fit_to_widget(self) -> None:
        if self._pixmap is None:
            return
        pw, ph = self._pixmap.width(), self._pixmap.height()
        if pw == 0 or ph == 0:
            return
        fit = min(self.width() / pw, self.height() / ph)
        # 1倍以上なら整数倍に丸めてピクセルを均等に見せる
        self._scale = float(int(fit)) if fit >= 1.0 else fit
        self._offset = QPointF(
            (self.width() - pw * self._scale) / 2,
            (self.height() - ph * self._scale) / 2,
        )
        self.view_changed.emit(self._scale, self._offset)

    def _next_zoom(self, zoom_in: bool) -> float:
        if zoom_in:
            return next((s for s in _ZOOM_STEPS if s > self._scale), _ZOOM_STEPS[-1])
        return next((s for s in reversed(_ZOOM_STEPS) if s < self._scale), _ZOOM_STEPS[0])

    def paintEvent(self, event) -> None:  # type: ignore[override]
        if self._pixmap is None:
            super().paintEvent(event)
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform, False)
        painter.translate(self._offset)
        painter.scale(self._scale, self._scale)
        painter.drawPixmap(0, 0, self._pixmap)
        painter.end()

    def wheelEvent(self, event: QWheelEvent) -> None:
        if self._pixmap is None:
            return

        # マウス位置を中心にズーム
        pos = event.position()
        anchor = (pos - self._offset) / self._scale
        self._scale = self._next_zoom(event.angleDelta().y() > 0)
        self._offset = pos - anchor * self._scale
        self.view_changed.emit(self._scale, self._offset)
        self.update()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() == Qt.MouseButton.LeftButton and self._pixmap is not None:
            self._drag_start = event.position()

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        if self._drag_start is None:
            return
        self._offset += event.position() - self._drag_start
        self._drag_start = event.position()
        self.view_changed.emit(self._scale, self._offset)
        self.update()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        self._drag_start = None

    def mouseDoubleClickEvent(self, event: QMouseEvent) -> None:
        self._fit_to_widget()
        self.update()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        if self._pixmap is not None:
            self._fit_to_widget()
        super().resizeEvent(event)

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if event.mimeData().hasUrls():
            event.acceptProposedAction()

    def dropEvent(self, event: QDropEvent) -> None:
        urls = event.mimeData().urls()
        if urls:
            self.image_dropped.emit(urls[0].toLocalFile())
