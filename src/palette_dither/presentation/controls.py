"""パラメータ制御パネル。

3グループ構成: Dithering / Resize / Actions
"""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QSpinBox,
    QWidget,
)

from palette_dither.domain.color import ColorPalette
from palette_dither.domain.image_model import DitherFamily, DitherMethod, ImageSpec

_RESIZE_WIDTH_DEFAULT = 400
_RESIZE_HEIGHT_DEFAULT = 300
_RESIZE_MAX = 8192


class ControlPanel(QWidget):
    """パラメータ制御パネル。"""

    convert_clicked = pyqtSignal()
    save_clicked = pyqtSignal()
    method_changed = pyqtSignal(object)
    palette_changed = pyqtSignal(object)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(4, 0, 4, 0)
        layout.setSpacing(4)

        # --- Dithering グループ ---
        dither_group = QGroupBox("Dithering")
        dither_layout = QHBoxLayout(dither_group)

        dither_layout.addWidget(QLabel("Method:"))
        self._method_combo = QComboBox()
        for family in DitherFamily:
            for method in DitherMethod:
                if method.family is family:
                    self._method_combo.addItem(method.label, method)
        self._method_combo.setCurrentIndex(
            self._method_combo.findData(DitherMethod.FLOYD_STEINBERG),
        )
        self._method_combo.currentIndexChanged.connect(
            lambda _: self.method_changed.emit(self.method),
        )
        dither_layout.addWidget(self._method_combo)

        dither_layout.addWidget(QLabel("Palette:"))
        self._palette_combo = QComboBox()
        for palette in ColorPalette:
            self._palette_combo.addItem(f"{palette.key} ({len(palette.colors)})", palette)
        self._palette_combo.currentIndexChanged.connect(
            lambda _: self.palette_changed.emit(self.palette),
        )
        dither_layout.addWidget(self._palette_combo)

        layout.addWidget(dither_group)

        # --- Resize グループ ---
        resize_group = QGroupBox("Resize")
        resize_layout = QHBoxLayout(resize_group)

        self._resize_check = QCheckBox("Enable")
        self._resize_check.setToolTip("ディザリング前に指定サイズへ縮小")
        self._resize_check.toggled.connect(self._on_resize_toggled)
        resize_layout.addWidget(self._resize_check)

        self._width_spin = QSpinBox()
        self._width_spin.setRange(1, _RESIZE_MAX)
        self._width_spin.setValue(_RESIZE_WIDTH_DEFAULT)
        resize_layout.addWidget(self._width_spin)
        resize_layout.addWidget(QLabel("x"))
        self._height_spin = QSpinBox()
        self._height_spin.setRange(1, _RESIZE_MAX)
        self._height_spin.setValue(_RESIZE_HEIGHT_DEFAULT)
        resize_layout.addWidget(self._height_spin)

        self._aspect_check = QCheckBox("Keep aspect")
        self._aspect_check.setChecked(True)
        resize_layout.addWidget(self._aspect_check)
        self._on_resize_toggled(False)

        layout.addWidget(resize_group)

        # --- Actions グループ ---
        actions_group = QGroupBox("Actions")
        actions_layout = QHBoxLayout(actions_group)

        self._convert_btn = QPushButton("Convert")
        self._convert_btn.setEnabled(False)
        self._convert_btn.clicked.connect(self.convert_clicked.emit)
        actions_layout.addWidget(self._convert_btn)

        self._save_btn = QPushButton("Save")
        self._save_btn.setEnabled(False)
        self._save_btn.clicked.connect(self.save_clicked.emit)
        actions_layout.addWidget(self._save_btn)

        layout.addWidget(actions_group)
        layout.addStretch()

    @property
    def method(self) -> DitherMethod:
        return self._method_combo.currentData()

    @property
    def palette(self) -> ColorPalette:
        return self._palette_combo.currentData()

    @property
    def image_spec(self) -> ImageSpec | None:
        if not self._resize_check.isChecked():
            return None
        return ImageSpec(
            self._width_spin.value(),
            self._height_spin.value(),
            keep_aspect_ratio=self._aspect_check.isChecked(),
        )

    def set_convert_enabled(self, enabled: bool) -> None:
        self._convert_btn.setEnabled(enabled)

    def set_save_enabled(self, enabled: bool) -> None:
        self._save_btn.setEnabled(enabled)

    def _on_resize_toggled(self, checked: bool) -> None:
        self._width_spin.setEnabled(checked)
        self._height_spin.setEnabled(checked)
        self._aspect_check.setEnabled(checked)
