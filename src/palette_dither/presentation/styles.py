"""QSS テーマ定義。

ライトテーマ。ビューア背景はディザ結果の白と区別できるようグレー。
"""

_ACCENT = "#4a90d9"
_ACCENT_HOVER = "#3a7bc8"
_ACCENT_PRESSED = "#2e6ab3"

_VIEWER_BG = "#d8d8d8"
_BORDER = "#ccc"
_TEXT = "#333"
_TEXT_MUTED = "#666"
_DISABLED_BG = "#e8e8e8"
_DISABLED_TEXT = "#aaa"

APP_STYLESHEET = f"""
QMainWindow {{
    background-color: #f0f0f0;
}}

QStatusBar {{
    border-top: 1px solid {_BORDER};
    color: {_TEXT_MUTED};
    font-size: 12px;
}}

ImageViewer {{
    background-color: {_VIEWER_BG};
    border: 1px solid {_BORDER};
}}
ImageViewer QLabel {{
    color: {_TEXT_MUTED};
    font-size: 14px;
    background: transparent;
}}

QLabel#panelLabel {{
    font-weight: bold;
    font-size: 12px;
    color: {_TEXT_MUTED};
}}

QGroupBox {{
    border: 1px solid {_BORDER};
    border-radius: 4px;
    margin-top: 10px;
    padding: 8px 6px 4px 6px;
    font-weight: bold;
    color: {_TEXT};
}}
QGroupBox::title {{
    subcontrol-origin: margin;
    left: 8px;
    padding: 0 4px;
}}

QComboBox, QSpinBox {{
    border: 1px solid #bbb;
    border-radius: 3px;
    padding: 3px 6px;
    background-color: white;
    min-height: 20px;
}}
QComboBox:focus, QSpinBox:focus {{
    border-color: {_ACCENT};
}}

QPushButton {{
    background-color: {_ACCENT};
    color: white;
    border: none;
    border-radius: 4px;
    padding: 5px 14px;
    font-weight: bold;
}}
QPushButton:hover {{
    background-color: {_ACCENT_HOVER};
}}
QPushButton:pressed {{
    background-color: {_ACCENT_PRESSED};
}}
QPushButton:disabled {{
    background-color: {_DISABLED_BG};
    color: {_DISABLED_TEXT};
}}
"""
