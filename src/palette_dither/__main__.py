"""エントリーポイント: python -m palette_dither

引数があれば CLI、なければ GUI を起動する。
"""

import sys


def gui_main() -> None:
    from PyQt6.QtWidgets import QApplication

    from palette_dither.presentation.main_window import MainWindow
    from palette_dither.presentation.styles import APP_STYLESHEET

    app = QApplication(sys.argv)
    app.setStyleSheet(APP_STYLESHEET)
    window = MainWindow()
    window.show()
    sys.exit(app.exec())


def main() -> None:
    if len(sys.argv) > 1:
        from palette_dither.presentation.cli import main as cli_main

        sys.exit(cli_main())
    gui_main()


if __name__ == "__main__":
    main()
