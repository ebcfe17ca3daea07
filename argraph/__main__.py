"""
Entry point for the AR Graph Plotter.

Usage:
    python -m argraph [--data-dir DIR] [--verbose]
"""

import argparse
import logging
import os
import sys
import traceback


def _check_dependencies():
    """Verify required packages are installed."""
    missing = []
    try:
        import PySide6  # noqa: F401
    except ImportError:
        missing.append("PySide6")
    try:
        import matplotlib  # noqa: F401
    except ImportError:
        missing.append("matplotlib")
    try:
        import numpy  # noqa: F401
    except ImportError:
        missing.append("numpy")
    try:
        import httpx  # noqa: F401
    except ImportError:
        missing.append("httpx")

    if missing:
        print(
            f"Missing required packages: {', '.join(missing)}\n"
            f"Install with: pip install {' '.join(missing)}",
            file=sys.stderr,
        )
        sys.exit(1)


def _exception_hook(exc_type, exc_value, exc_tb):
    """Global exception handler to prevent silent crashes."""
    logging.getLogger("argraph").critical(
        "Unhandled exception:\n%s",
        ''.join(traceback.format_exception(exc_type, exc_value, exc_tb)),
    )

    # Show a dialog if the Qt application is up
    from PySide6.QtWidgets import QMessageBox, QApplication
    app = QApplication.instance()
    if app is not None:
        QMessageBox.critical(
            None, "Unhandled Error",
            f"An unexpected error occurred:\n\n"
            f"{exc_type.__name__}: {exc_value}\n\n"
            f"See console for full traceback.",
        )


def _parse_args(argv):
    parser = argparse.ArgumentParser(prog="argraph", description="AR Graph Plotter")
    parser.add_argument(
        "--data-dir",
        help="dataset directory (default: $ARGRAPH_DATA_DIR or ~/.argraph/datasets)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    """Launch the AR Graph Plotter GUI."""
    args = _parse_args(sys.argv[1:] if argv is None else argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    logging.captureWarnings(True)

    _check_dependencies()

    # Set exception hook before anything else
    sys.excepthook = _exception_hook

    # Configure matplotlib backend before importing Qt widgets
    os.environ.setdefault("QT_API", "pyside6")
    import matplotlib
    matplotlib.use('QtAgg')

    from PySide6.QtWidgets import QApplication
    from PySide6.QtGui import QFont, QFontDatabase

    from .constants import FONT_FAMILIES
    from .dataset_store import DatasetStore
    from .theme import get_dark_stylesheet
    from .gui_main import PlotterMainWindow

    app = QApplication(sys.argv[:1])
    app.setStyle("Fusion")

    font = QFont()
    for family in FONT_FAMILIES:
        if QFontDatabase.hasFamily(family):
            font.setFamily(family)
            break
    font.setPointSize(10)
    app.setFont(font)

    # Apply dark stylesheet
    app.setStyleSheet(get_dark_stylesheet())

    window = PlotterMainWindow(DatasetStore(args.data_dir))
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
