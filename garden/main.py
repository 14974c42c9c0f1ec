# -*- coding: utf-8 -*-
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional


def _handle_qt_import_error(exc: ImportError) -> NoReturn:
    """Exit with a helpful message when the Qt bindings cannot be imported."""

    details = str(exc)
    message_lines = [
        "Unable to start the garden: importing PyQt5 failed.",
        "Check that PyQt5 is installed and that the required OpenGL libraries are available.",
    ]
    if "libGL.so.1" in details:
        message_lines.append("Hint: the system library libGL.so.1 is missing. Install the Mesa/OpenGL packages.")
    message_lines.append(f"Original error: {details}")
    raise SystemExit("\n".join(message_lines)) from exc


try:
    from PyQt5 import QtCore, QtGui, QtWidgets
    from PyQt5.QtCore import Qt
except ImportError as exc:  # pragma: no cover - environment dependent
    _handle_qt_import_error(exc)

from .control.details_dialog import TreeDetailsDialog
from .garden_model import GardenModel
from .intake import GardenStats
from .logging_config import setup_logging_from_env
from .model import Tree
from .view import GardenViewWidget

logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parents[1]


class GardenWindow(QtWidgets.QMainWindow):
    def __init__(self, model: Optional[GardenModel] = None, *, force_backend: Optional[str] = None):
        super().__init__(None)
        self.setWindowTitle("Data Garden")
        self.model = model if model is not None else GardenModel(self)
        self.view = GardenViewWidget(self, force_backend=force_backend)
        self._details: Optional[TreeDetailsDialog] = None

        central = QtWidgets.QWidget()
        lay = QtWidgets.QVBoxLayout(central)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.view)
        self.setCentralWidget(central)

        toolbar = QtWidgets.QToolBar("Garden")
        toolbar.setMovable(False)
        toolbar.setFloatable(False)
        self.addToolBar(Qt.TopToolBarArea, toolbar)

        self.act_add = QtWidgets.QAction("Add files…", self)
        self.act_add.setShortcut(QtGui.QKeySequence.Open)
        self.act_add.triggered.connect(self._choose_files)
        toolbar.addAction(self.act_add)

        self.act_water = QtWidgets.QAction("Water garden", self)
        self.act_water.setShortcut(QtGui.QKeySequence("Ctrl+W"))
        self.act_water.triggered.connect(self.model.water)
        toolbar.addAction(self.act_water)

        toolbar.addSeparator()
        self.act_clear = QtWidgets.QAction("Clear garden", self)
        self.act_clear.triggered.connect(self._confirm_clear)
        toolbar.addAction(self.act_clear)

        self.stats_label = QtWidgets.QLabel()
        self.statusBar().addPermanentWidget(self.stats_label)
        self._show_stats(self.model.stats)

        self.model.treesChanged.connect(self.view.set_trees)
        self.model.waterEvent.connect(self.view.set_water_event)
        self.model.statsChanged.connect(self._show_stats)
        self.view.treeMoved.connect(self.model.move)
        self.view.treeSelected.connect(self.show_details)
        self.view.installEventFilter(self)

        QtWidgets.QShortcut(Qt.Key_Escape, self, activated=self.close)
        self.resize(1100, 720)

    def eventFilter(self, watched: QtCore.QObject, event: QtCore.QEvent) -> bool:
        if watched is self.view and event.type() == QtCore.QEvent.Resize:
            self.model.set_surface_size(self.view.width(), self.view.height())
        return super().eventFilter(watched, event)

    def _show_stats(self, stats: GardenStats) -> None:
        self.stats_label.setText(stats.summary())

    def _choose_files(self) -> None:
        paths, _ = QtWidgets.QFileDialog.getOpenFileNames(self, "Plant files")
        if paths:
            self.model.add_paths(paths)

    def _confirm_clear(self) -> None:
        response = QtWidgets.QMessageBox.question(
            self,
            "Clear garden",
            "Are you sure you want to remove all trees from your garden? This action cannot be undone.",
            QtWidgets.QMessageBox.Yes | QtWidgets.QMessageBox.No,
            QtWidgets.QMessageBox.No,
        )
        if response == QtWidgets.QMessageBox.Yes:
            self.clear_garden()

    def clear_garden(self) -> None:
        """Remove every tree and drop splashes still in flight."""

        self.model.clear()
        self.view.reset_visual_state()

    def show_details(self, tree: Tree) -> None:
        if self._details is not None:
            self._details.close()
        self._details = TreeDetailsDialog(tree, self)
        self._details.open()

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:  # type: ignore[override]
        self.view.removeEventFilter(self)
        self.view.teardown()
        super().closeEvent(event)


def main(headless: bool = False, argv: Optional[List[str]] = None) -> int:
    """Start the application and return the exit code.

    When ``headless`` is True nothing Qt related is created, which lets tests
    import and call ``main`` without starting the event loop.  Setting
    ``GARDEN_LOG_FILE`` also writes the log to that file.
    """
    setup_logging_from_env()
    if headless:
        return 0

    def _write_unhandled(exc_type, exc_value, exc_tb):
        try:
            import traceback as _tb

            out_path = ROOT / "run_exception.txt"
            with out_path.open("w", encoding="utf-8") as f:
                _tb.print_exception(exc_type, exc_value, exc_tb, file=f)
        except OSError:
            logger.exception("Could not write run_exception.txt")
        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = _write_unhandled
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_EnableHighDpiScaling, True)
    QtWidgets.QApplication.setAttribute(QtCore.Qt.AA_UseHighDpiPixmaps, True)
    app = QtWidgets.QApplication(argv if argv is not None else sys.argv)
    window = GardenWindow()
    window.show()
    return app.exec_()


if __name__ == "__main__":
    sys.exit(main())
