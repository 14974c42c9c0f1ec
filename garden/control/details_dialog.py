from typing import List, Tuple

from PyQt5 import QtWidgets, QtCore

try:
    from ..intake import format_bytes
    from ..model import Tree
except ImportError:  # pragma: no cover - direct execution
    from garden.intake import format_bytes  # type: ignore
    from garden.model import Tree  # type: ignore


ACCENT = "#50FED5"
VERIFIED = "#7A5CFF"
SIZE = "#FF6A5A"


def detail_rows(tree: Tree) -> List[Tuple[str, str]]:
    return [
        ("File name", tree.file_name),
        ("File type", tree.category.value.capitalize()),
        ("File size", format_bytes(tree.file_size)),
        ("Status", "Verified" if tree.is_verified else "Not verified"),
        ("Branches", str(tree.branches)),
    ]


class TreeDetailsDialog(QtWidgets.QDialog):
    """Read-only summary of the file behind a tree."""

    def __init__(self, tree: Tree, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Tree details")
        self.setModal(True)
        self.setMinimumWidth(320)
        self.setStyleSheet(
            "QDialog { background: #0F121A; color: white; border: 1px solid rgba(80,254,213,0.25); }"
            "QLabel[role='caption'] { color: #9CA3AF; font-size: 10px; text-transform: uppercase; }"
        )

        layout = QtWidgets.QVBoxLayout(self)
        title = QtWidgets.QLabel("Tree details")
        title.setStyleSheet(f"color: {ACCENT}; font-size: 18px; font-weight: bold;")
        layout.addWidget(title)

        self.value_labels = {}
        for caption, value in detail_rows(tree):
            cap = QtWidgets.QLabel(caption)
            cap.setProperty("role", "caption")
            val = QtWidgets.QLabel(value)
            val.setTextInteractionFlags(QtCore.Qt.TextSelectableByMouse)
            val.setWordWrap(True)
            if caption == "File size":
                val.setStyleSheet(f"color: {SIZE}; font-weight: 600;")
            elif caption == "Status":
                val.setStyleSheet(f"color: {VERIFIED if tree.is_verified else '#6B7280'}; font-weight: 600;")
            layout.addWidget(cap)
            layout.addWidget(val)
            self.value_labels[caption] = val

        buttons = QtWidgets.QDialogButtonBox(QtWidgets.QDialogButtonBox.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)
