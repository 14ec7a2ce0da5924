"""
Scrollable document view driven by the scroll actuator.
"""
from pathlib import Path
from typing import Optional
from PyQt5.QtWidgets import QLabel, QScrollArea
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPixmap
import logging

from ..gestures.scroll import ScrollViewport

logger = logging.getLogger(__name__)

PLACEHOLDER_TEXT = "\n\n".join(
    f"Section {i}\n\n" + " ".join(["Open hand scrolls up, closed fist scrolls down."] * 12)
    for i in range(1, 41)
)


class ScrollAreaViewport(ScrollViewport):
    """Adapts a QScrollArea's scroll bars to ScrollViewport."""

    def __init__(self, area: QScrollArea):
        self._area = area

    def scroll_by(self, dx: int, dy: int) -> None:
        # Scroll bars clamp to their own range
        if dx:
            bar = self._area.horizontalScrollBar()
            bar.setValue(bar.value() + dx)
        if dy:
            bar = self._area.verticalScrollBar()
            bar.setValue(bar.value() + dy)

    @property
    def position(self):
        return (self._area.horizontalScrollBar().value(),
                self._area.verticalScrollBar().value())


class DocumentView(QScrollArea):
    """Shows an image document, or placeholder text when none is given."""

    def __init__(self, document: Optional[Path] = None, parent=None):
        super().__init__(parent)
        self.setWidgetResizable(False)
        self._content = QLabel()
        self._content.setAlignment(Qt.AlignTop | Qt.AlignLeft)
        self.setWidget(self._content)
        self.viewport_adapter = ScrollAreaViewport(self)
        self.load(document)

    def load(self, document: Optional[Path]) -> bool:
        """Load an image file; falls back to placeholder text."""
        if document is not None:
            pixmap = QPixmap(str(document))
            if not pixmap.isNull():
                self._content.setPixmap(pixmap)
                self._content.adjustSize()
                logger.info("Loaded document %s (%dx%d)", document, pixmap.width(), pixmap.height())
                return True
            logger.warning("Could not load document %s, showing placeholder", document)

        self._content.setWordWrap(True)
        self._content.setMargin(24)
        self._content.setText(PLACEHOLDER_TEXT)
        self._content.setFixedWidth(900)
        self._content.adjustSize()
        return False
