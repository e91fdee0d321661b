# src/retro_chip8/ui/display_view.py
"""
CHIP-8 表示バッファを拡大描画するウィジェット。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget
from PySide6.QtGui import QPainter, QColor, QPaintEvent
from PySide6.QtCore import QSize

from retro_chip8.arch.chip8.display import DisplayBuffer, DISPLAY_WIDTH, DISPLAY_HEIGHT

# @intent:responsibility 表示バッファの点灯ピクセルを scale x scale の矩形として描画します。
class DisplayView(QWidget):
    def __init__(self, scale: int = 10, foreground: str = "#E0E0E0", background: str = "#101010", parent=None):
        super().__init__(parent)
        self._scale = scale
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._display: Optional[DisplayBuffer] = None
        self.setFixedSize(self.sizeHint())

    def sizeHint(self) -> QSize:
        return QSize(DISPLAY_WIDTH * self._scale, DISPLAY_HEIGHT * self._scale)

    def set_display(self, display: DisplayBuffer) -> None:
        self._display = display
        self.update()

    # @intent:responsibility 表示バッファに変更があった場合のみ再描画を要求し、dirtyフラグをクリアします。
    def refresh(self) -> None:
        if self._display is not None and self._display.dirty:
            self._display.dirty = False
            self.update()

    def paintEvent(self, event: QPaintEvent):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        if self._display is None:
            return
        scale = self._scale
        for y, row in enumerate(self._display.rows()):
            for x, lit in enumerate(row):
                if lit:
                    painter.fillRect(x * scale, y * scale, scale, scale, self._foreground)
