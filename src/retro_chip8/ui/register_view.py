# src/retro_chip8/ui/register_view.py
"""
レジスタインスペクタ。

CPUが返すレジスタレイアウト（グループ名とビット幅）から表示欄を組み立て、
フレームごとにget_register_map()の値で更新します。
"""
from typing import Dict, Optional

from PySide6.QtWidgets import QWidget, QVBoxLayout, QGridLayout, QLabel, QGroupBox
from PySide6.QtCore import Qt

from retro_chip8.core.cpu import AbstractCpu
from .fonts import get_monospace_font_family

VALUE_STYLE = "color: #FFD700;"
CHANGED_STYLE = "color: #FF6060;"

# @intent:responsibility グループごとにレジスタ名と16進値を2列で並べて表示します。前回から変化した値は強調表示します。
class RegisterView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        self.setStyleSheet(
            f"background-color: #121212; color: #BBBBBB; font-family: '{get_monospace_font_family()}', monospace;"
        )
        self._root = QVBoxLayout(self)
        self._root.setContentsMargins(5, 5, 5, 5)
        self._cpu: Optional[AbstractCpu] = None
        self._cells: Dict[str, QLabel] = {}
        self._digits: Dict[str, int] = {}
        self._previous: Dict[str, int] = {}

    def set_cpu(self, cpu: AbstractCpu) -> None:
        self._cpu = cpu
        self._rebuild()
        self.update_registers()

    def _clear(self) -> None:
        while self._root.count():
            item = self._root.takeAt(0)
            if item.widget():
                item.widget().deleteLater()
        self._cells.clear()
        self._digits.clear()
        self._previous.clear()

    def _rebuild(self) -> None:
        self._clear()
        for group in self._cpu.get_register_layout():
            box = QGroupBox(group.group_name)
            box.setStyleSheet("QGroupBox { font-weight: bold; color: #EEE; } QGroupBox::title { color: #00AAAA; }")
            grid = QGridLayout(box)
            grid.setHorizontalSpacing(12)
            grid.setVerticalSpacing(2)

            # 2列に折り返して並べる
            for index, info in enumerate(group.registers):
                row, column = divmod(index, 2)
                value = QLabel()
                value.setStyleSheet(VALUE_STYLE)
                value.setAlignment(Qt.AlignRight)
                grid.addWidget(QLabel(f"{info.name}:"), row, column * 2)
                grid.addWidget(value, row, column * 2 + 1)
                self._cells[info.name] = value
                self._digits[info.name] = (info.width + 3) // 4

            self._root.addWidget(box)
        self._root.addStretch()

    # @intent:responsibility 最新のレジスタ値で表示を更新します。
    def update_registers(self) -> None:
        if self._cpu is None:
            return
        for name, value in self._cpu.get_register_map().items():
            cell = self._cells.get(name)
            if cell is None:
                continue
            cell.setText(f"{value:0{self._digits[name]}X}")
            changed = name in self._previous and self._previous[name] != value
            cell.setStyleSheet(CHANGED_STYLE if changed else VALUE_STYLE)
            self._previous[name] = value
