# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
表示ビューとレジスタビューを配置し、QTimerでホストループを駆動します。
"""
import dataclasses
import time
from typing import Optional

from PySide6.QtWidgets import QMainWindow, QApplication, QDockWidget, QToolBar, QLabel, QFileDialog, QMessageBox
from PySide6.QtGui import QPalette, QColor, QAction, QCloseEvent, QKeyEvent
from PySide6.QtCore import Qt, QTimer, Slot

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.config.models import MachineConfig
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.core.errors import Chip8Error, ExecutionError
from retro_chip8.debugger.debugger import Debugger
from retro_chip8.debugger.host import CycleBudget, report_fatal
from .display_view import DisplayView
from .register_view import RegisterView
from .keymap import key_for
from .fonts import get_monospace_font_family

FRAME_HZ = 60

# @intent:responsibility アプリケーションのメインウィンドウを定義し、ホストループと入出力を仲介します。
class MainWindow(QMainWindow):
    """
    アプリケーションのメインウィンドウクラス。
    フレーム（約1/60秒）ごとに、前フレームからの実経過時間 × cycle_hz 分のサイクルを実行します。
    端数は次フレームへ繰り越されます。キー入力と描画はサイクルの合間にのみ処理されます。
    致命的な実行エラーでは診断を出力し、非ゼロの終了ステータスでイベントループを抜けます。
    """
    def __init__(self, cpu: Chip8Cpu, config: Optional[MachineConfig] = None, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("Retro CHIP-8")
        self._config = config or MachineConfig()

        self._timer = QTimer(self)
        self._timer.setInterval(1000 // FRAME_HZ)
        self._timer.timeout.connect(self._on_frame)

        self._set_dark_theme()
        self._create_views()
        self._create_toolbar()
        self._create_menus()
        self._attach_cpu(cpu)

    def _attach_cpu(self, cpu: Chip8Cpu) -> None:
        self.cpu = cpu
        # ステップ間の待機はQTimerが担うため、デバッガ側では待機しない
        self.debugger = Debugger(cpu, stall=lambda _seconds: None)
        self._budget = CycleBudget(cpu.cycle_hz)
        self._last_frame = time.monotonic()
        self.display_view.set_display(cpu.get_display())
        self.register_view.set_cpu(cpu)
        self._update_status()

    def _create_views(self):
        display = self._config.display
        self.display_view = DisplayView(display.scale, display.foreground, display.background)
        self.setCentralWidget(self.display_view)

        register_dock = QDockWidget("Registers", self)
        register_dock.setAllowedAreas(Qt.RightDockWidgetArea)
        self.register_view = RegisterView()
        register_dock.setWidget(self.register_view)
        self.addDockWidget(Qt.RightDockWidgetArea, register_dock)

        self.status_label = QLabel("")
        self.statusBar().addWidget(self.status_label)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")

        self.open_rom_action = QAction("Open ROM...", self)
        self.open_rom_action.setShortcut("Ctrl+O")
        self.open_rom_action.triggered.connect(self._open_rom)
        file_menu.addAction(self.open_rom_action)

        quit_action = QAction("Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    # @intent:responsibility 実行制御用のツールバーを作成します。
    def _create_toolbar(self):
        toolbar = QToolBar("Main Toolbar")
        self.addToolBar(toolbar)

        self.run_action = QAction("Run", self)
        self.run_action.triggered.connect(self.start)
        toolbar.addAction(self.run_action)

        self.stop_action = QAction("Stop", self)
        self.stop_action.triggered.connect(self.stop)
        toolbar.addAction(self.stop_action)

        self.step_action = QAction("Step", self)
        self.step_action.triggered.connect(self._step)
        toolbar.addAction(self.step_action)

    def _update_ui_state(self, is_running: bool):
        self.run_action.setEnabled(not is_running)
        self.stop_action.setEnabled(is_running)
        self.step_action.setEnabled(not is_running)

    @Slot()
    def start(self):
        self._budget.reset()
        self._last_frame = time.monotonic()
        self._timer.start()
        self._update_ui_state(True)

    @Slot()
    def stop(self):
        self._timer.stop()
        self.debugger.stop()
        self._update_ui_state(False)
        self._update_status()

    @Slot()
    def _step(self):
        self._guarded(self.debugger.step_instruction)
        self._refresh_views()

    # @intent:responsibility 1フレーム分のサイクルを実行し、表示を更新します。
    @Slot()
    def _on_frame(self):
        now = time.monotonic()
        cycles = self._budget.take(now - self._last_frame)
        self._last_frame = now
        if cycles:
            self._guarded(lambda: self.debugger.run(max_cycles=cycles))
        self._refresh_views()

    # @intent:responsibility 致命的な実行エラーを捕捉した場合、ループを停止して診断を出力し、非ゼロ終了します。
    def _guarded(self, action) -> None:
        try:
            action()
        except ExecutionError as e:
            self.stop()
            status = report_fatal(e)
            QMessageBox.critical(self, "Execution Error", str(e))
            QApplication.exit(status)

    def _refresh_views(self):
        self.display_view.refresh()
        self.register_view.update_registers()
        self._update_status()

    def _update_status(self):
        flags = self.cpu.get_flag_state()
        state = "Running" if self._timer.isActive() else "Stopped"
        sound = "  [SOUND]" if flags["SOUND"] else ""
        self.status_label.setText(f"{state}  PC={self.cpu.get_state().pc:#05x}{sound}")

    # @intent:responsibility ROMファイルを選択し、現在の構成でシステムを再構築してロードします。
    @Slot()
    def _open_rom(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if not file_name:
            return
        was_running = self._timer.isActive()
        self.stop()
        try:
            config = dataclasses.replace(self._config, rom=file_name)
            cpu, _bus = SystemBuilder().build_and_start(config)
        except Chip8Error as e:
            QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")
            if was_running:
                self.start()
            return
        self._config = config
        self._attach_cpu(cpu)
        self.start()

    def keyPressEvent(self, event: QKeyEvent):
        key = key_for(event.key())
        if key is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.cpu.press_key(key)

    def keyReleaseEvent(self, event: QKeyEvent):
        key = key_for(event.key())
        if key is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.cpu.release_key(key)

    # @intent:responsibility アプリケーションにダークテーマのスタイルシートを適用します。
    def _set_dark_theme(self):
        dark_palette = QPalette()
        dark_palette.setColor(QPalette.Window, QColor(29, 29, 29))
        dark_palette.setColor(QPalette.WindowText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Base, QColor(30, 30, 30))
        dark_palette.setColor(QPalette.Text, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Button, QColor(53, 53, 53))
        dark_palette.setColor(QPalette.ButtonText, QColor(224, 224, 224))
        dark_palette.setColor(QPalette.Highlight, QColor(42, 130, 218))
        QApplication.setPalette(dark_palette)

        font_family = get_monospace_font_family()
        self.setStyleSheet(f"""
            QWidget {{ font-family: '{font_family}', monospace; font-size: 10pt; }}
            QMainWindow, QToolBar {{ background-color: #1D1D1D; border: none; }}
            QDockWidget::title {{ text-align: left; background: #101010; padding: 4px; font-weight: bold; }}
            QStatusBar {{ background-color: #101010; color: #AAAAAA; }}
        """)

    def closeEvent(self, event: QCloseEvent):
        self._timer.stop()
        self.debugger.stop()
        event.accept()
