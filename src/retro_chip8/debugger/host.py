# retro_chip8/debugger/host.py
"""
ホストループの補助。

GUIやCLIから独立した、致命的エラーの報告と命令周波数のペース配分を提供します。
"""
import sys
from typing import NoReturn, Optional, TextIO

EXIT_FATAL = 1
# 1回の呼び出しで取り戻す経過時間の上限（秒）
MAX_CATCH_UP = 0.25

# @intent:responsibility 致命的エラーの診断（PCとオペコードを含む）を標準エラーへ出力し、終了ステータスを返します。
def report_fatal(error: Exception, stream: Optional[TextIO] = None) -> int:
    print(f"Error: {error}", file=stream or sys.stderr)
    return EXIT_FATAL

# @intent:responsibility 診断を出力してプロセスを非ゼロで終了させます。
def exit_fatal(error: Exception) -> NoReturn:
    sys.exit(report_fatal(error))

# @intent:responsibility 経過時間から実行すべきサイクル数を求めます。端数は次回へ繰り越されます。
class CycleBudget:
    """
    QTimerの間隔に関係なく、平均して cycle_hz サイクル/秒になるよう配分します。
    cycle_hz がフレーム周波数より低い場合は、サイクルを実行しないフレームが生じます。
    """
    def __init__(self, cycle_hz: float):
        if cycle_hz <= 0:
            raise ValueError(f"Cycle frequency must be positive: {cycle_hz}")
        self._cycle_hz = cycle_hz
        self._budget = 0.0

    def reset(self) -> None:
        self._budget = 0.0

    def take(self, elapsed: float) -> int:
        elapsed = min(max(elapsed, 0.0), MAX_CATCH_UP)
        self._budget += elapsed * self._cycle_hz
        cycles = int(self._budget)
        self._budget -= cycles
        return cycles
