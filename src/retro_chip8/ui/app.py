# src/retro_chip8/ui/app.py
"""
Qtアプリケーションのエントリポイント。
コマンドライン引数と構成ファイルからシステムを組み立て、メインウィンドウを起動します。
"""
import argparse
import dataclasses
import sys
from typing import List, Optional

import yaml

from PySide6.QtWidgets import QApplication

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import MachineConfig
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.core.errors import Chip8Error
from retro_chip8.debugger.host import exit_fatal
from .main_window import MainWindow

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 interpreter")
    parser.add_argument("rom", nargs="?", help="CHIP-8 program image (.ch8)")
    parser.add_argument("--config", help="YAML machine configuration")
    parser.add_argument("--cycle-hz", type=float, help="instructions per second (overrides config)")
    parser.add_argument("--scale", type=int, help="display scale factor (overrides config)")
    return parser

# @intent:responsibility 引数と構成ファイルを統合したMachineConfigを生成します。
def resolve_config(args: argparse.Namespace) -> MachineConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else MachineConfig()
    if args.rom:
        config = dataclasses.replace(config, rom=args.rom)
    if args.cycle_hz is not None:
        if args.cycle_hz <= 0:
            raise ValueError("--cycle-hz must be positive.")
        config = dataclasses.replace(config, timing=dataclasses.replace(config.timing, cycle_hz=args.cycle_hz))
    if args.scale is not None:
        if args.scale <= 0:
            raise ValueError("--scale must be positive.")
        config = dataclasses.replace(config, display=dataclasses.replace(config.display, scale=args.scale))
    return config

# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None):
    args = build_parser().parse_args(argv)
    try:
        config = resolve_config(args)
        cpu, _bus = SystemBuilder().build_and_start(config)
    except (Chip8Error, OSError, ValueError, yaml.YAMLError) as e:
        exit_fatal(e)

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(cpu, config)
    main_win.show()
    if config.rom:
        main_win.start()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
