# src/retro_chip8/arch/chip8/display.py
"""
CHIP-8 フレームバッファ（64x32 モノクロ）。

スプライトはXORで合成され、点灯していたピクセルが消灯した場合に衝突として報告されます。
画面端ではラップアラウンドせずにクリップします。
"""
from typing import List, Sequence

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32

# @intent:responsibility 64x32のブール値グリッドを保持し、クリアとXORスプライト描画を提供します。
class DisplayBuffer:
    """
    CHIP-8の表示メモリ。Trueが点灯ピクセル。

    CLS と DRW 命令からのみ変更され、外部レンダラはサイクルの合間に読み出します。
    """
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height
        self._cells: List[List[bool]] = [[False] * width for _ in range(height)]
        # @intent:rationale レンダラが変更のあったフレームだけを再描画できるようにするためのフラグ。
        self.dirty = True

    # @intent:responsibility 全ピクセルを消灯します。
    def clear(self) -> None:
        for row in self._cells:
            for x in range(self.width):
                row[x] = False
        self.dirty = True

    def pixel(self, x: int, y: int) -> bool:
        return self._cells[y][x]

    # @intent:responsibility レンダラ向けに各行のコピーを返します。
    def rows(self) -> List[List[bool]]:
        return [list(row) for row in self._cells]

    # @intent:responsibility 点灯しているピクセル数を返します。
    def lit_count(self) -> int:
        return sum(sum(row) for row in self._cells)

    # @intent:responsibility スプライトをXOR合成し、衝突（点灯→消灯）があったかを返します。
    # @intent:pre-condition x, y は画面内の座標（呼び出し側で剰余済み）である必要があります。
    def draw_sprite(self, x: int, y: int, sprite: Sequence[int]) -> bool:
        """
        spriteの各バイトを1行とし、MSBから順に8ピクセルを (x, y) から描画します。
        画面の下端・右端を超える部分は描画されません。
        """
        collision = False
        for row_offset, row_byte in enumerate(sprite):
            py = y + row_offset
            if py >= self.height:
                break
            row = self._cells[py]
            for bit in range(8):
                px = x + bit
                if px >= self.width:
                    break
                if not (row_byte >> (7 - bit)) & 0x01:
                    continue
                if row[px]:
                    collision = True
                row[px] = not row[px]
        self.dirty = True
        return collision
