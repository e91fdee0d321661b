import unittest
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.quirks import QuirkConfig, ShiftQuirk

class TestChip8AluInstructions(unittest.TestCase):
    def setUp(self):
        self._build()

    def _build(self, quirks=None):
        self.bus = Bus()
        self.bus.register_device(0x000, 0xFFF, RAM(0x1000))
        self.cpu = Chip8Cpu(self.bus, quirks=quirks, random_byte=lambda: 0xAB)
        self.cpu.start()
        self.state = self.cpu.get_state()

    def _execute(self, word):
        pc = self.state.pc
        self.bus.write(pc, word >> 8)
        self.bus.write(pc + 1, word & 0xFF)
        return self.cpu.step()

    def test_ld_imm(self):
        # LD V3, #42
        self._execute(0x6342)
        self.assertEqual(self.state.v[3], 0x42)
        self.assertEqual(self.state.pc, 0x202)

    def test_add_imm_wraps_without_touching_vf(self):
        self.state.v[0] = 0xFF
        self.state.vf = 0x07
        # ADD V0, #02
        self._execute(0x7002)
        self.assertEqual(self.state.v[0], 0x01)
        self.assertEqual(self.state.vf, 0x07)

    def test_ld_reg_and_bitwise(self):
        self.state.v[1] = 0b1100
        self.state.v[2] = 0b1010
        self._execute(0x8121) # OR
        self.assertEqual(self.state.v[1], 0b1110)
        self.state.v[1] = 0b1100
        self._execute(0x8122) # AND
        self.assertEqual(self.state.v[1], 0b1000)
        self.state.v[1] = 0b1100
        self._execute(0x8123) # XOR
        self.assertEqual(self.state.v[1], 0b0110)
        self._execute(0x8120) # LD V1, V2
        self.assertEqual(self.state.v[1], 0b1010)

    def test_add_reg_carry(self):
        self.state.v[1] = 0xFF
        self.state.v[2] = 0x02
        self._execute(0x8124)
        self.assertEqual(self.state.v[1], 0x01)
        self.assertEqual(self.state.vf, 1)

    def test_add_reg_no_carry(self):
        self.state.v[1] = 0x10
        self.state.v[2] = 0x20
        self.state.vf = 1
        self._execute(0x8124)
        self.assertEqual(self.state.v[1], 0x30)
        self.assertEqual(self.state.vf, 0)

    def test_flag_written_after_result(self):
        # ADD VF, V1: 結果ではなくキャリーがVFに残る
        self.state.vf = 0xFF
        self.state.v[1] = 0x01
        self._execute(0x8F14)
        self.assertEqual(self.state.vf, 1)

    def test_sub_borrow(self):
        self.state.v[1] = 5
        self.state.v[2] = 3
        self._execute(0x8125)
        self.assertEqual(self.state.v[1], 2)
        self.assertEqual(self.state.vf, 1)

        self.state.v[1] = 3
        self.state.v[2] = 5
        self._execute(0x8125)
        self.assertEqual(self.state.v[1], 0xFE)
        self.assertEqual(self.state.vf, 0)

    def test_sub_equal_operands_sets_no_borrow(self):
        self.state.v[1] = 7
        self.state.v[2] = 7
        self._execute(0x8125)
        self.assertEqual(self.state.v[1], 0)
        self.assertEqual(self.state.vf, 1)

    def test_subn(self):
        self.state.v[1] = 3
        self.state.v[2] = 5
        self._execute(0x8127)
        self.assertEqual(self.state.v[1], 2)
        self.assertEqual(self.state.vf, 1)

        self.state.v[1] = 5
        self.state.v[2] = 3
        self._execute(0x8127)
        self.assertEqual(self.state.v[1], 0xFE)
        self.assertEqual(self.state.vf, 0)

    def test_shr_modern_ignores_vy(self):
        self.state.v[1] = 0x05
        self.state.v[2] = 0xFF
        self._execute(0x8126)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.vf, 1)

    def test_shr_legacy_copies_vy(self):
        self._build(QuirkConfig(shift=ShiftQuirk.LEGACY))
        self.state.v[1] = 0x00
        self.state.v[2] = 0x04
        self._execute(0x8126)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.vf, 0)

    def test_shl_shifted_out_bit(self):
        self.state.v[1] = 0x81
        self._execute(0x812E)
        self.assertEqual(self.state.v[1], 0x02)
        self.assertEqual(self.state.vf, 1)

        self.state.v[1] = 0x40
        self._execute(0x812E)
        self.assertEqual(self.state.v[1], 0x80)
        self.assertEqual(self.state.vf, 0)

    def test_shl_legacy_copies_vy(self):
        self._build(QuirkConfig(shift=ShiftQuirk.LEGACY))
        self.state.v[1] = 0x01
        self.state.v[2] = 0xC0
        self._execute(0x812E)
        self.assertEqual(self.state.v[1], 0x80)
        self.assertEqual(self.state.vf, 1)

    def test_rnd_masks_random_byte(self):
        # RND V4, #0F (乱数源は0xAB固定)
        self._execute(0xC40F)
        self.assertEqual(self.state.v[4], 0x0B)

if __name__ == '__main__':
    unittest.main()
