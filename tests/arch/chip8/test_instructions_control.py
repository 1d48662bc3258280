import unittest
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.core.errors import StackOverflow, StackUnderflow, OutOfBoundsMemoryAccess
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import STACK_DEPTH

class TestChip8ControlInstructions(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.bus.register_device(0x000, 0xFFF, RAM(0x1000))
        self.cpu = Chip8Cpu(self.bus)
        self.state = self.cpu.get_state()

    def _write(self, addr, opcode):
        self.bus.load(addr, opcode >> 8)
        self.bus.load(addr + 1, opcode & 0xFF)

    def _execute(self, opcode):
        self._write(self.state.pc, opcode)
        return self.cpu.step()

    def test_jp(self):
        self._execute(0x1ABC)
        self.assertEqual(self.state.pc, 0xABC)

    def test_call_then_ret(self):
        for target in (0x300, 0x600, 0xFFE):
            self.cpu.reset()
            self.state = self.cpu.get_state()
            self._write(0x200, 0x2000 | target)
            self._write(target, 0x00EE)
            self.cpu.step()
            self.assertEqual(self.state.pc, target)
            self.assertEqual(self.state.stack.frames(), [0x202])
            self.cpu.step()
            self.assertEqual(self.state.pc, 0x202)
            self.assertEqual(self.state.sp, 0)

    def test_ret_on_empty_stack(self):
        with self.assertRaises(StackUnderflow) as ctx:
            self._execute(0x00EE)
        self.assertEqual(self.state.pc, 0x200)
        self.assertEqual(ctx.exception.pc, 0x200)

    def test_call_overflow(self):
        # 自分自身を呼び出し続ける
        self._write(0x200, 0x2200)
        for _ in range(STACK_DEPTH):
            self.cpu.step()
        self.assertEqual(self.state.sp, STACK_DEPTH)
        with self.assertRaises(StackOverflow):
            self.cpu.step()
        self.assertEqual(self.state.sp, STACK_DEPTH)
        self.assertEqual(self.state.pc, 0x200)

    def test_se_sne_byte(self):
        self.state.v[1] = 0x42
        self._execute(0x3142)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x3143)
        self.assertEqual(self.state.pc, 0x206)
        self._execute(0x4143)
        self.assertEqual(self.state.pc, 0x20A)
        self._execute(0x4142)
        self.assertEqual(self.state.pc, 0x20C)

    def test_se_sne_reg(self):
        self.state.v[1] = 0x10
        self.state.v[2] = 0x10
        self._execute(0x5120)
        self.assertEqual(self.state.pc, 0x204)
        self._execute(0x9120)
        self.assertEqual(self.state.pc, 0x206)
        self.state.v[2] = 0x11
        self._execute(0x9120)
        self.assertEqual(self.state.pc, 0x20A)

    def test_jp_v0(self):
        self.state.v[0] = 0x10
        self._execute(0xB300)
        self.assertEqual(self.state.pc, 0x310)

    def test_jp_v0_beyond_memory_faults_on_fetch(self):
        self.state.v[0] = 0xFF
        self._execute(0xBFFF)
        self.assertEqual(self.state.pc, 0x10FE)
        with self.assertRaises(OutOfBoundsMemoryAccess):
            self.cpu.step()
        self.assertEqual(self.state.pc, 0x10FE)

    def test_skp_sknp(self):
        self.state.v[3] = 0x1A  # 下位4ビット(0xA)のキーを参照
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x202)
        self._execute(0xE3A1)
        self.assertEqual(self.state.pc, 0x206)

        self.cpu.key_down(0xA)
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x20A)
        self._execute(0xE3A1)
        self.assertEqual(self.state.pc, 0x20C)

        self.cpu.key_up(0xA)
        self._execute(0xE39E)
        self.assertEqual(self.state.pc, 0x20E)

if __name__ == '__main__':
    unittest.main()
