import unittest
from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.framebuffer import Framebuffer, WIDTH, HEIGHT
from retro_chip8.arch.chip8.glyphs import load_glyphs, glyph_address
from retro_chip8.core.errors import OutOfBoundsMemoryAccess

class TestFramebuffer(unittest.TestCase):
    def setUp(self):
        self.fb = Framebuffer()

    def test_initially_clear(self):
        self.assertEqual((self.fb.width, self.fb.height), (WIDTH, HEIGHT))
        self.assertTrue(self.fb.is_clear())

    def test_toggle_reports_erase(self):
        self.assertFalse(self.fb.toggle(3, 4))
        self.assertTrue(self.fb.get_pixel(3, 4))
        self.assertTrue(self.fb.toggle(3, 4))
        self.assertFalse(self.fb.get_pixel(3, 4))

    def test_sprite_msb_is_leftmost(self):
        self.fb.draw_sprite(0, 0, [0x80, 0x01])
        self.assertTrue(self.fb.get_pixel(0, 0))
        self.assertTrue(self.fb.get_pixel(7, 1))
        self.assertEqual(self.fb.lit_count(), 2)

    def test_sprite_wraps_around_edges(self):
        collision = self.fb.draw_sprite(62, 31, [0xF0, 0xF0])
        self.assertFalse(collision)
        for x in (62, 63, 0, 1):
            self.assertTrue(self.fb.get_pixel(x, 31))
            self.assertTrue(self.fb.get_pixel(x, 0))
        self.assertEqual(self.fb.lit_count(), 8)

    def test_collision_is_any_pixel(self):
        self.fb.toggle(5, 0)
        collision = self.fb.draw_sprite(0, 0, [0xFF])
        self.assertTrue(collision)
        self.assertFalse(self.fb.get_pixel(5, 0))
        self.assertEqual(self.fb.lit_count(), 7)

    def test_version_changes_on_mutation(self):
        version = self.fb.version
        self.fb.draw_sprite(0, 0, [0x00])
        self.assertEqual(self.fb.version, version)
        self.fb.toggle(0, 0)
        self.assertGreater(self.fb.version, version)

    def test_render_text(self):
        self.fb.toggle(1, 0)
        lines = self.fb.render_text().splitlines()
        self.assertEqual(len(lines), HEIGHT)
        self.assertEqual(lines[0][:3], ".#.")

class TestDrawInstructions(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.bus.register_device(0x000, 0xFFF, RAM(0x1000))
        load_glyphs(self.bus)
        self.cpu = Chip8Cpu(self.bus)
        self.state = self.cpu.get_state()
        self.fb = self.cpu.framebuffer

    def _execute(self, *opcodes):
        for opcode in opcodes:
            pc = self.state.pc
            self.bus.load(pc, opcode >> 8)
            self.bus.load(pc + 1, opcode & 0xFF)
            self.cpu.step()

    def test_draw_glyph_twice_clears_with_collision(self):
        self.state.i = glyph_address(0)
        self.state.v[0] = 10
        self.state.v[1] = 12
        self._execute(0xD015)
        self.assertEqual(self.state.vf, 0)
        self.assertEqual(self.fb.lit_count(), 14)
        self.assertTrue(self.fb.get_pixel(10, 12))

        self._execute(0xD015)
        self.assertEqual(self.state.vf, 1)
        self.assertTrue(self.fb.is_clear())

    def test_draw_overwrites_flag(self):
        self.state.vf = 0x55
        self.state.i = glyph_address(1)
        self._execute(0xD015)
        self.assertEqual(self.state.vf, 0)

    def test_draw_reads_sprite_from_memory(self):
        self.bus.load(0x300, 0xAA)
        self.state.i = 0x300
        self._execute(0xD001)
        self.assertEqual([self.fb.get_pixel(x, 0) for x in range(8)],
                         [True, False, True, False, True, False, True, False])

    def test_draw_out_of_range_leaves_screen(self):
        self.state.i = 0xFFE
        with self.assertRaises(OutOfBoundsMemoryAccess):
            self._execute(0xD005)
        self.assertTrue(self.fb.is_clear())

    def test_cls(self):
        self.fb.toggle(0, 0)
        self._execute(0x00E0)
        self.assertTrue(self.fb.is_clear())

if __name__ == '__main__':
    unittest.main()
