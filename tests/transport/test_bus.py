import unittest
from retro_chip8.transport.bus import Bus, RAM, BusAccess, BusAccessType, MEMORY_SIZE
from retro_chip8.core.errors import OutOfBoundsMemoryAccess

class TestBus(unittest.TestCase):
    def setUp(self):
        self.bus = Bus()
        self.bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))

    def test_read_write(self):
        self.bus.write(0x300, 0xAB)
        self.assertEqual(self.bus.read(0x300), 0xAB)
        self.assertEqual(self.bus.get_size(), 0x1000)

    def test_activity_log(self):
        self.bus.write(0x300, 0x11)
        self.bus.write(0x300, 0x22)
        self.bus.read(0x300)
        log = self.bus.get_and_clear_activity_log()
        self.assertEqual(log, [
            BusAccess(0x300, 0x11, BusAccessType.WRITE, 0x00),
            BusAccess(0x300, 0x22, BusAccessType.WRITE, 0x11),
            BusAccess(0x300, 0x22, BusAccessType.READ),
        ])
        self.assertEqual(self.bus.get_and_clear_activity_log(), [])

    def test_peek_and_load_are_not_logged(self):
        self.bus.load(0x400, 0x7F)
        self.assertEqual(self.bus.peek(0x400), 0x7F)
        self.assertEqual(self.bus.dump(0x400, 2), bytes([0x7F, 0x00]))
        self.assertEqual(self.bus.get_and_clear_activity_log(), [])

    def test_out_of_bounds(self):
        for access in (lambda: self.bus.read(0x1000),
                       lambda: self.bus.write(0x1000, 0),
                       lambda: self.bus.peek(-1)):
            with self.assertRaises(OutOfBoundsMemoryAccess) as ctx:
                access()
            # IndexErrorとしても捕捉できる
            self.assertIsInstance(ctx.exception, IndexError)

    def test_out_of_bounds_address(self):
        with self.assertRaises(OutOfBoundsMemoryAccess) as ctx:
            self.bus.read(0x1234)
        self.assertEqual(ctx.exception.address, 0x1234)

    def test_write_rejects_non_byte(self):
        with self.assertRaises(ValueError):
            self.bus.write(0x200, 0x100)
        with self.assertRaises(ValueError):
            self.bus.write(0x200, -1)
        self.assertEqual(self.bus.peek(0x200), 0)

class TestBusAbnormal(unittest.TestCase):
    def test_ram_invalid_init(self):
        with self.assertRaises(ValueError):
            RAM(0)

    def test_register_device_invalid_range(self):
        bus = Bus()
        with self.assertRaises(ValueError):
            bus.register_device(0x200, 0x100, RAM(0x100))

    def test_register_device_size_mismatch(self):
        bus = Bus()
        with self.assertRaises(ValueError):
            bus.register_device(0x000, 0x0FF, RAM(0x200))

    def test_register_non_device(self):
        bus = Bus()
        with self.assertRaises(TypeError):
            bus.register_device(0x000, 0x0FF, bytearray(0x100))

if __name__ == '__main__':
    unittest.main()
