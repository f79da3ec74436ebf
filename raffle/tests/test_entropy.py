import unittest
from unittest import mock

from raffle.entropy import MAX_ENTROPY_BITS, SystemEntropySource
from raffle.errors import EntropySourceUnavailable


class SystemEntropySourceTests(unittest.TestCase):
    def test_values_fit_the_declared_width(self) -> None:
        source = SystemEntropySource()
        self.assertEqual(source.bits, 32)
        for _ in range(1_000):
            value = source.next_value()
            self.assertGreaterEqual(value, 0)
            self.assertLess(value, 1 << 32)

    def test_accepts_wider_values(self) -> None:
        source = SystemEntropySource(MAX_ENTROPY_BITS)
        self.assertLess(source.next_value(), 1 << MAX_ENTROPY_BITS)

    def test_rejects_unsupported_widths(self) -> None:
        with self.assertRaises(ValueError):
            SystemEntropySource(16)
        with self.assertRaises(ValueError):
            SystemEntropySource(64)

    def test_os_failure_surfaces_as_unavailable(self) -> None:
        source = SystemEntropySource()
        with mock.patch("raffle.entropy.system.secrets.randbits", side_effect=OSError("urandom")):
            with self.assertRaises(EntropySourceUnavailable):
                source.next_value()


if __name__ == "__main__":
    unittest.main()
