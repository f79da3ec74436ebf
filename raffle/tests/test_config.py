import os
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from raffle import config as config_module
from raffle.config import RaffleSettings, load_config, load_from_environment
from raffle.types import DrawRequest


class LoadFromEnvironmentTests(unittest.TestCase):
    def test_defaults_match_initial_form(self) -> None:
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_from_environment()

        self.assertEqual(settings, RaffleSettings())
        self.assertEqual(settings.to_request(), DrawRequest.of(1, 100, 1, False))
        self.assertEqual(settings.engine.entropy_bits, 32)
        self.assertEqual(settings.engine.max_attempts, 1_000_000)
        self.assertEqual(settings.engine.sampling, "rejection")

    def test_reads_overrides(self) -> None:
        env = {
            "RAFFLE_MIN": "10",
            "RAFFLE_MAX": "20",
            "RAFFLE_QUANTITY": "3",
            "RAFFLE_ALL_AT_ONCE": "yes",
            "RAFFLE_ENTROPY_BITS": "48",
            "RAFFLE_MAX_ATTEMPTS": "auto",
            "RAFFLE_SAMPLING": "Pool",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            settings = load_from_environment()

        self.assertEqual(settings.to_request(), DrawRequest.of(10, 20, 3, True))
        self.assertEqual(settings.engine.entropy_bits, 48)
        self.assertIsNone(settings.engine.max_attempts)
        self.assertEqual(settings.engine.sampling, "pool")

    def test_malformed_values_name_the_variable(self) -> None:
        cases = {
            "RAFFLE_MIN": "one",
            "RAFFLE_ALL_AT_ONCE": "maybe",
            "RAFFLE_MAX_ATTEMPTS": "-5",
            "RAFFLE_SAMPLING": "modulo",
        }
        for key, value in cases.items():
            with self.subTest(key=key):
                with mock.patch.dict(os.environ, {key: value}, clear=True):
                    with self.assertRaisesRegex(ValueError, key):
                        load_from_environment()


class LoadConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        config_module.load_config.cache_clear()
        self._tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self) -> None:
        config_module.load_config.cache_clear()
        self._tmpdir.cleanup()

    def test_reads_dotenv_file(self) -> None:
        env_path = Path(self._tmpdir.name) / "raffle.env"
        env_path.write_text("RAFFLE_MAX=60\nRAFFLE_QUANTITY=6\n", encoding="utf-8")

        with mock.patch.dict(os.environ, {}, clear=True):
            settings = load_config(str(env_path))

        self.assertEqual(settings.max_value, 60)
        self.assertEqual(settings.quantity, 6)

    def test_copy_replaces_fields(self) -> None:
        settings = RaffleSettings().copy(quantity=4, all_at_once=True)
        self.assertEqual(settings.quantity, 4)
        self.assertTrue(settings.all_at_once)


if __name__ == "__main__":
    unittest.main()
