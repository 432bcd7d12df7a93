"""
Unit tests for input parsing and configuration helpers.
"""
import unittest

from localxi.utils.config import LineupConfig
from localxi.utils.parsing import ParseRejection, clamp_rating, parse_rating, parse_stat, round_one_decimal


class TestParsing(unittest.TestCase):
    """Test rating and stat parsers."""

    def test_round_one_decimal_rounds_half_up(self) -> None:
        """Test half values round upwards."""
        self.assertEqual(round_one_decimal(7.25), 7.3)
        self.assertEqual(round_one_decimal(7.24), 7.2)

    def test_clamp_rating(self) -> None:
        """Test the rating scale bounds."""
        self.assertEqual(clamp_rating(12.3), 10.0)
        self.assertEqual(clamp_rating(-0.1), 0.0)

    def test_parse_rating(self) -> None:
        """Test accepted rating input."""
        self.assertEqual(parse_rating(" 8,25 "), 8.3)
        self.assertIsNone(parse_rating("   "))
        self.assertIsNone(parse_rating(None))
        with self.assertRaises(ParseRejection):
            parse_rating("eight")

    def test_parse_stat(self) -> None:
        """Test accepted stat input."""
        self.assertEqual(parse_stat(" 3 "), 3)
        self.assertIsNone(parse_stat(""))
        for raw in ("-1", "2.0", "two", "+1"):
            with self.subTest(raw=raw):
                with self.assertRaises(ParseRejection):
                    parse_stat(raw)


class TestLineupConfig(unittest.TestCase):
    """Test configuration loading."""

    def test_defaults(self) -> None:
        """Test values used when nothing is set."""
        config = LineupConfig.from_env({})

        self.assertEqual(config.default_shape, "4-4-2")
        self.assertEqual(config.host, "127.0.0.1")
        self.assertEqual(config.port, 7122)

    def test_environment_overrides(self) -> None:
        """Test LOCALXI_* variables."""
        config = LineupConfig.from_env({
            "LOCALXI_DATA_DIR": "/srv/club",
            "LOCALXI_DEFAULT_SHAPE": "4-3-3",
            "LOCALXI_PORT": "8080",
        })

        self.assertEqual(config.data_dir, "/srv/club")
        self.assertEqual(config.default_shape, "4-3-3")
        self.assertEqual(config.port, 8080)
