import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from candidkit.config import (
    CONFIG_ENV,
    CONFIG_PATH,
    config_path,
    load_config,
    save_config,
    set_config_value,
    validate_config,
)
from candidkit.constants import DEFAULT_EXAMPLE_PRINCIPAL, DEFAULT_MAX_DEPTH, DEFAULT_MAX_LENGTH
from candidkit.validate import ValidationError


class ConfigPathTests(unittest.TestCase):
    def test_explicit_path_wins(self) -> None:
        with patch.dict(os.environ, {CONFIG_ENV: "/tmp/from-env.toml"}):
            self.assertEqual(config_path("/tmp/explicit.toml"), Path("/tmp/explicit.toml"))

    def test_env_override(self) -> None:
        with patch.dict(os.environ, {CONFIG_ENV: "/tmp/from-env.toml"}):
            self.assertEqual(config_path(), Path("/tmp/from-env.toml"))

    def test_default_location(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            self.assertEqual(config_path(), CONFIG_PATH)


class ValidateConfigTests(unittest.TestCase):
    def test_defaults_are_valid(self) -> None:
        self.assertEqual(validate_config({}), [])
        self.assertEqual(validate_config({"resolver": {"max_depth": 8}, "example": {"indent": 0}}), [])

    def test_reports_every_problem(self) -> None:
        errors = validate_config(
            {
                "logging": {},
                "resolver": {"max_depth": 0, "speed": 1},
                "example": {"indent": -1, "text": 5, "colour": "red"},
            }
        )
        self.assertIn("Unknown config section: [logging]", errors)
        self.assertIn("Unknown resolver key: speed", errors)
        self.assertIn("resolver.max_depth must be a positive integer", errors)
        self.assertIn("example.indent must be a non-negative integer", errors)
        self.assertIn("example.text must be a string", errors)
        self.assertIn("Unknown example key: colour", errors)

    def test_max_length_must_be_positive(self) -> None:
        self.assertEqual(
            validate_config({"resolver": {"max_length": 0}}),
            ["resolver.max_length must be a positive integer"],
        )

    def test_bool_is_not_an_integer(self) -> None:
        self.assertEqual(
            validate_config({"resolver": {"max_depth": True}}),
            ["resolver.max_depth must be a positive integer"],
        )


class LoadSaveConfigTests(unittest.TestCase):
    def test_missing_file_gives_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            settings = load_config(Path(tmp) / "none.toml")
        self.assertEqual(settings["resolver"]["max_length"], DEFAULT_MAX_LENGTH)
        self.assertEqual(settings["resolver"]["max_depth"], DEFAULT_MAX_DEPTH)
        self.assertEqual(settings["example"]["principal"], DEFAULT_EXAMPLE_PRINCIPAL)

    def test_partial_file_is_merged_over_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.toml"
            path.write_text('[example]\ntext = "hello"\n')
            settings = load_config(path)
        self.assertEqual(settings["example"]["text"], "hello")
        self.assertEqual(settings["example"]["indent"], 2)
        self.assertEqual(settings["resolver"]["max_depth"], DEFAULT_MAX_DEPTH)

    def test_invalid_file_raises(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.toml"
            path.write_text("[resolver]\nmax_depth = 0\n")
            with self.assertRaises(ValidationError):
                load_config(path)

    def test_save_then_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "config.toml"
            settings = load_config(path)
            settings["resolver"]["max_depth"] = 4
            written = save_config(settings, path)
            self.assertEqual(written, path)
            self.assertEqual(load_config(path)["resolver"]["max_depth"], 4)

    def test_save_rejects_invalid_settings(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.toml"
            with self.assertRaises(ValidationError):
                save_config({"example": {"indent": "wide"}}, path)
            self.assertFalse(path.exists())


class SetConfigValueTests(unittest.TestCase):
    def test_sets_integer_value(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.toml"
            set_config_value("example.indent", "4", path)
            self.assertEqual(load_config(path)["example"]["indent"], 4)

    def test_sets_string_value(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.toml"
            set_config_value("example.principal", "aaaaa-aa", path)
            self.assertEqual(load_config(path)["example"]["principal"], "aaaaa-aa")

    def test_unknown_key(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ValidationError) as ctx:
                set_config_value("example.colour", "red", Path(tmp) / "config.toml")
        self.assertEqual(str(ctx.exception), "Unknown config key: example.colour")

    def test_non_integer_value(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ValidationError) as ctx:
                set_config_value("resolver.max_depth", "deep", Path(tmp) / "config.toml")
        self.assertEqual(str(ctx.exception), "resolver.max_depth must be an integer")

    def test_out_of_range_integer(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ValidationError):
                set_config_value("resolver.max_depth", "0", Path(tmp) / "config.toml")


if __name__ == "__main__":
    unittest.main()
