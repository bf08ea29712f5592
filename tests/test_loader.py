import tempfile
import unittest
from pathlib import Path
from typing import Optional

from config_binder import (
    ConfigLoader,
    Delimiter,
    FieldBindingError,
    FileAccessError,
    LoaderSettings,
    LoadReport,
    load_into,
)


class BaseConfig:
    TIMEOUT: float = 1.0


class ServiceConfig(BaseConfig):
    PORT: int = 0
    NAME: str = ""
    DEBUG: bool = True
    TOKEN: Optional[str] = "unset"


class LoaderTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def write(self, text: str, name: str = "app.env") -> Path:
        path = self.root / name
        path.write_text(text, encoding="utf-8")
        return path


class ConfigLoaderTests(LoaderTestCase):
    def test_scenario_port_name_debug(self) -> None:
        path = self.write("PORT=9090\nNAME=svc\nDEBUG=false\n")
        config = ServiceConfig()

        report = ConfigLoader(config, file_path=path).load()

        self.assertEqual(config.PORT, 9090)
        self.assertEqual(config.NAME, "svc")
        self.assertIs(config.DEBUG, False)
        self.assertEqual(set(report.bound), {"PORT", "NAME", "DEBUG"})
        self.assertEqual(report.unknown, ())

    def test_defaults(self) -> None:
        loader = ConfigLoader()
        self.assertIs(loader.delimiter, Delimiter.EQUALS)
        self.assertEqual(loader.file_path, Path(".env"))
        self.assertIsNone(loader.target)

    def test_fluent_setters(self) -> None:
        path = self.write("PORT;7000\nNAME; api \n", name="app.conf")
        config = ServiceConfig()

        loader = ConfigLoader()
        returned = loader.set_delimiter(Delimiter.SEMICOLON).set_file_path(path).set_target(config)
        self.assertIs(returned, loader)
        loader.load()

        self.assertEqual(config.PORT, 7000)
        self.assertEqual(config.NAME, "api")

    def test_delimiter_by_symbol(self) -> None:
        path = self.write("PORT:7001\n")
        config = ServiceConfig()
        ConfigLoader(config, delimiter=":", file_path=path).load()
        self.assertEqual(config.PORT, 7001)

    def test_unsupported_delimiter(self) -> None:
        with self.assertRaises(ValueError):
            ConfigLoader(delimiter="|")

    def test_missing_target_is_a_logged_no_op(self) -> None:
        path = self.write("PORT=9090\n")
        with self.assertLogs("config_binder.loader", level="ERROR") as logs:
            report = ConfigLoader(file_path=path).load()
        self.assertEqual(report, LoadReport.empty())
        self.assertIn("target", logs.output[0])

    def test_missing_file_raises_and_leaves_target_untouched(self) -> None:
        config = ServiceConfig()
        with self.assertLogs("config_binder.loader", level="ERROR"):
            with self.assertRaises(FileAccessError):
                ConfigLoader(config, file_path=self.root / "missing.env").load()
        self.assertEqual(config.PORT, 0)
        self.assertEqual(config.NAME, "")
        self.assertIs(config.DEBUG, True)

    def test_first_occurrence_wins(self) -> None:
        path = self.write("PORT=1\nNAME=a\nPORT=2\n")
        config = ServiceConfig()
        ConfigLoader(config, file_path=path).load()
        self.assertEqual(config.PORT, 1)

    def test_empty_value_clears_field(self) -> None:
        path = self.write("TOKEN=\n")
        config = ServiceConfig()
        ConfigLoader(config, file_path=path).load()
        self.assertIsNone(config.TOKEN)

    def test_whitespace_value_is_empty_string(self) -> None:
        path = self.write("TOKEN=   \n")
        config = ServiceConfig()
        ConfigLoader(config, file_path=path).load()
        self.assertEqual(config.TOKEN, "")

    def test_unknown_keys_are_tolerated_and_reported(self) -> None:
        path = self.write("PORT=1\nUNKNOWN=x\n")
        config = ServiceConfig()
        with self.assertLogs("config_binder.loader", level="DEBUG") as logs:
            report = ConfigLoader(config, file_path=path).load()
        self.assertEqual(report.unknown, ("UNKNOWN",))
        self.assertFalse(hasattr(config, "UNKNOWN"))
        self.assertTrue(any("UNKNOWN" in line for line in logs.output))

    def test_value_keeps_unicode_line_separator(self) -> None:
        path = self.write("NAME=first\u2028second\nPORT=1\n")
        config = ServiceConfig()
        report = ConfigLoader(config, file_path=path).load()
        self.assertEqual(config.NAME, "first\u2028second")
        self.assertEqual(report.ignored_lines, 0)

    def test_huge_integer_literal_loads_as_float(self) -> None:
        path = self.write("TIMEOUT=" + "9" * 5000 + "\n")
        config = ServiceConfig()
        ConfigLoader(config, file_path=path).load()
        self.assertEqual(config.TIMEOUT, float("inf"))

    def test_ancestor_field(self) -> None:
        path = self.write("TIMEOUT=2.5\n")
        config = ServiceConfig()
        ConfigLoader(config, file_path=path).load()
        self.assertEqual(config.TIMEOUT, 2.5)

    def test_line_counts(self) -> None:
        path = self.write("# header\nA=1\n\nB=2\n[section]\nPORT=3\n")
        report = ConfigLoader(ServiceConfig(), file_path=path).load()
        self.assertEqual(report.ignored_lines, 3)
        self.assertEqual(len(report.bound) + len(report.unknown), 3)

    def test_malformed_line_does_not_stop_the_load(self) -> None:
        path = self.write("NAME=svc\n=\nPORT=80\n")
        config = ServiceConfig()
        with self.assertLogs("config_binder.parsing", level="WARNING"):
            report = ConfigLoader(config, file_path=path).load()
        self.assertEqual(report.malformed_lines, (2,))
        self.assertEqual(config.NAME, "svc")
        self.assertEqual(config.PORT, 80)

    def test_type_mismatch_aborts_before_any_write(self) -> None:
        path = self.write("NAME=svc\nPORT=eighty\n")
        config = ServiceConfig()
        with self.assertLogs("config_binder.loader", level="ERROR"):
            with self.assertRaises(FieldBindingError) as ctx:
                ConfigLoader(config, file_path=path).load()
        self.assertEqual(ctx.exception.key, "PORT")
        self.assertEqual(config.NAME, "")
        self.assertEqual(config.PORT, 0)

    def test_target_reused_across_loaders(self) -> None:
        first = self.write("PORT=1\n", name="first.env")
        second = self.write("NAME=svc\n", name="second.env")
        config = ServiceConfig()
        ConfigLoader(config, file_path=first).load()
        ConfigLoader(config, file_path=second).load()
        self.assertEqual(config.PORT, 1)
        self.assertEqual(config.NAME, "svc")

    def test_from_settings(self) -> None:
        path = self.write("PORT,5000\n")
        config = ServiceConfig()
        settings = LoaderSettings(delimiter="comma", file_path=str(path))
        ConfigLoader.from_settings(settings, config).load()
        self.assertEqual(config.PORT, 5000)

    def test_load_into(self) -> None:
        path = self.write("NAME=svc\n")
        config = ServiceConfig()
        report = load_into(config, path)
        self.assertEqual(report.bound, ("NAME",))
        self.assertEqual(config.NAME, "svc")


if __name__ == "__main__":
    unittest.main()
