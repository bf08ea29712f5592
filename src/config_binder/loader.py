from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List, Tuple, Union

from config_binder.binding import FieldRef, assign, check_value, resolve_field
from config_binder.coercion import coerce_value
from config_binder.errors import FieldBindingError, FileAccessError
from config_binder.models import Delimiter, LoadReport, TypedValue
from config_binder.parsing import parse_file
from config_binder.settings import LoaderSettings

logger = logging.getLogger(__name__)


class ConfigLoader:
    """
    Loads a flat key-value file into the fields of a caller-owned object.

    Setters return the loader so options can be chained:

        ConfigLoader().set_delimiter(Delimiter.COLON).set_file_path("app.conf").set_target(cfg).load()
    """

    def __init__(
        self,
        target: Any = None,
        *,
        delimiter: Union[Delimiter, str] = Delimiter.EQUALS,
        file_path: Union[str, Path] = ".env",
        encoding: str = "utf-8",
    ) -> None:
        self._target = target
        self._delimiter = Delimiter.parse(delimiter)
        self._file_path = Path(file_path)
        self._encoding = encoding

    @classmethod
    def from_settings(cls, settings: LoaderSettings, target: Any = None) -> "ConfigLoader":
        return cls(
            target,
            delimiter=settings.delimiter,
            file_path=settings.file_path,
            encoding=settings.encoding,
        )

    @property
    def delimiter(self) -> Delimiter:
        return self._delimiter

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def target(self) -> Any:
        return self._target

    def set_delimiter(self, delimiter: Union[Delimiter, str]) -> "ConfigLoader":
        self._delimiter = Delimiter.parse(delimiter)
        return self

    def set_file_path(self, file_path: Union[str, Path]) -> "ConfigLoader":
        self._file_path = Path(file_path)
        return self

    def set_target(self, target: Any) -> "ConfigLoader":
        self._target = target
        return self

    def load(self) -> LoadReport:
        """
        Read the file and bind every entry onto the target.

        The file is read in full before any field is written, so a read failure
        leaves the target untouched. Entries are resolved and type checked
        before assignment begins.

        Raises FileAccessError when the file cannot be read and
        FieldBindingError when a matching field cannot take its value.
        """
        target = self._target
        if target is None:
            logger.error("A configuration target must be set before loading. path=%s", self._file_path)
            return LoadReport.empty()

        try:
            parsed = parse_file(self._file_path, self._delimiter, encoding=self._encoding)
        except FileAccessError as e:
            logger.error("%s", e)
            raise

        planned: List[Tuple[str, FieldRef, TypedValue]] = []
        unknown: List[str] = []
        try:
            for entry in parsed.entries:
                value = coerce_value(entry.raw_value)
                ref = resolve_field(target, entry.key)
                if ref is None:
                    logger.debug("No field for configuration key. key=%s line=%s", entry.key, entry.line_number)
                    unknown.append(entry.key)
                    continue
                check_value(ref, entry.key, value)
                planned.append((entry.key, ref, value))

            for key, ref, value in planned:
                assign(target, ref, key, value)
        except FieldBindingError as e:
            logger.error("%s", e)
            raise

        report = LoadReport(
            bound=tuple(key for key, _, _ in planned),
            unknown=tuple(unknown),
            malformed_lines=parsed.malformed_lines,
            ignored_lines=parsed.ignored_lines,
        )
        logger.info(
            "Configuration loaded. path=%s bound=%s unknown=%s malformed=%s",
            self._file_path,
            len(report.bound),
            len(report.unknown),
            len(report.malformed_lines),
        )
        return report


def load_into(
    target: Any,
    file_path: Union[str, Path] = ".env",
    *,
    delimiter: Union[Delimiter, str] = Delimiter.EQUALS,
) -> LoadReport:
    return ConfigLoader(target, delimiter=delimiter, file_path=file_path).load()
