from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Union


class ConfigBinderError(Exception):
    """Base class for errors raised while loading a configuration file."""


class FileAccessError(ConfigBinderError):
    def __init__(self, path: Union[str, Path], reason: str) -> None:
        super().__init__(f"Cannot read configuration file: {path} ({reason})")
        self.path = Path(path)
        self.reason = reason


class MalformedLineError(ConfigBinderError):
    """Raised by the line splitter; the loader logs it and skips the line."""

    def __init__(self, line_number: int, line: str, delimiter: str) -> None:
        super().__init__(
            f"Malformed configuration line {line_number}: {line!r}. "
            f"Every key must have a value separated by ({delimiter})."
        )
        self.line_number = line_number
        self.line = line
        self.delimiter = delimiter


class FieldBindingError(ConfigBinderError):
    """
    A field matching the key exists on the target but cannot be written.

    This is distinct from a key with no matching field, which is tolerated.
    """

    def __init__(
        self,
        *,
        key: str,
        owner: type,
        attribute: str,
        value: Any,
        reason: Optional[str] = None,
    ) -> None:
        message = (
            f"Cannot assign {value!r} ({type(value).__name__}) to field "
            f"'{owner.__qualname__}.{attribute}' for key '{key}'"
        )
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.key = key
        self.owner = owner
        self.attribute = attribute
        self.value = value
