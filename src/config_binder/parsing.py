from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from config_binder.errors import FileAccessError, MalformedLineError
from config_binder.models import ConfigEntry, Delimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParsedFile:
    entries: Sequence[ConfigEntry]
    malformed_lines: Tuple[int, ...]
    ignored_lines: int


def read_lines(path: Union[str, Path], *, encoding: str = "utf-8") -> List[str]:
    """Read the whole file before anything is applied so a read failure mutates nothing."""
    file_path = Path(path)
    try:
        with file_path.open("r", encoding=encoding) as f:
            text = f.read()
    except FileNotFoundError as e:
        raise FileAccessError(file_path, "file not found") from e
    except UnicodeDecodeError as e:
        raise FileAccessError(file_path, f"not valid {encoding}") from e
    except OSError as e:
        raise FileAccessError(file_path, e.strerror or type(e).__name__) from e
    # Universal newlines leave only "\n"; other Unicode line breaks stay inside values.
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def split_line(line: str, delimiter: Delimiter, line_number: int = 0) -> Tuple[str, Optional[str]]:
    """
    Split a line into (key, raw_value).

    The line is split on every occurrence of the delimiter and trailing empty
    segments are dropped, so "KEY=" yields no value while "KEY==b" yields "".
    Segments past the second are discarded.
    """
    parts = line.split(delimiter.symbol)
    while parts and parts[-1] == "":
        parts.pop()
    if not parts:
        raise MalformedLineError(line_number, line, delimiter.symbol)
    return parts[0], parts[1] if len(parts) > 1 else None


def parse_lines(lines: Sequence[str], delimiter: Delimiter) -> ParsedFile:
    entries: Dict[str, ConfigEntry] = {}
    malformed: List[int] = []
    ignored = 0

    for line_number, line in enumerate(lines, start=1):
        if delimiter.symbol not in line:
            ignored += 1
            continue
        try:
            key, raw_value = split_line(line, delimiter, line_number)
        except MalformedLineError as e:
            logger.warning("%s", e)
            malformed.append(line_number)
            continue
        if key in entries:
            logger.debug("Duplicate key ignored. key=%s line=%s", key, line_number)
            continue
        entries[key] = ConfigEntry(key=key, raw_value=raw_value, line_number=line_number)

    return ParsedFile(
        entries=list(entries.values()),
        malformed_lines=tuple(malformed),
        ignored_lines=ignored,
    )


def parse_file(path: Union[str, Path], delimiter: Delimiter, *, encoding: str = "utf-8") -> ParsedFile:
    return parse_lines(read_lines(path, encoding=encoding), delimiter)
