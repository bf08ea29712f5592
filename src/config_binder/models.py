from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

TypedValue = Union[bool, int, float, str, None]


class Delimiter(str, Enum):
    EQUALS = "="
    SEMICOLON = ";"
    COMMA = ","
    COLON = ":"

    @property
    def symbol(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: Union["Delimiter", str]) -> "Delimiter":
        """Accept a member, its symbol, or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Delimiter must be a string, got: {type(value).__name__}")
        for member in cls:
            if value == member.value or value.upper() == member.name:
                return member
        allowed = ", ".join(f"{m.name} ({m.value})" for m in cls)
        raise ValueError(f"Unsupported delimiter {value!r}. Expected one of: {allowed}")


@dataclass(frozen=True, slots=True)
class ConfigEntry:
    key: str
    raw_value: Optional[str]
    line_number: int


@dataclass(frozen=True, slots=True)
class LoadReport:
    """Outcome of a single load pass."""

    bound: Tuple[str, ...] = ()
    unknown: Tuple[str, ...] = ()
    malformed_lines: Tuple[int, ...] = ()
    ignored_lines: int = 0

    @classmethod
    def empty(cls) -> "LoadReport":
        return cls()
