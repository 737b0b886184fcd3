from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional, Union


DEB = "deb"
RPM = "rpm"
DEFAULT = "default"

# Formats with their own column in the catalog. Everything else (tar, zip, ...)
# resolves through DEFAULT.
KNOWN_FORMATS: tuple[str, ...] = (DEB, RPM, DEFAULT)

# Spelling of the fallback key used by older build scripts.
FORMAT_ALIASES: dict[str, str] = {"def": DEFAULT}


def normalize_format_key(key: str) -> str:
    return FORMAT_ALIASES.get(key, key)


@dataclass(frozen=True)
class LiteralValue:
    value: str


@dataclass(frozen=True, init=False)
class PerFormatValue:
    """Per-format values, kept as a sorted tuple of (format, value) pairs.

    Accepts a mapping on construction. `def` and `default` name the same
    entry, so a table carrying both is rejected.
    """

    values: tuple[tuple[str, str], ...]

    def __init__(self, values: Mapping[str, str]) -> None:
        normalized: dict[str, str] = {}
        for k, v in values.items():
            key = normalize_format_key(k)
            if key in normalized:
                raise ValueError(f"format '{key}' given more than once (check def/default)")
            normalized[key] = v
        object.__setattr__(self, "values", tuple(sorted(normalized.items())))

    def get(self, distribution: str) -> Optional[str]:
        for key, value in self.values:
            if key == distribution:
                return value
        return None


VariableValue = Union[LiteralValue, PerFormatValue]


@dataclass(frozen=True)
class VariableSpec:
    name: str
    value: VariableValue
    # When set, the resolved string is formatted with the call context
    # ({name}, {version}, {distribution}, {footer}).
    interpolate: bool = field(default=False)
