from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ExpansionError(Exception):
    """A located failure while reading templates, override files or output paths.

    Rendered as `file:path: CODE: message`. The expansion engine never raises
    these; a variable without a value is omitted instead.
    """

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        parts: list[str] = []
        if self.file:
            parts.append(self.file)
        if self.path:
            parts.append(self.path)
        loc = ":".join(parts) if parts else "<distexp>"
        return f"{loc}: {self.code}: {self.message}"


class ExpansionLoadError(ExpansionError):
    """Missing, unreadable or unwritable files. The CLI exits with 1."""


class ExpansionInputError(ExpansionError):
    """Well-read but invalid input. The CLI exits with 2."""


class FilterError(ExpansionLoadError):
    """Raised by filter_tree for a missing source or a failed write."""
