from __future__ import annotations

import re
from typing import Mapping


TOKEN_RE = re.compile(r"@([A-Za-z0-9_.\-]+)@")


def substitute(text: str, table: Mapping[str, str]) -> str:
    """Replace `@name@` tokens with values from `table`.

    Tokens whose name is not in the table are left exactly as written.
    Replacement values are not scanned again.
    """

    def _replace(m: re.Match[str]) -> str:
        return table.get(m.group(1), m.group(0))

    return TOKEN_RE.sub(_replace, text)


def unresolved_tokens(text: str, table: Mapping[str, str]) -> list[str]:
    """Sorted, de-duplicated token names in `text` that `table` does not define."""
    return sorted({m.group(1) for m in TOKEN_RE.finditer(text) if m.group(1) not in table})
