from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import Iterable, Mapping

from dist_expand.core.errors import FilterError
from dist_expand.core.filter.substitute import substitute
from dist_expand.logging import get_logger

logger = get_logger(__name__)

EXECUTABLE_MODE = 0o755


def filter_tree(
    src: str | Path,
    dest: str | Path,
    table: Mapping[str, str],
    *,
    exclude: Iterable[str] = (),
    executable: bool = False,
) -> list[Path]:
    """Copy `src` into `dest`, expanding `@name@` tokens in every text file.

    - relative layout under `src` is preserved
    - files whose name matches any glob in `exclude` are skipped
    - files that are not UTF-8 text are copied byte-for-byte
    - with `executable`, every written file gets mode 0755 (bin scripts)

    Returns the written paths, sorted.
    """

    src_p = Path(src)
    dest_p = Path(dest)
    if not src_p.is_dir():
        raise FilterError(
            code="E_SOURCE_NOT_FOUND",
            message="source directory does not exist",
            file=str(src_p),
        )

    patterns = list(exclude)
    written: list[Path] = []

    for in_path in sorted(src_p.rglob("*")):
        if in_path.is_dir():
            continue
        if any(fnmatch.fnmatch(in_path.name, pat) for pat in patterns):
            logger.debug("skipping excluded file %s", in_path)
            continue

        out_path = dest_p / in_path.relative_to(src_p)
        data = in_path.read_bytes()
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError:
            pass  # binary, copied as is
        else:
            data = substitute(text, table).encode("utf-8")

        try:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_bytes(data)
            if executable:
                out_path.chmod(EXECUTABLE_MODE)
        except OSError as e:
            raise FilterError(
                code="E_OUTPUT_WRITE",
                message=e.strerror or str(e),
                file=str(out_path),
            ) from e

        logger.debug("wrote %s", out_path)
        written.append(out_path)

    return sorted(written)
