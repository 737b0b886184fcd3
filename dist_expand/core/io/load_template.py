from __future__ import annotations

from pathlib import Path

from dist_expand.core.errors import ExpansionLoadError


def load_template(path: str) -> str:
    """Read a text template (script or config file) as UTF-8."""

    p = Path(path)
    if not p.exists():
        raise ExpansionLoadError(
            code="E_FILE_NOT_FOUND",
            message="file does not exist",
            file=str(p),
        )
    if p.is_dir():
        raise ExpansionLoadError(
            code="E_NOT_A_FILE",
            message="expected a file, got a directory",
            file=str(p),
        )

    try:
        return p.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ExpansionLoadError(
            code="E_NOT_TEXT",
            message="template is not valid UTF-8 text",
            file=str(p),
        ) from e
    except OSError as e:  # pragma: no cover
        raise ExpansionLoadError(code="E_FILE_READ", message=str(e), file=str(p)) from e
